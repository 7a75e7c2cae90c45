"""
Subdominio corrientes — Motor de Cables.

Responsabilidad:
- Corriente a plena carga (1Φ / 3Φ) con η y cosφ del tipo de carga.
- Corriente de arranque de motores según método (DOL/SD/SS/VFD).
"""

from __future__ import annotations

import math
from typing import Optional, Tuple

from electrical.tablas.cargas import (
    ALIAS_ARRANQUE,
    ALIAS_TIPO_CARGA,
    MULTIPLICADORES_ARRANQUE,
    TIPOS_CARGA,
)


def norm_tipo_carga(tipo: Optional[str], default: str = "Feeder") -> str:
    t = str(tipo or "").strip()
    if t in TIPOS_CARGA:
        return t
    return ALIAS_TIPO_CARGA.get(t.upper().replace(" ", ""), default)


def norm_metodo_arranque(metodo: Optional[str]) -> Optional[str]:
    if metodo is None:
        return None
    m = str(metodo).strip().upper().replace("-", "").replace(" ", "")
    if not m:
        return None
    return ALIAS_ARRANQUE.get(m)


def requiere_arranque(tipo_carga: str) -> bool:
    return bool(TIPOS_CARGA[norm_tipo_carga(tipo_carga)]["arranque"])


def parametros_carga(tipo_carga: str, fp: Optional[float], eficiencia: Optional[float]) -> Tuple[float, float]:
    """
    (cosφ, η) efectivos: el dato del tramo si viene, si no el típico del
    tipo de carga. Nunca una constante universal.
    """
    spec = TIPOS_CARGA[norm_tipo_carga(tipo_carga)]
    cos_phi = float(fp) if fp else float(spec["fp"])
    eta = float(eficiencia) if eficiencia else float(spec["eficiencia"])
    return cos_phi, eta


def metodo_arranque_efectivo(tipo_carga: str, metodo: Optional[str]) -> Optional[str]:
    """Método de arranque del tramo o, si falta, el típico del tipo de carga."""
    if not requiere_arranque(tipo_carga):
        return None
    m = norm_metodo_arranque(metodo)
    if m:
        return m
    tipico = TIPOS_CARGA[norm_tipo_carga(tipo_carga)]["metodo_arranque"]
    return str(tipico) if tipico else "DOL"


def corriente_plena_carga(
    *,
    potencia_kw: float,
    tension_v: float,
    fases: int,
    fp: float,
    eficiencia: float,
) -> float:
    """
    I_FL:
      3Φ: I = 1000·P / (√3·V·cosφ·η)
      1Φ: I = 1000·P / (V·cosφ·η)
    """
    p_w = float(potencia_kw) * 1000.0
    denom = float(tension_v) * float(fp) * float(eficiencia)
    if int(fases) == 3:
        denom *= math.sqrt(3.0)
    if denom <= 0.0 or p_w <= 0.0:
        return 0.0
    return p_w / denom


def corriente_arranque(i_plena_a: float, metodo: str) -> float:
    """I_arranque = I_FL × multiplicador típico del método."""
    mult = MULTIPLICADORES_ARRANQUE.get(str(metodo), MULTIPLICADORES_ARRANQUE["DOL"])
    return float(i_plena_a) * float(mult["tipico"])
