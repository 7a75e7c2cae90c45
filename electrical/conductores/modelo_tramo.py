"""
Modelo físico del tramo — Motor de Cables.

Responsabilidad:
- Resistencia corregida a temperatura de operación del aislamiento.
- Caída de tensión con término reactivo (R·cosφ + X·sinφ).
"""

from __future__ import annotations

import math
from typing import Tuple

from electrical.tablas.conductores import (
    COEF_TEMPERATURA,
    FACTOR_PROXIMIDAD_MULTINUCLEO,
    norm_material,
    r20_ohm_km,
    reactancia_ohm_km,
    t_operacion_c,
)


def resistencia_operacion_ohm_km(calibre_mm2: float, *, material: str, aislamiento: str, n_nucleos: int) -> float:
    """
    R(T) = R20 × [1 + α × (T_op − 20)]  × 1.05 si núcleos ≥ 3 (proximidad)
    """
    r20 = r20_ohm_km(calibre_mm2, material)
    alfa = COEF_TEMPERATURA[norm_material(material)]
    r = r20 * (1.0 + alfa * (t_operacion_c(aislamiento) - 20.0))
    if int(n_nucleos) >= 3:
        r *= FACTOR_PROXIMIDAD_MULTINUCLEO
    return r


def caida_tension_v(
    *,
    i_a: float,
    l_m: float,
    r_ohm_km: float,
    x_ohm_km: float,
    fp: float,
    fases: int = 3,
) -> float:
    """
    ΔV (V):
      3Φ: √3·I·L·(R·cosφ + X·sinφ)/1000
      1Φ: I·L·(R·cosφ + X·sinφ)/1000

    L en m, R y X en Ω/km.
    """
    if i_a <= 0.0 or l_m <= 0.0:
        return 0.0
    cos_phi = min(max(float(fp), 0.0), 1.0)
    sin_phi = math.sqrt(1.0 - cos_phi * cos_phi)
    dv = float(i_a) * float(l_m) * (float(r_ohm_km) * cos_phi + float(x_ohm_km) * sin_phi) / 1000.0
    if int(fases) == 3:
        dv *= math.sqrt(3.0)
    return dv


def caida_tension(
    *,
    i_a: float,
    l_m: float,
    tension_v: float,
    calibre_mm2: float,
    material: str,
    aislamiento: str,
    n_nucleos: int,
    metodo: str,
    fp: float,
    fases: int = 3,
) -> Tuple[float, float]:
    """Caída en un calibre del catálogo. Returns: (ΔV en V, ΔV en % de V nominal)."""
    r = resistencia_operacion_ohm_km(calibre_mm2, material=material, aislamiento=aislamiento, n_nucleos=n_nucleos)
    x = reactancia_ohm_km(calibre_mm2, metodo)
    dv = caida_tension_v(i_a=i_a, l_m=l_m, r_ohm_km=r, x_ohm_km=x, fp=fp, fases=fases)
    pct = 100.0 * dv / float(tension_v) if tension_v > 0 else 0.0
    return dv, pct
