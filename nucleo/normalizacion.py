# nucleo/normalizacion.py
"""
Normalización de filas de entrada — Motor de Cables.

Convierte filas con nombres de columna heterogéneos (Excel, JSON, YAML)
al registro estricto TramoCable. El motor nunca opera sobre dicts crudos.
"""
from __future__ import annotations

import logging
import re
from typing import Any, Dict, Iterable, List, Mapping, Optional, Sequence

import pandas as pd

from .configuracion import ConfigSizing, cargar_configuracion
from .modelo import TramoCable

logger = logging.getLogger(__name__)


# ==========================================================
# Alias de columnas (primero el nombre propio del campo)
# ==========================================================

ALIAS_COLUMNAS: Dict[str, Sequence[str]] = {
    "id_cable": ("id_cable", "Cable Number", "cableNumber", "Cable No", "Cable", "Feeder ID", "ID"),
    "descripcion": ("descripcion", "Feeder Description", "feederDescription", "Description", "Desc", "Name"),
    "bus_origen": ("bus_origen", "From Bus", "fromBus", "From bus", "From"),
    "bus_destino": ("bus_destino", "To Bus", "toBus", "To bus", "To"),
    "tension_v": ("tension_v", "Voltage (V)", "voltage", "Voltage", "V"),
    "potencia_kw": ("potencia_kw", "Load KW", "loadKW", "Load (kW)", "kW"),
    "longitud_m": ("longitud_m", "Length (m)", "length", "Length"),
    "n_serie": ("n_serie", "Serial No", "serialNo", "S.No"),
    "fases": ("fases", "Phase", "systemPhase"),
    "material": ("material", "Material", "conductorMaterial"),
    "aislamiento": ("aislamiento", "Insulation", "insulation"),
    "n_nucleos": ("n_nucleos", "Number of Cores", "numberOfCores", "Core"),
    "metodo_instalacion": ("metodo_instalacion", "Installation Method", "installationMethod", "Installation"),
    "t_amb_c": ("t_amb_c", "Ambient Temp (°C)", "ambientTemp", "Ambient Temp"),
    "resistividad_suelo": ("resistividad_suelo", "Soil Thermal Resistivity", "soilThermalResistivity"),
    "profundidad_m": ("profundidad_m", "Depth of Laying (m)", "depthOfLaying", "Depth"),
    "circuitos_agrupados": ("circuitos_agrupados", "Grouped Loaded Circuits", "numberOfLoadedCircuits", "Circuits"),
    "tipo_carga": ("tipo_carga", "Load Type", "loadType"),
    "eficiencia": ("eficiencia", "Efficiency (%)", "Efficiency", "efficiency", "Eff"),
    "fp": ("fp", "Power Factor", "powerFactor", "PF"),
    "metodo_arranque": ("metodo_arranque", "Starting Method", "startingMethod"),
    "tipo_proteccion": ("tipo_proteccion", "Breaker Type", "Protection Type", "protectionType"),
    "icc_ka": ("icc_ka", "Short Circuit Current (kA)", "maxShortCircuitCurrent", "Isc", "ISc"),
    "t_despeje_s": ("t_despeje_s", "Clearing Time (s)", "clearingTime"),
}

_RE_ENTERO = re.compile(r"\d+")


# ==========================================================
# Helpers de lectura
# ==========================================================

def _vacio(v: Any) -> bool:
    if v is None:
        return True
    if isinstance(v, str):
        return not v.strip()
    try:
        return bool(pd.isna(v))
    except (TypeError, ValueError):
        return False


def _valor(fila: Mapping[str, Any], campo: str) -> Any:
    for col in ALIAS_COLUMNAS[campo]:
        v = fila.get(col)
        if not _vacio(v):
            return v
    return None


def _float(v: Any, default: Optional[float] = None) -> Optional[float]:
    return default if _vacio(v) else float(v)


def _entero_inicial(v: Any, default: int) -> int:
    """'3C' → 3, '3Ø' → 3, 4 → 4, '1PH' → 1."""
    if _vacio(v):
        return default
    if isinstance(v, (int, float)):
        return int(v)
    m = _RE_ENTERO.search(str(v))
    return int(m.group(0)) if m else default


def _material(v: Any, default: str) -> str:
    txt = default if _vacio(v) else str(v)
    return "Al" if txt.strip().upper() in ("AL", "ALUMINIO", "ALUMINUM", "ALUMINIUM") else "Cu"


def _eficiencia(v: Any) -> Optional[float]:
    eta = _float(v)
    if eta is not None and eta > 1.0:
        eta = eta / 100.0   # viene en %
    return eta


# ==========================================================
# API
# ==========================================================

def normalizar_fila(fila: Mapping[str, Any], posicion: int, cfg: ConfigSizing) -> TramoCable:
    cond = cfg.conductor
    inst = cfg.instalacion

    tension_fila = _float(_valor(fila, "tension_v"))
    if tension_fila is None:
        tension = float(cond.get("tension_v", 415.0))
        fases_default = int(cond.get("fases", 3))
    else:
        tension = tension_fila
        fases_default = 3 if tension >= 400.0 else 1
    id_cable = _valor(fila, "id_cable")

    return TramoCable(
        id_cable=str(id_cable).strip() if id_cable is not None else f"CBL-{posicion + 1:03d}",
        bus_origen=str(_valor(fila, "bus_origen") or "").strip(),
        bus_destino=str(_valor(fila, "bus_destino") or "").strip(),
        tension_v=tension,
        potencia_kw=_float(_valor(fila, "potencia_kw"), 0.0),
        longitud_m=_float(_valor(fila, "longitud_m"), 0.0),
        descripcion=str(_valor(fila, "descripcion") or "").strip(),
        n_serie=_entero_inicial(_valor(fila, "n_serie"), posicion + 1),
        fases=_entero_inicial(_valor(fila, "fases"), fases_default),
        material=_material(_valor(fila, "material"), str(cond.get("material", "Cu"))),
        aislamiento=str(_valor(fila, "aislamiento") or cond.get("aislamiento", "XLPE")),
        n_nucleos=_entero_inicial(_valor(fila, "n_nucleos"), int(cond.get("n_nucleos", 4))),
        metodo_instalacion=str(_valor(fila, "metodo_instalacion") or inst.get("metodo", "AIRE")),
        t_amb_c=_float(_valor(fila, "t_amb_c")),
        resistividad_suelo=_float(_valor(fila, "resistividad_suelo")),
        profundidad_m=_float(_valor(fila, "profundidad_m")),
        circuitos_agrupados=(
            _entero_inicial(_valor(fila, "circuitos_agrupados"), 1)
            if _valor(fila, "circuitos_agrupados") is not None else None
        ),
        tipo_carga=str(_valor(fila, "tipo_carga") or cfg.carga.get("tipo", "Feeder")),
        eficiencia=_eficiencia(_valor(fila, "eficiencia")),
        fp=_float(_valor(fila, "fp")),
        metodo_arranque=_valor(fila, "metodo_arranque"),
        tipo_proteccion=_valor(fila, "tipo_proteccion"),
        icc_ka=_float(_valor(fila, "icc_ka")),
        t_despeje_s=_float(_valor(fila, "t_despeje_s")),
    )


def normalizar_tramos(
    filas: Iterable[Mapping[str, Any]] | pd.DataFrame,
    cfg: Optional[ConfigSizing] = None,
) -> List[TramoCable]:
    """
    Filas heterogéneas → TramoCable.

    - Filas sin bus de origen se omiten (encabezados o filas vacías).
    - Fases por defecto: 3 si V ≥ 400, si no 1; sin tensión, las de config.
    - Filas con datos no convertibles (bus destino vacío, "10 kW") se
      omiten con WARNING; el resto del análisis continúa.
    - Núcleos aceptan '3C', '4C' o entero.
    - Eficiencia > 1 se interpreta en %.
    """
    cfg = cfg or cargar_configuracion()
    if isinstance(filas, pd.DataFrame):
        filas = filas.to_dict(orient="records")

    tramos: List[TramoCable] = []
    omitidas = 0
    for pos, fila in enumerate(filas):
        if _valor(fila, "bus_origen") is None:
            omitidas += 1
            continue
        try:
            tramos.append(normalizar_fila(fila, pos, cfg))
        except (TypeError, ValueError) as e:
            logger.warning("Fila %d omitida: %s", pos + 1, e)
            omitidas += 1

    if omitidas:
        logger.debug("Normalización: %d filas omitidas", omitidas)
    return tramos


__all__ = ["ALIAS_COLUMNAS", "normalizar_fila", "normalizar_tramos"]
