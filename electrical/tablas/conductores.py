# electrical/tablas/conductores.py
from __future__ import annotations

from typing import Dict, List

# ==========================================================
# Catálogo de conductores — FUENTE ÚNICA DE VERDAD
# ==========================================================
# Nota:
# - Valores referenciales IEC 60228 / IEC 60364-5-52 (cables multipolares).
# - Derating NO se aplica aquí (eso vive en tablas/derating.py y
#   conductores/factores_derating.py).
# - Ampacidad en A por calibre (mm²) y columna de instalación.
# - Resistencia DC a 20 °C en Ω/km; la corrección a temperatura de
#   operación vive en conductores/modelo_tramo.py.
# ==========================================================

# Cu XLPE/EPR 90 °C
AMPACIDAD_CU_XLPE: Dict[str, Dict[float, float]] = {
    "aire": {
        1.5: 18, 2.5: 25, 4: 33, 6: 43, 10: 61, 16: 80, 25: 110, 35: 145,
        50: 180, 70: 225, 95: 275, 120: 320, 150: 370, 185: 430, 240: 530,
        300: 640, 400: 790, 500: 930, 630: 1120,
    },
    "enterrado": {
        1.5: 23, 2.5: 30, 4: 39, 6: 49, 10: 65, 16: 84, 25: 107, 35: 129,
        50: 153, 70: 188, 95: 226, 120: 257, 150: 287, 185: 324, 240: 375,
        300: 419, 400: 480, 500: 540, 630: 610,
    },
    "ducto": {
        1.5: 19, 2.5: 24, 4: 31, 6: 39, 10: 52, 16: 67, 25: 86, 35: 103,
        50: 122, 70: 151, 95: 179, 120: 203, 150: 230, 185: 258, 240: 297,
        300: 336, 400: 380, 500: 430, 630: 490,
    },
}

# Cu PVC 70 °C (catálogo hasta 300 mm²)
AMPACIDAD_CU_PVC: Dict[str, Dict[float, float]] = {
    "aire": {
        1.5: 15, 2.5: 20, 4: 27, 6: 36, 10: 50, 16: 65, 25: 90, 35: 120,
        50: 150, 70: 185, 95: 225, 120: 260, 150: 305, 185: 355, 240: 435,
        300: 520,
    },
    "enterrado": {
        1.5: 19, 2.5: 24, 4: 33, 6: 41, 10: 54, 16: 70, 25: 92, 35: 110,
        50: 130, 70: 162, 95: 193, 120: 220, 150: 246, 185: 278, 240: 320,
        300: 359,
    },
    "ducto": {
        1.5: 18, 2.5: 24, 4: 30, 6: 38, 10: 50, 16: 64, 25: 82, 35: 98,
        50: 116, 70: 143, 95: 169, 120: 192, 150: 217, 185: 243, 240: 280,
        300: 316,
    },
}

# Al XLPE/EPR 90 °C (desde 16 mm²)
AMPACIDAD_AL_XLPE: Dict[str, Dict[float, float]] = {
    "aire": {
        16: 61, 25: 84, 35: 110, 50: 137, 70: 170, 95: 210, 120: 245,
        150: 285, 185: 330, 240: 405, 300: 490, 400: 600, 500: 710, 630: 850,
    },
    "enterrado": {
        16: 66, 25: 83, 35: 99, 50: 117, 70: 144, 95: 173, 120: 196,
        150: 219, 185: 248, 240: 287, 300: 322, 400: 370, 500: 420, 630: 480,
    },
    "ducto": {
        16: 52, 25: 66, 35: 80, 50: 94, 70: 117, 95: 138, 120: 157,
        150: 178, 185: 200, 240: 230, 300: 260, 400: 295, 500: 335, 630: 380,
    },
}

# Al PVC 70 °C
AMPACIDAD_AL_PVC: Dict[str, Dict[float, float]] = {
    "aire": {
        16: 50, 25: 70, 35: 90, 50: 115, 70: 145, 95: 175, 120: 205,
        150: 235, 185: 275, 240: 330, 300: 380,
    },
    "enterrado": {
        16: 54, 25: 71, 35: 85, 50: 100, 70: 125, 95: 148, 120: 169,
        150: 190, 185: 213, 240: 246, 300: 277,
    },
    "ducto": {
        16: 50, 25: 64, 35: 77, 50: 91, 70: 112, 95: 132, 120: 150,
        150: 169, 185: 190, 240: 218, 300: 247,
    },
}

AMPACIDAD: Dict[str, Dict[str, Dict[float, float]]] = {
    "CU_XLPE": AMPACIDAD_CU_XLPE,
    "CU_PVC": AMPACIDAD_CU_PVC,
    "AL_XLPE": AMPACIDAD_AL_XLPE,
    "AL_PVC": AMPACIDAD_AL_PVC,
}

# Multiplicador por número de núcleos sobre la columna multipolar (3C/4C).
FACTOR_NUCLEOS: Dict[int, float] = {1: 1.10, 2: 1.15, 3: 1.00, 4: 1.00, 5: 1.00}

# Resistencia DC @20 °C (Ω/km)
R20_CU_OHM_KM: Dict[float, float] = {
    1.5: 12.1, 2.5: 7.41, 4: 4.61, 6: 3.08, 10: 1.83, 16: 1.15, 25: 0.727,
    35: 0.524, 50: 0.387, 70: 0.268, 95: 0.193, 120: 0.153, 150: 0.124,
    185: 0.0991, 240: 0.0754, 300: 0.0601, 400: 0.047, 500: 0.0366,
    630: 0.0283,
}

R20_AL_OHM_KM: Dict[float, float] = {
    16: 1.91, 25: 1.2, 35: 0.868, 50: 0.64, 70: 0.443, 95: 0.32,
    120: 0.253, 150: 0.206, 185: 0.164, 240: 0.125, 300: 0.1, 400: 0.077,
    500: 0.0606, 630: 0.0469,
}

# Reactancia @50 Hz (Ω/km) por disposición
REACTANCIA_OHM_KM: Dict[str, Dict[float, float]] = {
    "aire_contacto": {
        1.5: 0.094, 2.5: 0.093, 4: 0.092, 6: 0.091, 10: 0.088, 16: 0.085,
        25: 0.081, 35: 0.079, 50: 0.077, 70: 0.075, 95: 0.073, 120: 0.072,
        150: 0.071, 185: 0.070, 240: 0.069, 300: 0.068, 400: 0.067,
        500: 0.066, 630: 0.065,
    },
    "aire_espaciado": {
        1.5: 0.104, 2.5: 0.103, 4: 0.102, 6: 0.101, 10: 0.098, 16: 0.095,
        25: 0.091, 35: 0.089, 50: 0.087, 70: 0.085, 95: 0.083, 120: 0.082,
        150: 0.081, 185: 0.080, 240: 0.079, 300: 0.078, 400: 0.077,
        500: 0.076, 630: 0.075,
    },
    "enterrado": {
        1.5: 0.082, 2.5: 0.081, 4: 0.080, 6: 0.079, 10: 0.076, 16: 0.073,
        25: 0.069, 35: 0.067, 50: 0.065, 70: 0.063, 95: 0.061, 120: 0.060,
        150: 0.059, 185: 0.058, 240: 0.057, 300: 0.056, 400: 0.055,
        500: 0.054, 630: 0.053,
    },
}

# R(T) = R20 × [1 + α × (T − 20)]
COEF_TEMPERATURA: Dict[str, float] = {"CU": 0.00393, "AL": 0.00403}

# Efecto proximidad en cables de 3+ núcleos
FACTOR_PROXIMIDAD_MULTINUCLEO = 1.05

# Aislamiento → temperatura de operación y columna de catálogo
AISLAMIENTOS: Dict[str, Dict[str, object]] = {
    "XLPE": {"t_operacion_c": 90.0, "columna": "XLPE"},
    "EPR": {"t_operacion_c": 90.0, "columna": "XLPE"},
    "PVC": {"t_operacion_c": 70.0, "columna": "PVC"},
}

# Techo práctico de un solo conductor antes de evaluar corridas en paralelo
CALIBRE_MAX_UNICO_MM2: Dict[str, float] = {"CU": 300.0, "AL": 400.0}

# Sobre este calibre (1 corrida) se emite aviso de cable muy grande
CALIBRE_AVISO_GRANDE_MM2 = 240.0

# Métodos de instalación: columna de ampacidad, entorno de agrupamiento,
# disposición para reactancia y factor propio del método.
METODOS_INSTALACION: Dict[str, Dict[str, object]] = {
    "AIRE": {"columna": "aire", "entorno": "aire", "reactancia": "aire_contacto", "enterrado": False, "factor": 1.00},
    "AIRE_ESPACIADO": {"columna": "aire", "entorno": "aire", "reactancia": "aire_espaciado", "enterrado": False, "factor": 1.05},
    "CONDUIT": {"columna": "aire", "entorno": "aire", "reactancia": "aire_contacto", "enterrado": False, "factor": 0.95},
    "ENTERRADO": {"columna": "enterrado", "entorno": "enterrado", "reactancia": "enterrado", "enterrado": True, "factor": 1.00},
    "DUCTO": {"columna": "ducto", "entorno": "enterrado", "reactancia": "enterrado", "enterrado": True, "factor": 1.00},
}

# Orden de búsqueda importa: lo más específico primero.
ALIAS_INSTALACION: Dict[str, str] = {
    "DUCT": "DUCTO",
    "SPACED": "AIRE_ESPACIADO",
    "CONDUIT": "CONDUIT",
    "TRENCH": "ENTERRADO",
    "BURIED": "ENTERRADO",
    "DIRECT": "ENTERRADO",
    "ZANJA": "ENTERRADO",
    "AIR": "AIRE",
    "TRAY": "AIRE",
    "LADDER": "AIRE",
    "BANDEJA": "AIRE",
}


# ==========================================================
# Funciones públicas (consulta / referencia)
# ==========================================================

def norm_material(material: str) -> str:
    """'Cu'/'copper'/'cobre' -> 'CU'; 'Al'/'aluminum'/'aluminio' -> 'AL'."""
    m = str(material or "").strip().upper()
    return "AL" if m.startswith("AL") else "CU"


def norm_aislamiento(aislamiento: str) -> str:
    a = str(aislamiento or "").strip().upper()
    return a if a in AISLAMIENTOS else "XLPE"


def norm_instalacion(metodo: str) -> str:
    """
    Resuelve el método de instalación a su clave canónica.

    Acepta claves canónicas, alias ('Air', 'Trench', 'Duct') y textos
    libres tipo 'Buried - Direct in ground'.
    """
    m = str(metodo or "").strip().upper().replace(" ", "_").replace("-", "_")
    if m in METODOS_INSTALACION:
        return m
    for alias, clave in ALIAS_INSTALACION.items():
        if alias in m:
            return clave
    return "AIRE"


def tabla_ampacidad(material: str, aislamiento: str, metodo: str) -> Dict[float, float]:
    """Columna de ampacidad de catálogo (sin factor de método ni núcleos)."""
    col_ais = str(AISLAMIENTOS[norm_aislamiento(aislamiento)]["columna"])
    clave = f"{norm_material(material)}_{col_ais}"
    columna = str(METODOS_INSTALACION[norm_instalacion(metodo)]["columna"])
    return dict(AMPACIDAD[clave][columna])


def calibres(material: str, aislamiento: str, metodo: str = "AIRE") -> List[float]:
    """Lista ordenada de calibres del catálogo (delgado -> grueso)."""
    return sorted(tabla_ampacidad(material, aislamiento, metodo).keys())


def factor_nucleos(n_nucleos: int) -> float:
    try:
        n = int(n_nucleos)
    except (TypeError, ValueError):
        n = 3
    return float(FACTOR_NUCLEOS.get(n, 1.0))


def ampacidad_catalogo(calibre_mm2: float, *, material: str, aislamiento: str, metodo: str, n_nucleos: int) -> float:
    """
    Rating de catálogo del método de instalación (A), todavía sin derating:

        I_cat = I_tabla(columna) × factor_método × factor_núcleos

    Retorna 0.0 si el calibre no existe en el catálogo.
    """
    tab = tabla_ampacidad(material, aislamiento, metodo)
    base = float(tab.get(float(calibre_mm2), tab.get(calibre_mm2, 0.0)))
    f_metodo = float(METODOS_INSTALACION[norm_instalacion(metodo)]["factor"])
    return base * f_metodo * factor_nucleos(n_nucleos)


def r20_ohm_km(calibre_mm2: float, material: str) -> float:
    tab = R20_AL_OHM_KM if norm_material(material) == "AL" else R20_CU_OHM_KM
    return float(tab.get(float(calibre_mm2), 0.0))


def reactancia_ohm_km(calibre_mm2: float, metodo: str) -> float:
    disposicion = str(METODOS_INSTALACION[norm_instalacion(metodo)]["reactancia"])
    return float(REACTANCIA_OHM_KM[disposicion].get(float(calibre_mm2), 0.08))


def t_operacion_c(aislamiento: str) -> float:
    return float(AISLAMIENTOS[norm_aislamiento(aislamiento)]["t_operacion_c"])


def es_enterrado(metodo: str) -> bool:
    return bool(METODOS_INSTALACION[norm_instalacion(metodo)]["enterrado"])


def entorno_agrupamiento(metodo: str) -> str:
    return str(METODOS_INSTALACION[norm_instalacion(metodo)]["entorno"])


def calibre_max_unico(material: str) -> float:
    return float(CALIBRE_MAX_UNICO_MM2[norm_material(material)])
