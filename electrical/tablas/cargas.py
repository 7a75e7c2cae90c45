# electrical/tablas/cargas.py
from __future__ import annotations

from typing import Dict

# ==========================================================
# Tipos de carga (valores típicos cuando el dato no viene)
# ==========================================================
# limite_marcha: caída de tensión máxima en marcha (fracción de V nominal)

TIPOS_CARGA: Dict[str, Dict[str, object]] = {
    "Motor": {
        "eficiencia": 0.92, "fp": 0.85, "arranque": True,
        "metodo_arranque": "DOL", "limite_marcha": 0.03,
    },
    "Heater": {
        "eficiencia": 0.99, "fp": 1.0, "arranque": False,
        "metodo_arranque": None, "limite_marcha": 0.05,
    },
    "Transformer": {
        "eficiencia": 0.97, "fp": 0.95, "arranque": False,
        "metodo_arranque": None, "limite_marcha": 0.05,
    },
    "Feeder": {
        "eficiencia": 1.0, "fp": 0.90, "arranque": False,
        "metodo_arranque": None, "limite_marcha": 0.05,
    },
    "Pump": {
        "eficiencia": 0.88, "fp": 0.85, "arranque": True,
        "metodo_arranque": "StarDelta", "limite_marcha": 0.03,
    },
    "Fan": {
        "eficiencia": 0.88, "fp": 0.85, "arranque": True,
        "metodo_arranque": "StarDelta", "limite_marcha": 0.03,
    },
    "Compressor": {
        "eficiencia": 0.85, "fp": 0.80, "arranque": True,
        "metodo_arranque": "VFD", "limite_marcha": 0.03,
    },
}

ALIAS_TIPO_CARGA: Dict[str, str] = {
    "MOTOR": "Motor",
    "HEATER": "Heater",
    "CALENTADOR": "Heater",
    "TRANSFORMER": "Transformer",
    "TRANSFORMADOR": "Transformer",
    "FEEDER": "Feeder",
    "ALIMENTADOR": "Feeder",
    "PUMP": "Pump",
    "BOMBA": "Pump",
    "FAN": "Fan",
    "VENTILADOR": "Fan",
    "COMPRESSOR": "Compressor",
    "COMPRESOR": "Compressor",
}

# ==========================================================
# Arranque de motores (múltiplos de la corriente a plena carga)
# ==========================================================

MULTIPLICADORES_ARRANQUE: Dict[str, Dict[str, float]] = {
    "DOL": {"min": 6.0, "max": 7.0, "tipico": 6.5},
    "StarDelta": {"min": 2.0, "max": 3.0, "tipico": 2.5},
    "SoftStarter": {"min": 2.0, "max": 4.0, "tipico": 3.0},
    "VFD": {"min": 1.0, "max": 1.2, "tipico": 1.1},
}

# Caída máxima durante el arranque (fracción de V nominal)
LIMITES_CAIDA_ARRANQUE: Dict[str, float] = {
    "DOL": 0.15,
    "StarDelta": 0.10,
    "SoftStarter": 0.10,
    "VFD": 0.05,
}

ALIAS_ARRANQUE: Dict[str, str] = {
    "DOL": "DOL",
    "DIRECTO": "DOL",
    "STARDELTA": "StarDelta",
    "STAR_DELTA": "StarDelta",
    "SD": "StarDelta",
    "ESTRELLATRIANGULO": "StarDelta",
    "SOFTSTARTER": "SoftStarter",
    "SOFT_STARTER": "SoftStarter",
    "SS": "SoftStarter",
    "ARRANCADORSUAVE": "SoftStarter",
    "VFD": "VFD",
    "VSD": "VFD",
}

# ==========================================================
# Cortocircuito: Isc ≤ k × A × √t
# ==========================================================

# k por material + aislamiento (90 °C -> 250 °C XLPE; 70 °C -> 160 °C PVC)
CONSTANTE_K: Dict[str, float] = {
    "CU_XLPE": 143.0,
    "CU_PVC": 115.0,
    "AL_XLPE": 94.0,
    "AL_PVC": 76.0,
}

# Tiempo de despeje típico por tipo de protección (s)
TIEMPOS_DESPEJE_S: Dict[str, float] = {
    "ACB": 0.1,
    "MCCB": 0.04,
    "MCB": 0.02,
    "FUSE": 0.02,
    "FUSIBLE": 0.02,
}

# Tipos de protección que equivalen a "sin dato de protección"
SIN_PROTECCION = {"", "NONE", "NINGUNA", "N/A", "NA"}
