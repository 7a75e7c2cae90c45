# electrical/tablas/derating.py
from __future__ import annotations

from typing import Dict

# ==========================================================
# Curvas de derating (multiplicativas sobre el rating)
# ==========================================================
# I_instalada = I_catalogo × K_temp × K_grupo × K_suelo × K_prof
# ==========================================================

# Temperatura ambiente (°C) -> factor, por aislamiento
TEMPERATURA_XLPE: Dict[float, float] = {
    20: 1.00, 25: 0.98, 30: 0.96, 35: 0.94, 40: 0.91,
    45: 0.87, 50: 0.82, 55: 0.76, 60: 0.69,
}

TEMPERATURA_PVC: Dict[float, float] = {
    20: 1.00, 25: 0.97, 30: 0.94, 35: 0.90, 40: 0.85,
    45: 0.79, 50: 0.71, 55: 0.61,
}

TEMPERATURA: Dict[str, Dict[float, float]] = {
    "XLPE": TEMPERATURA_XLPE,
    "EPR": TEMPERATURA_XLPE,
    "PVC": TEMPERATURA_PVC,
}

# Circuitos cargados agrupados -> factor, por entorno
AGRUPAMIENTO_AIRE: Dict[int, float] = {
    1: 1.00, 2: 0.95, 3: 0.90, 4: 0.85, 5: 0.82, 6: 0.80, 9: 0.75, 12: 0.71,
}

AGRUPAMIENTO_ENTERRADO: Dict[int, float] = {
    1: 1.00, 2: 0.88, 3: 0.82, 4: 0.77, 5: 0.75, 6: 0.73,
}

AGRUPAMIENTO: Dict[str, Dict[int, float]] = {
    "aire": AGRUPAMIENTO_AIRE,
    "enterrado": AGRUPAMIENTO_ENTERRADO,
}

# Resistividad térmica del suelo (K·m/W) -> factor; referencia 1.2
RESISTIVIDAD_SUELO: Dict[float, float] = {
    0.5: 1.35, 0.8: 1.15, 1.0: 1.05, 1.2: 1.00, 1.5: 0.93, 2.0: 0.82, 2.5: 0.71,
}

# Profundidad de tendido (m) -> factor; referencia 0.6 m
PROFUNDIDAD: Dict[float, float] = {
    0.3: 1.10, 0.5: 1.03, 0.6: 1.00, 0.7: 0.97, 0.9: 0.93, 1.0: 0.91,
}
