"""
Dominio conductores — Motor de Cables

API pública del módulo:
- Dimensionamiento de un tramo (ampacidad, caída, cortocircuito, paralelo)
- Cálculo de caída de tensión
- Factores de derating

Regla arquitectónica:
Otros módulos NO deben importar archivos internos.
Siempre importar desde:
    electrical.conductores
"""

# Motor principal
from .calculo_conductores import dimensionar_tramo, validar_tramo

# Utilidades físicas (permitidas externamente)
from .modelo_tramo import caida_tension, caida_tension_v
from .factores_derating import factores_derating
from .corrientes import corriente_plena_carga, corriente_arranque

__all__ = [
    "dimensionar_tramo",
    "validar_tramo",
    "caida_tension",
    "caida_tension_v",
    "factores_derating",
    "corriente_plena_carga",
    "corriente_arranque",
]
