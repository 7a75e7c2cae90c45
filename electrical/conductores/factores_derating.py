"""
factores_derating.py — Motor de Cables

Factores de corrección de ampacidad (IEC 60364-5-52, simplificados).

- Temperatura ambiente por aislamiento (interpolado).
- Agrupamiento por entorno aire/enterrado (exacto o más cercano).
- Resistividad térmica del suelo y profundidad (solo enterrados).

Regla: los factores MULTIPLICAN el rating del cable; nunca dividen la corriente.
"""

from __future__ import annotations

from nucleo.modelo import FactoresDerating

from electrical.interpolacion import interpolar_tabla, valor_mas_cercano
from electrical.tablas.conductores import entorno_agrupamiento, es_enterrado, norm_aislamiento
from electrical.tablas.derating import AGRUPAMIENTO, PROFUNDIDAD, RESISTIVIDAD_SUELO, TEMPERATURA


def factor_temperatura(t_amb_c: float, aislamiento: str = "XLPE") -> float:
    return interpolar_tabla(TEMPERATURA[norm_aislamiento(aislamiento)], float(t_amb_c))


def factor_agrupamiento(circuitos: int, entorno: str = "aire") -> float:
    try:
        n = int(circuitos)
    except (TypeError, ValueError):
        n = 1
    n = max(1, n)
    tabla = AGRUPAMIENTO.get(str(entorno), AGRUPAMIENTO["aire"])
    return valor_mas_cercano(tabla, n)


def factor_suelo(resistividad_kmw: float, *, enterrado: bool) -> float:
    if not enterrado:
        return 1.0
    return interpolar_tabla(RESISTIVIDAD_SUELO, float(resistividad_kmw))


def factor_profundidad(profundidad_m: float, *, enterrado: bool) -> float:
    if not enterrado:
        return 1.0
    return interpolar_tabla(PROFUNDIDAD, float(profundidad_m))


def factores_derating(
    *,
    aislamiento: str,
    metodo: str,
    t_amb_c: float,
    circuitos: int,
    resistividad_kmw: float,
    profundidad_m: float,
) -> FactoresDerating:
    """
    K_total = K_temp × K_grupo × K_suelo × K_prof

    Returns:
        FactoresDerating con los cuatro sub-factores (total como propiedad).
    """
    enterrado = es_enterrado(metodo)
    return FactoresDerating(
        k_temp=factor_temperatura(t_amb_c, aislamiento),
        k_grupo=factor_agrupamiento(circuitos, entorno_agrupamiento(metodo)),
        k_suelo=factor_suelo(resistividad_kmw, enterrado=enterrado),
        k_prof=factor_profundidad(profundidad_m, enterrado=enterrado),
    )


def ampacidad_instalada(ampacidad_catalogo_a: float, factores: FactoresDerating) -> float:
    """I_instalada = I_catalogo × K_total."""
    return float(ampacidad_catalogo_a) * float(factores.total)
