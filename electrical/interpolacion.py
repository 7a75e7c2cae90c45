"""
interpolacion.py — Motor de Cables

Búsqueda en tablas {x: y} usadas por todos los factores de derating.

- interpolar_tabla: lineal por tramos; fuera de rango se sujeta al extremo.
- valor_mas_cercano: lookup exacto o, si no existe, la clave más cercana.
"""

from __future__ import annotations

from typing import Mapping


def interpolar_lineal(x: float, x1: float, y1: float, x2: float, y2: float) -> float:
    if x2 == x1:
        return float(y1)
    return float(y1) + (float(x) - float(x1)) * (float(y2) - float(y1)) / (float(x2) - float(x1))


def interpolar_tabla(tabla: Mapping[float, float], x: float) -> float:
    """
    Interpolación lineal por tramos con extrapolación sujeta (clamped):

        x <= x_min  -> y(x_min)
        x >= x_max  -> y(x_max)
    """
    if not tabla:
        raise ValueError("Tabla de interpolación vacía")

    xs = sorted(float(k) for k in tabla.keys())
    ys = {float(k): float(v) for k, v in tabla.items()}
    x = float(x)

    if x <= xs[0]:
        return ys[xs[0]]
    if x >= xs[-1]:
        return ys[xs[-1]]

    for x1, x2 in zip(xs, xs[1:]):
        if x1 <= x <= x2:
            return interpolar_lineal(x, x1, ys[x1], x2, ys[x2])

    return ys[xs[-1]]


def valor_mas_cercano(tabla: Mapping[float, float], x: float) -> float:
    """
    Lookup exacto; si no existe, usa la clave más cercana.
    Empate entre dos claves -> gana la mayor (factor más conservador en
    tablas decrecientes como agrupamiento).
    """
    if not tabla:
        raise ValueError("Tabla de lookup vacía")

    x = float(x)
    for k, v in tabla.items():
        if float(k) == x:
            return float(v)

    clave = min(tabla.keys(), key=lambda k: (abs(float(k) - x), -float(k)))
    return float(tabla[clave])
