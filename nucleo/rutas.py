# nucleo/rutas.py
"""
Descubrimiento de rutas carga → transformador — Motor de Cables.

Responsabilidad:
- Índice de tramos salientes por bus (clave sin espacios ni mayúsculas).
- BFS por niveles desde cada bus de carga hasta una raíz.
- Totales de la ruta (longitud, carga, caída sumada tramo a tramo).
- Reporte explícito de cargas inalcanzables.

Desempate entre rutas admisibles: menor profundidad; a igual profundidad,
menor longitud total; a igual longitud, orden de la lista de entrada.
"""
from __future__ import annotations

import logging
from typing import Callable, Dict, List, Optional, Sequence, Set, Tuple

from .errores import CargaInalcanzable, ErrorEstructural
from .modelo import ConjuntoRaices, RutaDescubierta, TramoCable, clave_bus

logger = logging.getLogger(__name__)

# caida_v(i) -> ΔV (V) del tramo i de la lista de entrada; None si no se dimensionó
CaidaPorTramo = Callable[[int], Optional[float]]


# ==========================================================
# Índices
# ==========================================================

def indice_salientes(tramos: Sequence[TramoCable]) -> Dict[str, List[int]]:
    """bus_origen → índices de tramos que salen de él (marcadores excluidos)."""
    idx: Dict[str, List[int]] = {}
    for i, t in enumerate(tramos):
        if t.es_marcador:
            continue
        idx.setdefault(clave_bus(t.bus_origen), []).append(i)
    return idx


def buses_inicio(tramos: Sequence[TramoCable], raices: ConjuntoRaices) -> Tuple[List[str], List[str]]:
    """
    Buses de arranque en orden de entrada.

    Returns:
        (hojas, intermedios): hojas = origen que nunca es destino;
        intermedios = resto de orígenes que no son raíz.
    """
    activos = [t for t in tramos if not t.es_marcador]
    destinos = {clave_bus(t.bus_destino) for t in activos}

    hojas: Dict[str, str] = {}
    intermedios: Dict[str, str] = {}
    for t in activos:
        k = clave_bus(t.bus_origen)
        if raices.contiene(k):
            continue
        destino = intermedios if k in destinos else hojas
        destino.setdefault(k, str(t.bus_origen).strip())
    return list(hojas.values()), list(intermedios.values())


# ==========================================================
# BFS
# ==========================================================

def _longitud(tramos: Sequence[TramoCable], indices: Sequence[int]) -> float:
    return sum(float(tramos[i].longitud_m) for i in indices)


def trazar_ruta(
    bus_inicio: str,
    tramos: Sequence[TramoCable],
    raices: ConjuntoRaices,
    salientes: Dict[str, List[int]],
) -> Tuple[Optional[Tuple[int, ...]], str]:
    """
    BFS por niveles desde bus_inicio.

    Returns:
        (indices, "") si alcanza una raíz; (None, motivo) si no.
    """
    inicio = clave_bus(bus_inicio)
    if not salientes.get(inicio):
        return None, "sin tramo saliente"

    visitados: Set[str] = {inicio}
    frontera: List[Tuple[str, Tuple[int, ...]]] = [(inicio, ())]
    sin_salida: List[str] = []

    while frontera:
        llegadas: List[Tuple[int, ...]] = []
        siguiente: Dict[str, Tuple[int, ...]] = {}

        for bus, camino in frontera:
            for i in salientes.get(bus, []):
                extendido = camino + (i,)
                destino = clave_bus(tramos[i].bus_destino)
                if raices.contiene(destino):
                    llegadas.append(extendido)
                    continue
                if destino in visitados:
                    continue
                previo = siguiente.get(destino)
                if previo is None or _longitud(tramos, extendido) < _longitud(tramos, previo):
                    siguiente[destino] = extendido

        if llegadas:
            # min() conserva el primero en caso de empate (orden de entrada)
            return min(llegadas, key=lambda c: _longitud(tramos, c)), ""

        for bus in siguiente:
            if not salientes.get(bus):
                sin_salida.append(bus)
        visitados.update(siguiente)
        frontera = list(siguiente.items())

    if sin_salida:
        return None, f"no alcanza raíz (termina en {', '.join(sin_salida[:5])})"
    return None, "no alcanza raíz (ciclo)"


# ==========================================================
# API
# ==========================================================

def _armar_ruta(
    n: int,
    bus_inicio: str,
    indices: Tuple[int, ...],
    tramos: Sequence[TramoCable],
    caida_v: Optional[CaidaPorTramo],
    limite_caida_pct: float,
) -> RutaDescubierta:
    segs = tuple(tramos[i] for i in indices)
    tension = float(segs[0].tension_v)

    dv = 0.0
    sin_dimensionar: List[str] = []
    if caida_v:
        for i in indices:
            v = caida_v(i)
            if v is None:
                sin_dimensionar.append(tramos[i].id_cable)
            else:
                dv += float(v)
    pct = 100.0 * dv / tension if tension > 0 else 0.0

    if sin_dimensionar:
        mensaje = f"Caída parcial {pct:.2f}%: tramos sin dimensionar ({', '.join(sin_dimensionar)})"
    elif pct > limite_caida_pct:
        mensaje = f"Caída acumulada {pct:.2f}% excede el límite recomendado de {limite_caida_pct:g}%"
    else:
        mensaje = f"OK ({pct:.2f}%)"

    return RutaDescubierta(
        id_ruta=f"PATH-{n:03d}",
        bus_inicio=bus_inicio,
        bus_raiz=str(segs[-1].bus_destino).strip(),
        tramos=segs,
        indices=indices,
        descripcion_inicio=segs[0].descripcion,
        longitud_total_m=sum(float(t.longitud_m) for t in segs),
        carga_total_kw=sum(float(t.potencia_kw) for t in segs),
        tension_v=tension,
        caida_v=dv,
        caida_pct=pct,
        es_valida=True,
        mensaje=mensaje,
    )


def descubrir_rutas(
    tramos: Sequence[TramoCable],
    raices: ConjuntoRaices,
    caida_v: Optional[CaidaPorTramo] = None,
    *,
    limite_caida_pct: float = 5.0,
) -> Tuple[List[RutaDescubierta], List[CargaInalcanzable]]:
    """
    Una ruta por bus de carga alcanzable.

    Hojas primero; luego los orígenes intermedios que ninguna ruta emitida
    recorrió. La caída de la ruta es la suma de la caída de cada tramo.

    Raises:
        ErrorEstructural: si el conjunto de raíces está vacío.
    """
    if raices.vacio:
        raise ErrorEstructural(raices.diagnostico or "conjunto de raíces vacío")

    salientes = indice_salientes(tramos)
    hojas, intermedios = buses_inicio(tramos, raices)

    rutas: List[RutaDescubierta] = []
    inalcanzables: List[CargaInalcanzable] = []
    cubiertos: Set[str] = set()

    def _procesar(bus: str) -> None:
        indices, motivo = trazar_ruta(bus, tramos, raices, salientes)
        if indices is None:
            logger.warning("Carga inalcanzable %s: %s", bus, motivo)
            inalcanzables.append(CargaInalcanzable(bus=bus, motivo=motivo))
            return
        rutas.append(_armar_ruta(len(rutas) + 1, bus, indices, tramos, caida_v, limite_caida_pct))
        cubiertos.update(clave_bus(tramos[i].bus_origen) for i in indices)

    for bus in hojas:
        _procesar(bus)
    for bus in intermedios:
        if clave_bus(bus) not in cubiertos:
            _procesar(bus)

    logger.debug("Rutas: %d válidas, %d inalcanzables", len(rutas), len(inalcanzables))
    return rutas, inalcanzables


__all__ = ["indice_salientes", "buses_inicio", "trazar_ruta", "descubrir_rutas"]
