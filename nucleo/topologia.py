# nucleo/topologia.py
"""
Inferencia de topología — Motor de Cables.

Estrategia en dos etapas (gana la primera con resultado):
1) MARCADOR_EXPLICITO: destinos cuyo nombre contiene el token del transformador.
2) INFERENCIA_ESTRUCTURAL: destinos que nunca aparecen como origen.
Si ambas fallan: SIN_RESOLVER con diagnóstico explícito.
"""
from __future__ import annotations

import logging
from typing import Dict, List, Sequence

from .modelo import ConjuntoRaices, EstrategiaRaiz, TramoCable, clave_bus

logger = logging.getLogger(__name__)

DIAGNOSTICO_SIN_RAIZ = "no root reachable — edge list may contain only cycles"


def _unicos_en_orden(buses: Sequence[str]) -> List[str]:
    vistos: Dict[str, str] = {}
    for b in buses:
        vistos.setdefault(clave_bus(b), str(b).strip())
    return list(vistos.values())


def inferir_raices(tramos: Sequence[TramoCable], marcador: str = "TRF") -> ConjuntoRaices:
    """Conjunto de raíces de la jerarquía. Los tramos marcador (origen == destino) no cuentan."""
    activos = [t for t in tramos if not t.es_marcador]
    if not activos:
        logger.error("Topología sin resolver: %s", DIAGNOSTICO_SIN_RAIZ)
        return ConjuntoRaices((), EstrategiaRaiz.SIN_RESOLVER, DIAGNOSTICO_SIN_RAIZ)

    token = clave_bus(marcador)
    if token:
        explicitas = _unicos_en_orden([t.bus_destino for t in activos if token in clave_bus(t.bus_destino)])
        if explicitas:
            logger.debug("Raíces por marcador %r: %s", marcador, explicitas)
            return ConjuntoRaices(tuple(explicitas), EstrategiaRaiz.MARCADOR_EXPLICITO)

    origenes = {clave_bus(t.bus_origen) for t in activos}
    estructurales = _unicos_en_orden([t.bus_destino for t in activos if clave_bus(t.bus_destino) not in origenes])
    if estructurales:
        logger.warning(
            "Sin marcador %r; raíces inferidas estructuralmente (%d): %s",
            marcador, len(estructurales), ", ".join(estructurales[:10]),
        )
        return ConjuntoRaices(tuple(estructurales), EstrategiaRaiz.INFERENCIA_ESTRUCTURAL)

    logger.error("Topología sin resolver: %s", DIAGNOSTICO_SIN_RAIZ)
    return ConjuntoRaices((), EstrategiaRaiz.SIN_RESOLVER, DIAGNOSTICO_SIN_RAIZ)


__all__ = ["DIAGNOSTICO_SIN_RAIZ", "inferir_raices"]
