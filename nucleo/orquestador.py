# nucleo/orquestador.py
from __future__ import annotations

import concurrent.futures
import logging
from typing import Any, Iterable, List, Mapping, Optional, Sequence

from electrical.conductores import dimensionar_tramo

from .agregador import ReporteAnalisis, resumen_rutas
from .configuracion import ConfigSizing, cargar_configuracion
from .errores import ErrorEstructural
from .modelo import EstadoSizing, ResultadoSizing, TramoCable
from .normalizacion import normalizar_tramos
from .rutas import descubrir_rutas
from .topologia import inferir_raices

logger = logging.getLogger(__name__)


# ==========================================================
# Dimensionamiento por tramo
# ==========================================================
def _dimensionar_o_none(tramo: TramoCable, cfg: ConfigSizing) -> Optional[ResultadoSizing]:
    # los marcadores (encabezado de tablero) no transportan potencia
    if tramo.es_marcador:
        return None
    return dimensionar_tramo(tramo, cfg)


def dimensionar_todos(
    tramos: Sequence[TramoCable],
    cfg: ConfigSizing,
    *,
    n_workers: int = 1,
) -> List[Optional[ResultadoSizing]]:
    """Resultados alineados por índice con la entrada (None en marcadores)."""
    if n_workers <= 1 or len(tramos) < 2:
        return [_dimensionar_o_none(t, cfg) for t in tramos]

    with concurrent.futures.ThreadPoolExecutor(max_workers=n_workers) as ex:
        # map() conserva el orden de entrada
        return list(ex.map(lambda t: _dimensionar_o_none(t, cfg), tramos))


# ==========================================================
# ENTRYPOINT OFICIAL
# ==========================================================
def ejecutar_analisis(
    tramos: Sequence[TramoCable],
    cfg: Optional[ConfigSizing] = None,
    *,
    n_workers: int = 1,
) -> ReporteAnalisis:
    """
    Una corrida completa: raíces → dimensionamiento → rutas → resumen.

    Nunca aborta por un tramo o una carga: un error estructural queda en
    reporte.diagnostico_estructural y los tramos se dimensionan igual.
    """
    cfg = cfg or cargar_configuracion()
    tramos = tuple(tramos)

    raices = inferir_raices(tramos, cfg.marcador_transformador)
    resultados = dimensionar_todos(tramos, cfg, n_workers=n_workers)

    def _caida(i: int) -> Optional[float]:
        r = resultados[i]
        if r is None or r.estado is EstadoSizing.FAILED:
            return None
        return r.caida_marcha_v

    diagnostico = ""
    rutas, inalcanzables = [], []
    try:
        rutas, inalcanzables = descubrir_rutas(
            tramos, raices, _caida,
            limite_caida_pct=cfg.limite_caida_ruta_pct,
        )
    except ErrorEstructural as e:
        diagnostico = e.diagnostico

    resumen = resumen_rutas(
        rutas, inalcanzables,
        limite_caida_pct=cfg.limite_caida_ruta_pct,
        umbral_critico_pct=cfg.umbral_critico_pct,
    )
    resumen.update({
        "total_tramos": len(tramos),
        "tramos_aprobados": sum(1 for r in resultados if r is not None and r.estado is EstadoSizing.APPROVED),
        "tramos_advertencia": sum(1 for r in resultados if r is not None and r.estado is EstadoSizing.WARNING),
        "tramos_fallidos": sum(1 for r in resultados if r is not None and r.estado is EstadoSizing.FAILED),
        "estrategia_raiz": raices.estrategia.value,
    })

    logger.debug("Análisis: %s", resumen)

    return ReporteAnalisis(
        tramos=tramos,
        resultados=tuple(resultados),
        rutas=tuple(rutas),
        inalcanzables=tuple(inalcanzables),
        estrategia=raices.estrategia,
        raices=raices.buses,
        diagnostico_estructural=diagnostico,
        resumen=resumen,
    )


def analizar_filas(
    filas: Iterable[Mapping[str, Any]],
    cfg: Optional[ConfigSizing] = None,
    *,
    n_workers: int = 1,
) -> ReporteAnalisis:
    """Filas crudas (cualquier convención de columnas) → ReporteAnalisis."""
    cfg = cfg or cargar_configuracion()
    return ejecutar_analisis(normalizar_tramos(filas, cfg), cfg, n_workers=n_workers)


__all__ = ["dimensionar_todos", "ejecutar_analisis", "analizar_filas"]
