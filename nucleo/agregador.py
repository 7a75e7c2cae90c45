# nucleo/agregador.py
"""
Agregador de rutas y resultados — Motor de Cables.

Responsabilidad:
- ReporteAnalisis: rutas + resultados por tramo + diagnósticos.
- Resumen de rutas (conteos y caída promedio).
- Exportación plana: una fila por cable referenciado por alguna ruta.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Sequence, Tuple

import pandas as pd

from .errores import CargaInalcanzable
from .modelo import EstrategiaRaiz, ResultadoSizing, RutaDescubierta, TramoCable


COLUMNAS_TABLA = [
    "id_cable", "descripcion", "bus_origen", "bus_destino", "tension_v", "longitud_m",
    "potencia_kw", "tipo_carga", "corriente_plena_a", "corriente_arranque_a", "k_total",
    "corriente_requerida_a", "caida_v", "caida_pct", "calibre_ampacidad_mm2",
    "calibre_caida_marcha_mm2", "calibre_caida_arranque_mm2", "calibre_cortocircuito_mm2",
    "calibre_final_mm2", "restriccion_dominante", "n_corridas", "calibre_por_corrida_mm2",
    "designacion", "estado", "advertencias",
]


@dataclass(frozen=True)
class ReporteAnalisis:
    tramos: Tuple[TramoCable, ...]
    resultados: Tuple[Optional[ResultadoSizing], ...]   # alineado con tramos; None en marcadores
    rutas: Tuple[RutaDescubierta, ...] = ()
    inalcanzables: Tuple[CargaInalcanzable, ...] = ()
    estrategia: EstrategiaRaiz = EstrategiaRaiz.SIN_RESOLVER
    raices: Tuple[str, ...] = ()
    diagnostico_estructural: str = ""
    resumen: Dict[str, Any] = field(default_factory=dict)

    @property
    def ok(self) -> bool:
        return not self.diagnostico_estructural


# ==========================================================
# Resumen
# ==========================================================

def resumen_rutas(
    rutas: Sequence[RutaDescubierta],
    inalcanzables: Sequence[CargaInalcanzable],
    *,
    limite_caida_pct: float = 5.0,
    umbral_critico_pct: float = 3.0,
) -> Dict[str, Any]:
    validas = [r for r in rutas if r.es_valida]
    return {
        "total_rutas": len(rutas),
        "rutas_validas": len(validas),
        "cargas_inalcanzables": len(inalcanzables),
        "rutas_sobre_limite": sum(1 for r in rutas if r.caida_pct > limite_caida_pct),
        "rutas_criticas": sum(1 for r in rutas if r.caida_pct > umbral_critico_pct),
        "caida_promedio_pct": (sum(r.caida_pct for r in rutas) / len(rutas)) if rutas else 0.0,
    }


# ==========================================================
# Exportación plana
# ==========================================================

def _indices_en_rutas(reporte: ReporteAnalisis) -> List[int]:
    usados = {i for r in reporte.rutas for i in r.indices}
    return sorted(usados)


def _fila(t: TramoCable, r: ResultadoSizing) -> Dict[str, Any]:
    return {
        "id_cable": t.id_cable,
        "descripcion": t.descripcion,
        "bus_origen": t.bus_origen,
        "bus_destino": t.bus_destino,
        "tension_v": float(t.tension_v),
        "longitud_m": float(t.longitud_m),
        "potencia_kw": float(t.potencia_kw),
        "tipo_carga": r.tipo_carga,
        "corriente_plena_a": r.corriente_plena_a,
        "corriente_arranque_a": r.corriente_arranque_a,
        "k_total": r.k_total,
        "corriente_requerida_a": r.corriente_requerida_a,
        "caida_v": r.caida_marcha_v,
        "caida_pct": r.caida_marcha_pct,
        "calibre_ampacidad_mm2": r.calibre_ampacidad,
        "calibre_caida_marcha_mm2": r.calibre_caida_marcha,
        "calibre_caida_arranque_mm2": r.calibre_caida_arranque,
        "calibre_cortocircuito_mm2": r.calibre_cortocircuito,
        "calibre_final_mm2": r.calibre_final,
        "restriccion_dominante": r.restriccion_dominante.value if r.restriccion_dominante else "",
        "n_corridas": r.n_corridas,
        "calibre_por_corrida_mm2": r.calibre_por_corrida,
        "designacion": r.designacion,
        "estado": r.estado.value,
        "advertencias": " | ".join(r.advertencias),
    }


def filas_tabulares(reporte: ReporteAnalisis) -> List[Dict[str, Any]]:
    """Una fila por cable referenciado por alguna ruta, en orden de entrada."""
    filas: List[Dict[str, Any]] = []
    for i in _indices_en_rutas(reporte):
        r = reporte.resultados[i]
        if r is None:
            continue
        filas.append(_fila(reporte.tramos[i], r))
    return filas


def tabla_resultados(reporte: ReporteAnalisis) -> pd.DataFrame:
    return pd.DataFrame(filas_tabulares(reporte), columns=COLUMNAS_TABLA)


def tabla_rutas(reporte: ReporteAnalisis) -> pd.DataFrame:
    filas = [
        {
            "id_ruta": r.id_ruta,
            "bus_inicio": r.bus_inicio,
            "descripcion_inicio": r.descripcion_inicio,
            "bus_raiz": r.bus_raiz,
            "n_tramos": len(r.tramos),
            "cables": " → ".join(t.id_cable for t in r.tramos),
            "longitud_total_m": r.longitud_total_m,
            "carga_total_kw": r.carga_total_kw,
            "caida_v": r.caida_v,
            "caida_pct": r.caida_pct,
            "es_valida": r.es_valida,
            "mensaje": r.mensaje,
        }
        for r in reporte.rutas
    ]
    return pd.DataFrame(filas)


__all__ = [
    "ReporteAnalisis",
    "resumen_rutas",
    "filas_tabulares",
    "tabla_resultados",
    "tabla_rutas",
    "COLUMNAS_TABLA",
]
