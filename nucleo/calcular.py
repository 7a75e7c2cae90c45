# nucleo/calcular.py
"""
CLI — Motor de Cables.

Uso:
    python -m nucleo.calcular tramos.yaml [--config parametros.yaml] [--workers 4] [--verbose]

El YAML de entrada es una lista de filas (o un dict con clave "tramos");
se aceptan los nombres de columna de ALIAS_COLUMNAS.
"""
from __future__ import annotations

import argparse
import logging
from pathlib import Path
from typing import Any, Dict, List

import yaml

from .agregador import tabla_resultados, tabla_rutas
from .configuracion import cargar_configuracion
from .orquestador import analizar_filas

logger = logging.getLogger(__name__)


def leer_filas(path: Path) -> List[Dict[str, Any]]:
    if not path.exists():
        raise FileNotFoundError(f"No existe archivo de tramos: {path}")
    with path.open("r", encoding="utf-8") as f:
        data = yaml.safe_load(f) or []
    if isinstance(data, dict):
        data = data.get("tramos") or []
    if not isinstance(data, list):
        raise ValueError(f"Archivo de tramos inválido (debe ser lista): {path}")
    return [dict(x) for x in data if isinstance(x, dict)]


def main(argv: List[str] | None = None) -> int:
    ap = argparse.ArgumentParser(description="Topología y dimensionamiento de cables")
    ap.add_argument("tramos", help="YAML con la lista de tramos")
    ap.add_argument("--config", default="", help="YAML de parámetros (opcional)")
    ap.add_argument("--workers", type=int, default=1, help="Hilos para dimensionar tramos")
    ap.add_argument("--verbose", action="store_true", help="Log DEBUG")
    args = ap.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )

    cfg = cargar_configuracion(Path(args.config) if args.config else None)
    filas = leer_filas(Path(args.tramos))
    logger.debug("Filas leídas de %s: %d", args.tramos, len(filas))
    reporte = analizar_filas(filas, cfg, n_workers=args.workers)

    if reporte.diagnostico_estructural:
        print(f"ERROR estructural: {reporte.diagnostico_estructural}")

    for k, v in reporte.resumen.items():
        print(f"{k}: {v}")
    for c in reporte.inalcanzables:
        print(f"Inalcanzable: {c.bus} ({c.motivo})")

    print()
    print(tabla_rutas(reporte).to_string(index=False))
    print()
    print(tabla_resultados(reporte).to_string(index=False))

    return 1 if reporte.diagnostico_estructural else 0


if __name__ == "__main__":
    raise SystemExit(main())
