# nucleo/errores.py
from __future__ import annotations

from dataclasses import dataclass
from typing import List, Sequence


class ErrorMotorCables(Exception):
    """Base de errores del motor de topología y dimensionamiento."""


class ErrorEstructural(ErrorMotorCables):
    """No hay raíz alcanzable en la topología (vacía o solo ciclos)."""

    def __init__(self, diagnostico: str):
        super().__init__(diagnostico)
        self.diagnostico = str(diagnostico)


class ErrorValidacionEntrada(ErrorMotorCables, ValueError):
    """Datos de un tramo fuera de rango (potencia, tensión o longitud ≤ 0)."""

    def __init__(self, id_cable: str, motivos: Sequence[str]):
        self.id_cable = str(id_cable)
        self.motivos: List[str] = list(motivos)
        super().__init__(f"Tramo {self.id_cable!r}: " + "; ".join(self.motivos))


@dataclass(frozen=True)
class CargaInalcanzable:
    """Bus de carga sin ruta hacia ninguna raíz (no aborta el análisis)."""
    bus: str
    motivo: str
