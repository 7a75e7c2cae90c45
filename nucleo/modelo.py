# nucleo/modelo.py
from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import FrozenSet, Optional, Tuple


def clave_bus(bus: str) -> str:
    """Clave de comparación de buses: sin espacios extremos y sin mayúsculas/minúsculas."""
    return str(bus or "").strip().upper()


# =============================
# Tramo de cable (arista)
# =============================

@dataclass(frozen=True)
class TramoCable:
    """
    Un cable entre dos buses.

    bus_origen es el lado de la carga (aguas abajo); bus_destino es el lado
    de la fuente (aguas arriba). Los opcionales en None toman el default de
    configuración o del tipo de carga al dimensionar.
    """
    id_cable: str
    bus_origen: str
    bus_destino: str
    tension_v: float
    potencia_kw: float
    longitud_m: float

    descripcion: str = ""
    n_serie: int = 0
    fases: int = 3

    material: str = "Cu"
    aislamiento: str = "XLPE"
    n_nucleos: int = 4

    metodo_instalacion: str = "AIRE"
    t_amb_c: Optional[float] = None
    resistividad_suelo: Optional[float] = None   # K·m/W
    profundidad_m: Optional[float] = None
    circuitos_agrupados: Optional[int] = None

    tipo_carga: str = "Feeder"
    eficiencia: Optional[float] = None
    fp: Optional[float] = None
    metodo_arranque: Optional[str] = None

    tipo_proteccion: Optional[str] = None
    icc_ka: Optional[float] = None
    t_despeje_s: Optional[float] = None

    def __post_init__(self):
        if not clave_bus(self.bus_origen) or not clave_bus(self.bus_destino):
            raise ValueError(f"Tramo {self.id_cable!r}: bus_origen y bus_destino no pueden estar vacíos")

    @property
    def es_marcador(self) -> bool:
        """Origen == destino: encabezado de tablero, no transporta potencia."""
        return clave_bus(self.bus_origen) == clave_bus(self.bus_destino)


# =============================
# Raíces
# =============================

class EstrategiaRaiz(str, Enum):
    MARCADOR_EXPLICITO = "MARCADOR_EXPLICITO"
    INFERENCIA_ESTRUCTURAL = "INFERENCIA_ESTRUCTURAL"
    SIN_RESOLVER = "SIN_RESOLVER"


@dataclass(frozen=True)
class ConjuntoRaices:
    buses: Tuple[str, ...]
    estrategia: EstrategiaRaiz
    diagnostico: str = ""

    @property
    def claves(self) -> FrozenSet[str]:
        return frozenset(clave_bus(b) for b in self.buses)

    @property
    def vacio(self) -> bool:
        return len(self.buses) == 0

    def contiene(self, bus: str) -> bool:
        return clave_bus(bus) in self.claves


# =============================
# Ruta descubierta
# =============================

@dataclass(frozen=True)
class RutaDescubierta:
    id_ruta: str
    bus_inicio: str
    bus_raiz: str
    tramos: Tuple[TramoCable, ...]
    indices: Tuple[int, ...]            # posición de cada tramo en la lista de entrada

    descripcion_inicio: str = ""
    longitud_total_m: float = 0.0
    carga_total_kw: float = 0.0
    tension_v: float = 0.0
    caida_v: float = 0.0
    caida_pct: float = 0.0
    es_valida: bool = False
    mensaje: str = ""


# =============================
# Resultado de dimensionamiento
# =============================

class EstadoSizing(str, Enum):
    APPROVED = "APPROVED"
    WARNING = "WARNING"
    FAILED = "FAILED"


class Restriccion(str, Enum):
    # El orden de declaración es la prioridad de reporte en empates.
    AMPACIDAD = "Ampacidad"
    CAIDA_MARCHA = "CaidaMarcha"
    CAIDA_ARRANQUE = "CaidaArranque"
    CORTOCIRCUITO = "Cortocircuito"


@dataclass(frozen=True)
class FactoresDerating:
    k_temp: float = 1.0
    k_grupo: float = 1.0
    k_suelo: float = 1.0
    k_prof: float = 1.0

    @property
    def total(self) -> float:
        return self.k_temp * self.k_grupo * self.k_suelo * self.k_prof


@dataclass(frozen=True)
class ResultadoSizing:
    id_cable: str
    estado: EstadoSizing
    tipo_carga: str = ""

    corriente_plena_a: float = 0.0
    corriente_arranque_a: Optional[float] = None
    derating: FactoresDerating = field(default_factory=FactoresDerating)
    corriente_requerida_a: float = 0.0      # I_FL / K_total

    calibre_ampacidad: float = 0.0
    calibre_caida_marcha: float = 0.0
    calibre_caida_arranque: Optional[float] = None
    calibre_cortocircuito: Optional[float] = None
    calibre_final: float = 0.0
    restriccion_dominante: Optional[Restriccion] = None

    n_corridas: int = 1
    calibre_por_corrida: float = 0.0
    designacion: str = ""

    rating_catalogo_a: float = 0.0          # por corrida
    rating_instalado_a: float = 0.0         # por corrida
    rating_instalado_total_a: float = 0.0

    caida_marcha_v: float = 0.0
    caida_marcha_pct: float = 0.0
    caida_arranque_v: Optional[float] = None
    caida_arranque_pct: Optional[float] = None

    icc_ka: Optional[float] = None
    soporte_cc_ka: Optional[float] = None
    cumple_cc: Optional[bool] = None

    advertencias: Tuple[str, ...] = ()
    notas: Tuple[str, ...] = ()

    @property
    def k_total(self) -> float:
        return self.derating.total
