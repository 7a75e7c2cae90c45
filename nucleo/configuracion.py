# nucleo/configuracion.py
from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, Optional
import yaml

BASE_DIR = Path(__file__).resolve().parents[1]
CONFIG_DIR = BASE_DIR / "config"
ARCHIVO_DEFAULT = CONFIG_DIR / "parametros_sizing.yaml"

SECCIONES = ("topologia", "rutas", "instalacion", "conductor", "carga", "proteccion")


def _leer_yaml(path: Path) -> Dict[str, Any]:
    if not path.exists():
        raise FileNotFoundError(f"No existe config: {path}")
    with path.open("r", encoding="utf-8") as f:
        data = yaml.safe_load(f) or {}
    if not isinstance(data, dict):
        raise ValueError(f"Config inválida (debe ser dict): {path}")
    return data


@dataclass(frozen=True)
class ConfigSizing:
    topologia: Dict[str, Any] = field(default_factory=dict)
    rutas: Dict[str, Any] = field(default_factory=dict)
    instalacion: Dict[str, Any] = field(default_factory=dict)
    conductor: Dict[str, Any] = field(default_factory=dict)
    carga: Dict[str, Any] = field(default_factory=dict)
    proteccion: Dict[str, Any] = field(default_factory=dict)

    # ---- accesos con default (el YAML puede venir incompleto) ----

    @property
    def marcador_transformador(self) -> str:
        return str(self.topologia.get("marcador_transformador", "TRF"))

    @property
    def limite_caida_ruta_pct(self) -> float:
        return float(self.rutas.get("limite_caida_pct", 5.0))

    @property
    def umbral_critico_pct(self) -> float:
        return float(self.rutas.get("umbral_critico_pct", 3.0))

    @property
    def t_amb_c(self) -> float:
        return float(self.instalacion.get("t_amb_c", 40.0))

    @property
    def resistividad_suelo(self) -> float:
        return float(self.instalacion.get("resistividad_suelo_kmw", 1.2))

    @property
    def profundidad_m(self) -> float:
        return float(self.instalacion.get("profundidad_m", 0.8))

    @property
    def circuitos_agrupados(self) -> int:
        return int(self.instalacion.get("circuitos_agrupados", 1))

    @property
    def t_despeje_s(self) -> float:
        return float(self.proteccion.get("t_despeje_s", 0.1))


def cargar_configuracion(path: Optional[Path] = None) -> ConfigSizing:
    data = _leer_yaml(Path(path) if path else ARCHIVO_DEFAULT)
    secciones = {k: dict(data.get(k) or {}) for k in SECCIONES}
    return ConfigSizing(**secciones)


def construir_config_efectiva(cfg_base: ConfigSizing, overrides: Optional[dict]) -> ConfigSizing:
    if not overrides:
        return cfg_base
    secciones = {
        k: {**getattr(cfg_base, k), **(overrides.get(k) or {})}
        for k in SECCIONES
    }
    return ConfigSizing(**secciones)
