"""
calculo_conductores.py — Motor de Cables

Motor de dimensionamiento de conductores por tramo.

Responsabilidad:
- Calibre por ampacidad instalada (rating × K_total ≥ I).
- Calibre por caída de tensión en marcha y, para motores, en arranque.
- Calibre por cortocircuito (A ≥ Isc / (k·√t)).
- Selección final (máximo de restricciones) y corridas en paralelo.
- Entrega de ResultadoSizing estable para agregador/exportación.

Notas normativas:
- Ampacidad base y derating: IEC 60364-5-52 (tablas referenciales).
- Caída de tensión: IEC 60364-5-52 §525 (límites por tipo de carga).
- Cortocircuito: IEC 60364-4-43 §434.5.2 (k·A·√t).
"""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass
from typing import List, Optional, Sequence, Tuple

from nucleo.configuracion import ConfigSizing, cargar_configuracion
from nucleo.errores import ErrorValidacionEntrada
from nucleo.modelo import EstadoSizing, FactoresDerating, Restriccion, ResultadoSizing, TramoCable

from electrical.tablas.cargas import (
    CONSTANTE_K,
    LIMITES_CAIDA_ARRANQUE,
    SIN_PROTECCION,
    TIEMPOS_DESPEJE_S,
    TIPOS_CARGA,
)
from electrical.tablas.conductores import (
    AISLAMIENTOS,
    CALIBRE_AVISO_GRANDE_MM2,
    ampacidad_catalogo,
    calibre_max_unico,
    calibres,
    norm_aislamiento,
    norm_instalacion,
    norm_material,
)
from .corrientes import (
    corriente_arranque,
    corriente_plena_carga,
    metodo_arranque_efectivo,
    norm_tipo_carga,
    parametros_carga,
)
from .factores_derating import ampacidad_instalada, factores_derating
from .modelo_tramo import caida_tension

logger = logging.getLogger(__name__)

# Referencias normativas utilizadas en este módulo
IEC_REFERENCIAS = [
    "IEC 60364-5-52 - Current-carrying capacities and correction factors",
    "IEC 60364-5-52 §525 - Voltage drop in consumers' installations",
    "IEC 60364-4-43 §434.5.2 - Short-circuit thermal withstand",
    "IEC 60228 - Conductor resistance at 20 °C",
]


# ==========================================================
# Parámetros efectivos del tramo
# ==========================================================

@dataclass(frozen=True)
class ParametrosTramo:
    material: str
    aislamiento: str
    n_nucleos: int
    metodo: str
    fases: int
    tension_v: float
    longitud_m: float
    tipo_carga: str
    fp: float
    eficiencia: float
    metodo_arranque: Optional[str]
    limite_marcha_pct: float
    limite_arranque_pct: Optional[float]
    calibres: Tuple[float, ...]


def resolver_parametros(tramo: TramoCable, cfg: ConfigSizing) -> ParametrosTramo:
    tipo = norm_tipo_carga(tramo.tipo_carga, default=str(cfg.carga.get("tipo", "Feeder")))
    fp, eta = parametros_carga(tipo, tramo.fp, tramo.eficiencia)
    arranque = metodo_arranque_efectivo(tipo, tramo.metodo_arranque)
    material = "Al" if norm_material(tramo.material) == "AL" else "Cu"
    aislamiento = norm_aislamiento(tramo.aislamiento)
    metodo = norm_instalacion(tramo.metodo_instalacion)

    return ParametrosTramo(
        material=material,
        aislamiento=aislamiento,
        n_nucleos=int(tramo.n_nucleos),
        metodo=metodo,
        fases=int(tramo.fases),
        tension_v=float(tramo.tension_v),
        longitud_m=float(tramo.longitud_m),
        tipo_carga=tipo,
        fp=fp,
        eficiencia=eta,
        metodo_arranque=arranque,
        limite_marcha_pct=100.0 * float(TIPOS_CARGA[tipo]["limite_marcha"]),
        limite_arranque_pct=(100.0 * LIMITES_CAIDA_ARRANQUE[arranque]) if arranque else None,
        calibres=tuple(calibres(material, aislamiento, metodo)),
    )


def validar_tramo(tramo: TramoCable) -> None:
    motivos: List[str] = []
    if not float(tramo.potencia_kw) > 0.0:
        motivos.append(f"potencia_kw debe ser > 0 (valor={tramo.potencia_kw!r})")
    if not float(tramo.tension_v) > 0.0:
        motivos.append(f"tension_v debe ser > 0 (valor={tramo.tension_v!r})")
    if not float(tramo.longitud_m) > 0.0:
        motivos.append(f"longitud_m debe ser > 0 (valor={tramo.longitud_m!r})")
    if int(tramo.fases) not in (1, 3):
        motivos.append(f"fases debe ser 1 o 3 (valor={tramo.fases!r})")
    if tramo.fp is not None and not (0.0 < float(tramo.fp) <= 1.0):
        motivos.append(f"fp debe estar en (0, 1] (valor={tramo.fp!r})")
    if tramo.eficiencia is not None and not (0.0 < float(tramo.eficiencia) <= 1.0):
        motivos.append(f"eficiencia debe estar en (0, 1] (valor={tramo.eficiencia!r})")
    if motivos:
        raise ErrorValidacionEntrada(tramo.id_cable, motivos)


# ==========================================================
# Utilidades internas
# ==========================================================

def fmt_calibre(calibre_mm2: float) -> str:
    return f"{float(calibre_mm2):g}"


def _rating(p: ParametrosTramo, calibre_mm2: float) -> float:
    return ampacidad_catalogo(
        calibre_mm2,
        material=p.material,
        aislamiento=p.aislamiento,
        metodo=p.metodo,
        n_nucleos=p.n_nucleos,
    )


def _caida(p: ParametrosTramo, i_a: float, calibre_mm2: float) -> Tuple[float, float]:
    return caida_tension(
        i_a=i_a,
        l_m=p.longitud_m,
        tension_v=p.tension_v,
        calibre_mm2=calibre_mm2,
        material=p.material,
        aislamiento=p.aislamiento,
        n_nucleos=p.n_nucleos,
        metodo=p.metodo,
        fp=p.fp,
        fases=p.fases,
    )


def constante_k(material: str, aislamiento: str) -> float:
    col = str(AISLAMIENTOS[norm_aislamiento(aislamiento)]["columna"])
    return float(CONSTANTE_K[f"{norm_material(material)}_{col}"])


def tiempo_despeje(tramo: TramoCable, cfg: ConfigSizing) -> float:
    if tramo.t_despeje_s and float(tramo.t_despeje_s) > 0.0:
        return float(tramo.t_despeje_s)
    tipo = str(tramo.tipo_proteccion or "").strip().upper()
    return float(TIEMPOS_DESPEJE_S.get(tipo, cfg.t_despeje_s))


def aplica_cortocircuito(tramo: TramoCable) -> bool:
    tipo = str(tramo.tipo_proteccion or "").strip().upper()
    return bool(tramo.icc_ka) and float(tramo.icc_ka) > 0.0 and tipo not in SIN_PROTECCION


# ==========================================================
# Restricciones (barrido ascendente del catálogo)
# ==========================================================

def calibre_por_ampacidad(i_a: float, p: ParametrosTramo, factores: FactoresDerating) -> Tuple[float, bool]:
    """Primer calibre con rating × K_total ≥ I. Si ninguno: (máximo, False)."""
    for c in p.calibres:
        if ampacidad_instalada(_rating(p, c), factores) >= float(i_a):
            return c, True
    return p.calibres[-1], False


def calibre_por_caida(i_a: float, limite_pct: float, p: ParametrosTramo) -> Tuple[float, bool]:
    """Primer calibre con ΔV% ≤ límite. Si ninguno: (máximo, False)."""
    for c in p.calibres:
        _, pct = _caida(p, i_a, c)
        if pct <= float(limite_pct):
            return c, True
    return p.calibres[-1], False


def calibre_por_cortocircuito(
    icc_ka: float,
    *,
    k: float,
    t_s: float,
    calibres_mm2: Sequence[float],
) -> Tuple[float, bool, float]:
    """
    A_min = Isc(A) / (k·√t); primer calibre ≥ A_min.

    Returns:
        (calibre, cumple, area_minima_mm2)
    """
    area = float(icc_ka) * 1000.0 / (float(k) * math.sqrt(float(t_s)))
    for c in calibres_mm2:
        if float(c) >= area:
            return float(c), True, area
    return float(calibres_mm2[-1]), False, area


def seleccionar_calibre_final(
    candidatos: Sequence[Tuple[Restriccion, Optional[float]]],
) -> Tuple[float, Restriccion]:
    """
    Calibre final = máximo de los candidatos presentes.
    La restricción dominante es la primera (en orden de prioridad) que iguala el máximo.
    """
    presentes = [(r, float(c)) for r, c in candidatos if c is not None]
    if not presentes:
        raise ValueError("Sin candidatos para seleccionar calibre")
    final = max(c for _, c in presentes)
    dominante = next(r for r, c in presentes if c == final)
    return final, dominante


def designacion_cable(*, n_corridas: int, n_nucleos: int, calibre_mm2: float, material: str, aislamiento: str) -> str:
    txt = f"{int(n_corridas)}×{int(n_nucleos)}C×{fmt_calibre(calibre_mm2)}mm² {material} {aislamiento}"
    if int(n_corridas) > 1:
        txt += " (paralelo)"
    return txt


def _corrida_cumple(
    calibre_mm2: float,
    n_corridas: int,
    p: ParametrosTramo,
    factores: FactoresDerating,
    *,
    i_ampacidad_a: float,
    i_plena_a: float,
    i_arranque_a: Optional[float],
) -> bool:
    if ampacidad_instalada(_rating(p, calibre_mm2), factores) < i_ampacidad_a / n_corridas:
        return False
    _, pct = _caida(p, i_plena_a / n_corridas, calibre_mm2)
    if pct > p.limite_marcha_pct:
        return False
    if i_arranque_a and p.limite_arranque_pct is not None:
        _, pct_arr = _caida(p, i_arranque_a / n_corridas, calibre_mm2)
        if pct_arr > p.limite_arranque_pct:
            return False
    return True


def calibre_corridas_paralelo(
    calibre_final: float,
    p: ParametrosTramo,
    factores: FactoresDerating,
    *,
    i_ampacidad_a: float,
    i_plena_a: float,
    i_arranque_a: Optional[float],
    n_corridas: int = 2,
) -> Optional[float]:
    """
    Calibre por corrida para n corridas: arranca en el menor calibre del
    catálogo ≥ ceil(final/n) y sube mientras no supere el techo práctico,
    hasta que ampacidad y caída a I/n verifiquen. None si no hay solución.
    """
    objetivo = math.ceil(float(calibre_final) / n_corridas)
    techo = calibre_max_unico(p.material)
    for c in p.calibres:
        if c < objetivo or c > techo:
            continue
        if _corrida_cumple(
            c, n_corridas, p, factores,
            i_ampacidad_a=i_ampacidad_a,
            i_plena_a=i_plena_a,
            i_arranque_a=i_arranque_a,
        ):
            return c
    return None


# ==========================================================
# Motor principal
# ==========================================================

def _resultado_invalido(tramo: TramoCable, motivos: Sequence[str]) -> ResultadoSizing:
    return ResultadoSizing(
        id_cable=str(tramo.id_cable),
        estado=EstadoSizing.FAILED,
        tipo_carga=norm_tipo_carga(tramo.tipo_carga),
        advertencias=tuple(f"Entrada inválida: {m}" for m in motivos),
    )


def dimensionar_tramo(tramo: TramoCable, cfg: Optional[ConfigSizing] = None) -> ResultadoSizing:
    """
    Dimensiona un tramo:
      1) I_FL (y I_arranque para motores).
      2) K_total = K_temp × K_grupo × K_suelo × K_prof.
      3) Candidatos: ampacidad, caída marcha, caída arranque, cortocircuito.
      4) Final = máximo; corridas en paralelo si Cu supera el techo práctico
         o ningún calibre único cumple ampacidad.
      5) Verificación a la configuración final y estado.

    Nunca lanza por datos del tramo: la validación fallida devuelve FAILED.
    """
    cfg = cfg or cargar_configuracion()

    try:
        validar_tramo(tramo)
    except ErrorValidacionEntrada as e:
        logger.warning("Tramo %s inválido: %s", e.id_cable, "; ".join(e.motivos))
        return _resultado_invalido(tramo, e.motivos)

    p = resolver_parametros(tramo, cfg)
    advertencias: List[str] = []
    fallas: List[str] = []
    notas: List[str] = []

    # 1) Corrientes
    i_fl = corriente_plena_carga(
        potencia_kw=tramo.potencia_kw,
        tension_v=p.tension_v,
        fases=p.fases,
        fp=p.fp,
        eficiencia=p.eficiencia,
    )
    i_arr = corriente_arranque(i_fl, p.metodo_arranque) if p.metodo_arranque else None
    i_amp = max(i_fl, i_arr or 0.0)

    # 2) Derating
    factores = factores_derating(
        aislamiento=p.aislamiento,
        metodo=p.metodo,
        t_amb_c=tramo.t_amb_c if tramo.t_amb_c is not None else cfg.t_amb_c,
        circuitos=tramo.circuitos_agrupados if tramo.circuitos_agrupados is not None else cfg.circuitos_agrupados,
        resistividad_kmw=tramo.resistividad_suelo if tramo.resistividad_suelo is not None else cfg.resistividad_suelo,
        profundidad_m=tramo.profundidad_m if tramo.profundidad_m is not None else cfg.profundidad_m,
    )
    k_total = factores.total

    # 3) Candidatos por restricción
    c_amp, cumple_amp = calibre_por_ampacidad(i_fl, p, factores)
    if i_arr:
        c_amp_arr, cumple_amp_arr = calibre_por_ampacidad(i_arr, p, factores)
        c_amp = max(c_amp, c_amp_arr)
        cumple_amp = cumple_amp and cumple_amp_arr

    c_vd, _ = calibre_por_caida(i_fl, p.limite_marcha_pct, p)

    c_vd_arr: Optional[float] = None
    if i_arr and p.limite_arranque_pct is not None:
        c_vd_arr, _ = calibre_por_caida(i_arr, p.limite_arranque_pct, p)

    c_cc: Optional[float] = None
    t_s: Optional[float] = None
    k_cc: Optional[float] = None
    if aplica_cortocircuito(tramo):
        k_cc = constante_k(p.material, p.aislamiento)
        t_s = tiempo_despeje(tramo, cfg)
        c_cc, cumple_cc_cat, area = calibre_por_cortocircuito(float(tramo.icc_ka), k=k_cc, t_s=t_s, calibres_mm2=p.calibres)
        if not cumple_cc_cat:
            fallas.append(
                f"Cortocircuito: se requieren ≥ {area:.1f} mm² para {float(tramo.icc_ka):g} kA/{t_s:g} s; "
                f"excede el calibre máximo del catálogo ({fmt_calibre(p.calibres[-1])} mm²)."
            )

    # 4) Selección final
    c_final, dominante = seleccionar_calibre_final([
        (Restriccion.AMPACIDAD, c_amp),
        (Restriccion.CAIDA_MARCHA, c_vd),
        (Restriccion.CAIDA_ARRANQUE, c_vd_arr),
        (Restriccion.CORTOCIRCUITO, c_cc),
    ])

    n_corridas, c_corrida = 1, c_final
    techo = calibre_max_unico(p.material)
    if p.material == "Cu" and (c_final > techo or not cumple_amp):
        c_par = calibre_corridas_paralelo(
            c_final, p, factores,
            i_ampacidad_a=i_amp,
            i_plena_a=i_fl,
            i_arranque_a=i_arr,
        )
        if c_par is not None:
            n_corridas, c_corrida = 2, c_par
            notas.append(
                f"Corridas en paralelo: 2×{fmt_calibre(c_par)} mm² en lugar de 1×{fmt_calibre(c_final)} mm²."
            )
        else:
            advertencias.append(
                f"No fue posible dividir en 2 corridas ≤ {fmt_calibre(techo)} mm²; "
                f"se mantiene conductor único de {fmt_calibre(c_final)} mm²."
            )

    # 5) Verificación a la configuración final
    rating_cat = _rating(p, c_corrida)
    rating_inst = ampacidad_instalada(rating_cat, factores)
    rating_total = rating_inst * n_corridas

    if rating_total < i_amp:
        advertencias.append(
            f"No cumple ampacidad: instalado {rating_total:.1f} A < requerido {i_amp:.1f} A "
            f"ni con el calibre máximo del catálogo."
        )

    dv, pct = _caida(p, i_fl / n_corridas, c_corrida)
    if pct > p.limite_marcha_pct:
        advertencias.append(f"Caída en marcha alta: {pct:.2f}% (límite {p.limite_marcha_pct:g}%).")

    dv_arr: Optional[float] = None
    pct_arr: Optional[float] = None
    if i_arr and p.limite_arranque_pct is not None:
        dv_arr, pct_arr = _caida(p, i_arr / n_corridas, c_corrida)
        if pct_arr > p.limite_arranque_pct:
            advertencias.append(
                f"Caída en arranque alta: {pct_arr:.2f}% (límite {p.limite_arranque_pct:g}%, {p.metodo_arranque})."
            )

    soporte_ka: Optional[float] = None
    cumple_cc: Optional[bool] = None
    if k_cc is not None and t_s is not None:
        soporte_ka = k_cc * c_corrida * n_corridas * math.sqrt(t_s) / 1000.0
        cumple_cc = float(tramo.icc_ka) <= soporte_ka
        if not cumple_cc and not fallas:
            fallas.append(f"Cortocircuito: {float(tramo.icc_ka):g} kA > soporte {soporte_ka:.2f} kA.")

    if n_corridas == 1 and c_corrida > CALIBRE_AVISO_GRANDE_MM2:
        notas.append(f"Cable único muy grande ({fmt_calibre(c_corrida)} mm²); evaluar corridas en paralelo.")

    if fallas:
        estado = EstadoSizing.FAILED
    elif advertencias:
        estado = EstadoSizing.WARNING
    else:
        estado = EstadoSizing.APPROVED

    logger.debug(
        "Tramo %s: I_FL=%.2f A, K=%.3f, candidatos amp=%s vd=%s vd_arr=%s cc=%s -> %sx%s mm² (%s)",
        tramo.id_cable, i_fl, k_total, c_amp, c_vd, c_vd_arr, c_cc, n_corridas, c_corrida, estado.value,
    )

    return ResultadoSizing(
        id_cable=str(tramo.id_cable),
        estado=estado,
        tipo_carga=p.tipo_carga,
        corriente_plena_a=i_fl,
        corriente_arranque_a=i_arr,
        derating=factores,
        corriente_requerida_a=i_fl / k_total if k_total > 0 else 0.0,
        calibre_ampacidad=c_amp,
        calibre_caida_marcha=c_vd,
        calibre_caida_arranque=c_vd_arr,
        calibre_cortocircuito=c_cc,
        calibre_final=c_final,
        restriccion_dominante=dominante,
        n_corridas=n_corridas,
        calibre_por_corrida=c_corrida,
        designacion=designacion_cable(
            n_corridas=n_corridas,
            n_nucleos=p.n_nucleos,
            calibre_mm2=c_corrida,
            material=p.material,
            aislamiento=p.aislamiento,
        ),
        rating_catalogo_a=rating_cat,
        rating_instalado_a=rating_inst,
        rating_instalado_total_a=rating_total,
        caida_marcha_v=dv,
        caida_marcha_pct=pct,
        caida_arranque_v=dv_arr,
        caida_arranque_pct=pct_arr,
        icc_ka=float(tramo.icc_ka) if k_cc is not None else None,
        soporte_cc_ka=soporte_ka,
        cumple_cc=cumple_cc,
        advertencias=tuple(fallas + advertencias),
        notas=tuple(notas),
    )


__all__ = [
    "IEC_REFERENCIAS",
    "ParametrosTramo",
    "resolver_parametros",
    "validar_tramo",
    "calibre_por_ampacidad",
    "calibre_por_caida",
    "calibre_por_cortocircuito",
    "seleccionar_calibre_final",
    "calibre_corridas_paralelo",
    "designacion_cable",
    "dimensionar_tramo",
]
