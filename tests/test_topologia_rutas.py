import unittest

from nucleo.errores import ErrorEstructural
from nucleo.modelo import EstrategiaRaiz, TramoCable
from nucleo.rutas import buses_inicio, descubrir_rutas, indice_salientes, trazar_ruta
from nucleo.topologia import DIAGNOSTICO_SIN_RAIZ, inferir_raices


def _t(id_cable: str, origen: str, destino: str, longitud: float = 10.0, kw: float = 10.0) -> TramoCable:
    return TramoCable(
        id_cable=id_cable,
        bus_origen=origen,
        bus_destino=destino,
        tension_v=415.0,
        potencia_kw=kw,
        longitud_m=longitud,
    )


class TestInferenciaRaices(unittest.TestCase):
    def test_marcador_explicito(self):
        tramos = [_t("C1", "MTR-1", "PNL-A"), _t("C2", "PNL-A", "Main trf-01")]
        raices = inferir_raices(tramos)
        self.assertEqual(raices.estrategia, EstrategiaRaiz.MARCADOR_EXPLICITO)
        self.assertEqual(raices.buses, ("Main trf-01",))
        self.assertTrue(raices.contiene(" MAIN TRF-01 "))

    def test_inferencia_estructural(self):
        tramos = [_t("C1", "M1", "DB1"), _t("C2", "DB1", "SOURCE"), _t("C3", "M2", "DB1")]
        raices = inferir_raices(tramos)
        self.assertEqual(raices.estrategia, EstrategiaRaiz.INFERENCIA_ESTRUCTURAL)
        self.assertEqual(raices.buses, ("SOURCE",))

    def test_idempotente(self):
        tramos = [_t(f"C{i}", f"from_{i}", f"to_{i}") for i in range(1, 20)]
        self.assertEqual(inferir_raices(tramos), inferir_raices(tramos))

    def test_ciclo_sin_resolver(self):
        tramos = [_t("C1", "X", "Y"), _t("C2", "Y", "Z"), _t("C3", "Z", "X")]
        raices = inferir_raices(tramos)
        self.assertEqual(raices.estrategia, EstrategiaRaiz.SIN_RESOLVER)
        self.assertTrue(raices.vacio)
        self.assertEqual(raices.diagnostico, DIAGNOSTICO_SIN_RAIZ)

    def test_lista_vacia_sin_resolver(self):
        raices = inferir_raices([])
        self.assertEqual(raices.estrategia, EstrategiaRaiz.SIN_RESOLVER)
        self.assertTrue(raices.diagnostico)

    def test_marcadores_no_cuentan(self):
        tramos = [_t("H1", "TRF-1", "TRF-1"), _t("C1", "M1", "DB1")]
        raices = inferir_raices(tramos)
        self.assertEqual(raices.estrategia, EstrategiaRaiz.INFERENCIA_ESTRUCTURAL)
        self.assertEqual(raices.buses, ("DB1",))


class TestDescubrimientoRutas(unittest.TestCase):
    def test_cadena_una_ruta(self):
        tramos = [_t("C1", "LOAD", "PANEL"), _t("C2", "PANEL", "PANEL2"), _t("C3", "PANEL2", "TRF")]
        rutas, inalcanzables = descubrir_rutas(tramos, inferir_raices(tramos))
        self.assertEqual(len(rutas), 1)
        self.assertEqual(inalcanzables, [])
        ruta = rutas[0]
        self.assertEqual(ruta.id_ruta, "PATH-001")
        self.assertEqual([t.id_cable for t in ruta.tramos], ["C1", "C2", "C3"])
        self.assertEqual(ruta.indices, (0, 1, 2))
        self.assertEqual(ruta.bus_raiz, "TRF")
        self.assertAlmostEqual(ruta.longitud_total_m, 30.0)
        self.assertAlmostEqual(ruta.carga_total_kw, 30.0)
        self.assertTrue(ruta.es_valida)

    def test_autodeteccion_50(self):
        tramos = [_t(f"C{i}", f"from_{i}", f"to_{i}") for i in range(1, 51)]
        raices = inferir_raices(tramos)
        rutas, _ = descubrir_rutas(tramos, raices)
        self.assertEqual(raices.estrategia, EstrategiaRaiz.INFERENCIA_ESTRUCTURAL)
        self.assertEqual(len(rutas), 50)

    def test_ciclo_lanza_error_estructural(self):
        tramos = [_t("C1", "X", "Y"), _t("C2", "Y", "X")]
        with self.assertRaises(ErrorEstructural) as ctx:
            descubrir_rutas(tramos, inferir_raices(tramos))
        self.assertIn("no root reachable", ctx.exception.diagnostico)

    def test_menor_profundidad_gana(self):
        tramos = [
            _t("C1", "A", "B", longitud=1.0),
            _t("C2", "B", "TRF", longitud=1.0),
            _t("C3", "A", "TRF", longitud=100.0),
        ]
        rutas, _ = descubrir_rutas(tramos, inferir_raices(tramos))
        self.assertEqual([t.id_cable for t in rutas[0].tramos], ["C3"])

    def test_desempate_por_longitud(self):
        tramos = [
            _t("C1", "A", "B", longitud=10.0),
            _t("C2", "B", "TRF", longitud=10.0),
            _t("C3", "A", "C", longitud=5.0),
            _t("C4", "C", "TRF", longitud=5.0),
        ]
        rutas, _ = descubrir_rutas(tramos, inferir_raices(tramos))
        self.assertEqual(len(rutas), 1)
        self.assertEqual([t.id_cable for t in rutas[0].tramos], ["C3", "C4"])

        # mismo largo: gana el orden de entrada
        iguales = [
            _t("C1", "A", "B", longitud=5.0),
            _t("C2", "B", "TRF", longitud=5.0),
            _t("C3", "A", "C", longitud=5.0),
            _t("C4", "C", "TRF", longitud=5.0),
        ]
        rutas, _ = descubrir_rutas(iguales, inferir_raices(iguales))
        self.assertEqual([t.id_cable for t in rutas[0].tramos], ["C1", "C2"])

    def test_carga_inalcanzable_se_reporta(self):
        tramos = [_t("C1", "A", "B"), _t("C2", "B", "C"), _t("C3", "D", "TRF")]
        rutas, inalcanzables = descubrir_rutas(tramos, inferir_raices(tramos))
        self.assertEqual([r.bus_inicio for r in rutas], ["D"])
        buses = [c.bus for c in inalcanzables]
        self.assertIn("A", buses)
        self.assertTrue(all("no alcanza raíz" in c.motivo for c in inalcanzables))

    def test_ciclo_parcial_no_cuelga(self):
        tramos = [_t("C1", "A", "B"), _t("C2", "B", "A"), _t("C3", "L", "TRF")]
        rutas, inalcanzables = descubrir_rutas(tramos, inferir_raices(tramos))
        self.assertEqual(len(rutas), 1)
        self.assertEqual({c.bus for c in inalcanzables}, {"A", "B"})

    def test_marcador_excluido_de_recorrido(self):
        tramos = [_t("H1", "PNL", "PNL"), _t("C1", "M1", "PNL"), _t("C2", "PNL", "TRF")]
        self.assertNotIn(0, [i for idx in indice_salientes(tramos).values() for i in idx])
        rutas, _ = descubrir_rutas(tramos, inferir_raices(tramos))
        self.assertEqual(len(rutas), 1)
        self.assertEqual(rutas[0].indices, (1, 2))

    def test_buses_case_insensitive(self):
        tramos = [_t("C1", "load-1", "Panel "), _t("C2", " PANEL", "trf")]
        rutas, _ = descubrir_rutas(tramos, inferir_raices(tramos))
        self.assertEqual(len(rutas), 1)
        self.assertEqual(len(rutas[0].tramos), 2)

    def test_hojas_primero(self):
        tramos = [_t("C1", "PANEL", "TRF"), _t("C2", "M1", "PANEL"), _t("C3", "M2", "PANEL")]
        hojas, intermedios = buses_inicio(tramos, inferir_raices(tramos))
        self.assertEqual(hojas, ["M1", "M2"])
        self.assertEqual(intermedios, ["PANEL"])
        rutas, _ = descubrir_rutas(tramos, inferir_raices(tramos))
        self.assertEqual([r.bus_inicio for r in rutas], ["M1", "M2"])

    def test_caida_sumada_por_tramo(self):
        tramos = [_t("C1", "LOAD", "PANEL"), _t("C2", "PANEL", "TRF")]
        caidas = {0: 4.15, 1: 8.3}
        rutas, _ = descubrir_rutas(tramos, inferir_raices(tramos), caidas.__getitem__)
        self.assertAlmostEqual(rutas[0].caida_v, 12.45)
        self.assertAlmostEqual(rutas[0].caida_pct, 3.0)
        self.assertTrue(rutas[0].mensaje.startswith("OK"))

        rutas, _ = descubrir_rutas(tramos, inferir_raices(tramos), lambda i: 20.0)
        self.assertTrue(rutas[0].es_valida)
        self.assertIn("excede", rutas[0].mensaje)

    def test_tramo_sin_caida_no_da_ok(self):
        tramos = [_t("C1", "LOAD", "PANEL"), _t("C2", "PANEL", "TRF")]
        caidas = {0: 4.15, 1: None}
        rutas, _ = descubrir_rutas(tramos, inferir_raices(tramos), caidas.__getitem__)
        self.assertAlmostEqual(rutas[0].caida_v, 4.15)
        self.assertFalse(rutas[0].mensaje.startswith("OK"))
        self.assertIn("sin dimensionar", rutas[0].mensaje)
        self.assertIn("C2", rutas[0].mensaje)

    def test_trazar_sin_tramo_saliente(self):
        tramos = [_t("C1", "A", "TRF")]
        indices, motivo = trazar_ruta("Z", tramos, inferir_raices(tramos), indice_salientes(tramos))
        self.assertIsNone(indices)
        self.assertEqual(motivo, "sin tramo saliente")


if __name__ == "__main__":
    unittest.main()
