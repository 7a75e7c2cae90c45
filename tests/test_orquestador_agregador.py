import io
import tempfile
import unittest
from contextlib import redirect_stdout
from pathlib import Path

import pandas as pd

from nucleo.calcular import leer_filas, main
from nucleo.agregador import COLUMNAS_TABLA, filas_tabulares, tabla_resultados, tabla_rutas
from nucleo.configuracion import cargar_configuracion, construir_config_efectiva
from nucleo.modelo import EstadoSizing, EstrategiaRaiz, TramoCable
from nucleo.normalizacion import normalizar_tramos
from nucleo.orquestador import analizar_filas, ejecutar_analisis


def _cadena(kw: float = 45.0):
    base = dict(tension_v=415.0, potencia_kw=kw, longitud_m=50.0, n_nucleos=3, material="Cu", aislamiento="XLPE")
    return [
        TramoCable(id_cable="C1", bus_origen="LOAD", bus_destino="PANEL", descripcion="Carga", **base),
        TramoCable(id_cable="C2", bus_origen="PANEL", bus_destino="PANEL2", **base),
        TramoCable(id_cable="C3", bus_origen="PANEL2", bus_destino="TRF", **base),
    ]


class TestEjecutarAnalisis(unittest.TestCase):
    @classmethod
    def setUpClass(cls):
        cls.cfg = cargar_configuracion()

    def test_cadena_ida_y_vuelta(self):
        rep = ejecutar_analisis(_cadena(), self.cfg)
        self.assertTrue(rep.ok)
        self.assertEqual(rep.estrategia, EstrategiaRaiz.MARCADOR_EXPLICITO)
        self.assertEqual(len(rep.rutas), 1)
        self.assertEqual(len(rep.rutas[0].tramos), 3)

        calibres = [rep.resultados[i].calibre_final for i in rep.rutas[0].indices]
        self.assertTrue(all(c > 0 for c in calibres))
        self.assertEqual(calibres, sorted(calibres))

        # la caída de la ruta es la suma de las caídas por tramo
        suma = sum(r.caida_marcha_v for r in rep.resultados)
        self.assertAlmostEqual(rep.rutas[0].caida_v, suma)

    def test_autodeteccion_sin_trf(self):
        tramos = [
            TramoCable(id_cable=f"C{i}", bus_origen=f"from_{i}", bus_destino=f"to_{i}",
                       tension_v=415.0, potencia_kw=15.0, longitud_m=30.0)
            for i in range(1, 51)
        ]
        rep = ejecutar_analisis(tramos, self.cfg)
        self.assertEqual(rep.estrategia, EstrategiaRaiz.INFERENCIA_ESTRUCTURAL)
        self.assertEqual(len(rep.rutas), 50)
        self.assertEqual(rep.resumen["total_rutas"], 50)

    def test_ciclo_resultados_parciales(self):
        tramos = [
            TramoCable(id_cable="C1", bus_origen="X", bus_destino="Y", tension_v=415.0, potencia_kw=10.0, longitud_m=10.0),
            TramoCable(id_cable="C2", bus_origen="Y", bus_destino="X", tension_v=415.0, potencia_kw=10.0, longitud_m=10.0),
        ]
        rep = ejecutar_analisis(tramos, self.cfg)
        self.assertFalse(rep.ok)
        self.assertIn("no root reachable", rep.diagnostico_estructural)
        self.assertEqual(rep.rutas, ())
        self.assertTrue(all(r is not None for r in rep.resultados))

    def test_tramo_invalido_no_aborta(self):
        tramos = _cadena()
        tramos[1] = TramoCable(id_cable="C2", bus_origen="PANEL", bus_destino="PANEL2",
                               tension_v=415.0, potencia_kw=-5.0, longitud_m=50.0)
        rep = ejecutar_analisis(tramos, self.cfg)
        self.assertEqual(rep.resultados[1].estado, EstadoSizing.FAILED)
        self.assertEqual(rep.resultados[0].estado, EstadoSizing.APPROVED)
        self.assertEqual(rep.resumen["tramos_fallidos"], 1)
        self.assertEqual(len(rep.rutas), 1)

        # la caída de C2 no se conoce: la ruta no puede reportarse OK
        ruta = rep.rutas[0]
        self.assertFalse(ruta.mensaje.startswith("OK"))
        self.assertIn("C2", ruta.mensaje)
        suma = rep.resultados[0].caida_marcha_v + rep.resultados[2].caida_marcha_v
        self.assertAlmostEqual(ruta.caida_v, suma)

    def test_marcador_sin_resultado(self):
        tramos = [TramoCable(id_cable="H", bus_origen="PANEL", bus_destino="PANEL",
                             tension_v=415.0, potencia_kw=0.0, longitud_m=0.0)] + _cadena()
        rep = ejecutar_analisis(tramos, self.cfg)
        self.assertIsNone(rep.resultados[0])
        self.assertEqual(len(filas_tabulares(rep)), 3)

    def test_workers_conserva_orden(self):
        secuencial = ejecutar_analisis(_cadena(), self.cfg)
        paralelo = ejecutar_analisis(_cadena(), self.cfg, n_workers=3)
        self.assertEqual(secuencial.resultados, paralelo.resultados)


class TestAgregador(unittest.TestCase):
    def test_tabla_plana(self):
        rep = ejecutar_analisis(_cadena(), cargar_configuracion())
        filas = filas_tabulares(rep)
        self.assertEqual([f["id_cable"] for f in filas], ["C1", "C2", "C3"])
        self.assertEqual(filas[0]["descripcion"], "Carga")

        df = tabla_resultados(rep)
        self.assertIsInstance(df, pd.DataFrame)
        self.assertEqual(list(df.columns), COLUMNAS_TABLA)
        self.assertEqual(len(df), 3)
        self.assertTrue((df["estado"] == "APPROVED").all())

        rutas = tabla_rutas(rep)
        self.assertEqual(rutas.loc[0, "cables"], "C1 → C2 → C3")

    def test_tabla_vacia_con_columnas(self):
        tramos = [
            TramoCable(id_cable="C1", bus_origen="X", bus_destino="Y", tension_v=415.0, potencia_kw=10.0, longitud_m=10.0),
            TramoCable(id_cable="C2", bus_origen="Y", bus_destino="X", tension_v=415.0, potencia_kw=10.0, longitud_m=10.0),
        ]
        df = tabla_resultados(ejecutar_analisis(tramos, cargar_configuracion()))
        self.assertTrue(df.empty)
        self.assertEqual(list(df.columns), COLUMNAS_TABLA)

    def test_resumen_criticas(self):
        cfg = cargar_configuracion()
        rep = ejecutar_analisis(_cadena(), cfg)
        self.assertEqual(rep.resumen["rutas_validas"], 1)
        self.assertEqual(rep.resumen["cargas_inalcanzables"], 0)
        esperado = 1 if rep.rutas[0].caida_pct > cfg.umbral_critico_pct else 0
        self.assertEqual(rep.resumen["rutas_criticas"], esperado)


class TestNormalizacion(unittest.TestCase):
    def test_alias_de_columnas(self):
        filas = [
            {"Cable Number": "FDR-1", "From Bus": "MTR-01", "To Bus": "MCC-1", "Voltage (V)": 415,
             "Load KW": 30, "Length (m)": 80, "Number of Cores": "4C", "Material": "AL",
             "Load Type": "motor", "Starting Method": "Star-Delta", "Efficiency (%)": 92},
            {"fromBus": "MCC-1", "toBus": "TRF-1", "voltage": 230, "loadKW": 5, "length": 12},
            {"Description": "fila vacía"},
        ]
        tramos = normalizar_tramos(filas, cargar_configuracion())
        self.assertEqual(len(tramos), 2)

        t0, t1 = tramos
        self.assertEqual(t0.id_cable, "FDR-1")
        self.assertEqual(t0.n_nucleos, 4)
        self.assertEqual(t0.material, "Al")
        self.assertEqual(t0.fases, 3)
        self.assertAlmostEqual(t0.eficiencia, 0.92)
        self.assertEqual(t0.metodo_arranque, "Star-Delta")

        self.assertEqual(t1.id_cable, "CBL-002")
        self.assertEqual(t1.fases, 1)
        self.assertEqual(t1.material, "Cu")

    def test_dataframe_con_nan(self):
        df = pd.DataFrame([
            {"From Bus": "L1", "To Bus": "TRF", "Load KW": 10.0, "Length (m)": 20.0, "Power Factor": None},
        ])
        tramos = normalizar_tramos(df, cargar_configuracion())
        self.assertEqual(len(tramos), 1)
        self.assertIsNone(tramos[0].fp)
        self.assertEqual(tramos[0].tension_v, 415.0)

    def test_analizar_filas(self):
        filas = [
            {"From Bus": "LOAD", "To Bus": "PANEL", "Load KW": 45, "Length (m)": 50, "Core": 3},
            {"From Bus": "PANEL", "To Bus": "TRF", "Load KW": 45, "Length (m)": 50, "Core": 3},
        ]
        rep = analizar_filas(filas, cargar_configuracion())
        self.assertEqual(len(rep.rutas), 1)
        self.assertEqual(rep.resumen["tramos_aprobados"], 2)

    def test_filas_mal_formadas_se_omiten(self):
        filas = [
            {"From Bus": "LOAD", "To Bus": "PANEL", "Load KW": 45, "Length (m)": 50, "Core": 3},
            {"Cable Number": "SIN-DESTINO", "From Bus": "AUX", "Load KW": 5, "Length (m)": 10},
            {"Cable Number": "KW-TEXTO", "From Bus": "AUX2", "To Bus": "PANEL", "Load KW": "10 kW", "Length (m)": 10},
            {"From Bus": "PANEL", "To Bus": "TRF", "Load KW": 45, "Length (m)": 50, "Core": 3},
        ]
        with self.assertLogs("nucleo.normalizacion", level="WARNING") as cm:
            tramos = normalizar_tramos(filas, cargar_configuracion())
        self.assertEqual([t.bus_origen for t in tramos], ["LOAD", "PANEL"])
        self.assertEqual(len(cm.output), 2)
        self.assertIn("Fila 2", cm.output[0])
        self.assertIn("Fila 3", cm.output[1])

        with self.assertLogs("nucleo.normalizacion", level="WARNING"):
            rep = analizar_filas(filas, cargar_configuracion())
        self.assertEqual(len(rep.rutas), 1)
        self.assertEqual(rep.resumen["tramos_aprobados"], 2)

    def test_fases_desde_config_sin_tension(self):
        cfg = construir_config_efectiva(cargar_configuracion(), {"conductor": {"fases": 1}})
        filas = [
            {"From Bus": "L1", "To Bus": "TRF", "Load KW": 2, "Length (m)": 10},
            {"From Bus": "L2", "To Bus": "TRF", "Voltage (V)": 415, "Load KW": 2, "Length (m)": 10},
        ]
        sin_tension, con_tension = normalizar_tramos(filas, cfg)
        self.assertEqual(sin_tension.fases, 1)
        self.assertEqual(con_tension.fases, 3)
        self.assertEqual(normalizar_tramos(filas[:1], cargar_configuracion())[0].fases, 3)


class TestConfiguracion(unittest.TestCase):
    def test_defaults(self):
        cfg = cargar_configuracion()
        self.assertEqual(cfg.marcador_transformador, "TRF")
        self.assertEqual(cfg.limite_caida_ruta_pct, 5.0)
        self.assertEqual(cfg.t_amb_c, 40.0)

    def test_overrides_no_mutan_base(self):
        base = cargar_configuracion()
        efectiva = construir_config_efectiva(base, {"topologia": {"marcador_transformador": "SRC"}})
        self.assertEqual(efectiva.marcador_transformador, "SRC")
        self.assertEqual(base.marcador_transformador, "TRF")
        self.assertIs(construir_config_efectiva(base, None), base)

    def test_marcador_configurable(self):
        cfg = construir_config_efectiva(cargar_configuracion(), {"topologia": {"marcador_transformador": "SRC"}})
        tramos = _cadena()
        tramos[2] = TramoCable(id_cable="C3", bus_origen="PANEL2", bus_destino="SRC-1",
                               tension_v=415.0, potencia_kw=45.0, longitud_m=50.0)
        rep = ejecutar_analisis(tramos, cfg)
        self.assertEqual(rep.estrategia, EstrategiaRaiz.MARCADOR_EXPLICITO)
        self.assertEqual(rep.raices, ("SRC-1",))

    def test_archivo_inexistente(self):
        with self.assertRaises(FileNotFoundError):
            cargar_configuracion(Path("no_existe.yaml"))

    def test_documento_no_dict(self):
        with tempfile.TemporaryDirectory() as d:
            p = Path(d) / "cfg.yaml"
            p.write_text("- a\n- b\n", encoding="utf-8")
            with self.assertRaises(ValueError):
                cargar_configuracion(p)


class TestCLI(unittest.TestCase):
    def test_main_yaml(self):
        contenido = (
            "tramos:\n"
            "  - {From Bus: LOAD, To Bus: PANEL, Load KW: 45, Length (m): 50}\n"
            "  - {From Bus: PANEL, To Bus: TRF, Load KW: 45, Length (m): 50}\n"
        )
        with tempfile.TemporaryDirectory() as d:
            p = Path(d) / "tramos.yaml"
            p.write_text(contenido, encoding="utf-8")
            self.assertEqual(len(leer_filas(p)), 2)
            with redirect_stdout(io.StringIO()) as out:
                codigo = main([str(p)])
        self.assertEqual(codigo, 0)
        self.assertIn("PATH-001", out.getvalue())

    def test_lista_invalida(self):
        with tempfile.TemporaryDirectory() as d:
            p = Path(d) / "tramos.yaml"
            p.write_text("solo texto\n", encoding="utf-8")
            with self.assertRaises(ValueError):
                leer_filas(p)


if __name__ == "__main__":
    unittest.main()
