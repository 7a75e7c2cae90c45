"""
Tablas de ingeniería — Motor de Cables

Catálogos estáticos (sin comportamiento):
- conductores: ampacidad, resistencia, reactancia, métodos de instalación
- derating: temperatura, agrupamiento, suelo, profundidad
- cargas: tipos de carga, arranque, límites de caída, constantes k

Regla: los valores viven SOLO aquí; los motores consultan, no copian.
"""
