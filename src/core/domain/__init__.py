"""Dominio de países: modelos, estados de carga, rutas y normalización.

Nada de este paquete hace I/O; los adaptadores le entregan registros crudos.
"""
