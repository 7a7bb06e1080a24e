"""Contratos (Protocol) que el Core espera de sus adaptadores.

- `CountrySource`: los cuatro endpoints de REST Countries.
- `KeyValueStore`: almacenamiento clave/valor para preferencias.
"""
