"""Modelos y entidades del dominio.

Por qué:
- Aquí viven credenciales, contratos de llamada y esquemas de opciones (Pydantic v2).
- El dominio no conoce HTTP ni CLI: solo conceptos de la Trading API.
"""
