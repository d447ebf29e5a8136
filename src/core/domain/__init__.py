"""Modelos y entidades del dominio.

Por qué:
- Aquí viven las estructuras de datos puras: sobre de respuesta, config del
  cliente y descriptores de request.
- El dominio no conoce la CLI ni el transporte concreto.
"""
