"""Servicios del Core (algoritmos del cliente).

Cada módulo implementa un componente: query string, serialización de body,
headers, cancelación compuesta, normalización de respuestas y la fachada
`ApiClient` que los orquesta.
"""
