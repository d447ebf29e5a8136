"""Interfaces/abstracciones del Core.

Por qué:
- Define contratos (Protocol) que implementan adaptadores concretos.
- Permite invertir dependencias: el cliente depende del contrato de
  transporte, no de httpx directamente.
"""
