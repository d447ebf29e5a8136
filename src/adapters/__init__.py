"""Adaptadores concretos (transporte HTTP sobre httpx)."""
