"""Core del cliente HTTP: dominio, configuración y servicios."""
