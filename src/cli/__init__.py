"""CLI (Typer + Rich) para ejecutar requests y diagnosticar la configuración."""
