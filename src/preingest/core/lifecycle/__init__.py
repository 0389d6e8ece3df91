# src/preingest/core/lifecycle/__init__.py
"""Controlador de ciclo de vida, contexto de serviços e runner de Steps."""
