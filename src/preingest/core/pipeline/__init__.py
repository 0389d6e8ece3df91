# src/preingest/core/pipeline/__init__.py
"""Contrato de Step, tipos do ciclo de vida e payloads de resultado."""
