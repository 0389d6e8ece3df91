# src/preingest/status/__init__.py
"""
Status de coleções: agregador, plano agendado, registry e superfície
de consulta (`status.service.StatusService`).
"""
