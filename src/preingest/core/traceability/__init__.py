# src/preingest/core/traceability/__init__.py
"""Snapshots JSON de resultado de Step."""
