# src/preingest/persistence/__init__.py
"""Persistência do histórico de execução (SQLAlchemy)."""

from .database import DatabaseManager
from .health import AuditHealth
from .status_store import ActionView, ExecutionPlanEntry, MessageView, StateView, StatusStore

__all__ = [
    "ActionView",
    "AuditHealth",
    "DatabaseManager",
    "ExecutionPlanEntry",
    "MessageView",
    "StateView",
    "StatusStore",
]
