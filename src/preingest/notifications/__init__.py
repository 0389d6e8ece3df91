# src/preingest/notifications/__init__.py
"""Notificações para viewers e worker service."""

from .hub import NotificationSink, ViewerHub
from .messages import COLLECTION_STATUS, COLLECTIONS_STATUS, NOTICE, STEP_FINISHED, Notice
from .outbox import NotificationOutbox
from .worker_client import WorkerServiceClient

__all__ = [
    "COLLECTION_STATUS",
    "COLLECTIONS_STATUS",
    "NOTICE",
    "STEP_FINISHED",
    "Notice",
    "NotificationOutbox",
    "NotificationSink",
    "ViewerHub",
    "WorkerServiceClient",
]
