# src/preingest/core/lifecycle/context.py
"""
Contexto de serviços compartilhado pelos Steps.

`ServiceContext` agrupa as dependências que um Step precisa (configuração,
store, registry de coleções, destinos de notificação, outbox e registro
de saúde da auditoria) e é injetado no construtor de cada Step. Nenhum
componente usa estado global.

`ServiceContext.create(settings)` monta a composição padrão a partir de
`AppSettings`; testes montam o contexto diretamente com dublês.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional

from ...notifications.hub import NotificationSink, ViewerHub
from ...notifications.outbox import NotificationOutbox
from ...notifications.worker_client import WorkerServiceClient
from ...persistence.database import DatabaseManager
from ...persistence.health import AuditHealth
from ...persistence.status_store import StatusStore
from ...status.registry import CollectionRegistry
from ..config.settings import AppSettings
from ..logging import configure_logging


@dataclass
class ServiceContext:
    settings: AppSettings
    store: StatusStore
    collections: CollectionRegistry
    viewers: Optional[NotificationSink] = None
    worker: Optional[NotificationSink] = None
    outbox: NotificationOutbox = field(default_factory=NotificationOutbox)
    health: AuditHealth = field(default_factory=AuditHealth)

    def __post_init__(self) -> None:
        # o read model precisa enxergar as falhas registradas pelos Steps
        self.collections.health = self.health

    @property
    def data_folder(self) -> Path:
        return self.settings.data_folder_name

    @classmethod
    def create(cls, settings: AppSettings) -> "ServiceContext":
        configure_logging(settings.log_level)
        db = DatabaseManager(settings.database_url, echo=settings.database_echo)
        db.create_tables()
        store = StatusStore(db)
        health = AuditHealth()
        return cls(
            settings=settings,
            store=store,
            collections=CollectionRegistry(settings.data_folder_name, store, health),
            viewers=ViewerHub(),
            worker=WorkerServiceClient(settings.worker_service_url, timeout=settings.worker_timeout_seconds),
            outbox=NotificationOutbox(settings.notification_mode),
            health=health,
        )

    def close(self) -> None:
        """Drena o outbox (encerrando a thread de entrega, se houver) e libera o engine."""
        self.outbox.close()
        self.store.db.dispose()
