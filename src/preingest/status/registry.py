# src/preingest/status/registry.py
"""
Registry de coleções.

Uma coleção é um contêiner entregue na raiz da pasta de dados mais a
sua pasta de trabalho `<data_folder>/<guid>`. O registry monta, a cada
leitura, o read model completo de cada coleção: metadados do arquivo,
configurações gravadas, plano agendado, histórico de execuções e o
status agregado.

Responsabilidades:
    - Enumerar contêineres e criar pastas de trabalho ausentes
    - Combinar histórico do store com o plano da sessão
    - Calcular o `ContainerStatus` via `compute_container_status`

Invariantes:
    - `get_collections()` é ordenado pela data de criação do contêiner,
      mais recente primeiro
    - Somente execuções com ao menos um estado gravado aparecem no
      histórico
    - Uma execução sem resultado gravado aparece como `Executing`

Limites explícitos:
    - Não grava no banco
    - Não cacheia: cada chamada reflete o estado atual do store
"""

from __future__ import annotations

import logging
import os
from datetime import datetime, timezone
from pathlib import Path
from typing import List, Optional

from ..core import identity
from ..core.exceptions import SessionNotFoundError
from ..core.pipeline.types import ActionResult, StatisticsSummary
from ..core.traceability.snapshot import summary_from_json
from ..persistence.health import AuditHealth
from ..persistence.status_store import ActionView, StatusStore
from .aggregator import compute_container_status
from .models import (
    ActionReadModel,
    CollectionReadModel,
    MessageReadModel,
    StateReadModel,
)
from .plan import build_scheduled_plan
from .settings_reader import read_settings

logger = logging.getLogger(__name__)


def _ts(epoch: float) -> datetime:
    return datetime.fromtimestamp(epoch, tz=timezone.utc)


def _creation_time(stat: os.stat_result) -> float:
    return getattr(stat, "st_birthtime", stat.st_ctime)


def _summary_or_none(view: ActionView) -> Optional[StatisticsSummary]:
    try:
        return summary_from_json(view.statistics_summary)
    except (ValueError, TypeError, AttributeError):
        # resumo gravado por fora e ilegível não derruba a listagem
        logger.warning("Unreadable statistics summary on action %s", view.process_id, exc_info=True)
        return None


def action_read_model(view: ActionView) -> ActionReadModel:
    return ActionReadModel(
        process_id=view.process_id,
        session_id=view.session_id,
        name=view.name,
        description=view.description,
        creation=view.creation,
        action_status=view.action_status or ActionResult.EXECUTING.value,
        result_files=[f for f in (view.result_files or "").split(";") if f],
        summary=_summary_or_none(view),
        states=[
            StateReadModel(
                status_id=s.status_id,
                name=s.name,
                creation=s.creation,
                messages=[
                    MessageReadModel(message_id=m.message_id, description=m.description, creation=m.creation)
                    for m in s.messages
                ],
            )
            for s in view.states
        ],
    )


class CollectionRegistry:
    def __init__(self, data_folder: Path, store: StatusStore, health: Optional[AuditHealth] = None):
        self.data_folder = Path(data_folder)
        self.store = store
        self.health = health or AuditHealth()

    def get_collections(self) -> List[CollectionReadModel]:
        collections = [self._build(c) for c in identity.list_containers(self.data_folder)]
        return sorted(collections, key=lambda c: c.creation_time, reverse=True)

    def get_collection(self, guid: identity.GuidLike) -> CollectionReadModel:
        container = identity.find_container(self.data_folder, guid)
        if container is None:
            raise SessionNotFoundError(
                f"No tar container file found with GUID {guid}!",
                details={"session_id": str(guid), "data_folder": str(self.data_folder)},
            )
        return self._build(container)

    def _build(self, container: Path) -> CollectionReadModel:
        session_id = str(identity.session_guid_for(container.name))
        folder = self.data_folder / session_id
        if not folder.exists():
            folder.mkdir(parents=True, exist_ok=True)
            logger.info("Created working folder %s for %s", folder, container.name)

        actions = [action_read_model(a) for a in self.store.get_actions(session_id) if a.states]
        plan = build_scheduled_plan(self.store.get_execution_plan(session_id), actions)

        stat = container.stat()
        return CollectionReadModel(
            name=container.name,
            session_id=session_id,
            creation_time=_ts(_creation_time(stat)),
            last_write_time=_ts(stat.st_mtime),
            last_access_time=_ts(stat.st_atime),
            size=stat.st_size,
            overall_status=compute_container_status(plan, [a.action_status for a in actions]),
            settings=read_settings(folder),
            scheduled_plan=plan,
            preingest=actions,
            audit_degraded=self.health.is_degraded(session_id),
        )
