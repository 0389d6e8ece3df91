# src/preingest/notifications/messages.py
"""
Mensagens enviadas aos viewers e ao worker service.

Nomes de método (contrato com os clientes):
    - notice            → aviso de ciclo de vida de um Step (todo evento)
    - collectionsStatus → read model de todas as coleções
    - collectionStatus  → read model de uma coleção (sessionId, json)
    - stepFinished      → fim de um Step, para o worker service (sessionId, json)
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Optional

from ..core.pipeline.types import ActionState, LifecycleEvent, StatisticsSummary

NOTICE = "notice"
COLLECTIONS_STATUS = "collectionsStatus"
COLLECTION_STATUS = "collectionStatus"
STEP_FINISHED = "stepFinished"


@dataclass(frozen=True)
class Notice:
    event_date_time: datetime
    session_id: str
    name: str
    state: ActionState
    message: Optional[str] = None
    summary: Optional[StatisticsSummary] = None

    @classmethod
    def from_event(cls, event: LifecycleEvent, session_id: str) -> "Notice":
        return cls(
            event_date_time=event.initiate,
            session_id=str(session_id),
            name=event.action.properties.action_name,
            state=event.action_type,
            message=event.description,
            summary=event.action.summary,
        )
