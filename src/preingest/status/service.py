# src/preingest/status/service.py
"""
Superfície de consulta e manutenção do histórico de status.

`StatusService` expõe, sem transporte HTTP, as operações que viewers,
o worker service e ferramentas externas usam sobre o histórico:

    - consultar uma execução (com estados e mensagens) ou todas de uma sessão
    - registrar e atualizar execuções feitas fora deste processo
    - acrescentar estados Started / Completed / Failed
    - apagar o histórico de uma sessão (reset) ou a sessão inteira (remove)
    - retransmitir um aviso de ciclo de vida produzido externamente (notify)

Entradas inválidas levantam `PreconditionError`; ids desconhecidos
levantam `ActionNotFoundError` ou `SessionNotFoundError`. Erros de banco
são propagados.
"""

from __future__ import annotations

import json
import logging
import shutil
from typing import Any, Dict, List, Mapping, Optional, Union

from ..core import identity
from ..core.exceptions import PreconditionError, SessionNotFoundError
from ..core.lifecycle.context import ServiceContext
from ..core.pipeline.types import ActionState, StatisticsSummary, utc_now
from ..core.serialization import dumps, parse_datetime
from ..core.traceability.snapshot import summary_from_dict
from ..notifications.messages import (
    COLLECTION_STATUS,
    COLLECTIONS_STATUS,
    NOTICE,
    STEP_FINISHED,
    Notice,
)
from .models import ActionReadModel, CollectionReadModel
from .registry import action_read_model

logger = logging.getLogger(__name__)

_STATE_NAMES = {s.value.lower(): s for s in (ActionState.STARTED, ActionState.COMPLETED, ActionState.FAILED)}


def _require_guid(value: Any, label: str = "GUID") -> str:
    parsed = identity.parse_guid(value)
    if parsed is None:
        raise PreconditionError(f"Empty {label} is invalid.", details={"value": str(value)})
    return str(parsed)


def _parse_summary(summary: Union[str, StatisticsSummary, Mapping[str, Any]]) -> StatisticsSummary:
    """Normaliza o resumo recebido; o store só grava JSON que o read model consegue reler."""
    if isinstance(summary, StatisticsSummary):
        return summary
    if isinstance(summary, str):
        try:
            summary = json.loads(summary)
        except json.JSONDecodeError as e:
            raise PreconditionError("Summary is not valid JSON.", details={"error": str(e)}) from e
    if not isinstance(summary, Mapping):
        raise PreconditionError("Summary must be a JSON object.", details={"type": type(summary).__name__})
    try:
        parsed = summary_from_dict(dict(summary))
    except (TypeError, ValueError) as e:
        raise PreconditionError("Summary is invalid.", details={"error": str(e)}) from e
    if parsed is None:
        raise PreconditionError("Result and summary are required.")
    return parsed


class StatusService:
    def __init__(self, ctx: ServiceContext):
        self.ctx = ctx

    # ------------------------------------------------------------------
    # Consultas
    # ------------------------------------------------------------------

    def get_action(self, process_id: Any) -> ActionReadModel:
        return action_read_model(self.ctx.store.get_action(_require_guid(process_id)))

    def get_actions(self, session_id: Any) -> List[ActionReadModel]:
        return [action_read_model(a) for a in self.ctx.store.get_actions(_require_guid(session_id, "session GUID"))]

    def get_collections(self) -> List[CollectionReadModel]:
        return self.ctx.collections.get_collections()

    def get_collection(self, session_id: Any) -> CollectionReadModel:
        return self.ctx.collections.get_collection(_require_guid(session_id, "session GUID"))

    # ------------------------------------------------------------------
    # Escrita
    # ------------------------------------------------------------------

    def add_action(self, session_id: Any, name: str, description: str, result: str) -> ActionReadModel:
        sid = _require_guid(session_id, "session GUID")
        if not name or not description or not result:
            raise PreconditionError("Name, description and result are required.")
        pid = self.ctx.store.add_action(session_id=sid, name=name, description=description, result_files=result)
        return self.get_action(pid)

    def update_action(
        self,
        process_id: Any,
        result: str,
        summary: Union[str, StatisticsSummary, Mapping[str, Any]],
    ) -> ActionReadModel:
        pid = _require_guid(process_id)
        if not result or not summary:
            raise PreconditionError("Result and summary are required.")
        summary_json = dumps(_parse_summary(summary))
        self.ctx.store.update_action(pid, action_status=result, statistics_summary=summary_json)
        return self.get_action(pid)

    def add_state(self, process_id: Any, name: str, message: Optional[str] = None) -> str:
        pid = _require_guid(process_id)
        state = _STATE_NAMES.get((name or "").strip().lower())
        if state is None:
            raise PreconditionError(
                "Status value is required.",
                details={"value": name, "accepted": [s.value for s in _STATE_NAMES.values()]},
            )
        return self.ctx.store.add_state(pid, state.value, message=message if state == ActionState.FAILED else None)

    def start(self, process_id: Any) -> str:
        return self.add_state(process_id, ActionState.STARTED.value)

    def completed(self, process_id: Any) -> str:
        return self.add_state(process_id, ActionState.COMPLETED.value)

    def failed(self, process_id: Any, message: Optional[str] = None) -> str:
        return self.add_state(process_id, ActionState.FAILED.value, message=message or "")

    # ------------------------------------------------------------------
    # Reset / Remove
    # ------------------------------------------------------------------

    def reset_session(self, session_id: Any) -> int:
        """Apaga histórico, plano e pasta de trabalho da sessão."""
        return self._delete_session(_require_guid(session_id, "session GUID"), full_delete=False)

    def remove_session(self, session_id: Any) -> int:
        """Como `reset_session`, e também apaga o arquivo contêiner."""
        return self._delete_session(_require_guid(session_id, "session GUID"), full_delete=True)

    def _delete_session(self, sid: str, *, full_delete: bool) -> int:
        container = identity.find_container(self.ctx.data_folder, sid)
        removed = self.ctx.store.delete_session(sid)
        self.ctx.health.clear(sid)

        folder = identity.session_folder(self.ctx.data_folder, sid)
        if folder.exists():
            shutil.rmtree(folder)
        if full_delete and container is not None and container.exists():
            container.unlink()

        logger.info("Session %s deleted (%s actions, container removed: %s)", sid, removed, full_delete)
        return removed

    # ------------------------------------------------------------------
    # Notify
    # ------------------------------------------------------------------

    def notify(self, message: Union[str, Mapping[str, Any]]) -> bool:
        """Retransmite um aviso externo. Retorna False quando a sessão é desconhecida."""
        if message is None:
            raise PreconditionError("Notification body is null!")
        body: Dict[str, Any] = json.loads(message) if isinstance(message, str) else dict(message)

        state_name = str(body.get("state") or "").strip().lower()
        state = next((s for s in ActionState if s.value.lower() == state_name), None)
        if state is None:
            raise PreconditionError("Parsing state failed!", details={"state": body.get("state")})

        sid = _require_guid(body.get("sessionId"), "session GUID")
        try:
            current = self.ctx.collections.get_collection(sid)
        except SessionNotFoundError:
            logger.info("Notification for unknown session %s ignored", sid)
            return False

        notice = Notice(
            event_date_time=parse_datetime(body.get("eventDateTime")) or utc_now(),
            session_id=sid,
            name=str(body.get("name") or ""),
            state=state,
            message=body.get("message"),
            summary=summary_from_dict(body.get("summary")),
        )

        outbox = self.ctx.outbox
        outbox.put(self.ctx.viewers, NOTICE, dumps(notice))
        if state.is_persisted:
            current_json = dumps(current)
            outbox.put(self.ctx.viewers, COLLECTIONS_STATUS, dumps(self.ctx.collections.get_collections()))
            outbox.put(self.ctx.viewers, COLLECTION_STATUS, sid, current_json)
            if state.is_terminal:
                outbox.put(self.ctx.worker, STEP_FINISHED, sid, current_json)
        outbox.flush()
        return True
