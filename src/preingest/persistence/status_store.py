# src/preingest/persistence/status_store.py
"""
Store relacional do histórico de execução e do plano.

`StatusStore` é a única porta de acesso às tabelas Actions, States,
Messages e Plan. Escritas são serializadas por um lock do próprio store
(SQLite admite um único escritor por vez); leituras retornam
dataclasses desacopladas da sessão ORM.

Responsabilidades:
    - Registrar execuções de Step, suas transições e mensagens de falha
    - Atualizar o resultado e o resumo estatístico de uma execução
    - Gravar, ler e atualizar o plano de execução de uma sessão
    - Apagar todo o histórico de uma sessão (reset)

Invariantes:
    - Estados e mensagens nunca são alterados depois de gravados
    - Um estado sempre referencia uma ação existente
    - Erros de banco são propagados ao chamador (a política de
      "logar e seguir" pertence ao controlador de ciclo de vida)
"""

from __future__ import annotations

import threading
import uuid
from dataclasses import dataclass, field
from datetime import datetime
from typing import Iterable, List, Optional

from sqlalchemy import delete, select
from sqlalchemy.orm import selectinload

from ..core.exceptions import ActionNotFoundError
from ..core.pipeline.types import ExecutionStatus, utc_now
from ..core.serialization import ensure_utc
from .database import DatabaseManager
from .models import ActionRecord, MessageRecord, PlanRecord, StateRecord


@dataclass(frozen=True)
class MessageView:
    message_id: str
    status_id: str
    description: str
    creation: datetime


@dataclass(frozen=True)
class StateView:
    status_id: str
    process_id: str
    name: str
    creation: datetime
    messages: List[MessageView] = field(default_factory=list)


@dataclass(frozen=True)
class ActionView:
    process_id: str
    session_id: str
    name: str
    description: Optional[str]
    creation: datetime
    action_status: Optional[str]
    result_files: Optional[str]
    statistics_summary: Optional[str]
    states: List[StateView] = field(default_factory=list)


@dataclass(frozen=True)
class ExecutionPlanEntry:
    action_name: str
    sequence: int = 0
    status: ExecutionStatus = ExecutionStatus.PENDING
    continue_on_failed: bool = False
    continue_on_error: bool = False
    start_on_error: bool = True


def _message_view(m: MessageRecord) -> MessageView:
    return MessageView(
        message_id=m.message_id,
        status_id=m.status_id,
        description=m.description,
        creation=ensure_utc(m.creation),
    )


def _state_view(s: StateRecord) -> StateView:
    return StateView(
        status_id=s.status_id,
        process_id=s.process_id,
        name=s.name,
        creation=ensure_utc(s.creation),
        messages=[_message_view(m) for m in s.messages],
    )


def _action_view(a: ActionRecord) -> ActionView:
    return ActionView(
        process_id=a.process_id,
        session_id=a.session_id,
        name=a.name,
        description=a.description,
        creation=ensure_utc(a.creation),
        action_status=a.action_status,
        result_files=a.result_files,
        statistics_summary=a.statistics_summary,
        states=[_state_view(s) for s in a.states],
    )


def _plan_entry(p: PlanRecord) -> ExecutionPlanEntry:
    return ExecutionPlanEntry(
        action_name=p.action_name,
        sequence=p.sequence,
        status=ExecutionStatus.parse(p.status),
        continue_on_failed=bool(p.continue_on_failed),
        continue_on_error=bool(p.continue_on_error),
        start_on_error=bool(p.start_on_error),
    )


class StatusStore:
    def __init__(self, db: DatabaseManager):
        self.db = db
        self._write_lock = threading.RLock()

    # ------------------------------------------------------------------
    # Actions
    # ------------------------------------------------------------------

    def add_action(
        self,
        *,
        session_id: str,
        name: str,
        description: Optional[str],
        result_files: Optional[str] = None,
        process_id: Optional[str] = None,
        creation: Optional[datetime] = None,
    ) -> str:
        pid = str(process_id or uuid.uuid4())
        with self._write_lock, self.db.session_scope() as s:
            s.add(
                ActionRecord(
                    process_id=pid,
                    session_id=str(session_id),
                    name=name,
                    description=description,
                    creation=creation or utc_now(),
                    result_files=result_files,
                )
            )
        return pid

    def update_action(self, process_id: str, *, action_status: str, statistics_summary: Optional[str]) -> None:
        with self._write_lock, self.db.session_scope() as s:
            action = s.get(ActionRecord, str(process_id))
            if action is None:
                raise ActionNotFoundError(
                    f"Action {process_id} not found.", details={"process_id": str(process_id)}
                )
            action.action_status = action_status
            action.statistics_summary = statistics_summary

    def get_action(self, process_id: str) -> ActionView:
        with self.db.session_scope() as s:
            stmt = (
                select(ActionRecord)
                .where(ActionRecord.process_id == str(process_id))
                .options(selectinload(ActionRecord.states).selectinload(StateRecord.messages))
            )
            action = s.execute(stmt).scalars().first()
            if action is None:
                raise ActionNotFoundError(
                    f"Action {process_id} not found.", details={"process_id": str(process_id)}
                )
            return _action_view(action)

    def get_actions(self, session_id: str) -> List[ActionView]:
        with self.db.session_scope() as s:
            stmt = (
                select(ActionRecord)
                .where(ActionRecord.session_id == str(session_id))
                .options(selectinload(ActionRecord.states).selectinload(StateRecord.messages))
                .order_by(ActionRecord.creation)
            )
            return [_action_view(a) for a in s.execute(stmt).scalars().all()]

    # ------------------------------------------------------------------
    # States / Messages
    # ------------------------------------------------------------------

    def add_state(
        self,
        process_id: str,
        name: str,
        *,
        message: Optional[str] = None,
        creation: Optional[datetime] = None,
    ) -> str:
        """Grava uma transição (e, opcionalmente, sua mensagem) numa única transação."""
        status_id = str(uuid.uuid4())
        ts = creation or utc_now()
        with self._write_lock, self.db.session_scope() as s:
            if s.get(ActionRecord, str(process_id)) is None:
                raise ActionNotFoundError(
                    f"Action {process_id} not found.", details={"process_id": str(process_id)}
                )
            s.add(StateRecord(status_id=status_id, process_id=str(process_id), name=name, creation=ts))
            if message is not None:
                s.flush()
                s.add(
                    MessageRecord(
                        message_id=str(uuid.uuid4()),
                        status_id=status_id,
                        description=message,
                        creation=ts,
                    )
                )
        return status_id

    # ------------------------------------------------------------------
    # Plan
    # ------------------------------------------------------------------

    def save_execution_plan(self, session_id: str, entries: Iterable[ExecutionPlanEntry]) -> None:
        """Substitui o plano da sessão.

        Cada entrada grava a própria `sequence`; a leitura ordena por
        `sequence` e, no empate, pela ordem de gravação.
        """
        with self._write_lock, self.db.session_scope() as s:
            s.execute(delete(PlanRecord).where(PlanRecord.session_id == str(session_id)))
            for entry in entries:
                s.add(
                    PlanRecord(
                        session_id=str(session_id),
                        action_name=entry.action_name,
                        sequence=entry.sequence,
                        status=ExecutionStatus(entry.status).value,
                        continue_on_failed=entry.continue_on_failed,
                        continue_on_error=entry.continue_on_error,
                        start_on_error=entry.start_on_error,
                    )
                )

    def get_execution_plan(self, session_id: str) -> List[ExecutionPlanEntry]:
        with self.db.session_scope() as s:
            stmt = (
                select(PlanRecord)
                .where(PlanRecord.session_id == str(session_id))
                .order_by(PlanRecord.sequence, PlanRecord.record_id)
            )
            return [_plan_entry(p) for p in s.execute(stmt).scalars().all()]

    def update_plan_status(self, session_id: str, action_name: str, status: ExecutionStatus) -> int:
        with self._write_lock, self.db.session_scope() as s:
            stmt = select(PlanRecord).where(
                PlanRecord.session_id == str(session_id),
                PlanRecord.action_name == action_name,
            )
            rows = s.execute(stmt).scalars().all()
            for row in rows:
                row.status = ExecutionStatus(status).value
            return len(rows)

    # ------------------------------------------------------------------
    # Reset
    # ------------------------------------------------------------------

    def delete_session(self, session_id: str) -> int:
        """Apaga histórico e plano da sessão. Retorna o número de ações removidas."""
        sid = str(session_id)
        with self._write_lock, self.db.session_scope() as s:
            action_ids = select(ActionRecord.process_id).where(ActionRecord.session_id == sid)
            state_ids = select(StateRecord.status_id).where(StateRecord.process_id.in_(action_ids))
            s.execute(delete(MessageRecord).where(MessageRecord.status_id.in_(state_ids)))
            s.execute(delete(StateRecord).where(StateRecord.process_id.in_(action_ids)))
            removed = s.execute(delete(ActionRecord).where(ActionRecord.session_id == sid)).rowcount
            s.execute(delete(PlanRecord).where(PlanRecord.session_id == sid))
        return int(removed or 0)
