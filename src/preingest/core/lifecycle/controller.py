# src/preingest/core/lifecycle/controller.py
"""
Controlador de ciclo de vida de Steps.

`LifecycleController` é a classe base de todo Step concreto. Ela conduz
uma execução pelas fases Started → Executing* → Completed | Failed e,
a cada evento, registra o histórico no store, grava o snapshot JSON de
resultado e publica as notificações correspondentes.

Responsabilidades:
    - Validar a sessão (`set_session_guid`) e as pré-condições de metadados
    - Conduzir `execute()` como template: o Step concreto implementa `run()`
    - Converter qualquer exceção do trabalho em um evento Failed
    - Sequenciar, sob um lock, persistência → snapshot → notificações

Sequência de um evento (`trigger`), sob o lock da instância:
    a. notice para os viewers (todo evento)
    b. sem `action_process_id`: nada além do notice
    c. Started: estado Started; Completed/Failed: resultado + resumo da
       ação, estado terminal (Failed com mensagem) e snapshot JSON
    d. Started/Completed/Failed: collectionsStatus e collectionStatus
    e. Completed/Failed: stepFinished para o worker service

As notificações passam pelo outbox somente depois que as escritas
correspondentes foram confirmadas; no modo inline o outbox é esvaziado
antes de o lock ser liberado.

Política de erros:
    - Falhas de escrita no store: log com traceback, sessão marcada como
      degradada em `AuditHealth`, execução segue
    - Falha ao gravar o snapshot: log e propagação como `ArtifactWriteError`
    - Falha ao montar os read models das notificações agregadas (banco,
      filesystem ou conteúdo ilegível): log, as notificações agregadas
      daquele evento são omitidas
"""

from __future__ import annotations

import logging
import threading
import traceback
import uuid
from pathlib import Path
from typing import Optional

from sqlalchemy.exc import SQLAlchemyError

from ...notifications.messages import (
    COLLECTION_STATUS,
    COLLECTIONS_STATUS,
    NOTICE,
    STEP_FINISHED,
    Notice,
)
from .. import identity
from ..errors import exception_to_error
from ..exceptions import (
    ArtifactWriteError,
    ContainerNotFoundError,
    DataFolderNotFoundError,
    PreconditionError,
    PreingestException,
    SessionNotFoundError,
)
from ..pipeline.types import (
    ActionModel,
    ActionProperties,
    ActionResult,
    ActionState,
    LifecycleEvent,
    StatisticsSummary,
    messages_text,
)
from ..serialization import dumps
from ..traceability.snapshot import save_snapshot
from .context import ServiceContext

logger = logging.getLogger(__name__)

TOPX_PATTERN = "*.metadata"
MDTO_PATTERN = "*.mdto.xml"


class LifecycleController:
    """
    Base de todo Step de pré-ingestão.

    Subclasses definem `name` (o tipo do Step, também nome do snapshot) e
    implementam `run(model)`, preenchendo `model.summary`,
    `model.action_result` e `model.action_data`. Progresso intermediário
    é publicado com `progress(model, texto)`.

    Atributos de classe:
        - name: tipo do Step; padrão é o nome da classe
        - requires_metadata: exige exatamente um formato de metadados
          (ToPX ou MDTO) na pasta da sessão antes de `run()`
    """

    name: str = ""
    requires_metadata: bool = False

    def __init__(self, ctx: ServiceContext):
        self.ctx = ctx
        if not self.name:
            self.name = type(self).__name__
        self.session_guid: Optional[uuid.UUID] = None
        self.container_filename: Optional[str] = None
        self.action_process_id: Optional[str] = None
        self._lock = threading.Lock()

    # ------------------------------------------------------------------
    # Sessão
    # ------------------------------------------------------------------

    @property
    def data_folder(self) -> Path:
        return self.ctx.data_folder

    @property
    def target_folder(self) -> Path:
        return self.data_folder / str(self.session_guid)

    @property
    def target_collection(self) -> Path:
        return self.data_folder / (self.container_filename or "")

    def set_session_guid(self, guid: identity.GuidLike) -> None:
        parsed = identity.parse_guid(guid)
        if parsed is None:
            raise PreconditionError("SessionId is empty!")

        if not self.data_folder.is_dir():
            raise DataFolderNotFoundError(
                f"Data folder '{self.data_folder}' not found!",
                details={"data_folder": str(self.data_folder)},
            )

        container = identity.find_container(self.data_folder, parsed)
        if container is None:
            raise ContainerNotFoundError(
                f"Tar file not found for GUID '{parsed}'!",
                details={"session_id": str(parsed)},
            )

        if not (self.data_folder / str(parsed)).is_dir():
            raise SessionNotFoundError(f"Session {parsed} not found.", details={"session_id": str(parsed)})

        self.session_guid = parsed
        self.container_filename = container.name

    # ------------------------------------------------------------------
    # Pré-condições
    # ------------------------------------------------------------------

    def _count(self, pattern: str) -> int:
        if not self.target_folder.is_dir():
            return 0
        return sum(1 for p in self.target_folder.rglob(pattern) if p.is_file())

    @property
    def is_topx(self) -> bool:
        return self._count(TOPX_PATTERN) > 0

    @property
    def is_mdto(self) -> bool:
        return self._count(MDTO_PATTERN) > 0

    def check_preconditions(self) -> None:
        if not self.container_filename or not self.target_collection.exists():
            raise ContainerNotFoundError("Collection not found!", details={"session_id": str(self.session_guid)})

        topx = self._count(TOPX_PATTERN)
        mdto = self._count(MDTO_PATTERN)

        if topx and mdto:
            raise PreconditionError(
                f"Found ToPX ({topx}) and/or MDTO ({mdto}) files in collection with GUID "
                f"{self.session_guid}. Cannot handle both types in one collection.",
                details={"topx": topx, "mdto": mdto, "session_id": str(self.session_guid)},
            )
        if not topx and not mdto:
            raise PreconditionError("Metadata files not found!", details={"session_id": str(self.session_guid)})

    # ------------------------------------------------------------------
    # Execução
    # ------------------------------------------------------------------

    def current_action_properties(self) -> ActionModel:
        return ActionModel(
            properties=ActionProperties(
                session_id=str(self.session_guid),
                action_name=self.name,
                collection_item=str(self.target_collection),
            ),
            summary=StatisticsSummary(),
        )

    def started_description(self) -> str:
        return f"Start {self.name} for collection '{self.container_filename}'."

    def completed_description(self) -> str:
        return f"{self.name} is done."

    def failure_headline(self) -> str:
        return f"An exception occurred in {self.name} for collection '{self.container_filename}'!"

    def run(self, model: ActionModel) -> None:
        raise NotImplementedError

    def on_failure(self, model: ActionModel, exc: BaseException) -> None:
        """Contadores padrão de uma execução com falha: tudo rejeitado."""
        model.summary.record(accepted=0, rejected=max(1, model.summary.processed))

    def progress(self, model: ActionModel, description: str) -> None:
        self.trigger(LifecycleEvent(description=description, action_type=ActionState.EXECUTING, action=model))

    def execute(self) -> ActionModel:
        if self.session_guid is None:
            raise PreconditionError("SessionId is empty!")

        model = self.current_action_properties()
        self.trigger(LifecycleEvent(self.started_description(), ActionState.STARTED, model))

        try:
            if self.requires_metadata:
                self.check_preconditions()
            self.run(model)
        except Exception as exc:
            logger.error(
                "%s failed for %s: %s",
                self.name,
                self.session_guid,
                exception_to_error(exc).to_dict(),
                exc_info=True,
            )
            model.properties.messages = [self.failure_headline(), str(exc), traceback.format_exc()]
            model.action_result = ActionResult.FAILED
            self.on_failure(model, exc)
            self.trigger(LifecycleEvent(self.failure_headline(), ActionState.FAILED, model))
            return model

        if model.action_result is None:
            model.action_result = ActionResult.SUCCESS
        self.trigger(LifecycleEvent(self.completed_description(), ActionState.COMPLETED, model))
        return model

    # ------------------------------------------------------------------
    # Eventos
    # ------------------------------------------------------------------

    def on_trigger(self, event: LifecycleEvent) -> None:
        if event.action_type == ActionState.STARTED:
            event.action.summary.start = event.initiate
        elif event.action_type.is_terminal:
            event.action.summary.end = event.initiate

    def trigger(self, event: LifecycleEvent) -> None:
        self.on_trigger(event)
        with self._lock:
            try:
                self._publish(event)
            finally:
                self.ctx.outbox.flush()

    def _publish(self, event: LifecycleEvent) -> None:
        session_id = str(self.session_guid)
        outbox = self.ctx.outbox
        outbox.put(self.ctx.viewers, NOTICE, dumps(Notice.from_event(event, session_id)))

        if not self.action_process_id:
            return

        state = event.action_type
        model = event.action
        write_error: Optional[ArtifactWriteError] = None

        if state == ActionState.STARTED:
            self.add_start_state(self.action_process_id)
        elif state.is_terminal:
            result = model.action_result.value if model.action_result else ActionResult.NONE.value
            self.update_process_action(self.action_process_id, result, dumps(model.summary))
            if state == ActionState.COMPLETED:
                self.add_complete_state(self.action_process_id)
            else:
                self.add_failed_state(self.action_process_id, messages_text(model.properties.messages))
            try:
                self.save_json(model)
            except ArtifactWriteError as e:
                write_error = e

        if state.is_persisted:
            self._publish_collections(session_id, step_finished=state.is_terminal)

        if write_error is not None:
            raise write_error

    def _publish_collections(self, session_id: str, *, step_finished: bool) -> None:
        try:
            collections = self.ctx.collections.get_collections()
            current = self.ctx.collections.get_collection(session_id)
        except (SQLAlchemyError, OSError, ValueError, PreingestException):
            logger.exception("Could not build collection status for %s; aggregate notices skipped", session_id)
            return

        current_json = dumps(current)
        self.ctx.outbox.put(self.ctx.viewers, COLLECTIONS_STATUS, dumps(collections))
        self.ctx.outbox.put(self.ctx.viewers, COLLECTION_STATUS, session_id, current_json)
        if step_finished:
            self.ctx.outbox.put(self.ctx.worker, STEP_FINISHED, session_id, current_json)

    # ------------------------------------------------------------------
    # Snapshot
    # ------------------------------------------------------------------

    def save_json(self, model: ActionModel) -> Path:
        try:
            return save_snapshot(model, self.target_folder)
        except (OSError, TypeError, ValueError) as e:
            logger.exception("Writing %s.json to %s failed", self.name, self.target_folder)
            raise ArtifactWriteError(
                f"Could not write {self.name}.json for session {self.session_guid}",
                details={"folder": str(self.target_folder), "step": self.name},
                hint="Verifique permissões e espaço livre na pasta da sessão",
            ) from e

    # ------------------------------------------------------------------
    # Histórico (store)
    # ------------------------------------------------------------------

    def _audit_failed(self, operation: str, error: BaseException) -> None:
        logger.exception("Audit write %s failed for session %s", operation, self.session_guid)
        self.ctx.health.mark(str(self.session_guid), operation, error)

    def add_process_action(
        self,
        process_id: Optional[str] = None,
        name: Optional[str] = None,
        description: Optional[str] = None,
        result: Optional[str] = None,
    ) -> Optional[str]:
        if self.session_guid is None:
            raise PreconditionError("SessionId is empty!")

        if not description or not result:
            logger.warning("Process action for %s not registered: description and result are required", self.name)
            return None

        pid = str(process_id or uuid.uuid4())
        try:
            self.ctx.store.add_action(
                session_id=str(self.session_guid),
                name=name or self.name,
                description=description,
                result_files=result,
                process_id=pid,
            )
        except SQLAlchemyError as e:
            self._audit_failed("add_process_action", e)

        self.action_process_id = pid
        return pid

    def update_process_action(self, process_id: str, result: str, summary: Optional[str]) -> None:
        try:
            self.ctx.store.update_action(process_id, action_status=result, statistics_summary=summary)
        except (SQLAlchemyError, PreingestException) as e:
            self._audit_failed("update_process_action", e)

    def _add_state(self, process_id: str, state: ActionState, message: Optional[str] = None) -> Optional[str]:
        try:
            return self.ctx.store.add_state(process_id, state.value, message=message)
        except (SQLAlchemyError, PreingestException) as e:
            self._audit_failed(f"add_{state.value.lower()}_state", e)
            return None

    def add_start_state(self, process_id: str) -> Optional[str]:
        return self._add_state(process_id, ActionState.STARTED)

    def add_complete_state(self, process_id: str) -> Optional[str]:
        return self._add_state(process_id, ActionState.COMPLETED)

    def add_failed_state(self, process_id: str, message: str) -> Optional[str]:
        return self._add_state(process_id, ActionState.FAILED, message=message)
