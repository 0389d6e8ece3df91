# src/preingest/core/pipeline/types.py
"""
Tipos canônicos do ciclo de vida de Steps.

Este módulo define os enums e estruturas que padronizam a comunicação
entre Steps, controlador de ciclo de vida, store, snapshots JSON e
notificações.

Componentes principais:
    - ActionState      → fases do ciclo de vida (Started, Executing, Completed, Failed)
    - ActionResult     → códigos de resultado gravados na ação
    - ContainerStatus  → status derivado de uma coleção (nunca persistido)
    - ExecutionStatus  → status de uma entrada do plano de execução
    - StepType         → nomes de tipos de Step conhecidos pelo plano
    - StatisticsSummary, ActionProperties, ActionModel, LifecycleEvent

Princípios fundamentais:
    - Enums são `str` para serialização direta em JSON e no banco
    - Nenhuma lógica de execução vive neste módulo

Invariantes:
    - Em um resultado bem formado, processed = accepted + rejected
    - `ActionModel.action_data` é sempre a variante concreta do tipo do Step
      (ver `payloads.py`) ou um dicionário cru para tipos desconhecidos
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from typing import Any, List, Optional


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


class ActionState(str, Enum):
    """
    Fases do ciclo de vida de uma execução de Step.

    Apenas Started, Completed e Failed são persistidas como
    `ActionStateEvent`; Executing é um evento de progresso transitório
    (só notificação).
    """

    NONE = "None"
    STARTED = "Started"
    EXECUTING = "Executing"
    COMPLETED = "Completed"
    FAILED = "Failed"

    @property
    def is_terminal(self) -> bool:
        return self in (ActionState.COMPLETED, ActionState.FAILED)

    @property
    def is_persisted(self) -> bool:
        return self in (ActionState.STARTED, ActionState.COMPLETED, ActionState.FAILED)


class ActionResult(str, Enum):
    """Códigos de resultado de uma ação, na ordem de prioridade do agregador."""

    EXECUTING = "Executing"
    NONE = "None"
    FAILED = "Failed"
    ERROR = "Error"
    SUCCESS = "Success"

    @classmethod
    def parse(cls, value: Optional[str]) -> Optional["ActionResult"]:
        """Parse case-insensitive; vazio → NONE; desconhecido → None."""
        if value is None or not str(value).strip():
            return cls.NONE
        lowered = str(value).strip().lower()
        for member in cls:
            if member.value.lower() == lowered:
                return member
        return None


class ContainerStatus(str, Enum):
    """Status derivado de uma coleção. `NONE` é o fallback de códigos não reconhecidos."""

    NEW = "New"
    RUNNING = "Running"
    SUCCESS = "Success"
    ERROR = "Error"
    FAILED = "Failed"
    NONE = "None"


class ExecutionStatus(str, Enum):
    """Status de uma entrada do plano de execução."""

    PENDING = "Pending"
    SCHEDULED = "Scheduled"
    EXECUTING = "Executing"
    DONE = "Done"

    @classmethod
    def parse(cls, value: Optional[str]) -> "ExecutionStatus":
        lowered = (value or "").strip().lower()
        for member in cls:
            if member.value.lower() == lowered:
                return member
        return cls.PENDING


class StepType(str, Enum):
    """Tipos de Step reconhecidos pelo plano de execução."""

    SETTINGS = "SettingsHandler"
    CONTAINER_CHECKSUM = "ContainerChecksumHandler"
    EXPORTING = "ExportingHandler"
    REPORTING_PDF = "ReportingPdfHandler"
    REPORTING_DROID_XML = "ReportingDroidXmlHandler"
    REPORTING_PLANETS_XML = "ReportingPlanetsXmlHandler"
    PROFILES = "ProfilesHandler"
    ENCODING = "EncodingHandler"
    UNPACK_TAR = "UnpackTarHandler"
    METADATA_VALIDATION = "MetadataValidationHandler"
    NAMING_VALIDATION = "NamingValidationHandler"
    GREEN_LIST = "GreenListHandler"
    EXCEL_CREATOR = "ExcelCreatorHandler"
    SCAN_VIRUS = "ScanVirusValidationHandler"
    SIDECAR_VALIDATION = "SidecarValidationHandler"
    PREWASH = "PrewashHandler"
    SHOW_BUCKET = "ShowBucketHandler"
    CLEAR_BUCKET = "ClearBucketHandler"
    BUILD_OPEX = "BuildOpexHandler"
    POLISH = "PolishHandler"
    UPLOAD_BUCKET = "UploadBucketHandler"
    FILES_CHECKSUM = "FilesChecksumHandler"
    INDEX_METADATA = "IndexMetadataHandler"
    PASSWORD_DETECTION = "PasswordDetectionHandler"
    TOPX_TO_MDTO = "ToPX2MDTOHandler"
    PRONOM_PROPS = "PronomPropsHandler"
    RELATIONSHIP = "RelationshipHandler"
    FIXITY_PROPS = "FixityPropsHandler"
    BINARY_FILE_OBJECT_VALIDATION = "BinaryFileObjectValidationHandler"
    BINARY_FILE_METADATA_MUTATION = "BinaryFileMetadataMutationHandler"
    BUILD_NON_METADATA_OPEX = "BuildNonMetadataOpexHandler"
    REVERT_COLLECTION = "RevertCollectionHandler"


@dataclass
class StatisticsSummary:
    processed: int = 0
    accepted: int = 0
    rejected: int = 0
    start: Optional[datetime] = None
    end: Optional[datetime] = None

    def record(self, *, accepted: int, rejected: int) -> None:
        self.accepted = accepted
        self.rejected = rejected
        self.processed = accepted + rejected


@dataclass
class ActionProperties:
    session_id: str
    action_name: str
    collection_item: str
    messages: List[str] = field(default_factory=list)
    creation_timestamp: datetime = field(default_factory=utc_now)


@dataclass
class ActionModel:
    """
    Resultado completo de uma execução de Step.

    É o conteúdo do snapshot `<StepType>.json` e o objeto transportado
    em cada `LifecycleEvent`.
    """

    properties: ActionProperties
    summary: StatisticsSummary = field(default_factory=StatisticsSummary)
    action_result: Optional[ActionResult] = None
    action_data: Any = None


@dataclass(frozen=True)
class LifecycleEvent:
    description: str
    action_type: ActionState
    action: ActionModel
    initiate: datetime = field(default_factory=utc_now)


def messages_text(messages: List[str]) -> str:
    """Concatena as mensagens de falha na forma gravada em `StateMessage`."""
    return "".join(m for m in messages if m)

