# src/preingest/core/pipeline/step.py
"""
Contrato de Step.

Um Step é uma unidade de processamento de pré-ingestão executada sobre
uma coleção (por exemplo: gravar configurações, verificar o checksum do
contêiner, descompactar). O núcleo trata Steps como caixas-pretas: só
enxerga este contrato.

Ciclo de uso pelo chamador:
    1. `set_session_guid(guid)`       → valida a sessão (síncrono, pode levantar)
    2. `add_process_action(...)`      → registra a execução e define `action_process_id`
    3. `execute()`                    → Started, Executing*, Completed | Failed

Invariantes:
    - `execute()` sempre termina em exatamente um evento Completed ou Failed
    - Falhas de pré-condição e de trabalho são convertidas em Failed
    - Apenas a falha de gravação do snapshot JSON escapa de `execute()`

A conformidade é verificada por duck typing (`@runtime_checkable`);
`LifecycleController` é a implementação base.
"""

from __future__ import annotations

import uuid
from typing import Optional, Protocol, runtime_checkable

from .types import ActionModel


@runtime_checkable
class PreingestStep(Protocol):
    name: str
    session_guid: Optional[uuid.UUID]
    action_process_id: Optional[str]

    @property
    def is_topx(self) -> bool:
        ...

    @property
    def is_mdto(self) -> bool:
        ...

    def set_session_guid(self, guid) -> None:
        ...

    def execute(self) -> ActionModel:
        ...

    def add_process_action(
        self,
        process_id: Optional[str] = None,
        name: Optional[str] = None,
        description: Optional[str] = None,
        result: Optional[str] = None,
    ) -> Optional[str]:
        ...

    def update_process_action(self, process_id: str, result: str, summary: Optional[str]) -> None:
        ...

    def add_start_state(self, process_id: str) -> Optional[str]:
        ...

    def add_complete_state(self, process_id: str) -> Optional[str]:
        ...

    def add_failed_state(self, process_id: str, message: str) -> Optional[str]:
        ...
