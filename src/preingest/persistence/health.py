# src/preingest/persistence/health.py
"""
Registro em memória de sessões com auditoria degradada.

Quando uma escrita de histórico (ação, estado ou mensagem) falha, o
controlador registra a falha e segue em frente; o histórico daquela
sessão fica incompleto. `AuditHealth` guarda quais sessões estão nessa
condição para que o read model exponha `auditDegraded`.

O registro vive apenas no processo: um reinício limpa o indicador.
"""

from __future__ import annotations

import threading
from dataclasses import dataclass
from datetime import datetime
from typing import Dict, List

from ..core.pipeline.types import utc_now


@dataclass(frozen=True)
class AuditFailure:
    operation: str
    error: str
    timestamp: datetime


class AuditHealth:
    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._failures: Dict[str, List[AuditFailure]] = {}

    def mark(self, session_id: str, operation: str, error: BaseException) -> None:
        failure = AuditFailure(operation=operation, error=f"{type(error).__name__}: {error}", timestamp=utc_now())
        with self._lock:
            self._failures.setdefault(str(session_id), []).append(failure)

    def is_degraded(self, session_id: str) -> bool:
        with self._lock:
            return bool(self._failures.get(str(session_id)))

    def failures(self, session_id: str) -> List[AuditFailure]:
        with self._lock:
            return list(self._failures.get(str(session_id), []))

    def clear(self, session_id: str) -> None:
        with self._lock:
            self._failures.pop(str(session_id), None)
