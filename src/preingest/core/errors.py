"""
Preingest — Estruturas canônicas de erro

Este módulo define o payload serializável de erro usado pelo núcleo
de pré-ingestão. Payloads aparecem na superfície de consulta
(`StatusService`) e nos logs estruturados do controlador.

Erros são artefatos de domínio e devem ser:

- explícitos
- serializáveis
- acionáveis
"""

from __future__ import annotations

from dataclasses import dataclass, asdict
from typing import Any, Dict, Optional

from .exceptions import PreingestException


# ---------------------------------------------------------------------------
# Payload canônico
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class PreingestErrorPayload:
    """
    Payload canônico de erro.

    Campos:
    - type: código estável do erro (não é texto livre)
    - message: mensagem curta, humana e objetiva
    - details: dados estruturados relevantes para diagnóstico
    - hint: ação sugerida ao operador
    """

    type: str
    message: str
    details: Dict[str, Any]
    hint: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        """Retorna representação serializável do erro."""
        return asdict(self)


# ---------------------------------------------------------------------------
# Catálogo de códigos
# ---------------------------------------------------------------------------

# Pré-condições
PRECONDITION_FAILED = "PRECONDITION_FAILED"
DATA_FOLDER_NOT_FOUND = "DATA_FOLDER_NOT_FOUND"
CONTAINER_NOT_FOUND = "CONTAINER_NOT_FOUND"
SESSION_NOT_FOUND = "SESSION_NOT_FOUND"

# Consultas
ACTION_NOT_FOUND = "ACTION_NOT_FOUND"

# Artefatos / Execução
ARTIFACT_WRITE_FAILED = "ARTIFACT_WRITE_FAILED"
STEP_CONFIGURATION_ERROR = "STEP_CONFIGURATION_ERROR"
STEP_EXECUTION_ERROR = "STEP_EXECUTION_ERROR"


_CODES_BY_CLASS = {
    "PreconditionError": PRECONDITION_FAILED,
    "DataFolderNotFoundError": DATA_FOLDER_NOT_FOUND,
    "ContainerNotFoundError": CONTAINER_NOT_FOUND,
    "SessionNotFoundError": SESSION_NOT_FOUND,
    "ActionNotFoundError": ACTION_NOT_FOUND,
    "ArtifactWriteError": ARTIFACT_WRITE_FAILED,
    "StepConfigurationError": STEP_CONFIGURATION_ERROR,
}


def exception_to_error(exc: BaseException) -> PreingestErrorPayload:
    """Converte exceções em PreingestErrorPayload.

    Regras:
    - PreingestException: já vem com message/details/hint; o código é
      resolvido pela classe mais específica conhecida.
    - Outras exceções: encapsular como STEP_EXECUTION_ERROR sem stack trace.
    """
    if isinstance(exc, PreingestException):
        code = STEP_EXECUTION_ERROR
        for klass in type(exc).__mro__:
            if klass.__name__ in _CODES_BY_CLASS:
                code = _CODES_BY_CLASS[klass.__name__]
                break
        return PreingestErrorPayload(
            type=code,
            message=str(exc) or "Erro de execução",
            details=dict(exc.details or {}),
            hint=exc.hint,
        )

    return PreingestErrorPayload(
        type=STEP_EXECUTION_ERROR,
        message=str(exc) or "Erro inesperado durante execução",
        details={"exception_class": exc.__class__.__name__},
        hint="Verifique o log técnico e o snapshot do Step",
    )
