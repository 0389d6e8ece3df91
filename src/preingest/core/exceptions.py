# src/preingest/core/exceptions.py
"""
Preingest — Exceções canônicas

Este módulo define as exceções tipadas do núcleo de pré-ingestão.

Objetivo:
- Permitir que Steps e controlador levantem falhas semânticas tipadas
- Facilitar o mapeamento determinístico para PreingestErrorPayload
- Evitar ValueError/RuntimeError genéricos em pré-condições críticas

Taxonomia:
- PreconditionError / DataFolderNotFoundError / ContainerNotFoundError /
  SessionNotFoundError → falhas de pré-condição, levantadas de forma síncrona
  por `set_session_guid()` e `execute()`
- ActionNotFoundError → id de ação desconhecido em consultas
- ArtifactWriteError → falha ao gravar o snapshot JSON do Step (sempre propagada)
- StepConfigurationError → Step registrado ou parametrizado de forma inválida

Regras:
- Exceções carregam apenas dados estruturados (serializáveis) em `details`
- A mensagem é curta e humana
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, Optional


@dataclass(eq=False)
class PreingestException(Exception):
    """Base para exceções internas do preingest.

    Importante:
    - Sempre carregar dados estruturados em `details`
    - Não embedar stack trace em payloads de erro
    """

    message: str
    details: Dict[str, Any] = field(default_factory=dict)
    hint: Optional[str] = None

    def __post_init__(self) -> None:
        super().__init__(self.message)

    def __str__(self) -> str:
        return self.message


# ---------------------------------------------------------------------------
# Pré-condições
# ---------------------------------------------------------------------------

@dataclass(eq=False)
class PreconditionError(PreingestException):
    """Entrada inválida ou estado da sessão incompatível com o Step."""


@dataclass(eq=False)
class DataFolderNotFoundError(PreconditionError):
    """A pasta de dados configurada não existe."""


@dataclass(eq=False)
class ContainerNotFoundError(PreconditionError):
    """Nenhum contêiner corresponde ao GUID de sessão."""


@dataclass(eq=False)
class SessionNotFoundError(PreconditionError):
    """A pasta de trabalho da sessão não existe ou a sessão é desconhecida."""


# ---------------------------------------------------------------------------
# Consultas
# ---------------------------------------------------------------------------

@dataclass(eq=False)
class ActionNotFoundError(PreingestException):
    """ProcessId desconhecido no store."""


# ---------------------------------------------------------------------------
# Artefatos / Configuração
# ---------------------------------------------------------------------------

@dataclass(eq=False)
class ArtifactWriteError(PreingestException):
    """Falha ao gravar o snapshot JSON de resultado do Step."""


@dataclass(eq=False)
class StepConfigurationError(PreingestException):
    """Step registrado ou parametrizado de forma inválida."""
