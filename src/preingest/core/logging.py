# src/preingest/core/logging.py
"""
Configuração de logging do serviço.

Todos os módulos usam `logging.getLogger(__name__)`; este módulo apenas
instala um handler de stream no logger raiz do pacote `preingest`.
A chamada é idempotente.
"""

from __future__ import annotations

import logging
from typing import Optional

LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"

_HANDLER_NAME = "preingest.stream"


def configure_logging(level: str = "INFO", *, stream=None) -> logging.Logger:
    root = logging.getLogger("preingest")
    root.setLevel(level.upper() if isinstance(level, str) else level)

    existing: Optional[logging.Handler] = next(
        (h for h in root.handlers if h.get_name() == _HANDLER_NAME), None
    )
    if existing is None:
        handler = logging.StreamHandler(stream)
        handler.set_name(_HANDLER_NAME)
        handler.setFormatter(logging.Formatter(LOG_FORMAT))
        root.addHandler(handler)

    return root
