# src/preingest/core/config/settings.py
"""
Configuração tipada do serviço de pré-ingestão.

`AppSettings` é a visão imutável da configuração resolvida por
`load_config`. Todos os componentes recebem `AppSettings` (ou partes
dela) via construtor; nenhum componente lê arquivos de configuração
diretamente.

Chaves reconhecidas:

    data_folder_name: ./data
    database:
      url: sqlite:///./data/preingest.db
      echo: false
    notifications:
      mode: inline            # inline | background
      worker_service_url: null
      timeout_seconds: 10.0
    logging:
      level: INFO

Invariantes:
    - `notifications.mode` é `inline` ou `background`
    - `data_folder_name` é sempre um `Path`
"""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, Optional

from .errors import InvalidConfigValueError
from .loader import load_config


NOTIFICATION_MODES = ("inline", "background")


@dataclass(frozen=True)
class AppSettings:
    data_folder_name: Path
    database_url: str = "sqlite:///:memory:"
    database_echo: bool = False
    notification_mode: str = "inline"
    worker_service_url: Optional[str] = None
    worker_timeout_seconds: float = 10.0
    log_level: str = "INFO"

    @classmethod
    def from_config(cls, cfg: Dict[str, Any]) -> "AppSettings":
        """Constrói `AppSettings` a partir do dicionário resolvido."""
        data_folder = cfg.get("data_folder_name")
        if not isinstance(data_folder, str) or not data_folder.strip():
            raise InvalidConfigValueError("data_folder_name deve ser uma string não vazia")

        database = cfg.get("database") or {}
        notifications = cfg.get("notifications") or {}
        logging_cfg = cfg.get("logging") or {}

        mode = str(notifications.get("mode", "inline")).lower()
        if mode not in NOTIFICATION_MODES:
            raise InvalidConfigValueError(
                f"notifications.mode inválido: {mode!r} (esperado: {', '.join(NOTIFICATION_MODES)})"
            )

        timeout = notifications.get("timeout_seconds", 10.0)
        if isinstance(timeout, bool) or not isinstance(timeout, (int, float)) or timeout <= 0:
            raise InvalidConfigValueError("notifications.timeout_seconds deve ser um número positivo")

        return cls(
            data_folder_name=Path(data_folder),
            database_url=str(database.get("url", "sqlite:///:memory:")),
            database_echo=bool(database.get("echo", False)),
            notification_mode=mode,
            worker_service_url=notifications.get("worker_service_url") or None,
            worker_timeout_seconds=float(timeout),
            log_level=str(logging_cfg.get("level", "INFO")).upper(),
        )


def load_settings(*, defaults_path: str, local_path: Optional[str] = None) -> AppSettings:
    return AppSettings.from_config(load_config(defaults_path=defaults_path, local_path=local_path))
