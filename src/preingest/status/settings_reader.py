# src/preingest/status/settings_reader.py
"""Leitura das configurações de processamento gravadas pelo SettingsHandler."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Optional

from ..core.pipeline.payloads import BodySettings
from ..core.pipeline.types import StepType
from ..core.traceability.snapshot import load_snapshot, snapshot_path

logger = logging.getLogger(__name__)


def read_settings(session_folder: Path) -> Optional[BodySettings]:
    path = snapshot_path(session_folder, StepType.SETTINGS.value)
    if not path.exists():
        return None
    try:
        model = load_snapshot(path)
    except (OSError, ValueError, TypeError, AttributeError):
        # snapshot ilegível não derruba a listagem de coleções
        logger.warning("Unreadable settings snapshot %s", path, exc_info=True)
        return None
    return model.action_data if isinstance(model.action_data, BodySettings) else None
