# src/preingest/steps/settings.py
"""
SettingsHandler — grava os parâmetros de processamento da coleção.

O resultado (`BodySettings`) fica no snapshot `SettingsHandler.json`,
lido depois pelo registry de coleções e por Steps que dependem de
parâmetros (ex.: tipo e valor esperado de checksum).
"""

from __future__ import annotations

from typing import Optional

from ..core.exceptions import StepConfigurationError
from ..core.lifecycle.context import ServiceContext
from ..core.lifecycle.controller import LifecycleController
from ..core.pipeline.payloads import BodySettings
from ..core.pipeline.types import ActionModel, ActionResult, StepType


class SettingsStep(LifecycleController):
    name = StepType.SETTINGS.value

    def __init__(self, ctx: ServiceContext, settings: Optional[BodySettings] = None):
        super().__init__(ctx)
        self.current_settings = settings

    def started_description(self) -> str:
        return f"Saving settings for folder '{self.session_guid}'."

    def completed_description(self) -> str:
        return "Saving settings is done."

    def failure_headline(self) -> str:
        return f"Saving settings for folder '{self.target_collection}' failed!"

    def run(self, model: ActionModel) -> None:
        if self.current_settings is None:
            raise StepConfigurationError("Settings is null!", hint="Informe BodySettings antes de executar o Step")
        model.action_data = self.current_settings
        model.action_result = ActionResult.SUCCESS
        model.summary.record(accepted=1, rejected=0)
