# tests/steps/test_settings_step.py
"""Testes do SettingsHandler."""

import json

from preingest.core.lifecycle.runner import start_step
from preingest.core.pipeline.payloads import BodySettings
from preingest.core.pipeline.types import ActionResult
from preingest.steps import SettingsStep


def test_settings_are_saved_and_exposed(ctx, make_container, data_folder):
    _, guid = make_container()
    settings = BodySettings(checksum_type="SHA256", checksum_value="abc", schema_to_validate="topx")

    model = start_step(SettingsStep(ctx, settings), guid)

    assert model.action_result == ActionResult.SUCCESS
    raw = json.loads((data_folder / str(guid) / "SettingsHandler.json").read_text(encoding="utf-8"))
    assert raw["actionData"] == {"checksumType": "SHA256", "checksumValue": "abc", "schemaToValidate": "topx"}
    assert ctx.collections.get_collection(guid).settings == settings


def test_missing_settings_fail(ctx, make_container):
    _, guid = make_container()
    step = SettingsStep(ctx)

    model = start_step(step, guid)

    assert model.action_result == ActionResult.FAILED
    assert model.properties.messages[1] == "Settings is null!"
    assert model.summary.rejected == 1
    assert [s.name for s in ctx.store.get_action(step.action_process_id).states] == ["Started", "Failed"]
