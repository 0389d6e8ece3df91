# src/preingest/steps/checksum.py
"""
ContainerChecksumHandler — fixidez do arquivo contêiner.

Calcula o checksum do contêiner com o algoritmo pedido e, quando um
valor esperado é informado, compara (sem diferenciar maiúsculas).
Divergência resulta em `Error` (o Step termina Completed, mas a coleção
fica sinalizada); igualdade ou ausência de valor esperado, em `Success`.

Tipo e valor esperado vêm dos atributos do Step ou, quando ausentes, do
snapshot `SettingsHandler.json` da sessão.
"""

from __future__ import annotations

import hashlib
from pathlib import Path
from typing import Optional

from ..core.exceptions import StepConfigurationError
from ..core.lifecycle.context import ServiceContext
from ..core.lifecycle.controller import LifecycleController
from ..core.pipeline.payloads import ChecksumData
from ..core.pipeline.types import ActionModel, ActionResult, StepType
from ..status.settings_reader import read_settings

ALGORITHMS = {
    "MD5": "md5",
    "SHA1": "sha1",
    "SHA256": "sha256",
    "SHA512": "sha512",
}

CHUNK_SIZE = 1024 * 1024


def normalize_algorithm(name: str) -> str:
    key = name.strip().upper().replace("-", "")
    if key not in ALGORITHMS:
        raise StepConfigurationError(
            f"Checksum type '{name}' is not supported!",
            details={"checksum_type": name, "supported": sorted(ALGORITHMS)},
        )
    return key


def file_checksum(path: Path, algorithm: str) -> str:
    digest = hashlib.new(ALGORITHMS[normalize_algorithm(algorithm)])
    with path.open("rb") as f:
        for chunk in iter(lambda: f.read(CHUNK_SIZE), b""):
            digest.update(chunk)
    return digest.hexdigest()


class ContainerChecksumStep(LifecycleController):
    name = StepType.CONTAINER_CHECKSUM.value

    def __init__(
        self,
        ctx: ServiceContext,
        checksum_type: Optional[str] = None,
        checksum_value: Optional[str] = None,
    ):
        super().__init__(ctx)
        self.checksum_type = checksum_type
        self.checksum_value = checksum_value

    def _resolve_input(self):
        checksum_type, checksum_value = self.checksum_type, self.checksum_value
        if not checksum_type:
            stored = read_settings(self.target_folder)
            if stored is not None:
                checksum_type = stored.checksum_type
                checksum_value = checksum_value or stored.checksum_value
        if not checksum_type:
            raise StepConfigurationError("Checksum type is not set!", hint="Grave as configurações da coleção antes")
        return normalize_algorithm(checksum_type), checksum_value

    def run(self, model: ActionModel) -> None:
        algorithm, expected = self._resolve_input()
        self.progress(model, f"Calculating {algorithm} for '{self.container_filename}'.")

        calculated = file_checksum(self.target_collection, algorithm)
        data = ChecksumData(algorithm=algorithm, calculated=calculated, expected=expected or None)

        if expected:
            data.matches = calculated.lower() == expected.strip().lower()
            if data.matches:
                model.action_result = ActionResult.SUCCESS
                model.summary.record(accepted=1, rejected=0)
            else:
                model.action_result = ActionResult.ERROR
                model.summary.record(accepted=0, rejected=1)
                model.properties.messages = [
                    f"Checksum mismatch: calculated {calculated}, expected {expected.strip()}."
                ]
        else:
            model.action_result = ActionResult.SUCCESS
            model.summary.record(accepted=1, rejected=0)

        model.action_data = data
