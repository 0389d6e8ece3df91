# src/preingest/steps/unpack.py
"""
UnpackTarHandler — expande o contêiner na pasta da sessão.

Suporta `.tar`, `.tar.gz` (tarfile, compressão detectada) e `.zip`
(zipfile). Membros cujo destino escaparia da pasta da sessão (caminhos
absolutos, `..`, links) fazem o Step falhar antes de qualquer extração.
"""

from __future__ import annotations

import tarfile
import zipfile
from pathlib import Path, PurePosixPath
from typing import List

from ..core.exceptions import PreconditionError
from ..core.lifecycle.controller import LifecycleController
from ..core.pipeline.payloads import UnpackData
from ..core.pipeline.types import ActionModel, ActionResult, StepType


def _checked_destination(root: Path, member_name: str) -> Path:
    if PurePosixPath(member_name).is_absolute():
        raise PreconditionError(f"Unsafe member path '{member_name}' in container!", details={"member": member_name})
    dest = (root / member_name).resolve()
    if dest != root and root not in dest.parents:
        raise PreconditionError(f"Unsafe member path '{member_name}' in container!", details={"member": member_name})
    return dest


def _extract_tar(container: Path, root: Path) -> List[str]:
    kwargs = {"filter": "data"} if hasattr(tarfile, "data_filter") else {}
    with tarfile.open(container, "r:*") as tar:
        members = tar.getmembers()
        for member in members:
            if not (member.isfile() or member.isdir()):
                raise PreconditionError(
                    f"Unsupported member type for '{member.name}' in container!",
                    details={"member": member.name},
                )
            _checked_destination(root, member.name)
        tar.extractall(root, members=members, **kwargs)
    return [m.name for m in members if m.isfile()]


def _extract_zip(container: Path, root: Path) -> List[str]:
    with zipfile.ZipFile(container) as zf:
        infos = zf.infolist()
        for info in infos:
            _checked_destination(root, info.filename)
        zf.extractall(root)
    return [i.filename for i in infos if not i.is_dir()]


class UnpackContainerStep(LifecycleController):
    name = StepType.UNPACK_TAR.value

    def started_description(self) -> str:
        return f"Unpacking container file {self.target_collection}."

    def completed_description(self) -> str:
        return "Unpacking the container is done."

    def run(self, model: ActionModel) -> None:
        container = self.target_collection
        root = self.target_folder.resolve()
        root.mkdir(parents=True, exist_ok=True)

        self.progress(model, f"Expanding '{container.name}' into {root}.")
        if container.name.lower().endswith(".zip"):
            extracted = _extract_zip(container, root)
        else:
            extracted = _extract_tar(container, root)

        model.action_data = UnpackData(target_folder=str(root), extracted=sorted(extracted))
        model.action_result = ActionResult.SUCCESS
        model.summary.record(accepted=len(extracted), rejected=0)
