# src/preingest/core/pipeline/payloads.py
"""
Payloads tipados de resultado por tipo de Step (`ActionModel.action_data`).

Cada tipo de Step declara a dataclass concreta que carrega em
`action_data`. O mapeamento `PAYLOAD_TYPES` funciona como união
discriminada pelo nome do Step (`ActionProperties.action_name`): ao
reler um snapshot, `decode_action_data` reconstrói a variante correta.

Tipos de Step sem variante registrada mantêm `action_data` como
estrutura JSON crua (dict/list).

Invariantes:
    - Campos desconhecidos no JSON são ignorados na decodificação
    - A codificação segue `core.serialization` (camelCase, sem nulos)
"""

from __future__ import annotations

import dataclasses
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Type

from ..serialization import snake_keys
from .types import StepType


@dataclass
class BodySettings:
    """Parâmetros de processamento de uma coleção, gravados pelo SettingsHandler."""

    checksum_type: Optional[str] = None
    checksum_value: Optional[str] = None
    prewash: Optional[str] = None
    polish: Optional[str] = None
    merge_record_and_file: Optional[str] = None
    schema_to_validate: Optional[str] = None
    root_names_extra_xml: Optional[str] = None
    ignore_validation: Optional[str] = None


@dataclass
class ChecksumData:
    algorithm: str
    calculated: str
    expected: Optional[str] = None
    matches: Optional[bool] = None


@dataclass
class UnpackData:
    target_folder: str
    extracted: List[str] = field(default_factory=list)


PAYLOAD_TYPES: Dict[str, Type[Any]] = {
    StepType.SETTINGS.value: BodySettings,
    StepType.CONTAINER_CHECKSUM.value: ChecksumData,
    StepType.UNPACK_TAR.value: UnpackData,
}


def from_json_dict(cls: Type[Any], data: Dict[str, Any]) -> Any:
    """Constrói uma dataclass de payload a partir de um dict camelCase."""
    known = {f.name for f in dataclasses.fields(cls)}
    return cls(**{k: v for k, v in snake_keys(data).items() if k in known})


def decode_action_data(action_name: Optional[str], raw: Any) -> Any:
    if raw is None:
        return None
    cls = PAYLOAD_TYPES.get(action_name or "")
    if cls is None or not isinstance(raw, dict):
        return raw
    return from_json_dict(cls, raw)
