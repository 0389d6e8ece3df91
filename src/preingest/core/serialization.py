# src/preingest/core/serialization.py
"""
Serialização JSON camelCase.

Todo JSON produzido pelo núcleo (snapshots de Step, resumo estatístico
gravado na ação, notificações para viewers e worker service) segue a
mesma convenção:

    - nomes de campo de dataclasses em camelCase
    - campos None omitidos
    - enums pelo seu valor textual
    - timestamps em ISO 8601, normalizados para UTC
    - UUID e Path como string

Chaves de dicionários crus são preservadas.
"""

from __future__ import annotations

import dataclasses
import json
import uuid
from datetime import datetime, timezone
from enum import Enum
from pathlib import PurePath
from typing import Any, Dict, Optional


def camel(name: str) -> str:
    head, *tail = name.split("_")
    return head + "".join(part[:1].upper() + part[1:] for part in tail)


def snake(name: str) -> str:
    out = []
    for ch in name:
        if ch.isupper():
            out.append("_")
            out.append(ch.lower())
        else:
            out.append(ch)
    return "".join(out).lstrip("_")


def ensure_utc(dt: datetime) -> datetime:
    """Timestamps naive são assumidos como UTC."""
    if dt.tzinfo is None:
        return dt.replace(tzinfo=timezone.utc)
    return dt.astimezone(timezone.utc)


def iso(dt: datetime) -> str:
    return ensure_utc(dt).isoformat()


def parse_datetime(value: Any) -> Optional[datetime]:
    if value is None or value == "":
        return None
    if isinstance(value, datetime):
        return ensure_utc(value)
    return ensure_utc(datetime.fromisoformat(str(value).replace("Z", "+00:00")))


def to_jsonable(obj: Any) -> Any:
    if isinstance(obj, Enum):
        return obj.value
    if obj is None or isinstance(obj, (bool, int, float, str)):
        return obj
    if isinstance(obj, datetime):
        return iso(obj)
    if isinstance(obj, uuid.UUID):
        return str(obj)
    if isinstance(obj, PurePath):
        return str(obj)
    if dataclasses.is_dataclass(obj) and not isinstance(obj, type):
        out: Dict[str, Any] = {}
        for f in dataclasses.fields(obj):
            value = getattr(obj, f.name)
            if value is None:
                continue
            out[camel(f.name)] = to_jsonable(value)
        return out
    if isinstance(obj, dict):
        return {str(k): to_jsonable(v) for k, v in obj.items()}
    if isinstance(obj, (list, tuple, set, frozenset)):
        return [to_jsonable(v) for v in obj]
    raise TypeError(f"Objeto não serializável em JSON: {type(obj).__name__}")


def dumps(obj: Any, *, indent: Optional[int] = None) -> str:
    return json.dumps(to_jsonable(obj), ensure_ascii=False, indent=indent)


def snake_keys(data: Dict[str, Any]) -> Dict[str, Any]:
    """Converte as chaves de primeiro nível de camelCase para snake_case."""
    return {snake(k): v for k, v in data.items()}
