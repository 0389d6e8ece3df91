# src/preingest/core/traceability/snapshot.py
"""
Snapshot JSON de resultado de Step.

Ao final de cada execução (Completed ou Failed) o controlador grava o
`ActionModel` completo em `<pasta da sessão>/<TipoDoStep>.json`,
sobrescrevendo execuções anteriores do mesmo tipo. O snapshot é o
artefato que viewers e Steps posteriores leem (por exemplo, o
`SettingsHandler.json` consultado pelo registry de coleções).

Formato:
    - camelCase, campos None omitidos (ver `core.serialization`)
    - indentado, UTF-8

Decisões arquiteturais:
    - A escrita cria diretórios intermediários quando necessário
    - A leitura reconstrói a variante tipada de `actionData` a partir do
      nome do Step (`payloads.decode_action_data`)

Limites explícitos:
    - Não registra eventos nem toca no banco
    - Não trata falhas de I/O; a política de propagação é do controlador
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any, Dict, Optional

from ..pipeline.payloads import decode_action_data
from ..pipeline.types import ActionModel, ActionProperties, ActionResult, StatisticsSummary
from ..serialization import dumps, parse_datetime


def snapshot_path(folder: Path, action_name: str) -> Path:
    return Path(folder) / f"{action_name}.json"


def save_snapshot(model: ActionModel, folder: Path) -> Path:
    """Grava o snapshot e retorna o caminho escrito.

    Raises:
        OSError: falha ao criar diretórios ou escrever o arquivo.
    """
    path = snapshot_path(folder, model.properties.action_name)
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(dumps(model, indent=2), encoding="utf-8")
    return path


def summary_from_dict(data: Optional[Dict[str, Any]]) -> Optional[StatisticsSummary]:
    if not data:
        return None
    return StatisticsSummary(
        processed=int(data.get("processed", 0)),
        accepted=int(data.get("accepted", 0)),
        rejected=int(data.get("rejected", 0)),
        start=parse_datetime(data.get("start")),
        end=parse_datetime(data.get("end")),
    )


def summary_from_json(text: Optional[str]) -> Optional[StatisticsSummary]:
    if not text:
        return None
    return summary_from_dict(json.loads(text))


def action_model_from_dict(data: Dict[str, Any]) -> ActionModel:
    props = data.get("properties") or {}
    properties = ActionProperties(
        session_id=str(props.get("sessionId", "")),
        action_name=str(props.get("actionName", "")),
        collection_item=str(props.get("collectionItem", "")),
        messages=list(props.get("messages") or []),
        creation_timestamp=parse_datetime(props.get("creationTimestamp")),
    )
    result = data.get("actionResult")
    return ActionModel(
        properties=properties,
        summary=summary_from_dict(data.get("summary")) or StatisticsSummary(),
        action_result=ActionResult.parse(result) if result is not None else None,
        action_data=decode_action_data(properties.action_name, data.get("actionData")),
    )


def load_snapshot(path: Path) -> ActionModel:
    """
    Raises:
        OSError: falha de leitura.
        json.JSONDecodeError: JSON inválido.
    """
    return action_model_from_dict(json.loads(Path(path).read_text(encoding="utf-8")))
