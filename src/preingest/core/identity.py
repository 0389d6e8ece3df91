# src/preingest/core/identity.py
"""
Resolução de identidade de sessão.

Cada contêiner entregue na pasta de dados é identificado por um GUID de
sessão derivado deterministicamente do seu nome de arquivo: o digest MD5
dos bytes UTF-8 do nome, interpretado com o layout de bytes de um GUID
(os três primeiros campos em little-endian). O mesmo nome produz sempre
o mesmo GUID, inclusive entre reinícios do processo.

Responsabilidades:
    - Derivar o GUID de sessão a partir do nome do contêiner
    - Reconhecer arquivos de contêiner (`.tar`, `.tar.gz`, `.zip`)
    - Resolver um GUID para o contêiner e a pasta de trabalho correspondentes

Invariantes:
    - `session_guid_for` é pura: não acessa filesystem nem estado
    - A pasta de trabalho de uma sessão é `<data_folder>/<guid>`

Limites explícitos:
    - Dois nomes com o mesmo digest colidem na mesma sessão; a colisão
      é aceita e não é detectada
    - Não cria pastas (ver `CollectionRegistry`)
"""

from __future__ import annotations

import hashlib
import uuid
from pathlib import Path
from typing import List, Optional, Union

CONTAINER_SUFFIXES = (".tar", ".tar.gz", ".zip")

GuidLike = Union[str, uuid.UUID]


def session_guid_for(filename: str) -> uuid.UUID:
    """Deriva o GUID de sessão a partir do nome do arquivo do contêiner."""
    digest = hashlib.md5(filename.encode("utf-8")).digest()
    return uuid.UUID(bytes_le=digest)


def parse_guid(value: GuidLike) -> Optional[uuid.UUID]:
    """Normaliza um GUID; retorna None para valores vazios, nulos ou inválidos."""
    if isinstance(value, uuid.UUID):
        return None if value.int == 0 else value
    if not value or not str(value).strip():
        return None
    try:
        parsed = uuid.UUID(str(value).strip())
    except ValueError:
        return None
    return None if parsed.int == 0 else parsed


def is_container(path: Path) -> bool:
    return path.is_file() and path.name.lower().endswith(CONTAINER_SUFFIXES)


def list_containers(data_folder: Path) -> List[Path]:
    """Lista os contêineres presentes na raiz da pasta de dados."""
    if not data_folder.is_dir():
        return []
    return sorted((p for p in data_folder.iterdir() if is_container(p)), key=lambda p: p.name)


def find_container(data_folder: Path, guid: GuidLike) -> Optional[Path]:
    """Retorna o contêiner cujo GUID derivado é `guid`, ou None."""
    target = parse_guid(guid)
    if target is None:
        return None
    for container in list_containers(data_folder):
        if session_guid_for(container.name) == target:
            return container
    return None


def session_folder(data_folder: Path, guid: GuidLike) -> Path:
    return data_folder / str(parse_guid(guid) or guid)
