# src/preingest/core/config/loader.py
"""
Loader de configuração do serviço de pré-ingestão.

A configuração é resolvida a partir de:
    - um arquivo de defaults (obrigatório)
    - um arquivo local de overrides (opcional; ignorado quando ausente)

O formato é escolhido pela extensão do arquivo (`_READERS`). O resultado
é sempre um `dict` puro; a interpretação dos valores fica com
`settings.AppSettings`.

Limites explícitos:
    - Não lê variáveis de ambiente
    - Não valida semântica de domínio
"""

import json
from pathlib import Path
from typing import IO, Any, Callable, Dict, Optional, Union

import yaml  # PyYAML

from .errors import (
    DefaultsNotFoundError,
    InvalidConfigRootTypeError,
    UnsupportedConfigFormatError,
)
from .merge import deep_merge

PathLike = Union[str, Path]

_READERS: Dict[str, Callable[[IO[str]], Any]] = {
    ".yaml": yaml.safe_load,
    ".yml": yaml.safe_load,
    ".json": json.load,
}


def _load_file(path: Path) -> Dict[str, Any]:
    """
    Lê um arquivo de configuração e garante raiz `dict`.

    Arquivos vazios viram `{}`.

    Raises:
        DefaultsNotFoundError: arquivo inexistente.
        UnsupportedConfigFormatError: extensão sem leitor registrado.
        InvalidConfigRootTypeError: raiz diferente de dict.
    """
    if not path.is_file():
        raise DefaultsNotFoundError(f"Arquivo de configuração não encontrado: {path}")

    reader = _READERS.get(path.suffix.lower())
    if reader is None:
        raise UnsupportedConfigFormatError(
            f"Formato não suportado: {path.suffix} (aceitos: {', '.join(sorted(_READERS))})"
        )

    with path.open("r", encoding="utf-8") as f:
        data = reader(f)

    data = {} if data is None else data
    if not isinstance(data, dict):
        raise InvalidConfigRootTypeError(f"Config root deve ser dict, recebido: {type(data).__name__}")
    return data


def load_config(*, defaults_path: PathLike, local_path: Optional[PathLike] = None) -> Dict[str, Any]:
    """
    Carrega os defaults e aplica, se existir, o arquivo local por cima.

    Args:
        defaults_path: arquivo base, obrigatório.
        local_path: overrides locais; um caminho inexistente é ignorado.

    Returns:
        Dict[str, Any]: configuração efetiva.
    """
    effective = _load_file(Path(defaults_path))

    local = Path(local_path) if local_path is not None else None
    if local is not None and local.exists():
        effective = deep_merge(effective, _load_file(local))

    return effective
