# src/preingest/core/config/merge.py
"""
Deep-merge de configuração (defaults ← arquivo local).

Política por chave:
    - dict + dict      → merge recursivo
    - list             → substituição completa
    - None em um lado  → substituição (chaves opcionais, ex. worker_service_url)
    - int / float      → compatíveis entre si (bool não conta como número)
    - mesmo tipo       → substituição
    - tipos diferentes → `ConfigTypeConflictError`

Nenhum input é mutado.
"""

from copy import deepcopy
from typing import Any, Dict

from .errors import ConfigTypeConflictError


def _is_number(value: Any) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool)


def _compatible(base_value: Any, override_value: Any) -> bool:
    if base_value is None or override_value is None:
        return True
    if isinstance(override_value, list):
        return True
    if _is_number(base_value) and _is_number(override_value):
        return True
    return type(base_value) is type(override_value)


def _merge_value(key: str, base_value: Any, override_value: Any) -> Any:
    if isinstance(base_value, dict) and isinstance(override_value, dict):
        return deep_merge(base_value, override_value)
    if not _compatible(base_value, override_value):
        raise ConfigTypeConflictError(
            f"Conflito de tipo na chave '{key}': "
            f"{type(base_value).__name__} vs {type(override_value).__name__}"
        )
    return deepcopy(override_value)


def deep_merge(base: Dict[str, Any], override: Dict[str, Any]) -> Dict[str, Any]:
    """
    Retorna um novo dict com `override` aplicado sobre `base`.

    Raises:
        ConfigTypeConflictError: raiz não-dict ou conflito de tipo numa chave.
    """
    if not isinstance(base, dict) or not isinstance(override, dict):
        raise ConfigTypeConflictError(
            f"Deep-merge requer dicts no nível raiz, recebido: "
            f"{type(base).__name__} vs {type(override).__name__}"
        )

    result: Dict[str, Any] = deepcopy(base)
    for key, override_value in override.items():
        if key in result:
            result[key] = _merge_value(key, result[key], override_value)
        else:
            result[key] = deepcopy(override_value)
    return result
