# tests/core/config/test_merge.py
"""
Testes do deep-merge de configuração.

Os testes asseguram que:
- escalares são sobrescritos sem mutar os inputs
- dicionários são mesclados recursivamente
- listas são sobrescritas integralmente
- chaves opcionais (None) aceitam qualquer override
- conflitos de tipo são rejeitados explicitamente
"""

import pytest

from preingest.core.config.errors import ConfigTypeConflictError
from preingest.core.config.merge import deep_merge


def test_merge_simple_override():
    base = {"a": 1, "b": 2}
    override = {"b": 99}
    out = deep_merge(base, override)
    assert out == {"a": 1, "b": 99}
    assert base == {"a": 1, "b": 2}
    assert override == {"b": 99}


def test_merge_nested_dict():
    base = {"notifications": {"mode": "inline", "timeout_seconds": 10.0}}
    override = {"notifications": {"mode": "background"}}
    out = deep_merge(base, override)
    assert out == {"notifications": {"mode": "background", "timeout_seconds": 10.0}}


def test_merge_list_override_total():
    base = {"plan": ["SettingsHandler", "UnpackTarHandler"]}
    override = {"plan": ["ScanVirusValidationHandler"]}
    assert deep_merge(base, override) == {"plan": ["ScanVirusValidationHandler"]}


def test_merge_optional_key_accepts_value():
    base = {"notifications": {"worker_service_url": None}}
    override = {"notifications": {"worker_service_url": "http://worker:8080/api/notify"}}
    out = deep_merge(base, override)
    assert out["notifications"]["worker_service_url"] == "http://worker:8080/api/notify"


def test_merge_int_and_float_are_compatible():
    out = deep_merge({"timeout_seconds": 10.0}, {"timeout_seconds": 3})
    assert out == {"timeout_seconds": 3}


def test_merge_type_conflict_raises():
    base = {"notifications": {"mode": "inline"}}
    override = {"notifications": "background"}
    with pytest.raises(ConfigTypeConflictError):
        deep_merge(base, override)
