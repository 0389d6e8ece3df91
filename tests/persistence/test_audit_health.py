# tests/persistence/test_audit_health.py
"""Testes do registro de sessões com histórico degradado."""

from preingest.persistence.health import AuditHealth


def test_mark_and_clear():
    health = AuditHealth()
    assert not health.is_degraded("s1")

    health.mark("s1", "add_start_state", RuntimeError("db down"))
    health.mark("s1", "add_complete_state", RuntimeError("db down"))

    assert health.is_degraded("s1")
    assert not health.is_degraded("s2")
    assert [f.operation for f in health.failures("s1")] == ["add_start_state", "add_complete_state"]

    health.clear("s1")
    assert not health.is_degraded("s1")
    assert health.failures("s1") == []
