# tests/persistence/test_status_store.py
"""
Testes do store relacional (Actions / States / Messages / Plan).

Os testes asseguram que:
- ações, estados e mensagens são gravados e relidos com seus vínculos
- ids desconhecidos levantam `ActionNotFoundError`
- o plano é substituído por inteiro e mantém a ordem recebida
- `delete_session` apaga apenas o histórico da sessão informada
"""

import pytest

from preingest.core.exceptions import ActionNotFoundError
from preingest.core.pipeline.types import ExecutionStatus
from preingest.persistence import DatabaseManager, ExecutionPlanEntry, StatusStore

SESSION = "5e1f3c2a-9b8d-4e7f-a6c5-b4d3e2f1a0b9"
OTHER = "a0b1c2d3-e4f5-4a6b-8c7d-9e0f1a2b3c4d"


def test_in_memory_database_is_shared_between_sessions():
    db = DatabaseManager("sqlite:///:memory:")
    db.create_tables()
    store = StatusStore(db)
    pid = store.add_action(session_id=SESSION, name="SettingsHandler", description="d")
    assert store.get_action(pid).name == "SettingsHandler"
    db.dispose()


def test_add_action_and_states(store):
    pid = store.add_action(session_id=SESSION, name="UnpackTarHandler", description="unpack", result_files="a.json")

    store.add_state(pid, "Started")
    store.add_state(pid, "Failed", message="boom")

    action = store.get_action(pid)
    assert action.session_id == SESSION
    assert action.action_status is None
    assert action.result_files == "a.json"
    assert [s.name for s in action.states] == ["Started", "Failed"]
    assert action.states[0].messages == []
    assert [m.description for m in action.states[1].messages] == ["boom"]
    assert action.creation.tzinfo is not None


def test_explicit_process_id_is_kept(store):
    pid = store.add_action(session_id=SESSION, name="n", description="d", process_id="fixed-id")
    assert pid == "fixed-id"


def test_update_action(store):
    pid = store.add_action(session_id=SESSION, name="n", description="d")
    store.update_action(pid, action_status="Success", statistics_summary='{"processed": 1}')

    action = store.get_action(pid)
    assert action.action_status == "Success"
    assert action.statistics_summary == '{"processed": 1}'


def test_unknown_action_raises(store):
    with pytest.raises(ActionNotFoundError, match="not found"):
        store.get_action("missing")
    with pytest.raises(ActionNotFoundError):
        store.update_action("missing", action_status="Success", statistics_summary=None)
    with pytest.raises(ActionNotFoundError):
        store.add_state("missing", "Started")


def test_get_actions_filters_by_session(store):
    a = store.add_action(session_id=SESSION, name="first", description="d")
    b = store.add_action(session_id=SESSION, name="second", description="d")
    store.add_action(session_id=OTHER, name="other", description="d")

    assert [x.process_id for x in store.get_actions(SESSION)] == [a, b]


def test_execution_plan_is_replaced(store):
    store.save_execution_plan(SESSION, [ExecutionPlanEntry("A"), ExecutionPlanEntry("B", start_on_error=False)])
    store.save_execution_plan(SESSION, [ExecutionPlanEntry("C", sequence=1), ExecutionPlanEntry("D", sequence=0)])

    plan = store.get_execution_plan(SESSION)
    assert [(p.action_name, p.sequence) for p in plan] == [("D", 0), ("C", 1)]
    assert all(p.status == ExecutionStatus.PENDING for p in plan)


def test_update_plan_status(store):
    store.save_execution_plan(SESSION, [ExecutionPlanEntry("A"), ExecutionPlanEntry("B")])

    assert store.update_plan_status(SESSION, "B", ExecutionStatus.SCHEDULED) == 1
    assert store.update_plan_status(SESSION, "Z", ExecutionStatus.DONE) == 0
    assert [p.status for p in store.get_execution_plan(SESSION)] == [ExecutionStatus.PENDING, ExecutionStatus.SCHEDULED]


def test_delete_session_only_touches_that_session(store):
    pid = store.add_action(session_id=SESSION, name="n", description="d")
    store.add_state(pid, "Failed", message="x")
    keep = store.add_action(session_id=OTHER, name="n", description="d")
    store.add_state(keep, "Started")
    store.save_execution_plan(SESSION, [ExecutionPlanEntry("A")])

    assert store.delete_session(SESSION) == 1

    assert store.get_actions(SESSION) == []
    assert store.get_execution_plan(SESSION) == []
    assert [s.name for s in store.get_action(keep).states] == ["Started"]


def test_equal_sequences_keep_write_order(store):
    store.save_execution_plan(SESSION, [ExecutionPlanEntry("B"), ExecutionPlanEntry("A")])
    assert [p.action_name for p in store.get_execution_plan(SESSION)] == ["B", "A"]
