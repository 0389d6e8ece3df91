# tests/status/test_service.py
"""
Testes da superfície de consulta e manutenção do histórico.

Os testes asseguram que:
- entradas inválidas levantam `PreconditionError`
- reset apaga histórico e pasta da sessão, remove apaga também o contêiner
- notify retransmite avisos externos e ignora sessões desconhecidas
"""

import json
import uuid

import pytest

from preingest.core.exceptions import ActionNotFoundError, PreconditionError, SessionNotFoundError
from preingest.core.pipeline.types import StatisticsSummary
from preingest.persistence.status_store import ExecutionPlanEntry
from preingest.status.service import StatusService


@pytest.fixture
def service(ctx):
    return StatusService(ctx)


def test_add_update_and_query_action(service, make_container):
    _, guid = make_container()

    created = service.add_action(guid, "ExportingHandler", "export run", "export.json;export.csv")
    assert created.result_files == ["export.json", "export.csv"]
    assert created.action_status == "Executing"

    updated = service.update_action(created.process_id, "Success", StatisticsSummary(processed=2, accepted=2))
    assert updated.action_status == "Success"
    assert updated.summary.accepted == 2

    service.update_action(created.process_id, "Error", {"processed": 1, "accepted": 0, "rejected": 1})
    assert service.get_action(created.process_id).summary.rejected == 1
    assert [a.process_id for a in service.get_actions(str(guid))] == [created.process_id]


def test_add_action_requires_fields(service, make_container):
    _, guid = make_container()
    with pytest.raises(PreconditionError):
        service.add_action(guid, "ExportingHandler", "", "x.json")
    with pytest.raises(PreconditionError, match="Empty session GUID is invalid."):
        service.add_action("", "ExportingHandler", "d", "x.json")


def test_empty_guid_is_rejected(service):
    with pytest.raises(PreconditionError, match="Empty GUID is invalid."):
        service.get_action("00000000-0000-0000-0000-000000000000")


def test_unknown_action(service):
    with pytest.raises(ActionNotFoundError):
        service.get_action(uuid.uuid4())


def test_states(service, make_container):
    _, guid = make_container()
    pid = service.add_action(guid, "PrewashHandler", "d", "p.json").process_id

    service.start(pid)
    service.failed(pid, "external failure")

    states = service.get_action(pid).states
    assert [s.name for s in states] == ["Started", "Failed"]
    assert states[1].messages[0].description == "external failure"


def test_add_state_rejects_unknown_names(service, make_container):
    _, guid = make_container()
    pid = service.add_action(guid, "PrewashHandler", "d", "p.json").process_id
    with pytest.raises(PreconditionError, match="Status value is required."):
        service.add_state(pid, "Executing")


def test_reset_session_keeps_container(service, ctx, make_container, data_folder):
    path, guid = make_container()
    pid = service.add_action(guid, "UnpackTarHandler", "d", "u.json").process_id
    service.start(pid)
    ctx.store.save_execution_plan(str(guid), [ExecutionPlanEntry("UnpackTarHandler")])
    ctx.health.mark(str(guid), "add_complete_state", RuntimeError("x"))
    (data_folder / str(guid) / "UnpackTarHandler.json").write_text("{}")

    assert service.reset_session(guid) == 1

    assert path.exists()
    assert ctx.store.get_actions(str(guid)) == []
    collection = service.get_collection(guid)
    assert collection.overall_status.value == "New"
    assert collection.audit_degraded is False
    assert not (data_folder / str(guid) / "UnpackTarHandler.json").exists()


def test_remove_session_deletes_container(service, make_container, data_folder):
    path, guid = make_container()

    service.remove_session(guid)

    assert not path.exists()
    assert not (data_folder / str(guid)).exists()
    with pytest.raises(SessionNotFoundError):
        service.get_collection(guid)


def test_notify_relays_terminal_notice(service, ctx, make_container):
    _, guid = make_container()
    message = {
        "eventDateTime": "2024-05-01T10:00:00Z",
        "sessionId": str(guid),
        "name": "ExportingHandler",
        "state": "completed",
        "message": "done elsewhere",
        "summary": {"processed": 1, "accepted": 1, "rejected": 0},
    }

    assert service.notify(json.dumps(message)) is True

    assert ctx.viewers.methods() == ["notice", "collectionsStatus", "collectionStatus"]
    notice = json.loads(ctx.viewers.calls[0][1][0])
    assert notice["state"] == "Completed"
    assert notice["summary"]["accepted"] == 1
    assert ctx.worker.methods() == ["stepFinished"]


def test_notify_executing_only_sends_notice(service, ctx, make_container):
    _, guid = make_container()
    assert service.notify({"sessionId": str(guid), "name": "X", "state": "Executing"}) is True
    assert ctx.viewers.methods() == ["notice"]
    assert ctx.worker.calls == []


def test_notify_unknown_session(service, ctx, make_container):
    make_container()
    assert service.notify({"sessionId": str(uuid.uuid4()), "name": "X", "state": "Started"}) is False
    assert ctx.viewers.calls == []


def test_notify_bad_state(service, make_container):
    _, guid = make_container()
    with pytest.raises(PreconditionError, match="Parsing state failed!"):
        service.notify({"sessionId": str(guid), "state": "Sleeping"})


@pytest.mark.parametrize("summary", ["not-json", "[1, 2]", '{"processed": "many"}'])
def test_update_action_rejects_unreadable_summary(service, ctx, make_container, summary):
    _, guid = make_container()
    pid = service.add_action(guid, "ExportingHandler", "d", "e.json").process_id

    with pytest.raises(PreconditionError):
        service.update_action(pid, "Success", summary)

    stored = ctx.store.get_action(pid)
    assert stored.action_status is None
    assert stored.statistics_summary is None


def test_update_action_normalizes_json_summary(service, ctx, make_container):
    _, guid = make_container()
    pid = service.add_action(guid, "ExportingHandler", "d", "e.json").process_id

    service.update_action(pid, "Success", '{"processed": 2, "accepted": 2, "rejected": 0, "extra": true}')

    assert json.loads(ctx.store.get_action(pid).statistics_summary) == {"processed": 2, "accepted": 2, "rejected": 0}
