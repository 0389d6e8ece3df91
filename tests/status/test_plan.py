# tests/status/test_plan.py
"""Testes da visão do plano agendado."""

from datetime import datetime, timedelta, timezone

from preingest.core.pipeline.types import ExecutionStatus
from preingest.persistence.status_store import ExecutionPlanEntry
from preingest.status.models import ActionReadModel
from preingest.status.plan import build_scheduled_plan

T0 = datetime(2024, 1, 1, tzinfo=timezone.utc)


def _action(name, status, minutes=0):
    return ActionReadModel(
        process_id=f"{name}-{minutes}",
        session_id="s",
        name=name,
        description=None,
        creation=T0 + timedelta(minutes=minutes),
        action_status=status,
    )


def test_entries_follow_latest_action():
    entries = [
        ExecutionPlanEntry("B", sequence=1),
        ExecutionPlanEntry("A", sequence=0),
        ExecutionPlanEntry("C", sequence=2, status=ExecutionStatus.SCHEDULED, start_on_error=False),
    ]
    actions = [
        _action("A", "Failed", 0),
        _action("A", "Success", 5),
        _action("B", "Executing", 6),
    ]

    plan = build_scheduled_plan(entries, actions)

    assert [(p.action_name, p.status) for p in plan] == [
        ("A", ExecutionStatus.DONE),
        ("B", ExecutionStatus.EXECUTING),
        ("C", ExecutionStatus.SCHEDULED),
    ]
    assert plan[2].start_on_error is False


def test_rerun_in_progress_is_executing():
    plan = build_scheduled_plan(
        [ExecutionPlanEntry("A")],
        [_action("A", "Success", 0), _action("A", "Executing", 1)],
    )
    assert plan[0].status == ExecutionStatus.EXECUTING
