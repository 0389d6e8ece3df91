# tests/status/test_aggregator.py
"""
Testes da agregação de status de coleção.

Os testes asseguram que:
- sem execuções e com plano todo Pending a coleção é New
- a prioridade Running > Failed > Error > Success é respeitada
- StartOnError em qualquer entrada Pending promove para Running, exceto Failed
"""

import pytest

from preingest.core.pipeline.types import ContainerStatus, ExecutionStatus
from preingest.persistence.status_store import ExecutionPlanEntry as Entry
from preingest.status.aggregator import compute_container_status


def test_no_actions_and_empty_plan_is_new():
    assert compute_container_status([], []) == ContainerStatus.NEW


def test_no_actions_and_pending_plan_is_new():
    plan = [Entry("A"), Entry("B")]
    assert compute_container_status(plan, []) == ContainerStatus.NEW


def test_no_actions_with_scheduled_plan_is_not_new():
    plan = [Entry("A", status=ExecutionStatus.SCHEDULED)]
    assert compute_container_status(plan, []) == ContainerStatus.NONE


@pytest.mark.parametrize(
    "results, expected",
    [
        (["Success", "Executing", "Failed"], ContainerStatus.RUNNING),
        (["Success", None], ContainerStatus.RUNNING),
        (["Success", "Failed", "Error"], ContainerStatus.FAILED),
        (["Success", "Error"], ContainerStatus.ERROR),
        (["Success", "success"], ContainerStatus.SUCCESS),
        (["Bogus"], ContainerStatus.NONE),
    ],
)
def test_priority(results, expected):
    assert compute_container_status([], results) == expected


def test_start_on_error_promotes_error_to_running():
    plan = [Entry("A", status=ExecutionStatus.DONE), Entry("B", start_on_error=True)]
    assert compute_container_status(plan, ["Error"]) == ContainerStatus.RUNNING


def test_start_on_error_never_overrides_failed():
    plan = [Entry("A", status=ExecutionStatus.DONE), Entry("B", start_on_error=True)]
    assert compute_container_status(plan, ["Failed"]) == ContainerStatus.FAILED


def test_pending_without_start_on_error_keeps_result():
    plan = [Entry("A", status=ExecutionStatus.DONE), Entry("B", start_on_error=False)]
    assert compute_container_status(plan, ["Success"]) == ContainerStatus.SUCCESS


def test_any_pending_entry_with_start_on_error_counts():
    plan = [
        Entry("A", status=ExecutionStatus.DONE),
        Entry("B", start_on_error=False),
        Entry("C", start_on_error=True),
    ]
    assert compute_container_status(plan, ["Success"]) == ContainerStatus.RUNNING


def test_start_on_error_ignored_on_non_pending_entries():
    plan = [Entry("A", status=ExecutionStatus.SCHEDULED, start_on_error=True), Entry("B", start_on_error=False)]
    assert compute_container_status(plan, ["Error"]) == ContainerStatus.ERROR
