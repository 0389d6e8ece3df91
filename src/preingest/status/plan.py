# src/preingest/status/plan.py
"""
Visão do plano agendado de uma coleção.

O plano gravado pelo scheduler é combinado com as execuções já
registradas: uma entrada cujo Step já tem execução reporta `Executing`
enquanto essa execução não tem resultado e `Done` depois dele; entradas
sem execução mantêm o status gravado.
"""

from __future__ import annotations

from typing import Dict, List, Sequence

from ..core.pipeline.types import ExecutionStatus
from ..persistence.status_store import ExecutionPlanEntry
from .models import ActionReadModel, ScheduledPlanItem


def build_scheduled_plan(
    entries: Sequence[ExecutionPlanEntry],
    actions: Sequence[ActionReadModel],
) -> List[ScheduledPlanItem]:
    latest: Dict[str, ActionReadModel] = {}
    for action in sorted(actions, key=lambda a: a.creation):
        latest[action.name] = action

    items = []
    for entry in sorted(entries, key=lambda e: e.sequence):
        status = entry.status
        action = latest.get(entry.action_name)
        if action is not None:
            running = action.action_status == ExecutionStatus.EXECUTING.value
            status = ExecutionStatus.EXECUTING if running else ExecutionStatus.DONE
        items.append(
            ScheduledPlanItem(
                action_name=entry.action_name,
                status=status,
                continue_on_failed=entry.continue_on_failed,
                continue_on_error=entry.continue_on_error,
                start_on_error=entry.start_on_error,
            )
        )
    return items
