# src/preingest/status/aggregator.py
"""
Agregação do status de uma coleção.

`compute_container_status` deriva um único `ContainerStatus` a partir do
plano agendado e dos resultados das execuções de Step já registradas.
A função é pura: a mesma entrada produz sempre a mesma saída e nada é
persistido.

Regras, em ordem:

    1. Sem execuções e com plano vazio (ou todo Pending) → New.
    2. Entre os resultados distintos das execuções, vence o primeiro
       presente na ordem de prioridade:
           Executing / sem resultado → Running
           Failed                    → Failed
           Error                     → Error
           Success                   → Success
       Nenhum reconhecido → None.
    3. Se o resultado não é Failed e alguma entrada Pending do plano tem
       StartOnError, o status passa a Running (o scheduler vai iniciar
       essa entrada mesmo após um Error).
"""

from __future__ import annotations

from typing import Iterable, Optional, Protocol, Sequence

from ..core.pipeline.types import ActionResult, ContainerStatus, ExecutionStatus


class PlanItemLike(Protocol):
    status: ExecutionStatus
    start_on_error: bool


_PRIORITY = (
    ((ActionResult.EXECUTING, ActionResult.NONE), ContainerStatus.RUNNING),
    ((ActionResult.FAILED,), ContainerStatus.FAILED),
    ((ActionResult.ERROR,), ContainerStatus.ERROR),
    ((ActionResult.SUCCESS,), ContainerStatus.SUCCESS),
)


def _will_start_on_error(plan: Sequence[PlanItemLike]) -> bool:
    return any(p.status == ExecutionStatus.PENDING and p.start_on_error for p in plan)


def compute_container_status(
    plan: Sequence[PlanItemLike],
    action_results: Iterable[Optional[str]],
) -> ContainerStatus:
    results = list(action_results)

    if not results and all(p.status == ExecutionStatus.PENDING for p in plan):
        return ContainerStatus.NEW

    present = {ActionResult.parse(r) for r in results}

    status = ContainerStatus.NONE
    for candidates, mapped in _PRIORITY:
        if any(c in present for c in candidates):
            status = mapped
            break

    if status != ContainerStatus.FAILED and _will_start_on_error(plan):
        status = ContainerStatus.RUNNING

    return status
