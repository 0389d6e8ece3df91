# src/preingest/core/lifecycle/runner.py
"""
Execução de um Step por nome, na sequência usada pelo worker:
valida a sessão, registra a execução e executa.

Erros de validação da sessão (`PreconditionError` e subclasses) são
levantados antes que qualquer execução seja registrada; o chamador
decide como respondê-los.
"""

from __future__ import annotations

import logging
from typing import Optional

from .. import identity
from ..pipeline.registry import StepRegistry
from ..pipeline.types import ActionModel
from .context import ServiceContext
from .controller import LifecycleController

logger = logging.getLogger(__name__)


def start_step(
    step: LifecycleController,
    session_guid: identity.GuidLike,
    *,
    process_id: Optional[str] = None,
    description: Optional[str] = None,
) -> ActionModel:
    step.set_session_guid(session_guid)
    step.add_process_action(
        process_id,
        step.name,
        description or f"{step.name} with collection ID: {step.session_guid}",
        f"{step.name}.json",
    )
    logger.info("Running %s for %s (process %s)", step.name, step.session_guid, step.action_process_id)
    return step.execute()


def run_step(
    registry: StepRegistry,
    name: str,
    ctx: ServiceContext,
    session_guid: identity.GuidLike,
    *,
    process_id: Optional[str] = None,
    description: Optional[str] = None,
) -> ActionModel:
    step = registry.create(name, ctx)
    return start_step(step, session_guid, process_id=process_id, description=description)
