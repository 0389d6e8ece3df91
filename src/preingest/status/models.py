# src/preingest/status/models.py
"""
Read models expostos a viewers e ao worker service.

São montados a cada leitura a partir do filesystem (contêiner e pasta
da sessão) e do store; nunca são persistidos.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from typing import List, Optional

from ..core.pipeline.payloads import BodySettings
from ..core.pipeline.types import ContainerStatus, ExecutionStatus, StatisticsSummary


@dataclass(frozen=True)
class MessageReadModel:
    message_id: str
    description: str
    creation: datetime


@dataclass(frozen=True)
class StateReadModel:
    status_id: str
    name: str
    creation: datetime
    messages: List[MessageReadModel] = field(default_factory=list)


@dataclass(frozen=True)
class ActionReadModel:
    process_id: str
    session_id: str
    name: str
    description: Optional[str]
    creation: datetime
    action_status: str
    result_files: List[str] = field(default_factory=list)
    summary: Optional[StatisticsSummary] = None
    states: List[StateReadModel] = field(default_factory=list)


@dataclass(frozen=True)
class ScheduledPlanItem:
    action_name: str
    status: ExecutionStatus
    continue_on_failed: bool = False
    continue_on_error: bool = False
    start_on_error: bool = True


@dataclass(frozen=True)
class CollectionReadModel:
    name: str
    session_id: str
    creation_time: datetime
    last_write_time: datetime
    last_access_time: datetime
    size: int
    overall_status: ContainerStatus
    settings: Optional[BodySettings] = None
    scheduled_plan: List[ScheduledPlanItem] = field(default_factory=list)
    preingest: List[ActionReadModel] = field(default_factory=list)
    audit_degraded: bool = False

