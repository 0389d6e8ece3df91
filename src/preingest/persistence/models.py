# src/preingest/persistence/models.py
"""
Modelos ORM (SQLAlchemy) do histórico de execução.

Tabelas:
    - Actions  → uma linha por execução de Step (`ProcessAction`)
    - States   → transições persistidas de uma execução (Started/Completed/Failed)
    - Messages → texto de falha associado a um estado Failed
    - Plan     → plano de execução agendado por sessão

Invariantes:
    - Linhas de Actions, States e Messages são append-only; apenas
      `action_status` e `statistics_summary` de uma ação são atualizados
      (uma única vez, no estado terminal)
    - Timestamps são gravados em UTC
"""

from sqlalchemy import Boolean, Column, DateTime, ForeignKey, Integer, String, Text
from sqlalchemy.orm import declarative_base, relationship

Base = declarative_base()


class ActionRecord(Base):
    __tablename__ = "Actions"

    process_id = Column("ProcessId", String(36), primary_key=True)
    session_id = Column("FolderSessionId", String(36), nullable=False, index=True)
    name = Column("Name", String(255), nullable=False)
    description = Column("Description", Text, nullable=True)
    creation = Column("Creation", DateTime(timezone=True), nullable=False)
    action_status = Column("ActionStatus", String(50), nullable=True)
    result_files = Column("ResultFiles", Text, nullable=True)
    statistics_summary = Column("StatisticsSummary", Text, nullable=True)

    states = relationship("StateRecord", back_populates="action", order_by="StateRecord.creation")


class StateRecord(Base):
    __tablename__ = "States"

    status_id = Column("StatusId", String(36), primary_key=True)
    process_id = Column("ProcessId", String(36), ForeignKey("Actions.ProcessId"), nullable=False, index=True)
    name = Column("Name", String(50), nullable=False)
    creation = Column("Creation", DateTime(timezone=True), nullable=False)

    action = relationship("ActionRecord", back_populates="states")
    messages = relationship("MessageRecord", back_populates="state", order_by="MessageRecord.creation")


class MessageRecord(Base):
    __tablename__ = "Messages"

    message_id = Column("MessageId", String(36), primary_key=True)
    status_id = Column("StatusId", String(36), ForeignKey("States.StatusId"), nullable=False, index=True)
    description = Column("Description", Text, nullable=False)
    creation = Column("Creation", DateTime(timezone=True), nullable=False)

    state = relationship("StateRecord", back_populates="messages")


class PlanRecord(Base):
    __tablename__ = "Plan"

    record_id = Column("RecordId", Integer, primary_key=True, autoincrement=True)
    session_id = Column("SessionId", String(36), nullable=False, index=True)
    action_name = Column("ActionName", String(255), nullable=False)
    sequence = Column("Sequence", Integer, nullable=False, default=0)
    status = Column("Status", String(50), nullable=False, default="Pending")
    continue_on_failed = Column("ContinueOnFailed", Boolean, nullable=False, default=False)
    continue_on_error = Column("ContinueOnError", Boolean, nullable=False, default=False)
    start_on_error = Column("StartOnError", Boolean, nullable=False, default=True)
