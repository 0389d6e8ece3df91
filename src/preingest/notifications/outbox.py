# src/preingest/notifications/outbox.py
"""
Outbox ordenado de notificações (commit-then-notify).

O controlador de ciclo de vida enfileira as notificações de um evento
somente depois que as escritas correspondentes no banco foram
confirmadas. O outbox entrega as mensagens na ordem exata de
enfileiramento (FIFO), em um de dois modos:

    - inline      → `flush()` entrega tudo na thread do chamador; o
                    controlador chama `flush()` antes de liberar seu lock,
                    de modo que a entrega é síncrona do ponto de vista do Step
    - background  → uma única thread daemon drena a fila; `flush()` não
                    bloqueia e um transporte lento não segura o lock do Step

Invariantes:
    - A ordem de entrega é a ordem de `put()`, em ambos os modos
    - Falha de um destino é registrada em log e não interrompe a fila
"""

from __future__ import annotations

import logging
import queue
import threading
from dataclasses import dataclass
from typing import Any, Optional, Tuple

from .hub import NotificationSink

logger = logging.getLogger(__name__)

INLINE = "inline"
BACKGROUND = "background"


@dataclass(frozen=True)
class OutboxMessage:
    sink: NotificationSink
    method: str
    args: Tuple[Any, ...]


_STOP = object()


class NotificationOutbox:
    def __init__(self, mode: str = INLINE):
        if mode not in (INLINE, BACKGROUND):
            raise ValueError(f"Unknown outbox mode: {mode!r}")
        self.mode = mode
        self._queue: "queue.Queue[Any]" = queue.Queue()
        self._deliver_lock = threading.Lock()
        self._worker: Optional[threading.Thread] = None
        if mode == BACKGROUND:
            self._worker = threading.Thread(target=self._run, name="preingest-outbox", daemon=True)
            self._worker.start()

    @property
    def running(self) -> bool:
        return self._worker is not None and self._worker.is_alive()

    def put(self, sink: Optional[NotificationSink], method: str, *args: Any) -> None:
        if sink is None:
            return
        self._queue.put(OutboxMessage(sink=sink, method=method, args=args))

    def flush(self) -> None:
        """No modo inline, entrega tudo o que está na fila antes de retornar."""
        if self.mode != INLINE:
            return
        with self._deliver_lock:
            while True:
                try:
                    item = self._queue.get_nowait()
                except queue.Empty:
                    return
                try:
                    self._deliver(item)
                finally:
                    self._queue.task_done()

    def join(self) -> None:
        """Aguarda até que todas as mensagens enfileiradas tenham sido entregues."""
        self.flush()
        self._queue.join()

    def close(self, timeout: Optional[float] = 5.0) -> None:
        if self._worker is None:
            self.flush()
            return
        self._queue.put(_STOP)
        self._worker.join(timeout)
        self._worker = None

    def _run(self) -> None:
        while True:
            item = self._queue.get()
            try:
                if item is _STOP:
                    return
                self._deliver(item)
            finally:
                self._queue.task_done()

    @staticmethod
    def _deliver(message: OutboxMessage) -> None:
        try:
            message.sink.send(message.method, *message.args)
        except Exception:
            logger.warning("Delivery of %r to %s failed", message.method, type(message.sink).__name__, exc_info=True)
