# src/preingest/notifications/hub.py
"""
Fan-out de notificações para viewers conectados.

`NotificationSink` é a interface mínima de qualquer destino de
notificação (hub de viewers, cliente do worker service). `ViewerHub`
mantém uma lista de assinantes em memória; cada assinante é um callable
`(method, *args)`. A entrega é best-effort: um assinante que falha é
registrado em log e não impede a entrega aos demais.
"""

from __future__ import annotations

import logging
import threading
from typing import Any, Callable, List, Protocol, runtime_checkable

logger = logging.getLogger(__name__)

Subscriber = Callable[..., Any]


@runtime_checkable
class NotificationSink(Protocol):
    def send(self, method: str, *args: Any) -> None:
        ...


class ViewerHub:
    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._subscribers: List[Subscriber] = []

    def subscribe(self, subscriber: Subscriber) -> Callable[[], None]:
        """Registra um assinante e devolve a função que cancela o registro."""
        with self._lock:
            self._subscribers.append(subscriber)

        def _unsubscribe() -> None:
            with self._lock:
                if subscriber in self._subscribers:
                    self._subscribers.remove(subscriber)

        return _unsubscribe

    @property
    def subscriber_count(self) -> int:
        with self._lock:
            return len(self._subscribers)

    def send(self, method: str, *args: Any) -> None:
        with self._lock:
            targets = list(self._subscribers)
        for subscriber in targets:
            try:
                subscriber(method, *args)
            except Exception:
                logger.warning("Viewer delivery of %r failed", method, exc_info=True)
