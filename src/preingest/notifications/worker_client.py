# src/preingest/notifications/worker_client.py
"""
Cliente HTTP do worker service.

O worker service orquestra a execução do plano; ele é avisado sempre
que um Step termina (Completed ou Failed) para decidir o próximo passo.
O aviso é um POST JSON `{"sessionId": ..., "collection": {...}}`.

A entrega é best-effort: falhas de conexão e respostas HTTP de erro
são registradas em log e não são propagadas.
"""

from __future__ import annotations

import json
import logging
from typing import Any, Optional

import httpx

from .messages import STEP_FINISHED

logger = logging.getLogger(__name__)


class WorkerServiceClient:
    def __init__(
        self,
        url: Optional[str],
        *,
        timeout: float = 10.0,
        transport: Optional[httpx.BaseTransport] = None,
    ):
        self.url = url
        self.timeout = timeout
        self._transport = transport
        logger.info("WorkerServiceClient initialized with URL: %s, timeout: %ss", url, timeout)

    @property
    def enabled(self) -> bool:
        return bool(self.url)

    def send(self, method: str, *args: Any) -> None:
        if method != STEP_FINISHED:
            return
        session_id, collection_json = args
        self.step_finished(session_id, collection_json)

    def step_finished(self, session_id: str, collection_json: str) -> int:
        """Envia o aviso de fim de Step.

        Returns:
            int: status HTTP, ou 0 quando desabilitado ou sem conexão.
        """
        if not self.enabled:
            logger.debug("Worker service URL not configured; skipping stepFinished for %s", session_id)
            return 0

        payload = {"sessionId": str(session_id), "collection": json.loads(collection_json)}
        try:
            with httpx.Client(timeout=self.timeout, transport=self._transport) as client:
                response = client.post(
                    self.url,
                    json=payload,
                    headers={"Accept": "application/json"},
                )
                response.raise_for_status()
                logger.info("stepFinished delivered for %s. Status: %s", session_id, response.status_code)
                return response.status_code
        except httpx.HTTPStatusError as e:
            logger.error("Worker service HTTP error: %s - %s", e.response.status_code, e.response.text)
            return e.response.status_code
        except httpx.HTTPError as e:
            logger.error("Worker service connection failed: %s", e)
            return 0
