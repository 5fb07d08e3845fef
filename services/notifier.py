"""
Best-effort client for the admin notification endpoint.

A submitted application is already persisted when this runs, so every
failure is logged and reported as False, never raised.
"""
from __future__ import annotations

import logging
from typing import Any, Optional

import httpx

from config import settings

logger = logging.getLogger(__name__)


class AdminNotifier:
    def __init__(
        self,
        url: str,
        timeout: float = 30.0,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.url = url
        self.timeout = timeout
        self._transport = transport

    async def notify(self, payload: dict[str, Any]) -> bool:
        try:
            async with httpx.AsyncClient(timeout=self.timeout, transport=self._transport) as client:
                response = await client.post(self.url, json=payload)
        except httpx.HTTPError as exc:
            logger.error("Error sending admin notification for %s: %s", payload.get("applicationId"), exc)
            return False

        if response.is_error:
            try:
                logger.warning("Admin notification API returned an error: %s", response.json())
            except ValueError:
                logger.warning("Admin notification API returned a non-JSON response: %s", response.text[:200])
            return False

        try:
            body = response.json()
        except ValueError:
            logger.warning("Admin notification API returned a non-JSON response: %s", response.text[:200])
            return False
        if not isinstance(body, dict) or not body.get("success"):
            logger.warning("Admin notification API returned an unexpected body: %s", str(body)[:200])
            return False

        if body.get("warning"):
            logger.warning("Admin notification accepted with warning: %s", body["warning"])
        else:
            logger.info("Admin notification sent for %s: %s", payload.get("applicationId"), body.get("messageId"))
        return True


def get_notifier() -> AdminNotifier:
    return AdminNotifier(settings.notification_url, timeout=settings.request_timeout)
