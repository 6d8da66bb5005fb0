import logging
from typing import Any

import requests

from .config import (
    CONVERSATION_PASSWORD,
    CONVERSATION_URL,
    CONVERSATION_USERNAME,
    CONVERSATION_VERSION_DATE,
    REQUEST_TIMEOUT_SECONDS,
)

LOGGER = logging.getLogger("weather_bridge.conversation")


class ConversationServiceError(Exception):
    """Upstream failure, relayed to the client with the upstream status code."""

    def __init__(self, code: Any, error: dict[str, Any]) -> None:
        super().__init__(str(error.get("error") or error))
        self.code = code if isinstance(code, int) and code else 500
        self.error = error


class ConversationService:
    """Client for the Watson Conversation v1 message API."""

    def __init__(
        self,
        url: str = CONVERSATION_URL,
        username: str = CONVERSATION_USERNAME,
        password: str = CONVERSATION_PASSWORD,
        version_date: str = CONVERSATION_VERSION_DATE,
        timeout: float = REQUEST_TIMEOUT_SECONDS,
    ) -> None:
        self.url = url.rstrip("/")
        self.username = username
        self.password = password
        self.version_date = version_date
        self.timeout = timeout

    def message(
        self,
        workspace_id: str,
        input: dict[str, Any] | None = None,
        context: dict[str, Any] | None = None,
    ) -> dict[str, Any]:
        payload: dict[str, Any] = {"context": context or {}}
        if input:
            payload["input"] = input

        endpoint = f"{self.url}/v1/workspaces/{workspace_id}/message"
        try:
            response = requests.post(
                endpoint,
                params={"version": self.version_date},
                json=payload,
                auth=(self.username, self.password),
                timeout=self.timeout,
            )
        except requests.RequestException as exc:
            LOGGER.warning("conversation request failed: %s", exc)
            raise ConversationServiceError(500, {"error": str(exc)}) from exc

        try:
            body = response.json()
        except ValueError:
            body = None

        if response.status_code != 200:
            if not isinstance(body, dict):
                body = {"error": response.text, "code": response.status_code}
            raise ConversationServiceError(body.get("code") or response.status_code, body)
        if not isinstance(body, dict):
            raise ConversationServiceError(502, {"error": "Malformed response from the conversation service"})
        return body
