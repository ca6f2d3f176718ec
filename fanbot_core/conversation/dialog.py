"""
Dialog engine client.

The dialog engine is an external black box: it receives the user's text and
the current context and returns an updated context plus the text to say.
"""

from abc import ABC, abstractmethod
from typing import Any, Dict, Optional

import httpx
import structlog

from .base import ConversationContext, DialogEngineError, DialogReply

logger = structlog.get_logger(__name__)


class DialogEngine(ABC):
    """Dialog engine interface."""

    @abstractmethod
    async def send(self, utterance: str, context: ConversationContext) -> DialogReply:
        """Run one round trip."""

    async def close(self) -> None:
        pass


class WatsonAssistantEngine(DialogEngine):
    """
    Watson Assistant (v1 workspace API) dialog engine.

    Uses IAM API-key basic auth and the workspace message endpoint.
    """

    def __init__(
        self,
        workspace_id: str,
        api_key: str,
        url: str = "https://gateway.watsonplatform.net/assistant/api",
        version: str = "2018-02-16",
        timeout: float = 30.0,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.workspace_id = workspace_id
        self.api_key = api_key
        self.url = url.rstrip("/")
        self.version = version
        self.timeout = timeout
        self._transport = transport
        self._client: Optional[httpx.AsyncClient] = None

    async def _get_client(self) -> httpx.AsyncClient:
        """Get or create HTTP client."""
        if self._client is None:
            self._client = httpx.AsyncClient(
                base_url=self.url,
                auth=("apikey", self.api_key),
                timeout=self.timeout,
                transport=self._transport,
            )
        return self._client

    async def send(self, utterance: str, context: ConversationContext) -> DialogReply:
        client = await self._get_client()
        body = {"input": {"text": utterance}, "context": context.to_dict()}

        try:
            response = await client.post(
                f"/v1/workspaces/{self.workspace_id}/message",
                params={"version": self.version},
                json=body,
            )
        except httpx.HTTPError as e:
            raise DialogEngineError(
                "Failed to reach dialog engine",
                details={"error": str(e)},
            ) from e

        if response.status_code != 200:
            raise DialogEngineError(
                f"Dialog engine error: {response.status_code}",
                details={"body": response.text[:200]},
            )

        try:
            data: Dict[str, Any] = response.json()
        except ValueError as e:
            raise DialogEngineError("Invalid JSON from dialog engine") from e

        if not isinstance(data, dict) or not isinstance(data.get("context") or {}, dict):
            raise DialogEngineError(
                "Unexpected dialog engine response",
                details={"body": response.text[:200]},
            )

        return DialogReply(
            context=ConversationContext(data.get("context")),
            text=first_output_text(data),
            raw=data,
        )

    async def close(self) -> None:
        """Close HTTP client."""
        if self._client:
            await self._client.aclose()
            self._client = None


def first_output_text(data: Dict[str, Any]) -> str:
    """First line of output.text, or "" when the engine says nothing."""
    output = data.get("output")
    texts = output.get("text") if isinstance(output, dict) else None
    if isinstance(texts, str):
        return texts
    if isinstance(texts, list) and texts and isinstance(texts[0], str):
        return texts[0]
    return ""
