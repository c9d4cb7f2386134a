"""AidenClient, the main entry point of the SDK.

    async with AidenClient(api_key="...", base_url="https://api.aiden.ai") as client:
        notebooks = await client.notebooks.list()
        stream = await client.knowledge.think({"message": "Hello"})
        print(await stream.text())
"""

from __future__ import annotations

from typing import Any

from aiden.config import DEFAULT_MAX_RETRIES, DEFAULT_TIMEOUT, ClientConfig
from aiden.http import EventLogger, HttpClient
from aiden.resources import (
    BillingResource,
    ChatResource,
    DocumentsResource,
    FlowsResource,
    KnowledgeResource,
    NotebooksResource,
    SkillsResource,
)


class AidenClient:
    """Typed sub-clients for the Aiden API sharing one transport."""

    def __init__(
        self,
        api_key: str | None = None,
        base_url: str | None = None,
        *,
        user_id: str | None = None,
        timeout: float = DEFAULT_TIMEOUT,
        max_retries: int = DEFAULT_MAX_RETRIES,
        transport: Any = None,
        logger: EventLogger | None = None,
        config: ClientConfig | None = None,
    ) -> None:
        if config is None:
            config = ClientConfig(
                api_key=api_key,
                base_url=base_url,
                user_id=user_id,
                timeout=timeout,
                max_retries=max_retries,
                transport=transport,
            )
        self.config = config
        self._http = HttpClient(config, logger=logger)

        self.notebooks = NotebooksResource(self._http)
        self.knowledge = KnowledgeResource(self._http)
        self.chat = ChatResource(self._http)
        self.skills = SkillsResource(self._http)
        self.billing = BillingResource(self._http)
        self.documents = DocumentsResource(self._http)
        self.flows = FlowsResource(self._http)

    @property
    def http(self) -> HttpClient:
        return self._http

    async def aclose(self) -> None:
        await self._http.aclose()

    async def __aenter__(self) -> AidenClient:
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        await self.aclose()


__all__ = ["AidenClient"]
