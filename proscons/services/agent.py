from __future__ import annotations

import logging
from typing import Any, AsyncIterator, Optional

import httpx

from proscons.core.errors import AllProvidersFailed, ServerMisconfigured, UpstreamHTTPError
from proscons.core.providers import ProviderConfig
from proscons.core.settings import Settings
from proscons.services.json_text import parse_model_json
from proscons.services.llm_client import ProviderClient, extract_message_content
from proscons.services.prompts import render_prompt
from proscons.services.sse import SSEDeltaParser

logger = logging.getLogger(__name__)


class ProsConsAgent:
    """Runs one topic through the provider priority table."""

    def __init__(self, settings: Settings, transport: Optional[httpx.AsyncBaseTransport] = None):
        self.settings = settings
        self._transport = transport

    def _client(self) -> ProviderClient:
        return ProviderClient(self.settings, transport=self._transport)

    # -----------------------------
    # Fallback loop
    # -----------------------------
    async def _first_success(
        self, client: ProviderClient, prompt: str, stream: bool
    ) -> tuple[ProviderConfig, httpx.Response]:
        if not self.settings.has_any_credentials():
            raise ServerMisconfigured()

        last_error: Optional[str] = None

        for cfg in self.settings.provider_configs:
            api_key = self.settings.api_key_for(cfg)
            if not api_key:
                logger.warning("Skipping %s: API key missing", cfg.provider)
                continue

            logger.info("Attempting with provider: %s, model: %s", cfg.provider, cfg.model_id)
            try:
                response = await client.send(cfg, api_key, prompt, stream=stream)
            except httpx.HTTPError as e:
                logger.error("Fetch error for %s (%s): %s", cfg.model_id, cfg.provider, e)
                last_error = f"{cfg.provider} transport error: {type(e).__name__}: {e}"
                continue

            if not response.is_success:
                err = UpstreamHTTPError(cfg.provider, response.status_code, response.text)
                logger.warning("Model %s (%s) failed: %s", cfg.model_id, cfg.provider, err)
                last_error = str(err)
                continue

            return cfg, response

        raise AllProvidersFailed(details=last_error)

    # -----------------------------
    # Non-streaming
    # -----------------------------
    async def analyze(self, topic: str) -> Any:
        prompt = render_prompt(topic)
        async with self._client() as client:
            cfg, response = await self._first_success(client, prompt, stream=False)

        content = extract_message_content(response)
        logger.info("Got %d chars from %s", len(content), cfg.provider)
        return parse_model_json(content)

    # -----------------------------
    # Streaming
    # -----------------------------
    async def open_stream(self, topic: str) -> "StreamRelay":
        """
        Pick a provider, then hand back a relay of its content deltas.

        Provider selection finishes before this returns so that failures are
        still reported as normal JSON errors rather than a broken stream.
        """
        prompt = render_prompt(topic)
        client = self._client()
        try:
            cfg, response = await self._first_success(client, prompt, stream=True)
        except BaseException:
            await client.aclose()
            raise
        return StreamRelay(client, cfg, response)


class StreamRelay:
    """Async iterable of content deltas from one upstream SSE response.

    ``aclose()`` releases the upstream response and client; it is safe to call
    more than once and also works when iteration never started.
    """

    def __init__(self, client: ProviderClient, cfg: ProviderConfig, response: httpx.Response):
        self.cfg = cfg
        self._client = client
        self._response = response

    async def __aiter__(self) -> AsyncIterator[str]:
        parser = SSEDeltaParser()
        try:
            async for text in self._response.aiter_text():
                for delta in parser.feed(text):
                    yield delta
            for delta in parser.close():
                yield delta
        except Exception:
            logger.exception("Stream reading error from %s", self.cfg.provider)
            raise
        finally:
            await self.aclose()

    async def aclose(self) -> None:
        await self._response.aclose()
        await self._client.aclose()
