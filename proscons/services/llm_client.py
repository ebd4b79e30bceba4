from __future__ import annotations

from typing import Any, Optional

import httpx

from proscons.core.errors import UpstreamProtocolError
from proscons.core.providers import ProviderConfig
from proscons.core.settings import Settings


def build_payload(cfg: ProviderConfig, prompt: str, stream: bool) -> dict[str, Any]:
    return {
        "model": cfg.model_id,
        "messages": [{"role": "user", "content": prompt}],
        "stream": stream,
    }


def build_headers(cfg: ProviderConfig, api_key: str, settings: Settings) -> dict[str, str]:
    headers = {
        "Authorization": f"Bearer {api_key}",
        "Content-Type": "application/json",
    }
    if cfg.endpoint.attribution:
        headers["HTTP-Referer"] = settings.app_referer
        headers["X-Title"] = settings.app_title
    return headers


def extract_message_content(response: httpx.Response) -> str:
    """choices[0].message.content of a non-streamed completion."""
    try:
        body = response.json()
        message = body["choices"][0]["message"]
    except (ValueError, KeyError, IndexError, TypeError) as e:
        raise UpstreamProtocolError(
            details=f"{type(e).__name__}: {e}. First 400 chars: {response.text[:400]!r}"
        ) from e

    content = message.get("content") if isinstance(message, dict) else None
    if not isinstance(content, str):
        raise UpstreamProtocolError(details="choices[0].message has no text content")
    return content


class ProviderClient:
    """Thin async wrapper around one httpx client for chat-completion calls.

    A client lives for a single analysis request and must be closed by
    whoever ends up owning the response (the relay, for streamed answers).
    """

    def __init__(self, settings: Settings, transport: Optional[httpx.AsyncBaseTransport] = None):
        self._settings = settings
        self._http = httpx.AsyncClient(
            timeout=httpx.Timeout(settings.llm_request_timeout_s),
            transport=transport,
        )

    async def __aenter__(self) -> "ProviderClient":
        return self

    async def __aexit__(self, *exc) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        await self._http.aclose()

    async def send(self, cfg: ProviderConfig, api_key: str, prompt: str, stream: bool) -> httpx.Response:
        """
        POST one completion request.

        The body is left unread only for a successful streamed response; in
        every other case it is read and the response closed before returning,
        so transport errors surface here rather than later.
        """
        request = self._http.build_request(
            "POST",
            cfg.endpoint.api_url,
            headers=build_headers(cfg, api_key, self._settings),
            json=build_payload(cfg, prompt, stream),
        )
        response = await self._http.send(request, stream=True)

        if not stream or not response.is_success:
            try:
                await response.aread()
            finally:
                await response.aclose()
        return response
