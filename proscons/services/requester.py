"""
Python counterpart of static/script.js.

Submits a topic to ``/api/analyze`` and renders the answer into a
:class:`ResultsPanel`. Both response modes are handled: a JSON body is
rendered as-is, a text/plain stream is read to the end first and the JSON
object is reconstructed from the accumulated text.
"""
from __future__ import annotations

import logging
from contextlib import contextmanager
from dataclasses import dataclass, field
from typing import Any, Iterator, Optional

import httpx

from proscons.services.json_text import extract_json_object

logger = logging.getLogger(__name__)

GENERIC_FAILURE = "Something went wrong. Please try again."


@dataclass
class ResultsPanel:
    pros: list[str] = field(default_factory=list)
    cons: list[str] = field(default_factory=list)
    visible: bool = False
    busy: bool = False
    notice: Optional[str] = None

    def reset(self) -> None:
        self.visible = False
        self.notice = None
        self.pros.clear()
        self.cons.clear()


def _items(analysis: Any, key: str) -> list:
    value = analysis.get(key)
    if value is None:
        return []
    if not isinstance(value, list):
        raise TypeError(f"analysis.{key} must be a list, got {type(value).__name__}")
    return value


def render_results(panel: ResultsPanel, data: Any) -> None:
    # Expecting data structure: { analysis: { pros: [], cons: [] } }
    analysis = data["analysis"]
    pros = _items(analysis, "pros")
    cons = _items(analysis, "cons")

    panel.pros.clear()
    panel.cons.clear()
    panel.pros.extend(pros)
    panel.cons.extend(cons)
    panel.visible = True


class AnalysisRequester:
    def __init__(
        self,
        client: httpx.Client,
        endpoint: str = "/api/analyze",
        panel: Optional[ResultsPanel] = None,
    ):
        self.client = client
        self.endpoint = endpoint
        self.panel = panel or ResultsPanel()

    @contextmanager
    def busy(self) -> Iterator[None]:
        self.panel.busy = True
        try:
            yield
        finally:
            self.panel.busy = False

    def submit(self, topic: str) -> bool:
        topic = (topic or "").strip()
        if not topic or self.panel.busy:
            return False

        with self.busy():
            self.panel.reset()
            try:
                render_results(self.panel, self.fetch(topic))
            except Exception:
                logger.exception("Analysis request failed for topic %r", topic)
                self.panel.notice = GENERIC_FAILURE
                return False
        return True

    def fetch(self, topic: str) -> Any:
        with self.client.stream("POST", self.endpoint, json={"topic": topic}) as response:
            if not response.is_success:
                response.read()
                raise RuntimeError(f"Failed to fetch analysis: {response.status_code} {response.text[:200]}")

            if response.headers.get("content-type", "").startswith("application/json"):
                response.read()
                return response.json()

            parts = [chunk for chunk in response.iter_text()]

        return extract_json_object("".join(parts))
