"""Incremental parser for OpenAI-style chat-completion SSE streams.

Upstream chunks do not respect line boundaries, so the parser keeps the
unterminated tail of the last chunk in ``buffer`` and only inspects complete
lines. Anything it cannot use (``[DONE]``, comments, partial or malformed JSON,
events without a content delta) is dropped silently.
"""
from __future__ import annotations

import json
from typing import Optional

DATA_PREFIX = "data: "
DONE_LINE = "data: [DONE]"


def delta_from_line(line: str) -> Optional[str]:
    line = line.rstrip("\r")
    if not line.strip() or line.strip() == DONE_LINE:
        return None
    if not line.startswith(DATA_PREFIX):
        return None

    try:
        event = json.loads(line[len(DATA_PREFIX):])
    except ValueError:
        return None

    try:
        content = event["choices"][0]["delta"]["content"]
    except (KeyError, IndexError, TypeError):
        return None
    return content if isinstance(content, str) and content else None


class SSEDeltaParser:
    def __init__(self):
        self.buffer = ""
        self.closed = False

    def feed(self, text: str) -> list[str]:
        if self.closed:
            raise RuntimeError("feed() after close()")

        self.buffer += text
        lines = self.buffer.split("\n")
        self.buffer = lines.pop()
        return self._deltas(lines)

    def close(self) -> list[str]:
        """Flush the trailing line left over when upstream ends without a newline."""
        self.closed = True
        tail, self.buffer = self.buffer, ""
        return self._deltas([tail])

    @staticmethod
    def _deltas(lines: list[str]) -> list[str]:
        out: list[str] = []
        for line in lines:
            delta = delta_from_line(line)
            if delta is not None:
                out.append(delta)
        return out
