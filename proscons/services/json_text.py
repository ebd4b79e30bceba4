from __future__ import annotations

import json
import re
from typing import Any

from proscons.core.errors import ResponseParseError

FENCE_JSON = "```json"
FENCE = "```"

_FENCED_BLOCK = re.compile(r"```json\s*([\s\S]*?)\s*```")


def strip_fences(text: str) -> str:
    """Drop markdown code-fence markers a model may wrap around its JSON."""
    return (text or "").replace(FENCE_JSON, "").replace(FENCE, "").strip()


def parse_model_json(text: str) -> Any:
    """
    Proxy side: fence-strip → strict parse. No repair is attempted.
    """
    cleaned = strip_fences(text)
    try:
        return json.loads(cleaned)
    except ValueError as e:
        raise ResponseParseError(
            details=f"{type(e).__name__}: {e}. First 400 chars: {cleaned[:400]!r}"
        ) from e


def extract_json_object(text: str) -> Any:
    """
    Requester side, run once the whole stream has arrived:
    ```json block (else fence-stripped text) → first '{' .. last '}' → parse.
    """
    m = _FENCED_BLOCK.search(text or "")
    candidate = m.group(1) if m else strip_fences(text)

    start = candidate.find("{")
    end = candidate.rfind("}")
    if start == -1 or end < start:
        raise ValueError(f"No JSON object found in response. First 400 chars: {candidate[:400]!r}")

    return json.loads(candidate[start:end + 1])
