"""Strip markdown code fences from model replies."""

from __future__ import annotations

import re
from dataclasses import dataclass

_OPENING_FENCE = re.compile(r"^```[A-Za-z0-9_-]*[ \t]*\n?")
_CLOSING_FENCE = re.compile(r"\n?[ \t]*```\s*$")


def normalize_reply(raw: str | None) -> str:
    """Remove a surrounding ```lang ... ``` fence, if any, and trim. Idempotent."""
    text = (raw or "").strip()
    if not text.startswith("```"):
        return text

    text = _OPENING_FENCE.sub("", text, count=1)
    text = _CLOSING_FENCE.sub("", text, count=1)
    return text.strip()


@dataclass(frozen=True)
class RawReply:
    text: str
    was_fenced: bool

    @classmethod
    def from_text(cls, raw: str | None) -> "RawReply":
        text = raw or ""
        return cls(text=text, was_fenced=text.strip().startswith("```"))

    def clean(self) -> str:
        return normalize_reply(self.text)
