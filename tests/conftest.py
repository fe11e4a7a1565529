from types import SimpleNamespace
from typing import Any, List

import httpx
import openai
import pytest

_REQUEST = httpx.Request("POST", "https://api.openai.com/v1/chat/completions")


class FakeCompletions:
    def __init__(self, outcomes: List[Any]):
        self.outcomes = list(outcomes)
        self.calls: List[dict] = []

    def create(self, **kwargs):
        self.calls.append(kwargs)
        outcome = self.outcomes.pop(0)
        if isinstance(outcome, Exception):
            raise outcome
        message = SimpleNamespace(content=outcome)
        return SimpleNamespace(choices=[SimpleNamespace(message=message)])


class FakeClient:
    """Stands in for openai.OpenAI; each outcome is a reply string or an exception to raise."""

    def __init__(self, *outcomes: Any):
        self.completions = FakeCompletions(list(outcomes))
        self.chat = SimpleNamespace(completions=self.completions)

    @property
    def calls(self) -> List[dict]:
        return self.completions.calls


class SleepRecorder:
    def __init__(self):
        self.delays: List[float] = []

    def __call__(self, seconds: float) -> None:
        self.delays.append(seconds)


@pytest.fixture
def fake_client():
    return FakeClient


@pytest.fixture
def sleeps():
    return SleepRecorder()


@pytest.fixture
def status_error():
    def _make(code: int) -> openai.APIStatusError:
        response = httpx.Response(code, request=_REQUEST)
        return openai.APIStatusError(f"HTTP {code}", response=response, body=None)

    return _make


@pytest.fixture
def timeout_error():
    def _make() -> openai.APITimeoutError:
        return openai.APITimeoutError(request=_REQUEST)

    return _make


DOVE_ROW = "| Dove Soap | Dove | Personal Care | DOV-SOAP-100 | 100g Bar | 3401 | 18 | MRP_INCLUSIVE |  | 59 | 40 |"
TABLE_HEADER = "| Product Name | Brand | Category | SKU | Unit | HSN | GST (%) | Pricing Mode | Base Price | MRP | Cost |"
TABLE_SEPARATOR = "|---|---|---|---|---|---|---|---|---|---|---|"


@pytest.fixture
def table_reply():
    def _make(*rows: str) -> str:
        return "\n".join([TABLE_HEADER, TABLE_SEPARATOR, *rows])

    return _make


@pytest.fixture
def dove_row():
    return DOVE_ROW
