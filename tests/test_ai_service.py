import pytest

from bloomcare.config.llm_config import has_valid_api_key
from bloomcare.services.ai_service import AIService, AIServiceError

from .conftest import FakeLLM, FailingLLM


class _RawResponse:
    def __init__(self, raw):
        self.raw = raw


def test_requires_llm():
    with pytest.raises(ValueError):
        AIService(None)


def test_generate_returns_stripped_text():
    assert AIService(FakeLLM("  hello  \n")).generate("prompt") == "hello"


def test_generate_unwraps_raw_attribute():
    assert AIService(FakeLLM(_RawResponse("from raw"))).generate("prompt") == "from raw"


def test_generate_wraps_backend_errors():
    with pytest.raises(AIServiceError, match="backend unreachable"):
        AIService(FailingLLM()).generate("prompt")


@pytest.mark.parametrize("response", [None, "", "   "])
def test_empty_response_is_an_error(response):
    with pytest.raises(AIServiceError):
        AIService(FakeLLM(response)).generate("prompt")


def test_ping():
    assert AIService(FakeLLM("Hello there, how are you")).ping() is True
    assert AIService(FailingLLM()).ping() is False


@pytest.mark.parametrize(
    "key, expected",
    [
        (None, False),
        ("", False),
        ("short", False),
        ("your-gemini-api-key-here", False),
        ("AIzaSyExampleKey123", True),
    ],
)
def test_has_valid_api_key(key, expected):
    assert has_valid_api_key(key) is expected
