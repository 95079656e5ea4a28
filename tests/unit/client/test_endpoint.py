from unittest.mock import AsyncMock, MagicMock, patch

import pytest

from google.genai import errors as genai_errors
from google.genai import types

from gemini_tutor.client.endpoint import (
    GeminiEndpoint,
    GenerativeEndpoint,
    MockEndpoint,
)
from gemini_tutor.client.models import EndpointRequest, InlineData, OperationKind
from gemini_tutor.config import TutorSettings
from gemini_tutor.exceptions import (
    MissingKeyError,
    NonRetryableUpstreamError,
    RateLimitedError,
)
from gemini_tutor.response import ingest, parse_response_text


def _request(kind=OperationKind.GENERATE_HINT, **kwargs) -> EndpointRequest:
    kwargs.setdefault("prompt", "prompt text")
    return EndpointRequest(kind=kind, **kwargs)


@pytest.fixture
def mock_client():
    client = MagicMock()
    client.aio.models.generate_content = AsyncMock(
        return_value=MagicMock(text='{"hint": "look again"}')
    )
    return client


@pytest.mark.unit
class TestGeminiEndpoint:
    """google-genai adapter"""

    def test_missing_key_without_client_raises(self):
        with pytest.raises(MissingKeyError, match="API Key is missing"):
            GeminiEndpoint(TutorSettings())

    def test_builds_client_from_settings(self):
        settings = TutorSettings(api_key="test-key", timeout_seconds=12.5)
        with patch("gemini_tutor.client.endpoint.genai.Client") as client_cls:
            endpoint = GeminiEndpoint(settings)

        client_cls.assert_called_once()
        kwargs = client_cls.call_args.kwargs
        assert kwargs["api_key"] == "test-key"
        assert kwargs["http_options"].timeout == 12500
        assert endpoint.client is client_cls.return_value

    def test_satisfies_protocol(self, mock_client):
        endpoint = GeminiEndpoint(TutorSettings(), client=mock_client)
        assert isinstance(endpoint, GenerativeEndpoint)

    @pytest.mark.asyncio
    async def test_generate_returns_response_text(self, mock_client):
        endpoint = GeminiEndpoint(TutorSettings(model="gemini-test"), client=mock_client)

        text = await endpoint.generate(
            _request(system_instruction="be kind", prompt="hint please")
        )

        assert text == '{"hint": "look again"}'
        call = mock_client.aio.models.generate_content.call_args
        assert call.kwargs["model"] == "gemini-test"
        assert call.kwargs["contents"] == ["hint please"]
        config = call.kwargs["config"]
        assert config.system_instruction == "be kind"
        assert config.response_mime_type == "application/json"

    @pytest.mark.asyncio
    async def test_plain_text_request_has_no_json_mime_type(self, mock_client):
        endpoint = GeminiEndpoint(TutorSettings(), client=mock_client)
        await endpoint.generate(_request(expect_json=False))
        config = mock_client.aio.models.generate_content.call_args.kwargs["config"]
        assert config.response_mime_type is None
        assert config.system_instruction is None

    @pytest.mark.asyncio
    async def test_attachments_precede_prompt(self, mock_client):
        endpoint = GeminiEndpoint(TutorSettings(), client=mock_client)
        image = InlineData(data=b"\x89PNG", mime_type="image/png")

        await endpoint.generate(
            _request(OperationKind.ANALYZE_CONTENT, attachments=(image,))
        )

        contents = mock_client.aio.models.generate_content.call_args.kwargs["contents"]
        assert len(contents) == 2
        assert isinstance(contents[0], types.Part)
        assert contents[0].inline_data.mime_type == "image/png"
        assert contents[0].inline_data.data == b"\x89PNG"
        assert contents[1] == "prompt text"

    @pytest.mark.asyncio
    async def test_none_text_is_passed_through(self, mock_client):
        mock_client.aio.models.generate_content.return_value = MagicMock(text=None)
        endpoint = GeminiEndpoint(TutorSettings(), client=mock_client)
        assert await endpoint.generate(_request()) is None

    @pytest.mark.asyncio
    async def test_quota_error_is_translated(self, mock_client):
        sdk_error = genai_errors.ClientError(
            429,
            {"error": {"code": 429, "message": "quota", "status": "RESOURCE_EXHAUSTED"}},
        )
        mock_client.aio.models.generate_content.side_effect = sdk_error
        endpoint = GeminiEndpoint(TutorSettings(), client=mock_client)

        with pytest.raises(RateLimitedError) as exc_info:
            await endpoint.generate(_request())

        assert exc_info.value.__cause__ is sdk_error
        assert exc_info.value.status_code == 429

    @pytest.mark.asyncio
    async def test_auth_error_is_translated(self, mock_client):
        mock_client.aio.models.generate_content.side_effect = genai_errors.ClientError(
            401,
            {"error": {"code": 401, "message": "bad key", "status": "UNAUTHENTICATED"}},
        )
        endpoint = GeminiEndpoint(TutorSettings(), client=mock_client)

        with pytest.raises(NonRetryableUpstreamError, match="Invalid API Key"):
            await endpoint.generate(_request())

    @pytest.mark.asyncio
    async def test_non_sdk_errors_propagate_unchanged(self, mock_client):
        mock_client.aio.models.generate_content.side_effect = ConnectionError("reset")
        endpoint = GeminiEndpoint(TutorSettings(), client=mock_client)
        with pytest.raises(ConnectionError):
            await endpoint.generate(_request())


@pytest.mark.unit
class TestMockEndpoint:
    """Deterministic offline endpoint"""

    def setup_method(self):
        self.endpoint = MockEndpoint()

    def test_satisfies_protocol(self):
        assert isinstance(self.endpoint, GenerativeEndpoint)

    @pytest.mark.asyncio
    async def test_records_requests(self):
        request = _request()
        await self.endpoint.generate(request)
        assert self.endpoint.requests == [request]

    def test_analysis_needs_fence_and_prose_removal(self):
        text = self.endpoint.respond(_request(OperationKind.ANALYZE_CONTENT))
        assert text.startswith("Here is your structured result:")
        result = parse_response_text(text)
        assert result.method == "direct"
        assert set(result.parsed_data) == {"story", "mindMap", "quiz", "flashcards"}

    def test_quiz_needs_repair(self):
        text = self.endpoint.respond(
            _request(OperationKind.REGENERATE_QUIZ, context={"topic": "Inverters"})
        )
        result = parse_response_text(text)
        assert result.was_repaired
        assert len(result.parsed_data) == 3
        assert all("question" in item for item in result.parsed_data)

    @pytest.mark.parametrize(
        ("word", "expected"),
        [
            ("HERIC", "Highly Efficient and Reliable Inverter Concept"),
            ("voltage", "'pressure'"),
            ("flux", "Contextual definition for 'flux'"),
        ],
    )
    def test_definitions(self, word, expected):
        text = self.endpoint.respond(
            _request(OperationKind.DEFINE_WORD, context={"word": word})
        )
        assert expected in ingest(text)["definition"]

    def test_debate_mentions_topic(self):
        text = self.endpoint.respond(
            _request(OperationKind.DEBATE_REPLY, context={"topic": "solar power"})
        )
        assert "solar power" in ingest(text)["rebuttal"]

    def test_expansion_children_have_no_ids(self):
        text = self.endpoint.respond(
            _request(OperationKind.EXPAND_NODE, context={"node_label": "Switching"})
        )
        children = ingest(text)
        assert len(children) == 3
        assert all("id" not in child for child in children)
        assert children[0]["label"] == "Switching: basics"

    @pytest.mark.parametrize(
        ("kind", "key"),
        [(OperationKind.GENERATE_HINT, "hint"), (OperationKind.VIVA_REPLY, "reply")],
    )
    def test_single_field_replies(self, kind, key):
        assert ingest(self.endpoint.respond(_request(kind)))[key]
