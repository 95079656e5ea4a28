"""Tutor operation call sites.

Each public method of ``TutorService`` is one logical AI request. They all
follow the same path:

    build request -> run_with_retry(endpoint.generate) -> ingest -> validate

Hard operations (content analysis, quiz regeneration, node expansion)
propagate every failure to the caller. Soft operations (hint, definition,
viva reply, debate rebuttal) log the failure and return a fixed,
user-legible fallback string so one bad reply never blocks the UI.
"""

from collections.abc import Sequence
import logging
from typing import Any

from .client.endpoint import GeminiEndpoint, GenerativeEndpoint, MockEndpoint
from .client.models import EndpointRequest
from .client.retry import RetryPolicy, Sleep, run_with_retry
from .config import TutorSettings, load_settings
from .constants import (
    CHAT_FALLBACK,
    DEBATE_FALLBACK,
    DEFINITION_FALLBACK,
    HINT_FALLBACK,
)
from .exceptions import PayloadValidationError
from .models import (
    AnalysisResult,
    MindMapNode,
    Mood,
    QuizQuestion,
    UserSettings,
)
from .prompts import TutorPromptBuilder
from .response import ingest, validate_against_schema

log = logging.getLogger(__name__)


def _unwrap_index_item(item: Any) -> Any:
    """``{"3": {...}}`` -> ``{...}`` for list items that parsed cleanly"""
    if isinstance(item, dict) and len(item) == 1:
        key, value = next(iter(item.items()))
        if key.isdigit() and isinstance(value, dict):
            return value
    return item


def _index_values(value: Any) -> Any:
    """``{"1": {...}, "2": {...}}`` -> ``[{...}, {...}]``, anything else as-is"""
    if (
        isinstance(value, dict)
        and value
        and all(
            key.isdigit() and isinstance(item, dict) for key, item in value.items()
        )
    ):
        return list(value.values())
    return value


def _unwrap_list_field(container: Any, key: str) -> None:
    """Unwrap index keys in ``container[key]`` in place, when it is list-like."""
    if not isinstance(container, dict) or key not in container:
        return
    value = _index_values(container[key])
    if isinstance(value, list):
        container[key] = [_unwrap_index_item(item) for item in value]


def _as_list(payload: Any, *keys: str) -> list[Any]:
    """Accept a bare array or an object wrapping one under a known key"""
    payload = _index_values(payload)
    if isinstance(payload, dict):
        for key in keys:
            value = _index_values(payload.get(key))
            if isinstance(value, list):
                payload = value
                break
        else:
            values = list(payload.values())
            if len(values) == 1:
                only = _index_values(values[0])
                if isinstance(only, list):
                    payload = only
    if not isinstance(payload, list):
        raise PayloadValidationError(
            f"Expected a list, got {type(payload).__name__}", payload=payload
        )
    return [_unwrap_index_item(item) for item in payload]


def _string_field(payload: Any, key: str) -> str:
    if isinstance(payload, dict) and isinstance(payload.get(key), str):
        value = payload[key].strip()
        if value:
            return value
    raise PayloadValidationError(f"Expected a non-empty '{key}' string", payload)


class TutorService:
    """Structured AI operations for the tutoring UI"""

    def __init__(
        self,
        endpoint: GenerativeEndpoint | None = None,
        *,
        settings: TutorSettings | None = None,
        retry_policy: RetryPolicy | None = None,
        prompt_builder: TutorPromptBuilder | None = None,
        sleep: Sleep | None = None,
    ):
        if endpoint is None:
            settings = settings or load_settings()
            endpoint = (
                GeminiEndpoint(settings) if settings.use_real_api else MockEndpoint()
            )
        self.endpoint = endpoint
        self.mock_endpoint = endpoint if isinstance(endpoint, MockEndpoint) else None
        self.retry_policy = retry_policy or RetryPolicy()
        self.prompts = prompt_builder or TutorPromptBuilder()
        self._sleep = sleep
        log.debug(
            "TutorService using %s with %s.",
            type(endpoint).__name__,
            self.retry_policy,
        )

    def _endpoint_for(
        self, user_settings: UserSettings | None
    ) -> GenerativeEndpoint:
        """The configured endpoint, or the offline mock when the user asked for it"""
        if user_settings is None or not user_settings.use_mock_mode:
            return self.endpoint
        if self.mock_endpoint is None:
            self.mock_endpoint = MockEndpoint()
        return self.mock_endpoint

    async def _request(
        self,
        request: EndpointRequest,
        retry_policy: RetryPolicy | None,
        endpoint: GenerativeEndpoint | None = None,
    ) -> Any:
        """Run one request through the retry scheduler and ingestion."""
        endpoint = endpoint or self.endpoint
        raw = await run_with_retry(
            lambda: endpoint.generate(request),
            retry_policy or self.retry_policy,
            sleep=self._sleep,
        )
        return ingest(raw)

    async def _soft(self, request: EndpointRequest, key: str, fallback: str) -> str:
        try:
            payload = await self._request(request, None)
            return _string_field(payload, key)
        except Exception as e:
            log.warning(
                "%s failed, using fallback text: %s",
                request.kind.value,
                e,
                exc_info=True,
            )
            return fallback

    # --- Hard operations ---

    async def analyze_content(
        self,
        data: bytes,
        mime_type: str,
        user_settings: UserSettings | None = None,
        *,
        retry_policy: RetryPolicy | None = None,
    ) -> AnalysisResult:
        """Analyze an uploaded image or document into the full study pack.

        Raises:
            EmptyResponseError, MalformedJSONError, PayloadValidationError,
            EndpointError: Always propagated.
        """
        request = self.prompts.analyze_content(
            data, mime_type, user_settings or UserSettings()
        )
        payload = await self._request(
            request, retry_policy, self._endpoint_for(user_settings)
        )
        if isinstance(payload, dict):
            for key in ("quiz", "flashcards"):
                _unwrap_list_field(payload, key)
            _unwrap_list_field(payload.get("mindMap"), "nodes")
        return validate_against_schema(payload, AnalysisResult)

    async def regenerate_quiz(
        self,
        topic: str,
        user_settings: UserSettings | None = None,
        *,
        count: int = 3,
        retry_policy: RetryPolicy | None = None,
    ) -> list[QuizQuestion]:
        request = self.prompts.regenerate_quiz(
            topic, user_settings or UserSettings(), count
        )
        payload = await self._request(
            request, retry_policy, self._endpoint_for(user_settings)
        )
        return validate_against_schema(
            _as_list(payload, "quiz", "questions"), list[QuizQuestion]
        )

    async def expand_mind_map_node(
        self,
        root_topic: str,
        node_label: str,
        node_id: str,
        *,
        retry_policy: RetryPolicy | None = None,
    ) -> list[MindMapNode]:
        """Generate child nodes for ``node_id``.

        Every returned node is attached to ``node_id``; missing or repeated
        ids are replaced with ``"<node_id>-<n>"``.
        """
        request = self.prompts.expand_node(root_topic, node_label, node_id)
        payload = await self._request(request, retry_policy)

        items = _as_list(payload, "nodes", "subNodes", "children")
        seen: set[str] = set()
        for n, item in enumerate(items, 1):
            if not isinstance(item, dict):
                continue
            item["parentId"] = node_id
            item.pop("parent_id", None)
            child_id = item.get("id")
            if child_id in (None, "") or str(child_id) in seen:
                item["id"] = f"{node_id}-{n}"
            seen.add(str(item["id"]))
        return validate_against_schema(items, list[MindMapNode])

    # --- Soft operations ---

    async def generate_hint(
        self, question: str, wrong_answer: str, correct_answer: str, topic: str
    ) -> str:
        request = self.prompts.generate_hint(
            question, wrong_answer, correct_answer, topic
        )
        return await self._soft(request, "hint", HINT_FALLBACK)

    async def define_word(self, word: str, context: str = "") -> str:
        request = self.prompts.define_word(word, context)
        return await self._soft(request, "definition", DEFINITION_FALLBACK)

    async def get_viva_response(
        self, query: str, context: str, mood: Mood = Mood.BALANCED
    ) -> str:
        request = self.prompts.viva_reply(query, context, mood)
        return await self._soft(request, "reply", CHAT_FALLBACK)

    async def get_debate_response(
        self,
        argument: str,
        topic: str,
        history: Sequence[tuple[str, str]] = (),
    ) -> str:
        request = self.prompts.debate_reply(argument, topic, history)
        return await self._soft(request, "rebuttal", DEBATE_FALLBACK)
