"""Generative endpoint adapters.

The ingestion layer only needs ``await endpoint.generate(request)`` returning
raw text (or None). Two adapters are provided:

- ``GeminiEndpoint`` wraps the google-genai async client and re-raises SDK
  failures as ``EndpointError`` subclasses carrying a structured ``kind``;
- ``MockEndpoint`` returns deterministic, deliberately untidy text (fences,
  prose, trailing commas, index keys) so the full ingestion path runs
  without network access.
"""

import json
import logging
from typing import Protocol, runtime_checkable

from google import genai
from google.genai import errors as genai_errors
from google.genai import types

from ..config import TutorSettings, load_settings
from ..constants import JSON_MIME_TYPE
from ..exceptions import MissingKeyError
from .error_handler import GenerationErrorHandler
from .models import EndpointRequest, OperationKind

log = logging.getLogger(__name__)


@runtime_checkable
class GenerativeEndpoint(Protocol):
    """Anything that turns an ``EndpointRequest`` into raw response text"""

    async def generate(self, request: EndpointRequest) -> str | None: ...


class GeminiEndpoint:
    """Endpoint backed by the Gemini API through google-genai"""

    def __init__(
        self,
        settings: TutorSettings | None = None,
        *,
        client: genai.Client | None = None,
        error_handler: GenerationErrorHandler | None = None,
    ):
        self.settings = settings or load_settings()
        if client is None:
            if not self.settings.api_key:
                raise MissingKeyError("API Key is missing. Please set it in Settings.")
            client = genai.Client(
                api_key=self.settings.api_key,
                http_options=types.HttpOptions(
                    timeout=int(self.settings.timeout_seconds * 1000)
                ),
            )
        self.client = client
        self.error_handler = error_handler or GenerationErrorHandler()
        log.debug("GeminiEndpoint initialized with model '%s'.", self.settings.model)

    def _build_config(self, request: EndpointRequest) -> types.GenerateContentConfig:
        options = {}
        if request.system_instruction:
            options["system_instruction"] = request.system_instruction
        if request.expect_json:
            options["response_mime_type"] = JSON_MIME_TYPE
        return types.GenerateContentConfig(**options)

    def _build_contents(self, request: EndpointRequest) -> list[types.Part | str]:
        parts: list[types.Part | str] = [
            types.Part.from_bytes(data=item.data, mime_type=item.mime_type)
            for item in request.attachments
        ]
        parts.append(request.prompt)
        return parts

    async def generate(self, request: EndpointRequest) -> str | None:
        log.debug(
            "Calling Gemini for %s (model=%s, attachments=%d).",
            request.kind.value,
            self.settings.model,
            len(request.attachments),
        )
        try:
            response = await self.client.aio.models.generate_content(
                model=self.settings.model,
                contents=self._build_contents(request),
                config=self._build_config(request),
            )
        except genai_errors.APIError as e:
            raise self.error_handler.to_endpoint_error(e) from e
        return response.text


# --- Deterministic mock content ---

_MOCK_DEFINITIONS = {
    "heric": (
        "Highly Efficient and Reliable Inverter Concept - a type of circuit design."
    ),
    "inverter": (
        "A device that converts DC battery power into AC power for home appliances."
    ),
    "leakage": (
        "Energy that escapes from the circuit instead of being used efficiently."
    ),
    "voltage": (
        "The 'pressure' from an electrical circuit's power source that pushes "
        "charged electrons."
    ),
    "current": (
        "The rate at which electrons flow past a point in a complete electrical circuit."
    ),
}

_MOCK_ANALYSIS = {
    "story": {
        "title": "The Inverter's Journey",
        "narrative": (
            "Deep inside a solar home, a battery holds steady DC power. The inverter "
            "is the translator that turns it into the AC rhythm every appliance "
            "understands, switching thousands of times a second."
        ),
        "cheatSheet": [
            "Inverters turn DC into AC.",
            "Switching speed shapes the output wave.",
            "Leakage current wastes energy.",
        ],
        "visualVibe": {"svg_code": "", "caption": "Battery to wall socket"},
    },
    "mindMap": {
        "root": "Inverters",
        "nodes": [
            {
                "id": "dc-ac",
                "label": "DC to AC",
                "description": "Converting battery power for appliances.",
                "parentId": "root",
            },
            {
                "id": "switching",
                "label": "Switching",
                "description": "Transistors flip direction rapidly.",
                "parentId": "root",
            },
            {
                "id": "losses",
                "label": "Losses",
                "description": "Where energy escapes as heat or leakage.",
                "parentId": "root",
            },
        ],
    },
    "quiz": [
        {
            "id": 1,
            "question": "What does an inverter do?",
            "options": ["Stores energy", "Converts DC to AC", "Measures voltage"],
            "correctAnswer": "Converts DC to AC",
            "explanation": "Appliances run on AC while batteries supply DC.",
            "socraticHint": "Think about what a battery supplies versus a wall socket.",
        },
        {
            "id": 2,
            "question": "What is leakage current?",
            "options": ["Useful output", "Wasted escaping energy", "Battery charge"],
            "correctAnswer": "Wasted escaping energy",
            "explanation": "It flows where it is not wanted.",
            "socraticHint": "Leaks are rarely a good thing.",
        },
        {
            "id": 3,
            "question": "Which unit measures electrical pressure?",
            "options": ["Ampere", "Volt", "Ohm"],
            "correctAnswer": "Volt",
            "explanation": "Voltage pushes charge through a circuit.",
            "socraticHint": "Pressure pushes; which unit describes the push?",
        },
    ],
    "flashcards": [
        {"id": 1, "term": "Inverter", "definition": _MOCK_DEFINITIONS["inverter"]},
        {"id": 2, "term": "HERIC", "definition": _MOCK_DEFINITIONS["heric"]},
        {"id": 3, "term": "Voltage", "definition": _MOCK_DEFINITIONS["voltage"]},
        {"id": 4, "term": "Current", "definition": _MOCK_DEFINITIONS["current"]},
    ],
}


def _fenced(payload: object, prose: str = "Here is your structured result:") -> str:
    return f"{prose}\n```json\n{json.dumps(payload, indent=2)}\n```\nHope this helps!"


class MockEndpoint:
    """Deterministic endpoint for demos and tests (no network)"""

    def __init__(self):
        self.requests: list[EndpointRequest] = []

    async def generate(self, request: EndpointRequest) -> str | None:
        self.requests.append(request)
        log.debug("MockEndpoint answering %s.", request.kind.value)
        return self.respond(request)

    def respond(self, request: EndpointRequest) -> str:
        ctx = request.context
        kind = request.kind
        if kind is OperationKind.ANALYZE_CONTENT:
            return _fenced(_MOCK_ANALYSIS)
        if kind is OperationKind.REGENERATE_QUIZ:
            # Index-key wrappers and a trailing comma, as real models emit
            items = ",\n".join(
                f'{{"{i}": {json.dumps(q)}}}'
                for i, q in enumerate(_MOCK_ANALYSIS["quiz"], 1)
            )
            return f"```json\n[{items},\n]\n```"
        if kind is OperationKind.GENERATE_HINT:
            return json.dumps(
                {"hint": "Look again at what the question is really asking for."}
            )
        if kind is OperationKind.EXPAND_NODE:
            label = ctx.get("node_label", "this idea")
            children = [
                {"label": f"{label}: basics", "description": f"What {label} means."},
                {"label": f"{label}: example", "description": f"{label} in practice."},
                {"label": f"{label}: pitfalls", "description": "Common mistakes."},
            ]
            return _fenced(children, prose="Sure! Here are the sub-concepts:")
        if kind is OperationKind.VIVA_REPLY:
            return json.dumps(
                {"reply": "Good question! Explain it back to me in your own words."}
            )
        if kind is OperationKind.DEBATE_REPLY:
            topic = ctx.get("topic", "this")
            return json.dumps(
                {"rebuttal": f"But is {topic} really worth the cost? Convince me."}
            )
        if kind is OperationKind.DEFINE_WORD:
            word = str(ctx.get("word", ""))
            definition = _MOCK_DEFINITIONS.get(
                word.lower(),
                f"Contextual definition for '{word}': A key concept in this study "
                "module related to the physics of energy flow.",
            )
            return json.dumps({"definition": definition})
        raise ValueError(f"MockEndpoint has no response for {kind!r}")
