from dataclasses import dataclass, field
from enum import Enum
from typing import Any


class OperationKind(str, Enum):
    """Logical AI request issued by a tutor call site"""

    ANALYZE_CONTENT = "analyze_content"
    REGENERATE_QUIZ = "regenerate_quiz"
    GENERATE_HINT = "generate_hint"
    EXPAND_NODE = "expand_node"
    VIVA_REPLY = "viva_reply"
    DEBATE_REPLY = "debate_reply"
    DEFINE_WORD = "define_word"


@dataclass(frozen=True)
class InlineData:
    data: bytes
    mime_type: str

    def __post_init__(self):
        if not self.mime_type:
            raise ValueError("InlineData requires a mime_type")


@dataclass(frozen=True)
class EndpointRequest:
    """One generation request, consumed once per invocation"""

    kind: OperationKind
    prompt: str
    system_instruction: str | None = None
    expect_json: bool = True
    attachments: tuple[InlineData, ...] = ()
    # Operation inputs, for logging and the mock endpoint
    context: dict[str, Any] = field(default_factory=dict, compare=False)
