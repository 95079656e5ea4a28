"""
Response ingestion result containers
"""

from dataclasses import dataclass
from typing import Any, Literal

ParseMethod = Literal["direct", "repaired"]


@dataclass(frozen=True)
class ParsingResult:
    """Decoded payload plus the text it came from

    ``method`` records whether the structural repair pass was needed.
    """

    parsed_data: Any
    method: ParseMethod
    raw_text: str
    cleaned_text: str

    @property
    def was_repaired(self) -> bool:
        return self.method == "repaired"
