"""Payload models for every structured tutor operation.

These are the shapes the UI collaborators expect back. JSON uses camelCase
keys (``correctAnswer``, ``mindMap``); Python attributes are snake_case and
either spelling is accepted on input.
"""

from enum import Enum

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class Mood(str, Enum):
    STRESSED = "STRESSED"
    BALANCED = "BALANCED"
    ENERGETIC = "ENERGETIC"


class Language(str, Enum):
    ENGLISH = "English"
    HINDI = "Hindi"
    FRENCH = "French"
    SPANISH = "Spanish"


class Interest(str, Enum):
    NONE = "None"
    MINECRAFT = "Minecraft"
    MARVEL = "Marvel"
    SPACE = "Space"
    CRICKET = "Cricket"
    ANIME = "Anime"


class TutorModel(BaseModel):
    """Base model: camelCase aliases, lenient with model-emitted numbers"""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        coerce_numbers_to_str=True,
        extra="ignore",
        protected_namespaces=(),
    )


class UserSettings(TutorModel):
    mood: Mood = Mood.BALANCED
    language: Language = Language.ENGLISH
    interest: Interest = Interest.NONE
    use_mock_mode: bool = False


class MindMapNode(TutorModel):
    id: str
    label: str
    description: str = ""
    parent_id: str | None = None


class MindMap(TutorModel):
    root: str
    nodes: list[MindMapNode] = Field(default_factory=list)


class QuizQuestion(TutorModel):
    id: int | str
    question: str
    options: list[str]
    # Option text as emitted by the model, e.g. "Option A" or the answer text
    correct_answer: str
    explanation: str | None = None
    socratic_hint: str = ""


class Flashcard(TutorModel):
    id: int | str
    term: str
    definition: str


class VisualVibe(TutorModel):
    svg_code: str = Field(default="", alias="svg_code")
    caption: str = ""


class Story(TutorModel):
    title: str
    narrative: str
    cheat_sheet: list[str] = Field(default_factory=list)
    visual_vibe: VisualVibe | None = None


class LongAnswerPrediction(TutorModel):
    question: str
    model_answer: str
    examiner_secret: str


class ShortReasoningPrediction(TutorModel):
    question: str
    answer: str
    student_trap: str


class MCQPrediction(TutorModel):
    question: str
    options: list[str]
    correct: str
    twist: str


class ExamPredictions(TutorModel):
    long_answer: LongAnswerPrediction
    short_reasoning: ShortReasoningPrediction
    mcq: MCQPrediction


class AnalysisResult(TutorModel):
    """Full content analysis returned by ``TutorService.analyze_content``"""

    story: Story
    mind_map: MindMap
    quiz: list[QuizQuestion]
    flashcards: list[Flashcard]
    exam_predictions: ExamPredictions | None = None
