"""Prompt construction for each tutor operation"""

from collections.abc import Sequence

from ..client.models import EndpointRequest, InlineData, OperationKind
from ..models import Interest, Mood, UserSettings

_TONES = {
    Mood.STRESSED: "gentle, reassuring, and calm",
    Mood.BALANCED: "professional and educational",
    Mood.ENERGETIC: "high-energy, gamified, and exciting",
}

_ANALYSIS_SHAPE = """{
  "story": {
    "title": string,
    "narrative": string,
    "cheatSheet": [string, string, string],
    "visualVibe": {"svg_code": string, "caption": string}
  },
  "mindMap": {
    "root": string,
    "nodes": [{"id": string, "label": string, "description": string, "parentId": "root"}]
  },
  "quiz": [{"id": number, "question": string, "options": [string], "correctAnswer": string,
            "explanation": string, "socraticHint": string}],
  "flashcards": [{"id": number, "term": string, "definition": string}],
  "examPredictions": {
    "longAnswer": {"question": string, "modelAnswer": string, "examinerSecret": string},
    "shortReasoning": {"question": string, "answer": string, "studentTrap": string},
    "mcq": {"question": string, "options": [string], "correct": string, "twist": string}
  }
}"""

_QUIZ_ITEM_SHAPE = (
    '{"id": number, "question": string, "options": [string, string, string, string], '
    '"correctAnswer": string, "explanation": string, "socraticHint": string}'
)


def tone_for(mood: Mood) -> str:
    return _TONES.get(mood, _TONES[Mood.BALANCED])


def analogy_for(interest: Interest) -> str:
    if interest is Interest.NONE:
        return ""
    return (
        f" Use analogies specifically related to {interest.value} "
        "to explain concepts."
    )


class TutorPromptBuilder:
    """Builds endpoint requests for every tutor operation"""

    def tutor_persona(self, settings: UserSettings) -> str:
        return (
            "You are an expert Special Education Tutor. "
            f"Tone: {tone_for(settings.mood)}. Language: {settings.language.value}."
        )

    def analyze_content(
        self, data: bytes, mime_type: str, settings: UserSettings
    ) -> EndpointRequest:
        system = (
            f"{self.tutor_persona(settings)}\n"
            "Analyze the uploaded material. Output a single JSON object containing:\n"
            "- `story`: A creative narrative explanation."
            f"{analogy_for(settings.interest)}\n"
            "- `quiz`: 3 interactive questions with options, the correct option "
            "text, an explanation and a Socratic hint.\n"
            "- `flashcards`: 4 key terms and definitions for active recall.\n"
            "- `mindMap`: A central concept with connected sub-concepts for a "
            "radial diagram. Each node must have a `label` and a `description`.\n"
            "- `story.cheatSheet`: 3 ultra-short bullet points (TL;DR).\n"
            "- `examPredictions`: likely exam questions with the reasoning "
            "behind them.\n"
            f"Use exactly this shape:\n{_ANALYSIS_SHAPE}\n"
            f"Ensure ALL content is in {settings.language.value}."
        )
        return EndpointRequest(
            kind=OperationKind.ANALYZE_CONTENT,
            prompt="Analyze the uploaded material based on the system instructions.",
            system_instruction=system,
            attachments=(InlineData(data=data, mime_type=mime_type),),
            context={"mime_type": mime_type, "bytes": len(data)},
        )

    def regenerate_quiz(
        self, topic: str, settings: UserSettings, count: int
    ) -> EndpointRequest:
        prompt = (
            f"Write {count} new multiple-choice questions about: {topic}."
            f"{analogy_for(settings.interest)}\n"
            f"Return a JSON array where every item has this shape: {_QUIZ_ITEM_SHAPE}. "
            "`correctAnswer` must repeat the text of the correct option exactly."
        )
        return EndpointRequest(
            kind=OperationKind.REGENERATE_QUIZ,
            prompt=prompt,
            system_instruction=self.tutor_persona(settings),
            context={"topic": topic, "count": count},
        )

    def generate_hint(
        self, question: str, wrong_answer: str, correct_answer: str, topic: str
    ) -> EndpointRequest:
        prompt = (
            f"Topic: {topic}\n"
            f"Question: {question}\n"
            f"The student chose: {wrong_answer}\n"
            f"The correct answer is: {correct_answer}\n"
            "Give one short Socratic hint that nudges the student toward the "
            "correct answer without revealing it. "
            'Respond as JSON: {"hint": string}'
        )
        return EndpointRequest(
            kind=OperationKind.GENERATE_HINT,
            prompt=prompt,
            system_instruction="You are a patient tutor who never gives answers away.",
            context={"question": question, "topic": topic},
        )

    def expand_node(
        self, root_topic: str, node_label: str, node_id: str
    ) -> EndpointRequest:
        prompt = (
            f"The mind map is about '{root_topic}'. Break the concept "
            f"'{node_label}' into 3 to 5 sub-concepts.\n"
            'Return a JSON array of {"id": string, "label": string, '
            '"description": string}, with short labels and one-sentence descriptions.'
        )
        return EndpointRequest(
            kind=OperationKind.EXPAND_NODE,
            prompt=prompt,
            system_instruction="You build concise study mind maps.",
            context={
                "root_topic": root_topic,
                "node_label": node_label,
                "node_id": node_id,
            },
        )

    def viva_reply(self, query: str, context: str, mood: Mood) -> EndpointRequest:
        prompt = (
            f"Context: {context}\n"
            f"Student: {query}\n"
            "Reply in two or three spoken-style sentences. "
            'Respond as JSON: {"reply": string}'
        )
        return EndpointRequest(
            kind=OperationKind.VIVA_REPLY,
            prompt=prompt,
            system_instruction=(
                "You are a friendly oral examiner and study helper. "
                f"Tone: {tone_for(mood)}."
            ),
            context={"query": query, "context": context},
        )

    def debate_reply(
        self, argument: str, topic: str, history: Sequence[tuple[str, str]]
    ) -> EndpointRequest:
        transcript = "\n".join(f"{role}: {text}" for role, text in history)
        prompt = (
            f"Debate topic: {topic}\n"
            f"Transcript so far:\n{transcript or '(none)'}\n"
            f"Student's latest argument: {argument}\n"
            "Push back with one sharp counter-argument and a follow-up question. "
            'Respond as JSON: {"rebuttal": string}'
        )
        return EndpointRequest(
            kind=OperationKind.DEBATE_REPLY,
            prompt=prompt,
            system_instruction=(
                "You are a skeptical but fair debate partner who helps students "
                "sharpen their reasoning."
            ),
            context={"argument": argument, "topic": topic},
        )

    def define_word(self, word: str, context: str) -> EndpointRequest:
        prompt = (
            f"Define '{word}' in one plain sentence "
            "a struggling student can follow."
            + (f" It appears in this context: {context}" if context else "")
            + ' Respond as JSON: {"definition": string}'
        )
        return EndpointRequest(
            kind=OperationKind.DEFINE_WORD,
            prompt=prompt,
            system_instruction="You are a concise dictionary for students.",
            context={"word": word},
        )
