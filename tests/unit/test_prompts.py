import pytest

from gemini_tutor.client.models import OperationKind
from gemini_tutor.models import Interest, Language, Mood, UserSettings
from gemini_tutor.prompts import TutorPromptBuilder, analogy_for, tone_for


@pytest.mark.unit
class TestToneAndAnalogy:
    """Mood and interest personalisation"""

    @pytest.mark.parametrize(
        ("mood", "tone"),
        [
            (Mood.STRESSED, "gentle, reassuring, and calm"),
            (Mood.ENERGETIC, "high-energy, gamified, and exciting"),
            (Mood.BALANCED, "professional and educational"),
        ],
    )
    def test_tone_for(self, mood, tone):
        assert tone_for(mood) == tone

    def test_no_interest_means_no_analogy(self):
        assert analogy_for(Interest.NONE) == ""

    def test_interest_analogy(self):
        assert "Minecraft" in analogy_for(Interest.MINECRAFT)


@pytest.mark.unit
class TestTutorPromptBuilder:
    """Endpoint requests for each operation"""

    def setup_method(self):
        self.builder = TutorPromptBuilder()

    def test_analyze_content_request(self):
        settings = UserSettings(
            mood=Mood.STRESSED, language=Language.HINDI, interest=Interest.CRICKET
        )
        request = self.builder.analyze_content(b"img", "image/jpeg", settings)

        assert request.kind is OperationKind.ANALYZE_CONTENT
        assert request.expect_json
        assert request.attachments[0].data == b"img"
        assert request.attachments[0].mime_type == "image/jpeg"
        assert "gentle, reassuring, and calm" in request.system_instruction
        assert "Hindi" in request.system_instruction
        assert "Cricket" in request.system_instruction
        assert '"mindMap"' in request.system_instruction

    def test_regenerate_quiz_request(self):
        request = self.builder.regenerate_quiz("Inverters", UserSettings(), 5)
        assert request.kind is OperationKind.REGENERATE_QUIZ
        assert "5 new multiple-choice questions" in request.prompt
        assert request.context == {"topic": "Inverters", "count": 5}

    def test_hint_request_carries_answers(self):
        request = self.builder.generate_hint("Q?", "wrong", "right", "Topic")
        assert request.kind is OperationKind.GENERATE_HINT
        assert "wrong" in request.prompt
        assert "right" in request.prompt
        assert '{"hint": string}' in request.prompt

    def test_expand_node_request(self):
        request = self.builder.expand_node("Inverters", "Switching", "switching")
        assert request.kind is OperationKind.EXPAND_NODE
        assert "'Switching'" in request.prompt
        assert request.context["node_id"] == "switching"

    def test_viva_reply_uses_mood_tone(self):
        request = self.builder.viva_reply("why?", "inverters", Mood.ENERGETIC)
        assert request.kind is OperationKind.VIVA_REPLY
        assert "high-energy" in request.system_instruction

    def test_debate_reply_includes_history(self):
        request = self.builder.debate_reply(
            "Solar is cheap", "Solar power", [("student", "Hi"), ("ai", "Prove it")]
        )
        assert "student: Hi\nai: Prove it" in request.prompt
        assert request.context["topic"] == "Solar power"

    def test_debate_reply_without_history(self):
        request = self.builder.debate_reply("Solar is cheap", "Solar power", ())
        assert "(none)" in request.prompt

    @pytest.mark.parametrize(("context", "present"), [("circuits", True), ("", False)])
    def test_define_word_context(self, context, present):
        request = self.builder.define_word("leakage", context)
        assert request.context == {"word": "leakage"}
        assert ("It appears in this context" in request.prompt) is present
