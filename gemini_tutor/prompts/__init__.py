"""
Prompt construction for tutor operations
"""

from .builder import TutorPromptBuilder, analogy_for, tone_for

__all__ = ["TutorPromptBuilder", "analogy_for", "tone_for"]
