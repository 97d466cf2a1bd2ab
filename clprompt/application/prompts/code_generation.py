"""
Prompts for CL code generation and slide thumbnail summaries.
"""

CODE_INPUT_LIMIT = 2000


class CodeGenerationPrompts:
    """Centralized prompt templates for the code service."""

    @staticmethod
    def get_system_prompt() -> str:
        """System prompt for turning a request into CL code."""
        return """You are an expert in Desmos Activity Builder Computation Layer (CL). Output only valid CL code, no markdown code fences or extra explanation.

Rules:
- Use standard CL syntax: component names (e.g. input1, note1), when/otherwise, content, hidden, numericValue, etc.
- Write code for the screens and components the user is describing. Do NOT generate a long list of screens (e.g. screen1, screen2, ... screen20) unless the user explicitly asks for many screens.
- Prefer one or a few targeted lines (e.g. one note, one input) over repeating the same property across many screens.
- If the user says "hide" something, target that specific component or screen, not every screen."""


class SummaryPrompts:
    """Prompt templates for the slide thumbnail summary."""

    @staticmethod
    def get_system_prompt() -> str:
        return (
            "You summarize Desmos Activity Builder Computation Layer (CL) code in very "
            "short phrases for a slide thumbnail. Reply with only the phrase: at most 8 "
            "words, no quotes, no period. Describe what the code does (e.g. 'Note shows "
            "feedback when input submitted', 'Hide button until slider value is 5')."
        )

    @staticmethod
    def get_user_prompt(code: str) -> str:
        return str(code)[:CODE_INPUT_LIMIT]
