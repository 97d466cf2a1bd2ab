"""
Prompts for the Dezzy assistant.

The system instruction is assembled from the configured persona plus
whatever reference material is available; empty sections are skipped.
"""

import json
from typing import Dict, Optional

SLIDE_CONTEXT_LIMIT = 4000
STORED_CODE_LIMIT = 2000
GREETING_REQUEST = "Say hello and remind me you can help with CL."


class AssistantPrompts:
    @staticmethod
    def build_system_text(
        instructions: str,
        cl_docs: str = "",
        extra_docs: str = "",
        docs_folder: str = "",
        slide_code_context: Optional[Dict[str, str]] = None,
    ) -> str:
        text = (instructions or "").strip()
        if cl_docs:
            text += (
                "\n\nUse the following Computation Layer documentation as reference "
                "(abbreviated):\n\n" + cl_docs
            )
        if extra_docs:
            text += "\n\nAdditional reference (sites, documents, notes):\n\n" + extra_docs
        if docs_folder:
            text += (
                "\n\nReference from Docs folder (math philosophy, style, learning "
                "objects, scope and sequence, etc.). Use these to align advice and "
                "suggestions:\n\n" + docs_folder
            )
        if slide_code_context:
            saved = json.dumps(slide_code_context, separators=(",", ":"))
            text += (
                "\n\nCode the user has saved per slide (slideId -> code):\n"
                + saved[:SLIDE_CONTEXT_LIMIT]
            )
        return text

    @staticmethod
    def get_suggestion_prompt(code_just_stored: str) -> str:
        """User turn asking for next steps after code was copied to a slide."""
        return (
            "The user just copied this code to a slide:\n\n"
            + code_just_stored[:STORED_CODE_LIMIT]
            + "\n\nGive 1-2 short suggestions for what else they could add to other "
            "slides (e.g. related CL features or improvements). Reply in plain text "
            "only, clear English, 2-4 sentences. No placeholders or scrambled text."
        )

    @staticmethod
    def get_user_text(message: str, code_just_stored: Optional[str] = None) -> str:
        if code_just_stored:
            return AssistantPrompts.get_suggestion_prompt(code_just_stored)
        return message or GREETING_REQUEST
