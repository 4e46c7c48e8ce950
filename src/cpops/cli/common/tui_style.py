"""Questionary / prompt_toolkit theme for cpops.

Questionary uses prompt_toolkit under the hood. This module defines the
central style so interactive prompts look consistent with the rich output.
"""

from __future__ import annotations

from prompt_toolkit.styles import Style

QUESTIONARY_STYLE_SELECT = Style.from_dict(
    {
        "question": "bold ansibrightcyan",
        "answer": "bold ansibrightgreen",
        "pointer": "bold ansibrightgreen",
        "highlighted": "bold ansibrightgreen",
        "selected": "bold ansibrightgreen",
        "checkbox": "ansibrightblack",
        "checkbox-selected": "bold ansibrightgreen",
        "instruction": "ansibrightblack",
        "error": "bold ansired",
    }
)
