"""Text helpers for generated PRD documents."""

from __future__ import annotations

import json
import re
from dataclasses import dataclass
from typing import Any

DEFAULT_TITLE = "Untitled PRD"
TITLE_SLUG_LENGTH = 30
CODENAME_INPUT_CHARS = 200

_TITLE_RE = re.compile(r"^#\s+(.+)$", re.MULTILINE)
_SECTION_RE = re.compile(r"^#\s+\d+\.\s+(.+)$")
_PROJECT_NAME_RE = re.compile(
    r"\b(?:called|call|named|name|titled|title)\b\s*"
    r"(?:(?:it|this|the\s+(?:app|application|project|product))\b)?\s*"
    r"[\"']?([a-zA-Z0-9\s_-]+)[\"']?",
    re.IGNORECASE,
)
_WHITESPACE_RE = re.compile(r"\s+")


@dataclass(frozen=True)
class ParsedSection:
    """A numbered top-level section: `type` is the slugged heading."""

    type: str
    content: str


def format_wizard_input(user_input: str, wizard_data: Any) -> str:
    """Append structured wizard answers to the free-text input."""
    return (
        f"{user_input}\n\nAdditional Context from Wizard:\n"
        f"{json.dumps(wizard_data, indent=2)}"
    )


def extract_title(content: str) -> str:
    """Text of the first level-1 heading, or "Untitled PRD"."""
    match = _TITLE_RE.search(content)
    if match is None:
        return DEFAULT_TITLE
    return match.group(1).strip() or DEFAULT_TITLE


def extract_project_name(user_input: str) -> str | None:
    """Name the user asked for ("call it X", "named X", ...) as a slug.

    Returns:
        Lowercase name with whitespace runs replaced by "-", or None.
    """
    match = _PROJECT_NAME_RE.search(user_input)
    if match is None:
        return None
    name = match.group(1).strip().lower()
    if not name:
        return None
    return _WHITESPACE_RE.sub("-", name)


def codename_prompt(user_input: str) -> str:
    """Instruction asking the model for a one or two word project codename."""
    return (
        "Generate a single, creative codename for a project based on this "
        f'description: "{user_input[:CODENAME_INPUT_CHARS]}". \n'
        "\n"
        "Rules:\n"
        "- Return ONLY the codename, nothing else\n"
        "- 1-2 words maximum\n"
        "- Use animals, space objects, or tech terms\n"
        "- Make it memorable and relevant\n"
        "- Examples: falcon, nebula, atlas, phoenix\n"
        "- Lowercase, no spaces or special characters"
    )


def slugify_codename(text: str) -> str:
    """Lowercase and keep only ASCII letters and digits."""
    return re.sub(r"[^a-z0-9]", "", text.strip().lower())


def slugify_title(title: str) -> str:
    """Filename-safe slug of a title, at most 30 characters, "untitled" if empty."""
    slug = re.sub(r"[^a-z0-9\s]", "", title.lower())
    slug = _WHITESPACE_RE.sub("-", slug)[:TITLE_SLUG_LENGTH]
    return slug or "untitled"


def prd_filename(stem: str) -> str:
    return f"{stem}-prd.md"


def parse_sections(content: str) -> list[ParsedSection]:
    """Split a document on numbered level-1 headings ("# 3. Solution Overview").

    Each section keeps its heading line. Every line is re-terminated with
    a newline, and text before the first numbered heading is dropped.
    """
    sections: list[ParsedSection] = []
    current_type: str | None = None
    current_lines: list[str] = []

    for line in content.split("\n"):
        match = _SECTION_RE.match(line)
        if match:
            if current_type is not None:
                sections.append(ParsedSection(current_type, "".join(current_lines)))
            current_type = _WHITESPACE_RE.sub("_", match.group(1).strip().lower())
            current_lines = [line + "\n"]
        elif current_type is not None:
            current_lines.append(line + "\n")

    if current_type is not None:
        sections.append(ParsedSection(current_type, "".join(current_lines)))
    return sections
