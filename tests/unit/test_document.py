"""Unit tests for document text helpers."""

import json

import pytest

from openprd.core.document import (
    codename_prompt,
    extract_project_name,
    extract_title,
    format_wizard_input,
    parse_sections,
    prd_filename,
    slugify_codename,
    slugify_title,
)
from tests.conftest import SAMPLE_PRD


class TestExtractTitle:
    """Tests for extract_title."""

    def test_first_level_one_heading(self):
        assert extract_title(SAMPLE_PRD) == "Falcon: PDF Summarizer"

    def test_ignores_level_two_headings(self):
        assert extract_title("## Not a title\n# Real Title\n") == "Real Title"

    def test_default_when_missing(self):
        assert extract_title("no headings here") == "Untitled PRD"


class TestExtractProjectName:
    """Tests for extract_project_name."""

    def test_call_it(self):
        assert extract_project_name("A PDF summarizer, call it Falcon") == "falcon"

    def test_named_quoted(self):
        assert extract_project_name('An app named "Blue Jay" for birders') == "blue-jay"

    def test_call_the_app(self):
        assert extract_project_name("Call the app Atlas") == "atlas"

    def test_case_insensitive(self):
        assert extract_project_name("TITLED Nebula") == "nebula"

    def test_no_name(self):
        assert extract_project_name("A habit tracker for students") is None

    def test_keyword_inside_word_does_not_match(self):
        assert extract_project_name("Recalled items dashboard") is None


class TestSlugs:
    """Tests for codename and title slugs."""

    def test_codename_strips_punctuation(self):
        assert slugify_codename("  Falcon!\n") == "falcon"

    def test_codename_drops_spaces(self):
        assert slugify_codename("Red Panda") == "redpanda"

    def test_codename_can_be_empty(self):
        assert slugify_codename("***") == ""

    def test_title_slug(self):
        assert slugify_title("Falcon: PDF Summarizer") == "falcon-pdf-summarizer"

    def test_title_slug_truncated(self):
        slug = slugify_title("An Extremely Long Product Requirements Title For Testing")
        assert len(slug) == 30
        assert slug == "an-extremely-long-product-requ"

    def test_title_slug_fallback(self):
        assert slugify_title("!!!") == "untitled"

    def test_filename(self):
        assert prd_filename("falcon") == "falcon-prd.md"


class TestCodenamePrompt:
    """Tests for codename_prompt."""

    def test_input_truncated(self):
        prompt = codename_prompt("x" * 500)
        assert "x" * 200 in prompt
        assert "x" * 201 not in prompt

    def test_rules_included(self):
        assert "Return ONLY the codename" in codename_prompt("A chess coach")


class TestWizardInput:
    """Tests for format_wizard_input."""

    def test_appends_answers(self):
        data = {"audience": "students", "platform": "mobile"}
        formatted = format_wizard_input("A habit tracker", data)
        assert formatted.startswith("A habit tracker\n\nAdditional Context from Wizard:\n")
        assert formatted.endswith(json.dumps(data, indent=2))


class TestParseSections:
    """Tests for parse_sections."""

    def test_numbered_sections(self):
        sections = parse_sections(SAMPLE_PRD)
        assert [s.type for s in sections] == [
            "executive_summary",
            "problem_statement",
            "solution_overview",
        ]

    def test_section_keeps_heading_and_body(self):
        sections = parse_sections(SAMPLE_PRD)
        assert sections[1].content == (
            "# 2. Problem Statement\nReading is slow.\n## Details\n- Users skim\n\n"
        )

    def test_text_before_first_section_dropped(self):
        sections = parse_sections(SAMPLE_PRD)
        assert all("Intro paragraph" not in s.content for s in sections)

    def test_last_section_runs_to_end(self):
        sections = parse_sections(SAMPLE_PRD)
        assert sections[-1].content == "# 3. Solution Overview\nUpload, summarize, share.\n\n"

    @pytest.mark.parametrize("content", ["", "# Title only\nSome text", "## 1. Level two"])
    def test_no_numbered_sections(self, content):
        assert parse_sections(content) == []

    def test_concatenation_reproduces_body(self):
        body = (
            "# 1. Executive Summary\nA short pitch.\n\n"
            "# 2. Problem Statement\nThe pain point."
        )
        sections = parse_sections(body)
        assert [s.type for s in sections] == ["executive_summary", "problem_statement"]
        assert "".join(s.content for s in sections) == body + "\n"


class TestNameBeforeDescription:
    """A name stated up front wins over the rest of the sentence."""

    def test_call_it_first(self):
        assert prd_filename(extract_project_name("Call it Falcon, a PDF summarizer")) == "falcon-prd.md"


class TestSectionHeadingWhitespace:
    """Heading text is trimmed before it becomes a section type."""

    def test_carriage_return_line_endings(self):
        sections = parse_sections("# 1. Executive Summary\r\nBody\r\n# 2. Problem Statement\r\n")
        assert [s.type for s in sections] == ["executive_summary", "problem_statement"]

    def test_trailing_spaces(self):
        sections = parse_sections("# 1. Solution Overview   \nBody\n")
        assert sections[0].type == "solution_overview"
