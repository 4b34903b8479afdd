"""Tests for snippet line highlighting.

The segment highlighter must reproduce each line exactly once escapes are
removed; Pygments is only used for fences tagged with a non-YAML language.
"""

from __future__ import annotations

import unittest

from lazyfindings.ansi import strip_ansi
from lazyfindings.highlight import (
    DEFAULT_CODE_STYLE,
    classify_value,
    highlight_line,
    highlight_segments,
    normalize_code_style,
)
from lazyfindings.ui_theme import DEFAULT_THEME, PLAIN_THEME

SNIPPET_LINES = (
    "services:",
    "  app:",
    "    image: node:18",
    "    ports:",
    "      - 8080",
    '    command: "npm start"',
    "    healthcheck: [CMD, curl]",
    "    privileged: false",
    "    # keep this",
    "RUN npm ci --omit=dev",
    "",
    "   ",
)


class SegmentTests(unittest.TestCase):
    def test_segments_reproduce_line(self) -> None:
        for line in SNIPPET_LINES:
            with self.subTest(line=line):
                self.assertEqual("".join(text for _, text in highlight_segments(line)), line)

    def test_comment_line_is_single_segment(self) -> None:
        self.assertEqual(highlight_segments("  # note"), [("comment", "  # note")])

    def test_key_value_line_is_split(self) -> None:
        self.assertEqual(
            highlight_segments("  image: node:18"),
            [("", "  "), ("key", "image"), ("punctuation", ": "), ("", "node:18")],
        )

    def test_list_item_line_is_split(self) -> None:
        self.assertEqual(highlight_segments("  - 8080"), [("punctuation", "  - "), ("number", "8080")])

    def test_unmatched_line_is_unstyled(self) -> None:
        self.assertEqual(highlight_segments("RUN npm ci"), [("", "RUN npm ci")])

    def test_value_classification(self) -> None:
        self.assertEqual(classify_value('"quoted"'), "string")
        self.assertEqual(classify_value("'single'"), "string")
        self.assertEqual(classify_value("30s"), "number")
        self.assertEqual(classify_value("512mb"), "number")
        self.assertEqual(classify_value("TRUE"), "boolean")
        self.assertEqual(classify_value("[a, b]"), "array")
        self.assertEqual(classify_value("node"), "")
        self.assertEqual(classify_value("  "), "")


class HighlightLineTests(unittest.TestCase):
    def test_styled_line_strips_back_to_source(self) -> None:
        for line in SNIPPET_LINES:
            with self.subTest(line=line):
                self.assertEqual(strip_ansi(highlight_line(line, DEFAULT_THEME)), line)

    def test_highlighting_is_deterministic(self) -> None:
        line = "    image: node:18"
        self.assertEqual(highlight_line(line, DEFAULT_THEME), highlight_line(line, DEFAULT_THEME))

    def test_key_gets_theme_style(self) -> None:
        rendered = highlight_line("image: node", DEFAULT_THEME)
        self.assertTrue(rendered.startswith(f"{DEFAULT_THEME.code_key}image{DEFAULT_THEME.reset}"))

    def test_plain_theme_returns_line_unchanged(self) -> None:
        for line in SNIPPET_LINES:
            self.assertEqual(highlight_line(line, PLAIN_THEME), line)
        self.assertEqual(highlight_line("import os", PLAIN_THEME, language="python"), "import os")

    def test_tagged_language_uses_pygments(self) -> None:
        rendered = highlight_line("import os", DEFAULT_THEME, language="python")

        self.assertIn("\x1b[", rendered)
        self.assertEqual(strip_ansi(rendered), "import os")
        self.assertNotIn("\n", rendered)

    def test_yaml_tags_and_unknown_languages_use_segment_highlighter(self) -> None:
        line = "  retries: 3"
        expected = highlight_line(line, DEFAULT_THEME)
        self.assertEqual(highlight_line(line, DEFAULT_THEME, language="yaml"), expected)
        self.assertEqual(highlight_line(line, DEFAULT_THEME, language="compose"), expected)
        self.assertEqual(highlight_line(line, DEFAULT_THEME, language="no-such-language"), expected)

    def test_normalize_code_style(self) -> None:
        self.assertEqual(normalize_code_style(None), DEFAULT_CODE_STYLE)
        self.assertEqual(normalize_code_style("definitely-not-a-style"), DEFAULT_CODE_STYLE)
        self.assertEqual(normalize_code_style("native"), "native")


if __name__ == "__main__":
    unittest.main()
