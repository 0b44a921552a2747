"""Tests for the comment-preserving manifest formatter."""

import pytest

from manifest.formatter import FmtOptions, FormatError, format_json, format_or_original, is_strict_json


class TestFmtOptions:
    """Reading ``fmt`` settings."""

    def test_defaults(self):
        assert FmtOptions.from_config(None) == FmtOptions(use_tabs=False, indent_width=2, line_width=80)

    def test_flat_layout(self):
        opts = FmtOptions.from_config({"useTabs": True, "indentWidth": 4, "lineWidth": 100})
        assert opts == FmtOptions(use_tabs=True, indent_width=4, line_width=100)

    def test_nested_options_layout(self):
        opts = FmtOptions.from_config({"options": {"indentWidth": 8}})
        assert opts.indent_width == 8

    def test_invalid_values_fall_back(self):
        opts = FmtOptions.from_config({"useTabs": "yes", "indentWidth": 0, "lineWidth": True})
        assert opts == FmtOptions()


class TestStrictJson:
    """Dialect selection by file name."""

    @pytest.mark.parametrize("path,expected", [
        ("package.json", True),
        ("/work/app/package.json", True),
        ("deno.json", False),
        ("deno.jsonc", False),
    ])
    def test_is_strict_json(self, path, expected):
        assert is_strict_json(path) is expected


class TestFormatJson:
    """Layout rules."""

    def test_short_single_line_object_kept(self):
        assert format_json("deno.json", '{ "a": 1, "b": [1, 2] }', FmtOptions()) == '{ "a": 1, "b": [1, 2] }\n'

    def test_already_formatted_returns_none(self):
        text = '{\n  "a": 1,\n\n  "b": 2\n}\n'
        assert format_json("deno.json", text, FmtOptions()) is None

    def test_long_line_is_expanded(self):
        text = '{ "alpha": "aaaaaaaa", "beta": "bbbbbbbb" }\n'
        assert format_json("deno.json", text, FmtOptions(line_width=20)) == (
            '{\n  "alpha": "aaaaaaaa",\n  "beta": "bbbbbbbb"\n}\n'
        )

    def test_trailing_comma_dropped(self):
        assert format_json("deno.jsonc", '{\n  "a": 1,\n}\n', FmtOptions()) == '{\n  "a": 1\n}\n'

    def test_tabs(self):
        assert format_json("deno.json", '{\n"a": 1\n}\n', FmtOptions(use_tabs=True)) == '{\n\t"a": 1\n}\n'

    def test_comments_preserved(self):
        text = (
            '{\n'
            '// deps\n'
            '"imports": {\n"a": "b"\n},\n'
            '    "tasks": { "dev": "deno run main.ts" } // tasks\n'
            '}\n'
        )
        assert format_json("deno.jsonc", text, FmtOptions()) == (
            '{\n'
            '  // deps\n'
            '  "imports": {\n'
            '    "a": "b"\n'
            '  },\n'
            '  "tasks": { "dev": "deno run main.ts" } // tasks\n'
            '}\n'
        )

    def test_leading_comment_before_root(self):
        assert format_json("deno.jsonc", '// header\n{"a": 1}\n', FmtOptions()) == '// header\n{ "a": 1 }\n'

    def test_package_json_is_expanded(self):
        text = '{"name": "x", "dependencies": {}}'
        assert format_json("package.json", text, FmtOptions()) == (
            '{\n  "name": "x",\n  "dependencies": {}\n}\n'
        )

    def test_comment_inside_property_raises(self):
        with pytest.raises(FormatError):
            format_json("deno.jsonc", '{ "a": /* c */ 1 }', FmtOptions())

    def test_parse_error_raises(self):
        with pytest.raises(FormatError, match="Cannot format deno.json"):
            format_json("deno.json", '{"a": }', FmtOptions())

    def test_blank_text(self):
        assert format_json("deno.json", "   ", FmtOptions()) is None


class TestFormatOrOriginal:
    """Fallback behavior."""

    def test_package_json_with_comment_is_left_alone(self):
        text = '{ // c\n"a": 1}'
        assert format_or_original("package.json", text, FmtOptions()) == (text, False)

    def test_unchanged_text_reports_success(self):
        text = '{\n  "a": 1\n}\n'
        assert format_or_original("deno.json", text, FmtOptions()) == (text, True)
