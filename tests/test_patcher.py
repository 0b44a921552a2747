"""Tests for minimal-edit patching of the dependency section."""

import pytest

from manifest.formatter import FmtOptions
from manifest.jsonc import parse_to_ast
from manifest.patcher import TextChange, apply_text_changes, compute_text_changes, update_config_file_content

GENERATED = '"@std/path": "jsr:@std/path@^1.0.0"'


def patch(text, generated=GENERATED, key="imports", file_name="deno.json", options=None):
    root = parse_to_ast(text).value
    return update_config_file_content(root, text, generated, options or FmtOptions(), key, file_name)


class TestApplyTextChanges:
    """Single-pass edit application."""

    def test_multiple_changes_use_original_offsets(self):
        source = "abcdef"
        changes = [TextChange((4, 5), "E"), TextChange((0, 1), "AA"), TextChange((2, 2), "+")]
        assert apply_text_changes(source, changes) == "AAb+cdEf"

    def test_no_changes(self):
        assert apply_text_changes("abc", []) == "abc"

    def test_overlap_rejected(self):
        with pytest.raises(ValueError):
            apply_text_changes("abcdef", [TextChange((0, 3), "x"), TextChange((2, 4), "y")])

    def test_out_of_range_rejected(self):
        with pytest.raises(ValueError):
            apply_text_changes("abc", [TextChange((2, 10), "x")])


class TestComputeTextChanges:
    """Where the edit lands."""

    def test_insert_before_closing_brace(self):
        text = '{"name": "app"}'
        root = parse_to_ast(text).value
        (change,) = compute_text_changes(root, GENERATED, "imports")
        assert change.range == (14, 14)
        assert change.new_text.startswith(',"imports": {\n ')

    def test_insert_into_empty_object_has_no_comma(self):
        root = parse_to_ast("{}").value
        (change,) = compute_text_changes(root, GENERATED, "imports")
        assert change.new_text == '"imports": {\n ' + GENERATED + " }"

    def test_replace_between_braces(self):
        text = '{"imports": {"a": "b"}}'
        root = parse_to_ast(text).value
        (change,) = compute_text_changes(root, GENERATED, "imports")
        assert text[change.range[0]:change.range[1]] == '"a": "b"'
        assert change.new_text == "\n" + GENERATED + "\n"

    def test_non_object_section_is_a_bug(self):
        root = parse_to_ast('{"imports": []}').value
        with pytest.raises(AssertionError):
            compute_text_changes(root, GENERATED, "imports")


class TestUpdateConfigFileContent:
    """End-to-end text updates."""

    def test_empty_object(self):
        assert patch("{}\n") == (
            '{\n  "imports": {\n    "@std/path": "jsr:@std/path@^1.0.0"\n  }\n}\n'
        )

    def test_insert_after_existing_property_with_comment(self):
        text = '{\n  // project settings\n  "name": "app"\n}\n'
        assert patch(text) == (
            '{\n'
            '  // project settings\n'
            '  "name": "app",\n'
            '  "imports": {\n'
            '    "@std/path": "jsr:@std/path@^1.0.0"\n'
            '  }\n'
            '}\n'
        )

    def test_root_trailing_comma_gets_no_extra_comma(self):
        text = '{\n  "name": "app",\n}\n'
        assert patch(text) == (
            '{\n  "name": "app",\n  "imports": {\n    "@std/path": "jsr:@std/path@^1.0.0"\n  }\n}\n'
        )

    def test_replace_keeps_other_content(self):
        text = (
            '{\n'
            '  // deps\n'
            '  "imports": {},\n'
            '  "tasks": { "dev": "deno run main.ts" } // tasks\n'
            '}\n'
        )
        generated = '"@std/fs": "jsr:@std/fs@^1.0.0",\n"@std/path": "jsr:@std/path@^1.0.0"'
        assert patch(text, generated=generated, file_name="deno.jsonc") == (
            '{\n'
            '  // deps\n'
            '  "imports": {\n'
            '    "@std/fs": "jsr:@std/fs@^1.0.0",\n'
            '    "@std/path": "jsr:@std/path@^1.0.0"\n'
            '  },\n'
            '  "tasks": { "dev": "deno run main.ts" } // tasks\n'
            '}\n'
        )

    def test_indent_width_is_honored(self):
        assert patch("{}\n", options=FmtOptions(indent_width=4)) == (
            '{\n    "imports": {\n        "@std/path": "jsr:@std/path@^1.0.0"\n    }\n}\n'
        )

    def test_package_json_dependencies(self):
        text = '{"name": "app"}'
        generated = '"chalk": "^5.3.0"'
        assert patch(text, generated=generated, key="dependencies", file_name="package.json") == (
            '{\n  "name": "app",\n  "dependencies": {\n    "chalk": "^5.3.0"\n  }\n}\n'
        )

    def test_unformattable_result_is_returned_as_edited(self):
        text = '{ "a": /* keep */ 1 }'
        result = patch(text)
        assert result == '{ "a": /* keep */ 1 ,"imports": {\n ' + GENERATED + " }}"
