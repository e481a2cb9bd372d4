"""Tests for the jsonunit comparison engine."""

import dataclasses
from decimal import Decimal

import pytest
from jsonunit import (
    MISSING,
    Configuration,
    ConfigurationError,
    Diff,
    DifferenceKind,
    DiffReport,
    InvalidJsonPathError,
    MatchResult,
    Option,
    Path,
    PathSyntaxError,
    UnknownMatcherError,
    compare,
    compare_in_path,
    format_differences,
    read_json,
)


def _config(*options, **kwargs):
    builder = Configuration.builder().with_options(*options)
    if "tolerance" in kwargs:
        builder.with_tolerance(kwargs["tolerance"])
    if "ignored" in kwargs:
        builder.when_ignoring_paths(*kwargs["ignored"])
    return builder.build()


class TestBasicComparison:
    """Test basic comparison functionality."""

    def test_identical_documents(self):
        doc = {"name": "test", "tags": ["a", "b"], "meta": {"n": 1, "ok": True, "x": None}}
        assert compare(doc, doc) == []

    def test_key_order_is_irrelevant(self):
        assert compare({"a": 1, "b": 2}, {"b": 2, "a": 1}) == []

    def test_int_and_float_forms_are_equal(self):
        assert compare({"a": 1}, {"a": 1.0}) == []

    def test_different_values(self):
        differences = compare({"a": 1}, {"a": 2})

        assert len(differences) == 1
        assert differences[0].kind == DifferenceKind.DIFFERENT_VALUE
        assert differences[0].path == Path.of("a")
        assert differences[0].message == 'Different value found in node "a", expected: <1> but was: <2>.'

    def test_different_types(self):
        differences = compare({"a": 1}, {"a": "1"})

        assert [d.kind for d in differences] == [DifferenceKind.DIFFERENT_TYPE]
        assert differences[0].message == 'Different value found in node "a", expected: <1> but was: <"1">.'

    def test_type_difference_does_not_recurse(self):
        differences = compare({"a": {"b": 1, "c": 2}}, {"a": [1, 2]})
        assert len(differences) == 1
        assert differences[0].kind == DifferenceKind.DIFFERENT_TYPE

    def test_missing_key(self):
        differences = compare({"a": 1, "b": 2}, {"a": 1})

        assert len(differences) == 1
        assert differences[0].kind == DifferenceKind.MISSING_ENTRY
        assert str(differences[0].path) == "b"
        assert differences[0].message == (
            'Different keys found in node "", missing: "b", '
            'expected: <{"a":1,"b":2}> but was: <{"a":1}>'
        )

    def test_extra_key(self):
        differences = compare({"a": 1}, {"a": 1, "c": 3})

        assert [d.kind for d in differences] == [DifferenceKind.EXTRA_ENTRY]
        assert str(differences[0].path) == "c"
        assert differences[0].message == (
            'Different keys found in node "", extra: "c", '
            'expected: <{"a":1}> but was: <{"a":1,"c":3}>'
        )

    def test_object_difference_order(self):
        expected = {"b": 1, "a": 1, "c": 1, "d": 1}
        actual = {"x": 1, "c": 2, "d": 1, "e": 1}

        differences = compare(expected, actual)

        assert [str(d.path) for d in differences] == ["a", "b", "e", "x", "c"]
        assert [d.kind for d in differences] == [
            DifferenceKind.MISSING_ENTRY,
            DifferenceKind.MISSING_ENTRY,
            DifferenceKind.EXTRA_ENTRY,
            DifferenceKind.EXTRA_ENTRY,
            DifferenceKind.DIFFERENT_VALUE,
        ]

    def test_nested_path_rendering(self):
        differences = compare({"a": {"b": [1, {"c": 1}]}}, {"a": {"b": [1, {"c": 2}]}})
        assert str(differences[0].path) == "a.b[1].c"

    def test_keys_with_dots_are_escaped(self):
        differences = compare({"a.b": 1}, {"a.b": 2})

        path = differences[0].path
        assert str(path) == "a\\.b"
        assert Path.parse(str(path)) == path

    def test_repeated_comparisons_are_identical(self):
        expected = {"a": [1, 2, 3], "b": {"c": "x"}, "d": 1}
        actual = {"a": [3, 2], "b": {"c": "y", "e": 1}}

        assert compare(expected, actual) == compare(expected, actual)

    def test_json_bytes_are_parsed(self):
        assert compare(b'{"a": [1, 2]}', {"a": [1, 2]}) == []


class TestNumericComparison:
    """Test number comparison and tolerance."""

    def test_within_tolerance(self):
        assert compare({"x": 1.00001}, {"x": 1}, _config(tolerance=0.001)) == []

    def test_zero_tolerance_is_exact(self):
        differences = compare({"x": 1.00001}, {"x": 1})
        assert len(differences) == 1
        assert differences[0].kind == DifferenceKind.DIFFERENT_VALUE
        assert str(differences[0].path) == "x"

    def test_tolerance_is_computed_exactly(self):
        assert compare({"x": 0.1}, {"x": 0.3}, _config(tolerance="0.2")) == []

    def test_exceeding_tolerance_has_detail(self):
        differences = compare({"x": 1}, {"x": 1.5}, _config(tolerance="0.01"))

        assert len(differences) == 1
        assert differences[0].detail == "Difference 0.5 exceeds tolerance 0.01"

    def test_large_integers_keep_precision(self):
        expected = {"n": 12345678901234567890123456789012345}
        actual = {"n": 12345678901234567890123456789012346}

        assert len(compare(expected, actual)) == 1
        assert compare(expected, actual, _config(tolerance=1)) == []

    def test_parsed_json_keeps_precision(self):
        expected = read_json('{"a": 0.1000000000000000000001}')
        assert len(compare(expected, {"a": 0.1})) == 1

    def test_huge_exponent_is_rendered_in_messages(self):
        differences = compare({"a": 1}, b'{"a": 1e5000}')

        assert len(differences) == 1
        assert differences[0].message == 'Different value found in node "a", expected: <1> but was: <1E+5000>.'

    def test_huge_exponent_with_tolerance(self):
        actual = read_json("[1e999999999, 1E-999999999]")

        differences = compare([1, 0], actual, _config(tolerance="0.5"))

        assert [str(d.path) for d in differences] == ["[0]"]
        assert differences[0].actual == "1E+999999999"

    def test_negative_tolerance_rejected(self):
        with pytest.raises(ConfigurationError):
            Configuration.builder().with_tolerance(-0.1)


class TestNullHandling:
    """Test null versus missing nodes."""

    def test_null_member_differs_from_absent_member(self):
        differences = compare({"a": 1, "b": None}, {"a": 1})

        assert len(differences) == 1
        assert str(differences[0].path) == "b"
        assert differences[0].message == (
            'Different keys found in node "", missing: "b", '
            'expected: <{"a":1,"b":null}> but was: <{"a":1}>'
        )

    def test_null_as_absent(self):
        config = _config(Option.TREATING_NULL_AS_ABSENT)

        assert compare({"a": 1, "b": None}, {"a": 1}, config) == []
        assert compare({"a": 1}, {"a": 1, "b": None}, config) == []

    def test_null_as_absent_at_compared_node(self):
        config = _config(Option.TREATING_NULL_AS_ABSENT)

        assert compare(None, {"a": 1}, config, path="b") == []
        differences = compare(1, {"a": None}, config, path="a")
        assert differences[0].message == 'Missing node in path "a".'

    def test_missing_actual_node(self):
        differences = compare(1, {"a": 1}, path="b")

        assert len(differences) == 1
        assert differences[0].kind == DifferenceKind.DIFFERENT_VALUE
        assert differences[0].message == 'Missing node in path "b".'

    def test_null_actual_node(self):
        differences = compare(1, {"b": None}, path="b")
        assert differences[0].kind == DifferenceKind.DIFFERENT_TYPE
        assert differences[0].message == 'Different value found in node "b", expected: <1> but was: <null>.'

    def test_missing_expected_node(self):
        differences = compare(MISSING, {"a": 1}, path="a")
        assert differences[0].message == 'Different value found in node "a", expected: <missing> but was: <1>.'

    def test_both_missing(self):
        assert compare(MISSING, {"a": 1}, path="b") == []


class TestNavigation:
    """Test comparing a node selected by path."""

    def test_negative_index_counts_backwards(self):
        assert compare(3, {"root": {"test": [1, 2, 3]}}, path="root.test[-1]") == []

    def test_negative_index_failure_keeps_index(self):
        differences = compare(3, {"root": {"test": [1, 2, 3]}}, path="root.test[-3]")
        assert format_differences(differences) == (
            "JSON documents are different:\n"
            'Different value found in node "root.test[-3]", expected: <3> but was: <1>.\n'
        )

    def test_index_out_of_bounds(self):
        for path in ("root.test[-5]", "root.test[5]"):
            differences = compare(3, {"root": {"test": [1, 2, 3]}}, path=path)
            assert differences[0].message == f'Missing node in path "{path}".'

    def test_invalid_path_raises(self):
        with pytest.raises(PathSyntaxError):
            compare(1, {"a": 1}, path="a[x]")

    def test_compare_in_path_single_match(self):
        differences = compare_in_path("$.a.b", 1, {"a": {"b": 2}})
        assert differences[0].message == 'Different value found in node "$.a.b", expected: <1> but was: <2>.'

    def test_compare_in_path_multiple_matches(self):
        actual = {"items": [{"id": 1}, {"id": 2}]}

        assert compare_in_path("$.items[*].id", [1, 2], actual) == []
        differences = compare_in_path("$.items[*].id", [1, 3], actual)
        assert str(differences[0].path) == "$.items[*].id[1]"

    def test_compare_in_path_no_match(self):
        differences = compare_in_path("$.abc", 1, {"a": 1})
        assert format_differences(differences) == (
            "JSON documents are different:\n"
            'Missing node in path "$.abc".\n'
        )


class TestPlaceholders:
    """Test placeholders embedded in expected documents."""

    def test_ignore_placeholder(self):
        assert compare({"a": "${json-unit.ignore}"}, {"a": {"x": [1, 2]}}) == []

    def test_custom_ignore_placeholder(self):
        config = Configuration.builder().with_ignore_placeholder("##IGNORE##").build()

        assert compare({"test": "##IGNORE##"}, {"test": 1}, config) == []
        assert len(compare({"test": "${json-unit.ignore}"}, {"test": 1}, config)) == 1

    def test_ignore_placeholder_does_not_cover_missing_key(self):
        differences = compare({"a": "${json-unit.ignore}"}, {})
        assert [d.kind for d in differences] == [DifferenceKind.MISSING_ENTRY]

    def test_any_number(self):
        assert compare({"test": "${json-unit.any-number}"}, {"test": 1.5}) == []

    def test_any_number_fails_on_null(self):
        differences = compare({"test": "${json-unit.any-number}"}, {"test": None})
        assert differences[0].message == 'Different value found in node "test", expected: <a number> but was: <null>.'

    def test_any_number_fails_on_object(self):
        differences = compare({"test": "${json-unit.any-number}"}, {"test": {"a": 1}})
        assert differences[0].message == 'Different value found in node "test", expected: <a number> but was: <{"a":1}>.'

    def test_any_number_against_missing_node(self):
        differences = compare("${json-unit.any-number}", {"a": 1}, path="b")

        assert differences[0].kind == DifferenceKind.DIFFERENT_VALUE
        assert differences[0].message == 'Different value found in node "b", expected: <a number> but was: <missing>.'

    def test_any_string_and_boolean(self):
        expected = {"s": "${json-unit.any-string}", "b": "${json-unit.any-boolean}"}

        assert compare(expected, {"s": "x", "b": True}) == []
        differences = compare(expected, {"s": 1, "b": "true"})
        assert [d.message for d in differences] == [
            'Different value found in node "b", expected: <a boolean> but was: <"true">.',
            'Different value found in node "s", expected: <a string> but was: <1>.',
        ]

    def test_regex_placeholder(self):
        expected = {"id": "${json-unit.regex}[0-9]+"}

        assert compare(expected, {"id": "123"}) == []
        differences = compare(expected, {"id": "12a"})
        assert differences[0].message == 'Different value found in node "id". Pattern [0-9]+ did not match "12a".'
        assert len(compare(expected, {"id": 123})) == 1

    def test_invalid_regex_placeholder(self):
        with pytest.raises(ConfigurationError):
            compare({"id": "${json-unit.regex}[0-9"}, {"id": "1"})

    def test_placeholder_must_be_whole_string(self):
        assert len(compare({"a": "x ${json-unit.ignore}"}, {"a": "y"})) == 1


class TestMatchers:
    """Test ${json-unit.matches:<name>} placeholders."""

    def setup_method(self):
        self.config = (
            Configuration.builder()
            .with_matcher("positive", lambda value: MatchResult(value > 0, f"<{value}> was less than <0>"))
            .with_matcher("isString", lambda value: isinstance(value, str))
            .with_matcher("equalTo", lambda value, parameter: value == Decimal(parameter))
            .build()
        )

    def test_matcher_passes(self):
        assert compare({"test": "${json-unit.matches:positive}"}, {"test": 5}, self.config) == []

    def test_matcher_failure_message(self):
        differences = compare({"test": "${json-unit.matches:positive}"}, {"test": -1}, self.config)

        assert len(differences) == 1
        assert differences[0].kind == DifferenceKind.MATCHER_FAILED
        assert differences[0].detail == "<-1> was less than <0>"
        assert format_differences(differences) == (
            "JSON documents are different:\n"
            'Matcher "positive" does not match value -1 in node "test". <-1> was less than <0>\n'
        )
        assert str(differences[0]) == "MATCHER_FAILED Expected ${json-unit.matches:positive} in test got -1 in test"

    def test_boolean_matcher(self):
        assert compare(["${json-unit.matches:isString}"], ["x"], self.config) == []
        differences = compare(["${json-unit.matches:isString}"], [1], self.config)
        assert differences[0].message == 'Matcher "isString" does not match value 1 in node "[0]".'

    def test_matcher_with_parameter(self):
        expected = {"n": "${json-unit.matches:equalTo}5"}

        assert compare(expected, {"n": 5}, self.config) == []
        assert len(compare(expected, {"n": 6}, self.config)) == 1

    def test_matcher_tells_missing_from_null(self):
        config = self.config.to_builder().with_matcher("absent", lambda value: value is MISSING).build()
        expected = "${json-unit.matches:absent}"

        assert compare(expected, {"a": None}, config, path="b") == []
        assert len(compare(expected, {"a": None}, config, path="a")) == 1
        assert len(compare(expected, {"a": 1}, config, path="a")) == 1

    def test_unknown_matcher_under_ignored_path(self):
        expected = {"a": 1, "b": "${json-unit.matches:nope}", "c": ["${json-unit.matches:nope}"]}
        actual = {"a": 1, "b": 2, "c": [3]}

        assert compare(expected, actual, _config(ignored=["b", "c[0]"])) == []
        assert compare(expected, actual, _config(ignored=["$.b", "$.c[*]"])) == []
        with pytest.raises(UnknownMatcherError):
            compare(expected, actual, _config(ignored=["b"]))

    def test_unknown_matcher_under_unordered_element_is_checked(self):
        config = _config(Option.IGNORING_ARRAY_ORDER, ignored=["c[0]"])

        with pytest.raises(UnknownMatcherError):
            compare({"c": ["${json-unit.matches:nope}", 1]}, {"c": [1, 2]}, config)

    def test_unknown_matcher_raises_before_reporting(self):
        calls = []
        expected = {"a": 1, "b": "${json-unit.matches:nope}"}

        with pytest.raises(UnknownMatcherError) as exc_info:
            compare(expected, {"a": 2, "b": 1}, self.config, listener=calls.append)

        assert str(exc_info.value) == 'Matcher "nope" not found.'
        assert calls == []


class TestArrayComparison:
    """Test array comparison modes."""

    def test_ordered_arrays(self):
        assert compare([1, 2, 3], [1, 2, 3]) == []
        assert len(compare([1, 2, 3], [3, 2, 1])) == 2

    def test_extra_values(self):
        differences = compare([1], {"test": [1, 2, 3]}, path="test")

        assert [d.kind for d in differences] == [
            DifferenceKind.DIFFERENT_ARRAY_LENGTH,
            DifferenceKind.EXTRA_ENTRY,
        ]
        assert [d.message for d in differences] == [
            'Array "test" has different length, expected: <1> but was: <3>.',
            'Array "test" has different content. Extra values: [2, 3], expected: <[1]> but was: <[1,2,3]>',
        ]

    def test_missing_values(self):
        differences = compare([1, 2, 3], {"test": [1]}, path="test")
        assert [d.message for d in differences] == [
            'Array "test" has different length, expected: <3> but was: <1>.',
            'Array "test" has different content. Missing values: [2, 3], expected: <[1,2,3]> but was: <[1]>',
        ]

    def test_extra_values_and_element_differences(self):
        differences = compare(["a"], {"test": ["x", "b", "c"]}, path="test")
        assert format_differences(differences) == (
            "JSON documents are different:\n"
            'Array "test" has different length, expected: <1> but was: <3>.\n'
            'Array "test" has different content. Extra values: ["b", "c"], expected: <["a"]> but was: <["x","b","c"]>\n'
            'Different value found in node "test[0]", expected: <"a"> but was: <"x">.\n'
        )

    def test_ignoring_extra_items(self):
        config = _config(Option.IGNORING_EXTRA_ARRAY_ITEMS)

        assert compare([1, 2], [1, 2, 3], config) == []
        differences = compare([1, 5], [1, 2, 3], config)
        assert [str(d.path) for d in differences] == ["[1]"]

    def test_ignoring_extra_items_still_reports_missing(self):
        differences = compare([1, 2, 3], [1], _config(Option.IGNORING_EXTRA_ARRAY_ITEMS))
        assert [d.kind for d in differences] == [
            DifferenceKind.DIFFERENT_ARRAY_LENGTH,
            DifferenceKind.MISSING_ENTRY,
        ]

    def test_ignoring_order(self):
        config = _config(Option.IGNORING_ARRAY_ORDER)

        assert compare([1, 2, 3], [3, 1, 2], config) == []
        assert compare([{"b": 1}, {"c": 1}], [{"c": 1}, {"b": 1}], config) == []

    def test_ignoring_order_single_leftover_pair(self):
        config = _config(Option.IGNORING_ARRAY_ORDER)
        actual = {"a": [{"b": 1}, {"c": 1}, {"d": 1}]}

        diff = Diff([{"c": 2}, {"b": 1}, {"d": 1}], actual, config, path="a")

        assert len(diff.differences) == 1
        assert diff.differences[0].element_pair == (Path.of("a", 0), Path.of("a", 1))
        assert diff.differences_message() == (
            "JSON documents are different:\n"
            "Different value found when comparing expected array element a[0] to actual element a[1].\n"
            'Different value found in node "a[1].c", expected: <2> but was: <1>.\n'
        )
        assert str(diff.differences[0]) == "DIFFERENT_VALUE Expected 2 in a[0].c got 1 in a[1].c"

    def test_ignoring_order_with_duplicates(self):
        differences = compare([1, 1, 2], [1, 2, 2], _config(Option.IGNORING_ARRAY_ORDER))

        assert len(differences) == 1
        assert str(differences[0].path) == "[2]"
        assert differences[0].element_pair == (Path.of(1), Path.of(2))

    def test_ignoring_order_several_leftovers(self):
        differences = compare([1, 2, 3], [4, 5, 1], _config(Option.IGNORING_ARRAY_ORDER))

        assert [d.kind for d in differences] == [DifferenceKind.MISSING_ENTRY]
        assert differences[0].message == (
            'Array "" has different content. Missing values: [2, 3], extra values: [4, 5], '
            "expected: <[1,2,3]> but was: <[4,5,1]>"
        )
        assert differences[0].detail == "missing: [2, 3], extra: [4, 5]"

    def test_ignoring_order_extra_values(self):
        diff = Diff([1], {"test": [1, 2, 3]}, _config(Option.IGNORING_ARRAY_ORDER), path="test")

        assert [d.kind for d in diff.differences] == [
            DifferenceKind.DIFFERENT_ARRAY_LENGTH,
            DifferenceKind.EXTRA_ENTRY,
        ]
        assert diff.differences_message() == (
            "JSON documents are different:\n"
            'Array "test" has different length, expected: <1> but was: <3>.\n'
            'Array "test" has different content. Missing values: [], extra values: [2, 3], '
            "expected: <[1]> but was: <[1,2,3]>\n"
        )

    def test_ignoring_order_missing_values(self):
        diff = Diff([1, 2, 3], {"test": [1]}, _config(Option.IGNORING_ARRAY_ORDER), path="test")

        assert diff.differences_message() == (
            "JSON documents are different:\n"
            'Array "test" has different length, expected: <3> but was: <1>.\n'
            'Array "test" has different content. Missing values: [2, 3], extra values: [], '
            "expected: <[1,2,3]> but was: <[1]>\n"
        )

    def test_ignoring_order_and_extra_items(self):
        config = _config(Option.IGNORING_ARRAY_ORDER, Option.IGNORING_EXTRA_ARRAY_ITEMS)

        assert compare([1], [3, 1, 2], config) == []
        differences = compare([7], [3, 1, 2], config)
        assert [d.kind for d in differences] == [DifferenceKind.MISSING_ENTRY]
        assert "Missing values: [7], extra values: []," in differences[0].message

    def test_listener_not_called_for_trial_comparisons(self):
        calls = []
        config = _config(Option.IGNORING_ARRAY_ORDER)

        differences = compare(
            [{"c": 2}, {"b": 1}, {"e": [1, 2]}],
            [{"b": 1}, {"e": [2, 1]}, {"c": 1}],
            config,
            listener=calls.append
        )

        assert calls == differences
        assert len(calls) == 1


class TestIgnoredPaths:
    """Test ignored path patterns."""

    def test_literal_path(self):
        config = _config(ignored=["a.b"])
        assert compare({"a": {"b": 1, "c": 1}}, {"a": {"b": 2, "c": 1}}, config) == []

    def test_ignored_missing_and_extra_keys(self):
        config = _config(ignored=["b", "c"])
        assert compare({"a": 1, "b": 1}, {"a": 1, "c": 1}, config) == []

    def test_ignored_subtree(self):
        config = _config(ignored=["a"])
        assert compare({"a": {"b": [1]}}, {"a": {"b": [1, 2], "x": 1}}, config) == []

    def test_wildcard_index(self):
        config = _config(ignored=["items[*].id"])
        expected = {"items": [{"id": 1, "v": 1}, {"id": 2, "v": 2}]}
        actual = {"items": [{"id": 9, "v": 1}, {"id": 8, "v": 2}]}

        assert compare(expected, actual, config) == []

    def test_wildcard_field(self):
        config = _config(ignored=["*.id"])
        assert compare({"a": {"id": 1}, "b": {"id": 2}}, {"a": {"id": 3}, "b": {"id": 4}}, config) == []

    def test_jsonpath_descendants(self):
        config = _config(ignored=["$..id"])
        expected = {"a": {"id": 1, "v": 1}, "b": [{"id": 2}]}
        actual = {"a": {"id": 9, "v": 1}, "b": [{"id": 8}]}

        assert compare(expected, actual, config) == []

    def test_jsonpath_resolved_in_actual(self):
        config = _config(ignored=["$.ts"])
        assert compare({"a": 1}, {"a": 1, "ts": 5}, config) == []

    def test_jsonpath_resolved_in_expected(self):
        config = _config(ignored=["$.ts"])
        assert compare({"a": 1, "ts": 5}, {"a": 1}, config) == []

    def test_jsonpath_resolved_relative_to_compared_node(self):
        config = _config(ignored=["$.ts"])
        assert compare({"a": 1, "ts": 5}, {"root": {"a": 1}}, config, path="root") == []

    def test_invalid_patterns_rejected_on_build(self):
        with pytest.raises(PathSyntaxError):
            Configuration.builder().when_ignoring_paths("a[x]")
        with pytest.raises(InvalidJsonPathError):
            Configuration.builder().when_ignoring_paths("$[")


class TestOptions:
    """Test comparison options."""

    def test_ignoring_extra_fields(self):
        config = _config(Option.IGNORING_EXTRA_FIELDS)

        assert compare({"a": 1}, {"a": 1, "b": 2}, config) == []
        assert len(compare({"a": 1, "b": 2}, {"a": 1}, config)) == 1

    def test_ignoring_values(self):
        config = _config(Option.IGNORING_VALUES)

        assert compare({"a": 1, "b": "x", "c": [True]}, {"a": 2, "b": "y", "c": [False]}, config) == []
        differences = compare({"a": 1}, {"a": "1"}, config)
        assert [d.kind for d in differences] == [DifferenceKind.DIFFERENT_TYPE]


class TestConfiguration:
    """Test configuration snapshots and the builder."""

    def test_defaults(self):
        config = Configuration()

        assert config.options == frozenset()
        assert config.tolerance == Decimal(0)
        assert config.ignored_paths == ()
        assert config.ignore_placeholder == "${json-unit.ignore}"

    def test_snapshots_are_independent(self):
        builder = Configuration.builder().with_options(Option.IGNORING_EXTRA_FIELDS)
        first = builder.build()
        builder.with_options(Option.IGNORING_ARRAY_ORDER).when_ignoring_paths("a")
        second = builder.build()

        assert first.options == {Option.IGNORING_EXTRA_FIELDS}
        assert first.ignored_paths == ()
        assert second.options == {Option.IGNORING_EXTRA_FIELDS, Option.IGNORING_ARRAY_ORDER}
        assert second.ignored_paths == ("a",)

    def test_snapshot_is_frozen(self):
        config = Configuration()

        with pytest.raises(dataclasses.FrozenInstanceError):
            config.tolerance = Decimal(1)
        with pytest.raises(TypeError):
            config.matchers["x"] = lambda value: True

    def test_without_options_and_to_builder(self):
        config = _config(Option.IGNORING_EXTRA_FIELDS, Option.IGNORING_VALUES)
        derived = config.to_builder().without_options(Option.IGNORING_VALUES).build()

        assert derived.options == {Option.IGNORING_EXTRA_FIELDS}
        assert config.options == {Option.IGNORING_EXTRA_FIELDS, Option.IGNORING_VALUES}

    def test_from_dict(self):
        config = Configuration.from_dict({
            "options": ["ignoring-array-order", "IGNORING_EXTRA_FIELDS"],
            "tolerance": 0.5,
            "ignored_paths": ["a.b", "$..id"],
        })

        assert config.options == {Option.IGNORING_ARRAY_ORDER, Option.IGNORING_EXTRA_FIELDS}
        assert config.tolerance == Decimal("0.5")
        assert config.ignored_paths == ("a.b", "$..id")

    def test_from_dict_rejects_unknown_keys_and_options(self):
        with pytest.raises(ConfigurationError):
            Configuration.from_dict({"option": []})
        with pytest.raises(ConfigurationError):
            Configuration.from_dict({"options": ["ignoring-everything"]})

    def test_non_callable_matcher_rejected(self):
        with pytest.raises(ConfigurationError):
            Configuration.builder().with_matcher("bad", 1).build()


class TestReporting:
    """Test difference reporting."""

    def test_empty_message(self):
        assert format_differences([]) == ""
        assert Diff({"a": 1}, {"a": 1}).differences_message() == ""

    def test_diff_similar(self):
        assert Diff({"a": 1}, {"a": 1}).similar() is True
        assert Diff({"a": 1}, {"a": 2}).similar() is False

    def test_differences_are_computed_once(self):
        calls = []
        diff = Diff({"a": 1, "b": 2}, {"a": 2, "b": 3}, listener=calls.append)

        assert len(diff.differences) == 2
        assert len(diff.differences) == 2
        assert len(calls) == 2

    def test_listener_sees_every_difference_in_order(self):
        calls = []
        differences = compare(
            {"a": [1, 2], "b": {"c": 1}, "d": 1},
            {"a": [1], "b": {"c": 2, "e": 1}},
            listener=calls.append
        )

        assert calls == differences
        assert len(calls) == 5

    def test_report(self):
        report = Diff({"a": 1, "b": 2}, {"a": 2}).report()

        assert isinstance(report, DiffReport)
        assert report.is_match is False
        data = report.to_dict()
        assert data["summary"] == {"MISSING_ENTRY": 1, "DIFFERENT_VALUE": 1}
        assert data["differences"][0] == {
            "path": "b",
            "kind": "MISSING_ENTRY",
            "expected": "2",
            "actual": "missing",
            "message": 'Different keys found in node "", missing: "b", expected: <{"a":1,"b":2}> but was: <{"a":2}>',
        }
        assert report.message.startswith("JSON documents are different:\n")

    def test_difference_to_dict_with_element_pair(self):
        differences = compare([{"c": 2}, {"b": 1}], [{"b": 1}, {"c": 1}], _config(Option.IGNORING_ARRAY_ORDER))

        data = differences[0].to_dict()
        assert data["path"] == "[1].c"
        assert data["expected_path"] == "[0].c"
