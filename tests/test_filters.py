"""Tests for placeholder filters."""

import pytest

from statformula.filters import (
    Filter,
    KeyedFilter,
    OverridableFilter,
    ReplacerFilter,
    is_valid_replacement,
    stringify,
)


class TestValidity:
    """Test the replacement validity checker."""

    def test_invalid_replacements(self):
        """Test absent, empty and stringified-absent values are rejected."""
        assert is_valid_replacement(None) is False
        assert is_valid_replacement("") is False
        assert is_valid_replacement("undefined") is False
        assert is_valid_replacement("null") is False
        assert is_valid_replacement("None") is False

    def test_non_strings_are_invalid(self):
        """Test values that are not strings are rejected."""
        assert is_valid_replacement(42) is False
        assert is_valid_replacement(["42"]) is False

    def test_valid_replacements(self):
        """Test ordinary strings are accepted."""
        assert is_valid_replacement("42") is True
        assert is_valid_replacement("0") is True
        assert is_valid_replacement(" ") is True
        assert is_valid_replacement("nullable") is True

    def test_stringify(self):
        """Test replacer results are converted to text."""
        assert stringify(None) is None
        assert stringify(42) == "42"
        assert stringify(2.5) == "2.5"
        assert stringify(True) == "true"
        assert stringify("x") == "x"


class TestReplacerFilter:
    """Test the plain replacer filter."""

    def test_is_a_filter(self, level_filter):
        """Test the replacer filter implements the Filter interface."""
        assert isinstance(level_filter, Filter)
        assert level_filter.token == "{level}"

    def test_token_is_read_only(self, level_filter):
        """Test the token cannot be reassigned."""
        with pytest.raises(AttributeError):
            level_filter.token = "{other}"

    def test_replaces_every_occurrence(self, level_filter):
        """Test every literal occurrence of the token is replaced."""
        assert level_filter.apply("{level} * 2 + {level}") == "3 * 2 + 3"

    def test_identity_without_token(self, level_filter):
        """Test strings without the token are returned unchanged."""
        assert level_filter.apply("1 + {other} + level") == "1 + {other} + level"

    def test_identity_without_replacer(self):
        """Test a filter without a replacer is a no-op."""
        assert ReplacerFilter("{x}").apply("{x} + 1") == "{x} + 1"

    def test_invalid_replacement_leaves_placeholder(self):
        """Test an invalid replacement leaves the template intact."""
        assert ReplacerFilter("{x}", lambda: None).apply("{x} + 1") == "{x} + 1"
        assert ReplacerFilter("{x}", lambda: "").apply("{x} + 1") == "{x} + 1"
        assert ReplacerFilter("{x}", lambda: "undefined").apply("{x}") == "{x}"

    def test_token_matched_verbatim(self):
        """Test regex metacharacters in the token are matched literally."""
        placeholder_filter = ReplacerFilter("$(a.b)", lambda: 7)
        assert placeholder_filter.apply("$(a.b) + $(aXb)") == "7 + $(aXb)"

    def test_replacer_reads_live_state(self, player, level_filter):
        """Test the replacer is called again on every application."""
        assert level_filter.apply("{level}") == "3"
        player.level = 4
        assert level_filter.apply("{level}") == "4"

    def test_replacer_exception_propagates(self):
        """Test a failing replacer is not swallowed by apply."""
        def fail():
            raise RuntimeError("stat unavailable")

        with pytest.raises(RuntimeError, match="stat unavailable"):
            ReplacerFilter("{x}", fail).apply("{x}")


class TestOverridableFilter:
    """Test the filter with one-shot staged replacements."""

    def test_falls_back_to_replacer(self, roll_filter):
        """Test the replacer is used when nothing is staged."""
        assert roll_filter.has_staged_replacement() is False
        assert roll_filter.apply("{roll} + 1") == "4 + 1"

    def test_staged_replacement_is_one_shot(self, roll_filter):
        """Test a staged value is used once, then the replacer again."""
        roll_filter.set_staged_replacement(6)

        assert roll_filter.apply("{roll}") == "6"
        assert roll_filter.apply("{roll}") == "4"

    def test_staged_replacement_replaces_all_occurrences(self, roll_filter):
        """Test the staged value fills every occurrence in a single apply."""
        roll_filter.set_staged_replacement(6)
        assert roll_filter.apply("{roll} * {roll}") == "6 * 6"

    def test_set_is_fluent(self, roll_filter):
        """Test set_staged_replacement returns the filter."""
        assert roll_filter.set_staged_replacement(2) is roll_filter

    def test_fetch_clears(self, roll_filter):
        """Test fetching returns the staged value and clears it."""
        roll_filter.set_staged_replacement(2.5)

        assert roll_filter.has_staged_replacement() is True
        assert roll_filter.fetch_staged_replacement() == "2.5"
        assert roll_filter.has_staged_replacement() is False
        assert roll_filter.fetch_staged_replacement() == ""

    def test_last_stager_wins(self, roll_filter):
        """Test staging twice keeps only the latest value."""
        roll_filter.set_staged_replacement(1).set_staged_replacement(2)
        assert roll_filter.apply("{roll}") == "2"

    def test_empty_stage_is_ignored(self, roll_filter):
        """Test an empty staged value does not count as staged."""
        roll_filter.set_staged_replacement("")
        assert roll_filter.has_staged_replacement() is False
        assert roll_filter.apply("{roll}") == "4"

    def test_no_replacer_is_noop(self):
        """Test a filter without a replacer ignores and keeps the staged value."""
        placeholder_filter = OverridableFilter("{roll}").set_staged_replacement(6)

        assert placeholder_filter.apply("{roll}") == "{roll}"
        assert placeholder_filter.has_staged_replacement() is True

    def test_invalid_staged_value_is_consumed(self, roll_filter):
        """Test a staged "null" leaves the placeholder and is still consumed."""
        roll_filter.set_staged_replacement("null")

        assert roll_filter.apply("{roll}") == "{roll}"
        assert roll_filter.apply("{roll}") == "4"


class TestKeyedFilter:
    """Test the keyed filter family."""

    def test_resolves_each_key(self, attribute_filter):
        """Test every keyed placeholder is resolved independently."""
        result = attribute_filter.apply("{attribute:health} and {attribute:mana}")
        assert result == "100 and 50"

    def test_unknown_key_left_intact(self, attribute_filter):
        """Test an occurrence whose key has no value stays literal."""
        result = attribute_filter.apply("{attribute:health} + {attribute:unknown}")
        assert result == "100 + {attribute:unknown}"

    def test_empty_key_left_intact(self, attribute_filter):
        """Test an empty key is treated as a non-match."""
        assert attribute_filter.apply("{attribute:}") == "{attribute:}"

    def test_replacer_receives_key(self):
        """Test the captured key is passed to the replacer."""
        seen = []

        def replacer(key):
            seen.append(key)
            return len(key)

        KeyedFilter("stat", replacer).apply("{stat:ab} {stat:abcd} {other:x}")
        assert seen == ["ab", "abcd"]

    def test_key_capture_is_non_greedy(self, attribute_filter):
        """Test adjacent placeholders are matched separately."""
        assert attribute_filter.apply("{attribute:health}{attribute:mana}") == "10050"

    def test_custom_wrappers(self):
        """Test custom separator and wrappers are matched literally."""
        placeholder_filter = KeyedFilter(
            "var", lambda key: {"a": 1}.get(key), separator=".", left_wrapper="[", right_wrapper="]"
        )
        assert placeholder_filter.apply("[var.a] + [varXa] + {var:a}") == "1 + [varXa] + {var:a}"

    def test_identity_without_replacer(self):
        """Test a keyed filter without a replacer is a no-op."""
        assert KeyedFilter().apply("{attribute:health}") == "{attribute:health}"

    def test_repr_shows_syntax(self, attribute_filter):
        """Test the repr names the placeholder syntax it matches."""
        assert "{attribute:key}" in repr(attribute_filter)


class TestKeyedFilterPattern:
    """Test the compiled keyed pattern."""

    def test_pattern_compiled_once(self, attribute_filter):
        """Test the same compiled pattern serves every application."""
        pattern = attribute_filter.pattern

        attribute_filter.apply("{attribute:health}")
        assert attribute_filter.pattern is pattern
        assert pattern.pattern == r"\{attribute:(.*?)\}"

    def test_syntax_is_read_only(self, attribute_filter):
        """Test the separator and wrappers cannot drift from the pattern."""
        with pytest.raises(AttributeError):
            attribute_filter.separator = "."
        with pytest.raises(AttributeError):
            attribute_filter.left_wrapper = "["
