"""
Unit Tests for Bell and Stage Models

Tests for bell symbols and stage bounds, names and matching.
"""

import pytest

from ringing_toolkit.core.errors import StageMismatch
from ringing_toolkit.core.models.bell import Bell
from ringing_toolkit.core.models.stage import MAX_STAGE, MINOR, Stage


class TestBell:
    """Tests for Bell dataclass."""

    # ─────────────────────────────────────────────────────────────────────────
    # Parsing Tests
    # ─────────────────────────────────────────────────────────────────────────

    def test_from_symbol_when_digit_then_returns_index(self):
        """Digits map to their value."""
        assert Bell.from_symbol("7") == Bell(7)

    def test_from_symbol_when_lower_case_letter_then_case_insensitive(self):
        """Letters map to 10 upwards in either case."""
        assert Bell.from_symbol("a") == Bell.from_symbol("A") == Bell(10)

    def test_from_symbol_when_unknown_then_raises_error(self):
        """Non-bell characters should raise ValueError."""
        with pytest.raises(ValueError, match="Unknown bell symbol"):
            Bell.from_symbol("?")

    # ─────────────────────────────────────────────────────────────────────────
    # Constructor Tests
    # ─────────────────────────────────────────────────────────────────────────

    def test_init_when_negative_then_raises_error(self):
        """Negative indices should raise ValueError."""
        with pytest.raises(ValueError, match="Bell index"):
            Bell(-1)

    def test_symbol_when_letter_then_upper_case(self):
        """Display form is canonical upper case."""
        assert Bell(11).symbol == "B"
        assert str(Bell(3)) == "3"

    def test_tenor_when_stage_given_then_highest_bell(self):
        """tenor() should be the last bell of the stage, treble() the first."""
        assert Bell.tenor(Stage(8)) == Bell(7)
        assert Bell.treble() == Bell(0)


class TestStage:
    """Tests for Stage dataclass."""

    # ─────────────────────────────────────────────────────────────────────────
    # Constructor Tests
    # ─────────────────────────────────────────────────────────────────────────

    def test_init_when_zero_then_raises_error(self):
        """A stage of no bells should raise ValueError."""
        with pytest.raises(ValueError, match="between 1 and"):
            Stage(0)

    def test_init_when_above_alphabet_then_raises_error(self):
        """Stages beyond the symbol alphabet are rejected."""
        with pytest.raises(ValueError, match="between 1 and"):
            Stage(MAX_STAGE + 1)

    # ─────────────────────────────────────────────────────────────────────────
    # Name Tests
    # ─────────────────────────────────────────────────────────────────────────

    def test_name_when_named_stage_then_returns_name(self):
        """Named stages should report their name; others None."""
        assert Stage(5).name == "Doubles"
        assert Stage(12).name == "Maximus"
        assert Stage(1).name is None

    def test_from_name_when_any_case_then_finds_stage(self):
        """Name lookup should ignore case."""
        assert Stage.from_name("MINOR") == MINOR
        assert Stage.from_name("caters") == Stage(9)

    def test_from_name_when_unknown_then_returns_none(self):
        """An unknown name should give None."""
        assert Stage.from_name("Minr") is None

    # ─────────────────────────────────────────────────────────────────────────
    # Derived Property Tests
    # ─────────────────────────────────────────────────────────────────────────

    def test_extent_length_when_doubles_then_120(self):
        """The extent on five bells is 5! rows."""
        assert Stage(5).extent_length == 120

    def test_bells_when_iterated_then_ascending(self):
        """bells() should yield treble to tenor."""
        assert [b.index for b in Stage(4).bells()] == [0, 1, 2, 3]

    # ─────────────────────────────────────────────────────────────────────────
    # Matching Tests
    # ─────────────────────────────────────────────────────────────────────────

    def test_ensure_matching_when_different_then_raises_stage_mismatch(self):
        """Mismatched stages are a hard error carrying both stages."""
        with pytest.raises(StageMismatch) as exc_info:
            Stage(5).ensure_matching(Stage(6), "multiply")
        assert exc_info.value.left == Stage(5)
        assert exc_info.value.right == Stage(6)
        assert "multiply" in str(exc_info.value)

    def test_ensure_matching_when_equal_then_passes(self):
        """Equal stages should not raise."""
        Stage(6).ensure_matching(MINOR)
