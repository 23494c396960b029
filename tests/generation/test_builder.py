"""
Unit Tests for Block Generation

Tests for BlockBuilder transitions and the three termination policies.
"""

import pytest

from ringing_toolkit.core.errors import DoesNotClose, StageMismatch
from ringing_toolkit.core.models.place_notation import PlaceNotation, parse_notation
from ringing_toolkit.core.models.row import Row
from ringing_toolkit.core.models.stage import Stage
from ringing_toolkit.generation.builder import (
    BlockBuilder,
    BuilderState,
    generate_block,
    generate_leads,
    generate_until_rounds,
)
from ringing_toolkit.generation.config import GenerationConfig


@pytest.fixture
def cross5():
    return PlaceNotation.cross(Stage(5))


class TestBlockBuilder:
    """Tests for incremental construction."""

    # ─────────────────────────────────────────────────────────────────────────
    # State Transition Tests
    # ─────────────────────────────────────────────────────────────────────────

    def test_init_when_seeded_then_state_seed(self, doubles):
        """A new builder should hold only its seed row."""
        builder = BlockBuilder(Row.rounds(doubles))
        assert builder.state == BuilderState.SEED
        assert builder.row_count == 0
        assert builder.lead_count == 0
        assert builder.last_row.is_rounds()

    def test_extend_when_change_applied_then_last_row_updates(self, doubles, cross5):
        """extend() should apply the change and move to EXTEND."""
        builder = BlockBuilder(Row.rounds(doubles))
        row = builder.extend(cross5)
        assert str(row) == "10324"
        assert builder.last_row == row
        assert builder.row_count == 1
        assert builder.state == BuilderState.EXTEND

    def test_mark_lead_end_when_rows_added_then_boundary(self, doubles, cross5):
        """mark_lead_end() should close the current lead."""
        builder = BlockBuilder(Row.rounds(doubles))
        builder.extend_all([cross5, cross5])
        builder.mark_lead_end()
        assert builder.state == BuilderState.LEAD_BOUNDARY
        assert builder.lead_count == 1

    def test_finish_when_called_then_last_row_becomes_leftover(self, doubles, cross5):
        """finish() should freeze the block with the last row as leftover."""
        builder = BlockBuilder(Row.rounds(doubles))
        builder.extend_all([cross5, cross5])
        builder.mark_lead_end()
        block = builder.finish()
        assert builder.state == BuilderState.TERMINAL
        assert [str(r) for r in block] == ["01234", "10324"]
        assert block.leftover_row.is_rounds()
        assert block.lead_ends == (2,)

    # ─────────────────────────────────────────────────────────────────────────
    # Invalid Transition Tests
    # ─────────────────────────────────────────────────────────────────────────

    def test_mark_lead_end_when_lead_empty_then_raises_error(self, doubles, cross5):
        """An empty lead cannot be closed."""
        builder = BlockBuilder(Row.rounds(doubles))
        with pytest.raises(RuntimeError, match="empty lead"):
            builder.mark_lead_end()
        builder.extend(cross5)
        builder.mark_lead_end()
        with pytest.raises(RuntimeError):
            builder.mark_lead_end()

    def test_extend_when_finished_then_raises_error(self, doubles, cross5):
        """A finished builder should refuse further changes."""
        builder = BlockBuilder(Row.rounds(doubles))
        builder.finish()
        with pytest.raises(RuntimeError, match="already been finished"):
            builder.extend(cross5)
        with pytest.raises(RuntimeError):
            builder.finish()

    def test_extend_when_stage_differs_then_raises_stage_mismatch(self, minor, cross5):
        """A change at another stage should raise StageMismatch."""
        builder = BlockBuilder(Row.rounds(minor))
        with pytest.raises(StageMismatch):
            builder.extend(cross5)


class TestGenerateBlock:
    """Tests for the termination policies."""

    # ─────────────────────────────────────────────────────────────────────────
    # Input Validation Tests
    # ─────────────────────────────────────────────────────────────────────────

    def test_generate_when_notation_empty_then_raises_error(self, doubles):
        """Generation needs at least one change."""
        with pytest.raises(ValueError, match="empty notation"):
            generate_block(Row.rounds(doubles), [])

    def test_generate_when_stage_differs_then_raises_stage_mismatch(self, minor, cross5):
        """Notation at another stage should raise StageMismatch."""
        with pytest.raises(StageMismatch):
            generate_block(Row.rounds(minor), [cross5])

    # ─────────────────────────────────────────────────────────────────────────
    # Row and Lead Count Tests
    # ─────────────────────────────────────────────────────────────────────────

    def test_row_count_when_zero_then_empty_block(self, doubles, cross5):
        """Zero rows should give an empty block ending on the seed."""
        block = generate_block(Row.rounds(doubles), [cross5], GenerationConfig.rows(0))
        assert len(block) == 0
        assert block.leftover_row.is_rounds()

    def test_row_count_when_mid_lead_then_stops_exactly(self, plain_bob_doubles):
        """A row count may stop part way through a lead."""
        block = generate_block(
            Row.rounds(Stage(5)), plain_bob_doubles.notations, GenerationConfig.rows(12)
        )
        assert len(block) == 12
        assert block.lead_ends == (10,)

    def test_lead_count_when_two_leads_then_row_repeats(self, doubles, cross5):
        """Cross twice is the identity, so lead two repeats lead one."""
        block = generate_leads(Row.rounds(doubles), [cross5, cross5], 2)
        assert [str(r) for r in block] == ["01234", "10324", "01234", "10324"]
        assert block.lead_ends == (2, 4)

    def test_lead_count_when_grandsire_then_thirty_rows(self, grandsire_doubles):
        """Three leads of Grandsire Doubles come round."""
        block = generate_leads(Row.rounds(Stage(5)), grandsire_doubles.notations, 3)
        assert len(block) == 30
        assert block.leftover_row.is_rounds()

    # ─────────────────────────────────────────────────────────────────────────
    # Until-Rounds Tests
    # ─────────────────────────────────────────────────────────────────────────

    def test_until_rounds_when_plain_bob_then_four_leads(self, plain_bob_doubles):
        """Plain Bob Doubles comes round after four leads."""
        block = generate_until_rounds(Row.rounds(Stage(5)), plain_bob_doubles.notations)
        assert len(block) == 40
        assert block.num_leads == 4

    def test_until_rounds_when_never_closes_then_raises_does_not_close(self, doubles, cross5):
        """From 10234 the lead head never returns to rounds."""
        config = GenerationConfig.until_rounds(max_leads=10)
        with pytest.raises(DoesNotClose) as exc_info:
            generate_block(Row.parse("10234"), [cross5, cross5], config)
        assert exc_info.value.leads_generated == 10
        assert exc_info.value.rows_generated == 20
        assert str(exc_info.value.last_row) == "10234"

    def test_until_rounds_when_row_cap_reached_then_raises_does_not_close(self, doubles, cross5):
        """The row cap should stop generation before a lead would pass it."""
        config = GenerationConfig.until_rounds(max_rows=15)
        with pytest.raises(DoesNotClose) as exc_info:
            generate_block(Row.parse("10234"), [cross5, cross5], config)
        assert exc_info.value.rows_generated == 14
        assert exc_info.value.leads_generated == 7

    def test_until_rounds_when_cap_too_small_then_raises_does_not_close(self, plain_bob_doubles):
        """Two leads are not enough for Plain Bob Doubles."""
        config = GenerationConfig.until_rounds(max_leads=2)
        with pytest.raises(DoesNotClose):
            generate_block(Row.rounds(Stage(5)), plain_bob_doubles.notations, config)

    def test_generate_until_rounds_when_other_policy_given_then_caps_only(self, plain_bob_doubles):
        """Only the caps of a non-until-rounds config should be used."""
        block = generate_until_rounds(
            Row.rounds(Stage(5)), plain_bob_doubles.notations, GenerationConfig.leads(1)
        )
        assert len(block) == 40

    # ─────────────────────────────────────────────────────────────────────────
    # Output Tests
    # ─────────────────────────────────────────────────────────────────────────

    def test_generate_when_deterministic_then_same_block(self, plain_bob_minor):
        """The same inputs should give an equal block."""
        seed = Row.rounds(Stage(6))
        first = generate_until_rounds(seed, plain_bob_minor.notations)
        second = generate_until_rounds(seed, plain_bob_minor.notations)
        assert first == second

    def test_generate_when_any_change_then_rows_are_permutations(self, minor):
        """Every generated row is a valid permutation of the stage."""
        notations = [parse_notation(t, minor) for t in ["-", "05", "01", "25"]]
        block = generate_leads(Row.rounds(minor), notations, 5)
        for row in block.all_rows():
            assert sorted(row.indices()) == list(range(6))
