"""
Unit Tests for Block

Tests for block construction, lead partitioning and transformations.
"""

import numpy as np
import pytest

from ringing_toolkit.core.errors import StageMismatch
from ringing_toolkit.core.models.block import Block, RowPosition
from ringing_toolkit.core.models.place_notation import PlaceNotation
from ringing_toolkit.core.models.row import Row
from ringing_toolkit.core.models.stage import Stage
from ringing_toolkit.generation.builder import generate_block, generate_leads
from ringing_toolkit.generation.config import GenerationConfig


class TestBlockConstruction:
    """Tests for Block invariants."""

    # ─────────────────────────────────────────────────────────────────────────
    # Constructor Tests
    # ─────────────────────────────────────────────────────────────────────────

    def test_init_when_valid_then_creates_block(self, doubles):
        """Valid rows and lead ends should build a block."""
        rows = (Row.rounds(doubles), Row.parse("10324"))
        block = Block(doubles, rows, Row.rounds(doubles), lead_ends=(2,))
        assert len(block) == 2
        assert block.num_leads == 1

    def test_init_when_empty_then_leftover_is_first_row(self, doubles):
        """An empty block starts and ends at its leftover row."""
        block = Block(doubles, (), Row.parse("10324"))
        assert len(block) == 0
        assert block.num_leads == 0
        assert str(block.first_row) == "10324"
        assert block.lead_heads == (Row.parse("10324"),)

    def test_block_when_frozen_then_rejects_assignment(self, doubles):
        """Blocks should be immutable (frozen)."""
        block = Block(doubles, (), Row.rounds(doubles))
        with pytest.raises(AttributeError):
            block.rows = ()

    # ─────────────────────────────────────────────────────────────────────────
    # Validation Tests
    # ─────────────────────────────────────────────────────────────────────────

    def test_init_when_row_stage_differs_then_raises_stage_mismatch(self, doubles, minor):
        """A row at another stage should raise StageMismatch."""
        with pytest.raises(StageMismatch):
            Block(doubles, (Row.rounds(minor),), Row.rounds(doubles))

    def test_init_when_leftover_stage_differs_then_raises_stage_mismatch(self, doubles, minor):
        """A leftover row at another stage should raise StageMismatch."""
        with pytest.raises(StageMismatch):
            Block(doubles, (Row.rounds(doubles),), Row.rounds(minor))

    def test_init_when_lead_end_zero_then_raises_error(self, doubles):
        """A zero lead end should raise ValueError."""
        with pytest.raises(ValueError, match="strictly increasing"):
            Block(doubles, (Row.rounds(doubles),), Row.rounds(doubles), lead_ends=(0,))

    def test_init_when_lead_end_past_rows_then_raises_error(self, doubles):
        """A lead end past the last row should raise ValueError."""
        with pytest.raises(ValueError):
            Block(doubles, (Row.rounds(doubles),), Row.rounds(doubles), lead_ends=(2,))

    def test_init_when_lead_ends_not_increasing_then_raises_error(self, doubles):
        """Repeated lead ends should raise ValueError."""
        rows = (Row.rounds(doubles), Row.parse("10324"))
        with pytest.raises(ValueError):
            Block(doubles, rows, Row.rounds(doubles), lead_ends=(1, 1))


class TestBlockLeads:
    """Tests for lead boundaries and positions."""

    # ─────────────────────────────────────────────────────────────────────────
    # Lead Partition Tests
    # ─────────────────────────────────────────────────────────────────────────

    def test_single_lead_when_cross_cross_then_leftover_is_rounds(self, doubles):
        """The leftover row is not part of the block."""
        cross = PlaceNotation.cross(doubles)
        block = generate_leads(Row.rounds(doubles), [cross, cross], 1)
        assert [str(r) for r in block] == ["01234", "10324"]
        assert block.leftover_row.is_rounds()
        assert list(block.all_rows())[-1] == block.leftover_row

    def test_lead_heads_when_plain_course_then_ends_with_rounds(self, plain_bob_doubles):
        """Lead heads should run through the course back to rounds."""
        course = plain_bob_doubles.plain_course()
        assert [str(r) for r in course.lead_heads] == [
            "01234", "02413", "04321", "03142", "01234",
        ]

    def test_partial_lead_when_row_count_cuts_lead_then_counted(self, plain_bob_doubles):
        """A trailing partial lead should count as a lead."""
        block = generate_block(
            Row.rounds(Stage(5)), plain_bob_doubles.notations, GenerationConfig.rows(12)
        )
        assert len(block) == 12
        assert block.lead_ends == (10,)
        assert block.num_leads == 2
        assert len(block.lead(0)) == 10
        assert len(block.lead(1)) == 2
        assert block.lead(1)[0] == plain_bob_doubles.lead_head

    def test_lead_when_out_of_range_then_raises_index_error(self, plain_bob_doubles):
        """Asking for a missing lead should raise IndexError."""
        with pytest.raises(IndexError):
            plain_bob_doubles.lead().lead(1)

    # ─────────────────────────────────────────────────────────────────────────
    # Position Tests
    # ─────────────────────────────────────────────────────────────────────────

    def test_position_of_when_at_lead_start_then_index_zero(self, plain_bob_doubles):
        """Offsets should map to lead and index within the lead."""
        block = generate_block(
            Row.rounds(Stage(5)), plain_bob_doubles.notations, GenerationConfig.rows(12)
        )
        assert block.position_of(10) == RowPosition(lead=1, index=0, offset=10)
        assert block.position_of(9) == RowPosition(lead=0, index=9, offset=9)

    def test_position_of_when_outside_then_raises_index_error(self, plain_bob_doubles):
        """The leftover offset is outside the block."""
        block = plain_bob_doubles.lead()
        with pytest.raises(IndexError):
            block.position_of(len(block))

    def test_row_position_str_when_formatted_then_names_lead_and_row(self):
        """RowPosition should format as lead and row."""
        assert str(RowPosition(lead=1, index=3, offset=13)) == "lead 1, row 3"


class TestBlockTransformations:
    """Tests for pre_multiply and to_array."""

    def test_pre_multiply_when_head_given_then_every_row_transformed(self, plain_bob_doubles):
        """Every row and the leftover should be multiplied by the head."""
        lead = plain_bob_doubles.lead()
        head = Row.parse("10234")
        moved = lead.pre_multiply(head)
        assert moved.rows == tuple(head * r for r in lead.rows)
        assert moved.leftover_row == head * lead.leftover_row
        assert moved.lead_ends == lead.lead_ends

    def test_pre_multiply_when_stage_differs_then_raises_stage_mismatch(self, plain_bob_doubles, minor):
        """A head at another stage should raise StageMismatch."""
        with pytest.raises(StageMismatch):
            plain_bob_doubles.lead().pre_multiply(Row.rounds(minor))

    def test_to_array_when_plain_course_then_matrix_of_bells(self, plain_bob_doubles):
        """to_array() should give one uint8 line per row."""
        course = plain_bob_doubles.plain_course()
        data = course.to_array()
        assert data.shape == (40, 5)
        assert data.dtype == np.uint8
        assert data[0].tolist() == [0, 1, 2, 3, 4]
        assert data[10].tolist() == [0, 2, 4, 1, 3]

    def test_to_array_when_leftover_included_then_extra_line(self, plain_bob_doubles):
        """include_leftover should append the leftover row."""
        data = plain_bob_doubles.lead().to_array(include_leftover=True)
        assert data.shape == (11, 5)
        assert data[-1].tolist() == [0, 2, 4, 1, 3]
