# tests/test_grid_model.py
import pytest

from spectable.core.grid.grid_constants import DEFAULT_HEADERS, StructuralError
from spectable.core.grid.grid_model import GridModel, LineEntry
from spectable.core.grid.merge_engine import merge
from spectable.core.grid.selection_tracker import SelectionTracker


def assert_invariants(model):
    assert model.num_cols >= 1
    for row in model.rows:
        assert len(row.cells) == len(model.headers)
        for cell in row.cells:
            assert len(cell.lines) >= 1
    model.validate()


class TestLineEntry:
    def test_flags(self):
        assert LineEntry.standalone("a").is_standalone
        assert LineEntry(content="a", rowspan=2, colspan=1).is_anchor
        assert LineEntry(content="a", rowspan=1, colspan=3).is_anchor
        assert LineEntry.covered().is_covered

    @pytest.mark.parametrize("rowspan,colspan", [(1, 0), (0, 1), (0, 2), (-1, 1), (2, 0)])
    def test_invalid_combinations(self, rowspan, colspan):
        assert not LineEntry(content="", rowspan=rowspan, colspan=colspan).is_valid()

    def test_covered_with_content_is_invalid(self):
        assert not LineEntry(content="x", rowspan=0, colspan=0).is_valid()


class TestColumns:
    def test_empty_model_uses_default_headers(self):
        model = GridModel.empty()
        assert model.headers == DEFAULT_HEADERS
        assert model.rows == []

    def test_add_column_default_label(self):
        model = GridModel.empty()
        model.add_row()
        index = model.add_column()
        assert index == 4
        assert model.headers[-1] == "컬럼5"
        assert model.rows[0].cells[-1].lines == [LineEntry.standalone()]
        assert_invariants(model)

    def test_add_column_with_label(self):
        model = GridModel.empty(["구분"])
        model.add_column("비고")
        assert model.headers == ["구분", "비고"]

    def test_remove_column(self):
        model = GridModel.empty(["a", "b", "c"])
        model.add_row()
        model.set_line_content(0, 2, 0, "keep")
        model.remove_column(1)
        assert model.headers == ["a", "c"]
        assert model.rows[0].cells[1].lines[0].content == "keep"
        assert_invariants(model)

    def test_remove_last_column_rejected(self):
        model = GridModel.empty(["only"])
        model.add_row()
        with pytest.raises(StructuralError):
            model.remove_column(0)
        assert model.headers == ["only"]

    def test_remove_column_out_of_range(self):
        model = GridModel.empty(["a", "b"])
        with pytest.raises(StructuralError):
            model.remove_column(5)

    def test_rename_column(self):
        model = GridModel.empty(["a", "b"])
        model.rename_column(1, "사양")
        assert model.headers == ["a", "사양"]

    def test_labels_are_sanitized(self):
        model = GridModel.empty(["a"])
        model.add_column("b\x07")
        model.rename_column(0, "a\ue000")
        assert model.headers == ["a", "b"]

    def test_move_column_moves_cells_in_lockstep(self, grid_3x3):
        grid_3x3.move_column(0, 2)
        assert grid_3x3.headers == ["B", "C", "A"]
        assert [c.lines[0].content for c in grid_3x3.rows[1].cells] == ["r1c1", "r1c2", "r1c0"]
        assert_invariants(grid_3x3)


class TestRows:
    def test_add_row(self):
        model = GridModel.empty(["a", "b"])
        assert model.add_row() == 0
        assert len(model.rows[0].cells) == 2
        assert all(cell.lines == [LineEntry.standalone()] for cell in model.rows[0].cells)

    def test_remove_row(self, grid_3x3):
        grid_3x3.remove_row(1)
        assert grid_3x3.num_rows == 2
        assert grid_3x3.rows[1].cells[0].lines[0].content == "r2c0"

    def test_move_row(self, grid_3x3):
        grid_3x3.move_row(2, 0)
        assert [r.cells[0].lines[0].content for r in grid_3x3.rows] == ["r2c0", "r0c0", "r1c0"]


class TestLines:
    def test_add_line_after_index(self):
        model = GridModel.empty(["a"])
        model.add_row()
        model.set_line_content(0, 0, 0, "first")
        position = model.add_line(0, 0, 0)
        assert position == 1
        model.set_line_content(0, 0, 1, "second")
        model.add_line(0, 0, 0)
        assert [line.content for line in model.rows[0].cells[0].lines] == ["first", "", "second"]

    def test_add_line_past_end_appends(self):
        model = GridModel.empty(["a"])
        model.add_row()
        assert model.add_line(0, 0, 1) == 1
        assert len(model.rows[0].cells[0].lines) == 2

    def test_add_line_at_top(self):
        model = GridModel.empty(["a"])
        model.add_row()
        model.set_line_content(0, 0, 0, "x")
        model.add_line(0, 0, -1)
        assert [line.content for line in model.rows[0].cells[0].lines] == ["", "x"]

    def test_remove_last_line_rejected(self):
        model = GridModel.empty(["a"])
        model.add_row()
        with pytest.raises(StructuralError):
            model.remove_line(0, 0, 0)
        assert len(model.rows[0].cells[0].lines) == 1

    def test_remove_line(self):
        model = GridModel.empty(["a"])
        model.add_row()
        model.add_line(0, 0, 0)
        model.set_line_content(0, 0, 1, "b")
        model.remove_line(0, 0, 0)
        assert [line.content for line in model.rows[0].cells[0].lines] == ["b"]

    def test_set_line_content_out_of_range(self):
        model = GridModel.empty(["a"])
        model.add_row()
        with pytest.raises(StructuralError):
            model.set_line_content(0, 0, 3, "x")


class TestSpanProtection:
    @pytest.fixture
    def merged(self, grid_3x3):
        selection = SelectionTracker([(0, 0, 0), (0, 1, 0), (1, 0, 0), (1, 1, 0)])
        merge(grid_3x3, selection)
        return grid_3x3

    def test_remove_row_inside_span_rejected(self, merged):
        before = merged.copy()
        with pytest.raises(StructuralError):
            merged.remove_row(1)
        assert merged == before

    def test_remove_row_outside_span_allowed(self, merged):
        merged.remove_row(2)
        assert merged.num_rows == 2
        assert_invariants(merged)

    def test_remove_column_inside_span_rejected(self, merged):
        with pytest.raises(StructuralError):
            merged.remove_column(0)

    def test_move_row_across_span_rejected(self, merged):
        with pytest.raises(StructuralError):
            merged.move_row(2, 0)

    def test_add_line_inside_span_rejected(self, merged):
        with pytest.raises(StructuralError):
            merged.add_line(1, 1, 0)

    def test_edit_covered_line_rejected(self, merged):
        with pytest.raises(StructuralError):
            merged.set_line_content(0, 1, 0, "hidden")

    def test_edit_anchor_allowed(self, merged):
        merged.set_line_content(0, 0, 0, "merged text")
        assert merged.rows[0].cells[0].lines[0].content == "merged text"

    def test_horizontal_span_row_can_be_removed_whole(self, grid_3x3):
        merge(grid_3x3, SelectionTracker([(1, 0, 0), (1, 1, 0), (1, 2, 0)]))
        grid_3x3.remove_row(1)
        assert grid_3x3.anchors() == []
        assert_invariants(grid_3x3)


class TestValidation:
    def test_failed_validation_restores_state(self):
        model = GridModel.empty(["a", "b"])
        model.add_row()
        before = model.copy()
        with pytest.raises(StructuralError):
            model.replace_lines({(0, 1, 0): LineEntry(content="", rowspan=1, colspan=0)})
        assert model == before

    def test_orphan_placeholder_is_structural_error(self):
        model = GridModel.empty(["a", "b"])
        model.add_row()
        model.rows[0].cells[1].lines[0] = LineEntry.covered()
        with pytest.raises(StructuralError):
            model.validate()

    def test_span_beyond_table_is_structural_error(self):
        model = GridModel.empty(["a", "b"])
        model.add_row()
        model.rows[0].cells[1].lines[0] = LineEntry(content="x", rowspan=1, colspan=2)
        with pytest.raises(StructuralError):
            model.validate()

    def test_invariants_after_operation_sequence(self):
        model = GridModel.empty()
        model.add_row()
        model.add_row()
        model.add_column()
        model.add_line(1, 2, 0)
        model.add_line(1, 2, 1)
        model.remove_column(0)
        model.remove_line(1, 1, 0)
        model.move_column(0, 3)
        model.remove_row(0)
        model.add_row()
        assert_invariants(model)
        assert [len(cell.lines) for cell in model.rows[0].cells] == [2, 1, 1, 1]
