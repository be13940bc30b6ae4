# tests/test_coverage_resolver.py
import pytest

from spectable.core.grid.coverage_resolver import CoverageResolver
from spectable.core.grid.grid_constants import CoverageKind, StructuralError
from spectable.core.grid.legacy_adapter import normalize
from spectable.core.grid.merge_engine import merge
from spectable.core.grid.selection_tracker import SelectionTracker


def test_all_standalone_without_spans(grid_3x3):
    resolver = CoverageResolver(grid_3x3)
    for coordinate in grid_3x3.iter_coordinates():
        assert resolver.classify(*coordinate).kind is CoverageKind.STANDALONE


def test_anchor_and_covered(grid_3x3):
    merge(grid_3x3, SelectionTracker([(0, 1, 0), (0, 2, 0), (1, 1, 0), (1, 2, 0)]))
    resolver = CoverageResolver(grid_3x3)

    anchor = resolver.classify(0, 1, 0)
    assert anchor.kind is CoverageKind.ANCHOR
    assert (anchor.rowspan, anchor.colspan) == (2, 2)

    for coordinate in [(0, 2, 0), (1, 1, 0), (1, 2, 0)]:
        coverage = resolver.classify(*coordinate)
        assert coverage.is_covered
        assert coverage.owner == (0, 1, 0)

    assert resolver.classify(0, 0, 0).is_standalone
    assert resolver.classify(2, 1, 0).is_standalone


def test_exactly_one_anchor_per_rectangle(grid_3x3):
    merge(grid_3x3, SelectionTracker([(0, 0, 0), (1, 0, 0), (2, 0, 0)]))
    merge(grid_3x3, SelectionTracker([(0, 1, 0), (0, 2, 0)]))
    view = CoverageResolver(grid_3x3).resolve()

    anchors = [c for c, cov in view.items() if cov.is_anchor]
    covered = [c for c, cov in view.items() if cov.is_covered]
    assert sorted(anchors) == [(0, 0, 0), (0, 1, 0)]
    # (3 x 1 - 1) + (1 x 2 - 1)
    assert len(covered) == 3
    assert not set(anchors) & set(covered)


def test_resolve_matches_classify(grid_3x3):
    merge(grid_3x3, SelectionTracker([(1, 1, 0), (1, 2, 0), (2, 1, 0), (2, 2, 0)]))
    resolver = CoverageResolver(grid_3x3)
    view = resolver.resolve()
    for coordinate in grid_3x3.iter_coordinates():
        assert view[coordinate] == resolver.classify(*coordinate)


def test_other_lines_in_anchor_cell_are_covered():
    # anchor on line 1; line 0 of the same cell keeps its standalone flags
    model = normalize({
        "headers": ["a", "b"],
        "rows": [{"cells": [
            {"lines": [
                {"content": "hidden", "rowspan": 1, "colspan": 1},
                {"content": "merged", "rowspan": 1, "colspan": 2},
            ]},
            {"lines": [{"content": "", "rowspan": 0, "colspan": 0}]},
        ]}],
    })
    resolver = CoverageResolver(model)
    assert resolver.classify(0, 0, 1).is_anchor
    assert resolver.classify(0, 0, 0).is_covered
    assert resolver.classify(0, 1, 0).is_covered


def test_all_lines_of_covered_cell_are_covered():
    model = normalize({
        "headers": ["a", "b"],
        "rows": [{"cells": [
            {"lines": [{"content": "A", "rowspan": 1, "colspan": 2}]},
            {"lines": [
                {"content": "", "rowspan": 0, "colspan": 0},
                {"content": "", "rowspan": 0, "colspan": 0},
            ]},
        ]}],
    })
    resolver = CoverageResolver(model)
    assert resolver.classify(0, 1, 0).is_covered
    assert resolver.classify(0, 1, 1).is_covered
    assert resolver.visible_line_count(0, 0) == 1
    assert resolver.visible_line_count(0, 1) == 0


def test_row_span_is_rectangular_not_line_scan():
    """
    A row span hides exactly the cells of its rectangle, at every line.

    Scanning earlier rows for any line with rowspan > 1 would also hide the
    second line of the cell below the anchor's neighbour; the rectangular
    contract leaves every cell outside the extent visible.
    """
    model = normalize({
        "headers": ["a", "b"],
        "rows": [
            {"cells": [
                {"lines": [{"content": "span", "rowspan": 2, "colspan": 1}]},
                {"lines": [{"content": "b0", "rowspan": 1, "colspan": 1}]},
            ]},
            {"cells": [
                {"lines": [{"content": "", "rowspan": 0, "colspan": 0}]},
                {"lines": [
                    {"content": "b1-0", "rowspan": 1, "colspan": 1},
                    {"content": "b1-1", "rowspan": 1, "colspan": 1},
                ]},
            ]},
        ],
    })
    resolver = CoverageResolver(model)
    assert resolver.classify(1, 0, 0).is_covered
    assert resolver.classify(1, 1, 0).is_standalone
    assert resolver.classify(1, 1, 1).is_standalone


def test_classification_follows_model_changes(grid_3x3):
    resolver = CoverageResolver(grid_3x3)
    assert resolver.classify(0, 1, 0).is_standalone
    merge(grid_3x3, SelectionTracker([(0, 0, 0), (0, 1, 0)]))
    assert resolver.classify(0, 1, 0).is_covered


def test_missing_coordinate_raises(grid_3x3):
    with pytest.raises(StructuralError):
        CoverageResolver(grid_3x3).classify(0, 0, 5)
