# tests/conftest.py
import pytest

from spectable.core.grid.grid_model import GridModel
from spectable.core.grid.legacy_adapter import normalize
from spectable.core.grid.selection_tracker import SelectionTracker


@pytest.fixture
def scenario_payload():
    """구분/사양 두 컬럼, 한 행: 셀0 = [A, B], 셀1 = [X]."""
    return {
        "headers": ["구분", "사양"],
        "rows": [
            {
                "cells": [
                    {"lines": [
                        {"content": "A", "rowspan": 1, "colspan": 1},
                        {"content": "B", "rowspan": 1, "colspan": 1},
                    ]},
                    {"lines": [{"content": "X", "rowspan": 1, "colspan": 1}]},
                ]
            }
        ],
    }


@pytest.fixture
def grid_3x3():
    """3x3 table, one line per cell, content 'r{row}c{col}'."""
    model = GridModel.empty(["A", "B", "C"])
    for row in range(3):
        model.add_row()
        for col in range(3):
            model.set_line_content(row, col, 0, f"r{row}c{col}")
    return model


@pytest.fixture
def scenario_model(scenario_payload):
    return normalize(scenario_payload)


@pytest.fixture
def selection():
    return SelectionTracker()
