# spectable/__init__.py
"""
Spectable Library

Structured product spec-table editor core: a table whose cells hold
several independent lines, with rectangular merge/unmerge of lines into
rowspan/colspan spans.

Package Structure:
- core: Spec table editing core module
    - SpecTableEditor: Editing session facade
    - grid: GridModel, coverage resolution, selection, merge/unmerge, serializer
    - functions: Utilities, persistence interface, rendering

Usage:
    from spectable import SpecTableEditor

    editor = SpecTableEditor(stored_payload, on_change=host.on_specs_change)
    editor.add_row()
    html = editor.render()
"""

__version__ = "0.1.0"

# Expose core classes at top level
from spectable.core import SpecTableEditor
from spectable.core.grid import (
    GridModel,
    LineEntry,
    SelectionTracker,
    CoverageResolver,
    CoverageKind,
    SpecTableConfig,
    SpecTableError,
    StructuralError,
    MergeError,
    PersistenceError,
)

# Explicit subpackages
from spectable import core

__all__ = [
    "__version__",
    # Core classes
    "SpecTableEditor",
    "GridModel",
    "LineEntry",
    "SelectionTracker",
    "CoverageResolver",
    "CoverageKind",
    "SpecTableConfig",
    # Errors
    "SpecTableError",
    "StructuralError",
    "MergeError",
    "PersistenceError",
    # Subpackages
    "core",
]
