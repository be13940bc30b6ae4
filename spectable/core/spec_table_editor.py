# spectable/core/spec_table_editor.py
"""SpecTableEditor - Spec Table Editing Session

Main entry point of the spectable library. One SpecTableEditor instance is
one editing session: it owns a GridModel and a SelectionTracker, exposes
every structural, merge and rendering operation, and hands the current
payload to the host shell after every change.

Usage Example:
    from spectable import SpecTableEditor
    from spectable.core.functions.spec_store import InMemorySpecStore

    store = InMemorySpecStore()
    editor = SpecTableEditor.open(store, "product-42", on_change=print)

    row = editor.add_row()
    editor.set_line_content(row, 0, 0, "전원")
    editor.set_line_content(row, 1, 0, "AC 220V")

    editor.toggle_selection(row, 2, 0)
    editor.toggle_selection(row, 3, 0)
    if editor.can_merge():
        editor.merge_selection()

    html = editor.render()
    editor.save(store, "product-42")
"""

import dataclasses
import logging
from typing import Any, Callable, Dict, Optional

from spectable.core.functions.spec_store import BaseSpecStore
from spectable.core.functions.table_processor import (
    TableOutputFormat,
    TableProcessor,
    TableProcessorConfig,
    import_html_table,
)
from spectable.core.grid.coverage_resolver import Coverage, CoverageResolver
from spectable.core.grid.grid_constants import (
    DEFAULT_SPEC_TABLE_CONFIG,
    SpecTableConfig,
    StructuralError,
)
from spectable.core.grid.grid_model import GridModel
from spectable.core.grid.legacy_adapter import normalize
from spectable.core.grid.merge_engine import MergeEngine, MergeResult, UnmergeEngine, UnmergeResult
from spectable.core.grid.selection_tracker import SelectionTracker
from spectable.core.grid.serializer import to_json

logger = logging.getLogger("spec-table")

ChangeCallback = Callable[[Dict[str, Any]], None]


class SpecTableEditor:
    """
    Spec table editing session.

    Every failed operation raises (StructuralError or MergeError) and leaves
    the model untouched. Operations that shift indices (adding, removing or
    moving rows, columns and lines) also clear the current selection.

    Args:
        value: Initial payload (any shape LegacyAdapter accepts, None for a fresh table)
        on_change: Called with the current payload after every successful change
        config: Editor configuration
        processor_config: Rendering configuration
    """

    def __init__(
        self,
        value: Any = None,
        on_change: Optional[ChangeCallback] = None,
        config: Optional[SpecTableConfig] = None,
        processor_config: Optional[TableProcessorConfig] = None
    ):
        self.config = config or DEFAULT_SPEC_TABLE_CONFIG
        self.model: GridModel = normalize(value, self.config)
        self.selection = SelectionTracker()
        self._on_change = on_change
        self._merge_engine = MergeEngine(self.config)
        self._unmerge_engine = UnmergeEngine(self.config)
        self._processor = TableProcessor(processor_config)

    @classmethod
    def open(
        cls,
        store: BaseSpecStore,
        record_id: str,
        on_change: Optional[ChangeCallback] = None,
        config: Optional[SpecTableConfig] = None
    ) -> "SpecTableEditor":
        """Open an editor on the payload stored for ``record_id``.

        Errors raised by the store propagate.
        """
        value = store.load_specs(record_id)
        logger.info(f"Opened spec table for record '{record_id}' ({'stored' if value is not None else 'fresh'})")
        return cls(value, on_change=on_change, config=config)

    # ========================================================================
    # Payload
    # ========================================================================

    @property
    def payload(self) -> Dict[str, Any]:
        """Current wire-format payload."""
        return to_json(self.model)

    def load(self, value: Any) -> None:
        """Replace the session's table with a new payload (no change notification)."""
        self.model = normalize(value, self.config)
        self.selection.clear()

    def import_html(self, html_content: str) -> None:
        """Replace the table with the first <table> found in an HTML fragment."""
        model = import_html_table(html_content, self.config)
        if model is None:
            raise StructuralError("No table found in HTML content")
        self.model = model
        self.selection.clear()
        self._notify()

    def save(self, store: BaseSpecStore, record_id: str) -> bool:
        """
        Save the full payload through the store.

        Returns:
            True on success. On failure (False result or any exception from
            the store) the in-memory table is kept so the save can be retried.
        """
        payload = self.payload
        try:
            saved = store.save_specs(record_id, payload)
        except Exception as e:
            logger.warning(f"Failed to save spec table for record '{record_id}': {e}")
            return False

        if not saved:
            logger.warning(f"Spec store rejected save for record '{record_id}'")
            return False

        logger.info(f"Saved spec table for record '{record_id}' ({self.model.num_rows} rows)")
        return True

    def _notify(self) -> None:
        if self._on_change is not None:
            self._on_change(self.payload)

    def _structural(self, result: Any = None) -> Any:
        self.selection.clear()
        self._notify()
        return result

    # ========================================================================
    # Columns / Rows / Lines
    # ========================================================================

    def add_column(self, label: Optional[str] = None) -> int:
        return self._structural(self.model.add_column(label))

    def remove_column(self, index: int) -> None:
        self.model.remove_column(index)
        self._structural()

    def rename_column(self, index: int, label: str) -> None:
        self.model.rename_column(index, label)
        self._notify()

    def move_column(self, source: int, target: int) -> None:
        self.model.move_column(source, target)
        self._structural()

    def add_row(self) -> int:
        return self._structural(self.model.add_row())

    def remove_row(self, index: int) -> None:
        self.model.remove_row(index)
        self._structural()

    def move_row(self, source: int, target: int) -> None:
        self.model.move_row(source, target)
        self._structural()

    def add_line(self, row: int, col: int, after_line_index: int) -> int:
        return self._structural(self.model.add_line(row, col, after_line_index))

    def remove_line(self, row: int, col: int, line_index: int) -> None:
        self.model.remove_line(row, col, line_index)
        self._structural()

    def set_line_content(self, row: int, col: int, line_index: int, text: str) -> None:
        self.model.set_line_content(row, col, line_index, text)
        self._notify()

    # ========================================================================
    # Selection / Merge
    # ========================================================================

    def toggle_selection(self, row: int, col: int, line: int) -> bool:
        self.model.line_at(row, col, line)
        return self.selection.toggle(row, col, line)

    def clear_selection(self) -> None:
        self.selection.clear()

    def can_merge(self) -> bool:
        return self.selection.can_merge()

    def merge_selection(self) -> MergeResult:
        result = self._merge_engine.merge(self.model, self.selection)
        self._notify()
        return result

    def unmerge(self, row: int, col: int, line: int) -> UnmergeResult:
        result = self._unmerge_engine.unmerge(self.model, row, col, line)
        self.selection.clear()
        self._notify()
        return result

    def classify(self, row: int, col: int, line: int) -> Coverage:
        return CoverageResolver(self.model).classify(row, col, line)

    # ========================================================================
    # Rendering
    # ========================================================================

    def render(self, output_format: Optional[TableOutputFormat] = None) -> str:
        """Render the current table (HTML by default)."""
        processor = self._processor
        if output_format is not None and output_format != processor.config.output_format:
            processor = TableProcessor(dataclasses.replace(processor.config, output_format=output_format))
        return processor.format_table(self.model)
