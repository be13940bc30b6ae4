# spectable/core/functions/__init__.py
"""
Functions - Common Utility Functions Module

Provides common utility functions used by the spec-table editor.

Module Components:
- utils: JSON sanitization, cell text cleanup, legacy value coercion,
  merged-content splitting
- spec_store: Persistence collaborator interface (BaseSpecStore, InMemorySpecStore)
- table_processor: HTML/Markdown/Text rendering and HTML table import
  (import from spectable.core.functions.table_processor; it builds on
  spectable.core.grid)

Usage Example:
    from spectable.core.functions import sanitize_text_for_json
    from spectable.core.functions import InMemorySpecStore
    from spectable.core.functions.table_processor import create_table_processor
"""

from spectable.core.functions.utils import (
    sanitize_text_for_json,
    clean_cell_text,
    coerce_text,
    coerce_span,
    split_content,
    distribute_fragments,
)

# Persistence interface
from spectable.core.functions.spec_store import (
    BaseSpecStore,
    InMemorySpecStore,
)

__all__ = [
    # Text utilities
    "sanitize_text_for_json",
    "clean_cell_text",
    "coerce_text",
    "coerce_span",
    "split_content",
    "distribute_fragments",
    # Persistence interface
    "BaseSpecStore",
    "InMemorySpecStore",
]
