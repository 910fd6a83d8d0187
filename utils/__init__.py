"""
Utility modules for TableView.

Contains:
- dataset: Dataset coercion (mappings, sequences, pandas, numpy)
- formatting: Cell text & class attribute helpers
- render_cache: Per-view memoization of the rendered markup
- ui_helpers: Shiny containers for rendered tables
"""
