"""
Table preparation and styling primitives shared by both renderers.

Central place to keep DRY preprocessing steps (cell formatting, escaping,
stub indentation) and LaTeX header helpers (column spanners, alignment).
"""

from .style import (
    resolve_alignment,
    build_colspec,
    to_tabulate_colalign,
    latex_header_labels,
)
from .spanners import (
    normalize_col_spanners,
    build_spanner_lines,
    add_col_spanners,
)
from .prepare import (
    as_table,
    is_table_collection,
    add_row_names,
    format_cells,
    cells_to_text,
    merge_tables,
    get_escaper,
    escape_table,
    indent_stubs,
    prepare_table,
)

__all__ = [
    'resolve_alignment',
    'build_colspec',
    'to_tabulate_colalign',
    'latex_header_labels',
    'normalize_col_spanners',
    'build_spanner_lines',
    'add_col_spanners',
    'as_table',
    'is_table_collection',
    'add_row_names',
    'format_cells',
    'cells_to_text',
    'merge_tables',
    'get_escaper',
    'escape_table',
    'indent_stubs',
    'prepare_table',
]
