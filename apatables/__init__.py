"""
APA-style table markup for LaTeX and Word documents.

This package provides shared functionality for formatting tables:
- constants: CONFIG dictionary with all defaults
- context: OutputFormat and RenderContext passed per call
- formatters: printnum/printp number formatting and escaping routines
- tables: preparation (stub indents, merging) and LaTeX header helpers
- report_utils: apa_table entry point, renderers, saving and validation
- table_utils: load/render/save workflow for table scripts
- logging_utils: logging setup

Example Usage
-------------
>>> from apatables import apa_table, RenderContext, OutputFormat
>>> apa_table(df, caption="Descriptive statistics", added_stub_head="Variable")
>>> apa_table(df, context=RenderContext(output_format=OutputFormat.WORD))
"""

__version__ = "0.1.0"

# Configuration
from .constants import CONFIG
from .context import OutputFormat, RenderContext

# Formatting
from .formatters import (
    printnum,
    printp,
    escape_latex,
    escape_percent,
    escape_markdown,
)
from .validation import validate

# Table preparation
from .tables import (
    add_col_spanners,
    add_row_names,
    format_cells,
    indent_stubs,
    merge_tables,
    prepare_table,
)

# Reporting
from .report_utils import (
    apa_table,
    render_table,
    apa_table_latex,
    apa_table_word,
    save_table,
    validate_latex_table,
    compile_latex_table,
)
from .table_utils import load_table, generate_table_files

# Logging
from .logging_utils import setup_logging, log_script_start, log_script_end

__all__ = [
    # Configuration
    'CONFIG',
    'OutputFormat',
    'RenderContext',
    # Formatting
    'printnum',
    'printp',
    'escape_latex',
    'escape_percent',
    'escape_markdown',
    'validate',
    # Table preparation
    'add_col_spanners',
    'add_row_names',
    'format_cells',
    'indent_stubs',
    'merge_tables',
    'prepare_table',
    # Reporting
    'apa_table',
    'render_table',
    'apa_table_latex',
    'apa_table_word',
    'save_table',
    'validate_latex_table',
    'compile_latex_table',
    'load_table',
    'generate_table_files',
    # Logging
    'setup_logging',
    'log_script_start',
    'log_script_end',
]
