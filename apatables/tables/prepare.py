"""
Table preparation shared by the LaTeX and Word renderers.

Pipeline (see prepare_table):
 - Normalize input (DataFrame, ndarray, dict of columns) to a DataFrame
 - Promote row labels to a leading stub column
 - Format numeric cells with printnum
 - Merge a list/dict of tables by rows
 - Escape special characters for the target syntax
 - Indent stubs and insert section header rows

All row and column positions taken from callers are 1-based, matching the
numbers shown in the rendered table.
"""

from __future__ import annotations

import logging
from functools import partial
from typing import Any, Callable, Dict, List, Mapping, Optional, Sequence, Tuple, Union

import numpy as np
import pandas as pd

from ..constants import CONFIG
from ..context import OutputFormat
from ..formatters import escape_latex, escape_markdown, escape_percent, printnum
from ..validation import validate, validate_indices

StubIndents = Union[Mapping[Optional[str], Sequence[int]], Sequence[Sequence[int]]]


# ============================================================================
# Input normalization
# ============================================================================

def _is_table_like(x: Any) -> bool:
    return isinstance(x, pd.DataFrame) or (isinstance(x, np.ndarray) and x.ndim == 2)


def is_table_collection(x: Any) -> bool:
    """True for a non-empty list/tuple/dict whose elements are all tables."""
    if isinstance(x, (list, tuple)):
        return len(x) > 0 and all(_is_table_like(el) for el in x)
    if isinstance(x, Mapping) and not isinstance(x, pd.DataFrame):
        return len(x) > 0 and all(_is_table_like(el) for el in x.values())
    return False


def as_table(x: Any, name: str = 'x') -> pd.DataFrame:
    """
    Convert supported inputs to a DataFrame with string column names.

    Accepts DataFrame, Series, 2-D ndarray and dicts of equal-length columns.
    """
    validate(x, name)
    if isinstance(x, pd.DataFrame):
        df = x.copy()
    elif isinstance(x, pd.Series):
        df = x.to_frame()
    elif isinstance(x, np.ndarray):
        if x.ndim == 1:
            x = x.reshape(-1, 1)
        if x.ndim != 2:
            raise ValueError(f"The parameter '{name}' must be a 2-D array, got {x.ndim} dimensions.")
        df = pd.DataFrame(x)
    elif isinstance(x, Mapping):
        df = pd.DataFrame(dict(x))
    else:
        raise TypeError(
            f"The parameter '{name}' must be a DataFrame, ndarray, dict of columns, "
            f"or a list/dict of tables, got '{type(x).__name__}'."
        )
    df.columns = [str(c) for c in df.columns]
    return df


def has_row_names(df: pd.DataFrame) -> bool:
    """True if the index carries labels (i.e. is not the default 0..n-1 range)."""
    return not df.index.equals(pd.RangeIndex(len(df)))


def add_row_names(df: pd.DataFrame, added_stub_head: Optional[str] = None) -> pd.DataFrame:
    """
    Add row names as the first column and reset the index.

    The new stub column is named `added_stub_head` (empty string if None).
    Tables without row labels are returned with a reset index only.
    """
    out = df.copy()
    if has_row_names(out):
        stub = [str(v) for v in out.index]
        out = out.reset_index(drop=True)
        out.insert(0, added_stub_head if added_stub_head is not None else '', stub, allow_duplicates=True)
    else:
        out = out.reset_index(drop=True)
    return out


# ============================================================================
# Cell formatting
# ============================================================================

def _is_formattable_numeric(series: pd.Series) -> bool:
    return pd.api.types.is_numeric_dtype(series) and not pd.api.types.is_bool_dtype(series)


def format_cells(df: pd.DataFrame, format_args: Optional[Dict[str, Any]] = None) -> pd.DataFrame:
    """
    Format all numeric columns with printnum.

    `format_args` is forwarded to printnum. `digits` may be a single int or a
    sequence recycled over the numeric columns. Non-numeric columns are left
    untouched, so applying this twice is a no-op on the second pass.
    """
    args = dict(format_args or {})
    digits = args.pop('digits', CONFIG['DEFAULT_DIGITS'])
    if isinstance(digits, (list, tuple, np.ndarray)):
        digits_seq = [int(d) for d in digits]
        if not digits_seq:
            raise ValueError("The parameter 'digits' must not be empty.")
    else:
        digits_seq = [digits]

    out = df.copy()
    numeric_positions = [i for i in range(out.shape[1]) if _is_formattable_numeric(out.iloc[:, i])]
    for k, pos in enumerate(numeric_positions):
        col_digits = digits_seq[k % len(digits_seq)]
        formatted = printnum(out.iloc[:, pos].tolist(), digits=col_digits, **args)
        out.isetitem(pos, pd.Series(formatted, index=out.index, dtype=object))
    return out


def cells_to_text(df: pd.DataFrame, na_string: Optional[str] = None) -> pd.DataFrame:
    """
    Convert every cell to str; missing values become `na_string`.

    Line breaks inside a cell are replaced by single spaces so that each table
    row renders on exactly one line.
    """
    if na_string is None:
        na_string = CONFIG['NA_STRING']
    out = df.copy()
    for pos in range(out.shape[1]):
        values = [na_string if (v is None or (isinstance(v, float) and np.isnan(v)) or v is pd.NA)
                  else ' '.join(str(v).splitlines())
                  for v in out.iloc[:, pos].tolist()]
        out.isetitem(pos, pd.Series(values, index=out.index, dtype=object))
    return out


# ============================================================================
# Merging
# ============================================================================

def merge_tables(tables: Sequence[pd.DataFrame]) -> pd.DataFrame:
    """
    Merge tables by rows in list order.

    All tables must share the same column names in the same order.
    """
    tables = list(tables)
    if not tables:
        raise ValueError("Cannot merge an empty list of tables.")
    columns = list(tables[0].columns)
    for i, t in enumerate(tables[1:], start=2):
        if list(t.columns) != columns:
            raise ValueError(
                f"Table {i} has columns {list(t.columns)} but table 1 has {columns}; "
                "tables in a list must share the same column names."
            )
    positional = []
    for t in tables:
        p = t.copy()
        p.columns = range(len(columns))
        positional.append(p)
    merged = pd.concat(positional, axis=0, ignore_index=True)
    merged.columns = columns
    return merged


# ============================================================================
# Escaping
# ============================================================================

def get_escaper(output_format: OutputFormat, escape: bool, cells: bool = True) -> Callable[[Any], Any]:
    """
    Return the escaping routine for a target syntax.

    With escaping disabled LaTeX output still escapes bare % signs (they would
    otherwise comment out the rest of a row); Word output is left untouched.
    Runs of spaces are kept as control spaces in cells only; column names,
    captions, notes and spanner headings are escaped with ``cells=False``.
    """
    if output_format is OutputFormat.LATEX:
        if not escape:
            return escape_percent
        return escape_latex if cells else partial(escape_latex, spaces=False)
    return escape_markdown if escape else (lambda text: text)


def escape_table(
    df: pd.DataFrame,
    escaper: Callable[[Any], Any],
    escape_header: bool = True,
    header_escaper: Optional[Callable[[Any], Any]] = None,
) -> pd.DataFrame:
    """Apply `escaper` to every cell and (optionally) `header_escaper` to every column name."""
    if header_escaper is None:
        header_escaper = escaper
    out = df.copy()
    for pos in range(out.shape[1]):
        out.isetitem(pos, pd.Series([escaper(v) for v in out.iloc[:, pos].tolist()], index=out.index, dtype=object))
    if escape_header:
        out.columns = [header_escaper(c) for c in out.columns]
    return out


# ============================================================================
# Stub indentation
# ============================================================================

def normalize_stub_indents(lines: StubIndents, n_rows: int, name: str = 'stub_indents') -> List[Tuple[Optional[str], List[int]]]:
    """
    Normalize an indent spec to a list of (title or None, sorted 1-based rows).

    Accepts a mapping title -> rows (None or '' titles mean "no header") or a
    plain sequence of row groups.
    """
    if isinstance(lines, Mapping):
        items = list(lines.items())
    elif isinstance(lines, (list, tuple)):
        items = [(None, group) for group in lines]
    else:
        raise TypeError(f"The parameter '{name}' must be a dict or a list of row groups, got '{type(lines).__name__}'.")

    groups = []
    for title, rows in items:
        if title is not None and not isinstance(title, str):
            raise TypeError(f"Section titles in '{name}' must be strings, got {title!r}.")
        rows = validate_indices(rows, name, n_rows)
        if not rows:
            raise ValueError(f"The parameter '{name}' contains an empty row group.")
        groups.append((title or None, sorted(set(rows))))
    return groups


def indent_stubs(
    df: pd.DataFrame,
    lines: StubIndents,
    filler: Optional[str] = None,
    escaper: Optional[Callable[[Any], Any]] = None,
) -> pd.DataFrame:
    """
    Indent stubs by row and add section headings.

    Parameters
    ----------
    df : pd.DataFrame
        Prepared table; all cells are converted to str.
    lines : dict or list
        Mapping of section title -> 1-based row numbers to indent, or a list
        of row groups without titles. Named groups get a header row
        ``[title, '', ...]`` inserted right above their first row.
    filler : str, optional
        Indentation prefix (default CONFIG['STUB_FILLER']).
    escaper : callable, optional
        Applied to section titles.

    Returns
    -------
    pd.DataFrame
        New table with indented stubs and inserted section rows.

    Notes
    -----
    Each indexed row is indented once per call, even if it appears in several
    groups. Header rows are inserted in row order with a running offset, so
    positions always refer to the table as passed in.
    """
    if filler is None:
        filler = CONFIG['STUB_FILLER']
    columns = list(df.columns)
    n_rows, n_cols = df.shape
    if n_cols == 0:
        raise ValueError("Cannot indent stubs of a table without columns.")
    groups = normalize_stub_indents(lines, n_rows)

    rows = cells_to_text(df).values.tolist()

    indented = sorted({r for _, group in groups for r in group})
    for r in indented:
        rows[r - 1][0] = f"{filler}{rows[r - 1][0]}"

    sections = sorted(
        ((group[0], title) for title, group in groups if title is not None),
        key=lambda s: s[0],
    )
    for offset, (first_row, title) in enumerate(sections):
        heading = escaper(title) if escaper is not None else title
        rows.insert(first_row - 1 + offset, [heading] + [''] * (n_cols - 1))

    return pd.DataFrame(rows, columns=columns, dtype=object)


# ============================================================================
# Full preparation
# ============================================================================

def prepare_table(
    x: Any,
    *,
    added_stub_head: Optional[str] = None,
    stub_indents: Optional[StubIndents] = None,
    row_names: bool = True,
    format_args: Optional[Dict[str, Any]] = None,
    escape: bool = True,
    output_format: OutputFormat = OutputFormat.LATEX,
    logger: Optional[logging.Logger] = None,
) -> pd.DataFrame:
    """
    Run the shared preprocessing path and return a purely textual table.

    If `x` is a list or dict of tables they are merged by rows; the keys of a
    dict become titles of indented sections, one per element.
    """
    escaper = get_escaper(output_format, escape)
    na_string = (format_args or {}).get('na_string')

    if is_table_collection(x):
        if isinstance(x, Mapping):
            names = [str(k) for k in x.keys()]
            elements = [as_table(el, f"x[{k!r}]") for k, el in x.items()]
        else:
            names = None
            elements = [as_table(el, f"x[{i}]") for i, el in enumerate(x)]

        if row_names:
            elements = [add_row_names(el, added_stub_head) for el in elements]
        else:
            elements = [el.reset_index(drop=True) for el in elements]
        elements = [cells_to_text(format_cells(el, format_args), na_string) for el in elements]
        table = merge_tables(elements)
        if logger:
            logger.debug(f"Merged {len(elements)} tables into {table.shape[0]} rows")
    else:
        table = as_table(x)
        table = add_row_names(table, added_stub_head) if row_names else table.reset_index(drop=True)
        table = cells_to_text(format_cells(table, format_args), na_string)
        names = None
        elements = None

    table = escape_table(
        table, escaper, escape_header=escape,
        header_escaper=get_escaper(output_format, escape, cells=False),
    )

    if names is not None:
        sections: Dict[Optional[str], List[int]] = {}
        start = 1
        for name, el in zip(names, elements):
            sections[name] = list(range(start, start + len(el)))
            start += len(el)
        sections = {k: v for k, v in sections.items() if v}
        if sections:
            table = indent_stubs(table, sections, escaper=escaper)

    if stub_indents is not None:
        table = indent_stubs(table, stub_indents, escaper=escaper)

    return table


__all__ = [
    'as_table',
    'is_table_collection',
    'has_row_names',
    'add_row_names',
    'format_cells',
    'cells_to_text',
    'merge_tables',
    'get_escaper',
    'escape_table',
    'normalize_stub_indents',
    'indent_stubs',
    'prepare_table',
]
