#!/usr/bin/env python3
"""
Table generation utilities to eliminate boilerplate in table scripts.

Patterns consolidated:
 - Load a results table (CSV/TSV/pickle) with logging
 - Optionally reshape it via a supplied formatter function
 - Render APA markup (LaTeX or pandoc) and save it next to a CSV copy
 - Optional manuscript copy via apatables.report_utils.save_table

Strict behavior: explicit errors on missing files and invalid inputs. No silent
fallbacks.
"""

from __future__ import annotations

from pathlib import Path
from typing import Any, Callable, Optional, Tuple
import logging
import pickle

import pandas as pd

from .context import OutputFormat, RenderContext
from .report_utils import render_table, save_table
from .tables.prepare import has_row_names

_READERS = {
    '.csv': lambda p: pd.read_csv(p),
    '.tsv': lambda p: pd.read_csv(p, sep='\t'),
}


def load_table(
    path: Path,
    index_col: Optional[int] = None,
    logger: Optional[logging.Logger] = None,
) -> pd.DataFrame:
    """
    Load a table from CSV, TSV or pickle, with logging.

    Pickles must contain a DataFrame. `index_col` selects a column to use as
    row labels (CSV/TSV only).
    """
    p = Path(path)
    if logger:
        logger.info(f"Loading table: {p}")
    if not p.exists():
        raise FileNotFoundError(f"Missing table file: {p}")

    suffix = p.suffix.lower()
    if suffix in ('.pkl', '.pickle'):
        with open(p, 'rb') as f:
            df = pickle.load(f)
        if not isinstance(df, pd.DataFrame):
            raise TypeError(f"Pickle {p} must contain a pandas.DataFrame, got {type(df).__name__}")
    elif suffix in _READERS:
        df = _READERS[suffix](p)
        if index_col is not None:
            df = df.set_index(df.columns[index_col])
            df.index.name = None
    else:
        raise ValueError(f"Unsupported table format '{suffix}' (expected .csv, .tsv or .pkl)")

    if logger:
        logger.info(f"Loaded table with {df.shape[0]} rows and {df.shape[1]} columns")
    return df


def generate_table_files(
    *,
    df: pd.DataFrame,
    output_dir: Path,
    table_name: str,
    caption: Optional[str] = None,
    note: Optional[str] = None,
    formatter_func: Optional[Callable[[pd.DataFrame], Any]] = None,
    context: Optional[RenderContext] = None,
    manuscript_dir: Optional[Path] = None,
    manuscript_name: Optional[str] = None,
    save_csv: bool = True,
    logger: Optional[logging.Logger] = None,
    **table_kwargs: Any,
) -> Tuple[Path, Optional[Path]]:
    """
    Standard workflow: render one table and save markup (+ CSV) side by side.

    The markup file is `<table_name>.tex` for LaTeX output and
    `<table_name>.md` for Word output. `formatter_func`, if given, converts
    the input DataFrame to whatever apa_table accepts (e.g. a dict of tables).
    Remaining keyword arguments are forwarded to render_table.

    Returns
    -------
    markup_path : Path
    csv_path : Optional[Path]
        None if save_csv=False
    """
    if not isinstance(df, pd.DataFrame):
        raise TypeError("df must be a pandas.DataFrame")
    if context is None:
        context = RenderContext()

    data = formatter_func(df) if formatter_func is not None else df

    markup = render_table(
        data,
        caption=caption,
        note=note,
        context=context,
        logger=logger,
        **table_kwargs,
    )

    out_dir = Path(output_dir)
    out_dir.mkdir(parents=True, exist_ok=True)
    suffix = '.tex' if context.output_format is OutputFormat.LATEX else '.md'
    markup_path = save_table(
        markup,
        out_dir / f"{table_name}{suffix}",
        manuscript_name=manuscript_name,
        manuscript_dir=manuscript_dir,
        logger=logger,
    )

    csv_path: Optional[Path] = None
    if save_csv:
        csv_path = out_dir / f"{table_name}.csv"
        df.to_csv(csv_path, index=has_row_names(df))
        if logger:
            logger.info(f"CSV saved: {csv_path}")

    return markup_path, csv_path


__all__ = [
    'load_table',
    'generate_table_files',
]
