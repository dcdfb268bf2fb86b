"""
Column alignment and header styling primitives shared by both renderers.

Provides helpers to resolve the column alignment of a prepared table and to
build the header labels each target syntax expects (centered multicolumn
headings for LaTeX, plain labels for pipe tables).
"""

from __future__ import annotations

from typing import List, Optional, Sequence, Union

from ..constants import CONFIG

_ALIGN_TOKENS = ('l', 'c', 'r')
_TABULATE_ALIGN = {'l': 'left', 'c': 'center', 'r': 'right'}


def resolve_alignment(
    n_cols: int,
    align: Optional[Union[str, Sequence[str]]] = None,
    *,
    first_col_align: Optional[str] = None,
) -> List[str]:
    """
    Resolve a per-column alignment list of 'l', 'c' or 'r'.

    - None: first column uses `first_col_align` (default 'l'), others 'c'
    - str: one character per column (e.g. 'lrrr'); '|' and blanks ignored
    - sequence: one token per column
    - a single token is recycled to all columns
    """
    if n_cols <= 0:
        return []
    if align is None:
        first = first_col_align or CONFIG['DEFAULT_FIRST_ALIGN']
        return [first] + [CONFIG['DEFAULT_ALIGN']] * (n_cols - 1)

    if isinstance(align, str):
        tokens = [ch for ch in align if ch.strip() and ch != '|']
    else:
        tokens = [str(a).strip() for a in align]

    if len(tokens) == 1:
        tokens = tokens * n_cols
    if len(tokens) != n_cols:
        raise ValueError(
            f"The parameter 'align' defines {len(tokens)} columns but the table has {n_cols}."
        )
    invalid = [t for t in tokens if t not in _ALIGN_TOKENS]
    if invalid:
        raise ValueError(f"The parameter 'align' contains invalid tokens: {invalid}")
    return tokens


def build_colspec(tokens: Sequence[str]) -> str:
    """Join alignment tokens into a LaTeX column specification ('lcc')."""
    return ''.join(tokens)


def to_tabulate_colalign(tokens: Sequence[str]) -> List[str]:
    """Map alignment tokens to tabulate's colalign names."""
    return [_TABULATE_ALIGN[t] for t in tokens]


def latex_header_labels(columns: Sequence[str]) -> List[str]:
    """
    Build LaTeX header labels: stub head as-is, all other column names
    centered through single-column multicolumns so that their alignment does
    not follow the body alignment.

    Example
    -------
    ['', 'Mean', 'SD'] -> ['', '\\multicolumn{1}{c}{Mean}', '\\multicolumn{1}{c}{SD}']
    """
    labels = [str(c) for c in columns]
    if not labels:
        return labels
    return [labels[0]] + [f"\\multicolumn{{1}}{{c}}{{{c}}}" for c in labels[1:]]


__all__ = [
    'resolve_alignment',
    'build_colspec',
    'to_tabulate_colalign',
    'latex_header_labels',
]
