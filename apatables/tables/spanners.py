"""
Column spanners: grouped headings above the column headers of a LaTeX table.
"""

from __future__ import annotations

import numbers
from typing import List, Mapping, Sequence, Tuple, Union

from ..constants import CONFIG
from ..validation import validate_indices

SpannerSpec = Mapping[str, Union[int, Sequence[int]]]


def normalize_col_spanners(col_spanners: SpannerSpec, n_cols: int) -> List[Tuple[str, int, int]]:
    """
    Normalize a spanner spec to (heading, first, last) triples in column order.

    Each value is a 1-based column number or a (first, last) pair; the order
    within a pair does not matter. Ranges must lie within [1, n_cols] and
    must not overlap.
    """
    if not isinstance(col_spanners, Mapping):
        raise TypeError(
            f"The parameter 'col_spanners' must be a dict of heading -> (first, last), "
            f"got '{type(col_spanners).__name__}'."
        )
    spans = []
    for heading, bounds in col_spanners.items():
        if not isinstance(heading, str):
            raise TypeError(f"Column spanner headings must be strings, got {heading!r}.")
        if isinstance(bounds, numbers.Number):
            bounds = [bounds]
        bounds = validate_indices(bounds, 'col_spanners', n_cols)
        if len(bounds) not in (1, 2):
            raise ValueError(
                f"Column spanner '{heading}' must be a column number or a (first, last) pair, got {bounds}."
            )
        spans.append((heading, min(bounds), max(bounds)))

    spans.sort(key=lambda s: s[1])
    for (prev_heading, _, prev_last), (heading, first, _) in zip(spans, spans[1:]):
        if first <= prev_last:
            raise ValueError(f"Column spanners '{prev_heading}' and '{heading}' overlap.")
    return spans


def build_spanner_lines(
    spans: Sequence[Tuple[str, int, int]],
    n_cols: int,
) -> Tuple[str, str]:
    """
    Build the heading line and the partial-rule line for normalized spanners.

    Leading, gap and trailing columns get empty cells so the multicolumn
    widths plus empty cells always add up to `n_cols`.

    Example
    -------
    spans=[('A', 2, 3), ('B', 5, 5)], n_cols=6 gives
    ' & \\multicolumn{2}{c}{A} &  & \\multicolumn{1}{c}{B} &  \\\\'
    '\\cmidrule(r){2-3} \\cmidrule(r){5-5}'
    """
    cells: List[str] = []
    rules: List[str] = []
    trim = CONFIG['CMIDRULE_TRIM']
    next_col = 1
    for heading, first, last in spans:
        cells.extend([''] * (first - next_col))
        cells.append(f"\\multicolumn{{{last - first + 1}}}{{c}}{{{heading}}}")
        rules.append(f"\\cmidrule({trim}){{{first}-{last}}}")
        next_col = last + 1
    cells.extend([''] * (n_cols - next_col + 1))

    heading_line = ' & '.join(cells) + ' \\\\'
    rule_line = ' '.join(rules)
    return heading_line, rule_line


def add_col_spanners(
    table_lines: List[str],
    col_spanners: SpannerSpec,
    n_cols: int,
) -> List[str]:
    """
    Insert grouped column headings right after the \\toprule line.

    Parameters
    ----------
    table_lines : list of str
        Rendered LaTeX tabular, one element per line.
    col_spanners : dict
        Heading -> 1-based column number or (first, last) pair.
    n_cols : int
        Number of columns of the table.

    Returns
    -------
    list of str
        New list of lines with the heading and \\cmidrule lines inserted.
    """
    spans = normalize_col_spanners(col_spanners, n_cols)
    if not spans:
        return list(table_lines)

    toprule_idx = next((i for i, ln in enumerate(table_lines) if '\\toprule' in ln), None)
    if toprule_idx is None:
        raise ValueError("Cannot add column spanners: no \\toprule found in the rendered table.")

    heading_line, rule_line = build_spanner_lines(spans, n_cols)
    return (
        list(table_lines[:toprule_idx + 1])
        + [heading_line, rule_line]
        + list(table_lines[toprule_idx + 1:])
    )


__all__ = ['normalize_col_spanners', 'build_spanner_lines', 'add_col_spanners']
