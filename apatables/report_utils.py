"""
Reporting utilities for generating APA-style tables.

Primary API. Prefer using functions in this module for:
- Table-like data -> LaTeX (booktabs + threeparttable) or pandoc pipe tables
- Captions, table notes, column spanners, stub indents and midrules
- Saving, validating and test-compiling generated markup

This module is the single source of truth for markup assembly; preprocessing
lives in apatables.tables.
"""

import logging
import re
import sys
from pathlib import Path
from typing import Any, Dict, List, Optional, Sequence, Tuple, Union

import pandas as pd
from tabulate import tabulate

from .constants import CONFIG
from .context import OutputFormat, RenderContext
from .tables.prepare import StubIndents, get_escaper, prepare_table
from .tables.spanners import SpannerSpec, add_col_spanners
from .tables.style import build_colspec, latex_header_labels, resolve_alignment, to_tabulate_colalign
from .validation import validate, validate_indices

Align = Optional[Union[str, Sequence[str]]]


# ============================================================================
# Public entry points
# ============================================================================

def apa_table(
    x: Any,
    caption: Optional[str] = None,
    note: Optional[str] = None,
    stub_indents: Optional[StubIndents] = None,
    added_stub_head: Optional[str] = None,
    col_spanners: Optional[SpannerSpec] = None,
    midrules: Optional[Union[int, Sequence[int]]] = None,
    placement: Optional[str] = None,
    landscape: bool = False,
    small: bool = False,
    escape: bool = True,
    format_args: Optional[Dict[str, Any]] = None,
    digits: Optional[int] = None,
    row_names: bool = True,
    align: Align = None,
    longtable: bool = False,
    context: Optional[RenderContext] = None,
    file=None,
    logger: Optional[logging.Logger] = None,
) -> str:
    """
    Format a table according to APA guidelines and write it to a stream.

    Parameters
    ----------
    x : DataFrame, ndarray, dict of columns, or list/dict of tables
        Table to print. A list of tables is merged by rows; for a dict of
        tables the keys become titles of indented sections.
    caption : str, optional
        Caption printed above the table.
    note : str, optional
        Note printed below the table.
    stub_indents : dict or list, optional
        Section title -> 1-based row numbers to indent (None/'' title means no
        section row), or a list of row groups without titles.
    added_stub_head : str, optional
        Name of the stub column created from row labels.
    col_spanners : dict, optional
        Heading -> 1-based (first, last) columns to group. LaTeX only.
    midrules : int or sequence of int, optional
        Body rows (1-based, not counting headers) followed by a rule. LaTeX only.
    placement : str, optional
        Float placement preference such as 'htb' (default 'tbp'). Ignored for
        longtable, landscape and Word output.
    landscape : bool
        Print the table in landscape format (LaTeX only).
    small : bool
        Reduce the font size of the table content (LaTeX only).
    escape : bool, default=True
        Escape special characters in cells, column names, caption, note and
        headings. If False, LaTeX output still escapes bare % signs.
    format_args : dict, optional
        Arguments forwarded to printnum for numeric cells.
    digits : int, optional
        Shortcut for format_args['digits'] (default 2).
    row_names : bool, default=True
        Promote non-default row labels to a leading stub column.
    align : str or sequence, optional
        Column alignment ('l', 'c', 'r' per column).
    longtable : bool
        Use a longtable that may break across pages (LaTeX only).
    context : RenderContext, optional
        Output format, chunk label and localized terms (default: LaTeX).
    file : text stream, optional
        Destination of the markup (default sys.stdout).
    logger : logging.Logger, optional
        Logger instance for progress messages.

    Returns
    -------
    str
        The markup that was written.

    Example
    -------
    >>> df = pd.DataFrame({'Mean': [15.4, 42.98], 'SD': [5.29, 25.77]},
    ...                   index=['speed', 'dist'])
    >>> markup = apa_table(
    ...     df,
    ...     caption="A summary table of the cars dataset.",
    ...     note="This table was created with apa_table().",
    ...     added_stub_head="Variables",
    ... )
    """
    markup = render_table(
        x,
        caption=caption,
        note=note,
        stub_indents=stub_indents,
        added_stub_head=added_stub_head,
        col_spanners=col_spanners,
        midrules=midrules,
        placement=placement,
        landscape=landscape,
        small=small,
        escape=escape,
        format_args=format_args,
        digits=digits,
        row_names=row_names,
        align=align,
        longtable=longtable,
        context=context,
        logger=logger,
    )
    stream = file if file is not None else sys.stdout
    stream.write(markup)
    return markup


def render_table(
    x: Any,
    *,
    caption: Optional[str] = None,
    note: Optional[str] = None,
    stub_indents: Optional[StubIndents] = None,
    added_stub_head: Optional[str] = None,
    col_spanners: Optional[SpannerSpec] = None,
    midrules: Optional[Union[int, Sequence[int]]] = None,
    placement: Optional[str] = None,
    landscape: bool = False,
    small: bool = False,
    escape: bool = True,
    format_args: Optional[Dict[str, Any]] = None,
    digits: Optional[int] = None,
    row_names: bool = True,
    align: Align = None,
    longtable: bool = False,
    context: Optional[RenderContext] = None,
    logger: Optional[logging.Logger] = None,
) -> str:
    """Same as apa_table() but only return the markup."""
    validate(x, 'x')
    validate(caption, 'caption', check_class=str, check_length=1, allow_none=True)
    validate(note, 'note', check_class=str, check_length=1, allow_none=True)
    validate(added_stub_head, 'added_stub_head', check_class=str, check_length=1, allow_none=True)
    validate(stub_indents, 'stub_indents', check_class=(dict, list, tuple), allow_none=True)
    validate(col_spanners, 'col_spanners', check_class=dict, allow_none=True)
    for flag_name, flag in (('landscape', landscape), ('small', small), ('escape', escape),
                            ('row_names', row_names), ('longtable', longtable)):
        validate(flag, flag_name, check_class=bool, check_length=1)
    placement = _validate_placement(placement)

    if context is None:
        context = RenderContext()
    validate(context, 'context', check_class=RenderContext)

    format_args = dict(format_args or {})
    if digits is not None:
        format_args['digits'] = digits
    format_args.setdefault('digits', CONFIG['DEFAULT_DIGITS'])

    output_format = context.output_format
    table = prepare_table(
        x,
        added_stub_head=added_stub_head,
        stub_indents=stub_indents,
        row_names=row_names,
        format_args=format_args,
        escape=escape,
        output_format=output_format,
        logger=logger,
    )
    if table.shape[1] == 0:
        raise ValueError("The parameter 'x' must have at least one column.")

    escaper = get_escaper(output_format, escape, cells=False)
    if caption is not None:
        caption = escaper(caption)
    if note is not None:
        note = escaper(note)

    if logger:
        logger.debug(
            f"Rendering {table.shape[0]}x{table.shape[1]} table as {output_format.value}"
        )

    if output_format is OutputFormat.LATEX:
        if col_spanners:
            col_spanners = {escaper(heading): span for heading, span in col_spanners.items()}
        return apa_table_latex(
            table,
            caption=caption,
            note=note,
            col_spanners=col_spanners,
            midrules=midrules,
            placement=placement,
            landscape=landscape,
            small=small,
            align=align,
            longtable=longtable,
            context=context,
        )

    ignored = [name for name, value in (('col_spanners', col_spanners), ('midrules', midrules),
                                        ('landscape', landscape), ('small', small),
                                        ('longtable', longtable)) if value]
    if ignored and logger:
        logger.debug(f"Ignored in Word output: {', '.join(ignored)}")
    return apa_table_word(table, caption=caption, note=note, align=align, context=context)


# ============================================================================
# LaTeX renderer
# ============================================================================

def apa_table_latex(
    table: pd.DataFrame,
    caption: Optional[str] = None,
    note: Optional[str] = None,
    col_spanners: Optional[SpannerSpec] = None,
    midrules: Optional[Union[int, Sequence[int]]] = None,
    placement: Optional[str] = None,
    landscape: bool = False,
    small: bool = False,
    align: Align = None,
    longtable: bool = False,
    context: Optional[RenderContext] = None,
) -> str:
    """
    Render a prepared (purely textual, already escaped) table as APA LaTeX.

    Notes
    -----
    - Uses pandas.DataFrame.to_latex() for the tabular body (booktabs rules)
    - Column headers are centered via \\multicolumn{1}{c}{...}; the stub
      head keeps the stub alignment
    - Regular tables go into table + center + threeparttable; longtable and
      landscape tables use ThreePartTable/TableNotes and a longtable whose
      caption is as wide as the table
    - Requires the LaTeX packages booktabs, threeparttable, threeparttablex
      and longtable (see CONFIG['LATEX_PACKAGES'])
    """
    if context is None:
        context = RenderContext()
    placement = _validate_placement(placement)
    n_rows, n_cols = table.shape
    long_layout = longtable or landscape
    table_env = 'ThreePartTable' if long_layout else 'threeparttable'
    note_env = 'TableNotes' if long_layout else 'tablenotes'

    if context.chunk_label:
        caption = f"\\label{{tab:{context.chunk_label}}}{caption or ''}"

    colspec = build_colspec(resolve_alignment(n_cols, align))
    table_lines = _render_tabular(table, colspec, latex_header_labels(table.columns))
    table_lines = [ln for ln in table_lines if '\\addlinespace' not in ln]

    if col_spanners:
        table_lines = add_col_spanners(table_lines, col_spanners, n_cols)

    if long_layout and caption is not None:
        table_lines.insert(1, f"\\caption{{{caption}}}\\\\")

    borders = [i for i, ln in enumerate(table_lines) if re.search(r'\\midrule|\\bottomrule', ln)]
    header_rule, bottom_rule = borders[0], borders[-1]

    if note is not None:
        table_lines[bottom_rule] = table_lines[bottom_rule] + "\n\\addlinespace"

    if midrules is not None:
        for row in sorted(set(validate_indices(midrules, 'midrules', n_rows))):
            table_lines[header_rule + row] = table_lines[header_rule + row] + " \\midrule"

    if note is not None and long_layout:
        table_lines.insert(len(table_lines) - 1, "\\insertTableNotes")

    if long_layout:
        table_lines = [ln.replace('{tabular}', '{longtable}') for ln in table_lines]
        table_lines = [
            ln + "\\noalign{\\getlongtablewidth\\global\\LTcapwidth=\\longtablewidth}"
            if ln.startswith('\\begin{longtable}') else ln
            for ln in table_lines
        ]
    body = '\n'.join(table_lines)

    note_block = (
        f"\n\\begin{{{note_env}}}[para]\n"
        f"\\textit{{{context.terms['note']}.}} {note}\n"
        f"\\end{{{note_env}}}"
    ) if note is not None else ''

    parts: List[str] = []
    if landscape:
        parts.append("\\begin{lltable}")
    if not landscape and not longtable:
        parts.append(f"\\begin{{table}}[{placement}]")
    if not landscape:
        parts.append(f"\n\\begin{{center}}\n\\begin{{{table_env}}}")
    if caption is not None and not long_layout:
        parts.append(f"\n\\caption{{{caption}}}")
    if long_layout:
        parts.append(note_block)
    if small:
        parts.append("\n\\small{")
    parts.append("\n" + body)
    if small:
        parts.append("\n}")
    if not long_layout:
        parts.append(note_block)
    if not landscape:
        parts.append(f"\n\\end{{{table_env}}}\n\\end{{center}}")
    if not landscape and not longtable:
        parts.append("\n\\end{table}")
    if landscape:
        parts.append("\n\\end{lltable}")
    parts.append("\n\n")
    return ''.join(parts)


def _render_tabular(table: pd.DataFrame, colspec: str, header_labels: List[str]) -> List[str]:
    """
    Render the tabular through pandas and return it line by line.

    pandas renders the body and the booktabs rules; the header row is set
    here so that duplicated or brace-containing column labels pass verbatim.
    """
    body = table.copy()
    body.columns = range(body.shape[1])
    latex = body.to_latex(
        index=False,
        header=False,
        escape=False,
        column_format=colspec,
        longtable=False,
    )
    lines = latex.strip('\n').split('\n')

    toprule_idx = next((i for i, ln in enumerate(lines) if '\\toprule' in ln), None)
    if toprule_idx is None:
        raise ValueError("Rendered tabular has no \\toprule; booktabs rules are required.")
    lines.insert(toprule_idx + 1, ' & '.join(header_labels) + ' \\\\')
    if lines[toprule_idx + 2].strip() != '\\midrule':
        lines.insert(toprule_idx + 2, '\\midrule')
    return lines


def _validate_placement(placement: Optional[str]) -> str:
    if placement is None:
        return CONFIG['DEFAULT_PLACEMENT']
    validate(placement, 'placement', check_class=str, check_length=1)
    if not placement or any(ch not in CONFIG['PLACEMENT_CHARS'] for ch in placement):
        raise ValueError(
            f"The parameter 'placement' must combine the characters "
            f"'{CONFIG['PLACEMENT_CHARS']}', got '{placement}'."
        )
    return placement


# ============================================================================
# Word (pandoc) renderer
# ============================================================================

def apa_table_word(
    table: pd.DataFrame,
    caption: Optional[str] = None,
    note: Optional[str] = None,
    align: Align = None,
    context: Optional[RenderContext] = None,
) -> str:
    """
    Render a prepared table as a pandoc pipe table for Word documents.

    The caption is emphasized and placed above the table (as a captioned,
    cross-referenceable element when a chunk label is set); the note follows
    the table in a centered paragraph.
    """
    if context is None:
        context = RenderContext()
    tokens = resolve_alignment(table.shape[1], align)
    res_table = tabulate(
        table.values.tolist(),
        headers=[str(c) for c in table.columns],
        tablefmt='pipe',
        colalign=to_tabulate_colalign(tokens),
        disable_numparse=True,
    )

    parts: List[str] = []
    if context.chunk_label:
        parts.append(f"<caption>(\\#tab:{context.chunk_label})</caption>\n\n")
        if caption is not None:
            parts.append(f"<caption>*{caption}*</caption>\n\n")
    elif caption is not None:
        parts.append(f"*{caption}*")

    parts.append("\n\n" + res_table + "\n")

    if note is not None:
        parts.append(f"\n<center>*{context.terms['note']}.* {note}</center>\n\n\n\n")
    return ''.join(parts)


# ============================================================================
# Saving, validation and compilation
# ============================================================================

def save_table(
    markup: str,
    output_path: Path,
    manuscript_name: Optional[str] = None,
    manuscript_dir: Optional[Path] = None,
    logger: Optional[logging.Logger] = None,
) -> Path:
    """
    Save table markup and optionally copy it to a manuscript folder.

    `.tex` targets are validated first (strict: raise on errors). If both
    `manuscript_name` and `manuscript_dir` are given, a copy is written to
    `manuscript_dir / manuscript_name` for inclusion in the document.
    """
    output_path = Path(output_path)
    output_path.parent.mkdir(parents=True, exist_ok=True)

    if output_path.suffix == '.tex':
        errors = validate_latex_table(markup)
        if errors:
            msg = "LaTeX table validation failed:\n- " + "\n- ".join(errors)
            if logger:
                logger.error(msg)
            raise ValueError(msg)

    output_path.write_text(markup, encoding='utf-8')
    if logger:
        logger.info(f"Table saved to: {output_path}")

    if manuscript_dir is not None and manuscript_name is not None:
        manuscript_dir = Path(manuscript_dir)
        manuscript_dir.mkdir(parents=True, exist_ok=True)
        manuscript_path = manuscript_dir / manuscript_name
        manuscript_path.write_text(markup, encoding='utf-8')
        if logger:
            logger.info(f"Table copied to manuscript: {manuscript_path}")

    return output_path


_STRUCTURAL_TAGS = (
    '\\begin{tabular}', '\\begin{longtable}', '\\end{tabular}', '\\end{longtable}',
    '\\toprule', '\\bottomrule', '\\cmidrule', '\\addlinespace', '\\caption',
    '\\insertTableNotes',
)
_CELL_SPLIT = re.compile(r'(?<!\\)&')
_MULTICOLUMN = re.compile(r'\\multicolumn\{(\d+)\}')


def validate_latex_table(latex_table: str) -> List[str]:
    """
    Validate a LaTeX table string for common issues that break compilation.

    Checks:
    - Presence of a tabular (or longtable) environment with column spec
    - Column count consistency (cells, counting multicolumn widths)
    - No unescaped % characters inside the tabular

    Returns a list of error strings (empty if valid).
    """
    errors: List[str] = []
    lines = latex_table.split('\n')
    begin_idx = next((i for i, ln in enumerate(lines) if re.search(r'\\begin\{(tabular|longtable)\}', ln)), None)
    end_idx = next((i for i, ln in enumerate(lines) if re.search(r'\\end\{(tabular|longtable)\}', ln)), None)
    if begin_idx is None or end_idx is None or end_idx <= begin_idx:
        errors.append("Missing or malformed tabular environment")
        return errors
    m = re.search(r"\\begin\{(?:tabular|longtable)\}\{([^}]*)\}", lines[begin_idx])
    if not m:
        errors.append("Could not parse tabular column specification")
        return errors
    ncols = len([ch for ch in m.group(1) if ch.strip() and ch != '|'])

    for ln in lines[begin_idx + 1:end_idx]:
        for j, ch in enumerate(ln):
            if ch == '%' and (j == 0 or ln[j - 1] != '\\'):
                errors.append("Unescaped % in tabular content: '" + ln.strip() + "'")
                break

        row = ln.strip()
        if row.endswith('\\midrule'):
            row = row[:-len('\\midrule')].rstrip()
        if not row or row == '\\midrule' or row.startswith(_STRUCTURAL_TAGS):
            continue
        if not row.endswith('\\\\'):
            continue
        cells = _CELL_SPLIT.split(row[:-2])
        width = 0
        for cell in cells:
            mc = _MULTICOLUMN.search(cell)
            width += int(mc.group(1)) if mc else 1
        if width != ncols:
            errors.append(
                f"Row has {width} columns but tabular spec defines {ncols}: '{ln.strip()}'"
            )
    return errors


# Definitions for environments and commands used by the generated markup
LATEX_PREAMBLE = r"""
\newenvironment{lltable}{\begin{landscape}\begin{center}\begin{ThreePartTable}}{\end{ThreePartTable}\end{center}\end{landscape}}
\makeatletter
\newcommand\LastLTentrywidth{1em}
\newlength\longtablewidth
\setlength{\longtablewidth}{1in}
\newcommand{\getlongtablewidth}{\begingroup \ifcsname LT@\roman{LT@tables}\endcsname \global\longtablewidth=0pt \renewcommand{\LT@entry}[2]{\global\advance\longtablewidth by ##2\relax\gdef\LastLTentrywidth{##2}}\@nameuse{LT@\roman{LT@tables}} \fi \endgroup}
\makeatother
"""


def compile_latex_table(
    latex_table: str,
    *,
    engine: Optional[str] = None,
    work_dir: Optional[Path] = None,
    timeout_s: int = 20,
) -> Tuple[bool, str]:
    """
    Attempt to compile a LaTeX table into a PDF using a minimal document.

    Parameters
    ----------
    latex_table : str
        The LaTeX table code (including its environments) to compile.
    engine : str, optional
        LaTeX engine to use (default CONFIG['LATEX_ENGINE']).
    work_dir : Path, optional
        Directory to write temporary files; if None, uses a temp directory.
    timeout_s : int, default 20
        Maximum seconds to allow the compilation process to run.

    Returns
    -------
    (ok, log) : Tuple[bool, str]
        ok is True when compilation succeeds (exit code 0), False otherwise.
        log contains stdout/stderr or diagnostic message if engine not found.

    Notes
    -----
    - Optional; call when a LaTeX engine is available in the environment.
    - Strict: no silent fallbacks; failure returns False with full log.
    """
    import shutil
    import subprocess
    import tempfile

    engine = engine or CONFIG['LATEX_ENGINE']
    if shutil.which(engine) is None:
        return False, f"LaTeX engine '{engine}' not found in PATH"

    packages = ''.join(f"\\usepackage{{{pkg}}}\n" for pkg in CONFIG['LATEX_PACKAGES'])
    doc = (
        "\\documentclass{article}\n"
        "\\usepackage[utf8]{inputenc}\n"
        + packages
        + LATEX_PREAMBLE
        + "\\begin{document}\n"
        + latex_table
        + "\n\\end{document}\n"
    )

    tmp = None
    if work_dir is None:
        tmp = tempfile.TemporaryDirectory()
        work_dir = Path(tmp.name)
    else:
        work_dir = Path(work_dir)
        work_dir.mkdir(parents=True, exist_ok=True)

    tex_path = work_dir / 'table_test.tex'
    tex_path.write_text(doc, encoding='utf-8')

    cmd = [engine, '-interaction=nonstopmode', '-halt-on-error', 'table_test.tex']
    try:
        proc = subprocess.run(
            cmd,
            cwd=str(work_dir),
            stdout=subprocess.PIPE,
            stderr=subprocess.STDOUT,
            timeout=timeout_s,
            check=False,
            text=True,
        )
        ok = (proc.returncode == 0)
        log = proc.stdout
    except subprocess.TimeoutExpired as e:
        ok = False
        log = f"LaTeX compilation timed out after {timeout_s}s\n{e}"
    finally:
        if tmp is not None:
            tmp.cleanup()

    return ok, log


__all__ = [
    'apa_table',
    'render_table',
    'apa_table_latex',
    'apa_table_word',
    'save_table',
    'validate_latex_table',
    'compile_latex_table',
    'LATEX_PREAMBLE',
]
