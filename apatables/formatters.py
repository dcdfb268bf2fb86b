"""
Formatting helpers shared across table preparation and rendering.

Contains the number formatter used for numeric table cells and the escaping
routines for the two target syntaxes, keeping cell policies consistent
package-wide (APA style):
- Estimates to 2 decimals by default
- p-values as "< .001" or ".XYZ" (no leading zero)
- Missing values as the configured NA string
"""

import re
import numbers
from typing import Any, List, Optional, Union

import numpy as np
import pandas as pd

from .constants import CONFIG
from .validation import validate


def _is_missing(x: Any) -> bool:
    if x is None or x is pd.NA or x is pd.NaT:
        return True
    return isinstance(x, numbers.Real) and not isinstance(x, numbers.Integral) and np.isnan(x)


def _group_digits(text: str, big_mark: str) -> str:
    """Replace the ',' thousands separator produced by format() with big_mark."""
    return text.replace(',', big_mark)


def printnum(
    x: Any,
    digits: int = None,
    gt1: bool = True,
    zero: bool = True,
    na_string: Optional[str] = None,
    big_mark: str = '',
    use_math: bool = False,
    add_equals: bool = False,
) -> Union[str, List[str]]:
    """
    Format numbers for printing in tables and text.

    Parameters
    ----------
    x : number, str, None or sequence thereof
        Value(s) to format. Strings are returned unchanged; sequences,
        Series and arrays return a list of formatted strings.
    digits : int, optional
        Number of decimal places (default CONFIG['DEFAULT_DIGITS']).
        Integers are printed without decimals.
    gt1 : bool, default=True
        If False, the number must lie in [-1, 1] and is printed without a
        leading zero (".25").
    zero : bool, default=True
        If False, values that round to zero are printed as "< 0.01"
        (bound given by ``digits``).
    na_string : str, optional
        Replacement for missing values (default CONFIG['NA_STRING']).
    big_mark : str, default=''
        Thousands separator.
    use_math : bool, default=False
        Print the minus sign as "$-$" for LaTeX.
    add_equals : bool, default=False
        Prefix "= " unless the result already starts with "<" or ">".

    Returns
    -------
    str or list of str

    Examples
    --------
    >>> printnum(1.005)
    '1.00'
    >>> printnum(0.25, gt1=False)
    '.25'
    >>> printnum(0.0001, digits=3, gt1=False, zero=False)
    '< .001'
    """
    if digits is None:
        digits = CONFIG['DEFAULT_DIGITS']
    if na_string is None:
        na_string = CONFIG['NA_STRING']
    validate(digits, 'digits', check_class=numbers.Integral, check_range=(0, 15))
    digits = int(digits)
    validate(gt1, 'gt1', check_class=bool, check_length=1)
    validate(zero, 'zero', check_class=bool, check_length=1)
    validate(na_string, 'na_string', check_class=str, check_length=1)
    validate(big_mark, 'big_mark', check_class=str, check_length=1)

    kwargs = dict(
        digits=digits, gt1=gt1, zero=zero, na_string=na_string,
        big_mark=big_mark, use_math=use_math, add_equals=add_equals,
    )
    if isinstance(x, (list, tuple, pd.Series, pd.Index, np.ndarray)):
        return [printnum(v, **kwargs) for v in x]

    if _is_missing(x):
        return na_string
    if isinstance(x, str):
        return x
    if isinstance(x, (bool, np.bool_)):
        return str(bool(x))
    if not isinstance(x, numbers.Real):
        raise TypeError(f"printnum() cannot format values of type '{type(x).__name__}'")

    if not gt1 and abs(x) > 1:
        raise ValueError(f"The parameter 'x' must be between -1 and 1 when gt1=False, got {x}.")

    negative = x < 0
    if isinstance(x, numbers.Integral):
        text = _group_digits(format(abs(int(x)), ','), big_mark)
        is_zero = x == 0
    else:
        text = _group_digits(f"{abs(float(x)):,.{digits}f}", big_mark)
        is_zero = float(f"{abs(float(x)):.{digits}f}") == 0

    if is_zero and not zero:
        bound = f"{10 ** -digits:.{digits}f}" if digits > 0 else '1'
        if not gt1 and bound.startswith('0.'):
            bound = bound[1:]
        minus = '$-$' if use_math else '-'
        text = f"> {minus}{bound}" if negative else f"< {bound}"
    else:
        if not gt1 and text.startswith('0.'):
            text = text[1:]
        if negative and not is_zero:
            text = ('$-$' if use_math else '-') + text

    if add_equals and not text.startswith(('<', '>')):
        text = '= ' + text
    return text


def printp(p: Any, digits: int = None, na_string: Optional[str] = None, add_equals: bool = False):
    """
    Format p-values following APA style.

    Returns "< .001" for p below the precision bound, "> .999" for p that
    rounds to one, else ".XYZ" without a leading zero.
    """
    if digits is None:
        digits = CONFIG['P_VALUE_DIGITS']
    if isinstance(p, (list, tuple, pd.Series, pd.Index, np.ndarray)):
        return [printp(v, digits=digits, na_string=na_string, add_equals=add_equals) for v in p]
    if _is_missing(p) or isinstance(p, str):
        return printnum(p, digits=digits, na_string=na_string)

    validate(p, 'p', check_range=(0, 1))
    if float(f"{float(p):.{digits}f}") >= 1:
        bound = f"{1 - 10 ** -digits:.{digits}f}"[1:]
        return f"> {bound}"
    return printnum(
        float(p), digits=digits, gt1=False, zero=False,
        na_string=na_string, add_equals=add_equals,
    )


# LaTeX special characters escaped with a backslash
_LATEX_SPECIALS = re.compile(r'([#$%&_{}])')


def escape_latex(text: Any, spaces: bool = True) -> Any:
    """
    Escape LaTeX special characters.

    Backslashes become \\textbackslash{}, tilde and caret get their text
    commands, ``# $ % & _ { }`` are backslash-escaped. With ``spaces=True``
    every space that follows another space becomes a control space so runs
    of blanks survive typesetting. Non-string input is returned unchanged.

    >>> escape_latex('50%')
    '50\\\\%'
    """
    if not isinstance(text, str):
        return text
    out = text.replace('\\', '\\textbackslash')
    out = _LATEX_SPECIALS.sub(r'\\\1', out)
    out = out.replace('\\textbackslash', '\\textbackslash{}')
    out = out.replace('~', '\\textasciitilde{}')
    out = out.replace('^', '\\textasciicircum{}')
    if spaces:
        out = re.sub(r'(?<= ) ', r'\\ ', out)
    return out


def escape_percent(text: Any) -> Any:
    """Escape bare % signs only (already escaped \\% are kept as-is)."""
    if not isinstance(text, str):
        return text
    return re.sub(r'(?<!\\)%', r'\\%', text)


_MARKDOWN_SPECIALS = re.compile(r'([\\*_|`])')


def escape_markdown(text: Any) -> Any:
    """Backslash-escape characters that pandoc pipe tables would interpret."""
    if not isinstance(text, str):
        return text
    return _MARKDOWN_SPECIALS.sub(r'\\\1', text)


__all__ = [
    'printnum',
    'printp',
    'escape_latex',
    'escape_percent',
    'escape_markdown',
]
