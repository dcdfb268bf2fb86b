"""
Argument validation helpers.

Strict behavior: every check raises immediately with a message naming the
offending parameter. TypeError for wrong types, ValueError for wrong length,
range or content. No silent coercion.
"""

from __future__ import annotations

import numbers
from typing import Any, Iterable, List, Optional, Sequence, Tuple, Type, Union

import numpy as np

ClassSpec = Union[Type, Tuple[Type, ...]]


def _class_names(check_class: ClassSpec) -> str:
    classes = check_class if isinstance(check_class, tuple) else (check_class,)
    return "' or '".join(c.__name__ for c in classes)


def _is_scalar(value: Any) -> bool:
    return isinstance(value, (str, bytes, numbers.Number)) or np.isscalar(value)


def _flatten_numbers(value: Any) -> List[Any]:
    if value is None or _is_scalar(value):
        return [value]
    out: List[Any] = []
    for item in value:
        out.extend(_flatten_numbers(item))
    return out


def _is_integer(value: Any) -> bool:
    if isinstance(value, (bool, np.bool_)):
        return False
    if isinstance(value, numbers.Integral):
        return True
    return isinstance(value, numbers.Real) and float(value).is_integer()


def validate(
    value: Any,
    name: str = 'x',
    *,
    check_class: Optional[ClassSpec] = None,
    check_length: Optional[int] = None,
    check_range: Optional[Sequence[float]] = None,
    check_integer: bool = False,
    allow_none: bool = False,
) -> Any:
    """
    Validate a function argument and return it unchanged.

    Parameters
    ----------
    value : Any
        Value to check.
    name : str
        Parameter name used in error messages.
    check_class : type or tuple of types, optional
        Required type(s). ``bool`` is never accepted where only numbers are
        requested.
    check_length : int, optional
        Required length. A single string has length 1.
    check_range : (low, high), optional
        Inclusive bounds every number in ``value`` (scalar or nested
        sequence) must respect.
    check_integer : bool
        Require every number in ``value`` to be integral.
    allow_none : bool
        Accept None without further checks.

    Returns
    -------
    Any
        The validated value.

    Raises
    ------
    TypeError
        Wrong type or non-numeric values where numbers are required.
    ValueError
        Missing value, wrong length, out-of-range or non-integral numbers.
    """
    if value is None:
        if allow_none:
            return value
        raise ValueError(f"The parameter '{name}' is None. Please provide a value for '{name}'.")

    if check_class is not None:
        classes = check_class if isinstance(check_class, tuple) else (check_class,)
        is_bool = isinstance(value, (bool, np.bool_))
        wants_bool = bool in classes
        if (is_bool and not wants_bool) or not (isinstance(value, classes) or (wants_bool and is_bool)):
            raise TypeError(
                f"The parameter '{name}' must be of class '{_class_names(check_class)}', "
                f"got '{type(value).__name__}'."
            )

    if check_length is not None:
        length = 1 if _is_scalar(value) else len(value)
        if length != check_length:
            raise ValueError(f"The parameter '{name}' must be of length {check_length}.")

    if check_range is not None or check_integer:
        numbers_in_value = _flatten_numbers(value)
        for v in numbers_in_value:
            if isinstance(v, (bool, np.bool_)) or not isinstance(v, numbers.Real):
                raise TypeError(f"The parameter '{name}' must contain numbers, got {v!r}.")
            if np.isnan(v):
                raise ValueError(f"The parameter '{name}' must not contain missing values.")
        if check_integer and not all(_is_integer(v) for v in numbers_in_value):
            raise ValueError(f"The parameter '{name}' must contain whole numbers.")
        if check_range is not None:
            low, high = check_range
            if any(v < low or v > high for v in numbers_in_value):
                raise ValueError(f"The parameter '{name}' must be between {low} and {high}.")

    return value


def validate_indices(indices: Iterable[Any], name: str, upper: int) -> List[int]:
    """Validate 1-based positions in [1, upper] and return them as ints."""
    if _is_scalar(indices):
        indices = [indices]
    indices = list(indices)
    validate(indices, name, check_range=(1, upper), check_integer=True)
    return [int(i) for i in indices]


__all__ = ['validate', 'validate_indices']
