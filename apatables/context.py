"""
Explicit rendering context.

The target markup and the label of the enclosing document chunk are passed to
the table functions per call through a RenderContext, instead of being looked
up in process-wide state.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, Optional

from .constants import CONFIG


class OutputFormat(Enum):
    """Target markup syntax."""

    LATEX = 'latex'
    WORD = 'word'

    @classmethod
    def from_pandoc(cls, to: Optional[str]) -> 'OutputFormat':
        """
        Map a pandoc output target (e.g. 'latex', 'docx') to an OutputFormat.

        Missing targets and plain markdown are rendered as LaTeX; every other
        target receives pipe-table markdown.
        """
        if to is None:
            return cls.LATEX
        if not isinstance(to, str):
            raise TypeError(f"Pandoc target must be a string, got {type(to).__name__}")
        target = to.strip().lower()
        if target in ('', 'latex', 'markdown', 'pdf', 'beamer'):
            return cls.LATEX
        return cls.WORD


def _default_terms() -> Dict[str, str]:
    return dict(CONFIG['TERMS'])


@dataclass(frozen=True)
class RenderContext:
    """
    Per-call document context.

    Attributes
    ----------
    output_format : OutputFormat
        Markup to generate (LaTeX or pandoc pipe table for Word).
    chunk_label : str, optional
        Label of the enclosing document chunk; used as the cross-reference
        label ``tab:<chunk_label>``.
    terms : dict
        Localized words used in the markup (``note``, ``table``).
    """

    output_format: OutputFormat = OutputFormat.LATEX
    chunk_label: Optional[str] = None
    terms: Dict[str, str] = field(default_factory=_default_terms)

    def __post_init__(self):
        if not isinstance(self.output_format, OutputFormat):
            raise TypeError(
                f"output_format must be an OutputFormat, got {type(self.output_format).__name__}"
            )
        if self.chunk_label is not None and not isinstance(self.chunk_label, str):
            raise TypeError("chunk_label must be a string or None")
        missing = [k for k in ('note',) if k not in self.terms]
        if missing:
            raise KeyError(f"Missing keys in terms: {missing}")

    @classmethod
    def from_pandoc(cls, to: Optional[str], chunk_label: Optional[str] = None, **kwargs) -> 'RenderContext':
        """Build a context for a pandoc output target."""
        return cls(output_format=OutputFormat.from_pandoc(to), chunk_label=chunk_label, **kwargs)


__all__ = ['OutputFormat', 'RenderContext']
