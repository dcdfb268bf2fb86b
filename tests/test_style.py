"""Unit tests for column alignment and header labels."""

# pylint: disable=missing-class-docstring,missing-function-docstring

import pytest

from apatables.tables.style import (
    build_colspec,
    latex_header_labels,
    resolve_alignment,
    to_tabulate_colalign,
)


class TestResolveAlignment:

    def test_default(self):
        assert resolve_alignment(3) == ["l", "c", "c"]

    def test_string_ignores_rules_and_blanks(self):
        assert resolve_alignment(3, "l | r r") == ["l", "r", "r"]

    def test_single_token_recycled(self):
        assert resolve_alignment(3, "r") == ["r", "r", "r"]

    def test_sequence(self):
        assert resolve_alignment(2, ["c", "r"]) == ["c", "r"]

    def test_length_mismatch(self):
        with pytest.raises(ValueError, match="2 columns"):
            resolve_alignment(3, "lc")

    def test_invalid_token(self):
        with pytest.raises(ValueError, match="invalid"):
            resolve_alignment(2, "lx")


def test_colspec_and_colalign():
    tokens = ["l", "c", "r"]
    assert build_colspec(tokens) == "lcr"
    assert to_tabulate_colalign(tokens) == ["left", "center", "right"]


def test_header_labels():
    assert latex_header_labels(["", "Mean", "SD"]) == [
        "",
        "\\multicolumn{1}{c}{Mean}",
        "\\multicolumn{1}{c}{SD}",
    ]
