"""Unit tests for the shared table preparation path.

Covers input normalization, stub promotion, numeric cell formatting, merging
lists of tables, escaping and stub indentation with section headers.
"""

# pylint: disable=missing-class-docstring,missing-function-docstring

import numpy as np
import pandas as pd
import pytest

from apatables.context import OutputFormat
from apatables.tables.prepare import (
    add_row_names,
    as_table,
    cells_to_text,
    escape_table,
    format_cells,
    get_escaper,
    indent_stubs,
    is_table_collection,
    merge_tables,
    prepare_table,
)

FILLER = "\\ \\ \\ "


# ===========================================================================
# normalization
# ===========================================================================


class TestAsTable:

    def test_dataframe_is_copied(self, plain_table):
        out = as_table(plain_table)
        out.iloc[0, 0] = "changed"
        assert plain_table.iloc[0, 0] == "r1"

    def test_ndarray(self):
        out = as_table(np.array([[1.0, 2.0], [3.0, 4.0]]))
        assert out.shape == (2, 2)
        assert list(out.columns) == ["0", "1"]

    def test_dict_of_columns(self):
        out = as_table({"a": [1, 2], "b": ["x", "y"]})
        assert list(out.columns) == ["a", "b"]

    def test_rejects_other_types(self):
        with pytest.raises(TypeError):
            as_table("not a table")

    def test_rejects_none(self):
        with pytest.raises(ValueError):
            as_table(None)


class TestIsTableCollection:

    def test_list_of_frames(self, plain_table):
        assert is_table_collection([plain_table, plain_table])

    def test_dict_of_frames(self, plain_table):
        assert is_table_collection({"A": plain_table})

    def test_dict_of_columns_is_not_a_collection(self):
        assert not is_table_collection({"a": [1, 2]})

    def test_single_frame(self, plain_table):
        assert not is_table_collection(plain_table)


class TestAddRowNames:

    def test_labels_become_stub(self, cars_summary):
        out = add_row_names(cars_summary, added_stub_head="Variables")
        assert list(out.columns) == ["Variables", "Mean", "SD", "Min", "Max"]
        assert list(out["Variables"]) == ["speed", "dist"]
        assert out.index.equals(pd.RangeIndex(2))

    def test_empty_stub_head_by_default(self, cars_summary):
        out = add_row_names(cars_summary)
        assert out.columns[0] == ""

    def test_default_index_is_not_promoted(self, plain_table):
        out = add_row_names(plain_table, added_stub_head="Variables")
        assert list(out.columns) == list(plain_table.columns)


# ===========================================================================
# cell formatting
# ===========================================================================


class TestFormatCells:

    def test_digits_two(self):
        df = pd.DataFrame({"x": [1.005, 2, 3.14159]})
        out = format_cells(df, {"digits": 2})
        assert list(out["x"]) == ["1.00", "2.00", "3.14"]

    def test_second_pass_is_stable(self):
        df = pd.DataFrame({"x": [1.005, 2, 3.14159]})
        once = format_cells(df, {"digits": 2})
        twice = format_cells(once, {"digits": 2})
        assert list(twice["x"]) == list(once["x"])

    def test_text_columns_untouched(self, plain_table):
        out = format_cells(plain_table)
        assert list(out["Item"]) == ["r1", "r2", "r3", "r4"]
        assert list(out["M"]) == ["1.00", "2.00", "3.00", "4.00"]

    def test_integer_column(self):
        out = format_cells(pd.DataFrame({"n": [10, 2000]}), {"big_mark": ","})
        assert list(out["n"]) == ["10", "2,000"]

    def test_digits_per_column(self, plain_table):
        out = format_cells(plain_table, {"digits": [1, 3]})
        assert list(out["M"]) == ["1.0", "2.0", "3.0", "4.0"]
        assert out["SD"].iloc[2] == "0.125"

    def test_missing_values(self):
        out = format_cells(pd.DataFrame({"x": [1.0, np.nan]}), {"na_string": "--"})
        assert list(out["x"]) == ["1.00", "--"]

    def test_bool_columns_are_not_numbers(self):
        out = format_cells(pd.DataFrame({"flag": [True, False]}))
        assert list(out["flag"]) == [True, False]


class TestCellsToText:

    def test_all_strings(self):
        out = cells_to_text(pd.DataFrame({"a": ["x", None], "b": [True, False]}))
        assert list(out["a"]) == ["x", "NA"]
        assert list(out["b"]) == ["True", "False"]

    def test_line_breaks_become_spaces(self):
        out = cells_to_text(pd.DataFrame({"a": ["x\ny", "p\r\nq"]}))
        assert list(out["a"]) == ["x y", "p q"]


# ===========================================================================
# merging
# ===========================================================================


class TestMergeTables:

    def test_rows_in_list_order(self):
        tables = [
            pd.DataFrame({"a": [f"t{i}r1", f"t{i}r2"], "b": ["1", "2"]})
            for i in range(3)
        ]
        merged = merge_tables(tables)
        assert merged.shape == (6, 2)
        assert list(merged["a"]) == ["t0r1", "t0r2", "t1r1", "t1r2", "t2r1", "t2r2"]

    def test_duplicate_column_names(self):
        t = pd.DataFrame([["x", "1", "2"]], columns=["", "M", "M"])
        merged = merge_tables([t, t])
        assert list(merged.columns) == ["", "M", "M"]
        assert merged.shape == (2, 3)

    def test_mismatched_columns(self):
        with pytest.raises(ValueError, match="same column names"):
            merge_tables([pd.DataFrame({"a": [1]}), pd.DataFrame({"b": [1]})])

    def test_empty_list(self):
        with pytest.raises(ValueError):
            merge_tables([])


# ===========================================================================
# escaping
# ===========================================================================


class TestEscaping:

    def test_latex_cells_and_header(self):
        df = pd.DataFrame({"50% CI": ["a_b"]})
        out = escape_table(df, get_escaper(OutputFormat.LATEX, True))
        assert list(out.columns) == ["50\\% CI"]
        assert out.iloc[0, 0] == "a\\_b"

    def test_latex_without_escape_only_percent(self):
        escaper = get_escaper(OutputFormat.LATEX, False)
        assert escaper("$r$ 50%") == "$r$ 50\\%"

    def test_word_without_escape(self):
        escaper = get_escaper(OutputFormat.WORD, False)
        assert escaper("a_b 50%") == "a_b 50%"

    def test_word_escape(self):
        escaper = get_escaper(OutputFormat.WORD, True)
        assert escaper("a|b") == "a\\|b"

    def test_header_keeps_blank_runs(self):
        df = pd.DataFrame({"a  b": ["x  y"]})
        out = escape_table(
            df,
            get_escaper(OutputFormat.LATEX, True),
            header_escaper=get_escaper(OutputFormat.LATEX, True, cells=False),
        )
        assert list(out.columns) == ["a  b"]
        assert out.iloc[0, 0] == "x \\ y"


# ===========================================================================
# stub indentation
# ===========================================================================


class TestIndentStubs:

    def test_named_and_unnamed_groups(self, plain_table):
        out = indent_stubs(plain_table, {"Section A": [1, 2], None: [4]})
        assert list(out["Item"]) == [
            "Section A",
            FILLER + "r1",
            FILLER + "r2",
            "r3",
            FILLER + "r4",
        ]
        assert list(out.iloc[0]) == ["Section A", "", ""]

    def test_cumulative_offset(self, plain_table):
        out = indent_stubs(plain_table, {"A": [1, 2], "B": [3, 4]})
        assert list(out["Item"]) == ["A", FILLER + "r1", FILLER + "r2", "B", FILLER + "r3", FILLER + "r4"]

    def test_sections_in_row_order_regardless_of_key_order(self, plain_table):
        forward = indent_stubs(plain_table, {"A": [1, 2], "B": [3, 4]})
        backward = indent_stubs(plain_table, {"B": [3, 4], "A": [1, 2]})
        assert forward.equals(backward)

    def test_list_of_groups_has_no_headers(self, plain_table):
        out = indent_stubs(plain_table, [[2, 3]])
        assert len(out) == 4
        assert list(out["Item"]) == ["r1", FILLER + "r2", FILLER + "r3", "r4"]

    def test_filler_applied_once_per_row(self, plain_table):
        out = indent_stubs(plain_table, [[1, 2], [2, 3]])
        for cell in out["Item"]:
            assert cell.count(FILLER) <= 1
        assert list(out["Item"]) == [FILLER + "r1", FILLER + "r2", FILLER + "r3", "r4"]

    def test_empty_title_means_no_header(self, plain_table):
        out = indent_stubs(plain_table, {"": [1]})
        assert len(out) == 4

    def test_custom_filler_and_escaped_title(self, plain_table):
        out = indent_stubs(plain_table, {"50%": [1]}, filler="--", escaper=lambda s: s.upper())
        assert list(out["Item"])[:2] == ["50%".upper(), "--r1"]

    def test_out_of_range(self, plain_table):
        with pytest.raises(ValueError, match="between 1 and 4"):
            indent_stubs(plain_table, {"A": [5]})

    def test_non_string_title(self, plain_table):
        with pytest.raises(TypeError):
            indent_stubs(plain_table, {3: [1]})

    def test_cells_become_text(self, plain_table):
        out = indent_stubs(plain_table, [[1]])
        assert out["M"].iloc[0] == "1.0"


# ===========================================================================
# full preparation
# ===========================================================================


class TestPrepareTable:

    def test_single_table(self, cars_summary):
        out = prepare_table(cars_summary, added_stub_head="Variables", format_args={"digits": 2})
        assert list(out.columns) == ["Variables", "Mean", "SD", "Min", "Max"]
        assert list(out.iloc[0]) == ["speed", "15.40", "5.29", "4.00", "25.00"]

    def test_without_row_names(self, cars_summary):
        out = prepare_table(cars_summary, row_names=False)
        assert list(out.columns) == ["Mean", "SD", "Min", "Max"]

    def test_three_named_tables(self, cars_summary):
        tables = {"First": cars_summary, "Second": cars_summary, "Third": cars_summary}
        out = prepare_table(tables)
        assert out.shape == (9, 5)
        assert list(out.iloc[:, 0]) == [
            "First", FILLER + "speed", FILLER + "dist",
            "Second", FILLER + "speed", FILLER + "dist",
            "Third", FILLER + "speed", FILLER + "dist",
        ]

    def test_unnamed_list_of_tables(self, cars_summary):
        out = prepare_table([cars_summary, cars_summary, cars_summary])
        assert out.shape == (6, 5)
        assert list(out.iloc[:, 0]) == ["speed", "dist"] * 3

    def test_user_indents_apply_after_sections(self, cars_summary):
        out = prepare_table({"First": cars_summary}, stub_indents=[[2]])
        assert out.iloc[1, 0] == FILLER + FILLER + "speed"

    def test_escaping_applied(self):
        df = pd.DataFrame({"Share": ["50%"]})
        out = prepare_table(df)
        assert out.iloc[0, 0] == "50\\%"

    def test_section_titles_escaped(self, cars_summary):
        out = prepare_table({"A & B": cars_summary})
        assert out.iloc[0, 0] == "A \\& B"

    def test_mismatched_list_elements(self, cars_summary):
        with pytest.raises(ValueError):
            prepare_table([cars_summary, cars_summary[["Mean"]]])
