"""Tests for table loading and the render-and-save workflow."""

# pylint: disable=missing-class-docstring,missing-function-docstring

import pandas as pd
import pytest

from apatables.context import OutputFormat, RenderContext
from apatables.table_utils import generate_table_files, load_table


class TestLoadTable:

    def test_csv_with_index(self, tmp_path, cars_summary):
        path = tmp_path / "cars.csv"
        cars_summary.to_csv(path)
        df = load_table(path, index_col=0)
        assert list(df.index) == ["speed", "dist"]
        assert list(df.columns) == ["Mean", "SD", "Min", "Max"]

    def test_tsv(self, tmp_path, plain_table):
        path = tmp_path / "plain.tsv"
        plain_table.to_csv(path, sep="\t", index=False)
        df = load_table(path)
        assert df.shape == (4, 3)

    def test_pickle(self, tmp_path, cars_summary):
        path = tmp_path / "cars.pkl"
        cars_summary.to_pickle(path)
        assert load_table(path).equals(cars_summary)

    def test_pickle_must_hold_frame(self, tmp_path):
        path = tmp_path / "list.pkl"
        pd.to_pickle([1, 2, 3], path)
        with pytest.raises(TypeError):
            load_table(path)

    def test_missing_file(self, tmp_path):
        with pytest.raises(FileNotFoundError):
            load_table(tmp_path / "nope.csv")

    def test_unsupported_suffix(self, tmp_path):
        path = tmp_path / "table.xlsx"
        path.write_text("x")
        with pytest.raises(ValueError, match="Unsupported"):
            load_table(path)


class TestGenerateTableFiles:

    def test_latex_and_csv(self, tmp_path, cars_summary):
        tex_path, csv_path = generate_table_files(
            df=cars_summary,
            output_dir=tmp_path,
            table_name="cars",
            caption="Cars",
            added_stub_head="Variables",
        )
        assert tex_path == tmp_path / "cars.tex"
        assert "\\caption{Cars}" in tex_path.read_text(encoding="utf-8")
        reloaded = pd.read_csv(csv_path, index_col=0)
        assert list(reloaded.index) == ["speed", "dist"]

    def test_word_output(self, tmp_path, cars_summary):
        ctx = RenderContext(output_format=OutputFormat.WORD)
        md_path, _ = generate_table_files(
            df=cars_summary, output_dir=tmp_path, table_name="cars", context=ctx,
        )
        assert md_path.suffix == ".md"
        assert md_path.read_text(encoding="utf-8").lstrip().startswith("|")

    def test_formatter_and_manuscript_copy(self, tmp_path, cars_summary):
        tex_path, csv_path = generate_table_files(
            df=cars_summary,
            output_dir=tmp_path / "out",
            table_name="grouped",
            formatter_func=lambda df: {"Cars": df},
            manuscript_dir=tmp_path / "ms",
            manuscript_name="table1.tex",
            save_csv=False,
        )
        assert csv_path is None
        copy = (tmp_path / "ms" / "table1.tex").read_text(encoding="utf-8")
        assert copy == tex_path.read_text(encoding="utf-8")
        assert "\\ \\ \\ speed" in copy

    def test_requires_dataframe(self, tmp_path):
        with pytest.raises(TypeError):
            generate_table_files(df=[[1]], output_dir=tmp_path, table_name="x")
