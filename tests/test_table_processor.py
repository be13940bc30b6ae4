# tests/test_table_processor.py
import pytest
from bs4 import BeautifulSoup

from spectable.core.functions.table_processor import (
    HTML_MAX_COLSPAN,
    TableOutputFormat,
    TableProcessorConfig,
    create_table_processor,
    import_html_table,
)
from spectable.core.grid.grid_model import GridModel, LineEntry
from spectable.core.grid.merge_engine import merge
from spectable.core.grid.selection_tracker import SelectionTracker


def parse_rows(markup):
    soup = BeautifulSoup(markup, "html.parser")
    return soup.find("table").find_all("tr")


class TestLayout:
    def test_rows_expand_to_tallest_cell(self, scenario_model):
        layout = create_table_processor().build_layout(scenario_model)
        assert len(layout) == 2
        assert [(c.content, c.is_virtual) for c in layout[0]] == [("A", False), ("X", False)]
        assert [(c.content, c.is_virtual) for c in layout[1]] == [("B", False), ("", True)]

    def test_virtual_cells_off_stretches_last_line(self, scenario_model):
        processor = create_table_processor(TableProcessorConfig(render_virtual_cells=False))
        layout = processor.build_layout(scenario_model)
        assert [(c.content, c.rowspan) for c in layout[0]] == [("A", 1), ("X", 2)]
        assert [(c.content, c.rowspan) for c in layout[1]] == [("B", 1)]

    def test_anchor_spans_rendered_rows(self):
        model = GridModel.empty(["a", "b"])
        model.add_row()
        model.add_row()
        model.add_line(0, 1, 0)
        model.add_line(0, 1, 1)
        model.set_line_content(0, 0, 0, "top")
        model.set_line_content(1, 0, 0, "bottom")
        merge(model, SelectionTracker([(0, 0, 0), (1, 0, 0)]))

        layout = create_table_processor().build_layout(model)
        # row 0 is three lines tall, row 1 one line
        assert len(layout) == 4
        anchor = layout[0][0]
        assert (anchor.content, anchor.rowspan, anchor.colspan) == ("top\nbottom", 4, 1)
        assert all(cell.col == 1 for row in layout[1:] for cell in row)


class TestHtml:
    def test_scenario_output(self, scenario_model):
        markup = create_table_processor().format_table(scenario_model)
        rows = parse_rows(markup)
        assert [th.get_text() for th in rows[0].find_all("th")] == ["구분", "사양"]
        assert [td.get_text() for td in rows[1].find_all("td")] == ["A", "X"]
        assert [td.get_text() for td in rows[2].find_all("td")] == ["B", ""]

    def test_merged_square(self, grid_3x3):
        merge(grid_3x3, SelectionTracker([(0, 0, 0), (0, 1, 0), (1, 0, 0), (1, 1, 0)]))
        rows = parse_rows(create_table_processor().format_table(grid_3x3))

        first = rows[1].find_all("td")
        assert first[0]["rowspan"] == "2"
        assert first[0]["colspan"] == "2"
        assert len(first[0].find_all("br")) == 3
        assert [td.get_text() for td in rows[2].find_all("td")] == ["r1c2"]
        assert len(rows[3].find_all("td")) == 3

    def test_horizontal_line_merge_hides_other_lines(self, scenario_model):
        merge(scenario_model, SelectionTracker([(0, 0, 1), (0, 1, 0)]))
        rows = parse_rows(create_table_processor().format_table(scenario_model))
        cells = rows[1].find_all("td")
        assert len(rows) == 2
        assert len(cells) == 1
        assert cells[0]["colspan"] == "2"
        assert "A" not in cells[0].get_text()

    def test_content_is_escaped(self):
        model = GridModel.empty(["<b>"])
        model.add_row()
        model.set_line_content(0, 0, 0, "a < b & c")
        markup = create_table_processor().format_table(model)
        assert "&lt;b&gt;" in markup
        assert "a &lt; b &amp; c" in markup

    def test_custom_line_break(self, grid_3x3):
        merge(grid_3x3, SelectionTracker([(0, 0, 0), (0, 1, 0)]))
        processor = create_table_processor(TableProcessorConfig(html_line_break="<br/>"))
        assert "r0c0<br/>r0c1" in processor.format_table(grid_3x3)


class TestFlatFormats:
    def test_markdown(self, scenario_model):
        processor = create_table_processor(TableProcessorConfig(output_format=TableOutputFormat.MARKDOWN))
        assert processor.format_table(scenario_model) == (
            "| 구분 | 사양 |\n"
            "| --- | --- |\n"
            "| A<br>B | X |"
        )

    def test_markdown_escapes_pipes(self):
        model = GridModel.empty(["a|b"])
        model.add_row()
        model.set_line_content(0, 0, 0, "x|y")
        processor = create_table_processor(TableProcessorConfig(output_format=TableOutputFormat.MARKDOWN))
        assert "x\\|y" in processor.format_table(model)

    def test_text(self, scenario_model):
        processor = create_table_processor(TableProcessorConfig(output_format=TableOutputFormat.TEXT))
        assert processor.format_table(scenario_model) == "구분\t사양\nA / B\tX"

    def test_text_skips_covered(self, grid_3x3):
        merge(grid_3x3, SelectionTracker([(0, 0, 0), (0, 1, 0)]))
        processor = create_table_processor(TableProcessorConfig(output_format=TableOutputFormat.TEXT))
        first_row = processor.format_table(grid_3x3).split("\n")[1]
        assert first_row.split("\t") == ["r0c0 / r0c1", "", "r0c2"]


class TestHtmlImport:
    def test_header_and_spans(self):
        markup = """
        <p>제품 사양</p>
        <table>
          <tr><th>구분</th><th>사양</th><th>비고</th></tr>
          <tr><td rowspan="2">전원</td><td>AC 220V</td><td>-</td></tr>
          <tr><td>DC 12V</td><td>옵션</td></tr>
          <tr><td colspan="3">공통</td></tr>
        </table>
        """
        model = import_html_table(markup)
        assert model.headers == ["구분", "사양", "비고"]
        assert model.num_rows == 3
        assert model.line_at(0, 0, 0).rowspan == 2
        assert model.line_at(1, 0, 0).is_covered
        assert model.line_at(1, 1, 0).content == "DC 12V"
        assert model.line_at(2, 0, 0).colspan == 3
        model.validate()

    def test_without_header_generates_labels(self):
        model = import_html_table("<table><tr><td>a</td><td>b<br>c</td></tr></table>")
        assert model.headers == ["컬럼1", "컬럼2"]
        assert model.line_at(0, 1, 0).content == "b\nc"

    def test_no_table(self):
        assert import_html_table("<p>no table here</p>") is None

    @pytest.mark.parametrize("markup", ["", None])
    def test_empty_input(self, markup):
        assert import_html_table(markup) is None

    def test_oversized_rowspan_clamped_to_table(self):
        model = import_html_table(
            '<table><tr><td rowspan="3000000" colspan="10">x</td></tr></table>'
        )
        assert model.num_rows == 1
        assert model.num_cols == 10
        assert model.line_at(0, 0, 0) == LineEntry(content="x", rowspan=1, colspan=10)
        model.validate()

    def test_rowspan_clamped_to_remaining_rows(self):
        model = import_html_table(
            "<table>"
            '<tr><td rowspan="65534">a</td><td>b</td></tr>'
            "<tr><td>c</td></tr>"
            "</table>"
        )
        assert model.num_rows == 2
        assert model.line_at(0, 0, 0).rowspan == 2
        assert model.line_at(1, 0, 0).is_covered
        assert model.line_at(1, 1, 0).content == "c"

    def test_oversized_colspan_capped(self):
        model = import_html_table(
            '<table><tr><th colspan="99999999">h</th></tr>'
            '<tr><td colspan="99999999">x</td></tr></table>'
        )
        assert model.num_cols == HTML_MAX_COLSPAN
        assert model.line_at(0, 0, 0).colspan == HTML_MAX_COLSPAN
