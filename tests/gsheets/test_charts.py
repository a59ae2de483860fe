"""
Unit tests for chart config parsing and addChart request building.
"""

import json

import pytest
import sys
import os

sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), "../..")))

from core.utils import UserInputError
from gsheets.charts import (
    EXAMPLE_CHART_CONFIG,
    ChartConfig,
    build_add_chart_request,
    load_charts,
    parse_charts,
)


def text(value):
    return {"effectiveValue": {"stringValue": value}}


def number(value):
    return {"effectiveValue": {"numberValue": value}}


def make_grid(start_row=0, start_column=0):
    return {
        "startRow": start_row,
        "startColumn": start_column,
        "rowData": [
            {"values": [text("Tag"), text("LoC(Total)")]},
            {"values": [text("v1"), number(120)]},
            {"values": [text("v2"), number(80)]},
            {"values": [text("v3"), {}]},
        ],
    }


class TestParseCharts:
    def test_example_config_parses(self):
        charts = parse_charts(EXAMPLE_CHART_CONFIG)
        assert charts == [
            ChartConfig(
                title="LoC(Total) by tag",
                x=900,
                y=20,
                height=380,
                width=600,
                x_axis_title="tag",
                y_axis_title="LoC",
                label_column="Tag",
                data_column="LoC(Total)",
            )
        ]

    def test_rejects_non_list(self):
        with pytest.raises(UserInputError, match="JSON list"):
            parse_charts('{"title": "x"}')

    def test_rejects_invalid_json(self):
        with pytest.raises(UserInputError, match="not valid JSON"):
            parse_charts("[")

    def test_load_from_file(self, tmp_path):
        path = tmp_path / "chart.json"
        path.write_text(json.dumps([{"title": "A", "label_column": "x", "data_column": "y"}]))
        charts = load_charts(str(path))
        assert charts[0].title == "A"
        assert charts[0].width == 0


class TestBuildAddChartRequest:
    def setup_method(self):
        self.chart = parse_charts(EXAMPLE_CHART_CONFIG)[0]

    def test_overlay_position(self):
        request = build_add_chart_request(self.chart, 5, make_grid())
        overlay = request["addChart"]["chart"]["position"]["overlayPosition"]
        assert overlay["anchorCell"] == {"sheetId": 5, "rowIndex": 0, "columnIndex": 0}
        assert overlay["offsetXPixels"] == 900
        assert overlay["offsetYPixels"] == 20
        assert overlay["widthPixels"] == 600
        assert overlay["heightPixels"] == 380

    def test_domain_and_series_ranges(self):
        request = build_add_chart_request(self.chart, 5, make_grid(start_row=2, start_column=3))
        basic = request["addChart"]["chart"]["spec"]["basicChart"]

        domain = basic["domains"][0]["domain"]["sourceRange"]["sources"][0]
        series = basic["series"][0]["series"]["sourceRange"]["sources"][0]
        assert (domain["startColumnIndex"], domain["endColumnIndex"]) == (3, 4)
        assert (series["startColumnIndex"], series["endColumnIndex"]) == (4, 5)
        assert (series["startRowIndex"], series["endRowIndex"]) == (2, 6)
        assert basic["headerCount"] == 1
        assert basic["series"][0]["targetAxis"] == "LEFT_AXIS"

    def test_left_axis_view_window_spans_data(self):
        request = build_add_chart_request(self.chart, 5, make_grid())
        axes = request["addChart"]["chart"]["spec"]["basicChart"]["axis"]
        assert axes[0]["position"] == "BOTTOM_AXIS"
        assert axes[0]["title"] == "tag"
        assert axes[1]["viewWindowOptions"] == {"viewWindowMin": 80.0, "viewWindowMax": 120.0}

    def test_no_numbers_means_no_view_window(self):
        grid = {"rowData": [{"values": [text("Tag"), text("LoC(Total)")]}]}
        request = build_add_chart_request(self.chart, 5, grid)
        axes = request["addChart"]["chart"]["spec"]["basicChart"]["axis"]
        assert "viewWindowOptions" not in axes[1]

    def test_missing_column(self):
        grid = {"rowData": [{"values": [text("Tag")]}]}
        with pytest.raises(UserInputError, match="LoC\\(Total\\)"):
            build_add_chart_request(self.chart, 5, grid)

    def test_empty_sheet(self):
        with pytest.raises(UserInputError):
            build_add_chart_request(self.chart, 5, {})
