"""
Chart configuration for the report.

Charts are described in a JSON list and rendered as basic LINE charts that
read their domain and series from named header columns of the first sheet.
"""

import json
import logging
from dataclasses import dataclass
from typing import List, Optional

from core.utils import UserInputError
from gsheets.sheets_helpers import _coerce_int, _header_index

logger = logging.getLogger(__name__)

CHART_FONT = "Roboto"

EXAMPLE_CHART_CONFIG = """[
 {
   "title": "LoC(Total) by tag",
   "top_left": {
     "x": 900,
     "y": 20
   },
   "size": {
     "height": 380,
     "width": 600
   },
   "x_axis_title": "tag",
   "y_axis_title": "LoC",
   "label_column": "Tag",
   "data_column": "LoC(Total)"
 }
]"""


@dataclass(frozen=True)
class ChartConfig:
    title: str
    x: int
    y: int
    height: int
    width: int
    x_axis_title: str
    y_axis_title: str
    label_column: str
    data_column: str

    @classmethod
    def from_dict(cls, raw: dict) -> "ChartConfig":
        if not isinstance(raw, dict):
            raise UserInputError("Each chart config entry must be an object.")
        top_left = raw.get("top_left") or {}
        size = raw.get("size") or {}
        return cls(
            title=raw.get("title", ""),
            x=_coerce_int(top_left.get("x")),
            y=_coerce_int(top_left.get("y")),
            height=_coerce_int(size.get("height")),
            width=_coerce_int(size.get("width")),
            x_axis_title=raw.get("x_axis_title", ""),
            y_axis_title=raw.get("y_axis_title", ""),
            label_column=raw.get("label_column", ""),
            data_column=raw.get("data_column", ""),
        )


def parse_charts(payload: str) -> List[ChartConfig]:
    try:
        parsed = json.loads(payload)
    except json.JSONDecodeError as exc:
        raise UserInputError(f"Chart config is not valid JSON: {exc}") from exc
    if not isinstance(parsed, list):
        raise UserInputError("Chart config must be a JSON list of chart objects.")
    return [ChartConfig.from_dict(item) for item in parsed]


def load_charts(path: str) -> List[ChartConfig]:
    with open(path, encoding="utf-8") as handle:
        return parse_charts(handle.read())


def _text_format() -> dict:
    return {"fontFamily": CHART_FONT}


def _source_range(sheet_id: int, column: int, start_row: int, end_row: int) -> dict:
    return {
        "sourceRange": {
            "sources": [
                {
                    "sheetId": sheet_id,
                    "startRowIndex": start_row,
                    "endRowIndex": end_row,
                    "startColumnIndex": column,
                    "endColumnIndex": column + 1,
                }
            ]
        }
    }


def _data_view_window(rows: List[dict], data_index: int) -> Optional[dict]:
    """Min/max of the numeric cells in the data column, None without numbers."""
    numbers = []
    for row in rows:
        values = (row or {}).get("values", []) or []
        if data_index >= len(values):
            continue
        number = ((values[data_index] or {}).get("effectiveValue") or {}).get("numberValue")
        if number is not None:
            numbers.append(float(number))
    if not numbers:
        return None
    return {"viewWindowMin": min(numbers), "viewWindowMax": max(numbers)}


def build_add_chart_request(chart: ChartConfig, sheet_id: int, grid: dict) -> dict:
    """
    Build an addChart request for a chart over the first sheet's grid data.

    Args:
        chart: Chart configuration.
        sheet_id: Target sheet id.
        grid: The sheet's first GridData (startRow, startColumn, rowData).
    """
    rows = grid.get("rowData", []) or []
    if not rows:
        raise UserInputError(f"Chart '{chart.title}' needs a header row, sheet is empty.")

    header = [
        ((cell or {}).get("effectiveValue") or {}).get("stringValue")
        for cell in (rows[0] or {}).get("values", []) or []
    ]
    label_index = _header_index(header, chart.label_column)
    data_index = _header_index(header, chart.data_column)
    if label_index < 0:
        raise UserInputError(f"Chart '{chart.title}': missing column '{chart.label_column}'.")
    if data_index < 0:
        raise UserInputError(f"Chart '{chart.title}': missing column '{chart.data_column}'.")

    logger.debug(
        f"Chart '{chart.title}': label column {label_index}, data column {data_index}"
    )

    start_column = _coerce_int(grid.get("startColumn"))
    start_row = _coerce_int(grid.get("startRow"))
    end_row = start_row + len(rows)

    view_window = _data_view_window(rows, data_index)
    left_axis = {
        "format": _text_format(),
        "position": "LEFT_AXIS",
        "title": chart.y_axis_title,
    }
    if view_window:
        left_axis["viewWindowOptions"] = view_window

    return {
        "addChart": {
            "chart": {
                "position": {
                    "overlayPosition": {
                        "anchorCell": {"sheetId": sheet_id, "rowIndex": 0, "columnIndex": 0},
                        "offsetXPixels": chart.x,
                        "offsetYPixels": chart.y,
                        "widthPixels": chart.width,
                        "heightPixels": chart.height,
                    }
                },
                "spec": {
                    "title": chart.title,
                    "titleTextFormat": _text_format(),
                    "fontName": CHART_FONT,
                    "hiddenDimensionStrategy": "SKIP_HIDDEN_ROWS_AND_COLUMNS",
                    "basicChart": {
                        "chartType": "LINE",
                        "headerCount": 1,
                        "axis": [
                            {
                                "format": _text_format(),
                                "position": "BOTTOM_AXIS",
                                "title": chart.x_axis_title,
                            },
                            left_axis,
                        ],
                        "domains": [
                            {
                                "domain": _source_range(
                                    sheet_id, start_column + label_index, start_row, end_row
                                )
                            }
                        ],
                        "series": [
                            {
                                "series": _source_range(
                                    sheet_id, start_column + data_index, start_row, end_row
                                ),
                                "targetAxis": "LEFT_AXIS",
                                "dataLabel": {"type": "NONE", "textFormat": _text_format()},
                            }
                        ],
                    },
                },
            }
        }
    }
