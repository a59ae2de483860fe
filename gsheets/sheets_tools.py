"""
Google Sheets Tools

Async wrappers over the Sheets API used to build the report: document
lifecycle, table upload, grid reads, background highlighting and charts.
"""

import asyncio
import logging
from typing import List, Optional

from core.utils import UserInputError, handle_http_errors
from gsheets.charts import ChartConfig, build_add_chart_request
from gsheets.colors import NEGATIVE_GREEN, POSITIVE_RED, WHITE, Color
from gsheets.highlight import (
    Boundary,
    ColorGrid,
    GridCell,
    percentile_bands,
    plan_gradient_highlight,
    plan_highlight,
    plan_percentile_highlight,
)
from gsheets.sheets_helpers import (
    CellPosition,
    _coerce_int,
    _first_sheet,
    _header_index,
    range_label,
)

# Configure module logger
logger = logging.getLogger(__name__)

DEFAULT_SHEET_TITLE = "Sheet1"
TEMP_SHEET_TITLE = "Temp"
GRID_FIELDS = (
    "sheets(properties(sheetId,title),data(startRow,startColumn,"
    "rowData(values(effectiveValue(numberValue),effectiveFormat(backgroundColor)))))"
)
CHART_GRID_FIELDS = (
    "sheets(properties(sheetId,title),data(startRow,startColumn,"
    "rowData(values(effectiveValue))))"
)


def _grid_cells(grid: dict, start: CellPosition, end: CellPosition) -> List[List[GridCell]]:
    """
    Extract GridCells for the one-indexed rectangle start..end from a GridData.

    Rows or cells the API left out read as no value and no background.
    """
    start_row = _coerce_int(grid.get("startRow"), default=0)
    start_col = _coerce_int(grid.get("startColumn"), default=0)
    row_data = grid.get("rowData", []) or []

    cells: List[List[GridCell]] = []
    for row in range(start.row, end.row + 1):
        row_offset = row - 1 - start_row
        values = []
        if 0 <= row_offset < len(row_data):
            values = (row_data[row_offset] or {}).get("values", []) or []

        grid_row = []
        for column in range(start.column, end.column + 1):
            col_offset = column - 1 - start_col
            cell_data = values[col_offset] if 0 <= col_offset < len(values) else None
            if not cell_data:
                grid_row.append(GridCell())
                continue
            number = (cell_data.get("effectiveValue") or {}).get("numberValue")
            background = (cell_data.get("effectiveFormat") or {}).get("backgroundColor")
            grid_row.append(
                GridCell(
                    value=float(number) if number is not None else None,
                    background=Color.from_sheets_color(background),
                )
            )
        cells.append(grid_row)
    return cells


def build_background_request(
    sheet_id: int, start: CellPosition, end: CellPosition, colors: ColorGrid
) -> dict:
    """
    Build one updateCells request writing a planned color grid.

    A None color clears the cell's background.
    """
    start_row, start_col = start.to_grid_index()
    rows = []
    for color_row in colors:
        values = []
        for color in color_row:
            cell_format = {}
            if color is not None:
                cell_format["backgroundColor"] = color.to_sheets_color()
            values.append({"userEnteredFormat": cell_format})
        rows.append({"values": values})

    return {
        "updateCells": {
            "fields": "userEnteredFormat.backgroundColor",
            "range": {
                "sheetId": sheet_id,
                "startRowIndex": start_row,
                "endRowIndex": end.row,
                "startColumnIndex": start_col,
                "endColumnIndex": end.column,
            },
            "rows": rows,
        }
    }


async def _batch_update(service, spreadsheet_id: str, requests: List[dict]) -> dict:
    return await asyncio.to_thread(
        service.spreadsheets()
        .batchUpdate(spreadsheetId=spreadsheet_id, body={"requests": requests})
        .execute
    )


@handle_http_errors("create_spreadsheet", service_type="sheets")
async def create_spreadsheet(service, title: str) -> str:
    """
    Creates a new spreadsheet.

    Returns:
        str: The new spreadsheet ID.
    """
    logger.info(f"[create_spreadsheet] Invoked. Title: {title}")

    spreadsheet = await asyncio.to_thread(
        service.spreadsheets()
        .create(body={"properties": {"title": title}}, fields="spreadsheetId")
        .execute
    )
    spreadsheet_id = spreadsheet.get("spreadsheetId")
    logger.info(f"Successfully created spreadsheet. ID: {spreadsheet_id}")
    return spreadsheet_id


@handle_http_errors("recreate_spreadsheet", service_type="sheets")
async def recreate_spreadsheet(service, spreadsheet_id: str, title: str = "") -> None:
    """
    Resets an existing spreadsheet to a single empty 'Sheet1'.

    An existing 'Sheet1' is renamed, replaced by a fresh sheet and deleted in
    one batch so the document never has zero sheets. A non-empty title also
    renames the document.
    """
    logger.info(
        f"[recreate_spreadsheet] Invoked. Spreadsheet: {spreadsheet_id}, Title: {title}"
    )

    metadata = await asyncio.to_thread(
        service.spreadsheets()
        .get(spreadsheetId=spreadsheet_id, fields="sheets(properties(sheetId,title))")
        .execute
    )
    sheets = metadata.get("sheets", []) or []
    if not sheets:
        raise UserInputError(f"Spreadsheet {spreadsheet_id} has no sheets.")

    requests: List[dict] = []
    if title:
        requests.append(
            {
                "updateSpreadsheetProperties": {
                    "fields": "title",
                    "properties": {"title": title},
                }
            }
        )

    existing = None
    for sheet in sheets:
        if sheet.get("properties", {}).get("title") == DEFAULT_SHEET_TITLE:
            existing = sheet
            break

    new_sheet = {"addSheet": {"properties": {"title": DEFAULT_SHEET_TITLE}}}
    if existing is None:
        requests.append(new_sheet)
    else:
        sheet_id = existing["properties"].get("sheetId")
        requests.extend(
            [
                {
                    "updateSheetProperties": {
                        "fields": "title",
                        "properties": {"sheetId": sheet_id, "title": TEMP_SHEET_TITLE},
                    }
                },
                new_sheet,
                {"deleteSheet": {"sheetId": sheet_id}},
            ]
        )

    await _batch_update(service, spreadsheet_id, requests)
    logger.info(f"Recreated spreadsheet {spreadsheet_id} with {len(requests)} requests")


@handle_http_errors("get_first_sheet_id", is_read_only=True, service_type="sheets")
async def get_first_sheet_id(service, spreadsheet_id: str) -> int:
    metadata = await asyncio.to_thread(
        service.spreadsheets()
        .get(spreadsheetId=spreadsheet_id, fields="sheets(properties(sheetId,title))")
        .execute
    )
    return _first_sheet(metadata).get("properties", {}).get("sheetId")


@handle_http_errors("insert_table", service_type="sheets")
async def insert_table(
    service, spreadsheet_id: str, position: CellPosition, table: List[List[str]]
) -> str:
    """
    Writes a table of strings with its top-left cell at position.

    Values are entered as if typed by a user, so numbers stay numbers.

    Returns:
        str: The A1 range written.
    """
    if not table or not table[0]:
        raise UserInputError("Attempting to insert empty table.")

    height = len(table)
    width = len(table[0])
    a1_range = range_label(position, position.offset(height - 1, width - 1))
    logger.info(
        f"[insert_table] Invoked. Spreadsheet: {spreadsheet_id}, Range: {a1_range}, Rows: {height}"
    )

    await asyncio.to_thread(
        service.spreadsheets()
        .values()
        .update(
            spreadsheetId=spreadsheet_id,
            range=a1_range,
            valueInputOption="USER_ENTERED",
            body={"values": [list(row) for row in table]},
        )
        .execute
    )
    return a1_range


@handle_http_errors("read_grid", is_read_only=True, service_type="sheets")
async def read_grid(
    service, spreadsheet_id: str, start: CellPosition, end: CellPosition
) -> tuple[int, List[List[GridCell]]]:
    """
    Reads values and backgrounds of the first sheet for start..end.

    Returns:
        tuple: (sheet_id, grid of GridCell rows).
    """
    a1_range = range_label(start, end)
    response = await asyncio.to_thread(
        service.spreadsheets()
        .get(
            spreadsheetId=spreadsheet_id,
            ranges=[a1_range],
            includeGridData=True,
            fields=GRID_FIELDS,
        )
        .execute
    )
    sheet = _first_sheet(response)
    sheet_id = sheet.get("properties", {}).get("sheetId")
    grids = sheet.get("data", []) or [{}]
    return sheet_id, _grid_cells(grids[0], start, end)


async def _apply_plan(
    service,
    spreadsheet_id: str,
    sheet_id: int,
    start: CellPosition,
    end: CellPosition,
    colors: ColorGrid,
) -> None:
    request = build_background_request(sheet_id, start, end, colors)
    await _batch_update(service, spreadsheet_id, [request])


@handle_http_errors("highlight", service_type="sheets")
async def highlight(
    service,
    spreadsheet_id: str,
    start: CellPosition,
    end: CellPosition,
    lower: Boundary,
    upper: Boundary,
    color: Color,
) -> ColorGrid:
    """
    Sets a flat background on every cell in start..end whose value is in range.

    Cells outside the range keep their current background.
    """
    logger.info(
        f"[highlight] Invoked. Spreadsheet: {spreadsheet_id}, Range: {range_label(start, end)}, "
        f"Bounds: {lower.value}..{upper.value}, Color: {color.to_hex()}"
    )
    sheet_id, cells = await read_grid(service, spreadsheet_id, start, end)
    colors = plan_highlight(cells, lower, upper, color)
    await _apply_plan(service, spreadsheet_id, sheet_id, start, end, colors)
    return colors


@handle_http_errors("gradient_highlight", service_type="sheets")
async def gradient_highlight(
    service,
    spreadsheet_id: str,
    start: CellPosition,
    end: CellPosition,
    lower: Boundary,
    upper: Boundary,
    color1: Color,
    color2: Color,
) -> ColorGrid:
    """
    Blends each in-range cell from color1 (at lower) to color2 (at upper).
    """
    if lower.value == upper.value:
        raise UserInputError("Lower boundary equals upper boundary.")

    logger.info(
        f"[gradient_highlight] Invoked. Spreadsheet: {spreadsheet_id}, Range: {range_label(start, end)}, "
        f"Bounds: {lower.value}..{upper.value}, Colors: {color1.to_hex()}->{color2.to_hex()}"
    )
    sheet_id, cells = await read_grid(service, spreadsheet_id, start, end)
    colors = plan_gradient_highlight(cells, lower, upper, color1, color2)
    await _apply_plan(service, spreadsheet_id, sheet_id, start, end, colors)
    return colors


def _column_values(table: List[List[str]], index: int, column_name: str) -> List[float]:
    values = []
    for row_number, row in enumerate(table[1:], start=2):
        raw = row[index] if index < len(row) else ""
        try:
            values.append(float(raw))
        except ValueError as exc:
            raise UserInputError(
                f"Column '{column_name}' row {row_number}: '{raw}' is not a number."
            ) from exc
    return values


@handle_http_errors("percentile_highlight_column", service_type="sheets")
async def percentile_highlight_column(
    service,
    spreadsheet_id: str,
    table: List[List[str]],
    column_name: str,
    positive_color: Color = POSITIVE_RED,
    negative_color: Color = NEGATIVE_GREEN,
    neutral_color: Color = WHITE,
    origin: Optional[CellPosition] = None,
) -> Optional[ColorGrid]:
    """
    Heat-maps one uploaded column by percentile bands.

    Args:
        table: The uploaded table, header row first.
        column_name: Header of the column to highlight.
        origin: Top-left cell the table was written to. Defaults to A1.

    Returns:
        The applied color grid, or None when nothing was highlighted.
    """
    logger.info(
        f"[percentile_highlight_column] Invoked. Spreadsheet: {spreadsheet_id}, Column: {column_name}"
    )
    if len(table) <= 1:
        return None

    index = _header_index(table[0], column_name)
    if index < 0:
        raise UserInputError(f"Missing column: {column_name}")

    negative_bands, positive_bands = percentile_bands(
        _column_values(table, index, column_name),
        positive_color=positive_color,
        negative_color=negative_color,
        neutral_color=neutral_color,
    )
    if not negative_bands and not positive_bands:
        logger.info(f"Column '{column_name}' has no non-zero values, skipping highlight")
        return None

    origin = origin or CellPosition.origin()
    start = origin.offset(1, index)
    end = origin.offset(len(table) - 1, index)

    sheet_id, cells = await read_grid(service, spreadsheet_id, start, end)
    colors = plan_percentile_highlight(cells, negative_bands, positive_bands)
    await _apply_plan(service, spreadsheet_id, sheet_id, start, end, colors)

    logger.info(
        f"Highlighted column '{column_name}' ({range_label(start, end)}) with "
        f"{len(negative_bands)} negative and {len(positive_bands)} positive bands"
    )
    return colors


@handle_http_errors("add_chart", service_type="sheets")
async def add_chart(service, spreadsheet_id: str, chart: ChartConfig) -> dict:
    """
    Adds a line chart over the first sheet's label and data columns.

    Returns:
        dict: The addChart request that was sent.
    """
    logger.info(f"[add_chart] Invoked. Spreadsheet: {spreadsheet_id}, Chart: {chart.title}")

    response = await asyncio.to_thread(
        service.spreadsheets()
        .get(spreadsheetId=spreadsheet_id, includeGridData=True, fields=CHART_GRID_FIELDS)
        .execute
    )
    sheet = _first_sheet(response)
    sheet_id = sheet.get("properties", {}).get("sheetId")
    grids = sheet.get("data", []) or [{}]

    request = build_add_chart_request(chart, sheet_id, grids[0])
    await _batch_update(service, spreadsheet_id, [request])
    return request
