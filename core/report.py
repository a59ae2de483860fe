"""
End-to-end report pipeline.

Reads the CSV table, creates (or recreates) the spreadsheet, shares it,
uploads the table, heat-maps the requested columns, adds charts and sends
the notification mail. Any failure aborts the run.
"""

import csv
import logging
import os
from dataclasses import dataclass, field
from typing import Callable, List, Optional

from auth.google_auth import GoogleServices
from core.config import DEFAULT_CHART_FILE, get_palette_overrides, spreadsheet_url
from core.utils import UserInputError
from gdrive.drive_tools import share_file
from gmail.gmail_tools import send_email
from gsheets.charts import ChartConfig, load_charts
from gsheets.colors import NEGATIVE_GREEN, POSITIVE_RED, WHITE, Color
from gsheets.sheets_helpers import CellPosition
from gsheets.sheets_tools import (
    add_chart,
    create_spreadsheet,
    insert_table,
    percentile_highlight_column,
    recreate_spreadsheet,
)

logger = logging.getLogger(__name__)


@dataclass
class ReportOptions:
    title: str
    content_file: str
    chart_file: Optional[str] = None
    users: List[str] = field(default_factory=list)
    email_message: str = ""
    highlight_columns: List[str] = field(default_factory=list)
    spreadsheet_id: Optional[str] = None


@dataclass(frozen=True)
class HighlightPalette:
    positive: Color = POSITIVE_RED
    negative: Color = NEGATIVE_GREEN
    neutral: Color = WHITE

    @classmethod
    def from_env(cls) -> "HighlightPalette":
        overrides = get_palette_overrides()
        defaults = cls()
        return cls(
            positive=Color.from_hex(overrides["positive"]) if overrides["positive"] else defaults.positive,
            negative=Color.from_hex(overrides["negative"]) if overrides["negative"] else defaults.negative,
            neutral=Color.from_hex(overrides["neutral"]) if overrides["neutral"] else defaults.neutral,
        )


def split_list(value: Optional[str]) -> List[str]:
    """Split a comma separated flag value, dropping blanks."""
    if not value:
        return []
    return [item.strip() for item in value.split(",") if item.strip()]


def read_table(path: str) -> List[List[str]]:
    """Read a CSV file into rows of strings; an empty file is an error."""
    with open(path, newline="", encoding="utf-8") as handle:
        table = [row for row in csv.reader(handle)]
    if not table:
        raise UserInputError(f"Empty csv file: {path}")
    return table


def read_chart_configs(path: Optional[str]) -> List[ChartConfig]:
    """
    Load chart configs. None means the default chart.json, which may be absent.

    An explicitly named file must exist; an empty path disables charts.
    """
    if path is None:
        if not os.path.exists(DEFAULT_CHART_FILE):
            logger.info(f"No chart config at {DEFAULT_CHART_FILE}, skipping charts")
            return []
        path = DEFAULT_CHART_FILE
    if not path:
        return []
    return load_charts(path)


async def run_report(
    services: GoogleServices,
    options: ReportOptions,
    palette: Optional[HighlightPalette] = None,
    on_url: Optional[Callable[[str], None]] = None,
) -> str:
    """
    Run the whole report and return the spreadsheet ID.

    Args:
        services: Sheets, Drive and Gmail clients.
        options: What to upload and who to share it with.
        palette: Percentile highlight colors. Defaults to the environment palette.
        on_url: Called with the document URL as soon as it is known.
    """
    table = read_table(options.content_file)
    charts = read_chart_configs(options.chart_file)
    palette = palette or HighlightPalette.from_env()

    spreadsheet_id = options.spreadsheet_id
    if spreadsheet_id:
        await recreate_spreadsheet(services.sheets, spreadsheet_id, options.title)
    else:
        spreadsheet_id = await create_spreadsheet(services.sheets, options.title)

    url = spreadsheet_url(spreadsheet_id)
    if on_url is not None:
        on_url(url)

    for user in options.users:
        await share_file(services.drive, spreadsheet_id, user)

    await insert_table(services.sheets, spreadsheet_id, CellPosition.origin(), table)

    for column_name in options.highlight_columns:
        await percentile_highlight_column(
            services.sheets,
            spreadsheet_id,
            table,
            column_name,
            positive_color=palette.positive,
            negative_color=palette.negative,
            neutral_color=palette.neutral,
        )

    for chart in charts:
        await add_chart(services.sheets, spreadsheet_id, chart)

    if options.email_message:
        await send_email(
            services.gmail,
            ",".join(options.users),
            options.title,
            f"Document link: {url}\n\n{options.email_message}",
        )

    logger.info(f"Report complete: {url}")
    return spreadsheet_id
