import argparse
import asyncio
import logging
import os
import sys

from dotenv import load_dotenv

dotenv_path = os.path.join(os.path.dirname(os.path.abspath(__file__)), ".env")
load_dotenv(dotenv_path=dotenv_path)

from auth.google_auth import build_services  # noqa: E402
from core.config import DEFAULT_CHART_FILE, DEFAULT_TITLE, get_google_credentials, get_log_level  # noqa: E402
from core.log_formatter import EnhancedLogFormatter, configure_file_logging  # noqa: E402
from core.report import ReportOptions, run_report, split_list  # noqa: E402
from gsheets.charts import EXAMPLE_CHART_CONFIG  # noqa: E402

# Suppress googleapiclient discovery cache warning
logging.getLogger("googleapiclient.discovery_cache").setLevel(logging.ERROR)

logging.basicConfig(
    level=get_log_level(),
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)
logger = logging.getLogger(__name__)

configure_file_logging()


def configure_safe_logging():
    class SafeEnhancedFormatter(EnhancedLogFormatter):
        """Enhanced ASCII formatter with additional Windows safety."""

        def format(self, record):
            try:
                return super().format(record)
            except UnicodeEncodeError:
                service_prefix = self._get_ascii_prefix(record.name, record.levelname)
                safe_msg = (
                    str(record.getMessage())
                    .encode("ascii", errors="replace")
                    .decode("ascii")
                )
                return f"{service_prefix} {safe_msg}"

    # Only console handlers; file handlers keep the detailed format
    for handler in logging.root.handlers:
        if isinstance(handler, logging.StreamHandler) and not isinstance(
            handler, logging.FileHandler
        ):
            handler.setFormatter(SafeEnhancedFormatter(use_colors=sys.stderr.isatty()))


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Upload a CSV table to Google Sheets with charts and percentile highlights"
    )
    parser.add_argument("--title", default=DEFAULT_TITLE, help="Title of Google Sheet")
    parser.add_argument(
        "--google-credentials",
        default=None,
        help="Google service account credentials JSON string (defaults to GOOGLE_CREDENTIALS)",
    )
    parser.add_argument(
        "--content-file", default="", help="Table contents to be uploaded, in csv format"
    )
    parser.add_argument(
        "--chart-file",
        default=None,
        help=f"List of chart config objects (JSON), defaults to {DEFAULT_CHART_FILE}",
    )
    parser.add_argument("--users", default="", help="Comma separated emails")
    parser.add_argument(
        "--send-email-message",
        default="",
        help="Email message sent to users. Leave this blank to not send email",
    )
    parser.add_argument(
        "--highlight-columns", default="", help="Comma separated column names"
    )
    parser.add_argument(
        "--google-sheet-id",
        default="",
        help="Google Sheet id of existing spreadsheet: https://docs.google.com/spreadsheets/d/<id>/...",
    )
    return parser


def main(argv=None):
    """
    Entry point for the sheet report CLI.

    A bare 'help' argument prints usage and an example chart config.
    """
    argv = list(sys.argv[1:] if argv is None else argv)
    parser = build_parser()

    if "help" in argv:
        parser.print_help()
        print(EXAMPLE_CHART_CONFIG)
        return 0

    configure_safe_logging()
    args = parser.parse_args(argv)

    options = ReportOptions(
        title=args.title,
        content_file=args.content_file,
        chart_file=args.chart_file,
        users=split_list(args.users),
        email_message=args.send_email_message,
        highlight_columns=split_list(args.highlight_columns),
        spreadsheet_id=args.google_sheet_id or None,
    )
    credentials_json = args.google_credentials or get_google_credentials()

    try:
        services = build_services(credentials_json)
        asyncio.run(run_report(services, options, on_url=print))
    except KeyboardInterrupt:
        logger.warning("Report interrupted")
        return 1
    except Exception as e:
        logger.error(f"Report failed: {e}", exc_info=logger.isEnabledFor(logging.DEBUG))
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
