"""
Unit tests for the sheet report command line entry point.
"""

import pytest
import sys
import os

sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), "..")))

import main
from gsheets.charts import EXAMPLE_CHART_CONFIG


class StopReport(Exception):
    pass


@pytest.fixture
def captured_credentials(monkeypatch):
    """Replace build_services with a stub that records its argument and aborts."""
    calls = []

    def fake_build_services(credentials_json):
        calls.append(credentials_json)
        raise StopReport("stop before any API call")

    monkeypatch.setattr(main, "build_services", fake_build_services)
    return calls


def test_help_prints_usage_and_example_config(capsys):
    assert main.main(["help"]) == 0

    out = capsys.readouterr().out
    assert "--content-file" in out
    assert EXAMPLE_CHART_CONFIG in out


def test_missing_content_file_exits_with_status_1(tmp_path, monkeypatch):
    monkeypatch.setattr(main, "build_services", lambda credentials_json: object())

    status = main.main(["--content-file", str(tmp_path / "missing.csv"), "--chart-file", ""])

    assert status == 1


def test_credentials_flag_overrides_environment(monkeypatch, captured_credentials):
    monkeypatch.setenv("GOOGLE_CREDENTIALS", '{"source": "env"}')

    status = main.main(["--google-credentials", '{"source": "flag"}'])

    assert status == 1
    assert captured_credentials == ['{"source": "flag"}']


def test_credentials_fall_back_to_environment(monkeypatch, captured_credentials):
    monkeypatch.setenv("GOOGLE_CREDENTIALS", '{"source": "env"}')

    main.main([])

    assert captured_credentials == ['{"source": "env"}']


def test_build_parser_defaults():
    args = main.build_parser().parse_args([])

    assert args.title == "title"
    assert args.chart_file is None
    assert args.google_sheet_id == ""
