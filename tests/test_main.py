"""Tests for the command-line entrypoint."""

from __future__ import annotations

from pathlib import Path
from unittest.mock import patch

import pytest

import main
from errors import FetchError, NotFoundError
from models import RawResult
from paper_store import CsvPaperStore


def test_parse_args_search_flags() -> None:
    args = main.parse_args(["--user", "u1", "search", "graph networks", "--max-results", "5", "--no-summarize"])
    assert args.command == "search"
    assert args.topic == "graph networks"
    assert args.max_results == 5
    assert args.no_summarize is True
    assert args.user == "u1"


def test_search_command_uses_csv_store(tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
    store_path = tmp_path / "papers.csv"
    feed = [RawResult(external_id="1", title="Robotics A", abstract="abstract")]

    with patch("pipeline.fetch_raw", return_value=feed), \
         patch("main.load_dotenv"):
        main.main(["--store", str(store_path), "search", "robotics", "--no-summarize"])

    assert 'Found 1 papers on "robotics".' in capsys.readouterr().out
    assert len(CsvPaperStore(store_path).all()) == 1


def test_upstream_failure_prints_generic_message_and_exits(tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
    with patch("main.search_papers", side_effect=FetchError("dns lookup failed for export.arxiv.org")), \
         patch("main.load_dotenv"):
        with pytest.raises(SystemExit) as excinfo:
            main.main(["--store", str(tmp_path / "p.csv"), "search", "robotics"])

    assert excinfo.value.code == 1
    err = capsys.readouterr().err
    assert "try again later" in err
    assert "dns lookup" not in err


def test_not_found_prints_client_message(tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
    with patch("main.get_paper", side_effect=NotFoundError("Paper not found")), \
         patch("main.load_dotenv"):
        with pytest.raises(SystemExit):
            main.main(["--store", str(tmp_path / "p.csv"), "show", "abc"])

    assert "Paper not found" in capsys.readouterr().err
