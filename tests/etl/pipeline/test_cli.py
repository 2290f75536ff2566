"""Unit tests for the sync command line."""

import argparse
import json
import signal
from pathlib import Path
from typing import Any

import pytest

from src.etl.extractors.mubi.mubi import CountryFetchResult
from src.etl.loaders import DatabaseSnapshotLoader, JsonSnapshotLoader
from src.etl.pipeline import cli
from src.etl.sync import SyncCoordinator
from src.etl.utils import RunGuard
from tests.conftest import make_raw_film


class FakeExtractor:
    def __init__(self, results: list[CountryFetchResult]) -> None:
        self.results = results

    def extract(self, **kwargs: Any) -> list[CountryFetchResult]:
        return self.results


def _args(*argv: str) -> argparse.Namespace:
    return cli._parse_cli_arguments(list(argv))


def _patch_coordinator(monkeypatch: pytest.MonkeyPatch, results: list[CountryFetchResult]) -> None:
    def build(args: argparse.Namespace) -> SyncCoordinator:
        return SyncCoordinator(
            loader=cli.build_loader(args),
            extractor=FakeExtractor(results),  # type: ignore[arg-type]
            countries=args.countries or ["PT"],
        )

    monkeypatch.setattr(cli, "build_coordinator", build)


def _ok(country: str = "PT") -> CountryFetchResult:
    return CountryFetchResult(country=country, records=[make_raw_film(id=1)], pages_fetched=1)


class TestParseArguments:
    @staticmethod
    def test_defaults() -> None:
        args = _args()
        assert args.countries is None
        assert args.backend is None
        assert args.output is None
        assert args.database_url is None
        assert args.max_pages is None

    @staticmethod
    def test_all_options() -> None:
        args = _args(
            "--countries", "pt", "DE",
            "--backend", "database",
            "--database-url", "sqlite:///x.db",
            "--max-pages", "2",
        )
        assert args.countries == ["pt", "DE"]
        assert args.backend == "database"
        assert args.database_url == "sqlite:///x.db"
        assert args.max_pages == 2

    @staticmethod
    def test_rejects_unknown_backend() -> None:
        with pytest.raises(SystemExit):
            _args("--backend", "firestore")


class TestBuilders:
    @staticmethod
    def test_build_loader_json(tmp_path: Path) -> None:
        loader = cli.build_loader(_args("--backend", "json", "--output", str(tmp_path / "s.json")))
        assert isinstance(loader, JsonSnapshotLoader)
        assert loader.path == tmp_path / "s.json"

    @staticmethod
    def test_build_loader_database(tmp_path: Path) -> None:
        url = f"sqlite:///{tmp_path / 'c.db'}"
        loader = cli.build_loader(_args("--backend", "database", "--database-url", url))
        assert isinstance(loader, DatabaseSnapshotLoader)

    @staticmethod
    def test_build_coordinator_normalizes_countries(tmp_path: Path) -> None:
        coordinator = cli.build_coordinator(
            _args("--countries", "pt", "de", "PT", "--output", str(tmp_path / "s.json"))
        )
        assert coordinator._countries == ["PT", "DE"]


class TestRunSync:
    @staticmethod
    def test_exit_codes_across_runs(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        _patch_coordinator(monkeypatch, [_ok()])
        output = str(tmp_path / "snapshot.json")

        assert cli.run_sync(_args("--output", output)) == 0
        assert cli.run_sync(_args("--output", output)) == 1

    @staticmethod
    def test_failure_exit_code(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        failed = CountryFetchResult(country="PT", error="down")
        _patch_coordinator(monkeypatch, [failed])

        assert cli.run_sync(_args("--output", str(tmp_path / "s.json"))) == 2

    @staticmethod
    def test_prints_summary(
        tmp_path: Path, monkeypatch: pytest.MonkeyPatch, capsys: pytest.CaptureFixture[str]
    ) -> None:
        _patch_coordinator(monkeypatch, [_ok()])
        cli.run_sync(_args("--output", str(tmp_path / "s.json")))
        assert "1 films" in capsys.readouterr().out

    @staticmethod
    def test_main_exits_with_report_code(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        _patch_coordinator(monkeypatch, [_ok()])
        with pytest.raises(SystemExit) as exc_info:
            cli.main(["--output", str(tmp_path / "s.json")])
        assert exc_info.value.code == 0

    @staticmethod
    def test_main_unexpected_error_exits_two(monkeypatch: pytest.MonkeyPatch) -> None:
        def explode(args: argparse.Namespace) -> int:
            raise RuntimeError("boom")

        monkeypatch.setattr(cli, "run_sync", explode)
        with pytest.raises(SystemExit) as exc_info:
            cli.main([])
        assert exc_info.value.code == 2


class TestRunStatus:
    @staticmethod
    def test_no_snapshot(tmp_path: Path) -> None:
        assert cli.run_status(_args("--output", str(tmp_path / "none.json"))) == 1

    @staticmethod
    def test_prints_metadata(
        tmp_path: Path, monkeypatch: pytest.MonkeyPatch, capsys: pytest.CaptureFixture[str]
    ) -> None:
        _patch_coordinator(monkeypatch, [_ok()])
        output = str(tmp_path / "s.json")
        cli.run_sync(_args("--output", output))
        capsys.readouterr()

        assert cli.run_status(_args("--output", output)) == 0
        metadata = json.loads(capsys.readouterr().out)
        assert metadata["total_films"] == 1

    @staticmethod
    def test_corrupt_snapshot(tmp_path: Path) -> None:
        path = tmp_path / "s.json"
        path.write_text("{", encoding="utf-8")
        assert cli.run_status(_args("--output", str(path))) == 2


class TestCancelOnSigint:
    @staticmethod
    def test_handler_cancels_and_restores() -> None:
        guard = RunGuard()
        previous = signal.getsignal(signal.SIGINT)

        with cli.cancel_on_sigint(guard):
            handler = signal.getsignal(signal.SIGINT)
            assert callable(handler)
            handler(signal.SIGINT, None)

        assert guard.cancelled is True
        assert signal.getsignal(signal.SIGINT) is previous
