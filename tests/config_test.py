from __future__ import annotations

from pathlib import Path

import pytest
from sqlalchemy.orm import Session, sessionmaker

from client_main import main as client_main
from clients.quote_client import QuoteClient
from config import AppSettings
from services.quote_persister import QuotePersister
from services.quote_server import build_quote_server
from services.upstream_fetcher import UpstreamFetcher


def test_settings_defaults_match_pipeline_budgets(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
    monkeypatch.chdir(tmp_path)

    settings = AppSettings()

    assert settings.fetch_timeout_ms == 200
    assert settings.persist_timeout_ms == 10
    assert settings.client_timeout_ms == 300
    assert settings.server_port == 8080
    assert settings.upstream_url == "https://economia.awesomeapi.com.br/json/last/USD-BRL"


def test_settings_read_environment(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
    monkeypatch.chdir(tmp_path)
    monkeypatch.setenv("FETCH_TIMEOUT_MS", "150")
    monkeypatch.setenv("UPSTREAM_URL", "https://example.com/USD-BRL")

    settings = AppSettings()

    assert settings.fetch_timeout_ms == 150
    assert settings.upstream_url == "https://example.com/USD-BRL"


def test_build_quote_server_applies_settings(session_factory: sessionmaker[Session]) -> None:
    settings = AppSettings(upstream_url="https://example.com/USD-BRL", fetch_timeout_ms=150, persist_timeout_ms=20)

    server = build_quote_server(session_factory, settings)

    assert isinstance(server.fetcher, UpstreamFetcher)
    assert server.fetcher.url == "https://example.com/USD-BRL"
    assert server.fetcher.timeout == pytest.approx(0.15)
    assert isinstance(server.persister, QuotePersister)
    assert server.persister.timeout == pytest.approx(0.02)
    assert server.fetch_timeout == pytest.approx(0.15)
    assert server.persist_timeout == pytest.approx(0.02)


def test_client_main_builds_client_from_arguments(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
    seen: list[QuoteClient] = []

    def _fake_run(self: QuoteClient) -> int:
        seen.append(self)
        return 0

    monkeypatch.setattr(QuoteClient, "run", _fake_run)
    output = tmp_path / "out.txt"

    status = client_main(["--url", "http://127.0.0.1:9999/cotacao", "--output", str(output), "--timeout-ms", "250"])

    assert status == 0
    assert seen[0].url == "http://127.0.0.1:9999/cotacao"
    assert seen[0].output_path == output
    assert seen[0].timeout == pytest.approx(0.25)


def test_client_default_url_matches_settings(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
    monkeypatch.chdir(tmp_path)

    assert QuoteClient().url == AppSettings().server_url == "http://localhost:8080/cotacao"
