from __future__ import annotations

from functools import cache
from pathlib import Path

from pydantic_settings import BaseSettings, SettingsConfigDict

DB_FILE = Path("cotacao.db")
OUTPUT_FILE = Path("cotacao.txt")

UPSTREAM_URL = "https://economia.awesomeapi.com.br/json/last/USD-BRL"
SERVER_URL = "http://localhost:8080/cotacao"


class AppSettings(BaseSettings):
    upstream_url: str = UPSTREAM_URL
    db_file: Path = DB_FILE

    server_host: str = "0.0.0.0"
    server_port: int = 8080
    server_url: str = SERVER_URL
    output_file: Path = OUTPUT_FILE

    fetch_timeout_ms: int = 200
    persist_timeout_ms: int = 10
    client_timeout_ms: int = 300

    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8", extra="ignore")


@cache
def config() -> AppSettings:
    return AppSettings()
