from __future__ import annotations

import json
import logging
from pathlib import Path

import pytest

import people_console
from people_api import PeopleDirectoryAPI
from people_directory.core.config import Settings, load_settings, read_base_url
from people_directory.core.logging_config import setup_logging


def _write_settings(path: Path, payload) -> Path:
    path.write_text(json.dumps(payload), encoding="utf-8")
    return path


def test_read_base_url_from_settings_file(tmp_path: Path) -> None:
    path = _write_settings(tmp_path / "appsettings.json", {"Api": {"BaseUrl": "https://example.com/odata/"}})

    assert read_base_url(str(path)) == "https://example.com/odata/"


@pytest.mark.parametrize("payload", [{}, {"Api": "nope"}, {"Api": {"BaseUrl": ""}}, ["Api"]])
def test_read_base_url_ignores_incomplete_files(tmp_path: Path, payload) -> None:
    path = _write_settings(tmp_path / "appsettings.json", payload)

    assert read_base_url(str(path)) is None


def test_read_base_url_ignores_broken_json(tmp_path: Path) -> None:
    path = tmp_path / "appsettings.json"
    path.write_text("{not json", encoding="utf-8")

    assert read_base_url(str(path)) is None
    assert read_base_url(str(tmp_path / "missing.json")) is None


def test_load_settings_falls_back_to_file(tmp_path: Path) -> None:
    path = _write_settings(tmp_path / "appsettings.json", {"Api": {"BaseUrl": "https://example.com/odata/"}})
    base = Settings(api_base_url="", settings_file=str(path))

    loaded = load_settings(base)

    assert loaded.api_base_url == "https://example.com/odata/"
    assert base.api_base_url == ""


def test_load_settings_prefers_environment(tmp_path: Path) -> None:
    path = _write_settings(tmp_path / "appsettings.json", {"Api": {"BaseUrl": "https://file.example.com/"}})
    base = Settings(api_base_url="https://env.example.com/", settings_file=str(path))

    assert load_settings(base).api_base_url == "https://env.example.com/"


def test_command_line_overrides_settings() -> None:
    base = Settings(api_base_url="https://env.example.com/", api_key="", request_timeout=15, log_level="WARNING")
    args = people_console.parse_args(["--base-url", "https://cli.example.com/", "--timeout", "5"])

    config = people_console.apply_args(base, args)

    assert config.api_base_url == "https://cli.example.com/"
    assert config.request_timeout == 5
    assert config.log_level == "WARNING"


def test_build_api_requires_base_url() -> None:
    with pytest.raises(RuntimeError, match="Missing API base URL"):
        people_console.build_api(Settings(api_base_url=""))


def test_build_api_uses_settings() -> None:
    api = people_console.build_api(Settings(api_base_url="https://example.com/odata/", api_key="token", request_timeout=7))

    assert isinstance(api, PeopleDirectoryAPI)
    assert api.base_url == "https://example.com/odata"
    assert api.api_key == "token"
    assert api.timeout == 7
    api.close()


def test_main_exits_with_error_without_base_url(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
    monkeypatch.setattr(
        people_console,
        "load_settings",
        lambda: Settings(api_base_url="", settings_file=str(tmp_path / "missing.json")),
    )

    assert people_console.main([]) == 1


def test_setup_logging_adds_file_handler(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
    root = logging.getLogger()
    monkeypatch.setattr(root, "handlers", [])
    monkeypatch.setattr(root, "level", root.level)
    logfile = tmp_path / "console.log"

    setup_logging("debug", str(logfile))

    try:
        assert root.level == logging.DEBUG
        assert len(root.handlers) == 2
        logging.getLogger("people_api").debug("hello")
        for handler in root.handlers:
            handler.flush()
        assert "hello" in logfile.read_text(encoding="utf-8")
    finally:
        for handler in root.handlers:
            handler.close()
