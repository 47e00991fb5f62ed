"""Tests for logging setup."""

import os

import pytest
from loguru import logger

from deskpilot import logger as logging_module
from deskpilot.logger import LogSettings, default_log_path, get_logger, setup_logger


@pytest.fixture
def restore_sinks():
    yield
    logger.remove()


def test_log_file_lives_in_source_checkout_root(tmp_path, monkeypatch):
    (tmp_path / "pyproject.toml").write_text("[project]\nname = 'deskpilot'\n")
    monkeypatch.setattr(logging_module, "get_project_root", lambda: str(tmp_path))

    assert default_log_path() == os.path.join(str(tmp_path), "deskpilot.log")


def test_installed_package_logs_to_working_directory(tmp_path, monkeypatch):
    site_packages = tmp_path / "lib"
    site_packages.mkdir()
    workdir = tmp_path / "work"
    workdir.mkdir()
    monkeypatch.setattr(logging_module, "get_project_root", lambda: str(site_packages))
    monkeypatch.chdir(workdir)

    assert default_log_path() == os.path.join(str(workdir), "deskpilot.log")


def test_settings_from_environment(tmp_path, monkeypatch):
    monkeypatch.setenv("DESKPILOT_LOG_FILE", str(tmp_path / "custom.log"))
    monkeypatch.setenv("DESKPILOT_LOG_LEVEL", "debug")
    monkeypatch.setenv("DESKPILOT_LOG_CONSOLE", "true")

    settings = LogSettings.from_env()

    assert settings.log_file == str(tmp_path / "custom.log")
    assert settings.level == "DEBUG"
    assert settings.console_output


def test_setup_writes_named_records_to_file(tmp_path, restore_sinks):
    log_file = tmp_path / "deskpilot.log"

    applied = setup_logger(LogSettings(log_file=str(log_file)), log_level="DEBUG")
    get_logger("palette").debug("palette opened")

    assert applied.level == "DEBUG"
    content = log_file.read_text(encoding="utf-8")
    assert "palette:" in content
    assert "palette opened" in content


def test_setup_respects_level(tmp_path, restore_sinks):
    log_file = tmp_path / "deskpilot.log"

    setup_logger(LogSettings(log_file=str(log_file), level="WARNING"))
    get_logger("session").info("not written")
    get_logger("session").warning("written")

    content = log_file.read_text(encoding="utf-8")
    assert "not written" not in content
    assert "written" in content
