"""Tests for setup_logger sinks."""

from __future__ import annotations

from pathlib import Path

import pytest
from loguru import logger

from src.utils.logger import setup_logger


@pytest.fixture(autouse=True)
def _reset_logger():
    yield
    logger.remove()


class TestSetupLogger:
    def test_file_sink(self, tmp_path: Path):
        log_file = tmp_path / "agent.log"
        setup_logger(log_file=str(log_file))
        logger.debug("[BUNDLY] file sink check")
        assert "[BUNDLY] file sink check" in log_file.read_text()

    def test_level_from_env(self, monkeypatch: pytest.MonkeyPatch, capsys: pytest.CaptureFixture):
        monkeypatch.setenv("LOG_LEVEL", "warning")
        setup_logger()
        logger.info("[BUNDLY] hidden")
        logger.warning("[BUNDLY] shown")
        out = capsys.readouterr().out
        assert "shown" in out
        assert "hidden" not in out

    def test_json_logs(self, monkeypatch: pytest.MonkeyPatch, capsys: pytest.CaptureFixture):
        monkeypatch.delenv("LOG_LEVEL", raising=False)
        setup_logger(json_logs=True)
        logger.info("[RPC] structured")
        out = capsys.readouterr().out
        assert '"text"' in out
        assert "[RPC] structured" in out
