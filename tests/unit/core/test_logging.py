"""core/logging.py 테스트"""

import logging
from pathlib import Path

import pytest

from core.constants import Paths
from core.logging import NOISY_LOGGERS, get_log_dir, get_log_file_path, setup_logging


@pytest.fixture
def restore_root_logger():
    """setup_logging이 교체한 루트 핸들러 복원"""
    root = logging.getLogger()
    handlers = list(root.handlers)
    level = root.level
    yield
    for handler in list(root.handlers):
        root.removeHandler(handler)
        handler.close()
    for handler in handlers:
        root.addHandler(handler)
    root.setLevel(level)


class TestLogPaths:
    def test_web_dir(self) -> None:
        assert get_log_dir("web") == Paths.WEB_LOGS_DIR

    def test_other_dir(self) -> None:
        assert get_log_dir("migrate") == Paths.LOGS_DIR

    def test_file_path(self) -> None:
        assert get_log_file_path("web") == Paths.WEB_LOGS_DIR / "web.log"


class TestSetupLogging:
    """setup_logging 테스트"""

    def test_handlers(self, tmp_path: Path, restore_root_logger) -> None:
        """콘솔 + 일별 파일 핸들러"""
        root = setup_logging("web", console_level="WARNING", log_dir=tmp_path)

        assert len(root.handlers) == 2
        assert (tmp_path / "web.log").exists()
        assert root.handlers[0].level == logging.WARNING

    def test_writes_file(self, tmp_path: Path, restore_root_logger) -> None:
        setup_logging("web", log_dir=tmp_path)

        logging.getLogger("core.ledger.store").info("거래 저장")
        for handler in logging.getLogger().handlers:
            handler.flush()

        assert "거래 저장" in (tmp_path / "web.log").read_text(encoding="utf-8")

    def test_repeated_setup_does_not_duplicate(self, tmp_path: Path, restore_root_logger) -> None:
        setup_logging("web", log_dir=tmp_path)
        root = setup_logging("web", log_dir=tmp_path)

        assert len(root.handlers) == 2

    def test_noisy_loggers_quieted(self, tmp_path: Path, restore_root_logger) -> None:
        setup_logging("web", log_dir=tmp_path)

        for name in NOISY_LOGGERS:
            assert logging.getLogger(name).level == logging.WARNING

    def test_setup_record_has_log_file(
        self, tmp_path: Path, restore_root_logger, caplog: pytest.LogCaptureFixture
    ) -> None:
        """구성 완료 로그에 파일 경로가 extra로 실림"""
        module_logger = logging.getLogger("core.logging")
        module_logger.addHandler(caplog.handler)
        try:
            setup_logging("web", log_dir=tmp_path)
        finally:
            module_logger.removeHandler(caplog.handler)

        records = [r for r in caplog.records if r.name == "core.logging"]
        assert records
        assert records[-1].log_file == str(tmp_path / "web.log")
