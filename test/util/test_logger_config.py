import io
import logging

import pytest

from board_backup.util.logger_config import HANDLER_PREFIX, remove_handlers, setup_logging


@pytest.fixture
def root_logger():
    root = logging.getLogger()
    level = root.level
    yield root
    remove_handlers(root)
    root.setLevel(level)


def _own_handlers(root: logging.Logger) -> list[logging.Handler]:
    return [h for h in root.handlers if (h.get_name() or "").startswith(HANDLER_PREFIX)]


def test_console_records_go_to_given_stream(root_logger, capsys):
    buffer = io.StringIO()

    setup_logging(log_level="info", stream=buffer)
    logging.getLogger("board_backup.test").info("hello")

    assert "[board_backup.test] INFO: hello" in buffer.getvalue()
    assert capsys.readouterr().out == ""


def test_repeated_setup_replaces_own_handlers(root_logger):
    first, second = io.StringIO(), io.StringIO()
    foreign = logging.NullHandler()
    root_logger.addHandler(foreign)

    try:
        setup_logging(stream=first)
        setup_logging(stream=second)
        logging.getLogger("board_backup.test").warning("switched")

        assert len(_own_handlers(root_logger)) == 1
        assert foreign in root_logger.handlers
        assert first.getvalue() == ""
        assert "switched" in second.getvalue()
    finally:
        root_logger.removeHandler(foreign)


def test_unknown_level_name_falls_back_to_info(root_logger):
    setup_logging(log_level="VERBOSE", stream=io.StringIO())

    assert root_logger.level == logging.INFO


def test_file_handler_writes_under_log_dir(root_logger, tmp_path):
    setup_logging(log_to_file=True, log_dir=str(tmp_path / "logs"), stream=io.StringIO())
    logging.getLogger("board_backup.test").warning("to file")
    for handler in _own_handlers(root_logger):
        handler.flush()

    assert "to file" in (tmp_path / "logs" / "board_backup.log").read_text(encoding="utf-8")
