import json
import logging

import pytest

from optbind.utils import setup_logging


@pytest.fixture(autouse=True)
def restore_root_logger():
    root = logging.getLogger()
    handlers, level = list(root.handlers), root.level
    yield
    for handler in root.handlers:
        handler.close()
    root.handlers[:] = handlers
    root.setLevel(level)


def test_setup_logging_writes_json_file(tmp_path):
    log_file = tmp_path / "optbind.log"

    setup_logging(mode="json", log_filename=str(log_file), json_log_to_file=True)
    logging.getLogger("optbind").info("bound %s", "-v")
    for handler in logging.getLogger().handlers:
        handler.flush()

    records = [json.loads(line) for line in log_file.read_text().splitlines()]
    assert records[-1]["message"] == "bound -v"
    assert records[-1]["name"] == "optbind"


def test_setup_logging_mode_from_environment(monkeypatch):
    from rich.logging import RichHandler

    monkeypatch.setenv("OPTBIND_LOG_MODE", "cli")

    setup_logging(log_filename=None)

    assert any(isinstance(h, RichHandler) for h in logging.getLogger().handlers)


def test_setup_logging_rejects_unknown_mode():
    with pytest.raises(ValueError):
        setup_logging(mode="xml", log_filename=None)
