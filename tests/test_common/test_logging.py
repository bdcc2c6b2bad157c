import logging
from pathlib import Path

from indelcal.common import setup_logging


def test_setup_logging_writes_file(tmp_path: Path):
    log_file = setup_logging(omit_log=False, directory=str(tmp_path), filename="run.log",
                             severity="DEBUG", verbosity="HIGH", silent_mode=True)
    assert log_file == tmp_path / "run.log"
    logging.getLogger("indelcal.test").debug("hello from the test")
    for handler in logging.getLogger().handlers:
        handler.flush()
    text = log_file.read_text()
    assert "hello from the test" in text
    assert "line " in text
    assert logging.getLogger().level == logging.DEBUG


def test_setup_logging_without_file(tmp_path: Path):
    log_file = setup_logging(omit_log=True, directory=str(tmp_path), filename="run.log",
                             severity="bogus", verbosity="LOW")
    assert log_file is None
    assert not (tmp_path / "run.log").exists()
    # unknown severities fall back to INFO
    assert logging.getLogger().level == logging.INFO
