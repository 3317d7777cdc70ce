from obreverse.log import Logger, LogLevel, NullLogger, get_logger, log_exc, set_global_logger
from tests.base import *


async def test_file_log(tmp_path):
    logger = Logger("file_test", level=LogLevel.INFO, to_console=False, to_dir=str(tmp_path))
    logger.info("hello")
    logger.debug("debug msg")
    logger.generic_obj("对象：", {"user_id": 10001}, level=LogLevel.WARNING)
    logger.generic_lazy("lazy %s", lambda: "value", level=LogLevel.INFO)
    logger.generic_lazy("skipped %s", lambda: 1 / 0, level=LogLevel.DEBUG - 1)
    for h in logger.handlers:
        h.flush()

    text = (tmp_path / "file_test.log").read_text(encoding="utf-8")
    assert "hello" in text
    assert "debug msg" in text
    assert "user_id" in text and "10001" in text
    assert "lazy value" in text
    assert "skipped" not in text


async def test_log_exc(tmp_path):
    logger = Logger("exc_test", to_console=False, to_dir=str(tmp_path))
    origin = get_logger()
    set_global_logger(logger)
    try:
        log_exc(ValueError("bad value"), "出现异常", obj={"key": "val"})
    finally:
        set_global_logger(origin)
    for h in logger.handlers:
        h.flush()

    text = (tmp_path / "exc_test.log").read_text(encoding="utf-8")
    assert "出现异常" in text
    assert "bad value" in text
    assert "key" in text


async def test_null_logger():
    assert NullLogger() is NullLogger()
    NullLogger().generic_obj("x", 1)
    NullLogger().info("x")
