import logging

import pytest

from drive_files_api.utils.decorators import async_log_execution_time, log_execution_time


def test__log_execution_time__logs_success(caplog):
    @log_execution_time
    def add(a, b):
        return a + b

    with caplog.at_level(logging.INFO, logger="drive_files_api.utils.decorators"):
        assert add(1, 2) == 3

    assert "add completed in" in caplog.text


def test__log_execution_time__logs_and_reraises(caplog):
    @log_execution_time
    def explode():
        raise RuntimeError("boom")

    with caplog.at_level(logging.INFO, logger="drive_files_api.utils.decorators"):
        with pytest.raises(RuntimeError):
            explode()

    assert "explode failed after" in caplog.text
    assert "boom" in caplog.text


async def test__async_log_execution_time(caplog):
    @async_log_execution_time
    async def fetch():
        return "done"

    with caplog.at_level(logging.INFO, logger="drive_files_api.utils.decorators"):
        assert await fetch() == "done"

    assert "fetch completed in" in caplog.text


def test__async_log_execution_time__rejects_plain_functions():
    with pytest.raises(TypeError):
        async_log_execution_time(lambda: None)
