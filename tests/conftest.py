import pytest
from loguru import logger

from amiron_exec import api
from amiron_exec.engine.executor import Executor


@pytest.fixture
def executor():
    """创建执行器实例"""
    return Executor(first_task_id=1)


@pytest.fixture(autouse=True)
def reset_installed_executor():
    api.reset()
    yield
    api.reset()


@pytest.fixture
def warning_logs():
    """捕获 WARNING 及以上级别的日志，格式为 "级别|消息" """
    records: list[str] = []
    handler_id = logger.add(
        lambda message: records.append(message.rstrip("\n")),
        level="WARNING",
        format="{level.name}|{message}",
    )
    try:
        yield records
    finally:
        logger.remove(handler_id)
