"""
Common 模块

通用功能：
- config: 配置管理
- logging: 日志配置
- exceptions: 异常定义
"""

from amiron_exec.common.config import Settings, settings
from amiron_exec.common.exceptions import (
    ExecException,
    ExecutorNotInitializedError,
    TaskNotFoundError,
    ValidationError,
)
from amiron_exec.common.logging import get_logger, setup_logging

__all__ = [
    # config
    "Settings",
    "settings",
    # logging
    "setup_logging",
    "get_logger",
    # exceptions
    "ExecException",
    "ExecutorNotInitializedError",
    "TaskNotFoundError",
    "ValidationError",
]
