"""日志配置模块

提供日志初始化和消息载荷的日志脱敏。库本身不会在导入时调用 setup_logging，
由宿主自行决定是否接管 loguru 的输出。
"""

import os
import sys
from typing import Any

from loguru import logger

from amiron_exec.common.config import settings

# 日志格式
CONSOLE_FORMAT = (
    "<green>{time:YYYY-MM-DD HH:mm:ss}</green> | "
    "<level>{level: <8}</level> | "
    "<cyan>{name}</cyan>:<cyan>{function}</cyan>:<cyan>{line}</cyan> - "
    "<level>{message}</level>"
)
FILE_FORMAT = "{time:YYYY-MM-DD HH:mm:ss} | {level: <8} | {name}:{function}:{line} - {message}"

# 载荷预览的最大字节数
PAYLOAD_PREVIEW_BYTES = 32


def describe_payload(payload: bytes) -> str:
    """生成载荷的日志描述

    默认只记录长度；开启 AMIRON_EXEC_LOG_PAYLOADS 后附带截断的十六进制预览。
    """
    size = len(payload)
    if not settings.LOG_PAYLOADS:
        return f"{size} bytes"
    preview = payload[:PAYLOAD_PREVIEW_BYTES].hex()
    suffix = "..." if size > PAYLOAD_PREVIEW_BYTES else ""
    return f"{size} bytes [{preview}{suffix}]"


def sanitize_extra(extra: dict[str, Any]) -> dict[str, Any]:
    """将 extra 中的原始字节替换为长度描述"""
    result = {}
    for key, value in extra.items():
        if isinstance(value, (bytes, bytearray, memoryview)):
            result[key] = f"<{len(value)} bytes>"
        elif isinstance(value, dict):
            result[key] = sanitize_extra(value)
        else:
            result[key] = value
    return result


class PayloadFilter:
    """日志载荷过滤器"""

    def __call__(self, record: dict[str, Any]) -> bool:
        if "extra" in record and isinstance(record["extra"], dict):
            record["extra"] = sanitize_extra(record["extra"])
        return True


def setup_logging(
    level: str | None = None,
    log_to_file: bool | None = None,
    log_dir: str | None = None,
) -> None:
    """初始化日志系统

    Args:
        level: 日志级别，默认使用 settings.LOG_LEVEL
        log_to_file: 是否输出到文件，默认使用 settings.LOG_TO_FILE
        log_dir: 日志目录，默认使用 settings.LOG_DIR
    """
    logger.remove()

    log_level = (level or settings.LOG_LEVEL).upper()
    should_log_to_file = log_to_file if log_to_file is not None else settings.LOG_TO_FILE

    payload_filter = PayloadFilter()

    logger.add(
        sys.stderr,
        format=CONSOLE_FORMAT,
        level=log_level,
        colorize=True,
        filter=payload_filter,
    )

    file_path = None
    if should_log_to_file:
        directory = log_dir or settings.LOG_DIR
        os.makedirs(directory, exist_ok=True)
        file_path = os.path.join(directory, os.path.basename(settings.LOG_FILE_PATH))

        logger.add(
            file_path,
            format=FILE_FORMAT,
            level=log_level,
            rotation="100 MB",
            retention="14 days",
            compression="zip",
            encoding="utf-8",
            filter=payload_filter,
        )

    logger.info(f"日志初始化完成: level={log_level}, file={file_path or '-'}")


def get_logger(name: str | None = None):
    """获取 logger 实例

    Args:
        name: logger 名称，用于区分不同模块的日志

    Returns:
        loguru logger 实例
    """
    if name:
        return logger.bind(name=name)
    return logger
