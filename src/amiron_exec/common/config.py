"""执行器配置模块

提供统一的配置管理，支持环境变量和 .env 文件。
配置项统一使用 AMIRON_EXEC_ 前缀，不读取宿主进程自身的 LOG_LEVEL 等通用变量。
"""

import os
from pathlib import Path

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

ENV_PREFIX = "AMIRON_EXEC_"

_LOG_LEVELS = ("TRACE", "DEBUG", "INFO", "SUCCESS", "WARNING", "ERROR", "CRITICAL")

# 常见的日志级别别名
_LOG_LEVEL_ALIASES = {
    "WARN": "WARNING",
    "ERR": "ERROR",
    "FATAL": "CRITICAL",
}


def _find_project_root() -> Path:
    """查找项目根目录（包含 .env 或 pyproject.toml 的最近目录）"""
    current = Path.cwd().resolve()
    for parent in (current, *current.parents):
        if (parent / ".env").exists() or (parent / "pyproject.toml").exists():
            return parent
    return current


class Settings(BaseSettings):
    """执行器配置类"""

    # === 日志配置 ===
    LOG_LEVEL: str = Field(default="INFO")
    LOG_TO_FILE: bool = Field(default=False)
    LOG_DIR: str = Field(default_factory=lambda: str(_find_project_root() / "logs"))

    # === 执行器配置 ===
    FIRST_TASK_ID: int = Field(default=1, ge=0)
    LOG_PAYLOADS: bool = Field(default=False)

    model_config = SettingsConfigDict(
        env_prefix=ENV_PREFIX,
        env_file=str(_find_project_root() / ".env"),
        env_file_encoding="utf-8",
        case_sensitive=True,
        extra="ignore",
    )

    @field_validator("LOG_LEVEL")
    @classmethod
    def validate_log_level(cls, value: str) -> str:
        """日志级别必须是 loguru 已知级别（接受 WARN 等别名）"""
        level = value.strip().upper()
        level = _LOG_LEVEL_ALIASES.get(level, level)
        if level not in _LOG_LEVELS:
            raise ValueError(f"未知日志级别: {value}，可选值: {', '.join(_LOG_LEVELS)}")
        return level

    @property
    def LOG_FILE_PATH(self) -> str:
        return os.path.join(self.LOG_DIR, "amiron_exec.log")


# 全局配置实例
settings = Settings()
