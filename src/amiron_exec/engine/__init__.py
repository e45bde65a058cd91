"""
引擎模块

负责任务登记、消息路由和调度选择。
"""

from amiron_exec.engine.executor import Executor
from amiron_exec.engine.mailbox import MailboxSet
from amiron_exec.engine.scheduler import Scheduler
from amiron_exec.engine.state import Task, TaskId, TaskRegistry, TaskState

__all__ = [
    "Executor",
    "MailboxSet",
    "Scheduler",
    "Task",
    "TaskId",
    "TaskRegistry",
    "TaskState",
]
