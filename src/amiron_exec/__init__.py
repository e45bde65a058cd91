"""
Amiron Exec 任务执行器

嵌入式协作调度原语，负责：
- 任务登记（优先级、状态）
- 任务间字节消息路由（每任务一个 FIFO 邮箱）
- 按优先级推荐下一个运行的任务

执行器不运行代码、不持有线程，由宿主在外部驱动执行。
"""

__version__ = "0.1.0"

from amiron_exec import api
from amiron_exec.common.exceptions import (
    ExecException,
    ExecutorNotInitializedError,
    TaskNotFoundError,
    ValidationError,
)
from amiron_exec.engine import Executor, Task, TaskId, TaskState

__all__ = [
    "__version__",
    "api",
    "Executor",
    "Task",
    "TaskId",
    "TaskState",
    "ExecException",
    "ExecutorNotInitializedError",
    "TaskNotFoundError",
    "ValidationError",
]
