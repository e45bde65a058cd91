"""
执行器异常模块

常规的失败结果（目标任务不存在、邮箱为空）通过返回值表达，
这里只定义调用方误用时抛出的异常。
"""

from __future__ import annotations


class ExecException(Exception):
    """执行器异常基类"""

    def __init__(self, message: str, error_code: str | None = None):
        self.message = message
        self.error_code = error_code
        super().__init__(message)


class ValidationError(ExecException):
    """参数验证错误"""

    def __init__(self, message: str, field: str | None = None):
        self.field = field
        super().__init__(message, error_code="VALIDATION_ERROR")


class TaskNotFoundError(ExecException):
    """任务不存在"""

    def __init__(self, task_id: object):
        self.task_id = task_id
        super().__init__(f"任务 {task_id} 不存在", error_code="TASK_NOT_FOUND")


class ExecutorNotInitializedError(ExecException):
    """未安装执行器实例"""

    def __init__(self, message: str = "执行器尚未初始化，请先调用 init()"):
        super().__init__(message, error_code="EXECUTOR_NOT_INITIALIZED")
