"""
宿主接口

围绕一个已安装执行器的模块级 API，供宿主环境直接调用。
"""

from loguru import logger

from amiron_exec.common.exceptions import ExecutorNotInitializedError
from amiron_exec.engine.executor import Executor
from amiron_exec.engine.state import TaskId

_executor: Executor | None = None


def init(executor: Executor | None = None) -> Executor:
    """
    安装执行器

    Args:
        executor: 要安装的执行器，None 表示新建一个

    Returns:
        已安装的执行器
    """
    global _executor
    if _executor is not None:
        logger.warning("执行器已安装，将被替换")
    _executor = executor if executor is not None else Executor()
    return _executor


def reset() -> None:
    """卸载执行器"""
    global _executor
    _executor = None


def get_executor() -> Executor:
    if _executor is None:
        raise ExecutorNotInitializedError()
    return _executor


def create_task(priority: int) -> TaskId:
    return get_executor().create_task(priority)


def send_message(to: TaskId, payload: bytes) -> bool:
    return get_executor().send_message(to, payload)


def receive_message(task: TaskId) -> bytes | None:
    return get_executor().receive_message(task)


def terminate_task(task: TaskId) -> None:
    get_executor().terminate_task(task)


def schedule() -> TaskId | None:
    return get_executor().schedule()


def send_text(to: TaskId, text: str, encoding: str = "utf-8") -> bool:
    """以文本形式发送消息"""
    return send_message(to, text.encode(encoding))


def receive_text(task: TaskId, encoding: str = "utf-8", errors: str = "strict") -> str | None:
    """接收消息并解码为文本"""
    payload = receive_message(task)
    if payload is None:
        return None
    return payload.decode(encoding, errors)
