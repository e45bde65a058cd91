"""
执行器核心

组合任务注册表、邮箱集合和调度选择器：
create_task -> send/receive_message -> schedule -> terminate_task

执行器不运行任何代码，也不持有线程。所有操作同步完成、从不阻塞；
多线程宿主需要在外部对整个执行器加锁。
"""

from typing import Any

from loguru import logger

from amiron_exec.common.config import settings
from amiron_exec.common.exceptions import TaskNotFoundError, ValidationError
from amiron_exec.engine.mailbox import MailboxSet
from amiron_exec.engine.scheduler import Scheduler
from amiron_exec.engine.state import (
    Task,
    TaskId,
    TaskRegistry,
    TaskState,
    ensure_priority,
    ensure_task_id,
)


def _ensure_payload(payload: object) -> bytes:
    if isinstance(payload, bytes):
        return payload
    if isinstance(payload, (bytearray, memoryview)):
        return bytes(payload)
    raise ValidationError(f"payload 必须是字节序列，实际为 {type(payload).__name__}", field="payload")


def _ensure_state(state: object) -> TaskState:
    try:
        return TaskState(state)
    except ValueError:
        raise ValidationError(f"未知任务状态: {state!r}", field="state") from None


class Executor:
    """
    协作式任务执行器

    路由失败（目标不存在或已终止、邮箱为空）通过返回值表达，
    只有参数类型错误才会抛出 ValidationError。
    """

    def __init__(self, first_task_id: int | None = None):
        if first_task_id is None:
            first_task_id = settings.FIRST_TASK_ID
        self._registry = TaskRegistry(first_id=first_task_id)
        self._mailboxes = MailboxSet()
        self._scheduler = Scheduler(self._registry)
        self._current: TaskId | None = None
        self._stats = {
            "tasks_created": 0,
            "tasks_terminated": 0,
            "messages_sent": 0,
            "messages_rejected": 0,
            "messages_received": 0,
            "messages_discarded": 0,
        }

    # ------------------------------------------------------------------
    # 任务生命周期
    # ------------------------------------------------------------------

    def create_task(self, priority: int) -> TaskId:
        """
        创建任务

        Args:
            priority: 优先级（0-255，越大越高）

        Returns:
            新分配的任务 ID
        """
        priority = ensure_priority(priority)
        task = self._registry.create(priority)
        self._mailboxes.open(task.id)
        self._update_stats("tasks_created")
        logger.debug(f"创建任务: {task.id} (priority={priority})")
        return task.id

    def terminate_task(self, task_id: TaskId) -> None:
        """
        终止任务

        任务记录保留并标记为 TERMINATED，邮箱及其中未读消息被丢弃。
        未知任务静默忽略，重复终止没有额外效果。
        """
        ensure_task_id(task_id)
        old_state = self._registry.mark_terminated(task_id)
        discarded = self._mailboxes.close(task_id)
        if self._current == task_id:
            self._current = None

        if old_state is None:
            logger.debug(f"终止未知任务，忽略: {task_id}")
            return
        if old_state != TaskState.TERMINATED:
            self._update_stats("tasks_terminated")
        if discarded:
            self._update_stats("messages_discarded", discarded)
        logger.debug(f"终止任务: {task_id} (prev={old_state.value}, discarded={discarded or 0})")

    # ------------------------------------------------------------------
    # 消息传递
    # ------------------------------------------------------------------

    def send_message(self, to: TaskId, payload: bytes) -> bool:
        """
        发送消息

        Returns:
            是否成功投递；目标不存在或已终止时返回 False
        """
        ensure_task_id(to, field="to")
        data = _ensure_payload(payload)
        if not self._mailboxes.push(to, data):
            self._update_stats("messages_rejected")
            logger.debug(f"投递失败，目标邮箱不存在: {to}")
            return False
        self._update_stats("messages_sent")
        return True

    def receive_message(self, task_id: TaskId) -> bytes | None:
        """
        接收消息（非阻塞）

        Returns:
            最早的一条消息；邮箱为空或任务不存在时返回 None
        """
        ensure_task_id(task_id)
        payload = self._mailboxes.pop(task_id)
        if payload is not None:
            self._update_stats("messages_received")
        return payload

    # ------------------------------------------------------------------
    # 调度
    # ------------------------------------------------------------------

    def schedule(self) -> TaskId | None:
        """选出下一个应运行的任务，不改变任何任务状态"""
        selected = self._scheduler.select()
        logger.debug(f"调度选择: {selected if selected is not None else '无 READY 任务'}")
        return selected

    # ------------------------------------------------------------------
    # 扩展状态转换
    # ------------------------------------------------------------------

    def transition(self, task_id: TaskId, new_state: TaskState | str) -> bool:
        """
        状态转换

        同一时刻最多一个 RUNNING 任务：分派新任务时，原运行任务退回 READY。
        转为 TERMINATED 的副作用与 terminate_task 相同，但返回值遵循转换表：
        已终止或不存在的任务返回 False，与 terminate_task 一样只记录 debug 日志。

        Returns:
            是否转换成功；任务不存在或转换无效时返回 False
        """
        ensure_task_id(task_id)
        state = _ensure_state(new_state)

        if state == TaskState.TERMINATED:
            if not self._registry.can_transition(task_id, state):
                logger.debug(f"任务已终止或不存在，忽略: {task_id}")
                return False
            self.terminate_task(task_id)
            return True

        if state == TaskState.RUNNING:
            if not self._registry.can_transition(task_id, state):
                return self._registry.transition(task_id, state)
            previous = self._current
            if previous is not None and previous != task_id:
                self._registry.transition(previous, TaskState.READY)
                logger.debug(f"让出运行: {previous}")
            self._registry.transition(task_id, state)
            self._current = task_id
            return True

        if not self._registry.transition(task_id, state):
            return False
        if self._current == task_id:
            self._current = None
        return True

    def dispatch(self, task_id: TaskId) -> bool:
        """READY -> RUNNING"""
        return self.transition(task_id, TaskState.RUNNING)

    def yield_task(self, task_id: TaskId) -> bool:
        """RUNNING -> READY"""
        if self._state_of(task_id) != TaskState.RUNNING:
            logger.warning(f"无效状态转换: {task_id} 未在运行")
            return False
        return self.transition(task_id, TaskState.READY)

    def block(self, task_id: TaskId) -> bool:
        """RUNNING -> WAITING"""
        return self.transition(task_id, TaskState.WAITING)

    def wake(self, task_id: TaskId) -> bool:
        """WAITING -> READY"""
        if self._state_of(task_id) != TaskState.WAITING:
            logger.warning(f"无效状态转换: {task_id} 未在等待")
            return False
        return self.transition(task_id, TaskState.READY)

    # ------------------------------------------------------------------
    # 查询
    # ------------------------------------------------------------------

    def get_task(self, task_id: TaskId) -> Task:
        """获取任务快照，任务不存在时抛出 TaskNotFoundError"""
        task = self.find_task(task_id)
        if task is None:
            raise TaskNotFoundError(task_id)
        return task

    def find_task(self, task_id: TaskId) -> Task | None:
        ensure_task_id(task_id)
        task = self._registry.get(task_id)
        return task.snapshot() if task is not None else None

    def list_tasks(self, state: TaskState | str | None = None) -> list[Task]:
        """按创建顺序列出任务快照"""
        if state is not None:
            state = _ensure_state(state)
        return self._registry.list_by_state(state)

    def pending_messages(self, task_id: TaskId) -> int:
        ensure_task_id(task_id)
        return self._mailboxes.depth(task_id)

    def has_mailbox(self, task_id: TaskId) -> bool:
        ensure_task_id(task_id)
        return task_id in self._mailboxes

    @property
    def current_task(self) -> TaskId | None:
        """当前通过 dispatch 进入 RUNNING 的任务"""
        return self._current

    def get_stats(self) -> dict[str, int]:
        """获取统计信息副本"""
        return self._stats.copy()

    def get_status(self) -> dict[str, Any]:
        """获取执行器状态概要"""
        return {
            "tasks": len(self._registry),
            "states": self._registry.count_by_state(),
            "mailboxes": len(self._mailboxes),
            "pending_messages": self._mailboxes.total_pending(),
            "current_task": self._current,
            "next_task_id": self._registry.next_id,
            "stats": self.get_stats(),
        }

    def _state_of(self, task_id: TaskId) -> TaskState | None:
        ensure_task_id(task_id)
        task = self._registry.get(task_id)
        return task.state if task is not None else None

    def _update_stats(self, operation: str, count: int = 1) -> None:
        if operation in self._stats:
            self._stats[operation] += count

    def __len__(self) -> int:
        return len(self._registry)

    def __contains__(self, task_id: object) -> bool:
        return task_id in self._registry
