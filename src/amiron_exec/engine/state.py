"""
任务状态管理

任务注册表：TaskId -> Task，记录只标记终止，从不删除。
"""

import operator
from dataclasses import dataclass, replace
from datetime import datetime
from enum import Enum
from typing import Iterator

from loguru import logger

from amiron_exec.common.exceptions import ValidationError

MIN_PRIORITY = 0
MAX_PRIORITY = 255


@dataclass(frozen=True, order=True)
class TaskId:
    """任务标识（不透明句柄，可复制、可比较、可哈希）"""
    value: int

    def __str__(self) -> str:
        return f"task-{self.value}"


class TaskState(str, Enum):
    """任务状态"""
    READY = "ready"             # 可被调度
    RUNNING = "running"         # 宿主正在执行
    WAITING = "waiting"         # 等待外部事件
    TERMINATED = "terminated"   # 已终止（吸收态）


@dataclass
class Task:
    """任务信息"""
    id: TaskId
    priority: int
    state: TaskState = TaskState.READY

    # 时间
    created_at: datetime | None = None
    started_at: datetime | None = None
    terminated_at: datetime | None = None

    def snapshot(self) -> "Task":
        """返回副本，注册表之外不持有内部对象"""
        return replace(self)


def ensure_task_id(value: object, field: str = "task_id") -> TaskId:
    """校验任务标识类型"""
    if not isinstance(value, TaskId):
        raise ValidationError(f"{field} 必须是 TaskId，实际为 {type(value).__name__}", field=field)
    return value


def ensure_priority(value: object) -> int:
    """校验优先级，取值范围 0-255

    接受任何实现 __index__ 的整数类型（如 numpy.uint8），统一转换为 int。
    """
    if isinstance(value, bool):
        raise ValidationError("priority 必须是整数，实际为 bool", field="priority")
    try:
        priority = operator.index(value)
    except TypeError:
        raise ValidationError(f"priority 必须是整数，实际为 {type(value).__name__}", field="priority") from None
    if not MIN_PRIORITY <= priority <= MAX_PRIORITY:
        raise ValidationError(
            f"priority 超出范围 [{MIN_PRIORITY}, {MAX_PRIORITY}]: {priority}",
            field="priority",
        )
    return priority


class TaskRegistry:
    """
    任务注册表

    持有所有任务记录和单调递增的 ID 计数器。
    """

    # 有效的状态转换
    VALID_TRANSITIONS = {
        TaskState.READY: {TaskState.RUNNING, TaskState.TERMINATED},
        TaskState.RUNNING: {TaskState.READY, TaskState.WAITING, TaskState.TERMINATED},
        TaskState.WAITING: {TaskState.READY, TaskState.TERMINATED},
        TaskState.TERMINATED: set(),
    }

    def __init__(self, first_id: int = 1):
        if isinstance(first_id, bool) or not isinstance(first_id, int) or first_id < 0:
            raise ValidationError(f"first_id 必须是非负整数: {first_id!r}", field="first_id")
        self._tasks: dict[TaskId, Task] = {}
        self._next_id = first_id

    def create(self, priority: int) -> Task:
        """分配新 ID 并登记一个 READY 任务"""
        task_id = TaskId(self._next_id)
        self._next_id += 1

        task = Task(id=task_id, priority=priority, created_at=datetime.now())
        self._tasks[task_id] = task
        logger.debug(f"登记任务: {task_id} (priority={priority}, total={len(self._tasks)})")
        return task

    def get(self, task_id: TaskId) -> Task | None:
        """获取内部任务记录（仅供执行器内部使用）"""
        return self._tasks.get(task_id)

    def can_transition(self, task_id: TaskId, new_state: TaskState) -> bool:
        task = self._tasks.get(task_id)
        if task is None:
            return False
        return new_state in self.VALID_TRANSITIONS.get(task.state, set())

    def transition(self, task_id: TaskId, new_state: TaskState) -> bool:
        """状态转换"""
        task = self._tasks.get(task_id)
        if not task:
            logger.warning(f"任务不存在: {task_id}")
            return False

        valid_next = self.VALID_TRANSITIONS.get(task.state, set())
        if new_state not in valid_next:
            logger.warning(f"无效状态转换: {task_id} {task.state.value} -> {new_state.value}")
            return False

        old_state = task.state
        task.state = new_state

        if new_state == TaskState.RUNNING:
            task.started_at = datetime.now()
        elif new_state == TaskState.TERMINATED:
            task.terminated_at = datetime.now()

        logger.debug(f"状态转换: {task_id} {old_state.value} -> {new_state.value}")
        return True

    def mark_terminated(self, task_id: TaskId) -> TaskState | None:
        """标记终止，返回之前的状态；未知任务返回 None

        终止是吸收态，重复调用不改变任何可观察状态。
        """
        task = self._tasks.get(task_id)
        if task is None:
            return None

        old_state = task.state
        if old_state != TaskState.TERMINATED:
            task.state = TaskState.TERMINATED
            task.terminated_at = datetime.now()
            logger.debug(f"状态转换: {task_id} {old_state.value} -> {TaskState.TERMINATED.value}")
        return old_state

    def list_by_state(self, state: TaskState | None = None) -> list[Task]:
        """按状态列出任务（按创建顺序，返回副本）"""
        return [t.snapshot() for t in self._tasks.values() if state is None or t.state == state]

    def count_by_state(self) -> dict[str, int]:
        counts = {state.value: 0 for state in TaskState}
        for task in self._tasks.values():
            counts[task.state.value] += 1
        return counts

    def iter_tasks(self) -> Iterator[Task]:
        """遍历内部任务记录"""
        return iter(self._tasks.values())

    @property
    def next_id(self) -> int:
        """下一个将要分配的 ID"""
        return self._next_id

    def __len__(self) -> int:
        return len(self._tasks)

    def __contains__(self, task_id: object) -> bool:
        return task_id in self._tasks
