"""
调度选择器

在注册表中挑选优先级最高的 READY 任务。选择器本身无状态，
不修改任何任务的状态。
"""

from typing import Iterator

from amiron_exec.engine.state import Task, TaskId, TaskRegistry, TaskState


class Scheduler:
    """
    调度选择器

    特性：
    - 只考虑 READY 任务
    - 优先级数值越大越优先
    - 同优先级之间不保证顺序
    """

    def __init__(self, registry: TaskRegistry):
        self._registry = registry

    def ready_tasks(self) -> list[Task]:
        """所有 READY 任务（按创建顺序，返回副本）"""
        return [t.snapshot() for t in self._iter_ready()]

    def select(self) -> TaskId | None:
        """
        选出下一个应运行的任务

        Returns:
            任务 ID，没有 READY 任务时返回 None
        """
        best = max(self._iter_ready(), key=lambda t: t.priority, default=None)
        return best.id if best is not None else None

    def _iter_ready(self) -> Iterator[Task]:
        return (t for t in self._registry.iter_tasks() if t.state == TaskState.READY)
