"""
任务状态单元测试

测试任务标识、优先级校验和注册表状态转换。
"""

import pytest

from amiron_exec.common.exceptions import ValidationError
from amiron_exec.engine.state import (
    TaskId,
    TaskRegistry,
    TaskState,
    ensure_priority,
    ensure_task_id,
)


class _IndexInt:
    """只实现 __index__ 的整数类型，行为同 numpy 整数标量"""

    def __init__(self, value: int):
        self._value = value

    def __index__(self) -> int:
        return self._value


class TestTaskId:
    """任务标识测试"""

    def test_value_semantics(self):
        """测试相等与哈希"""
        assert TaskId(3) == TaskId(3)
        assert TaskId(3) != TaskId(4)
        assert len({TaskId(3), TaskId(3), TaskId(4)}) == 2

    def test_ordering(self):
        assert TaskId(1) < TaskId(2)

    def test_str(self):
        assert str(TaskId(7)) == "task-7"

    def test_immutable(self):
        task_id = TaskId(1)
        with pytest.raises(AttributeError):
            task_id.value = 2


class TestValidation:
    """参数校验测试"""

    @pytest.mark.parametrize("priority", [0, 1, 128, 255])
    def test_priority_full_range(self, priority):
        assert ensure_priority(priority) == priority

    @pytest.mark.parametrize("priority", [-1, 256, 1000])
    def test_priority_out_of_range(self, priority):
        with pytest.raises(ValidationError) as exc_info:
            ensure_priority(priority)
        assert exc_info.value.field == "priority"
        assert exc_info.value.error_code == "VALIDATION_ERROR"

    @pytest.mark.parametrize("priority", [True, 1.5, "5", None])
    def test_priority_wrong_type(self, priority):
        with pytest.raises(ValidationError):
            ensure_priority(priority)

    def test_priority_integer_like(self):
        """测试接受实现 __index__ 的整数类型（如 numpy.uint8）"""
        priority = ensure_priority(_IndexInt(200))
        assert priority == 200
        assert type(priority) is int

        with pytest.raises(ValidationError) as exc_info:
            ensure_priority(_IndexInt(300))
        assert exc_info.value.field == "priority"

    def test_task_id_type(self):
        assert ensure_task_id(TaskId(1)) == TaskId(1)
        with pytest.raises(ValidationError):
            ensure_task_id(1)


class TestTaskRegistry:
    """任务注册表测试"""

    @pytest.fixture
    def registry(self):
        return TaskRegistry(first_id=1)

    def test_create_assigns_monotonic_ids(self, registry):
        """测试 ID 单调递增"""
        first = registry.create(5)
        second = registry.create(5)

        assert first.id == TaskId(1)
        assert second.id == TaskId(2)
        assert registry.next_id == 3
        assert first.state == TaskState.READY
        assert first.created_at is not None

    def test_custom_first_id(self):
        registry = TaskRegistry(first_id=100)
        assert registry.create(0).id == TaskId(100)

    def test_invalid_first_id(self):
        with pytest.raises(ValidationError):
            TaskRegistry(first_id=-1)

    def test_valid_transition(self, registry):
        """测试有效状态转换"""
        task = registry.create(1)

        assert registry.transition(task.id, TaskState.RUNNING) is True
        assert registry.get(task.id).state == TaskState.RUNNING
        assert registry.get(task.id).started_at is not None

        assert registry.transition(task.id, TaskState.WAITING) is True
        assert registry.transition(task.id, TaskState.READY) is True

    def test_invalid_transition(self, registry):
        """测试无效状态转换"""
        task = registry.create(1)

        assert registry.transition(task.id, TaskState.WAITING) is False
        assert registry.get(task.id).state == TaskState.READY

    def test_transition_unknown_task(self, registry):
        assert registry.transition(TaskId(99), TaskState.RUNNING) is False

    def test_terminated_is_absorbing(self, registry):
        task = registry.create(1)
        registry.transition(task.id, TaskState.TERMINATED)

        for state in TaskState:
            assert registry.transition(task.id, state) is False

    def test_mark_terminated(self, registry):
        """测试终止标记"""
        task = registry.create(1)

        assert registry.mark_terminated(task.id) == TaskState.READY
        terminated_at = registry.get(task.id).terminated_at
        assert terminated_at is not None

        # 重复终止不改变状态和时间戳
        assert registry.mark_terminated(task.id) == TaskState.TERMINATED
        assert registry.get(task.id).terminated_at == terminated_at

        assert registry.mark_terminated(TaskId(99)) is None

    def test_records_never_removed(self, registry):
        task = registry.create(1)
        registry.mark_terminated(task.id)

        assert task.id in registry
        assert len(registry) == 1

    def test_list_by_state_returns_copies(self, registry):
        """测试列表返回副本"""
        a = registry.create(1)
        b = registry.create(2)
        registry.mark_terminated(b.id)

        ready = registry.list_by_state(TaskState.READY)
        assert [t.id for t in ready] == [a.id]

        ready[0].state = TaskState.TERMINATED
        assert registry.get(a.id).state == TaskState.READY

        assert [t.id for t in registry.list_by_state()] == [a.id, b.id]

    def test_count_by_state(self, registry):
        registry.create(1)
        task = registry.create(1)
        registry.mark_terminated(task.id)

        counts = registry.count_by_state()
        assert counts == {"ready": 1, "running": 0, "waiting": 0, "terminated": 1}
