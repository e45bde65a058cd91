"""
邮箱集合

每个未终止的任务拥有一个无界 FIFO 邮箱，载荷为不透明字节。
"""

from collections import deque

from loguru import logger

from amiron_exec.common.logging import describe_payload
from amiron_exec.engine.state import TaskId


class MailboxSet:
    """
    邮箱集合

    特性：
    - 按目标任务保持发送顺序
    - 无容量限制，无背压
    - 关闭邮箱时丢弃所有未读消息
    """

    def __init__(self):
        self._boxes: dict[TaskId, deque[bytes]] = {}

    def open(self, task_id: TaskId) -> None:
        """为任务创建空邮箱"""
        self._boxes[task_id] = deque()
        logger.debug(f"创建邮箱: {task_id}")

    def close(self, task_id: TaskId) -> int | None:
        """删除邮箱

        Returns:
            被丢弃的消息数；邮箱不存在时返回 None
        """
        box = self._boxes.pop(task_id, None)
        if box is None:
            return None
        if box:
            logger.debug(f"删除邮箱: {task_id} (丢弃 {len(box)} 条消息)")
        else:
            logger.debug(f"删除邮箱: {task_id}")
        return len(box)

    def push(self, task_id: TaskId, payload: bytes) -> bool:
        """追加消息到队尾，邮箱不存在时返回 False"""
        box = self._boxes.get(task_id)
        if box is None:
            return False
        box.append(payload)
        logger.debug(f"投递: {task_id} ({describe_payload(payload)}, depth={len(box)})")
        return True

    def pop(self, task_id: TaskId) -> bytes | None:
        """取出最早的消息，邮箱为空或不存在时返回 None"""
        box = self._boxes.get(task_id)
        if not box:
            return None
        payload = box.popleft()
        logger.debug(f"取出: {task_id} ({describe_payload(payload)}, depth={len(box)})")
        return payload

    def depth(self, task_id: TaskId) -> int:
        """邮箱中未读消息数"""
        box = self._boxes.get(task_id)
        return len(box) if box is not None else 0

    def total_pending(self) -> int:
        return sum(len(box) for box in self._boxes.values())

    def __len__(self) -> int:
        return len(self._boxes)

    def __contains__(self, task_id: object) -> bool:
        return task_id in self._boxes
