"""
快照订阅
========

观察者注册表:
- 全量订阅: 每次发布都回调
- 选择器订阅: 仅当选中部分变化时回调
- 句柄按编号存入字典, 取消订阅 O(1), 立即生效 (发布过程中亦然)
"""

import itertools
import logging
from dataclasses import dataclass
from typing import Any, Callable, Dict, Optional

logger = logging.getLogger('FluidSim.Events')

Listener = Callable[[Any], None]
Selector = Callable[[Any], Any]

_UNSET = object()


@dataclass
class _Entry:
    listener: Listener
    selector: Optional[Selector]
    last_value: Any = _UNSET


class Subscription:
    """订阅句柄"""

    def __init__(self, registry: 'SubscriptionRegistry', handle_id: int):
        self._registry = registry
        self.id = handle_id

    @property
    def active(self) -> bool:
        return self._registry.is_subscribed(self.id)

    def unsubscribe(self) -> bool:
        """取消订阅"""
        return self._registry.unsubscribe(self.id)

    def __repr__(self) -> str:
        return f"Subscription(id={self.id}, active={self.active})"


class SubscriptionRegistry:
    """
    订阅注册表

    发布时对监听器异常记录日志并继续, 保证发布方不被打断
    """

    def __init__(self):
        self._entries: Dict[int, _Entry] = {}
        self._ids = itertools.count(1)

    def __len__(self) -> int:
        return len(self._entries)

    def subscribe(self, listener: Listener, selector: Selector = None) -> Subscription:
        """
        订阅

        Parameters:
            listener: 回调函数, 参数为快照 (或选择器结果)
            selector: 选择器, 为 None 时订阅全量快照
        """
        if not callable(listener):
            raise TypeError("listener 必须可调用")
        handle_id = next(self._ids)
        self._entries[handle_id] = _Entry(listener=listener, selector=selector)
        return Subscription(self, handle_id)

    def unsubscribe(self, handle) -> bool:
        """取消订阅; 接受句柄或编号"""
        handle_id = handle.id if isinstance(handle, Subscription) else handle
        return self._entries.pop(handle_id, None) is not None

    def is_subscribed(self, handle_id: int) -> bool:
        return handle_id in self._entries

    def clear(self):
        self._entries.clear()

    def publish(self, value: Any) -> int:
        """
        发布

        Returns:
            实际回调次数
        """
        delivered = 0
        for handle_id, entry in list(self._entries.items()):
            # 发布过程中被取消的订阅不再回调
            if handle_id not in self._entries:
                continue

            if entry.selector is None:
                payload = value
            else:
                try:
                    payload = entry.selector(value)
                except Exception:
                    logger.exception(f"订阅 {handle_id} 的选择器执行失败")
                    continue
                if entry.last_value is not _UNSET and payload == entry.last_value:
                    continue
                entry.last_value = payload

            try:
                entry.listener(payload)
                delivered += 1
            except Exception:
                logger.exception(f"订阅 {handle_id} 的回调执行失败")

        return delivered
