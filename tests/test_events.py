"""
快照订阅测试
"""

import pytest

from fluidsim.simulation.events import Subscription, SubscriptionRegistry


class TestSubscriptionRegistry:
    """订阅注册表测试"""

    def test_publish_to_all(self):
        registry = SubscriptionRegistry()
        received_a, received_b = [], []
        registry.subscribe(received_a.append)
        registry.subscribe(received_b.append)

        assert registry.publish(1) == 2
        assert received_a == [1]
        assert received_b == [1]

    def test_unsubscribe(self):
        registry = SubscriptionRegistry()
        received = []
        handle = registry.subscribe(received.append)
        assert isinstance(handle, Subscription)
        assert handle.active

        assert handle.unsubscribe() is True
        assert not handle.active
        assert handle.unsubscribe() is False

        registry.publish(1)
        assert received == []
        assert len(registry) == 0

    def test_unsubscribe_by_id(self):
        registry = SubscriptionRegistry()
        handle = registry.subscribe(lambda value: None)
        assert registry.unsubscribe(handle.id) is True
        assert not registry.is_subscribed(handle.id)

    def test_unsubscribe_during_publish(self):
        """发布过程中取消的订阅立即失效"""
        registry = SubscriptionRegistry()
        received = []
        handles = {}

        def first(value):
            handles['second'].unsubscribe()

        registry.subscribe(first)
        handles['second'] = registry.subscribe(received.append)

        registry.publish(1)
        assert received == []

    def test_selector_only_on_change(self):
        """选择器订阅仅在选中值变化时回调"""
        registry = SubscriptionRegistry()
        received = []
        registry.subscribe(received.append, selector=lambda value: value['level'])

        registry.publish({'level': 1, 'tick': 1})
        registry.publish({'level': 1, 'tick': 2})
        registry.publish({'level': 2, 'tick': 3})

        assert received == [1, 2]

    def test_listener_error_does_not_stop_publish(self):
        registry = SubscriptionRegistry()
        received = []

        def broken(value):
            raise RuntimeError('boom')

        registry.subscribe(broken)
        registry.subscribe(received.append)

        assert registry.publish(7) == 1
        assert received == [7]

    def test_listener_must_be_callable(self):
        with pytest.raises(TypeError):
            SubscriptionRegistry().subscribe(42)

    def test_clear(self):
        registry = SubscriptionRegistry()
        registry.subscribe(lambda value: None)
        registry.clear()
        assert len(registry) == 0
