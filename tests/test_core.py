"""
核心工具单元测试
"""

import math
import pytest

from fluidsim.core import (
    PhysicsConstants,
    GRAVITY,
    PA_PER_BAR,
    clamp,
    lerp,
    map_range,
    ease_in_out,
    ease_in_out_inverse
)


class TestClampLerp:
    """限幅与插值测试"""

    def test_clamp(self):
        assert clamp(5.0, 0.0, 10.0) == 5.0
        assert clamp(-1.0, 0.0, 10.0) == 0.0
        assert clamp(11.0, 0.0, 10.0) == 10.0

    def test_lerp(self):
        assert lerp(0.0, 10.0, 0.0) == 0.0
        assert lerp(0.0, 10.0, 1.0) == 10.0
        assert lerp(2.0, 4.0, 0.5) == pytest.approx(3.0)

    def test_map_range(self):
        assert map_range(5.0, 0.0, 10.0, 0.0, 100.0) == pytest.approx(50.0)
        assert map_range(0.0, -1.0, 1.0, 0.0, 1.0) == pytest.approx(0.5)

    def test_map_range_degenerate_input(self):
        """输入区间退化时返回下限而非除零"""
        assert map_range(3.0, 1.0, 1.0, 7.0, 9.0) == 7.0


class TestEaseInOut:
    """缓动曲线测试"""

    def test_endpoints(self):
        assert ease_in_out(0.0) == 0.0
        assert ease_in_out(1.0) == 1.0
        assert ease_in_out(0.5) == pytest.approx(0.5)

    def test_clamped_outside_unit_interval(self):
        assert ease_in_out(-0.5) == 0.0
        assert ease_in_out(1.5) == 1.0

    def test_monotonic(self):
        samples = [ease_in_out(i / 100.0) for i in range(101)]
        assert all(b >= a for a, b in zip(samples, samples[1:]))

    @pytest.mark.parametrize('t', [0.0, 0.1, 0.25, 0.4, 0.5, 0.6, 0.75, 0.9, 1.0])
    def test_inverse(self, t):
        """反函数还原过渡进度"""
        assert ease_in_out_inverse(ease_in_out(t)) == pytest.approx(t, abs=1e-9)


class TestConstants:
    """物理常数测试"""

    def test_values(self):
        assert GRAVITY == 9.81
        assert PA_PER_BAR == 1e5
        assert PhysicsConstants.WATER_DENSITY == 1000.0

    def test_frozen(self):
        constants = PhysicsConstants()
        with pytest.raises(Exception):
            constants.GRAVITY = 10.0

    def test_torricelli_reference(self):
        assert math.sqrt(2 * GRAVITY * 5) == pytest.approx(9.9045, abs=1e-4)
