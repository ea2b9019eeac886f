"""
数值工具 (Numeric Helpers)
==========================

无状态的纯函数：
- 区间限幅 clamp
- 线性插值 lerp / 区间映射 map_range
- 缓入缓出 ease_in_out 及其反函数
"""

import math


def clamp(value: float, min_value: float, max_value: float) -> float:
    """将数值限制在 [min_value, max_value] 范围内"""
    return min(max(value, min_value), max_value)


def lerp(start: float, end: float, factor: float) -> float:
    """线性插值"""
    return start + (end - start) * factor


def map_range(value: float, in_min: float, in_max: float,
              out_min: float, out_max: float) -> float:
    """
    区间映射

    输入区间退化 (in_min == in_max) 时返回 out_min
    """
    if in_max == in_min:
        return out_min
    return (value - in_min) * (out_max - out_min) / (in_max - in_min) + out_min


def ease_in_out(t: float) -> float:
    """
    二次缓入缓出曲线

    f(t) = 2t²                 (t < 0.5)
    f(t) = 1 - (-2t + 2)² / 2  (t ≥ 0.5)

    在 [0, 1] 上单调递增, f(0)=0, f(1)=1
    """
    t = clamp(t, 0.0, 1.0)
    if t < 0.5:
        return 2.0 * t * t
    return 1.0 - (-2.0 * t + 2.0) ** 2 / 2.0


def ease_in_out_inverse(y: float) -> float:
    """
    ease_in_out 的反函数

    用于执行器换向：根据当前输出比例反求过渡进度
    """
    y = clamp(y, 0.0, 1.0)
    if y < 0.5:
        return math.sqrt(y / 2.0)
    return 1.0 - math.sqrt(2.0 * (1.0 - y)) / 2.0


__all__ = [
    'clamp',
    'lerp',
    'map_range',
    'ease_in_out',
    'ease_in_out_inverse'
]
