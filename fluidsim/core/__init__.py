"""
核心基础设施 (Core)
===================

核心组件:
---------
1. constants - 全局物理常数
2. numeric - 数值工具（限幅、插值、缓动曲线）
"""

# ==========================================
# 物理常数
# ==========================================
from .constants import (
    PhysicsConstants,
    GRAVITY,
    WATER_DENSITY,
    ATMOSPHERIC_PRESSURE,
    DYNAMIC_VISCOSITY,
    PIPE_FRICTION_COEFFICIENT,
    PA_PER_BAR,
    HOUR_TO_SECONDS,
    SECOND_TO_MS
)

# ==========================================
# 数值工具
# ==========================================
from .numeric import (
    clamp,
    lerp,
    map_range,
    ease_in_out,
    ease_in_out_inverse
)

__all__ = [
    # 物理常数
    'PhysicsConstants',
    'GRAVITY',
    'WATER_DENSITY',
    'ATMOSPHERIC_PRESSURE',
    'DYNAMIC_VISCOSITY',
    'PIPE_FRICTION_COEFFICIENT',
    'PA_PER_BAR',
    'HOUR_TO_SECONDS',
    'SECOND_TO_MS',

    # 数值工具
    'clamp',
    'lerp',
    'map_range',
    'ease_in_out',
    'ease_in_out_inverse'
]
