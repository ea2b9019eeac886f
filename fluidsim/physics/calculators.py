"""
伯努利方程计算器
================

伯努利原理: P₁ + ½ρv₁² + ρgh₁ = P₂ + ½ρv₂² + ρgh₂

水箱泄流 (托里拆利定理):
    v = √(2gh)
    v: 出口流速 (m/s)
    g: 重力加速度 (9.81 m/s²)
    h: 出口以上水深 (m)

全部为纯函数; 任何有限输入均返回确定数值，不抛出异常。
"""

import math
from enum import Enum

from ..core.constants import (
    GRAVITY,
    WATER_DENSITY,
    ATMOSPHERIC_PRESSURE,
    DYNAMIC_VISCOSITY,
    PIPE_FRICTION_COEFFICIENT,
    PA_PER_BAR,
    HOUR_TO_SECONDS,
    PhysicsConstants
)


class FlowRegime(Enum):
    """流态"""
    LAMINAR = 'laminar'             # 层流
    TRANSITIONAL = 'transitional'   # 过渡流
    TURBULENT = 'turbulent'         # 紊流


def exit_velocity(water_height: float) -> float:
    """
    托里拆利出口流速 v = √(2gh)

    Args:
        water_height: 出口以上水深 (m)

    Returns:
        出口流速 (m/s)，水深不大于0时为0
    """
    if water_height <= 0:
        return 0.0
    return math.sqrt(2.0 * GRAVITY * water_height)


def pressure_head(pressure: float) -> float:
    """压力换算水头 h = P/(ρg)"""
    return pressure / (WATER_DENSITY * GRAVITY)


def exit_velocity_with_pump(water_height: float, pump_pressure: float) -> float:
    """
    泵辅助出口流速

    将泵压换算为等效水头后叠加到重力水头上，再代入托里拆利公式:
        v = √(2g(h + P/(ρg)))

    Args:
        water_height: 出口以上水深 (m)
        pump_pressure: 泵增压 (Pa)
    """
    if pump_pressure <= 0:
        return exit_velocity(water_height)
    return exit_velocity(max(water_height, 0.0) + pressure_head(pump_pressure))


def flow_rate(velocity: float, pipe_radius: float) -> float:
    """
    体积流量 Q = A × v

    Returns:
        流量 (m³/s)
    """
    area = math.pi * pipe_radius * pipe_radius
    return area * velocity


def flow_rate_per_hour(velocity: float, pipe_radius: float) -> float:
    """体积流量 (m³/h)"""
    return flow_rate(velocity, pipe_radius) * HOUR_TO_SECONDS


def pressure_at(height: float, velocity: float = 0.0,
                reference_pressure: float = ATMOSPHERIC_PRESSURE) -> float:
    """
    伯努利方程求某点压力 P = P₀ + ρgh + ½ρv²

    Returns:
        压力 (Pa)
    """
    hydrostatic = WATER_DENSITY * GRAVITY * height
    dynamic = 0.5 * WATER_DENSITY * velocity * velocity
    return reference_pressure + hydrostatic + dynamic


def pa_to_bar(pressure_pa: float) -> float:
    """Pa -> bar"""
    return pressure_pa / PA_PER_BAR


def reynolds_number(velocity: float, diameter: float,
                    viscosity: float = DYNAMIC_VISCOSITY) -> float:
    """
    雷诺数 Re = ρvD/μ

    粘度不为正时返回0
    """
    if viscosity <= 0:
        return 0.0
    return WATER_DENSITY * velocity * diameter / viscosity


def flow_regime(reynolds: float) -> FlowRegime:
    """根据雷诺数判别流态"""
    if reynolds < PhysicsConstants.LAMINAR_REYNOLDS_LIMIT:
        return FlowRegime.LAMINAR
    if reynolds < PhysicsConstants.TURBULENT_REYNOLDS_LIMIT:
        return FlowRegime.TRANSITIONAL
    return FlowRegime.TURBULENT


def friction_head_loss(length: float, diameter: float, velocity: float,
                       friction_factor: float = PIPE_FRICTION_COEFFICIENT) -> float:
    """
    达西-魏斯巴赫沿程水头损失 h_f = f × (L/D) × v²/(2g)

    Returns:
        水头损失 (m)
    """
    if velocity == 0 or diameter <= 0:
        return 0.0
    return friction_factor * (length / diameter) * velocity * velocity / (2.0 * GRAVITY)


def drain_time(tank_area: float, outlet_area: float, height: float) -> float:
    """
    水箱放空时间 t = (A_tank / A_outlet) × √(2h/g)

    出口面积或水深为0时返回 math.inf (无出流)
    """
    if outlet_area <= 0 or height <= 0:
        return math.inf
    return (tank_area / outlet_area) * math.sqrt(2.0 * height / GRAVITY)


def tank_volume(radius: float, water_height: float) -> float:
    """圆柱水箱水体积 (m³)"""
    return math.pi * radius * radius * max(water_height, 0.0)


def percentage_to_height(percentage: float, max_height: float) -> float:
    """液位百分比 -> 水深 (m)"""
    return (percentage / 100.0) * max_height


__all__ = [
    'FlowRegime',
    'exit_velocity',
    'exit_velocity_with_pump',
    'pressure_head',
    'flow_rate',
    'flow_rate_per_hour',
    'pressure_at',
    'pa_to_bar',
    'reynolds_number',
    'flow_regime',
    'friction_head_loss',
    'drain_time',
    'tank_volume',
    'percentage_to_height'
]
