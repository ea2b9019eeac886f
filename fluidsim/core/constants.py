"""
全局物理常数 (Physical Constants)
=================================

定义水箱仿真中使用的基本物理常数和单位换算。
这些常数为固定配置，不随仿真状态变化。
"""

from dataclasses import dataclass


@dataclass(frozen=True)
class PhysicsConstants:
    """
    物理常数集合 (不可变)

    使用frozen=True确保常数不被意外修改。
    """
    # 基本常数
    GRAVITY: float = 9.81                       # 重力加速度 (m/s²)
    WATER_DENSITY: float = 1000.0               # 水密度 (kg/m³)
    ATMOSPHERIC_PRESSURE: float = 101325.0      # 标准大气压 (Pa)
    DYNAMIC_VISCOSITY: float = 0.001            # 动力粘度 @20°C (Pa·s)
    PIPE_FRICTION_COEFFICIENT: float = 0.02     # 光滑管达西摩阻系数

    # 流态判别
    LAMINAR_REYNOLDS_LIMIT: float = 2300.0      # 层流上限
    TURBULENT_REYNOLDS_LIMIT: float = 4000.0    # 紊流下限

    # 单位换算
    PA_PER_BAR: float = 100000.0                # bar -> Pa
    HOUR_TO_SECONDS: float = 3600.0             # h -> s
    SECOND_TO_MS: float = 1000.0                # s -> ms


# ==========================================
# 模块级常量（便捷访问）
# ==========================================
_constants = PhysicsConstants()

GRAVITY = _constants.GRAVITY
WATER_DENSITY = _constants.WATER_DENSITY
ATMOSPHERIC_PRESSURE = _constants.ATMOSPHERIC_PRESSURE
DYNAMIC_VISCOSITY = _constants.DYNAMIC_VISCOSITY
PIPE_FRICTION_COEFFICIENT = _constants.PIPE_FRICTION_COEFFICIENT
PA_PER_BAR = _constants.PA_PER_BAR
HOUR_TO_SECONDS = _constants.HOUR_TO_SECONDS
SECOND_TO_MS = _constants.SECOND_TO_MS


__all__ = [
    'PhysicsConstants',
    'GRAVITY',
    'WATER_DENSITY',
    'ATMOSPHERIC_PRESSURE',
    'DYNAMIC_VISCOSITY',
    'PIPE_FRICTION_COEFFICIENT',
    'PA_PER_BAR',
    'HOUR_TO_SECONDS',
    'SECOND_TO_MS'
]
