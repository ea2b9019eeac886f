"""
全局配置参数
============

包含水箱-泵-阀门-支管系统的全部物理参数、执行器参数和仿真配置。
"""

import math
from dataclasses import dataclass, asdict
from typing import Tuple
from enum import Enum


class SystemState(Enum):
    """系统/执行器状态"""
    IDLE = 'idle'            # 空闲
    STARTING = 'starting'    # 启动中
    RUNNING = 'running'      # 运行中
    STOPPING = 'stopping'    # 停机中
    FAULT = 'fault'          # 故障


@dataclass
class PumpConfig:
    """排水泵配置"""
    max_flow_rate: float = 100.0            # 额定流量 (m³/h)
    startup_duration_ms: float = 2000.0     # 启动时间 (ms)
    shutdown_duration_ms: float = 1500.0    # 停机时间 (ms)
    pressure_contribution: float = 4.0      # 额定增压 (bar)


@dataclass
class InletMotorConfig:
    """进水电机配置 (向水箱补水)"""
    max_flow_rate: float = 80.0             # 额定流量 (m³/h)
    startup_duration_ms: float = 1500.0     # 启动时间 (ms)
    shutdown_duration_ms: float = 1000.0    # 停机时间 (ms)
    fill_rate: float = 0.5                  # 标称补水速率 (%/s)


@dataclass
class ValveConfig:
    """主阀配置"""
    min_position: float = 0.0               # 最小开度 (%)
    max_position: float = 100.0             # 最大开度 (%)
    actuation_speed: float = 10.0           # 动作速率 (%/s)
    tolerance: float = 0.1                  # 全开/全关判定容差 (%)


@dataclass
class TankConfig:
    """水箱配置"""
    capacity: float = 1000.0                # 额定容积 (m³)
    initial_level: float = 50.0             # 初始液位 (%)
    min_level: float = 5.0                  # 最低液位 (%)
    max_level: float = 95.0                 # 最高液位 (%)
    static_head: float = 2.0                # 满液位静压 (bar)
    height: float = 4.0                     # 箱体高度 (m)
    radius: float = 2.0                     # 箱体半径 (m)
    outlet_height: float = 0.5              # 出口距箱底高度 (m)

    # 液位变化放大系数 (使短时仿真中液位变化可见, 非物理常数)
    level_amplification: float = 10.0

    @property
    def cross_section_area(self) -> float:
        """水箱横截面积 (m²)"""
        return math.pi * self.radius ** 2


@dataclass
class SubPipeConfig:
    """出口支管配置"""
    id: str = 'sub-pipe-1'
    name: str = 'Outlet 1'
    radius: float = 0.06                    # 管道半径 (m)
    initial_valve_position: float = 0.0     # 初始阀位 (%)
    actuation_speed: float = 50.0           # 支管阀动作速率 (%/s)

    @property
    def area(self) -> float:
        return math.pi * self.radius ** 2


@dataclass
class MainPipeConfig:
    """主管配置"""
    radius: float = 0.1                     # 半径 (m)
    length: float = 5.0                     # 长度 (m)

    @property
    def diameter(self) -> float:
        return 2.0 * self.radius


@dataclass
class FlowConfig:
    """管线流量计算配置"""
    friction_factor: float = 0.02           # 压损系数
    min_flow: float = 0.0                   # 最小流量 (m³/h)
    bypass_capacity: float = 0.3            # 旁通最大流量比例
    animation_speed_factor: float = 0.1
    reference_flow: float = 100.0           # 参考流量 (m³/h)
    reference_velocity: float = 5.0         # 参考流量下的流速 (m/s)


@dataclass
class PressureConfig:
    """压力变送器配置"""
    atmospheric: float = 1.0                # 大气压 (bar)
    max_system: float = 10.0                # 系统最高压力 (bar)
    min_system: float = 0.0                 # 系统最低压力 (bar)
    valve_restriction_ratio: float = 0.8    # 阀门全关时的背压比例


@dataclass
class SimulationConfig:
    """仿真配置"""
    target_rate_hz: float = 60.0            # 目标刷新频率 (Hz)
    dt: float = 1.0 / 60.0                  # 批量仿真步长 (s)
    log_interval: float = 1.0               # 运行日志间隔 (s)

    @property
    def frame_interval(self) -> float:
        """帧间隔 (s)"""
        return 1.0 / self.target_rate_hz if self.target_rate_hz > 0 else 0.0


def _default_sub_pipes() -> Tuple[SubPipeConfig, ...]:
    return (
        SubPipeConfig(id='sub-pipe-1', name='Outlet 1'),
        SubPipeConfig(id='sub-pipe-2', name='Outlet 2'),
        SubPipeConfig(id='sub-pipe-3', name='Outlet 3'),
    )


class Config:
    """
    全局配置类

    每个实例持有独立的默认配置段; 实例化时可按段覆盖:
        Config(tank=TankConfig(initial_level=80.0))
    """

    # 配置段 -> 默认值工厂
    DEFAULTS = {
        # 组件配置
        'pump': PumpConfig,
        'inlet_motor': InletMotorConfig,
        'valve': ValveConfig,
        'tank': TankConfig,
        'sub_pipes': _default_sub_pipes,
        'main_pipe': MainPipeConfig,
        # 计算器配置
        'flow': FlowConfig,
        'pressure': PressureConfig,
        # 运行配置
        'simulation': SimulationConfig,
    }

    SECTIONS = tuple(DEFAULTS)

    pump: PumpConfig
    inlet_motor: InletMotorConfig
    valve: ValveConfig
    tank: TankConfig
    sub_pipes: Tuple[SubPipeConfig, ...]
    main_pipe: MainPipeConfig
    flow: FlowConfig
    pressure: PressureConfig
    simulation: SimulationConfig

    def __init__(self, **sections):
        for name in sections:
            if name not in self.DEFAULTS:
                raise AttributeError(f"未知配置段: {name}")

        for name, factory in self.DEFAULTS.items():
            value = sections[name] if name in sections else factory()
            if name == 'sub_pipes':
                value = tuple(value)
            setattr(self, name, value)

    def to_dict(self) -> dict:
        """导出配置为字典"""
        return {
            'pump': asdict(self.pump),
            'inlet_motor': asdict(self.inlet_motor),
            'valve': asdict(self.valve),
            'tank': asdict(self.tank),
            'sub_pipes': [asdict(p) for p in self.sub_pipes],
            'main_pipe': asdict(self.main_pipe),
            'flow': asdict(self.flow),
            'pressure': asdict(self.pressure),
            'simulation': asdict(self.simulation)
        }
