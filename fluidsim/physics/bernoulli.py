"""
伯努利状态计算
==============

每个时间步由当前液位与阀位重新计算全部导出量:
- 水深 / 有效水头
- 出口流速 (含泵辅助)
- 各支管流速、流量、雷诺数、流态
- 箱底/出口压力
- 剩余水量与放空时间估计

无记忆: 每次调用独立计算，不累积误差。
"""

import math
from dataclasses import dataclass, field
from typing import List, Optional, Sequence, Tuple

from ..actuators.valve import equal_percentage_factor
from ..core.constants import GRAVITY, HOUR_TO_SECONDS
from .calculators import (
    FlowRegime,
    exit_velocity,
    exit_velocity_with_pump,
    flow_rate,
    pressure_at,
    pa_to_bar,
    reynolds_number,
    flow_regime,
    friction_head_loss,
    drain_time,
    tank_volume,
    percentage_to_height
)


@dataclass(frozen=True)
class SubPipeInput:
    """支管输入"""
    id: str
    radius: float
    valve_position: float   # 阀位 (%)


@dataclass(frozen=True)
class SubPipeFlow:
    """支管计算结果"""
    id: str
    radius: float
    valve_position: float
    velocity: float                 # 流速 (m/s)
    flow_rate: float                # 流量 (m³/s)
    flow_rate_per_hour: float       # 流量 (m³/h)
    is_open: bool
    reynolds_number: float
    flow_regime: FlowRegime

    @property
    def area(self) -> float:
        return math.pi * self.radius ** 2


@dataclass(frozen=True)
class BernoulliState:
    """伯努利导出状态"""
    # 水位
    water_level: float = 0.0                # 液位 (%)
    water_height: float = 0.0               # 水深 (m)
    effective_height: float = 0.0           # 出口以上有效水头 (m)

    # 流速
    exit_velocity: float = 0.0              # 出口流速 (m/s)
    pump_assisted: bool = False

    # 流量
    main_flow_rate: float = 0.0             # 主管流量 (m³/s)
    total_flow_rate: float = 0.0            # 支管总流量 (m³/s)
    sub_pipe_flows: Tuple[SubPipeFlow, ...] = field(default_factory=tuple)

    # 压力
    tank_bottom_pressure: float = 0.0       # 箱底压力 (Pa)
    outlet_pressure: float = 0.0            # 出口压力 (Pa)
    main_pipe_head_loss: float = 0.0        # 主管沿程损失 (m)

    # 水量
    remaining_volume: float = 0.0           # 剩余水量 (m³)
    estimated_drain_time: float = math.inf  # 放空时间 (s)，无出流为 inf

    @property
    def main_flow_rate_per_hour(self) -> float:
        return self.main_flow_rate * HOUR_TO_SECONDS

    @property
    def total_flow_rate_per_hour(self) -> float:
        return self.total_flow_rate * HOUR_TO_SECONDS

    @property
    def tank_bottom_pressure_bar(self) -> float:
        return pa_to_bar(self.tank_bottom_pressure)

    @property
    def outlet_pressure_bar(self) -> float:
        return pa_to_bar(self.outlet_pressure)

    @property
    def drains(self) -> bool:
        """是否存在出流"""
        return math.isfinite(self.estimated_drain_time)

    @property
    def equation(self) -> str:
        """托里拆利公式展示"""
        return (f"v = √(2 × {GRAVITY} × {self.effective_height:.2f}) "
                f"= {self.exit_velocity:.2f} m/s")

    def get_sub_pipe(self, pipe_id: str) -> Optional[SubPipeFlow]:
        for pipe in self.sub_pipe_flows:
            if pipe.id == pipe_id:
                return pipe
        return None


class BernoulliStateComputer:
    """
    伯努利状态计算器

    组合托里拆利、连续性方程、伯努利压力与雷诺数计算
    """

    def __init__(self, main_pipe_radius: float = 0.1, main_pipe_length: float = 5.0):
        self.main_pipe_radius = main_pipe_radius
        self.main_pipe_length = main_pipe_length

    def compute(self,
                tank_level: float,
                tank_height: float,
                tank_radius: float,
                outlet_height: float,
                sub_pipes: Sequence[SubPipeInput] = (),
                pump_running: bool = False,
                pump_pressure: float = 0.0) -> BernoulliState:
        """
        计算伯努利状态

        Parameters:
            tank_level: 液位 (%)
            tank_height: 水箱高度 (m)
            tank_radius: 水箱半径 (m)
            outlet_height: 出口高度 (m)
            sub_pipes: 支管输入 (阀位已按总开关处理)
            pump_running: 泵是否运转
            pump_pressure: 泵增压 (Pa)

        Returns:
            BernoulliState
        """
        water_height = percentage_to_height(tank_level, tank_height)
        effective_height = max(0.0, water_height - outlet_height)

        # 出口流速 (泵运转时叠加泵压水头)
        pump_assisted = pump_running and pump_pressure > 0
        if pump_assisted:
            velocity = exit_velocity_with_pump(effective_height, pump_pressure)
        else:
            velocity = exit_velocity(effective_height)

        main_flow = flow_rate(velocity, self.main_pipe_radius)

        # 各支管: 等百分比阀门特性决定流速份额
        flows: List[SubPipeFlow] = []
        for pipe in sub_pipes:
            position = max(pipe.valve_position, 0.0)
            factor = equal_percentage_factor(position)
            sub_velocity = velocity * factor
            sub_flow = flow_rate(sub_velocity, pipe.radius)
            reynolds = reynolds_number(sub_velocity, 2.0 * pipe.radius)
            flows.append(SubPipeFlow(
                id=pipe.id,
                radius=pipe.radius,
                valve_position=position,
                velocity=sub_velocity,
                flow_rate=sub_flow,
                flow_rate_per_hour=sub_flow * HOUR_TO_SECONDS,
                is_open=position > 0,
                reynolds_number=reynolds,
                flow_regime=flow_regime(reynolds)
            ))

        total_flow = sum(p.flow_rate for p in flows)

        # 放空时间: 有效出口面积为开启支管面积之和; 无出口或无有效水头时为 inf
        outlet_area = sum(p.area for p in flows if p.is_open)
        tank_area = math.pi * tank_radius * tank_radius

        return BernoulliState(
            water_level=tank_level,
            water_height=water_height,
            effective_height=effective_height,
            exit_velocity=velocity,
            pump_assisted=pump_assisted,
            main_flow_rate=main_flow,
            total_flow_rate=total_flow,
            sub_pipe_flows=tuple(flows),
            tank_bottom_pressure=pressure_at(water_height),
            outlet_pressure=pressure_at(effective_height),
            main_pipe_head_loss=friction_head_loss(
                self.main_pipe_length, 2.0 * self.main_pipe_radius, velocity),
            remaining_volume=tank_volume(tank_radius, water_height),
            estimated_drain_time=drain_time(tank_area, outlet_area, effective_height)
        )


def compute_bernoulli_state(tank_level: float,
                            tank_height: float = 4.0,
                            tank_radius: float = 2.0,
                            outlet_height: float = 0.5,
                            main_pipe_radius: float = 0.1,
                            sub_pipes: Sequence[SubPipeInput] = (),
                            pump_running: bool = False,
                            pump_pressure: float = 0.0) -> BernoulliState:
    """便捷函数: 使用默认主管长度计算伯努利状态"""
    computer = BernoulliStateComputer(main_pipe_radius=main_pipe_radius)
    return computer.compute(
        tank_level, tank_height, tank_radius, outlet_height,
        sub_pipes=sub_pipes,
        pump_running=pump_running,
        pump_pressure=pump_pressure
    )
