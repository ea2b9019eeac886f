"""
泵出水管线计算
==============

- FlowCalculator: 泵流量经主阀/旁通后的管线流量与压损
- PressureCalculator: 泵后、阀前测点压力 (压力变送器读数)

单位: 流量 m³/h, 压力 bar
"""

from dataclasses import dataclass
from typing import Dict

from ..config.settings import FlowConfig, PressureConfig
from ..core.numeric import clamp


@dataclass(frozen=True)
class LineFlowState:
    """管线流量状态"""
    total_flow: float          # 总流量 (m³/h)
    main_line_flow: float      # 主阀流量 (m³/h)
    bypass_flow: float         # 旁通流量 (m³/h)
    flow_velocity: float       # 流速 (m/s)
    pressure_loss: float       # 压损 (bar)
    animation_speed: float
    is_flowing: bool


class FlowCalculator:
    """
    管线流量计算器

    主阀流量 = 泵流量 × 阀门流量系数;
    旁通打开且主阀开度较小时, 旁通补充最多 30% 泵流量
    """

    # 判定有流的最小流量 (m³/h)
    FLOWING_THRESHOLD = 0.1

    def __init__(self, config: FlowConfig = None):
        self.cfg = config or FlowConfig()
        self.current_flow = 0.0
        self.previous_flow = 0.0

    def calculate(self, pump_flow: float, valve_flow_factor: float,
                  bypass_open: bool = False) -> LineFlowState:
        """
        计算管线流量

        Parameters:
            pump_flow: 泵流量 (m³/h)
            valve_flow_factor: 主阀流量系数 (0~1)
            bypass_open: 旁通是否打开
        """
        main_line_flow = pump_flow * valve_flow_factor

        capacity = self.cfg.bypass_capacity
        bypass_flow = 0.0
        if bypass_open and valve_flow_factor < capacity:
            bypass_flow = pump_flow * capacity * (1 - valve_flow_factor / capacity)

        total = main_line_flow + bypass_flow

        self.previous_flow = self.current_flow
        self.current_flow = clamp(total, self.cfg.min_flow, max(pump_flow, self.cfg.min_flow))

        return LineFlowState(
            total_flow=self.current_flow,
            main_line_flow=main_line_flow,
            bypass_flow=bypass_flow,
            flow_velocity=self.velocity(self.current_flow),
            pressure_loss=self.pressure_loss(self.current_flow),
            animation_speed=self.animation_speed(self.current_flow),
            is_flowing=self.current_flow > self.FLOWING_THRESHOLD
        )

    def velocity(self, flow: float) -> float:
        """简化流速: 按参考流量线性换算"""
        return flow / self.cfg.reference_flow * self.cfg.reference_velocity

    def pressure_loss(self, flow: float) -> float:
        """简化达西压损: 与流量平方成正比 (bar)"""
        return self.cfg.friction_factor * (flow / 10.0) ** 2

    def animation_speed(self, flow: float) -> float:
        return clamp(flow / self.cfg.reference_flow, 0.0, 1.0) * self.cfg.animation_speed_factor

    def reset(self):
        self.current_flow = 0.0
        self.previous_flow = 0.0


@dataclass(frozen=True)
class PressureReading:
    """压力变送器读数"""
    current_pressure: float    # 当前压力 (bar)
    previous_pressure: float
    tank_pressure: float       # 水箱静压 (bar)
    pump_pressure: float       # 泵增压 (bar)
    friction_loss: float       # 管线压损 (bar)
    valve_restriction: float   # 阀门背压 (bar)
    is_over_pressure: bool
    is_low_pressure: bool
    max_pressure: float
    min_pressure: float


class PressureCalculator:
    """
    压力计算器

    P = P_atm + 静压×液位 + 泵增压 - 压损 + 阀门背压, 限幅在系统压力范围内
    """

    def __init__(self, config: PressureConfig = None, static_head: float = 2.0):
        self.cfg = config or PressureConfig()
        self.static_head = static_head              # 满液位静压 (bar)
        self.current_pressure = self.cfg.atmospheric
        self.previous_pressure = self.cfg.atmospheric

    def valve_restriction(self, valve_position: float, pump_pressure: float) -> float:
        """阀门部分关闭时的背压 (全关时为泵压的80%)"""
        if valve_position >= 100:
            return 0.0
        closed_factor = 1 - valve_position / 100.0
        return pump_pressure * closed_factor * self.cfg.valve_restriction_ratio

    def calculate(self, tank_level: float, pump_pressure: float,
                  flow_pressure_loss: float, valve_position: float) -> PressureReading:
        """
        计算测点压力

        Parameters:
            tank_level: 液位 (%)
            pump_pressure: 泵增压 (bar)
            flow_pressure_loss: 管线压损 (bar)
            valve_position: 主阀开度 (%)
        """
        tank_pressure = self.static_head * (tank_level / 100.0)
        restriction = self.valve_restriction(valve_position, pump_pressure)

        pressure = self.cfg.atmospheric + tank_pressure + pump_pressure - flow_pressure_loss
        pressure += restriction

        self.previous_pressure = self.current_pressure
        self.current_pressure = clamp(pressure, self.cfg.min_system, self.cfg.max_system)

        return PressureReading(
            current_pressure=self.current_pressure,
            previous_pressure=self.previous_pressure,
            tank_pressure=tank_pressure,
            pump_pressure=pump_pressure,
            friction_loss=flow_pressure_loss,
            valve_restriction=restriction,
            is_over_pressure=self.current_pressure >= self.cfg.max_system * 0.9,
            is_low_pressure=self.current_pressure <= self.cfg.atmospheric + 0.5,
            max_pressure=self.cfg.max_system,
            min_pressure=self.cfg.min_system
        )

    def pressure_at_points(self, tank_level: float, pump_pressure: float,
                           flow_pressure_loss: float, valve_position: float) -> Dict[str, float]:
        """各测点压力 (bar)"""
        tank_pressure = self.static_head * (tank_level / 100.0)
        base = self.cfg.atmospheric + tank_pressure
        return {
            'tank_outlet': base,
            'pump_discharge': base + pump_pressure,
            'before_valve': self.current_pressure,
            'after_valve': base + pump_pressure * (valve_position / 100.0) - flow_pressure_loss
        }

    def reset(self):
        self.current_pressure = self.cfg.atmospheric
        self.previous_pressure = self.cfg.atmospheric
