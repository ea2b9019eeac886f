"""
仿真引擎
========

编排所有仿真组件并维护系统状态:
- 排水泵 / 进水电机启停状态机
- 主阀与各支管阀
- 伯努利出流计算
- 水箱水量平衡积分
- 系统快照发布与订阅

单线程、逐步推进: step() 是唯一修改仿真状态的入口;
控制命令只修改组件目标, 其效果在下一次发布的快照中可见。
"""

import logging
import math
import time
from dataclasses import dataclass
from operator import attrgetter
from typing import Callable, Dict, List, Optional, Tuple

from ..actuators.motor import PumpActuator, InletMotorActuator
from ..actuators.valve import ValveActuator
from ..config.settings import Config, SystemState, SubPipeConfig
from ..config.validation import ConfigValidator
from ..core.constants import PA_PER_BAR, HOUR_TO_SECONDS
from ..core.numeric import clamp
from ..physics.bernoulli import BernoulliState, BernoulliStateComputer, SubPipeInput
from ..physics.line import FlowCalculator, PressureCalculator
from .events import Listener, Selector, Subscription, SubscriptionRegistry
from .snapshot import (
    FlowReading,
    SubPipeStatus,
    SystemSnapshot,
    TankStatus
)

logger = logging.getLogger('FluidSim.Engine')


@dataclass
class SubPipe:
    """出口支管 (阀位为唯一跨步状态)"""
    config: SubPipeConfig
    valve: ValveActuator

    @property
    def id(self) -> str:
        return self.config.id


class SimulationEngine:
    """
    水箱系统仿真引擎

    使用:
        engine = SimulationEngine()
        engine.enable_flow()
        engine.open_sub_pipe('sub-pipe-1')
        snapshot = engine.step(1.0 / 60)
    """

    def __init__(self, config: Config = None,
                 clock: Callable[[], float] = time.monotonic):
        """
        Args:
            config: 配置, 默认使用 Config 默认值
            clock: 时钟函数 (s), tick() 用它计算步长
        """
        self.cfg = config or Config()
        self._clock = clock
        self._validate_config()

        # 执行器
        self.pump = PumpActuator(self.cfg.pump)
        self.inlet_motor = InletMotorActuator(self.cfg.inlet_motor)
        self.valve = ValveActuator.from_config(self.cfg.valve)
        self.sub_pipes: Dict[str, SubPipe] = self._init_sub_pipes()

        # 计算器
        self.flow_calculator = FlowCalculator(self.cfg.flow)
        self.pressure_calculator = PressureCalculator(
            self.cfg.pressure, static_head=self.cfg.tank.static_head)
        self.bernoulli_computer = BernoulliStateComputer(
            main_pipe_radius=self.cfg.main_pipe.radius,
            main_pipe_length=self.cfg.main_pipe.length
        )

        # 订阅
        self._events = SubscriptionRegistry()

        # 运行标志 (由外部循环维护)
        self.is_loop_running = False
        self._last_tick_time: Optional[float] = None

        self._init_state()
        self._snapshot = self._evaluate(0.0)

    def _validate_config(self):
        """验证配置并记录问题"""
        report = ConfigValidator(self.cfg).validate_all()
        for result in report.errors:
            logger.error(f"配置错误: {result.message}")
        for result in report.warnings:
            logger.warning(f"配置警告: {result.message}")

    def _init_sub_pipes(self) -> Dict[str, SubPipe]:
        """初始化支管"""
        pipes = {}
        for pipe_cfg in self.cfg.sub_pipes:
            valve = ValveActuator(
                name=pipe_cfg.id,
                actuation_speed=pipe_cfg.actuation_speed,
                tolerance=self.cfg.valve.tolerance,
                initial_position=pipe_cfg.initial_valve_position
            )
            pipes[pipe_cfg.id] = SubPipe(config=pipe_cfg, valve=valve)
        return pipes

    def _init_state(self):
        """初始化水箱与系统状态"""
        tank = self.cfg.tank
        self.tank_level = clamp(tank.initial_level, tank.min_level, tank.max_level)
        self.outlet_height = clamp(tank.outlet_height, 0.0, tank.height)

        self.flow_enabled = False
        self.bypass_open = False

        self.system_state = SystemState.IDLE
        self.elapsed_time = 0.0
        self.tick_count = 0
        self._outlet_flow = 0.0

    # ==================================================================
    # 推进
    # ==================================================================

    def resume_clock(self):
        """以当前时刻为基准, 暂停期间的时间不计入下一步"""
        self._last_tick_time = self._clock()

    def tick(self) -> SystemSnapshot:
        """
        按时钟推进一步

        步长 = 距上次 tick 的时钟间隔 (下限为0, 无上限)
        """
        now = self._clock()
        if self._last_tick_time is None:
            dt = 0.0
        else:
            dt = max(0.0, now - self._last_tick_time)
        self._last_tick_time = now
        return self.step(dt)

    def step(self, dt: float) -> SystemSnapshot:
        """
        推进一个时间步

        Parameters:
            dt: 时间步长 (s)

        Returns:
            SystemSnapshot: 本步发布的快照
        """
        dt = max(0.0, dt)

        # 1. 累计仿真时间
        self.elapsed_time += dt
        self.tick_count += 1

        # 2. 推进执行器
        self.pump.step(dt)
        self.inlet_motor.step(dt)
        self.valve.step(dt)
        for pipe in self.sub_pipes.values():
            pipe.valve.step(dt)

        # 3. 物理计算、水量积分、状态判定
        snapshot = self._evaluate(dt)

        # 4. 发布
        self._publish(snapshot)
        return snapshot

    def advance(self, duration: float, dt: float = None) -> SystemSnapshot:
        """
        按固定步长推进指定仿真时长, 末步补齐余量

        Parameters:
            duration: 仿真时长 (s)
            dt: 步长 (s), 默认取仿真配置
        """
        dt = dt or self.cfg.simulation.dt
        snapshot = self._snapshot
        if duration <= 0 or dt <= 0:
            return snapshot

        steps = int(math.floor(duration / dt + 1e-9))
        for _ in range(steps):
            snapshot = self.step(dt)

        remainder = duration - steps * dt
        if remainder > 1e-9:
            snapshot = self.step(remainder)
        return snapshot

    def _evaluate(self, dt: float) -> SystemSnapshot:
        """由当前组件状态导出本步全部结果"""
        pump_state = self.pump.get_state()
        inlet_state = self.inlet_motor.get_state()
        valve_state = self.valve.get_state()

        # 伯努利出流: 总开关关闭时各支管阀位按0处理
        bernoulli = self.bernoulli_computer.compute(
            tank_level=self.tank_level,
            tank_height=self.cfg.tank.height,
            tank_radius=self.cfg.tank.radius,
            outlet_height=self.outlet_height,
            sub_pipes=self._sub_pipe_inputs(),
            pump_running=pump_state.is_running,
            pump_pressure=pump_state.pressure * PA_PER_BAR
        )

        # 出口总流量 (m³/h)
        outlet_flow = bernoulli.total_flow_rate_per_hour if self.flow_enabled else 0.0

        # 泵出水管线与压力变送器
        line = self.flow_calculator.calculate(
            pump_state.flow_rate, valve_state.flow_factor, self.bypass_open)
        pressure = self.pressure_calculator.calculate(
            self.tank_level, pump_state.pressure, line.pressure_loss, valve_state.position)

        # 水量平衡
        self._integrate_tank_level(inlet_state.flow_rate, outlet_flow, dt)

        # 系统状态
        self._update_system_state(outlet_flow > 0)

        previous_flow = self._outlet_flow
        self._outlet_flow = outlet_flow

        flow = FlowReading(
            current_flow=outlet_flow,
            previous_flow=previous_flow,
            flow_velocity=bernoulli.exit_velocity,
            is_flowing=outlet_flow > 0,
            line_flow=line.total_flow,
            bypass_flow=line.bypass_flow,
            pressure_loss=line.pressure_loss,
            animation_speed=line.animation_speed
        )

        return SystemSnapshot(
            pump=pump_state,
            inlet_motor=inlet_state,
            valve=valve_state,
            flow=flow,
            pressure=pressure,
            tank=self._tank_status(),
            sub_pipes=self._sub_pipe_statuses(bernoulli),
            bernoulli=bernoulli,
            bypass_open=self.bypass_open,
            flow_enabled=self.flow_enabled,
            system_state=self.system_state,
            elapsed_time=self.elapsed_time,
            tick=self.tick_count,
            is_loop_running=self.is_loop_running
        )

    def _sub_pipe_inputs(self) -> List[SubPipeInput]:
        return [
            SubPipeInput(
                id=pipe.id,
                radius=pipe.config.radius,
                valve_position=pipe.valve.position if self.flow_enabled else 0.0
            )
            for pipe in self.sub_pipes.values()
        ]

    def _integrate_tank_level(self, inlet_flow: float, outlet_flow: float, dt: float):
        """
        水量平衡积分

        Parameters:
            inlet_flow: 进水流量 (m³/h)
            outlet_flow: 出水流量 (m³/h)
            dt: 时间步长 (s)
        """
        tank = self.cfg.tank
        if dt <= 0 or tank.capacity <= 0:
            return

        hours = dt / HOUR_TO_SECONDS
        net_volume = (inlet_flow - outlet_flow) * hours
        level_change = net_volume / tank.capacity * 100.0 * tank.level_amplification

        self.tank_level = clamp(self.tank_level + level_change, tank.min_level, tank.max_level)

    def _update_system_state(self, is_flowing: bool):
        """汇总系统状态 (仅以出口流量判断有流)"""
        pump_status = self.pump.status

        if SystemState.FAULT in (pump_status, self.inlet_motor.status):
            state = SystemState.FAULT
        elif (self.pump.is_running or self.flow_enabled) and is_flowing:
            state = SystemState.RUNNING
        elif pump_status in (SystemState.STARTING, SystemState.STOPPING):
            state = pump_status
        else:
            state = SystemState.IDLE

        if state != self.system_state:
            logger.info(f"系统状态: {self.system_state.value} -> {state.value} "
                        f"(t={self.elapsed_time:.2f}s)")
        self.system_state = state

    def _tank_status(self) -> TankStatus:
        tank = self.cfg.tank
        return TankStatus(
            level=self.tank_level,
            capacity=tank.capacity,
            height=tank.height,
            radius=tank.radius,
            outlet_height=self.outlet_height,
            min_level=tank.min_level,
            max_level=tank.max_level
        )

    def _sub_pipe_statuses(self, bernoulli: BernoulliState) -> Tuple[SubPipeStatus, ...]:
        statuses = []
        for pipe in self.sub_pipes.values():
            result = bernoulli.get_sub_pipe(pipe.id)
            position = pipe.valve.position
            statuses.append(SubPipeStatus(
                id=pipe.id,
                name=pipe.config.name,
                radius=pipe.config.radius,
                valve_position=position,
                target_position=pipe.valve.target_position,
                is_actuating=pipe.valve.is_actuating,
                is_open=position > 0 and self.flow_enabled,
                flow_rate=result.flow_rate if self.flow_enabled else 0.0,
                velocity=result.velocity if self.flow_enabled else 0.0,
                reynolds_number=result.reynolds_number,
                flow_regime=result.flow_regime
            ))
        return tuple(statuses)

    def _publish(self, snapshot: SystemSnapshot):
        self._snapshot = snapshot
        self._events.publish(snapshot)

    # ==================================================================
    # 订阅
    # ==================================================================

    def subscribe(self, listener: Listener, selector: Selector = None) -> Subscription:
        """订阅快照; 指定选择器时仅在选中部分变化时回调"""
        return self._events.subscribe(listener, selector)

    def subscribe_section(self, name: str, listener: Listener) -> Subscription:
        """订阅快照的某一段 (如 'pump', 'tank', 'sub_pipes')"""
        if name not in SystemSnapshot.section_names():
            raise ValueError(f"未知快照段: {name}")
        return self._events.subscribe(listener, attrgetter(name))

    def unsubscribe(self, subscription) -> bool:
        """取消订阅"""
        return self._events.unsubscribe(subscription)

    # ==================================================================
    # 控制: 排水泵
    # ==================================================================

    def start_pump(self) -> bool:
        return self.pump.start()

    def stop_pump(self) -> bool:
        return self.pump.stop()

    def toggle_pump(self) -> bool:
        return self.pump.toggle()

    # ==================================================================
    # 控制: 主阀
    # ==================================================================

    def set_main_valve_position(self, position: float) -> float:
        return self.valve.set_position(position)

    def open_main_valve(self) -> float:
        return self.valve.open()

    def close_main_valve(self) -> float:
        return self.valve.close()

    # ==================================================================
    # 控制: 出流总开关
    # ==================================================================

    def enable_flow(self) -> bool:
        self.flow_enabled = True
        return self.flow_enabled

    def disable_flow(self) -> bool:
        self.flow_enabled = False
        return self.flow_enabled

    def toggle_flow(self) -> bool:
        self.flow_enabled = not self.flow_enabled
        return self.flow_enabled

    # ==================================================================
    # 控制: 支管
    # ==================================================================

    def _find_sub_pipe(self, pipe_id: str) -> Optional[SubPipe]:
        pipe = self.sub_pipes.get(pipe_id)
        if pipe is None:
            logger.warning(f"未知支管: {pipe_id}，命令已忽略")
        return pipe

    def set_sub_pipe_valve(self, pipe_id: str, position: float) -> Optional[float]:
        """设置支管阀位; 未知支管返回 None"""
        pipe = self._find_sub_pipe(pipe_id)
        if pipe is None:
            return None
        return pipe.valve.set_position(position)

    def open_sub_pipe(self, pipe_id: str) -> Optional[float]:
        pipe = self._find_sub_pipe(pipe_id)
        return pipe.valve.open() if pipe else None

    def close_sub_pipe(self, pipe_id: str) -> Optional[float]:
        pipe = self._find_sub_pipe(pipe_id)
        return pipe.valve.close() if pipe else None

    def toggle_sub_pipe(self, pipe_id: str) -> Optional[float]:
        pipe = self._find_sub_pipe(pipe_id)
        return pipe.valve.toggle() if pipe else None

    # ==================================================================
    # 控制: 进水电机
    # ==================================================================

    def start_inlet_motor(self) -> bool:
        return self.inlet_motor.start()

    def stop_inlet_motor(self) -> bool:
        return self.inlet_motor.stop()

    def toggle_inlet_motor(self) -> bool:
        return self.inlet_motor.toggle()

    # ==================================================================
    # 控制: 水箱与旁通
    # ==================================================================

    def set_tank_level(self, level: float) -> float:
        """直接设置液位 (测试/人工干预), 跳过积分但保持限幅; 非有限值忽略"""
        tank = self.cfg.tank
        if not math.isfinite(level):
            logger.warning(f"无效液位: {level}，命令已忽略")
            return self.tank_level
        self.tank_level = clamp(level, tank.min_level, tank.max_level)
        return self.tank_level

    def set_outlet_height(self, height: float) -> float:
        if not math.isfinite(height):
            logger.warning(f"无效出口高度: {height}，命令已忽略")
            return self.outlet_height
        self.outlet_height = clamp(height, 0.0, self.cfg.tank.height)
        return self.outlet_height

    def toggle_bypass(self) -> bool:
        self.bypass_open = not self.bypass_open
        return self.bypass_open

    def set_bypass(self, is_open: bool) -> bool:
        self.bypass_open = bool(is_open)
        return self.bypass_open

    # ==================================================================
    # 故障注入 (外部)
    # ==================================================================

    def _motor(self, component: str):
        return {'pump': self.pump, 'inlet_motor': self.inlet_motor}.get(component)

    def inject_fault(self, component: str = 'pump') -> bool:
        motor = self._motor(component)
        if motor is None:
            logger.warning(f"未知组件: {component}")
            return False
        motor.inject_fault()
        return True

    def clear_fault(self, component: str = 'pump') -> bool:
        motor = self._motor(component)
        return motor.clear_fault() if motor else False

    # ==================================================================
    # 重置
    # ==================================================================

    def reset(self) -> SystemSnapshot:
        """重置全部组件并立即发布初始快照"""
        self.pump.reset()
        self.inlet_motor.reset()
        self.valve.reset()
        for pipe in self.sub_pipes.values():
            pipe.valve.reset(pipe.config.initial_valve_position)
        self.flow_calculator.reset()
        self.pressure_calculator.reset()

        self._init_state()
        self._last_tick_time = None
        logger.info("仿真已重置")

        snapshot = self._evaluate(0.0)
        self._publish(snapshot)
        return snapshot

    # ==================================================================
    # 读取 (均取最近一次发布的快照)
    # ==================================================================

    @property
    def snapshot(self) -> SystemSnapshot:
        return self._snapshot

    def get_pump_status(self):
        return self._snapshot.pump

    def get_inlet_motor_status(self):
        return self._snapshot.inlet_motor

    def get_valve_position(self) -> float:
        return self._snapshot.valve.position

    def get_valve_status(self):
        return self._snapshot.valve

    def get_flow_value(self) -> float:
        """出口总流量 (m³/h)"""
        return self._snapshot.flow.current_flow

    def get_pressure_value(self) -> float:
        """压力变送器读数 (bar)"""
        return self._snapshot.pressure.current_pressure

    def get_tank_level(self) -> float:
        return self._snapshot.tank.level

    def get_system_state(self) -> SystemState:
        return self._snapshot.system_state

    def get_sub_pipes(self) -> Tuple[SubPipeStatus, ...]:
        return self._snapshot.sub_pipes

    def get_bernoulli_state(self) -> BernoulliState:
        return self._snapshot.bernoulli

    def get_full_state(self) -> SystemSnapshot:
        return self._snapshot
