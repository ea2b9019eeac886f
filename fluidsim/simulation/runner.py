"""
仿真运行器
==========

- 实时循环: 按目标刷新率驱动 engine.tick()
- 批量仿真: 固定步长推进, 记录时间序列与统计指标
- 预置场景: 放空 / 补水 / 泵辅助出流 / 启停循环
"""

import logging
import time
import numpy as np
from dataclasses import dataclass, field
from enum import Enum
from typing import Callable, Dict, List, Optional, Tuple

from ..config.settings import Config, SystemState
from .engine import SimulationEngine
from .snapshot import SystemSnapshot

logger = logging.getLogger('FluidSim.Runner')


class ScenarioType(Enum):
    """预置场景"""
    DRAIN = 'drain'                 # 全部支管打开放空
    FILL = 'fill'                   # 进水电机补水
    PUMP_ASSIST = 'pump_assist'     # 泵辅助出流
    BALANCE = 'balance'             # 补水与出流并行


@dataclass
class SimulationResult:
    """仿真结果"""
    success: bool
    duration: float                 # 实际耗时 (s)
    steps: int
    simulated_time: float           # 仿真时长 (s)

    # 时间序列
    time_series: np.ndarray
    series: Dict[str, np.ndarray]

    # 状态变化历史
    state_history: List[Tuple[float, SystemState]]
    final_snapshot: SystemSnapshot

    # 统计指标
    metrics: Dict[str, float]

    # 错误
    errors: List[str] = field(default_factory=list)

    def to_dict(self) -> Dict:
        """导出摘要 (不含时间序列)"""
        return {
            'success': self.success,
            'duration': self.duration,
            'steps': self.steps,
            'simulated_time': self.simulated_time,
            'state_history': [(t, s.value) for t, s in self.state_history],
            'metrics': self.metrics,
            'errors': self.errors,
            'final_state': self.final_snapshot.to_dict()
        }


# 记录的时间序列及其取值方式
_SERIES: Dict[str, Callable[[SystemSnapshot], float]] = {
    'tank_level': lambda s: s.tank.level,
    'outlet_flow': lambda s: s.flow.current_flow,
    'inlet_flow': lambda s: s.inlet_motor.flow_rate,
    'pump_flow': lambda s: s.pump.flow_rate,
    'exit_velocity': lambda s: s.bernoulli.exit_velocity,
    'pressure': lambda s: s.pressure.current_pressure,
    'valve_position': lambda s: s.valve.position,
}


class SimulationRunner:
    """
    仿真运行器

    使用:
        runner = SimulationRunner()
        runner.engine.enable_flow()
        result = runner.run_simulated(60.0)
    """

    def __init__(self, engine: SimulationEngine = None, config: Config = None,
                 sleep: Callable[[float], None] = time.sleep):
        self.engine = engine or SimulationEngine(config)
        self.cfg = self.engine.cfg
        self._sleep = sleep
        self._running = False

    @property
    def is_running(self) -> bool:
        return self._running

    # ==================================================================
    # 实时循环
    # ==================================================================

    def start(self, duration: float = None, max_ticks: int = None) -> SystemSnapshot:
        """
        阻塞运行实时循环, 直到 stop() 被调用或达到时长/步数上限

        Parameters:
            duration: 墙钟运行时长上限 (s)
            max_ticks: 步数上限

        Returns:
            最后一次发布的快照
        """
        if self._running:
            logger.debug("实时循环已在运行，忽略启动命令")
            return self.engine.snapshot

        self._running = True
        self.engine.is_loop_running = True
        # 暂停期间的时间不计入
        self.engine.resume_clock()

        frame = self.cfg.simulation.frame_interval
        started = time.monotonic()
        ticks = 0
        logger.info(f"实时循环启动: {self.cfg.simulation.target_rate_hz:.0f} Hz")

        try:
            while self._running:
                frame_start = time.monotonic()
                self.engine.tick()
                ticks += 1

                if max_ticks is not None and ticks >= max_ticks:
                    break
                if duration is not None and time.monotonic() - started >= duration:
                    break

                remaining = frame - (time.monotonic() - frame_start)
                if remaining > 0:
                    self._sleep(remaining)
        finally:
            self._running = False
            self.engine.is_loop_running = False
            logger.info(f"实时循环停止: {ticks} 步")

        return self.engine.snapshot

    def stop(self):
        """停止实时循环; 正在进行的过渡保持不变"""
        self._running = False

    # ==================================================================
    # 批量仿真
    # ==================================================================

    def run_simulated(self, duration: float, dt: float = None,
                      on_step: Callable[[SystemSnapshot], None] = None) -> SimulationResult:
        """
        固定步长批量仿真

        Parameters:
            duration: 仿真时长 (s)
            dt: 步长 (s), 默认取仿真配置
            on_step: 每步回调

        Returns:
            SimulationResult: 仿真结果
        """
        dt = dt or self.cfg.simulation.dt
        wall_start = time.time()

        start_time = self.engine.elapsed_time
        snapshot = self.engine.snapshot
        times: List[float] = []
        records: Dict[str, List[float]] = {name: [] for name in _SERIES}
        state_history: List[Tuple[float, SystemState]] = [(0.0, snapshot.system_state)]
        errors: List[str] = []

        steps = int(np.floor(duration / dt + 1e-9)) if dt > 0 and duration > 0 else 0
        log_every = max(1, int(round(self.cfg.simulation.log_interval / dt))) if dt > 0 else 1

        try:
            for i in range(steps):
                snapshot = self.engine.step(dt)
                t = snapshot.elapsed_time - start_time

                times.append(t)
                for name, getter in _SERIES.items():
                    records[name].append(getter(snapshot))

                if snapshot.system_state != state_history[-1][1]:
                    state_history.append((t, snapshot.system_state))

                if on_step is not None:
                    on_step(snapshot)

                if (i + 1) % log_every == 0:
                    self._log_state(t, snapshot)

        except Exception as e:
            errors.append(f"Simulation error at t={self.engine.elapsed_time:.3f}: {str(e)}")
            logger.error(errors[-1])

        series = {name: np.asarray(values, dtype=float) for name, values in records.items()}

        return SimulationResult(
            success=len(errors) == 0,
            duration=time.time() - wall_start,
            steps=len(times),
            simulated_time=times[-1] if times else 0.0,
            time_series=np.asarray(times, dtype=float),
            series=series,
            state_history=state_history,
            final_snapshot=snapshot,
            metrics=self._compute_metrics(series, dt),
            errors=errors
        )

    def _log_state(self, t: float, snapshot: SystemSnapshot):
        """记录状态日志"""
        logger.info(f"[{t:.1f}s] "
                    f"液位: {snapshot.tank.level:.2f}%, "
                    f"出流: {snapshot.flow.current_flow:.2f}m³/h, "
                    f"流速: {snapshot.bernoulli.exit_velocity:.2f}m/s, "
                    f"状态: {snapshot.system_state.value}")

    @staticmethod
    def _compute_metrics(series: Dict[str, np.ndarray], dt: float) -> Dict[str, float]:
        """计算统计指标"""
        levels = series['tank_level']
        if levels.size == 0:
            return {}

        metrics = {}

        # 液位指标
        metrics['level_mean'] = float(np.mean(levels))
        metrics['level_std'] = float(np.std(levels))
        metrics['level_min'] = float(np.min(levels))
        metrics['level_max'] = float(np.max(levels))
        metrics['level_change'] = float(levels[-1] - levels[0])

        # 流量指标
        outlet = series['outlet_flow']
        inlet = series['inlet_flow']
        metrics['flow_mean'] = float(np.mean(outlet))
        metrics['flow_max'] = float(np.max(outlet))
        metrics['inlet_flow_mean'] = float(np.mean(inlet))

        # 累计水量 (m³)
        hours = dt / 3600.0
        metrics['outlet_volume'] = float(np.sum(outlet) * hours)
        metrics['inlet_volume'] = float(np.sum(inlet) * hours)

        # 出口流速
        metrics['exit_velocity_max'] = float(np.max(series['exit_velocity']))

        return metrics


def apply_scenario(engine: SimulationEngine, scenario: ScenarioType):
    """对引擎下达场景对应的控制命令"""
    if scenario == ScenarioType.DRAIN:
        engine.enable_flow()
        for pipe_id in engine.sub_pipes:
            engine.open_sub_pipe(pipe_id)

    elif scenario == ScenarioType.FILL:
        engine.start_inlet_motor()

    elif scenario == ScenarioType.PUMP_ASSIST:
        engine.start_pump()
        engine.open_main_valve()
        engine.enable_flow()
        first = next(iter(engine.sub_pipes), None)
        if first is not None:
            engine.open_sub_pipe(first)

    elif scenario == ScenarioType.BALANCE:
        engine.start_inlet_motor()
        engine.enable_flow()
        first = next(iter(engine.sub_pipes), None)
        if first is not None:
            engine.set_sub_pipe_valve(first, 50.0)


def run_scenario_test(scenario: ScenarioType, duration: float = 60.0,
                      dt: float = None, config: Config = None,
                      initial_level: Optional[float] = None) -> SimulationResult:
    """
    运行场景测试

    Parameters:
        scenario: 场景类型
        duration: 仿真时长 (s)
        dt: 步长 (s)
        config: 配置
        initial_level: 初始液位 (%)

    Returns:
        SimulationResult: 测试结果
    """
    runner = SimulationRunner(config=config)
    if initial_level is not None:
        runner.engine.set_tank_level(initial_level)

    logger.info(f"场景 {scenario.value}: 仿真 {duration}s")
    apply_scenario(runner.engine, scenario)

    return runner.run_simulated(duration, dt)
