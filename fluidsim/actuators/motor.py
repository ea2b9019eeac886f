"""
电机执行器模型
==============

排水泵 / 进水电机仿真:
- 启停状态机 (IDLE → STARTING → RUNNING → STOPPING → IDLE)
- 缓入缓出的输出比例曲线
- 换向 (停机中再次启动 / 启动中停机) 保持输出连续
- 外部故障注入
"""

import logging
from dataclasses import dataclass

from ..config.settings import SystemState, PumpConfig, InletMotorConfig
from ..core.constants import SECOND_TO_MS
from ..core.numeric import clamp, ease_in_out, ease_in_out_inverse

logger = logging.getLogger('FluidSim.Actuator')

# 过渡进度判定容差 (浮点累加误差)
_PROGRESS_EPSILON = 1e-9


@dataclass(frozen=True)
class ActuatorState:
    """电机执行器状态"""
    name: str
    state: SystemState          # 运行状态
    is_running: bool            # 转动标志 (RUNNING 直至回到 IDLE)
    output_ratio: float         # 输出比例 (0~1)
    flow_rate: float            # 当前流量 (m³/h)
    max_flow_rate: float        # 额定流量 (m³/h)
    transition_progress: float  # 过渡进度 (0~1)
    is_fault: bool              # 故障标志


class ActuatorStateMachine:
    """
    通用启停状态机

    特性:
    - 启动/停机时长可配置
    - 输出比例按 ease_in_out 曲线变化
    - 记录过渡已用时间而非起始时间戳, 便于确定性回放
    """

    def __init__(self, name: str, max_flow_rate: float,
                 startup_duration_ms: float, shutdown_duration_ms: float):
        self.name = name

        # 额定参数
        self.max_flow_rate = max_flow_rate
        self.startup_duration_ms = startup_duration_ms
        self.shutdown_duration_ms = shutdown_duration_ms

        # 状态
        self.status = SystemState.IDLE
        self.output_ratio = 0.0
        self.transition_elapsed_ms = 0.0
        self.is_running = False

    # ------------------------------------------------------------------
    # 命令
    # ------------------------------------------------------------------

    def start(self) -> bool:
        """启动; 仅在 IDLE 或 STOPPING (换向) 时有效"""
        if self.status == SystemState.IDLE:
            self.transition_elapsed_ms = 0.0
        elif self.status == SystemState.STOPPING:
            # 从当前输出比例继续上升
            progress = ease_in_out_inverse(self.output_ratio)
            self.transition_elapsed_ms = progress * max(self.startup_duration_ms, 0.0)
        else:
            logger.debug(f"{self.name}: 当前状态 {self.status.value}，忽略启动命令")
            return False

        logger.info(f"{self.name}: {self.status.value} -> starting")
        self.status = SystemState.STARTING
        return True

    def stop(self) -> bool:
        """停机; 仅在 RUNNING 或 STARTING (换向) 时有效"""
        if self.status == SystemState.RUNNING:
            self.transition_elapsed_ms = 0.0
        elif self.status == SystemState.STARTING:
            progress = ease_in_out_inverse(1.0 - self.output_ratio)
            self.transition_elapsed_ms = progress * max(self.shutdown_duration_ms, 0.0)
        else:
            logger.debug(f"{self.name}: 当前状态 {self.status.value}，忽略停机命令")
            return False

        logger.info(f"{self.name}: {self.status.value} -> stopping")
        self.status = SystemState.STOPPING
        return True

    def toggle(self) -> bool:
        """切换启停"""
        if self.status in (SystemState.RUNNING, SystemState.STARTING):
            return self.stop()
        return self.start()

    # ------------------------------------------------------------------
    # 推进
    # ------------------------------------------------------------------

    @staticmethod
    def _progress(elapsed_ms: float, duration_ms: float) -> float:
        if duration_ms <= 0:
            return 1.0
        progress = clamp(elapsed_ms / duration_ms, 0.0, 1.0)
        if progress >= 1.0 - _PROGRESS_EPSILON:
            return 1.0
        return progress

    def step(self, dt: float) -> ActuatorState:
        """
        推进一个时间步

        Parameters:
            dt: 时间步长 (s)

        Returns:
            ActuatorState: 当前状态
        """
        dt = max(dt, 0.0)

        if self.status == SystemState.STARTING:
            self.transition_elapsed_ms += dt * SECOND_TO_MS
            progress = self._progress(self.transition_elapsed_ms, self.startup_duration_ms)
            self.output_ratio = ease_in_out(progress)

            if progress >= 1.0:
                self.status = SystemState.RUNNING
                self.is_running = True
                self.output_ratio = 1.0
                logger.info(f"{self.name}: starting -> running")

        elif self.status == SystemState.STOPPING:
            self.transition_elapsed_ms += dt * SECOND_TO_MS
            progress = self._progress(self.transition_elapsed_ms, self.shutdown_duration_ms)
            self.output_ratio = 1.0 - ease_in_out(progress)

            if progress >= 1.0:
                self.status = SystemState.IDLE
                self.is_running = False
                self.output_ratio = 0.0
                logger.info(f"{self.name}: stopping -> idle")

        elif self.status == SystemState.RUNNING:
            self.output_ratio = 1.0
            self.is_running = True

        else:
            # IDLE / FAULT
            self.output_ratio = 0.0
            self.is_running = False

        return self.get_state()

    # ------------------------------------------------------------------
    # 输出
    # ------------------------------------------------------------------

    @property
    def flow_rate(self) -> float:
        """当前流量 (m³/h)"""
        return self.max_flow_rate * self.output_ratio

    @property
    def transition_progress(self) -> float:
        """当前过渡进度"""
        if self.status == SystemState.STARTING:
            return self._progress(self.transition_elapsed_ms, self.startup_duration_ms)
        if self.status == SystemState.STOPPING:
            return self._progress(self.transition_elapsed_ms, self.shutdown_duration_ms)
        return 1.0 if self.status == SystemState.RUNNING else 0.0

    def get_state(self) -> ActuatorState:
        """获取当前状态"""
        return ActuatorState(
            name=self.name,
            state=self.status,
            is_running=self.is_running,
            output_ratio=self.output_ratio,
            flow_rate=self.flow_rate,
            max_flow_rate=self.max_flow_rate,
            transition_progress=self.transition_progress,
            is_fault=self.status == SystemState.FAULT
        )

    # ------------------------------------------------------------------
    # 故障与重置
    # ------------------------------------------------------------------

    def inject_fault(self):
        """注入故障 (仅供外部调用)"""
        logger.warning(f"{self.name}: 注入故障 (原状态 {self.status.value})")
        self.status = SystemState.FAULT
        self.output_ratio = 0.0
        self.is_running = False
        self.transition_elapsed_ms = 0.0

    def clear_fault(self) -> bool:
        """清除故障，回到 IDLE"""
        if self.status != SystemState.FAULT:
            return False
        logger.info(f"{self.name}: 故障已清除")
        self.status = SystemState.IDLE
        return True

    def reset(self):
        """重置"""
        self.status = SystemState.IDLE
        self.output_ratio = 0.0
        self.transition_elapsed_ms = 0.0
        self.is_running = False


@dataclass(frozen=True)
class PumpState(ActuatorState):
    """排水泵状态"""
    pressure: float = 0.0       # 增压 (bar)


@dataclass(frozen=True)
class InletMotorState(ActuatorState):
    """进水电机状态"""
    fill_rate: float = 0.0      # 标称补水速率 (%/s)


class PumpActuator(ActuatorStateMachine):
    """
    排水泵

    增压按输出比例缩放，仅用于管线压力变送器与伯努利出流辅助
    """

    def __init__(self, config: PumpConfig = None, name: str = 'pump'):
        cfg = config or PumpConfig()
        super().__init__(name, cfg.max_flow_rate,
                         cfg.startup_duration_ms, cfg.shutdown_duration_ms)
        self.pressure_contribution = cfg.pressure_contribution

    @property
    def pressure(self) -> float:
        """当前增压 (bar)"""
        return self.pressure_contribution * self.output_ratio

    def get_state(self) -> PumpState:
        base = super().get_state()
        return PumpState(**vars(base), pressure=self.pressure)


class InletMotorActuator(ActuatorStateMachine):
    """进水电机"""

    def __init__(self, config: InletMotorConfig = None, name: str = 'inlet_motor'):
        cfg = config or InletMotorConfig()
        super().__init__(name, cfg.max_flow_rate,
                         cfg.startup_duration_ms, cfg.shutdown_duration_ms)
        self.fill_rate = cfg.fill_rate

    def get_state(self) -> InletMotorState:
        base = super().get_state()
        return InletMotorState(**vars(base), fill_rate=self.fill_rate)
