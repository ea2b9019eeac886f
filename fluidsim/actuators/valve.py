"""
阀门执行器模型
==============

主阀与支管阀的电动执行器仿真:
- 目标位置跟踪
- 动作速率限制 (不超调)
- 等百分比流量特性
"""

import logging
import numpy as np
from dataclasses import dataclass

from ..config.settings import ValveConfig

logger = logging.getLogger('FluidSim.Actuator')

# 等百分比特性指数
FLOW_CHARACTERISTIC_EXPONENT = 1.5


def equal_percentage_factor(position: float, max_position: float = 100.0) -> float:
    """
    等百分比流量系数

    flow_factor = (position / max) ^ 1.5
    """
    if max_position <= 0:
        return 0.0
    normalized = float(np.clip(position / max_position, 0.0, 1.0))
    return normalized ** FLOW_CHARACTERISTIC_EXPONENT


@dataclass(frozen=True)
class ValveState:
    """阀门执行器状态"""
    name: str
    position: float            # 当前位置 (%)
    target_position: float     # 目标位置 (%)
    is_actuating: bool         # 动作中
    flow_factor: float         # 流量系数 (0~1)
    is_open: bool              # 全开
    is_closed: bool            # 全关
    is_partially_open: bool    # 部分开启


class ValveActuator:
    """
    阀门电动执行器仿真

    特性:
    - 以恒定速率向目标位置移动
    - 剩余行程不足一步时直接到位
    - 全开/全关判定带容差，避免浮点抖动
    """

    def __init__(self, name: str = 'valve', min_position: float = 0.0,
                 max_position: float = 100.0, actuation_speed: float = 10.0,
                 tolerance: float = 0.1, initial_position: float = None):
        self.name = name
        self.min_position = min_position
        self.max_position = max_position
        self.actuation_speed = actuation_speed  # 动作速率 (%/s)
        self.tolerance = tolerance

        # 状态
        start = min_position if initial_position is None else initial_position
        self.position = float(np.clip(start, min_position, max_position))
        self.target_position = self.position
        self.is_actuating = False

    @classmethod
    def from_config(cls, config: ValveConfig = None, name: str = 'main_valve') -> 'ValveActuator':
        """由配置创建"""
        cfg = config or ValveConfig()
        return cls(
            name=name,
            min_position=cfg.min_position,
            max_position=cfg.max_position,
            actuation_speed=cfg.actuation_speed,
            tolerance=cfg.tolerance
        )

    def set_position(self, position: float) -> float:
        """
        设置目标位置

        Parameters:
            position: 目标位置 (%)，超出行程时限幅，非有限值忽略

        Returns:
            限幅后的目标位置
        """
        if not np.isfinite(position):
            logger.warning(f"{self.name}: 无效目标位置 {position}，命令已忽略")
            return self.target_position
        self.target_position = float(np.clip(position, self.min_position, self.max_position))
        self.is_actuating = self.target_position != self.position
        return self.target_position

    def open(self) -> float:
        """全开"""
        return self.set_position(self.max_position)

    def close(self) -> float:
        """全关"""
        return self.set_position(self.min_position)

    def toggle(self) -> float:
        """目标为全关时打开，否则关闭"""
        if self.target_position <= self.min_position:
            return self.open()
        return self.close()

    def step(self, dt: float) -> ValveState:
        """
        推进一个时间步

        Parameters:
            dt: 时间步长 (s)

        Returns:
            ValveState: 当前状态
        """
        if self.is_actuating:
            max_change = self.actuation_speed * max(dt, 0.0)
            diff = self.target_position - self.position

            if abs(diff) <= max_change:
                self.position = self.target_position
                self.is_actuating = False
                logger.debug(f"{self.name}: 到达目标位置 {self.position:.1f}%")
            else:
                self.position += np.sign(diff) * max_change
                self.position = float(np.clip(self.position, self.min_position, self.max_position))

        return self.get_state()

    @property
    def flow_factor(self) -> float:
        """流量系数"""
        return equal_percentage_factor(self.position, self.max_position)

    @property
    def is_open(self) -> bool:
        return self.position >= self.max_position - self.tolerance

    @property
    def is_closed(self) -> bool:
        return self.position <= self.min_position + self.tolerance

    @property
    def is_partially_open(self) -> bool:
        return not self.is_open and not self.is_closed

    def get_state(self) -> ValveState:
        """获取当前状态"""
        return ValveState(
            name=self.name,
            position=self.position,
            target_position=self.target_position,
            is_actuating=self.is_actuating,
            flow_factor=self.flow_factor,
            is_open=self.is_open,
            is_closed=self.is_closed,
            is_partially_open=self.is_partially_open
        )

    def reset(self, position: float = None):
        """重置执行器 (默认全关)"""
        start = self.min_position if position is None else position
        self.position = float(np.clip(start, self.min_position, self.max_position))
        self.target_position = self.position
        self.is_actuating = False
