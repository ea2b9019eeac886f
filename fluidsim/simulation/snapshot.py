"""
系统快照
========

仿真引擎每步对外发布的只读状态。
全部为 frozen dataclass，发布后不可修改，下一步整体替换。
"""

from dataclasses import dataclass, fields, asdict
from enum import Enum
from typing import Any, Dict, Optional, Tuple

from ..actuators.motor import PumpState, InletMotorState
from ..actuators.valve import ValveState
from ..config.settings import SystemState
from ..physics.bernoulli import BernoulliState
from ..physics.calculators import FlowRegime
from ..physics.line import PressureReading


@dataclass(frozen=True)
class TankStatus:
    """水箱状态"""
    level: float               # 液位 (%)
    capacity: float            # 容积 (m³)
    height: float              # 高度 (m)
    radius: float              # 半径 (m)
    outlet_height: float       # 出口高度 (m)
    min_level: float
    max_level: float


@dataclass(frozen=True)
class SubPipeStatus:
    """支管状态"""
    id: str
    name: str
    radius: float              # 半径 (m)
    valve_position: float      # 阀位 (%)
    target_position: float     # 目标阀位 (%)
    is_actuating: bool
    is_open: bool              # 阀位 > 0 且总开关打开
    flow_rate: float           # 流量 (m³/s)
    velocity: float            # 流速 (m/s)
    reynolds_number: float
    flow_regime: FlowRegime


@dataclass(frozen=True)
class FlowReading:
    """流量计读数"""
    current_flow: float        # 出口总流量 (m³/h)
    previous_flow: float
    flow_velocity: float       # 出口流速 (m/s)
    is_flowing: bool
    line_flow: float           # 泵出水管线流量 (m³/h)
    bypass_flow: float         # 旁通流量 (m³/h)
    pressure_loss: float       # 管线压损 (bar)
    animation_speed: float


@dataclass(frozen=True)
class SystemSnapshot:
    """系统快照"""
    pump: PumpState
    inlet_motor: InletMotorState
    valve: ValveState
    flow: FlowReading
    pressure: PressureReading
    tank: TankStatus
    sub_pipes: Tuple[SubPipeStatus, ...]
    bernoulli: BernoulliState
    bypass_open: bool = False
    flow_enabled: bool = False
    system_state: SystemState = SystemState.IDLE
    elapsed_time: float = 0.0          # 仿真累计时间 (s)
    tick: int = 0                      # 步数
    is_loop_running: bool = False

    @classmethod
    def section_names(cls) -> Tuple[str, ...]:
        """可单独订阅的快照段"""
        return tuple(f.name for f in fields(cls))

    def section(self, name: str) -> Any:
        """按名称取快照段"""
        if name not in self.section_names():
            raise ValueError(f"未知快照段: {name}")
        return getattr(self, name)

    def get_sub_pipe(self, pipe_id: str) -> Optional[SubPipeStatus]:
        for pipe in self.sub_pipes:
            if pipe.id == pipe_id:
                return pipe
        return None

    def to_dict(self) -> Dict[str, Any]:
        """导出为可 JSON 序列化的字典 (枚举取值)"""
        return _plain(asdict(self))


def _plain(value: Any) -> Any:
    if isinstance(value, Enum):
        return value.value
    if isinstance(value, dict):
        return {k: _plain(v) for k, v in value.items()}
    if isinstance(value, (list, tuple)):
        return [_plain(v) for v in value]
    return value
