"""
执行器仿真模块
==============

仿真各类执行器的动作特性:
- 启停过渡 (排水泵、进水电机)
- 动作速率限制 (主阀、支管阀)
- 故障注入
"""

from .motor import (
    ActuatorState,
    ActuatorStateMachine,
    PumpState,
    PumpActuator,
    InletMotorState,
    InletMotorActuator
)
from .valve import ValveActuator, ValveState, equal_percentage_factor

__all__ = [
    'ActuatorState',
    'ActuatorStateMachine',
    'PumpState',
    'PumpActuator',
    'InletMotorState',
    'InletMotorActuator',
    'ValveActuator',
    'ValveState',
    'equal_percentage_factor'
]
