"""
仿真运行模块
============

- snapshot: 对外发布的只读系统快照
- events: 快照订阅注册表
- engine: 仿真引擎 (组件编排、水量平衡、状态汇总)
- runner: 实时循环、批量仿真与预置场景
"""

from .snapshot import SystemSnapshot, TankStatus, SubPipeStatus, FlowReading
from .events import Subscription, SubscriptionRegistry
from .engine import SimulationEngine, SubPipe
from .runner import (
    SimulationRunner,
    SimulationResult,
    ScenarioType,
    apply_scenario,
    run_scenario_test
)

__all__ = [
    'SystemSnapshot',
    'TankStatus',
    'SubPipeStatus',
    'FlowReading',
    'Subscription',
    'SubscriptionRegistry',
    'SimulationEngine',
    'SubPipe',
    'SimulationRunner',
    'SimulationResult',
    'ScenarioType',
    'apply_scenario',
    'run_scenario_test'
]
