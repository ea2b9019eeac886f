"""
FluidSim 水箱-泵-阀门系统仿真 (Tank / Pump / Valve Simulation Engine)
====================================================================

由储水箱、进水电机、排水泵、主阀及三路出口支管组成的小型封闭管网,
按时间步推进并发布完整导出的系统快照 (流量、压力、流速、液位)。

模块结构:
- core: 物理常数与数值工具
- config: 配置参数与验证
- actuators: 执行器仿真 (电机启停状态机、阀门)
- physics: 物理计算 (伯努利/托里拆利、管线流量与压力)
- simulation: 仿真引擎、快照订阅与运行器
- cli: 命令行入口
"""

__version__ = "1.0.0"
__author__ = "FluidSim Team"

from .config.settings import Config, SystemState
from .physics.bernoulli import BernoulliState, BernoulliStateComputer
from .simulation.engine import SimulationEngine
from .simulation.snapshot import SystemSnapshot
from .simulation.runner import (
    SimulationRunner,
    SimulationResult,
    ScenarioType,
    run_scenario_test
)

__all__ = [
    'Config',
    'SystemState',
    'BernoulliState',
    'BernoulliStateComputer',
    'SimulationEngine',
    'SystemSnapshot',
    'SimulationRunner',
    'SimulationResult',
    'ScenarioType',
    'run_scenario_test'
]
