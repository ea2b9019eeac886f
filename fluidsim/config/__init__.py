"""
配置模块
========

模块:
- settings: 组件与仿真配置参数
- validation: 配置验证器
"""
from .settings import (
    Config,
    SystemState,
    PumpConfig,
    InletMotorConfig,
    ValveConfig,
    TankConfig,
    SubPipeConfig,
    MainPipeConfig,
    FlowConfig,
    PressureConfig,
    SimulationConfig
)

from .validation import (
    ConfigValidator,
    ValidationReport,
    ValidationResult,
    ValidationSeverity
)

__all__ = [
    'Config',
    'SystemState',
    'PumpConfig',
    'InletMotorConfig',
    'ValveConfig',
    'TankConfig',
    'SubPipeConfig',
    'MainPipeConfig',
    'FlowConfig',
    'PressureConfig',
    'SimulationConfig',
    'ConfigValidator',
    'ValidationReport',
    'ValidationResult',
    'ValidationSeverity'
]
