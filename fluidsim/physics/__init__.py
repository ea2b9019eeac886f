"""
物理模型模块
============

- calculators: 伯努利/托里拆利/达西/雷诺数纯函数
- bernoulli: 每步伯努利导出状态
- line: 泵出水管线流量与压力
"""

from .calculators import (
    FlowRegime,
    exit_velocity,
    exit_velocity_with_pump,
    pressure_head,
    flow_rate,
    flow_rate_per_hour,
    pressure_at,
    pa_to_bar,
    reynolds_number,
    flow_regime,
    friction_head_loss,
    drain_time,
    tank_volume,
    percentage_to_height
)
from .bernoulli import (
    SubPipeInput,
    SubPipeFlow,
    BernoulliState,
    BernoulliStateComputer,
    compute_bernoulli_state
)
from .line import (
    FlowCalculator,
    LineFlowState,
    PressureCalculator,
    PressureReading
)

__all__ = [
    'FlowRegime',
    'exit_velocity',
    'exit_velocity_with_pump',
    'pressure_head',
    'flow_rate',
    'flow_rate_per_hour',
    'pressure_at',
    'pa_to_bar',
    'reynolds_number',
    'flow_regime',
    'friction_head_loss',
    'drain_time',
    'tank_volume',
    'percentage_to_height',
    'SubPipeInput',
    'SubPipeFlow',
    'BernoulliState',
    'BernoulliStateComputer',
    'compute_bernoulli_state',
    'FlowCalculator',
    'LineFlowState',
    'PressureCalculator',
    'PressureReading'
]
