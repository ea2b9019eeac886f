"""
配置验证 (Configuration Validation)
===================================

验证配置的完整性、一致性和合理性。
验证结果只做报告，不抛出异常；由仿真引擎在构造时写入日志。
"""

from dataclasses import dataclass, field
from typing import List, Optional
from enum import Enum, auto

from .settings import Config


class ValidationSeverity(Enum):
    """验证结果严重程度"""
    INFO = auto()       # 信息
    WARNING = auto()    # 警告
    ERROR = auto()      # 错误


@dataclass
class ValidationResult:
    """单项验证结果"""
    is_valid: bool                              # 是否通过验证
    severity: ValidationSeverity                # 严重程度
    message: str                                # 消息
    field_name: Optional[str] = None            # 相关字段名
    suggestion: Optional[str] = None            # 修复建议


@dataclass
class ValidationReport:
    """验证报告"""
    results: List[ValidationResult] = field(default_factory=list)

    @property
    def is_valid(self) -> bool:
        """不含错误即视为有效"""
        return not self.errors

    @property
    def errors(self) -> List[ValidationResult]:
        return [r for r in self.results
                if not r.is_valid and r.severity == ValidationSeverity.ERROR]

    @property
    def warnings(self) -> List[ValidationResult]:
        return [r for r in self.results
                if not r.is_valid and r.severity == ValidationSeverity.WARNING]


class ConfigValidator:
    """
    配置验证器

    提供通用的验证规则，并对整套配置执行检查
    """

    def __init__(self, config: Config = None):
        self.config = config or Config()
        self.report = ValidationReport()

    @staticmethod
    def validate_positive(value: float, name: str) -> ValidationResult:
        """验证正数"""
        if value <= 0:
            return ValidationResult(
                is_valid=False,
                severity=ValidationSeverity.ERROR,
                message=f"{name} 必须为正数，当前值: {value}",
                field_name=name,
                suggestion=f"将 {name} 设置为大于0的值"
            )
        return ValidationResult(is_valid=True, severity=ValidationSeverity.INFO, message="OK")

    @staticmethod
    def validate_non_negative(value: float, name: str) -> ValidationResult:
        """验证非负数 (0 表示瞬时完成)"""
        if value < 0:
            return ValidationResult(
                is_valid=False,
                severity=ValidationSeverity.ERROR,
                message=f"{name} 不能为负数，当前值: {value}",
                field_name=name,
                suggestion=f"将 {name} 设置为不小于0的值"
            )
        if value == 0:
            return ValidationResult(
                is_valid=False,
                severity=ValidationSeverity.WARNING,
                message=f"{name} 为0，状态切换将在下一步立即完成",
                field_name=name
            )
        return ValidationResult(is_valid=True, severity=ValidationSeverity.INFO, message="OK")

    @staticmethod
    def validate_range(value: float, min_val: float, max_val: float,
                       name: str) -> ValidationResult:
        """验证范围"""
        if value < min_val or value > max_val:
            return ValidationResult(
                is_valid=False,
                severity=ValidationSeverity.WARNING,
                message=f"{name} 超出范围 [{min_val}, {max_val}]，当前值: {value}",
                field_name=name,
                suggestion=f"将 {name} 设置在 [{min_val}, {max_val}] 范围内"
            )
        return ValidationResult(is_valid=True, severity=ValidationSeverity.INFO, message="OK")

    @staticmethod
    def validate_less_than(value1: float, value2: float,
                           name1: str, name2: str) -> ValidationResult:
        """验证小于关系"""
        if value1 >= value2:
            return ValidationResult(
                is_valid=False,
                severity=ValidationSeverity.ERROR,
                message=f"{name1} ({value1}) 必须小于 {name2} ({value2})",
                field_name=name1,
                suggestion=f"调整 {name1} 使其小于 {name2}"
            )
        return ValidationResult(is_valid=True, severity=ValidationSeverity.INFO, message="OK")

    def validate_all(self) -> ValidationReport:
        """执行所有验证"""
        self.report = ValidationReport()

        self._validate_actuators()
        self._validate_valve()
        self._validate_tank()
        self._validate_pipes()

        return self.report

    def _add(self, result: ValidationResult):
        self.report.results.append(result)

    def _validate_actuators(self):
        """验证泵与进水电机参数"""
        for label, cfg in (('pump', self.config.pump),
                           ('inlet_motor', self.config.inlet_motor)):
            self._add(self.validate_positive(cfg.max_flow_rate, f"{label}.max_flow_rate"))
            self._add(self.validate_non_negative(
                cfg.startup_duration_ms, f"{label}.startup_duration_ms"))
            self._add(self.validate_non_negative(
                cfg.shutdown_duration_ms, f"{label}.shutdown_duration_ms"))

    def _validate_valve(self):
        """验证主阀行程"""
        valve = self.config.valve
        self._add(self.validate_less_than(
            valve.min_position, valve.max_position,
            'valve.min_position', 'valve.max_position'))
        self._add(self.validate_positive(valve.actuation_speed, 'valve.actuation_speed'))

    def _validate_tank(self):
        """验证水箱几何与液位逻辑"""
        tank = self.config.tank
        self._add(self.validate_positive(tank.capacity, 'tank.capacity'))
        self._add(self.validate_positive(tank.height, 'tank.height'))
        self._add(self.validate_positive(tank.radius, 'tank.radius'))

        # 最低液位 < 最高液位, 且均在 [0, 100]
        self._add(self.validate_less_than(
            tank.min_level, tank.max_level, 'tank.min_level', 'tank.max_level'))
        self._add(self.validate_range(tank.min_level, 0.0, 100.0, 'tank.min_level'))
        self._add(self.validate_range(tank.max_level, 0.0, 100.0, 'tank.max_level'))
        self._add(self.validate_range(
            tank.initial_level, tank.min_level, tank.max_level, 'tank.initial_level'))
        self._add(self.validate_range(
            tank.outlet_height, 0.0, tank.height, 'tank.outlet_height'))

    def _validate_pipes(self):
        """验证主管与支管"""
        self._add(self.validate_positive(self.config.main_pipe.radius, 'main_pipe.radius'))

        seen = set()
        for pipe in self.config.sub_pipes:
            self._add(self.validate_positive(pipe.radius, f"{pipe.id}.radius"))
            self._add(self.validate_positive(pipe.actuation_speed, f"{pipe.id}.actuation_speed"))
            if pipe.id in seen:
                self._add(ValidationResult(
                    is_valid=False,
                    severity=ValidationSeverity.ERROR,
                    message=f"支管编号重复: {pipe.id}",
                    field_name='sub_pipes',
                    suggestion="为每条支管设置唯一编号"
                ))
            seen.add(pipe.id)
