"""
配置模块测试
"""

import pytest

from fluidsim.config import (
    Config,
    SystemState,
    TankConfig,
    PumpConfig,
    SubPipeConfig,
    ConfigValidator,
    ValidationSeverity
)


class TestConfig:
    """配置测试"""

    def test_defaults(self):
        """测试默认值"""
        config = Config()
        assert config.pump.max_flow_rate == 100.0
        assert config.pump.startup_duration_ms == 2000.0
        assert config.inlet_motor.max_flow_rate == 80.0
        assert config.valve.actuation_speed == 10.0
        assert config.tank.initial_level == 50.0
        assert config.simulation.target_rate_hz == 60.0

    def test_default_sub_pipes(self):
        config = Config()
        assert [p.id for p in config.sub_pipes] == ['sub-pipe-1', 'sub-pipe-2', 'sub-pipe-3']
        assert all(p.radius == 0.06 for p in config.sub_pipes)

    def test_section_override(self):
        """测试按段覆盖"""
        config = Config(tank=TankConfig(initial_level=80.0))
        assert config.tank.initial_level == 80.0
        assert Config().tank.initial_level == 50.0

    def test_instances_do_not_share_sections(self):
        """修改一个实例的配置段不影响其他实例"""
        config = Config()
        config.tank.capacity = 999.0
        config.pump.max_flow_rate = 1.0

        fresh = Config()
        assert fresh.tank.capacity != 999.0
        assert fresh.pump.max_flow_rate == 100.0
        assert fresh.tank is not config.tank

    def test_unknown_section(self):
        with pytest.raises(AttributeError):
            Config(turbine=PumpConfig())

    def test_sub_pipes_stored_as_tuple(self):
        config = Config(sub_pipes=[SubPipeConfig(id='a'), SubPipeConfig(id='b')])
        assert isinstance(config.sub_pipes, tuple)
        assert len(config.sub_pipes) == 2

    def test_to_dict(self):
        data = Config().to_dict()
        assert set(data) == set(Config.SECTIONS)
        assert data['pump']['pressure_contribution'] == 4.0
        assert len(data['sub_pipes']) == 3

    def test_derived_geometry(self):
        tank = TankConfig(radius=1.0)
        assert tank.cross_section_area == pytest.approx(3.14159, rel=1e-4)
        assert Config().main_pipe.diameter == pytest.approx(0.2)

    def test_system_state_values(self):
        assert SystemState.IDLE.value == 'idle'
        assert SystemState.FAULT.value == 'fault'


class TestConfigValidator:
    """配置验证测试"""

    def test_default_config_valid(self):
        report = ConfigValidator().validate_all()
        assert report.is_valid
        assert report.warnings == []

    def test_validate_positive(self):
        result = ConfigValidator.validate_positive(-1.0, 'x')
        assert not result.is_valid
        assert result.severity == ValidationSeverity.ERROR

    def test_zero_duration_warns(self):
        """启动时间为0只给出警告"""
        config = Config(pump=PumpConfig(startup_duration_ms=0.0))
        report = ConfigValidator(config).validate_all()
        assert report.is_valid
        assert any(r.field_name == 'pump.startup_duration_ms' for r in report.warnings)

    def test_level_order(self):
        config = Config(tank=TankConfig(min_level=90.0, max_level=10.0))
        report = ConfigValidator(config).validate_all()
        assert not report.is_valid
        assert any(r.field_name == 'tank.min_level' for r in report.errors)

    def test_duplicate_sub_pipe_ids(self):
        config = Config(sub_pipes=[SubPipeConfig(id='a'), SubPipeConfig(id='a')])
        report = ConfigValidator(config).validate_all()
        assert any(r.field_name == 'sub_pipes' for r in report.errors)
