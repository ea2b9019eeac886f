"""
物理模块单元测试
"""

import math
import pytest

from fluidsim.physics import (
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
    percentage_to_height,
    SubPipeInput,
    BernoulliStateComputer,
    compute_bernoulli_state,
    FlowCalculator,
    PressureCalculator
)


class TestCalculators:
    """伯努利/托里拆利计算测试"""

    def test_torricelli(self):
        """v = √(2gh)"""
        assert exit_velocity(5.0) == pytest.approx(math.sqrt(2 * 9.81 * 5), abs=1e-6)
        assert exit_velocity(5.0) == pytest.approx(9.9, abs=0.01)

    def test_no_head_no_velocity(self):
        assert exit_velocity(0.0) == 0.0
        assert exit_velocity(-1.0) == 0.0

    def test_pump_assist(self):
        """泵压换算为水头后叠加"""
        pump_pa = 4.0e5
        expected = math.sqrt(2 * 9.81 * (1.0 + pump_pa / (1000 * 9.81)))
        assert exit_velocity_with_pump(1.0, pump_pa) == pytest.approx(expected)
        assert exit_velocity_with_pump(1.0, 0.0) == pytest.approx(exit_velocity(1.0))
        assert exit_velocity_with_pump(-2.0, pump_pa) > 0
        assert pressure_head(9810.0) == pytest.approx(1.0)

    def test_flow_rate(self):
        q = flow_rate(2.0, 0.1)
        assert q == pytest.approx(math.pi * 0.01 * 2.0)
        assert flow_rate_per_hour(2.0, 0.1) == pytest.approx(q * 3600)

    def test_pressure_at(self):
        assert pressure_at(0.0) == pytest.approx(101325.0)
        assert pressure_at(1.0) == pytest.approx(101325.0 + 9810.0)
        assert pressure_at(0.0, velocity=2.0, reference_pressure=0.0) == pytest.approx(2000.0)
        assert pa_to_bar(1e5) == 1.0

    def test_reynolds_and_regime(self):
        re = reynolds_number(1.0, 0.12)
        assert re == pytest.approx(120000.0)
        assert flow_regime(re) == FlowRegime.TURBULENT
        assert flow_regime(1000.0) == FlowRegime.LAMINAR
        assert flow_regime(3000.0) == FlowRegime.TRANSITIONAL
        assert reynolds_number(1.0, 0.1, viscosity=0.0) == 0.0

    def test_friction_head_loss(self):
        loss = friction_head_loss(5.0, 0.2, 3.0)
        assert loss == pytest.approx(0.02 * 25.0 * 9.0 / (2 * 9.81))
        assert friction_head_loss(5.0, 0.2, 0.0) == 0.0
        assert friction_head_loss(5.0, 0.0, 3.0) == 0.0

    def test_drain_time(self):
        t = drain_time(4.0, 0.01, 2.0)
        assert t == pytest.approx(400.0 * math.sqrt(4.0 / 9.81))

    def test_drain_time_no_outlet(self):
        """无出口或无水头时为 inf"""
        assert drain_time(4.0, 0.0, 2.0) == math.inf
        assert drain_time(4.0, 0.01, 0.0) == math.inf

    def test_geometry(self):
        assert tank_volume(2.0, 1.0) == pytest.approx(4 * math.pi)
        assert tank_volume(2.0, -1.0) == 0.0
        assert percentage_to_height(50.0, 4.0) == pytest.approx(2.0)


class TestBernoulliStateComputer:
    """伯努利状态计算测试"""

    @pytest.fixture
    def computer(self):
        return BernoulliStateComputer(main_pipe_radius=0.1, main_pipe_length=5.0)

    def test_heights(self, computer):
        state = computer.compute(50.0, 4.0, 2.0, 0.5)
        assert state.water_height == pytest.approx(2.0)
        assert state.effective_height == pytest.approx(1.5)
        assert state.exit_velocity == pytest.approx(math.sqrt(2 * 9.81 * 1.5))

    def test_water_below_outlet(self, computer):
        """水面不高于出口时流速为0"""
        state = computer.compute(10.0, 4.0, 2.0, 0.5)
        assert state.effective_height == 0.0
        assert state.exit_velocity == 0.0
        assert state.total_flow_rate == 0.0

    def test_sub_pipe_flows(self, computer):
        pipes = [
            SubPipeInput('a', 0.06, 100.0),
            SubPipeInput('b', 0.06, 50.0),
            SubPipeInput('c', 0.06, 0.0),
        ]
        state = computer.compute(80.0, 4.0, 2.0, 0.5, sub_pipes=pipes)

        a, b, c = state.sub_pipe_flows
        assert a.velocity == pytest.approx(state.exit_velocity)
        assert b.velocity == pytest.approx(state.exit_velocity * 0.5 ** 1.5)
        assert c.flow_rate == 0.0
        assert not c.is_open
        assert state.total_flow_rate == pytest.approx(a.flow_rate + b.flow_rate)
        assert state.total_flow_rate_per_hour == pytest.approx(state.total_flow_rate * 3600)
        assert a.flow_regime == FlowRegime.TURBULENT
        assert state.get_sub_pipe('b') is b
        assert state.get_sub_pipe('x') is None

    def test_drain_time_finite_with_open_pipe(self, computer):
        state = computer.compute(80.0, 4.0, 2.0, 0.5, sub_pipes=[SubPipeInput('a', 0.06, 100.0)])
        assert math.isfinite(state.estimated_drain_time)
        assert state.drains

    def test_drain_time_inf_when_closed(self, computer):
        state = computer.compute(80.0, 4.0, 2.0, 0.5, sub_pipes=[SubPipeInput('a', 0.06, 0.0)])
        assert state.estimated_drain_time == math.inf
        assert not state.drains

    def test_pump_assist(self, computer):
        plain = computer.compute(50.0, 4.0, 2.0, 0.5)
        assisted = computer.compute(50.0, 4.0, 2.0, 0.5, pump_running=True, pump_pressure=4.0e5)
        assert assisted.pump_assisted
        assert assisted.exit_velocity > plain.exit_velocity

        idle_pump = computer.compute(50.0, 4.0, 2.0, 0.5, pump_running=False, pump_pressure=4.0e5)
        assert not idle_pump.pump_assisted
        assert idle_pump.exit_velocity == pytest.approx(plain.exit_velocity)

    def test_pressures_and_volume(self, computer):
        state = computer.compute(50.0, 4.0, 2.0, 0.5)
        assert state.tank_bottom_pressure == pytest.approx(101325.0 + 9810.0 * 2.0)
        assert state.outlet_pressure == pytest.approx(101325.0 + 9810.0 * 1.5)
        assert state.remaining_volume == pytest.approx(math.pi * 4.0 * 2.0)
        assert state.main_pipe_head_loss > 0

    def test_convenience_function(self):
        state = compute_bernoulli_state(50.0)
        assert state.exit_velocity == pytest.approx(math.sqrt(2 * 9.81 * 1.5))
        assert 'm/s' in state.equation


class TestFlowCalculator:
    """泵出水管线流量测试"""

    def test_main_line(self):
        calc = FlowCalculator()
        state = calc.calculate(100.0, 1.0)
        assert state.total_flow == pytest.approx(100.0)
        assert state.bypass_flow == 0.0
        assert state.is_flowing

    def test_closed_valve_no_flow(self):
        state = FlowCalculator().calculate(100.0, 0.0)
        assert state.total_flow == 0.0
        assert not state.is_flowing

    def test_bypass(self):
        """旁通在主阀开度较小时补充流量"""
        state = FlowCalculator().calculate(100.0, 0.0, bypass_open=True)
        assert state.bypass_flow == pytest.approx(30.0)
        assert state.total_flow == pytest.approx(30.0)

        wide = FlowCalculator().calculate(100.0, 0.5, bypass_open=True)
        assert wide.bypass_flow == 0.0

    def test_pressure_loss(self):
        calc = FlowCalculator()
        assert calc.pressure_loss(100.0) == pytest.approx(2.0)
        assert calc.velocity(100.0) == pytest.approx(5.0)


class TestPressureCalculator:
    """压力计算测试"""

    def test_static_only(self):
        calc = PressureCalculator()
        reading = calc.calculate(50.0, 0.0, 0.0, 0.0)
        assert reading.current_pressure == pytest.approx(2.0)
        assert reading.tank_pressure == pytest.approx(1.0)
        assert reading.previous_pressure == pytest.approx(1.0)

    def test_valve_restriction(self):
        calc = PressureCalculator()
        assert calc.valve_restriction(0.0, 4.0) == pytest.approx(3.2)
        assert calc.valve_restriction(100.0, 4.0) == 0.0

    def test_clamped(self):
        calc = PressureCalculator()
        reading = calc.calculate(100.0, 20.0, 0.0, 0.0)
        assert reading.current_pressure == 10.0
        assert reading.is_over_pressure

    def test_pressure_at_points(self):
        calc = PressureCalculator()
        reading = calc.calculate(50.0, 4.0, 0.5, 100.0)
        points = calc.pressure_at_points(50.0, 4.0, 0.5, 100.0)
        assert points['tank_outlet'] == pytest.approx(2.0)
        assert points['pump_discharge'] == pytest.approx(6.0)
        assert points['before_valve'] == reading.current_pressure
        assert points['after_valve'] == pytest.approx(5.5)

    def test_reset(self):
        calc = PressureCalculator()
        calc.calculate(50.0, 4.0, 0.0, 100.0)
        calc.reset()
        assert calc.current_pressure == 1.0
