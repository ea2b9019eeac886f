"""
仿真运行器测试
"""

import numpy as np
import pytest

from fluidsim import SimulationEngine, SimulationRunner, ScenarioType, SystemState, run_scenario_test
from fluidsim.simulation.runner import apply_scenario


class TestRunSimulated:
    """批量仿真测试"""

    def test_time_series(self):
        runner = SimulationRunner()
        runner.engine.enable_flow()
        runner.engine.open_sub_pipe('sub-pipe-1')

        result = runner.run_simulated(2.0, dt=0.1)

        assert result.success
        assert result.steps == 20
        assert isinstance(result.time_series, np.ndarray)
        assert result.time_series[-1] == pytest.approx(2.0)
        assert result.series['tank_level'].shape == (20,)
        assert result.series['outlet_flow'][-1] > 0
        assert result.simulated_time == pytest.approx(2.0)

    def test_metrics(self):
        runner = SimulationRunner()
        apply_scenario(runner.engine, ScenarioType.DRAIN)
        result = runner.run_simulated(5.0, dt=0.1)

        assert result.metrics['level_change'] < 0
        assert result.metrics['flow_mean'] > 0
        assert result.metrics['level_min'] <= result.metrics['level_mean'] <= result.metrics['level_max']
        assert result.metrics['outlet_volume'] > 0
        assert result.metrics['inlet_volume'] == 0.0

    def test_state_history(self):
        runner = SimulationRunner()
        runner.engine.start_pump()
        runner.engine.open_main_valve()
        result = runner.run_simulated(3.0, dt=0.1)

        states = [state for _, state in result.state_history]
        assert states[0] == SystemState.IDLE
        assert SystemState.STARTING in states
        # 出口未开, 泵运行也不算有流
        assert states[-1] == SystemState.IDLE

        runner.engine.enable_flow()
        runner.engine.open_sub_pipe('sub-pipe-1')
        result = runner.run_simulated(1.0, dt=0.1)
        assert result.state_history[-1][1] == SystemState.RUNNING

    def test_on_step_callback(self):
        runner = SimulationRunner()
        ticks = []
        runner.run_simulated(1.0, dt=0.25, on_step=lambda s: ticks.append(s.tick))
        assert ticks == [1, 2, 3, 4]

    def test_zero_duration(self):
        result = SimulationRunner().run_simulated(0.0)
        assert result.steps == 0
        assert result.metrics == {}

    def test_to_dict(self):
        result = SimulationRunner().run_simulated(0.5, dt=0.1)
        data = result.to_dict()
        assert data['steps'] == 5
        assert data['state_history'][0][1] == 'idle'
        assert 'final_state' in data


class TestRealtimeLoop:
    """实时循环测试"""

    def test_max_ticks(self):
        sleeps = []
        runner = SimulationRunner(sleep=sleeps.append)
        snapshot = runner.start(max_ticks=5)

        assert snapshot.tick == 5
        assert not runner.is_running
        assert not runner.engine.is_loop_running
        assert len(sleeps) <= 4

    def test_stop_from_listener(self):
        """stop() 结束循环, 不影响进行中的过渡"""
        runner = SimulationRunner(sleep=lambda seconds: None)
        engine = runner.engine
        engine.start_pump()

        loop_flags = []

        def on_snapshot(snapshot):
            loop_flags.append(snapshot.is_loop_running)
            if snapshot.tick >= 3:
                runner.stop()

        engine.subscribe(on_snapshot)
        snapshot = runner.start()

        assert snapshot.tick == 3
        assert loop_flags == [True, True, True]
        assert engine.pump.status == SystemState.STARTING

    def test_shared_engine(self):
        engine = SimulationEngine()
        runner = SimulationRunner(engine)
        assert runner.engine is engine
        assert runner.cfg is engine.cfg


class TestScenarios:
    """预置场景测试"""

    def test_fill(self):
        result = run_scenario_test(ScenarioType.FILL, duration=5.0, dt=0.1, initial_level=20.0)
        assert result.success
        assert result.final_snapshot.tank.level > 20.0
        assert result.metrics['inlet_volume'] > 0

    def test_drain(self):
        result = run_scenario_test(ScenarioType.DRAIN, duration=5.0, dt=0.1, initial_level=80.0)
        assert result.final_snapshot.tank.level < 80.0

    def test_pump_assist(self):
        result = run_scenario_test(ScenarioType.PUMP_ASSIST, duration=3.0, dt=0.1)
        assert result.final_snapshot.bernoulli.pump_assisted

    def test_balance(self):
        result = run_scenario_test(ScenarioType.BALANCE, duration=3.0, dt=0.1)
        assert result.final_snapshot.inlet_motor.state == SystemState.RUNNING
        assert result.final_snapshot.flow_enabled
