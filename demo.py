#!/usr/bin/env python3
"""
FluidSim 水箱系统仿真演示
=========================

演示仿真引擎能力:
1. 支管放空 (液位-流速反馈)
2. 进水电机补水
3. 泵辅助出流
4. 快照订阅
"""

import logging

import matplotlib
matplotlib.use('Agg')
import matplotlib.pyplot as plt

from fluidsim import (
    SimulationEngine,
    SimulationRunner,
    ScenarioType,
    run_scenario_test
)

logging.basicConfig(level=logging.INFO, format='%(asctime)s [%(levelname)s] %(message)s', datefmt='%H:%M:%S')


def demo_drain():
    """演示支管放空"""
    print("\n" + "=" * 60)
    print("演示1: 三路支管放空")
    print("=" * 60)

    result = run_scenario_test(ScenarioType.DRAIN, duration=120.0, dt=0.1, initial_level=90.0)

    print(f"\n仿真完成:")
    print(f"  - 总步数: {result.steps}")
    print(f"  - 液位变化: {result.metrics.get('level_change', 0):.2f} %")
    print(f"  - 平均出流: {result.metrics.get('flow_mean', 0):.2f} m³/h")
    print(f"  - 最大出口流速: {result.metrics.get('exit_velocity_max', 0):.2f} m/s")

    return result


def demo_fill():
    """演示进水电机补水"""
    print("\n" + "=" * 60)
    print("演示2: 进水电机补水")
    print("=" * 60)

    result = run_scenario_test(ScenarioType.FILL, duration=120.0, dt=0.1, initial_level=20.0)

    print(f"\n状态历史:")
    for t, state in result.state_history:
        print(f"  t={t:.1f}s: {state.value}")
    print(f"  - 最终液位: {result.final_snapshot.tank.level:.2f} %")

    return result


def demo_pump_assist():
    """演示泵辅助出流"""
    print("\n" + "=" * 60)
    print("演示3: 泵辅助出流")
    print("=" * 60)

    result = run_scenario_test(ScenarioType.PUMP_ASSIST, duration=30.0, dt=0.05)
    bernoulli = result.final_snapshot.bernoulli

    print(f"  - 泵辅助: {'是' if bernoulli.pump_assisted else '否'}")
    print(f"  - 出口流速: {bernoulli.exit_velocity:.2f} m/s")
    print(f"  - 伯努利方程: {bernoulli.equation}")

    return result


def demo_subscription():
    """演示快照订阅"""
    print("\n" + "=" * 60)
    print("演示4: 快照订阅")
    print("=" * 60)

    engine = SimulationEngine()
    runner = SimulationRunner(engine)

    changes = []
    engine.subscribe_section(
        'system_state', lambda state: changes.append((engine.elapsed_time, state)))

    engine.start_pump()
    engine.enable_flow()
    engine.open_sub_pipe('sub-pipe-2')
    runner.run_simulated(5.0, dt=0.1)
    engine.stop_pump()
    runner.run_simulated(5.0, dt=0.1)

    for t, state in changes:
        print(f"  t={t:.1f}s: {state.value}")


def plot_results(drain, fill, filename='fluidsim_demo_result.png'):
    """绘制仿真曲线"""
    fig, axes = plt.subplots(3, 1, figsize=(10, 12), sharex=True)

    axes[0].plot(drain.time_series, drain.series['tank_level'], 'b-', label='Drain (3 outlets)')
    axes[0].plot(fill.time_series, fill.series['tank_level'], 'r-', label='Fill (inlet motor)')
    axes[0].set_ylabel('Tank Level (%)')
    axes[0].set_title('Tank Level')
    axes[0].legend()
    axes[0].grid(True)

    axes[1].plot(drain.time_series, drain.series['outlet_flow'], 'b-', label='Outlet flow')
    axes[1].plot(fill.time_series, fill.series['inlet_flow'], 'r--', label='Inlet flow')
    axes[1].set_ylabel('Flow (m3/h)')
    axes[1].set_title('Flow Rates')
    axes[1].legend()
    axes[1].grid(True)

    axes[2].plot(drain.time_series, drain.series['exit_velocity'], 'b-', label='Drain')
    axes[2].plot(fill.time_series, fill.series['exit_velocity'], 'r-', label='Fill')
    axes[2].set_ylabel('Exit Velocity (m/s)')
    axes[2].set_title('Torricelli Exit Velocity')
    axes[2].set_xlabel('Time (s)')
    axes[2].legend()
    axes[2].grid(True)

    plt.tight_layout()
    plt.savefig(filename)
    plt.close(fig)
    print(f"\n曲线已保存到: {filename}")


def main():
    """主函数"""
    print("=" * 60)
    print("FluidSim 水箱-泵-阀门系统仿真演示")
    print("=" * 60)

    drain = demo_drain()
    fill = demo_fill()
    demo_pump_assist()
    demo_subscription()

    plot_results(drain, fill)

    print("\n" + "=" * 60)
    print("演示完成!")
    print("=" * 60)


if __name__ == '__main__':
    main()
