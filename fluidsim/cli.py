#!/usr/bin/env python3
"""
FluidSim 命令行接口
===================

用法:
    fluidsim run [--duration SECONDS] [--flow] [--open SUB_PIPE ...] [--pump]
    fluidsim scenario [--scenario SCENARIO] [--duration SECONDS]
    fluidsim status [--json]
"""

import argparse
import json
import logging
import sys


def _configure_logging(level: str):
    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.INFO),
        format='%(asctime)s [%(levelname)s] %(name)s: %(message)s',
        datefmt='%H:%M:%S'
    )


def _print_result(result):
    """打印仿真结果"""
    final = result.final_snapshot

    print("\n" + "=" * 50)
    print("仿真完成!")
    print("=" * 50)
    print(f"总步数: {result.steps}")
    print(f"仿真时长: {result.simulated_time:.2f}s")
    print(f"运行时间: {result.duration:.2f}s")
    print(f"最终液位: {final.tank.level:.2f}%")
    print(f"最终出流: {final.flow.current_flow:.2f}m³/h")
    print(f"系统状态: {final.system_state.value}")

    print("\n性能指标:")
    for key, value in result.metrics.items():
        print(f"  {key}: {value:.4f}")

    print("\n状态历史:")
    for t, state in result.state_history[:10]:
        print(f"  t={t:.2f}s: {state.value}")

    if result.errors:
        print("\n错误:")
        for err in result.errors:
            print(f"  - {err}")


def _save(data: dict, path: str):
    with open(path, 'w', encoding='utf-8') as f:
        json.dump(data, f, indent=2, ensure_ascii=False)
    print(f"\n结果已保存到: {path}")


def cmd_run(args):
    """运行仿真"""
    from .simulation.runner import SimulationRunner

    print("启动仿真...")
    print(f"  时长: {args.duration}s")
    print(f"  时间步长: {args.dt}s")

    runner = SimulationRunner()
    engine = runner.engine

    if args.level is not None:
        engine.set_tank_level(args.level)
    if args.outlet_height is not None:
        engine.set_outlet_height(args.outlet_height)
    if args.flow:
        engine.enable_flow()
    for pipe_id in args.open:
        if engine.open_sub_pipe(pipe_id) is None:
            print(f"  未知支管: {pipe_id}")
            return 2
    if args.pump:
        engine.start_pump()
    if args.inlet:
        engine.start_inlet_motor()
    if args.valve is not None:
        engine.set_main_valve_position(args.valve)
    if args.bypass:
        engine.set_bypass(True)

    result = runner.run_simulated(args.duration, args.dt)
    _print_result(result)

    if args.output:
        _save(result.to_dict(), args.output)

    return 0 if result.success else 1


def cmd_scenario(args):
    """运行预置场景"""
    from .simulation.runner import ScenarioType, run_scenario_test

    scenario = ScenarioType(args.scenario)

    print(f"运行场景: {scenario.value}")
    print(f"  时长: {args.duration}s")

    result = run_scenario_test(
        scenario,
        duration=args.duration,
        dt=args.dt,
        initial_level=args.level
    )
    _print_result(result)

    if args.output:
        _save(result.to_dict(), args.output)

    return 0 if result.success else 1


def cmd_status(args):
    """显示配置与初始状态"""
    from . import __version__
    from .config.settings import Config
    from .config.validation import ConfigValidator
    from .simulation.engine import SimulationEngine

    config = Config()
    engine = SimulationEngine(config)

    if args.json:
        print(json.dumps({
            'version': __version__,
            'config': config.to_dict(),
            'state': engine.get_full_state().to_dict()
        }, indent=2, ensure_ascii=False))
        return 0

    print("FluidSim 水箱系统仿真")
    print("=" * 40)
    print(f"版本: {__version__}")

    report = ConfigValidator(config).validate_all()
    print(f"配置验证: {'通过' if report.is_valid else '失败'} "
          f"(错误 {len(report.errors)}, 警告 {len(report.warnings)})")

    snapshot = engine.get_full_state()
    print("\n初始状态:")
    print(f"  液位: {snapshot.tank.level:.1f}%")
    print(f"  水深: {snapshot.bernoulli.water_height:.2f}m")
    print(f"  理论出口流速: {snapshot.bernoulli.exit_velocity:.2f}m/s")
    print(f"  压力: {snapshot.pressure.current_pressure:.2f}bar")
    print(f"  系统状态: {snapshot.system_state.value}")

    print("\n出口支管:")
    for pipe in snapshot.sub_pipes:
        print(f"  [{pipe.id}] {pipe.name}: r={pipe.radius}m, 阀位 {pipe.valve_position:.0f}%")

    return 0


def build_parser() -> argparse.ArgumentParser:
    """构建参数解析器"""
    parser = argparse.ArgumentParser(
        prog='fluidsim',
        description='FluidSim 水箱-泵-阀门系统仿真命令行工具',
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
示例:
  fluidsim run --duration 60 --flow --open sub-pipe-1 sub-pipe-2
  fluidsim scenario --scenario fill --duration 120
  fluidsim status --json
"""
    )
    parser.add_argument('--log-level', type=str, default='WARNING',
                        help='日志级别')

    subparsers = parser.add_subparsers(dest='command', help='可用命令')

    # run 命令
    run_parser = subparsers.add_parser('run', help='运行仿真')
    run_parser.add_argument('--duration', type=float, default=60.0,
                            help='仿真时长(秒)')
    run_parser.add_argument('--dt', type=float, default=1.0 / 60.0,
                            help='时间步长(秒)')
    run_parser.add_argument('--level', type=float,
                            help='初始液位(%%)')
    run_parser.add_argument('--outlet-height', type=float,
                            help='出口高度(m)')
    run_parser.add_argument('--flow', action='store_true',
                            help='打开出流总开关')
    run_parser.add_argument('--open', nargs='*', default=[],
                            help='打开的支管编号')
    run_parser.add_argument('--pump', action='store_true',
                            help='启动排水泵')
    run_parser.add_argument('--inlet', action='store_true',
                            help='启动进水电机')
    run_parser.add_argument('--valve', type=float,
                            help='主阀开度(%%)')
    run_parser.add_argument('--bypass', action='store_true',
                            help='打开旁通')
    run_parser.add_argument('--output', '-o', type=str,
                            help='输出文件')
    run_parser.set_defaults(func=cmd_run)

    # scenario 命令
    scenario_parser = subparsers.add_parser('scenario', help='运行预置场景')
    scenario_parser.add_argument('--scenario', type=str, default='drain',
                                 choices=['drain', 'fill', 'pump_assist', 'balance'],
                                 help='场景类型')
    scenario_parser.add_argument('--duration', type=float, default=60.0,
                                 help='仿真时长(秒)')
    scenario_parser.add_argument('--dt', type=float, default=1.0 / 60.0,
                                 help='时间步长(秒)')
    scenario_parser.add_argument('--level', type=float,
                                 help='初始液位(%%)')
    scenario_parser.add_argument('--output', '-o', type=str,
                                 help='输出文件')
    scenario_parser.set_defaults(func=cmd_scenario)

    # status 命令
    status_parser = subparsers.add_parser('status', help='显示配置与初始状态')
    status_parser.add_argument('--json', action='store_true',
                               help='以JSON输出')
    status_parser.set_defaults(func=cmd_status)

    return parser


def main(argv=None):
    """主入口"""
    parser = build_parser()
    args = parser.parse_args(argv)

    if args.command is None:
        parser.print_help()
        return 0

    _configure_logging(args.log_level)
    return args.func(args)


if __name__ == '__main__':
    sys.exit(main())
