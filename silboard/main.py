"""
Sensor Bench
============

Runs a SIL board against a fixed vehicle state and reports the statistics
of every simulated sensor. Useful for checking a parameter file before
flying the firmware against it.

    silboard-bench --params params.json --mav-type fixedwing --ticks 5000
"""

import argparse
import logging
import sys
from collections import defaultdict
from typing import Dict, List, Optional

import numpy as np

from .board import SILBoard
from .config import DictParameterSource, JSONParameterSource, MavType
from .control.actuators import MOTOR_SPIN_THRESHOLD, PWM_MIN, THROTTLE_CHANNEL
from .simulation.noise import NoiseEngine
from .simulation.physics import GroundTruthState, StaticStateProvider

logger = logging.getLogger(__name__)


def run_bench(board: SILBoard, provider: StaticStateProvider,
              ticks: int, dt: float) -> Dict[str, np.ndarray]:
    """Step simulated time and collect every sensor channel."""
    samples: Dict[str, List] = defaultdict(list)

    for _ in range(ticks):
        provider.advance(dt)

        if board.new_imu_data():
            _, reading = board.imu_read()
            samples['accel'].append(reading.accel)
            samples['gyro'].append(reading.gyro)

        samples['mag'].append(board.mag_read())
        samples['baro'].append(board.baro_read()[0])
        samples['sonar'].append(board.sonar_read())
        if board.diff_pressure_check():
            samples['diff_pressure'].append(board.diff_pressure_read()[0])

    return {name: np.asarray(values) for name, values in samples.items()}


def summarize(samples: Dict[str, np.ndarray]):
    for name, values in samples.items():
        mean = np.mean(values, axis=0)
        std = np.std(values, axis=0)
        logger.info(f"{name:>13}: n={len(values)} mean={np.round(mean, 4)} std={np.round(std, 4)}")


def main(argv: Optional[List[str]] = None) -> int:
    """Main entry point."""
    parser = argparse.ArgumentParser(description="SIL board sensor bench")
    parser.add_argument("--params", "-p", default=None,
                        help="JSON parameter file")
    parser.add_argument("--mav-type", default=MavType.MULTIROTOR.value,
                        choices=[t.value for t in MavType],
                        help="Vehicle type")
    parser.add_argument("--namespace", default="",
                        help="Board namespace")
    parser.add_argument("--seed", type=int, default=None,
                        help="Noise seed for reproducible runs")
    parser.add_argument("--ticks", type=int, default=2000,
                        help="Number of simulation steps")
    parser.add_argument("--dt", type=float, default=0.001,
                        help="Simulation step (s)")
    parser.add_argument("--altitude", type=float, default=2.0,
                        help="Vehicle height above the world origin (m)")
    parser.add_argument("--airspeed", type=float, default=0.0,
                        help="Forward body speed (m/s)")
    parser.add_argument("--armed", action="store_true",
                        help="Command throttle above idle so IMU noise is injected")
    parser.add_argument("--verbose", "-v", action="store_true",
                        help="Verbose logging")

    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
    )

    params = JSONParameterSource(args.params) if args.params else DictParameterSource()
    provider = StaticStateProvider(GroundTruthState(
        position=(0.0, 0.0, args.altitude),
        linear_velocity=(args.airspeed, 0.0, 0.0),
    ))

    try:
        board = SILBoard(provider, params=params, mav_type=args.mav_type,
                         namespace=args.namespace, noise=NoiseEngine(args.seed))
    except ValueError as e:
        logger.error(f"Invalid board configuration: {e}")
        return 1

    board.init_board()
    board.sensors_init()
    board.pwm_init()
    if args.armed:
        board.pwm_write(THROTTLE_CHANNEL, MOTOR_SPIN_THRESHOLD + 400)
    else:
        board.pwm_write(THROTTLE_CHANNEL, PWM_MIN)

    logger.info(f"Running {args.ticks} ticks at dt={args.dt}s "
                f"(motors {'spinning' if board.motors_spinning() else 'idle'})")
    samples = run_bench(board, provider, args.ticks, args.dt)
    summarize(samples)
    return 0


if __name__ == "__main__":
    sys.exit(main())
