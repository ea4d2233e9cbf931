"""
Tests for the sensor bench entry point.
"""

import json

import pytest

from silboard.board import SILBoard
from silboard.main import main, run_bench
from silboard.simulation.noise import NoiseEngine


class TestRunBench:
    """Tests for run_bench."""

    def test_multirotor_channels(self, board, provider):
        """A multirotor bench collects every sensor except airspeed."""
        samples = run_bench(board, provider, ticks=20, dt=0.0005)

        assert set(samples) == {"accel", "gyro", "mag", "baro", "sonar"}
        assert samples["accel"].shape == (10, 3)
        assert samples["mag"].shape == (20, 3)
        assert len(samples["baro"]) == 20

    def test_fixedwing_includes_diff_pressure(self, provider, quiet_params, tmp_path):
        """Fixed-wing boards also report differential pressure."""
        board = SILBoard(provider, params=quiet_params, mav_type="fixedwing",
                         noise=NoiseEngine(seed=3), memory_root=str(tmp_path))
        board.init_board()

        samples = run_bench(board, provider, ticks=5, dt=0.001)

        assert len(samples["diff_pressure"]) == 5
        assert samples["sonar"] == pytest.approx([2.0] * 5)


class TestMain:
    """Tests for the command-line entry point."""

    def test_default_run(self):
        assert main(["--ticks", "50", "--seed", "1"]) == 0

    def test_fixedwing_armed_run(self):
        assert main(["--ticks", "50", "--seed", "1", "--mav-type", "fixedwing",
                     "--armed", "--airspeed", "15"]) == 0

    def test_params_file(self, tmp_path):
        path = tmp_path / "params.json"
        path.write_text(json.dumps({"imu_update_rate": 250, "sonar_stdev": 0.0}))

        assert main(["--params", str(path), "--ticks", "20"]) == 0

    def test_invalid_configuration_returns_error(self, tmp_path):
        """An inverted sonar range should be reported, not raised."""
        path = tmp_path / "bad.json"
        path.write_text(json.dumps({"sonar_min_range": 9.0, "sonar_max_range": 1.0}))

        assert main(["--params", str(path), "--ticks", "10"]) == 1

    def test_unknown_mav_type_rejected_by_parser(self):
        """argparse should refuse vehicle types it does not know."""
        with pytest.raises(SystemExit):
            main(["--mav-type", "blimp"])
