"""
Integration tests for the SIL board contract.

Exercises the board the way firmware would: boot, poll for IMU data,
read sensors, command outputs and use persistent memory.
"""

import json

import numpy as np
import pytest

from silboard.board import SILBoard
from silboard.config import DictParameterSource, JSONParameterSource
from silboard.control.actuators import LocalRCSource, PWM_MIN, NUM_PWM_OUTPUTS
from silboard.sensors.barometer import altitude_to_pressure
from silboard.simulation.noise import NoiseEngine
from silboard.simulation.physics import GroundTruthState, StaticStateProvider


class TestLifecycle:
    """Tests for board setup and health reporting."""

    def test_health_checks(self, board):
        """Every simulated sensor reports healthy; no sensor errors."""
        assert board.mag_check()
        assert board.baro_check()
        assert board.sonar_check()
        assert board.num_sensor_errors() == 0

    def test_unknown_mav_type_rejected(self, provider):
        """Constructing a board for an unknown vehicle should fail."""
        with pytest.raises(ValueError):
            SILBoard(provider, mav_type="blimp")

    def test_diff_pressure_only_on_fixedwing(self, provider, quiet_params, tmp_path):
        """Only fixed-wing boards carry a differential pressure sensor."""
        quad = SILBoard(provider, params=quiet_params, mav_type="multirotor",
                        memory_root=str(tmp_path))
        plane = SILBoard(provider, params=quiet_params, mav_type="fixedwing",
                         memory_root=str(tmp_path))

        assert quad.diff_pressure_check() is False
        assert plane.diff_pressure_check() is True

    @pytest.mark.parametrize("name", ["fixed-wing", "fixed_wing", "FixedWing"])
    def test_fixed_wing_spellings(self, provider, quiet_params, tmp_path, name):
        """Hyphenated and underscored vehicle names select the fixed-wing board."""
        plane = SILBoard(provider, params=quiet_params, mav_type=name,
                         memory_root=str(tmp_path))

        assert plane.diff_pressure_check() is True

    def test_noop_calls_do_not_raise(self, board):
        """Reset, delay, memory init and LED calls are accepted and ignored."""
        board.board_reset(True)
        board.clock_delay(10)
        board.memory_init()
        board.imu_not_responding_error()
        for call in (board.led0_on, board.led0_off, board.led0_toggle,
                     board.led1_on, board.led1_off, board.led1_toggle):
            call()

        assert board.clock_millis() == 0


class TestIMUScheduling:
    """Tests for the data-ready poll against simulation time."""

    def test_poll_sequence_at_1khz(self, board, provider):
        """Polls at 0, 500, 999 µs are not ready; 1000 µs is."""
        results = []
        for t in (0.0, 0.0005, 0.000999, 0.001):
            provider.update(time=t)
            results.append(board.new_imu_data())

        assert results == [False, False, False, True]
        assert board.imu_scheduler.next_update_time_us == 2000

    def test_configured_rate_from_json(self, provider, tmp_path):
        """imu_update_rate from a parameter file sets the sample period."""
        path = tmp_path / "params.json"
        path.write_text(json.dumps({"imu_update_rate": 500}))

        board = SILBoard(provider, params=JSONParameterSource(path),
                         memory_root=str(tmp_path / "memory"))

        assert board.imu_scheduler.period_us == 2000

    def test_one_sample_per_period(self, board, provider):
        """Advancing at 0.1 ms steps should yield one sample per millisecond."""
        ready = 0
        for _ in range(100):
            provider.advance(0.0001)
            if board.new_imu_data():
                ready += 1

        assert ready == 10


class TestSensorReads:
    """Tests for sensor outputs through the board."""

    def test_imu_read_level_hover(self, board, provider):
        """A level, still vehicle measures only gravity, NED."""
        provider.update(time=0.0025)

        ok, reading = board.imu_read()

        assert ok is True
        assert reading.accel == pytest.approx([0.0, 0.0, -9.81])
        assert reading.gyro == pytest.approx([0.0, 0.0, 0.0])
        assert reading.temperature == 27.0
        assert reading.time_us == 2500

    def test_noise_gated_by_throttle(self, provider, quiet_params, tmp_path, constant_noise):
        """IMU noise appears only once the throttle output spins the motors."""
        params = dict(quiet_params.to_dict(), acc_stdev=1.0, gyro_stdev=0.5)
        board = SILBoard(provider, params=DictParameterSource(params),
                         noise=constant_noise(gaussian=1.0),
                         memory_root=str(tmp_path))
        board.init_board()
        board.pwm_init()

        _, idle = board.imu_read()
        board.pwm_write(2, 1500)
        _, spinning = board.imu_read()

        assert idle.accel == pytest.approx([0.0, 0.0, -9.81])
        assert idle.gyro == pytest.approx([0.0, 0.0, 0.0])
        assert spinning.accel == pytest.approx([1.0, -1.0, -10.81])
        assert spinning.gyro == pytest.approx([0.5, -0.5, -0.5])

    def test_baro_read(self, board, hover_state):
        """Barometer reports standard-atmosphere pressure at field elevation."""
        pressure, temperature = board.baro_read()

        assert pressure == pytest.approx(altitude_to_pressure(hover_state.altitude + 1387.0))
        assert temperature == 27.0

    def test_sonar_read(self, board):
        """Sonar reports the hover altitude when noise is off."""
        assert board.sonar_read() == pytest.approx(2.0)

    def test_mag_read_unit_field(self, board):
        """Magnetometer returns a unit field with noise and bias off."""
        mag = board.mag_read()

        assert mag.shape == (3,)
        assert np.linalg.norm(mag) == pytest.approx(1.0)

    def test_diff_pressure_read(self, provider, quiet_params, tmp_path):
        """Fixed-wing airspeed sensor reports dynamic pressure."""
        provider.update(linear_velocity=(20.0, 0.0, 0.0))
        plane = SILBoard(provider, params=quiet_params, mav_type="fixedwing",
                         memory_root=str(tmp_path))

        pressure, temperature = plane.diff_pressure_read()

        assert pressure == pytest.approx(0.5 * 1.225 * 400.0)
        assert temperature == 27.0

    def test_same_seed_reproducible(self, tmp_path):
        """Two boards with the same seed produce identical readings."""
        def sample(seed):
            provider = StaticStateProvider(GroundTruthState(position=(0.0, 0.0, 3.0)))
            board = SILBoard(provider, noise=NoiseEngine(seed=seed),
                             memory_root=str(tmp_path))
            board.init_board()
            board.sensors_init()
            board.pwm_init()
            board.pwm_write(2, 1600)
            out = []
            for _ in range(5):
                provider.advance(0.001)
                _, imu = board.imu_read()
                out.extend(imu.accel.tolist() + imu.gyro.tolist())
                out.extend(board.mag_read().tolist())
                out.append(board.baro_read()[0])
                out.append(board.sonar_read())
            return out

        assert sample(7) == sample(7)
        assert sample(7) != sample(8)


class TestPWMAndRC:
    """Tests for PWM outputs and RC inputs through the board."""

    def test_outputs_at_minimum_after_init(self, board):
        assert board.get_outputs() == [PWM_MIN] * NUM_PWM_OUTPUTS
        assert board.motors_spinning() is False

    def test_write_visible_to_dynamics(self, board):
        """Commanded outputs should be visible via get_outputs()."""
        board.pwm_write(0, 1234)

        assert board.get_outputs()[0] == 1234

    def test_rc_lost_without_source(self, board):
        """With no RC source the board reports lost and fail-safe inputs."""
        assert board.pwm_lost() is True
        assert board.pwm_read(2) == 1000
        assert board.pwm_read(0) == 1500

    def test_rc_source_frames(self, provider, quiet_params, tmp_path):
        """Frames from an attached RC source reach pwm_read()."""
        source = LocalRCSource()
        board = SILBoard(provider, params=quiet_params, rc_source=source,
                         memory_root=str(tmp_path))
        board.pwm_init()

        source.publish([1100, 1200, 1300, 1400, 1500, 1600, 1700, 1800])

        assert board.rc_source is source
        assert board.pwm_lost() is False
        assert board.pwm_read(7) == 1800


class TestMemory:
    """Tests for persistent memory through the board."""

    def test_round_trip(self, board):
        """Bytes written should be read back."""
        assert board.memory_write(bytes([1, 2, 3]), 3)

        dest = bytearray(3)
        assert board.memory_read(dest, 3)
        assert list(dest) == [1, 2, 3]

    def test_write_respects_length(self, board):
        """Only the first length bytes of src are stored."""
        board.memory_write(b"\x01\x02\x03\x04", 2)

        dest = bytearray(4)
        board.memory_read(dest, 4)
        assert dest == bytearray(b"\x01\x02\x00\x00")

    def test_read_before_write_fails(self, board):
        """Reading memory that was never written returns False."""
        dest = bytearray(b"\x07\x07")

        assert board.memory_read(dest, 2) is False
        assert dest == bytearray(b"\x07\x07")

    def test_namespaces_are_isolated(self, provider, tmp_path):
        """Boards in different namespaces do not share memory."""
        a = SILBoard(provider, namespace="/a", memory_root=str(tmp_path))
        b = SILBoard(provider, namespace="/b", memory_root=str(tmp_path))
        a.memory_write(b"\x0a", 1)

        assert b.memory_read(bytearray(1), 1) is False
