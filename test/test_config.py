"""
Tests for MPC configuration loading and validation.

Run with:
    python3 -m pytest test/test_config.py -v
"""

import sys
import os
import dataclasses
import math
import pytest

sys.path.insert(0, os.path.join(os.path.dirname(__file__), '..'))

from kinematic_mpc.config import MPCConfig, load_config
from kinematic_mpc.exceptions import MPCConfigError
from kinematic_mpc.simulate import main


class TestDefaults:

    def test_default_values(self):
        config = MPCConfig()
        assert config.horizon == 10
        assert config.dt == 0.1
        assert config.lf == 2.67
        assert config.ref_v == 100.0
        assert (config.cte_weight, config.epsi_weight, config.velocity_weight) == (5000, 1000, 1)
        assert (config.steering_weight, config.acceleration_weight) == (1, 1)
        assert (config.steering_rate_weight, config.acceleration_rate_weight) == (1000, 10)
        assert config.max_steering == 25 * math.pi / 180
        assert config.max_acceleration == 1.0
        assert config.max_solve_time == 0.5

    def test_immutable(self):
        config = MPCConfig()
        with pytest.raises(dataclasses.FrozenInstanceError):
            config.horizon = 20

    def test_shipped_yaml_matches_defaults(self):
        assert load_config() == MPCConfig()

    @pytest.mark.parametrize("kwargs", [
        {'horizon': 1},
        {'horizon': 2.5},
        {'dt': 0.0},
        {'lf': -1.0},
        {'cte_weight': -1.0},
        {'max_steering': 0.0},
        {'max_solve_time': 0.0},
        {'max_iter': 0},
        {'expression_graph': 'dense'},
        {'silent': 'false'},
        {'silent': 0},
    ])
    def test_invalid(self, kwargs):
        with pytest.raises(MPCConfigError):
            MPCConfig(**kwargs)


class TestLoadConfig:

    def test_sections_are_flattened(self, tmp_path):
        path = tmp_path / 'mpc.yaml'
        path.write_text(
            "horizon:\n"
            "  horizon: 15\n"
            "  dt: 0.05\n"
            "weights:\n"
            "  cte_weight: 2000.0\n"
            "silent: false\n"
        )
        config = load_config(str(path))
        assert config.horizon == 15
        assert config.dt == 0.05
        assert config.cte_weight == 2000.0
        assert config.silent is False
        assert config.epsi_weight == 1000.0

    def test_overrides_win(self, tmp_path):
        path = tmp_path / 'mpc.yaml'
        path.write_text("horizon: 15\n")
        assert load_config(str(path), horizon=8).horizon == 8

    def test_steering_limit_in_degrees(self, tmp_path):
        path = tmp_path / 'mpc.yaml'
        path.write_text("limits:\n  steering_limit_deg: 30.0\n")
        assert load_config(str(path)).max_steering == pytest.approx(math.radians(30.0))

    def test_keyword_max_steering_beats_shipped_degrees(self):
        assert load_config(max_steering=0.1).max_steering == 0.1

    def test_keyword_max_steering_beats_file_degrees(self, tmp_path):
        path = tmp_path / 'mpc.yaml'
        path.write_text("limits:\n  steering_limit_deg: 30.0\n")
        assert load_config(str(path), max_steering=0.2).max_steering == 0.2

    def test_keyword_degrees_converted(self):
        config = load_config(steering_limit_deg=10.0)
        assert config.max_steering == pytest.approx(math.radians(10.0))

    def test_degrees_and_radians_in_one_file(self, tmp_path):
        path = tmp_path / 'mpc.yaml'
        path.write_text("limits:\n  steering_limit_deg: 30.0\n  max_steering: 0.3\n")
        with pytest.raises(MPCConfigError):
            load_config(str(path))

    def test_quoted_bool_rejected(self, tmp_path):
        path = tmp_path / 'mpc.yaml'
        path.write_text('silent: "false"\n')
        with pytest.raises(MPCConfigError):
            load_config(str(path))

    def test_expression_graph_from_yaml(self, tmp_path):
        path = tmp_path / 'mpc.yaml'
        path.write_text("solver:\n  expression_graph: mx\n")
        assert load_config(str(path)).expression_graph == 'mx'

    def test_unknown_key(self, tmp_path):
        path = tmp_path / 'mpc.yaml'
        path.write_text("horizn: 12\n")
        with pytest.raises(MPCConfigError):
            load_config(str(path))

    def test_bad_value_type(self, tmp_path):
        path = tmp_path / 'mpc.yaml'
        path.write_text("dt: fast\n")
        with pytest.raises(MPCConfigError):
            load_config(str(path))

    def test_invalid_yaml(self, tmp_path):
        path = tmp_path / 'mpc.yaml'
        path.write_text("horizon: [1, 2\n")
        with pytest.raises(MPCConfigError):
            load_config(str(path))

    def test_missing_file(self, tmp_path):
        with pytest.raises(MPCConfigError):
            load_config(str(tmp_path / 'nope.yaml'))


class TestCommandLine:

    def test_simulate_runs(self, capsys):
        assert main(['--steps', '3', '--v0', '10']) == 0
        lines = capsys.readouterr().out.strip().splitlines()
        assert len(lines) == 3
        assert 'delta=' in lines[0]

    def test_simulate_bad_config_path(self, tmp_path):
        with pytest.raises(MPCConfigError):
            main(['--config', str(tmp_path / 'missing.yaml')])
