"""
Tests for the caller options and their config file
"""
from pathlib import Path

import pytest
import yaml

from indelcal.options import CallerOptions


def write_config(path: Path, config: dict) -> Path:
    path.write_text(yaml.safe_dump(config, sort_keys=False), encoding="utf-8")
    return path


def test_defaults():
    options = CallerOptions()
    assert options.ref_error_factor == 1.0
    assert options.use_length_dependence is False
    assert options.error_model is None


def test_from_yaml(tmp_path: Path):
    model = tmp_path / "model.json"
    model.write_text("{}", encoding="utf-8")
    config = write_config(tmp_path / "config.yml", {
        "error_model": str(model),
        "indel_ref_error_factor": 2.5,
        "use_length_dependence": True,
        "unrelated_key": 12,
    })
    options = CallerOptions.from_yaml(config)
    assert options.ref_error_factor == 2.5
    assert options.use_length_dependence is True
    assert options.error_model == model


def test_from_yaml_integer_factor_and_blank_values(tmp_path: Path):
    config = write_config(tmp_path / "config.yml", {"indel_ref_error_factor": 3, "error_model": None})
    options = CallerOptions.from_yaml(config)
    assert options.ref_error_factor == 3.0
    assert isinstance(options.ref_error_factor, float)
    assert options.error_model is None


@pytest.mark.parametrize("config", [
    {"indel_ref_error_factor": 0},
    {"indel_ref_error_factor": -1.0},
    {"indel_ref_error_factor": "large"},
    {"use_length_dependence": "yes please"},
    {"error_model": 5},
])
def test_from_yaml_rejects_bad_values(tmp_path: Path, config):
    path = write_config(tmp_path / "config.yml", config)
    with pytest.raises(SystemExit) as exc:
        CallerOptions.from_yaml(path)
    assert exc.value.code == 1


def test_from_yaml_missing_model_file(tmp_path: Path):
    path = write_config(tmp_path / "config.yml", {"error_model": str(tmp_path / "nope.json")})
    with pytest.raises(SystemExit) as exc:
        CallerOptions.from_yaml(path)
    assert exc.value.code == 5


def test_from_yaml_rejects_non_mapping(tmp_path: Path):
    path = tmp_path / "config.yml"
    path.write_text("- just\n- a list\n", encoding="utf-8")
    with pytest.raises(SystemExit):
        CallerOptions.from_yaml(path)
