import json
import subprocess
import sys
from pathlib import Path

import pytest
import yaml

from indelcal.cli.cli import build_parser, main
from indelcal.common import open_input

MODEL = {
    "MaxMotifLength": 2,
    "MaxTractLength": 6,
    "Model": [
        [[0.002, 0.001], [0.004, 0.002], [0.006, 0.003], [0.02, 0.01], [0.04, 0.02], [0.06, 0.03]],
        [[0.0, 0.0], [0.0, 0.0], [0.0, 0.0], [0.01, 0.005], [0.02, 0.01], [0.03, 0.015]],
    ],
}

REPORTS = (
    "type\trepeat_unit_length\tref_repeat_count\tindel_repeat_count\tdescription\n"
    "INSERT\t1\t4\t5\tchr1:100\n"
    "DELETE\t2\t3\t2\tchr1:200\n"
    "SWAP\t0\t0\t0\tchr1:300\n"
    "INSERT\t5\t1\t2\tchr1:400\n"
)


@pytest.fixture
def model_file(tmp_path: Path) -> Path:
    path = tmp_path / "indel_model.json"
    path.write_text(json.dumps(MODEL), encoding="utf-8")
    return path


@pytest.fixture
def reports_file(tmp_path: Path) -> Path:
    path = tmp_path / "reports.tsv"
    path.write_text(REPORTS, encoding="utf-8")
    return path


def read_output(path: Path) -> list[dict]:
    with open_input(path) as fh:
        header = fh.readline().rstrip("\n").split("\t")
        return [dict(zip(header, line.rstrip("\n").split("\t"))) for line in fh]


def test_parser_knows_both_tools():
    parser = build_parser()
    args = parser.parse_args(["check-model", "-m", "model.json"])
    assert args.command == "check-model"
    assert args.model_file == "model.json"

    args = parser.parse_args(["estimate", "-i", "reports.tsv"])
    assert args.command == "estimate"
    assert args.model_file is None
    assert args.prefix == "indelcal"
    assert not args.length_dependence


def test_main_help_returns_0(capsys):
    assert main(["--help"]) == 0
    assert "check-model" in capsys.readouterr().out


def test_main_unknown_tool_returns_2():
    assert main(["--no-log", "simulate"]) == 2


def test_main_no_subcommand_prints_help_and_returns_1(capsys):
    rc = main(["--no-log", "--silent-mode"])
    captured = capsys.readouterr()
    assert rc == 1
    assert "usage:" in captured.out.lower()


def test_logging_creates_named_log_file_and_announces(tmp_path: Path, model_file: Path, capsys):
    rc = main(["--log-dir", str(tmp_path), "--log-name", "check.log", "check-model", "-m", str(model_file)])
    out = capsys.readouterr().out
    log_file = tmp_path / "check.log"
    assert rc == 0
    assert f"indelcal run log: {log_file.resolve()}" in out
    assert "Indel error model is consistent." in log_file.read_text()


def test_check_model_inconsistent_returns_1(tmp_path: Path):
    bad = dict(MODEL, MaxMotifLength=3)
    path = tmp_path / "bad.json"
    path.write_text(json.dumps(bad), encoding="utf-8")
    assert main(["--no-log", "--silent-mode", "check-model", "-m", str(path)]) == 1


def test_check_model_requires_model():
    assert main(["--no-log", "check-model"]) == 2


def test_estimate_invokes_runner(monkeypatch, tmp_path: Path):
    called = {}

    def fake_runner(*args):
        called['args'] = args

    monkeypatch.setattr("indelcal.cli.cli.estimate_runner", fake_runner)
    rc = main(["--no-log", "--silent-mode", "estimate", "-m", "model.json", "-i", "reports.tsv",
               "--length-dependence", "-o", str(tmp_path), "-p", "run1"])
    assert rc == 0
    assert called['args'] == ("model.json", "reports.tsv", None, True, False, str(tmp_path), "run1")


def test_estimate_writes_probabilities(tmp_path: Path, model_file: Path, reports_file: Path):
    config = tmp_path / "config.yml"
    config.write_text(yaml.safe_dump({"indel_ref_error_factor": 2.0}), encoding="utf-8")
    out_dir = tmp_path / "out"
    rc = main(["--no-log", "--silent-mode", "estimate", "-m", str(model_file), "-i", str(reports_file),
               "-c", str(config), "-o", str(out_dir), "-p", "sample"])
    assert rc == 0

    rows = read_output(out_dir / "sample.indel_error_probs.tsv.gz")
    assert [row["description"] for row in rows] == ["chr1:100", "chr1:200", "chr1:300", "chr1:400"]

    # homopolymer insertion: ref tract 4, indel tract 5
    assert float(rows[0]["indel_error_prob"]) == pytest.approx(0.01)
    assert float(rows[0]["ref_error_prob"]) == pytest.approx(2.0 * 0.04)
    assert rows[0]["is_str"] == "1"

    # dinucleotide deletion: tracts 6 and 4, minimum tract 4
    assert float(rows[1]["indel_error_prob"]) == pytest.approx(0.03)
    assert float(rows[1]["ref_error_prob"]) == pytest.approx(2.0 * 0.005)
    assert rows[1]["is_str"] == "0"

    # complex event: worst baseline
    assert rows[2]["type"] == "OTHER"
    assert float(rows[2]["indel_error_prob"]) == pytest.approx(0.002)
    assert float(rows[2]["ref_error_prob"]) == pytest.approx(0.002)

    # repeat unit outside the model: baseline, unscaled
    assert float(rows[3]["indel_error_prob"]) == pytest.approx(0.001)
    assert float(rows[3]["ref_error_prob"]) == pytest.approx(0.002)


def test_estimate_uses_model_from_config(tmp_path: Path, model_file: Path, reports_file: Path):
    config = tmp_path / "config.yml"
    config.write_text(yaml.safe_dump({"error_model": str(model_file)}), encoding="utf-8")
    rc = main(["--no-log", "--silent-mode", "estimate", "-i", str(reports_file),
               "-c", str(config), "-o", str(tmp_path), "-p", "from_config"])
    assert rc == 0
    assert (tmp_path / "from_config.indel_error_probs.tsv.gz").exists()


def test_estimate_refuses_to_overwrite(tmp_path: Path, model_file: Path, reports_file: Path):
    args = ["--no-log", "--silent-mode", "estimate", "-m", str(model_file), "-i", str(reports_file),
            "-o", str(tmp_path), "-p", "again"]
    assert main(args) == 0
    assert main(args) == 3
    assert main(args + ["--overwrite"]) == 0


def test_module_invocation(tmp_path: Path, model_file: Path):
    proc = subprocess.run(
        [sys.executable, "-m", "indelcal", "--no-log", "check-model", "-m", str(model_file)],
        stdout=subprocess.PIPE,
        stderr=subprocess.PIPE,
        text=True,
    )
    assert proc.returncode == 0, f"STDERR:\n{proc.stderr}"
    assert "Indel error model is consistent." in proc.stdout


def test_estimate_reports_tract_outside_model(tmp_path: Path, reports_file: Path):
    # dinucleotide repeats need tracts of 4 bases, this model stops at 3
    short = {
        "MaxMotifLength": 2,
        "MaxTractLength": 3,
        "Model": [row[:3] for row in MODEL["Model"]],
    }
    path = tmp_path / "short.json"
    path.write_text(json.dumps(short), encoding="utf-8")
    rc = main(["--log-dir", str(tmp_path), "--log-name", "short.log", "--silent-mode", "estimate",
               "-m", str(path), "-i", str(reports_file), "-o", str(tmp_path), "-p", "short"])
    assert rc == 1
    log_text = (tmp_path / "short.log").read_text()
    assert "chr1:200" in log_text
    assert "Traceback" not in log_text
