import json
import os
import stat
from pathlib import Path

import pytest
from Bio import bgzf

from indelcal.common.io import (is_compressed, open_input, open_output, read_json, validate_input_path,
                                validate_output_path)


def test_is_compressed_plain_and_bgzipped(tmp_path: Path):
    plain = tmp_path / "model.json"
    plain.write_text("{}", encoding="utf-8")
    compressed = tmp_path / "model.json.gz"
    with bgzf.BgzfWriter(compressed, "wt") as f:
        f.write("{}")

    assert is_compressed(plain) is False
    assert is_compressed(compressed) is True


def test_open_input_reads_plain_and_bgzipped(tmp_path: Path):
    plain = tmp_path / "a.tsv"
    plain.write_text("type\tunit\n", encoding="utf-8")
    with open_input(plain) as fh:
        assert fh.read() == "type\tunit\n"

    compressed = tmp_path / "b.tsv.gz"
    with bgzf.BgzfWriter(compressed, "wt") as fh:
        fh.write("INSERT\t1\n")
    with open_input(compressed) as fh:
        assert "".join(fh) == "INSERT\t1\n"


def test_open_output_round_trips_through_open_input(tmp_path: Path):
    out = tmp_path / "nested" / "dir" / "out.tsv.gz"
    with open_output(out) as fh:
        fh.write("line1\nline2\n")
    assert is_compressed(out)
    with open_input(out) as fh:
        assert fh.read() == "line1\nline2\n"

    plain = tmp_path / "other" / "out.txt"
    with open_output(plain) as fh:
        fh.write("data")
    assert plain.read_text(encoding="utf-8") == "data"


def test_open_output_exclusive_mode_on_existing_compressed_file(tmp_path: Path):
    out = tmp_path / "exists.tsv.gz"
    with open_output(out) as fh:
        fh.write("x")
    with pytest.raises(SystemExit) as exc:
        with open_output(out, mode="xt"):
            pass
    assert exc.value.code == 3


def test_read_json(tmp_path: Path):
    path = tmp_path / "doc.json.gz"
    with open_output(path) as fh:
        fh.write(json.dumps({"MaxMotifLength": 2}))
    assert read_json(path) == {"MaxMotifLength": 2}


def test_validate_input_path(tmp_path: Path):
    with pytest.raises(SystemExit) as exc:
        validate_input_path(tmp_path / "missing.json")
    assert exc.value.code == 5

    empty = tmp_path / "empty.json"
    empty.touch()
    with pytest.raises(SystemExit) as exc:
        validate_input_path(empty)
    assert exc.value.code == 7

    good = tmp_path / "good.json"
    good.write_text("{}", encoding="utf-8")
    validate_input_path(good)


@pytest.mark.skipif(os.name == "nt" or os.geteuid() == 0, reason="permission bits are not enforced")
def test_validate_input_path_unreadable(tmp_path: Path):
    path = tmp_path / "secret.json"
    path.write_text("{}", encoding="utf-8")
    path.chmod(0)
    try:
        with pytest.raises(SystemExit) as exc:
            validate_input_path(path)
        assert exc.value.code == 9
    finally:
        path.chmod(stat.S_IRUSR | stat.S_IWUSR)


def test_validate_output_path(tmp_path: Path):
    existing = tmp_path / "out.tsv"
    existing.write_text("x", encoding="utf-8")
    with pytest.raises(SystemExit) as exc:
        validate_output_path(existing)
    assert exc.value.code == 3
    validate_output_path(existing, overwrite=True)

    new_dir = tmp_path / "new" / "dir"
    validate_output_path(new_dir, is_file=False)
    assert new_dir.is_dir()
