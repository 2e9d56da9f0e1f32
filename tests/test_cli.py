import subprocess

import pytest
import yaml

from gravlab.cli import build_parser, main


def _no_commands(*args, **kwargs):
    raise FileNotFoundError("command not available")


def test_generate_defaults():
    args = build_parser().parse_args(["generate"])
    assert args.source == "."
    assert args.output == ""
    assert args.name == "generated"
    assert args.instance_type == "m7g.medium"
    assert args.scan_notebooks is True


def test_generate_no_scan_flag():
    args = build_parser().parse_args(["generate", "--no-scan-notebooks", "-n", "x"])
    assert args.scan_notebooks is False
    assert args.name == "x"


def test_version(capsys):
    with pytest.raises(SystemExit) as exit_info:
        main(["--version"])
    assert exit_info.value.code == 0
    assert "v0.5.0" in capsys.readouterr().out


def test_no_command_prints_help(capsys):
    assert main([]) == 0
    assert "generate" in capsys.readouterr().out


def test_generate_writes_file(tmp_path, monkeypatch):
    monkeypatch.setattr(subprocess, "run", _no_commands)
    (tmp_path / "requirements.txt").write_text(
        "pandas==1.3.0\nnumpy>=1.20.0\nmatplotlib\ntorch\n"
    )
    out = tmp_path / "test-env.yaml"
    code = main(
        ["generate", "-s", str(tmp_path), "-o", str(out), "-n", "test-env", "--no-scan-notebooks"]
    )
    assert code == 0
    content = out.read_text()
    assert "name: test-env" in content
    assert "instance_type: m7g.large" in content
    data = yaml.safe_load(content)
    assert "pandas" in data["pip_packages"]
    assert "torch" in data["pip_packages"]


def test_generate_unwritable_output(tmp_path, monkeypatch, capsys):
    monkeypatch.setattr(subprocess, "run", _no_commands)
    out = tmp_path / "missing" / "env.yaml"
    code = main(["generate", "-s", str(tmp_path), "-o", str(out), "--no-scan-notebooks"])
    assert code == 1
    assert "Error:" in capsys.readouterr().err