from pathlib import Path

import pytest
import yaml

from optbind.__main__ import get_parser, main


@pytest.fixture(autouse=True)
def isolated(tmp_path, monkeypatch):
    """Keep config discovery away from the real working directory and home."""
    monkeypatch.chdir(tmp_path)
    monkeypatch.delenv("OPTBIND_CONFIG", raising=False)
    monkeypatch.setattr(Path, "home", lambda: tmp_path / "home")


@pytest.fixture
def config(tmp_path):
    path = tmp_path / "tester.yaml"
    path.write_text(
        yaml.safe_dump(
            {
                "name": "tester",
                "commands": [
                    {
                        "name": "run",
                        "options": [{"keys": ["-v", "--verbose"]}],
                        "parameters": [
                            {"name": "executable"},
                            {"name": "args", "kind": "collected"},
                        ],
                    }
                ],
            }
        ),
        encoding="UTF-8",
    )
    return path


def test_get_parser():
    args = get_parser().parse_args(["-c", "x.yaml", "run", "-v", "cli"])

    assert args.config == Path("x.yaml")
    assert args.tokens == ["run", "-v", "cli"]
    assert not args.run


def test_main_prints_bindings(config, capsys):
    assert main(["-c", str(config), "run", "-v", "cli", "arg"]) == 0

    captured = capsys.readouterr().out
    assert "verbose" in captured
    assert "'cli'" in captured
    assert "['arg']" in captured


def test_main_discovers_config(config, capsys):
    config.rename(config.with_name("optbind.yaml"))

    assert main(["run", "cli"]) == 0
    assert "executable" in capsys.readouterr().out


def test_main_reports_parse_errors(config, capsys):
    assert main(["-c", str(config), "run"]) == 1
    assert "Missing required parameter: <executable>" in capsys.readouterr().out


def test_main_help(config, capsys):
    assert main(["-c", str(config), "run", "--help"]) == 0
    assert "Usage: tester run <executable> [<args>] ..." in capsys.readouterr().out


def test_main_run_executes_command(config):
    assert main(["-c", str(config), "--run", "run", "cli"]) == 0


def test_main_without_config(capsys):
    assert main(["run"]) == 1
    assert "No optbind config found" in capsys.readouterr().out


def test_main_invalid_config(tmp_path, capsys):
    broken = tmp_path / "broken.yaml"
    broken.write_text("name: tester\n", encoding="UTF-8")

    assert main(["-c", str(broken), "run"]) == 1
    assert "Invalid config" in capsys.readouterr().out


def test_main_version_flag(tmp_path, capsys):
    path = tmp_path / "versioned.yaml"
    path.write_text(
        yaml.safe_dump(
            {"name": "tester", "version": "2.0.0", "commands": [{"name": "run"}]}
        ),
        encoding="UTF-8",
    )

    assert main(["-c", str(path), "run", "--version"]) == 0
    assert "tester version 2.0.0" in capsys.readouterr().out
