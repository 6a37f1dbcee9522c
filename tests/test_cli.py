import pytest

from ip_scanner import cli

from .conftest import FakeProber


def _inputs(*answers):
    answers = list(answers)

    def input_func(prompt):
        if not answers:
            raise EOFError
        return answers.pop(0)

    return input_func


def test_prompt_address_uses_default_on_empty(capsys):
    assert cli.prompt_address("start: ", "192.168.1.1", _inputs("")) == "192.168.1.1"
    assert "Using default: 192.168.1.1" in capsys.readouterr().out


def test_prompt_address_reprompts_on_invalid(capsys):
    assert cli.prompt_address("start: ", "192.168.1.1", _inputs("10.0.0.300", " 10.0.0.7 ")) == "10.0.0.7"
    assert "Invalid IP address. Try again." in capsys.readouterr().out


@pytest.mark.parametrize("answer,expected", [("y", True), ("Y", True), ("yes", True), ("n", False), ("", False)])
def test_ask_yes_no(answer, expected):
    assert cli.ask_yes_no("Export?", _inputs(answer)) is expected


def test_ask_yes_no_on_eof():
    assert cli.ask_yes_no("Export?", _inputs()) is False


@pytest.fixture
def workdir(tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    return tmp_path


def test_scripted_scan_with_export(workdir, capsys):
    prober = FakeProber(online={"10.0.0.2"})
    code = cli.main(
        ["-s", "10.0.0.3", "-e", "10.0.0.1", "--export", "--show-offline", "--no-color",
         "--export-dir", str(workdir / "results")],
        input_func=_inputs(),
        prober=prober,
    )

    assert code == 0
    assert sorted(prober.calls) == ["10.0.0.1", "10.0.0.2", "10.0.0.3"]
    out = capsys.readouterr().out
    assert "Online: 1" in out
    assert "=== OFFLINE HOSTS ===" in out

    exported = list((workdir / "results").glob("scan_results_*.txt"))
    assert len(exported) == 1
    assert "10.0.0.2        - Latency: 5ms" in exported[0].read_text(encoding="utf-8")


def test_interactive_defaults_and_answers(workdir, capsys):
    prober = FakeProber()
    code = cli.main(["--no-color", "-q"], input_func=_inputs("", "192.168.1.3", "n", "n"), prober=prober)

    assert code == 0
    assert sorted(prober.calls) == ["192.168.1.1", "192.168.1.2", "192.168.1.3"]
    assert not list(workdir.glob("scan_results_*.txt"))
    assert "OFFLINE HOSTS" not in capsys.readouterr().out


def test_invalid_start_argument(workdir, capsys):
    prober = FakeProber()
    code = cli.main(["-s", "192.168.1.256", "-e", "192.168.1.1", "--no-color"], input_func=_inputs(), prober=prober)

    assert code == 1
    assert prober.calls == []
    assert "192.168.1.256" in capsys.readouterr().err


def test_invalid_concurrency(workdir, capsys):
    code = cli.main(["-s", "10.0.0.1", "-e", "10.0.0.2", "-c", "0"], input_func=_inputs(), prober=FakeProber())
    assert code == 1
    assert "concurrent_limit" in capsys.readouterr().err


def test_init_config(workdir):
    assert cli.main(["--init-config"]) == 0
    assert (workdir / "scanner_config.yaml").is_file()
