import json
from pathlib import Path

import pytest

from hivelang.cli import STARTER_SCRIPT, main


SCRIPT_TEXT = (
    'bot "Concierge"\n'
    '  on input when input contains "weather"\n'
    '    call weather.today with { city: city } as report\n'
    '    say f"Weather for {report.city}"\n'
    '  on input\n'
    '    say f"You said {input}"\n'
    '  on event "wake"\n'
    '    say f"Woke with {input}"\n'
)


def write_script(tmp_path: Path, text: str = SCRIPT_TEXT) -> Path:
    script = tmp_path / "bot.hive"
    script.write_text(text, encoding="utf-8")
    return script


def test_cli_tokens_lists_tokens(tmp_path, capsys):
    main(["tokens", str(write_script(tmp_path))])
    out = capsys.readouterr().out
    assert "KEYWORD\t'bot'" in out
    assert "INDENT" in out
    assert out.strip().splitlines()[-1].endswith("EOF\t''")


def test_cli_parse_outputs_ast(tmp_path, capsys):
    main(["parse", str(write_script(tmp_path))])
    data = json.loads(capsys.readouterr().out)
    assert data["body"][0]["name"] == "Concierge"


def test_cli_check_ok(tmp_path, capsys):
    main(["check", str(write_script(tmp_path))])
    assert capsys.readouterr().out.strip() == "OK"


def test_cli_check_reports_errors(tmp_path, capsys):
    script = write_script(tmp_path, "bot A\n  on input\n      say 1\n    say 2\n")
    with pytest.raises(SystemExit) as excinfo:
        main(["check", str(script)])
    assert excinfo.value.code == 1
    assert "Indentation error" in capsys.readouterr().out


def test_cli_run_without_tools_records_errors(tmp_path, capsys):
    main(["run", str(write_script(tmp_path)), "--input", "weather please", "--vars", '{"city": "Oslo"}'])
    data = json.loads(capsys.readouterr().out)
    assert data["errors"] == ["Tool not found: weather.today"]
    assert data["output"] == ["Weather for null", "You said weather please"]


def test_cli_run_simulate_echoes_tool_args(tmp_path, capsys):
    main(
        [
            "run",
            str(write_script(tmp_path)),
            "--input",
            "weather please",
            "--vars",
            '{"city": "Oslo"}',
            "--simulate",
        ]
    )
    data = json.loads(capsys.readouterr().out)
    assert data["errors"] == []
    assert data["output"][0] == "Weather for Oslo"
    assert data["tool_calls"][0] == {"tool": "weather.today", "args": {"city": "Oslo"}, "is_fallback": True}


def test_cli_run_rejects_bad_vars(tmp_path):
    with pytest.raises(SystemExit) as excinfo:
        main(["run", str(write_script(tmp_path)), "--vars", "[1, 2]"])
    assert "JSON object" in str(excinfo.value.code)


def test_cli_emit_runs_event_handlers(tmp_path, capsys):
    main(["emit", str(write_script(tmp_path)), "wake", "--input", "coffee"])
    data = json.loads(capsys.readouterr().out)
    assert data["output"] == ["Woke with coffee"]
    assert data["variables"]["event"] == "wake"


def test_cli_init_scaffolds_starter(tmp_path, capsys):
    target = tmp_path / "demo"
    main(["init", str(target)])
    assert (target / "bot.hive").read_text(encoding="utf-8") == STARTER_SCRIPT
    assert '"status": "ok"' in capsys.readouterr().out

    with pytest.raises(SystemExit):
        main(["init", str(target)])
    main(["init", str(target), "--force"])


def test_starter_script_runs(tmp_path, capsys):
    main(["init", str(tmp_path)])
    capsys.readouterr()
    main(["run", str(tmp_path / "bot.hive"), "--input", "hello there", "--simulate"])
    data = json.loads(capsys.readouterr().out)
    assert data["output"][0] == "Hello! You said: hello there"
    assert data["errors"] == []


def test_cli_missing_file(tmp_path):
    with pytest.raises(SystemExit) as excinfo:
        main(["check", str(tmp_path / "nope.hive")])
    assert "Cannot read" in str(excinfo.value.code)
