import asyncio
from textwrap import dedent

import pytest

from hivelang.errors import ParseError


SCRIPT = dedent(
    """
    bot Scheduler
      on event "tick"
        say f"bot tick {input}"
      end

      agent Reporter
        on event "tick"
          say f"agent saw {event}"
        end
        on event "other"
          say "wrong event"
        end
      end

      on event "tick"
        say "second bot handler"
      end

      on input
        say "input handler"
      end
    end

    bot Auditor
      on event "tick"
        set audited to true
      end
    end
    """
)


def test_emit_runs_matching_handlers_in_declaration_order(interpreter):
    interpreter.load(SCRIPT)
    result = asyncio.run(interpreter.emit_event("tick", 7))
    assert result.output == ["bot tick 7", "agent saw tick", "second bot handler"]
    assert result.variables["audited"] is True
    assert result.variables["event"] == "tick"
    assert result.variables["input"] == 7


def test_emit_unknown_event_is_a_no_op(interpreter):
    interpreter.load(SCRIPT)
    result = interpreter.emit_event_sync("nobody-listens", None)
    assert result.output == []
    assert result.errors == []


def test_emit_before_load_does_nothing(interpreter):
    result = interpreter.emit_event_sync("tick", None)
    assert result.output == []


def test_run_registers_bots_for_later_events(interpreter):
    interpreter.run_sync(SCRIPT, "hello")
    result = interpreter.emit_event_sync("other", None)
    assert result.output == ["wrong event"]


def test_reloading_replaces_bot_by_name(interpreter):
    interpreter.load(SCRIPT)
    interpreter.load('bot Scheduler\n  on event "tick"\n    say "replaced"\n')
    result = interpreter.emit_event_sync("tick", None)
    assert result.output == ["replaced"]


def test_load_reports_parse_errors(interpreter):
    with pytest.raises(ParseError):
        interpreter.load("bot A\n  on event\n    say 1\n")
    assert interpreter.bots == {}


def test_event_variable_is_readable_in_handlers(interpreter):
    interpreter.load('bot A\n  on event "ping"\n    if event == "ping"\n      say "pong"\n')
    assert interpreter.emit_event_sync("ping", None).output == ["pong"]
