from textwrap import dedent

import pytest

from hivelang import ast_nodes
from hivelang.parser import ParseError, parse_source


SUPPORT_BOT = dedent(
    '''
    bot "SupportBot"
      description "Routes customer questions"
      type assistant

      memory session
        var last_topic string
        var attempts
      end

      agent Researcher
        description "Looks things up"
        on event "research"
          call search.web with { q: input } as hits
        end
      end

      on input when input contains "refund"
        say "Refunds take 5 days"
      end

      on input
        say f"Echo: {input}"
      end

      on event "daily_digest"
        say "digest"
      end
    end
    '''
)


def test_bot_with_agents_handlers_and_memory():
    program = parse_source(SUPPORT_BOT)
    (bot,) = program.bots
    assert bot.name == "SupportBot"
    assert bot.description == "Routes customer questions"
    kinds = [type(node).__name__ for node in bot.body]
    assert kinds == ["AgentDefinition", "OnInputHandler", "OnInputHandler", "OnEventHandler"]


def test_agent_definition_contents():
    bot = parse_source(SUPPORT_BOT).bots[0]
    agent = bot.body[0]
    assert agent.name == "Researcher"
    assert agent.description == "Looks things up"
    (handler,) = agent.body
    assert isinstance(handler, ast_nodes.OnEventHandler)
    assert handler.event == "research"


def test_input_handler_guard_is_optional():
    bot = parse_source(SUPPORT_BOT).bots[0]
    guarded, fallback = bot.body[1], bot.body[2]
    assert isinstance(guarded.condition, ast_nodes.BinaryExpression)
    assert guarded.condition.operator == "contains"
    assert fallback.condition is None


def test_identifier_bot_name_and_optional_end():
    program = parse_source("bot Greeter\n  on input\n    say \"hi\"\n")
    assert program.bots[0].name == "Greeter"
    assert len(program.bots[0].body) == 1


def test_program_mixes_bots_and_statements():
    source = 'set greeting to "hi"\nbot A\n  on input\n    say greeting\nsay "after"\n'
    program = parse_source(source)
    kinds = [type(node).__name__ for node in program.body]
    assert kinds == ["Assignment", "BotDefinition", "SayStatement"]


def test_bot_level_statements_are_kept():
    program = parse_source("bot A\n  set x to 1\n")
    assert isinstance(program.bots[0].body[0], ast_nodes.Assignment)


def test_agent_rejects_bare_statements():
    source = "bot A\n  agent B\n    say 1\n"
    with pytest.raises(ParseError) as excinfo:
        parse_source(source)
    assert "Agents may only contain" in excinfo.value.message
    assert excinfo.value.line == 3


def test_on_requires_input_or_event():
    with pytest.raises(ParseError) as excinfo:
        parse_source("bot A\n  on message\n    say 1\n")
    assert "Expected 'input' or 'event'" in excinfo.value.message


def test_event_name_must_be_a_string():
    with pytest.raises(ParseError):
        parse_source("bot A\n  on event tick\n    say 1\n")


def test_memory_block_requires_var_lines():
    with pytest.raises(ParseError) as excinfo:
        parse_source("bot A\n  memory notes\n    say 1\n")
    assert "Expected 'var'" in excinfo.value.message


def test_missing_bot_name_errors():
    with pytest.raises(ParseError) as excinfo:
        parse_source("bot\n  on input\n    say 1\n")
    assert "Expected bot name" in excinfo.value.message
