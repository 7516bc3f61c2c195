"""Bot, agent, memory and handler definitions.

These functions are attached to ``Parser`` as methods.
"""

from __future__ import annotations

from typing import Optional

from .. import ast_nodes

__all__ = [
    "parse_bot",
    "parse_agent",
    "parse_memory_block",
    "parse_on",
    "_consume_definition_name",
]


def _consume_definition_name(self, kind: str):
    if self.check("IDENTIFIER") or self.check("STRING"):
        return self.advance()
    raise self.error(f"Expected {kind} name but found {self._describe(self.peek())}", self.peek())


def parse_bot(self) -> ast_nodes.BotDefinition:
    start = self.consume_keyword("bot")
    name_tok = self._consume_definition_name("bot")
    bot = ast_nodes.BotDefinition(name=name_tok.value, span=self._span(start))

    if self.match("INDENT"):
        while not self.check("DEDENT") and not self.is_at_end():
            if self.match_keyword("description"):
                bot.description = self.consume("STRING", message="Expected string after 'description'").value
            elif self.match_keyword("type"):
                # `type agent` and friends are accepted and ignored.
                self.advance()
            elif self.check("KEYWORD", "memory"):
                self.parse_memory_block()
            elif self.check("KEYWORD", "agent"):
                bot.body.append(self.parse_agent())
            elif self.check("KEYWORD", "on"):
                bot.body.append(self.parse_on())
            else:
                bot.body.append(self.parse_statement())
        self.consume("DEDENT", message="Expected end of bot block")

    self.match_keyword("end")
    return bot


def parse_agent(self) -> ast_nodes.AgentDefinition:
    start = self.consume_keyword("agent")
    name_tok = self._consume_definition_name("agent")
    agent = ast_nodes.AgentDefinition(name=name_tok.value, span=self._span(start))

    if self.match("INDENT"):
        while not self.check("DEDENT") and not self.is_at_end():
            if self.match_keyword("description"):
                agent.description = self.consume("STRING", message="Expected string after 'description'").value
            elif self.check("KEYWORD", "memory"):
                self.parse_memory_block()
            elif self.check("KEYWORD", "on"):
                agent.body.append(self.parse_on())
            else:
                token = self.peek()
                raise self.error(
                    f"Agents may only contain a description, memory blocks and handlers; found {self._describe(token)}",
                    token,
                )
        self.consume("DEDENT", message="Expected end of agent block")

    self.match_keyword("end")
    return agent


def parse_memory_block(self) -> None:
    """
    memory <name>
      var <name> [<type>]

    The declaration is syntax-checked and then dropped: memory has no runtime
    representation yet.
    """
    self.consume_keyword("memory")
    self.consume("IDENTIFIER", message="Expected memory name")
    if self.match("INDENT"):
        while not self.check("DEDENT") and not self.is_at_end():
            self.consume_keyword("var", "Expected 'var' declaration in memory block")
            self.consume("IDENTIFIER", message="Expected variable name after 'var'")
            self.match("IDENTIFIER")
        self.consume("DEDENT", message="Expected end of memory block")
    self.match_keyword("end")
    return None


def parse_on(self):
    start = self.consume_keyword("on")
    if self.match_keyword("input"):
        condition: Optional[ast_nodes.Expression] = None
        if self.match_keyword("when"):
            condition = self.parse_expression()
        body = self.parse_block()
        self.match_keyword("end")
        return ast_nodes.OnInputHandler(body=body, condition=condition, span=self._span(start))
    # `event` is not reserved so scripts can still read the `event` variable.
    if self.match("IDENTIFIER", "event"):
        event_tok = self.consume("STRING", message="Expected event name string after 'on event'")
        body = self.parse_block()
        self.match_keyword("end")
        return ast_nodes.OnEventHandler(event=event_tok.value, body=body, span=self._span(start))
    raise self.error("Expected 'input' or 'event' after 'on'", self.peek())
