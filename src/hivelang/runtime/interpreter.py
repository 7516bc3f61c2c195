"""
Async tree-walking interpreter for Hivelang programs.

The interpreter instance only holds loaded bots, the tool table and runtime
configuration. Every `run` / `emit_event` call builds its own
ExecutionContext and threads it through the execution functions, so
overlapping calls on one instance do not share state.
"""

from __future__ import annotations

import asyncio
import logging
from typing import Any, Dict, Iterable, List, Optional, Union

from .. import ast_nodes
from ..errors import HivelangError, ToolError
from ..lexer import Lexer
from ..parser import Parser
from ..schemas import ExecutionResult
from ..tools.dispatch import ToolDispatcher, merge_result_payload
from ..tools.registry import HostTool, ToolTable
from . import values
from .config import RuntimeConfig, load_runtime_config
from .context import ExecutionContext, ToolCallRecord
from .expressions import ExpressionEvaluator
from .outcomes import CONTINUE, DelegateTo, Outcome, Return

logger = logging.getLogger("hivelang.runtime")


class Interpreter:
    def __init__(self, config: Optional[RuntimeConfig] = None) -> None:
        self.config = config or load_runtime_config()
        self.bots: Dict[str, ast_nodes.BotDefinition] = {}
        self.tool_table = ToolTable()
        self.dispatcher = ToolDispatcher(self.tool_table, self.config)

    # -- host surface -------------------------------------------------

    def register_tool(self, name: str, fn: HostTool) -> None:
        self.tool_table.register(name, fn)

    def set_fallback_tool_handler(self, fn: Optional[HostTool]) -> None:
        self.tool_table.set_fallback(fn)

    def load(self, source: str) -> ast_nodes.Program:
        """Tokenize and parse `source`, registering every bot by name."""
        tokens = Lexer(source).tokenize()
        program = Parser(tokens).parse_program()
        self.register_program(program)
        return program

    def register_program(self, program: ast_nodes.Program) -> None:
        for bot in program.bots:
            if bot.name in self.bots:
                logger.debug("Replacing previously loaded bot '%s'", bot.name)
            self.bots[bot.name] = bot

    async def run(
        self,
        source: Union[str, ast_nodes.Program],
        input_value: Any = None,
        initial_variables: Optional[Dict[str, Any]] = None,
    ) -> ExecutionResult:
        """
        Execute a script (source text or an already parsed Program) once.

        Bot-level `on input` handlers run for each bot; bare top-level
        statements run in order. Lex and parse errors propagate; runtime
        errors are collected on the result.
        """
        context = ExecutionContext(variables={**(initial_variables or {}), "input": input_value})
        if isinstance(source, ast_nodes.Program):
            program = source
            self.register_program(program)
        else:
            program = self.load(source)
        for node in program.body:
            if isinstance(node, ast_nodes.BotDefinition):
                await self._run_bot_input(node, context)
                continue
            outcome = await self.execute_statement(node, context)
            self._settle(outcome, context)
        return context.to_result()

    async def emit_event(self, event_name: str, input_value: Any = None) -> ExecutionResult:
        """Run every `on event` handler matching `event_name` across loaded bots and their agents."""
        context = ExecutionContext(variables={"input": input_value, "event": event_name})
        for bot in list(self.bots.values()):
            for handler in _event_handlers(bot, event_name):
                await self._run_handler(handler.body, context)
        return context.to_result()

    def run_sync(
        self,
        source: Union[str, ast_nodes.Program],
        input_value: Any = None,
        initial_variables: Optional[Dict[str, Any]] = None,
    ) -> ExecutionResult:
        return asyncio.run(self.run(source, input_value, initial_variables))

    def emit_event_sync(self, event_name: str, input_value: Any = None) -> ExecutionResult:
        return asyncio.run(self.emit_event(event_name, input_value))

    # -- handlers -----------------------------------------------------

    async def _run_bot_input(self, bot: ast_nodes.BotDefinition, context: ExecutionContext) -> None:
        for node in bot.body:
            if not isinstance(node, ast_nodes.OnInputHandler):
                continue
            if node.condition is not None:
                try:
                    should_run = values.is_truthy(self.evaluate(node.condition, context))
                except HivelangError as err:
                    self._record_error(err, context)
                    continue
                if not should_run:
                    continue
            await self._run_handler(node.body, context)

    async def _run_handler(self, body: ast_nodes.Block, context: ExecutionContext) -> None:
        outcome = await self.execute_block(body, context)
        self._settle(outcome, context)

    def _settle(self, outcome: Outcome, context: ExecutionContext) -> None:
        if isinstance(outcome, DelegateTo):
            logger.debug("Handler requested delegation to '%s'", outcome.agent)

    # -- statements ---------------------------------------------------

    async def execute_block(self, block: ast_nodes.Block, context: ExecutionContext) -> Outcome:
        return await self._execute_sequence(block.statements, context)

    async def _execute_sequence(self, statements: List[ast_nodes.Statement], context: ExecutionContext) -> Outcome:
        """
        Run statements strictly in order. `return` and `delegate` are recorded
        but do not end the block; the last such outcome is handed back.
        """
        result: Outcome = CONTINUE
        for statement in statements:
            outcome = await self.execute_statement(statement, context)
            if outcome is not CONTINUE:
                result = outcome
        return result

    async def execute_statement(self, statement: ast_nodes.Statement, context: ExecutionContext) -> Outcome:
        """Execute one statement; runtime errors are recorded and execution moves on."""
        try:
            return await self._execute(statement, context)
        except HivelangError as err:
            self._record_error(err, context)
            return CONTINUE

    async def _execute(self, statement: ast_nodes.Statement, context: ExecutionContext) -> Outcome:
        if isinstance(statement, ast_nodes.Block):
            return await self.execute_block(statement, context)
        if isinstance(statement, ast_nodes.IfStatement):
            return await self._execute_if(statement, context)
        if isinstance(statement, ast_nodes.CallStatement):
            await self._execute_call(statement, context)
            return CONTINUE
        if isinstance(statement, ast_nodes.SayStatement):
            context.output.append(self.evaluate(statement.message, context))
            return CONTINUE
        if isinstance(statement, ast_nodes.Assignment):
            context.variables[statement.variable] = self.evaluate(statement.value, context)
            return CONTINUE
        if isinstance(statement, ast_nodes.LoopStatement):
            return await self._execute_loop(statement, context)
        if isinstance(statement, ast_nodes.DelegateStatement):
            return self._execute_delegate(statement, context)
        if isinstance(statement, ast_nodes.ReturnStatement):
            value = self.evaluate(statement.value, context)
            context.return_value = value
            return Return(value)
        if isinstance(statement, ast_nodes.ParallelBlock):
            return await self._execute_parallel(statement, context)
        raise HivelangError(f"Unsupported statement '{type(statement).__name__}'")

    async def _execute_if(self, node: ast_nodes.IfStatement, context: ExecutionContext) -> Outcome:
        if values.is_truthy(self.evaluate(node.condition, context)):
            return await self.execute_block(node.consequent, context)
        if isinstance(node.alternate, ast_nodes.IfStatement):
            return await self._execute_if(node.alternate, context)
        if node.alternate is not None:
            return await self.execute_block(node.alternate, context)
        return CONTINUE

    async def _execute_loop(self, node: ast_nodes.LoopStatement, context: ExecutionContext) -> Outcome:
        iterable = self.evaluate(node.iterable, context)
        result: Outcome = CONTINUE
        if not isinstance(iterable, (list, tuple)):
            return result
        for item in iterable:
            context.variables[node.variable] = item
            outcome = await self.execute_block(node.body, context)
            if outcome is not CONTINUE:
                result = outcome
        return result

    async def _execute_call(self, node: ast_nodes.CallStatement, context: ExecutionContext) -> None:
        args = {key: self.evaluate(expr, context) for key, expr in node.arguments.items()}
        try:
            result = await self.dispatcher.invoke(node.tool, args, context)
        except ToolError as err:
            self._record_error(err, context)
            result = None
        if node.output_variable:
            context.variables[node.output_variable] = merge_result_payload(result)

    def _execute_delegate(self, node: ast_nodes.DelegateStatement, context: ExecutionContext) -> Outcome:
        params = {key: self.evaluate(expr, context) for key, expr in node.params.items()}
        context.tool_calls.append(
            ToolCallRecord(tool="delegate", args={"agent": node.target_agent, "params": params})
        )
        logger.info("Delegating to agent '%s'", node.target_agent)
        return DelegateTo(agent=node.target_agent, args=params)

    async def _execute_parallel(self, node: ast_nodes.ParallelBlock, context: ExecutionContext) -> Outcome:
        if not self.config.parallel_concurrency:
            return await self._execute_sequence(node.statements, context)

        # Opt-in: branches share variables but log into forked contexts.
        semaphore = asyncio.Semaphore(self.config.max_parallel_tasks)
        branches = [context.fork() for _ in node.statements]

        async def run_branch(statement: ast_nodes.Statement, branch: ExecutionContext) -> Outcome:
            async with semaphore:
                return await self.execute_statement(statement, branch)

        outcomes = await asyncio.gather(
            *(run_branch(statement, branch) for statement, branch in zip(node.statements, branches))
        )
        result: Outcome = CONTINUE
        for branch, outcome in zip(branches, outcomes):
            context.absorb(branch)
            if outcome is not CONTINUE:
                result = outcome
        return result

    # -- helpers ------------------------------------------------------

    def evaluate(self, expr: ast_nodes.Expression, context: ExecutionContext) -> Any:
        return ExpressionEvaluator(context.variables).evaluate(expr)

    def _record_error(self, err: HivelangError, context: ExecutionContext) -> None:
        message = str(err)
        logger.debug("Recorded runtime error: %s", message)
        context.errors.append(message)


def _event_handlers(bot: ast_nodes.BotDefinition, event_name: str) -> Iterable[ast_nodes.OnEventHandler]:
    for node in bot.body:
        if isinstance(node, ast_nodes.OnEventHandler) and node.event == event_name:
            yield node
        elif isinstance(node, ast_nodes.AgentDefinition):
            for handler in node.body:
                if isinstance(handler, ast_nodes.OnEventHandler) and handler.event == event_name:
                    yield handler
