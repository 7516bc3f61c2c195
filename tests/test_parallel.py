import asyncio
from textwrap import dedent

from hivelang.runtime.config import RuntimeConfig
from hivelang.runtime.interpreter import Interpreter


PARALLEL_SCRIPT = dedent(
    """
    parallel
      call slow.fetch with { name: "first", delay: 50 } as a
      call slow.fetch with { name: "second", delay: 0 } as b
      say "inline"
    end
    say f"{a.name} {b.name}"
    """
)


def _slow_interpreter(concurrent=False, max_parallel=4):
    interpreter = Interpreter(
        config=RuntimeConfig(parallel_concurrency=concurrent, max_parallel_tasks=max_parallel)
    )
    events = []
    active = {"now": 0, "peak": 0}

    async def slow_fetch(args, context):
        active["now"] += 1
        active["peak"] = max(active["peak"], active["now"])
        events.append(f"start {args['name']}")
        await asyncio.sleep(args["delay"] / 1000)
        events.append(f"end {args['name']}")
        active["now"] -= 1
        context.output.append(f"from {args['name']}")
        return {"name": args["name"]}

    interpreter.register_tool("slow.fetch", slow_fetch)
    return interpreter, events, active


def test_parallel_block_runs_in_order_by_default():
    interpreter, events, active = _slow_interpreter()
    result = interpreter.run_sync(PARALLEL_SCRIPT, "")
    assert events == ["start first", "end first", "start second", "end second"]
    assert active["peak"] == 1
    assert result.output == ["from first", "from second", "inline", "first second"]


def test_later_statement_sees_earlier_call_result():
    interpreter = Interpreter(config=RuntimeConfig())

    async def fetch(args, context):
        await asyncio.sleep(0)
        return {"v": 1}

    interpreter.register_tool("t.fetch", fetch)
    result = interpreter.run_sync("parallel\n  call t.fetch as r\n  say r.v\n", "")
    assert result.output == [1]
    assert result.errors == []


def test_branch_errors_are_collected_in_order():
    interpreter = Interpreter(config=RuntimeConfig())

    async def boom(args, context):
        await asyncio.sleep(0)
        raise ValueError(args["label"])

    interpreter.register_tool("boom", boom)
    result = interpreter.run_sync(
        'parallel\n  call boom with label: "one"\n  call boom with label: "two"\nsay "after"\n', ""
    )
    assert result.errors == ["Error executing boom: one", "Error executing boom: two"]
    assert result.output == ["after"]


def test_return_inside_parallel_does_not_stop_the_handler():
    interpreter = Interpreter(config=RuntimeConfig())
    source = dedent(
        """
        bot A
          on input
            parallel
              say "branch"
              return "early"
            say "after parallel"
        """
    )
    result = interpreter.run_sync(source, "x")
    assert result.output == ["branch", "after parallel"]
    assert result.return_value == "early"


def test_concurrent_branches_when_enabled():
    interpreter, events, active = _slow_interpreter(concurrent=True)
    result = interpreter.run_sync(PARALLEL_SCRIPT, "")
    # The second call finishes while the first is still sleeping.
    assert events.index("end second") < events.index("end first")
    assert active["peak"] == 2
    assert result.output[-1] == "first second"


def test_concurrent_results_are_aggregated_in_declaration_order():
    interpreter, _, _ = _slow_interpreter(concurrent=True)
    result = interpreter.run_sync(PARALLEL_SCRIPT, "")
    assert result.output == ["from first", "from second", "inline", "first second"]
    assert [call.args["name"] for call in result.tool_calls] == ["first", "second"]


def test_concurrency_is_bounded_by_config():
    interpreter, events, active = _slow_interpreter(concurrent=True, max_parallel=1)
    interpreter.run_sync(PARALLEL_SCRIPT, "")
    assert active["peak"] == 1
    assert events[:2] == ["start first", "end first"]
