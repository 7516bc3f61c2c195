from hivelang import ast_nodes
from hivelang.parser import parse_expression_source


def test_spans_are_parsed_at_load_time():
    expr = parse_expression_source('f"Hi {user.name}, you have {count + 1} items"')
    assert isinstance(expr, ast_nodes.FString)
    text_parts = [p for p in expr.parts if isinstance(p, str)]
    spans = [p for p in expr.parts if isinstance(p, ast_nodes.FStringSpan)]
    assert text_parts == ["Hi ", ", you have ", " items"]
    assert isinstance(spans[0].expression, ast_nodes.VariableAccess)
    assert spans[1].expression.operator == "+"


def test_unparseable_span_is_kept_verbatim():
    expr = parse_expression_source('f"price: {not valid here} ok"')
    assert expr.parts == ["price: {not valid here} ok"]


def test_fstring_rendering(run):
    result = run(
        'set user = {"name": "Ada", "tags": ["a", "b"]}\n'
        'say f"Hello {user.name}! Tags: {user.tags}. Next: {user.tags[1]}. Count: {user.tags.length * 2}"\n'
    )
    assert result.output == ["Hello Ada! Tags: a,b. Next: b. Count: 4"]


def test_missing_values_render_as_null(run):
    result = run('say f"Value: {nothing.here}"\n')
    assert result.output == ["Value: null"]


def test_input_keyword_inside_fstring(run):
    result = run('say f"You said: {input}"\n', input_value="hi")
    assert result.output == ["You said: hi"]


def test_fstring_with_no_spans(run):
    assert run('say f"plain text"\n').output == ["plain text"]


def test_fstring_numbers_render_without_trailing_zero(run):
    result = run('say f"{10 / 4} and {10 / 5}"\n')
    assert result.output == ["2.5 and 2"]


def test_identifier_span_at_end_of_source(run):
    result = run('say f"Hi {input}"', input_value="Bo")
    assert result.output == ["Hi Bo"]


def test_identifier_span_is_parsed():
    expr = parse_expression_source('f"{name}"')
    (span,) = expr.parts
    assert isinstance(span.expression, ast_nodes.VariableAccess)
