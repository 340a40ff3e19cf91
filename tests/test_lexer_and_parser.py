import pytest
from hypothesis import given, strategies as st

from nino.errors import NinoParserError
from nino.reader.lexer import TokenKind, tokenize
from nino.reader.parser import Parser, TokenStream, parse, parse_declaration, parse_expression
from nino.types.ast import (
    Array,
    BinaryOperation,
    BinaryOperator,
    Bool,
    BOOLEAN,
    Char,
    CHAR,
    Declaration,
    FUNCTION,
    FunctionCall,
    FunctionDeclaration,
    Identifier,
    Match,
    Number,
    NUMBER,
    Parameter,
    array_of,
    string_literal,
)


def _bin(op, left, right):
    return BinaryOperation(op, left, right)


def _n(value):
    return Number(float(value))


def test_parse_simple_declaration():
    assert parse_declaration("let x:num = 3;") == Declaration("x", NUMBER, Number(3.0))


def test_parse_declaration_precedence():
    expected = Declaration(
        "x",
        BOOLEAN,
        _bin(
            BinaryOperator.EQUAL,
            _bin(BinaryOperator.GREATER_THAN, _bin(BinaryOperator.ADD, _n(1), _n(3)), _n(2)),
            _n(1),
        ),
    )
    assert parse_declaration("let x:bool = 1+3>2 == 1;") == expected


@pytest.mark.parametrize(
    "source,expected",
    [
        ("1 + 2 * 3", _bin(BinaryOperator.ADD, _n(1), _bin(BinaryOperator.MULTIPLY, _n(2), _n(3)))),
        ("(1 * 2) + 3", _bin(BinaryOperator.ADD, _bin(BinaryOperator.MULTIPLY, _n(1), _n(2)), _n(3))),
        ("1 - 2 - 3", _bin(BinaryOperator.SUBTRACT, _bin(BinaryOperator.SUBTRACT, _n(1), _n(2)), _n(3))),
        ("8 / 4 / 2", _bin(BinaryOperator.DIVIDE, _bin(BinaryOperator.DIVIDE, _n(8), _n(4)), _n(2))),
        ("7 mod 3", _bin(BinaryOperator.MODULO, _n(7), _n(3))),
        ("7 % 3", _bin(BinaryOperator.MODULO, _n(7), _n(3))),
        ("1 < 2 == 3 >= 4", _bin(
            BinaryOperator.EQUAL,
            _bin(BinaryOperator.LESS_THAN, _n(1), _n(2)),
            _bin(BinaryOperator.GREATER_EQUAL_THAN, _n(3), _n(4)),
        )),
        ("a != b", _bin(BinaryOperator.NOT_EQUAL, Identifier("a"), Identifier("b"))),
        ("a <= b", _bin(BinaryOperator.LESS_EQUAL_THAN, Identifier("a"), Identifier("b"))),
    ]
)
def test_binary_precedence_and_associativity(source, expected):
    assert parse_expression(source) == expected


@pytest.mark.parametrize(
    "source,expected",
    [
        ("-3", Number(-3.0)),
        ("-3.5", Number(-3.5)),
        ("- -3", Number(3.0)),
        ("-x", _bin(BinaryOperator.SUBTRACT, _n(0), Identifier("x"))),
        ("2 - 3", _bin(BinaryOperator.SUBTRACT, _n(2), _n(3))),
        ("2 * -3", _bin(BinaryOperator.MULTIPLY, _n(2), Number(-3.0))),
        ("-f(1)", _bin(BinaryOperator.SUBTRACT, _n(0), FunctionCall("f", (_n(1),)))),
    ]
)
def test_unary_minus(source, expected):
    assert parse_expression(source) == expected


@pytest.mark.parametrize(
    "source,expected",
    [
        ("x", Identifier("x")),
        ("true", Bool(True)),
        ("'a'", Char(97)),
        ('"Hi"', Array(CHAR, (Char(72), Char(105)))),
        ('""', Array(CHAR, ())),
        ("[]", Array(NUMBER, ())),
        ("[1, 2, 3]", Array(NUMBER, (_n(1), _n(2), _n(3)))),
        # literal arrays are tagged num whatever they hold
        ("['a', 'b']", Array(NUMBER, (Char(97), Char(98)))),
        ("f()", FunctionCall("f", ())),
        ("f(1, g(x))", FunctionCall("f", (_n(1), FunctionCall("g", (Identifier("x"),))))),
    ]
)
def test_primaries(source, expected):
    assert parse_expression(source) == expected


def test_string_literal_is_char_array():
    assert parse_expression('"Hello"') == string_literal("Hello")


def test_parse_function_literal():
    expected = FunctionDeclaration(
        (Parameter("x", NUMBER),),
        NUMBER,
        _bin(BinaryOperator.ADD, Identifier("x"), _n(1)),
    )
    assert parse_expression("(x:num):num=>x+1") == expected


def test_parse_function_literal_without_parameters():
    assert parse_expression("():num => 1") == FunctionDeclaration((), NUMBER, _n(1))


def test_parse_function_literal_array_types():
    fn = parse_expression("(name:[char], xs:[num]):[char] => name")
    assert fn.parameters == (
        Parameter("name", array_of(CHAR)),
        Parameter("xs", array_of(NUMBER)),
    )
    assert fn.return_type == array_of(CHAR)
    assert fn.arity == 2


def test_function_declaration_item():
    [item] = parse("let add:fn = (a:num, b:num):num => a + b;")
    assert item.name == "add"
    assert item.declared_type == FUNCTION
    assert isinstance(item.expression, FunctionDeclaration)


def test_group_followed_by_match():
    expected = Match(
        _bin(BinaryOperator.ADD, _n(1), _n(2)),
        ((_n(3), Bool(True)),),
        Bool(False),
    )
    assert parse_expression("(1+2) ? { 3 => true, false }") == expected


def test_match_arms_and_default():
    source = "n ? { 0 => 1, 1 => 1, n * 2 }"
    expected = Match(
        Identifier("n"),
        ((_n(0), _n(1)), (_n(1), _n(1))),
        _bin(BinaryOperator.MULTIPLY, Identifier("n"), _n(2)),
    )
    assert parse_expression(source) == expected


def test_match_without_default():
    assert parse_expression("x ? { 1 => 2 }") == Match(Identifier("x"), ((_n(1), _n(2)),), None)


def test_match_only_default():
    assert parse_expression("x ? { 5 }") == Match(Identifier("x"), (), _n(5))


def test_match_binds_to_primary():
    # '?' attaches to the primary just parsed, not the whole comparison
    expr = parse_expression("n <= 1 ? { 1 => 2, 3 }")
    assert isinstance(expr, BinaryOperation)
    assert isinstance(expr.right, Match)


def test_tail_recursive_function_body():
    [item] = parse(
        "let increment:fn = (x:num, i:num):num => i ? {0 => x, increment(x+1, i-1)};"
    )
    body = item.expression.body
    assert isinstance(body, Match)
    assert body.default == FunctionCall(
        "increment",
        (_bin(BinaryOperator.ADD, Identifier("x"), _n(1)),
         _bin(BinaryOperator.SUBTRACT, Identifier("i"), _n(1))),
    )


def test_program_items():
    items = parse("let x:num = 1;\n# comment\nprint(x);\nx + 1;")
    assert len(items) == 3
    assert isinstance(items[0], Declaration)
    assert items[1] == FunctionCall("print", (Identifier("x"),))
    assert items[2] == _bin(BinaryOperator.ADD, Identifier("x"), _n(1))


def test_empty_program():
    assert parse("") == []
    assert parse("  # nothing\n") == []


def test_parse_accepts_tokens_or_source():
    source = "let x:num = 3;"
    assert parse(tokenize(source)) == parse(source)


@pytest.mark.parametrize(
    "source,message,kind",
    [
        ("1 + 2", "Expected ';' after expression, found end of input", TokenKind.EOF),
        ("let x:num = 1", "Expected ';' after declaration of 'x', found end of input", TokenKind.EOF),
        ("let x:foo = 1;", "Unknown type 'foo'", TokenKind.TYPE),
        ("let x: = 1;", "Expected a type name", TokenKind.TYPE),
        ("let 1:num = 1;", "Expected a name after 'let', found number 1", TokenKind.NUMBER),
        ("let x = 1;", "Expected ':' and a type after 'x', found '='", TokenKind.ASSIGN),
        ("(1 + 2;", "Expected ')' to close group, found ';'", TokenKind.SEMICOLON),
        ("[1, 2;", "Expected ']' after array elements, found ';'", TokenKind.SEMICOLON),
        ("f(1;", "Expected ')' after arguments, found ';'", TokenKind.SEMICOLON),
        ("x ? { 1 2 };", "Expected '=>' after match pattern, found number 2", TokenKind.NUMBER),
        ("x ? 1;", "Expected '{' after '?', found number 1", TokenKind.NUMBER),
        ("(x:num) => x;", "Expected ':' and a return type after parameters, found '=>'", TokenKind.ARROW),
        ("(x:num):num x;", "Expected '=>' before function body, found identifier 'x'", TokenKind.IDENTIFIER),
        ("1 + ;", "Expected an expression, found ';'", TokenKind.SEMICOLON),
    ]
)
def test_parser_errors(source, message, kind):
    with pytest.raises(NinoParserError) as exc:
        parse(source)
    assert exc.value.message == message
    assert exc.value.token.kind is kind
    assert exc.value.span == (exc.value.token.begin, exc.value.token.end)


def test_failed_speculation_does_not_consume_tokens():
    parser = Parser(TokenStream(tokenize("(x:num):num => x")))
    with pytest.raises(NinoParserError):
        parser.speculate(Parser.parse_group)
    assert parser.stream.pos == 0
    # the fallback still sees the whole literal
    assert isinstance(parser.parse_function(), FunctionDeclaration)
    assert parser.stream.at_end()


def test_successful_speculation_commits_position():
    parser = Parser(TokenStream(tokenize("(1 + 2) * 3")))
    group = parser.speculate(Parser.parse_group)
    assert group == _bin(BinaryOperator.ADD, _n(1), _n(2))
    assert parser.stream.peek().kind is TokenKind.STAR


def test_token_stream_snapshot_and_rewind():
    stream = TokenStream(tokenize("a b c"))
    mark = stream.snapshot()
    stream.advance()
    stream.advance()
    assert stream.peek().value == "c"
    stream.rewind(mark)
    assert stream.peek().value == "a"


def test_token_stream_appends_missing_eof():
    tokens = tokenize("a")[:-1]
    stream = TokenStream(tokens)
    stream.advance()
    assert stream.at_end()
    # advancing past the end stays on EOF
    assert stream.advance().kind is TokenKind.EOF


@given(st.lists(st.integers(min_value=-10**6, max_value=10**6), max_size=20))
def test_array_literal_parses_elementwise(values):
    source = "[" + ", ".join(str(v) for v in values) + "]"
    assert parse_expression(source) == Array(NUMBER, tuple(Number(float(v)) for v in values))


def test_deep_nesting_is_a_parser_error():
    source = "(" * 5000 + "1" + ")" * 5000 + ";"
    with pytest.raises(NinoParserError) as exc:
        parse(source)
    assert exc.value.message == "Expression is nested too deeply"
    assert exc.value.span is None
