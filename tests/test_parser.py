## seqalt — Copyright © 2025, Alex J. Champandard.  Licensed under AGPLv3; see LICENSE! ⚘

import pytest

from seqalt.parser import tokenize, parse
from seqalt.types import Token, Sequence, NumberLiteral, StringLiteral, SymbolRef
from seqalt.errors import SeqaltSyntaxError, SeqaltIncompleteParse


def _types(source: str):
    return [t.type for t in tokenize(source)]

def _values(source: str):
    return [t.value for t in tokenize(source)]

def _leaves(node) -> int:
    if isinstance(node, Sequence):
        return sum(_leaves(c) for c in node.children)
    return 1


def test_tokenize_categories_in_order():
    assert _types('( [ { } ] ) 12 "s" name +') == [
        Token.SEQUENCE_START, Token.SEQUENCE_START, Token.SEQUENCE_START,
        Token.SEQUENCE_END, Token.SEQUENCE_END, Token.SEQUENCE_END,
        Token.NUMBER, Token.STRING, Token.SYMBOL, Token.SYMBOL]


def test_tokenize_numbers_are_non_negative_integers():
    assert _values("3 + 10 - 2") == [3, "+", 10, "-", 2]
    # A sign is a symbol of its own and the dot splits digits.
    assert _values("-4") == ["-", 4]
    assert _values("1.5") == [1, ".", 5]


def test_tokenize_symbol_runs_are_maximal():
    assert _values("a=>(b)") == ["a", "=>", "(", "b", ")"]
    assert _values("()$a") == ["(", ")", "$", "a"]
    assert _values("x.foo,bar") == ["x", ".", "foo", ",", "bar"]
    assert _values("&&||") == ["&&||"]


def test_tokenize_identifiers_may_contain_digits_and_underscores():
    assert _values("_a1 b_2 3c") == ["_a1", "b_2", 3, "c"]


def test_tokenize_string_escapes_any_character():
    assert _values(r'"a\"b"') == ['a"b']
    assert _values(r'"back\\slash"') == ['back\\slash']
    assert _values(r'"\n"') == ['n']


def test_tokenize_string_may_span_lines():
    assert _values('"one\ntwo"') == ["one\ntwo"]


def test_tokenize_never_fails_on_stray_quote():
    assert _values('"abc') == ["abc"]
    assert tokenize("") == []
    assert tokenize("   \n\t ") == []


def test_tokenize_records_positions():
    tokens = tokenize("a\n  + 1")
    assert [(t.line, t.column) for t in tokens] == [(1, 1), (2, 3), (2, 5)]


def test_parse_builds_nested_sequences():
    tree = parse(tokenize('1 + (2 * [3, "x"]) {k: 4}'))
    assert tree.kind is None
    one, plus, group, brace = tree.children
    assert one == NumberLiteral(1, 1, 1)
    assert isinstance(plus, SymbolRef) and plus.name == "+"
    assert group.kind == "("
    inner = group.children[2]
    assert inner.kind == "["
    assert [type(c) for c in inner.children] == [NumberLiteral, SymbolRef, StringLiteral]
    assert brace.kind == "{"


def test_parse_empty_groups():
    tree = parse(tokenize("() [] {}"))
    assert [(c.kind, c.children) for c in tree.children] == [("(", ()), ("[", ()), ("{", ())]
    assert parse([]).children == ()


@pytest.mark.parametrize("source", [
    "3 + 10 - 2",
    "a = 5; a + 3",
    '((b: 3) + (c: 4)) . "b"',
    "[1, 2, 3] map (x => (x * 2))",
    "{ (( [ ] )) }",
])
def test_parse_leaf_count_matches_atom_tokens(source):
    tokens = tokenize(source)
    atoms = [t for t in tokens if t.type in (Token.NUMBER, Token.STRING, Token.SYMBOL)]
    assert _leaves(parse(tokens)) == len(atoms)


def test_parse_unterminated_group_reports_opening_position():
    with pytest.raises(SeqaltIncompleteParse) as info:
        parse(tokenize("1 +\n  (2 * (3)"))
    assert "nterminated" in str(info.value)
    assert (info.value.line, info.value.column) == (2, 3)
    assert info.value.token == "("


def test_parse_rejects_mismatched_brackets():
    with pytest.raises(SeqaltSyntaxError) as info:
        parse(tokenize("(1 + 2]"))
    assert not isinstance(info.value, SeqaltIncompleteParse)
    assert info.value.token == "]"


def test_parse_rejects_stray_closing_bracket():
    with pytest.raises(SeqaltSyntaxError):
        parse(tokenize("1 ) 2"))


def test_syntax_error_is_a_python_syntax_error():
    with pytest.raises(SyntaxError):
        parse(tokenize("{"))
