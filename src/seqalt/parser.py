## Copyright © 2025, Alex J. Champandard.  Licensed under AGPLv3; see LICENSE! ⚘

import re
from typing import Iterable

import lark
from .types import Token, Sequence, NumberLiteral, StringLiteral, SymbolRef, CLOSING_BRACKET
from .errors import SeqaltSyntaxError, SeqaltIncompleteParse


GRAMMAR = r"""start: _token*
_token: SEQUENCE_START | SEQUENCE_END | NUMBER | STRING | SYMBOL

// TOKENS
SEQUENCE_START: "(" | "[" | "{"
SEQUENCE_END: ")" | "]" | "}"
NUMBER: /[0-9]+/
STRING: /"(\\.|[^"])*"/s
SYMBOL: /[A-Za-z_][A-Za-z0-9_]*/ | /[^A-Za-z0-9_\s()\[\]{}"]+/

// Anything else, e.g. an unterminated quote, is skipped.
STRAY.-1: /./s

// WHITESPACE
%import common.WS
%ignore WS
%ignore STRAY
"""

_LEXER: lark.Lark | None = None
_ESCAPE_RE = re.compile(r'\\(.)', re.S)


def _lexer() -> lark.Lark:
    global _LEXER
    if _LEXER is None:
        _LEXER = lark.Lark(GRAMMAR, parser="lalr", lexer="basic")
    return _LEXER


def tokenize(source: str) -> list[Token]:
    """Scan the text left-to-right into a flat token list; never fails."""
    tokens = []
    for tok in _lexer().lex(source):
        match tok.type:
            case 'NUMBER': value = int(tok.value)
            case 'STRING': value = _ESCAPE_RE.sub(r'\1', tok.value[1:-1])
            case _: value = tok.value
        tokens.append(Token(tok.type, value, tok.line, tok.column))
    return tokens


def parse(tokens: Iterable[Token]) -> Sequence:
    """Build the tree of Sequence nodes; the whole input is an implicit group of kind None."""
    # Each open group on the stack: (opening token or None, children collected so far).
    stack: list[tuple[Token | None, list]] = [(None, [])]

    for token in tokens:
        match token.type:
            case Token.SEQUENCE_START:
                stack.append((token, []))
            case Token.SEQUENCE_END:
                opening, children = stack[-1]
                if opening is None:
                    raise SeqaltSyntaxError(f"Unexpected `{token.value}` with no group open.",
                                            token=token.value, line=token.line, column=token.column)
                if CLOSING_BRACKET[opening.value] != token.value:
                    raise SeqaltSyntaxError(
                        f"Mismatched `{token.value}` closing the group opened by `{opening.value}` "
                        f"at line {opening.line}, column {opening.column}.",
                        token=token.value, line=token.line, column=token.column)
                stack.pop()
                node = Sequence(opening.value, tuple(children), opening.line, opening.column)
                stack[-1][1].append(node)
            case Token.NUMBER:
                stack[-1][1].append(NumberLiteral(token.value, token.line, token.column))
            case Token.STRING:
                stack[-1][1].append(StringLiteral(token.value, token.line, token.column))
            case Token.SYMBOL:
                stack[-1][1].append(SymbolRef(token.value, token.line, token.column))

    if len(stack) > 1:
        opening, _ = stack[-1]
        raise SeqaltIncompleteParse("Unterminated group.", token=opening.value, line=opening.line, column=opening.column)

    [(_, children)] = stack
    first = children[0] if children else None
    return Sequence(None, tuple(children), getattr(first, 'line', None), getattr(first, 'column', None))


def format_parse_error_context(line, column, token_value, source: str, filename: str = '<INPUT>') -> str:
    lines = source.splitlines()
    if line is None:
        return f"\033[97m  File \"{filename}\"\033[0m\n"
    token_value = str(token_value or ' ')
    start_line, end_line = max(0, line - 3), min(len(lines), line + 2)
    result = [f"\033[97m  File \"{filename}\", line {line}\033[0m"]

    for i in range(start_line, end_line):
        line_content = lines[i]
        line_color = '\033[90m'
        if i+1 == line:
            line_color = '\033[97m'
            if column and 0 < column <= len(line_content):
                line_content = (
                    line_content[:column-1] +
                    f"\033[48;5;30m\033[1;97m{line_content[column-1:column+len(token_value)-1]}\033[0m" +
                    line_content[column+len(token_value)-1:]
                )
        result.append(f"{line_color}{i+1:>5} |\033[0m {line_content}")
    return '\n' + '\n'.join(result) + '\n'
