import logging

import pytest

from nexa.errors import LexError
from nexa.lexer import Lexer, tokenize
from nexa.tokens import TokenType as T


def types(source):
    return [tok.type for tok in tokenize(source)]


def test_declaration_tokens():
    tokens = tokenize("var x = 10")
    assert [t.type for t in tokens] == [T.VAR, T.IDENTIFIER, T.EQUAL, T.NUMBER, T.EOF]
    assert tokens[1].lexeme == "x"
    assert tokens[3].literal == 10


def test_tokenizing_is_deterministic():
    source = 'var s: string = "hi"\nfor c in s:\n    println(c)\n'
    assert tokenize(source) == tokenize(source)


def test_type_annotation_colon_does_not_open_block():
    assert types("var x: int = 1") == [T.VAR, T.IDENTIFIER, T.COLON, T.INT, T.EQUAL, T.NUMBER, T.EOF]


def test_colon_at_end_of_line_opens_indented_block():
    assert types("while x:\n    print 1\n    print 2\nprint 3\n") == [
        T.WHILE, T.IDENTIFIER, T.COLON, T.NEWLINE,
        T.INDENT, T.PRINT, T.NUMBER, T.NEWLINE,
        T.PRINT, T.NUMBER, T.NEWLINE,
        T.DEDENT, T.PRINT, T.NUMBER, T.NEWLINE,
        T.EOF,
    ]


def test_colon_swallows_trailing_blanks_before_newline():
    assert types("while x:   \n    print 1") == [
        T.WHILE, T.IDENTIFIER, T.COLON, T.NEWLINE,
        T.INDENT, T.PRINT, T.NUMBER, T.DEDENT, T.EOF,
    ]


@pytest.mark.parametrize("source", [
    "if x:\n    print 1",
    "while a:\n    while b:\n        print 1\n",
    "while a:\n    while b:\n        print 1\n    print 2\nprint 3\n",
    "if a {\n  print 1\n}\nelse {\n  print 2\n}\n",
])
def test_indents_and_dedents_balance(source):
    kinds = types(source)
    assert kinds.count(T.INDENT) == kinds.count(T.DEDENT)
    assert kinds.count(T.INDENT) > 0


def test_tab_rounds_up_to_next_multiple_of_four():
    kinds = types("if x:\n\tprint 1\n    print 2\n  \tprint 3\n")
    assert kinds.count(T.INDENT) == 1


def test_inconsistent_dedent_is_rejected():
    with pytest.raises(LexError, match="inconsistent dedent"):
        tokenize("if a:\n    if b:\n        print 1\n  print 2\n")


def test_only_words_change_indentation():
    # A line led by a literal does not touch the indentation stack.
    assert T.INDENT not in types("print 1\n    (2)\n")


def test_float_literal_is_kept():
    tokens = tokenize("3.75")
    assert tokens[0].type == T.FLOAT_NUMBER
    assert tokens[0].literal == 3.75


@pytest.mark.parametrize("source", ["3.", "3.x"])
def test_malformed_number(source):
    with pytest.raises(LexError, match="malformed number"):
        tokenize(source)


def test_unterminated_string():
    with pytest.raises(LexError, match="unterminated string") as info:
        tokenize('"abc')
    assert info.value.offset == 0


def test_strings_are_copied_verbatim():
    tokens = tokenize('"a\\nb {x}"')
    assert tokens[0].literal == "a\\nb {x}"


def test_unexpected_character_reports_offset():
    with pytest.raises(LexError) as info:
        tokenize("var x = 1 @")
    assert info.value.offset == 10
    assert "'@'" in str(info.value)
    assert info.value.describe().startswith("Lexical error at 1:11")


def test_carriage_return_is_ignored():
    assert types("var x = 1\r\n") == [T.VAR, T.IDENTIFIER, T.EQUAL, T.NUMBER, T.NEWLINE, T.EOF]


def test_keyword_operator_aliases():
    assert types("a add b le c ge d") == [
        T.IDENTIFIER, T.ADD, T.IDENTIFIER, T.LE, T.IDENTIFIER, T.GE, T.IDENTIFIER, T.EOF,
    ]


def test_boolean_literals_carry_values():
    tokens = tokenize("true false")
    assert [t.literal for t in tokens[:2]] == [True, False]


def test_line_comments_are_skipped():
    assert types("var x = 1 // note\nprint x") == [
        T.VAR, T.IDENTIFIER, T.EQUAL, T.NUMBER, T.NEWLINE, T.PRINT, T.IDENTIFIER, T.EOF,
    ]


def test_positions():
    tokens = tokenize("var x\nprint x")
    assert (tokens[1].line, tokens[1].col) == (1, 5)
    assert (tokens[3].line, tokens[3].col, tokens[3].offset) == (2, 1, 6)


def test_layout_changes_go_to_injected_logger(caplog):
    log = logging.getLogger("tests.lexer.observer")
    caplog.set_level(logging.DEBUG, logger="tests.lexer.observer")
    Lexer("if x:\n    print 1\n", log).tokenize()
    messages = [r.getMessage() for r in caplog.records if r.name == "tests.lexer.observer"]
    assert any(m.startswith("indent to 4") for m in messages)
    assert any("tokens" in m for m in messages)
