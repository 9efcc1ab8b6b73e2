from __future__ import annotations
import logging
import math
from typing import List, Optional
from .tokens import Token, TokenType, KEYWORDS, SINGLE_CHAR_TOKENS
from .errors import LexError

logger = logging.getLogger(__name__)

TAB_WIDTH = 4
MAX_INT = 2 ** 63 - 1


class Lexer:
    def __init__(self, source: str, log: Optional[logging.Logger] = None):
        self.source = source
        self.log = log or logger
        self.tokens: List[Token] = []
        self.start = 0
        self.current = 0
        self.line = 1
        self.col = 1
        self.start_line = 1
        self.start_col = 1
        # Layout state
        self.indent_stack: List[int] = [0]
        self.line_indent = 0
        self.counting_indent = True  # still inside the line's leading blanks
        self.line_pending = True     # no keyword/identifier seen on this line yet

    def tokenize(self) -> List[Token]:
        while not self._is_at_end():
            self.start = self.current
            self.start_line = self.line
            self.start_col = self.col
            self._scan_token()
        self._flush_indentation()
        self.tokens.append(Token(TokenType.EOF, "", self.line, self.col, self.current))
        self.log.debug("tokenized %d characters into %d tokens", len(self.source), len(self.tokens))
        return self.tokens

    def _is_at_end(self) -> bool:
        return self.current >= len(self.source)

    def _advance(self) -> str:
        ch = self.source[self.current]
        self.current += 1
        if ch == '\n':
            self.line += 1
            self.col = 1
        else:
            self.col += 1
        return ch

    def _peek(self) -> str:
        if self._is_at_end():
            return "\0"
        return self.source[self.current]

    def _peek_next(self) -> str:
        if self.current + 1 >= len(self.source):
            return "\0"
        return self.source[self.current + 1]

    def _add_token(self, type_: TokenType, literal=None):
        text = self.source[self.start:self.current]
        self.tokens.append(Token(type_, text, self.start_line, self.start_col, self.start, literal))

    def _add_layout(self, type_: TokenType):
        self.tokens.append(Token(type_, "", self.start_line, self.start_col, self.start))

    def _error(self, message: str) -> LexError:
        return LexError(message, self.start, self.start_line, self.start_col)

    def _start_line(self):
        self.line_indent = 0
        self.counting_indent = True
        self.line_pending = True

    def _scan_token(self):
        c = self._advance()
        if c == '\n':
            self._add_token(TokenType.NEWLINE)
            self._start_line()
            return
        if c == '\r':
            return
        if c in ' \t':
            if self.counting_indent:
                if c == ' ':
                    self.line_indent += 1
                else:
                    self.line_indent = (self.line_indent // TAB_WIDTH + 1) * TAB_WIDTH
            return

        self.counting_indent = False

        if c == '/' and self._peek() == '/':
            # comment until end of line
            while self._peek() != '\n' and not self._is_at_end():
                self._advance()
            return
        if c == ':':
            self._add_token(TokenType.COLON)
            self._colon_block_opener()
            return
        if c in SINGLE_CHAR_TOKENS:
            self._add_token(SINGLE_CHAR_TOKENS[c]); return
        if c == '"':
            self._string(); return
        if c.isascii() and c.isdigit():
            self._number(); return
        if (c.isascii() and c.isalpha()) or c == '_':
            self._identifier(); return

        raise self._error(f"unexpected character {c!r} at offset {self.start}")

    def _colon_block_opener(self):
        # A colon that ends its line opens an indented block: swallow the
        # trailing blanks and the newline so the next line starts fresh.
        ahead = self.current
        while ahead < len(self.source) and self.source[ahead] in ' \t\r':
            ahead += 1
        if ahead >= len(self.source) or self.source[ahead] != '\n':
            return
        while self.current < ahead:
            self._advance()
        self.start = self.current
        self.start_line = self.line
        self.start_col = self.col
        self._advance()
        self._add_token(TokenType.NEWLINE)
        self._start_line()

    def _string(self):
        value_chars = []
        while self._peek() != '"' and not self._is_at_end():
            value_chars.append(self._advance())
        if self._is_at_end():
            raise self._error(f"unterminated string starting at offset {self.start}")
        self._advance()  # closing quote
        self._add_token(TokenType.STRING, ''.join(value_chars))

    def _number(self):
        while self._peek().isascii() and self._peek().isdigit():
            self._advance()
        if self._peek() == '.':
            if not (self._peek_next().isascii() and self._peek_next().isdigit()):
                self._advance()
                raise self._error(
                    f"malformed number '{self.source[self.start:self.current]}' at offset {self.start}")
            self._advance()  # the dot
            while self._peek().isascii() and self._peek().isdigit():
                self._advance()
            text = self.source[self.start:self.current]
            value = float(text)
            if not math.isfinite(value):
                raise self._error(f"float literal {text} out of range at offset {self.start}")
            self._add_token(TokenType.FLOAT_NUMBER, value)
            return
        text = self.source[self.start:self.current]
        value = int(text)
        if value > MAX_INT:
            raise self._error(f"integer literal {text} out of range at offset {self.start}")
        self._add_token(TokenType.NUMBER, value)

    def _identifier(self):
        while self._peek().isascii() and (self._peek().isalnum() or self._peek() == '_'):
            self._advance()
        text = self.source[self.start:self.current]
        type_ = KEYWORDS.get(text, TokenType.IDENTIFIER)
        if self.line_pending:
            self._apply_indentation()
            self.line_pending = False
        literal = None
        if type_ == TokenType.TRUE:
            literal = True
        elif type_ == TokenType.FALSE:
            literal = False
        self._add_token(type_, literal)

    def _apply_indentation(self):
        width = self.line_indent
        top = self.indent_stack[-1]
        if width > top:
            self.indent_stack.append(width)
            self._add_layout(TokenType.INDENT)
            self.log.debug("indent to %d at line %d", width, self.start_line)
            return
        while width < self.indent_stack[-1]:
            self.indent_stack.pop()
            self._add_layout(TokenType.DEDENT)
        if width != self.indent_stack[-1]:
            raise self._error(
                f"inconsistent dedent: expected indentation {self.indent_stack[-1]}, got {width}")
        if width != top:
            self.log.debug("dedent to %d at line %d", width, self.start_line)

    def _flush_indentation(self):
        self.start = self.current
        self.start_line = self.line
        self.start_col = self.col
        while len(self.indent_stack) > 1:
            self.indent_stack.pop()
            self._add_layout(TokenType.DEDENT)


def tokenize(source: str, log: Optional[logging.Logger] = None) -> List[Token]:
    return Lexer(source, log).tokenize()
