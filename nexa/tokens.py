from enum import Enum, auto
from dataclasses import dataclass
from typing import Optional

class TokenType(Enum):
    # Single-character tokens
    LEFT_PAREN = auto()
    RIGHT_PAREN = auto()
    LEFT_BRACE = auto()
    RIGHT_BRACE = auto()
    COMMA = auto()
    COLON = auto()
    SEMICOLON = auto()
    PLUS = auto()
    MINUS = auto()
    STAR = auto()
    SLASH = auto()
    EQUAL = auto()
    LESS = auto()
    GREATER = auto()

    # Literals
    IDENTIFIER = auto()
    STRING = auto()
    NUMBER = auto()
    FLOAT_NUMBER = auto()

    # Keywords
    VAR = auto()
    PRINT = auto()
    PRINTLN = auto()
    IF = auto()
    THEN = auto()
    ELSE = auto()
    END = auto()
    FOR = auto()
    IN = auto()
    WHILE = auto()
    TRUE = auto()
    FALSE = auto()

    # Type names
    INT = auto()
    FLOAT = auto()
    BOOL = auto()
    STRING_TYPE = auto()

    # Keyword spellings of the operators
    ADD = auto()
    SUB = auto()
    MUL = auto()
    DIV = auto()
    EQ = auto()
    LT = auto()
    LE = auto()
    GT = auto()
    GE = auto()

    # Layout
    NEWLINE = auto()
    INDENT = auto()
    DEDENT = auto()

    EOF = auto()

KEYWORDS = {
    "var": TokenType.VAR,
    "print": TokenType.PRINT,
    "println": TokenType.PRINTLN,
    "if": TokenType.IF,
    "then": TokenType.THEN,
    "else": TokenType.ELSE,
    "end": TokenType.END,
    "for": TokenType.FOR,
    "in": TokenType.IN,
    "while": TokenType.WHILE,
    "true": TokenType.TRUE,
    "false": TokenType.FALSE,
    "int": TokenType.INT,
    "float": TokenType.FLOAT,
    "bool": TokenType.BOOL,
    "string": TokenType.STRING_TYPE,
    "add": TokenType.ADD,
    "sub": TokenType.SUB,
    "mul": TokenType.MUL,
    "div": TokenType.DIV,
    "eq": TokenType.EQ,
    "lt": TokenType.LT,
    "le": TokenType.LE,
    "gt": TokenType.GT,
    "ge": TokenType.GE,
}

SINGLE_CHAR_TOKENS = {
    "(": TokenType.LEFT_PAREN,
    ")": TokenType.RIGHT_PAREN,
    "{": TokenType.LEFT_BRACE,
    "}": TokenType.RIGHT_BRACE,
    ",": TokenType.COMMA,
    ";": TokenType.SEMICOLON,
    "+": TokenType.PLUS,
    "-": TokenType.MINUS,
    "*": TokenType.STAR,
    "/": TokenType.SLASH,
    "=": TokenType.EQUAL,
    "<": TokenType.LESS,
    ">": TokenType.GREATER,
}

# Tokens that never carry source text of their own.
LAYOUT_TOKENS = (TokenType.NEWLINE, TokenType.INDENT, TokenType.DEDENT)

@dataclass(frozen=True)
class Token:
    type: TokenType
    lexeme: str
    line: int
    col: int
    offset: int = 0
    literal: Optional[object] = None

    def describe(self) -> str:
        if self.type == TokenType.EOF:
            return "end of input"
        if self.type in LAYOUT_TOKENS:
            return self.type.name.lower()
        return f"'{self.lexeme}'"

    def __repr__(self) -> str:
        lit = f" {self.literal!r}" if self.literal is not None else ""
        return f"{self.type.name} '{self.lexeme}'{lit} (@{self.line}:{self.col})"
