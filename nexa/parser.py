from __future__ import annotations
import logging
from typing import List, Optional, Tuple
from .tokens import Token, TokenType, LAYOUT_TOKENS
from .types import DataType
from .errors import ParseError
from . import ast as A

logger = logging.getLogger(__name__)

OPERATORS = {
    TokenType.PLUS: A.Operator.ADD,
    TokenType.ADD: A.Operator.ADD,
    TokenType.MINUS: A.Operator.SUB,
    TokenType.SUB: A.Operator.SUB,
    TokenType.STAR: A.Operator.MUL,
    TokenType.MUL: A.Operator.MUL,
    TokenType.SLASH: A.Operator.DIV,
    TokenType.DIV: A.Operator.DIV,
    TokenType.EQUAL: A.Operator.EQ,
    TokenType.EQ: A.Operator.EQ,
    TokenType.LESS: A.Operator.LT,
    TokenType.LT: A.Operator.LT,
    TokenType.LE: A.Operator.LE,
    TokenType.GREATER: A.Operator.GT,
    TokenType.GT: A.Operator.GT,
    TokenType.GE: A.Operator.GE,
}

# `<` `=` inside an expression reads as `<=` (likewise `>=` and `==`).
JOINED_OPERATORS = {
    TokenType.LESS: A.Operator.LE,
    TokenType.GREATER: A.Operator.GE,
    TokenType.EQUAL: A.Operator.EQ,
}

# Symbolic operators that may prefix `=` to form a compound assignment.
COMPOUND_OPERATORS = (
    TokenType.PLUS, TokenType.MINUS, TokenType.STAR, TokenType.SLASH,
    TokenType.LESS, TokenType.GREATER,
)

TYPE_NAMES = {
    TokenType.INT: DataType.INT,
    TokenType.FLOAT: DataType.FLOAT,
    TokenType.BOOL: DataType.BOOL,
    TokenType.STRING_TYPE: DataType.STRING,
}

EXPRESSION_STARTS = (
    TokenType.NUMBER, TokenType.FLOAT_NUMBER, TokenType.STRING,
    TokenType.TRUE, TokenType.FALSE, TokenType.LEFT_PAREN,
    TokenType.MINUS,
)


class Parser:
    def __init__(self, tokens: List[Token], log: Optional[logging.Logger] = None):
        self.tokens = list(tokens)
        if not self.tokens or self.tokens[-1].type != TokenType.EOF:
            last = self.tokens[-1] if self.tokens else None
            line, col, offset = (last.line, last.col, last.offset) if last else (1, 1, 0)
            self.tokens.append(Token(TokenType.EOF, "", line, col, offset))
        self.current = 0
        # Indentation levels opened by INDENT tokens consumed so far.
        self.depth = 0
        self.log = log or logger

    def parse(self) -> A.Program:
        stmts: List[A.Stmt] = []
        while True:
            self._skip_layout()
            if self._is_at_end():
                break
            stmts.append(self._statement())
            self._match(TokenType.SEMICOLON)
        self.log.debug("parsed %d top-level statements", len(stmts))
        return A.Program(stmts)

    # Helpers
    def _match(self, *types: TokenType) -> bool:
        for t in types:
            if self._check(t):
                self._advance()
                return True
        return False

    def _consume(self, type_: TokenType, msg: str) -> Token:
        if self._check(type_):
            return self._advance()
        tok = self._peek()
        raise ParseError(f"{msg}, found {tok.describe()}", tok)

    def _check(self, type_: TokenType) -> bool:
        return self._peek().type == type_

    def _advance(self) -> Token:
        tok = self._peek()
        if not self._is_at_end():
            self.current += 1
            if tok.type == TokenType.INDENT:
                self.depth += 1
            elif tok.type == TokenType.DEDENT:
                self.depth -= 1
        return tok

    def _is_at_end(self) -> bool:
        return self._peek().type == TokenType.EOF

    def _peek(self) -> Token:
        return self.tokens[self.current]

    def _peek_next(self) -> Token:
        if self.current + 1 >= len(self.tokens):
            return self.tokens[-1]
        return self.tokens[self.current + 1]

    def _skip_layout(self):
        while self._match(TokenType.NEWLINE, TokenType.INDENT, TokenType.DEDENT):
            pass

    # Statements
    def _statement(self) -> A.Stmt:
        tok = self._peek()
        if tok.type == TokenType.VAR:
            return self._var_decl()
        if tok.type == TokenType.IDENTIFIER:
            return self._identifier_statement()
        if tok.type == TokenType.PRINT:
            return self._print()
        if tok.type == TokenType.PRINTLN:
            return self._println()
        if tok.type == TokenType.IF:
            return self._if()
        if tok.type == TokenType.FOR:
            return self._for()
        if tok.type == TokenType.WHILE:
            return self._while()
        if tok.type in EXPRESSION_STARTS:
            return A.ExprStmt(self._expression())
        if tok.type in (TokenType.THEN, TokenType.END):
            raise self._removed_keyword(tok)
        if tok.type == TokenType.EOF:
            raise ParseError("Expected statement, found end of input", tok)
        raise ParseError(f"Unrecognized statement starting with {tok.describe()}", tok)

    def _removed_keyword(self, tok: Token) -> ParseError:
        return ParseError(
            f"'{tok.lexeme}' is no longer supported; "
            "use braces {...} or a ':' block instead", tok)

    def _var_decl(self) -> A.VarDecl:
        self._advance()  # var
        name = self._consume(TokenType.IDENTIFIER, "Expected variable name after 'var'").lexeme
        data_type: Optional[DataType] = None
        if self._match(TokenType.COLON):
            data_type = self._type_name()
        self._consume(TokenType.EQUAL, "Expected '=' in variable declaration")
        init = self._expression()
        return A.VarDecl(name, data_type, init)

    def _type_name(self) -> DataType:
        tok = self._peek()
        if tok.type in TYPE_NAMES:
            self._advance()
            return TYPE_NAMES[tok.type]
        raise ParseError(
            f"Expected data type (int, float, bool, string), found {tok.describe()}", tok)

    def _identifier_statement(self) -> A.Stmt:
        name = self._advance().lexeme
        target = A.Identifier(name)
        tok = self._peek()
        if tok.type in COMPOUND_OPERATORS:
            op = OPERATORS[tok.type]
            self._advance()
            if self._match(TokenType.EQUAL):
                value = self._expression()
                return A.Assign(name, A.Binary(target, op, value))
            # Not `x op= ...`: keep climbing from `x op right`.
            right = self._binary(op.precedence + 1)
            return A.ExprStmt(self._binary(0, A.Binary(target, op, right)))
        if self._match(TokenType.EQUAL):
            return A.Assign(name, self._expression())
        return A.ExprStmt(self._binary(0, target))

    def _print(self) -> A.Print:
        self._advance()  # print
        if not self._check(TokenType.LEFT_PAREN):
            return A.Print(self._expression())
        args = self._arguments("print")
        value = args[0]
        for arg in args[1:]:
            value = A.Binary(value, A.Operator.ADD, arg, folded=True)
        return A.Print(value)

    def _println(self) -> A.PrintLn:
        self._advance()  # println
        if not self._check(TokenType.LEFT_PAREN):
            return A.PrintLn([self._expression()])
        return A.PrintLn(self._arguments("println"))

    def _arguments(self, keyword: str) -> List[A.Expr]:
        self._consume(TokenType.LEFT_PAREN, f"Expected '(' after '{keyword}'")
        args = [self._expression()]
        while self._match(TokenType.COMMA):
            args.append(self._expression())
        self._consume(TokenType.RIGHT_PAREN, f"Expected ')' after {keyword} arguments")
        return args

    def _if(self) -> A.If:
        level = self.depth
        self._advance()  # if
        cond = self._expression()
        then_block = self._block("if")
        else_block = None
        if self._else_follows(level):
            self._skip_layout()
            self._advance()  # else
            else_block = self._block("else")
        return A.If(cond, then_block, else_block)

    def _else_follows(self, level: int) -> bool:
        # `else` may sit on a later line, but never dedented past its own `if`.
        idx = self.current
        depth = self.depth
        while self.tokens[idx].type in LAYOUT_TOKENS:
            if self.tokens[idx].type == TokenType.INDENT:
                depth += 1
            elif self.tokens[idx].type == TokenType.DEDENT:
                depth -= 1
            idx += 1
        return self.tokens[idx].type == TokenType.ELSE and depth >= level

    def _skip_newlines(self):
        while self._match(TokenType.NEWLINE):
            pass

    def _for(self) -> A.For:
        self._advance()  # for
        var = self._consume(TokenType.IDENTIFIER, "Expected loop variable after 'for'").lexeme
        self._consume(TokenType.IN, "Expected 'in' after loop variable")
        iterable = self._expression()
        body = self._block("for")
        return A.For(var, iterable, body)

    def _while(self) -> A.While:
        self._advance()  # while
        cond = self._expression()
        body = self._block("while")
        return A.While(cond, body)

    # Blocks
    def _block(self, keyword: str) -> List[A.Stmt]:
        if self._check(TokenType.LEFT_BRACE):
            return self._brace_block()
        if self._match(TokenType.COLON):
            return self._colon_block(keyword)
        tok = self._peek()
        if tok.type in (TokenType.THEN, TokenType.END):
            raise self._removed_keyword(tok)
        raise ParseError(f"Expected '{{' or ':' to start {keyword} block, found {tok.describe()}", tok)

    def _brace_block(self) -> List[A.Stmt]:
        self._consume(TokenType.LEFT_BRACE, "Expected '{' to start block")
        stmts: List[A.Stmt] = []
        while True:
            # Layout is insignificant between braces.
            while self._match(TokenType.NEWLINE, TokenType.SEMICOLON,
                              TokenType.INDENT, TokenType.DEDENT):
                pass
            if self._check(TokenType.RIGHT_BRACE) or self._is_at_end():
                break
            stmts.append(self._statement())
        self._consume(TokenType.RIGHT_BRACE, "Expected '}' after block")
        return stmts

    def _colon_block(self, keyword: str) -> List[A.Stmt]:
        if self._check(TokenType.NEWLINE):
            return self._indented_block(keyword)
        stmts: List[A.Stmt] = []
        while not (self._is_at_end() or self._check(TokenType.NEWLINE)
                   or self._check(TokenType.RIGHT_BRACE)):
            stmts.append(self._statement())
            if not self._match(TokenType.SEMICOLON):
                break
        if not stmts:
            tok = self._peek()
            raise ParseError(f"Expected statement after ':' in {keyword} block, found {tok.describe()}", tok)
        return stmts

    def _indented_block(self, keyword: str) -> List[A.Stmt]:
        self._skip_newlines()
        self._consume(TokenType.INDENT, f"Expected indented {keyword} block after ':'")
        level = self.depth
        stmts: List[A.Stmt] = []
        while True:
            while True:
                if self._match(TokenType.NEWLINE, TokenType.SEMICOLON, TokenType.INDENT):
                    continue
                if self._check(TokenType.DEDENT) and self.depth > level:
                    self._advance()
                    continue
                break
            if self.depth < level or self._is_at_end() or self._check(TokenType.RIGHT_BRACE):
                break
            if self._check(TokenType.DEDENT):
                self._advance()
                break
            stmts.append(self._statement())
        return stmts

    # Expressions
    def _expression(self) -> A.Expr:
        return self._binary(0)

    def _binary(self, min_prec: int, left: Optional[A.Expr] = None) -> A.Expr:
        if left is None:
            left = self._primary()
        while True:
            found = self._peek_operator()
            if found is None:
                break
            op, width = found
            if op.precedence < min_prec:
                break
            for _ in range(width):
                self._advance()
            right = self._binary(op.precedence + 1)
            left = A.Binary(left, op, right)
        return left

    def _peek_operator(self) -> Optional[Tuple[A.Operator, int]]:
        tok = self._peek()
        op = OPERATORS.get(tok.type)
        if op is None:
            return None
        if tok.type in JOINED_OPERATORS and self._peek_next().type == TokenType.EQUAL:
            return JOINED_OPERATORS[tok.type], 2
        return op, 1

    def _primary(self) -> A.Expr:
        tok = self._peek()
        if self._match(TokenType.NUMBER):
            return A.Number(tok.literal)
        if self._match(TokenType.FLOAT_NUMBER):
            return A.Float(tok.literal)
        if self._match(TokenType.STRING):
            return A.String(tok.literal)
        if self._match(TokenType.TRUE, TokenType.FALSE):
            return A.Bool(tok.literal)
        if self._match(TokenType.IDENTIFIER):
            return A.Identifier(tok.lexeme)
        if self._match(TokenType.MINUS):
            return A.Unary(A.Operator.SUB, self._primary())
        if self._match(TokenType.LEFT_PAREN):
            first = self._expression()
            if self._match(TokenType.COMMA):
                second = self._expression()
                self._consume(TokenType.RIGHT_PAREN, "Expected ')' after range end")
                return A.Range(first, second)
            self._consume(TokenType.RIGHT_PAREN, "Expected ')' after expression")
            return first
        raise ParseError(f"Expected expression, found {tok.describe()}", tok)


def parse(tokens: List[Token], log: Optional[logging.Logger] = None) -> A.Program:
    return Parser(tokens, log).parse()
