"""
Monkey Programming Language Parser
Tokenizer built on pyparsing plus a Pratt (precedence climbing) parser producing the AST
"""

from contextlib import contextmanager
from enum import IntEnum
from typing import Callable, Dict, Iterator, List, Optional, Tuple

from pyparsing import (
    Keyword, Literal, MatchFirst, ParserElement, QuotedString, Regex, Word,
    alphanums, alphas, col, dbl_slash_comment, lineno, nums
)

from ast_nodes import (
    ArrayLiteral, BlockStatement, BooleanLiteral, CallExpression, Expression,
    ExpressionStatement, FunctionLiteral, HashLiteral, Identifier, IfExpression,
    IndexExpression, InfixExpression, IntegerLiteral, LetStatement,
    PrefixExpression, Program, ReturnStatement, Statement, StringLiteral
)
from tokens import KEYWORDS, OPERATORS, Token, TokenKind, lookup_ident


INT64_MIN = -(2 ** 63)
INT64_MAX = 2 ** 63 - 1


# ============================================================================
# TOKENIZER
# ============================================================================

class Tokenizer:
    """Monkey tokenizer; pulls one token per call, EOF forever once exhausted"""

    def __init__(self, source: str, filename: str = "<input>"):
        self.source = source
        self.filename = filename
        self._scanner = self._build_scanner()
        self._stream = self._scan()
        self._eof = Token(TokenKind.EOF, "", lineno(len(source), source), col(len(source), source))

    def _build_scanner(self) -> ParserElement:
        """Setup the token patterns, highest priority first"""

        def tagged(expr: ParserElement, kind_of: Callable[[str], TokenKind]) -> ParserElement:
            def make_token(s, loc, toks):
                text = toks[0]
                return Token(kind_of(text), text, lineno(loc, s), col(loc, s))
            return expr.copy().set_parse_action(make_token)

        keywords = [
            tagged(Keyword(word, ident_chars=alphanums + "_"), lookup_ident)
            for word in KEYWORDS
        ]
        identifier = tagged(Word(alphas + "_", alphanums + "_"), lambda _: TokenKind.IDENT)
        integer = tagged(Word(nums), lambda _: TokenKind.INT)
        string = tagged(QuotedString('"', esc_char="\\"), lambda _: TokenKind.STRING)

        # Longest operators first so "==" wins over "="
        operators = [
            tagged(Literal(op), lambda text: OPERATORS[text])
            for op in sorted(OPERATORS, key=len, reverse=True)
        ]

        # Anything else is a single illegal character
        illegal = tagged(Regex(r"\S"), lambda _: TokenKind.ILLEGAL)

        scanner = MatchFirst(keywords + [identifier, integer, string] + operators + [illegal])
        scanner.ignore(dbl_slash_comment)
        return scanner

    def _scan(self) -> Iterator[Token]:
        for toks, _start, _end in self._scanner.scan_string(self.source):
            yield toks[0]

    def next_token(self) -> Token:
        """Return the next token, or EOF once the input is exhausted"""
        return next(self._stream, self._eof)

    def tokenize(self) -> List[Token]:
        """Tokenize the remaining input, including the final EOF token"""
        tokens = []
        while True:
            token = self.next_token()
            tokens.append(token)
            if token.kind is TokenKind.EOF:
                return tokens


# ============================================================================
# PRECEDENCE
# ============================================================================

class Precedence(IntEnum):
    LOWEST = 1
    EQUALS = 2        # == !=
    LESSGREATER = 3   # < >
    SUM = 4           # + -
    PRODUCT = 5       # * /
    PREFIX = 6        # -x !x
    CALL = 7          # fn(x)
    INDEX = 8         # array[i]


PRECEDENCES: Dict[TokenKind, Precedence] = {
    TokenKind.EQ: Precedence.EQUALS,
    TokenKind.NOT_EQ: Precedence.EQUALS,
    TokenKind.LT: Precedence.LESSGREATER,
    TokenKind.GT: Precedence.LESSGREATER,
    TokenKind.PLUS: Precedence.SUM,
    TokenKind.MINUS: Precedence.SUM,
    TokenKind.SLASH: Precedence.PRODUCT,
    TokenKind.ASTERISK: Precedence.PRODUCT,
    TokenKind.LPAREN: Precedence.CALL,
    TokenKind.LBRACKET: Precedence.INDEX,
}

PrefixParseFn = Callable[[], Optional[Expression]]
InfixParseFn = Callable[[Expression], Optional[Expression]]


# ============================================================================
# PARSER
# ============================================================================

class Parser:
    """Recursive descent statement parser with Pratt expression parsing.

    Syntax errors never raise: they are appended to ``errors`` and the
    offending statement is dropped, so one run can report several problems.
    """

    def __init__(self, tokenizer: Tokenizer, debug: bool = False):
        self.tokenizer = tokenizer
        self.debug = debug
        self.errors: List[str] = []
        self._trace_depth = 0
        # Unclosed braces before cur_token
        self._depth = 0

        self.prefix_parse_fns: Dict[TokenKind, PrefixParseFn] = {
            TokenKind.IDENT: self.parse_identifier,
            TokenKind.INT: self.parse_integer_literal,
            TokenKind.STRING: self.parse_string_literal,
            TokenKind.TRUE: self.parse_boolean_literal,
            TokenKind.FALSE: self.parse_boolean_literal,
            TokenKind.BANG: self.parse_prefix_expression,
            TokenKind.MINUS: self.parse_prefix_expression,
            TokenKind.LPAREN: self.parse_grouped_expression,
            TokenKind.IF: self.parse_if_expression,
            TokenKind.FUNCTION: self.parse_function_literal,
            TokenKind.LBRACKET: self.parse_array_literal,
            TokenKind.LBRACE: self.parse_hash_literal,
        }
        self.infix_parse_fns: Dict[TokenKind, InfixParseFn] = {
            TokenKind.PLUS: self.parse_infix_expression,
            TokenKind.MINUS: self.parse_infix_expression,
            TokenKind.ASTERISK: self.parse_infix_expression,
            TokenKind.SLASH: self.parse_infix_expression,
            TokenKind.EQ: self.parse_infix_expression,
            TokenKind.NOT_EQ: self.parse_infix_expression,
            TokenKind.LT: self.parse_infix_expression,
            TokenKind.GT: self.parse_infix_expression,
            TokenKind.LPAREN: self.parse_call_expression,
            TokenKind.LBRACKET: self.parse_index_expression,
        }
        self._check_tables()

        # Read two tokens so cur_token and peek_token are both set
        self.cur_token = self.tokenizer.next_token()
        self.peek_token = self.tokenizer.next_token()

    def _check_tables(self) -> None:
        """Every infix operator needs a precedence and every precedence an infix rule"""
        mismatched = set(PRECEDENCES) ^ set(self.infix_parse_fns)
        if mismatched:
            names = ", ".join(sorted(str(kind) for kind in mismatched))
            raise ValueError(f"Precedence table and infix rules disagree on: {names}")

    # ------------------------------------------------------------------
    # Token cursor
    # ------------------------------------------------------------------

    def next_token(self) -> None:
        if self.cur_token.kind is TokenKind.LBRACE:
            self._depth += 1
        elif self.cur_token.kind is TokenKind.RBRACE:
            self._depth -= 1
        self.cur_token = self.peek_token
        self.peek_token = self.tokenizer.next_token()

    def cur_token_is(self, kind: TokenKind) -> bool:
        return self.cur_token.kind is kind

    def peek_token_is(self, kind: TokenKind) -> bool:
        return self.peek_token.kind is kind

    def expect_peek(self, kind: TokenKind) -> bool:
        """Advance if the next token has the expected kind, else record an error"""
        if self.peek_token_is(kind):
            self.next_token()
            return True
        self.peek_error(kind)
        return False

    def peek_error(self, kind: TokenKind) -> None:
        self.errors.append(
            f"expected next token to be {kind}, got {self.peek_token.kind} instead"
        )

    def no_prefix_parse_fn_error(self, kind: TokenKind) -> None:
        self.errors.append(f"no prefix parse function for {kind} found")

    def _peek_depth(self) -> int:
        """Unclosed braces before peek_token"""
        if self.cur_token_is(TokenKind.LBRACE):
            return self._depth + 1
        if self.cur_token_is(TokenKind.RBRACE):
            return self._depth - 1
        return self._depth

    def peek_precedence(self) -> Precedence:
        return PRECEDENCES.get(self.peek_token.kind, Precedence.LOWEST)

    def cur_precedence(self) -> Precedence:
        return PRECEDENCES.get(self.cur_token.kind, Precedence.LOWEST)

    @contextmanager
    def _trace(self, rule: str):
        """Print BEGIN/END markers around a parse rule when debugging"""
        if not self.debug:
            yield
            return
        print(f"{'  ' * self._trace_depth}BEGIN {rule} ({self.cur_token})")
        self._trace_depth += 1
        try:
            yield
        finally:
            self._trace_depth -= 1
            print(f"{'  ' * self._trace_depth}END {rule}")

    def _synchronize(self, depth: int) -> None:
        """Skip the rest of a failed statement that started at brace `depth`.

        Stops on a `;` or `}` at that depth, at EOF, or just before a `let`
        or `return` at that depth. Braces nested inside the statement are
        skipped whole.
        """
        while not self.cur_token_is(TokenKind.EOF):
            if self.cur_token.kind in (TokenKind.SEMICOLON, TokenKind.RBRACE) and self._depth <= depth:
                return
            if self.peek_token_is(TokenKind.EOF):
                return
            if self.peek_token.kind in (TokenKind.LET, TokenKind.RETURN) and self._peek_depth() <= depth:
                return
            self.next_token()

    # ------------------------------------------------------------------
    # Statements
    # ------------------------------------------------------------------

    def parse_program(self) -> Program:
        """Parse statements until EOF"""
        token = self.cur_token
        statements: List[Statement] = []

        while not self.cur_token_is(TokenKind.EOF):
            depth = self._depth
            stmt = self.parse_statement()
            if stmt is None:
                self._synchronize(depth)
            else:
                statements.append(stmt)
            self.next_token()

        return Program(token, tuple(statements))

    def parse_statement(self) -> Optional[Statement]:
        with self._trace("parse_statement"):
            if self.cur_token_is(TokenKind.LET):
                return self.parse_let_statement()
            if self.cur_token_is(TokenKind.RETURN):
                return self.parse_return_statement()
            return self.parse_expression_statement()

    def parse_let_statement(self) -> Optional[LetStatement]:
        token = self.cur_token

        if not self.expect_peek(TokenKind.IDENT):
            return None
        name = Identifier(self.cur_token, self.cur_token.literal)

        if not self.expect_peek(TokenKind.ASSIGN):
            return None
        self.next_token()

        value = self.parse_expression(Precedence.LOWEST)
        if value is None:
            return None

        if self.peek_token_is(TokenKind.SEMICOLON):
            self.next_token()

        return LetStatement(token, name, value)

    def parse_return_statement(self) -> Optional[ReturnStatement]:
        token = self.cur_token

        # A bare `return` yields null
        if self.peek_token.kind in (TokenKind.SEMICOLON, TokenKind.RBRACE, TokenKind.EOF):
            if self.peek_token_is(TokenKind.SEMICOLON):
                self.next_token()
            return ReturnStatement(token, None)

        self.next_token()
        return_value = self.parse_expression(Precedence.LOWEST)
        if return_value is None:
            return None

        if self.peek_token_is(TokenKind.SEMICOLON):
            self.next_token()

        return ReturnStatement(token, return_value)

    def parse_expression_statement(self) -> Optional[ExpressionStatement]:
        token = self.cur_token
        expression = self.parse_expression(Precedence.LOWEST)
        if expression is None:
            return None

        if self.peek_token_is(TokenKind.SEMICOLON):
            self.next_token()

        return ExpressionStatement(token, expression)

    def parse_block_statement(self) -> Optional[BlockStatement]:
        """Parse statements up to the matching '}'; cur_token starts on '{'"""
        token = self.cur_token
        statements: List[Statement] = []
        self.next_token()

        while not self.cur_token_is(TokenKind.RBRACE):
            if self.cur_token_is(TokenKind.EOF):
                self.errors.append(
                    f"expected next token to be {TokenKind.RBRACE}, got {TokenKind.EOF} instead"
                )
                return None

            depth = self._depth
            stmt = self.parse_statement()
            if stmt is None:
                self._synchronize(depth)
                if self.cur_token_is(TokenKind.RBRACE):
                    break
            else:
                statements.append(stmt)
            self.next_token()

        return BlockStatement(token, tuple(statements))

    # ------------------------------------------------------------------
    # Expressions
    # ------------------------------------------------------------------

    def parse_expression(self, precedence: Precedence) -> Optional[Expression]:
        """Pratt loop: one prefix rule, then infix rules while they bind tighter"""
        with self._trace(f"parse_expression[{precedence.name}]"):
            prefix = self.prefix_parse_fns.get(self.cur_token.kind)
            if prefix is None:
                self.no_prefix_parse_fn_error(self.cur_token.kind)
                return None

            left = prefix()
            if left is None:
                return None

            while not self.peek_token_is(TokenKind.SEMICOLON) and precedence < self.peek_precedence():
                infix = self.infix_parse_fns.get(self.peek_token.kind)
                if infix is None:
                    return left

                self.next_token()
                left = infix(left)
                if left is None:
                    return None

            return left

    def parse_identifier(self) -> Identifier:
        return Identifier(self.cur_token, self.cur_token.literal)

    def parse_integer_literal(self) -> Optional[IntegerLiteral]:
        literal = self.cur_token.literal
        try:
            value = int(literal)
        except ValueError:
            value = None
        if value is None or not INT64_MIN <= value <= INT64_MAX:
            self.errors.append(f"could not parse {literal} as integer")
            return None
        return IntegerLiteral(self.cur_token, value)

    def parse_string_literal(self) -> StringLiteral:
        return StringLiteral(self.cur_token, self.cur_token.literal)

    def parse_boolean_literal(self) -> BooleanLiteral:
        return BooleanLiteral(self.cur_token, self.cur_token_is(TokenKind.TRUE))

    def parse_prefix_expression(self) -> Optional[PrefixExpression]:
        with self._trace("parse_prefix_expression"):
            token = self.cur_token
            self.next_token()

            right = self.parse_expression(Precedence.PREFIX)
            if right is None:
                return None
            return PrefixExpression(token, token.literal, right)

    def parse_infix_expression(self, left: Expression) -> Optional[InfixExpression]:
        with self._trace("parse_infix_expression"):
            token = self.cur_token
            precedence = self.cur_precedence()
            self.next_token()

            right = self.parse_expression(precedence)
            if right is None:
                return None
            return InfixExpression(token, left, token.literal, right)

    def parse_grouped_expression(self) -> Optional[Expression]:
        self.next_token()

        expression = self.parse_expression(Precedence.LOWEST)
        if expression is None:
            return None
        if not self.expect_peek(TokenKind.RPAREN):
            return None
        return expression

    def parse_if_expression(self) -> Optional[IfExpression]:
        token = self.cur_token

        if not self.expect_peek(TokenKind.LPAREN):
            return None
        self.next_token()
        condition = self.parse_expression(Precedence.LOWEST)
        if condition is None:
            return None
        if not self.expect_peek(TokenKind.RPAREN):
            return None

        if not self.expect_peek(TokenKind.LBRACE):
            return None
        consequence = self.parse_block_statement()
        if consequence is None:
            return None

        alternative = None
        if self.peek_token_is(TokenKind.ELSE):
            self.next_token()
            if not self.expect_peek(TokenKind.LBRACE):
                return None
            alternative = self.parse_block_statement()
            if alternative is None:
                return None

        return IfExpression(token, condition, consequence, alternative)

    def parse_function_literal(self) -> Optional[FunctionLiteral]:
        token = self.cur_token

        if not self.expect_peek(TokenKind.LPAREN):
            return None
        parameters = self.parse_function_parameters()
        if parameters is None:
            return None

        if not self.expect_peek(TokenKind.LBRACE):
            return None
        body = self.parse_block_statement()
        if body is None:
            return None

        return FunctionLiteral(token, parameters, body)

    def parse_function_parameters(self) -> Optional[Tuple[Identifier, ...]]:
        identifiers: List[Identifier] = []

        if self.peek_token_is(TokenKind.RPAREN):
            self.next_token()
            return ()

        if not self.expect_peek(TokenKind.IDENT):
            return None
        identifiers.append(Identifier(self.cur_token, self.cur_token.literal))

        while self.peek_token_is(TokenKind.COMMA):
            self.next_token()
            if not self.expect_peek(TokenKind.IDENT):
                return None
            identifiers.append(Identifier(self.cur_token, self.cur_token.literal))

        if not self.expect_peek(TokenKind.RPAREN):
            return None

        return tuple(identifiers)

    def parse_call_expression(self, function: Expression) -> Optional[CallExpression]:
        token = self.cur_token
        arguments = self.parse_expression_list(TokenKind.RPAREN)
        if arguments is None:
            return None
        return CallExpression(token, function, arguments)

    def parse_expression_list(self, end: TokenKind) -> Optional[Tuple[Expression, ...]]:
        """Comma separated expressions up to `end`; cur_token starts on the opener"""
        items: List[Expression] = []

        if self.peek_token_is(end):
            self.next_token()
            return ()

        self.next_token()
        item = self.parse_expression(Precedence.LOWEST)
        if item is None:
            return None
        items.append(item)

        while self.peek_token_is(TokenKind.COMMA):
            self.next_token()
            self.next_token()
            item = self.parse_expression(Precedence.LOWEST)
            if item is None:
                return None
            items.append(item)

        if not self.expect_peek(end):
            return None

        return tuple(items)

    def parse_array_literal(self) -> Optional[ArrayLiteral]:
        token = self.cur_token
        elements = self.parse_expression_list(TokenKind.RBRACKET)
        if elements is None:
            return None
        return ArrayLiteral(token, elements)

    def parse_index_expression(self, left: Expression) -> Optional[IndexExpression]:
        token = self.cur_token
        self.next_token()

        index = self.parse_expression(Precedence.LOWEST)
        if index is None:
            return None
        if not self.expect_peek(TokenKind.RBRACKET):
            return None

        return IndexExpression(token, left, index)

    def parse_hash_literal(self) -> Optional[HashLiteral]:
        """Keys may be any expression; hashability is checked at evaluation"""
        token = self.cur_token
        pairs: List[Tuple[Expression, Expression]] = []

        while not self.peek_token_is(TokenKind.RBRACE):
            self.next_token()
            key = self.parse_expression(Precedence.LOWEST)
            if key is None:
                return None

            if not self.expect_peek(TokenKind.COLON):
                return None

            self.next_token()
            value = self.parse_expression(Precedence.LOWEST)
            if value is None:
                return None

            pairs.append((key, value))

            if not self.peek_token_is(TokenKind.RBRACE) and not self.expect_peek(TokenKind.COMMA):
                return None

        if not self.expect_peek(TokenKind.RBRACE):
            return None

        return HashLiteral(token, tuple(pairs))


# ============================================================================
# FACTORY FUNCTIONS
# ============================================================================

def create_parser(source: str, filename: str = "<input>", debug: bool = False) -> Parser:
    """Factory function returning a parser over `source`"""
    return Parser(Tokenizer(source, filename), debug=debug)


def create_debug_parser(source: str, filename: str = "<input>") -> Parser:
    """Factory function returning a tracing parser"""
    return create_parser(source, filename, debug=True)


def parse(source: str, filename: str = "<input>", debug: bool = False) -> Tuple[Program, List[str]]:
    """Parse `source` and return the program with its diagnostics"""
    parser = create_parser(source, filename, debug)
    program = parser.parse_program()
    return program, parser.errors
