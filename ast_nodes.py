"""
Monkey abstract syntax tree
Immutable statement and expression nodes with canonical, fully parenthesized rendering
"""

from dataclasses import dataclass
from typing import Iterator, Optional, Tuple, Union

from tokens import Token


# ============================================================================
# BASE
# ============================================================================

@dataclass(frozen=True)
class Node:
    """Common behaviour for every AST node"""
    token: Token

    def token_literal(self) -> str:
        return self.token.literal

    def render(self) -> str:
        raise NotImplementedError

    def __str__(self) -> str:
        return self.render()


def _escape_string(text: str) -> str:
    """Quote a string literal so the tokenizer reads it back unchanged"""
    escaped = (text.replace("\\", "\\\\")
                   .replace('"', '\\"')
                   .replace("\n", "\\n")
                   .replace("\r", "\\r")
                   .replace("\f", "\\f")
                   .replace("\t", "\\t"))
    return f'"{escaped}"'


# ============================================================================
# EXPRESSIONS
# ============================================================================

@dataclass(frozen=True)
class Identifier(Node):
    value: str

    def render(self) -> str:
        return self.value


@dataclass(frozen=True)
class IntegerLiteral(Node):
    value: int

    def render(self) -> str:
        return self.token.literal


@dataclass(frozen=True)
class BooleanLiteral(Node):
    value: bool

    def render(self) -> str:
        return self.token.literal


@dataclass(frozen=True)
class StringLiteral(Node):
    value: str

    def render(self) -> str:
        return _escape_string(self.value)


@dataclass(frozen=True)
class ArrayLiteral(Node):
    elements: Tuple["Expression", ...]

    def render(self) -> str:
        return "[" + ", ".join(e.render() for e in self.elements) + "]"


@dataclass(frozen=True)
class HashLiteral(Node):
    """Hash literal; pairs keep their source order"""
    pairs: Tuple[Tuple["Expression", "Expression"], ...]

    def render(self) -> str:
        body = ", ".join(f"{k.render()}: {v.render()}" for k, v in self.pairs)
        return "{" + body + "}"


@dataclass(frozen=True)
class PrefixExpression(Node):
    operator: str
    right: "Expression"

    def render(self) -> str:
        return f"({self.operator}{self.right.render()})"


@dataclass(frozen=True)
class InfixExpression(Node):
    left: "Expression"
    operator: str
    right: "Expression"

    def render(self) -> str:
        return f"({self.left.render()} {self.operator} {self.right.render()})"


@dataclass(frozen=True)
class IfExpression(Node):
    condition: "Expression"
    consequence: "BlockStatement"
    alternative: Optional["BlockStatement"] = None

    def render(self) -> str:
        out = f"if ({self.condition.render()}) {self.consequence.render()}"
        if self.alternative is not None:
            out += f" else {self.alternative.render()}"
        return out


@dataclass(frozen=True)
class FunctionLiteral(Node):
    parameters: Tuple[Identifier, ...]
    body: "BlockStatement"

    def render(self) -> str:
        params = ", ".join(p.render() for p in self.parameters)
        return f"{self.token_literal()}({params}) {self.body.render()}"


@dataclass(frozen=True)
class CallExpression(Node):
    function: "Expression"
    arguments: Tuple["Expression", ...]

    def render(self) -> str:
        args = ", ".join(a.render() for a in self.arguments)
        return f"{self.function.render()}({args})"


@dataclass(frozen=True)
class IndexExpression(Node):
    left: "Expression"
    index: "Expression"

    def render(self) -> str:
        return f"({self.left.render()}[{self.index.render()}])"


# ============================================================================
# STATEMENTS
# ============================================================================

@dataclass(frozen=True)
class ExpressionStatement(Node):
    expression: "Expression"

    def render(self) -> str:
        return self.expression.render()


@dataclass(frozen=True)
class LetStatement(Node):
    name: Identifier
    value: "Expression"

    def render(self) -> str:
        return f"{self.token_literal()} {self.name.render()} = {self.value.render()}"


@dataclass(frozen=True)
class ReturnStatement(Node):
    return_value: Optional["Expression"] = None

    def render(self) -> str:
        if self.return_value is None:
            return self.token_literal()
        return f"{self.token_literal()} {self.return_value.render()}"


@dataclass(frozen=True)
class BlockStatement(Node):
    statements: Tuple["Statement", ...]

    def render(self) -> str:
        if not self.statements:
            return "{ }"
        return "{ " + "; ".join(s.render() for s in self.statements) + " }"


@dataclass(frozen=True)
class Program(Node):
    """Root of every parse; its token is the first token of the input"""
    statements: Tuple["Statement", ...]

    def token_literal(self) -> str:
        if self.statements:
            return self.statements[0].token_literal()
        return ""

    def render(self) -> str:
        return "; ".join(s.render() for s in self.statements)


Expression = Union[
    Identifier, IntegerLiteral, BooleanLiteral, StringLiteral,
    ArrayLiteral, HashLiteral, PrefixExpression, InfixExpression,
    IfExpression, FunctionLiteral, CallExpression, IndexExpression,
]

Statement = Union[
    ExpressionStatement, LetStatement, ReturnStatement, BlockStatement,
]


# ============================================================================
# HELPERS
# ============================================================================

def children(node: Node) -> Tuple[Node, ...]:
    """Direct children of a node, in source order"""
    if isinstance(node, (Program, BlockStatement)):
        return node.statements
    if isinstance(node, ExpressionStatement):
        return (node.expression,)
    if isinstance(node, LetStatement):
        return (node.name, node.value)
    if isinstance(node, ReturnStatement):
        return () if node.return_value is None else (node.return_value,)
    if isinstance(node, ArrayLiteral):
        return node.elements
    if isinstance(node, HashLiteral):
        return tuple(part for pair in node.pairs for part in pair)
    if isinstance(node, PrefixExpression):
        return (node.right,)
    if isinstance(node, InfixExpression):
        return (node.left, node.right)
    if isinstance(node, IfExpression):
        if node.alternative is None:
            return (node.condition, node.consequence)
        return (node.condition, node.consequence, node.alternative)
    if isinstance(node, FunctionLiteral):
        return node.parameters + (node.body,)
    if isinstance(node, CallExpression):
        return (node.function,) + node.arguments
    if isinstance(node, IndexExpression):
        return (node.left, node.index)
    return ()


def walk(node: Node, depth: int = 0) -> Iterator[Tuple[int, Node]]:
    """Yield (depth, node) for a node and all of its descendants, depth first"""
    yield depth, node
    for child in children(node):
        yield from walk(child, depth + 1)


def pretty_print_ast(node: Node, indent: int = 0) -> str:
    """Pretty print an AST, one node per line"""
    return "\n".join(
        f"{'  ' * depth}{type(n).__name__}: {n.render()}" for depth, n in walk(node, indent)
    )
