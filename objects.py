"""
Monkey runtime object model
Tagged runtime values, the shared TRUE/FALSE/NULL singletons and hash keys
"""

from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any, Callable, Dict, List, Optional, Tuple

from ast_nodes import BlockStatement, Identifier

if TYPE_CHECKING:
    from environment import Environment


INTEGER_OBJ = "INTEGER"
BOOLEAN_OBJ = "BOOLEAN"
STRING_OBJ = "STRING"
NULL_OBJ = "NULL"
ARRAY_OBJ = "ARRAY"
HASH_OBJ = "HASH"
FUNCTION_OBJ = "FUNCTION"
BUILTIN_OBJ = "BUILTIN"
RETURN_VALUE_OBJ = "RETURN_VALUE"
ERROR_OBJ = "ERROR"


# ============================================================================
# BASE
# ============================================================================

class Object:
    """Base class for every runtime value"""
    type_name = "OBJECT"

    def render(self) -> str:
        raise NotImplementedError

    def __str__(self) -> str:
        return self.render()


@dataclass(frozen=True)
class HashKey:
    """Key under which a hashable object is stored inside a Hash"""
    type_name: str
    value: Any


class Hashable:
    """Mixin for objects usable as hash keys"""

    def hash_key(self) -> HashKey:
        return HashKey(self.type_name, self.value)


# ============================================================================
# SCALARS
# ============================================================================

@dataclass(frozen=True)
class Integer(Hashable, Object):
    value: int
    type_name = INTEGER_OBJ

    def render(self) -> str:
        return str(self.value)


@dataclass(frozen=True)
class Boolean(Hashable, Object):
    value: bool
    type_name = BOOLEAN_OBJ

    def render(self) -> str:
        return "true" if self.value else "false"


@dataclass(frozen=True)
class String(Hashable, Object):
    value: str
    type_name = STRING_OBJ

    def render(self) -> str:
        return self.value


class Null(Object):
    type_name = NULL_OBJ

    def render(self) -> str:
        return "null"

    def __repr__(self) -> str:
        return "NULL"


TRUE = Boolean(True)
FALSE = Boolean(False)
NULL = Null()


def native_bool(value: bool) -> Boolean:
    """Map a Python bool onto the shared TRUE/FALSE singletons"""
    return TRUE if value else FALSE


# ============================================================================
# COMPOSITES
# ============================================================================

@dataclass
class Array(Object):
    elements: List[Object] = field(default_factory=list)
    type_name = ARRAY_OBJ

    def render(self) -> str:
        return "[" + ", ".join(e.render() for e in self.elements) + "]"


@dataclass(frozen=True)
class HashPair:
    key: Object
    value: Object


@dataclass
class Hash(Object):
    """Hash keeps the original key objects, in insertion order"""
    pairs: Dict[HashKey, HashPair] = field(default_factory=dict)
    type_name = HASH_OBJ

    def get(self, key: Hashable) -> Optional[Object]:
        pair = self.pairs.get(key.hash_key())
        return None if pair is None else pair.value

    def render(self) -> str:
        body = ", ".join(f"{p.key.render()}: {p.value.render()}" for p in self.pairs.values())
        return "{" + body + "}"


# ============================================================================
# CALLABLES
# ============================================================================

@dataclass(eq=False)
class Function(Object):
    """User function closing over the environment it was defined in"""
    parameters: Tuple[Identifier, ...]
    body: BlockStatement
    env: "Environment" = field(repr=False)
    type_name = FUNCTION_OBJ

    def render(self) -> str:
        params = ", ".join(p.render() for p in self.parameters)
        return f"fn({params}) {self.body.render()}"


BuiltinFunction = Callable[..., Object]


@dataclass(eq=False)
class Builtin(Object):
    """Host function exposed to Monkey programs"""
    name: str
    fn: BuiltinFunction = field(repr=False)
    type_name = BUILTIN_OBJ

    def render(self) -> str:
        return f"builtin function {self.name}"


# ============================================================================
# SIGNALS
# ============================================================================

@dataclass(frozen=True)
class ReturnValue(Object):
    """Wraps the value of a `return`; unwrapped at the call boundary"""
    value: Object
    type_name = RETURN_VALUE_OBJ

    def render(self) -> str:
        return self.value.render()


@dataclass(frozen=True)
class Error(Object):
    """Runtime error as a value; propagates until the end of the evaluation"""
    message: str
    type_name = ERROR_OBJ

    def render(self) -> str:
        return f"ERROR: {self.message}"


def is_error(obj: Optional[Object]) -> bool:
    return isinstance(obj, Error)


def is_truthy(obj: Object) -> bool:
    """false and null are falsy, everything else is truthy"""
    if isinstance(obj, Null):
        return False
    if isinstance(obj, Boolean):
        return obj.value
    return True
