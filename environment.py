"""
Monkey runtime environment
Mutable name bindings chained to an optional outer scope
"""

from typing import Dict, Iterator, Optional, Tuple

from objects import Object


class Environment:
    """A lexical scope.

    Lookups walk outward through ``outer``; writes only ever touch the
    innermost scope. A function call always creates a fresh child of the
    function's defining scope, so the chain never forms a cycle.
    """

    def __init__(self, outer: Optional["Environment"] = None):
        self.store: Dict[str, Object] = {}
        self.outer = outer

    @classmethod
    def new(cls) -> "Environment":
        """Fresh top-level scope"""
        return cls()

    @classmethod
    def child_of(cls, outer: "Environment") -> "Environment":
        """Fresh scope enclosed by `outer`"""
        return cls(outer)

    def get(self, name: str) -> Optional[Object]:
        """Look up a name in the environment chain"""
        env: Optional[Environment] = self
        while env is not None:
            if name in env.store:
                return env.store[name]
            env = env.outer
        return None

    def set(self, name: str, value: Object) -> Object:
        """Bind `name` in this scope, shadowing any outer binding"""
        self.store[name] = value
        return value

    def __contains__(self, name: str) -> bool:
        return self.get(name) is not None

    def bindings(self) -> Iterator[Tuple[str, Object]]:
        """Bindings of this scope only, in definition order"""
        return iter(self.store.items())

    def depth(self) -> int:
        """Number of scopes from here to the outermost one"""
        depth, env = 1, self.outer
        while env is not None:
            depth, env = depth + 1, env.outer
        return depth

    def __repr__(self) -> str:
        names = ", ".join(self.store)
        return f"Environment([{names}], depth={self.depth()})"
