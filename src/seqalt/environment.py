## Copyright © 2025, Alex J. Champandard.  Licensed under AGPLv3; see LICENSE! ⚘

from typing import Any

from .types import EvalContext
from .errors import UnboundNameError


class Environment:
    """One scope frame: a mutable mapping plus an optional parent, searched innermost-first.

    The root frame holds the global operations and its `context` is shared by every frame below it.
    """

    __slots__ = ('values', 'parent', 'context')

    def __init__(self, values: dict | None = None, parent: "Environment | None" = None,
                 context: EvalContext | None = None):
        self.values = {} if values is None else values
        self.parent = parent
        if context is None:
            context = parent.context if parent is not None else EvalContext()
        self.context = context

    def child(self) -> "Environment":
        return Environment(parent=self)

    @property
    def depth(self) -> int:
        depth, env = 0, self.parent
        while env is not None:
            depth, env = depth + 1, env.parent
        return depth

    def owner(self, name: str) -> "Environment | None":
        """Innermost frame whose mapping already contains `name`, if any."""
        env = self
        while env is not None:
            if name in env.values:
                return env
            env = env.parent
        return None

    def lookup(self, name: str) -> Any:
        if (env := self.owner(name)) is None:
            raise UnboundNameError(f"Name `{name}` is not bound in any scope.", token=name)
        return env.values[name]

    def get(self, name: str, default=None) -> Any:
        env = self.owner(name)
        return default if env is None else env.values[name]

    def declare(self, name: str, value: Any = None) -> None:
        """Create the binding in this frame, shadowing any outer one."""
        self.values[name] = value

    def assign(self, name: str, value: Any) -> Any:
        """Update the owning frame, or create the binding here when no frame has it."""
        env = self.owner(name)
        (self if env is None else env).values[name] = value
        return value

    def __contains__(self, name: str) -> bool:
        return self.owner(name) is not None

    def __repr__(self):
        return f"<Environment depth={self.depth} names={sorted(self.values)}>"
