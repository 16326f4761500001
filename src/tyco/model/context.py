# Copyright 2026 Tyco Contributors
# SPDX-License-Identifier: Apache-2.0

"""The top-level document aggregate: globals and struct registry."""

from __future__ import annotations

from pydantic import BaseModel
from pydantic import Field as _Field

from tyco.model.schema import Struct
from tyco.model.values import Value

# ###############
# Public Interface
# ###############


class Context(BaseModel):
    """Sole owner of every global value, struct schema, and instance of one document.

    Attributes:
        globals: Global values in declaration order.
        structs: Struct registry in header order.
    """

    globals: dict[str, Value] = _Field(default_factory=dict)
    structs: dict[str, Struct] = _Field(default_factory=dict)

    def set_global(self, name: str, value: Value) -> None:
        self.globals[name] = value

    def get_global(self, name: str) -> Value | None:
        return self.globals.get(name)

    def ensure_struct(self, name: str) -> Struct:
        """Return the struct named *name*, registering an empty one on first use."""
        struct = self.structs.get(name)
        if struct is None:
            struct = Struct(name=name)
            self.structs[name] = struct
        return struct

    def get_struct(self, name: str) -> Struct | None:
        return self.structs.get(name)

    def snapshot(self) -> Context:
        """Return a fully independent deep copy of the whole document."""
        return self.model_copy(deep=True)

    def snapshot_structs(self) -> dict[str, Struct]:
        """Return a deep copy of the struct registry only."""
        return {name: struct.model_copy(deep=True) for name, struct in self.structs.items()}
