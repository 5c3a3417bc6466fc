"""Typed positional parameters and per-match binding."""

from __future__ import annotations

from collections.abc import Iterator, Mapping, Sequence
from dataclasses import dataclass
from typing import Literal, TypeAlias

ParamType: TypeAlias = Literal["untyped", "int"]

PARAM_TYPES: frozenset[str] = frozenset({"untyped", "int"})


@dataclass(frozen=True, slots=True)
class Param:
    """Declaration of one positional parameter.

    Declarations are immutable; matched values live in :class:`ParamBindings`.
    """

    id: str
    description: str = ""
    type: ParamType = "untyped"
    required: bool = False

    def validate(self, value: str) -> bool:
        """Return True when ``value`` is well-formed for the declared type."""
        if self.type == "int":
            try:
                int(value)
            except ValueError:
                return False
        return True


class ParamBindings(Mapping[str, str]):
    """Values bound to parameter ids during one dispatch attempt."""

    __slots__ = ("_values", "rejected")

    def __init__(self, values: dict[str, str] | None = None, rejected: str | None = None):
        self._values = dict(values or {})
        # Id of the parameter whose value failed type validation, if any.
        self.rejected = rejected

    def __getitem__(self, key: str) -> str:
        return self._values[key]

    def __iter__(self) -> Iterator[str]:
        return iter(self._values)

    def __len__(self) -> int:
        return len(self._values)

    def as_int(self, key: str) -> int:
        return int(self._values[key])

    def __repr__(self) -> str:
        return f"ParamBindings({self._values!r}, rejected={self.rejected!r})"


def bind_params(params: Sequence[Param], words: Sequence[str]) -> tuple[str, ParamBindings]:
    """Bind ``words`` positionally onto ``params``.

    Returns the handler classification together with a fresh bindings object:
    ``params_wrong_type`` on the first value failing validation,
    ``params_missing`` on the first required parameter without a word,
    ``params_extra`` when words remain after all params, otherwise ``params``.
    """
    values: dict[str, str] = {}
    for index, param in enumerate(params):
        if index < len(words):
            word = words[index]
            values[param.id] = word
            if not param.validate(word):
                return "params_wrong_type", ParamBindings(values, rejected=param.id)
        elif param.required:
            return "params_missing", ParamBindings(values)

    if len(words) > len(params):
        return "params_extra", ParamBindings(values)

    return "params", ParamBindings(values)
