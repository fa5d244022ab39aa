"""Action IR spec - composable fragments of generated Yul."""

from __future__ import annotations

import hashlib
from dataclasses import dataclass, field
from typing import Generic, Iterable, Iterator, Sequence, TypeVar, Union

from quarkql.exceptions import MissingStatementError

T = TypeVar("T")

Yul = str


def _content_hash(text: str) -> str:
    return hashlib.sha256(text.encode("utf-8")).hexdigest()


class Preamble:
    """Ordered helper definitions, deduplicated by content.

    The first occurrence of a definition fixes its position; identical
    later entries are dropped.
    """

    __slots__ = ("_entries",)

    def __init__(self, entries: Iterable[Yul] = ()):
        self._entries: dict[str, Yul] = {}
        for entry in entries:
            self._entries.setdefault(_content_hash(entry), entry)

    def union(self, *others: Iterable[Yul]) -> "Preamble":
        merged = Preamble(self)
        for other in others:
            for entry in other:
                merged._entries.setdefault(_content_hash(entry), entry)
        return merged

    def __iter__(self) -> Iterator[Yul]:
        return iter(self._entries.values())

    def __len__(self) -> int:
        return len(self._entries)

    def __contains__(self, entry: object) -> bool:
        return isinstance(entry, str) and _content_hash(entry) in self._entries

    def __eq__(self, other: object) -> bool:
        if isinstance(other, Preamble):
            return list(self) == list(other)
        return NotImplemented

    def __hash__(self) -> int:
        return hash(tuple(self._entries))

    def __repr__(self) -> str:
        return f"Preamble({list(self)!r})"


def _as_lines(part: Union[Yul, Sequence[Yul], None]) -> tuple[Yul, ...]:
    if part is None:
        return ()
    if isinstance(part, str):
        return (part,)
    return tuple(part)


@dataclass(frozen=True)
class Action(Generic[T]):
    """A fragment of generated code.

    `statements[-1]` is the value-producing expression that `pipe` binds
    and `pop` discards. `T` is the type of that value (None when the
    action produces nothing).
    """

    preamble: Preamble = field(default_factory=Preamble)
    statements: tuple[Yul, ...] = ()
    description: str = ""

    @classmethod
    def create(
        cls,
        preamble: Union[Yul, Sequence[Yul], None] = None,
        statements: Union[Yul, Sequence[Yul], None] = None,
        description: str = "",
    ) -> "Action[T]":
        """Build a fragment from a single string or a sequence of strings.

        Raises:
            MissingStatementError: If no statement is given.
        """
        lines = _as_lines(statements)
        if not lines:
            raise MissingStatementError(description)
        return cls(
            preamble=Preamble(_as_lines(preamble)),
            statements=lines,
            description=description,
        )
