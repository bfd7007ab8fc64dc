"""Errors raised while running a protocol."""

from __future__ import annotations

from typing import Sequence


class ProtocolError(Exception):
    """A protocol failure, with the parties held responsible when they are known."""

    def __init__(self, err: BaseException, culprits: Sequence[str] | None = None) -> None:
        super().__init__(err)
        self.err = err
        self.culprits = list(culprits) if culprits is not None else None
        self.__cause__ = err

    def __str__(self) -> str:
        if self.culprits is None:
            return str(self.err)
        return f"culprits: [{' '.join(self.culprits)}]: {self.err}"