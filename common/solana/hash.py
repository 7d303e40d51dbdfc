from __future__ import annotations

from typing import Union, ClassVar

import solders.hash as _hash
from typing_extensions import Self

from ..utils.cached import cached_method

_SoldersHash = _hash.Hash


class SolBlockHash(_SoldersHash):
    """Recent blockhash: the liveness token which bounds how long a signed transaction can be submitted.

    The zero hash stands for "no blockhash yet".
    """

    _zero: ClassVar[SolBlockHash | None] = None

    @classmethod
    def default(cls) -> Self:
        if cls._zero is None:
            cls._zero = cls(bytes(_SoldersHash.default()))
        return cls._zero

    @classmethod
    def new_unique(cls) -> Self:
        return cls.from_raw(_SoldersHash.new_unique())

    @classmethod
    def from_raw(cls, raw: _RawBlockHash) -> Self:
        if isinstance(raw, cls):
            return raw
        elif raw is None:
            return cls.default()
        elif isinstance(raw, str):
            raw = _SoldersHash.from_string(raw)

        if isinstance(raw, _SoldersHash):
            return cls(bytes(raw))
        elif isinstance(raw, (bytes, bytearray)):
            return cls(bytes(raw))
        raise ValueError(f"Wrong blockhash type {type(raw).__name__}")

    @property
    def is_empty(self) -> bool:
        return self.to_bytes() == self.default().to_bytes()

    def to_bytes(self) -> bytes:
        return bytes(self)

    def to_string(self) -> str:
        return str(self)

    def __repr__(self) -> str:
        return self.to_string()

    def __deepcopy__(self, memo: dict) -> Self:
        memo[id(self)] = self
        return self

    @cached_method
    def __hash__(self) -> int:
        return hash(self.to_bytes())

    def __eq__(self, other) -> bool:
        if isinstance(other, str):
            return self.to_string() == other
        elif isinstance(other, (_SoldersHash, bytes, bytearray)):
            return self.to_bytes() == bytes(other)
        return False


_RawBlockHash = Union[None, str, bytes, bytearray, _SoldersHash, SolBlockHash]
