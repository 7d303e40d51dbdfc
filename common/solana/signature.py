from __future__ import annotations

from typing import Union, Annotated

import solders.signature as _sig
from pydantic import PlainValidator, PlainSerializer
from typing_extensions import Self

from ..utils.cached import cached_method

_SoldersSig = _sig.Signature


class SolTxSig(_SoldersSig):
    """Signature of the fee payer, it is the identifier of the transaction on the ledger."""

    @classmethod
    def new_unique(cls) -> Self:
        return cls.from_raw(_SoldersSig.new_unique())

    @classmethod
    def from_raw(cls, raw: _RawTxSig) -> Self:
        if isinstance(raw, cls):
            return raw
        elif isinstance(raw, str):
            raw = _SoldersSig.from_string(raw)

        if isinstance(raw, (_SoldersSig, bytes, bytearray)):
            return cls(bytes(raw))
        raise ValueError(f"Wrong signature type {type(raw).__name__}")

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
        elif isinstance(other, (_SoldersSig, bytes, bytearray)):
            return self.to_bytes() == bytes(other)
        return False


_RawTxSig = Union[str, bytes, bytearray, _SoldersSig, SolTxSig]


SolTxSigField = Annotated[
    SolTxSig,
    PlainValidator(SolTxSig.from_raw),
    PlainSerializer(lambda v: v.to_string(), return_type=str),
]
