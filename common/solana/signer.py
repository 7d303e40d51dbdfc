from __future__ import annotations

import json
import logging
from typing import Sequence, Union

import base58
import solders.keypair as _key
from typing_extensions import Self

from .errors import SolInvalidIdentityError
from .pubkey import SolPubKey
from ..utils.cached import cached_property

_LOG = logging.getLogger(__name__)

SolKeyPair = _key.Keypair


class SolSigner:
    """Controller of an identity: the keypair which authorizes actions of the public key."""

    def __init__(self, keypair: SolKeyPair) -> None:
        self._keypair = keypair

    @classmethod
    def new(cls) -> Self:
        return cls(SolKeyPair())

    @classmethod
    def from_raw(cls, raw: _RawAcct) -> Self:
        if isinstance(raw, SolSigner):
            return raw
        elif isinstance(raw, SolKeyPair):
            return cls(raw)
        elif isinstance(raw, str):
            return cls.from_base58_string(raw)
        elif isinstance(raw, (bytes, bytearray)):
            return cls.from_bytes(bytes(raw))
        elif isinstance(raw, Sequence):
            try:
                return cls.from_bytes(bytes(raw))
            except (ValueError, TypeError) as exc:
                raise SolInvalidIdentityError("<secret>", "items must be bytes") from exc
        raise SolInvalidIdentityError("<secret>", f"wrong input type {type(raw).__name__}")

    @classmethod
    def from_base58_string(cls, value: str) -> Self:
        try:
            raw = base58.b58decode(value.strip())
        except ValueError as exc:
            raise SolInvalidIdentityError("<secret>", "not a base58 string") from exc
        return cls.from_bytes(raw)

    @classmethod
    def from_bytes(cls, raw: bytes) -> Self:
        if len(raw) == 32:
            return cls(SolKeyPair.from_seed(raw))
        elif len(raw) != 64:
            raise SolInvalidIdentityError("<secret>", f"wrong length {len(raw)}")

        keypair = SolKeyPair.from_seed(raw[:32])
        if keypair.pubkey().__bytes__() != raw[32:]:
            raise SolInvalidIdentityError("<secret>", "public half doesn't match the secret half")
        return cls(keypair)

    @classmethod
    def from_file(cls, file_name: str) -> Self:
        """Read the keypair file in the format of the Solana CLI: a JSON list of 64 bytes."""
        _LOG.debug("open a secret file: %s", file_name)
        with open(file_name.strip(), mode="r") as src:
            try:
                raw_key = json.load(src)
            except json.JSONDecodeError as exc:
                raise SolInvalidIdentityError(file_name, "wrong content of the keypair file") from exc

        if not isinstance(raw_key, list):
            raise SolInvalidIdentityError(file_name, "keypair file must contain a list of bytes")
        return cls.from_raw(raw_key)

    @property
    def secret(self) -> bytes:
        return self._keypair.secret()

    @cached_property
    def pubkey(self) -> SolPubKey:
        return SolPubKey.from_raw(self._keypair.pubkey())

    @property
    def keypair(self) -> SolKeyPair:
        return self._keypair

    def to_string(self) -> str:
        return self.pubkey.to_string()

    def to_base58_string(self) -> str:
        return str(base58.b58encode(self.to_bytes()), "utf-8")

    def __str__(self) -> str:
        return self.to_string()

    def __repr__(self) -> str:
        return self.to_string()

    def to_bytes(self) -> bytes:
        return self._keypair.__bytes__()

    def __hash__(self) -> int:
        return hash(self.pubkey)

    def __deepcopy__(self, memo: dict) -> Self:
        memo[id(self)] = self
        return self

    def __eq__(self, other) -> bool:
        if other is self:
            return True
        elif isinstance(other, SolSigner):
            return self.pubkey == other.pubkey
        elif isinstance(other, SolKeyPair):
            return self.secret == other.secret()
        return False


_RawAcct = Union[SolSigner, SolKeyPair, bytes, bytearray, Sequence[int], str]
