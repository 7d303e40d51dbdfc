from __future__ import annotations

import abc
from typing import Sequence, Final

from .errors import SolTxSizeError, SolMissingSignerError
from .hash import SolBlockHash
from .instruction import SolTxIx, ix_signer_list
from .pubkey import SolPubKey
from .signature import SolTxSig
from .signer import SolSigner, SolKeyPair
from ..utils.cached import reset_cached_method

SOL_PACKET_SIZE: Final[int] = 1280 - 40 - 8


def calc_signer_list(payer: SolPubKey, ix_list: Sequence[SolTxIx]) -> tuple[SolPubKey, ...]:
    """Union of the signer accounts of all instructions without duplicates.

    The fee payer goes first, other signers keep the order of their first appearance.
    """
    signer_list: list[SolPubKey] = [payer]
    for ix in ix_list:
        for key in ix_signer_list(ix):
            signer = SolPubKey.from_raw(key)
            if signer not in signer_list:
                signer_list.append(signer)
    return tuple(signer_list)


class SolTx(abc.ABC):
    """Envelope of instructions which the ledger applies atomically: all of them or none."""

    def __init__(
        self,
        name: str,
        ix_list: Sequence[SolTxIx],
        *,
        payer: SolPubKey,
        blockhash: SolBlockHash | None = None,
        valid_block_height: int = 0,
    ) -> None:
        self._name = name
        self._payer = payer
        self._ix_list = tuple(ix_list)
        self._valid_block_height = valid_block_height
        self._is_signed = False
        self._build_tx(blockhash)

    def to_string(self) -> str:
        if self._is_signed:
            return self._name + ":" + self.sig.to_string()
        return self._name + ":<NO SIGNATURE>"

    def __str__(self) -> str:
        return self.to_string()

    def __repr__(self) -> str:
        return self.to_string()

    @property
    def name(self) -> str:
        return self._name

    @property
    def payer(self) -> SolPubKey:
        return self._payer

    @property
    def ix_list(self) -> tuple[SolTxIx, ...]:
        return self._ix_list

    @property
    def recent_blockhash(self) -> SolBlockHash | None:
        return self._get_blockhash()

    @property
    def valid_block_height(self) -> int:
        """The last block height, when the ledger still accepts the transaction with the recent blockhash."""
        return self._valid_block_height

    def set_recent_blockhash(self, value: SolBlockHash | None, valid_block_height: int) -> None:
        """Rebuilding with a new blockhash drops signatures: it is a new transaction for the ledger."""
        self._valid_block_height = valid_block_height
        self._build_tx(value)

    @reset_cached_method
    def required_signer_list(self) -> tuple[SolPubKey, ...]:
        return calc_signer_list(self._payer, self._ix_list)

    @reset_cached_method
    def serialize(self) -> bytes:
        assert self._is_signed, "transaction has not been signed"
        result = self._serialize()
        if len(result) > SOL_PACKET_SIZE:
            raise SolTxSizeError(len(result), SOL_PACKET_SIZE)
        return result

    def to_bytes(self) -> bytes:
        """Serialization which ignores signing and size"""
        return self._serialize()

    def sign(self, signer_list: Sequence[SolSigner]) -> None:
        assert self.recent_blockhash is not None, "transaction doesn't have a recent blockhash"

        signer_dict = {signer.pubkey: signer for signer in signer_list}
        req_signer_list = self.required_signer_list()
        if missing_list := [key for key in req_signer_list if key not in signer_dict]:
            raise SolMissingSignerError(missing_list)

        # keys, which are not required, break the signing
        self._sign([signer_dict[key].keypair for key in req_signer_list])
        self._is_signed = True
        self._reset_cache()

    @property
    def is_signed(self) -> bool:
        return self._is_signed

    @property
    def sig(self) -> SolTxSig:
        assert self._is_signed, "Transaction has not been signed"
        return self._sig()

    # protected

    def _reset_cache(self) -> None:
        self._get_blockhash.reset_cache(self)
        self.required_signer_list.reset_cache(self)
        self.serialize.reset_cache(self)

    def _build_tx(self, blockhash: SolBlockHash | None) -> None:
        self._is_signed = False
        self._build_message(blockhash or SolBlockHash.default())
        self._reset_cache()

    @reset_cached_method
    def _get_blockhash(self) -> SolBlockHash | None:
        blockhash = SolBlockHash.from_raw(self._message_blockhash())
        if blockhash.is_empty:
            return None
        return blockhash

    @abc.abstractmethod
    def _build_message(self, blockhash: SolBlockHash) -> None:
        pass

    @abc.abstractmethod
    def _message_blockhash(self):
        pass

    @abc.abstractmethod
    def _serialize(self) -> bytes:
        pass

    @abc.abstractmethod
    def _sign(self, keypair_list: Sequence[SolKeyPair]) -> None:
        pass

    @abc.abstractmethod
    def _sig(self) -> SolTxSig:
        pass
