from __future__ import annotations

from typing import Sequence

import solders.message as _msg
import solders.transaction as _tx

from .hash import SolBlockHash
from .pubkey import SolPubKey
from .signature import SolTxSig
from .signer import SolKeyPair
from .transaction import SolTx

SolLegacyMsg = _msg.Message
_SoldersLegacyTx = _tx.Transaction


class SolLegacyTx(SolTx):
    """Legacy transaction class to represent an atomic transaction."""

    _solders_legacy_tx: _SoldersLegacyTx

    @property
    def message(self) -> SolLegacyMsg:
        return self._solders_legacy_tx.message

    @property
    def account_key_list(self) -> tuple[SolPubKey, ...]:
        return tuple(SolPubKey.from_raw(key) for key in self.message.account_keys)

    def _build_message(self, blockhash: SolBlockHash) -> None:
        msg = SolLegacyMsg.new_with_blockhash(list(self.ix_list), self.payer, blockhash)
        self._solders_legacy_tx = _SoldersLegacyTx.new_unsigned(msg)

    def _message_blockhash(self):
        return self._solders_legacy_tx.message.recent_blockhash

    def _serialize(self) -> bytes:
        return bytes(self._solders_legacy_tx)

    def _sig(self) -> SolTxSig:
        return SolTxSig.from_raw(self._solders_legacy_tx.signatures[0])

    def _sign(self, keypair_list: Sequence[SolKeyPair]) -> None:
        self._solders_legacy_tx.sign(list(keypair_list), self._solders_legacy_tx.message.recent_blockhash)
