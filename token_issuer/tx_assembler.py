from __future__ import annotations

import logging
from typing import Sequence

from common.solana.errors import SolMissingFeePayerError
from common.solana.hash import SolBlockHash
from common.solana.instruction import SolTxIx
from common.solana.pubkey import SolPubKey
from common.solana.transaction_legacy import SolLegacyTx

_LOG = logging.getLogger(__name__)


class TokenTxAssembler:
    """Packs the instruction list into one transaction, the order of instructions is kept as is."""

    def __init__(self, name: str = "IssueToken") -> None:
        self._name = name

    def assemble(
        self,
        ix_list: Sequence[SolTxIx],
        *,
        payer: SolPubKey,
        blockhash: SolBlockHash | None = None,
        valid_block_height: int = 0,
    ) -> SolLegacyTx:
        if not ix_list:
            raise ValueError("Transaction must have at least one instruction")
        elif (blockhash is None) != (valid_block_height <= 0):
            raise ValueError(
                f"Recent blockhash {blockhash} must come with a positive last valid block height: {valid_block_height}"
            )

        payer = SolPubKey.from_raw(payer)
        if not any(payer == acct_meta.pubkey for ix in ix_list for acct_meta in ix.accounts):
            raise SolMissingFeePayerError(payer)

        tx = SolLegacyTx(
            name=self._name,
            ix_list=ix_list,
            payer=payer,
            blockhash=blockhash,
            valid_block_height=valid_block_height,
        )
        _LOG.debug("assemble tx %s with %s instructions, signers: %s", tx.name, len(ix_list), tx.required_signer_list())
        return tx
