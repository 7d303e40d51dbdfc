from __future__ import annotations

from typing import Sequence

from ..solana.errors import SolError
from ..solana.signature import SolTxSig
from ..solana.transaction_meta import SolRpcErrorInfo


class SolRpcError(SolError):
    def __init__(self, src: SolRpcErrorInfo) -> None:
        super().__init__(getattr(src, "message", "<Unknown>"))
        self._rpc_data = src

    @property
    def rpc_data(self) -> SolRpcErrorInfo:
        return self._rpc_data


class SolNetworkUnavailableError(SolError):
    """The ledger can't be reached, the request can be repeated later."""

    is_retryable = True

    def __init__(self, message: str) -> None:
        super().__init__(f"Network unavailable: {message}")


class SolTxExpiredError(SolError):
    """The recent blockhash has become too old before the ledger applied the transaction."""

    is_retryable = True

    def __init__(self, tx_sig: SolTxSig, valid_block_height: int, block_height: int) -> None:
        super().__init__(
            f"Transaction {tx_sig} is expired: "
            f"the block height {block_height} is bigger than the last valid one {valid_block_height}"
        )
        self.tx_sig = tx_sig
        self.valid_block_height = valid_block_height
        self.block_height = block_height


class SolTxRejectedError(SolError):
    """The ledger has definitively refused the transaction, no effects are applied."""

    def __init__(self, message: str, log_list: Sequence[str] = tuple()) -> None:
        super().__init__(f"Transaction is rejected: {message}")
        self.reason = message
        self.log_list = tuple(log_list)


class SolDuplicateAddressError(SolTxRejectedError):
    def __init__(self, message: str, log_list: Sequence[str] = tuple()) -> None:
        super().__init__(f"account already exists ({message})", log_list)


class SolDecimalsMismatchError(SolTxRejectedError):
    def __init__(self, message: str, log_list: Sequence[str] = tuple()) -> None:
        super().__init__(f"decimals mismatch ({message})", log_list)
