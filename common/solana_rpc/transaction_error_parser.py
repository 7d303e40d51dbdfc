from __future__ import annotations

import re

from .errors import SolTxRejectedError, SolDuplicateAddressError, SolDecimalsMismatchError
from ..solana.ata_program import SolAtaProg
from ..solana.pubkey import SolPubKey
from ..solana.sys_program import SolSysProg
from ..solana.token_program import SplTokenProg, SplTokenErrorCode
from ..solana.transaction import SolTx
from ..solana.transaction_meta import SolTxErrorModel
from ..utils.cached import cached_method


class SolTxErrorParser:
    """Classifies the refusal of the ledger for the transaction."""

    _create_acct_re = re.compile(r"Create Account: account Address { address: \w+, base: \w+ } already in use")
    _already_in_use_re = re.compile(r"Allocate: account Address { address: \w+, base: \w+ } already in use")

    def __init__(self, tx: SolTx, error: SolTxErrorModel) -> None:
        self._tx = tx
        self._error = error

    @cached_method
    def check_if_blockhash_notfound(self) -> bool:
        return self._error.is_blockhash_not_found

    @cached_method
    def check_if_already_processed(self) -> bool:
        return self._error.is_already_processed

    @cached_method
    def check_if_account_already_exists(self) -> bool:
        prog_id = self._get_failed_prog_id()
        code = self._error.custom_code
        if prog_id in (SolSysProg.ID, SolAtaProg.ID):
            if code == SolSysProg.AccountAlreadyInUseCode:
                return True
        elif prog_id == SplTokenProg.ID:
            if code == SplTokenErrorCode.AlreadyInUse:
                return True

        for log_rec in self._error.log_list:
            if self._create_acct_re.search(log_rec) or self._already_in_use_re.search(log_rec):
                return True
        return False

    @cached_method
    def check_if_decimals_mismatch(self) -> bool:
        if self._get_failed_prog_id() != SplTokenProg.ID:
            return False
        return self._error.custom_code == SplTokenErrorCode.MintDecimalsMismatch

    def raise_error(self) -> None:
        raise self.get_error()

    def get_error(self) -> SolTxRejectedError:
        msg = self._error.message
        log_list = self._error.log_list
        if self.check_if_decimals_mismatch():
            return SolDecimalsMismatchError(msg, log_list)
        elif self.check_if_account_already_exists():
            return SolDuplicateAddressError(msg, log_list)
        return SolTxRejectedError(msg, log_list)

    def _get_failed_prog_id(self) -> SolPubKey | None:
        ix_idx = self._error.ix_idx
        if (ix_idx is None) or not (0 <= ix_idx < len(self._tx.ix_list)):
            return None
        return SolPubKey.from_raw(self._tx.ix_list[ix_idx].program_id)
