from __future__ import annotations

import solders.instruction as _ix

SolTxIx = _ix.Instruction
SolAccountMeta = _ix.AccountMeta


def make_acct_meta(pubkey, *, is_signer: bool = False, is_writable: bool = False) -> SolAccountMeta:
    return SolAccountMeta(pubkey, is_signer=is_signer, is_writable=is_writable)


def ix_signer_list(ix: SolTxIx) -> tuple:
    """Accounts which must sign the instruction, in the order of the account list."""
    return tuple(acct_meta.pubkey for acct_meta in ix.accounts if acct_meta.is_signer)
