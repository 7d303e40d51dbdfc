from __future__ import annotations

import logging
from enum import IntEnum
from typing import Final

from .errors import SolInvalidIdentityError
from .instruction import SolTxIx, make_acct_meta
from .pubkey import SolPubKey
from .sys_program import SolSysProg
from .token_program import SplTokenProg

_LOG = logging.getLogger(__name__)


class SolAtaIxCode(IntEnum):
    Create = 0
    CreateIdempotent = 1


class SolAtaProg:
    """Associated token accounts: the holding account of one owner for one mint lives at a program-derived address."""

    ID: Final[SolPubKey] = SolPubKey.from_string("ATokenGPvbdGVxr1b2hvZbsiqW5xWH25efTNsLJA8knL")

    def __init__(self, token_prog_id: SolPubKey = SplTokenProg.ID) -> None:
        self._token_prog_id = SolPubKey.from_raw(token_prog_id)

    @property
    def token_prog_id(self) -> SolPubKey:
        return self._token_prog_id

    def derive_address(self, mint: SolPubKey, owner: SolPubKey) -> SolPubKey:
        mint = SolPubKey.from_raw(mint)
        owner = SolPubKey.from_raw(owner)

        addr, _ = SolPubKey.find_program_address(
            seed_list=(
                owner.to_bytes(),
                self._token_prog_id.to_bytes(),
                mint.to_bytes(),
            ),
            prog_id=self.ID,
        )
        _LOG.debug("derived holding account %s for mint %s and owner %s", addr, mint, owner)
        return addr

    def make_create_ix(
        self,
        *,
        payer: SolPubKey,
        address: SolPubKey,
        owner: SolPubKey,
        mint: SolPubKey,
    ) -> SolTxIx:
        if address != self.derive_address(mint, owner):
            raise SolInvalidIdentityError(address, "holding account isn't derived from the mint and the owner")

        return SolTxIx(
            program_id=self.ID,
            data=bytes([SolAtaIxCode.Create]),
            accounts=[
                make_acct_meta(payer, is_signer=True, is_writable=True),
                make_acct_meta(address, is_writable=True),
                make_acct_meta(owner),
                make_acct_meta(mint),
                make_acct_meta(SolSysProg.ID),
                make_acct_meta(self._token_prog_id),
            ],
        )
