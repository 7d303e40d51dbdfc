from typing import Final

import solders.system_program as _sys
import solders.sysvar as _var

from .instruction import SolTxIx
from .pubkey import SolPubKey


class SolSysProg:
    ID: Final[SolPubKey] = SolPubKey.from_raw(_sys.ID)
    RentVar: Final[SolPubKey] = SolPubKey.from_raw(_var.RENT)
    # error code of the System program, when the new account already has lamports or data
    AccountAlreadyInUseCode: Final[int] = 0
    LamportsPerSol: Final[int] = 1_000_000_000

    @classmethod
    def make_create_account_ix(
        cls,
        *,
        address: SolPubKey,
        owner: SolPubKey,
        payer: SolPubKey,
        balance: int,
        size: int,
    ) -> SolTxIx:
        return _sys.create_account(
            _sys.CreateAccountParams(
                from_pubkey=payer,
                to_pubkey=address,
                lamports=balance,
                space=size,
                owner=owner,
            )
        )
