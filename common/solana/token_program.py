from __future__ import annotations

from enum import IntEnum
from typing import Final, ClassVar

import solders.token as _token
from typing_extensions import Self

from .instruction import SolTxIx, make_acct_meta
from .pubkey import SolPubKey, SolPubKeyField
from ..utils.pydantic import BaseModel

_MAX_U64: Final[int] = 2**64 - 1


class SplTokenIxCode(IntEnum):
    MintToChecked = 14
    InitializeMint2 = 20


class SplTokenErrorCode(IntEnum):
    NotRentExempt = 0
    InsufficientFunds = 1
    InvalidMint = 2
    MintMismatch = 3
    OwnerMismatch = 4
    FixedSupply = 5
    AlreadyInUse = 6
    UninitializedState = 9
    InvalidInstruction = 12
    InvalidState = 13
    Overflow = 14
    MintDecimalsMismatch = 18


class SplTokenAccountModel(BaseModel):
    """Decoded content of the token account, the record which holds a balance of one mint for one owner."""

    mint: SolPubKeyField
    owner: SolPubKeyField
    amount: int

    _layout_size: ClassVar[int] = 165

    @classmethod
    def from_bytes(cls, data: bytes) -> Self:
        if len(data) < cls._layout_size:
            raise ValueError(f"Wrong size of the token account data: {len(data)}")
        return cls(
            mint=SolPubKey.from_bytes(data[0:32]),
            owner=SolPubKey.from_bytes(data[32:64]),
            amount=int.from_bytes(data[64:72], "little"),
        )


class SplTokenProg:
    ID: Final[SolPubKey] = SolPubKey.from_raw(_token.ID)
    MintSize: Final[int] = 82
    AccountSize: Final[int] = 165

    @staticmethod
    def validate_decimals(decimals: int) -> int:
        if not isinstance(decimals, int) or isinstance(decimals, bool):
            raise ValueError(f"Decimals must be an integer, not {type(decimals).__name__}")
        if not (0 <= decimals <= 255):
            raise ValueError(f"Decimals {decimals} don't fit into the u8 field")
        return decimals

    @staticmethod
    def validate_amount(amount: int) -> int:
        if not isinstance(amount, int) or isinstance(amount, bool):
            raise ValueError(f"Amount must be an integer, not {type(amount).__name__}")
        if not (0 <= amount <= _MAX_U64):
            raise ValueError(f"Amount {amount} doesn't fit into the u64 field")
        return amount

    @classmethod
    def make_init_mint2_ix(
        cls,
        *,
        mint: SolPubKey,
        decimals: int,
        mint_authority: SolPubKey,
        freeze_authority: SolPubKey | None,
    ) -> SolTxIx:
        data = bytes([SplTokenIxCode.InitializeMint2, cls.validate_decimals(decimals)]) + mint_authority.to_bytes()
        if freeze_authority is None:
            data += bytes([0])
        else:
            data += bytes([1]) + freeze_authority.to_bytes()

        return SolTxIx(
            program_id=cls.ID,
            data=data,
            accounts=[make_acct_meta(mint, is_writable=True)],
        )

    @classmethod
    def make_mint_to_checked_ix(
        cls,
        *,
        mint: SolPubKey,
        dest: SolPubKey,
        mint_authority: SolPubKey,
        amount: int,
        decimals: int,
    ) -> SolTxIx:
        data = (
            bytes([SplTokenIxCode.MintToChecked])
            + cls.validate_amount(amount).to_bytes(8, "little")
            + bytes([cls.validate_decimals(decimals)])
        )

        return SolTxIx(
            program_id=cls.ID,
            data=data,
            accounts=[
                make_acct_meta(mint, is_writable=True),
                make_acct_meta(dest, is_writable=True),
                make_acct_meta(mint_authority, is_signer=True),
            ],
        )
