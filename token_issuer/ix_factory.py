from __future__ import annotations

from pydantic import Field

from common.solana.ata_program import SolAtaProg
from common.solana.instruction import SolTxIx
from common.solana.pubkey import SolPubKeyField
from common.solana.sys_program import SolSysProg
from common.solana.token_program import SplTokenProg
from common.utils.pydantic import BaseModel


def calc_base_amount(supply: int, decimals: int) -> int:
    """Converts the amount of whole tokens into the base units of the mint."""
    SplTokenProg.validate_decimals(decimals)
    if supply < 0:
        raise ValueError(f"Supply can't be negative: {supply}")
    return SplTokenProg.validate_amount(supply * (10**decimals))


class TokenIssueParams(BaseModel):
    payer: SolPubKeyField
    mint: SolPubKeyField
    owner: SolPubKeyField
    holding_account: SolPubKeyField
    mint_authority: SolPubKeyField
    freeze_authority: SolPubKeyField | None = Field(default=None)
    decimals: int
    amount: int
    mint_rent_balance: int


class TokenIxFactory:
    """Builds the instructions of the token issue in the only order the ledger can execute:
    allocate the mint record, initialize the mint, create the holding account, issue the supply.
    """

    def __init__(self, ata_prog: SolAtaProg | None = None) -> None:
        self._ata_prog = ata_prog or SolAtaProg()

    @property
    def ata_prog(self) -> SolAtaProg:
        return self._ata_prog

    def make_ix_list(self, params: TokenIssueParams) -> tuple[SolTxIx, ...]:
        SplTokenProg.validate_decimals(params.decimals)
        SplTokenProg.validate_amount(params.amount)

        return (
            self.make_alloc_mint_ix(params),
            self.make_init_mint_ix(params),
            self.make_create_holding_account_ix(params),
            self.make_issue_supply_ix(params),
        )

    @staticmethod
    def make_alloc_mint_ix(params: TokenIssueParams) -> SolTxIx:
        return SolSysProg.make_create_account_ix(
            address=params.mint,
            owner=SplTokenProg.ID,
            payer=params.payer,
            balance=params.mint_rent_balance,
            size=SplTokenProg.MintSize,
        )

    @staticmethod
    def make_init_mint_ix(params: TokenIssueParams) -> SolTxIx:
        return SplTokenProg.make_init_mint2_ix(
            mint=params.mint,
            decimals=params.decimals,
            mint_authority=params.mint_authority,
            freeze_authority=params.freeze_authority,
        )

    def make_create_holding_account_ix(self, params: TokenIssueParams) -> SolTxIx:
        return self._ata_prog.make_create_ix(
            payer=params.payer,
            address=params.holding_account,
            owner=params.owner,
            mint=params.mint,
        )

    @staticmethod
    def make_issue_supply_ix(params: TokenIssueParams) -> SolTxIx:
        return SplTokenProg.make_mint_to_checked_ix(
            mint=params.mint,
            dest=params.holding_account,
            mint_authority=params.mint_authority,
            amount=params.amount,
            decimals=params.decimals,
        )
