from __future__ import annotations

import logging

from pydantic import Field

from common.config.config import Config
from common.config.constants import ONE_BLOCK_SEC
from common.solana.pubkey import SolPubKey, SolPubKeyField
from common.solana.signature import SolTxSigField
from common.solana.signer import SolSigner
from common.solana_rpc.client import SolClient
from common.solana_rpc.transaction_sender import SolTxSender, sol_tx_stage
from common.utils.json_logger import logging_context
from common.utils.pydantic import BaseModel
from .ix_factory import TokenIxFactory, TokenIssueParams, calc_base_amount
from .rent_sizer import RentSizer
from .tx_assembler import TokenTxAssembler

_LOG = logging.getLogger(__name__)


class TokenIssueResult(BaseModel):
    mint: SolPubKeyField
    holding_account: SolPubKeyField
    owner: SolPubKeyField
    tx_sig: SolTxSigField
    decimals: int
    amount: int = Field(description="Issued supply in base units of the mint")


class TokenIssuer:
    """Creates a new mint and issues the initial supply into the holding account of the owner.

    All steps are packed into one transaction, so the ledger applies everything or nothing.
    Every SolError, which leaves the issuer, has the stage where it happened.
    """

    def __init__(self, cfg: Config, sol_client: SolClient, *, poll_sec: float = ONE_BLOCK_SEC) -> None:
        self._cfg = cfg
        self._sol_client = sol_client
        self._poll_sec = poll_sec
        self._ix_factory = TokenIxFactory()
        self._tx_assembler = TokenTxAssembler()

    async def issue(
        self,
        payer: SolSigner,
        *,
        owner: SolPubKey | str | None = None,
        decimals: int | None = None,
        supply: int | None = None,
        has_freeze_authority: bool = True,
        mint: SolSigner | None = None,
    ) -> TokenIssueResult:
        """Args:
        payer: pays fees and rent, it is the mint authority and the freeze authority.
        owner: owner of the holding account, the fee payer by default.
        supply: number of whole tokens, the base units are supply * 10^decimals.
        mint: controller of the new mint, a fresh one if it isn't passed.
        """
        decimals = self._cfg.token_decimals if decimals is None else decimals
        supply = self._cfg.token_supply if supply is None else supply
        amount = calc_base_amount(supply, decimals)
        mint = mint or SolSigner.new()

        with logging_context(mint=mint.pubkey.to_string()):
            with sol_tx_stage("derive"):
                owner = payer.pubkey if owner is None else SolPubKey.from_raw(owner)
                holding_account = self._ix_factory.ata_prog.derive_address(mint.pubkey, owner)

            with sol_tx_stage("rent"):
                rent_balance = await RentSizer(self._sol_client).get_mint_rent_balance()

            with sol_tx_stage("build"):
                params = TokenIssueParams(
                    payer=payer.pubkey,
                    mint=mint.pubkey,
                    owner=owner,
                    holding_account=holding_account,
                    mint_authority=payer.pubkey,
                    freeze_authority=payer.pubkey if has_freeze_authority else None,
                    decimals=decimals,
                    amount=amount,
                    mint_rent_balance=rent_balance,
                )
                ix_list = self._ix_factory.make_ix_list(params)

            with sol_tx_stage("assemble"):
                tx = self._tx_assembler.assemble(ix_list, payer=payer.pubkey)

            tx_sender = SolTxSender(self._cfg, self._sol_client, poll_sec=self._poll_sec)
            tx_sig = await tx_sender.send(tx, [payer, mint])
            _LOG.info("issued %s base units of the mint %s into %s, tx %s", amount, mint, holding_account, tx_sig)

        return TokenIssueResult(
            mint=mint.pubkey,
            holding_account=holding_account,
            owner=owner,
            tx_sig=tx_sig,
            decimals=decimals,
            amount=amount,
        )
