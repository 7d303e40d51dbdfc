from __future__ import annotations

import logging
from typing import ClassVar

from typing_extensions import Self

from common.cmd_client.cmd_handler import BaseCmdHandler
from common.config.config import Config
from common.utils.json_logger import logging_context
from .issuer import TokenIssuer
from .key_source import FeePayerSource

_LOG = logging.getLogger(__name__)


class IssueHandler(BaseCmdHandler):
    command: ClassVar[str] = "issue"

    @classmethod
    async def new_arg_parser(cls, cfg: Config, cmd_list_parser) -> Self:
        self = cls(cfg)
        self._root_parser = parser = cmd_list_parser.add_parser(
            self.command,
            description="Create a new mint and issue the initial supply in one transaction",
        )
        parser.add_argument(
            "--decimals",
            type=int,
            dest="decimals",
            default=None,
            help=f"decimals of the mint, {cfg.token_decimals_name} by default",
        )
        parser.add_argument(
            "--supply",
            type=int,
            dest="supply",
            default=None,
            help=f"number of whole tokens to issue, {cfg.token_supply_name} by default",
        )
        parser.add_argument(
            "--owner",
            type=str,
            dest="owner",
            default=None,
            help="owner of the holding account, the fee payer by default",
        )
        parser.add_argument(
            "--no-freeze-authority",
            action="store_true",
            dest="no_freeze_authority",
            help="create the mint without the freeze authority",
        )
        return self

    async def _exec_impl(self, arg_space) -> int:
        sol_client = await self._get_sol_client()
        with logging_context(cmd=self.command):
            payer = await FeePayerSource(self._cfg, sol_client).get_signer()

            owner = arg_space.owner or self._cfg.token_owner
            issuer = TokenIssuer(self._cfg, sol_client)
            res = await issuer.issue(
                payer,
                owner=owner,
                decimals=arg_space.decimals,
                supply=arg_space.supply,
                has_freeze_authority=not arg_space.no_freeze_authority,
            )

        print(f"Mint Address: {res.mint}")
        print(f"Token Account: {res.holding_account}")
        print(f"Amount: {res.amount} (decimals {res.decimals})")
        print(f"Transaction Signature: {res.tx_sig}")
        return 0
