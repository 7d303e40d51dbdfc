from __future__ import annotations

from typing import ClassVar

from typing_extensions import Self

from common.cmd_client.cmd_handler import BaseCmdHandler
from common.config.config import Config
from common.solana.commit_level import SolCommit
from common.solana.pubkey import SolPubKey
from common.solana_rpc.transaction_sender import sol_tx_stage


class BalanceHandler(BaseCmdHandler):
    command: ClassVar[str] = "balance"

    @classmethod
    async def new_arg_parser(cls, cfg: Config, cmd_list_parser) -> Self:
        self = cls(cfg)
        self._root_parser = parser = cmd_list_parser.add_parser(
            self.command,
            description="Print the token balance of the holding account",
        )
        parser.add_argument("account", type=str, help="address of the holding account")
        return self

    async def _exec_impl(self, arg_space) -> int:
        with sol_tx_stage("derive"):
            address = SolPubKey.from_raw(arg_space.account)

        sol_client = await self._get_sol_client()
        token_acct = await sol_client.get_token_account(address, SolCommit.Confirmed)
        if token_acct is None:
            print(f"Account {address} doesn't exist")
            return 1

        print(f"Mint: {token_acct.mint}")
        print(f"Owner: {token_acct.owner}")
        print(f"Amount: {token_acct.amount}")
        return 0
