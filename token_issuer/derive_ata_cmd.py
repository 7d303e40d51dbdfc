from __future__ import annotations

from typing import ClassVar

from typing_extensions import Self

from common.cmd_client.cmd_handler import BaseCmdHandler
from common.config.config import Config
from common.solana.ata_program import SolAtaProg
from common.solana.pubkey import SolPubKey
from common.solana_rpc.transaction_sender import sol_tx_stage


class DeriveAtaHandler(BaseCmdHandler):
    command: ClassVar[str] = "derive-ata"

    @classmethod
    async def new_arg_parser(cls, cfg: Config, cmd_list_parser) -> Self:
        self = cls(cfg)
        self._root_parser = parser = cmd_list_parser.add_parser(
            self.command,
            description="Print the holding account of the owner for the mint",
        )
        parser.add_argument("mint", type=str, help="address of the mint")
        parser.add_argument("owner", type=str, help="owner of the holding account")
        return self

    async def _exec_impl(self, arg_space) -> int:
        with sol_tx_stage("derive"):
            mint = SolPubKey.from_raw(arg_space.mint)
            owner = SolPubKey.from_raw(arg_space.owner)
            print(SolAtaProg().derive_address(mint, owner))
        return 0
