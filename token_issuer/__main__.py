from __future__ import annotations

import os
import sys

from common.cmd_client.cmd_executor import BaseCmdExecutor
from common.config.config import Config
from .balance_cmd import BalanceHandler
from .derive_ata_cmd import DeriveAtaHandler
from .issue_cmd import IssueHandler


class CmdExecutor(BaseCmdExecutor):
    def __init__(self, cfg: Config) -> None:
        super().__init__(cfg, description="Command line utility to issue SPL tokens on Solana.")
        self._handler_type_list.append(IssueHandler)
        self._handler_type_list.append(DeriveAtaHandler)
        self._handler_type_list.append(BalanceHandler)

        self._parser.add_argument(
            "-u",
            "--solana-url",
            type=str,
            dest="solana_url",
            help="Solana URL",
        )

    def _before_exec_handler(self, arg_space) -> None:
        if arg_space.solana_url:
            os.environ[self._cfg.sol_url_name] = arg_space.solana_url
            self._cfg = Config()


def main() -> None:
    cfg = Config()
    cmd_executor = CmdExecutor(cfg)

    exit_code = cmd_executor.run()
    sys.exit(exit_code)


if __name__ == "__main__":
    main()
