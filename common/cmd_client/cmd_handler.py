from __future__ import annotations

import asyncio
import logging
from typing import ClassVar, Callable, Awaitable

from typing_extensions import Self

from ..config.config import Config
from ..solana.errors import SolError
from ..solana_rpc.client import SolClient
from ..utils.cached import cached_method

_LOG = logging.getLogger(__name__)


class BaseCmdHandler:
    """One sub-command of the command line utility.

    A failure of the Solana layer is printed with its stage and turns into the exit code 1.
    """

    command: ClassVar[str | None] = None

    def __init__(self, cfg: Config) -> None:
        self._cfg = cfg
        self._stop_task_list: list[Callable[[], Awaitable[None]]] = list()

    @classmethod
    async def new_arg_parser(cls, cfg: Config, cmd_list_parser) -> Self:
        return cls(cfg)

    def set_config(self, cfg: Config) -> None:
        self._cfg = cfg

    async def execute(self, arg_space) -> int:
        try:
            return await self._exec_impl(arg_space)
        except SolError as exc:
            _LOG.error("command %s is failed: %s", self.command, exc.to_string())
            print(f"Error: {exc.to_string()}")
            return 1
        finally:
            await asyncio.gather(*[stop() for stop in self._stop_task_list])

    async def _exec_impl(self, arg_space) -> int:
        assert False, "no implementation"
        return 0  # noqa

    @cached_method
    async def _get_sol_client(self) -> SolClient:
        return await self._new_client(SolClient, self._cfg)

    async def _new_client(self, client_type: type, *args):
        client = client_type(*args)
        self._stop_task_list.append(client.stop)
        await client.start()
        return client
