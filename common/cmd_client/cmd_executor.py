from __future__ import annotations

import asyncio
import logging
from argparse import ArgumentParser, Namespace

import uvloop

from .cmd_handler import BaseCmdHandler
from ..config.config import Config
from ..utils.json_logger import Logger

_LOG = logging.getLogger(__name__)


class BaseCmdExecutor:
    """Parses the command line and runs the selected handler inside a uvloop event loop.

    Returns the exit code of the handler, 0 prints the help if there is no command.
    """

    def __init__(self, cfg: Config, description: str) -> None:
        Logger.setup()
        self._cfg = cfg
        self._parser = ArgumentParser(description=description)
        self._cmd_parser = self._parser.add_subparsers(title="command", dest="command", description="valid commands.")
        self._handler_type_list: list[type[BaseCmdHandler]] = list()

    def run(self, arg_list: list[str] | None = None) -> int:
        loop = uvloop.new_event_loop()
        asyncio.set_event_loop(loop)
        try:
            handler_dict = loop.run_until_complete(self._new_handler_dict())
            arg_space = self._parser.parse_args(arg_list)
            if arg_space.command is None:
                self._parser.print_help()
                return 0

            handler = handler_dict.get(arg_space.command, None)
            if handler is None:
                _LOG.error("unknown command %s", arg_space.command)
                return 1

            self._before_exec_handler(arg_space)
            handler.set_config(self._cfg)
            return loop.run_until_complete(handler.execute(arg_space))
        finally:
            loop.close()

    def _before_exec_handler(self, arg_space: Namespace) -> None:
        """Applies the global arguments to the config."""

    async def _new_handler_dict(self) -> dict[str, BaseCmdHandler]:
        handler_dict: dict[str, BaseCmdHandler] = dict()
        for handler_type in self._handler_type_list:
            assert handler_type.command, f"{handler_type.__name__} doesn't have a command name"
            assert handler_type.command not in handler_dict, f"command {handler_type.command} is already registered"
            handler_dict[handler_type.command] = await handler_type.new_arg_parser(self._cfg, self._cmd_parser)
        return handler_dict
