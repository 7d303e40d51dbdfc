from __future__ import annotations

import logging

from common.solana.token_program import SplTokenProg
from common.solana_rpc.client import SolClient

_LOG = logging.getLogger(__name__)


class RentSizer:
    """Minimum balance which makes an account of the given size exempt from the rent.

    Values are cached for the life of the object, there is no fallback on the failed request.
    """

    def __init__(self, sol_client: SolClient) -> None:
        self._sol_client = sol_client
        self._rent_dict: dict[int, int] = dict()

    async def get_rent_balance(self, size: int) -> int:
        if size < 0:
            raise ValueError(f"Account size can't be negative: {size}")

        if (balance := self._rent_dict.get(size, None)) is not None:
            return balance

        balance = await self._sol_client.get_rent_balance_for_size(size)
        _LOG.debug("rent-exempt balance for %s bytes: %s lamports", size, balance)
        self._rent_dict[size] = balance
        return balance

    async def get_mint_rent_balance(self) -> int:
        return await self.get_rent_balance(SplTokenProg.MintSize)
