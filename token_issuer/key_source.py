from __future__ import annotations

import asyncio
import logging

from common.config.config import Config
from common.config.constants import ONE_BLOCK_SEC
from common.solana.commit_level import SolCommit
from common.solana.errors import SolInvalidIdentityError
from common.solana.signer import SolSigner
from common.solana_rpc.client import SolClient
from common.solana_rpc.errors import SolNetworkUnavailableError, SolTxRejectedError
from common.solana_rpc.transaction_sender import sol_tx_stage

_LOG = logging.getLogger(__name__)


class FeePayerSource:
    """Controller which pays fees and rent of the issue.

    The key is taken from SECRET_KEY (base58), or from SOLANA_KEYPAIR_FILE.
    Without both settings a new key is generated and funded by the faucet.
    """

    def __init__(self, cfg: Config, sol_client: SolClient, *, poll_sec: float = ONE_BLOCK_SEC) -> None:
        self._cfg = cfg
        self._sol_client = sol_client
        self._poll_sec = poll_sec

    async def get_signer(self) -> SolSigner:
        with sol_tx_stage("key"):
            if self._cfg.secret_key:
                signer = SolSigner.from_base58_string(self._cfg.secret_key)
                _LOG.debug("use the fee payer %s from %s", signer, self._cfg.secret_key_name)
            elif self._cfg.keypair_file:
                signer = self._load_keypair_file(self._cfg.keypair_file)
                _LOG.debug("use the fee payer %s from the keypair file", signer)
            else:
                signer = SolSigner.new()
                _LOG.info("generated the fee payer %s, request an airdrop...", signer)
                await self._fund(signer)
            return signer

    @staticmethod
    def _load_keypair_file(file_name: str) -> SolSigner:
        try:
            return SolSigner.from_file(file_name)
        except OSError as exc:
            raise SolInvalidIdentityError(file_name, f"can't read the keypair file: {exc}") from exc

    async def _fund(self, signer: SolSigner) -> None:
        lamports = self._cfg.airdrop_lamports
        if not lamports:
            _LOG.warning("airdrop is disabled, the fee payer %s has no balance", signer)
            return

        tx_sig = await self._sol_client.request_airdrop(signer.pubkey, lamports)
        max_poll_cnt = max(int(self._cfg.commit_timeout_sec / max(self._poll_sec, 0.001)), 1)

        for _ in range(max_poll_cnt):
            tx_status_list = await self._sol_client.get_tx_status_list([tx_sig])
            if tx_status := (tx_status_list[0] if tx_status_list else None):
                if tx_status.is_error:
                    raise SolTxRejectedError(f"airdrop {tx_sig}: {tx_status.error.message}", tx_status.error.log_list)
                elif tx_status.commit.to_level() >= SolCommit.Confirmed.to_level():
                    _LOG.debug("airdrop %s of %s lamports is confirmed", tx_sig, lamports)
                    return
            await asyncio.sleep(self._poll_sec)

        raise SolNetworkUnavailableError(f"airdrop {tx_sig} isn't confirmed in {self._cfg.commit_timeout_sec} seconds")
