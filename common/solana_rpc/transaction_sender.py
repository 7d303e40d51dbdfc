from __future__ import annotations

import asyncio
import contextlib
import enum
import logging
from typing import Sequence

from .client import SolClient
from .errors import SolRpcError, SolTxExpiredError, SolTxRejectedError, SolNetworkUnavailableError
from .transaction_error_parser import SolTxErrorParser
from ..config.config import Config
from ..config.constants import ONE_BLOCK_SEC
from ..solana.commit_level import SolCommit
from ..solana.errors import SolError
from ..solana.signature import SolTxSig
from ..solana.signer import SolSigner
from ..solana.transaction import SolTx
from ..solana.transaction_meta import SolTxErrorModel, SolTxStatusModel

_LOG = logging.getLogger(__name__)


class SolTxSendStatus(enum.Enum):
    Unsigned = enum.auto()
    Signed = enum.auto()
    Submitted = enum.auto()
    # final states
    Confirmed = enum.auto()
    Expired = enum.auto()
    Rejected = enum.auto()


@contextlib.contextmanager
def sol_tx_stage(stage: str):
    """Marks the error with the name of the failed stage."""
    try:
        yield
    except SolError as exc:
        exc.set_stage(stage)
        raise


class SolTxSender:
    """Signs, submits and waits for the commitment of one transaction.

    The status goes Unsigned -> Signed -> Submitted -> Confirmed | Expired | Rejected.
    The signed bytes are never submitted after the last valid block height,
    the caller should build a new transaction with a fresh blockhash for the next attempt.
    SolNetworkUnavailableError from the submit stage means the outcome is unknown:
    the transaction can be on the ledger, tx.sig identifies it.
    """

    _resend_poll_cnt = 4

    def __init__(self, cfg: Config, sol_client: SolClient, *, poll_sec: float = ONE_BLOCK_SEC) -> None:
        self._cfg = cfg
        self._sol_client = sol_client
        self._poll_sec = poll_sec
        self._status = SolTxSendStatus.Unsigned
        self._tx_status: SolTxStatusModel | None = None

    @property
    def status(self) -> SolTxSendStatus:
        return self._status

    @property
    def tx_status(self) -> SolTxStatusModel | None:
        return self._tx_status

    async def send(self, tx: SolTx, signer_list: Sequence[SolSigner]) -> SolTxSig:
        self._set_status(tx, SolTxSendStatus.Unsigned)
        self._tx_status = None

        with sol_tx_stage("blockhash"):
            if not tx.recent_blockhash:
                blockhash, valid_block_height = await self._sol_client.get_recent_blockhash(SolCommit.Confirmed)
                tx.set_recent_blockhash(blockhash, valid_block_height)
                _LOG.debug("use blockhash %s valid till the block height %s", blockhash, valid_block_height)

        with sol_tx_stage("sign"):
            tx.sign(signer_list)
            self._set_status(tx, SolTxSendStatus.Signed)

        with sol_tx_stage("submit"):
            try:
                await self._submit(tx)
                await self._wait_for_commit(tx)
            except SolTxExpiredError:
                self._set_status(tx, SolTxSendStatus.Expired)
                raise
            except SolTxRejectedError:
                self._set_status(tx, SolTxSendStatus.Rejected)
                raise

        self._set_status(tx, SolTxSendStatus.Confirmed)
        return tx.sig

    def _set_status(self, tx: SolTx, status: SolTxSendStatus) -> None:
        if self._status != status:
            _LOG.debug("tx %s: %s -> %s", tx, self._status.name, status.name)
        self._status = status

    async def _submit(self, tx: SolTx) -> None:
        res = await self._sol_client.send_tx(tx)
        if isinstance(res, SolTxErrorModel):
            self._check_send_error(tx, res)
        elif res != tx.sig:
            _LOG.warning("node returns the signature %s for the transaction %s", res, tx)

        self._set_status(tx, SolTxSendStatus.Submitted)

    def _check_send_error(self, tx: SolTx, error: SolTxErrorModel) -> None:
        parser = SolTxErrorParser(tx, error)
        if parser.check_if_already_processed():
            _LOG.debug("tx %s is already processed", tx)
        elif parser.check_if_blockhash_notfound():
            # the node can be behind the cluster, wait and resend till the expiry
            _LOG.debug("node doesn't know the blockhash %s yet", tx.recent_blockhash)
        else:
            _LOG.debug("tx %s is refused on the preflight: %s", tx, error.message)
            parser.raise_error()

    async def _wait_for_commit(self, tx: SolTx) -> None:
        """Polls the status till the commitment level, the expiry or the timeout of waiting.

        Failed requests don't change the status of the transaction, they only count for the timeout.
        """
        commit_level = self._cfg.commit_type.to_level()
        max_wait_cnt = max(int(self._cfg.commit_timeout_sec / max(self._poll_sec, 0.001)), 1)
        poll_cnt = 0
        wait_cnt = 0
        while True:
            try:
                if await self._is_committed(tx, commit_level):
                    return
                elif self._tx_status is None:
                    # the expiry height bounds the waiting
                    wait_cnt = 0
                    poll_cnt += 1
                    if poll_cnt % self._resend_poll_cnt == 0:
                        _LOG.debug("no status for the tx %s, resend it", tx)
                        await self._submit(tx)
                else:
                    wait_cnt += 1
            except (SolNetworkUnavailableError, SolRpcError) as exc:
                _LOG.warning("fail to get the status of the tx %s: %s", tx, exc.message)
                wait_cnt += 1

            if wait_cnt >= max_wait_cnt:
                raise SolNetworkUnavailableError(
                    f"tx {tx.sig} doesn't reach the commitment {self._cfg.commit_type} "
                    f"in {self._cfg.commit_timeout_sec} seconds, the last status: {self._tx_status}"
                )
            await asyncio.sleep(self._poll_sec)

    async def _is_committed(self, tx: SolTx, commit_level: int) -> bool:
        tx_status_list = await self._sol_client.get_tx_status_list([tx.sig])
        self._tx_status = tx_status = tx_status_list[0] if tx_status_list else None

        if tx_status is None:
            block_height = await self._sol_client.get_block_height(SolCommit.Confirmed)
            if block_height > tx.valid_block_height:
                raise SolTxExpiredError(tx.sig, tx.valid_block_height, block_height)
            return False
        elif tx_status.is_error:
            _LOG.debug("tx %s is failed in the slot %s: %s", tx, tx_status.slot, tx_status.error.message)
            SolTxErrorParser(tx, tx_status.error).raise_error()
        elif tx_status.commit.to_level() >= commit_level:
            _LOG.debug("tx %s is committed in the slot %s with %s", tx, tx_status.slot, tx_status.commit)
            return True

        # the transaction is in a block, the block height doesn't limit it anymore
        return False
