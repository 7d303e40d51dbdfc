from __future__ import annotations

import asyncio
import itertools
import logging
import typing as tp
from typing import TypeVar, Sequence, Union

import solders.account_decoder as _acct
import solders.rpc.config as _cfg
import solders.rpc.errors as _err
import solders.rpc.requests as _req
import solders.rpc.responses as _resp

from .errors import SolRpcError, SolNetworkUnavailableError
from ..config.config import Config
from ..http.client import HttpClient
from ..http.utils import HttpURL
from ..solana.account import SolAccountModel
from ..solana.commit_level import SolCommit
from ..solana.hash import SolBlockHash
from ..solana.pubkey import SolPubKey
from ..solana.signature import SolTxSig
from ..solana.token_program import SplTokenAccountModel, SplTokenProg
from ..solana.transaction import SolTx
from ..solana.transaction_meta import (
    SolRpcErrorInfo,
    SolRpcTxFieldErrorCode,
    SolTxErrorModel,
    SolTxStatusModel,
)

_SolRpcResp = TypeVar("_SolRpcResp", bound=_resp.RPCResult)

_SoldersAcctInfoCfg = _cfg.RpcAccountInfoConfig
_SoldersAcctEnc = _acct.UiAccountEncoding
_SoldersRpcCtxCfg = _cfg.RpcContextConfig
_SoldersTxStatusCfg = _cfg.RpcSignatureStatusConfig
_SoldersAirdropCfg = _cfg.RpcRequestAirdropConfig

_SoldersRpcReq = _req.Body
_SoldersGetBalance = _req.GetBalance
_SoldersGetAcctInfo = _req.GetAccountInfo
_SoldersGetLatestBlockhash = _req.GetLatestBlockhash
_SoldersGetBlockHeight = _req.GetBlockHeight
_SoldersGetTxStatusList = _req.GetSignatureStatuses
_SoldersGetRentBalance = _req.GetMinimumBalanceForRentExemption
_SoldersRequestAirdrop = _req.RequestAirdrop

_SoldersGetBalanceResp = _resp.GetBalanceResp
_SoldersGetAcctInfoResp = _resp.GetAccountInfoResp
_SoldersGetLatestBlockhashResp = _resp.GetLatestBlockhashResp
_SoldersGetBlockHeightResp = _resp.GetBlockHeightResp
_SoldersGetTxStatusListResp = _resp.GetSignatureStatusesResp
_SoldersGetRentBalanceResp = _resp.GetMinimumBalanceForRentExemptionResp
_SoldersRequestAirdropResp = _resp.RequestAirdropResp

_SoldersSendTxCfg = _cfg.RpcSendTransactionConfig
_SoldersSendTx = _req.SendRawTransaction
_SoldersSendTxResp = _resp.SendTransactionResp
_SoldersPreflightError = _err.SendTransactionPreflightFailureMessage
_SoldersNodeUnhealthyError = _err.NodeUnhealthyMessage
_SoldersInternalError = _err.InternalErrorMessage
# errors of an unhealthy node, the request is repeated
_SoldersTransientErrorInfo = (_SoldersNodeUnhealthyError, _SoldersInternalError)

_LOG = logging.getLogger(__name__)

SolRpcSendTxResultInfo = Union[SolTxSig, SolTxErrorModel]


class SolClient(HttpClient):
    """JSON-RPC client of the Solana ledger.

    Transport failures are repeated with a bounded backoff,
    after the last attempt the client raises SolNetworkUnavailableError.
    """

    def __init__(self, cfg: Config) -> None:
        super().__init__(cfg)
        self.set_timeout_sec(cfg.sol_timeout_sec)
        self.set_max_retry_cnt(cfg.sol_retry_cnt)
        self.set_max_sleep_sec(cfg.sol_retry_max_sleep_sec)

        self._id = itertools.count()

        url_list = tuple([HttpURL(url) for url in self._cfg.sol_url_list])
        self.connect(base_url_list=url_list)

    def _get_next_id(self) -> int:
        return next(self._id)

    async def _send_request(self, request: _SoldersRpcReq, parser: type[_SolRpcResp]) -> _SolRpcResp:
        req_json = request.to_json()
        for retry in itertools.count():
            resp_json = await self._send_post_request(req_json)
            try:
                resp = parser.from_json(resp_json)
                if isinstance(resp, _SoldersTransientErrorInfo):
                    raise SolRpcError(resp)

            except BaseException as exc:
                if retry + 1 >= self._max_retry_cnt:
                    raise SolNetworkUnavailableError(f"bad response from the node: {exc}") from exc

                _LOG.warning("bad Solana response '%s' on the request '%s'", resp_json, req_json)
                await asyncio.sleep(self._calc_sleep_sec(retry))
                continue

            if isinstance(resp, tp.get_args(SolRpcErrorInfo)):
                raise SolRpcError(resp)

            return resp

    def _exception_handler(self, url: HttpURL, retry: int, exc: BaseException) -> None:
        try:
            super()._exception_handler(url, retry, exc)
        except BaseException:
            raise SolNetworkUnavailableError(f"{self._max_retry_cnt} attempts failed, the last error: {exc}") from exc

    async def get_balance(self, address: SolPubKey, commit=SolCommit.Confirmed) -> int:
        cfg = _SoldersRpcCtxCfg(commit.to_rpc_commit(), None)
        req = _SoldersGetBalance(address, cfg, self._get_next_id())
        resp = await self._send_request(req, _SoldersGetBalanceResp)
        return resp.value

    async def get_account(self, address: SolPubKey, commit=SolCommit.Confirmed) -> SolAccountModel:
        cfg = _SoldersAcctInfoCfg(_SoldersAcctEnc.Base64, commitment=commit.to_rpc_commit())
        req = _SoldersGetAcctInfo(address, cfg, self._get_next_id())
        resp = await self._send_request(req, _SoldersGetAcctInfoResp)
        return SolAccountModel.from_raw(address, resp.value)

    async def get_token_account(self, address: SolPubKey, commit=SolCommit.Confirmed) -> SplTokenAccountModel | None:
        acct = await self.get_account(address, commit)
        if not acct.is_owned_by(SplTokenProg.ID):
            return None
        return SplTokenAccountModel.from_bytes(acct.data)

    async def get_recent_blockhash(self, commit=SolCommit.Confirmed) -> tuple[SolBlockHash, int]:
        cfg = _SoldersRpcCtxCfg(commitment=commit.to_rpc_commit())
        req = _SoldersGetLatestBlockhash(cfg, self._get_next_id())
        resp = await self._send_request(req, _SoldersGetLatestBlockhashResp)
        return SolBlockHash.from_raw(resp.value.blockhash), resp.value.last_valid_block_height

    async def get_block_height(self, commit=SolCommit.Confirmed) -> int:
        cfg = _SoldersRpcCtxCfg(commitment=commit.to_rpc_commit())
        resp = await self._send_request(_SoldersGetBlockHeight(cfg, self._get_next_id()), _SoldersGetBlockHeightResp)
        return resp.value

    async def get_rent_balance_for_size(self, size: int, commit=SolCommit.Confirmed) -> int:
        req = _SoldersGetRentBalance(size, commit.to_rpc_commit(), self._get_next_id())
        resp = await self._send_request(req, _SoldersGetRentBalanceResp)
        return resp.value

    async def get_tx_status_list(self, tx_sig_list: Sequence[SolTxSig]) -> tuple[SolTxStatusModel | None, ...]:
        if not tx_sig_list:
            return tuple()

        cfg = _SoldersTxStatusCfg(search_transaction_history=False)
        req = _SoldersGetTxStatusList(list(tx_sig_list), cfg, self._get_next_id())
        resp = await self._send_request(req, _SoldersGetTxStatusListResp)
        return tuple([SolTxStatusModel.from_raw(status) if status else None for status in resp.value])

    async def send_tx(self, tx: SolTx, skip_preflight: bool = False) -> SolRpcSendTxResultInfo:
        """Returns the signature of the accepted transaction, or the refusal of the preflight check."""
        cfg = _SoldersSendTxCfg(
            skip_preflight=skip_preflight,
            preflight_commitment=SolCommit.Confirmed.to_rpc_commit(),
            max_retries=0,
        )
        req = _SoldersSendTx(tx.serialize(), cfg, self._get_next_id())
        try:
            resp = await self._send_request(req, _SoldersSendTxResp)
            return SolTxSig.from_raw(resp.value)
        except SolRpcError as exc:
            if isinstance(exc.rpc_data, _SoldersPreflightError):
                sim_result = exc.rpc_data.data
                if sim_result.err == SolRpcTxFieldErrorCode.AlreadyProcessed:
                    return tx.sig
                elif sim_result.err is None:
                    return SolTxErrorModel(message=exc.message, log_list=tuple(sim_result.logs or tuple()))
                return SolTxErrorModel.from_raw(sim_result.err, message=exc.message, log_list=sim_result.logs or tuple())
            # the node refuses the transaction itself, for example, it can't be decoded
            return SolTxErrorModel(message=exc.message)

    async def request_airdrop(self, address: SolPubKey, lamports: int, commit=SolCommit.Confirmed) -> SolTxSig:
        cfg = _SoldersAirdropCfg(commitment=commit.to_rpc_commit())
        req = _SoldersRequestAirdrop(address, lamports, cfg, self._get_next_id())
        resp = await self._send_request(req, _SoldersRequestAirdropResp)
        return SolTxSig.from_raw(resp.value)
