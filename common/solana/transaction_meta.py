from __future__ import annotations

from typing import Sequence

import solders.rpc.responses as _resp
import solders.transaction_status as _tx
from pydantic import Field
from typing_extensions import Self

from .commit_level import SolCommit
from ..utils.pydantic import BaseModel

SolRpcErrorInfo = _resp.RPCError
SolRpcTxErrorInfo = _tx.TransactionErrorType
SolRpcTxFieldErrorCode = _tx.TransactionErrorFieldless
SolRpcTxIxErrorInfo = _tx.TransactionErrorInstructionError
SolRpcTxIxCustomErrorInfo = _tx.InstructionErrorCustom
SolRpcTxStatusInfo = _tx.TransactionStatus


class SolTxErrorModel(BaseModel):
    """Definitive refusal of the ledger, the original diagnostic is kept in the message and the logs."""

    message: str
    ix_idx: int | None = Field(default=None)
    custom_code: int | None = Field(default=None)
    is_blockhash_not_found: bool = Field(default=False)
    is_already_processed: bool = Field(default=False)
    log_list: tuple[str, ...] = Field(default=tuple())

    @classmethod
    def from_raw(cls, raw: SolRpcTxErrorInfo, *, message: str | None = None, log_list: Sequence[str] = tuple()) -> Self:
        ix_idx: int | None = None
        custom_code: int | None = None
        is_blockhash_not_found = False
        is_already_processed = False

        if isinstance(raw, SolRpcTxIxErrorInfo):
            ix_idx = raw.index
            if isinstance(raw.err, SolRpcTxIxCustomErrorInfo):
                custom_code = raw.err.code
        elif isinstance(raw, SolRpcTxFieldErrorCode):
            is_blockhash_not_found = raw == SolRpcTxFieldErrorCode.BlockhashNotFound
            is_already_processed = raw == SolRpcTxFieldErrorCode.AlreadyProcessed

        return cls(
            message=message or str(raw),
            ix_idx=ix_idx,
            custom_code=custom_code,
            is_blockhash_not_found=is_blockhash_not_found,
            is_already_processed=is_already_processed,
            log_list=tuple(log_list or tuple()),
        )


class SolTxStatusModel(BaseModel):
    slot: int
    commit: SolCommit
    error: SolTxErrorModel | None = Field(default=None)

    @classmethod
    def from_raw(cls, raw: SolRpcTxStatusInfo) -> Self:
        if raw.confirmation_status is None:
            # the node doesn't report the status for rooted blocks
            commit = SolCommit.Finalized
        else:
            commit = SolCommit.from_raw(raw.confirmation_status)

        error = SolTxErrorModel.from_raw(raw.err) if raw.err is not None else None
        return cls(slot=raw.slot, commit=commit, error=error)

    @property
    def is_error(self) -> bool:
        return self.error is not None
