from __future__ import annotations

from solders.commitment_config import CommitmentLevel as SolRpcCommit
from solders.transaction_status import TransactionConfirmationStatus as SolRpcTxCommit
from strenum import StrEnum
from typing_extensions import Self

from ..utils.cached import cached_method


class SolCommit(StrEnum):
    Processed = "processed"
    Confirmed = "confirmed"
    Finalized = "finalized"

    @classmethod
    def from_raw(cls, tag: SolCommit | SolRpcTxCommit | str | int) -> Self:
        value = tag
        if isinstance(value, cls):
            return value
        elif isinstance(value, SolRpcTxCommit):
            return cls._from_rpc_tx_commit(value)
        elif isinstance(value, int) and not isinstance(value, bool):
            member_list = list(cls)
            if 0 <= value < len(member_list):
                return member_list[value]

        if isinstance(value, str):
            try:
                return cls(value.lower())
            except ValueError:
                pass

        raise ValueError(f"Wrong commitment level {tag}")

    @classmethod
    def _from_rpc_tx_commit(cls, value: SolRpcTxCommit) -> Self:
        if value == SolRpcTxCommit.Finalized:
            return cls.Finalized
        elif value == SolRpcTxCommit.Confirmed:
            return cls.Confirmed
        return cls.Processed

    @cached_method
    def to_level(self) -> int:
        return list(self.__class__).index(self)

    @cached_method
    def to_rpc_commit(self) -> SolRpcCommit:
        rpc_tag_dict: dict[SolCommit, SolRpcCommit] = {
            self.Processed: SolRpcCommit.Processed,
            self.Confirmed: SolRpcCommit.Confirmed,
            self.Finalized: SolRpcCommit.Finalized,
        }
        return rpc_tag_dict[self]
