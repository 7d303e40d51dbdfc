from __future__ import annotations

from typing import Union

import solders.account as _acct
from pydantic import Field
from typing_extensions import Self

from .pubkey import SolPubKey, SolPubKeyField
from ..utils.pydantic import Base64Field, BaseModel

_SoldersAccount = _acct.Account


class SolAccountModel(BaseModel):
    """State of an address on the ledger, a missing account is an empty model owned by the default key."""

    address: SolPubKeyField
    lamports: int
    data: Base64Field
    owner: SolPubKeyField
    executable: bool = Field(default=False)

    @classmethod
    def new_empty(cls, address: SolPubKey) -> Self:
        return cls(address=address, lamports=0, data=bytes(), owner=SolPubKey.default())

    @classmethod
    def from_raw(cls, address: SolPubKey, raw: _RawAccount) -> Self:
        if isinstance(raw, cls):
            return raw
        elif raw is None:
            return cls.new_empty(address)
        elif not isinstance(raw, _SoldersAccount):
            raise ValueError(f"Wrong account type: {type(raw).__name__}")

        return cls(
            address=address,
            lamports=raw.lamports,
            data=bytes(raw.data),
            owner=SolPubKey.from_raw(raw.owner),
            executable=raw.executable,
        )

    @property
    def is_empty(self) -> bool:
        return self.lamports == 0 and len(self.data) == 0

    def is_owned_by(self, prog_id: SolPubKey) -> bool:
        return (not self.is_empty) and (self.owner == prog_id)


_RawAccount = Union[SolAccountModel, _SoldersAccount, None]
