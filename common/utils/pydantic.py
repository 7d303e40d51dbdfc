from __future__ import annotations

import base64
import binascii
from typing import Annotated, Any

import pydantic
from typing_extensions import Self

from .format import str_fmt_object


class BaseModel(pydantic.BaseModel):
    """Immutable record with strict types: values aren't coerced, unknown fields are refused."""

    model_config = pydantic.ConfigDict(extra="forbid", strict=True, frozen=True)

    @classmethod
    def from_json(cls, json_data: str | bytes) -> Self:
        return cls.model_validate_json(json_data)

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> Self:
        return cls.model_validate(data)

    def to_json(self) -> str:
        return self.model_dump_json()

    def to_dict(self) -> dict[str, Any]:
        return self.model_dump(mode="json")

    def to_string(self) -> str:
        return str_fmt_object(self)

    def __str__(self) -> str:
        return self.to_string()

    def __repr__(self) -> str:
        return self.to_string()

    def __deepcopy__(self, memo: dict[int, Any] | None = None) -> Self:
        if memo is not None:
            memo[id(self)] = self
        return self


def _decode_base64(value: str | bytes | bytearray | None) -> bytes:
    if isinstance(value, (bytes, bytearray)):
        return bytes(value)
    elif value is None:
        return bytes()
    elif isinstance(value, str):
        try:
            return base64.b64decode(value, validate=True)
        except binascii.Error as exc:
            raise ValueError(f"Not a base64 string: {exc}") from exc
    raise ValueError(f"Wrong type for base64 data: {type(value).__name__}")


# account data comes from the node as base64, the model keeps raw bytes
Base64Field = Annotated[
    bytes,
    pydantic.PlainValidator(_decode_base64),
    pydantic.PlainSerializer(lambda v: str(base64.b64encode(v), "utf-8"), return_type=str),
]
