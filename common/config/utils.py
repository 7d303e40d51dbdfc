from __future__ import annotations

from typing import Sequence

from .config import Config


def LogMsgFilter(cfg: Config) -> dict:  # noqa
    """Extra-dict for the logger, which masks URLs and keys in the JSON output."""
    if cfg.hide_sensitive_info:
        return dict(msg_filter=_MsgMasker(cfg.sensitive_info_list))
    return dict()


def hide_sensitive_info(msg_filter: dict, value: str | Sequence[str]) -> str | list[str]:
    if masker := msg_filter.get("msg_filter", None):
        return masker(value)
    return value


class _MsgMasker:
    _mask = "*****"

    def __init__(self, sensitive_info_list: Sequence[str]) -> None:
        self._sensitive_info_list = tuple(sensitive_info_list)

    def __call__(self, value: str | list[str]) -> str | list[str]:
        if isinstance(value, str):
            return self._mask_str(value)
        elif isinstance(value, list):
            return [self._mask_str(item) if isinstance(item, str) else item for item in value]
        return value

    def _mask_str(self, value: str) -> str:
        for item in self._sensitive_info_list:
            value = value.replace(item, self._mask)
        return value
