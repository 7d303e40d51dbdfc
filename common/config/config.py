from __future__ import annotations

import logging
import os
import re
from decimal import Decimal
from typing import Final

from .constants import ONE_BLOCK_SEC, MIN_FINALIZE_SEC, TOKEN_ISSUER_VER
from ..solana.commit_level import SolCommit
from ..solana.pubkey import SolPubKey
from ..solana.sys_program import SolSysProg
from ..utils.cached import cached_property, cached_method
from ..utils.format import str_fmt_object

_LOG = logging.getLogger(__name__)
_RE_SPLIT_REGEX = re.compile(r",|;|\s")


class Config:
    hide_sensitive_info_name: Final[str] = "HIDE_SENSITIVE_INFO"
    sol_url_name: Final[str] = "SOLANA_URL"
    sol_url_alias_name: Final[str] = "RPC_ENDPOINT"
    sol_timeout_sec_name: Final[str] = "SOLANA_TIMEOUT"
    sol_retry_cnt_name: Final[str] = "SOLANA_RETRY_COUNT"
    sol_retry_max_sleep_sec_name: Final[str] = "SOLANA_RETRY_MAX_SLEEP_SEC"
    # Transaction execution settings
    commit_timeout_sec_name: Final[str] = "COMMIT_TIMEOUT_SEC"
    commit_level_name: Final[str] = "COMMIT_LEVEL"
    # Fee payer settings
    secret_key_name: Final[str] = "SECRET_KEY"
    secret_key_alias_name: Final[str] = "SECRET"
    keypair_file_name: Final[str] = "SOLANA_KEYPAIR_FILE"
    airdrop_lamports_name: Final[str] = "AIRDROP_LAMPORTS"
    # Token settings
    token_decimals_name: Final[str] = "TOKEN_DECIMALS"
    token_supply_name: Final[str] = "TOKEN_SUPPLY"
    token_owner_name: Final[str] = "TOKEN_OWNER"

    _1min: Final[int] = 60
    _1hour: Final[int] = 60 * 60

    @staticmethod
    def _split_str(src: str) -> list[str]:
        str_list = _RE_SPLIT_REGEX.split(src)
        str_list = [s.strip() for s in str_list]
        return [s for s in str_list if s]

    @staticmethod
    def _env_bool(name: str, default_value: bool) -> bool:
        true_value_list = ("TRUE", "YES", "ON", "1")
        false_value_list = ("FALSE", "NO", "OFF", "0")
        os_def_value = true_value_list[0] if default_value else false_value_list[0]

        value = os.environ.get(name, os_def_value).upper().strip()
        if (value not in true_value_list) and (value not in false_value_list):
            _LOG.warning(
                "%s can be: %s or %s, force to use the default value %s",
                name,
                true_value_list,
                false_value_list,
                os_def_value,
            )
            return default_value

        return value in true_value_list

    @staticmethod
    def _env_num(
        name: str,
        default_value: int | float | Decimal,
        min_value: int | float | Decimal | None = None,
        max_value: int | float | Decimal | None = None,
    ) -> int | float | Decimal:
        value = os.environ.get(name, None)
        if value is None:
            return default_value

        try:
            if isinstance(default_value, int):
                value = int(value.replace("_", ""), base=10)
            elif isinstance(default_value, float):
                value = float(value)
            else:
                value = Decimal(value)

            if min_value is not None:
                assert type(min_value) is type(default_value), f"{type(min_value)} is {type(default_value)}"
                if value < min_value:
                    _LOG.warning("%s cannot be less than min value %s", name, min_value)
                    value = min_value

            if max_value is not None:
                assert type(max_value) is type(default_value)
                if value > max_value:
                    _LOG.warning("%s cannot be bigger than max value %s", name, max_value)
                    value = max_value
            return value

        except ValueError:
            _LOG.warning("bad value for %s, force to use the default value %s", name, default_value)
            return default_value

    @staticmethod
    def _env_commit_level(name: str, default_value: SolCommit, min_value: SolCommit | None = None) -> SolCommit:
        value = os.environ.get(name, None)
        if value is None:
            return default_value

        try:
            value = SolCommit.from_raw(value.lower().strip())
            if (min_value is not None) and (value.to_level() < min_value.to_level()):
                _LOG.warning(
                    "%s cannot be less than min value %s, force to use the default value %s",
                    name,
                    min_value,
                    default_value,
                )
                return default_value

            return value
        except ValueError:
            _LOG.warning("bad value for %s, force to use default value %s", name, default_value)
            return default_value

    ###################
    # Base settings

    @cached_property
    def sol_url_list(self) -> tuple[str, ...]:
        sol_url = os.environ.get(self.sol_url_name, None) or os.environ.get(self.sol_url_alias_name, "")
        sol_url_list = self._split_str(sol_url)
        if not sol_url_list:
            _LOG.warning("%s is not defined, force to use the localhost", self.sol_url_name)
            sol_url_list = ["http://localhost:8899"]
        return tuple(sol_url_list)

    @cached_property
    def sol_timeout_sec(self) -> float:
        return float(self._env_num(self.sol_timeout_sec_name, 10, 1, self._1hour))

    @cached_property
    def sol_retry_cnt(self) -> int:
        return self._env_num(self.sol_retry_cnt_name, 5, 1, 100)

    @cached_property
    def sol_retry_max_sleep_sec(self) -> float:
        return self._env_num(self.sol_retry_max_sleep_sec_name, 4.0, 0.0, float(self._1min))

    @cached_property
    def hide_sensitive_info(self) -> bool:
        return self._env_bool(self.hide_sensitive_info_name, True)

    @cached_property
    def sensitive_info_list(self) -> tuple[str, ...]:
        res_list = list(self.sol_url_list) + [self.secret_key or "", self.keypair_file or ""]
        res_set = set([item for item in res_list if item])
        res_list = sorted(res_set, key=lambda x: len(x), reverse=True)
        return tuple(res_list)

    #################################
    # Transaction execution settings

    @cached_property
    def commit_timeout_sec(self) -> float:
        return self._env_num(self.commit_timeout_sec_name, float(MIN_FINALIZE_SEC * 4), ONE_BLOCK_SEC, float(self._1hour))

    @cached_property
    def commit_type(self) -> SolCommit:
        return self._env_commit_level(self.commit_level_name, SolCommit.Finalized, SolCommit.Confirmed)

    #################################
    # Fee payer settings

    @cached_property
    def secret_key(self) -> str | None:
        return os.environ.get(self.secret_key_name, None) or os.environ.get(self.secret_key_alias_name, None) or None

    @cached_property
    def keypair_file(self) -> str | None:
        return os.environ.get(self.keypair_file_name, None) or None

    @cached_property
    def airdrop_lamports(self) -> int:
        return self._env_num(self.airdrop_lamports_name, SolSysProg.LamportsPerSol, 0)

    #################################
    # Token settings

    @cached_property
    def token_decimals(self) -> int:
        return self._env_num(self.token_decimals_name, 6, 0, 255)

    @cached_property
    def token_supply(self) -> int:
        return self._env_num(self.token_supply_name, 21_000_000, 0)

    @cached_property
    def token_owner(self) -> SolPubKey | None:
        value = os.environ.get(self.token_owner_name, None)
        if not value:
            return None

        try:
            return SolPubKey.from_raw(value)
        except ValueError:
            _LOG.warning("%s contains bad Solana account %s, force to use the fee payer", self.token_owner_name, value)
            return None

    @cached_method
    def to_string(self) -> str:
        cfg_dict = {
            "VERSION": TOKEN_ISSUER_VER,
            self.hide_sensitive_info_name: self.hide_sensitive_info,
            "SOLANA_BLOCK_SEC": ONE_BLOCK_SEC,
            self.sol_url_name: self.sol_url_list,
            self.sol_timeout_sec_name: self.sol_timeout_sec,
            self.sol_retry_cnt_name: self.sol_retry_cnt,
            self.sol_retry_max_sleep_sec_name: self.sol_retry_max_sleep_sec,
            self.commit_timeout_sec_name: self.commit_timeout_sec,
            self.commit_level_name: self.commit_type,
            self.secret_key_name: self.secret_key,
            self.keypair_file_name: self.keypair_file,
            self.airdrop_lamports_name: self.airdrop_lamports,
            self.token_decimals_name: self.token_decimals,
            self.token_supply_name: self.token_supply,
            self.token_owner_name: self.token_owner,
        }

        return str_fmt_object(self._filter_sensitive_info(cfg_dict), name="Config")

    def _filter_sensitive_info(self, cfg_dict: dict) -> dict:
        if not self.hide_sensitive_info:
            return cfg_dict

        sensitive_info_list = self.sensitive_info_list
        hide_key_list: list[str] = list()

        def _is_sensitive_info(_value) -> bool:
            return isinstance(_value, str) and (_value in sensitive_info_list)

        for key, value in cfg_dict.items():
            if isinstance(value, (list, set, tuple)):
                if any(_is_sensitive_info(item) for item in value):
                    hide_key_list.append(key)
            elif _is_sensitive_info(value):
                hide_key_list.append(key)

        for key in hide_key_list:
            cfg_dict[key] = "?*****?"

        return cfg_dict
