from __future__ import annotations


class SolError(Exception):
    is_retryable: bool = False

    def __init__(self, message: str) -> None:
        BaseException.__init__(self, message)
        self._msg = message
        self._stage: str | None = None

    @property
    def message(self) -> str:
        return self._msg

    @property
    def stage(self) -> str | None:
        return self._stage

    def set_stage(self, stage: str) -> None:
        if self._stage is None:
            self._stage = stage

    def to_string(self) -> str:
        if self._stage:
            return f"[{self._stage}] {self._msg}"
        return self._msg

    def __str__(self) -> str:
        return self.to_string()

    def __repr__(self) -> str:
        return self.to_string()


class SolInvalidIdentityError(SolError, ValueError):
    def __init__(self, raw, reason: str) -> None:
        super().__init__(f"Invalid identity {raw!r}: {reason}")


class SolTxSizeError(SolError):
    def __init__(self, current_len: int, max_len: int) -> None:
        msg = f"Transaction size is exceeded {current_len} > {max_len}"
        super().__init__(msg)
        self._current_len = current_len
        self._max_len = max_len


class SolMissingFeePayerError(SolError):
    def __init__(self, payer) -> None:
        super().__init__(f"Fee payer {payer} isn't referenced by any instruction")


class SolMissingSignerError(SolError):
    def __init__(self, missing_list) -> None:
        key_list = ", ".join(str(key) for key in missing_list)
        super().__init__(f"No signer for the required accounts: {key_list}")
        self.missing_list = tuple(missing_list)
