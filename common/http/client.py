from __future__ import annotations

import asyncio
import itertools
import logging
import random
from typing import Sequence

import aiohttp
from typing_extensions import Self

from .utils import HttpURL, HttpStrOrURL
from ..config.config import Config
from ..config.utils import LogMsgFilter
from ..utils.cached import cached_property

_LOG = logging.getLogger(__name__)


class HttpClient:
    """Posts JSON requests to a list of equal endpoints.

    A failed request is repeated on the next endpoint after a pause,
    which grows exponentially from _min_sleep_sec till the max sleep time.
    """

    _min_sleep_sec = 0.25

    def __init__(self, cfg: Config) -> None:
        self._cfg = cfg
        self._msg_filter = LogMsgFilter(cfg)
        self._base_url_list: list[HttpURL] = list()
        self._timeout = aiohttp.ClientTimeout(total=60)
        self._header_dict = {"Content-Type": "application/json; charset=utf-8"}
        self._max_retry_cnt = -1
        self._max_sleep_sec = 1.0
        self._is_started = False
        self._is_stopped = False

    async def __aenter__(self) -> Self:
        await self.start()
        return self

    async def __aexit__(self, *_exc_info) -> None:
        await self.stop()

    async def start(self) -> None:
        pass

    async def stop(self) -> None:
        self._is_stopped = True
        if self._is_started:
            self._is_started = False
            await self.session.close()

    @cached_property
    def session(self) -> aiohttp.ClientSession:
        self._is_started = True
        return aiohttp.ClientSession(timeout=self._timeout)

    def set_timeout_sec(self, timeout_sec: float) -> Self:
        assert not self._is_started, "timeout can't be changed after the first request"
        self._timeout = aiohttp.ClientTimeout(total=timeout_sec)
        return self

    def set_max_retry_cnt(self, max_retry_cnt: int) -> Self:
        self._max_retry_cnt = max_retry_cnt
        return self

    def set_max_sleep_sec(self, max_sleep_sec: float) -> Self:
        self._max_sleep_sec = max_sleep_sec
        return self

    @property
    def max_retry_cnt(self) -> int:
        return self._max_retry_cnt

    def connect(
        self,
        *,
        base_url: HttpStrOrURL | None = None,
        base_url_list: Sequence[HttpStrOrURL] | None = None,
    ) -> Self:
        if base_url is not None:
            assert base_url_list is None, "'base_url' cannot be mixed with 'base_url_list'"
            base_url_list = [base_url]
        assert base_url_list, "method must have parameters"

        for base_url in base_url_list:
            base_url = HttpURL(base_url)
            assert base_url.is_absolute(), "'base_url' must be absolute"
            _LOG.debug("connect to the URL: %s", str(base_url), extra=self._msg_filter)
            self._base_url_list.append(base_url)
        return self

    def _calc_sleep_sec(self, retry: int) -> float:
        """Exponential backoff with a jitter, limited by the max sleep time."""
        sleep_sec = min(self._min_sleep_sec * (2**retry), self._max_sleep_sec)
        return sleep_sec * random.uniform(0.5, 1.0)

    async def _send_post_request(self, data: str) -> str:
        assert self._base_url_list, "HttpClient must have at least one remote URL"

        url_list = self._base_url_list.copy()
        random.shuffle(url_list)
        for retry, url in enumerate(itertools.cycle(url_list)):
            if self._is_stopped:
                raise asyncio.CancelledError("HttpClient is stopped")

            try:
                resp = await self.session.post(url, data=data, headers=self._header_dict)
                resp.raise_for_status()
                return await resp.text()
            except (asyncio.CancelledError, KeyboardInterrupt):
                raise
            except BaseException as exc:
                # can reraise the exception
                self._exception_handler(url, retry, exc)

            await asyncio.sleep(self._calc_sleep_sec(retry))
            _LOG.debug("attempt %d to repeat...", retry + 2)

    def _exception_handler(self, url: HttpURL, retry: int, exc: BaseException) -> None:
        """Logs the failed attempt, reraises the exception after the last one."""
        msg = dict(
            message="error on retry {Retry} on request to {URL}: {Error}",
            Retry=retry,
            URL=str(url),
            Error=str(exc),
        )
        _LOG.warning(msg, extra=self._msg_filter)

        if 0 < self._max_retry_cnt <= retry + 1:
            _LOG.error("reach maximum %d retries, force to stop...", self._max_retry_cnt)
            raise
