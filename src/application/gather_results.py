# src/application/gather_results.py
import asyncio
import logging
from pathlib import Path
from contextlib import ExitStack
from dataclasses import dataclass
from typing import BinaryIO, Protocol

import httpx
from returns.future import FutureResult, future_safe
from returns.pipeline import is_successful
from returns.result import Result
from returns.unsafe import unsafe_perform_io

from domain.models import (
    DEFAULT_POLL_INTERVAL_SECONDS,
    GatherOutcome,
    GatherState,
    TransmissionError,
)
from infrastructure.content_types import resolve_content_type
from infrastructure.fs import IFileSystem
from infrastructure.results_client import Transmitter


class ShutdownSource(Protocol):
    def listen(self) -> asyncio.Event:
        ...

    def close(self) -> None:
        ...


@dataclass(frozen=True)
class ResultGatherer:
    """
    Consumer side of the contract with a co-scheduled plugin container:

    1. The plugin places its output into the agreed upon results directory.
    2. The worker waits for the done file (the waitfile).
    3. The waitfile holds a single string: the path of the result to send to the master.
    """
    waitfile: Path
    url: str
    client: httpx.AsyncClient
    fs: IFileSystem
    transmit: Transmitter
    shutdown: ShutdownSource
    logger: logging.Logger
    grace_period: float
    poll_interval: float = DEFAULT_POLL_INTERVAL_SECONDS

    def gather(self) -> FutureResult[GatherOutcome, Exception]:
        @future_safe
        async def _() -> GatherOutcome:
            self.logger.info("Waiting for waitfile %s", self.waitfile)
            stop_event = self.shutdown.listen()
            try:
                return await self._watch(stop_event)
            finally:
                self.shutdown.close()

        return _()

    async def _watch(self, stop_event: asyncio.Event) -> GatherOutcome:
        state = GatherState.WAITING
        ticker: asyncio.Task[None] | None = asyncio.create_task(asyncio.sleep(self.poll_interval))
        signals: asyncio.Task[bool] | None = asyncio.create_task(stop_event.wait())
        grace: asyncio.Task[None] | None = None

        try:
            while True:
                pending = {t for t in (ticker, signals, grace) if t is not None}
                done, _ = await asyncio.wait(pending, return_when=asyncio.FIRST_COMPLETED)

                # A result that is already there wins over an expiring grace period.
                if ticker in done:
                    result_file = self._check_waitfile()
                    if result_file is not None:
                        state = GatherState.TRANSMITTING
                        self.logger.info(
                            "Detected done file, transmitting result file %s", result_file)
                        await self._handle_waitfile(result_file)
                        state = GatherState.DONE
                        self.logger.info("Result file %s transmitted", result_file)
                        return GatherOutcome.DONE
                    ticker = asyncio.create_task(asyncio.sleep(self.poll_interval))

                if signals in done:
                    signals = None
                    if state is GatherState.WAITING:
                        state = GatherState.GRACE_PERIOD
                        self.logger.info(
                            "Shutdown requested, still accepting results for %ss", self.grace_period)
                        grace = asyncio.create_task(asyncio.sleep(self.grace_period))

                if grace in done:
                    state = GatherState.ABORTED
                    self.logger.info(
                        "Did not receive plugin results in time. Shutting down worker.")
                    return GatherOutcome.ABORTED
        finally:
            for task in (ticker, signals, grace):
                if task is not None and not task.done():
                    task.cancel()
            self.logger.debug("Gather loop finished in state %s", state.name)

    def _check_waitfile(self) -> str | None:
        res: Result[str, Exception] = self.fs.read_waitfile(self.waitfile)
        if is_successful(res):
            # An empty waitfile is still being written.
            return res.unwrap() or None

        err = res.failure()
        if not isinstance(err, FileNotFoundError):
            self.logger.warning("Could not read waitfile %s: %s", self.waitfile, err)
        return None

    async def _handle_waitfile(self, result_file: str) -> None:
        content_type = resolve_content_type(result_file)

        with ExitStack() as stack:
            def body() -> tuple[BinaryIO, str | None]:
                try:
                    outfile = stack.enter_context(self.fs.open_result(Path(result_file)))
                except OSError as e:
                    raise TransmissionError("couldn't open result file %s" % result_file) from e
                return outfile, content_type

            io_res = await self.transmit(self.url, self.client, body).awaitable()

        if not is_successful(io_res):
            raise unsafe_perform_io(io_res.failure())
