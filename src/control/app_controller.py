# src/control/app_controller.py
import asyncio
import logging
from dataclasses import dataclass
from returns.io import IOResult
from returns.pipeline import is_successful
from returns.unsafe import unsafe_perform_io

from domain.models import GatherOutcome
from .dependency_container import Container


@dataclass(frozen=True)
class AppController:
    container: Container
    logger: logging.Logger

    def run(self) -> int:
        """Run the gather loop to completion and return the process exit code."""
        io_res: IOResult[GatherOutcome, Exception] = asyncio.run(self._gather())

        if not is_successful(io_res):
            err = unsafe_perform_io(io_res.failure())
            self.logger.error("Failed to gather results: %s", err, exc_info=err)
            return 1

        outcome = unsafe_perform_io(io_res.unwrap())
        self.logger.info("Worker finished: %s", outcome.value)
        return 0

    async def _gather(self) -> IOResult[GatherOutcome, Exception]:
        # Singleton: the same client the gatherer gets, closed on the loop that used it.
        client = self.container.http_client()
        try:
            gatherer = self.container.gatherer()
            return await gatherer.gather().awaitable()
        finally:
            await client.aclose()
