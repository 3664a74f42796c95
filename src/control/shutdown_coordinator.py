# src/control/shutdown_coordinator.py
import asyncio
import signal
import logging
from dataclasses import dataclass, field


@dataclass(frozen=True)
class ShutdownCoordinator:
    """Turns the first termination signal into a one-shot asyncio event."""

    logger: logging.Logger
    signals: tuple[signal.Signals, ...] = (signal.SIGTERM, signal.SIGINT)
    stop_event: asyncio.Event = field(default_factory=asyncio.Event)

    def listen(self) -> asyncio.Event:
        """Install the handlers on the running loop and return the event they set."""
        loop = asyncio.get_running_loop()
        for sig in self.signals:
            loop.add_signal_handler(sig, self._on_signal, sig)
        return self.stop_event

    def close(self) -> None:
        loop = asyncio.get_running_loop()
        for sig in self.signals:
            loop.remove_signal_handler(sig)

    def _on_signal(self, sig: signal.Signals) -> None:
        if self.stop_event.is_set():
            self.logger.info("Got signal %s again, shutdown already in progress", sig.name)
            return
        self.logger.info("Got signal %s, waiting then sending the real shutdown signal", sig.name)
        self.stop_event.set()
