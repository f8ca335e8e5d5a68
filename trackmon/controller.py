"""Tracker monitoring logic behind the user interface."""

from __future__ import annotations

from typing import Optional

from trackmon.logger import TrackLogger
from trackmon.trackdata import TrackData
from trackmon.trackermemory import (
    DEFAULT_BASE_ADDRESS,
    DEFAULT_MEM_SIZE,
    DEFAULT_PCI_BUS,
    DEFAULT_PCI_FUNC,
    DEFAULT_PCI_SLOT,
    TrackerError,
    TrackerMemory,
)


class TrackerMonitor:
    """Drives the tracker and the CSV log.

    Every operation updates ``status`` with a one-line description of its
    outcome. Failures are re-raised after the status has been set.
    """

    def __init__(
        self,
        memory: Optional[TrackerMemory] = None,
        logger: Optional[TrackLogger] = None,
    ) -> None:
        self.memory = memory if memory is not None else TrackerMemory()
        self.logger = logger if logger is not None else TrackLogger()
        self.status = ""

    def initialize(self) -> None:
        """Configure the PCI device and map the tracker's memory."""
        try:
            self.memory.initialize(
                base_address=DEFAULT_BASE_ADDRESS,
                mem_size=DEFAULT_MEM_SIZE,
                pci_bus=DEFAULT_PCI_BUS,
                pci_slot=DEFAULT_PCI_SLOT,
                pci_func=DEFAULT_PCI_FUNC,
            )
        except TrackerError:
            self.status = "Initialization failed"
            raise
        self.status = "Initialized"

    def ping(self) -> None:
        """Send a ping command to the tracker."""
        try:
            self.memory.send_ping()
        except TrackerError:
            self.status = "Ping failed"
            raise
        self.status = "Ping sent"

    def start_logging(self, filename: str) -> None:
        """Begin writing status reports to ``filename``."""
        try:
            self.logger.start(filename)
        except OSError as exc:
            self.status = f"Logger error: {exc}"
            raise
        self.status = f"Logging started: {filename}"

    def stop_logging(self) -> None:
        self.logger.stop()
        self.status = "Logging stopped"

    def poll(self) -> Optional[TrackData]:
        """Fetch one pending status report, logging it when a log is open."""
        try:
            data = self.memory.read_status_data()
        except TrackerError as exc:
            self.status = f"Tracker error: {exc}"
            raise
        if data is not None and self.logger.is_logging:
            self.logger.log(data)
        return data

    def close(self) -> None:
        """Stop logging and release the tracker's memory."""
        self.logger.stop()
        self.memory.cleanup()