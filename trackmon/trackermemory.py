"""Access to the tracker's memory-mapped PCI mailbox interface."""

from __future__ import annotations

import logging
import mmap
import os
import struct
import subprocess
import time
from typing import Callable, Optional, Sequence

from trackmon.trackdata import STATUS_WORD_COUNT, TrackData

log = logging.getLogger(__name__)

STATUS_MESSAGE_OFFSET = 0x0400
COMMAND_MAILBOX_OFFSET = 0x03FE
STATUS_MAILBOX_OFFSET = 0x07FE
QUERY_RESPONSE_MAILBOX_OFFSET = 0x07FC
COMMAND_MESSAGE_OFFSET = 0x0000

SYNC_WORD = 0xA5A5
PING_MESSAGE_TYPE = 0x0000
STATUS_MESSAGE_TYPE_MASK = 0xFF00

DEFAULT_BASE_ADDRESS = 0xDBA00000
DEFAULT_MEM_SIZE = 0x0800
DEFAULT_PCI_BUS = 0x98
DEFAULT_PCI_SLOT = 0x00
DEFAULT_PCI_FUNC = 0x00

PING_POLL_INTERVAL = 0.1
PING_POLL_ATTEMPTS = 100
MAILBOX_INIT_DELAY = 100e-6


class TrackerError(Exception):
    """Raised when the tracker cannot be reached or answers wrongly."""


def calculate_checksum(words: Sequence[int]) -> int:
    """Two's complement of the byte-wise sum of the given 16-bit words."""
    total = 0
    for word in words:
        total += (word >> 8) & 0xFF
        total += word & 0xFF
    return (-total) & 0xFFFF


def ping_message() -> list[int]:
    """The three words of a ping command: sync, type 0, checksum."""
    body = [SYNC_WORD, PING_MESSAGE_TYPE]
    return [*body, calculate_checksum(body)]


def pci_address(bus: int, slot: int, func: int) -> str:
    """Format a PCI location the way setpci expects it."""
    return f"{bus:02x}:{slot:02x}.{func}"


def _run_command(args: list[str]) -> int:
    try:
        return subprocess.run(args, check=False).returncode
    except OSError:
        return 127


class TrackerMemory:
    """Mailbox protocol over a memory mapping of the tracker's PCI window."""

    def __init__(
        self,
        device: str = "/dev/mem",
        run_command: Optional[Callable[[list[str]], int]] = None,
        sleep: Callable[[float], None] = time.sleep,
    ) -> None:
        self._device = device
        self._run_command = run_command or _run_command
        self._sleep = sleep
        self._fd: Optional[int] = None
        self._mem: Optional[mmap.mmap] = None
        self._mem_size = 0
        self._base_address = 0
        self._initialized = False

    @property
    def initialized(self) -> bool:
        return self._initialized

    def _configure_pci_device(self, bus: int, slot: int, func: int) -> None:
        address = pci_address(bus, slot, func)
        args = ["setpci", "-s", address, "04.w=0142"]
        command = " ".join(args)
        log.debug("Executing command: %s", command)
        if self._run_command(args) != 0:
            raise TrackerError(f"Failed to execute setpci command: {command}")
        log.debug("Successfully executed: %s", command)

    def initialize(
        self,
        base_address: int = DEFAULT_BASE_ADDRESS,
        mem_size: int = DEFAULT_MEM_SIZE,
        pci_bus: int = DEFAULT_PCI_BUS,
        pci_slot: int = DEFAULT_PCI_SLOT,
        pci_func: int = DEFAULT_PCI_FUNC,
    ) -> None:
        """Enable the PCI device, map its memory and clear the mailboxes."""
        self.cleanup()
        self._configure_pci_device(pci_bus, pci_slot, pci_func)

        flags = os.O_RDWR | getattr(os, "O_SYNC", 0)
        try:
            fd = os.open(self._device, flags)
        except OSError as exc:
            raise TrackerError(f"Failed to open {self._device}") from exc

        try:
            mem = mmap.mmap(
                fd,
                mem_size,
                flags=mmap.MAP_SHARED,
                prot=mmap.PROT_READ | mmap.PROT_WRITE,
                offset=base_address,
            )
        except (OSError, ValueError) as exc:
            os.close(fd)
            raise TrackerError("Failed to map physical memory") from exc

        self._fd = fd
        self._mem = mem
        self._mem_size = mem_size
        self._base_address = base_address

        log.debug("Initializing tracker mailboxes...")
        self._sleep(MAILBOX_INIT_DELAY)
        self._store(COMMAND_MAILBOX_OFFSET, 0)
        self._sleep(MAILBOX_INIT_DELAY)
        self._store(STATUS_MAILBOX_OFFSET, 0)
        self._sleep(MAILBOX_INIT_DELAY)
        self._store(QUERY_RESPONSE_MAILBOX_OFFSET, 0)
        self._sleep(MAILBOX_INIT_DELAY)
        log.debug("Tracker initialization complete")

        self._initialized = True

    def cleanup(self) -> None:
        """Unmap the memory and close the device."""
        if self._mem is not None:
            self._mem.close()
            self._mem = None
        if self._fd is not None:
            os.close(self._fd)
            self._fd = None
        self._initialized = False

    def _in_range(self, offset: int) -> bool:
        return 0 <= offset and offset + 2 <= self._mem_size

    def _store(self, offset: int, value: int) -> None:
        if self._mem is not None and self._in_range(offset):
            struct.pack_into("<H", self._mem, offset, value & 0xFFFF)

    def read_word(self, offset: int) -> int:
        """Read a 16-bit word; 0 when uninitialized or out of range."""
        if not self._initialized or self._mem is None or not self._in_range(offset):
            return 0
        return struct.unpack_from("<H", self._mem, offset)[0]

    def write_word(self, offset: int, value: int) -> None:
        """Write a 16-bit word; ignored when uninitialized or out of range."""
        if not self._initialized:
            return
        self._store(offset, value)

    def is_ready_for_command(self) -> bool:
        return self.read_word(COMMAND_MAILBOX_OFFSET) == 0

    def _require_initialized(self) -> None:
        if not self._initialized:
            raise TrackerError("Tracker memory not initialized")

    def send_ping(self) -> None:
        """Send a ping command and wait for the tracker to take it."""
        self._require_initialized()
        if not self.is_ready_for_command():
            raise TrackerError("Tracker not ready for command")

        message = ping_message()
        log.debug("Sending ping message, checksum %x", message[2])
        for index, word in enumerate(message):
            self.write_word(COMMAND_MESSAGE_OFFSET + index * 2, word)
        self.write_word(COMMAND_MAILBOX_OFFSET, 1)

        remaining = PING_POLL_ATTEMPTS
        while self.read_word(COMMAND_MAILBOX_OFFSET) != 0 and remaining > 0:
            self._sleep(PING_POLL_INTERVAL)
            remaining -= 1

        if remaining <= 0:
            raise TrackerError("Timeout waiting for tracker to process command")
        log.debug("Ping message processed by tracker")

    def read_status_data(self) -> Optional[TrackData]:
        """Return the pending status message, or None when there is none."""
        self._require_initialized()
        if self.read_word(STATUS_MAILBOX_OFFSET) == 0:
            return None

        words = [
            self.read_word(STATUS_MESSAGE_OFFSET + index * 2)
            for index in range(STATUS_WORD_COUNT)
        ]
        self.write_word(STATUS_MAILBOX_OFFSET, 0)

        if words[0] != SYNC_WORD:
            raise TrackerError("Invalid sync word in status message")
        if words[1] & STATUS_MESSAGE_TYPE_MASK != STATUS_MESSAGE_TYPE_MASK:
            raise TrackerError("Invalid message type in status message")
        return TrackData.from_words(words)

    def __enter__(self) -> "TrackerMemory":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.cleanup()