"""Error taxonomy and device-library status codes."""

from __future__ import annotations

import enum


class Status(enum.IntEnum):
    """NVML return codes the collector knows by name."""

    SUCCESS = 0
    UNINITIALIZED = 1
    INVALID_ARGUMENT = 2
    NOT_SUPPORTED = 3
    NO_PERMISSION = 4
    ALREADY_INITIALIZED = 5
    NOT_FOUND = 6
    INSUFFICIENT_SIZE = 7
    INSUFFICIENT_POWER = 8
    DRIVER_NOT_LOADED = 9
    TIMEOUT = 10
    IRQ_ISSUE = 11
    LIBRARY_NOT_FOUND = 12
    FUNCTION_NOT_FOUND = 13
    CORRUPTED_INFOROM = 14
    GPU_IS_LOST = 15
    RESET_REQUIRED = 16
    OPERATING_SYSTEM = 17
    LIB_RM_VERSION_MISMATCH = 18
    IN_USE = 19
    MEMORY = 20
    NO_DATA = 21
    UNKNOWN = 999


_STATUS_STRINGS: dict[int, str] = {
    Status.SUCCESS: "Success",
    Status.UNINITIALIZED: "Uninitialized",
    Status.INVALID_ARGUMENT: "Invalid Argument",
    Status.NOT_SUPPORTED: "Not Supported",
    Status.NO_PERMISSION: "Insufficient Permissions",
    Status.ALREADY_INITIALIZED: "Already Initialized",
    Status.NOT_FOUND: "Not Found",
    Status.INSUFFICIENT_SIZE: "Insufficient Size",
    Status.INSUFFICIENT_POWER: "Insufficient External Power",
    Status.DRIVER_NOT_LOADED: "Driver Not Loaded",
    Status.TIMEOUT: "Timeout",
    Status.IRQ_ISSUE: "Interrupt Request Issue",
    Status.LIBRARY_NOT_FOUND: "NVML Shared Library Not Found",
    Status.FUNCTION_NOT_FOUND: "Function Not Found",
    Status.CORRUPTED_INFOROM: "Corrupted infoROM",
    Status.GPU_IS_LOST: "GPU is lost",
    Status.RESET_REQUIRED: "GPU requires restart",
    Status.OPERATING_SYSTEM: "The operating system has blocked the request.",
    Status.LIB_RM_VERSION_MISMATCH: "RM has detected an NVML/RM version mismatch.",
    Status.IN_USE: "Resource in use",
    Status.MEMORY: "Insufficient memory",
    Status.NO_DATA: "No data",
    Status.UNKNOWN: "Unknown Error",
}

# Older drivers lack the symbol entirely; treated the same as a device
# that reports the capability missing.
UNSUPPORTED_STATUSES: frozenset[int] = frozenset({
    Status.NOT_SUPPORTED,
    Status.FUNCTION_NOT_FOUND,
})


def status_string(status: object) -> str:
    """Human-readable text for a return code. Never raises."""
    try:
        return _STATUS_STRINGS.get(status, _STATUS_STRINGS[Status.UNKNOWN])  # type: ignore[call-overload]
    except TypeError:
        return _STATUS_STRINGS[Status.UNKNOWN]


class LibraryError(Exception):
    """A device-library call returned a non-success status."""

    def __init__(self, status: int, message: str | None = None) -> None:
        self.status = int(status)
        self.message = message if message is not None else status_string(status)
        super().__init__(self.message)

    @property
    def unsupported(self) -> bool:
        return self.status in UNSUPPORTED_STATUSES


class NVGPUError(Exception):
    """Base class for collector errors. Carries the originating status."""

    def __init__(self, message: str, *, status: int = Status.UNKNOWN) -> None:
        super().__init__(message)
        self.status = int(status)


class InitError(NVGPUError):
    """The device library could not be initialized."""


class EnumerationError(NVGPUError):
    """Device count or handle lookup failed."""


class QueryError(NVGPUError):
    """A metric query failed for a reason other than missing capability."""


class UnsupportedCapability(NVGPUError):
    """The device or driver does not implement this query."""


class ReleaseError(NVGPUError):
    """Session teardown failed. Logged, never raised out of a poll."""
