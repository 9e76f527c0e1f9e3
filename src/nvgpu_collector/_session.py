"""Scoped device-library session: one per poll, one at a time per process."""

from __future__ import annotations

import logging
import threading
from collections.abc import Iterator
from contextlib import contextmanager

from nvgpu_collector._backend import DeviceLibrary
from nvgpu_collector._errors import (
    EnumerationError,
    InitError,
    LibraryError,
    ReleaseError,
)
from nvgpu_collector._types import Device

logger = logging.getLogger("nvgpu_collector.session")

# The device library is stateful and non-reentrant; overlapping polls
# must not interleave calls into it.
_session_lock = threading.Lock()


class DeviceSession:
    """Owns the device-library connection for the duration of one poll."""

    def __init__(self, library: DeviceLibrary) -> None:
        self._library = library
        self._devices: list[Device] | None = None
        self._acquired = False

    @property
    def library(self) -> DeviceLibrary:
        return self._library

    def acquire(self) -> None:
        try:
            self._library.init()
        except LibraryError as exc:
            raise InitError(
                f"unable to initialize NVML: {exc.message}", status=exc.status
            ) from exc
        self._acquired = True

    def enumerate(self) -> list[Device]:
        """Return devices in library order. Computed once per session."""
        if self._devices is not None:
            return self._devices

        try:
            count = self._library.device_count()
        except LibraryError as exc:
            raise EnumerationError(
                f"unable to get device count: {exc.message}", status=exc.status
            ) from exc

        devices: list[Device] = []
        for i in range(count):
            try:
                handle = self._library.device_handle(i)
            except LibraryError as exc:
                raise EnumerationError(
                    f"unable to get device at index {i}: {exc.message}", status=exc.status
                ) from exc
            devices.append(Device(index=i, handle=handle))

        self._devices = devices
        return devices

    def release(self) -> None:
        """Shut the library down. Failures are logged, never raised."""
        if not self._acquired:
            return
        self._acquired = False
        self._devices = None
        try:
            self._library.shutdown()
        except LibraryError as exc:
            err = ReleaseError(f"unable to shutdown NVML: {exc.message}", status=exc.status)
            logger.warning("%s", err)


@contextmanager
def open_session(library: DeviceLibrary) -> Iterator[DeviceSession]:
    """Acquire a session, yield it, and release it on every exit path."""
    with _session_lock:
        session = DeviceSession(library)
        session.acquire()
        try:
            yield session
        finally:
            session.release()
