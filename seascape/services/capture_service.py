"""QR capture session control.

A capture device (camera or scanner) is exclusively owned: one session at a
time. Decoded text goes through the same scan path as manual entry.
"""

import asyncio
import logging
from abc import ABC, abstractmethod
from collections.abc import Awaitable, Callable
from typing import Any, TextIO

from seascape.core.exceptions import CaptureSessionError

logger = logging.getLogger(__name__)


class CaptureDevice(ABC):
    """Source of decoded QR frames."""

    @abstractmethod
    async def open(self) -> None:
        pass

    @abstractmethod
    async def read_frame(self) -> str | None:
        """Return decoded text, or None when the frame held no code.

        Raises:
            EOFError: Device has no more frames
        """
        pass

    @abstractmethod
    async def close(self) -> None:
        pass


class StreamCaptureDevice(CaptureDevice):
    """Line-oriented scanner, e.g. a keyboard-wedge reader typing into stdin."""

    def __init__(self, stream: TextIO):
        self.stream = stream

    async def open(self) -> None:
        if self.stream.closed:
            raise OSError("Capture stream is closed")

    async def read_frame(self) -> str | None:
        line = await asyncio.to_thread(self.stream.readline)
        if line == "":
            raise EOFError("Capture stream ended")
        return line.strip() or None

    async def close(self) -> None:
        # The stream belongs to the caller
        pass


class QRCaptureController:
    """Own a capture device for one session at a time.

    Usage:
        async with QRCaptureController(device, on_decoded) as capture:
            result = await capture.capture()
    """

    def __init__(self, device: CaptureDevice, on_decoded: Callable[[str], Awaitable[Any]]):
        self.device = device
        self.on_decoded = on_decoded
        self._active = False
        self._opening = False
        self._releasing = False

    @property
    def is_active(self) -> bool:
        """True while the device is held, including during release."""
        return self._active

    async def start(self) -> None:
        """Acquire the device.

        Raises:
            CaptureSessionError: A session is active, opening or still releasing,
                or the device failed to open
        """
        if self._active or self._opening:
            raise CaptureSessionError()
        self._opening = True
        try:
            await self.device.open()
        except OSError as e:
            raise CaptureSessionError(f"Could not open capture device: {e}")
        finally:
            self._opening = False
        self._active = True
        logger.info("QR capture session started")

    async def stop(self) -> None:
        """Release the device. Safe to call when no session is active."""
        if not self._active or self._releasing:
            return
        # The device stays held until close() finishes
        self._releasing = True
        try:
            await self.device.close()
        except Exception as e:
            logger.warning(f"Failed to release capture device: {e}")
        finally:
            self._active = False
            self._releasing = False
        logger.info("QR capture session stopped")

    async def capture(self) -> Any:
        """Read frames until one decodes, release the device, then hand off the text.

        Returns:
            Whatever ``on_decoded`` returns, or None if the session was stopped first
        """
        if not self._active:
            raise CaptureSessionError("No active capture session")

        while self._active and not self._releasing:
            text = await self.device.read_frame()
            if text:
                await self.stop()
                return await self.on_decoded(text)
        return None

    async def __aenter__(self) -> "QRCaptureController":
        await self.start()
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        await self.stop()
