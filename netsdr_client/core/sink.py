# SPDX-License-Identifier: LGPL-3.0-or-later
# Copyright (C) 2025-2026 Kris Kirby, KE4AHR

"""
netsdr_client.core.sink.py

Append-only binary file sink for decoded IQ samples.

The data receive path appends while session teardown may close the file at
any moment, so both go through one lock held for the whole write or close.
Appends after close are dropped.
"""

from __future__ import annotations

import os
import threading
import logging
from typing import BinaryIO, Iterable, Optional

from .samples import pack_samples
from ..exceptions import SinkIOError

logger = logging.getLogger(__name__)


class SampleSink:
    """
    Fixed-width little-endian sample file opened in append mode.

    Args:
        path: Destination file
        bit_width: Bits per stored sample
    """
    def __init__(self, path: str = "samples.bin", bit_width: int = 16):
        self.path = os.fspath(path)
        self.bit_width = bit_width
        self._file: Optional[BinaryIO] = None
        self._lock = threading.Lock()
        self._samples_written = 0

    @property
    def is_open(self) -> bool:
        with self._lock:
            return self._file is not None

    @property
    def samples_written(self) -> int:
        with self._lock:
            return self._samples_written

    def open(self) -> "SampleSink":
        """
        Open the destination for appending.

        Raises:
            SinkIOError: If the file cannot be opened
        """
        with self._lock:
            if self._file is not None:
                return self
            try:
                self._file = open(self.path, 'ab')
            except OSError as e:
                raise SinkIOError(f"Cannot open {self.path}: {e}") from e
        logger.info(f"Sample sink opened: {self.path}")
        return self

    def append(self, samples: Iterable[int]) -> int:
        """
        Write samples in order and flush.

        Returns:
            Number of samples written (0 when closed or on write failure)
        """
        data = pack_samples(samples, self.bit_width)
        count = len(data) * 8 // self.bit_width
        with self._lock:
            if self._file is None:
                logger.debug(f"Sink closed, dropping {count} samples")
                return 0
            try:
                self._file.write(data)
                self._file.flush()
            except OSError as e:
                logger.error(f"Write to {self.path} failed: {e}")
                self._release()
                return 0
            self._samples_written += count
        return count

    def close(self) -> None:
        """Flush and close the file; further appends become no-ops"""
        with self._lock:
            if self._file is None:
                return
            try:
                self._file.flush()
            except OSError as e:
                logger.error(f"Flush of {self.path} failed: {e}")
            self._release()
        logger.info(f"Sample sink closed: {self.path} ({self._samples_written} samples)")

    def _release(self) -> None:
        """Drop the handle (caller holds the lock)"""
        try:
            self._file.close()
        except OSError as e:
            logger.error(f"Close of {self.path} failed: {e}")
        finally:
            self._file = None

    def __enter__(self):
        return self.open()

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.close()

    def __repr__(self) -> str:
        return (f"SampleSink(path={self.path!r}, bits={self.bit_width}, "
                f"open={self._file is not None})")
