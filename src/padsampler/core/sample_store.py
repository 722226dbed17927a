"""Sample store: fixed-capacity pad slots holding decoded samples."""

import asyncio
import logging
from collections.abc import Callable, Iterable
from pathlib import Path
from threading import Lock
from typing import Optional

from padsampler.audio import AudioData, AudioDecoder, is_supported_audio_file
from padsampler.exceptions import (
    InvalidSlotError,
    PadSamplerError,
    SampleDecodeError,
    SampleFetchError,
    StoreFullError,
)
from padsampler.models import LoadOutcome, Sample

logger = logging.getLogger(__name__)

Fetcher = Callable[[str], bytes]
LoadItem = tuple[Optional[int], str] | tuple[Optional[int], str, Optional[str]]


def read_audio_file(path: Path | str) -> bytes:
    """
    Read a user-supplied audio file.

    Raises:
        SampleDecodeError: If the file type is unsupported or it cannot be read
    """
    path = Path(path)
    if not is_supported_audio_file(path):
        raise SampleDecodeError(str(path), f"unsupported file type '{path.suffix}'")
    try:
        return path.read_bytes()
    except OSError as e:
        raise SampleDecodeError(str(path), str(e)) from e


class SampleStore:
    """
    Indexed, fixed-capacity collection of samples plus a selected index.

    The store is the only writer of slot contents. A slot is replaced
    atomically when a decode succeeds; each slot carries a load generation
    so a slow load finishing after a newer one to the same slot is dropped.

    Loads are coroutines: fetching and decoding run in worker threads so the
    event loop and the audio thread are never blocked.
    """

    CAPACITY = 16

    def __init__(self, decoder: Optional[AudioDecoder] = None, capacity: int = CAPACITY):
        """
        Initialize sample store.

        Args:
            decoder: Default decoder for loads (a plain AudioDecoder if None)
            capacity: Number of slots
        """
        self._decoder = decoder or AudioDecoder()
        self._capacity = capacity
        self._slots: list[Optional[Sample]] = [None] * capacity
        self._generations: list[int] = [0] * capacity
        self._selected: Optional[int] = None
        self._lock = Lock()

    # =================================================================
    # Accessors
    # =================================================================

    @property
    def capacity(self) -> int:
        return self._capacity

    def _check_slot(self, slot: int) -> None:
        if not 0 <= slot < self._capacity:
            raise InvalidSlotError(slot, self._capacity)

    def get(self, slot: int) -> Optional[Sample]:
        """Get the sample in a slot (None if the slot is empty)."""
        self._check_slot(slot)
        with self._lock:
            return self._slots[slot]

    def loaded_slots(self) -> list[int]:
        """Indices of slots holding decoded audio."""
        with self._lock:
            return [i for i, s in enumerate(self._slots) if s is not None and s.is_loaded]

    def first_free_slot(self) -> Optional[int]:
        with self._lock:
            return self._first_free(set())

    def _first_free(self, reserved: set[int]) -> Optional[int]:
        for i, sample in enumerate(self._slots):
            if sample is None and i not in reserved:
                return i
        return None

    def __len__(self) -> int:
        with self._lock:
            return sum(1 for s in self._slots if s is not None)

    # =================================================================
    # Selection
    # =================================================================

    def select(self, slot: Optional[int]) -> None:
        """Select a slot, or clear the selection with None."""
        if slot is not None:
            self._check_slot(slot)
        with self._lock:
            self._selected = slot

    @property
    def selected_index(self) -> Optional[int]:
        with self._lock:
            return self._selected

    @property
    def selected_sample(self) -> Optional[Sample]:
        with self._lock:
            if self._selected is None:
                return None
            return self._slots[self._selected]

    # =================================================================
    # Trim
    # =================================================================

    def set_trim(self, slot: int, left: float, right: float) -> None:
        """
        Set a slot's trim region, clamped into 0 <= left < right <= duration.

        Silently does nothing if the slot is empty or not loaded.
        """
        self._check_slot(slot)
        with self._lock:
            sample = self._slots[slot]
            if sample is None or not sample.is_loaded:
                return
            stored = sample.set_trim(left, right)

        if stored != (left, right):
            logger.debug(f"Trim for slot {slot} clamped from ({left}, {right}) to {stored}")

    def get_trim(self, slot: int) -> tuple[float, float]:
        """Get a slot's trim region ((0.0, 0.0) if not loaded)."""
        self._check_slot(slot)
        with self._lock:
            sample = self._slots[slot]
            if sample is None:
                return 0.0, 0.0
            return sample.trim

    # =================================================================
    # Clearing
    # =================================================================

    def clear(self, slot: int) -> None:
        """
        Drop the sample in a slot.

        In-flight loads for the slot are discarded when they finish.
        Voices already playing it are left alone.
        """
        self._check_slot(slot)
        with self._lock:
            self._slots[slot] = None
            self._generations[slot] += 1
        logger.debug(f"Cleared slot {slot}")

    def clear_all(self) -> None:
        with self._lock:
            for i in range(self._capacity):
                self._slots[i] = None
                self._generations[i] += 1
            self._selected = None
        logger.debug("Cleared all slots")

    # =================================================================
    # Loading
    # =================================================================

    async def load_from_bytes(
        self,
        slot: int,
        data: bytes,
        decoder: Optional[AudioDecoder] = None,
        source_ref: str = "<bytes>",
        name: Optional[str] = None,
    ) -> LoadOutcome:
        """
        Decode bytes into a slot.

        Never raises for decode failures: they are reported in the outcome.

        Raises:
            InvalidSlotError: If slot is out of range
        """
        self._check_slot(slot)
        return await self._load(slot, source_ref, name, lambda: data, decoder)

    async def load_from_url(
        self,
        slot: int,
        url: str,
        fetcher: Fetcher,
        decoder: Optional[AudioDecoder] = None,
        name: Optional[str] = None,
    ) -> LoadOutcome:
        """
        Fetch bytes with `fetcher` and decode them into a slot.

        Network failures are reported as `network_failure`, decode failures
        as `decode_failure`.

        Raises:
            InvalidSlotError: If slot is out of range
        """
        self._check_slot(slot)
        return await self._load(slot, url, name, lambda: fetcher(url), decoder)

    async def load_from_file(
        self,
        slot: int,
        path: Path | str,
        name: Optional[str] = None,
    ) -> LoadOutcome:
        """
        Load a user-supplied audio file into a slot.

        Unsupported file types are reported as `decode_failure`.

        Raises:
            InvalidSlotError: If slot is out of range
        """
        self._check_slot(slot)
        return await self._load(slot, str(path), name, lambda: read_audio_file(path), None)

    async def load_many(
        self,
        items: Iterable[LoadItem],
        fetcher: Fetcher,
        decoder: Optional[AudioDecoder] = None,
    ) -> list[LoadOutcome]:
        """
        Load several sources concurrently.

        Args:
            items: (slot, source_ref) or (slot, source_ref, name) tuples.
                   A None slot appends to the first free slot.
            fetcher: Callable turning a source_ref into bytes
            decoder: Decoder override for every item

        Returns:
            One outcome per item, in input order. One failure never aborts
            the others.
        """
        items = list(items)
        coros = []

        with self._lock:
            # Explicit slots are claimed before any append is resolved
            reserved: set[int] = {
                item[0] for item in items
                if item[0] is not None and 0 <= item[0] < self._capacity
            }

            for item in items:
                slot, source_ref = item[0], item[1]
                name = item[2] if len(item) > 2 else None

                if slot is None:
                    slot = self._first_free(reserved)
                    if slot is None:
                        coros.append(self._failed(None, source_ref, StoreFullError(self._capacity)))
                        continue
                    reserved.add(slot)
                elif not 0 <= slot < self._capacity:
                    coros.append(self._failed(slot, source_ref, InvalidSlotError(slot, self._capacity)))
                    continue

                coros.append(
                    self._load(slot, source_ref, name, lambda ref=source_ref: fetcher(ref), decoder)
                )

        outcomes = await asyncio.gather(*coros)

        failed = sum(1 for o in outcomes if o.error is not None)
        logger.info(f"Batch load finished: {len(outcomes) - failed} loaded, {failed} failed")
        return list(outcomes)

    @staticmethod
    async def _failed(slot: Optional[int], source_ref: str, error: PadSamplerError) -> LoadOutcome:
        logger.warning(f"Skipping {source_ref}: {error.user_message}")
        return LoadOutcome(slot=slot, source_ref=source_ref, error=error)

    async def _load(
        self,
        slot: int,
        source_ref: str,
        name: Optional[str],
        obtain: Callable[[], bytes],
        decoder: Optional[AudioDecoder],
    ) -> LoadOutcome:
        """Fetch, decode and commit one sample, guarded by the slot generation."""
        decoder = decoder or self._decoder
        sample = Sample.create(source_ref, name)
        sample.mark_loading()

        with self._lock:
            self._generations[slot] += 1
            generation = self._generations[slot]
            current = self._slots[slot]
            # Keep a loaded sample playable until the new one is ready
            if current is None or not current.is_loaded:
                self._slots[slot] = sample

        logger.debug(f"Loading {source_ref} into slot {slot} (generation {generation})")

        data: Optional[bytes] = None
        audio: Optional[AudioData] = None
        error: Optional[PadSamplerError] = None

        try:
            data = await asyncio.to_thread(obtain)
        except PadSamplerError as e:
            error = e
        except Exception as e:
            error = SampleFetchError(source_ref, str(e))

        if error is None:
            try:
                audio = await asyncio.to_thread(decoder.decode, data, source_ref)
            except PadSamplerError as e:
                error = e
            except Exception as e:
                error = SampleDecodeError(source_ref, str(e))

        with self._lock:
            if self._generations[slot] != generation:
                logger.info(f"Discarding superseded load of {source_ref} into slot {slot}")
                return LoadOutcome(slot=slot, source_ref=source_ref, error=error, superseded=True)

            if error is None:
                sample.mark_loaded(audio, data)
                self._slots[slot] = sample
            else:
                sample.mark_failed(error)
                current = self._slots[slot]
                if current is None or not current.is_loaded:
                    self._slots[slot] = sample

        if error is None:
            logger.info(f"Loaded {sample.name} into slot {slot} ({audio.duration:.2f}s)")
            return LoadOutcome(slot=slot, source_ref=source_ref, sample=sample)

        logger.warning(f"Failed to load {source_ref} into slot {slot}: {error.technical_message}")
        return LoadOutcome(slot=slot, source_ref=source_ref, error=error)
