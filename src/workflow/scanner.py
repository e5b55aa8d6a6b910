"""
Job Sheet Scan Workflow.

Drives one scan end to end: lease an OCR worker, recognize the photo,
give the worker back, then hand the text to the extraction core.

The worker is released on every exit path (success, recognition
failure, timeout, cancellation) before extraction starts. Extraction
itself never blocks, so timeouts and cancellation only apply to the
recognition step.

Usage:
    scanner = JobSheetScanner()
    outcome = asyncio.run(scanner.scan("job_sheet.jpg"))

Author: Workshop Tools Team
"""

import asyncio
from contextlib import asynccontextmanager
from pathlib import Path
from typing import AsyncIterator, Callable, List, Optional, Sequence, Union

from config import get_config
from src.utils.logger import get_logger
from src.utils.exceptions import OCRProcessingError, OCRTimeoutError
from src.ocr_engine import OCREngine
from src.ocr_engine.engine import ImageSource
from src.extraction import ExtractionOutcome, JobDraftAssembler

logger = get_logger(__name__)


def describe_source(image: ImageSource) -> str:
    if isinstance(image, (str, Path)):
        return str(image)
    return getattr(image, "filename", "") or "image"


class OCRWorker:
    """
    One leased OCR engine.

    A terminated worker refuses further work.
    """

    def __init__(self, engine_factory: Callable[[], OCREngine] = OCREngine) -> None:
        self.engine = engine_factory()
        self.active = True

    def recognize(self, image: ImageSource) -> str:
        if not self.active:
            raise OCRProcessingError(describe_source(image), "worker already terminated")
        return self.engine.extract_text(image)

    def terminate(self) -> None:
        self.active = False


class OCRWorkerPool:
    """
    Bounded pool of OCR workers.

    Attributes:
        max_workers: Maximum number of workers leased at once.
        active_workers: Workers currently leased.

    Example:
        >>> pool = OCRWorkerPool(max_workers=2)
        >>> async with pool.acquire() as worker:
        ...     text = await asyncio.to_thread(worker.recognize, "sheet.jpg")
    """

    def __init__(
        self,
        max_workers: Optional[int] = None,
        engine_factory: Callable[[], OCREngine] = OCREngine
    ) -> None:
        self.max_workers = max_workers or get_config("ocr.workers.max_workers", 2)
        self.engine_factory = engine_factory
        self.active_workers = 0
        self._semaphore: Optional[asyncio.Semaphore] = None

    @asynccontextmanager
    async def acquire(self) -> AsyncIterator[OCRWorker]:
        """
        Lease a worker; it is terminated and released when the block exits,
        however it exits.
        """
        # Created on first use so it belongs to the loop that runs the scans
        if self._semaphore is None:
            self._semaphore = asyncio.Semaphore(self.max_workers)

        async with self._semaphore:
            worker = await asyncio.to_thread(OCRWorker, self.engine_factory)
            self.active_workers += 1
            logger.debug(f"OCR worker acquired ({self.active_workers}/{self.max_workers})")
            try:
                yield worker
            finally:
                worker.terminate()
                self.active_workers -= 1
                logger.debug(f"OCR worker released ({self.active_workers}/{self.max_workers})")


class JobSheetScanner:
    """
    Scan workflow: OCR collaborator followed by the extraction core.

    Attributes:
        assembler: JobDraftAssembler used on recognized text
        pool: OCRWorkerPool leasing OCR workers
        timeout: Recognition timeout in seconds (None for no limit)
        require_complete: Raise IncompleteJobSheetError instead of
                          returning an INCOMPLETE outcome

    Example:
        >>> scanner = JobSheetScanner()
        >>> outcome = await scanner.scan("job_sheet.jpg")
        >>> outcome.draft.customer_name
        'John Jerrime'
    """

    def __init__(
        self,
        assembler: Optional[JobDraftAssembler] = None,
        pool: Optional[OCRWorkerPool] = None,
        timeout: Optional[float] = None,
        require_complete: Optional[bool] = None
    ) -> None:
        self.assembler = assembler or JobDraftAssembler()
        self.pool = pool or OCRWorkerPool()

        if timeout is None:
            timeout = get_config("ocr.workers.timeout", 0)
        self.timeout = timeout or None

        if require_complete is None:
            require_complete = get_config("workflow.require_complete", False)
        self.require_complete = bool(require_complete)

    async def recognize(self, image: ImageSource) -> str:
        """
        Recognize one image with a leased worker.

        Raises:
            OCRProcessingError: If recognition fails.
            OCRTimeoutError: If recognition exceeds the timeout.
        """
        source = describe_source(image)

        async with self.pool.acquire() as worker:
            # The thread cannot be interrupted, so the lease is held until it
            # finishes even when the caller stops waiting.
            call = asyncio.ensure_future(asyncio.to_thread(worker.recognize, image))
            try:
                if self.timeout:
                    return await asyncio.wait_for(asyncio.shield(call), self.timeout)
                return await asyncio.shield(call)
            except asyncio.TimeoutError:
                logger.error(f"OCR timed out after {self.timeout}s: {source}")
                await self._drain(call, source)
                raise OCRTimeoutError(source, self.timeout)
            except asyncio.CancelledError:
                logger.warning(f"OCR cancelled: {source}")
                await self._drain(call, source)
                raise

    @staticmethod
    async def _drain(call: "asyncio.Future[str]", source: str) -> None:
        """Wait for an abandoned recognition to finish, discarding its result."""
        await asyncio.wait({call})
        if not call.cancelled() and call.exception() is not None:
            logger.debug(f"Abandoned OCR for {source} failed: {call.exception()}")

    async def scan(self, image: ImageSource) -> ExtractionOutcome:
        """
        Scan one job sheet image.

        Args:
            image: PIL Image or path to the photo.

        Returns:
            ExtractionOutcome for the recognized text.

        Raises:
            OCRError: If recognition fails or times out.
            IncompleteJobSheetError: If ``require_complete`` is set and a
                                     required field was defaulted.
        """
        source = describe_source(image)
        logger.info(f"Scanning job sheet: {source}")

        text = await self.recognize(image)

        outcome = self.assembler.extract(text, source=source)
        if self.require_complete:
            outcome.raise_if_incomplete()
        return outcome

    async def scan_many(
        self,
        images: Sequence[ImageSource]
    ) -> List[Union[ExtractionOutcome, Exception]]:
        """
        Scan several images concurrently, bounded by the worker pool.

        Returns:
            One entry per image, in input order: the outcome, or the
            exception that scan raised.
        """
        results = await asyncio.gather(
            *(self.scan(image) for image in images),
            return_exceptions=True
        )

        # Never swallow cancellation of the batch itself
        for result in results:
            if isinstance(result, asyncio.CancelledError):
                raise result

        return list(results)
