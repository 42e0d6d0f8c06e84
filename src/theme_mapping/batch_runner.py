"""
Cursor-based batch theme mapping.

ThemeBatchRunner.run_batch() classifies one page of products and writes the
themes back in a single bulk update. It holds no state between calls: the
caller passes back lastProcessedId (and currentBatch, for progress numbering)
from the previous response until status is no longer "processing".

    not_started -> processing -> complete
                        \\-> error   (resume later from the same cursor)

Pagination is keyset (id > cursor), never offset, so rows classified or
inserted by someone else between calls are neither skipped nor repeated.
"""

import math
import time
from typing import Callable, List, Optional

from core.logging import LoggerMixin
from theme_mapping.classifier import ThemeClassifier
from theme_mapping.models import (
    BatchPhase,
    BatchProgress,
    BatchStatus,
    MappingMode,
    ThemeAssignment,
)
from theme_mapping.store import ProductStore, ProductStoreError


def format_duration(seconds: float) -> str:
    """Render an ETA like "45s", "3m 20s" or "1h 5m"."""
    seconds = max(0, int(round(seconds)))
    if seconds < 60:
        return f"{seconds}s"
    minutes, secs = divmod(seconds, 60)
    if minutes < 60:
        return f"{minutes}m {secs}s"
    hours, minutes = divmod(minutes, 60)
    return f"{hours}h {minutes}m"


class ThemeBatchRunner(LoggerMixin):
    """
    Applies ThemeClassifier to a product store one batch at a time.

    Each run_batch() performs at most three sequential store round trips
    (count, fetch, bulk update). Callers must not run two batches with
    overlapping cursors concurrently.
    """

    def __init__(
        self,
        store: ProductStore,
        classifier: Optional[ThemeClassifier] = None,
    ):
        self.store = store
        self.classifier = classifier or ThemeClassifier()

    def run_batch(
        self,
        mode: MappingMode = MappingMode.UNMAPPED_ONLY,
        batch_size: int = 1000,
        last_processed_id: Optional[int] = None,
        completed_batches: int = 0,
        dry_run: bool = False,
    ) -> BatchProgress:
        """
        Classify and write back the next batch of products.

        Args:
            mode: UNMAPPED_ONLY to fill in missing themes, ALL to recompute everything
            batch_size: Maximum products to process in this call
            last_processed_id: Cursor from the previous batch (None to start)
            completed_batches: currentBatch of the previous response
            dry_run: Classify but skip the write-back

        Returns:
            BatchProgress. On store failure the status is ERROR and
            last_processed_id is the incoming cursor, so retrying with it
            re-attempts exactly the same range.
        """
        if batch_size < 1:
            raise ValueError(f"batch_size must be positive, got {batch_size}")

        mode = MappingMode(mode)
        current_batch = completed_batches + 1
        started = time.perf_counter()

        try:
            total_count = self.store.count_products(mode)
        except ProductStoreError as e:
            return self._error(e, last_processed_id, current_batch)

        if total_count == 0:
            self.logger.info("No products to map", mode=mode.value)
            return BatchProgress(
                status=BatchStatus.COMPLETE,
                phase=BatchPhase.NONE,
                current_batch=completed_batches,
                total_batches=completed_batches,
                last_processed_id=last_processed_id,
                message="No products to map",
            )

        try:
            products = self.store.fetch_page(mode, last_processed_id, batch_size)
        except ProductStoreError as e:
            return self._error(e, last_processed_id, current_batch, total_count)

        if not products:
            # Remaining rows were mapped by someone else, or the cursor is past the end
            self.logger.info(
                "No products after cursor",
                mode=mode.value,
                last_processed_id=last_processed_id,
                total_count=total_count,
            )
            return BatchProgress(
                status=BatchStatus.COMPLETE,
                phase=BatchPhase.NONE,
                total_count=total_count,
                current_batch=completed_batches,
                total_batches=completed_batches,
                last_processed_id=last_processed_id,
                message="No more products to map",
            )

        assignments = [
            ThemeAssignment(id=product.id, themes=self.classifier.classify_product(product))
            for product in products
        ]

        if not dry_run:
            try:
                self.store.bulk_update(assignments)
            except ProductStoreError as e:
                return self._error(e, last_processed_id, current_batch, total_count)

        processed = len(products)
        if mode == MappingMode.UNMAPPED_ONLY:
            # The count only includes rows that were still unmapped
            remaining = max(0, total_count - processed)
            total_batches = completed_batches + math.ceil(total_count / batch_size)
        else:
            remaining = max(0, total_count - (completed_batches * batch_size + processed))
            total_batches = max(current_batch, math.ceil(total_count / batch_size))

        # A short page means nothing was left past the cursor at fetch time
        has_more = remaining > 0 and processed == batch_size
        new_cursor = products[-1].id

        eta = None
        if has_more:
            elapsed = time.perf_counter() - started
            batches_left = max(1, total_batches - current_batch)
            eta = format_duration(elapsed * batches_left)

        self.logger.info(
            "Theme batch mapped",
            mode=mode.value,
            batch=current_batch,
            total_batches=total_batches,
            processed=processed,
            remaining=remaining,
            last_processed_id=new_cursor,
            dry_run=dry_run,
        )

        verb = "Classified" if dry_run else "Mapped"
        return BatchProgress(
            status=BatchStatus.PROCESSING if has_more else BatchStatus.COMPLETE,
            phase=BatchPhase.DETERMINISTIC,
            processed_count=processed,
            total_count=total_count,
            remaining_count=remaining,
            current_batch=current_batch,
            total_batches=total_batches,
            estimated_time_remaining=eta,
            last_processed_id=new_cursor,
            has_more=has_more,
            message=f"{verb} {processed} products (batch {current_batch} of {total_batches})",
        )

    def _error(
        self,
        error: ProductStoreError,
        last_processed_id: Optional[int],
        current_batch: int,
        total_count: int = 0,
    ) -> BatchProgress:
        self.logger.error(
            "Theme batch failed",
            operation=error.operation,
            error=error.message,
            last_processed_id=last_processed_id,
        )
        return BatchProgress(
            status=BatchStatus.ERROR,
            phase=BatchPhase.NONE,
            total_count=total_count,
            current_batch=current_batch,
            last_processed_id=last_processed_id,
            message=str(error),
            error=str(error),
        )


def run_until_complete(
    runner: ThemeBatchRunner,
    mode: MappingMode = MappingMode.UNMAPPED_ONLY,
    batch_size: int = 1000,
    start_after: Optional[int] = None,
    dry_run: bool = False,
    on_progress: Optional[Callable[[BatchProgress], None]] = None,
    max_batches: Optional[int] = None,
    delay_seconds: float = 0.0,
) -> List[BatchProgress]:
    """
    Drive run_batch() until the run stops processing.

    Stops on COMPLETE, on ERROR, or after max_batches calls. The last
    element's last_processed_id is the checkpoint to resume from.
    """
    history: List[BatchProgress] = []
    cursor = start_after
    completed = 0

    while max_batches is None or len(history) < max_batches:
        progress = runner.run_batch(
            mode=mode,
            batch_size=batch_size,
            last_processed_id=cursor,
            completed_batches=completed,
            dry_run=dry_run,
        )
        history.append(progress)
        if on_progress is not None:
            on_progress(progress)

        if progress.status != BatchStatus.PROCESSING:
            break

        cursor = progress.last_processed_id
        completed = progress.current_batch
        if delay_seconds > 0:
            time.sleep(delay_seconds)

    return history
