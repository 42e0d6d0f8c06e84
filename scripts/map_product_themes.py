#!/usr/bin/env python3
"""
Batch Theme Mapping Script

Assigns content themes to every product in Supabase by driving the batch
runner until it reports complete (or error). Progress is checkpointed by
product id, so an interrupted run can be resumed with --start-after.

Usage:
    python map_product_themes.py                          # unmapped products only
    python map_product_themes.py --mode all --batch-size 2000
    python map_product_themes.py --start-after 48213      # resume from checkpoint
    python map_product_themes.py --dry-run --max-batches 1
    python map_product_themes.py --print-sql              # SQL for the bulk update RPC

Requirements:
    - Run the SQL printed by --print-sql once
    - SUPABASE_URL and SUPABASE_SERVICE_KEY env vars set
"""

import os
import sys
import argparse
import time

sys.path.insert(0, os.path.join(os.path.dirname(os.path.dirname(os.path.abspath(__file__))), "src"))

from dotenv import load_dotenv

load_dotenv(os.path.join(os.path.dirname(os.path.dirname(os.path.abspath(__file__))), ".env"))

from config.database import get_supabase_client
from config.settings import get_settings
from core.logging import configure_logging
from theme_mapping.batch_runner import ThemeBatchRunner, run_until_complete
from theme_mapping.models import BatchProgress, BatchStatus, MappingMode
from theme_mapping.store import SupabaseProductStore, build_rpc_sql


def print_progress(progress: BatchProgress) -> None:
    if progress.status == BatchStatus.ERROR:
        print(f"[ERROR] {progress.error} | resume with --start-after {progress.last_processed_id}")
        return
    line = (
        f"Batch {progress.current_batch}/{progress.total_batches} | "
        f"Processed: {progress.processed_count} | "
        f"Remaining: {progress.remaining_count} | "
        f"Cursor: {progress.last_processed_id}"
    )
    if progress.estimated_time_remaining:
        line += f" | ETA: {progress.estimated_time_remaining}"
    print(line)


def main() -> int:
    parser = argparse.ArgumentParser(description="Map creator products to content themes")
    parser.add_argument("--mode", choices=[m.value for m in MappingMode],
                        default=MappingMode.UNMAPPED_ONLY.value,
                        help="unmapped_only (default) or all to recompute every product")
    parser.add_argument("--batch-size", type=int, default=None,
                        help="Products per batch (default: DEFAULT_BATCH_SIZE, 1000)")
    parser.add_argument("--start-after", type=int, default=None,
                        help="Resume after this product id")
    parser.add_argument("--max-batches", type=int, default=None,
                        help="Stop after this many batches")
    parser.add_argument("--delay", type=float, default=0.1,
                        help="Seconds to sleep between batches (default: 0.1)")
    parser.add_argument("--dry-run", action="store_true",
                        help="Classify without writing to the database")
    parser.add_argument("--print-sql", action="store_true",
                        help="Print SQL for the bulk update RPC and exit")
    parser.add_argument("--json-logs", action="store_true",
                        help="Emit JSON logs")

    args = parser.parse_args()
    settings = get_settings()

    if args.print_sql:
        print(build_rpc_sql(settings.products_table, settings.themes_column))
        return 0

    configure_logging(json_logs=args.json_logs, log_level="WARNING")

    batch_size = args.batch_size or settings.default_batch_size
    store = SupabaseProductStore(
        get_supabase_client(),
        table=settings.products_table,
        themes_column=settings.themes_column,
    )
    runner = ThemeBatchRunner(store)

    print("=" * 70)
    print("Content Theme Mapping")
    print("=" * 70)
    print(f"Table: {settings.products_table}.{settings.themes_column}")
    print(f"Mode: {args.mode}")
    print(f"Batch size: {batch_size}")
    print(f"Start after: {args.start_after}")
    if args.dry_run:
        print("\n*** DRY RUN MODE - No database writes ***\n")

    start_time = time.time()
    history = run_until_complete(
        runner,
        mode=MappingMode(args.mode),
        batch_size=batch_size,
        start_after=args.start_after,
        dry_run=args.dry_run,
        on_progress=print_progress,
        max_batches=args.max_batches,
        delay_seconds=args.delay,
    )

    elapsed = time.time() - start_time
    processed = sum(p.processed_count for p in history)
    last = history[-1]

    print("\n" + "=" * 70)
    print(f"Finished: {last.status.value}")
    print("=" * 70)
    print(f"Total processed: {processed}")
    print(f"Last processed id: {last.last_processed_id}")
    print(f"Time elapsed: {elapsed:.1f}s")
    if elapsed > 0:
        print(f"Average rate: {processed / elapsed:.1f} products/second")

    return 1 if last.status == BatchStatus.ERROR else 0


if __name__ == "__main__":
    sys.exit(main())
