import argparse
import logging
import os
import platform
import shutil
import sys
from concurrent.futures import as_completed
from pathlib import Path
from typing import Optional

from tqdm import tqdm

from . import config
from .core import FileSystemAnalyzer
from .exceptions import DirectoryAccessError, FileAnalyzerError
from .reporting import format_size, sort_for_display, summarize_listing


def setup_logging(verbose: bool, log_file: Optional[Path] = None):
    """Sets up logging to the console and, optionally, a file."""
    log_level = logging.DEBUG if verbose else logging.WARNING

    handlers = [logging.StreamHandler(sys.stderr)]
    if log_file:
        log_file.parent.mkdir(parents=True, exist_ok=True)
        handlers.append(logging.FileHandler(log_file, encoding='utf-8'))

    logging.basicConfig(
        level=log_level,
        format="%(asctime)s [%(levelname)s] %(message)s",
        handlers=handlers,
        force=True,
    )


def log_system_info(path: Path):
    logging.info("=== System Info ===")
    logging.info(f"Python: {platform.python_version()} ({platform.python_implementation()})")
    logging.info(f"OS: {platform.system()} {platform.release()} ({platform.machine()})")
    logging.info(f"Logical processors: {os.cpu_count()}")
    try:
        usage = shutil.disk_usage(path)
        logging.info(f"Disk of {path}: total {format_size(usage.total)}, "
                     f"free {format_size(usage.free)}, used {format_size(usage.used)}")
    except OSError as e:
        logging.warning(f"Could not read disk usage for {path}: {e}")


def parse_args(argv=None):
    p = argparse.ArgumentParser(description="Filesystem Analyzer: list a directory and its statistics")

    p.add_argument("path", type=Path, help="Directory to analyze")
    p.add_argument("--stats", action="store_true",
                   help="Compute recursive size and counts for the directory and each subdirectory")
    p.add_argument("-w", "--workers", type=int, default=config.DEFAULT_MAX_WORKERS,
                   help=f"Worker threads for --stats (default: {config.DEFAULT_MAX_WORKERS})")
    p.add_argument("--grace", type=float, default=config.SHUTDOWN_GRACE_SECONDS,
                   help="Seconds to wait for running scans on shutdown")
    p.add_argument("-v", "--verbose", action="store_true", help="Enable debug logging")
    p.add_argument("--log-file", type=Path, default=None, help="Also write the log to this file")

    return p.parse_args(argv)


def print_listing(records):
    for rec in sort_for_display(records):
        if rec.is_directory:
            print(f"  [DIR]  {rec.name}/")
        else:
            print(f"  {format_size(rec.size_bytes):>10}  {rec.name}")
    print(summarize_listing(records))


def print_stats(analyzer: FileSystemAnalyzer, root: Path, records):
    targets = [root] + [Path(r.path) for r in sort_for_display(records) if r.is_directory]
    futures = {analyzer.get_directory_stats_async(t): t for t in targets}

    results = {}
    for future in tqdm(as_completed(futures), total=len(futures), desc="Collecting stats", file=sys.stderr):
        target = futures[future]
        try:
            results[target] = future.result()
        except FileAnalyzerError as e:
            logging.error(f"Failed to collect stats for {target}: {e}")

    print()
    for target in targets:
        stats = results.get(target)
        label = str(target) if target == root else f"{target.name}/"
        if stats is None:
            print(f"  {'error':>10}  {label}")
        else:
            print(f"  {format_size(stats.total_size_bytes):>10}  {label}  "
                  f"({stats.file_count} files, {stats.directory_count} folders)")


def main(argv=None) -> int:
    args = parse_args(argv)
    setup_logging(args.verbose, args.log_file)

    root = args.path
    if args.verbose:
        log_system_info(root)

    try:
        analyzer = FileSystemAnalyzer(max_workers=args.workers, grace_period=args.grace)
    except ValueError as e:
        logging.error(f"Invalid configuration: {e}")
        return 1

    interrupted = False
    try:
        records = analyzer.list_directory(root)
        print(f"Path: {root}")
        print_listing(records)
        if args.stats:
            print_stats(analyzer, root, records)
    except DirectoryAccessError as e:
        logging.error(str(e))
        print(f"Error: {e}", file=sys.stderr)
        return 1
    except KeyboardInterrupt:
        interrupted = True
        logging.warning("Operation cancelled by user.")
        return 130
    except Exception:
        logging.exception("Fatal error during analysis.")
        return 1
    finally:
        # Ctrl-C cancels running walks instead of waiting them out
        analyzer.shutdown(grace_period=0 if interrupted else None)

    return 0


if __name__ == "__main__":
    sys.exit(main())
