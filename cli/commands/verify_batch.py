"""
xartool CLI - Batch Verify Command
Usage: python -m cli.commands.verify_batch input_dir/ [options]
"""
import argparse
import sys
from pathlib import Path
from xartool.utils.logger import logger
from xartool.verifier import BatchVerifier


def main(argv=None):
    parser = argparse.ArgumentParser(description="Verify every XAR archive in a directory")
    parser.add_argument("input", help="Directory containing archives")
    parser.add_argument("-r", "--recursive", action="store_true",
                        help="Also verify archives in subdirectories")
    parser.add_argument("-w", "--workers", type=int, default=None,
                        help="Number of parallel workers (default: auto)")
    parser.add_argument("-p", "--pattern", action="append", dest="patterns",
                        help="Glob pattern to match, may be repeated (default: from config)")
    parser.add_argument("--strict", action="store_true",
                        help="Abort on header mismatches")

    args = parser.parse_args(argv)

    input_dir = Path(args.input)
    if not input_dir.is_dir():
        logger.error(f"Input directory not found: {input_dir}")
        sys.exit(1)

    try:
        batch = BatchVerifier(max_workers=args.workers, strict=True if args.strict else None)
        summary = batch.verify_directory(
            input_dir=str(input_dir),
            recursive=args.recursive,
            patterns=args.patterns
        )

    except KeyboardInterrupt:
        print("\nBatch operation cancelled.")
        sys.exit(130)

    for result in summary['results']:
        print(f"{result['file']}: Archive verified")
    for failure in summary['failures']:
        print(f"{failure['file']}: Archive verification failed: {failure['error']}")

    if summary['failed'] > 0:
        sys.exit(1)


if __name__ == "__main__":
    main()
