"""
xartool CLI - Verify Command
Usage: python -m cli.commands.verify archive.xar
"""
import argparse
import sys
from pathlib import Path
from xartool.archive import Archive
from xartool.errors import XarError
from xartool.utils.logger import logger, set_verbosity
from xartool.verifier import Verifier


def main(argv=None):
    parser = argparse.ArgumentParser(description="Verify the integrity of a XAR archive")
    parser.add_argument("input", help="Path to the archive")
    parser.add_argument("--strict", action="store_true",
                        help="Abort on header mismatches and malformed file entries")
    parser.add_argument("-v", "--verbose", action="store_true", help="Show debug output")
    parser.add_argument("-q", "--quiet", action="store_true", help="Only show errors")

    args = parser.parse_args(argv)
    set_verbosity(args.verbose, args.quiet)

    input_path = Path(args.input)
    if not input_path.exists():
        logger.error(f"Archive not found: {input_path}")
        sys.exit(1)

    strict = True if args.strict else None

    try:
        with Archive.open(input_path, strict=strict, strict_tree=strict) as archive:
            report = Verifier().verify(archive)

    except KeyboardInterrupt:
        print("\nOperation cancelled by user.")
        sys.exit(130)
    except (XarError, OSError) as e:
        logger.error(f"Failed to open archive: {e}")
        print(f"Archive verification failed: {e}")
        sys.exit(1)

    if report.success:
        print("Archive verified")
    else:
        print(f"Archive verification failed: {report.message}")
        sys.exit(1)


if __name__ == "__main__":
    main()
