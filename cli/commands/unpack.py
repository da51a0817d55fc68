"""
xartool CLI - Unpack Command
Usage: python -m cli.commands.unpack archive.xar -o output_folder
"""
import argparse
import sys
import shutil
from pathlib import Path
from xartool.errors import XarError
from xartool.unpacker import Unpacker
from xartool.utils.logger import logger


def main(argv=None):
    parser = argparse.ArgumentParser(description="Verify a XAR archive and restore its files")
    parser.add_argument("input", help="Path to the archive")
    parser.add_argument("-o", "--output", help="Directory to restore the files into")
    parser.add_argument("-f", "--force", action="store_true",
                        help="Unpack even if verification fails, overwrite existing files")

    args = parser.parse_args(argv)

    input_path = Path(args.input)
    if not input_path.exists():
        logger.error(f"Archive not found: {input_path}")
        sys.exit(1)

    if args.output:
        out_dir = Path(args.output)
    else:
        # docs/app.xar -> ./app_restored/
        out_dir = Path.cwd() / f"{input_path.stem}_restored"

    if out_dir.exists() and any(out_dir.iterdir()) and not args.force:
        logger.error(f"Output directory is not empty: {out_dir}")
        print("Use -f or --force to overwrite.")
        sys.exit(1)

    created = not out_dir.exists()

    try:
        result = Unpacker().unpack(str(input_path), str(out_dir), force=args.force, overwrite=args.force)
        print(f"\nRestored {len(result['files'])} files to: {result['output_dir']}")
        if result['skipped']:
            print(f"Skipped {len(result['skipped'])} undecodable files")
            sys.exit(1)

    except KeyboardInterrupt:
        print("\nOperation cancelled by user.")
        if created:
            shutil.rmtree(out_dir, ignore_errors=True)
        sys.exit(130)
    except (XarError, OSError) as e:
        logger.error(f"Fatal error: {e}")
        # Clean up failed directory
        if created and out_dir.exists() and not any(out_dir.iterdir()):
            out_dir.rmdir()
        sys.exit(1)


if __name__ == "__main__":
    main()
