"""
xartool CLI - Inspect Command
Usage: python -m cli.commands.inspect archive.xar
"""
import argparse
import json
import sys
from pathlib import Path
from xartool.errors import XarError
from xartool.tools.inspector import Inspector
from xartool.utils.logger import logger


def main(argv=None):
    parser = argparse.ArgumentParser(
        description="Inspect a XAR archive without extracting it"
    )
    parser.add_argument("input", help="Path to the archive")
    parser.add_argument("--json", action="store_true", help="Print the result as JSON")

    args = parser.parse_args(argv)

    path = Path(args.input)
    if not path.exists():
        logger.error(f"Archive not found: {path}")
        sys.exit(1)

    try:
        info = Inspector().inspect(str(path), show=not args.json)
        if args.json:
            print(json.dumps(info, indent=2))
    except (ValueError, XarError) as e:
        logger.error(str(e))
        sys.exit(1)
    except OSError as e:
        logger.error(f"Inspection failed: {e}")
        sys.exit(1)


if __name__ == "__main__":
    main()
