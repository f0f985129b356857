"""
rushqueue command line

Inspect and rewrite FTP Rush queue files and list configured sites.
"""
import argparse
import json
import sys
from typing import List, Optional

import structlog

from rushqueue.codec.queue_file import QueueFile
from rushqueue.exceptions import CodecError
from rushqueue.logging import setup_logging
from rushqueue.models import TransferItem
from rushqueue.sites import load_site_names

logger = structlog.get_logger()


def _describe(index: int, item: TransferItem) -> str:
    source = f"{item.source_site_id}:{item.source_path.rstrip('/')}/{item.source_name}"
    destination = f"{item.destination_site_id}:{item.destination_path.rstrip('/')}/{item.destination_name}"
    line = f"{index:>3}  {item.transfer_type.name:<8} {item.file_type.name:<9} {source} -> {destination} ({item.size_bytes} bytes)"
    if item.remark:
        line += f"  # {item.remark}"
    return line


def cmd_show(args: argparse.Namespace) -> int:
    try:
        queue = QueueFile.decode_from_file(args.queue_file)
    except (CodecError, OSError) as e:
        print(f"error: {e}", file=sys.stderr)
        return 1

    if args.json:
        payload = [item.model_dump(mode="json") for item in queue]
        print(json.dumps(payload, indent=2))
    else:
        for index, item in enumerate(queue):
            print(_describe(index, item))
    return 0


def cmd_rewrite(args: argparse.Namespace) -> int:
    try:
        with open(args.queue_file, "rb") as f:
            original = f.read()
        queue = QueueFile.decode(original)
        queue.encode_to_file(args.out)
    except (CodecError, OSError) as e:
        print(f"error: {e}", file=sys.stderr)
        return 1

    identical = queue.encode() == original
    logger.info("queue_file_rewritten", source=args.queue_file, out=args.out, identical=identical)
    print(f"{len(queue)} items written to {args.out} ({'identical' if identical else 'changed'})")
    return 0


def cmd_sites(args: argparse.Namespace) -> int:
    names = sorted(load_site_names(args.site_file))
    if args.json:
        print(json.dumps(names, indent=2))
    else:
        for name in names:
            print(name)
    return 0


def main(argv: Optional[List[str]] = None) -> int:
    """Main entry point"""
    parser = argparse.ArgumentParser(prog="rushqueue", description="FTP Rush queue file tool")
    parser.add_argument(
        "--log-level",
        default=None,
        help="Logging level (defaults to RUSHQUEUE_LOG_LEVEL or INFO)",
    )
    sub = parser.add_subparsers(dest="cmd", required=True)

    show = sub.add_parser("show", help="List the items in a queue file")
    show.add_argument("queue_file")
    show.add_argument("--json", action="store_true", help="Print items as JSON")
    show.set_defaults(func=cmd_show)

    rewrite = sub.add_parser("rewrite", help="Decode a queue file and encode it again")
    rewrite.add_argument("queue_file")
    rewrite.add_argument("--out", required=True, help="Where to write the re-encoded queue")
    rewrite.set_defaults(func=cmd_rewrite)

    sites = sub.add_parser("sites", help="List site names from RushSite.xml")
    sites.add_argument("--site-file", default=None, help="Path to RushSite.xml")
    sites.add_argument("--json", action="store_true", help="Print names as JSON")
    sites.set_defaults(func=cmd_sites)

    args = parser.parse_args(argv)
    setup_logging("cli", args.log_level)
    return int(args.func(args))


if __name__ == "__main__":
    raise SystemExit(main())
