#!/usr/bin/env python3
"""
Back up, restore or seed the data of a running lab manager service.

Usage:
    python lab_data.py --url http://localhost:8000 export [--file backup.json]
    python lab_data.py --url http://localhost:8000 import --file backup.json
    python lab_data.py --url http://localhost:8000 seed

``export`` without ``--file`` writes ``lab-data-YYYY-MM-DD.json`` in the
current directory.  ``import`` REPLACES everything on the server with
the file's contents.  ``seed`` only works while the lab has no members.
"""

import argparse
import logging
import sys

from lab_manager_client import LabManagerAPI


def main(argv=None) -> int:
    ap = argparse.ArgumentParser(description="Export, import or seed lab manager data.")
    ap.add_argument("--url", default="http://localhost:8000", help="Base URL of the lab manager service")
    ap.add_argument("command", choices=["export", "import", "seed"], help="Operation to perform")
    ap.add_argument("--file", help="File to write (export) or read (import)")
    args = ap.parse_args(argv)

    logging.basicConfig(level=logging.WARNING)
    api = LabManagerAPI(args.url)

    if args.command == "export":
        path, error = api.export_data(args.file)
        if error:
            print(f"[!] Export failed: {error['message']}", file=sys.stderr)
            return 1
        print(f"[+] Lab data exported to {path}")
    elif args.command == "import":
        if not args.file:
            print("[!] --file is required for import", file=sys.stderr)
            return 1
        result, error = api.import_data(args.file)
        if error:
            print(f"[!] Import failed: {error['message']}", file=sys.stderr)
            return 1
        counts = ", ".join(f"{name}={count}" for name, count in (result or {}).get("counts", {}).items())
        print(f"[+] Lab data imported ({counts})")
    else:
        _, error = api.load_seed_data()
        if error:
            print(f"[!] Seeding failed: {error['message']}", file=sys.stderr)
            return 1
        print("[+] Seed data loaded")
    return 0


if __name__ == "__main__":
    sys.exit(main())
