#!/usr/bin/env python3
"""
Command-line interface for the QR link service.

Usage:
    python qrlink_cli.py create <url> [--output FILE]
    python qrlink_cli.py list
    python qrlink_cli.py edit <id> <url>
    python qrlink_cli.py delete <id>
    python qrlink_cli.py resolve <payload>
    python qrlink_cli.py visit <payload> [--no-browser]
    python qrlink_cli.py health
"""

import argparse
import asyncio
import json
import os
import sys
import webbrowser
from typing import Optional

# Add project root to path
sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), '../..')))

from config import Config
from qrlink.bootstrap import Services, build_services
from qrlink.common.logging_config import setup_logging
from qrlink.errors import QRLinkError
from qrlink.resolver import RedirectSession, ResolverState


def _print_json(data: dict, error: bool = False) -> None:
    print(json.dumps(data, indent=2, default=str), file=sys.stderr if error else sys.stdout)


class QRLinkCLI:
    """Command-line interface for QR links."""

    def __init__(self, config: Config, verbose: bool = False):
        """Initialize CLI."""
        self.config = config
        self.logger = setup_logging(level="DEBUG" if verbose else "WARNING")
        self.services: Optional[Services] = None

    async def initialize(self):
        """Initialize store, cache and services."""
        self.services = await build_services(self.config, self.logger)

    async def cleanup(self):
        """Cleanup resources."""
        if self.services:
            await self.services.close()

    async def create(self, url: str, output: Optional[str] = None):
        """Generate a QR code and save its record."""
        try:
            result = await self.services.manager.create(url)
        except QRLinkError as e:
            _print_json({"success": False, "error": str(e)}, error=True)
            return 1

        if output:
            with open(output, "wb") as f:
                f.write(result.code_image.png)

        _print_json({
            "success": True,
            "payload_url": result.encoded_payload,
            "persisted": result.persisted,
            "record": result.record.to_dict() if result.record else None,
            "persist_error": result.persist_error,
            "image_file": output,
        })
        # The code is usable even if saving failed, but report it.
        return 0 if result.persisted else 2

    async def list_links(self):
        """List link records, newest first."""
        try:
            records = await self.services.manager.list()
        except QRLinkError as e:
            _print_json({"success": False, "error": str(e)}, error=True)
            return 1

        codec = self.services.codec
        _print_json({
            "success": True,
            "count": len(records),
            "links": [
                {
                    **record.to_dict(),
                    "payload_url": codec.encode_inline(record.destination_url),
                    "managed_url": codec.encode_by_id(record.id),
                }
                for record in records
            ],
        })
        return 0

    async def edit(self, record_id: str, url: str):
        """Replace a record's destination."""
        try:
            record = await self.services.manager.edit(record_id, url)
        except QRLinkError as e:
            _print_json({"success": False, "error": str(e)}, error=True)
            return 1

        _print_json({"success": True, "record": record.to_dict()})
        return 0

    async def delete(self, record_id: str):
        """Delete a record."""
        try:
            await self.services.manager.delete(record_id)
        except QRLinkError as e:
            _print_json({"success": False, "error": str(e)}, error=True)
            return 1

        _print_json({"success": True, "deleted": record_id})
        return 0

    async def resolve(self, payload: str):
        """Resolve a payload without navigating."""
        try:
            resolution = await self.services.resolver.resolve(payload)
        except QRLinkError as e:
            _print_json({"success": False, "error": str(e)}, error=True)
            return 1

        _print_json({
            "success": True,
            "strategy": resolution.strategy.value,
            "destination": resolution.destination,
        })
        return 0

    async def visit(self, payload: str, open_browser: bool = True):
        """Resolve a payload and navigate after the countdown, like a scan would."""
        def navigate(url: str):
            print(f"Navigating to {url}")
            if open_browser:
                webbrowser.open(url)

        def on_tick(remaining: int):
            print(f"Taking you to your destination in {remaining} seconds")

        session = RedirectSession(
            self.services.resolver,
            navigate=navigate,
            on_tick=on_tick,
            countdown_seconds=self.config.countdown_seconds,
            tick_interval=self.config.countdown_interval_seconds,
            navigate_delay=self.config.navigate_delay_ms / 1000,
            single_timer=self.config.single_timer,
            logger=self.logger,
        )

        state = await session.start(payload)
        if state is ResolverState.ERROR:
            _print_json({"success": False, "error": session.error}, error=True)
            return 1

        print(f"Destination: {session.destination}")
        try:
            await session.wait()
        except webbrowser.Error as e:
            _print_json({"success": False, "error": f"Could not open browser: {e}"}, error=True)
            return 1
        finally:
            session.teardown()

        return 0 if session.state is ResolverState.NAVIGATED else 1

    async def health(self):
        """Check service health."""
        health_status = await self.services.manager.health_check()
        _print_json({"success": True, "health": health_status})
        return 0 if health_status["overall"] else 1


async def main():
    """Main entry point."""
    parser = argparse.ArgumentParser(
        description="QR Link CLI",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # Generate a QR code and save the PNG
  %(prog)s create https://example.com --output qr.png

  # List records
  %(prog)s list

  # Point a record at a new destination
  %(prog)s edit 0b6f... https://example.org

  # Resolve a scanned payload
  %(prog)s resolve "http://localhost:9300/q?url=https%%3A%%2F%%2Fexample.com"
        """
    )

    parser.add_argument(
        "--store",
        choices=["postgres", "memory"],
        default=None,
        help="Record store backend (default: from STORE_BACKEND env or postgres)"
    )

    parser.add_argument(
        "--database-url",
        default=None,
        help="PostgreSQL connection URL (default: from DATABASE_URL env)"
    )

    parser.add_argument(
        "-v", "--verbose",
        action="store_true",
        help="Verbose output"
    )

    subparsers = parser.add_subparsers(dest="command", help="Command to execute")

    create_parser = subparsers.add_parser("create", help="Generate a QR code for a URL")
    create_parser.add_argument("url", help="Destination URL")
    create_parser.add_argument("--output", "-o", help="Write the PNG to this file")

    subparsers.add_parser("list", help="List link records")

    edit_parser = subparsers.add_parser("edit", help="Change a record's destination")
    edit_parser.add_argument("id", help="Record id")
    edit_parser.add_argument("url", help="New destination URL")

    delete_parser = subparsers.add_parser("delete", help="Delete a record")
    delete_parser.add_argument("id", help="Record id")

    resolve_parser = subparsers.add_parser("resolve", help="Resolve a payload")
    resolve_parser.add_argument("payload", help="Payload URL or query string")

    visit_parser = subparsers.add_parser("visit", help="Resolve a payload and open it after the countdown")
    visit_parser.add_argument("payload", help="Payload URL or query string")
    visit_parser.add_argument("--no-browser", action="store_true", help="Print the destination instead of opening it")

    subparsers.add_parser("health", help="Check service health")

    args = parser.parse_args()

    if not args.command:
        parser.print_help()
        return 1

    overrides = {}
    if args.store:
        overrides["store_backend"] = args.store
    if args.database_url:
        overrides["database_url"] = args.database_url

    cli = QRLinkCLI(Config(**overrides), verbose=args.verbose)

    try:
        await cli.initialize()

        if args.command == "create":
            return await cli.create(args.url, args.output)
        elif args.command == "list":
            return await cli.list_links()
        elif args.command == "edit":
            return await cli.edit(args.id, args.url)
        elif args.command == "delete":
            return await cli.delete(args.id)
        elif args.command == "resolve":
            return await cli.resolve(args.payload)
        elif args.command == "visit":
            return await cli.visit(args.payload, open_browser=not args.no_browser)
        elif args.command == "health":
            return await cli.health()
        else:
            parser.print_help()
            return 1

    finally:
        await cli.cleanup()


if __name__ == "__main__":
    try:
        exit_code = asyncio.run(main())
    except KeyboardInterrupt:
        # Interrupting a visit cancels its timers before anything navigates.
        exit_code = 130
    sys.exit(exit_code)
