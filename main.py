#!/usr/bin/env python3
"""
nostrsync - Nostr posts to daily notes

Main entry point. Wires the configuration, persisted sync state, relay
fetcher and note merger together and exposes manual sync, the periodic
timer, settings editing and a status view.
"""

import argparse
import functools
import logging
import sys
import time

from pydantic import ValidationError

from nostrsync.config import ConfigManager
from nostrsync.errors import ConfigurationError, PersistenceFailed
from nostrsync.identity import resolve_identifier
from nostrsync.notes import FileSystemNoteStore, NoteMerger
from nostrsync.relays import MockRelayFetcher, NostrRelayFetcher
from nostrsync.state import EventLedger, SettingsStore
from nostrsync.sync import SyncOrchestrator, SyncScheduler, resolve_timezone

# How often `watch` re-reads the settings file for changes
SETTINGS_POLL_SECONDS = 5


def setup_logging(config: ConfigManager):
    """Configure logging for the application."""
    level = getattr(logging, str(config.get("logging.level", "INFO")).upper(), logging.INFO)
    format_str = config.get("logging.format", "%(asctime)s - %(name)s - %(levelname)s - %(message)s")
    log_file = config.log_filename

    logging.basicConfig(
        level=level,
        format=format_str,
        handlers=[
            logging.StreamHandler(sys.stdout),
            logging.FileHandler(log_file)
        ]
    )


def build_orchestrator(config: ConfigManager, settings_store: SettingsStore,
                       fetcher_type: str = "nostr") -> SyncOrchestrator:
    """
    Assemble a SyncOrchestrator from configuration.

    Args:
        config: Loaded configuration
        settings_store: Settings and cursor state
        fetcher_type: 'nostr' for real relays or 'mock' for offline sample posts

    Returns:
        A ready-to-run orchestrator
    """
    tz = resolve_timezone(config.timezone_name)

    if fetcher_type == "mock":
        fetcher = MockRelayFetcher()
    elif fetcher_type == "nostr":
        fetcher = NostrRelayFetcher(timeout=config.fetch_timeout)
    else:
        raise ValueError(f"Unknown fetcher type: {fetcher_type}")

    merger = NoteMerger(
        FileSystemNoteStore(config.vault_directory),
        notes_dir=config.notes_directory,
        marker=config.note_marker,
        time_format=config.time_format,
        tz=tz,
    )

    return SyncOrchestrator(
        settings_store=settings_store,
        ledger=EventLedger.load(config.ledger_path),
        fetcher=fetcher,
        merger=merger,
        resolver=functools.partial(resolve_identifier, timeout=config.nip05_timeout),
        tz=tz,
    )


def run_sync(orchestrator: SyncOrchestrator) -> int:
    """Run one manual sync cycle and print the outcome."""
    result = orchestrator.run_sync_cycle()

    if result.status == "skipped":
        print("⏳ A sync is already running.")
    elif result.status == "idle":
        print("✅ No new posts to sync.")
    elif result.status == "synced":
        print(f"✅ Synced {result.synced_count} new post(s).")
    elif result.status == "partial":
        print(f"⚠️  Synced {result.synced_count} post(s), but: {result.error}")
    else:
        print(f"❌ Sync failed: {result.error}")

    return 1 if result.error else 0


def run_watch(orchestrator: SyncOrchestrator, settings_store: SettingsStore) -> int:
    """
    Sync now and then on the configured interval until interrupted.

    Settings changes made with `configure` from another shell are picked up;
    a new interval restarts the timer.
    """
    interval = settings_store.settings.interval_minutes
    scheduler = SyncScheduler(orchestrator, interval)
    scheduler.start(run_immediately=True)
    print(f"🔄 Syncing every {interval} minute(s). Press Ctrl+C to stop.")

    try:
        while True:
            time.sleep(SETTINGS_POLL_SECONDS)
            settings = settings_store.reload()
            if settings.interval_minutes != scheduler.interval_minutes:
                logging.info(f"Sync interval changed to {settings.interval_minutes} minute(s)")
                scheduler.restart(settings.interval_minutes)
    except KeyboardInterrupt:
        logging.info("Watch interrupted by user")
        print("\nStopping automatic sync.")
    finally:
        scheduler.stop()

    return 0


def run_configure(settings_store: SettingsStore, args) -> int:
    """Apply settings given on the command line."""
    changes = {}
    if args.identifier is not None:
        changes["identifier"] = args.identifier
    if args.relays is not None:
        changes["relays"] = args.relays
    if args.interval is not None:
        changes["interval_minutes"] = args.interval

    if not changes:
        print("Nothing to change. Use --identifier, --relays or --interval.")
        return 1

    try:
        settings = settings_store.update(**changes)
    except ValidationError as e:
        print(f"❌ Invalid settings: {e}")
        return 1
    except PersistenceFailed as e:
        print(f"❌ {e}")
        return 1

    logging.info(f"Settings updated: {', '.join(changes)}")
    print("✅ Settings saved.")
    print_settings(settings_store)
    return 0


def print_settings(settings_store: SettingsStore, ledger_size=None):
    settings = settings_store.settings
    print(f"  Identifier:  {settings.identifier or '(not set)'}")
    print(f"  Relays:      {', '.join(settings.relays) or '(none)'}")
    print(f"  Interval:    {settings.interval_minutes} minute(s)")
    if settings.last_sync_timestamp:
        synced_at = time.strftime("%Y-%m-%d %H:%M:%S", time.localtime(settings.last_sync_timestamp))
        print(f"  Last sync:   {synced_at}")
    else:
        print("  Last sync:   never")
    if ledger_size is not None:
        print(f"  Synced posts: {ledger_size}")


def parse_arguments(argv=None):
    """Parse command line arguments."""
    parser = argparse.ArgumentParser(
        description="nostrsync - Nostr posts to daily notes",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  python main.py configure --identifier npub1... --relays "wss://relay.damus.io, wss://nos.lol"
  python main.py sync                     # Sync once
  python main.py watch                    # Sync on the configured interval
  python main.py --fetcher mock sync      # Try the pipeline with sample posts
  python main.py status
        """
    )

    parser.add_argument(
        "--config",
        default="config.yaml",
        help="Path to the configuration file (default: config.yaml)"
    )

    parser.add_argument(
        "--fetcher",
        choices=["nostr", "mock"],
        default="nostr",
        help="Event source to use (default: nostr)"
    )

    parser.add_argument(
        "--version",
        action="version",
        version="nostrsync 0.1.0"
    )

    subparsers = parser.add_subparsers(dest="command", required=True)

    subparsers.add_parser("sync", help="Sync new posts now")
    subparsers.add_parser("watch", help="Sync now and then on the configured interval")
    subparsers.add_parser("status", help="Show settings and sync state")

    configure = subparsers.add_parser("configure", help="Change settings")
    configure.add_argument("--identifier", help="Your npub, hex public key or NIP-05 address")
    configure.add_argument("--relays", help="Comma-separated list of relay URLs")
    configure.add_argument("--interval", type=int, help="Sync interval in minutes")

    return parser.parse_args(argv)


def main(argv=None):
    """Main entry point."""
    args = parse_arguments(argv)
    config = ConfigManager(args.config)
    setup_logging(config)

    settings_store = SettingsStore.from_config(config)

    if args.command == "configure":
        sys.exit(run_configure(settings_store, args))

    if args.command == "status":
        print("nostrsync status")
        print_settings(settings_store, ledger_size=len(EventLedger.load(config.ledger_path)))
        sys.exit(0)

    try:
        orchestrator = build_orchestrator(config, settings_store, args.fetcher)
    except ConfigurationError as e:
        logging.error(f"Invalid configuration: {e}")
        print(f"❌ Invalid configuration: {e}")
        sys.exit(1)

    if args.command == "sync":
        sys.exit(run_sync(orchestrator))

    sys.exit(run_watch(orchestrator, settings_store))


if __name__ == "__main__":
    main()
