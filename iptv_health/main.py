from __future__ import annotations

import argparse
import asyncio
import logging
import os

from dotenv import load_dotenv

from .health import DEFAULT_BATCH_SIZE, HealthPolicy
from .models import Channel
from .service import ChannelService
from .storage import DEFAULT_DATA_DIR, FileBackend
from .utils.http_client import HttpClient

load_dotenv()

DEFAULT_PLAYLIST_URL = "https://iptv-org.github.io/iptv/index.m3u"


def _env_str(name: str) -> str | None:
    value = os.getenv(name)
    if value is None or value == "":
        return None
    return value


def _env_int(name: str) -> int | None:
    value = _env_str(name)
    if value is None:
        return None
    try:
        return int(value)
    except ValueError:
        return None


def _env_bool(name: str) -> bool:
    value = _env_str(name)
    if value is None:
        return False
    return value.strip().lower() in {"1", "true", "yes", "on"}


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Load an IPTV playlist and track which channels are reachable.")
    parser.add_argument(
        "--playlist-url",
        default=_env_str("IPTV_PLAYLIST_URL") or DEFAULT_PLAYLIST_URL,
        help="Playlist manifest to ingest",
    )
    data_dir_env = _env_str("IPTV_DATA_DIR")
    parser.add_argument(
        "--data-dir",
        default=os.path.expanduser(data_dir_env) if data_dir_env else DEFAULT_DATA_DIR,
        help="Directory holding the playlist cache, health records, and user data",
    )
    parser.add_argument(
        "--refresh",
        action="store_true",
        default=_env_bool("IPTV_REFRESH"),
        help="Ignore the cached playlist and fetch it again",
    )
    parser.add_argument(
        "--check",
        action="store_true",
        default=_env_bool("IPTV_CHECK"),
        help="Probe channels without a fresh health verdict",
    )
    parser.add_argument(
        "--batch-size",
        type=int,
        default=_env_int("IPTV_BATCH_SIZE") or DEFAULT_BATCH_SIZE,
        help="Number of channels probed concurrently per batch",
    )
    parser.add_argument(
        "--policy",
        choices=[policy.value for policy in HealthPolicy],
        default=_env_str("IPTV_HEALTH_POLICY") or HealthPolicy.OPTIMISTIC.value,
        help="Treatment of channels without a fresh verdict",
    )
    parser.add_argument("--limit", type=int, default=_env_int("IPTV_LIMIT"), help="Only consider the first N channels")
    parser.add_argument("--list-groups", action="store_true", help="List channel groups and exit")
    parser.add_argument("--export", dest="export_path", help="Write favorites/history/preferences to a JSON file and exit")
    parser.add_argument("--import", dest="import_path", help="Restore favorites/preferences from a JSON file and exit")
    parser.add_argument("--reset", action="store_true", help="Delete all cached and user data and exit")
    parser.add_argument("--verbose", action="store_true", default=_env_bool("IPTV_VERBOSE"), help="Enable debug logging")
    args = parser.parse_args(argv)
    # Defaults bypass argparse choices.
    policies = [policy.value for policy in HealthPolicy]
    if args.policy not in policies:
        parser.error(f"invalid --policy {args.policy!r} (choose from {', '.join(policies)})")
    return args


def configure_logging(verbose: bool = False) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.INFO,
        format="%(asctime)s [%(levelname)s] %(message)s",
    )


def print_channels(channels: list[Channel]) -> None:
    if not channels:
        logging.info("No usable channels.")
        return
    logging.info("%-8s | %-20s | %s", "ID", "Group", "Name")
    logging.info("%s", "-" * 70)
    for channel in channels:
        logging.info("%-8s | %-20s | %s", channel.id, channel.group[:20], channel.name)


def print_groups(service: ChannelService, channels: list[Channel]) -> None:
    counts: dict[str, int] = {}
    for channel in channels:
        counts[channel.group] = counts.get(channel.group, 0) + 1
    logging.info("%-30s | %s", "Group", "Channels")
    logging.info("%s", "-" * 45)
    for group in service.group_names(channels):
        logging.info("%-30s | %s", group, counts.get(group, 0))


def _run_maintenance(args: argparse.Namespace, service: ChannelService) -> bool:
    if args.reset:
        service.reset()
        return True

    if args.export_path:
        try:
            with open(args.export_path, "w", encoding="utf-8") as handle:
                handle.write(service.user_data.export_data())
        except OSError as exc:
            logging.error("Export to %s failed: %s", args.export_path, exc)
            return True
        logging.info("Exported user data to %s", args.export_path)
        return True

    if args.import_path:
        try:
            with open(args.import_path, "r", encoding="utf-8") as handle:
                text = handle.read()
        except OSError as exc:
            logging.error("Cannot read %s: %s", args.import_path, exc)
            return True
        if service.user_data.import_data(text):
            logging.info("Imported user data from %s", args.import_path)
        else:
            logging.error("Failed to import data. Please check the file format.")
        return True

    return False


async def run(args: argparse.Namespace) -> None:
    async with HttpClient() as http_client:
        service = ChannelService(
            FileBackend(args.data_dir),
            http_client,
            policy=HealthPolicy(args.policy),
        )

        if _run_maintenance(args, service):
            return

        channels = await service.load_channels(args.playlist_url, use_cache=not args.refresh)
        if args.limit is not None:
            channels = channels[: args.limit]
        logging.info("Loaded %s channels", len(channels))

        if args.list_groups:
            print_groups(service, channels)
            return

        if args.check:
            def report(healthy_ids: set[str]) -> None:
                logging.info("Healthy so far: %s", len(healthy_ids))

            healthy_ids = await service.check_channels_batch(channels, report, args.batch_size)
            logging.info("Health check finished: %s of %s channels reachable", len(healthy_ids), len(channels))

        print_channels(service.filter_healthy_channels(channels))


def main() -> None:
    args = parse_args()
    configure_logging(args.verbose)
    try:
        asyncio.run(run(args))
    except KeyboardInterrupt:
        logging.warning("Interrupted")


if __name__ == "__main__":
    main()
