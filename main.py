import argparse
import asyncio
import logging
import sys

from dotenv import load_dotenv

from config import ConfigError, Settings, load_wallets
from db import Database
from scan import SolanaClient, WalletScanner
from watcher import BalanceWatcher

logger = logging.getLogger("nightwatcher")


def build_parser():
    parser = argparse.ArgumentParser(description="Track SOL and token balances for configured wallets")
    sub = parser.add_subparsers(dest="command")
    sub.add_parser("serve", help="Serve the report page and rescan on a schedule (default)")
    scan = sub.add_parser("scan", help="Scan one wallet group once and exit")
    scan.add_argument("--group", choices=["primary", "secondary"], default="secondary")
    return parser


async def run(args, settings, wallets):
    client = SolanaClient(settings.rpc_endpoint, timeout=settings.rpc_timeout)
    db = Database(settings.database_url)
    scanner = WalletScanner(client, settings.token_mint)
    watcher = BalanceWatcher(settings, wallets, db, scanner)
    try:
        if args.command == "scan":
            await db.init()
            await watcher.scan_group(primary=args.group == "primary")
        else:
            await watcher.run()
    finally:
        client.close()
        await db.dispose()


def main(argv=None):
    load_dotenv()
    args = build_parser().parse_args(argv)

    try:
        settings = Settings.from_env()
        wallets = load_wallets(settings.wallets_file)
    except ConfigError as e:
        logging.basicConfig(level=logging.INFO)
        logger.error("Configuration error: %s", e)
        return 1

    logging.basicConfig(
        level=settings.log_level,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    try:
        asyncio.run(run(args, settings, wallets))
    except KeyboardInterrupt:
        logger.info("Stopped")
    return 0


if __name__ == "__main__":
    sys.exit(main())
