import asyncio
import contextlib
import logging
import threading

from sqlalchemy.exc import SQLAlchemyError

from config import Settings, WalletGroups
from db import Database
from scan import RPCError, WalletScanner
from web import create_app, run_web

logger = logging.getLogger(__name__)


class BalanceWatcher:
    def __init__(self, settings: Settings, wallets: WalletGroups, db: Database, scanner: WalletScanner):
        self.settings = settings
        self.wallets = wallets
        self.db = db
        self.scanner = scanner
        self._scan_lock = asyncio.Lock()

    def group(self, primary: bool) -> list[str]:
        return self.wallets.primary if primary else self.wallets.secondary

    async def run_scan(self, addresses: list[str], is_primary: bool) -> int:
        """
        Fetch and store balances for each address, in order.

        Waits `settings.throttle` seconds between addresses. An RPC failure
        skips that address; store errors propagate. Returns the number of
        records written.
        """
        written = 0
        for i, address in enumerate(addresses):
            if i:
                await asyncio.sleep(self.settings.throttle)
            try:
                balance = await asyncio.to_thread(self.scanner.fetch_balance, address)
            except RPCError as e:
                logger.warning("Failed to fetch %s, keeping last snapshot: %s", address, e)
                continue

            await self.db.upsert_wallet(
                address,
                native_balance=balance.native_balance,
                token_balance=balance.token_balance,
                is_primary=is_primary,
            )
            written += 1
        return written

    async def scan_group(self, primary: bool, skip_if_running: bool = False) -> int | None:
        """Scan one wallet group. Returns None when skipped because a scan is in flight."""
        if skip_if_running and self._scan_lock.locked():
            logger.info("Scan already running, skipping this tick")
            return None

        name = "primary" if primary else "secondary"
        addresses = self.group(primary)
        async with self._scan_lock:
            logger.info("Scanning %d %s wallets", len(addresses), name)
            written = await self.run_scan(addresses, is_primary=primary)
            logger.info("Scan of %s wallets finished: %d/%d updated", name, written, len(addresses))
            return written

    async def balance_watcher(self):
        while True:
            try:
                await self.scan_group(primary=False, skip_if_running=True)
            except SQLAlchemyError:
                logger.exception("Storing balances failed")
            await asyncio.sleep(self.settings.scan_interval)

    async def startup_scan(self):
        try:
            await self.scan_group(primary=True)
        except SQLAlchemyError:
            logger.exception("Startup scan failed")

    def list_wallets_blocking(self, loop: asyncio.AbstractEventLoop, timeout: float = 30):
        """Read all records from another thread by running the query on `loop`."""
        future = asyncio.run_coroutine_threadsafe(self.db.list_wallets(), loop)
        return future.result(timeout)

    async def run(self):
        await self.db.init()

        loop = asyncio.get_running_loop()
        app = create_app(lambda: self.list_wallets_blocking(loop), self.settings.report_path)
        threading.Thread(
            target=run_web,
            args=(app, self.settings.host, self.settings.port),
            daemon=True,
        ).start()

        startup = asyncio.create_task(self.startup_scan())
        logger.info("Watcher is running")
        try:
            await self.balance_watcher()
        finally:
            startup.cancel()
            with contextlib.suppress(asyncio.CancelledError):
                await startup
