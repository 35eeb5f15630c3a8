import asyncio

from db import Database


def run(coro):
    return asyncio.run(coro)


async def with_db(url, body):
    db = Database(url)
    await db.init()
    try:
        return await body(db)
    finally:
        await db.dispose()


def test_upsert_creates_then_replaces(db_url):
    async def body(db):
        await db.upsert_wallet("A", native_balance=1.0, token_balance=5.0, is_primary=False)
        await db.upsert_wallet("A", native_balance=2.0, token_balance=0.0, is_primary=False)
        return await db.list_wallets()

    wallets = run(with_db(db_url, body))
    assert len(wallets) == 1
    assert wallets[0].address == "A"
    assert wallets[0].native_balance == 2.0
    assert wallets[0].token_balance == 0.0


def test_list_orders_primary_first(db_url):
    async def body(db):
        await db.upsert_wallet("S1", 1.0, 0.0, is_primary=False)
        await db.upsert_wallet("P1", 1.0, 0.0, is_primary=True)
        await db.upsert_wallet("S2", 1.0, 0.0, is_primary=False)
        return await db.list_wallets()

    wallets = run(with_db(db_url, body))
    assert [w.address for w in wallets] == ["P1", "S1", "S2"]


def test_records_survive_reopen(db_url):
    async def write(db):
        await db.upsert_wallet("A", 1.5, 100.0, is_primary=True)

    async def read(db):
        return await db.list_wallets()

    run(with_db(db_url, write))
    wallets = run(with_db(db_url, read))
    assert [(w.address, w.native_balance, w.token_balance, w.is_primary) for w in wallets] == [
        ("A", 1.5, 100.0, True)
    ]


def test_concurrent_upserts_of_new_address(db_url):
    async def body():
        first, second = Database(db_url), Database(db_url)
        await first.init()
        try:
            await asyncio.gather(
                first.upsert_wallet("NEW", 1.0, 1.0, is_primary=False),
                second.upsert_wallet("NEW", 2.0, 2.0, is_primary=True),
            )
            return await first.list_wallets()
        finally:
            await first.dispose()
            await second.dispose()

    wallets = run(body())
    assert len(wallets) == 1
    assert (wallets[0].native_balance, wallets[0].token_balance, wallets[0].is_primary) in [
        (1.0, 1.0, False),
        (2.0, 2.0, True),
    ]


def test_upsert_returns_stored_row(db_url):
    async def body(db):
        return await db.upsert_wallet("A", 1.5, 100.0, is_primary=True)

    wallet = run(with_db(db_url, body))
    assert (wallet.address, wallet.native_balance, wallet.token_balance, wallet.is_primary) == (
        "A", 1.5, 100.0, True
    )
