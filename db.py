from sqlalchemy import select
from sqlalchemy.dialects.sqlite import insert
from sqlalchemy.ext.asyncio import create_async_engine, AsyncSession
from sqlalchemy.orm import sessionmaker
from models import Base, Wallet


class Database:
    """Owns the async engine; every write is a single-row upsert in its own session."""

    def __init__(self, url: str, echo: bool = False):
        self.engine = create_async_engine(url, echo=echo)
        self.session_factory = sessionmaker(self.engine, expire_on_commit=False, class_=AsyncSession)

    async def init(self):
        async with self.engine.begin() as conn:
            await conn.run_sync(Base.metadata.create_all)

    async def upsert_wallet(self, address: str, native_balance: float, token_balance: float, is_primary: bool) -> Wallet:
        values = {
            "native_balance": native_balance,
            "token_balance": token_balance,
            "is_primary": is_primary,
        }
        stmt = insert(Wallet).values(address=address, **values).on_conflict_do_update(
            index_elements=[Wallet.address],
            set_=values,
        )
        async with self.session_factory() as session:
            await session.execute(stmt)
            await session.commit()
            return await session.scalar(select(Wallet).where(Wallet.address == address))

    async def list_wallets(self) -> list[Wallet]:
        async with self.session_factory() as session:
            wallets = await session.scalars(
                select(Wallet).order_by(Wallet.is_primary.desc(), Wallet.id)
            )
            return list(wallets.all())

    async def dispose(self):
        await self.engine.dispose()
