from sqlalchemy.orm import declarative_base
from sqlalchemy import Column, Integer, String, Float, Boolean

Base = declarative_base()

class Wallet(Base):
    __tablename__ = "wallets"
    id = Column(Integer, primary_key=True)
    address = Column(String(44), unique=True, nullable=False)
    native_balance = Column(Float, nullable=False, default=0.0)
    token_balance = Column(Float, nullable=False, default=0.0)
    is_primary = Column(Boolean, nullable=False, default=False)

    def __repr__(self):
        return f"<Wallet {self.address} native={self.native_balance} token={self.token_balance}>"
