# summary.py

class WalletSummary:
    def __init__(self, wallets: list):
        self.wallets = wallets

    @property
    def total_native(self) -> float:
        return sum(float(w.native_balance or 0) for w in self.wallets)

    @property
    def total_token(self) -> float:
        return sum(float(w.token_balance or 0) for w in self.wallets)

    def rows(self) -> list[dict]:
        return [
            {
                "address": w.address,
                "token": w.token_balance or 0,
                "native": w.native_balance or 0,
                "primary": bool(w.is_primary),
            }
            for w in self.wallets
        ]

    def as_context(self) -> dict:
        return {
            "total_native": self.total_native,
            "total_token": self.total_token,
            "rows": self.rows(),
        }
