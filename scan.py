# scan.py

import logging
from dataclasses import dataclass

import requests

logger = logging.getLogger(__name__)

TOKEN_PROGRAM_ID = "TokenkegQfeZyiNwAJbNbGKPFXCWuBvf9Ss623VQ5DA"
LAMPORTS_PER_SOL = 1_000_000_000

# SPL token account layout: mint at byte 0, owner at byte 32, 165 bytes total
TOKEN_ACCOUNT_SIZE = 165
MINT_OFFSET = 0
OWNER_OFFSET = 32


class RPCError(Exception):
    pass


@dataclass
class WalletBalance:
    address: str
    native_balance: float
    token_balance: float


class SolanaClient:
    """Minimal JSON-RPC client for the two read calls the scanner needs."""

    def __init__(self, endpoint: str, timeout: float = 30, session: requests.Session | None = None):
        self.endpoint = endpoint
        self.timeout = timeout
        self.session = session or requests.Session()
        self._next_id = 0

    def call(self, method: str, params: list):
        self._next_id += 1
        payload = {"jsonrpc": "2.0", "id": self._next_id, "method": method, "params": params}
        try:
            res = self.session.post(self.endpoint, json=payload, timeout=self.timeout)
            res.raise_for_status()
        except requests.exceptions.RequestException as e:
            raise RPCError(f"{method} request failed: {e}") from e
        try:
            data = res.json()
        except ValueError as e:
            raise RPCError(f"{method} returned invalid JSON") from e

        if not isinstance(data, dict):
            raise RPCError(f"{method} returned unexpected payload: {data!r}")
        if data.get("error"):
            error = data["error"]
            message = error.get("message") if isinstance(error, dict) else error
            raise RPCError(f"{method} failed: {message}")
        if "result" not in data:
            raise RPCError(f"{method} response has no result")
        return data["result"]

    def get_balance(self, address: str) -> int:
        """Native balance in lamports."""
        result = self.call("getBalance", [address])
        try:
            return int(result["value"])
        except (TypeError, KeyError, ValueError) as e:
            raise RPCError(f"getBalance returned malformed result: {result!r}") from e

    def get_program_accounts(self, program_id: str, filters: list) -> list:
        result = self.call(
            "getProgramAccounts",
            [program_id, {"encoding": "jsonParsed", "filters": filters}],
        )
        if not isinstance(result, list):
            raise RPCError(f"getProgramAccounts returned malformed result: {result!r}")
        return result

    def close(self):
        self.session.close()


def lamports_to_sol(lamports: int) -> float:
    return lamports / LAMPORTS_PER_SOL


def token_account_amount(account: dict) -> float:
    try:
        token_amount = account["account"]["data"]["parsed"]["info"]["tokenAmount"]
    except (TypeError, KeyError) as e:
        raise RPCError("token account is missing parsed tokenAmount") from e
    if not isinstance(token_amount, dict):
        raise RPCError(f"token account has malformed tokenAmount: {token_amount!r}")

    # uiAmount is null for amounts that overflow a double; the string form is always set
    ui_amount = token_amount.get("uiAmountString")
    if ui_amount is None:
        ui_amount = token_amount.get("uiAmount")
    try:
        return float(ui_amount)
    except (TypeError, ValueError) as e:
        raise RPCError(f"token account has unparseable amount: {ui_amount!r}") from e


class WalletScanner:
    def __init__(self, client: SolanaClient, token_mint: str):
        self.client = client
        self.token_mint = token_mint

    def token_filters(self, address: str) -> list:
        return [
            {"dataSize": TOKEN_ACCOUNT_SIZE},
            {"memcmp": {"offset": OWNER_OFFSET, "bytes": address}},
            {"memcmp": {"offset": MINT_OFFSET, "bytes": self.token_mint}},
        ]

    def fetch_token_balance(self, address: str) -> float:
        accounts = self.client.get_program_accounts(TOKEN_PROGRAM_ID, self.token_filters(address))
        if len(accounts) > 1:
            logger.debug("%s holds %d accounts for %s", address, len(accounts), self.token_mint)
        return sum((token_account_amount(a) for a in accounts), 0.0)

    def fetch_balance(self, address: str) -> WalletBalance:
        native = lamports_to_sol(self.client.get_balance(address))
        token = self.fetch_token_balance(address)
        return WalletBalance(address=address, native_balance=native, token_balance=token)

    def fetch_balances(self, addresses: list[str]) -> list[WalletBalance]:
        """
        Fetch balances for each address in order, one at a time.

        An address whose RPC calls fail is logged and left out of the
        result; the remaining addresses are still fetched.
        """
        balances = []
        for address in addresses:
            try:
                balances.append(self.fetch_balance(address))
            except RPCError as e:
                logger.warning("Skipping %s: %s", address, e)
        return balances
