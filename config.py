"""Settings from the environment and the wallet list from wallets.json."""

import json
import os
from dataclasses import dataclass, field
from typing import List

DEFAULT_WALLETS_FILE = "wallets.json"
DEFAULT_TOKEN_MINT = "G2jXu2puUqyQsXmcL7SammGfkHX734wLZPce7yDepump"
DEFAULT_DATABASE_URL = "sqlite+aiosqlite:///./wallets.db"


class ConfigError(Exception):
    pass


@dataclass
class WalletGroups:
    primary: List[str] = field(default_factory=list)
    secondary: List[str] = field(default_factory=list)


@dataclass
class Settings:
    rpc_endpoint: str
    token_mint: str = DEFAULT_TOKEN_MINT
    database_url: str = DEFAULT_DATABASE_URL
    wallets_file: str = DEFAULT_WALLETS_FILE
    scan_interval: float = 80.0
    throttle: float = 0.4
    rpc_timeout: float = 30.0
    host: str = "0.0.0.0"
    port: int = 3000
    report_path: str = "/"
    log_level: str = "INFO"

    @classmethod
    def from_env(cls, env=None) -> "Settings":
        env = os.environ if env is None else env

        rpc_endpoint = env.get("RPC_ENDPOINT", "").strip()
        if not rpc_endpoint:
            raise ConfigError("RPC_ENDPOINT is not set")

        report_path = env.get("REPORT_PATH", "/")
        if not report_path.startswith("/"):
            report_path = "/" + report_path

        return cls(
            rpc_endpoint=rpc_endpoint,
            token_mint=env.get("TOKEN_MINT", DEFAULT_TOKEN_MINT),
            database_url=env.get("DATABASE_URL", DEFAULT_DATABASE_URL),
            wallets_file=env.get("WALLETS_FILE", DEFAULT_WALLETS_FILE),
            scan_interval=_number(env, "SCAN_INTERVAL", 80, float),
            throttle=_number(env, "THROTTLE_MS", 400, float) / 1000,
            rpc_timeout=_number(env, "RPC_TIMEOUT", 30, float),
            host=env.get("HOST", "0.0.0.0"),
            port=_number(env, "PORT", 3000, int),
            report_path=report_path,
            log_level=env.get("LOG_LEVEL", "INFO").upper(),
        )


def _number(env, name, default, kind):
    raw = env.get(name)
    if raw is None or raw == "":
        return kind(default)
    try:
        value = kind(raw)
    except ValueError:
        raise ConfigError(f"{name} must be a number, got {raw!r}")
    if value < 0:
        raise ConfigError(f"{name} must not be negative")
    return value


def load_wallets(path: str = DEFAULT_WALLETS_FILE) -> WalletGroups:
    """
    Read the two wallet groups from a JSON file.

    The file must hold an object with `primaryWallets` and
    `secondaryWallets`, both arrays of address strings. Anything else
    raises ConfigError; there is no fallback config.
    """
    if not os.path.isfile(path):
        raise ConfigError(
            f"{path} not found. Copy wallets.json.example to {path} "
            "and configure your wallet addresses."
        )

    try:
        with open(path, "r", encoding="utf-8") as f:
            data = json.load(f)
    except json.JSONDecodeError as e:
        raise ConfigError(f"Invalid JSON in {path}: {e}")
    except UnicodeDecodeError as e:
        raise ConfigError(f"{path} is not valid UTF-8: {e}")
    except OSError as e:
        raise ConfigError(f"Cannot read {path}: {e}")

    if not isinstance(data, dict):
        raise ConfigError(f"{path} must contain a JSON object")

    groups = {}
    for key in ("primaryWallets", "secondaryWallets"):
        wallets = data.get(key)
        if not isinstance(wallets, list):
            raise ConfigError(f"{path} must contain '{key}' array")
        if not all(isinstance(w, str) for w in wallets):
            raise ConfigError(f"'{key}' in {path} must only hold address strings")
        groups[key] = wallets

    return WalletGroups(primary=groups["primaryWallets"], secondary=groups["secondaryWallets"])
