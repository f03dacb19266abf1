"""Per-chain settings kept in dotenv files.

Lookup order, later wins: ``$XDG_CONFIG_HOME/merter/<file>``, ``./<file>``,
then the process environment.
"""

import logging
import os
from dataclasses import dataclass
from pathlib import Path

from dotenv import dotenv_values, set_key

from scanner.errors import InputError
from scanner.models import EndpointConfig, Endpoints

logger = logging.getLogger(__name__)

CHAIN_FILES = {
    "eth": ".ethconf.env",
    "bsc": ".bscconf.env",
}

KEYS = {
    "url_1": "JSONRPC_URL_1",
    "url_2": "JSONRPC_URL_2",
    "latency_1": "JSONRPC_LATENCY_1",
    "latency_2": "JSONRPC_LATENCY_2",
    "db_path": "STORAGE_DB_PATH",
    "file_path": "STORAGE_FILE_PATH",
    "scan_key": "SCAN_API_KEY",
    "mythx_key": "MYTHX_API_KEY",
}


@dataclass(frozen=True)
class Settings:
    url_1: str
    url_2: str = ""
    latency_1: int = 0
    latency_2: int = 0
    db_path: str = ""
    file_path: str = ""
    scan_key: str = ""
    mythx_key: str = ""

    def endpoints(self) -> Endpoints:
        return Endpoints(
            primary=EndpointConfig(self.url_1, self.latency_1),
            secondary=EndpointConfig(self.url_2, self.latency_2),
        )


def chain_file(chain: str) -> str:
    try:
        return CHAIN_FILES[chain]
    except KeyError:
        raise InputError(f"unknown chain {chain!r}, expected one of {sorted(CHAIN_FILES)}") from None


def config_dir() -> Path:
    base = os.getenv("XDG_CONFIG_HOME") or str(Path.home() / ".config")
    return Path(base) / "merter"


def config_path(chain: str) -> Path:
    return config_dir() / chain_file(chain)


def local_path(chain: str) -> Path:
    return Path.cwd() / chain_file(chain)


def _latency(raw: str | None, key: str) -> int:
    if raw is None or raw == "":
        return 0
    try:
        value = int(raw)
    except ValueError:
        raise InputError(f"{key} must be a whole number of milliseconds, got {raw!r}") from None
    if value < 0:
        raise InputError(f"{key} must not be negative")
    return value


def load_settings(chain: str) -> Settings:
    merged: dict[str, str] = {}
    for path in (config_path(chain), local_path(chain)):
        if path.is_file():
            merged.update({k: v for k, v in dotenv_values(path).items() if v is not None})
    for env_key in KEYS.values():
        if os.getenv(env_key) is not None:
            merged[env_key] = os.environ[env_key]

    if not merged.get(KEYS["url_1"]):
        raise InputError(f"{KEYS['url_1']} is not set for {chain}, try running merter --config --{chain}")

    return Settings(
        url_1=merged[KEYS["url_1"]],
        url_2=merged.get(KEYS["url_2"], ""),
        latency_1=_latency(merged.get(KEYS["latency_1"]), KEYS["latency_1"]),
        latency_2=_latency(merged.get(KEYS["latency_2"]), KEYS["latency_2"]),
        db_path=merged.get(KEYS["db_path"], ""),
        file_path=merged.get(KEYS["file_path"], ""),
        scan_key=merged.get(KEYS["scan_key"], ""),
        mythx_key=merged.get(KEYS["mythx_key"], ""),
    )


def save_settings(chain: str, settings: Settings) -> Path:
    path = config_path(chain)
    try:
        path.parent.mkdir(parents=True, exist_ok=True)
    except OSError as e:
        logger.warning("Can't create %s (%s), falling back to working directory", path.parent, e)
        path = local_path(chain)

    path.touch(exist_ok=True)
    for field, env_key in KEYS.items():
        set_key(path, env_key, str(getattr(settings, field)))
    return path
