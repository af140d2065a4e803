"""
Configuration for the Press SYNC gateway.

Config file: ~/.press-sync/config.json (directory overridable with
PRESS_SYNC_DATA_DIR).

Environment variables override file values:
- PRESS_SYNC_GATEWAY_URL: gateway base URL
- PRESS_SYNC_INSTALLER_API: installer API (fee verifier) base URL
- PRESS_SYNC_AI_ENDPOINT: moderation endpoint
- PRESS_SYNC_DATABASE_URL: SQLAlchemy URL for the local store
"""
import json
import logging
import os
from dataclasses import dataclass, fields
from pathlib import Path
from typing import Any, Dict, List, Optional

logger = logging.getLogger(__name__)

CONFIG_FILE_NAME = "config.json"
DEFAULT_DATA_DIR = Path.home() / ".press-sync"

_DEFAULTS: Dict[str, Any] = {
    "gateway_url": "https://deploy.pressblockchain.io",
    "installer_api": "http://deploy.pressblockchain.io",
    "rpc_url": "https://rpc.pressblockchain.io",
    "press_token": "",
    "treasury_wallet": "",
    "publish_fee_press": 25.0,
    "ai_endpoint": "",
    "outlet_domain": "",
    "coauthor_fee_press": 0.0,
    "arweave_import_fee_wei": "1000000000000000000",
    "arweave_import_bond_wei": "5000000000000000000",
    "vote_source": "local",
    "database_url": None,
    "timeouts": {
        "gateway_post_seconds": 30,
        "gateway_get_seconds": 20,
        "fee_verify_seconds": 25,
        "moderation_seconds": 20,
        "vote_proxy_seconds": 5,
    },
}

_ENV_OVERRIDES = {
    "PRESS_SYNC_GATEWAY_URL": "gateway_url",
    "PRESS_SYNC_INSTALLER_API": "installer_api",
    "PRESS_SYNC_AI_ENDPOINT": "ai_endpoint",
    "PRESS_SYNC_DATABASE_URL": "database_url",
}

VOTE_SOURCES = ("local", "gateway")


@dataclass
class OutletConfig:
    """Outlet settings. Passed explicitly into every component."""
    gateway_url: str = "https://deploy.pressblockchain.io"
    installer_api: str = "http://deploy.pressblockchain.io"
    rpc_url: str = "https://rpc.pressblockchain.io"
    press_token: str = ""
    treasury_wallet: str = ""
    publish_fee_press: Optional[float] = 25.0
    ai_endpoint: str = ""
    outlet_domain: str = ""
    coauthor_fee_press: float = 0.0
    arweave_import_fee_wei: str = "1000000000000000000"
    arweave_import_bond_wei: str = "5000000000000000000"
    vote_source: str = "local"
    database_url: Optional[str] = None
    gateway_post_seconds: int = 30
    gateway_get_seconds: int = 20
    fee_verify_seconds: int = 25
    moderation_seconds: int = 20
    vote_proxy_seconds: int = 5

    def missing_payment_settings(self) -> List[str]:
        """Names of settings fee verification cannot run without."""
        missing = []
        if not self.rpc_url:
            missing.append("rpc_url")
        if not self.press_token:
            missing.append("press_token")
        if not self.treasury_wallet:
            missing.append("treasury_wallet")
        if not self.installer_api:
            missing.append("installer_api")
        if self.publish_fee_press is None:
            missing.append("publish_fee_press")
        return missing


def get_data_dir() -> Path:
    return Path(os.environ.get("PRESS_SYNC_DATA_DIR", DEFAULT_DATA_DIR))


def get_config_path() -> Path:
    """Get the path to the config file."""
    return get_data_dir() / CONFIG_FILE_NAME


def _load_json_file(path: Path) -> dict:
    """Load a JSON file, return empty dict if missing or invalid."""
    try:
        if path.exists():
            with open(path, "r", encoding="utf-8") as f:
                return json.load(f)
    except (json.JSONDecodeError, OSError) as e:
        logger.warning("Could not load config from %s: %s", path, e)
    return {}


def _to_float(value: Any) -> Optional[float]:
    if value is None or value == "":
        return None
    try:
        return float(value)
    except (TypeError, ValueError):
        logger.warning("Ignoring non-numeric fee setting: %r", value)
        return None


def load_config() -> OutletConfig:
    """
    Load outlet configuration.

    Merges defaults with config file values, then applies environment
    overrides. Unknown keys in the file are ignored.
    """
    data = _load_json_file(get_config_path())

    merged = {**_DEFAULTS, **data}
    timeouts = {**_DEFAULTS["timeouts"], **(data.get("timeouts") or {})}

    for env_name, key in _ENV_OVERRIDES.items():
        if os.environ.get(env_name):
            merged[key] = os.environ[env_name]

    vote_source = merged.get("vote_source") or "local"
    if vote_source not in VOTE_SOURCES:
        logger.warning("Unknown vote_source %r, falling back to 'local'", vote_source)
        vote_source = "local"

    return OutletConfig(
        gateway_url=(merged.get("gateway_url") or "").rstrip("/"),
        installer_api=(merged.get("installer_api") or "").rstrip("/"),
        rpc_url=merged.get("rpc_url") or "",
        press_token=merged.get("press_token") or "",
        treasury_wallet=merged.get("treasury_wallet") or "",
        publish_fee_press=_to_float(merged.get("publish_fee_press")),
        ai_endpoint=merged.get("ai_endpoint") or "",
        outlet_domain=merged.get("outlet_domain") or "",
        coauthor_fee_press=_to_float(merged.get("coauthor_fee_press")) or 0.0,
        arweave_import_fee_wei=str(merged.get("arweave_import_fee_wei") or "0"),
        arweave_import_bond_wei=str(merged.get("arweave_import_bond_wei") or "0"),
        vote_source=vote_source,
        database_url=merged.get("database_url"),
        gateway_post_seconds=int(timeouts["gateway_post_seconds"]),
        gateway_get_seconds=int(timeouts["gateway_get_seconds"]),
        fee_verify_seconds=int(timeouts["fee_verify_seconds"]),
        moderation_seconds=int(timeouts["moderation_seconds"]),
        vote_proxy_seconds=int(timeouts["vote_proxy_seconds"]),
    )


def save_config_value(key: str, value: Any) -> None:
    """
    Persist a single setting to the config file.

    Args:
        key: A top-level OutletConfig field name
        value: JSON-serializable value
    """
    valid = {f.name for f in fields(OutletConfig)}
    if key not in valid:
        raise KeyError(f"Unknown config key: {key}")

    config_path = get_config_path()
    data = _load_json_file(config_path)
    data[key] = value

    config_path.parent.mkdir(parents=True, exist_ok=True)
    with open(config_path, "w", encoding="utf-8") as f:
        json.dump(data, f, indent=2)
