"""
HTTP client for the Press Blockchain gateway.

The gateway performs every blockchain operation (outlet creation, token
deployment, exchange listing, vote tallying). This module only knows the
fixed JSON contract: POST with a JSON body, GET with a query string, and a
reply carrying at least an `ok` boolean.

GatewayClient methods never raise past the boundary. Failures come back as
{"ok": False, "error": "...", "error_kind": "..."}.
"""
import logging
import time
from typing import Any, Dict, Optional

import requests

from press_sync.config import OutletConfig, save_config_value
from press_sync.errors import GatewayUnreachable, NonJSONResponse, PressSyncError, ValidationError

logger = logging.getLogger(__name__)


def _decode(response: requests.Response, url: str) -> Dict[str, Any]:
    try:
        data = response.json()
    except ValueError:
        body = (response.text or "")[:200]
        raise NonJSONResponse(f"Non-JSON response from {url}: {body}")
    if not isinstance(data, dict) or not data:
        raise NonJSONResponse(f"Unexpected response shape from {url}: {data!r}")
    return data


def post_json(url: str, payload: Dict[str, Any], timeout: int) -> Dict[str, Any]:
    """
    POST a JSON body and decode the JSON reply.

    Raises:
        GatewayUnreachable: network error or timeout
        NonJSONResponse: body is not a non-empty JSON object
    """
    try:
        response = requests.post(
            url,
            json=payload,
            headers={"Content-Type": "application/json"},
            timeout=timeout,
        )
    except requests.RequestException as e:
        logger.warning("POST %s failed: %s", url, e)
        raise GatewayUnreachable(f"Request to {url} failed: {e}")
    return _decode(response, url)


def get_json(url: str, timeout: int, params: Optional[Dict[str, Any]] = None) -> Dict[str, Any]:
    """GET and decode the JSON reply. Raises like post_json()."""
    try:
        response = requests.get(url, params=params, timeout=timeout)
    except requests.RequestException as e:
        logger.warning("GET %s failed: %s", url, e)
        raise GatewayUnreachable(f"Request to {url} failed: {e}")
    return _decode(response, url)


class GatewayClient:
    """Thin proxy for the gateway's outlet, token, exchange and vote endpoints."""

    def __init__(self, config: OutletConfig):
        self.config = config

    @property
    def base_url(self) -> str:
        return self.config.gateway_url.rstrip("/")

    def _post(self, path: str, body: Dict[str, Any]) -> Dict[str, Any]:
        try:
            return post_json(self.base_url + path, body, self.config.gateway_post_seconds)
        except PressSyncError as e:
            return e.to_dict()

    def _get(self, path: str) -> Dict[str, Any]:
        try:
            return get_json(self.base_url + path, self.config.gateway_get_seconds)
        except PressSyncError as e:
            return e.to_dict()

    # ── Outlet onboarding ────────────────────────────────────────────

    def create_outlet(
        self,
        name: str,
        domain: str,
        owner_private_key: Optional[str] = None,
    ) -> Dict[str, Any]:
        """
        Register this outlet with the gateway.

        On success the domain becomes the configured outlet domain, both on
        this client's config and in the config file.
        """
        name = (name or "").strip()
        domain = (domain or "").strip()
        if not name or not domain:
            return ValidationError("Missing name/domain").to_dict()

        result = self._post("/api/outlets/create", {
            "name": name,
            "domain": domain,
            "owner_private_key": owner_private_key,
        })
        if result.get("ok"):
            logger.info("Outlet %s created (outlet_id=%s)", domain, result.get("outlet_id"))
            self.config.outlet_domain = domain
            save_config_value("outlet_domain", domain)
        return result

    def deploy_outlet_token(
        self,
        token_name: str,
        token_symbol: str,
        minted_supply_wei: str = "0",
        test_transfer_to_self_wei: str = "0",
        domain: Optional[str] = None,
        owner_private_key: Optional[str] = None,
    ) -> Dict[str, Any]:
        """Deploy the outlet's token. Domain defaults to the configured outlet."""
        return self._post("/api/outlets/token/deploy", {
            "domain": domain or self.config.outlet_domain,
            "token_name": token_name or "",
            "token_symbol": token_symbol or "",
            "minted_supply_wei": str(minted_supply_wei or "0"),
            "test_transfer_to_self_wei": str(test_transfer_to_self_wei or "0"),
            "owner_private_key": owner_private_key,
        })

    def list_token(
        self,
        token_address: str,
        tier: int = 1,
        domain: Optional[str] = None,
        owner_private_key: Optional[str] = None,
    ) -> Dict[str, Any]:
        """List the outlet token on the exchange at the given tier."""
        return self._post("/api/exchange/list", {
            "domain": domain or self.config.outlet_domain,
            "token_address": token_address or "",
            "tier": int(tier),
            "owner_private_key": owner_private_key,
        })

    # ── Reads ────────────────────────────────────────────────────────

    def outlet_info(self) -> Dict[str, Any]:
        return self._get("/api/outlet/info")

    def approval_defaults(self) -> Dict[str, Any]:
        return self._get("/api/articles/approval_defaults")

    def article_votes(self, article_id) -> Dict[str, Any]:
        return self._get(f"/api/articles/votes/{article_id}")

    def get_outlet_status(self) -> Dict[str, Any]:
        """Configured outlet values plus whatever the gateway reports."""
        return {
            "ok": True,
            "gateway": self.base_url,
            "outlet_domain": self.config.outlet_domain,
            "rpc_url": self.config.rpc_url,
            "press_token": self.config.press_token,
            "treasury_wallet": self.config.treasury_wallet,
            "publish_fee_press": self.config.publish_fee_press,
            "moderation_configured": bool(self.config.ai_endpoint),
            "vote_source": self.config.vote_source,
            "contracts": self.outlet_info(),
            "note": "If contracts are empty, the deployer stack may not be running "
                    "or the gateway is misconfigured.",
        }

    def ping(self) -> Dict[str, Any]:
        return {"ok": True, "rpc": self.config.rpc_url, "time": int(time.time())}
