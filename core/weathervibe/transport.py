"""
Weather Delivery Transports

Pushes a (condition, intensity) pair to every observer in a zone or to a
single observer. Delivery is fire-and-forget: failures are logged and
reported as "not delivered", never raised to the scheduler.
"""

import json
import logging
import os

import requests
from dotenv import load_dotenv

from .exceptions import TransportError
from .models import Condition

logger = logging.getLogger(__name__)


class Transport:
    """Interface for delivering weather to observers."""

    def broadcast_to_zone(self, zone_id: int, condition: Condition, intensity: float) -> bool:
        """Send to every observer in the zone. Returns True if anyone received it."""
        raise NotImplementedError

    def send_to_observer(self, observer_id: str, condition: Condition, intensity: float) -> None:
        raise NotImplementedError


class NullTransport(Transport):
    """Transport used when no relay is configured; nobody receives anything."""

    def broadcast_to_zone(self, zone_id: int, condition: Condition, intensity: float) -> bool:
        logger.debug(f"Zone {zone_id}: {condition.display_name} {intensity:.4f} (no relay)")
        return False

    def send_to_observer(self, observer_id: str, condition: Condition, intensity: float) -> None:
        logger.debug(f"Observer {observer_id}: {condition.display_name} {intensity:.4f} (no relay)")


class HttpTransport(Transport):
    """Posts weather packets to the game server's relay endpoint."""

    def __init__(self, base_url: str, token: str = "", timeout: float = 2):
        """Initialize relay transport.

        Args:
            base_url: Relay URL (e.g., "http://worldserver:8085")
            token: Bearer token for the relay
            timeout: Request timeout in seconds
        """
        self.base_url = base_url.rstrip("/")
        self.session = requests.Session()
        self.session.headers.update({"Content-Type": "application/json"})
        if token:
            self.session.headers.update({"Authorization": f"Bearer {token}"})
        self.timeout = timeout

    def _post(self, path: str, data: dict) -> dict:
        url = f"{self.base_url}{path}"
        try:
            response = self.session.post(url, json=data, timeout=self.timeout)
            response.raise_for_status()
        except requests.exceptions.RequestException as e:
            raise TransportError(f"Relay request to {url} failed: {e}") from e
        try:
            return response.json()
        except ValueError:
            return {}

    def broadcast_to_zone(self, zone_id: int, condition: Condition, intensity: float) -> bool:
        data = {"state": int(condition), "grade": intensity}
        try:
            body = self._post(f"/api/zones/{zone_id}/weather", data)
        except TransportError as e:
            logger.warning(str(e))
            return False
        return int(body.get("recipients", 0)) > 0

    def send_to_observer(self, observer_id: str, condition: Condition, intensity: float) -> None:
        data = {"state": int(condition), "grade": intensity}
        try:
            self._post(f"/api/observers/{observer_id}/weather", data)
        except TransportError as e:
            logger.warning(str(e))


def get_relay_config() -> dict:
    """Load relay config from options.json or fallback to .env."""
    config = {"url": "", "token": ""}

    # 1. Try load from Home Assistant style options.json
    try:
        if os.path.exists("/data/options.json"):
            with open("/data/options.json") as f:
                options = json.load(f)
            relay = options.get("relay", {})
            config.update({"url": relay.get("url", ""), "token": relay.get("token", "")})
            logger.debug("Loaded relay config from options.json")
    except (OSError, ValueError) as e:
        logger.warning(f"Failed to load options.json: {e}")

    # 2. Fallback to environment / .env
    if not config["url"]:
        load_dotenv()
        config.update(
            {
                "url": os.getenv("WEATHERVIBE_RELAY_URL", ""),
                "token": os.getenv("WEATHERVIBE_RELAY_TOKEN", ""),
            }
        )
        logger.debug("Loaded relay config from environment")

    return config


def create_transport() -> Transport:
    """HTTP relay transport if configured, otherwise the null transport."""
    config = get_relay_config()
    if config["url"]:
        logger.info(f"Relay transport: {config['url']}")
        return HttpTransport(config["url"], config["token"])
    logger.warning("No relay configured, pushes will not reach observers")
    return NullTransport()
