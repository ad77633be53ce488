"""
Philips Hue bridge controller that applies brightness percentages to one light.
"""
import asyncio
import logging
import os
from dataclasses import dataclass
from typing import Any, Optional

import requests
from dotenv import load_dotenv

from .brightness import percent_to_hue_brightness
from .config import Cfg

logger = logging.getLogger(__name__)


class HueBridgeError(requests.RequestException):
    """The bridge answered, but with an error list instead of a result."""


def _check_reply(data: Any) -> Any:
    """Raise HueBridgeError if the bridge replied with 'error' objects."""
    if isinstance(data, list):
        errors = [item["error"] for item in data if isinstance(item, dict) and "error" in item]
        if errors:
            description = "; ".join(
                str(error.get("description", error)) if isinstance(error, dict) else str(error)
                for error in errors
            )
            raise HueBridgeError(description)
    return data


@dataclass
class LightState:
    """The subset of the Hue light object we care about."""
    on: bool
    bri: int


class HueController:
    """Controller that drives a Hue light through the bridge's REST API."""

    def __init__(self, bridge: str, username: str, light_id: int, timeout_s: float = 2.0,
                 session: Optional[requests.Session] = None):
        """
        Initialize the Hue controller.

        Args:
            bridge: Bridge host or IP address
            username: Whitelisted bridge username (API key)
            light_id: Numeric id of the light to control
            timeout_s: Timeout for each HTTP request
            session: Optional requests session, mainly for tests
        """
        self.base_url = f"http://{bridge}/api/{username}/lights/{light_id}"
        self.timeout_s = timeout_s
        self.session = session or requests.Session()
        self.state: Optional[LightState] = None
        self.last_sent_bri: Optional[int] = None

    @classmethod
    def from_config(cls, cfg: Cfg) -> "HueController":
        """Build a controller from config, letting HUE_* environment variables override it."""
        load_dotenv()

        bridge = os.getenv("HUE_BRIDGE") or cfg.hue.bridge
        username = os.getenv("HUE_USERNAME") or cfg.hue.username
        light_id = int(os.getenv("HUE_LIGHT_ID") or cfg.hue.light_id)

        if not bridge:
            raise ValueError("HUE_BRIDGE not found in environment variables or config")
        if not username:
            raise ValueError("HUE_USERNAME not found in environment variables or config")

        return cls(bridge, username, light_id, timeout_s=cfg.hue.timeout_s)

    def fetch_state(self) -> LightState:
        """GET the light and cache its on/brightness state."""
        response = self.session.get(self.base_url, timeout=self.timeout_s)
        response.raise_for_status()
        data = _check_reply(response.json())
        try:
            self.state = LightState(on=data["state"]["on"], bri=data["state"]["bri"])
        except (KeyError, TypeError) as e:
            raise HueBridgeError(f"Unexpected light payload: {data!r}") from e
        return self.state

    def update_state(self, **patch: Any) -> None:
        """PUT a partial state (e.g. on=True, bri=120) to the light."""
        response = self.session.put(f"{self.base_url}/state", json=patch, timeout=self.timeout_s)
        response.raise_for_status()
        _check_reply(response.json())

    def toggle(self) -> LightState:
        """Switch the light on or off, then re-read its state."""
        state = self.state or self.fetch_state()
        self.update_state(on=not state.on)
        return self.fetch_state()

    async def set_brightness(self, percent: int) -> None:
        """
        Apply a brightness percentage.

        Nothing is sent while the light is off or when the value is unchanged.
        HTTP failures are logged and the next frame simply tries again.
        """
        bri = percent_to_hue_brightness(percent)
        if bri == self.last_sent_bri:
            return

        try:
            if self.state is None:
                await asyncio.to_thread(self.fetch_state)
            if not self.state.on:
                logger.debug("Light is off, ignoring brightness change")
                return
            await asyncio.to_thread(self.update_state, bri=bri)
        except requests.RequestException as e:
            logger.error(f"Failed to update Hue light: {e}")
            return

        self.last_sent_bri = bri
        self.state = LightState(on=True, bri=bri)
        logger.debug(f"Hue brightness set to {percent}% (bri={bri})")

    def close(self) -> None:
        """Close the HTTP session."""
        self.session.close()
