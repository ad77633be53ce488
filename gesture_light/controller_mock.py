"""
Mock brightness controller for testing gesture commands.
"""
from typing import Optional


class MockBrightnessController:
    """Mock controller that prints brightness changes instead of applying them."""

    def __init__(self):
        """Initialize the mock controller."""
        self.brightness_count = 0
        self.last_percent: Optional[int] = None

    async def set_brightness(self, percent: int) -> None:
        """Print brightness command instead of executing it."""
        self.brightness_count += 1
        self.last_percent = percent
        print(f"[MockBrightnessController] Brightness: {percent}% (call #{self.brightness_count})")

    def reset_counters(self) -> None:
        """Reset action counters for testing."""
        self.brightness_count = 0
        self.last_percent = None
