"""
Gesture Light Control

Turns per-frame MediaPipe hand landmarks into a debounced light-control mode
and a brightness percentage for a smart light.
"""

__version__ = "0.1.0"
__author__ = "Gesture Light Control Team"

from .types import (
    BrightnessCommand,
    BrightnessSinkProto,
    FrameEvent,
    FrameResult,
    GestureState,
    HandClassification,
    HandFrame,
    HandsSnapshot,
    InputUnavailable,
    Landmark,
)
from .config import load_config, Cfg
from .controller_mock import MockBrightnessController
from .landmarks import analyze_hand, finger_straightness, pointing_direction, mirror_frame
from .assignment import assign_hands
from .brightness import BrightnessMapper, snap_to_step
from .gestures import GestureStateMachine, GestureProcessor

__all__ = [
    "BrightnessCommand",
    "BrightnessSinkProto",
    "FrameEvent",
    "FrameResult",
    "GestureState",
    "HandClassification",
    "HandFrame",
    "HandsSnapshot",
    "InputUnavailable",
    "Landmark",
    "load_config",
    "Cfg",
    "MockBrightnessController",
    "analyze_hand",
    "finger_straightness",
    "pointing_direction",
    "mirror_frame",
    "assign_hands",
    "BrightnessMapper",
    "snap_to_step",
    "GestureStateMachine",
    "GestureProcessor",
]
