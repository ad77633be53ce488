"""
Type definitions for the gesture light control pipeline.
"""
from dataclasses import dataclass, field
from typing import Dict, List, Optional, Protocol, Tuple, runtime_checkable


NUM_LANDMARKS = 21

FINGER_NAMES = ("thumb", "index", "middle", "ring", "pinky")

POINTING_NONE = "none"


class InputUnavailable(Exception):
    """Raised when a frame cannot be processed (no usable surface or size)."""


@dataclass(frozen=True)
class Landmark:
    """One hand landmark in normalized image space (z is depth relative to the wrist)."""
    x: float
    y: float
    z: float = 0.0


@dataclass
class HandFrame:
    """One detected hand as reported by the detector for a single frame."""
    landmarks: List[Landmark]
    handedness: str  # detector label, "left" or "right", before mirroring
    confidence: float

    def __post_init__(self):
        if len(self.landmarks) != NUM_LANDMARKS:
            raise ValueError(
                f"Expected {NUM_LANDMARKS} landmarks, got {len(self.landmarks)}"
            )
        self.handedness = self.handedness.lower()


@dataclass
class FingerMetrics:
    """Per-finger measurements for one hand."""
    straightness: Dict[str, float]
    extended: Dict[str, bool]  # straightness-based, drives the gesture machine
    angle_extended: Dict[str, bool]  # angle-based, drives only the open-hand stat


def _zero_fingers(value):
    return {name: value for name in FINGER_NAMES}


@dataclass
class HandClassification:
    """Classification of one hand in one frame."""
    is_open: bool = False
    open_confidence: float = 0.0
    pointing_direction: str = POINTING_NONE
    coordinates: Tuple[float, float] = (0.0, 0.0)  # index fingertip
    confidence: float = 0.0
    finger_straightness: Dict[str, float] = field(default_factory=lambda: _zero_fingers(0.0))
    extended_fingers: Dict[str, bool] = field(default_factory=lambda: _zero_fingers(False))
    detected: bool = False

    @classmethod
    def neutral(cls) -> "HandClassification":
        """Classification used for a side with no detected hand."""
        return cls()


@dataclass
class HandsSnapshot:
    """Both hands from the user's point of view for one frame."""
    left: HandClassification = field(default_factory=HandClassification.neutral)
    right: HandClassification = field(default_factory=HandClassification.neutral)


@dataclass(frozen=True)
class GestureState:
    """
    Persistent gesture-control state, replaced wholesale on every frame.

    The default value is the initial (idle) state.
    """
    activation_frames: int = 0
    deactivation_frames: int = 0
    is_gesture_control_active: bool = False
    brightness_control_frames: int = 0
    is_brightness_control: bool = False
    initial_x: Optional[float] = None
    initial_y: Optional[float] = None

    def public_view(self) -> Dict[str, object]:
        """Fields exposed to rendering and telemetry."""
        return {
            "activation_frames": self.activation_frames,
            "is_gesture_control_active": self.is_gesture_control_active,
            "brightness_control_frames": self.brightness_control_frames,
            "is_brightness_control": self.is_brightness_control,
        }


@dataclass
class BrightnessCommand:
    """Command to set the light brightness to a percentage."""
    percent: int  # 0..100 in steps of 5
    x: float  # pinned to the anchor captured on sub-mode entry
    y: float  # tracked index fingertip, normalized


@dataclass
class FrameEvent:
    """Everything the pipeline needs for one processed video frame."""
    hands: List[HandFrame]
    frame_wh: Tuple[int, int]

    def validate(self) -> None:
        width, height = self.frame_wh
        if width <= 0 or height <= 0:
            raise InputUnavailable(f"Frame surface not ready ({width}x{height})")


@dataclass
class FrameResult:
    """Outcome of processing one frame."""
    command: Optional[BrightnessCommand]
    hands: HandsSnapshot
    state: GestureState
    skipped: bool = False


@runtime_checkable
class BrightnessSinkProto(Protocol):
    """Abstract protocol for devices that receive the brightness percentage."""

    async def set_brightness(self, percent: int) -> None:
        """Apply a brightness percentage (0..100)."""
        ...
