"""
Hand landmark geometry: finger straightness, extension, pointing direction.

All functions here are pure and operate on a single hand's 21 landmarks.
"""
import math
from typing import Dict, List, Sequence, Tuple

import numpy as np

from .types import (
    FINGER_NAMES,
    POINTING_NONE,
    FingerMetrics,
    HandClassification,
    HandFrame,
    Landmark,
)


WRIST = 0

# base, joint, joint, tip for each finger
FINGER_LANDMARKS: Dict[str, Tuple[int, int, int, int]] = {
    "thumb": (1, 2, 3, 4),
    "index": (5, 6, 7, 8),
    "middle": (9, 10, 11, 12),
    "ring": (13, 14, 15, 16),
    "pinky": (17, 18, 19, 20),
}

THUMB_KNUCKLE = 2
THUMB_TIP = 4
PINKY_BASE = 17
INDEX_BASE = 5
INDEX_TIP = 8

MIN_LINE_LENGTH = 1e-4
EXTENSION_THRESHOLD = 0.6

# Angle-based extension, used only for the open-hand statistic
FINGER_ANGLE_THRESHOLD = 2.8  # rad, ~160 degrees
THUMB_ANGLE_THRESHOLD = math.pi / 4

# Sectors start at -22.5 degrees and run clockwise in image space (y grows down)
DIRECTIONS = (
    "right",
    "down-right",
    "down",
    "down-left",
    "left",
    "up-left",
    "up",
    "up-right",
)
SECTOR_WIDTH = 45.0
SECTOR_OFFSET = 22.5


def _point(lm: Landmark) -> np.ndarray:
    return np.array([lm.x, lm.y, lm.z], dtype=float)


def _angle_between(v1: np.ndarray, v2: np.ndarray) -> float:
    """Angle in radians between two vectors, 0 if either is zero-length."""
    n1 = np.linalg.norm(v1)
    n2 = np.linalg.norm(v2)
    if n1 == 0 or n2 == 0:
        return 0.0
    cos = float(np.dot(v1, v2) / (n1 * n2))
    return math.acos(max(-1.0, min(1.0, cos)))


def finger_straightness(base: Landmark, joint1: Landmark, joint2: Landmark, tip: Landmark) -> float:
    """
    Score how close a finger's interior joints lie to its base-tip line.

    Args:
        base: Finger base landmark
        joint1: First interior joint
        joint2: Second interior joint
        tip: Fingertip landmark

    Returns:
        Straightness in [0, 1]; 1 for a perfectly straight finger and 0 for a
        degenerate one (base and tip closer than MIN_LINE_LENGTH)
    """
    start = _point(base)
    line = _point(tip) - start
    length = float(np.linalg.norm(line))
    if length < MIN_LINE_LENGTH:
        return 0.0

    direction = line / length
    total_deviation = 0.0
    for joint in (joint1, joint2):
        offset = _point(joint) - start
        projected = np.dot(offset, direction) * direction
        total_deviation += float(np.linalg.norm(offset - projected))

    return max(0.0, 1.0 - total_deviation / (0.5 * length))


def is_finger_extended(straightness: float, threshold: float = EXTENSION_THRESHOLD) -> bool:
    """Straightness-based extension, the signal the gesture state machine uses."""
    return straightness > threshold


def is_finger_extended_by_angle(landmarks: Sequence[Landmark], finger: str) -> bool:
    """
    Legacy angle-based extension check.

    For the four fingers this is the bend at the distal interior joint; the
    thumb is compared against the wrist-to-pinky-base direction instead.
    """
    if finger == "thumb":
        thumb = _point(landmarks[THUMB_TIP]) - _point(landmarks[THUMB_KNUCKLE])
        palm = _point(landmarks[PINKY_BASE]) - _point(landmarks[WRIST])
        return _angle_between(thumb, palm) > THUMB_ANGLE_THRESHOLD

    base_idx, _, mid_idx, tip_idx = FINGER_LANDMARKS[finger]
    mid = _point(landmarks[mid_idx])
    to_base = _point(landmarks[base_idx]) - mid
    to_tip = _point(landmarks[tip_idx]) - mid
    return _angle_between(to_base, to_tip) > FINGER_ANGLE_THRESHOLD


def finger_metrics(landmarks: Sequence[Landmark], threshold: float = EXTENSION_THRESHOLD) -> FingerMetrics:
    """Compute straightness and both extension flags for every finger."""
    straightness = {}
    extended = {}
    angle_extended = {}
    for name in FINGER_NAMES:
        base, joint1, joint2, tip = (landmarks[i] for i in FINGER_LANDMARKS[name])
        score = finger_straightness(base, joint1, joint2, tip)
        straightness[name] = score
        extended[name] = is_finger_extended(score, threshold)
        angle_extended[name] = is_finger_extended_by_angle(landmarks, name)
    return FingerMetrics(
        straightness=straightness,
        extended=extended,
        angle_extended=angle_extended,
    )


def open_hand_confidence(metrics: FingerMetrics) -> Tuple[bool, float]:
    """
    Open-hand statistic from the angle-based flags.

    Returns:
        (is_open, confidence) where confidence is the extended share of the
        five fingers and is_open holds only when all five are extended
    """
    count = sum(1 for name in FINGER_NAMES if metrics.angle_extended[name])
    confidence = count / len(FINGER_NAMES)
    return count == len(FINGER_NAMES), confidence


def pointing_angle(landmarks: Sequence[Landmark]) -> float:
    """Index finger angle in degrees, base to tip, normalized to [0, 360)."""
    tip = landmarks[INDEX_TIP]
    base = landmarks[INDEX_BASE]
    angle = math.degrees(math.atan2(tip.y - base.y, tip.x - base.x))
    if angle < 0:
        angle += 360.0
    return angle % 360.0


def direction_from_angle(angle: float) -> str:
    """Bucket an angle into one of eight 45 degree sectors (lower bound inclusive)."""
    sector = int(((angle + SECTOR_OFFSET) % 360.0) // SECTOR_WIDTH)
    return DIRECTIONS[sector % len(DIRECTIONS)]


def pointing_direction(landmarks: Sequence[Landmark]) -> str:
    """
    Bucket the index finger's pointing angle into one of eight directions.

    Returns "none" when the index base and tip are closer than 1e-4 in the
    image plane, rather than the "right" that atan2(0, 0) would give.
    """
    tip = landmarks[INDEX_TIP]
    base = landmarks[INDEX_BASE]
    if math.hypot(tip.x - base.x, tip.y - base.y) < MIN_LINE_LENGTH:
        return POINTING_NONE
    return direction_from_angle(pointing_angle(landmarks))


def palm_center(landmarks: Sequence[Landmark]) -> Tuple[float, float]:
    """
    Calculate the center of the palm.

    Args:
        landmarks: List of 21 hand landmarks

    Returns:
        (x, y) coordinates of palm center in [0..1] range
    """
    # wrist plus the four finger bases
    palm_indices = [0, 5, 9, 13, 17]

    x_sum = sum(landmarks[i].x for i in palm_indices)
    y_sum = sum(landmarks[i].y for i in palm_indices)

    return (x_sum / len(palm_indices), y_sum / len(palm_indices))


def mirror_landmarks(landmarks: Sequence[Landmark]) -> List[Landmark]:
    """Flip x so coordinates match a mirrored (selfie) view."""
    return [Landmark(x=1.0 - lm.x, y=lm.y, z=lm.z) for lm in landmarks]


def mirror_frame(frame: HandFrame) -> HandFrame:
    """Mirror a hand's landmarks; the detector label is left as reported."""
    return HandFrame(
        landmarks=mirror_landmarks(frame.landmarks),
        handedness=frame.handedness,
        confidence=frame.confidence,
    )


def analyze_hand(frame: HandFrame, extension_threshold: float = EXTENSION_THRESHOLD) -> HandClassification:
    """
    Classify one hand.

    Args:
        frame: Detected hand (already mirrored for presentation)
        extension_threshold: Straightness above which a finger is extended

    Returns:
        HandClassification for the frame
    """
    landmarks = frame.landmarks
    metrics = finger_metrics(landmarks, extension_threshold)
    is_open, open_confidence = open_hand_confidence(metrics)
    tip = landmarks[INDEX_TIP]

    return HandClassification(
        is_open=is_open,
        open_confidence=open_confidence,
        pointing_direction=pointing_direction(landmarks),
        coordinates=(tip.x, tip.y),
        confidence=frame.confidence,
        finger_straightness=metrics.straightness,
        extended_fingers=metrics.extended,
        detected=True,
    )
