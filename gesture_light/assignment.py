"""
Assign detected hands to the user's left and right side.
"""
import logging
from typing import Dict, Iterable

from .landmarks import EXTENSION_THRESHOLD, analyze_hand
from .types import HandClassification, HandFrame, HandsSnapshot

logger = logging.getLogger(__name__)

# The detector labels hands before the view is mirrored, so its "left" is the
# user's right hand.
USER_SIDE_FOR_LABEL: Dict[str, str] = {
    "left": "right",
    "right": "left",
}


def assign_hands(frames: Iterable[HandFrame], extension_threshold: float = EXTENSION_THRESHOLD) -> HandsSnapshot:
    """
    Build the per-frame hands snapshot.

    Args:
        frames: Hands reported by the detector for one frame, x already mirrored
        extension_threshold: Passed through to the geometry analyzer

    Returns:
        HandsSnapshot with at most one hand per side; missing sides are neutral
    """
    assigned: Dict[str, HandClassification] = {}

    for frame in frames:
        side = USER_SIDE_FOR_LABEL.get(frame.handedness)
        if side is None:
            logger.debug(f"Dropping hand with unknown label {frame.handedness!r}")
            continue
        if side in assigned:
            logger.debug(f"Dropping duplicate {frame.handedness!r} hand")
            continue
        assigned[side] = analyze_hand(frame, extension_threshold)

    return HandsSnapshot(
        left=assigned.get("left", HandClassification.neutral()),
        right=assigned.get("right", HandClassification.neutral()),
    )
