"""
Gesture state machine that turns per-frame hand classifications into
light-control modes, and the processor that drives it frame by frame.
"""
import logging
from dataclasses import replace
from typing import Iterable, Iterator

from .assignment import assign_hands
from .brightness import BrightnessMapper
from .config import Cfg
from .types import (
    FrameEvent,
    FrameResult,
    GestureState,
    HandClassification,
    HandsSnapshot,
    InputUnavailable,
)

logger = logging.getLogger(__name__)

VERTICAL_DIRECTIONS = ("up", "down")


def is_activation_gesture(hand: HandClassification) -> bool:
    """Index and pinky extended, middle and ring folded."""
    fingers = hand.extended_fingers
    return (fingers["index"] and fingers["pinky"] and
            not fingers["middle"] and not fingers["ring"])


def is_pinky_down(hand: HandClassification) -> bool:
    fingers = hand.extended_fingers
    return fingers["index"] and not fingers["pinky"]


def is_pointing_horizontal(hand: HandClassification) -> bool:
    """Left or right, diagonals included."""
    direction = hand.pointing_direction
    return "left" in direction or "right" in direction


def is_pointing_vertical(hand: HandClassification) -> bool:
    """Straight up or down only; diagonals do not count."""
    return hand.pointing_direction in VERTICAL_DIRECTIONS


class GestureStateMachine:
    """
    Pure reducer over GestureState, driven by the user's right hand.

    Modes:
    - Idle -> Arming: index+pinky held; after activation_frames the light
      control mode becomes active
    - Active -> Brightness arming: pinky down while pointing sideways; after
      brightness_frames the brightness sub-mode engages and the fingertip
      position is captured as the anchor
    - Any active mode -> Idle: deactivation_frames consecutive frames with no
      hand, or with middle/ring raised or index folded; while such a streak is
      building no other transition happens
    """

    def __init__(self, cfg: Cfg):
        """Initialize the state machine with configuration."""
        self.cfg = cfg
        self.activation_frames = cfg.gestures.activation_frames
        self.deactivation_frames = cfg.gestures.deactivation_frames
        self.brightness_frames = cfg.gestures.brightness_frames

    def should_deactivate(self, state: GestureState, hand: HandClassification,
                          hand_detected: bool) -> bool:
        if not hand_detected:
            return True
        fingers = hand.extended_fingers
        return state.is_gesture_control_active and (
            fingers["middle"] or fingers["ring"] or not fingers["index"]
        )

    def reduce(self, state: GestureState, hands: HandsSnapshot, hand_detected: bool) -> GestureState:
        """
        Compute the next state.

        Args:
            state: Previous gesture state
            hands: Finalized hands snapshot for the current frame
            hand_detected: Whether the detector reported any hand this frame

        Returns:
            The next GestureState; the previous one is never modified
        """
        right = hands.right

        if self.should_deactivate(state, right, hand_detected):
            frames = state.deactivation_frames + 1
            if frames >= self.deactivation_frames:
                return GestureState()
            return replace(state, deactivation_frames=frames)

        if not state.is_gesture_control_active:
            if not is_activation_gesture(right):
                return GestureState()
            frames = state.activation_frames + 1
            return replace(
                state,
                activation_frames=frames,
                is_gesture_control_active=frames >= self.activation_frames,
                deactivation_frames=0,
            )

        pinky_down = is_pinky_down(right)

        if state.is_brightness_control and (is_pointing_vertical(right) or not pinky_down):
            return replace(
                state,
                is_brightness_control=False,
                brightness_control_frames=0,
                initial_x=None,
                initial_y=None,
                deactivation_frames=0,
            )

        if pinky_down and is_pointing_horizontal(right):
            if state.is_brightness_control:
                return replace(state, deactivation_frames=0)
            frames = state.brightness_control_frames + 1
            if frames >= self.brightness_frames:
                x, y = right.coordinates
                return replace(
                    state,
                    brightness_control_frames=frames,
                    is_brightness_control=True,
                    initial_x=x,
                    initial_y=y,
                    deactivation_frames=0,
                )
            return replace(state, brightness_control_frames=frames, deactivation_frames=0)

        return replace(
            state,
            brightness_control_frames=0,
            is_brightness_control=False,
            initial_x=None,
            initial_y=None,
            deactivation_frames=0,
        )


class GestureProcessor:
    """
    Main gesture processor: owns the gesture state and runs the per-frame
    pipeline (classify -> assign -> reduce -> map).
    """

    def __init__(self, cfg: Cfg):
        """Initialize gesture processor with configuration."""
        self.cfg = cfg
        self.state_machine = GestureStateMachine(cfg)
        self.brightness_mapper = BrightnessMapper(cfg)
        self.state = GestureState()
        self.hands = HandsSnapshot()

    def reset(self) -> None:
        """Return to the idle state."""
        self.state = GestureState()
        self.hands = HandsSnapshot()

    def process_frame(self, event: FrameEvent) -> FrameResult:
        """
        Process a frame and return the command, hands snapshot and state.

        Args:
            event: Detected hands plus frame dimensions

        Returns:
            FrameResult; skipped=True (and nothing changed) when the frame
            could not be used
        """
        try:
            event.validate()
        except InputUnavailable as e:
            logger.debug(f"Skipping frame: {e}")
            return FrameResult(command=None, hands=self.hands, state=self.state, skipped=True)

        # All hands are classified before the reducer runs, so it always sees
        # this frame's right hand.
        hands = assign_hands(event.hands, self.cfg.gestures.extension_threshold)
        previous = self.state
        state = self.state_machine.reduce(previous, hands, hand_detected=len(event.hands) > 0)
        command = self.brightness_mapper.update(state, hands, event.frame_wh)

        self._log_transition(previous, state)
        self.state = state
        self.hands = hands

        return FrameResult(command=command, hands=hands, state=state)

    def run(self, events: Iterable[FrameEvent]) -> Iterator[FrameResult]:
        """Process a sequence of frame events in order."""
        for event in events:
            yield self.process_frame(event)

    def _log_transition(self, previous: GestureState, state: GestureState) -> None:
        if state.is_gesture_control_active and not previous.is_gesture_control_active:
            logger.info("Light control mode activated")
        elif previous.is_gesture_control_active and state == GestureState():
            logger.info("Light control mode deactivated")

        if state.is_brightness_control and not previous.is_brightness_control:
            logger.info(f"Brightness control engaged at ({state.initial_x:.3f}, {state.initial_y:.3f})")
        elif previous.is_brightness_control and not state.is_brightness_control:
            logger.info("Brightness control released")
