"""
Test cases for the gesture state machine with synthetic frame sequences.
"""
import unittest
from dataclasses import replace
import sys
from pathlib import Path

# Add project root to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent))

from gesture_light.gestures import (
    GestureProcessor,
    GestureStateMachine,
    is_pointing_horizontal,
    is_pointing_vertical,
)
from gesture_light.types import FrameEvent, GestureState, HandsSnapshot
from gesture_light.config import load_config

from synthetic_hands import ACTIVATION, BRIGHTNESS, classification, make_hand


def right_hand(extended=(), pointing="none", coordinates=(0.5, 0.5)) -> HandsSnapshot:
    return HandsSnapshot(right=classification(extended, pointing, coordinates))


class StateMachineTestCase(unittest.TestCase):
    """Shared helpers for driving the reducer."""

    def setUp(self):
        """Set up test configuration."""
        self.cfg = load_config()
        self.machine = GestureStateMachine(self.cfg)

    def feed(self, state, hands, frames, hand_detected=True):
        for _ in range(frames):
            state = self.machine.reduce(state, hands, hand_detected)
        return state

    def activate(self):
        state = self.feed(GestureState(), right_hand(ACTIVATION, "up"), 10)
        self.assertTrue(state.is_gesture_control_active)
        return state

    def engage_brightness(self, coordinates=(0.3, 0.4)):
        state = self.activate()
        state = self.feed(state, right_hand(BRIGHTNESS, "left", coordinates), 10)
        self.assertTrue(state.is_brightness_control)
        return state


class TestActivation(StateMachineTestCase):
    """Idle -> Arming -> Active."""

    def test_nine_frames_then_break_resets(self):
        state = self.feed(GestureState(), right_hand(ACTIVATION, "up"), 9)
        self.assertEqual(state.activation_frames, 9)
        self.assertFalse(state.is_gesture_control_active)

        state = self.machine.reduce(state, right_hand(["index"], "up"), True)
        self.assertEqual(state.activation_frames, 0)
        self.assertFalse(state.is_gesture_control_active)

    def test_ten_frames_activate(self):
        state = self.feed(GestureState(), right_hand(ACTIVATION, "up"), 10)
        self.assertTrue(state.is_gesture_control_active)
        self.assertEqual(state.activation_frames, 10)
        self.assertEqual(state.deactivation_frames, 0)

    def test_middle_or_ring_blocks_activation(self):
        for extra in ("middle", "ring"):
            with self.subTest(extra=extra):
                state = self.feed(GestureState(), right_hand(ACTIVATION + (extra,), "up"), 12)
                self.assertEqual(state, GestureState())

    def test_thumb_does_not_matter(self):
        state = self.feed(GestureState(), right_hand(ACTIVATION + ("thumb",), "up"), 10)
        self.assertTrue(state.is_gesture_control_active)

    def test_missing_hand_freezes_arming(self):
        state = self.feed(GestureState(), right_hand(ACTIVATION, "up"), 5)
        state = self.machine.reduce(state, HandsSnapshot(), False)
        self.assertEqual(state.activation_frames, 5)
        self.assertEqual(state.deactivation_frames, 1)

        state = self.machine.reduce(state, right_hand(ACTIVATION, "up"), True)
        self.assertEqual(state.activation_frames, 6)
        self.assertEqual(state.deactivation_frames, 0)

    def test_left_hand_never_drives(self):
        hands = HandsSnapshot(left=classification(ACTIVATION, "up"))
        state = self.feed(GestureState(), hands, 20)
        self.assertEqual(state, GestureState())


class TestDeactivation(StateMachineTestCase):
    """Active -> Idle hysteresis."""

    def test_fourteen_frames_keep_control(self):
        state = self.activate()
        state = self.feed(state, right_hand(["index", "middle"], "up"), 14)
        self.assertTrue(state.is_gesture_control_active)
        self.assertEqual(state.deactivation_frames, 14)
        self.assertEqual(state.activation_frames, 10)

    def test_fifteenth_frame_resets_everything(self):
        state = self.activate()
        state = self.feed(state, right_hand(["index", "middle"], "up"), 15)
        self.assertEqual(state, GestureState())

    def test_each_condition_deactivates(self):
        for hands in (right_hand(["index", "ring"], "up"),
                      right_hand(["pinky"], "up"),
                      right_hand([], "none")):
            with self.subTest(hands=hands.right.extended_fingers):
                state = self.machine.reduce(self.activate(), hands, True)
                self.assertEqual(state.deactivation_frames, 1)
                self.assertTrue(state.is_gesture_control_active)

    def test_streak_freezes_brightness_arming(self):
        state = self.activate()
        state = self.feed(state, right_hand(BRIGHTNESS, "left"), 4)
        state = self.feed(state, right_hand(["index", "middle"], "left"), 3)
        self.assertEqual(state.brightness_control_frames, 4)
        self.assertEqual(state.deactivation_frames, 3)

        state = self.machine.reduce(state, right_hand(BRIGHTNESS, "left"), True)
        self.assertEqual(state.brightness_control_frames, 5)
        self.assertEqual(state.deactivation_frames, 0)

    def test_streak_is_consecutive(self):
        state = self.activate()
        state = self.feed(state, right_hand(["index", "middle"], "up"), 14)
        state = self.machine.reduce(state, right_hand(ACTIVATION, "up"), True)
        self.assertEqual(state.deactivation_frames, 0)
        state = self.feed(state, right_hand(["index", "middle"], "up"), 14)
        self.assertTrue(state.is_gesture_control_active)

    def test_reset_leaves_brightness_mode(self):
        state = self.engage_brightness()
        state = self.feed(state, HandsSnapshot(), 15, hand_detected=False)
        self.assertEqual(state, GestureState())
        self.assertFalse(state.is_brightness_control)


class TestBrightnessMode(StateMachineTestCase):
    """Active -> Brightness arming -> Brightness."""

    def test_ten_frames_engage_with_anchor(self):
        state = self.activate()
        for frame in range(1, 11):
            coordinates = (0.2 + frame * 0.01, 0.6 - frame * 0.01)
            state = self.machine.reduce(state, right_hand(BRIGHTNESS, "left", coordinates), True)
            if frame < 10:
                self.assertFalse(state.is_brightness_control)
                self.assertEqual(state.brightness_control_frames, frame)
                self.assertIsNone(state.initial_x)

        self.assertTrue(state.is_brightness_control)
        self.assertEqual(state.brightness_control_frames, 10)
        self.assertEqual((state.initial_x, state.initial_y), coordinates)

    def test_single_break_resets_counter(self):
        state = self.activate()
        state = self.feed(state, right_hand(BRIGHTNESS, "left"), 6)
        state = self.machine.reduce(state, right_hand(BRIGHTNESS, "up"), True)
        self.assertEqual(state.brightness_control_frames, 0)
        self.assertTrue(state.is_gesture_control_active)

        state = self.feed(state, right_hand(BRIGHTNESS, "left"), 9)
        self.assertFalse(state.is_brightness_control)

    def test_raised_pinky_resets_counter(self):
        state = self.activate()
        state = self.feed(state, right_hand(BRIGHTNESS, "right"), 6)
        state = self.machine.reduce(state, right_hand(ACTIVATION, "right"), True)
        self.assertEqual(state.brightness_control_frames, 0)

    def test_anchor_is_not_recalibrated(self):
        state = self.engage_brightness(coordinates=(0.3, 0.4))
        state = self.feed(state, right_hand(BRIGHTNESS, "down-left", (0.7, 0.1)), 5)
        self.assertTrue(state.is_brightness_control)
        self.assertEqual((state.initial_x, state.initial_y), (0.3, 0.4))
        self.assertEqual(state.brightness_control_frames, 10)

    def test_vertical_pointing_exits(self):
        state = self.engage_brightness()
        state = self.machine.reduce(state, right_hand(BRIGHTNESS, "down"), True)
        self.assertFalse(state.is_brightness_control)
        self.assertEqual(state.brightness_control_frames, 0)
        self.assertIsNone(state.initial_x)
        self.assertIsNone(state.initial_y)
        self.assertTrue(state.is_gesture_control_active)

    def test_raised_pinky_exits(self):
        state = self.engage_brightness()
        state = self.machine.reduce(state, right_hand(ACTIVATION, "left"), True)
        self.assertFalse(state.is_brightness_control)
        self.assertTrue(state.is_gesture_control_active)

    def test_no_direction_releases_mode(self):
        state = self.engage_brightness()
        state = self.feed(state, HandsSnapshot(), 3, hand_detected=False)
        state = self.machine.reduce(state, right_hand(BRIGHTNESS, "none"), True)
        self.assertFalse(state.is_brightness_control)
        self.assertEqual(state.brightness_control_frames, 0)
        self.assertIsNone(state.initial_x)
        self.assertIsNone(state.initial_y)
        self.assertEqual(state.deactivation_frames, 0)
        self.assertTrue(state.is_gesture_control_active)

    def test_dropout_keeps_mode_until_reset(self):
        engaged = self.engage_brightness()
        state = self.feed(engaged, HandsSnapshot(), 14, hand_detected=False)
        self.assertTrue(state.is_brightness_control)
        self.assertEqual((state.initial_x, state.initial_y), (0.3, 0.4))
        self.assertEqual(state.deactivation_frames, 14)

        state = self.machine.reduce(state, HandsSnapshot(), False)
        self.assertEqual(state, GestureState())

    def test_diagonal_keeps_mode(self):
        state = self.engage_brightness()
        state = self.machine.reduce(state, right_hand(BRIGHTNESS, "up-right"), True)
        self.assertTrue(state.is_brightness_control)

    def test_direction_predicates(self):
        self.assertTrue(is_pointing_horizontal(classification(pointing="down-left")))
        self.assertTrue(is_pointing_horizontal(classification(pointing="right")))
        self.assertFalse(is_pointing_horizontal(classification(pointing="up")))
        self.assertTrue(is_pointing_vertical(classification(pointing="up")))
        self.assertFalse(is_pointing_vertical(classification(pointing="up-left")))
        self.assertFalse(is_pointing_vertical(classification(pointing="none")))


class TestReducerPurity(StateMachineTestCase):
    """The reducer depends only on its inputs."""

    def test_same_inputs_same_output(self):
        state = replace(GestureState(), activation_frames=3)
        hands = right_hand(ACTIVATION, "up")
        first = self.machine.reduce(state, hands, True)
        second = self.machine.reduce(state, hands, True)
        self.assertEqual(first, second)
        self.assertEqual(state.activation_frames, 3)

    def test_thresholds_come_from_config(self):
        self.cfg.gestures.activation_frames = 3
        machine = GestureStateMachine(self.cfg)
        state = GestureState()
        for _ in range(3):
            state = machine.reduce(state, right_hand(ACTIVATION, "up"), True)
        self.assertTrue(state.is_gesture_control_active)


class TestGestureProcessor(unittest.TestCase):
    """Test the per-frame pipeline on synthetic landmarks."""

    def setUp(self):
        """Set up test configuration."""
        self.cfg = load_config()
        self.processor = GestureProcessor(self.cfg)
        self.frame_wh = (640, 480)

    def send(self, hands, frames=1):
        result = None
        for _ in range(frames):
            result = self.processor.process_frame(FrameEvent(hands=hands, frame_wh=self.frame_wh))
        return result

    def activate(self):
        result = self.send([make_hand(ACTIVATION, pointing="up")], frames=10)
        self.assertTrue(result.state.is_gesture_control_active)
        return result

    def test_activation_from_landmarks(self):
        result = self.send([make_hand(ACTIVATION, pointing="up")], frames=9)
        self.assertFalse(result.state.is_gesture_control_active)
        result = self.send([make_hand(ACTIVATION, pointing="up")])
        self.assertTrue(result.state.is_gesture_control_active)
        self.assertEqual(result.state.activation_frames, 10)
        self.assertIsNone(result.command)

    def test_no_hands_while_active(self):
        before = self.activate().state
        result = self.send([])
        self.assertEqual(result.state.deactivation_frames, 1)
        self.assertEqual(replace(result.state, deactivation_frames=0), before)

    def test_unavailable_input_is_skipped(self):
        before = self.activate().state
        result = self.processor.process_frame(FrameEvent(hands=[], frame_wh=(0, 0)))
        self.assertTrue(result.skipped)
        self.assertIsNone(result.command)
        self.assertEqual(result.state, before)
        self.assertEqual(self.processor.state, before)

    def test_brightness_commands(self):
        self.activate()
        # index tip sits at y = 0.55 -> 264 px in a 480 px frame
        result = self.send([make_hand(BRIGHTNESS, pointing="left")], frames=9)
        self.assertIsNone(result.command)
        result = self.send([make_hand(BRIGHTNESS, pointing="left")])
        self.assertTrue(result.state.is_brightness_control)
        self.assertEqual(result.command.percent, 40)
        self.assertEqual(result.command.x, result.state.initial_x)

        # moving up to the top of the band
        result = self.send([make_hand(BRIGHTNESS, pointing="left", offset=(0.1, -0.3))])
        self.assertEqual(result.command.percent, 100)
        self.assertEqual(result.command.x, result.state.initial_x)
        self.assertNotEqual(result.hands.right.coordinates[0], result.state.initial_x)

        # below the band clamps to 0
        result = self.send([make_hand(BRIGHTNESS, pointing="left", offset=(0.0, 0.2))])
        self.assertEqual(result.command.percent, 0)

    def test_missing_right_hand_sends_nothing(self):
        self.activate()
        result = self.send([make_hand(BRIGHTNESS, pointing="left")], frames=10)
        self.assertEqual(result.command.percent, 40)

        result = self.send([])
        self.assertIsNone(result.command)
        self.assertTrue(result.state.is_brightness_control)

        # detector "right" is the user's left hand
        result = self.send([make_hand(BRIGHTNESS, pointing="left", label="right", offset=(0.0, -0.4))])
        self.assertIsNone(result.command)
        self.assertTrue(result.state.is_brightness_control)
        self.assertEqual(result.state.deactivation_frames, 2)

        result = self.send([make_hand(BRIGHTNESS, pointing="left")])
        self.assertEqual(result.command.percent, 40)
        self.assertEqual(result.state.deactivation_frames, 0)

    def test_command_every_frame_while_engaged(self):
        self.activate()
        self.send([make_hand(BRIGHTNESS, pointing="right")], frames=10)
        commands = [self.send([make_hand(BRIGHTNESS, pointing="right")]).command for _ in range(5)]
        self.assertTrue(all(command is not None for command in commands))

    def test_left_hand_is_reported(self):
        result = self.send([
            make_hand(ACTIVATION, pointing="up", label="Left"),
            make_hand(["index", "middle"], pointing="up", label="Right"),
        ])
        self.assertTrue(result.hands.left.extended_fingers["middle"])
        self.assertEqual(result.state.activation_frames, 1)

    def test_run_yields_one_result_per_event(self):
        events = [FrameEvent(hands=[make_hand(ACTIVATION, pointing="up")], frame_wh=self.frame_wh)] * 10
        results = list(self.processor.run(events))
        self.assertEqual(len(results), 10)
        self.assertEqual([r.state.activation_frames for r in results], list(range(1, 11)))
        self.assertEqual(results[-1].state.public_view(), {
            "activation_frames": 10,
            "is_gesture_control_active": True,
            "brightness_control_frames": 0,
            "is_brightness_control": False,
        })

    def test_reset(self):
        self.activate()
        self.processor.reset()
        self.assertEqual(self.processor.state, GestureState())


if __name__ == '__main__':
    unittest.main()
