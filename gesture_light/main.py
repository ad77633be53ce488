"""
Main application for gesture light control.
"""
import cv2
import asyncio
import logging
import sys
from typing import Optional

import requests

from .config import load_config
from .controller_hue import HueController
from .controller_mock import MockBrightnessController
from .gestures import GestureProcessor
from .landmarks import palm_center
from .tracker import HandsTracker
from .types import FrameEvent, FrameResult

logger = logging.getLogger(__name__)


class GestureLightApp:
    """Main application class for gesture light control."""

    def __init__(self, config_path: Optional[str] = None, use_hue: bool = False):
        """Initialize the application with configuration."""
        self.config = load_config(config_path)
        logging.basicConfig(
            level=getattr(logging, self.config.logging.level, logging.INFO),
            format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
        )

        self.tracker = HandsTracker(
            max_num_hands=self.config.mediapipe.max_num_hands,
            min_detection_conf=self.config.mediapipe.min_detection_confidence,
            min_tracking_conf=self.config.mediapipe.min_tracking_confidence,
            model_complexity=self.config.mediapipe.model_complexity
        )

        # Choose controller type
        if use_hue:
            self.controller = HueController.from_config(self.config)
            logger.info("💡 Using Hue controller")
        else:
            self.controller = MockBrightnessController()

        self.gesture_processor = GestureProcessor(self.config)

        # Initialize camera
        self.cap = cv2.VideoCapture(self.config.camera.index)
        self.cap.set(cv2.CAP_PROP_FRAME_WIDTH, self.config.camera.width)
        self.cap.set(cv2.CAP_PROP_FRAME_HEIGHT, self.config.camera.height)
        self.cap.set(cv2.CAP_PROP_FPS, self.config.camera.fps)

        if not self.cap.isOpened():
            raise RuntimeError(f"Failed to open camera {self.config.camera.index}")

    async def run(self):
        """Run the main application loop."""
        logger.info(f"Starting {self.config.display.window_name}")
        logger.info("🎯 Gestures (right hand):")
        logger.info("  - Index+Pinky up = Light Control Mode")
        logger.info("  - Pinky down + point sideways = Brightness Control")
        logger.info("  - Move fingertip up/down = Brightness")
        logger.info("Press 'q' to quit, 't' to toggle the light")

        while True:
            ret, frame = self.cap.read()
            if not ret or frame is None:
                # Reported as an unusable frame; state stays as it is
                self.gesture_processor.process_frame(FrameEvent(hands=[], frame_wh=(0, 0)))
                logger.error("Failed to read frame from camera")
                break

            # Detection runs on the raw frame; the display is mirrored
            hands = self.tracker.process(frame)
            frame = cv2.flip(frame, 1)
            frame_wh = (frame.shape[1], frame.shape[0])  # (width, height)

            result = self.gesture_processor.process_frame(FrameEvent(hands=hands, frame_wh=frame_wh))

            if result.command is not None:
                await self.controller.set_brightness(result.command.percent)

            if self.config.display.show_landmarks:
                for hand in hands:
                    frame = self.tracker.draw_landmarks(frame, hand)
                    px, py = palm_center(hand.landmarks)
                    cv2.circle(frame, (int(px * frame_wh[0]), int(py * frame_wh[1])), 8, (0, 0, 255), -1)

            self._draw_status(frame, result)

            cv2.imshow(self.config.display.window_name, frame)

            key = cv2.waitKey(1) & 0xFF
            if key == ord('q'):
                break
            if key == ord('t') and isinstance(self.controller, HueController):
                try:
                    await asyncio.to_thread(self.controller.toggle)
                except requests.RequestException as e:
                    logger.error(f"Failed to toggle Hue light: {e}")

        self.close()

    def _draw_status(self, frame, result: FrameResult) -> None:
        """Draw mode indicators, the brightness band and the anchored dot."""
        height, width = frame.shape[:2]
        state = result.state
        right = result.hands.right

        if state.is_brightness_control:
            mode_text = "BRIGHTNESS CONTROL"
        elif state.is_gesture_control_active:
            mode_text = f"LIGHT CONTROL (brightness {state.brightness_control_frames}/{self.config.gestures.brightness_frames})"
        elif state.activation_frames > 0:
            mode_text = f"ARMING {state.activation_frames}/{self.config.gestures.activation_frames}"
        else:
            mode_text = "Idle"
        if state.deactivation_frames > 0:
            mode_text += f" | releasing {state.deactivation_frames}/{self.config.gestures.deactivation_frames}"

        fingers = " ".join(
            f"{name[0].upper()}:{score:.2f}" for name, score in right.finger_straightness.items()
        )
        color = (0, 255, 0) if state.is_gesture_control_active else (255, 255, 255)
        cv2.putText(frame, mode_text, (10, 30), cv2.FONT_HERSHEY_SIMPLEX, 0.7, color, 2)
        cv2.putText(frame, f"Right: {right.pointing_direction} {fingers}", (10, 60),
                    cv2.FONT_HERSHEY_SIMPLEX, 0.5, (255, 255, 255), 1)
        cv2.putText(frame, f"Left open: {result.hands.left.open_confidence:.0%}", (10, 85),
                    cv2.FONT_HERSHEY_SIMPLEX, 0.5, (255, 255, 255), 1)

        if state.is_brightness_control and self.config.display.show_brightness_band:
            mapper = self.gesture_processor.brightness_mapper
            line_start, line_end = mapper.band(height)
            x = int(state.initial_x * width)
            cv2.line(frame, (x, int(line_start)), (x, int(line_end)), (255, 255, 255), 2)

            if result.command is not None:
                y = int(max(line_start, min(line_end, result.command.y * height)))
                cv2.circle(frame, (x, y), 10, (0, 215, 255), -1)
                cv2.putText(frame, f"{result.command.percent}%", (x + 15, y + 5),
                            cv2.FONT_HERSHEY_SIMPLEX, 0.6, (0, 215, 255), 2)

        cv2.putText(frame, "Press 'q' to quit", (10, height - 20), cv2.FONT_HERSHEY_SIMPLEX, 0.5, (255, 255, 255), 1)

    def close(self) -> None:
        """Release camera, detector and controller resources."""
        self.cap.release()
        self.tracker.close()
        if isinstance(self.controller, HueController):
            self.controller.close()
        cv2.destroyAllWindows()


async def main():
    """Entry point for the application."""
    use_hue = "--hue" in sys.argv

    app = None
    try:
        app = GestureLightApp(use_hue=use_hue)
        await app.run()
    except KeyboardInterrupt:
        print("\nApplication interrupted by user")
        if app is not None:
            app.close()


if __name__ == "__main__":
    asyncio.run(main())
