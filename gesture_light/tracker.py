"""
Hand landmark detection using MediaPipe Hands.
"""
import cv2
import mediapipe as mp
import numpy as np
from typing import List

from .landmarks import mirror_frame
from .types import HandFrame, Landmark


class HandsTracker:
    """Hand landmark tracker using MediaPipe Hands."""

    def __init__(self, max_num_hands: int = 2, min_detection_conf: float = 0.7,
                 min_tracking_conf: float = 0.7, model_complexity: int = 1):
        """
        Initialize the hands tracker.

        Args:
            max_num_hands: Maximum number of hands to detect
            min_detection_conf: Minimum confidence for hand detection
            min_tracking_conf: Minimum confidence for hand tracking
            model_complexity: MediaPipe model complexity (0 or 1)
        """
        self.mp_hands = mp.solutions.hands
        self.hands = self.mp_hands.Hands(
            static_image_mode=False,
            max_num_hands=max_num_hands,
            model_complexity=model_complexity,
            min_detection_confidence=min_detection_conf,
            min_tracking_confidence=min_tracking_conf
        )

    def process(self, frame_bgr: np.ndarray) -> List[HandFrame]:
        """
        Process a raw (unmirrored) camera frame and return the detected hands.

        Args:
            frame_bgr: Input frame in BGR format

        Returns:
            One HandFrame per detected hand, x mirrored for a selfie view. The
            handedness label is the detector's, computed before mirroring.
        """
        # Convert BGR to RGB for MediaPipe
        frame_rgb = cv2.cvtColor(frame_bgr, cv2.COLOR_BGR2RGB)

        results = self.hands.process(frame_rgb)

        if not results.multi_hand_landmarks:
            return []

        hands = []
        for hand_landmarks, handedness in zip(results.multi_hand_landmarks, results.multi_handedness):
            label = handedness.classification[0]
            frame = HandFrame(
                landmarks=[Landmark(lm.x, lm.y, lm.z) for lm in hand_landmarks.landmark],
                handedness=label.label,
                confidence=label.score
            )
            hands.append(mirror_frame(frame))

        return hands

    def draw_landmarks(self, frame: np.ndarray, hand: HandFrame) -> np.ndarray:
        """
        Draw a hand skeleton on the (mirrored) display frame.

        Args:
            frame: Display frame
            hand: Hand with mirrored landmarks

        Returns:
            Frame with landmarks drawn
        """
        height, width = frame.shape[:2]
        points = [(int(lm.x * width), int(lm.y * height)) for lm in hand.landmarks]

        for start, end in self.mp_hands.HAND_CONNECTIONS:
            cv2.line(frame, points[start], points[end], (0, 255, 0), 2)
        for px, py in points:
            cv2.circle(frame, (px, py), 4, (0, 0, 255), -1)

        return frame

    def close(self) -> None:
        """Release the MediaPipe graph."""
        self.hands.close()
