"""
Configuration management for the gesture light control system.
"""
import yaml
from pathlib import Path
from typing import Optional, Dict, Any
from dataclasses import dataclass


@dataclass
class CameraConfig:
    """Camera configuration settings."""
    index: int
    width: int
    height: int
    fps: int


@dataclass
class MediaPipeConfig:
    """MediaPipe Hands configuration settings."""
    max_num_hands: int
    min_detection_confidence: float
    min_tracking_confidence: float
    model_complexity: int


@dataclass
class GesturesConfig:
    """Hysteresis thresholds for the gesture state machine."""
    activation_frames: int = 10
    deactivation_frames: int = 15
    brightness_frames: int = 10
    extension_threshold: float = 0.6


@dataclass
class BrightnessConfig:
    """Calibration of the vertical brightness band."""
    band_fraction: float = 0.5
    snap_step: int = 5


@dataclass
class HueConfig:
    """Philips Hue bridge settings. Credentials may come from the environment."""
    bridge: Optional[str] = None
    username: Optional[str] = None
    light_id: int = 1
    timeout_s: float = 2.0


@dataclass
class DisplayConfig:
    """Display configuration settings."""
    show_landmarks: bool
    show_brightness_band: bool
    window_name: str


@dataclass
class LoggingConfig:
    """Logging configuration."""
    level: str = "INFO"


@dataclass
class Cfg:
    """Main configuration class."""
    camera: CameraConfig
    mediapipe: MediaPipeConfig
    gestures: GesturesConfig
    brightness: BrightnessConfig
    hue: HueConfig
    display: DisplayConfig
    logging: LoggingConfig


def load_config(path: Optional[str] = None) -> Cfg:
    """
    Load configuration from YAML file.

    Args:
        path: Path to config file. If None, uses the packaged config.default.yaml

    Returns:
        Configuration object with all settings
    """
    if path is None:
        path = Path(__file__).parent / "config.default.yaml"

    config_path = Path(path)
    if not config_path.exists():
        raise FileNotFoundError(f"Config file not found: {config_path}")

    with open(config_path, 'r') as f:
        data = yaml.safe_load(f)

    return _dict_to_config(data)


def _dict_to_config(data: Dict[str, Any]) -> Cfg:
    """Convert dictionary to configuration object."""
    camera_data = data['camera']
    camera = CameraConfig(
        index=camera_data['index'],
        width=camera_data['width'],
        height=camera_data['height'],
        fps=camera_data['fps']
    )

    mp_data = data['mediapipe']
    mediapipe = MediaPipeConfig(
        max_num_hands=mp_data['max_num_hands'],
        min_detection_confidence=mp_data['min_detection_confidence'],
        min_tracking_confidence=mp_data['min_tracking_confidence'],
        model_complexity=mp_data.get('model_complexity', 1)
    )

    gestures_data = data['gestures']
    gestures = GesturesConfig(
        activation_frames=gestures_data['activation_frames'],
        deactivation_frames=gestures_data['deactivation_frames'],
        brightness_frames=gestures_data['brightness_frames'],
        extension_threshold=gestures_data['extension_threshold']
    )

    brightness_data = data['brightness']
    brightness = BrightnessConfig(
        band_fraction=brightness_data['band_fraction'],
        snap_step=brightness_data['snap_step']
    )
    if not 0 < brightness.band_fraction <= 1:
        raise ValueError(f"brightness.band_fraction must be in (0, 1], got {brightness.band_fraction}")
    if brightness.snap_step <= 0:
        raise ValueError(f"brightness.snap_step must be positive, got {brightness.snap_step}")

    # Optional sections
    hue_data = data.get('hue') or {}
    hue = HueConfig(
        bridge=hue_data.get('bridge'),
        username=hue_data.get('username'),
        light_id=hue_data.get('light_id', 1),
        timeout_s=hue_data.get('timeout_s', 2.0)
    )

    display_data = data['display']
    display = DisplayConfig(
        show_landmarks=display_data['show_landmarks'],
        show_brightness_band=display_data['show_brightness_band'],
        window_name=display_data['window_name']
    )

    logging_data = data.get('logging') or {}
    logging_cfg = LoggingConfig(level=str(logging_data.get('level', 'INFO')).upper())

    return Cfg(
        camera=camera,
        mediapipe=mediapipe,
        gestures=gestures,
        brightness=brightness,
        hue=hue,
        display=display,
        logging=logging_cfg
    )
