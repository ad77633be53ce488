#!/usr/bin/env python3
"""
Setup script for Gesture Light Control
"""

from pathlib import Path

from setuptools import find_packages, setup


def read_requirements():
    """Read runtime requirements from requirements.txt"""
    path = Path(__file__).parent / "requirements.txt"
    lines = path.read_text().splitlines()
    return [line.strip() for line in lines if line.strip() and not line.startswith("#")]


setup(
    name="gesture-light",
    version="0.1.0",
    description="Hand gesture light control with MediaPipe hand landmarks",
    packages=find_packages(include=["gesture_light", "gesture_light.*"]),
    package_data={"gesture_light": ["config.default.yaml"]},
    python_requires=">=3.9",
    install_requires=read_requirements(),
    extras_require={
        "camera": ["opencv-python", "mediapipe"],
        "test": ["pytest"],
    },
)
