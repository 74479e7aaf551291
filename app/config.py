"""
Configuration loaded from the environment (and an optional .env file).
"""

import os

from dotenv import load_dotenv

load_dotenv()

LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()

# Upload limit
MAX_UPLOAD_BYTES = int(os.getenv("MAX_UPLOAD_MB", "200")) * 1024 * 1024

# Slider bounds
MIN_SCALE = 0.15
MAX_SCALE = 1.0
SCALE_STEP = 0.05

DEFAULT_SCALE = float(os.getenv("DEFAULT_SCALE", "0.3"))

DEFAULT_DEVICES = [
    device_id.strip()
    for device_id in os.getenv(
        "DEFAULT_DEVICES", "echo-show-8-2023,echo-show-15"
    ).split(",")
    if device_id.strip()
]

# Panels untouched for this long are torn down
PANEL_IDLE_SECONDS = float(os.getenv("PANEL_IDLE_SECONDS", "3600"))
PANEL_SWEEP_SECONDS = float(os.getenv("PANEL_SWEEP_SECONDS", "60"))
