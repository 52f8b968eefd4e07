"""Golden data for OpenCage client tests."""

from pathlib import Path

GOLDEN_DATA_PATH = Path(__file__).parent / "data"
