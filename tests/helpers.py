"""Fixture loading shared by the test modules."""

from pathlib import Path

DATA_DIR = Path(__file__).parent / "data"


def load_json(name: str) -> str:
    return (DATA_DIR / name).read_text(encoding="utf-8")
