"""Test package for speed_typer.

The engine tests drive time with ``ManualClock`` and prompts with a seeded
``random.Random`` so every run is reproducible. The UI smoke test uses
pygame's dummy video driver to avoid opening real windows. Run ``pytest``
from the project root.
"""
