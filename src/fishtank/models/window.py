from dataclasses import dataclass
from typing import Optional

@dataclass(slots=True, frozen=True)
class WindowEvents:
    """Window events collected since the previous frame."""
    quit_requested: bool = False
    resized_to: Optional[tuple[int, int]] = None
