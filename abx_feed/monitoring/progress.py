"""Console progress bar."""

import sys
from typing import Optional, TextIO

from ..core.constants import PROGRESS_BAR_WIDTH


class ProgressBar:
    """
    Single-line text progress bar redrawn in place with a carriage return.
    
    Renders as ``[=====>    ] 50%``. Writes to stderr by default so the
    bar stays off the stdout log stream.
    """
    
    def __init__(self, width: int = PROGRESS_BAR_WIDTH, stream: Optional[TextIO] = None):
        self.width = width
        self.stream = stream or sys.stderr
        self.fraction = 0.0
    
    def render(self, fraction: float) -> str:
        """Return the bar text for ``fraction`` (clamped to 0..1)."""
        self.fraction = min(1.0, max(0.0, fraction))
        filled = int(self.width * self.fraction)
        
        cells = []
        for i in range(self.width):
            if i < filled:
                cells.append("=")
            elif i == filled:
                cells.append(">")
            else:
                cells.append(" ")
        
        return f"[{''.join(cells)}] {int(self.fraction * 100)}%"
    
    def show(self, fraction: float) -> None:
        self.stream.write("\r" + self.render(fraction))
        self.stream.flush()
    
    def update(self, current: int, total: int) -> None:
        """Progress callback form: show ``current / total``, ending the line at the last step."""
        if total and current >= total:
            self.finish()
        else:
            self.show(current / total if total else 1.0)
    
    def finish(self) -> None:
        self.show(1.0)
        self.stream.write("\n")
        self.stream.flush()
