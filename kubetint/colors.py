"""
Color assignment for log sources.

Every tailed pod gets a label color from a fixed palette so interleaved lines
can be told apart. Colors are drawn uniformly at random with replacement:
two pods may end up with the same color.

Example:
    ```python
    colors = ColorAssigner(random.Random(7))
    source = SourceIdentity("api-0", colors.next())
    ```
"""

import random
from typing import Optional, Sequence, Tuple

from .constants import COLOR_PALETTE
from .models import Color

PALETTE: Tuple[Color, ...] = tuple(Color(*rgb) for rgb in COLOR_PALETTE)


class ColorAssigner:
    """
    Hands out palette colors.

    Args:
        rng: Random source owned by this assigner (a fresh one when omitted)
        palette: Colors to draw from
    """

    def __init__(self, rng: Optional[random.Random] = None, palette: Sequence[Color] = PALETTE):
        if not palette:
            raise ValueError("palette cannot be empty")
        self._rng = rng or random.Random()
        self._palette = tuple(palette)

    @property
    def palette(self) -> Tuple[Color, ...]:
        return self._palette

    def next(self) -> Color:
        """Draw one color."""
        return self._rng.choice(self._palette)
