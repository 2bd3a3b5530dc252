"""
Featured channel selection for the home view.
"""
import random
from typing import Optional, Sequence

from streamflow.models.channel import Category, Channel


def select_featured(
    catalog: Sequence[Channel],
    count: int = 5,
    rng: Optional[random.Random] = None,
) -> list[Channel]:
    """Pick a handful of channels to feature, favouring sports."""
    rng = rng or random.Random()
    sports = [ch for ch in catalog if ch.category == Category.SPORTS]
    if len(sports) >= count:
        return rng.sample(sports, count)

    others = [ch for ch in catalog if ch.category != Category.SPORTS]
    pool = sports + others
    return rng.sample(pool, min(count, len(pool)))
