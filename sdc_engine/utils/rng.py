"""
Random source helpers for the SDC engine
"""

from typing import Optional

import numpy as np


def get_rng(rng: Optional[np.random.Generator] = None,
            seed: Optional[int] = None) -> np.random.Generator:
    """
    Resolve the random source for a randomized technique.

    An explicit generator wins over a seed; with neither, a generator
    seeded from OS entropy is returned.
    """
    if rng is not None:
        return rng
    return np.random.default_rng(seed)
