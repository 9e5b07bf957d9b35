"""Shared typing aliases for JacobiKit."""

from __future__ import annotations

from typing import Callable, Sequence, TypeAlias

import numpy as np
from numpy.typing import NDArray

ArrayLike1D: TypeAlias = Sequence[float] | NDArray[np.floating]
VectorFunction: TypeAlias = Callable[[NDArray[np.floating]], ArrayLike1D | float]
