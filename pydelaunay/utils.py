from typing import TypeAlias
from numpy.typing import NDArray
import numpy as np

# smallest |sin| of the angle at the first vertex before a triangle counts as flat
DEGENERACY_EPS = 1e-12
Vec2d: TypeAlias = tuple[float, float] | NDArray[np.floating]
