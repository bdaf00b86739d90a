# frame_fea/vector.py
"""
3D VECTOR UTILITIES
===================

Small immutable 3D vector used for node positions, load components and
the local axis triad of beam elements. Values convert to numpy arrays so
they can be dropped straight into rotation matrices.
"""

from dataclasses import dataclass

import numpy as np


@dataclass(frozen=True)
class Vector3D:
    """
    A vector in the global (x, y, z) coordinate system.

    Examples:
    ---------
    >>> ex = Vector3D(1.0, 0.0, 0.0)
    >>> ez = Vector3D(0.0, 0.0, 1.0)
    >>> ex.cross(ez)
    Vector3D(x=0.0, y=-1.0, z=0.0)
    """
    x: float = 0.0
    y: float = 0.0
    z: float = 0.0

    def as_array(self) -> np.ndarray:
        return np.array([self.x, self.y, self.z], dtype=float)

    def __sub__(self, other: "Vector3D") -> "Vector3D":
        return Vector3D(self.x - other.x, self.y - other.y, self.z - other.z)

    def __mul__(self, k: float) -> "Vector3D":
        return Vector3D(self.x * k, self.y * k, self.z * k)

    __rmul__ = __mul__

    def dot(self, other: "Vector3D") -> float:
        return self.x * other.x + self.y * other.y + self.z * other.z

    def cross(self, other: "Vector3D") -> "Vector3D":
        return Vector3D(
            self.y * other.z - self.z * other.y,
            self.z * other.x - self.x * other.z,
            self.x * other.y - self.y * other.x,
        )

    def norm(self) -> float:
        return float(np.sqrt(self.dot(self)))

    def normalized(self) -> "Vector3D":
        """
        Unit vector in the same direction.

        Raises:
        -------
        ValueError
            If the vector has zero length
        """
        n = self.norm()
        if n == 0.0:
            raise ValueError("Cannot normalize a zero-length vector")
        return Vector3D(self.x / n, self.y / n, self.z / n)


# Global axes
UNIT_X = Vector3D(1.0, 0.0, 0.0)
UNIT_Z = Vector3D(0.0, 0.0, 1.0)
