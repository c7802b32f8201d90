"""Geometry primitives shared by the spawn, visibility and occupancy layers."""

from pydantic import BaseModel, ConfigDict


class Vec3(BaseModel):
    """An immutable 3D vector in world units."""

    model_config = ConfigDict(frozen=True)

    x: float = 0.0
    y: float = 0.0
    z: float = 0.0

    def subtract(self, other: "Vec3") -> "Vec3":
        return Vec3(x=self.x - other.x, y=self.y - other.y, z=self.z - other.z)

    def dot(self, other: "Vec3") -> float:
        return self.x * other.x + self.y * other.y + self.z * other.z

    def length_sqr(self) -> float:
        return self.dot(self)

    def distance_sqr(self, other: "Vec3") -> float:
        return self.subtract(other).length_sqr()

    def normalize(self) -> "Vec3":
        """Unit vector in the same direction; near-zero vectors collapse to zero."""
        length = self.length_sqr() ** 0.5
        if length < 1.0e-4:
            return Vec3()
        return Vec3(x=self.x / length, y=self.y / length, z=self.z / length)


class Location(BaseModel):
    """A position inside a named world (dimension)."""

    model_config = ConfigDict(frozen=True)

    world: str = "minecraft:overworld"
    position: Vec3
