from abc import ABC, abstractmethod

import numpy as np

DEFAULT_BEARING_CONVENTION = "add"


class BearingConvention(ABC):
    """How a perpendicular offset combines with the baseline heading."""

    name: str

    @abstractmethod
    def compose(self, base_bearing, offset):
        pass


class AdditiveBearing(BearingConvention):
    """Positive offsets rotate clockwise from the baseline heading."""

    name = "add"

    def compose(self, base_bearing, offset):
        return np.mod(np.add(base_bearing, offset), 360.0)


class SubtractiveBearing(BearingConvention):
    """Positive offsets rotate counter-clockwise from the baseline heading."""

    name = "subtract"

    def compose(self, base_bearing, offset):
        return np.mod(np.subtract(base_bearing, offset), 360.0)


class BearingConventionFactory:
    @staticmethod
    def create(name: str = DEFAULT_BEARING_CONVENTION) -> BearingConvention:
        if name == "add":
            return AdditiveBearing()
        elif name == "subtract":
            return SubtractiveBearing()
        else:
            raise ValueError(f"Unknown bearing convention: {name}")
