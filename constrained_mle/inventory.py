"""
Capability inventory: which optional outputs are wanted or supported.

Models declare the outputs they can compute, callers declare the outputs
they want, and an estimation only fills the intersection of the two.
"""

from dataclasses import dataclass, fields as dataclass_fields, replace
from typing import Dict, Iterator, Tuple


@dataclass(frozen=True)
class Inventory:
    """Fixed-order set of named boolean flags.

    Field order is part of the interface (see ``to_mask``/``from_mask``):
    parameters, covariance, confidence, predicted, residuals,
    log_likelihood, names.
    """
    parameters: bool = True
    covariance: bool = True
    confidence: bool = True
    predicted: bool = True
    residuals: bool = True
    log_likelihood: bool = True
    names: bool = True

    @classmethod
    def all(cls) -> 'Inventory':
        """Every output requested/supported."""
        return cls()

    @classmethod
    def none(cls) -> 'Inventory':
        """No output requested/supported."""
        return cls(**{name: False for name in cls.fields()})

    @classmethod
    def fields(cls) -> Tuple[str, ...]:
        """Flag names in their fixed order."""
        return tuple(f.name for f in dataclass_fields(cls))

    @classmethod
    def from_mask(cls, mask: int) -> 'Inventory':
        """Build from a bit mask; bit i corresponds to the i-th field."""
        names = cls.fields()
        if mask < 0 or mask >= (1 << len(names)):
            raise ValueError(f"mask must be in [0, {(1 << len(names)) - 1}], got {mask}")
        return cls(**{name: bool(mask >> i & 1) for i, name in enumerate(names)})

    def to_mask(self) -> int:
        return sum(1 << i for i, (_, flag) in enumerate(self) if flag)

    def filter(self, supported: 'Inventory') -> 'Inventory':
        """Return the request restricted to what ``supported`` allows.

        An unsupported request is dropped, never an error.
        """
        return Inventory(**{name: flag and getattr(supported, name)
                            for name, flag in self})

    __and__ = filter

    def without(self, *names: str) -> 'Inventory':
        """Copy with the given flags cleared."""
        return replace(self, **{name: False for name in names})

    def to_dict(self) -> Dict[str, bool]:
        return dict(self)

    def __iter__(self) -> Iterator[Tuple[str, bool]]:
        for name in self.fields():
            yield name, getattr(self, name)
