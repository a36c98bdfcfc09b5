"""Harmonic scale degrees.

This module defines the natural interval kinds (third, fifth, ...) and the
canonical set of degrees used by chord types and scales. Degrees are enum
members, so every degree is interned: two degrees are equal if and only if
they share the same natural kind and alteration.
"""

from __future__ import annotations

from enum import Enum
from functools import total_ordering


class Natural(Enum):
    """Un-altered interval kinds above a root, valued by their pitch class.

    FOURTH and ELEVENTH are the same natural kind, as are SIXTH and
    THIRTEENTH: a chord can hold only one of each pair.

    Examples
    --------
    >>> Natural.FOURTH is Natural.ELEVENTH
    True
    >>> Natural.SEVENTH.pitch
    11
    """

    ROOT = 0
    NINTH = 2
    THIRD = 4
    ELEVENTH = 5
    FOURTH = 5
    FIFTH = 7
    SIXTH = 9
    THIRTEENTH = 9
    SEVENTH = 11

    @property
    def pitch(self) -> int:
        """Return the pitch class of the un-altered interval."""
        return self.value


@total_ordering
class Degree(Enum):
    """A named interval above a chord or scale root.

    Parameters
    ----------
    natural : Natural
        The natural interval kind.
    alteration : int
        -1 (flat), 0 (natural) or +1 (sharp).

    Examples
    --------
    >>> Degree.THIRD_FLAT.pitch
    3
    >>> Degree.ELEVENTH_SHARP.natural is Natural.ELEVENTH
    True
    >>> Degree.FIFTH_FLAT == Degree.ELEVENTH_SHARP
    False
    """

    ROOT = (Natural.ROOT, 0)
    NINTH_FLAT = (Natural.NINTH, -1)
    NINTH = (Natural.NINTH, 0)
    NINTH_SHARP = (Natural.NINTH, 1)
    THIRD_FLAT = (Natural.THIRD, -1)
    THIRD = (Natural.THIRD, 0)
    FOURTH_OR_ELEVENTH = (Natural.ELEVENTH, 0)
    ELEVENTH_SHARP = (Natural.ELEVENTH, 1)
    FIFTH_FLAT = (Natural.FIFTH, -1)
    FIFTH = (Natural.FIFTH, 0)
    FIFTH_SHARP = (Natural.FIFTH, 1)
    THIRTEENTH_FLAT = (Natural.SIXTH, -1)
    SIXTH_OR_THIRTEENTH = (Natural.SIXTH, 0)
    SEVENTH_FLAT = (Natural.SEVENTH, -1)
    SEVENTH = (Natural.SEVENTH, 0)

    def __init__(self, natural: Natural, alteration: int) -> None:
        self.natural = natural
        self.alteration = alteration

    def __lt__(self, other: object) -> bool:
        if not isinstance(other, Degree):
            return NotImplemented
        return (self.natural.pitch, self.alteration) < (other.natural.pitch, other.alteration)

    @property
    def pitch(self) -> int:
        """Return the pitch class (0-11) of this degree relative to the root."""
        return (self.natural.pitch + self.alteration) % 12

    def to_string_short(self) -> str:
        """Return a compact label such as "1", "3b", "11#" or "13b".

        Examples
        --------
        >>> Degree.SEVENTH_FLAT.to_string_short()
        '7b'
        >>> Degree.FOURTH_OR_ELEVENTH.to_string_short()
        '4'
        """
        return _SHORT_NAMES[self]

    def to_string_extension(self) -> str:
        """Return the label used when this degree is a chord extension.

        FOURTH_OR_ELEVENTH reads "11" and SIXTH_OR_THIRTEENTH reads "13",
        other degrees keep their short label.
        """
        if self is Degree.FOURTH_OR_ELEVENTH:
            return "11"
        if self is Degree.SIXTH_OR_THIRTEENTH:
            return "13"
        return _SHORT_NAMES[self]

    @staticmethod
    def get_degree(natural: Natural, alteration: int) -> Degree | None:
        """Return the canonical degree for a natural kind and alteration.

        Parameters
        ----------
        natural : Natural
            The natural kind.
        alteration : int
            -1, 0 or +1.

        Returns
        -------
        Degree | None
            The matching degree, or None if the combination is not a
            canonical degree (e.g. a sharp third).

        Examples
        --------
        >>> Degree.get_degree(Natural.NINTH, 1).name
        'NINTH_SHARP'
        >>> Degree.get_degree(Natural.THIRD, 1) is None
        True
        """
        return _BY_NATURAL_ALTERATION.get((natural, alteration))

    @staticmethod
    def get_degrees(relative_pitch: int) -> list[Degree]:
        """Return all degrees sharing a pitch class.

        Examples
        --------
        >>> [d.name for d in Degree.get_degrees(6)]
        ['ELEVENTH_SHARP', 'FIFTH_FLAT']
        """
        if not 0 <= relative_pitch <= 11:
            msg = f"relative_pitch out of range: {relative_pitch}"
            raise ValueError(msg)
        return [d for d in Degree if d.pitch == relative_pitch]

    def __str__(self) -> str:
        return self.name


_SHORT_NAMES: dict[Degree, str] = {
    Degree.ROOT: "1",
    Degree.NINTH_FLAT: "9b",
    Degree.NINTH: "9",
    Degree.NINTH_SHARP: "9#",
    Degree.THIRD_FLAT: "3b",
    Degree.THIRD: "3",
    Degree.FOURTH_OR_ELEVENTH: "4",
    Degree.ELEVENTH_SHARP: "11#",
    Degree.FIFTH_FLAT: "5b",
    Degree.FIFTH: "5",
    Degree.FIFTH_SHARP: "5#",
    Degree.THIRTEENTH_FLAT: "13b",
    Degree.SIXTH_OR_THIRTEENTH: "6",
    Degree.SEVENTH_FLAT: "7b",
    Degree.SEVENTH: "7",
}

_BY_NATURAL_ALTERATION: dict[tuple[Natural, int], Degree] = {(d.natural, d.alteration): d for d in Degree}
