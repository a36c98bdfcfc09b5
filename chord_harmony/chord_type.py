"""Chord types (qualities) and harmonic degree fitting.

A chord type such as "m7" or "7#11" is an ordered list of degrees built
from six interval alterations. Besides classification predicates it knows
how to re-interpret a degree taken from another chord type, optionally
helped by a scale: this is what lets a phrase written over Cm7 be adapted
to F7b9.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from enum import Enum
from functools import cached_property
from typing import TYPE_CHECKING

from chord_harmony.chord import Chord
from chord_harmony.degree import Degree, Natural
from chord_harmony.note import Note

if TYPE_CHECKING:
    from chord_harmony.scales import StandardScaleInstance

logger = logging.getLogger(__name__)

NOT_PRESENT = 9
"""Alteration value meaning "this interval is absent"."""

_VALID_ALTERATIONS = (-1, 0, 1, NOT_PRESENT)

# Similarity bonus for each matching slot from FIFTH to EXTENSION3
SIMILARITY_FAMILY_WEIGHT = 32
SIMILARITY_SLOT_WEIGHTS = (16, 8, 4, 2, 1)


class Family(Enum):
    """Every chord type belongs to exactly one family."""

    MAJOR = "MAJOR"
    SEVENTH = "SEVENTH"
    MINOR = "MINOR"
    DIMINISHED = "DIMINISHED"
    SUS = "SUS"


class DegreeIndex(Enum):
    """Canonical slot of a degree within a chord type."""

    ROOT = 0
    THIRD_OR_FOURTH = 1
    FIFTH = 2
    SIXTH_OR_SEVENTH = 3
    EXTENSION1 = 4
    EXTENSION2 = 5
    EXTENSION3 = 6

    def is_extension(self) -> bool:
        return self in (DegreeIndex.EXTENSION1, DegreeIndex.EXTENSION2, DegreeIndex.EXTENSION3)


# Degree used in place of an empty slot by fit_degree_index_advanced()
_EMPTY_SLOT_PROXIES: dict[DegreeIndex, Degree] = {
    DegreeIndex.SIXTH_OR_SEVENTH: Degree.SEVENTH,
    DegreeIndex.EXTENSION1: Degree.NINTH,
    DegreeIndex.EXTENSION2: Degree.SIXTH_OR_THIRTEENTH,
    DegreeIndex.EXTENSION3: Degree.SIXTH_OR_THIRTEENTH,
}


@dataclass(frozen=True, eq=False)
class ChordType:
    """An immutable chord quality.

    Each interval parameter is -1 (flat), 0 (natural), +1 (sharp) or
    NOT_PRESENT. Degrees are laid out in the canonical slot order ROOT,
    THIRD or FOURTH, FIFTH, SIXTH or SEVENTH, then extensions 9, 11, 13.
    A natural eleventh without a third is a fourth (sus chord), and a
    natural thirteenth without a seventh is a sixth.

    Equality and hashing use the degree list only.

    Parameters
    ----------
    base : str
        Base name, e.g. "m7" for "m7b5".
    extension : str
        Extension name, e.g. "b5" for "m7b5".
    family : Family
        The harmonic family.
    third, fifth, seventh, ninth, eleventh, thirteenth : int
        Alteration of each interval, or NOT_PRESENT.

    Raises
    ------
    ValueError
        If a parameter is outside {-1, 0, 1, NOT_PRESENT}, or the intervals
        contradict each other (e.g. a sharp third, a third with a natural
        eleventh, no fifth).

    Examples
    --------
    >>> ct = ChordType("m7", "b5", Family.DIMINISHED, third=-1, fifth=-1, seventh=-1)
    >>> ct.degree_string
    '[1 3b 5b 7b]'
    >>> ct.name
    'm7b5'
    """

    base: str
    extension: str
    family: Family
    third: int = NOT_PRESENT
    fifth: int = NOT_PRESENT
    seventh: int = NOT_PRESENT
    ninth: int = NOT_PRESENT
    eleventh: int = NOT_PRESENT
    thirteenth: int = NOT_PRESENT
    degrees: tuple[Degree, ...] = field(init=False, repr=False)

    def __post_init__(self) -> None:
        alterations = {
            "third": self.third,
            "fifth": self.fifth,
            "seventh": self.seventh,
            "ninth": self.ninth,
            "eleventh": self.eleventh,
            "thirteenth": self.thirteenth,
        }
        bad = {k: v for k, v in alterations.items() if v not in _VALID_ALTERATIONS}
        if bad or not isinstance(self.family, Family):
            msg = f"Invalid chord type parameters: base={self.base!r} extension={self.extension!r} family={self.family} {alterations}"
            raise ValueError(msg)
        _check_consistency(self.base + self.extension, **alterations)
        object.__setattr__(self, "degrees", _build_degrees(**alterations))

    # ------------------------------------------------------------------
    # Names and derived data
    # ------------------------------------------------------------------

    @property
    def name(self) -> str:
        """Return base + extension, e.g. "7#11"."""
        return self.base + self.extension

    @property
    def nb_degrees(self) -> int:
        return len(self.degrees)

    @cached_property
    def degree_string(self) -> str:
        """Return the degrees as text, e.g. "[1 3b 5 7b 9]" for "m9".

        Extension slots print FOURTH_OR_ELEVENTH as "11" and
        SIXTH_OR_THIRTEENTH as "13".
        """
        labels = [
            d.to_string_extension() if i >= DegreeIndex.EXTENSION1.value else d.to_string_short()
            for i, d in enumerate(self.degrees)
        ]
        return "[" + " ".join(labels) + "]"

    @property
    def chord(self) -> Chord:
        """Return a new Chord of this type rooted on C (pitches 0-11)."""
        return Chord(Note(d.pitch) for d in self.degrees)

    # ------------------------------------------------------------------
    # Degree lookups
    # ------------------------------------------------------------------

    def get_degree(self, index: DegreeIndex) -> Degree | None:
        """Return the degree in slot ``index``, or None if the slot is empty.

        Examples
        --------
        >>> m9 = ChordType("m9", "", Family.MINOR, third=-1, fifth=0, seventh=-1, ninth=0)
        >>> m9.get_degree(DegreeIndex.EXTENSION1).name
        'NINTH'
        """
        if index.value < len(self.degrees):
            return self.degrees[index.value]
        return None

    def get_degree_by_natural(self, natural: Natural) -> Degree | None:
        """Return the degree of natural kind ``natural`` (e.g. NINTH_SHARP for NINTH in 7#9), or None."""
        for d in self.degrees:
            if d.natural is natural:
                return d
        return None

    def get_degree_by_pitch(self, rel_pitch: int) -> Degree | None:
        """Return the degree whose pitch class is ``rel_pitch``, or None."""
        if not 0 <= rel_pitch <= 11:
            msg = f"rel_pitch out of range: {rel_pitch}"
            raise ValueError(msg)
        for d in self.degrees:
            if d.pitch == rel_pitch:
                return d
        return None

    def get_degree_index(self, degree: Degree) -> DegreeIndex | None:
        """Return the slot holding ``degree``, or None."""
        try:
            return DegreeIndex(self.degrees.index(degree))
        except ValueError:
            return None

    def get_extension_degree_indexes(self) -> list[DegreeIndex]:
        """Return the used slots from SIXTH_OR_SEVENTH onwards."""
        return [DegreeIndex(i) for i in range(DegreeIndex.SIXTH_OR_SEVENTH.value, len(self.degrees))]

    def get_pitch(self, natural: Natural, root_pitch: int) -> int:
        """Return the pitch of ``natural`` above ``root_pitch``, or -1 if absent."""
        d = self.get_degree_by_natural(natural)
        return -1 if d is None else root_pitch + d.pitch

    def get_degree_most_probable(self, rel_pitch: int) -> Degree:
        """Return the degree that a pitch class most probably plays in this chord type.

        Falls back on a fixed guess when the pitch is not a chord tone, e.g.
        pitch 3 is a flat third over a non-major chord and a sharp ninth
        over a major one.

        Examples
        --------
        >>> c7 = ChordType("7", "", Family.SEVENTH, third=0, fifth=0, seventh=-1)
        >>> c7.get_degree_most_probable(3).name
        'NINTH_SHARP'
        """
        d = self.get_degree_by_pitch(rel_pitch)
        if d is not None:
            return d
        if rel_pitch == 3:
            return Degree.NINTH_SHARP if self.is_major() else Degree.THIRD_FLAT
        return _MOST_PROBABLE[rel_pitch]

    @cached_property
    def _most_important_degree_indexes(self) -> tuple[DegreeIndex, ...]:
        res = [DegreeIndex.THIRD_OR_FOURTH]
        fifth_natural = self.get_degree(DegreeIndex.FIFTH) is Degree.FIFTH
        if not fifth_natural:
            res.append(DegreeIndex.FIFTH)
        if self.get_degree(DegreeIndex.SIXTH_OR_SEVENTH) is not None:
            res.append(DegreeIndex.SIXTH_OR_SEVENTH)
        if self.get_degree(DegreeIndex.EXTENSION1) is not None:
            res.append(DegreeIndex.EXTENSION1)
        if "6" in self.base:
            # The root-sixth interval matters more than the fifth
            res.append(DegreeIndex.ROOT)
            if fifth_natural:
                res.append(DegreeIndex.FIFTH)
        else:
            if fifth_natural:
                res.append(DegreeIndex.FIFTH)
            res.append(DegreeIndex.ROOT)
        if self.get_degree(DegreeIndex.EXTENSION2) is not None:
            res.append(DegreeIndex.EXTENSION2)
        if self.get_degree(DegreeIndex.EXTENSION3) is not None:
            res.append(DegreeIndex.EXTENSION3)
        logger.debug("most important degree indexes for %s: %s", self, res)
        return tuple(res)

    def get_most_important_degree_indexes(self) -> list[DegreeIndex]:
        """Return the used slots, most important first.

        When a voicing must drop notes, drop them from the end of this list.

        Examples
        --------
        >>> c7 = ChordType("7", "", Family.SEVENTH, third=0, fifth=0, seventh=-1)
        >>> [di.name for di in c7.get_most_important_degree_indexes()]
        ['THIRD_OR_FOURTH', 'SIXTH_OR_SEVENTH', 'FIFTH', 'ROOT']
        """
        return list(self._most_important_degree_indexes)

    # ------------------------------------------------------------------
    # Comparisons
    # ------------------------------------------------------------------

    def get_similarity_index(self, other: ChordType) -> int:
        """Score how close ``other`` is to this chord type.

        0 if the families differ. Otherwise 32, plus 16, 8, 4, 2, 1 for the
        FIFTH, SIXTH_OR_SEVENTH, EXTENSION1, EXTENSION2 and EXTENSION3 slots
        as long as they keep matching; scoring stops at the first mismatch.
        Identical chord types score 63.

        Examples
        --------
        >>> c7 = ChordType("7", "", Family.SEVENTH, third=0, fifth=0, seventh=-1)
        >>> c9 = ChordType("9", "", Family.SEVENTH, third=0, fifth=0, seventh=-1, ninth=0)
        >>> c7.get_similarity_index(c9)
        56
        """
        if self.family is not other.family:
            return 0
        res = SIMILARITY_FAMILY_WEIGHT
        for i, weight in enumerate(SIMILARITY_SLOT_WEIGHTS, start=DegreeIndex.FIFTH.value):
            d = self.degrees[i] if i < len(self.degrees) else None
            d_other = other.degrees[i] if i < len(other.degrees) else None
            if d is not d_other:
                break
            res += weight
        return res

    def get_nb_common_degrees(self, other: ChordType, sixth_major_seventh_equal: bool = False) -> int:
        """Count the identical leading degrees of both chord types.

        With ``sixth_major_seventh_equal``, SIXTH_OR_THIRTEENTH and SEVENTH
        count as identical. The root always matches so the minimum is 1.
        """
        res = 0
        for d, d_other in zip(self.degrees, other.degrees):
            same = d is d_other or (
                sixth_major_seventh_equal and {d, d_other} == {Degree.SIXTH_OR_THIRTEENTH, Degree.SEVENTH}
            )
            if not same:
                break
            res += 1
        return res

    # ------------------------------------------------------------------
    # Degree fitting
    # ------------------------------------------------------------------

    def fit_degree(self, d: Degree) -> Degree | None:
        """Fit ``d`` to this chord type without any scale context.

        1. Same natural kind, e.g. d=THIRD on m7 gives THIRD_FLAT.
        2. Same pitch, e.g. d=ELEVENTH_SHARP on m7b5 gives FIFTH_FLAT.
        3. A major seventh on a 6 chord gives SIXTH_OR_THIRTEENTH, a natural
           sixth or thirteenth on a major seventh chord gives SEVENTH.

        Returns
        -------
        Degree | None
            The fitted degree, or None if there is no match
            (e.g. d=ELEVENTH_SHARP on M7).
        """
        dest = self.get_degree_by_natural(d.natural)
        if dest is None:
            dest = self.get_degree_by_pitch(d.pitch)
        if dest is None:
            if d is Degree.SEVENTH and "6" in self.name:
                dest = Degree.SIXTH_OR_THIRTEENTH
            elif d is Degree.SIXTH_OR_THIRTEENTH and self.is_seventh_major():
                dest = Degree.SEVENTH
        logger.debug("fit_degree() d=%s this=%s dest=%s", d, self, dest)
        return dest

    def fit_degree_advanced(self, d: Degree, scale: StandardScaleInstance | None = None) -> Degree:
        """Fit ``d`` to this chord type, always producing a degree.

        1. :meth:`fit_degree`.
        2. If ``scale`` is given, the scale's degree with the same pitch,
           else its first degree of the same natural kind
           (d=NINTH with Locrian gives NINTH_FLAT).
        3. Otherwise assume the scale most commonly played over this chord
           type, e.g. d=NINTH_FLAT on m7 gives NINTH (Dorian) and
           d=SIXTH_OR_THIRTEENTH on m7b5 gives THIRTEENTH_FLAT (Locrian).

        Raises
        ------
        RuntimeError
            If a fifth-family degree reaches step 3: every chord type
            defines a fifth, so this is a chord type data defect.
        """
        dest = self.fit_degree(d)
        if dest is None and scale is not None:
            dest = scale.fit_degree(d)
        if dest is None:
            dest = self._fit_degree_by_convention(d, scale)
        logger.debug("fit_degree_advanced() d=%s this=%s scale=%s dest=%s", d, self, scale, dest)
        return dest

    def fit_degree_index_advanced(self, index: DegreeIndex, scale: StandardScaleInstance | None = None) -> Degree:
        """Return the degree in slot ``index``, or a fitted proxy if the slot is empty.

        An empty SIXTH_OR_SEVENTH slot is fitted as a SEVENTH, EXTENSION1 as
        a NINTH, EXTENSION2 and EXTENSION3 as a SIXTH_OR_THIRTEENTH.

        Raises
        ------
        RuntimeError
            If ROOT, THIRD_OR_FOURTH or FIFTH is empty.
        """
        d = self.get_degree(index)
        if d is not None:
            return d
        proxy = _EMPTY_SLOT_PROXIES.get(index)
        if proxy is None:
            msg = f"Chord type {self} has no degree in mandatory slot {index.name}"
            raise RuntimeError(msg)
        return self.fit_degree_advanced(proxy, scale)

    def _fit_degree_by_convention(self, d: Degree, scale: StandardScaleInstance | None) -> Degree:
        match d:
            case Degree.NINTH_FLAT | Degree.NINTH | Degree.NINTH_SHARP:
                # No ninth here; a #9 would have matched the third of a minor chord
                return Degree.NINTH_FLAT if self.name == "m7b5" else Degree.NINTH
            case Degree.THIRD_FLAT | Degree.THIRD:
                # No third means a sus chord
                return Degree.FOURTH_OR_ELEVENTH
            case Degree.FOURTH_OR_ELEVENTH:
                if self.family in (Family.MINOR, Family.DIMINISHED):
                    return Degree.FOURTH_OR_ELEVENTH
                if (tmp := self.get_degree_by_pitch(6)) is not None:
                    return tmp
                if (tmp := self.get_degree_by_natural(Natural.NINTH)) is not None and tmp.alteration != 0:
                    return Degree.ELEVENTH_SHARP
                return Degree.FOURTH_OR_ELEVENTH
            case Degree.ELEVENTH_SHARP:
                if self.get_degree_by_pitch(5) is not None:
                    return Degree.FOURTH_OR_ELEVENTH
                return self._mandatory(Natural.FIFTH)
            case Degree.FIFTH_FLAT | Degree.FIFTH | Degree.FIFTH_SHARP:
                msg = f"Chord type {self} has no fifth to fit {d} (scale={scale})"
                raise RuntimeError(msg)
            case Degree.THIRTEENTH_FLAT:
                return self._mandatory(Natural.FIFTH)
            case Degree.SIXTH_OR_THIRTEENTH:
                if self.name in ("m7b5", "m9b5"):
                    return Degree.THIRTEENTH_FLAT
                if (tmp := self.get_degree_by_pitch(8)) is not None:
                    return tmp
                return Degree.SIXTH_OR_THIRTEENTH
            case Degree.SEVENTH_FLAT:
                if self.family is Family.MAJOR and self.get_degree_by_pitch(9) is not None:
                    # Assume a 6 chord is a I chord
                    return Degree.SEVENTH
                if self.extension == "dim7":
                    return Degree.SIXTH_OR_THIRTEENTH
                return Degree.SEVENTH_FLAT
            case Degree.SEVENTH:
                if self.family is Family.SUS:
                    return Degree.SEVENTH_FLAT
                if self.family is Family.MINOR and self.get_degree_by_pitch(9) is None:
                    # Minor triad, assume dorian
                    return Degree.SEVENTH_FLAT
                if self.family is Family.DIMINISHED:
                    # dim7: bb7=13, dim triad: assume half-diminished
                    if self.get_degree_by_pitch(9) is not None:
                        return Degree.SIXTH_OR_THIRTEENTH
                    return Degree.SEVENTH_FLAT
                return Degree.SEVENTH
            case Degree.ROOT:
                msg = f"Chord type {self} has no root"
                raise RuntimeError(msg)
            case _:
                msg = f"Unexpected degree {d} for chord type {self}"
                raise RuntimeError(msg)

    def _mandatory(self, natural: Natural) -> Degree:
        d = self.get_degree_by_natural(natural)
        if d is None:
            msg = f"Chord type {self} has no {natural.name}"
            raise RuntimeError(msg)
        return d

    # ------------------------------------------------------------------
    # Classification
    # ------------------------------------------------------------------

    def is_minor(self) -> bool:
        """True for e.g. Cm7, Cdim."""
        return self.get_degree_by_natural(Natural.THIRD) is Degree.THIRD_FLAT

    def is_major(self) -> bool:
        """True for e.g. C, C7, C6. False for Cm, C7sus."""
        return self.get_degree_by_natural(Natural.THIRD) is Degree.THIRD

    def is_seventh(self) -> bool:
        return self.get_degree_by_natural(Natural.SEVENTH) is not None

    def is_seventh_minor(self) -> bool:
        """True for e.g. C7, C7alt."""
        return self.get_degree_by_natural(Natural.SEVENTH) is Degree.SEVENTH_FLAT

    def is_seventh_major(self) -> bool:
        """True for e.g. CM7, CM9#11."""
        return self.get_degree_by_natural(Natural.SEVENTH) is Degree.SEVENTH

    def is_fifth_natural(self) -> bool:
        return self.get_degree_by_natural(Natural.FIFTH) is Degree.FIFTH

    def is_fifth_flat(self) -> bool:
        return self.get_degree_by_natural(Natural.FIFTH) is Degree.FIFTH_FLAT

    def is_fifth_sharp(self) -> bool:
        return self.get_degree_by_natural(Natural.FIFTH) is Degree.FIFTH_SHARP

    def is_sus(self) -> bool:
        return self.family is Family.SUS

    def is_sixth(self) -> bool:
        """True if there is a SIXTH_OR_THIRTEENTH but no seventh."""
        return not self.is_seventh() and self.get_degree_by_natural(Natural.SIXTH) is Degree.SIXTH_OR_THIRTEENTH

    def is_thirteenth(self) -> bool:
        """True if there is a seventh and a SIXTH_OR_THIRTEENTH."""
        return self.is_seventh() and self.get_degree_by_natural(Natural.SIXTH) is Degree.SIXTH_OR_THIRTEENTH

    def is_ninth(self) -> bool:
        return self.get_degree_by_natural(Natural.NINTH) is not None

    def is_ninth_natural(self) -> bool:
        return self.get_degree_by_natural(Natural.NINTH) is Degree.NINTH

    def is_ninth_flat(self) -> bool:
        return self.get_degree_by_natural(Natural.NINTH) is Degree.NINTH_FLAT

    def is_ninth_sharp(self) -> bool:
        return self.get_degree_by_natural(Natural.NINTH) is Degree.NINTH_SHARP

    def is_eleventh(self) -> bool:
        return self.get_degree_by_natural(Natural.ELEVENTH) is not None

    def is_eleventh_natural(self) -> bool:
        """True for e.g. Cm11. C7sus is a sus chord, not an eleventh."""
        return not self.is_sus() and self.get_degree_by_natural(Natural.ELEVENTH) is Degree.FOURTH_OR_ELEVENTH

    def is_eleventh_sharp(self) -> bool:
        return self.get_degree_by_natural(Natural.ELEVENTH) is Degree.ELEVENTH_SHARP

    # ------------------------------------------------------------------

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, ChordType):
            return NotImplemented
        return self.degrees == other.degrees

    def __hash__(self) -> int:
        return hash(self.degrees)

    def __str__(self) -> str:
        return self.name


_MOST_PROBABLE: dict[int, Degree] = {
    0: Degree.ROOT,
    1: Degree.NINTH_FLAT,
    2: Degree.NINTH,
    4: Degree.THIRD,
    5: Degree.FOURTH_OR_ELEVENTH,
    6: Degree.ELEVENTH_SHARP,  # not a b5 chord, all chords define a fifth
    7: Degree.FIFTH,
    8: Degree.THIRTEENTH_FLAT,  # not a #5 chord, all chords define a fifth
    9: Degree.SIXTH_OR_THIRTEENTH,
    10: Degree.SEVENTH_FLAT,
    11: Degree.SEVENTH,
}


def _check_consistency(
    name: str, *, third: int, fifth: int, seventh: int, ninth: int, eleventh: int, thirteenth: int
) -> None:
    problems = []
    if third == 1:
        problems.append("a third can not be sharp")
    if seventh == 1:
        problems.append("a seventh can not be sharp")
    if thirteenth == 1:
        problems.append("a thirteenth can not be sharp")
    if eleventh == -1:
        problems.append("an eleventh can not be flat")
    if third == 0 and eleventh == 0:
        problems.append("a major third can not be combined with a fourth")
    if third == NOT_PRESENT and eleventh != 0:
        problems.append("a chord without third must have a fourth")
    if fifth == NOT_PRESENT:
        problems.append("a fifth is required")
    if problems:
        msg = f"Inconsistent chord type {name!r}: " + ", ".join(problems)
        raise ValueError(msg)


def _build_degrees(
    *, third: int, fifth: int, seventh: int, ninth: int, eleventh: int, thirteenth: int
) -> tuple[Degree, ...]:
    # Order matters: it defines the DegreeIndex slots
    degrees = [Degree.ROOT]
    is_fourth = eleventh == 0 and third == NOT_PRESENT
    is_sixth = thirteenth == 0 and seventh == NOT_PRESENT

    if third != NOT_PRESENT:
        degrees.append(Degree.get_degree(Natural.THIRD, third))
    if is_fourth:
        degrees.append(Degree.FOURTH_OR_ELEVENTH)
    degrees.append(Degree.get_degree(Natural.FIFTH, fifth))
    if is_sixth:
        degrees.append(Degree.SIXTH_OR_THIRTEENTH)
    if seventh != NOT_PRESENT:
        degrees.append(Degree.get_degree(Natural.SEVENTH, seventh))
    if ninth != NOT_PRESENT:
        degrees.append(Degree.get_degree(Natural.NINTH, ninth))
    if eleventh != NOT_PRESENT and not is_fourth:
        degrees.append(Degree.get_degree(Natural.ELEVENTH, eleventh))
    if thirteenth != NOT_PRESENT and not is_sixth:
        degrees.append(Degree.get_degree(Natural.SIXTH, thirteenth))
    return tuple(degrees)
