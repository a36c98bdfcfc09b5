"""The standard scales and their compatibility with chord symbols.

Examples
--------
>>> from chord_harmony.chord_symbol import ChordSymbol
>>> manager = ScaleManager.get_default()
>>> [str(ssi) for ssi in manager.get_matching_scales(ChordSymbol.parse("C7b5"))]
['C Lydian b7', 'C Altered', 'C Diminished Half-Whole', 'C Whole-Tone']
"""

from __future__ import annotations

import threading
from dataclasses import dataclass, field

from chord_harmony.chord_symbol import ChordSymbol
from chord_harmony.degree import Degree, Natural
from chord_harmony.note import Note

_D = Degree


@dataclass(frozen=True, eq=False)
class StandardScale:
    """A named scale, as an ordered list of degrees above a root.

    Scales are compared by identity: there is one instance per standard scale.
    """

    name: str
    degrees: tuple[Degree, ...]
    notes: tuple[Note, ...] = field(init=False, repr=False)

    def __post_init__(self) -> None:
        object.__setattr__(self, "notes", tuple(Note(d.pitch) for d in self.degrees))

    def get_degree(self, rel_pitch: int) -> Degree | None:
        """Return the scale degree with pitch class ``rel_pitch``, or None."""
        for d in self.degrees:
            if d.pitch == rel_pitch:
                return d
        return None

    def get_degrees(self, natural: Natural) -> list[Degree]:
        """Return the scale degrees of natural kind ``natural`` (0, 1 or 2 of them)."""
        return [d for d in self.degrees if d.natural is natural]

    def __str__(self) -> str:
        return self.name


MAJOR = StandardScale("Major", (_D.ROOT, _D.NINTH, _D.THIRD, _D.FOURTH_OR_ELEVENTH, _D.FIFTH, _D.SIXTH_OR_THIRTEENTH, _D.SEVENTH))
DORIAN = StandardScale("Dorian", (_D.ROOT, _D.NINTH, _D.THIRD_FLAT, _D.FOURTH_OR_ELEVENTH, _D.FIFTH, _D.SIXTH_OR_THIRTEENTH, _D.SEVENTH_FLAT))
PHRYGIAN = StandardScale("Phrygian", (_D.ROOT, _D.NINTH_FLAT, _D.THIRD_FLAT, _D.FOURTH_OR_ELEVENTH, _D.FIFTH, _D.THIRTEENTH_FLAT, _D.SEVENTH_FLAT))
LYDIAN = StandardScale("Lydian", (_D.ROOT, _D.NINTH, _D.THIRD, _D.ELEVENTH_SHARP, _D.FIFTH, _D.SIXTH_OR_THIRTEENTH, _D.SEVENTH))
MIXOLYDIAN = StandardScale("Mixolydian", (_D.ROOT, _D.NINTH, _D.THIRD, _D.FOURTH_OR_ELEVENTH, _D.FIFTH, _D.SIXTH_OR_THIRTEENTH, _D.SEVENTH_FLAT))
AEOLIAN = StandardScale("Aeolian", (_D.ROOT, _D.NINTH, _D.THIRD_FLAT, _D.FOURTH_OR_ELEVENTH, _D.FIFTH, _D.THIRTEENTH_FLAT, _D.SEVENTH_FLAT))
LOCRIAN = StandardScale("Locrian", (_D.ROOT, _D.NINTH_FLAT, _D.THIRD_FLAT, _D.FOURTH_OR_ELEVENTH, _D.FIFTH_FLAT, _D.THIRTEENTH_FLAT, _D.SEVENTH_FLAT))
HARMONIC_MINOR = StandardScale("Harmonic Minor", (_D.ROOT, _D.NINTH, _D.THIRD_FLAT, _D.FOURTH_OR_ELEVENTH, _D.FIFTH, _D.THIRTEENTH_FLAT, _D.SEVENTH))
MELODIC_MINOR = StandardScale("Melodic Minor", (_D.ROOT, _D.NINTH, _D.THIRD_FLAT, _D.FOURTH_OR_ELEVENTH, _D.FIFTH, _D.SIXTH_OR_THIRTEENTH, _D.SEVENTH))
LYDIAN_B7 = StandardScale("Lydian b7", (_D.ROOT, _D.NINTH, _D.THIRD, _D.ELEVENTH_SHARP, _D.FIFTH, _D.SIXTH_OR_THIRTEENTH, _D.SEVENTH_FLAT))
ALTERED = StandardScale("Altered", (_D.ROOT, _D.NINTH_FLAT, _D.NINTH_SHARP, _D.THIRD, _D.ELEVENTH_SHARP, _D.THIRTEENTH_FLAT, _D.SEVENTH_FLAT))
DIMINISHED_WHOLE_HALF = StandardScale(
    "Diminished Whole-Half",
    (_D.ROOT, _D.NINTH, _D.THIRD_FLAT, _D.FOURTH_OR_ELEVENTH, _D.FIFTH_FLAT, _D.THIRTEENTH_FLAT, _D.SIXTH_OR_THIRTEENTH, _D.SEVENTH),
)
DIMINISHED_HALF_WHOLE = StandardScale(
    "Diminished Half-Whole",
    (_D.ROOT, _D.NINTH_FLAT, _D.NINTH_SHARP, _D.THIRD, _D.ELEVENTH_SHARP, _D.FIFTH, _D.SIXTH_OR_THIRTEENTH, _D.SEVENTH_FLAT),
)
WHOLE_TONE = StandardScale("Whole-Tone", (_D.ROOT, _D.NINTH, _D.THIRD, _D.ELEVENTH_SHARP, _D.FIFTH_SHARP, _D.SEVENTH_FLAT))
PENTATONIC_MAJOR = StandardScale("Pentatonic Major", (_D.ROOT, _D.NINTH, _D.THIRD, _D.FIFTH, _D.SIXTH_OR_THIRTEENTH))
PENTATONIC_MINOR = StandardScale("Pentatonic Minor", (_D.ROOT, _D.THIRD_FLAT, _D.FOURTH_OR_ELEVENTH, _D.FIFTH, _D.SEVENTH_FLAT))
BLUES = StandardScale("Blues", (_D.ROOT, _D.THIRD_FLAT, _D.FOURTH_OR_ELEVENTH, _D.FIFTH_FLAT, _D.FIFTH, _D.SEVENTH_FLAT))

STANDARD_SCALES: tuple[StandardScale, ...] = (
    MAJOR,
    DORIAN,
    PHRYGIAN,
    LYDIAN,
    MIXOLYDIAN,
    AEOLIAN,
    LOCRIAN,
    HARMONIC_MINOR,
    MELODIC_MINOR,
    LYDIAN_B7,
    ALTERED,
    DIMINISHED_WHOLE_HALF,
    DIMINISHED_HALF_WHOLE,
    WHOLE_TONE,
    PENTATONIC_MAJOR,
    PENTATONIC_MINOR,
    BLUES,
)


@dataclass(frozen=True)
class StandardScaleInstance:
    """A standard scale played from a given start note, e.g. "D Dorian".

    Two instances are equal if they use the same scale and start on the
    same pitch class.
    """

    scale: StandardScale
    start_note: Note

    def __post_init__(self) -> None:
        start = self.start_note
        object.__setattr__(self, "start_note", Note(start.relative_pitch, alteration_display=start.alteration_display))

    @property
    def notes(self) -> list[Note]:
        """Return the scale notes from the start note, ascending from pitch 0-11."""
        alt = self.start_note.alteration_display
        return [Note(self.start_note.pitch + d.pitch, alteration_display=alt) for d in self.scale.degrees]

    @property
    def relative_pitches(self) -> list[int]:
        return [n.relative_pitch for n in self.notes]

    def fit_degree(self, d: Degree) -> Degree | None:
        """Return the scale degree matching ``d``.

        First the scale degree with the same pitch class, else the first
        scale degree of the same natural kind, else None.

        Examples
        --------
        >>> StandardScaleInstance(DORIAN, Note(0)).fit_degree(Degree.NINTH_SHARP).name
        'THIRD_FLAT'
        >>> StandardScaleInstance(LOCRIAN, Note(0)).fit_degree(Degree.NINTH).name
        'NINTH_FLAT'
        """
        res = self.scale.get_degree(d.pitch)
        if res is None:
            same_natural = self.scale.get_degrees(d.natural)
            if same_natural:
                res = same_natural[0]
        return res

    def __str__(self) -> str:
        return f"{self.start_note.to_relative_note_string()} {self.scale.name}"


class ScaleManager:
    """Access to the standard scales."""

    _default: ScaleManager | None = None
    _default_lock = threading.Lock()

    @classmethod
    def get_default(cls) -> ScaleManager:
        if cls._default is None:
            with cls._default_lock:
                if cls._default is None:
                    cls._default = cls()
        return cls._default

    def get_standard_scales(self) -> list[StandardScale]:
        return list(STANDARD_SCALES)

    def get_standard_scale(self, name: str) -> StandardScale | None:
        """Return the standard scale with this name (case-insensitive), or None."""
        key = name.strip().lower()
        for scale in STANDARD_SCALES:
            if scale.name.lower() == key:
                return scale
        return None

    def get_matching_scales(self, cs: ChordSymbol) -> list[StandardScaleInstance]:
        """Return the scales, started on the chord root, which contain every chord tone.

        Only pitch classes are compared: the b5 of a chord matches the #11
        of a scale. The result follows the standard scale order.
        """
        chord_pitches = {d.pitch for d in cs.chord_type.degrees}
        res = []
        for scale in STANDARD_SCALES:
            scale_pitches = {d.pitch for d in scale.degrees}
            if chord_pitches <= scale_pitches:
                res.append(StandardScaleInstance(scale, cs.root))
        return res
