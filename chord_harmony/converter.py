"""Chord symbol converter for Harte and pychord notations.

Harte notation (e.g. "G:min7", "C:maj/3", "D:(3,b5,b7)") is the format used
by MIR datasets; pychord notation (e.g. "Gm7", "C/E") is close to lead
sheet notation. Both are mapped onto degree lists, then onto the database
chord type made of the same degrees.

Examples
--------
>>> to_harte(from_pychord("Gm7"))
'G:min7'
>>> from_harte("A:hdim7").name
'Am7b5'
>>> to_pychord(from_harte("C:maj/3"))
'C/E'
"""

from __future__ import annotations

import logging

from chord_harmony.chord_symbol import ChordSlot, ChordSymbol, NoChord
from chord_harmony.chord_type import ChordType, DegreeIndex
from chord_harmony.database import ChordTypeDatabase
from chord_harmony.degree import Degree
from chord_harmony.note import Note

logger = logging.getLogger(__name__)

HARTE_NO_CHORD = ("N", "X")

# Mapping from pychord quality names to Harte shorthand
PYCHORD_TO_HARTE_QUALITY: dict[str, str] = {
    "": "maj",
    "m": "min",
    "m7": "min7",
    "7": "7",
    "maj7": "maj7",
    "M7": "maj7",
    "dim": "dim",
    "dim7": "dim7",
    "dim6": "dim6",
    "aug": "aug",
    "aug7": "aug7",
    "m7-5": "hdim7",
    "m7b5": "hdim7",
    "sus4": "sus4",
    "7sus4": "7sus4",
    "sus47": "sus4(b7)",
    "add9": "maj(9)",
    "madd9": "min(9)",
    "9": "9",
    "m9": "min9",
    "maj9": "maj9",
    "11": "11",
    "m11": "min11",
    "maj11": "maj11",
    "13": "13",
    "m13": "min13",
    "maj13": "maj13",
    "6": "maj6",
    "m6": "min6",
    "mmaj7": "minmaj7",
    "mM7": "minmaj7",
    "5": "5",
}

# Reverse mapping from Harte shorthand to pychord quality
HARTE_TO_PYCHORD_QUALITY: dict[str, str] = {
    "maj": "",
    "min": "m",
    "min7": "m7",
    "7": "7",
    "maj7": "maj7",
    "dim": "dim",
    "dim7": "dim7",
    "dim6": "dim6",
    "aug": "aug",
    "aug7": "aug7",
    "hdim7": "m7-5",
    "sus4": "sus4",
    "7sus4": "7sus4",
    "sus4(b7)": "sus47",
    "maj(9)": "add9",
    "min(9)": "madd9",
    "9": "9",
    "min9": "m9",
    "maj9": "maj9",
    "11": "11",
    "min11": "m11",
    "maj11": "maj11",
    "13": "13",
    "min13": "m13",
    "maj13": "maj13",
    "maj6": "6",
    "min6": "m6",
    "minmaj7": "mmaj7",
    "5": "5",
}

# Harte shorthand to list of intervals
HARTE_SHORTHAND_INTERVALS: dict[str, list[str]] = {
    # Triads
    "maj": ["1", "3", "5"],
    "min": ["1", "b3", "5"],
    "dim": ["1", "b3", "b5"],
    "aug": ["1", "3", "#5"],
    # Suspended
    "sus4": ["1", "4", "5"],
    # Sixth chords
    "maj6": ["1", "3", "5", "6"],
    "min6": ["1", "b3", "5", "6"],
    # Seventh chords
    "7": ["1", "3", "5", "b7"],
    "maj7": ["1", "3", "5", "7"],
    "min7": ["1", "b3", "5", "b7"],
    "dim7": ["1", "b3", "b5", "bb7"],
    "hdim7": ["1", "b3", "b5", "b7"],
    "minmaj7": ["1", "b3", "5", "7"],
    "aug7": ["1", "3", "#5", "b7"],
    # Suspended seventh
    "7sus4": ["1", "4", "5", "b7"],
    "sus4(b7)": ["1", "4", "5", "b7"],
    # Ninth chords
    "9": ["1", "3", "5", "b7", "9"],
    "maj9": ["1", "3", "5", "7", "9"],
    "min9": ["1", "b3", "5", "b7", "9"],
    "maj(9)": ["1", "3", "5", "9"],
    "min(9)": ["1", "b3", "5", "9"],
    # Eleventh chords
    "11": ["1", "3", "5", "b7", "9", "11"],
    "maj11": ["1", "3", "5", "7", "9", "11"],
    "min11": ["1", "b3", "5", "b7", "9", "11"],
    # Thirteenth chords
    "13": ["1", "3", "5", "b7", "9", "11", "13"],
    "maj13": ["1", "3", "5", "7", "9", "11", "13"],
    "min13": ["1", "b3", "5", "b7", "9", "11", "13"],
    # Power chord
    "5": ["1", "5"],
    # Dim6 (enharmonic with dim7)
    "dim6": ["1", "b3", "b5", "6"],
}

# Interval name to degree. bb7 is the sixth of a dim7 chord.
INTERVAL_TO_DEGREE: dict[str, Degree] = {
    "1": Degree.ROOT,
    "b2": Degree.NINTH_FLAT,
    "b9": Degree.NINTH_FLAT,
    "2": Degree.NINTH,
    "9": Degree.NINTH,
    "#2": Degree.NINTH_SHARP,
    "#9": Degree.NINTH_SHARP,
    "b3": Degree.THIRD_FLAT,
    "3": Degree.THIRD,
    "4": Degree.FOURTH_OR_ELEVENTH,
    "11": Degree.FOURTH_OR_ELEVENTH,
    "#4": Degree.ELEVENTH_SHARP,
    "#11": Degree.ELEVENTH_SHARP,
    "b5": Degree.FIFTH_FLAT,
    "5": Degree.FIFTH,
    "#5": Degree.FIFTH_SHARP,
    "b6": Degree.THIRTEENTH_FLAT,
    "b13": Degree.THIRTEENTH_FLAT,
    "6": Degree.SIXTH_OR_THIRTEENTH,
    "13": Degree.SIXTH_OR_THIRTEENTH,
    "bb7": Degree.SIXTH_OR_THIRTEENTH,
    "b7": Degree.SEVENTH_FLAT,
    "7": Degree.SEVENTH,
}

# Semitones above the root to the interval used for a Harte bass note
SEMITONES_TO_INTERVAL = ("1", "b2", "2", "b3", "3", "4", "b5", "5", "b6", "6", "b7", "7")


def _database(database: ChordTypeDatabase | None) -> ChordTypeDatabase:
    return database or ChordTypeDatabase.get_default()


def intervals_to_chord_type(intervals: list[str], database: ChordTypeDatabase | None = None) -> ChordType:
    """Return the chord type made of these intervals. The root is implied.

    Raises
    ------
    ValueError
        If an interval is unknown or no chord type has these degrees.

    Examples
    --------
    >>> intervals_to_chord_type(["b3", "5", "b7"]).name
    'm7'
    """
    degrees = {Degree.ROOT}
    for interval in intervals:
        d = INTERVAL_TO_DEGREE.get(interval)
        if d is None:
            msg = f"Unknown interval: {interval}"
            raise ValueError(msg)
        degrees.add(d)
    ct = _database(database).get_chord_type_by_degrees(degrees)
    if ct is None:
        msg = f"No chord type for intervals {sorted(intervals)}"
        raise ValueError(msg)
    return ct


def chord_type_to_intervals(ct: ChordType) -> list[str]:
    """Return the interval names of a chord type, root included.

    Examples
    --------
    >>> chord_type_to_intervals(ChordTypeDatabase.get_default().get_chord_type_by_name("9sus"))
    ['1', '4', '5', 'b7', '9']
    """
    res = []
    for i, d in enumerate(ct.degrees):
        label = d.to_string_extension() if i >= DegreeIndex.EXTENSION1.value else d.to_string_short()
        # "3b" -> "b3"
        if label[-1] in "b#":
            label = label[-1] + label[:-1]
        res.append(label)
    return res


def harte_shorthand(ct: ChordType) -> str | None:
    """Return the Harte shorthand of a chord type, or None if there is none."""
    degrees = set(ct.degrees)
    for shorthand, intervals in HARTE_SHORTHAND_INTERVALS.items():
        if {INTERVAL_TO_DEGREE[i] for i in intervals} == degrees and len(intervals) == len(degrees):
            return shorthand
    return None


def _harte_intervals(hc) -> list[str]:
    """Return the chord tones of a parsed Harte chord, root excluded.

    ``Harte.unwrap_shorthand`` merges the bass interval into the chord
    tones, so a bass that is neither in the shorthand nor in the explicit
    degrees is taken out again.
    """
    from harte.mappings import SHORTHAND_DEGREES

    shorthand = hc.get_shorthand()
    explicit = hc.get_degrees() or []
    if shorthand:
        intervals = set(hc.unwrap_shorthand())
        bass = hc.get_bass()
        if bass not in SHORTHAND_DEGREES[shorthand] and bass not in explicit:
            intervals.discard(bass)
    elif explicit:
        intervals = {i for i in explicit if not i.startswith("*")}
    else:
        intervals = {"3", "5"}
    intervals.discard("1")
    return sorted(intervals)


def from_harte(chord_str: str, database: ChordTypeDatabase | None = None) -> ChordSlot:
    """Parse a Harte notation string.

    Parsing is done by harte-library; its root, degrees and bass are then
    mapped onto the database chord type made of the same degrees.

    Parameters
    ----------
    chord_str : str
        Chord in Harte notation (e.g., "G:min7", "C:maj/3", "D:(b3,b5)",
        "E:7(b9)", "N").

    Returns
    -------
    ChordSlot
        The chord symbol, or :class:`NoChord` for "N" and "X".

    Raises
    ------
    ValueError
        If the root has more than one accidental, an interval is not
        supported, or no chord type matches. Malformed strings raise the
        parser error of harte-library.

    Examples
    --------
    >>> from_harte("G:min7").name
    'Gm7'
    >>> from_harte("Eb:maj7/5").name
    'EbM7/Bb'
    >>> from_harte("N")
    NoChord(name='N.C.')
    """
    from harte.harte import Harte

    s = chord_str.strip()
    if s in HARTE_NO_CHORD:
        return NoChord()

    hc = Harte(s)
    root_str = hc.get_root()
    if root_str is None:
        return NoChord()
    if len(root_str) > 2:
        msg = f"Invalid root note {root_str!r} in chord {chord_str!r}"
        raise ValueError(msg)
    root = Note.from_string(root_str)

    ct = intervals_to_chord_type(_harte_intervals(hc), database)

    bass = None
    bass_interval = hc.get_bass()
    if bass_interval and bass_interval != "1":
        d = INTERVAL_TO_DEGREE.get(bass_interval)
        if d is None:
            msg = f"Unknown bass interval {bass_interval!r} in chord {chord_str!r}"
            raise ValueError(msg)
        bass = root.get_transposed_within_octave(d.pitch)

    return ChordSymbol(root, ct, bass)


def to_harte(cs: ChordSlot) -> str:
    """Convert a chord symbol to Harte notation.

    The Harte shorthand is used when one exists, otherwise the interval
    list, e.g. "C:(3,5,b7,b9)".

    Examples
    --------
    >>> to_harte(ChordSymbol.parse("Bb7/D"))
    'Bb:7/3'
    >>> to_harte(ChordSymbol.parse("C7b9"))
    'C:(3,5,b7,b9)'
    """
    if isinstance(cs, NoChord):
        return HARTE_NO_CHORD[0]

    shorthand = harte_shorthand(cs.chord_type)
    if shorthand is None:
        shorthand = "(" + ",".join(chord_type_to_intervals(cs.chord_type)[1:]) + ")"
    result = f"{cs.root.to_relative_note_string()}:{shorthand}"
    if cs.is_slash_chord():
        result += "/" + SEMITONES_TO_INTERVAL[cs.root.get_relative_asc_interval(cs.bass)]
    return result


def from_pychord(chord_str: str, database: ChordTypeDatabase | None = None) -> ChordSymbol:
    """Parse a pychord notation string.

    pychord qualities are mapped through their Harte shorthand; qualities
    without one, or whose Harte degrees match no chord type (e.g. "maj13",
    whose Harte form carries an 11th), are looked up as chord type names
    or aliases.

    Parameters
    ----------
    chord_str : str
        Chord in pychord notation (e.g., "Gm7", "C", "F#dim7/A").

    Raises
    ------
    ValueError
        If pychord rejects the string or no chord type matches.

    Examples
    --------
    >>> cs = from_pychord("F#dim7/A")
    >>> cs.name
    'F#dim7/A'
    """
    from pychord import Chord as PyChord

    pc = PyChord(chord_str)
    quality_name = str(pc.quality)

    db = _database(database)
    shorthand = PYCHORD_TO_HARTE_QUALITY.get(quality_name)
    ct = None
    if shorthand is not None:
        degrees = {INTERVAL_TO_DEGREE[i] for i in HARTE_SHORTHAND_INTERVALS[shorthand]}
        ct = db.get_chord_type_by_degrees(degrees)
    if ct is None:
        ct = db.get_chord_type_by_name(quality_name)
    if ct is None:
        msg = f"Unknown pychord quality: {quality_name}"
        raise ValueError(msg)

    root = Note.from_string(pc.root)
    bass = Note.from_string(pc.on) if pc.on else None
    return ChordSymbol(root, ct, bass)


def to_pychord(cs: ChordSymbol, database: ChordTypeDatabase | None = None) -> str:
    """Convert a chord symbol to pychord notation.

    Candidate qualities are the Harte-mapped one, then the chord type name
    and its aliases; the first one pychord understands with the same notes
    is used.

    Raises
    ------
    ValueError
        If pychord has no quality for this chord type.

    Examples
    --------
    >>> to_pychord(ChordSymbol.parse("Ebm7"))
    'Ebm7'
    >>> to_pychord(ChordSymbol.parse("Am7b5"))
    'Am7-5'
    """
    from pychord import Chord as PyChord

    if isinstance(cs, NoChord):
        msg = "pychord has no notation for 'no chord'"
        raise ValueError(msg)

    ct = cs.chord_type
    candidates = []
    shorthand = harte_shorthand(ct)
    if shorthand is not None and shorthand in HARTE_TO_PYCHORD_QUALITY:
        candidates.append(HARTE_TO_PYCHORD_QUALITY[shorthand])
    candidates.append(ct.name)
    candidates.extend(_database(database).get_aliases(ct))

    root = cs.root.to_relative_note_string()
    bass = "/" + cs.bass.to_relative_note_string() if cs.is_slash_chord() else ""
    expected = {cs.get_relative_pitch(d) for d in ct.degrees} | {cs.bass.relative_pitch}

    for quality in candidates:
        result = f"{root}{quality}{bass}"
        try:
            components = PyChord(result).components()
        except ValueError:
            continue
        if {Note.from_string(n).relative_pitch for n in components} == expected:
            return result
        logger.debug("to_pychord() %s: pychord reads %s as %s", cs, result, components)
    msg = f"No pychord notation for chord symbol {cs}"
    raise ValueError(msg)


def pychord_to_harte(chord_str: str) -> str:
    """Convert a pychord notation string to Harte notation.

    Examples
    --------
    >>> pychord_to_harte("Gm7")
    'G:min7'
    >>> pychord_to_harte("C")
    'C:maj'
    """
    return to_harte(from_pychord(chord_str))


def harte_to_pychord(chord_str: str) -> str:
    """Convert a Harte notation string to pychord notation.

    Examples
    --------
    >>> harte_to_pychord("G:min7")
    'Gm7'
    >>> harte_to_pychord("C:maj")
    'C'
    """
    return to_pychord(from_harte(chord_str))
