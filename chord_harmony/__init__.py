"""Chord harmony library: chord types, chord symbols, recognition and scales.

This library models jazz harmony: degrees, notes, chord types (qualities),
chord symbols, chord recognition from pitch classes, standard scales, and
harmonic re-interpretation of degrees between chord types.

Examples
--------
>>> from chord_harmony import ChordSymbol, find_chords

>>> # Parse a chord symbol, aliases are accepted
>>> cs = ChordSymbol.parse("Ebmin7")
>>> cs.name
'Ebm7'
>>> cs.chord_type.degree_string
'[1 3b 5 7b]'

>>> # Recognize a chord from pitch classes in any order
>>> [cs.name for cs in find_chords([10, 4, 7, 0])]
['C7']

>>> # Notation interop
>>> from chord_harmony import to_harte
>>> to_harte(cs)
'Eb:min7'
"""

from chord_harmony.chord import Chord
from chord_harmony.chord_symbol import ChordSlot, ChordSymbol, NoChord
from chord_harmony.chord_type import NOT_PRESENT, ChordType, DegreeIndex, Family
from chord_harmony.converter import (
    from_harte,
    from_pychord,
    harte_to_pychord,
    pychord_to_harte,
    to_harte,
    to_pychord,
)
from chord_harmony.database import ChordTypeDatabase, InvalidAliasError
from chord_harmony.degree import Degree, Natural
from chord_harmony.finder import ChordFinder, find_chords
from chord_harmony.note import Alteration, Note
from chord_harmony.scales import ScaleManager, StandardScale, StandardScaleInstance

__all__ = [
    "NOT_PRESENT",
    "Alteration",
    "Chord",
    "ChordFinder",
    "ChordSlot",
    "ChordSymbol",
    "ChordType",
    "ChordTypeDatabase",
    "Degree",
    "DegreeIndex",
    "Family",
    "InvalidAliasError",
    "Natural",
    "NoChord",
    "Note",
    "ScaleManager",
    "StandardScale",
    "StandardScaleInstance",
    "find_chords",
    "from_harte",
    "from_pychord",
    "harte_to_pychord",
    "pychord_to_harte",
    "to_harte",
    "to_pychord",
]
