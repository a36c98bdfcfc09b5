"""Chord symbols: a root note, a chord type and an optional bass note.

Examples
--------
>>> cs = ChordSymbol.parse("Bbm7b5/E")
>>> cs.name
'Bbm7b5/E'
>>> cs.chord_type.degree_string
'[1 3b 5b 7b]'
>>> ChordSymbol.parse("Cmin7").name
'Cm7'
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field

from chord_harmony.chord import Chord
from chord_harmony.chord_type import ChordType, DegreeIndex
from chord_harmony.database import ChordTypeDatabase
from chord_harmony.degree import Degree
from chord_harmony.note import Alteration, Note, is_white_key, normalized_rel_pitch

logger = logging.getLogger(__name__)

NO_CHORD_NAME = "N.C."

# Pitch classes of roots whose chord tone reads better with a sharp, per degree.
# Extensions are voiced one octave up.
_C, _D, _EB, _E, _F, _G, _A, _BB, _B = 0, 2, 3, 4, 5, 7, 9, 10, 11
_SHARP_ROOTS: dict[Degree, frozenset[int]] = {
    Degree.NINTH: frozenset({_E, _B}),
    Degree.NINTH_SHARP: frozenset({_C, _EB, _G, _BB}),
    Degree.THIRD: frozenset({_D, _E, _A, _B}),
    Degree.ELEVENTH_SHARP: frozenset({_C, _D, _E, _G, _A}),
    Degree.FIFTH: frozenset({_B}),
    Degree.FIFTH_SHARP: frozenset({_C, _D, _F, _G, _BB}),
    Degree.SIXTH_OR_THIRTEENTH: frozenset({_E, _A, _B}),
    Degree.SEVENTH: frozenset({_D, _E, _G, _A, _B}),
}
_EXTENSIONS = frozenset(
    {
        Degree.NINTH_FLAT,
        Degree.NINTH,
        Degree.NINTH_SHARP,
        Degree.ELEVENTH_SHARP,
        Degree.THIRTEENTH_FLAT,
        Degree.SIXTH_OR_THIRTEENTH,
    }
)


def _std_root_note(n: Note) -> Note:
    return Note(n.relative_pitch, alteration_display=n.alteration_display)


@dataclass(frozen=True)
class ChordSymbol:
    """An immutable chord symbol such as "Eb7#9" or "Am7/G".

    Root and bass are stored as relative notes (pitch 0-11). Two chord
    symbols are equal when their root pitch class, bass pitch class and
    chord type are equal; the display alteration and the original
    (possibly aliased) name are ignored.

    Parameters
    ----------
    root : Note
        Root note, any octave.
    chord_type : ChordType
        The chord quality.
    bass : Note | None
        Bass note for slash chords. Defaults to the root.
    original_name : str
        The name as written by the user, e.g. "Cmin7". Defaults to
        :attr:`name`.
    """

    root: Note
    chord_type: ChordType
    bass: Note | None = None
    original_name: str = field(default="", compare=False)

    def __post_init__(self) -> None:
        root = _std_root_note(self.root)
        bass = root if self.bass is None or self.bass.equals_relative_pitch(root) else _std_root_note(self.bass)
        object.__setattr__(self, "root", root)
        object.__setattr__(self, "bass", bass)
        if not self.original_name:
            object.__setattr__(self, "original_name", self.name)

    @classmethod
    def parse(cls, text: str, database: ChordTypeDatabase | None = None) -> ChordSymbol:
        """Parse a chord symbol string such as "Ebm7", "F#7b9/C" or "Cmin7".

        Chord type aliases are accepted. Cb, B#, E# and Fb roots are
        understood.

        Raises
        ------
        ValueError
            If the root, bass or chord type is not recognized.

        Examples
        --------
        >>> cs = ChordSymbol.parse("f#7-9/c")
        >>> cs.name, cs.original_name
        ('F#7b9/C', 'F#7-9/C')
        """
        db = database or ChordTypeDatabase.get_default()
        s = text.strip()
        if not s:
            msg = "Invalid chord symbol: empty string"
            raise ValueError(msg)

        bass = None
        slash_index = s.rfind("/")
        if slash_index != -1:
            str_bass = s[slash_index + 1 :]
            if not str_bass.strip() or len(str_bass) > 2 or (len(str_bass) == 2 and str_bass[1] not in "b#"):
                msg = f"Invalid chord symbol: {text!r}"
                raise ValueError(msg)
            str_bass = str_bass[0].upper() + str_bass[1:]
            try:
                bass = Note.from_string(str_bass)
            except ValueError as e:
                msg = f"Invalid chord symbol: {text!r}: {e}"
                raise ValueError(msg) from e
            s = s[:slash_index].strip()
            if not s:
                msg = f"Invalid chord symbol: {text!r}"
                raise ValueError(msg)
            original_name = s[0].upper() + s[1:] + "/" + str_bass
        else:
            original_name = s[0].upper() + s[1:]

        try:
            root = Note.from_string(s)
        except ValueError as e:
            msg = f"Invalid chord symbol: {text!r}: {e}"
            raise ValueError(msg) from e

        ct_str = s[2:] if len(s) > 1 and s[1] in "b#" else s[1:]
        ct = db.get_chord_type_by_name(ct_str)
        if ct is None:
            msg = f"Invalid chord symbol: {text!r}: unknown chord type {ct_str!r}"
            raise ValueError(msg)

        if bass is not None and bass.equals_relative_pitch(root):
            bass = None
            original_name = original_name.split("/")[0]

        return cls(root, ct, bass, original_name=original_name)

    # ------------------------------------------------------------------

    @property
    def name(self) -> str:
        """Return the standard name, e.g. "Cm7/Bb"."""
        res = self.root.to_relative_note_string() + self.chord_type.name
        if self.is_slash_chord():
            res += "/" + self.bass.to_relative_note_string()
        return res

    def is_slash_chord(self) -> bool:
        return not self.bass.equals_relative_pitch(self.root)

    def is_same_chord_type(self, other: ChordSymbol) -> bool:
        return self.chord_type == other.chord_type

    @property
    def default_alteration(self) -> Alteration:
        """Return the alteration of the first black-key note of the voicing, FLAT if none."""
        for n in self.get_chord():
            if not is_white_key(n.pitch):
                return n.alteration_display
        return Alteration.FLAT

    def get_transposed(self, t: int, alteration: Alteration | None = None) -> ChordSymbol:
        """Return this chord symbol transposed by ``t`` semitones.

        Parameters
        ----------
        t : int
            Transposition in semitones, may be negative.
        alteration : Alteration | None
            Display alteration of the new root and bass. None keeps the
            current ones.

        Examples
        --------
        >>> ChordSymbol.parse("Ebmin7").get_transposed(2).original_name
        'Fmin7'
        """
        root = self.root if alteration is None else self.root.with_alteration(alteration)
        bass = self.bass if alteration is None else self.bass.with_alteration(alteration)
        new_root = root.get_transposed_within_octave(t)
        new_bass = bass.get_transposed_within_octave(t)

        original_name = ""
        if self.name != self.original_name:
            # Keep the alias used by the original name
            root_len = len(self.root.to_relative_note_string())
            ct_str = self.original_name.split("/")[0][root_len:]
            original_name = new_root.to_relative_note_string() + ct_str
            if self.is_slash_chord():
                original_name += "/" + new_bass.to_relative_note_string()

        return ChordSymbol(new_root, self.chord_type, new_bass, original_name=original_name)

    def get_chord(self) -> Chord:
        """Return a voicing of this chord symbol starting at the root pitch class.

        Extensions (9ths, #11, 13ths) are lifted one octave. Each note gets
        the alteration which reads best for the root, e.g. the third of D
        is F#, the third of Eb is G.

        Examples
        --------
        >>> ChordSymbol.parse("D7").get_chord().pitches
        [2, 6, 9, 12]
        >>> str(ChordSymbol.parse("D7").get_chord())
        '[D F# A C]'
        """
        root_pitch = self.root.relative_pitch
        default_alt = Alteration.SHARP if len(self.name) >= 2 and self.name[1] == "#" else Alteration.FLAT
        chord = Chord()
        for d in self.chord_type.degrees:
            alt = Alteration.SHARP if root_pitch in _SHARP_ROOTS.get(d, ()) else default_alt
            offset = 12 if d in _EXTENSIONS else 0
            chord.add(Note(d.pitch + root_pitch + offset, alteration_display=alt))
        return chord

    def to_note_string(self) -> str:
        return str(self.get_chord())

    def get_relative_pitch(self, d: Degree) -> int:
        """Return the pitch class of degree ``d`` above the root."""
        return normalized_rel_pitch(self.root.relative_pitch + d.pitch)

    def get_relative_pitch_at(self, index: DegreeIndex) -> int:
        """Return the pitch class of the chord type degree in slot ``index``, or -1."""
        d = self.chord_type.get_degree(index)
        return -1 if d is None else self.get_relative_pitch(d)

    def map_relative_pitch(self, rel_pitch: int, dest: ChordSymbol) -> int:
        """Return the pitch class with the same interval to ``dest``'s root as ``rel_pitch`` has to this root.

        Examples
        --------
        >>> ChordSymbol.parse("C7").map_relative_pitch(4, ChordSymbol.parse("F"))
        9
        """
        if not 0 <= rel_pitch <= 11:
            msg = f"rel_pitch out of range: {rel_pitch}"
            raise ValueError(msg)
        interval = normalized_rel_pitch(rel_pitch - self.root.relative_pitch)
        return normalized_rel_pitch(dest.root.relative_pitch + interval)

    def __str__(self) -> str:
        return self.name


@dataclass(frozen=True)
class NoChord:
    """Explicit "no chord" marker, for places where a chord symbol is expected but none is played."""

    name: str = NO_CHORD_NAME

    def __str__(self) -> str:
        return self.name


ChordSlot = ChordSymbol | NoChord
"""Either a chord symbol or an explicit absence of chord."""
