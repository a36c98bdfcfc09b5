"""Mutable ordered collection of notes.

A Chord is a transient builder: ChordType uses one to lay out its degrees
above a C root, and ChordSymbol uses one to produce a voicing. Notes are kept
sorted by ascending pitch and pitches are unique.
"""

from __future__ import annotations

import bisect
from collections.abc import Iterable, Iterator

from chord_harmony.note import Alteration, Note


class Chord:
    """An ordered list of notes with unique pitches.

    Parameters
    ----------
    notes : Iterable[Note] | None
        Initial notes, in any order.

    Examples
    --------
    >>> c = Chord([Note(67), Note(60), Note(64)])
    >>> c.pitches
    [60, 64, 67]
    >>> c.transpose(2)
    >>> c.relative_pitches
    [2, 6, 9]
    """

    def __init__(self, notes: Iterable[Note] | None = None) -> None:
        self._notes: list[Note] = []
        for n in notes or ():
            self.add(n)

    def add(self, note: Note) -> None:
        """Insert a note at its pitch position; a duplicate pitch is ignored."""
        if self.index_of_pitch(note.pitch) != -1:
            return
        keys = [n.pitch for n in self._notes]
        self._notes.insert(bisect.bisect(keys, note.pitch), note)

    def remove_pitch(self, pitch: int) -> Note | None:
        """Remove and return the note with ``pitch``, or None if absent."""
        index = self.index_of_pitch(pitch)
        if index == -1:
            return None
        return self._notes.pop(index)

    def clear(self) -> None:
        self._notes.clear()

    def clone(self) -> Chord:
        return Chord(self._notes)

    def __len__(self) -> int:
        return len(self._notes)

    def __iter__(self) -> Iterator[Note]:
        return iter(self._notes)

    def __getitem__(self, index: int) -> Note:
        return self._notes[index]

    @property
    def notes(self) -> list[Note]:
        """Return a copy of the notes, ordered by pitch."""
        return list(self._notes)

    @property
    def pitches(self) -> list[int]:
        return [n.pitch for n in self._notes]

    @property
    def relative_pitches(self) -> list[int]:
        """Return the pitch classes in note order (may be unsorted after transposition)."""
        return [n.relative_pitch for n in self._notes]

    def index_of_pitch(self, pitch: int) -> int:
        for i, n in enumerate(self._notes):
            if n.pitch == pitch:
                return i
        return -1

    def index_of_relative_pitch(self, rel_pitch: int) -> int:
        """Return the index of the first note with pitch class ``rel_pitch``, or -1."""
        for i, n in enumerate(self._notes):
            if n.relative_pitch == rel_pitch:
                return i
        return -1

    @property
    def min_pitch(self) -> int:
        if not self._notes:
            msg = "Empty chord"
            raise ValueError(msg)
        return self._notes[0].pitch

    @property
    def max_pitch(self) -> int:
        if not self._notes:
            msg = "Empty chord"
            raise ValueError(msg)
        return self._notes[-1].pitch

    def transpose(self, t: int) -> None:
        """Transpose every note by ``t`` semitones, in place."""
        self._notes = [n.get_transposed(t) for n in self._notes]

    def set_alteration(self, alteration: Alteration) -> None:
        """Change the display alteration of every note, in place."""
        self._notes = [n.with_alteration(alteration) for n in self._notes]

    def center_chord_octave(self, low_pitch: int, high_pitch: int) -> None:
        """Shift the whole chord by octaves so that its central octave is the central octave of the range.

        The central octave of a pitch span is ``(low + high) // 24``.
        """
        if not self._notes:
            return
        nb_octaves = (low_pitch + high_pitch) // 24 - (self.min_pitch + self.max_pitch) // 24
        if nb_octaves:
            self.transpose(nb_octaves * 12)

    def relative_pitch_chord(self) -> Chord:
        """Return a new chord with every note folded into the 0-11 octave."""
        return Chord(n.with_pitch(n.relative_pitch) for n in self._notes)

    def compute_distance(self, other: Chord) -> int:
        """Sum of absolute pitch differences, note by note.

        Raises
        ------
        ValueError
            If the chords do not have the same size.
        """
        if len(other) != len(self):
            msg = f"Chord sizes differ: {self} and {other}"
            raise ValueError(msg)
        return sum(abs(a.pitch - b.pitch) for a, b in zip(self._notes, other._notes))

    def equals_relative(self, other: Chord) -> bool:
        """Return True if both chords have the same pitch classes in the same order."""
        return self.relative_pitches == other.relative_pitches

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Chord):
            return NotImplemented
        return self._notes == other._notes

    __hash__ = None  # type: ignore[assignment]

    def __repr__(self) -> str:
        return f"Chord({[str(n) for n in self._notes]})"

    def __str__(self) -> str:
        return "[" + " ".join(n.to_relative_note_string() for n in self._notes) + "]"
