"""Immutable note values.

A note has a pitch, a duration in beats and a velocity, plus a display
alteration (flat or sharp) used only when rendering its name. Equality,
hashing and ordering use (pitch, duration, velocity) only.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from enum import Enum

logger = logging.getLogger(__name__)

PITCH_MIN = 0
PITCH_STD = 60
PITCH_MAX = 127
VELOCITY_MIN = 0
VELOCITY_STD = 100
VELOCITY_MAX = 127
OCTAVE_MIN = 0
OCTAVE_STD = 4
OCTAVE_MAX = 10

NOTES_FLAT = ("C", "Db", "D", "Eb", "E", "F", "Gb", "G", "Ab", "A", "Bb", "B")
NOTES_SHARP = ("C", "C#", "D", "D#", "E", "F", "F#", "G", "G#", "A", "A#", "B")

# Enharmonic spellings outside both tables above
_SPECIAL_NAMES: dict[str, int] = {"CB": 11, "B#": 0, "E#": 5, "FB": 4}

_BLACK_KEYS = frozenset({1, 3, 6, 8, 10})


class Alteration(Enum):
    """How a black-key note name is displayed."""

    FLAT = "FLAT"
    SHARP = "SHARP"


class SymbolicDuration(Enum):
    """Standard note durations, valued in beats."""

    SIXTEENTH_TRIPLET = 1 / 6
    SIXTEENTH = 0.25
    EIGHTH_TRIPLET = 1 / 3
    EIGHTH = 0.5
    EIGHTH_DOTTED = 0.75
    QUARTER_TRIPLET = 2 / 3
    QUARTER = 1.0
    QUARTER_DOTTED = 1.5
    HALF_TRIPLET = 4 / 3
    HALF = 2.0
    HALF_DOTTED = 3.0
    WHOLE = 4.0

    @classmethod
    def from_duration(cls, beats: float) -> SymbolicDuration | None:
        """Return the symbolic duration matching ``beats``, or None."""
        for sd in cls:
            if abs(sd.value - beats) < 1e-6:
                return sd
        return None


def check_pitch(pitch: int) -> bool:
    return PITCH_MIN <= pitch <= PITCH_MAX


def check_velocity(velocity: int) -> bool:
    return VELOCITY_MIN <= velocity <= VELOCITY_MAX


def check_octave(octave: int) -> bool:
    """Check a natural octave (0-10)."""
    return OCTAVE_MIN <= octave <= OCTAVE_MAX


def normalized_rel_pitch(abs_pitch: int) -> int:
    """Convert a positive or negative pitch to a relative pitch (0-11).

    Examples
    --------
    >>> normalized_rel_pitch(13)
    1
    >>> normalized_rel_pitch(-15)
    9
    """
    return abs_pitch % 12


def is_white_key(pitch: int) -> bool:
    """Return True if ``pitch`` is a white key of the keyboard."""
    return pitch % 12 not in _BLACK_KEYS


def limit_pitch(pitch: int, low_pitch: int, high_pitch: int) -> int:
    """Move ``pitch`` by octaves until it lies in [low_pitch, high_pitch].

    Raises
    ------
    ValueError
        If the range is narrower than an octave.
    """
    if low_pitch > high_pitch - 11:
        msg = f"Pitch range too narrow: low_pitch={low_pitch} high_pitch={high_pitch}"
        raise ValueError(msg)
    new_pitch = pitch
    while new_pitch < low_pitch:
        new_pitch += 12
    while new_pitch > high_pitch:
        new_pitch -= 12
    return new_pitch


@dataclass(frozen=True, order=True)
class Note:
    """An immutable note.

    Parameters
    ----------
    pitch : int
        MIDI pitch (0-127).
    duration_in_beats : float
        Duration in beats, must be > 0.
    velocity : int
        MIDI velocity (0-127).
    alteration_display : Alteration
        Display-only accidental, ignored by equality and ordering.

    Examples
    --------
    >>> Note(60, 1.0, 100, Alteration.FLAT) == Note(60, 1.0, 100, Alteration.SHARP)
    True
    >>> Note(61).to_relative_note_string()
    'Db'
    >>> Note(60).get_transposed(12).pitch
    72
    """

    pitch: int = PITCH_STD
    duration_in_beats: float = SymbolicDuration.QUARTER.value
    velocity: int = VELOCITY_STD
    alteration_display: Alteration = field(default=Alteration.FLAT, compare=False)

    def __post_init__(self) -> None:
        if (
            not check_pitch(self.pitch)
            or self.duration_in_beats <= 0
            or not check_velocity(self.velocity)
            or not isinstance(self.alteration_display, Alteration)
        ):
            msg = (
                f"Invalid note: pitch={self.pitch} duration_in_beats={self.duration_in_beats} "
                f"velocity={self.velocity} alteration_display={self.alteration_display}"
            )
            raise ValueError(msg)

    # ------------------------------------------------------------------
    # Construction from strings
    # ------------------------------------------------------------------

    @classmethod
    def from_string(cls, text: str) -> Note:
        """Build a note from a name with an optional natural octave.

        Anything following the note name (e.g. a chord type) is ignored,
        unless it is a "!octave" suffix. Octaves range from 0 to 10 and
        default to OCTAVE_STD.

        Parameters
        ----------
        text : str
            E.g. "G", "Cb", "A#m6", "C!3", "Db!6".

        Returns
        -------
        Note
            A quarter note with standard velocity.

        Raises
        ------
        ValueError
            If the string can not be parsed.

        Examples
        --------
        >>> Note.from_string("Eb!3").pitch
        39
        >>> Note.from_string("A#m6").to_relative_note_string()
        'A#'
        """
        s = text.strip()
        if not s:
            msg = "Invalid note: empty string"
            raise ValueError(msg)

        name = s[0].upper()
        if len(s) > 1 and s[1] in "b#":
            name += s[1]

        octave_str = None
        octave_index = s.find("!")
        if octave_index == len(s) - 1:
            msg = f"Invalid note: missing octave in {text!r}"
            raise ValueError(msg)
        if octave_index != -1:
            octave_str = s[octave_index + 1 :]

        key = name.upper()
        if key in _SPECIAL_NAMES:
            rel_pitch = _SPECIAL_NAMES[key]
            alt = Alteration.SHARP if name.endswith("#") else Alteration.FLAT
        elif name in NOTES_FLAT:
            rel_pitch = NOTES_FLAT.index(name)
            alt = Alteration.FLAT
        elif name in NOTES_SHARP:
            rel_pitch = NOTES_SHARP.index(name)
            alt = Alteration.SHARP
        else:
            msg = f"Invalid note: {text!r}"
            raise ValueError(msg)

        octave = OCTAVE_STD
        if octave_str is not None:
            try:
                octave = int(octave_str)
            except ValueError as e:
                msg = f"Invalid note: {text!r}: {e}"
                raise ValueError(msg) from e
        if not check_octave(octave):
            msg = f"Invalid note: octave out of range in {text!r}"
            raise ValueError(msg)

        return cls(octave * 12 + rel_pitch, alteration_display=alt)

    @classmethod
    def parse_piano_octave_string(cls, text: str) -> Note:
        """Parse the output of :meth:`to_piano_octave_string`.

        Examples
        --------
        >>> Note.parse_piano_octave_string("C4").pitch
        60
        >>> Note.parse_piano_octave_string("D-1").pitch
        2
        """
        if len(text) < 2:
            msg = f"Invalid piano octave string: {text!r}"
            raise ValueError(msg)
        index = 2 if text[1] in "b#" else 1
        try:
            octave = int(text[index:]) + 1
        except ValueError as e:
            msg = f"Invalid piano octave string: {text!r}"
            raise ValueError(msg) from e
        return cls.from_string(f"{text[:index]}!{octave}")

    @classmethod
    def load_as_string(cls, text: str) -> Note:
        """Build a note from :meth:`save_as_string` output.

        Examples
        --------
        >>> Note.load_as_string("60,SHARP,102,2.5").velocity
        102
        """
        parts = text.split(",")
        try:
            if len(parts) == 4:
                return cls(int(parts[0]), float(parts[3]), int(parts[2]), Alteration[parts[1]])
            if len(parts) == 3:
                return cls(int(parts[0]), float(parts[2]), int(parts[1]))
        except (KeyError, ValueError) as e:
            logger.warning("load_as_string() invalid note string %r: %s", text, e)
        msg = f"Invalid note string: {text!r}"
        raise ValueError(msg)

    def save_as_string(self, skip_alteration: bool = False) -> str:
        """Serialize as "pitch,ALTERATION,velocity,duration".

        Examples
        --------
        >>> Note(60, 2.5, 102).save_as_string()
        '60,FLAT,102,2.5'
        """
        if skip_alteration:
            return f"{self.pitch},{self.velocity},{self.duration_in_beats}"
        return f"{self.pitch},{self.alteration_display.name},{self.velocity},{self.duration_in_beats}"

    # ------------------------------------------------------------------
    # Accessors
    # ------------------------------------------------------------------

    @property
    def relative_pitch(self) -> int:
        """Return the pitch class (0-11)."""
        return self.pitch % 12

    @property
    def octave(self) -> int:
        """Return the natural octave; MIDI middle C (60) is octave 5."""
        return self.pitch // 12

    @property
    def symbolic_duration(self) -> SymbolicDuration | None:
        return SymbolicDuration.from_duration(self.duration_in_beats)

    def is_flat(self) -> bool:
        return self.alteration_display is Alteration.FLAT

    def equals_relative_pitch(self, other: Note) -> bool:
        """Return True if both notes share a pitch class."""
        return self.relative_pitch == other.relative_pitch

    # ------------------------------------------------------------------
    # Derived notes
    # ------------------------------------------------------------------

    def with_pitch(self, pitch: int) -> Note:
        """Return a copy with another pitch."""
        return Note(pitch, self.duration_in_beats, self.velocity, self.alteration_display)

    def with_alteration(self, alteration: Alteration) -> Note:
        """Return a copy with another display alteration."""
        return Note(self.pitch, self.duration_in_beats, self.velocity, alteration)

    def get_transposed(self, t: int) -> Note:
        """Return a copy transposed by ``t`` semitones."""
        return self.with_pitch(self.pitch + t)

    def get_transposed_limited(self, pitch_shift: int, pitch_limit: int) -> Note:
        """Transpose, then fold back by octaves to stay on the near side of ``pitch_limit``.

        If ``pitch_shift`` > 0 the result stays at or below the limit, if < 0
        it stays at or above it.

        Parameters
        ----------
        pitch_shift : int
            Semitones, positive or negative.
        pitch_limit : int
            Authorized values are [13, 119].
        """
        if not 13 <= pitch_limit <= 119:
            msg = f"pitch_limit out of range: {pitch_limit}"
            raise ValueError(msg)
        new_pitch = self.pitch + pitch_shift
        if pitch_shift > 0:
            while new_pitch > pitch_limit:
                new_pitch -= 12
        elif pitch_shift < 0:
            while new_pitch < pitch_limit:
                new_pitch += 12
        return self.with_pitch(new_pitch)

    def get_transposed_within_octave(self, t: int) -> Note:
        """Transpose by ``t`` semitones, wrapping within this note's octave.

        Examples
        --------
        >>> Note(71).get_transposed_within_octave(2).pitch
        61
        """
        rel = (self.relative_pitch + t) % 12
        return self.with_pitch(self.octave * 12 + rel)

    def get_centered(self, low_pitch: int, high_pitch: int) -> Note:
        """Move the note by octaves so that it lies in [low_pitch, high_pitch].

        ``low_pitch`` must be <= ``high_pitch - 12``.
        """
        if low_pitch > high_pitch - 12:
            msg = f"Pitch range too narrow: low_pitch={low_pitch} high_pitch={high_pitch}"
            raise ValueError(msg)
        new_pitch = self.pitch
        while new_pitch < low_pitch:
            new_pitch += 12
        while new_pitch > high_pitch:
            new_pitch -= 12
        return self.with_pitch(new_pitch)

    # ------------------------------------------------------------------
    # Intervals and nearest-pitch search
    # ------------------------------------------------------------------

    def get_relative_asc_interval(self, other: Note) -> int:
        """Return the ascending interval (0-11) from this note to ``other``."""
        return (other.relative_pitch - self.relative_pitch) % 12

    def get_relative_desc_interval(self, other: Note) -> int:
        """Return the descending interval (0-11) from this note to ``other``."""
        return (self.relative_pitch - other.relative_pitch) % 12

    def get_relative_pitch_delta(self, rel_pitch: int) -> int:
        """Return the shortest move (-5 to +6) from this pitch class to ``rel_pitch``.

        Examples
        --------
        >>> Note(59).get_relative_pitch_delta(0)
        1
        >>> Note(28).get_relative_pitch_delta(1)
        -3
        """
        _check_rel_pitch(rel_pitch)
        delta = rel_pitch - self.relative_pitch
        if delta > 6:
            delta -= 12
        elif delta < -5:
            delta += 12
        return delta

    def get_lower_pitch(self, rel_pitch: int, accept_equal: bool) -> int:
        """Return the absolute pitch of ``rel_pitch`` just below this note.

        If the result would be negative it is moved up an octave.
        """
        _check_rel_pitch(rel_pitch)
        p = self.octave * 12 + rel_pitch
        if rel_pitch > self.relative_pitch or (rel_pitch == self.relative_pitch and not accept_equal):
            p -= 12
        if p < 0:
            p += 12
        return p

    def get_upper_pitch(self, rel_pitch: int, accept_equal: bool) -> int:
        """Return the absolute pitch of ``rel_pitch`` just above this note.

        If the result would exceed 127 it is moved down an octave.
        """
        _check_rel_pitch(rel_pitch)
        p = self.octave * 12 + rel_pitch
        if rel_pitch < self.relative_pitch or (rel_pitch == self.relative_pitch and not accept_equal):
            p += 12
        if p > PITCH_MAX:
            p -= 12
        return p

    def get_closest_pitch(self, rel_pitch: int) -> int:
        """Return the absolute pitch of ``rel_pitch`` closest to this note.

        Examples
        --------
        >>> Note(56).get_closest_pitch(0)
        60
        """
        up = self.get_upper_pitch(rel_pitch, True)
        low = self.get_lower_pitch(rel_pitch, True)
        if up - self.pitch > self.pitch - low:
            return low
        return up

    # ------------------------------------------------------------------
    # Text
    # ------------------------------------------------------------------

    def to_relative_note_string(self, alteration: Alteration | None = None) -> str:
        """Return the octave-independent name, e.g. "Db" or "C#"."""
        alt = alteration or self.alteration_display
        names = NOTES_FLAT if alt is Alteration.FLAT else NOTES_SHARP
        return names[self.relative_pitch]

    def to_piano_octave_string(self) -> str:
        """Return the name with its piano octave, e.g. "C4" for pitch 60."""
        return f"{self.to_relative_note_string()}{self.octave - 1}"

    def __str__(self) -> str:
        return self.to_piano_octave_string()


def chromatic_notes(pitch_from: int, pitch_to: int) -> list[Note]:
    """Return notes for every pitch from ``pitch_from`` to ``pitch_to`` included."""
    if pitch_from > pitch_to or pitch_from < 0:
        msg = f"Invalid pitch range: pitch_from={pitch_from} pitch_to={pitch_to}"
        raise ValueError(msg)
    return [Note(p) for p in range(pitch_from, pitch_to + 1)]


def _check_rel_pitch(rel_pitch: int) -> None:
    if not 0 <= rel_pitch <= 11:
        msg = f"rel_pitch out of range: {rel_pitch}"
        raise ValueError(msg)
