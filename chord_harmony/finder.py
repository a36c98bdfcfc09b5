"""Chord recognition from a set of pitch classes.

A prefix tree holds one path per ordering of the pitch classes of every
3 and 4 note chord symbol (12 roots x every chord type with 3 or 4
degrees). A query walks every ordering of its own pitch classes, so the
order in which notes are given never matters.

Examples
--------
>>> [cs.name for cs in find_chords([4, 10, 0, 7])]
['C7']
>>> sorted(cs.name for cs in find_chords([9, 0, 4, 7]))
['Am7', 'C6']
"""

from __future__ import annotations

import itertools
import logging
import threading
import time
from collections.abc import Iterable, Sequence
from dataclasses import dataclass, field

from chord_harmony.chord_symbol import ChordSymbol
from chord_harmony.chord_type import ChordType
from chord_harmony.database import ChordTypeDatabase
from chord_harmony.note import Note

logger = logging.getLogger(__name__)

MIN_NOTES = 3
MAX_NOTES = 4

# With two readings, the first one is dropped when its chord type is one of these
_TAKE_OTHER = frozenset({"m+", "6", "M713", "m7b9", "m6"})


@dataclass
class TrieNode:
    """A trie node: one pitch class at a given depth.

    ``chord_symbols`` is non-empty only on nodes ending a complete chord path.
    """

    pitch_class: int
    chord_symbols: list[ChordSymbol] = field(default_factory=list)
    children: dict[int, TrieNode] = field(default_factory=dict)

    def insert(self, pitch_classes: Sequence[int], chord_symbol: ChordSymbol) -> bool:
        """Add a path below this node ending with ``chord_symbol``.

        Existing children with the same pitch class are shared. A chord
        symbol is stored once per terminal node.

        Returns
        -------
        bool
            True if the chord symbol was added to the terminal node.
        """
        node = self
        for pc in pitch_classes:
            child = node.children.get(pc)
            if child is None:
                child = TrieNode(pc)
                node.children[pc] = child
            node = child
        if chord_symbol in node.chord_symbols:
            return False
        node.chord_symbols.append(chord_symbol)
        return True

    def walk(self, pitch_classes: Sequence[int]) -> TrieNode | None:
        """Return the node reached by following ``pitch_classes``, or None."""
        node = self
        for pc in pitch_classes:
            node = node.children.get(pc)
            if node is None:
                return None
        return node

    def count(self) -> int:
        """Return the number of nodes in this subtree, this one included."""
        return 1 + sum(child.count() for child in self.children.values())


class ChordFinder:
    """Find the chord symbols matching 3 or 4 pitch classes.

    The trie is built on first use, once, under a lock; it is read-only
    afterwards so queries can run concurrently.

    Parameters
    ----------
    chord_types : Iterable[ChordType] | None
        Chord types to recognize. Defaults to the default database.

    Examples
    --------
    >>> finder = ChordFinder()
    >>> [cs.name for cs in finder.find([Note(70), Note(64), Note(60), Note(67)])]
    ['C7']
    >>> finder.find([0, 4])
    []
    """

    _default: ChordFinder | None = None
    _default_lock = threading.Lock()

    def __init__(self, chord_types: Iterable[ChordType] | None = None) -> None:
        self._chord_types = list(chord_types) if chord_types is not None else None
        self._root: TrieNode | None = None
        self._lock = threading.Lock()

    @classmethod
    def get_default(cls) -> ChordFinder:
        """Return the process-wide finder for the default chord type database."""
        if cls._default is None:
            with cls._default_lock:
                if cls._default is None:
                    cls._default = cls()
        return cls._default

    @property
    def is_built(self) -> bool:
        return self._root is not None

    def build(self) -> None:
        """Build the trie now if not done yet."""
        if self._root is not None:
            return
        with self._lock:
            if self._root is None:
                self._root = self._build_trie()

    @property
    def node_count(self) -> int:
        """Return the number of trie nodes, root excluded. Builds the trie if needed."""
        self.build()
        return self._root.count() - 1

    def find(self, pitches: Iterable[int | Note]) -> list[ChordSymbol]:
        """Return the chord symbols made of exactly these pitch classes.

        Parameters
        ----------
        pitches : Iterable[int | Note]
            3 or 4 pitches or notes in any order and any octave, each with
            a different pitch class.

        Returns
        -------
        list[ChordSymbol]
            Matching chord symbols without repetition. Empty if none, if
            there are not 3 or 4 pitches, or if a pitch class is repeated.
        """
        pitches = list(pitches)
        if not MIN_NOTES <= len(pitches) <= MAX_NOTES:
            return []
        pitch_classes = _distinct_pitch_classes(pitches)
        if len(pitch_classes) != len(pitches):
            return []
        self.build()

        res: list[ChordSymbol] = []
        for perm in itertools.permutations(pitch_classes):
            node = self._root.walk(perm)
            if node is None:
                continue
            for cs in node.chord_symbols:
                if cs not in res:
                    res.append(cs)
        logger.debug("find() pitch_classes=%s res=%s", pitch_classes, [str(cs) for cs in res])
        return res

    def select(
        self, notes: Sequence[Note], chord_symbols: Sequence[ChordSymbol], lower_note_is_bass: bool = False
    ) -> ChordSymbol | None:
        """Choose the most likely chord symbol among the results of :meth:`find`.

        A chord symbol whose root is the lowest note wins. Otherwise the
        commonest reading is taken, e.g. Fm7 rather than Ab6, Cm7b5 rather
        than Ebm6, or a 69 chord when there are three candidates.

        Parameters
        ----------
        notes : Sequence[Note]
            The played notes.
        chord_symbols : Sequence[ChordSymbol]
            The candidates.
        lower_note_is_bass : bool
            If True and the lowest note is not the root of the chosen chord
            symbol, return it as a slash chord over that note.

        Returns
        -------
        ChordSymbol | None
            None if there is no candidate.
        """
        if not notes:
            msg = "notes must not be empty"
            raise ValueError(msg)
        if not chord_symbols:
            return None

        lowest = min(notes, key=lambda n: n.pitch)
        if len(chord_symbols) == 1:
            res = chord_symbols[0]
        else:
            res = next((cs for cs in chord_symbols if cs.root.equals_relative_pitch(lowest)), None)
            if res is None:
                res = _pick(chord_symbols)

        if lower_note_is_bass and not res.root.equals_relative_pitch(lowest):
            res = ChordSymbol(res.root, res.chord_type, lowest)
        return res

    def _build_trie(self) -> TrieNode:
        start = time.perf_counter()
        chord_types = self._chord_types
        if chord_types is None:
            chord_types = ChordTypeDatabase.get_default().get_chord_types()

        root = TrieNode(-1)
        path_count = 0
        for root_pitch in range(12):
            root_note = Note(root_pitch)
            for ct in chord_types:
                if not MIN_NOTES <= ct.nb_degrees <= MAX_NOTES:
                    continue
                chord = ct.chord
                chord.transpose(root_pitch)
                cs = ChordSymbol(root_note, ct)
                for perm in itertools.permutations(chord.relative_pitches):
                    root.insert(perm, cs)
                    path_count += 1

        duration_ms = (time.perf_counter() - start) * 1000
        logger.info("Chord trie built in %.1fms for %d paths", duration_ms, path_count)
        return root


def _distinct_pitch_classes(pitches: Iterable[int | Note]) -> list[int]:
    res: list[int] = []
    for p in pitches:
        pc = p.relative_pitch if isinstance(p, Note) else p % 12
        if pc not in res:
            res.append(pc)
    return res


def _pick(chord_symbols: Sequence[ChordSymbol]) -> ChordSymbol:
    cs0 = chord_symbols[0]
    if len(chord_symbols) == 2:
        if cs0.chord_type.name in _TAKE_OTHER:
            # G C E => [Em+, C] => C, Eb F Ab C => [Ab6, Fm7] => Fm7
            return chord_symbols[1]
        return cs0
    # Bb69 => [Bb69, C9sus, Gm11]
    return next((cs for cs in chord_symbols if "69" in cs.chord_type.name), cs0)


def find_chords(pitches: Iterable[int | Note]) -> list[ChordSymbol]:
    """Shortcut for ``ChordFinder.get_default().find(pitches)``."""
    return ChordFinder.get_default().find(pitches)
