"""Pitch class operations for chord comparison and recognition.

This module provides pitch class (0-11) and 12-bin chroma representations
of chord symbols, for similarity computation based on actual note content
rather than just chord name matching.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

import numpy as np

from chord_harmony.finder import ChordFinder

if TYPE_CHECKING:
    from numpy.typing import NDArray

    from chord_harmony.chord_symbol import ChordSymbol

CHROMA_THRESHOLD = 0.5
# get_similarity_index() of identical chord types
MAX_SIMILARITY_INDEX = 63


def chord_symbol_pitch_classes(cs: ChordSymbol) -> frozenset[int]:
    """Convert a chord symbol to a set of pitch classes, bass included.

    Examples
    --------
    >>> from chord_harmony.chord_symbol import ChordSymbol
    >>> sorted(chord_symbol_pitch_classes(ChordSymbol.parse("G")))
    [2, 7, 11]
    >>> sorted(chord_symbol_pitch_classes(ChordSymbol.parse("Am/G")))
    [0, 4, 7, 9]
    """
    pitch_classes = {cs.get_relative_pitch(d) for d in cs.chord_type.degrees}
    pitch_classes.add(cs.bass.relative_pitch)
    return frozenset(pitch_classes)


def pitch_class_jaccard(pc1: frozenset[int], pc2: frozenset[int]) -> float:
    """Compute Jaccard similarity between two pitch class sets.

    Parameters
    ----------
    pc1 : frozenset[int]
        First set of pitch classes.
    pc2 : frozenset[int]
        Second set of pitch classes.

    Returns
    -------
    float
        Jaccard similarity (0.0 to 1.0).

    Examples
    --------
    >>> pitch_class_jaccard(frozenset({0, 4, 7}), frozenset({0, 4, 7}))
    1.0
    >>> pitch_class_jaccard(frozenset({0, 4, 7}), frozenset({0, 3, 7}))
    0.5
    """
    if not pc1 or not pc2:
        return 0.0
    intersection = len(pc1 & pc2)
    union = len(pc1 | pc2)
    return intersection / union if union > 0 else 0.0


def chord_symbol_similarity(
    cs1: ChordSymbol | None,
    cs2: ChordSymbol | None,
    *,
    weight_root: float = 0.5,
    weight_pitch: float = 0.3,
    weight_type: float = 0.2,
    root_gate: bool = True,
) -> float:
    """Compute weighted similarity between two chord symbols.

    Combines root match, pitch class Jaccard, and chord type similarity
    (:meth:`ChordType.get_similarity_index` scaled to 0.0-1.0). If
    root_gate=True (default), mismatched roots return 0.0 regardless of
    other weights.

    Parameters
    ----------
    cs1 : ChordSymbol | None
        First chord symbol.
    cs2 : ChordSymbol | None
        Second chord symbol.
    weight_root : float
        Weight for root match component (default 0.5).
    weight_pitch : float
        Weight for pitch class Jaccard (default 0.3).
    weight_type : float
        Weight for chord type similarity (default 0.2).
    root_gate : bool
        If True, return 0.0 when roots don't match (default True).

    Returns
    -------
    float
        Weighted similarity (0.0 to 1.0).

    Examples
    --------
    >>> from chord_harmony.chord_symbol import ChordSymbol
    >>> chord_symbol_similarity(ChordSymbol.parse("Gm7"), ChordSymbol.parse("Gmin7"))
    1.0
    >>> chord_symbol_similarity(ChordSymbol.parse("Gm7"), ChordSymbol.parse("Cm7"))
    0.0
    """
    if cs1 is None or cs2 is None:
        return 0.0

    root_match = 1.0 if cs1.root.equals_relative_pitch(cs2.root) else 0.0
    if root_gate and root_match == 0.0:
        return 0.0

    pitch_sim = pitch_class_jaccard(chord_symbol_pitch_classes(cs1), chord_symbol_pitch_classes(cs2))
    type_sim = cs1.chord_type.get_similarity_index(cs2.chord_type) / MAX_SIMILARITY_INDEX

    total_weight = weight_root + weight_pitch + weight_type
    if total_weight == 0:
        return 0.0

    return (weight_root * root_match + weight_pitch * pitch_sim + weight_type * type_sim) / total_weight


def chroma_vector(cs: ChordSymbol) -> NDArray[Any]:
    """Return the 12-bin chroma template of a chord symbol.

    Bins are pitch classes (C=0); chord tones are 1.0, other bins 0.0.

    Examples
    --------
    >>> from chord_harmony.chord_symbol import ChordSymbol
    >>> chroma_vector(ChordSymbol.parse("C")).tolist()
    [1.0, 0.0, 0.0, 0.0, 1.0, 0.0, 0.0, 1.0, 0.0, 0.0, 0.0, 0.0]
    """
    chroma: NDArray[Any] = np.zeros(12, dtype=np.float64)
    chroma[sorted(chord_symbol_pitch_classes(cs))] = 1.0
    return chroma


def chroma_to_pitch_classes(chroma: NDArray[Any], threshold: float = CHROMA_THRESHOLD) -> list[int]:
    """Return the pitch classes whose normalized chroma energy reaches ``threshold``.

    The chroma is scaled so that its maximum is 1.0.

    Raises
    ------
    ValueError
        If ``chroma`` does not have 12 bins.

    Examples
    --------
    >>> import numpy as np
    >>> chroma_to_pitch_classes(np.array([0.9, 0, 0.1, 0, 0.8, 0, 0, 1.0, 0, 0, 0.2, 0]))
    [0, 4, 7]
    """
    values = np.asarray(chroma, dtype=np.float64)
    if values.shape != (12,):
        msg = f"Chroma must have 12 bins, got shape {values.shape}"
        raise ValueError(msg)
    peak = values.max()
    if peak <= 0:
        return []
    return [int(pc) for pc in np.flatnonzero(values / peak >= threshold)]


def find_from_chroma(
    chroma: NDArray[Any], threshold: float = CHROMA_THRESHOLD, finder: ChordFinder | None = None
) -> list[ChordSymbol]:
    """Recognize chord symbols from a 12-bin chroma vector.

    Results are sorted by decreasing cosine similarity between the chroma
    and each candidate's chroma template.

    Examples
    --------
    >>> import numpy as np
    >>> [cs.name for cs in find_from_chroma(np.array([0.8, 0, 0, 0, 1, 0, 0, 0.9, 0, 0, 0.7, 0]))]
    ['C7']
    """
    values = np.asarray(chroma, dtype=np.float64)
    pitch_classes = chroma_to_pitch_classes(values, threshold)
    candidates = (finder or ChordFinder.get_default()).find(pitch_classes)
    norm = np.linalg.norm(values)

    def score(cs: ChordSymbol) -> float:
        template = chroma_vector(cs)
        return float(values @ template / (norm * np.linalg.norm(template)))

    return sorted(candidates, key=score, reverse=True)
