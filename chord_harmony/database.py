"""Builtin chord types and their aliases.

The database holds the 65 chord types the library knows about, in five
families, together with the alias strings accepted when parsing chord
symbols ("m7" is also "min7", "mi7", "-7").
"""

from __future__ import annotations

import logging
import threading
from collections.abc import Iterable

from chord_harmony.chord_type import NOT_PRESENT as NP
from chord_harmony.chord_type import ChordType, Family
from chord_harmony.degree import Degree

logger = logging.getLogger(__name__)

_MAJ = Family.MAJOR
_SEV = Family.SEVENTH
_MIN = Family.MINOR
_DIM = Family.DIMINISHED
_SUS = Family.SUS

# (base, extension, family, aliases, ninth, third, eleventh, fifth, thirteenth, seventh)
BUILTIN_CHORD_TYPES: list[tuple[str, str, Family, str, int, int, int, int, int, int]] = [
    # MAJOR
    ("", "", _MAJ, ":M:maj:MAJ:Maj:bass:Bass:BASS:1+8:1+5:5:", NP, 0, NP, 0, NP, NP),
    ("2", "", _MAJ, ":add9:add2:", 0, 0, NP, 0, NP, NP),
    ("+", "", _MAJ, ":maj#5:maj+5:M#5:ma#5:ma+5:aug:#5:", NP, 0, NP, 1, NP, NP),
    ("6", "", _MAJ, ":maj6:MAJ6:Maj6:M6:", NP, 0, NP, 0, 0, NP),
    ("6", "9", _MAJ, ":M69:ma69:maj69:MAJ69:Maj6(9):", 0, 0, NP, 0, 0, NP),
    ("M7", "", _MAJ, ":7M:maj7:ma7:MAJ7:Maj7:", NP, 0, NP, 0, NP, 0),
    ("M7", "13", _MAJ, ":maj713:ma713:MAJ713:M7add13:", NP, 0, NP, 0, 0, 0),
    ("M9", "", _MAJ, ":9M:maj79:maj9:ma79:MAJ79:Maj9:Maj(9):Maj7(9):Maj9(no3):", 0, 0, NP, 0, NP, 0),
    ("M13", "", _MAJ, ":ma13:maj13:MAJ13:13M:Maj13:", 0, 0, NP, 0, 0, 0),
    ("M7", "b5", _MAJ, ":maj7b5:maj-5:Mb5:7M-5:7Mb5:ma7b5:ma-5:b5:Maj7b5:", NP, 0, NP, -1, NP, 0),
    ("M7", "#5", _MAJ, ":maj7#5:7M+5:7M#5:ma7#5:Maj7aug:Maj7#5:", NP, 0, NP, 1, NP, 0),
    ("M7", "#11", _MAJ, ":maj7#11:7M#11:Maj7#11:ma7#11:", NP, 0, 1, 0, NP, 0),
    ("M9", "#11", _MAJ, ":maj9#11:9M#11:ma9#11:Maj9#11:Lyd:lyd:Maj7Lyd:7Mlyd:M7lyd:", 0, 0, 1, 0, NP, 0),
    ("M13", "#11", _MAJ, ":maj13#11:13M#11:ma13#11:Maj13#11:", 0, 0, 1, 0, 0, 0),
    # SEVENTH
    ("7", "", _SEV, ":7th:", NP, 0, NP, 0, NP, -1),
    ("9", "", _SEV, ":79:7(9):", 0, 0, NP, 0, NP, -1),
    ("13", "", _SEV, ":713:7(13):7add6:7add13:67:", NP, 0, NP, 0, 0, -1),
    ("7", "b5", _SEV, ":7-5:", NP, 0, NP, -1, NP, -1),
    ("9", "b5", _SEV, ":9-5:79b5:79-5:", 0, 0, NP, -1, NP, -1),
    ("7", "#5", _SEV, ":7+5:+7:7+:7(b13):7aug:aug7:7b13:", NP, 0, NP, 1, NP, -1),
    ("9", "#5", _SEV, ":9+5:79#5:9+:", 0, 0, NP, 1, NP, -1),
    ("7", "b9", _SEV, ":7-9:7(b9):", -1, 0, NP, 0, NP, -1),
    ("7", "#9", _SEV, ":7+9:7(#9):", 1, 0, NP, 0, NP, -1),
    ("7", "#9#5", _SEV, ":7+5+9:7#5#9:7alt:", 1, 0, NP, 1, NP, -1),
    ("7", "b9#5", _SEV, ":7+5-9:7#5b9:7b9b13:", -1, 0, NP, 1, NP, -1),
    ("7", "b9b5", _SEV, ":7-5-9:7b5b9:", -1, 0, NP, -1, NP, -1),
    ("7", "#9b5", _SEV, ":7-5+9:7b5#9:", 1, 0, NP, -1, NP, -1),
    ("7", "#11", _SEV, ":7+11:", NP, 0, 1, 0, NP, -1),
    ("9", "#11", _SEV, ":9+11:", 0, 0, 1, 0, NP, -1),
    ("7", "b9#11", _SEV, ":7-9+11:", -1, 0, 1, 0, NP, -1),
    ("7", "#9#11", _SEV, ":7+9+11:", 1, 0, 1, 0, NP, -1),
    ("13", "b5", _SEV, ":13-5:713b5:713-5:", NP, 0, NP, -1, 0, -1),
    ("13", "b9", _SEV, ":13-9:713b9:713-9:", -1, 0, NP, 0, 0, -1),
    ("13", "b9b5", _SEV, ":13-9-5:13b5b9:", -1, 0, NP, -1, 0, -1),
    ("13", "#9", _SEV, ":13+9:713#9:713+9:", 1, 0, NP, 0, 0, -1),
    ("13", "#9b5", _SEV, ":13+9-5:13b5#9:", 1, 0, NP, -1, 0, -1),
    ("13", "#11", _SEV, ":13+11:713#11:713+11:", 0, 0, 1, 0, 0, -1),
    ("13", "b9#11", _SEV, ":13-9+11:", -1, 0, 1, 0, 0, -1),
    # MINOR
    ("m", "", _MIN, ":min:mi:-:", NP, -1, NP, 0, NP, NP),
    ("m2", "", _MIN, ":min2:mi2:-2:madd2:madd9:", 0, -1, NP, 0, NP, NP),
    ("m+", "", _MIN, ":m#5:mi#5:m+5:mi+:-#5:maug:", NP, -1, NP, 1, NP, NP),
    ("m6", "", _MIN, ":min6:mi6:-6:", NP, -1, NP, 0, 0, NP),
    ("m6", "9", _MIN, ":min69:mi69:-69:", 0, -1, NP, 0, 0, NP),
    ("m7", "", _MIN, ":mi7:min7:-7:", NP, -1, NP, 0, NP, -1),
    ("m7", "b9", _MIN, ":mi7b9:min7b9:-7b9:", -1, -1, NP, 0, NP, -1),
    ("m7", "13", _MIN, ":mi713:min713:-713:m7add13:", NP, -1, NP, 0, 0, -1),
    ("m7", "#5", _MIN, ":mi7#5:min7#5:-7#5:", NP, -1, NP, 1, NP, -1),
    ("m9", "", _MIN, ":mi9:min9:min(9):min7(9):-9:", 0, -1, NP, 0, NP, -1),
    ("m9", "11", _MIN, ":m9(11):mi911:min911:-9(11):-911:", 0, -1, 0, 0, NP, -1),
    ("m11", "", _MIN, ":m711:mi711:min711:-11:-711:min7(11):m7add11:m7add4:madd4:", NP, -1, 0, 0, NP, -1),
    ("m13", "", _MIN, ":mi13:min13:-13:m913:m9add13:", 0, -1, NP, 0, 0, -1),
    ("m", "7M", _MIN, ":-maj7:min7M:minMaj7:-7M:mM7:mMaj7:", NP, -1, NP, 0, NP, 0),
    ("m9", "7M", _MIN, ":mi9M:min9M:minMaj7(9):-9M:mM9:m7M9:", 0, -1, NP, 0, NP, 0),
    # DIMINISHED
    ("", "dim", _DIM, ":°:o:h:mb5:dim5:", NP, -1, NP, -1, NP, NP),
    ("", "dim7", _DIM, ":°7:o7:7dim:h7:", NP, -1, NP, -1, 0, NP),
    ("", "dim7M", _DIM, ":°7M:o7M:oM7:7dim7M:dimM7:", NP, -1, NP, -1, NP, 0),
    ("m7", "b5", _DIM, ":m7-5:mi7b5:mi7-5:min7b5:min7-5:-7b5:ø:ø7:", NP, -1, NP, -1, NP, -1),
    ("m9", "b5", _DIM, ":m9-5:mi9b5:mi9-5:min9b5:min9-5:-9b5:", 0, -1, NP, -1, NP, -1),
    ("m11", "b5", _DIM, ":m11(b5):min11(b5):-11b5:-11(b5):", NP, -1, 0, -1, NP, -1),
    # SUS
    ("", "sus", _SUS, ":sus4:4:", NP, NP, 0, 0, NP, NP),
    ("7", "sus", _SUS, ":sus7:7sus4:74:11:", NP, NP, 0, 0, NP, -1),
    ("9", "sus", _SUS, ":79sus:sus79:sus9:9sus4:94:", 0, NP, 0, 0, NP, -1),
    ("13", "sus", _SUS, ":713sus:sus713:sus13:13sus4:134:", 0, NP, 0, 0, 0, -1),
    ("7", "susb9", _SUS, ":7sus-9:7sus4b9:sus7b9:sus7-9:7b9sus:7b9sus4:", -1, NP, 0, 0, NP, -1),
    ("13", "susb9", _SUS, ":13sus-9:sus13b9:sus13-9:", -1, NP, 0, 0, 0, -1),
]


class InvalidAliasError(ValueError):
    """Raised when an alias is already used by another chord type."""


def _split_aliases(aliases: str) -> list[str]:
    return [a for a in aliases.split(":") if a.strip()]


class ChordTypeDatabase:
    """In-memory registry of chord types and aliases.

    Chord types are immutable and built once. Aliases may be added at
    runtime; :meth:`reset_aliases_to_default` restores the builtin ones.

    Parameters
    ----------
    rows : Iterable[tuple] | None
        Chord type definitions in the :data:`BUILTIN_CHORD_TYPES` format.
        Defaults to the builtin table.

    Raises
    ------
    RuntimeError
        If two rows define the same degrees, or a builtin alias is used twice.

    Examples
    --------
    >>> db = ChordTypeDatabase()
    >>> db.get_chord_type_by_name("min7").name
    'm7'
    >>> db.get_chord_type_by_name("m7").degree_string
    '[1 3b 5 7b]'
    """

    _default: ChordTypeDatabase | None = None
    _default_lock = threading.Lock()

    def __init__(self, rows: Iterable[tuple] | None = None) -> None:
        self._chord_types: list[ChordType] = []
        self._default_aliases: dict[ChordType, str] = {}
        self._custom_aliases: dict[ChordType, str] = {}
        self._alias_map: dict[str, ChordType] = {}

        for base, ext, family, aliases, i9, i3, i11, i5, i13, i7 in rows if rows is not None else BUILTIN_CHORD_TYPES:
            ct = ChordType(
                base, ext, family, third=i3, fifth=i5, seventh=i7, ninth=i9, eleventh=i11, thirteenth=i13
            )
            if ct in self._default_aliases:
                existing = self._chord_types[self._chord_types.index(ct)]
                msg = f"Chord type {ct} has the same degrees as {existing}: {ct.degree_string}"
                raise RuntimeError(msg)
            self._chord_types.append(ct)
            self._default_aliases[ct] = aliases

        self._build_alias_map()
        logger.debug("Chord type database ready: %d chord types, %d names", len(self._chord_types), len(self._alias_map))

    @classmethod
    def get_default(cls) -> ChordTypeDatabase:
        """Return the process-wide database built from the builtin table."""
        if cls._default is None:
            with cls._default_lock:
                if cls._default is None:
                    cls._default = cls()
        return cls._default

    # ------------------------------------------------------------------

    def get_chord_types(self) -> list[ChordType]:
        return list(self._chord_types)

    @property
    def size(self) -> int:
        return len(self._chord_types)

    def __len__(self) -> int:
        return len(self._chord_types)

    def get_chord_type(self, index: int) -> ChordType:
        if not 0 <= index < len(self._chord_types):
            msg = f"Chord type index out of range: {index}"
            raise IndexError(msg)
        return self._chord_types[index]

    def get_chord_type_by_name(self, name: str) -> ChordType | None:
        """Return the chord type with this name or alias, or None.

        Lookup is case sensitive: "M7" is a major seventh and "m7" a minor
        seventh.
        """
        return self._alias_map.get(name)

    def get_chord_type_by_degrees(self, degrees: Iterable[Degree]) -> ChordType | None:
        """Return the first chord type made of exactly these degrees, in any order."""
        wanted = set(degrees)
        if not wanted:
            msg = "degrees must not be empty"
            raise ValueError(msg)
        for ct in self._chord_types:
            if len(ct.degrees) == len(wanted) and wanted.issubset(ct.degrees):
                return ct
        return None

    def get_chord_type_index(self, ct: ChordType) -> int:
        """Return the index of ``ct``, or -1."""
        try:
            return self._chord_types.index(ct)
        except ValueError:
            return -1

    # ------------------------------------------------------------------
    # Aliases
    # ------------------------------------------------------------------

    def get_aliases(self, ct: ChordType) -> list[str]:
        """Return the aliases of ``ct``, not including its name."""
        return _split_aliases(self._aliases_string(ct))

    def add_alias(self, ct: ChordType, alias: str) -> None:
        """Register ``alias`` for ``ct``.

        Raises
        ------
        ValueError
            If ``ct`` is not in the database or the alias is blank.
        InvalidAliasError
            If the alias already designates another chord type.
        """
        if ct not in self._default_aliases:
            msg = f"Unknown chord type: {ct}"
            raise ValueError(msg)
        if not alias.strip() or ":" in alias:
            msg = f"Invalid alias: {alias!r}"
            raise ValueError(msg)
        old_ct = self._alias_map.get(alias)
        if old_ct is not None:
            if old_ct == ct:
                return
            msg = f"Alias '{alias}' can not be added for chord type '{ct}', it is already used by chord type '{old_ct}'"
            logger.warning(msg)
            raise InvalidAliasError(msg)

        aliases = self._aliases_string(ct)
        sep = "" if aliases.endswith(":") else ":"
        self._custom_aliases[ct] = aliases + sep + alias + ":"
        self._alias_map[alias] = ct

    def reset_aliases(self, ct: ChordType) -> None:
        """Restore the builtin aliases of ``ct``."""
        self._custom_aliases.pop(ct, None)
        self._build_alias_map()

    def reset_aliases_to_default(self) -> None:
        self._custom_aliases.clear()
        self._build_alias_map()

    def _aliases_string(self, ct: ChordType) -> str:
        return self._custom_aliases.get(ct, self._default_aliases.get(ct, ""))

    def _build_alias_map(self) -> None:
        alias_map: dict[str, ChordType] = {}
        errors = []
        for ct in self._chord_types:
            alias_map[ct.name] = ct
            for alias in self.get_aliases(ct):
                cur = alias_map.get(alias)
                if cur is not None and cur != ct:
                    errors.append(f"Alias '{alias}' can not be used for chord type '{ct}', it's already used for '{cur}'")
                    continue
                alias_map[alias] = ct
        if errors:
            for e in errors:
                logger.error(e)
            msg = "Error(s) building the alias map: " + "; ".join(errors)
            raise RuntimeError(msg)
        self._alias_map = alias_map
