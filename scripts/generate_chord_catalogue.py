#!/usr/bin/env python3
"""Generate the catalogue of every chord symbol the library knows and write it to JSON.

One entry per root (12, flat spelling) and builtin chord type, with its
degrees, aliases, Harte notation and, where pychord has a matching quality,
pychord notation.
"""

from __future__ import annotations

import json
from dataclasses import asdict, dataclass, field
from pathlib import Path
from typing import TYPE_CHECKING

from chord_harmony import ChordSymbol, ChordTypeDatabase, Note, to_harte, to_pychord

if TYPE_CHECKING:
    from collections.abc import Iterable


@dataclass
class ChordEntry:
    symbol: str
    family: str
    degrees: str
    harte: str
    pychord: str | None = None
    aliases: list[str] = field(default_factory=list)


def generate_chord_entries(database: ChordTypeDatabase | None = None) -> list[ChordEntry]:
    """Build one entry per (root, chord type), in database order."""
    db = database or ChordTypeDatabase.get_default()
    out = []
    for root_pitch in range(12):
        for ct in db.get_chord_types():
            cs = ChordSymbol(Note(root_pitch), ct)
            try:
                pychord = to_pychord(cs, db)
            except ValueError:
                pychord = None
            out.append(
                ChordEntry(
                    symbol=cs.name,
                    family=ct.family.name,
                    degrees=ct.degree_string,
                    harte=to_harte(cs),
                    pychord=pychord,
                    aliases=[cs.root.to_relative_note_string() + a for a in db.get_aliases(ct)],
                )
            )
    return out


def write_json(path: Path, entries: Iterable[ChordEntry]) -> None:
    """Write chord entries to JSON file."""
    chords = [asdict(e) for e in entries]
    payload: dict[str, object] = {
        "schema": "chord-harmony-catalogue/v1",
        "count": len(chords),
        "chords": chords,
    }
    path.write_text(json.dumps(payload, indent=2, ensure_ascii=False), encoding="utf-8")


def main() -> None:
    """Generate chord catalogue and write to JSON."""
    out_dir = Path(__file__).parent.parent / "testdata"
    out_dir.mkdir(exist_ok=True)

    entries = generate_chord_entries()
    path = out_dir / "chord_catalogue.json"
    write_json(path, entries)
    print(f"Wrote {len(entries)} chord symbols to {path.resolve()}")


if __name__ == "__main__":
    main()
