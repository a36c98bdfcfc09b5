import sys

from chord_harmony import ChordSymbol, Degree, ScaleManager, find_chords, to_harte

# Parse a chord symbol, aliases are accepted
cs = ChordSymbol.parse("Ebmin7/Bb")
sys.stdout.write(f"{cs.original_name} -> {cs.name} {cs.chord_type.degree_string}\n")  # Ebm7/Bb [1 3b 5 7b]
sys.stdout.write(to_harte(cs) + "\n")  # Eb:min7/5

# Recognize chords from pitch classes, in any order
for found in find_chords([10, 4, 7, 0]):
    sys.stdout.write(f"{found.name} {found.to_note_string()}\n")  # C7 [C E G Bb]

# Scales playable over a chord
for ssi in ScaleManager.get_default().get_matching_scales(ChordSymbol.parse("C7b5")):
    sys.stdout.write(f"{ssi}\n")  # C Lydian b7, C Altered, ...

# Adapt a degree written over Cm7 to F7b9
dest = ChordSymbol.parse("F7b9").chord_type
sys.stdout.write(f"{dest.fit_degree_advanced(Degree.NINTH)}\n")  # NINTH_FLAT
