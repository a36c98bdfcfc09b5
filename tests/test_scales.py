import pytest

from chord_harmony.chord_symbol import ChordSymbol
from chord_harmony.degree import Degree
from chord_harmony.note import Alteration, Note
from chord_harmony.scales import (
    AEOLIAN,
    DORIAN,
    LOCRIAN,
    MAJOR,
    PENTATONIC_MAJOR,
    STANDARD_SCALES,
    ScaleManager,
    StandardScaleInstance,
)


@pytest.fixture
def manager():
    return ScaleManager.get_default()


def matching(manager, text):
    return [ssi.scale.name for ssi in manager.get_matching_scales(ChordSymbol.parse(text))]


class TestStandardScale:
    def test_seventeen_scales(self, manager):
        assert len(manager.get_standard_scales()) == 17
        assert manager.get_standard_scales()[0] is MAJOR

    def test_scale_shape(self):
        for scale in STANDARD_SCALES:
            assert 5 <= len(scale.degrees) <= 8, scale
            assert scale.degrees[0] is Degree.ROOT
            pitches = [d.pitch for d in scale.degrees]
            assert pitches == sorted(set(pitches)), scale

    def test_lookups(self):
        assert DORIAN.get_degree(3) is Degree.THIRD_FLAT
        assert DORIAN.get_degree(4) is None
        assert DORIAN.notes[2] == Note(3)

    def test_by_name(self, manager):
        assert manager.get_standard_scale(" dorian ") is DORIAN
        assert manager.get_standard_scale("Lydian b7").name == "Lydian b7"
        assert manager.get_standard_scale("Hungarian") is None


class TestStandardScaleInstance:
    def test_equality_ignores_octave(self):
        assert StandardScaleInstance(DORIAN, Note(62)) == StandardScaleInstance(DORIAN, Note(2))
        assert StandardScaleInstance(DORIAN, Note(2)) != StandardScaleInstance(AEOLIAN, Note(2))
        assert StandardScaleInstance(DORIAN, Note(2)) != StandardScaleInstance(DORIAN, Note(4))

    def test_notes(self):
        d_dorian = StandardScaleInstance(DORIAN, Note(62))
        assert d_dorian.relative_pitches == [2, 4, 5, 7, 9, 11, 0]
        assert str(d_dorian) == "D Dorian"
        assert str(StandardScaleInstance(MAJOR, Note(61, alteration_display=Alteration.SHARP))) == "C# Major"

    def test_fit_degree_by_pitch(self):
        assert StandardScaleInstance(DORIAN, Note(0)).fit_degree(Degree.NINTH_SHARP) is Degree.THIRD_FLAT

    def test_fit_degree_by_natural(self):
        assert StandardScaleInstance(LOCRIAN, Note(0)).fit_degree(Degree.NINTH) is Degree.NINTH_FLAT

    def test_fit_degree_no_match(self):
        assert StandardScaleInstance(PENTATONIC_MAJOR, Note(0)).fit_degree(Degree.FOURTH_OR_ELEVENTH) is None


class TestMatchingScales:
    def test_seventh_flat_five(self, manager):
        scales = matching(manager, "C7b5")
        assert scales == ["Lydian b7", "Altered", "Diminished Half-Whole", "Whole-Tone"]
        assert "Major" not in scales
        assert "Dorian" not in scales

    def test_minor_seventh(self, manager):
        scales = matching(manager, "Cm7")
        for name in ("Dorian", "Phrygian", "Aeolian", "Pentatonic Minor"):
            assert name in scales
        assert "Major" not in scales
        assert "Harmonic Minor" not in scales

    def test_started_on_root(self, manager):
        res = manager.get_matching_scales(ChordSymbol.parse("Dm7"))
        assert res[0] == StandardScaleInstance(DORIAN, Note(2))
        assert all(ssi.start_note.relative_pitch == 2 for ssi in res)

    def test_major_triad_order(self, manager):
        scales = matching(manager, "F")
        assert scales[0] == "Major"
        assert scales.index("Lydian") < scales.index("Mixolydian")
