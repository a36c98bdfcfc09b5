import pytest

from chord_harmony.note import (
    Alteration,
    Note,
    SymbolicDuration,
    chromatic_notes,
    is_white_key,
    limit_pitch,
    normalized_rel_pitch,
)


class TestNote:
    def test_defaults(self):
        n = Note()
        assert n.pitch == 60
        assert n.duration_in_beats == 1.0
        assert n.velocity == 100
        assert n.alteration_display is Alteration.FLAT

    def test_equality_ignores_alteration(self):
        assert Note(60, 1.0, 100, Alteration.FLAT) == Note(60, 1.0, 100, Alteration.SHARP)
        assert hash(Note(61, alteration_display=Alteration.FLAT)) == hash(Note(61, alteration_display=Alteration.SHARP))

    def test_equality_uses_duration_and_velocity(self):
        assert Note(60, 1.0) != Note(60, 2.0)
        assert Note(60, velocity=90) != Note(60, velocity=100)

    def test_ordering_by_pitch(self):
        assert Note(40) < Note(41)
        assert sorted([Note(67), Note(60), Note(64)]) == [Note(60), Note(64), Note(67)]

    @pytest.mark.parametrize(
        "kwargs",
        [
            {"pitch": -1},
            {"pitch": 128},
            {"duration_in_beats": 0},
            {"velocity": 128},
        ],
    )
    def test_invalid(self, kwargs):
        with pytest.raises(ValueError, match="Invalid note"):
            Note(**kwargs)

    def test_transposed(self):
        assert Note(60).get_transposed(12).pitch == 72
        assert Note(60).get_transposed(-1).pitch == 59

    def test_transposed_out_of_range(self):
        with pytest.raises(ValueError):
            Note(120).get_transposed(12)

    def test_transposed_within_octave(self):
        assert Note(71).get_transposed_within_octave(2).pitch == 61
        assert Note(60).get_transposed_within_octave(-1).pitch == 71

    def test_transposed_limited(self):
        assert Note(60).get_transposed_limited(7, 64).pitch == 55
        assert Note(60).get_transposed_limited(-7, 56).pitch == 65
        with pytest.raises(ValueError, match="pitch_limit"):
            Note(60).get_transposed_limited(1, 5)

    def test_centered(self):
        assert Note(30).get_centered(60, 72).pitch == 66
        assert Note(100).get_centered(60, 72).pitch == 64
        with pytest.raises(ValueError, match="too narrow"):
            Note(60).get_centered(60, 70)

    def test_relative_pitch_and_octave(self):
        n = Note(61)
        assert n.relative_pitch == 1
        assert n.octave == 5
        assert n.equals_relative_pitch(Note(13))

    def test_intervals(self):
        c = Note(60)
        assert c.get_relative_asc_interval(Note(55)) == 7
        assert c.get_relative_desc_interval(Note(55)) == 5
        assert Note(59).get_relative_pitch_delta(0) == 1
        assert Note(28).get_relative_pitch_delta(1) == -3

    def test_lower_upper_closest_pitch(self):
        e = Note(64)
        assert e.get_lower_pitch(0, True) == 60
        assert e.get_upper_pitch(0, True) == 72
        assert e.get_lower_pitch(4, False) == 52
        assert e.get_lower_pitch(4, True) == 64
        assert Note(56).get_closest_pitch(0) == 60
        assert Note(62).get_closest_pitch(0) == 60

    def test_symbolic_duration(self):
        assert Note(60, 0.5).symbolic_duration is SymbolicDuration.EIGHTH
        assert Note(60, 0.7).symbolic_duration is None


class TestNoteStrings:
    @pytest.mark.parametrize(
        ("text", "pitch"),
        [
            ("C", 48),
            ("Eb!3", 39),
            ("c#!5", 61),
            ("A#m6", 58),
            ("Cb", 59),
            ("B#", 48),
        ],
    )
    def test_from_string(self, text, pitch):
        assert Note.from_string(text).pitch == pitch

    def test_from_string_alteration(self):
        assert Note.from_string("F#").alteration_display is Alteration.SHARP
        assert Note.from_string("Gb").alteration_display is Alteration.FLAT

    @pytest.mark.parametrize("text", ["", "H", "C!", "C!x", "C!11"])
    def test_from_string_invalid(self, text):
        with pytest.raises(ValueError, match="Invalid note"):
            Note.from_string(text)

    def test_relative_note_string(self):
        assert Note(61).to_relative_note_string() == "Db"
        assert Note(61, alteration_display=Alteration.SHARP).to_relative_note_string() == "C#"
        assert Note(61).to_relative_note_string(Alteration.SHARP) == "C#"

    def test_piano_octave_string(self):
        assert str(Note(60)) == "C4"
        assert Note.parse_piano_octave_string("C4").pitch == 60
        assert Note.parse_piano_octave_string("Bb3").pitch == 58

    def test_save_and_load(self):
        n = Note(63, 2.5, 90, Alteration.SHARP)
        assert n.save_as_string() == "63,SHARP,90,2.5"
        loaded = Note.load_as_string(n.save_as_string())
        assert loaded == n
        assert loaded.alteration_display is Alteration.SHARP
        assert Note.load_as_string("63,90,2.5") == n

    def test_load_invalid(self):
        with pytest.raises(ValueError, match="Invalid note string"):
            Note.load_as_string("63,UP,90,2.5")


class TestHelpers:
    def test_normalized_rel_pitch(self):
        assert normalized_rel_pitch(13) == 1
        assert normalized_rel_pitch(-15) == 9

    def test_white_keys(self):
        assert [p for p in range(12) if is_white_key(p)] == [0, 2, 4, 5, 7, 9, 11]

    def test_limit_pitch(self):
        assert limit_pitch(30, 60, 75) == 66
        with pytest.raises(ValueError):
            limit_pitch(60, 60, 65)

    def test_chromatic_notes(self):
        assert [n.pitch for n in chromatic_notes(60, 63)] == [60, 61, 62, 63]
