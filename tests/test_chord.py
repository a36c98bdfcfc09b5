import pytest

from chord_harmony.chord import Chord
from chord_harmony.note import Alteration, Note


@pytest.fixture
def c_major():
    return Chord([Note(67), Note(60), Note(64)])


class TestChord:
    def test_sorted_by_pitch(self, c_major):
        assert c_major.pitches == [60, 64, 67]
        assert c_major.min_pitch == 60
        assert c_major.max_pitch == 67

    def test_duplicate_pitch_ignored(self, c_major):
        c_major.add(Note(64, velocity=50))
        assert len(c_major) == 3
        assert c_major[1].velocity == 100

    def test_remove_pitch(self, c_major):
        assert c_major.remove_pitch(64) == Note(64)
        assert c_major.remove_pitch(64) is None
        assert c_major.pitches == [60, 67]

    def test_empty_chord_bounds(self):
        with pytest.raises(ValueError, match="Empty chord"):
            _ = Chord().min_pitch

    def test_transpose_in_place(self, c_major):
        c_major.transpose(2)
        assert c_major.pitches == [62, 66, 69]
        assert str(c_major) == "[D Gb A]"

    def test_set_alteration(self, c_major):
        c_major.transpose(2)
        c_major.set_alteration(Alteration.SHARP)
        assert str(c_major) == "[D F# A]"

    def test_relative_pitch_chord(self):
        chord = Chord([Note(70), Note(64)])
        assert chord.relative_pitch_chord().pitches == [4, 10]
        assert chord.index_of_relative_pitch(10) == 1
        assert chord.index_of_relative_pitch(0) == -1

    def test_center_chord_octave(self, c_major):
        c_major.center_chord_octave(36, 48)
        assert c_major.pitches == [36, 40, 43]

    @pytest.mark.parametrize(
        ("low", "high", "expected"),
        [
            (48, 72, [60, 64, 67]),
            (60, 84, [72, 76, 79]),
            (0, 127, [60, 64, 67]),
        ],
    )
    def test_center_chord_octave_on_range_center(self, c_major, low, high, expected):
        c_major.center_chord_octave(low, high)
        assert c_major.pitches == expected

    def test_clone_is_independent(self, c_major):
        copy = c_major.clone()
        copy.transpose(1)
        assert copy != c_major
        assert c_major.pitches == [60, 64, 67]

    def test_compute_distance(self, c_major):
        other = Chord([Note(59), Note(65), Note(67)])
        assert c_major.compute_distance(other) == 2
        with pytest.raises(ValueError, match="sizes differ"):
            c_major.compute_distance(Chord([Note(60)]))

    def test_equals_relative(self, c_major):
        assert c_major.equals_relative(Chord([Note(48), Note(52), Note(55)]))
        assert not c_major.equals_relative(Chord([Note(48), Note(51), Note(55)]))

    def test_not_hashable(self, c_major):
        with pytest.raises(TypeError):
            hash(c_major)
