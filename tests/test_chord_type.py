import pytest

from chord_harmony.chord_type import NOT_PRESENT, ChordType, DegreeIndex, Family
from chord_harmony.database import ChordTypeDatabase
from chord_harmony.degree import Degree, Natural
from chord_harmony.note import Note
from chord_harmony.scales import DORIAN, LOCRIAN, StandardScaleInstance


@pytest.fixture
def db():
    return ChordTypeDatabase.get_default()


def ct(name):
    res = ChordTypeDatabase.get_default().get_chord_type_by_name(name)
    assert res is not None, name
    return res


class TestConstruction:
    def test_half_diminished(self, db):
        half_dim = ChordType("m7", "b5", Family.DIMINISHED, third=-1, fifth=-1, seventh=-1)
        assert half_dim.degree_string == "[1 3b 5b 7b]"
        assert half_dim.family is Family.DIMINISHED
        assert db.get_chord_type_by_name("m7b5") == half_dim

    @pytest.mark.parametrize(
        ("name", "degree_string"),
        [
            ("", "[1 3 5]"),
            ("6", "[1 3 5 6]"),
            ("13", "[1 3 5 7b 13]"),
            ("m9", "[1 3b 5 7b 9]"),
            ("m11", "[1 3b 5 7b 11]"),
            ("m911", "[1 3b 5 7b 9 11]"),
            ("9sus", "[1 4 5 7b 9]"),
            ("dim7", "[1 3b 5b 6]"),
            ("M13#11", "[1 3 5 7 9 11# 13]"),
        ],
    )
    def test_degree_string(self, name, degree_string):
        assert ct(name).degree_string == degree_string

    def test_invalid_parameter(self):
        with pytest.raises(ValueError, match="Invalid chord type parameters"):
            ChordType("x", "", Family.MAJOR, third=2, fifth=0)

    @pytest.mark.parametrize(
        ("kwargs", "problem"),
        [
            ({"third": 1, "fifth": 0}, "third can not be sharp"),
            ({"third": 0, "fifth": 0, "seventh": 1}, "seventh can not be sharp"),
            ({"third": 0, "fifth": 0, "eleventh": 0}, "major third"),
            ({"fifth": 0}, "must have a fourth"),
            ({"third": 0}, "fifth is required"),
        ],
    )
    def test_inconsistent(self, kwargs, problem):
        with pytest.raises(ValueError, match=problem):
            ChordType("x", "", Family.MAJOR, **kwargs)

    def test_equality_uses_degrees(self):
        a = ChordType("m7", "", Family.MINOR, third=-1, fifth=0, seventh=-1)
        b = ChordType("min7", "", Family.MINOR, third=-1, fifth=0, seventh=-1)
        assert a == b
        assert hash(a) == hash(b)
        assert a != ChordType("7", "", Family.SEVENTH, third=0, fifth=0, seventh=-1)

    def test_not_present_default(self):
        triad = ChordType("", "", Family.MAJOR, third=0, fifth=0)
        assert triad.seventh == NOT_PRESENT
        assert triad.nb_degrees == 3

    def test_chord_on_c(self):
        assert ct("7").chord.pitches == [0, 4, 7, 10]


class TestLookups:
    def test_get_degree(self):
        c7 = ct("7")
        assert c7.get_degree(DegreeIndex.SIXTH_OR_SEVENTH) is Degree.SEVENTH_FLAT
        assert c7.get_degree(DegreeIndex.EXTENSION1) is None

    def test_get_degree_by_natural(self):
        assert ct("7#9").get_degree_by_natural(Natural.NINTH) is Degree.NINTH_SHARP
        assert ct("7").get_degree_by_natural(Natural.NINTH) is None

    def test_get_degree_by_pitch(self):
        assert ct("m7b5").get_degree_by_pitch(6) is Degree.FIFTH_FLAT
        assert ct("m7b5").get_degree_by_pitch(8) is None
        with pytest.raises(ValueError, match="out of range"):
            ct("m7b5").get_degree_by_pitch(12)

    def test_get_degree_index(self):
        assert ct("9").get_degree_index(Degree.NINTH) is DegreeIndex.EXTENSION1
        assert ct("9").get_degree_index(Degree.NINTH_FLAT) is None
        assert ct("M9#11").get_extension_degree_indexes() == [
            DegreeIndex.SIXTH_OR_SEVENTH,
            DegreeIndex.EXTENSION1,
            DegreeIndex.EXTENSION2,
        ]

    def test_get_pitch(self):
        assert ct("m7").get_pitch(Natural.THIRD, 60) == 63
        assert ct("m7").get_pitch(Natural.NINTH, 60) == -1

    def test_most_probable_degree(self):
        assert ct("m7").get_degree_most_probable(3) is Degree.THIRD_FLAT
        assert ct("7").get_degree_most_probable(3) is Degree.NINTH_SHARP
        assert ct("m").get_degree_most_probable(3) is Degree.THIRD_FLAT
        assert ct("m").get_degree_most_probable(6) is Degree.ELEVENTH_SHARP

    def test_most_important_degree_indexes(self):
        DI = DegreeIndex
        assert ct("7").get_most_important_degree_indexes() == [DI.THIRD_OR_FOURTH, DI.SIXTH_OR_SEVENTH, DI.FIFTH, DI.ROOT]
        assert ct("6").get_most_important_degree_indexes() == [DI.THIRD_OR_FOURTH, DI.SIXTH_OR_SEVENTH, DI.ROOT, DI.FIFTH]
        assert ct("7b5").get_most_important_degree_indexes() == [DI.THIRD_OR_FOURTH, DI.FIFTH, DI.SIXTH_OR_SEVENTH, DI.ROOT]
        assert ct("13").get_most_important_degree_indexes() == [
            DI.THIRD_OR_FOURTH,
            DI.SIXTH_OR_SEVENTH,
            DI.EXTENSION1,
            DI.FIFTH,
            DI.ROOT,
        ]

    def test_most_important_covers_every_slot(self, db):
        for chord_type in db.get_chord_types():
            indexes = chord_type.get_most_important_degree_indexes()
            assert sorted(di.value for di in indexes) == list(range(chord_type.nb_degrees))


class TestComparisons:
    def test_similarity_prefix(self):
        assert ct("7").get_similarity_index(ct("9")) == 56
        assert ct("7").get_similarity_index(ct("7")) == 63
        assert ct("7").get_similarity_index(ct("7b5")) == 32

    def test_similarity_different_family(self):
        assert ct("m7").get_similarity_index(ct("7")) == 0

    def test_common_degrees(self):
        assert ct("M7").get_nb_common_degrees(ct("6")) == 3
        assert ct("M7").get_nb_common_degrees(ct("6"), sixth_major_seventh_equal=True) == 4
        assert ct("m").get_nb_common_degrees(ct("")) == 1


class TestFitDegree:
    @pytest.mark.parametrize(
        ("name", "degree", "expected"),
        [
            ("m7", Degree.THIRD, Degree.THIRD_FLAT),
            ("7#9", Degree.NINTH, Degree.NINTH_SHARP),
            ("m7b5", Degree.ELEVENTH_SHARP, Degree.FIFTH_FLAT),
            ("6", Degree.SEVENTH, Degree.SIXTH_OR_THIRTEENTH),
            ("M7", Degree.SIXTH_OR_THIRTEENTH, Degree.SEVENTH),
            ("M7", Degree.ELEVENTH_SHARP, None),
            ("m7", Degree.NINTH_FLAT, None),
        ],
    )
    def test_fit_degree(self, name, degree, expected):
        assert ct(name).fit_degree(degree) is expected

    @pytest.mark.parametrize(
        ("name", "degree", "expected"),
        [
            ("m7", Degree.NINTH_FLAT, Degree.NINTH),
            ("m7b5", Degree.NINTH, Degree.NINTH_FLAT),
            ("m7b5", Degree.SIXTH_OR_THIRTEENTH, Degree.THIRTEENTH_FLAT),
            ("7sus", Degree.THIRD, Degree.FOURTH_OR_ELEVENTH),
            ("m7", Degree.ELEVENTH_SHARP, Degree.FIFTH),
            ("7b9", Degree.FOURTH_OR_ELEVENTH, Degree.ELEVENTH_SHARP),
            ("7", Degree.FOURTH_OR_ELEVENTH, Degree.FOURTH_OR_ELEVENTH),
            ("m", Degree.FOURTH_OR_ELEVENTH, Degree.FOURTH_OR_ELEVENTH),
            ("6", Degree.SEVENTH_FLAT, Degree.SEVENTH),
            ("dim7", Degree.SEVENTH_FLAT, Degree.SIXTH_OR_THIRTEENTH),
            ("m", Degree.SEVENTH, Degree.SEVENTH_FLAT),
            ("sus", Degree.SEVENTH, Degree.SEVENTH_FLAT),
            ("dim", Degree.SEVENTH, Degree.SEVENTH_FLAT),
            ("", Degree.SEVENTH, Degree.SEVENTH),
            ("7#5", Degree.SIXTH_OR_THIRTEENTH, Degree.FIFTH_SHARP),
        ],
    )
    def test_fit_degree_advanced_by_convention(self, name, degree, expected):
        assert ct(name).fit_degree_advanced(degree) is expected

    def test_fit_degree_advanced_with_scale(self):
        locrian = StandardScaleInstance(LOCRIAN, Note(0))
        dorian = StandardScaleInstance(DORIAN, Note(0))
        assert ct("m7").fit_degree_advanced(Degree.NINTH, locrian) is Degree.NINTH_FLAT
        assert ct("m7").fit_degree_advanced(Degree.SIXTH_OR_THIRTEENTH, dorian) is Degree.SIXTH_OR_THIRTEENTH
        # A chord tone wins over the scale
        assert ct("m7").fit_degree_advanced(Degree.THIRD, dorian) is Degree.THIRD_FLAT

    def test_fit_degree_advanced_is_total(self, db):
        for chord_type in db.get_chord_types():
            for d in Degree:
                assert isinstance(chord_type.fit_degree_advanced(d), Degree), (chord_type, d)

    def test_fit_degree_is_idempotent(self, db):
        for chord_type in db.get_chord_types():
            for d in chord_type.degrees:
                assert chord_type.fit_degree(d) is d
                assert chord_type.fit_degree_advanced(d) is d

    def test_fifth_by_convention_is_a_defect(self):
        with pytest.raises(RuntimeError, match="no fifth"):
            ct("7")._fit_degree_by_convention(Degree.FIFTH, None)

    def test_fit_degree_index_advanced(self):
        assert ct("7").fit_degree_index_advanced(DegreeIndex.SIXTH_OR_SEVENTH) is Degree.SEVENTH_FLAT
        assert ct("").fit_degree_index_advanced(DegreeIndex.EXTENSION1) is Degree.NINTH
        assert ct("m").fit_degree_index_advanced(DegreeIndex.SIXTH_OR_SEVENTH) is Degree.SEVENTH_FLAT
        assert ct("m7b5").fit_degree_index_advanced(DegreeIndex.EXTENSION2) is Degree.THIRTEENTH_FLAT


class TestClassification:
    def test_third(self):
        assert ct("m7").is_minor()
        assert ct("dim").is_minor()
        assert ct("7").is_major()
        assert not ct("7sus").is_major()
        assert not ct("7sus").is_minor()

    def test_seventh(self):
        assert ct("7").is_seventh_minor()
        assert ct("M9#11").is_seventh_major()
        assert not ct("6").is_seventh()

    def test_sixth_and_thirteenth(self):
        assert ct("6").is_sixth()
        assert not ct("6").is_thirteenth()
        assert ct("13").is_thirteenth()
        assert not ct("13").is_sixth()

    def test_fifth(self):
        assert ct("7b5").is_fifth_flat()
        assert ct("+").is_fifth_sharp()
        assert ct("m7").is_fifth_natural()

    def test_ninth(self):
        assert ct("7#9").is_ninth_sharp()
        assert ct("7b9").is_ninth_flat()
        assert ct("9").is_ninth_natural()
        assert not ct("7").is_ninth()

    def test_eleventh(self):
        assert ct("m11").is_eleventh_natural()
        assert ct("7sus").is_eleventh()
        assert not ct("7sus").is_eleventh_natural()
        assert ct("7#11").is_eleventh_sharp()

    def test_sus(self):
        assert ct("9sus").is_sus()
        assert not ct("9").is_sus()
