import logging

import pytest

from chord_harmony.chord_symbol import ChordSymbol
from chord_harmony.chord_type import NOT_PRESENT as NP
from chord_harmony.chord_type import Family
from chord_harmony.database import BUILTIN_CHORD_TYPES, ChordTypeDatabase, InvalidAliasError
from chord_harmony.degree import Degree


@pytest.fixture
def db():
    # A private instance: alias tests mutate it
    return ChordTypeDatabase()


class TestBuiltinChordTypes:
    def test_size(self, db):
        assert db.size == 65
        assert len(db) == len(BUILTIN_CHORD_TYPES)

    def test_family_counts(self, db):
        counts = {}
        for ct in db.get_chord_types():
            counts[ct.family] = counts.get(ct.family, 0) + 1
        assert counts == {
            Family.MAJOR: 14,
            Family.SEVENTH: 24,
            Family.MINOR: 15,
            Family.DIMINISHED: 6,
            Family.SUS: 6,
        }

    def test_unique_names_and_degrees(self, db):
        cts = db.get_chord_types()
        assert len({ct.name for ct in cts}) == len(cts)
        assert len({ct.degrees for ct in cts}) == len(cts)

    def test_every_type_has_root_third_or_fourth_and_fifth(self, db):
        for ct in db.get_chord_types():
            assert ct.degrees[0] is Degree.ROOT
            assert ct.degrees[1].natural.pitch in (4, 5)
            assert ct.degrees[2].natural.pitch == 7

    def test_default_is_shared(self):
        assert ChordTypeDatabase.get_default() is ChordTypeDatabase.get_default()

    def test_duplicate_degrees_rejected(self):
        rows = [
            ("m7", "", Family.MINOR, "", NP, -1, NP, 0, NP, -1),
            ("min7", "", Family.MINOR, "", NP, -1, NP, 0, NP, -1),
        ]
        with pytest.raises(RuntimeError, match="same degrees"):
            ChordTypeDatabase(rows)

    def test_conflicting_builtin_aliases_rejected(self):
        rows = [
            ("m", "", Family.MINOR, ":-:", NP, -1, NP, 0, NP, NP),
            ("m7", "", Family.MINOR, ":-:", NP, -1, NP, 0, NP, -1),
        ]
        with pytest.raises(RuntimeError, match="alias map"):
            ChordTypeDatabase(rows)


class TestLookups:
    @pytest.mark.parametrize(
        ("alias", "name"),
        [
            ("min7", "m7"),
            ("-7", "m7"),
            ("maj7", "M7"),
            ("7alt", "7#9#5"),
            ("ø", "m7b5"),
            ("sus4", "sus"),
            ("", ""),
            ("maj", ""),
            ("add9", "2"),
        ],
    )
    def test_by_name(self, db, alias, name):
        assert db.get_chord_type_by_name(alias).name == name

    def test_by_name_is_case_sensitive(self, db):
        assert db.get_chord_type_by_name("M7").is_seventh_major()
        assert db.get_chord_type_by_name("m7").is_seventh_minor()
        assert db.get_chord_type_by_name("MIN7") is None

    def test_add9_is_not_sus2(self, db):
        # "2" keeps its third, so the third-less aliases do not belong to it
        assert db.get_chord_type_by_name("2").degree_string == "[1 3 5 9]"
        assert db.get_chord_type_by_name("sus2") is None
        assert db.get_chord_type_by_name("1+2+5") is None
        with pytest.raises(ValueError):
            ChordSymbol.parse("Csus2", db)

    def test_by_degrees(self, db):
        ct = db.get_chord_type_by_degrees([Degree.SEVENTH_FLAT, Degree.ROOT, Degree.FIFTH, Degree.THIRD])
        assert ct.name == "7"
        assert db.get_chord_type_by_degrees([Degree.ROOT, Degree.THIRD, Degree.FIFTH_SHARP, Degree.SEVENTH_FLAT]).name == "7#5"
        assert db.get_chord_type_by_degrees([Degree.ROOT, Degree.NINTH_FLAT]) is None
        with pytest.raises(ValueError, match="empty"):
            db.get_chord_type_by_degrees([])

    def test_index(self, db):
        assert db.get_chord_type(0).name == ""
        assert db.get_chord_type_index(db.get_chord_type_by_name("m7")) == db.get_chord_types().index(
            db.get_chord_type_by_name("m7")
        )
        with pytest.raises(IndexError):
            db.get_chord_type(db.size)


class TestAliases:
    def test_get_aliases(self, db):
        m7 = db.get_chord_type_by_name("m7")
        assert db.get_aliases(m7) == ["mi7", "min7", "-7"]

    def test_add_alias(self, db):
        m7 = db.get_chord_type_by_name("m7")
        db.add_alias(m7, "minor7")
        assert db.get_chord_type_by_name("minor7") is m7
        assert db.get_aliases(m7)[-1] == "minor7"

    def test_add_same_alias_twice(self, db):
        m7 = db.get_chord_type_by_name("m7")
        db.add_alias(m7, "min7")
        assert db.get_aliases(m7) == ["mi7", "min7", "-7"]

    def test_add_alias_used_elsewhere(self, db, caplog):
        m7 = db.get_chord_type_by_name("m7")
        with caplog.at_level(logging.WARNING), pytest.raises(InvalidAliasError, match="already used"):
            db.add_alias(m7, "maj7")
        assert "already used" in caplog.text

    @pytest.mark.parametrize("alias", ["", "  ", "a:b"])
    def test_add_invalid_alias(self, db, alias):
        with pytest.raises(ValueError, match="Invalid alias"):
            db.add_alias(db.get_chord_type_by_name("m7"), alias)

    def test_reset_aliases(self, db):
        m7 = db.get_chord_type_by_name("m7")
        m9 = db.get_chord_type_by_name("m9")
        db.add_alias(m7, "minor7")
        db.add_alias(m9, "minor9")
        db.reset_aliases(m7)
        assert db.get_chord_type_by_name("minor7") is None
        assert db.get_chord_type_by_name("minor9") is m9
        db.reset_aliases_to_default()
        assert db.get_chord_type_by_name("minor9") is None
        assert db.get_chord_type_by_name("min9") is m9
