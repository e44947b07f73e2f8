"""Tests for canonical label dictionaries."""

from compliance_loop.engine.dictionaries import (
    build_label_map,
    build_structured_dictionaries,
    canonicalize,
    dedupe_labels,
    migrate_legacy_label,
)
from compliance_loop.models.education import EducationSession
from compliance_loop.models.qa_action import QaAction


class TestCanonicalize:
    """Tests for canonicalize."""

    def test_collapses_case_and_whitespace(self):
        assert canonicalize("  Unit   2\tWest ") == "unit 2 west"

    def test_empty(self):
        assert canonicalize("") == ""
        assert canonicalize(None) == ""
        assert canonicalize("   ") == ""


class TestDedupeLabels:
    """Tests for dedupe_labels."""

    def test_keeps_shortest_variant(self):
        labels = dedupe_labels(["Unit  2", "unit 2", "UNIT 2 "])
        assert labels == ["unit 2"]

    def test_tie_keeps_first_seen(self):
        assert dedupe_labels(["ICU", "icu", "Icu"]) == ["ICU"]

    def test_skips_blank_and_sorts(self):
        labels = dedupe_labels(["west", "", None, "   ", "East", "center"])
        assert labels == ["center", "East", "west"]

    def test_label_map_keys(self):
        mapping = build_label_map(["Hand  Hygiene", "hand hygiene"])
        assert mapping == {"hand hygiene": "hand hygiene"}


class TestMigrateLegacyLabel:
    """Tests for migrate_legacy_label."""

    def test_matches_known_option(self):
        options = ["Unit 2", "3 West"]
        assert migrate_legacy_label("  unit   2 ", options) == "Unit 2"

    def test_falls_back_to_trimmed_original(self):
        assert migrate_legacy_label("  Rehab Wing ", ["Unit 2"]) == "Rehab Wing"

    def test_blank_value(self):
        assert migrate_legacy_label("  ", ["Unit 2"]) == ""
        assert migrate_legacy_label(None, ["Unit 2"]) == ""


class TestStructuredDictionaries:
    """Tests for build_structured_dictionaries."""

    def test_builds_all_lists(self):
        actions = [
            QaAction(id="qa_1", unit="Unit 2", owner="Pat Lee", staff_role="RN",
                     topic="Hand hygiene", issue="Missed hand hygiene"),
            QaAction(id="qa_2", unit="unit  2", owner="pat lee", staff_role="CNA",
                     topic="hand hygiene", issue="Falls"),
        ]
        sessions = [
            EducationSession(id="edu_1", unit="3 West", instructor="Sam Ortiz", topic="Falls"),
        ]

        dictionaries = build_structured_dictionaries(actions, sessions)

        assert dictionaries.units == ["3 West", "Unit 2"]
        assert dictionaries.owners == ["Pat Lee", "Sam Ortiz"]
        assert dictionaries.staff_roles == ["CNA", "RN"]
        assert dictionaries.topics == ["Falls", "Hand hygiene", "Missed hand hygiene"]
        assert dictionaries.to_dict()["units"] == ["3 West", "Unit 2"]
