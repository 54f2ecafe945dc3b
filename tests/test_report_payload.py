"""Tests for the JSON presentation payload."""

import json

import pytest

from dsa_analyzer.engine import analyze
from dsa_analyzer.export.report_payload import (
    build_report_payload,
    comparison_label,
    report_to_json,
)
from dsa_analyzer.models.character import CharacterRecord, SpecialAbility
from dsa_analyzer.models.constants import Category


@pytest.fixture
def report():
    record = CharacterRecord(
        name="Alrik",
        skills={"Klettern": 5, "Blubbern": 2},
        special_abilities=[SpecialAbility("Glück", "advantage", "30")],
        reported_total=30,
        reported_subtotals={Category.SKILLS: 10},
    )
    return analyze(record)


@pytest.mark.parametrize(
    "discrepancy, label",
    [
        (0, "Perfect match"),
        (10, "Platform shows 10 AP less"),
        (-3, "Platform shows 3 AP more"),
    ],
)
def test_comparison_label(discrepancy, label):
    assert comparison_label(discrepancy) == label


def test_payload_totals(report):
    payload = build_report_payload(report)
    assert payload["character"] == {
        "name": "Alrik",
        "species": "Mensch",
        "species_supported": True,
    }
    assert payload["totals"] == {
        "computed": 40,
        "reported": 30,
        "discrepancy": 10,
        "verdict": "Platform shows 10 AP less",
        "consistent": False,
        "experience_total": None,
        "unspent": None,
    }


def test_payload_categories(report):
    payload = build_report_payload(report)
    categories = {c["category"]: c for c in payload["categories"]}
    assert list(categories) == [c.value for c in Category]

    skills = categories["skills"]
    assert skills["label"] == "Skills"
    assert skills["subtotal"] == 10
    assert skills["flagged"] == 1
    assert skills["entries"][0] == {
        "name": "Blubbern",
        "start_tier": 0,
        "end_tier": 2,
        "ap_cost": 0,
        "flag": "unrecognized_trait",
        "note": "Unrecognized skills trait 'Blubbern': no cost column declared or known",
    }
    assert skills["entries"][1]["flag"] is None


def test_payload_category_discrepancies(report):
    payload = build_report_payload(report)
    assert payload["category_discrepancies"] == [
        {
            "category": "skills",
            "label": "Skills",
            "computed": 10,
            "reported": 10,
            "discrepancy": 0,
        }
    ]
    assert payload["warnings"] == [
        "1 entries flagged and counted with partial or zero cost"
    ]


def test_json_round_trips_to_payload(report):
    text = report_to_json(report)
    assert json.loads(text) == build_report_payload(report)
    assert "Glück" in text


def test_json_is_stable(report):
    assert report_to_json(report, indent=None) == report_to_json(report, indent=None)


def test_payload_experience_totals():
    """1100 earned, 30 spent by the platform's count: 1070 left."""
    record = CharacterRecord(skills={"Klettern": 5}, reported_total=30, experience_total=1100)
    totals = build_report_payload(analyze(record))["totals"]
    assert totals["experience_total"] == 1100
    assert totals["unspent"] == 1070
