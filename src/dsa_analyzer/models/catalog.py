"""Built-in DSA5 trait catalog.

Used when an export does not declare a trait's cost column. Covers the
eight attributes, the core-rules skills, and the core combat techniques.
Spells and liturgies are too numerous to list; they must declare a column.
"""

from dsa_analyzer.models.constants import CostColumn


C = CostColumn

# Attribute key (as exported) -> display name
ATTRIBUTES: dict[str, str] = {
    "mu": "Mut",
    "kl": "Klugheit",
    "in": "Intuition",
    "ch": "Charisma",
    "ff": "Fingerfertigkeit",
    "ge": "Gewandtheit",
    "ko": "Konstitution",
    "kk": "Körperkraft",
}

_ATTRIBUTE_KEYS_BY_NAME: dict[str, str] = {
    name.lower(): key for key, name in ATTRIBUTES.items()
}


def attribute_key(name: str) -> str | None:
    """Normalise an attribute key or display name to its export key."""
    lowered = name.strip().lower()
    if lowered in ATTRIBUTES:
        return lowered
    return _ATTRIBUTE_KEYS_BY_NAME.get(lowered)


SKILL_COLUMNS: dict[str, CostColumn] = {
    # Körpertalente
    "Fliegen": C.B,
    "Gaukeleien": C.A,
    "Klettern": C.B,
    "Körperbeherrschung": C.D,
    "Kraftakt": C.B,
    "Reiten": C.B,
    "Schwimmen": C.B,
    "Selbstbeherrschung": C.D,
    "Singen": C.A,
    "Sinnesschärfe": C.D,
    "Tanzen": C.A,
    "Taschendiebstahl": C.B,
    "Verbergen": C.C,
    "Zechen": C.A,
    # Gesellschaftstalente
    "Bekehren & Überzeugen": C.B,
    "Betören": C.B,
    "Einschüchtern": C.B,
    "Etikette": C.B,
    "Gassenwissen": C.C,
    "Menschenkenntnis": C.C,
    "Überreden": C.C,
    "Verkleiden": C.B,
    "Willenskraft": C.D,
    # Naturtalente
    "Fährtensuchen": C.C,
    "Fesseln": C.A,
    "Fischen & Angeln": C.A,
    "Orientierung": C.B,
    "Pflanzenkunde": C.C,
    "Tierkunde": C.C,
    "Wildnisleben": C.C,
    # Wissenstalente
    "Brett- & Glücksspiel": C.A,
    "Geographie": C.B,
    "Geschichtswissen": C.B,
    "Götter & Kulte": C.B,
    "Kriegskunst": C.B,
    "Magiekunde": C.C,
    "Mechanik": C.B,
    "Rechnen": C.A,
    "Rechtskunde": C.A,
    "Sagen & Legenden": C.B,
    "Sphärenkunde": C.B,
    "Sternkunde": C.A,
    # Handwerkstalente
    "Alchimie": C.C,
    "Boote & Schiffe": C.B,
    "Fahrzeuge": C.A,
    "Handel": C.B,
    "Heilkunde Gift": C.B,
    "Heilkunde Krankheiten": C.B,
    "Heilkunde Seele": C.B,
    "Heilkunde Wunden": C.D,
    "Holzbearbeitung": C.B,
    "Lebensmittelbearbeitung": C.A,
    "Lederbearbeitung": C.B,
    "Malen & Zeichnen": C.A,
    "Metallbearbeitung": C.C,
    "Musizieren": C.A,
    "Schlösserknacken": C.C,
    "Steinbearbeitung": C.A,
    "Stoffbearbeitung": C.A,
}

COMBAT_TECHNIQUE_COLUMNS: dict[str, CostColumn] = {
    "Armbrüste": C.B,
    "Bögen": C.C,
    "Dolche": C.B,
    "Fechtwaffen": C.C,
    "Hiebwaffen": C.C,
    "Kettenwaffen": C.C,
    "Lanzen": C.B,
    "Raufen": C.B,
    "Schilde": C.C,
    "Schwerter": C.C,
    "Stangenwaffen": C.C,
    "Wurfwaffen": C.B,
    "Zweihandhiebwaffen": C.C,
    "Zweihandschwerter": C.C,
}
