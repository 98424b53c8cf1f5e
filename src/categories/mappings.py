"""
Canonical category table.

Maps stable topic keys (e.g. `electrical`) to the English and Spanish labels
content authors actually type. Many labels map to one key. The table is
shared, read-mostly content owned by the authoring side.
"""

from __future__ import annotations

from dataclasses import dataclass

from src.categories.normalizer import contains_label, normalize


@dataclass(frozen=True)
class CanonicalCategory:
    """A canonical topic key and the labels that mean it."""

    key: str
    description: str
    aliases: tuple[str, ...]


CANONICAL_CATEGORIES: dict[str, CanonicalCategory] = {
    c.key: c
    for c in (
        CanonicalCategory(
            key="aircraft-general",
            description="General aircraft systems and knowledge",
            aliases=(
                "Aircraft General", "Airplane General", "General Aircraft", "General Knowledge",
                "Aircraft Systems", "Airplane Systems", "Sistemas de Aeronave",
                "Sistema General", "Sistemas Generales", "Sistemas Generales de Aeronave",
            ),
        ),
        CanonicalCategory(
            key="electrical",
            description="Electrical power systems",
            aliases=(
                "Electrical", "Electrical Systems", "Electrical Power", "Power Systems",
                "Power Distribution", "Aircraft Electrical", "Sistema Eléctrico",
                "Sistema Electrico",
            ),
        ),
        CanonicalCategory(
            key="hydraulics",
            description="Hydraulic power systems",
            aliases=(
                "Hydraulics", "Hydraulic", "Hydraulic Systems", "Hydraulic Power",
                "Aircraft Hydraulics", "Hydraulic Actuation", "Sistema Hidráulico",
                "Sistema Hidraulico",
            ),
        ),
        CanonicalCategory(
            key="fuel",
            description="Fuel storage, distribution and management",
            aliases=(
                "Fuel", "Fuel Systems", "Fuel Management", "Fuel Distribution", "Fuel Storage",
                "Sistema de Combustible", "Gestión de Combustible",
            ),
        ),
        CanonicalCategory(
            key="engines",
            description="Powerplant operation and management",
            aliases=(
                "Engines", "Engine Systems", "Engine Operations", "Engine Management",
                "Powerplant", "Powerplant Systems", "Propulsion Systems", "Motores",
                "Sistema de Motores", "Operación de Motores", "Motor y APU",
            ),
        ),
        CanonicalCategory(
            key="apu",
            description="Auxiliary power unit",
            aliases=(
                "APU", "Auxiliary Power Unit", "APU Systems", "Auxiliary Power",
                "Unidad de Potencia Auxiliar", "Sistema APU",
            ),
        ),
        CanonicalCategory(
            key="flight-controls",
            description="Primary and secondary flight controls",
            aliases=(
                "Flight Controls", "Flight Control Systems", "Primary Controls",
                "Secondary Controls", "Control Surfaces", "Controles de Vuelo",
                "Sistema de Controles",
            ),
        ),
        CanonicalCategory(
            key="navigation",
            description="Flight management and navigation",
            aliases=(
                "Navigation", "Flight Management and Navigation", "Flight Management",
                "FMS", "GPS", "RNAV", "RNP", "ILS", "Navegación", "Sistema de Navegación",
            ),
        ),
        CanonicalCategory(
            key="landing-gear",
            description="Landing gear, brakes and steering",
            aliases=(
                "Landing Gear", "Landing Gear and Brakes", "Gear Systems", "Brakes",
                "Braking Systems", "Undercarriage", "Tren de Aterrizaje", "Sistema de Frenos",
            ),
        ),
        CanonicalCategory(
            key="pressurization",
            description="Air conditioning, bleed and pressurization",
            aliases=(
                "Pressurization", "Cabin Pressure", "Air Conditioning", "Environmental Control",
                "Bleed Air", "Pneumatic", "Presurización", "Control Ambiental",
                "Sistema de Presurización", "Sistema Neumático",
            ),
        ),
        CanonicalCategory(
            key="performance",
            description="Aircraft performance calculations",
            aliases=(
                "Performance", "Aircraft Performance", "Flight Performance", "Rendimiento",
                "Rendimiento de Vuelo", "Performance de Aeronave",
            ),
        ),
    )
}

# Filter labels that mean "no category constraint".
WILDCARD_LABELS = frozenset({"all", "none"})


def available_categories() -> list[str]:
    """Canonical keys in table order."""
    return list(CANONICAL_CATEGORIES)


def describe(key: str) -> str:
    category = CANONICAL_CATEGORIES.get(key)
    return category.description if category else "Unknown category"


def canonicalize(label: object) -> str | None:
    """
    Map a free-text label to its canonical key.

    Exact alias hits win. Otherwise the key whose alias shares the longest
    substring relationship with the label is chosen, so "Sistema Eléctrico"
    lands on `electrical` rather than on a generic "sistema" entry. Short
    aliases only count as whole tokens, so "Engine Oils" is not `navigation`.

    Returns:
        Canonical key, or None if the label is empty or unknown
    """
    text = normalize(label.replace("-", " ") if isinstance(label, str) else label)
    if not text:
        return None

    best_key: str | None = None
    best_len = 0
    for category in CANONICAL_CATEGORIES.values():
        for alias in (category.key, *category.aliases):
            candidate = normalize(alias.replace("-", " "))
            if candidate == text:
                return category.key
            related = contains_label(text, candidate) or contains_label(candidate, text)
            if related and len(candidate) > best_len:
                best_key, best_len = category.key, len(candidate)
    return best_key


def expand(category: str) -> list[str]:
    """
    Requested category plus, for a canonical key, all of its aliases.

    Order-preserving and deduplicated; unknown labels expand to themselves.
    """
    labels = [category]
    canonical = CANONICAL_CATEGORIES.get(category.strip().lower()) if isinstance(category, str) else None
    if canonical is not None:
        labels.extend(canonical.aliases)
    return list(dict.fromkeys(labels))


def is_wildcard(categories: list[str] | None) -> bool:
    """True when a category list means "all categories"."""
    if not categories:
        return True
    return any(isinstance(c, str) and c.strip().lower() in WILDCARD_LABELS for c in categories)


def expand_all(categories: list[str]) -> list[str]:
    """Expand every requested category, deduplicated across the whole list."""
    targets: list[str] = []
    for category in categories:
        targets.extend(expand(category))
    return list(dict.fromkeys(targets))
