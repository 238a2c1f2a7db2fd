"""Grouping of Toronto crime types into violent and non-violent categories."""

VIOLENT = "Violent"
NON_VIOLENT = "Non-Violent"
CATEGORIES = (VIOLENT, NON_VIOLENT)

# Adding a crime type is a one-line change here; anything not listed is Non-Violent.
CRIME_CATEGORY_MAP: dict[str, str] = {
    "assault": VIOLENT,
    "breakenter": VIOLENT,
    "homicide": VIOLENT,
    "robbery": VIOLENT,
    "shooting": VIOLENT,

    "autotheft": NON_VIOLENT,
    "biketheft": NON_VIOLENT,
    "theftfrommv": NON_VIOLENT,
    "theftover": NON_VIOLENT,
}

CRIME_TYPE_LABELS: dict[str, str] = {
    "assault": "Assault",
    "autotheft": "Auto Theft",
    "biketheft": "Bike Theft",
    "breakenter": "Break and Enter",
    "homicide": "Homicide",
    "robbery": "Robbery",
    "shooting": "Shooting",
    "theftfrommv": "Theft from Motor Vehicle",
    "theftover": "Theft Over",
}


def categorize_crime_type(crime_type: str) -> str:
    """Map a crime type (e.g. 'assault') to Violent or Non-Violent."""
    return CRIME_CATEGORY_MAP.get(crime_type.strip().lower(), NON_VIOLENT)


def crime_type_label(crime_type: str) -> str:
    return CRIME_TYPE_LABELS.get(crime_type, crime_type.title())


def expand_categories(types) -> dict[str, tuple[str, ...]]:
    """Group crime types by their assigned category."""
    grouped: dict[str, set] = {}
    for t in types:
        grouped.setdefault(categorize_crime_type(t), set()).add(t)
    return {cat: tuple(sorted(values)) for cat, values in grouped.items()}
