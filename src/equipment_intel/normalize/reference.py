"""Reference lists used to derive operators, variants, and image filters.

These are data, not logic: the normalizer reads them through
``NormalizerConfig`` so a config file can replace any of them.
"""

OPERATOR_NATIONS: tuple[str, ...] = (
    "United States",
    "USA",
    "US",
    "India",
    "Russia",
    "China",
    "UK",
    "United Kingdom",
    "France",
    "Germany",
    "Israel",
    "Japan",
    "South Korea",
    "Pakistan",
    "Iran",
    "Saudi Arabia",
    "UAE",
    "Turkey",
    "Australia",
    "Canada",
    "Brazil",
    "Egypt",
    "Italy",
    "Spain",
    "Poland",
    "Ukraine",
    "North Korea",
    "Syria",
    "Iraq",
)

VARIANT_LABEL_WORDS: tuple[str, ...] = ("variant", "version", "model", "type")

# Substrings marking decorative images that never depict the equipment.
ICON_URL_PATTERNS: tuple[str, ...] = ("logo", "icon", "favicon", "sprite")

# Bounds on the clause captured after a variant label word (exclusive).
VARIANT_CLAUSE_MIN = 3
VARIANT_CLAUSE_MAX = 100
