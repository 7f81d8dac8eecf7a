"""Spelling tables shared by the store normalizer and the store filter matcher.

Canonical store names have the form ``"<Brand> - <Location>"``. Every table here is
hand-maintained; add a spelling in one place and both the write path and the read
path pick it up.
"""

DEFAULT_BRAND = "Suitor Guy"

# Canonical brand -> accepted spellings. The first entry is the canonical form.
BRAND_ALIASES = {
    "Suitor Guy": ("Suitor Guy", "SG", "SuitorGuy"),
    "Zorucci": ("Zorucci", "Zurocci", "Z"),
}

# Canonical location -> accepted spellings. The first entry is the canonical form.
LOCATION_ALIASES = {
    "Edappally": ("Edappally", "Edapally"),
    "Edappal": ("Edappal",),
    "Kottakkal": ("Kottakkal", "Kottakal", "Z.Kottakkal"),
    "Manjeri": ("Manjeri", "Manjery"),
    "Perinthalmanna": ("Perinthalmanna", "PMNA"),
    "Thrissur": ("Thrissur", "Trissur"),
    "Vatakara": ("Vatakara", "Vadakara"),
    "Trivandrum": ("Trivandrum",),
    "Kottayam": ("Kottayam",),
    "Perumbavoor": ("Perumbavoor",),
    "Chavakkad": ("Chavakkad",),
    "Calicut": ("Calicut",),
    "Palakkad": ("Palakkad",),
    "Kalpetta": ("Kalpetta",),
    "Kannur": ("Kannur",),
    "MG Road": ("MG Road",),
}

# Applied to the location remainder after the brand token has been stripped.
LOCATION_CORRECTIONS = {
    "edapally": "Edappally",
    "manjery": "Manjeri",
    "pmna": "Perinthalmanna",
    "trissur": "Thrissur",
    "kottakal": "Kottakkal",
    "vadakara": "Vatakara",
    "mg road": "MG Road",
}

# Upstream reporting API location id -> canonical store.
LOCATION_ID_TO_STORE = {
    "1": "Zorucci - Edappally",
    "3": "Suitor Guy - Edappally",
    "5": "Suitor Guy - Trivandrum",
    "6": "Zorucci - Edappally",
    "7": "Suitor Guy - Perinthalmanna",
    "8": "Zorucci - Kottakkal",
    "9": "Suitor Guy - Kottayam",
    "10": "Suitor Guy - Perumbavoor",
    "11": "Suitor Guy - Thrissur",
    "12": "Suitor Guy - Chavakkad",
    "13": "Suitor Guy - Calicut",
    "14": "Suitor Guy - Vatakara",
    "15": "Suitor Guy - Edappally",
    "16": "Zorucci - Perinthalmanna",
    "17": "Suitor Guy - Kottakkal",
    "18": "Suitor Guy - Manjeri",
    "19": "Suitor Guy - Palakkad",
    "20": "Suitor Guy - Kalpetta",
    "21": "Suitor Guy - Kannur",
    "100": "Zorucci - Edappal",
    "122": "Zorucci - Kottakkal",
    "133": "Zorucci - Perinthalmanna",
    "144": "Zorucci - Edappally",
    "700": "Suitor Guy - Trivandrum",
    "701": "Suitor Guy - Kottayam",
    "702": "Suitor Guy - Edappally",
    "703": "Suitor Guy - Perumbavoor",
    "704": "Suitor Guy - Thrissur",
    "705": "Suitor Guy - Palakkad",
    "706": "Suitor Guy - Chavakkad",
    "707": "Suitor Guy - Edappal",
    "708": "Suitor Guy - Vatakara",
    "709": "Suitor Guy - Perinthalmanna",
    "710": "Suitor Guy - Manjeri",
    "711": "Suitor Guy - Kottakkal",
    "712": "Suitor Guy - Calicut",
    "716": "Suitor Guy - Kannur",
    "717": "Suitor Guy - Kalpetta",
    "718": "Suitor Guy - MG Road",
}

# Lower-cased historical spelling -> canonical store.
_LEGACY_SPELLINGS = {
    "z- edapally": "Zorucci - Edappally",
    "z- edappal": "Zorucci - Edappal",
    "z.perinthalmanna": "Zorucci - Perinthalmanna",
    "z.kottakkal": "Zorucci - Kottakkal",
    "sg-edappally": "Suitor Guy - Edappally",
    "sg-trivandrum": "Suitor Guy - Trivandrum",
    "sg.kottayam": "Suitor Guy - Kottayam",
    "sg.perumbavoor": "Suitor Guy - Perumbavoor",
    "sg.thrissur": "Suitor Guy - Thrissur",
    "sg.chavakkad": "Suitor Guy - Chavakkad",
    "sg.calicut": "Suitor Guy - Calicut",
    "sg.vadakara": "Suitor Guy - Vatakara",
    "sg.edappal": "Suitor Guy - Edappal",
    "sg.perinthalmanna": "Suitor Guy - Perinthalmanna",
    "sg.kottakkal": "Suitor Guy - Kottakkal",
    "sg.manjeri": "Suitor Guy - Manjeri",
    "sg.palakkad": "Suitor Guy - Palakkad",
    "sg.kalpetta": "Suitor Guy - Kalpetta",
    "sg.kannur": "Suitor Guy - Kannur",
    "sg.mg road": "Suitor Guy - MG Road",
    # Brandless legacy names belong to the default brand.
    "kottayam": "Suitor Guy - Kottayam",
    "trivandrum": "Suitor Guy - Trivandrum",
    "trissur": "Suitor Guy - Thrissur",
    "chavakkad": "Suitor Guy - Chavakkad",
    "calicut": "Suitor Guy - Calicut",
    "vatakara": "Suitor Guy - Vatakara",
    "manjery": "Suitor Guy - Manjeri",
    "palakkad": "Suitor Guy - Palakkad",
    "kalpetta": "Suitor Guy - Kalpetta",
    "kannur": "Suitor Guy - Kannur",
    "perumbavoor": "Suitor Guy - Perumbavoor",
}

CANONICAL_STORES = tuple(sorted(set(LOCATION_ID_TO_STORE.values())))

# Every canonical form maps to itself so normalization is idempotent.
KNOWN_SPELLINGS = dict(_LEGACY_SPELLINGS)
KNOWN_SPELLINGS.update({store.lower(): store for store in CANONICAL_STORES})
