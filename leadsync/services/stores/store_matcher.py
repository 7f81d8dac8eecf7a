"""Turn a human-entered store filter into a word-boundary-safe match predicate.

Stored store names are split into tokens on whitespace and dashes. A spelling
variant matches a stored name only when its own tokens occur there contiguously,
so ``"Edappal"`` never matches ``"Zorucci - Edappally"``.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Iterable, List, Optional, Sequence, Tuple

from leadsync.services.stores.store_aliases import (
    BRAND_ALIASES,
    DEFAULT_BRAND,
    LOCATION_ALIASES,
)
from leadsync.services.stores.store_normalizer import (
    brand_from_marker,
    detect_brand,
    normalize,
)

_TOKEN_SEPARATORS = re.compile(r"[\s-]+")
_PART_SEPARATOR = re.compile(r"[\s-]*-[\s-]*")


def tokenize(value: Optional[str]) -> Tuple[str, ...]:
    """Split ``value`` into lower-cased tokens separated by whitespace or dashes."""

    if not value:
        return ()
    return tuple(token for token in _TOKEN_SEPARATORS.split(value.lower()) if token)


def _contains_run(haystack: Sequence[str], needle: Sequence[str]) -> bool:
    if not needle or len(needle) > len(haystack):
        return False
    width = len(needle)
    return any(
        tuple(haystack[start : start + width]) == tuple(needle)
        for start in range(len(haystack) - width + 1)
    )


class MatchPredicate:
    """A boolean condition over a stored store name."""

    def matches(self, store: Optional[str]) -> bool:
        raise NotImplementedError


@dataclass(frozen=True)
class Term(MatchPredicate):
    """Matches when the tokens of ``text`` occur contiguously in the store name."""

    text: str

    def matches(self, store: Optional[str]) -> bool:
        return _contains_run(tokenize(store), tokenize(self.text))


@dataclass(frozen=True)
class AllOf(MatchPredicate):
    children: Tuple[MatchPredicate, ...]

    def matches(self, store: Optional[str]) -> bool:
        return all(child.matches(store) for child in self.children)


@dataclass(frozen=True)
class AnyOf(MatchPredicate):
    children: Tuple[MatchPredicate, ...]

    def matches(self, store: Optional[str]) -> bool:
        return any(child.matches(store) for child in self.children)


@dataclass(frozen=True)
class WithoutBrand(MatchPredicate):
    """Matches store names that do not carry ``brand``, including brandless ones."""

    brand: str

    def matches(self, store: Optional[str]) -> bool:
        return detect_brand(store) != self.brand


@dataclass(frozen=True)
class ExactStore(MatchPredicate):
    """Matches store names whose canonical form equals ``canonical``."""

    canonical: str

    def matches(self, store: Optional[str]) -> bool:
        if not self.canonical or not store:
            return False
        return normalize(store).lower() == self.canonical.lower()


def _lookup(text: str, table: dict) -> Optional[str]:
    """Return the canonical key of ``table`` whose spelling occurs in ``text``."""

    tokens = tokenize(text)
    best: Optional[str] = None
    best_width = 0
    for canonical, spellings in table.items():
        for spelling in spellings:
            spelling_tokens = tokenize(spelling)
            if len(spelling_tokens) > best_width and _contains_run(tokens, spelling_tokens):
                best, best_width = canonical, len(spelling_tokens)
    return best


def _detect_brand_part(text: str) -> Optional[str]:
    return _lookup(text, BRAND_ALIASES) or brand_from_marker(text.strip().lower())


@dataclass(frozen=True)
class SameBrand(MatchPredicate):
    """Matches store names whose detected brand is ``brand``."""

    brand: str

    def matches(self, store: Optional[str]) -> bool:
        return detect_brand(store) == self.brand


@dataclass(frozen=True)
class SameLocation(MatchPredicate):
    """Matches branded store names whose canonical location is ``location``."""

    location: str

    def matches(self, store: Optional[str]) -> bool:
        _, separator, location = normalize(store).partition(" - ")
        return bool(separator) and location.lower() == self.location.lower()


def _any_of(texts: Iterable[str]) -> MatchPredicate:
    terms = tuple(Term(text) for text in dict.fromkeys(texts))
    if len(terms) == 1:
        return terms[0]
    return AnyOf(terms)


def _brand_and_location(brand: str, location: str) -> MatchPredicate:
    """Build ``OR(brand_variant AND location_variant)`` plus the legacy disjuncts."""

    location_variants = tuple(dict.fromkeys(LOCATION_ALIASES[location]))

    disjuncts: List[MatchPredicate] = [
        AllOf((Term(brand_variant), Term(location_variant)))
        for brand_variant in dict.fromkeys(BRAND_ALIASES[brand])
        for location_variant in location_variants
    ]
    # Compact historical spellings such as "SG.Kottayam" or "Z.Kottakkal".
    disjuncts.append(ExactStore(f"{brand} - {location}"))

    if brand == DEFAULT_BRAND:
        # Brandless legacy records belong to the default brand.
        for competitor in BRAND_ALIASES:
            if competitor != DEFAULT_BRAND:
                disjuncts.append(
                    AllOf((_any_of(location_variants), WithoutBrand(competitor)))
                )

    return AnyOf(tuple(disjuncts))


def build_filter(query: Optional[str]) -> Optional[MatchPredicate]:
    """
    Build the store predicate for a human-entered filter string.

    A dashed query is read as ``"<brand> - <location>"``. Otherwise the brand and
    the location are detected from the tokens. When both are found the predicate
    requires both; when only one is found it accepts any spelling of it; when
    neither is found it matches the literal text on word boundaries.

    Args:
        query (Optional[str]): Raw filter text, e.g. ``"Zorucci Edappally"``.

    Returns:
        Optional[MatchPredicate]: None when the query is empty.
    """

    text = (query or "").strip()
    if not text:
        return None

    if "-" in text:
        parts = [part.strip() for part in _PART_SEPARATOR.split(text) if part.strip()]
        if len(parts) >= 2:
            brand_text, location_text = parts[0], parts[-1]
            brand = _detect_brand_part(brand_text)
            location = _lookup(location_text, LOCATION_ALIASES)
            if brand is None and location is None:
                return Term(text)
            return _single_or_both(brand, location)
        text = parts[0] if parts else text

    brand = _detect_brand_part(text)
    location = _lookup(text, LOCATION_ALIASES)
    if brand is None and location is None:
        return Term(text)
    return _single_or_both(brand, location)


def _single_or_both(brand: Optional[str], location: Optional[str]) -> MatchPredicate:
    if brand and location:
        return _brand_and_location(brand, location)
    if brand:
        # Compact spellings such as "SG.Kottayam" carry no separate brand token.
        return AnyOf((_any_of(BRAND_ALIASES[brand]), SameBrand(brand)))
    return AnyOf((_any_of(LOCATION_ALIASES[location]), SameLocation(location)))


def matching_stores(
    predicate: Optional[MatchPredicate], stores: Iterable[str]
) -> List[str]:
    """Return the stored store names accepted by ``predicate``."""

    if predicate is None:
        return list(stores)
    return [store for store in stores if predicate.matches(store)]
