"""
Candidate registries - the closed, ordered sets of categories being scored.

Registry order matters: every tie between categories is resolved in favour
of the one listed first.
"""
from typing import Iterable, Iterator, Tuple

from luxury_hunter.core.errors import ConfigurationError


# Sentinel winner when no category has evidence; never a registry member
UNKNOWN = "Unknown"

AUTHENTIC = "authentic"
NOT_AUTHENTIC = "not_authentic"


class CandidateRegistry:
    """
    Immutable ordered list of categories for one decision context.
    """

    def __init__(self, name: str, categories: Iterable[str]):
        categories = tuple(categories)

        if not categories:
            raise ConfigurationError(f"Candidate registry '{name}' is empty")
        if UNKNOWN in categories:
            raise ConfigurationError(
                f"Candidate registry '{name}' must not contain the '{UNKNOWN}' sentinel"
            )
        seen = set()
        for category in categories:
            if not isinstance(category, str) or not category:
                raise ConfigurationError(
                    f"Candidate registry '{name}' has an invalid category: {category!r}"
                )
            if category in seen:
                raise ConfigurationError(
                    f"Candidate registry '{name}' lists '{category}' twice"
                )
            seen.add(category)

        self._name = name
        self._categories: Tuple[str, ...] = categories
        self._positions = {c: i for i, c in enumerate(categories)}

    @property
    def name(self) -> str:
        return self._name

    @property
    def categories(self) -> Tuple[str, ...]:
        return self._categories

    def index_of(self, category: str) -> int:
        """Registry position of a category (KeyError if absent)."""
        return self._positions[category]

    def __contains__(self, category: object) -> bool:
        return category in self._positions

    def __iter__(self) -> Iterator[str]:
        return iter(self._categories)

    def __len__(self) -> int:
        return len(self._categories)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, CandidateRegistry):
            return NotImplemented
        return self._name == other._name and self._categories == other._categories

    def __hash__(self) -> int:
        return hash((self._name, self._categories))

    def __repr__(self) -> str:
        return f"CandidateRegistry({self._name!r}, {list(self._categories)!r})"


# ===== BUILT-IN REGISTRIES =====

BRAND_REGISTRY = CandidateRegistry("brands", [
    "Louis Vuitton",
    "Gucci",
    "Chanel",
    "Hermès",
    "Prada",
    "Dior",
    "Fendi",
    "Bottega Veneta",
    "Saint Laurent",
    "Balenciaga",
    "Celine",
    "Loewe",
])

AUTHENTICITY_REGISTRY = CandidateRegistry("authenticity", [AUTHENTIC, NOT_AUTHENTIC])
