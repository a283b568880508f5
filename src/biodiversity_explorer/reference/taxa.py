"""Taxon group presets for both providers and iconic-group categories."""

from __future__ import annotations

# ---------------------------------------------------------------------------
# iNaturalist taxon IDs
# ---------------------------------------------------------------------------
INAT_TAXA: dict[str, int] = {
    # Fauna - vertebrates
    "animals": 1,
    "mammals": 40151,  # Mammalia
    "birds": 3,  # Aves
    "raptors": 20422,  # Accipitriformes
    "waterfowl": 6888,  # Anseriformes
    "songbirds": 20764,  # Passeriformes
    "reptiles": 26036,  # Reptilia
    "amphibians": 20979,  # Amphibia
    "fishes": 47178,  # Actinopterygii
    # Fauna - invertebrates
    "insects": 47158,  # Insecta
    "beetles": 47208,  # Coleoptera
    "flies": 47822,  # Diptera
    "bees_wasps": 47201,  # Hymenoptera
    "arachnids": 47119,  # Arachnida
    "butterflies": 47224,  # Lepidoptera
    "molluscs": 47115,  # Mollusca
    "crustaceans": 85493,  # Crustacea
    # Flora
    "plants": 47126,  # Plantae
    "flowering_plants": 47125,  # Magnoliophyta
    "grasses": 47162,  # Poaceae
    "ferns": 121943,  # Polypodiopsida
    "mosses": 311249,  # Bryophyta
    "conifers": 136329,  # Pinophyta
}

# ---------------------------------------------------------------------------
# GBIF backbone keys
# ---------------------------------------------------------------------------
GBIF_KINGDOMS: dict[str, int] = {
    "animals": 1,
    "plants": 6,
}

GBIF_CLASSES: dict[str, int] = {
    "mammals": 359,
    "birds": 212,
    "reptiles": 358,
    "amphibians": 131,
    "fishes": 204,  # Actinopterygii
    "insects": 216,
    "arachnids": 367,
    "liliopsida": 196,  # monocots
    "magnoliopsida": 220,  # dicots
}

_KINGDOM_ROOTS = {"fauna": "animals", "flora": "plants"}

# ---------------------------------------------------------------------------
# Iconic groups → coarse categories
# ---------------------------------------------------------------------------
ICONIC_CATEGORIES: dict[str, str] = {
    "Aves": "bird",
    "Insecta": "invertebrate",
    "Arachnida": "invertebrate",
    "Mollusca": "invertebrate",
    "Amphibia": "herp",
    "Reptilia": "herp",
    "Mammalia": "mammal",
    "Actinopterygii": "fish",
    "Plantae": "plant",
}


def _key(name: str) -> str:
    return name.strip().lower().replace(" ", "_").replace("-", "_")


def taxon_scope(name: str | None) -> int | None:
    """Look up an iNaturalist taxon id by preset name (case-insensitive).

    Raises:
        KeyError: If ``name`` is not a known preset.
    """
    if name is None:
        return None
    key = _key(name)
    if key not in INAT_TAXA:
        msg = f"Unknown taxon group {name!r}; choose from {', '.join(sorted(INAT_TAXA))}"
        raise KeyError(msg)
    return INAT_TAXA[key]


def scope_for_kingdom(kingdom: str, group: str | None = None) -> int:
    """Return the selected group's taxon id, else the kingdom root.

    ``kingdom`` is ``"fauna"`` or ``"flora"``.
    """
    root = _KINGDOM_ROOTS.get(_key(kingdom))
    if root is None:
        msg = f"Unknown kingdom {kingdom!r}; expected 'fauna' or 'flora'"
        raise KeyError(msg)
    if group:
        scope = taxon_scope(group)
        if scope is not None:
            return scope
    return INAT_TAXA[root]


def iconic_category(iconic_group: str | None) -> str:
    """Map an iNaturalist iconic taxon name to a coarse category."""
    if not iconic_group:
        return "other"
    if iconic_group in ICONIC_CATEGORIES:
        return ICONIC_CATEGORIES[iconic_group]
    # Fish groups other than ray-finned fishes still read as fish
    if "fish" in iconic_group.lower():
        return "fish"
    return "other"
