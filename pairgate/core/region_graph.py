"""Region Graph — static place → region/country/density map plus region adjacency.

Invariants:
    - Place keys are "City, ST" (trimmed) — the only lookup key
    - Adjacency is one hop and is looked up, never traversed
    - Unknown places resolve to region=None, country="US", density=moderate
    - All lookups are PURE: the graph is never mutated after construction

Design Decisions:
    - Explicit data structure over scattered conditionals: a deployment grows the
      graph (from_dict / from_json_file) without touching scope_filter
    - Frozen dataclasses: a RegionGraph can be shared across threads without locks
"""

import json
from dataclasses import dataclass, field
from pathlib import Path

from pairgate.core.domain_types import Density


DEFAULT_COUNTRY = "US"


@dataclass(frozen=True)
class RegionInfo:
    region: str
    country: str
    density: Density = Density.MODERATE


@dataclass(frozen=True)
class Location:
    """Where a viewer or candidate lives. region=None means unresolved."""
    city: str
    state: str
    region: str | None
    country: str = DEFAULT_COUNTRY

    @property
    def resolved(self) -> bool:
        return self.region is not None

    @property
    def place_key(self) -> str:
        return place_key(self.city, self.state)


def place_key(city: str, state: str) -> str:
    return f"{city.strip()}, {state.strip()}"


def split_place_label(label: str) -> tuple[str, str]:
    """'Austin, TX' → ('Austin', 'TX'). Labels without a comma keep state empty."""
    city, _, state = label.partition(",")
    return city.strip(), state.strip()


@dataclass(frozen=True)
class RegionGraph:
    places: dict[str, RegionInfo] = field(default_factory=dict)
    adjacency: dict[str, tuple[str, ...]] = field(default_factory=dict)

    def lookup(self, city: str, state: str) -> RegionInfo | None:
        return self.places.get(place_key(city, state))

    def resolve(self, city: str, state: str) -> Location:
        """Derive a Location from raw signup text. Never fails."""
        city, state = city.strip(), state.strip()
        info = self.lookup(city, state)
        if info is None:
            return Location(city=city, state=state, region=None)
        return Location(
            city=city, state=state, region=info.region, country=info.country,
        )

    def resolve_label(self, label: str) -> Location:
        return self.resolve(*split_place_label(label))

    def density_of(self, location: Location) -> Density:
        info = self.lookup(location.city, location.state)
        return info.density if info else Density.MODERATE

    def neighbors(self, region: str) -> tuple[str, ...]:
        return self.adjacency.get(region, ())

    def are_adjacent(self, region_a: str, region_b: str) -> bool:
        return region_b in self.neighbors(region_a)

    @classmethod
    def from_dict(cls, data: dict) -> "RegionGraph":
        """Build from {"places": {key: {region, country, density}}, "adjacency": {...}}."""
        places = {
            key: RegionInfo(
                region=info["region"],
                country=info.get("country", DEFAULT_COUNTRY),
                density=Density(info.get("density", Density.MODERATE.value)),
            )
            for key, info in data.get("places", {}).items()
        }
        adjacency = {
            region: tuple(neighbors)
            for region, neighbors in data.get("adjacency", {}).items()
        }
        return cls(places=places, adjacency=adjacency)

    @classmethod
    def from_json_file(cls, path: str | Path) -> "RegionGraph":
        with open(path, encoding="utf-8") as fh:
            return cls.from_dict(json.load(fh))


_DEFAULT_PLACES = {
    "Austin, TX": RegionInfo("Austin Metro", "US", Density.MODERATE),
    "Round Rock, TX": RegionInfo("Austin Metro", "US", Density.MODERATE),
    "San Marcos, TX": RegionInfo("Austin Metro", "US", Density.MODERATE),
    "San Antonio, TX": RegionInfo("San Antonio Metro", "US", Density.MODERATE),
    "Houston, TX": RegionInfo("Houston Metro", "US", Density.DENSE),
    "Dallas, TX": RegionInfo("Dallas Metro", "US", Density.DENSE),
    "Fort Worth, TX": RegionInfo("Dallas Metro", "US", Density.DENSE),
    "Los Angeles, CA": RegionInfo("LA Metro", "US", Density.DENSE),
    "San Francisco, CA": RegionInfo("SF Bay Area", "US", Density.DENSE),
    "Oakland, CA": RegionInfo("SF Bay Area", "US", Density.DENSE),
    "Toronto, ON": RegionInfo("Toronto Metro", "CA", Density.DENSE),
    "Ottawa, ON": RegionInfo("Ottawa Metro", "CA", Density.MODERATE),
    "Montreal, QC": RegionInfo("Montreal Metro", "CA", Density.DENSE),
    "Vancouver, BC": RegionInfo("Vancouver Metro", "CA", Density.DENSE),
}

_DEFAULT_ADJACENCY = {
    "Austin Metro": ("San Antonio Metro",),
    "San Antonio Metro": ("Austin Metro",),
    "Houston Metro": ("Dallas Metro",),
    "Dallas Metro": ("Houston Metro",),
    "LA Metro": (),
    "SF Bay Area": (),
    "Toronto Metro": ("Ottawa Metro",),
    "Ottawa Metro": ("Toronto Metro", "Montreal Metro"),
    "Montreal Metro": ("Ottawa Metro",),
    "Vancouver Metro": (),
}

DEFAULT_REGION_GRAPH = RegionGraph(
    places=_DEFAULT_PLACES, adjacency=_DEFAULT_ADJACENCY,
)
