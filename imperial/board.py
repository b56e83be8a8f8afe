"""
Board topology and the query interface the engine consumes.

The engine never reads the adjacency graph directly. It asks a board for
ownership, ocean/land classification, factory types, home provinces and
reachable destinations through the ``BoardQuery`` protocol; ``Board`` is the
graph-backed implementation used by the bundled maps and the tests.
"""

from dataclasses import dataclass
from typing import AbstractSet, Dict, Iterable, Iterator, List, Optional, Protocol, Tuple

from imperial.nations import Nation
from imperial.provinces import FactoryType


class BoardQuery(Protocol):
    def owner_of(self, province: str) -> Optional[Nation]: ...

    def is_ocean(self, province: str) -> bool: ...

    def factory_type_of(self, province: str) -> Optional[FactoryType]: ...

    def home_provinces_of(self, nation: Nation) -> Tuple[str, ...]: ...

    def province_names(self) -> List[str]: ...

    def starting_factories(self) -> Dict[str, FactoryType]: ...

    def neighbors_for(
        self,
        origin: str,
        nation: Nation,
        is_fleet: bool,
        friendly_fleets: AbstractSet[str],
        is_occupied: bool,
    ) -> List[str]: ...

    def paths_from(
        self,
        origin: str,
        nation: Nation,
        is_fleet: bool,
        friendly_fleets: AbstractSet[str],
        is_occupied: bool,
    ) -> List[List[str]]: ...

    def ocean_count(self, path: Iterable[str]) -> int: ...


@dataclass(frozen=True)
class ProvinceData:
    """Static description of a province."""

    name: str
    nation: Optional[Nation] = None
    is_ocean: bool = False
    factory_type: Optional[FactoryType] = None
    starting_factory: bool = False


class Board:
    """
    An undirected province graph.

    Fleets move one hop into an adjacent ocean. Armies move one hop over
    land, may be convoyed across any chain of oceans holding friendly fleets,
    and may travel by rail through their own home provinces while the nation
    is not occupied.
    """

    def __init__(self, provinces: Iterable[ProvinceData], edges: Iterable[Tuple[str, str]]):
        self.provinces: Dict[str, ProvinceData] = {}
        self.graph: Dict[str, List[str]] = {}
        self.by_nation: Dict[Nation, Tuple[str, ...]] = {}

        for data in provinces:
            if data.name in self.provinces:
                raise ValueError(f"Duplicate province: {data.name}")
            self.provinces[data.name] = data
            self.graph[data.name] = []

        for a, b in edges:
            for name in (a, b):
                if name not in self.graph:
                    raise ValueError(f"Edge references unknown province: {name}")
            if b not in self.graph[a]:
                self.graph[a].append(b)
                self.graph[b].append(a)

        for nation in Nation:
            self.by_nation[nation] = tuple(
                name for name, data in self.provinces.items() if data.nation is nation
            )

    def owner_of(self, province: str) -> Optional[Nation]:
        return self.provinces[province].nation

    def is_ocean(self, province: str) -> bool:
        return self.provinces[province].is_ocean

    def factory_type_of(self, province: str) -> Optional[FactoryType]:
        return self.provinces[province].factory_type

    def home_provinces_of(self, nation: Nation) -> Tuple[str, ...]:
        return self.by_nation.get(nation, ())

    def is_home_province(self, province: str) -> bool:
        """True if the province belongs to any nation."""
        return self.provinces[province].nation is not None

    def province_names(self) -> List[str]:
        return list(self.provinces)

    def starting_factories(self) -> Dict[str, FactoryType]:
        return {
            name: data.factory_type
            for name, data in self.provinces.items()
            if data.starting_factory and data.factory_type is not None
        }

    def neighbors(self, province: str) -> List[str]:
        return list(self.graph[province])

    def neighbors_for(
        self,
        origin: str,
        nation: Nation,
        is_fleet: bool,
        friendly_fleets: AbstractSet[str] = frozenset(),
        is_occupied: bool = False,
    ) -> List[str]:
        """Distinct destinations reachable in one move, in search order."""
        destinations: List[str] = []
        for path in self.paths_from(origin, nation, is_fleet, friendly_fleets, is_occupied):
            destination = path[-1]
            if destination != origin and destination not in destinations:
                destinations.append(destination)
        return destinations

    def paths_from(
        self,
        origin: str,
        nation: Nation,
        is_fleet: bool,
        friendly_fleets: AbstractSet[str] = frozenset(),
        is_occupied: bool = False,
    ) -> List[List[str]]:
        """
        Every path a single unit may take from ``origin``.

        Each path starts at the origin and ends at a legal destination.
        Oceans crossed by an army only appear in the middle of a path.
        """
        if is_fleet:
            return [[origin, neighbor] for neighbor in self.graph[origin] if self.is_ocean(neighbor)]

        home = set(self.home_provinces_of(nation))
        return list(self._army_paths([origin], nation, home, friendly_fleets, is_occupied))

    def _army_paths(
        self,
        path: List[str],
        nation: Nation,
        home: AbstractSet[str],
        friendly_fleets: AbstractSet[str],
        is_occupied: bool,
    ) -> Iterator[List[str]]:
        for neighbor in self.graph[path[-1]]:
            if neighbor in path:
                continue
            extended = path + [neighbor]
            if self.is_ocean(neighbor):
                if neighbor in friendly_fleets:
                    yield from self._army_paths(extended, nation, home, friendly_fleets, is_occupied)
                continue

            yield extended
            by_rail = not is_occupied and all(
                province in home for province in extended if not self.is_ocean(province)
            )
            if by_rail:
                yield from self._army_paths(extended, nation, home, friendly_fleets, is_occupied)

    def ocean_count(self, path: Iterable[str]) -> int:
        return sum(1 for province in path if self.is_ocean(province))

    def __repr__(self) -> str:
        return f"Board(provinces={len(self.provinces)})"
