"""
A simplified map of Europe in 1914.

Each great power has five home provinces, two of which start with a
factory. Seas are collapsed into nine ocean regions.
"""

from typing import List, Tuple

from imperial.board import Board, ProvinceData
from imperial.nations import Nation
from imperial.provinces import FactoryType

ARMAMENTS = FactoryType.ARMAMENTS
SHIPYARD = FactoryType.SHIPYARD

OCEANS = [
    "north_atlantic",
    "north_sea",
    "english_channel",
    "bay_of_biscay",
    "baltic_sea",
    "western_mediterranean",
    "ionian_sea",
    "eastern_mediterranean",
    "black_sea",
]

# (name, factory type, starts with a factory)
HOME_PROVINCES = {
    Nation.AH: [
        ("vienna", ARMAMENTS, True),
        ("budapest", ARMAMENTS, True),
        ("prague", ARMAMENTS, False),
        ("lemberg", ARMAMENTS, False),
        ("trieste", SHIPYARD, False),
    ],
    Nation.IT: [
        ("rome", ARMAMENTS, True),
        ("naples", SHIPYARD, True),
        ("florence", ARMAMENTS, False),
        ("venice", ARMAMENTS, False),
        ("genoa", SHIPYARD, False),
    ],
    Nation.FR: [
        ("paris", ARMAMENTS, True),
        ("bordeaux", SHIPYARD, True),
        ("brest", SHIPYARD, False),
        ("dijon", ARMAMENTS, False),
        ("marseille", ARMAMENTS, False),
    ],
    Nation.GB: [
        ("london", ARMAMENTS, True),
        ("liverpool", SHIPYARD, True),
        ("edinburgh", SHIPYARD, False),
        ("sheffield", ARMAMENTS, False),
        ("dublin", ARMAMENTS, False),
    ],
    Nation.GE: [
        ("berlin", ARMAMENTS, True),
        ("hamburg", SHIPYARD, True),
        ("danzig", SHIPYARD, False),
        ("munich", ARMAMENTS, False),
        ("cologne", ARMAMENTS, False),
    ],
    Nation.RU: [
        ("moscow", ARMAMENTS, True),
        ("kiev", ARMAMENTS, True),
        ("st_petersburg", SHIPYARD, False),
        ("odessa", SHIPYARD, False),
        ("warsaw", ARMAMENTS, False),
    ],
}

NEUTRAL_PROVINCES = [
    "portugal",
    "spain",
    "morocco",
    "algeria",
    "tunis",
    "norway",
    "sweden",
    "denmark",
    "holland",
    "belgium",
    "switzerland",
    "romania",
    "bulgaria",
    "west_balkan",
    "greece",
    "turkey",
]

EDGES: List[Tuple[str, str]] = [
    # Seas
    ("north_atlantic", "north_sea"),
    ("north_atlantic", "english_channel"),
    ("north_atlantic", "bay_of_biscay"),
    ("north_sea", "english_channel"),
    ("north_sea", "baltic_sea"),
    ("english_channel", "bay_of_biscay"),
    ("bay_of_biscay", "western_mediterranean"),
    ("western_mediterranean", "ionian_sea"),
    ("ionian_sea", "eastern_mediterranean"),
    ("eastern_mediterranean", "black_sea"),
    # Great Britain
    ("london", "english_channel"),
    ("london", "north_sea"),
    ("london", "sheffield"),
    ("sheffield", "liverpool"),
    ("sheffield", "edinburgh"),
    ("liverpool", "edinburgh"),
    ("liverpool", "north_atlantic"),
    ("edinburgh", "north_sea"),
    ("edinburgh", "north_atlantic"),
    ("dublin", "north_atlantic"),
    # France
    ("brest", "english_channel"),
    ("brest", "bay_of_biscay"),
    ("bordeaux", "bay_of_biscay"),
    ("marseille", "western_mediterranean"),
    ("paris", "brest"),
    ("paris", "dijon"),
    ("paris", "bordeaux"),
    ("paris", "belgium"),
    ("bordeaux", "brest"),
    ("bordeaux", "marseille"),
    ("bordeaux", "spain"),
    ("dijon", "marseille"),
    ("dijon", "switzerland"),
    ("dijon", "belgium"),
    ("dijon", "cologne"),
    ("marseille", "genoa"),
    ("marseille", "spain"),
    # Iberia and North Africa
    ("portugal", "spain"),
    ("portugal", "north_atlantic"),
    ("portugal", "bay_of_biscay"),
    ("spain", "bay_of_biscay"),
    ("spain", "western_mediterranean"),
    ("morocco", "north_atlantic"),
    ("morocco", "western_mediterranean"),
    ("morocco", "algeria"),
    ("algeria", "western_mediterranean"),
    ("algeria", "tunis"),
    ("tunis", "western_mediterranean"),
    ("tunis", "ionian_sea"),
    # Italy
    ("genoa", "western_mediterranean"),
    ("rome", "western_mediterranean"),
    ("naples", "western_mediterranean"),
    ("naples", "ionian_sea"),
    ("venice", "ionian_sea"),
    ("genoa", "florence"),
    ("genoa", "venice"),
    ("genoa", "switzerland"),
    ("florence", "rome"),
    ("florence", "venice"),
    ("rome", "naples"),
    ("venice", "trieste"),
    # Austria-Hungary
    ("trieste", "ionian_sea"),
    ("trieste", "vienna"),
    ("trieste", "budapest"),
    ("trieste", "west_balkan"),
    ("vienna", "prague"),
    ("vienna", "budapest"),
    ("vienna", "munich"),
    ("budapest", "lemberg"),
    ("budapest", "romania"),
    ("budapest", "west_balkan"),
    ("prague", "munich"),
    ("prague", "berlin"),
    ("lemberg", "warsaw"),
    ("lemberg", "kiev"),
    ("lemberg", "romania"),
    # Germany
    ("hamburg", "north_sea"),
    ("danzig", "baltic_sea"),
    ("berlin", "hamburg"),
    ("berlin", "danzig"),
    ("berlin", "munich"),
    ("cologne", "hamburg"),
    ("cologne", "munich"),
    ("cologne", "holland"),
    ("cologne", "belgium"),
    ("munich", "switzerland"),
    ("danzig", "warsaw"),
    ("hamburg", "denmark"),
    ("hamburg", "holland"),
    # Russia
    ("st_petersburg", "baltic_sea"),
    ("odessa", "black_sea"),
    ("st_petersburg", "moscow"),
    ("moscow", "kiev"),
    ("moscow", "warsaw"),
    ("kiev", "warsaw"),
    ("kiev", "odessa"),
    ("odessa", "romania"),
    # Scandinavia, Low Countries and the Balkans
    ("norway", "north_sea"),
    ("norway", "sweden"),
    ("sweden", "baltic_sea"),
    ("denmark", "north_sea"),
    ("denmark", "baltic_sea"),
    ("holland", "north_sea"),
    ("holland", "belgium"),
    ("belgium", "english_channel"),
    ("romania", "black_sea"),
    ("romania", "bulgaria"),
    ("bulgaria", "black_sea"),
    ("bulgaria", "turkey"),
    ("bulgaria", "greece"),
    ("bulgaria", "west_balkan"),
    ("west_balkan", "ionian_sea"),
    ("west_balkan", "greece"),
    ("greece", "ionian_sea"),
    ("greece", "eastern_mediterranean"),
    ("turkey", "black_sea"),
    ("turkey", "eastern_mediterranean"),
]


def create_europe_board() -> Board:
    """Build the standard 1914 board."""
    provinces = [ProvinceData(name, is_ocean=True) for name in OCEANS]
    for nation, homes in HOME_PROVINCES.items():
        for name, factory_type, starting in homes:
            provinces.append(ProvinceData(name, nation, False, factory_type, starting))
    provinces.extend(ProvinceData(name) for name in NEUTRAL_PROVINCES)
    return Board(provinces, EDGES)
