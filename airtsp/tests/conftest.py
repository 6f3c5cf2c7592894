import pickle

import networkx as nx
import pytest

from airtsp.aco.distances import build_distance_index
from airtsp.aco.geo import Coord
from airtsp.datasets.airports import Airport, AirportIndex


@pytest.fixture
def octant():
    """Three points pairwise a quarter great circle apart: the equator at 0° and 90°E, and the pole."""
    return [Coord.from_degrees(0, 0), Coord.from_degrees(0, 90), Coord.from_degrees(90, 0)]


@pytest.fixture
def europe():
    return AirportIndex([
        Airport("EGLL", "LONDON HEATHROW", Coord.from_degrees(51.4775, -0.461389)),
        Airport("LFPG", "PARIS CHARLES DE GAULLE", Coord.from_degrees(49.009722, 2.547778)),
        Airport("EDDF", "FRANKFURT MAIN", Coord.from_degrees(50.033333, 8.570556)),
        Airport("LEMD", "MADRID BARAJAS", Coord.from_degrees(40.472222, -3.560833)),
        Airport("LIRF", "ROME FIUMICINO", Coord.from_degrees(41.800278, 12.238889)),
        Airport("EHAM", "AMSTERDAM SCHIPHOL", Coord.from_degrees(52.308056, 4.764167)),
        Airport("LOWW", "VIENNA SCHWECHAT", Coord.from_degrees(48.110278, 16.569722)),
        Airport("EKCH", "COPENHAGEN KASTRUP", Coord.from_degrees(55.618056, 12.656111)),
    ])


@pytest.fixture
def europe_index(europe):
    return build_distance_index(europe.coords)


@pytest.fixture
def close_pair_points():
    """A and B are ~111 km apart, everything else is thousands of km away."""
    return [
        Coord.from_degrees(0, 0),
        Coord.from_degrees(0, 1),
        Coord.from_degrees(0, 30),
        Coord.from_degrees(30, 0),
    ]


@pytest.fixture
def write_graph(tmp_path):
    """Pickle a networkx graph the way airport datasets ship, return its path."""
    def write(G, name="airports.pkl"):
        path = tmp_path / name
        with open(path, "wb") as f:
            pickle.dump(G, f)
        return path
    return write


@pytest.fixture
def europe_pkl(europe, write_graph):
    G = nx.Graph()
    for apt in europe:
        lat, lon = apt.coord.to_degrees()
        G.add_node(apt.icao, ICAO=apt.icao, Name=apt.name, Lat=lat, Lon=lon)
    return write_graph(G, "europe.pkl")


@pytest.fixture
def coincident_pairs():
    """Two pairs of distinct points sharing coordinates (0 and 1, 2 and 3), plus one more."""
    return [
        Coord.from_degrees(0, 0),
        Coord.from_degrees(0, 0),
        Coord.from_degrees(10, 10),
        Coord.from_degrees(10, 10),
        Coord.from_degrees(-20, 35),
    ]
