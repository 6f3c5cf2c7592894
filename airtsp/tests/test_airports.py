import math

import networkx as nx
import pytest

from airtsp.aco.geo import Coord
from airtsp.datasets.airports import (
    Airport,
    AirportIndex,
    airports_from_graph,
    exception_pairs,
    load_airports,
    load_graph,
    parse_excepts,
    read_filter,
)


def test_load_pickled_airports(europe_pkl, europe):
    loaded = load_airports(europe_pkl)
    assert [apt.icao for apt in loaded] == [apt.icao for apt in europe]
    for a, b in zip(loaded, europe):
        assert a.coord.lat == pytest.approx(b.coord.lat)
        assert a.coord.lon == pytest.approx(b.coord.lon)
        assert a.name == b.name


def test_directed_graph_is_made_undirected(write_graph):
    G = nx.DiGraph()
    G.add_node(1, ICAO="EGLL", Name="HEATHROW", Lat=51.47, Lon=-0.46)
    G.add_node(2, ICAO="LFPG", Name="CDG", Lat=49.0, Lon=2.55)
    G.add_edge(1, 2, weight=350.0)
    path = write_graph(G, "directed.pkl")
    assert not load_graph(path).is_directed()


def test_alternative_attribute_names():
    G = nx.Graph()
    G.add_node("A", icao="KLAX", name="LOS ANGELES INTL", latitude=33.9425, longitude=-118.408)
    G.add_node("B", IATA="SFO", lat=37.619, lon=-122.375)
    G.add_node("C", Name="NOWHERE")
    index = airports_from_graph(G)
    assert [apt.icao for apt in index] == ["KLAX", "B"]
    assert index[0].coord.lat == pytest.approx(math.radians(33.9425))


def test_missing_markers_fall_back_to_node_id():
    G = nx.Graph()
    G.add_node(42, ICAO="\\N", Name="", Lat=10.0, Lon=20.0)
    apt = airports_from_graph(G)[0]
    assert apt.icao == "42"
    assert apt.name == "42"


def test_duplicate_icao_rejected():
    c = Coord(0.0, 0.0)
    with pytest.raises(ValueError):
        AirportIndex([Airport("EGLL", "A", c), Airport("EGLL", "B", c)])


def test_filtered_keeps_order(europe):
    kept = europe.filtered({"LIRF", "EGLL", "ZZZZ"})
    assert [apt.icao for apt in kept] == ["EGLL", "LIRF"]
    assert kept.index_of("LIRF") == 1


def test_read_filter(tmp_path):
    path = tmp_path / "filter.txt"
    path.write_text("EGLL\r\nLFPG\nTOOLONG\n\nABC\nEDDF", encoding="utf-8")
    assert read_filter(path) == {"EGLL", "LFPG", "EDDF"}


def test_parse_excepts():
    assert parse_excepts(["EGLL-EGKK", " EGLL-EGLC", "LFPG-LFPO"]) == {
        "EGLL": {"EGKK", "EGLC"},
        "LFPG": {"LFPO"},
    }
    with pytest.raises(ValueError):
        parse_excepts(["EGLL"])
    with pytest.raises(ValueError):
        parse_excepts(["EGLL-"])


def test_exception_pairs_skip_unknown_airports(europe):
    pairs = exception_pairs(europe, {"EGLL": {"LFPG", "ZZZZ"}, "YYYY": {"EDDF"}})
    assert pairs == {(europe.index_of("EGLL"), europe.index_of("LFPG"))}
