# ----------------- main.py -----------------
import argparse
import logging
import math
import sys
from pathlib import Path

from airtsp.aco.config import load_config
from airtsp.aco.distances import build_distance_index
from airtsp.aco.engine import AntColonySolver
from airtsp.aco.geo import degrees_to_dms
from airtsp.aco.graph import cycle_edges
from airtsp.datasets.airports import exception_pairs, load_airports, parse_excepts, read_filter

logger = logging.getLogger("airtsp")


def build_argparser(cfg):
    p = argparse.ArgumentParser(
        prog="airtsp",
        description="Approximate shortest closed tour through airports with Ant Colony Optimization.",
    )
    p.add_argument("input", help="Pickled networkx graph of airports (nodes with ICAO, Name, Lat, Lon)")
    p.add_argument("-o", "--output", default=None, help="Write the airport report here instead of stdout")
    p.add_argument("-p", "--print-aps", action="store_true", help="Print the airports of the tour")
    p.add_argument("-f", "--filter", default=None, help="File with ICAO codes to keep, one per line")
    p.add_argument("-u", "--unfiltered", action="store_true", help="Draw filtered-out airports as well")
    p.add_argument("--images", default=None, help="Existing directory for the tour figure and heatmap")
    p.add_argument("--config", default=None, help="YAML file overriding the packaged defaults")
    p.add_argument("--log-level", default=None, help="Logging level (default from config)")

    aco = p.add_argument_group("ACO parameters")
    aco.add_argument("-a", "--ants", type=int, default=cfg["ants"], help="Number of ants")
    aco.add_argument("-i", "--iterations", type=int, default=cfg["iterations"], help="Number of iterations")
    aco.add_argument("-e", "--evaporation", type=float, default=cfg["evaporation"],
                     help="Evaporation rate (from 0 to 1)")
    aco.add_argument("--alpha", type=float, default=cfg["alpha"], help="Pheromone influence")
    aco.add_argument("--beta", type=float, default=cfg["beta"], help="Distance penalty influence")
    aco.add_argument("-m", "--min-dist", type=float, default=None, help="Minimal allowable distance (km)")
    aco.add_argument("--except", dest="excepts", default=[], type=lambda s: [x for x in s.split(",") if x],
                     action="extend",
                     help="Pairs allowed below --min-dist, as <ICAO>-<ICAO>,...")
    aco.add_argument("--target-edge-length", type=float, default=None,
                     help="Favour edges close to this length (km) instead of the shortest ones")
    aco.add_argument("--workers", type=int, default=cfg.get("workers"), help="Worker threads for the ants")
    aco.add_argument("--seed", type=int, default=cfg.get("seed"), help="Seed for reproducible runs")
    return p


def format_airport(apt, next_apt, distance):
    lat, lon = apt.coord.to_degrees()
    lat_d, lat_m, lat_s, lat_h = degrees_to_dms(lat, "N", "S")
    lon_d, lon_m, lon_s, lon_h = degrees_to_dms(lon, "E", "W")
    distance = math.nan if distance is None else distance
    return (f"{apt.icao} ({apt.name}): {lat_d}°{lat_m}′{lat_s:.2f}″{lat_h} "
            f"{lon_d}°{lon_m}′{lon_s:.2f}″{lon_h}. Distance to next {next_apt.icao}: {distance:.1f}")


def report_lines(airports, distances, tour, total):
    for i, j in cycle_edges(tour):
        yield format_airport(airports[i], airports[j], distances.between(i, j))
    yield f"Total lengths: {total:.5f}"


def write_report(airports, distances, tour, total, output=None):
    lines = report_lines(airports, distances, tour, total)
    if output is None:
        for line in lines:
            print(line)
        return
    with open(output, "w", encoding="utf-8") as f:
        for line in lines:
            f.write(line + "\n")


def draw_images(images_dir, airports, solver, tour, unfiltered=None):
    # plotting stack is only imported when images are requested
    from airtsp.aco.pheromone_heatmap import pheromone_composite, pheromone_mean_plot
    from airtsp.aco.visualizer import draw_tour

    images_dir = Path(images_dir)
    draw_tour(airports, tour, iteration_tours=solver.best_tour_history,
              unfiltered=unfiltered, save_path=images_dir / "aco.html")
    if solver.pheromone_history:
        labels = [apt.icao for apt in airports]
        pheromone_composite(solver.pheromone_history, labels=labels,
                            save_path=images_dir / "pheromones.png")
        pheromone_mean_plot(solver.pheromone_history, solver.best_length_history,
                            save_path=images_dir / "convergence.png")


def main(argv=None):
    pre = argparse.ArgumentParser(add_help=False)
    pre.add_argument("--config", default=None)
    known, _ = pre.parse_known_args(argv)
    cfg = load_config(known.config)

    parser = build_argparser(cfg)
    args = parser.parse_args(argv)

    logging.basicConfig(level=(args.log_level or cfg.get("log_level") or "INFO").upper(),
                        format='%(asctime)s - %(message)s')

    if args.images is not None:
        images_dir = Path(args.images)
        if not images_dir.exists():
            parser.error(f"Images directory {images_dir} does not exist")
        if not images_dir.is_dir():
            parser.error(f"Images directory {images_dir} is not a directory")

    try:
        all_airports = load_airports(args.input)
        airports = all_airports
        if args.filter:
            airports = all_airports.filtered(read_filter(args.filter))
        excepts = parse_excepts(args.excepts)
    except (OSError, ValueError) as e:
        parser.error(str(e))

    logger.info("Loaded %d airports (%d after filtering)", len(all_airports), len(airports))

    distances = build_distance_index(
        airports.coords,
        min_dist=args.min_dist,
        exceptions=exception_pairs(airports, excepts),
        target_edge_length=args.target_edge_length,
    )
    solver = AntColonySolver(distances)
    try:
        tour, total = solver.solve(
            args.iterations, args.ants, args.evaporation, args.alpha, args.beta,
            workers=args.workers, seed=args.seed, record_pheromones=args.images is not None,
        )
    except ValueError as e:
        parser.error(str(e))

    print(f"Selected cycle {tour}")
    print(f"Total nodes: {len(tour)}")

    if args.print_aps:
        write_report(airports, distances, tour, total, args.output)

    if args.images is not None:
        draw_images(args.images, airports, solver, tour,
                    unfiltered=all_airports if args.unfiltered else None)
    return 0


if __name__ == "__main__":  # pragma: no cover
    sys.exit(main())
