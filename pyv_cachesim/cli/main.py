from __future__ import annotations
import argparse
import json
import logging
import sys
from ..config import SimConfig, LevelConfig
from ..cache.address import AddressDecoder, MAX_ADDRESS
from ..errors import ConfigurationError, TraceFormatError
from ..runtime.simulator import run_trace_file
from ..utils.reporting import generate_report, generate_report_json
from ..utils import viz

LOG_LEVELS = ["DEBUG", "INFO", "WARNING", "ERROR"]


def hex_int(value: str) -> int:
    try:
        address = int(value, 16)
    except ValueError:
        raise argparse.ArgumentTypeError(f"{value!r} is not a hex address")
    if not 0 <= address <= MAX_ADDRESS:
        raise argparse.ArgumentTypeError(f"{value} does not fit in 64 bits")
    return address


def cmd_run(args):
    """Handles the 'run' command."""
    config = SimConfig.from_args(args)
    log_level = str(config.log_level).upper()
    if log_level not in LOG_LEVELS:
        raise ConfigurationError(f"unknown log level {config.log_level!r}", field="log_level")
    logging.getLogger().setLevel(log_level)

    hierarchy, _ = run_trace_file(config)
    report_data = generate_report_json(hierarchy, config)

    # Final report on stdout, logs go to stderr
    print(json.dumps({k: v for k, v in report_data.items() if k != "config"}, indent=2))

    if config.report_dir:
        generate_report(report_data, config.report_dir)
    if config.plot:
        viz.export_hit_miss_chart(report_data["caches"], config.plot)
    # generate_report already prints the ASCII chart
    if config.ascii_chart and not config.report_dir:
        print(viz.export_hit_miss_ascii(report_data["caches"]), file=sys.stderr)
    return 0


def cmd_decode(args):
    """Handles the 'decode' command."""
    level = LevelConfig(name="decode", size=args.size, line_size=args.line_size, kind=args.kind)
    decoder = AddressDecoder(level.line_size, level.num_sets)
    address = args.address
    tag, index = decoder.decompose(address)
    print(f"address: {address:#x}")
    print(f"  tag:    {tag:#x} ({64 - decoder.index_bits - decoder.offset_bits} bits)")
    print(f"  index:  {index} ({decoder.index_bits} bits)")
    print(f"  offset: {decoder.offset(address)} ({decoder.offset_bits} bits)")
    return 0


def build_parser():
    p = argparse.ArgumentParser(
        prog="pyv-cachesim",
        description="PyV-CacheSim multi-level cache hierarchy simulator",
        formatter_class=argparse.ArgumentDefaultsHelpFormatter
    )
    sub = p.add_subparsers(dest="cmd", required=True)

    # --- Run Command ---
    pr = sub.add_parser("run", help="Replay a trace through a cache hierarchy",
                        formatter_class=argparse.ArgumentDefaultsHelpFormatter)
    pr.add_argument("-c", "--config", type=str, default=None,
                    help="Path to YAML/JSON config file with a 'caches' list")
    # Set default=None to allow override from YAML
    pr.add_argument("trace", nargs='?', default=None,
                    help="Path to trace file (optional if specified in config)")
    pr.add_argument("--report", type=str, default=None, dest="report_dir",
                    help="Directory to save report.json and report.html")
    pr.add_argument("--plot", type=str, default=None,
                    help="Path to save a hit/miss bar chart HTML file")
    pr.add_argument("--ascii-chart", action="store_true", default=None, dest="ascii_chart",
                    help="Print an ASCII hit/miss chart to the console")
    pr.add_argument("--log-level", type=str, default=None, dest="log_level",
                    choices=LOG_LEVELS,
                    help="Logging verbosity")
    pr.set_defaults(func=cmd_run)

    # --- Decode Command ---
    pd = sub.add_parser("decode", help="Show the tag/index/offset split of an address",
                        formatter_class=argparse.ArgumentDefaultsHelpFormatter)
    pd.add_argument("address", type=hex_int, help="Hex address, e.g. 0x7ffd1234")
    pd.add_argument("--size", type=int, required=True, help="Cache size in bytes")
    pd.add_argument("--line-size", type=int, required=True, dest="line_size",
                    help="Line (block) size in bytes")
    pd.add_argument("--kind", type=str, default="direct",
                    help="direct, full or <N>way")
    pd.set_defaults(func=cmd_decode)

    return p


def main(argv=None):
    parser = build_parser()
    args = parser.parse_args(argv)
    try:
        return args.func(args)
    except (ConfigurationError, TraceFormatError, OSError) as e:
        print(f"error: {e}", file=sys.stderr)
        return 2


if __name__ == "__main__":
    sys.exit(main())
