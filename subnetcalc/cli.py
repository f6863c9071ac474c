#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
Command-line interface for SubnetCalc.
"""
import argparse
import json
import logging
import sys
import time
import traceback
import typing

from . import __version__ as VERSION
from . import core

logger = logging.getLogger(__name__)

# Shown when the address argument is an empty string
EMPTY_ADDRESS = "0.0.0.0"

TEXT_FIELDS = (
    ("Address", "address"),
    ("Network", "network"),
    ("Prefix", "prefix"),
    ("Netmask", "netmask"),
    ("Wildcard", "wildcard"),
    ("Broadcast", "broadcast"),
    ("Hostmin", "hostmin"),
    ("Hostmax", "hostmax"),
    ("Hosts", "hosts"),
    ("Total", "total"),
    ("Class", "class"),
    ("Type", "type"),
)

BINARY_FIELDS = (
    ("Binary", "binary"),
    ("Netmask binary", "netmask_binary"),
)


def print_result_stdout(res: typing.Dict[str, typing.Any], show_binary: bool = False,
                        timing_info: typing.Optional[dict] = None) -> None:
    """Print result to stdout in human-readable format."""
    if timing_info:
        print(f"Computation time: {timing_info.get('computation_time', 0):.3f}ms")
        print()

    fields = TEXT_FIELDS + BINARY_FIELDS if show_binary else TEXT_FIELDS
    for label, key in fields:
        value = res[key]
        # No usable range for /31 and /32
        print(f"{label}: {'*' if value is None else value}")


def print_result_json(res: typing.Dict[str, typing.Any],
                      timing_info: typing.Optional[dict] = None) -> None:
    """Print result as valid JSON to stdout."""
    output = dict(res)
    if timing_info:
        output["_timing"] = timing_info
    print(json.dumps(output))


def resolve_subnet(address: str, prefix: typing.Optional[str]) -> core.Subnet:
    """
    Turn CLI arguments into a validated Subnet.

    The address may carry its own prefix ("10.0.0.1/8"); otherwise --prefix
    must supply one, either as a number ("24", "/24") or a dotted netmask.

    Raises:
        ValueError: if the arguments are incomplete or malformed
    """
    if address == "":
        logger.debug(f"Empty address, using {EMPTY_ADDRESS}")
        address = EMPTY_ADDRESS

    if '/' in address:
        if prefix is not None:
            raise ValueError(f"Prefix given twice: '{address}' and --prefix {prefix}")
        return core.Subnet(*core.parse_cidr(address))

    if prefix is None:
        raise ValueError(f"Missing prefix. Use IP/PREFIX or --prefix (e.g., {address}/24)")

    if '.' in prefix:
        prefix_len = core.prefix_from_mask(prefix)
    else:
        prefix_len = core.parse_prefix(prefix)

    return core.Subnet(core.parse_address(address), prefix_len)


def run_cli(address: str, prefix: typing.Optional[str] = None, json_output: bool = False,
            show_binary: bool = False, debug: bool = False) -> int:
    """
    Run CLI mode with given address.

    Args:
        address: IPv4 address, optionally in CIDR notation
        prefix: prefix length or netmask when address has no '/'
        json_output: Whether to output JSON format
        show_binary: Whether to add binary rows to text output
        debug: Whether to show timing information

    Returns:
        Exit code (0 for success, 1 for error)
    """
    start_time = time.time()

    try:
        if debug:
            logger.debug(f"Starting computation for: {address} (prefix={prefix})")

        subnet = resolve_subnet(address, prefix)
        result = core.build_report(subnet).as_dict()

        timing_info = None
        if debug:
            timing_info = {"computation_time": (time.time() - start_time) * 1000}

        if json_output:
            print_result_json(result, timing_info)
        else:
            print_result_stdout(result, show_binary, timing_info)
        return 0

    except ValueError as e:
        logger.error(f"{type(e).__name__} {str(e)}\n{traceback.format_exc()}")
        print(f"Error: {e}", file=sys.stderr)
        return 1


def main(argv: typing.Optional[list] = None) -> int:
    """
    Main CLI entry point.

    Args:
        argv: Command line arguments (uses sys.argv[1:] if None)

    Returns:
        Exit code (0 for success, 1 for error)
    """
    if argv is None:
        # Exclude program name when parsing args
        argv = sys.argv[1:]

    parser = argparse.ArgumentParser(
        prog="subnetcalc",
        description="SubnetCalc: IPv4 subnet calculator",
        epilog=(
            "Examples:\n"
            "  subnetcalc 192.168.1.1/24\n"
            "  subnetcalc 10.0.0.1 --prefix 255.0.0.0 --json\n"
            "  subnetcalc 172.16.5.4/20 --binary --debug"
        ),
        formatter_class=argparse.RawDescriptionHelpFormatter
    )
    parser.add_argument(
        "address",
        nargs="?",
        help="IPv4 address, optionally in CIDR notation (e.g., 192.168.1.1/24)"
    )
    parser.add_argument(
        "--prefix",
        "-p",
        help="CIDR prefix (0-32, e.g. 24 or /24) or dotted netmask (e.g. 255.255.255.0)"
    )
    parser.add_argument(
        "--json", "-j", action="store_true", help="Output result in JSON format"
    )
    parser.add_argument(
        "--binary", "-b", action="store_true", help="Show binary address and netmask"
    )
    parser.add_argument("--version", "-v", action="version", version=f"SubnetCalc {VERSION}")
    parser.add_argument(
        "--debug",
        "-d",
        action="store_true",
        help="Enable debug mode with detailed logging and timing information"
    )

    args = parser.parse_args(argv)

    if args.debug:
        core.setup_logging(debug=True)
        logger.debug("Debug mode enabled")

    # An empty string is a valid (reset) address, so test against None
    if args.address is not None:
        return run_cli(args.address, args.prefix, args.json, args.binary, args.debug)

    parser.print_help()
    return 0


if __name__ == "__main__":
    sys.exit(main())
