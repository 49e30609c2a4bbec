from __future__ import annotations
import argparse, os
from typing import Dict, Optional, Sequence

from .client import API_SERVER

def build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(prog="ipsonar", description="IP Sonar geolocation lookup")
    p.add_argument("--base-url", default=os.getenv("IPSONAR_BASE_URL", API_SERVER))
    p.add_argument("--api-key", default=os.getenv("IPSONAR_API_KEY"))
    p.add_argument("--connect-timeout", type=float, default=float(os.getenv("CONNECT_TIMEOUT", "5")))
    p.add_argument("--read-timeout", type=float, default=float(os.getenv("READ_TIMEOUT", "30")))
    p.add_argument("--fields", help="comma-separated field selector, e.g. ip,country_code")
    p.add_argument("--locale-code")
    p.add_argument("-v", "--verbose", action="store_true")

    sub = p.add_subparsers(dest="command", required=True)
    lookup = sub.add_parser("lookup", help="geolocate one IP address")
    lookup.add_argument("ip")
    sub.add_parser("my", help="geolocate the caller's own IP")
    batch = sub.add_parser("batch", help="geolocate several IP addresses at once")
    batch.add_argument("ips", nargs="+")
    return p

def parse_args(argv: Optional[Sequence[str]] = None) -> argparse.Namespace:
    return build_parser().parse_args(argv)

def query_params(args: argparse.Namespace) -> Dict[str, str]:
    params = {}
    if args.fields is not None:
        params["fields"] = args.fields
    if args.locale_code is not None:
        params["locale_code"] = args.locale_code
    return params
