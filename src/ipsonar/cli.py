"""
Command-line entrypoint for IP Sonar lookups.

- Parses CLI args and env config
- Builds an httpx.AsyncClient with the configured timeouts
- Runs one of: lookup IP / my / batch IP [IP ...]
- Prints decoded geolocation JSON on stdout (absent fields omitted)

Exit codes: 0 on 200, 1 on any other API status, 2 on bad configuration,
3 on transport or decode failures.
"""
from __future__ import annotations
import asyncio, json, logging, sys
from typing import Optional, Sequence, Union

import httpx

from .client import api_key_editor, with_http_client, with_request_editor_fn
from .config import parse_args, query_params
from .errors import ConfigurationError, ResponseDecodeError
from .responses import BatchLookupResponse, ClientWithResponses, LookupMyResponse, LookupResponse

ERROR_FIELDS = ("json401", "json404", "json422", "json429", "json500")

def error_message(resp: Union[LookupResponse, LookupMyResponse, BatchLookupResponse]) -> Optional[str]:
    for name in ERROR_FIELDS:
        err = getattr(resp, name, None)
        if err is not None:
            return err.message
    return None

async def run(args, transport: Optional[httpx.AsyncBaseTransport] = None) -> int:
    timeout = httpx.Timeout(
        connect=args.connect_timeout,
        read=args.read_timeout,
        write=args.read_timeout,
        pool=args.read_timeout,
    )
    async with httpx.AsyncClient(
        timeout=timeout,
        transport=transport,
    ) as http:
        options = [with_http_client(http)]
        if args.api_key:
            options.append(with_request_editor_fn(api_key_editor(args.api_key)))
        api = ClientWithResponses(args.base_url, *options)
        params = query_params(args)

        if args.command == "lookup":
            resp = await api.lookup_with_response(args.ip, params)
        elif args.command == "my":
            resp = await api.lookup_my_with_response(params)
        else:
            resp = await api.batch_lookup_with_response({"data": list(args.ips)}, params)

    if resp.json200 is None:
        message = error_message(resp) or resp.body.decode("utf-8", "replace")[:200]
        print(f"{resp.status}: {message}", file=sys.stderr)
        return 1

    print(json.dumps(resp.json200.to_dict(), indent=2))
    return 0

def main(argv: Optional[Sequence[str]] = None) -> None:
    args = parse_args(argv)
    if args.verbose:
        logging.basicConfig(level=logging.DEBUG, format="%(asctime)s %(levelname)s %(name)s: %(message)s")
    try:
        code = asyncio.run(run(args))
    except ConfigurationError as e:
        print(f"Configuration error: {e}", file=sys.stderr)
        sys.exit(2)
    except (httpx.HTTPError, ResponseDecodeError) as e:
        print(f"Request failed: {e}", file=sys.stderr)
        sys.exit(3)
    except KeyboardInterrupt:
        print("Aborted.", file=sys.stderr)
        sys.exit(130)
    sys.exit(code)
