"""
Command line interface for one-off calls against the API.

Examples:
  python -m branch_remote get https://api.branch.io/v1/applications --param foo=bar
  python -m branch_remote post https://api.branch.io/v1/open --body '{"device_fingerprint_id": "123"}'
  BRANCH_KEY=key_live_xxx python -m branch_remote --debug post https://api.branch.io/v1/close

Credentials and retry settings default to the BRANCH_* environment variables
(or a .env file); the flags below override them.
"""

from __future__ import annotations
import argparse, json, logging, sys
from typing import Any, Dict, List
from .config import Preferences
from .remote import RemoteInterface
from .response import ServerResponse


def _parse_param(raw: str) -> tuple[str, str]:
    key, sep, value = raw.partition("=")
    if not sep or not key:
        raise argparse.ArgumentTypeError(f"expected KEY=VALUE, got {raw!r}")
    return key, value


def _load_body(args) -> Dict[str, Any]:
    if args.body is not None and args.body_file is not None:
        raise ValueError("use either --body or --body-file, not both")
    raw = args.body
    if args.body_file is not None:
        with open(args.body_file, "r", encoding="utf-8") as f:
            raw = f.read()
    if raw is None or not raw.strip():
        return {}
    body = json.loads(raw)
    if not isinstance(body, dict):
        raise ValueError("request body must be a JSON object")
    return body


def _add_common(p: argparse.ArgumentParser) -> None:
    p.add_argument("url", help="Full endpoint URL")
    p.add_argument("--tag", default="cli", help="Label copied onto the response")
    p.add_argument("--timeout", type=int, default=None, help="Connect/read timeout in ms (<=0 means 3000)")


def _prefs_from_args(args) -> Preferences:
    return Preferences.from_env(
        branch_key=args.branch_key,
        app_key=args.app_key,
        retry_count=args.retries,
        retry_interval=args.retry_interval,
    )


def _report(resp: ServerResponse) -> int:
    print(json.dumps(resp.to_dict(), indent=2))
    return 0 if resp.ok else 1


def cmd_get(args) -> int:
    """GET with repeated --param KEY=VALUE pairs appended in order."""
    client = RemoteInterface(args.prefs)
    params = dict(args.param or [])
    return _report(client.make_restful_get(args.url, params, tag=args.tag,
                                           timeout=args.timeout, log=not args.quiet))


def cmd_post(args) -> int:
    """POST a JSON object given inline or from a file."""
    client = RemoteInterface(args.prefs)
    body = args.loaded_body
    return _report(client.make_restful_post(body, args.url, tag=args.tag,
                                            timeout=args.timeout, log=not args.quiet))


def build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(prog="branch-remote", description="Branch API REST client")
    p.add_argument("--branch-key", default=None, help="Branch key (overrides BRANCH_KEY)")
    p.add_argument("--app-key", default=None, help="Legacy app key, used only without a branch key")
    p.add_argument("--retries", type=int, default=None, help="Max retries on 5xx (overrides BRANCH_RETRY_COUNT)")
    p.add_argument("--retry-interval", type=int, default=None, help="Sleep between retries in ms")
    p.add_argument("--quiet", action="store_true", help="Disable per-request debug lines")
    p.add_argument("--debug", action="store_true", help="Log at DEBUG level")
    sub = p.add_subparsers(dest="cmd", required=True)

    sp = sub.add_parser("get", help="Send a GET request")
    _add_common(sp)
    sp.add_argument("--param", action="append", type=_parse_param, metavar="KEY=VALUE",
                    help="Query parameter (repeatable, order kept)")
    sp.set_defaults(func=cmd_get)

    sp = sub.add_parser("post", help="Send a POST request")
    _add_common(sp)
    sp.add_argument("--body", default=None, help="JSON object to send")
    sp.add_argument("--body-file", default=None, help="Read the JSON object from this file")
    sp.set_defaults(func=cmd_post)

    return p


def main(argv: List[str] | None = None) -> int:
    p = build_parser()
    args = p.parse_args(argv)
    if args.cmd == "post":
        try:
            args.loaded_body = _load_body(args)
        except (OSError, ValueError) as e:
            p.error(f"invalid request body: {e}")
    try:
        args.prefs = _prefs_from_args(args)
    except ValueError as e:
        p.error(f"invalid BRANCH_* setting: {e}")

    logging.basicConfig(level=logging.DEBUG if args.debug or args.prefs.debug else logging.INFO,
                        format="%(asctime)s - %(levelname)s - %(message)s")
    return args.func(args)


if __name__ == "__main__":
    sys.exit(main())
