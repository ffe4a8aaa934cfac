"""CLI to smoke-test a running Quantum Ledger backend.

Usage:
  poetry run ql-smoke health
  poetry run ql-smoke register "Ada" ada@example.com s3cret
  poetry run ql-smoke login ada@example.com s3cret
  poetry run ql-smoke --token <TOKEN> me
  poetry run ql-smoke --token <TOKEN> portfolio show
  poetry run ql-smoke --token <TOKEN> portfolio trade buy bitcoin 0.1
  poetry run ql-smoke markets overview --head 3
"""
import argparse
import json
import os
import sys

import httpx


def print_json(data: object) -> None:
    print(json.dumps(data, indent=2, default=str))


def _auth_headers(args: argparse.Namespace) -> dict[str, str]:
    if not args.token:
        raise SystemExit("A token is required (--token or QL_TOKEN)")
    return {"Authorization": f"Bearer {args.token}"}


def cmd_health(client: httpx.Client, _: argparse.Namespace) -> int:
    r = client.get("/")
    r.raise_for_status()
    print(r.text)
    return 0


def cmd_register(client: httpx.Client, args: argparse.Namespace) -> int:
    body = {"name": args.name, "email": args.email, "password": args.password}
    r = client.post("/api/register", json=body)
    r.raise_for_status()
    print_json(r.json())
    return 0


def cmd_login(client: httpx.Client, args: argparse.Namespace) -> int:
    r = client.post("/api/login", json={"email": args.email, "password": args.password})
    r.raise_for_status()
    print_json(r.json())
    return 0


def cmd_me(client: httpx.Client, args: argparse.Namespace) -> int:
    r = client.get("/api/me", headers=_auth_headers(args))
    r.raise_for_status()
    print_json(r.json())
    return 0


def cmd_portfolio_show(client: httpx.Client, args: argparse.Namespace) -> int:
    r = client.get("/portfolio", headers=_auth_headers(args))
    r.raise_for_status()
    data = r.json()
    top = data.get("top_asset") or {}
    print(
        f"Total ${data['total_value']:,.2f} ({data['source']}), "
        f"top asset: {top.get('symbol', '-')}"
    )
    print_json(data["holdings"])
    return 0


def cmd_portfolio_markets(client: httpx.Client, args: argparse.Namespace) -> int:
    r = client.get("/portfolio/markets", headers=_auth_headers(args))
    r.raise_for_status()
    print_json(r.json())
    return 0


def cmd_portfolio_trade(client: httpx.Client, args: argparse.Namespace) -> int:
    body = {"side": args.side, "asset_id": args.asset_id, "amount": args.amount}
    r = client.post("/portfolio/trade", json=body, headers=_auth_headers(args))
    r.raise_for_status()
    print_json(r.json())
    return 0


def cmd_markets_overview(client: httpx.Client, args: argparse.Namespace) -> int:
    r = client.get("/markets/overview")
    r.raise_for_status()
    data = r.json()
    print(f"Found {len(data)} coins")
    print_json(data[: args.head] if args.head else data)
    return 0


def main() -> int:
    parser = argparse.ArgumentParser(
        description="Smoke-test the Quantum Ledger API.",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=__doc__,
    )
    parser.add_argument(
        "--base-url",
        default="http://localhost:4000",
        help="API base URL (default: http://localhost:4000)",
    )
    parser.add_argument(
        "--timeout",
        type=float,
        default=30.0,
        help="Request timeout in seconds (default: 30)",
    )
    parser.add_argument(
        "--token",
        default=os.getenv("QL_TOKEN"),
        help="Bearer token for protected routes (default: $QL_TOKEN)",
    )
    subparsers = parser.add_subparsers(dest="command", required=True, help="Command")

    subparsers.add_parser("health", help="GET / health check")

    p = subparsers.add_parser("register", help="POST /api/register")
    p.add_argument("name")
    p.add_argument("email")
    p.add_argument("password")

    p = subparsers.add_parser("login", help="POST /api/login")
    p.add_argument("email")
    p.add_argument("password")

    subparsers.add_parser("me", help="GET /api/me")

    portfolio = subparsers.add_parser("portfolio", help="Portfolio routes (/portfolio)")
    portfolio_sub = portfolio.add_subparsers(dest="portfolio_cmd", required=True)
    portfolio_sub.add_parser("show", help="GET /portfolio")
    portfolio_sub.add_parser("markets", help="GET /portfolio/markets")
    p = portfolio_sub.add_parser("trade", help="POST /portfolio/trade (stub)")
    p.add_argument("side", choices=["buy", "sell"])
    p.add_argument("asset_id", help="CoinGecko ID (e.g. bitcoin)")
    p.add_argument("amount", type=float)

    markets = subparsers.add_parser("markets", help="Market routes (/markets)")
    markets_sub = markets.add_subparsers(dest="markets_cmd", required=True)
    p = markets_sub.add_parser("overview", help="GET /markets/overview")
    p.add_argument("--head", type=int, default=0, help="Show only first N (0 = all)")

    args = parser.parse_args()
    base_url = args.base_url.rstrip("/")

    handlers = {
        "health": cmd_health,
        "register": cmd_register,
        "login": cmd_login,
        "me": cmd_me,
        "portfolio": {
            "show": cmd_portfolio_show,
            "markets": cmd_portfolio_markets,
            "trade": cmd_portfolio_trade,
        },
        "markets": {
            "overview": cmd_markets_overview,
        },
    }

    cmd = args.command
    handler = handlers[cmd]
    if isinstance(handler, dict):
        handler = handler[getattr(args, f"{cmd}_cmd")]

    try:
        with httpx.Client(base_url=base_url, timeout=args.timeout) as client:
            return handler(client, args)
    except httpx.HTTPStatusError as e:
        print(f"HTTP error: {e.response.status_code}", file=sys.stderr)
        if e.response.content:
            try:
                print(e.response.json(), file=sys.stderr)
            except ValueError:
                print(e.response.text, file=sys.stderr)
        return 1
    except httpx.RequestError as e:
        print(f"Request error: {e}", file=sys.stderr)
        return 1


if __name__ == "__main__":
    sys.exit(main())
