"""OceanSaksham command line: run the server, list stored reports, sign test webhooks."""

from __future__ import annotations

import argparse
import sys


def cmd_serve(args):
    """Run the web server."""
    import uvicorn
    from app.config import get_settings

    port = args.port or get_settings().port
    uvicorn.run("app.main:app", host=args.host, port=port)


def cmd_reports(args):
    """Print the most recent reports from the state file."""
    from app.config import get_settings
    from app.services.report_store import ReportStore

    settings = get_settings()
    store = ReportStore(settings.storage.reports_file, settings.storage.max_reports)
    store.load()
    reports = store.list()[: args.limit]
    if not reports:
        print("No reports stored")
        return

    for r in reports:
        coords = f"{r.coordinates.lat},{r.coordinates.lon}" if r.coordinates else "N/A"
        media = f" media={r.media.filename}" if r.media else ""
        print(f"{r.id}  {r.created_at.isoformat()}  {r.source:<8} {r.urgency:<6} "
              f"{r.hazard_type:<7} {r.location} ({coords}){media}")
    print(f"\n{len(reports)} of {len(store)} report(s)")


def cmd_sign(args):
    """Compute the X-Twilio-Signature for a set of form parameters."""
    from app.config import get_settings
    from app.services.twilio_auth import compute_signature

    token = args.token or get_settings().twilio_auth_token
    if not token:
        print("No auth token: pass --token or set TWILIO_AUTH_TOKEN")
        sys.exit(1)

    params = {}
    for pair in args.params:
        if "=" not in pair:
            print(f"Invalid parameter (expected key=value): {pair}")
            sys.exit(1)
        key, value = pair.split("=", 1)
        params[key] = value
    print(compute_signature(token, args.url, params))


def main():
    parser = argparse.ArgumentParser(description="OceanSaksham CLI")
    subparsers = parser.add_subparsers(dest="command")

    # serve
    sv = subparsers.add_parser("serve", help="Run the web server")
    sv.add_argument("--host", default="0.0.0.0", help="Bind address")
    sv.add_argument("--port", type=int, default=0, help="Listen port (defaults to PORT)")

    # reports
    rp = subparsers.add_parser("reports", help="List stored reports")
    rp.add_argument("--limit", type=int, default=20, help="Maximum reports to print")

    # sign
    sg = subparsers.add_parser("sign", help="Sign webhook parameters for local testing")
    sg.add_argument("--url", required=True, help="Webhook URL as Twilio would call it")
    sg.add_argument("--token", default="", help="Auth token (defaults to TWILIO_AUTH_TOKEN)")
    sg.add_argument("params", nargs="*", help="Form parameters as key=value")

    args = parser.parse_args()
    if not args.command:
        parser.print_help()
        sys.exit(1)

    if args.command == "serve":
        cmd_serve(args)
    elif args.command == "reports":
        cmd_reports(args)
    elif args.command == "sign":
        cmd_sign(args)


if __name__ == "__main__":
    main()
