"""LocalMart management CLI.

Runs the API server with uvicorn. Storage is in memory, so demo data has to
be loaded into the same process that serves requests.

Usage:
    python src/manage.py serve                 # Serve on 0.0.0.0:5001
    python src/manage.py serve --port 8000     # Custom port
    python src/manage.py serve --seed          # Load demo shops and products first
"""

import argparse
import sys


def serve(host, port, seed=False):
    """Initialize the domain, optionally seed it, and serve the API."""
    import uvicorn

    from app import app
    from marketplace.domain import marketplace

    if seed:
        from marketplace.seed import DEMO_PASSWORD, seed_demo_data

        with marketplace.domain_context():
            summary = seed_demo_data()
        print(f"Seeded {len(summary['shops'])} demo shops (password for all demo users: {DEMO_PASSWORD}).")

    print(f"Serving LocalMart API on http://{host}:{port}/api")
    uvicorn.run(app, host=host, port=port)


def main():
    parser = argparse.ArgumentParser(description="LocalMart management")
    subparsers = parser.add_subparsers(dest="command", required=True)

    serve_parser = subparsers.add_parser("serve", help="Run the API server")
    serve_parser.add_argument("--host", default="0.0.0.0", help="Interface to bind (default: 0.0.0.0)")
    serve_parser.add_argument("--port", type=int, default=5001, help="Port to listen on (default: 5001)")
    serve_parser.add_argument("--seed", action="store_true", help="Load demo data before serving")

    args = parser.parse_args()

    if args.command == "serve":
        serve(args.host, args.port, seed=args.seed)
    else:
        parser.print_help()
        sys.exit(1)


if __name__ == "__main__":
    main()
