"""CLI entry point for the Herald API server."""

import argparse
import os


def main(argv: list[str] | None = None) -> None:
    parser = argparse.ArgumentParser(
        prog="herald-server",
        description="Herald API server: admin notification pipeline",
    )
    parser.add_argument("--host", default="0.0.0.0", help="Bind host (default: 0.0.0.0)")
    parser.add_argument("--port", type=int, default=8080, help="Bind port (default: 8080)")
    parser.add_argument(
        "--json-logs",
        action="store_true",
        help="Emit JSON log lines instead of the colored console renderer",
    )
    args = parser.parse_args(argv)

    if args.json_logs:
        os.environ["HERALD_JSON_LOGS"] = "1"

    import uvicorn

    uvicorn.run("herald.main:app", host=args.host, port=args.port)


if __name__ == "__main__":
    main()
