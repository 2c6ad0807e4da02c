"""Cellmap CLI entry point.

Provides subcommands for running the map HTTP server, generating a single map
as JSON, and listing the available templates. Accepts configuration via flags
and environment variables, with optional .env loading.

Run `python run.py --help` for details.
"""

import argparse
import json
import os
import signal
import sys
from textwrap import dedent

from colorama import Fore, Style
from colorama import init as _color_init
from dotenv import load_dotenv

from cellmap import __version__

_color_init()


def _color_enabled() -> bool:
    # Disable colors if output is not a real terminal (e.g., during pytest capture)
    try:
        return sys.stdout.isatty()
    except (AttributeError, ValueError):  # pragma: no cover - closed/odd streams
        return False


def parse_args(argv: list[str]) -> argparse.Namespace:
    description = """
    Cellmap room-map generator

    Run the JSON map server or generate a single map from a template. Configuration
    can be provided via CLI flags or environment variables. If both are present,
    CLI flags take precedence.
    """

    epilog = dedent(
        """
        Environment variables:
          HOST                      Bind address for the web server (default: 0.0.0.0)
          PORT                      Port for the web server (default: 5000)
          CELLMAP_TEMPLATE_DIR      Directory holding map templates (default: data/maps)
          CELLMAP_DEFAULT_TEMPLATE  Template served at /api/maps/default (default: crypt)
          CELLMAP_MAX_ATTEMPTS      Generation retries with fresh seeds (default: 8)

        Examples:
          # Run the server on the default host and port
          python run.py server

          # Generate the crypt template with a fixed seed
          python run.py generate crypt --seed 42

          # Load variables from .env then list templates
          python run.py --env-file .env templates
        """
    )

    parser = argparse.ArgumentParser(
        prog="cellmap",
        description=dedent(description),
        epilog=epilog,
        formatter_class=argparse.RawTextHelpFormatter,
    )

    parser.add_argument(
        "--env-file",
        dest="env_file",
        help="Path to a .env file to load before processing flags",
    )

    parser.add_argument(
        "--version",
        action="version",
        version=f"Cellmap {__version__}",
    )

    subparsers = parser.add_subparsers(dest="command")

    # server subcommand
    server_parser = subparsers.add_parser(
        "server",
        help="Run the JSON map server",
        formatter_class=argparse.RawTextHelpFormatter,
        description="Run the Flask map server",
    )
    server_parser.add_argument(
        "--host",
        default=None,
        help="Host interface to bind (default: env HOST or 0.0.0.0)",
    )
    server_parser.add_argument(
        "--port",
        type=int,
        default=None,
        help="Port to listen on (default: env PORT or 5000)",
    )
    server_parser.add_argument(
        "--debug",
        action="store_true",
        help="Enable Flask debug mode with verbose error pages",
    )
    server_parser.set_defaults(command="server")

    # generate subcommand
    gen_parser = subparsers.add_parser(
        "generate",
        help="Generate one map and print it as JSON",
        formatter_class=argparse.RawTextHelpFormatter,
    )
    gen_parser.add_argument("template", help="Template directory name (e.g. crypt)")
    gen_parser.add_argument("--seed", default=None, help="Integer or string seed (default: random)")
    gen_parser.add_argument(
        "--templates",
        dest="template_dir",
        default=None,
        help="Template root directory (default: env CELLMAP_TEMPLATE_DIR or data/maps)",
    )
    gen_parser.add_argument("--indent", type=int, default=None, help="Indent the JSON output")
    gen_parser.add_argument("--metrics", action="store_true", help="Include generation metrics")
    gen_parser.set_defaults(command="generate")

    # templates subcommand
    list_parser = subparsers.add_parser(
        "templates",
        help="List available map templates",
        formatter_class=argparse.RawTextHelpFormatter,
    )
    list_parser.add_argument("--templates", dest="template_dir", default=None, help="Template root directory")
    list_parser.set_defaults(command="templates")

    # If no subcommand provided, default to server
    if len(argv) == 0:
        argv = ["server"]

    return parser.parse_args(argv)


def _print_banner(mode: str, host: str, port: int, template_dir: str) -> None:
    colored = _color_enabled()
    title = f"{Fore.CYAN}{Style.BRIGHT}Cellmap Server Bootup{Style.RESET_ALL}" if colored else "Cellmap Server Bootup"

    def label(text: str) -> str:
        return f"{Fore.YELLOW}{text}{Style.RESET_ALL}" if colored else text

    def value(val: str | int) -> str:
        return f"{Fore.GREEN}{val}{Style.RESET_ALL}" if colored else str(val)

    divider = (Fore.MAGENTA + "=" * 40 + Style.RESET_ALL) if colored else "=" * 40
    lines = [
        divider,
        f"  {title}",
        divider,
        f"  {label('Mode:'):12} {value(mode.upper())}",
        f"  {label('Host:'):12} {value(host)}",
        f"  {label('Port:'):12} {value(port)}",
        f"  {label('Templates:'):12} {value(template_dir)}",
        divider,
        "",
    ]
    print("\n".join(lines))


def main(argv: list[str]) -> int:
    args = parse_args(argv)
    if getattr(args, "env_file", None):
        load_dotenv(args.env_file)
    else:
        # Load default .env if present (no error if missing)
        load_dotenv()

    mode = (getattr(args, "command", None) or "server").lower()
    template_dir = getattr(args, "template_dir", None) or os.getenv("CELLMAP_TEMPLATE_DIR", "data/maps")

    # Import after the environment is ready so create_app sees .env values
    from cellmap.logging_utils import get_logger
    from cellmap.mapgen import GenerationFailed, TemplateError, generate_map, list_templates
    from cellmap.routes.maps_api import coerce_seed

    if mode == "templates":
        for name in list_templates(template_dir):
            print(name)
        return 0

    if mode == "generate":
        seed = coerce_seed(args.seed)
        try:
            generated = generate_map(args.template, seed, template_root=template_dir)
        except (TemplateError, GenerationFailed) as exc:
            print(f"[ERROR] {exc}", file=sys.stderr)
            return 1
        payload = generated.to_dict()
        if args.metrics:
            payload["metrics"] = generated.metrics
        print(json.dumps(payload, indent=args.indent))
        return 0

    host = getattr(args, "host", None) or os.getenv("HOST", "0.0.0.0")
    port = int(getattr(args, "port", None) or os.getenv("PORT", "5000"))

    def handle_sigint(sig, frame):
        print("\n[INFO] Shutting down server...")
        sys.exit(0)

    signal.signal(signal.SIGINT, handle_sigint)

    from cellmap import create_app
    from cellmap.server import start_server

    _print_banner(mode, host, port, template_dir)
    get_logger("cellmap").info("startup", mode=mode, host=host, port=port, templates=template_dir)
    start_server(create_app({"CELLMAP_TEMPLATE_DIR": template_dir}), host=host, port=port, debug=args.debug)
    return 0


if __name__ == "__main__":
    raise SystemExit(main(sys.argv[1:]))
