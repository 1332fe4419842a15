"""Dimension layout generator CLI entry point.

Provides subcommands for running the layout HTTP server, generating a layout
from the command line and printing the active generation profile. Accepts
configuration via flags and environment variables, with optional .env loading.

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

_color_init()
_COLOR_ENABLED = True

# Disable colors if output is not a real terminal (e.g., during pytest capture)
try:
    if not sys.stdout.isatty():  # pragma: no cover - environment dependent
        _COLOR_ENABLED = False
except (AttributeError, ValueError):  # pragma: no cover
    _COLOR_ENABLED = False


def _load_version() -> str:
    path = os.path.join(os.path.dirname(os.path.abspath(__file__)), "VERSION")
    try:
        with open(path, "r", encoding="utf-8") as f:
            return f.read().strip()
    except OSError:
        return "0.1.0"


__version__ = _load_version()


def parse_args(argv: list[str]) -> argparse.Namespace:
    description = """
    Dimension Layout Generator

    Serve generated hex layouts over HTTP, or generate one directly from the
    command line. Configuration can be provided via CLI flags or environment
    variables. If both are present, CLI flags take precedence.
    """

    epilog = dedent(
        """
        Environment variables:
          HOST                           Bind address for the web server (default: 0.0.0.0)
          PORT                           Port for the web server (default: 5000)
          DIMENSION_PROFILE_PATH         JSON generation profile (default: built-in profile)
          DIMENSION_PROP_REGISTRY_PATH   JSON prop registry used when the profile pool is empty

        Examples:
          # Run the server on the default host and port
          python run.py server

          # Generate a layout summary for a seed
          python run.py generate --seed 1337

          # Full layout JSON with a custom profile, written to a file
          python run.py generate --seed dusk --profile profiles/short.json --full --out layout.json

          # Show the effective profile
          python run.py profile --profile profiles/short.json
        """
    )

    parser = argparse.ArgumentParser(
        prog="Dimension",
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
        version=f"Dimension Layout Generator {__version__}",
    )

    subparsers = parser.add_subparsers(dest="command")

    # server subcommand
    server_parser = subparsers.add_parser(
        "server",
        help="Run the layout HTTP server",
        formatter_class=argparse.RawTextHelpFormatter,
        description="Run the Flask layout API server",
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
        help="Generate a layout and print it as JSON",
        formatter_class=argparse.RawTextHelpFormatter,
        description=dedent(
            """
            Generate one layout (up to 4 attempts) and print a JSON summary.
            The seed may be an integer or any string (hashed to an integer).
            """
        ),
    )
    gen_parser.add_argument("--seed", default=None, help="Base seed (int or string; default: random)")
    gen_parser.add_argument("--profile", dest="profile_path", default=None, help="JSON profile path")
    gen_parser.add_argument("--registry", dest="registry_path", default=None, help="JSON prop registry path")
    gen_parser.add_argument("--full", action="store_true", help="Print the full layout instead of a summary")
    gen_parser.add_argument("--metrics", action="store_true", help="Include generation metrics in the output")
    gen_parser.add_argument("--out", default=None, help="Write the JSON to this file instead of stdout")
    gen_parser.set_defaults(command="generate")

    # profile subcommand
    prof_parser = subparsers.add_parser(
        "profile",
        help="Print the effective generation profile",
        formatter_class=argparse.RawTextHelpFormatter,
    )
    prof_parser.add_argument("--profile", dest="profile_path", default=None, help="JSON profile path")
    prof_parser.set_defaults(command="profile")

    # If no subcommand provided, default to server
    if len(argv) == 0:
        argv = ["server"]

    args = parser.parse_args(argv)
    return args


def _resolve_paths(args):
    profile_path = getattr(args, "profile_path", None) or os.getenv("DIMENSION_PROFILE_PATH") or None
    registry_path = getattr(args, "registry_path", None) or os.getenv("DIMENSION_PROP_REGISTRY_PATH") or None
    return profile_path, registry_path


def _error(msg: str) -> None:
    prefix = f"{Fore.RED}[ERROR]{Style.RESET_ALL}" if _COLOR_ENABLED else "[ERROR]"
    print(f"{prefix} {msg}", file=sys.stderr)


def _run_generate(args) -> int:
    from dimension.generation import DimensionGenerator, GenerationConfigError, load_profile, load_registry
    from dimension.logging_utils import layout_fields, log
    from dimension.routes.layout_api import _coerce_seed

    profile_path, registry_path = _resolve_paths(args)
    try:
        profile = load_profile(profile_path)
        registry = load_registry(registry_path) if registry_path else None
    except GenerationConfigError as e:
        _error(str(e))
        return 1

    seed = _coerce_seed(args.seed)
    generator = DimensionGenerator(profile=profile, registry=registry, fixed_seed=seed)
    with log.bind(base_seed=seed).timed("generate") as extra:
        layout = generator.regenerate()
        extra.update(layout_fields(layout))

    if args.full:
        payload = layout.to_dict(include_metrics=args.metrics)
    else:
        payload = {"base_seed": seed, **layout.summary()}
        if args.metrics:
            payload["metrics"] = layout.metrics
    text = json.dumps(payload, indent=2)
    if args.out:
        with open(args.out, "w", encoding="utf-8") as f:
            f.write(text + "\n")
        print(f"[INFO] Wrote layout for seed {layout.seed_used} to {args.out}")
    else:
        print(text)
    if not layout.boss_reachable:
        _error("boss tile is not reachable from the start tile after all attempts")
    return 0


def _run_profile(args) -> int:
    from dimension.generation import GenerationConfigError, load_profile

    profile_path, _ = _resolve_paths(args)
    try:
        profile = load_profile(profile_path)
    except GenerationConfigError as e:
        _error(str(e))
        return 1
    out = profile.to_dict()
    out["effective_target_tile_count"] = profile.effective_target_tile_count
    print(json.dumps(out, indent=2))
    return 0


def main(argv: list[str]) -> int:
    args = parse_args(argv)
    if getattr(args, "env_file", None):
        load_dotenv(args.env_file)
    else:
        # Load default .env if present (no error if missing)
        load_dotenv()

    mode = (getattr(args, "command", None) or "server").lower()
    if mode == "generate":
        return _run_generate(args)
    if mode == "profile":
        return _run_profile(args)

    # Resolve configuration from CLI flags or env vars
    env_host = os.getenv("HOST", "0.0.0.0")
    env_port = int(os.getenv("PORT", "5000"))
    host = getattr(args, "host", None) or env_host
    port = int(getattr(args, "port", None) or env_port)
    profile_path, registry_path = _resolve_paths(args)

    def handle_sigint(sig, frame):
        print("\n[INFO] Shutting down server...")
        sys.exit(0)

    signal.signal(signal.SIGINT, handle_sigint)

    # Import server entrypoint only after environment is ready
    from dimension.logging_utils import log
    from dimension.server import start_server

    title = (
        f"{Fore.CYAN}{Style.BRIGHT}Dimension Layout Server{Style.RESET_ALL}"
        if _COLOR_ENABLED
        else "Dimension Layout Server"
    )

    def label(text: str) -> str:
        return f"{Fore.YELLOW}{text}{Style.RESET_ALL}" if _COLOR_ENABLED else text

    def value(val: str | int) -> str:
        return f"{Fore.GREEN}{val}{Style.RESET_ALL}" if _COLOR_ENABLED else str(val)

    divider = (Fore.MAGENTA + "=" * 40 + Style.RESET_ALL) if _COLOR_ENABLED else "=" * 40
    lines = [
        divider,
        f"  {title}",
        divider,
        f"  {label('Mode:'):12} {value(mode.upper())}",
        f"  {label('Host:'):12} {value(host)}",
        f"  {label('Port:'):12} {value(port)}",
        f"  {label('Profile:'):12} {value(profile_path or 'built-in')}",
        f"  {label('Registry:'):12} {value(registry_path or 'none')}",
        divider,
        "",
    ]
    print("\n".join(lines))

    info_prefix = f"{Fore.CYAN}[INFO]{Style.RESET_ALL}" if _COLOR_ENABLED else "[INFO]"
    print(f"{info_prefix} Listening for connections... Press Ctrl+C to stop.")
    debug = bool(getattr(args, "debug", False) or os.getenv("FLASK_DEBUG") == "1")
    log.info(event="listen", host=host, port=port, debug=debug)
    start_server(host=host, port=port, debug=debug)
    return 0


def cli() -> None:
    raise SystemExit(main(sys.argv[1:]))


if __name__ == "__main__":
    cli()
