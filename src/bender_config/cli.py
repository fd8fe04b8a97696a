from __future__ import annotations

import argparse
import sys
from pathlib import Path
from typing import List, Optional

import tomli_w
from dotenv import load_dotenv
from rich.console import Console
from rich.syntax import Syntax

from .errors import BenderConfigError, ConfigError, InteractionError, KeyLookupError
from .keys import get_key, set_key
from .logging_setup import setup_logging
from .models import Config, default_config
from .paths import check_paths
from .secret import ensure_secret, secret_path
from .store import config_path, load, save, serialize
from .wizard.document import DocumentDialog
from .wizard.terminal import Terminal

load_dotenv()  # BENDER_CONFIG may be set in a .env file
console = Console()

EXIT_OK = 0
EXIT_FAILURE = 1
EXIT_CONFIG = 2
EXIT_ABORTED = 130


def _target(args: argparse.Namespace) -> Path:
    return Path(args.config) if args.config else config_path()


def _load_or_exit(path: Path, term: Terminal) -> Config:
    try:
        return load(path)
    except FileNotFoundError:
        term.error(f"No configuration at {path}; create one with 'bender-config default'")
        sys.exit(EXIT_CONFIG)
    except ConfigError as e:
        term.error(f"Config error in {path}: {e}")
        sys.exit(EXIT_CONFIG)


def cmd_wizard(args: argparse.Namespace, term: Terminal) -> int:
    path = _target(args)
    dialog = DocumentDialog(term)

    current: Optional[Config] = None
    if path.exists():
        try:
            current = load(path)
        except ConfigError as e:
            term.error(f"Existing configuration at {path} is unreadable ({e}); starting from scratch")

    if current is None:
        result = dialog.ask()
    else:
        candidate = _load_or_exit(Path(args.against), term) if args.against else default_config()
        result = dialog.reconcile(current, candidate)

    save(result, path)
    term.ok(f"Wrote configuration to {path}")
    return EXIT_OK


def cmd_default(args: argparse.Namespace, term: Terminal) -> int:
    path = _target(args)
    if path.exists() and not args.force:
        term.error(f"A configuration already exists at {path}; use --force to overwrite it")
        return EXIT_FAILURE
    save(default_config(), path)
    term.ok(f"Wrote default configuration to {path}")
    return EXIT_OK


def cmd_show(args: argparse.Namespace, term: Terminal) -> int:
    cfg = _load_or_exit(_target(args), term)
    term.console.print(Syntax(serialize(cfg), "toml"))
    return EXIT_OK


def cmd_validate(args: argparse.Namespace, term: Terminal) -> int:
    path = _target(args)
    cfg = _load_or_exit(path, term)
    note = " (default values)" if cfg.is_default() else ""
    term.ok(f"Configuration at {path} is valid{note}")
    return EXIT_OK


def cmd_path(args: argparse.Namespace, term: Terminal) -> int:
    term.console.print(str(_target(args)), markup=False, highlight=False, soft_wrap=True)
    return EXIT_OK


def cmd_get(args: argparse.Namespace, term: Terminal) -> int:
    cfg = _load_or_exit(_target(args), term)
    value = get_key(cfg, args.key)
    text = tomli_w.dumps(value).rstrip() if isinstance(value, dict) else str(value)
    term.console.print(text, markup=False, highlight=False, soft_wrap=True)
    return EXIT_OK


def cmd_set(args: argparse.Namespace, term: Terminal) -> int:
    path = _target(args)
    cfg = _load_or_exit(path, term)
    updated = set_key(cfg, args.key, args.value)
    save(updated, path)
    term.ok(f"{args.key} = {get_key(updated, args.key)}")
    return EXIT_OK


def cmd_check_paths(args: argparse.Namespace, term: Terminal) -> int:
    cfg = _load_or_exit(_target(args), term)
    results = check_paths(cfg)
    for name, writeable in results.items():
        location = getattr(cfg.paths, name)
        if writeable:
            term.ok(f"{name}: {location} is writeable")
        else:
            term.error(f"{name}: {location} is not writeable (permission denied)")
    return EXIT_OK if all(results.values()) else EXIT_FAILURE


def cmd_secret(args: argparse.Namespace, term: Terminal) -> int:
    cfg = _load_or_exit(_target(args), term)
    ensure_secret(cfg)
    term.ok(f"Application secret at {secret_path(cfg)}")
    return EXIT_OK


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="bender-config",
        description="Create, inspect and update the bender render farm configuration.",
    )
    parser.add_argument("--config", type=str, help="Path to config.toml (default: $BENDER_CONFIG or /etc/bender/config.toml)")
    parser.add_argument("-v", "--verbose", action="store_true", help="Log debug output to stderr")
    sub = parser.add_subparsers(dest="command", required=True)

    p_wizard = sub.add_parser("wizard", help="Run the configuration wizard")
    p_wizard.add_argument("--against", type=str, help="Reconcile with this file instead of the defaults")
    p_wizard.set_defaults(func=cmd_wizard)

    p_default = sub.add_parser("default", help="Write a configuration with default values")
    p_default.add_argument("--force", action="store_true", help="Overwrite an existing configuration")
    p_default.set_defaults(func=cmd_default)

    p_reset = sub.add_parser("reset", help="Reset the configuration to its default values")
    p_reset.set_defaults(func=cmd_default, force=True)

    sub.add_parser("show", help="Show the configuration file").set_defaults(func=cmd_show)
    sub.add_parser("validate", help="Check that the configuration parses").set_defaults(func=cmd_validate)
    sub.add_parser("path", help="Print the location of the configuration file").set_defaults(func=cmd_path)

    p_get = sub.add_parser("get", help="Print a value or section, e.g. 'janitor.finished'")
    p_get.add_argument("key")
    p_get.set_defaults(func=cmd_get)

    p_set = sub.add_parser("set", help="Set a single value, e.g. 'flask.port 8080'")
    p_set.add_argument("key")
    p_set.add_argument("value")
    p_set.set_defaults(func=cmd_set)

    p_check = sub.add_parser("check-paths", help="Check that the configured paths are writeable")
    p_check.set_defaults(func=cmd_check_paths)

    p_secret = sub.add_parser("secret", help="Generate the application secret if it is missing")
    p_secret.set_defaults(func=cmd_secret)

    return parser


def main(argv: List[str] | None = None, terminal: Terminal | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    setup_logging(args.verbose)
    term = terminal or Terminal(console=console, error_console=Console(stderr=True))
    try:
        return args.func(args, term)
    except SystemExit:
        raise
    except InteractionError as e:
        term.error(str(e))
        return EXIT_ABORTED
    except (ConfigError, KeyLookupError) as e:
        term.error(str(e))
        return EXIT_CONFIG
    except (BenderConfigError, OSError) as e:
        term.error(str(e))
        return EXIT_FAILURE
    except Exception as e:  # unexpected
        term.error(f"Unexpected error: {e}")
        return EXIT_FAILURE


if __name__ == "__main__":
    raise SystemExit(main())
