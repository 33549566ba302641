"""
Command-line entry point.

Usage:
    tx3-build generate -i "protocol/*.tx3" -o bindings
    tx3-build watch -i "protocol/*.tx3"
    tx3-build resolve --endpoint http://localhost:3000 --tir tir.json --arg quantity=10
"""
import argparse
import json
import logging
import sys
from pathlib import Path
from typing import Any, Dict, List, Optional
import yaml
from tx3_build.core.config import settings
from tx3_build.core.errors import Tx3Error
from tx3_build.core.logging import configure_logging
from tx3_build.generators.bindgen.types import Tx3PluginOptions
from tx3_build.generators.bindgen.utils import parse_key_values
from tx3_build.plugins.build import Tx3BuildPlugin
from tx3_build.plugins.dev_server import Tx3DevServerPlugin
from tx3_build.plugins.watch import WatchfilesDevServer
from tx3_build.trp.client import TRPClient
from tx3_build.trp.types import ClientOptions, ProtoTx, TirEnvelope

log = logging.getLogger(__name__)


def _add_generation_args(parser: argparse.ArgumentParser) -> None:
    parser.add_argument("-i", "--input", dest="input_files", action="append", help="tx3 file or glob pattern (repeatable)")
    parser.add_argument("-o", "--output-dir", help=f"Output directory (default: {settings.output_dir})")
    parser.add_argument("-t", "--target", help=f"Binding language (default: {settings.target})")
    parser.add_argument("--bindgen", dest="bindgen_path", help=f"Generator executable (default: {settings.bindgen_path})")
    parser.add_argument("--trp-endpoint", help=f"TRP endpoint baked into bindings (default: {settings.trp_endpoint})")
    parser.add_argument("--trp-header", action="append", metavar="KEY=VALUE", help="TRP header (repeatable)")
    parser.add_argument("--env-arg", action="append", metavar="KEY=VALUE", help="Env arg (repeatable)")
    parser.add_argument("--root", type=Path, help="Project root (default: current directory)")
    parser.add_argument("--config", type=Path, help="YAML file with plugin options")
    parser.add_argument("bindgen_args", nargs="*", help="Extra generator arguments, after --")


def build_argument_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="tx3-build", description="Generate tx3 bindings and resolve transactions.")
    parser.add_argument("--log-level", default=settings.log_level)
    sub = parser.add_subparsers(dest="command", required=True)

    for name, help_text in (
        ("generate", "Generate bindings now"),
        ("check", "Generate bindings only if none exist"),
        ("watch", "Generate bindings, then regenerate on input changes"),
    ):
        _add_generation_args(sub.add_parser(name, help=help_text))

    resolve = sub.add_parser("resolve", help="Resolve a transaction through a TRP endpoint")
    resolve.add_argument("--endpoint", default=settings.trp_endpoint)
    resolve.add_argument("--tir", type=Path, required=True, help="JSON file with version, bytecode and encoding")
    resolve.add_argument("--arg", action="append", metavar="KEY=VALUE", help="Transaction argument (repeatable)")
    resolve.add_argument("--env-arg", action="append", metavar="KEY=VALUE")
    resolve.add_argument("--header", action="append", metavar="KEY=VALUE")
    return parser


def load_options(args: argparse.Namespace) -> Tx3PluginOptions:
    """Merge a YAML options file with command-line flags. Flags win."""
    data: Dict[str, Any] = {}
    if args.config:
        with open(args.config, "r", encoding="utf-8") as f:
            data = yaml.safe_load(f) or {}
    for key in ("input_files", "output_dir", "target", "bindgen_path", "trp_endpoint"):
        value = getattr(args, key)
        if value:
            data[key] = value
    if args.trp_header:
        data["trp_headers"] = {**data.get("trp_headers", {}), **parse_key_values(args.trp_header)}
    if args.env_arg:
        data["env_args"] = {**data.get("env_args", {}), **parse_key_values(args.env_arg)}
    if args.bindgen_args:
        data["bindgen_args"] = [*data.get("bindgen_args", []), *args.bindgen_args]
    data.setdefault("input_files", [])
    return Tx3PluginOptions.model_validate(data)


def parse_arg_value(raw: str) -> Any:
    """Decode JSON scalars (numbers, true/false, null); anything else stays a string."""
    try:
        value = json.loads(raw)
    except ValueError:
        return raw
    if isinstance(value, (dict, list)):
        return raw
    return value


def run_generation(args: argparse.Namespace) -> None:
    options = load_options(args)
    if args.command == "generate":
        Tx3BuildPlugin(options, root=args.root).build_start()
    elif args.command == "check":
        Tx3BuildPlugin(options, root=args.root).build_end()
    else:
        plugin = Tx3DevServerPlugin(options, root=args.root)
        plugin.build_start()
        server = WatchfilesDevServer()
        with plugin.configure_server(server):
            try:
                server.watcher.run()
            except KeyboardInterrupt:
                log.info("Stopped watching")


def run_resolve(args: argparse.Namespace) -> None:
    with open(args.tir, "r", encoding="utf-8") as f:
        tir = TirEnvelope.model_validate(json.load(f))
    client = TRPClient(ClientOptions(
        endpoint=args.endpoint,
        headers=parse_key_values(args.header),
        env_args={k: parse_arg_value(v) for k, v in parse_key_values(args.env_arg).items()},
    ))
    proto_tx = ProtoTx(tir=tir, args={k: parse_arg_value(v) for k, v in parse_key_values(args.arg).items()})
    envelope = client.resolve_sync(proto_tx)
    print(json.dumps(dict(envelope), indent=2))


def main(argv: Optional[List[str]] = None) -> int:
    parser = build_argument_parser()
    args = parser.parse_args(argv)
    # stdout is reserved for command output such as resolved envelopes
    configure_logging(args.log_level, stream=sys.stderr)
    try:
        if args.command == "resolve":
            run_resolve(args)
        else:
            run_generation(args)
    except ValueError as e:
        parser.error(str(e))
    except (Tx3Error, OSError) as e:
        log.error("%s", e)
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
