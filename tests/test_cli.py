"""Tests for the tx3-build command line."""
import json
import subprocess
from pathlib import Path
from unittest.mock import patch
import httpx
import pytest
from tx3_build import cli
from tx3_build.cli import build_argument_parser, load_options, main, parse_arg_value
from tx3_build.trp.client import TRPClient

FIXTURES_DIR = Path(__file__).parent / "fixtures"


def test_load_options_from_flags():
    args = build_argument_parser().parse_args([
        "generate", "-i", "protocol/*.tx3", "-i", "more/*.tx3",
        "-o", "out", "-t", "python",
        "--trp-header", "dmtr-api-key=abc", "--env-arg", "network=preprod",
        "--", "--verbose",
    ])
    options = load_options(args)

    assert options.input_files == ["protocol/*.tx3", "more/*.tx3"]
    assert options.output_dir == "out"
    assert options.target == "python"
    assert options.trp_headers == {"dmtr-api-key": "abc"}
    assert options.env_args == {"network": "preprod"}
    assert options.bindgen_args == ["--verbose"]


def test_load_options_merges_yaml_config(tmp_path):
    config_file = tmp_path / "tx3.yaml"
    config_file.write_text(
        "input_files:\n  - protocol/*.tx3\n"
        "output_dir: from-yaml\n"
        "trp_headers:\n  x-a: '1'\n",
        encoding="utf-8",
    )
    args = build_argument_parser().parse_args([
        "generate", "--config", str(config_file), "-o", "from-flag", "--trp-header", "x-b=2",
    ])
    options = load_options(args)

    assert options.input_files == ["protocol/*.tx3"]
    assert options.output_dir == "from-flag"
    assert options.trp_headers == {"x-a": "1", "x-b": "2"}


@pytest.mark.parametrize("raw,expected", [
    ("10", 10),
    ("1.5", 1.5),
    ("true", True),
    ("null", None),
    ("addr_test1qz", "addr_test1qz"),
    ("[1, 2]", "[1, 2]"),
])
def test_parse_arg_value(raw, expected):
    assert parse_arg_value(raw) == expected


def test_generate_runs_bindgen(project):
    with patch("tx3_build.generators.bindgen.invoker.subprocess.run") as run:
        code = main(["generate", "--root", str(project), "-i", "protocol/*.tx3", "--bindgen", "tx3-bindgen"])

    assert code == 0
    argv = run.call_args.args[0]
    assert argv[:3] == ["tx3-bindgen", "-i", str(project / "protocol" / "transfer.tx3")]
    assert "-o" in argv


def test_generate_with_no_inputs_fails(tmp_path):
    with patch("tx3_build.generators.bindgen.invoker.subprocess.run") as run:
        code = main(["generate", "--root", str(tmp_path), "-i", "nothing/*.tx3"])
    assert code == 1
    run.assert_not_called()


def test_generate_reports_bindgen_failure(project):
    error = subprocess.CalledProcessError(2, ["tx3-bindgen"])
    with patch("tx3_build.generators.bindgen.invoker.subprocess.run", side_effect=error):
        code = main(["generate", "--root", str(project), "-i", "protocol/*.tx3"])
    assert code == 1


def test_check_skips_when_bindings_exist(project):
    out = project / "node_modules" / ".tx3"
    out.mkdir(parents=True)
    (out / "protocol.ts").write_text("", encoding="utf-8")
    with patch("tx3_build.generators.bindgen.invoker.subprocess.run") as run:
        code = main(["check", "--root", str(project), "-i", "protocol/*.tx3"])
    assert code == 0
    run.assert_not_called()


def test_resolve_prints_envelope(capsys):
    seen = []

    def handler(request):
        seen.append(json.loads(request.content))
        return httpx.Response(200, json={"result": {"tx": "deadbeef", "bytes": "deadbeef", "encoding": "hex"}})

    real_init = TRPClient.__init__

    def init_with_transport(self, options, transport=None):
        real_init(self, options, transport=httpx.MockTransport(handler))

    with patch.object(cli.TRPClient, "__init__", init_with_transport):
        code = main([
            "resolve", "--endpoint", "http://resolver.test",
            "--tir", str(FIXTURES_DIR / "tir.json"),
            "--arg", "quantity=10", "--arg", "sender=addr_test1qz",
        ])

    assert code == 0
    assert json.loads(capsys.readouterr().out)["tx"] == "deadbeef"
    assert seen[0]["params"]["args"] == {"quantity": 10, "sender": "addr_test1qz"}
    assert seen[0]["params"]["tir"]["bytecode"] == "deadbeef"


def test_bad_key_value_is_usage_error():
    with pytest.raises(SystemExit) as exc_info:
        main(["generate", "-i", "x.tx3", "--env-arg", "novalue"])
    assert exc_info.value.code == 2
