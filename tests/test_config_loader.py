# tests/test_config_loader.py

from __future__ import annotations

import json
from pathlib import Path

import pytest

from dnsseq.config.loader import load_suite
from dnsseq.config.types import ConfigError, SuiteConfig, UnsupportedConfigFormatError


# -------------------------
# Helpers
# -------------------------


def write_text(path: Path, text: str) -> Path:
    path.write_text(text, encoding="utf-8")
    return path


def write_json(path: Path, obj: object) -> Path:
    path.write_text(json.dumps(obj), encoding="utf-8")
    return path


# -------------------------
# Defaults and basic file/path errors
# -------------------------


def test_no_path_returns_defaults() -> None:
    cfg = load_suite(None)

    assert cfg == SuiteConfig.default()
    assert cfg.hostname == "www.google.com"
    assert cfg.reverse_address == "8.8.8.8"
    assert cfg.service_port == 80
    assert cfg.checks is None


def test_missing_file_raises_config_error(tmp_path: Path) -> None:
    with pytest.raises(ConfigError):
        load_suite(tmp_path / "missing.yaml")


def test_path_is_dir_raises_config_error(tmp_path: Path) -> None:
    d = tmp_path / "dir"
    d.mkdir()
    with pytest.raises(ConfigError):
        load_suite(d)


def test_unsupported_extension_raises_unsupported_format(tmp_path: Path) -> None:
    p = write_text(tmp_path / "suite.txt", "hostname: example.org")
    with pytest.raises(UnsupportedConfigFormatError):
        load_suite(p)


# -------------------------
# Parse errors are wrapped
# -------------------------


@pytest.mark.parametrize(
    "name, content",
    [
        ("suite.yaml", "checks: [\n"),
        ("suite.toml", "hostname = {"),
        ("suite.json", '{"hostname": '),
    ],
)
def test_invalid_syntax_is_wrapped_as_config_error(tmp_path: Path, name: str, content: str) -> None:
    p = write_text(tmp_path / name, content)
    with pytest.raises(ConfigError):
        load_suite(p)


@pytest.mark.parametrize(
    "ext, content",
    [
        (".yaml", "[]\n"),
        (".yaml", "just a string\n"),
        (".json", "[]"),
        (".json", "null"),
    ],
)
def test_top_level_not_mapping_raises(tmp_path: Path, ext: str, content: str) -> None:
    p = write_text(tmp_path / f"suite{ext}", content)
    with pytest.raises(ConfigError):
        load_suite(p)


def test_empty_yaml_uses_defaults(tmp_path: Path) -> None:
    p = write_text(tmp_path / "suite.yaml", "")
    assert load_suite(p) == SuiteConfig.default()


# -------------------------
# Valid files in every format
# -------------------------


def test_yaml_suite_is_loaded(tmp_path: Path) -> None:
    p = write_text(
        tmp_path / "suite.yml",
        "\n".join(
            [
                "hostname: '  example.org  '",
                "reverse_address: 1.1.1.1",
                "service_address: '::1'",
                "service_port: 443",
                "nameservers: [9.9.9.9, '2620:fe::fe']",
                "timeout: 2",
                "tries: 3",
                "checks: [resolve4, reverse_ipv4, resolve4]",
                "",
            ]
        ),
    )

    cfg = load_suite(p)

    assert cfg.hostname == "example.org"
    assert cfg.reverse_address == "1.1.1.1"
    assert cfg.service_address == "::1"
    assert cfg.service_port == 443
    assert cfg.nameservers == ["9.9.9.9", "2620:fe::fe"]
    assert cfg.timeout == 2.0
    assert cfg.tries == 3
    assert cfg.checks == ["resolve4", "reverse_ipv4"]


def test_toml_suite_is_loaded(tmp_path: Path) -> None:
    p = write_text(
        tmp_path / "suite.toml",
        'hostname = "example.org"\nnameservers = ["8.8.4.4"]\ntimeout = 0.5\n',
    )

    cfg = load_suite(p)

    assert cfg.hostname == "example.org"
    assert cfg.nameservers == ["8.8.4.4"]
    assert cfg.timeout == 0.5


def test_json_suite_is_loaded(tmp_path: Path) -> None:
    p = write_json(tmp_path / "suite.json", {"checks": ["lookup_ip_ipv4"], "service_port": 22})

    cfg = load_suite(p)

    assert cfg.checks == ["lookup_ip_ipv4"]
    assert cfg.service_port == 22
    assert cfg.hostname == "www.google.com"


# -------------------------
# Field validation
# -------------------------


@pytest.mark.parametrize(
    "raw",
    [
        {"unknown": 1},
        {"hostname": 42},
        {"hostname": "   "},
        {"reverse_address": "dns.google"},
        {"reverse_address": "2001:4860:4860::8888"},
        {"service_address": "localhost"},
        {"service_port": "80"},
        {"service_port": True},
        {"service_port": 70000},
        {"nameservers": "8.8.8.8"},
        {"nameservers": ["8.8.8.8", "resolver.local"]},
        {"timeout": 0},
        {"timeout": "5"},
        {"tries": 0},
        {"tries": 1.5},
        {"checks": "resolve4"},
        {"checks": []},
        {"checks": ["resolve4", ""]},
        {"checks": [1]},
    ],
)
def test_invalid_fields_raise(tmp_path: Path, raw: dict) -> None:
    p = write_json(tmp_path / "suite.json", raw)
    with pytest.raises(ConfigError):
        load_suite(p)
