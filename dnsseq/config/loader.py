import ipaddress
import json
import tomllib
from pathlib import Path
from typing import Any, Mapping

import yaml

from .types import ConfigError, SuiteConfig, UnsupportedConfigFormatError

_KEYS = {
    "hostname",
    "reverse_address",
    "service_address",
    "service_port",
    "nameservers",
    "timeout",
    "tries",
    "checks",
}


def load_suite(path: str | Path | None = None) -> SuiteConfig:
    if path is None:
        return SuiteConfig.default()

    suite_path = Path(path).expanduser().resolve()

    if not suite_path.exists():
        raise ConfigError(f"Config file not found: {suite_path}")

    if not suite_path.is_file():
        raise ConfigError(f"Config path is not a file: {suite_path}")

    fmt = _detect_format(suite_path)
    raw = _parse_file(suite_path, fmt)
    return _build_suite_config(raw)


def _detect_format(path: Path) -> str:
    match path.suffix:
        case ".yaml" | ".yml":
            return "yaml"
        case ".toml":
            return "toml"
        case ".json":
            return "json"
        case other:
            raise UnsupportedConfigFormatError(
                f"Non supported file extension: {other}\n Expected format: .yml/.yaml, .toml, .json"
            )


def _parse_file(path: Path, fmt: str) -> Mapping[str, Any]:
    text = path.read_text(encoding="utf-8")

    match fmt:
        case "yaml":
            try:
                raw = yaml.safe_load(text)
            except yaml.YAMLError as exc:
                raise ConfigError(f"{path}: invalid YAML") from exc
        case "toml":
            try:
                raw = tomllib.loads(text)
            except tomllib.TOMLDecodeError as exc:
                raise ConfigError(f"{path}: invalid TOML") from exc
        case "json":
            try:
                raw = json.loads(text)
            except json.JSONDecodeError as exc:
                raise ConfigError(f"{path}: invalid JSON") from exc
        case _:
            raise AssertionError("Unreachable")

    # An empty YAML document is a suite with every default.
    if raw is None and fmt == "yaml":
        return {}

    if not isinstance(raw, Mapping):
        raise ConfigError(
            f"{path}: {fmt.upper()} parsed succesfully but top-level value is not an object: {type(raw)}"
        )

    return raw


def _build_suite_config(raw: Mapping[str, Any]) -> SuiteConfig:
    for key in raw.keys():
        if key not in _KEYS:
            raise ConfigError(f"Can't process: {key}")

    cfg = SuiteConfig.default()

    if "hostname" in raw:
        cfg.hostname = _non_empty_str(raw["hostname"], "hostname")

    if "reverse_address" in raw:
        cfg.reverse_address = _ip(raw["reverse_address"], "reverse_address", version=4)

    if "service_address" in raw:
        cfg.service_address = _ip(raw["service_address"], "service_address")

    if "service_port" in raw:
        port = raw["service_port"]
        if isinstance(port, bool) or not isinstance(port, int):
            raise ConfigError(f"service_port should be an integer, got {type(port)}")
        if not 0 <= port <= 65535:
            raise ConfigError(f"service_port out of range: {port}")
        cfg.service_port = port

    if "nameservers" in raw:
        if not isinstance(raw["nameservers"], list):
            raise ConfigError("nameservers should be in a list.")
        cfg.nameservers = [_ip(item, "nameservers") for item in raw["nameservers"]]

    if "timeout" in raw:
        timeout = raw["timeout"]
        if isinstance(timeout, bool) or not isinstance(timeout, (int, float)) or timeout <= 0:
            raise ConfigError(f"timeout should be a positive number, got {timeout!r}")
        cfg.timeout = float(timeout)

    if "tries" in raw:
        tries = raw["tries"]
        if isinstance(tries, bool) or not isinstance(tries, int) or tries < 1:
            raise ConfigError(f"tries should be a positive integer, got {tries!r}")
        cfg.tries = tries

    if "checks" in raw:
        cfg.checks = _check_names(raw["checks"])

    return cfg


def _non_empty_str(value: Any, key: str) -> str:
    if not isinstance(value, str):
        raise ConfigError(f"{key} should be a string")

    if len(value.strip()) < 1:
        raise ConfigError(f"{key} can't be empty")

    return value.strip()


def _ip(value: Any, key: str, *, version: int | None = None) -> str:
    text = _non_empty_str(value, key)
    try:
        parsed = ipaddress.ip_address(text)
    except ValueError as exc:
        raise ConfigError(f"{key}: {text} is not an IP address") from exc

    if version is not None and parsed.version != version:
        raise ConfigError(f"{key}: {text} is not an IPv{version} address")

    return text


def _check_names(value: Any) -> list[str]:
    if not isinstance(value, list):
        raise ConfigError("checks should be in a list.")

    names: list[str] = []
    seen: set[str] = set()
    for item in value:
        name = _non_empty_str(item, "checks")

        # Allows to ignore duplicate check names
        if name in seen:
            continue

        names.append(name)
        seen.add(name)

    if len(names) < 1:
        raise ConfigError("There must be at least one check in the config file")

    return names
