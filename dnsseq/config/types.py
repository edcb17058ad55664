from dataclasses import dataclass, field


@dataclass
class SuiteConfig:
    hostname: str = "www.google.com"
    reverse_address: str = "8.8.8.8"
    service_address: str = "127.0.0.1"
    service_port: int = 80
    nameservers: list[str] = field(default_factory=list)
    timeout: float | None = None
    tries: int | None = None
    checks: list[str] | None = None

    @classmethod
    def default(cls) -> "SuiteConfig":
        return cls()


class ConfigError(Exception):
    def __init__(self, *args: object) -> None:
        super().__init__(*args)


class UnsupportedConfigFormatError(ConfigError):
    def __init__(self, *args: object) -> None:
        super().__init__(*args)
