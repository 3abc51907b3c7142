"""Application configuration loaded from config.yaml."""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path

import yaml

from resume_delivery.models.page import PageSize

ENGINES = ("chromium", "weasyprint")


@dataclass(frozen=True)
class RendererConfig:
    engine: str = "chromium"
    max_sessions: int = 2
    quiescence_timeout_ms: int = 30000
    acquire_timeout_seconds: float | None = None
    page_size: str = "A4"
    print_background: bool = True
    margin: str = "20px"
    theme: str = "professional"
    headless: bool = True
    chromium_args: tuple[str, ...] = ("--no-sandbox", "--disable-setuid-sandbox")

    def __post_init__(self) -> None:
        if self.engine not in ENGINES:
            raise ValueError(f"engine must be one of {ENGINES}, got {self.engine!r}")
        if not 1 <= self.max_sessions <= 64:
            raise ValueError(f"max_sessions must be between 1 and 64, got {self.max_sessions}")
        if not 1000 <= self.quiescence_timeout_ms <= 300000:
            raise ValueError(
                f"quiescence_timeout_ms must be between 1000 and 300000, "
                f"got {self.quiescence_timeout_ms}"
            )
        if self.acquire_timeout_seconds is not None and self.acquire_timeout_seconds <= 0:
            raise ValueError("acquire_timeout_seconds must be positive when set")
        sizes = [s.value for s in PageSize]
        if self.page_size not in sizes:
            raise ValueError(f"page_size must be one of {sizes}, got {self.page_size!r}")
        # YAML gives lists
        object.__setattr__(self, "chromium_args", tuple(self.chromium_args))


@dataclass(frozen=True)
class StoreConfig:
    ttl_seconds: int = 60
    id_bytes: int = 24
    base_dir: str | None = "~/.resume-delivery/artifacts"

    def __post_init__(self) -> None:
        if not 1 <= self.ttl_seconds <= 86400:
            raise ValueError(f"ttl_seconds must be between 1 and 86400, got {self.ttl_seconds}")
        if not 16 <= self.id_bytes <= 64:
            raise ValueError(f"id_bytes must be between 16 and 64, got {self.id_bytes}")

    @property
    def resolved_base_dir(self) -> Path | None:
        if self.base_dir is None:
            return None
        return Path(self.base_dir).expanduser()


@dataclass(frozen=True)
class ServerConfig:
    host: str = "127.0.0.1"
    port: int = 3001
    cors_origins: tuple[str, ...] = ("*",)
    download_prefix: str = "/api/resume/download"

    def __post_init__(self) -> None:
        if not 1 <= self.port <= 65535:
            raise ValueError(f"port must be between 1 and 65535, got {self.port}")
        object.__setattr__(self, "cors_origins", tuple(self.cors_origins))
        object.__setattr__(self, "download_prefix", self.download_prefix.rstrip("/"))


@dataclass(frozen=True)
class AppConfig:
    renderer: RendererConfig = field(default_factory=RendererConfig)
    store: StoreConfig = field(default_factory=StoreConfig)
    server: ServerConfig = field(default_factory=ServerConfig)


def load_config(path: str | Path | None = None) -> AppConfig:
    """Load config from YAML file, falling back to defaults."""
    if path is None:
        # Look for config.yaml relative to the project root
        candidates = [
            Path.cwd() / "config.yaml",
            Path(__file__).resolve().parent.parent.parent / "config.yaml",
        ]
        for c in candidates:
            if c.exists():
                path = c
                break

    raw: dict = {}
    if path is not None:
        p = Path(path)
        if p.exists():
            raw = yaml.safe_load(p.read_text()) or {}

    return AppConfig(
        renderer=RendererConfig(**raw.get("renderer", {})),
        store=StoreConfig(**raw.get("store", {})),
        server=ServerConfig(**raw.get("server", {})),
    )
