"""Configuration loader for notepile.toml."""

from dataclasses import dataclass, field, fields
from pathlib import Path
from typing import Any

try:
    import tomllib
except ImportError:
    import tomli as tomllib  # type: ignore

from .core.errors import ConfigError
from .core.layout import LayoutPolicy

CONFIG_FILENAME = "notepile.toml"
SORT_ORDERS = ("ascending", "descending")


@dataclass
class StorageConfig:
    """Where notebooks live."""
    root: Path = Path("./notes")


@dataclass
class ViewerConfig:
    """List presentation."""
    sort_order: str = "descending"
    date_format: str = "%Y-%m-%d"

    @property
    def descending(self) -> bool:
        return self.sort_order == "descending"


@dataclass
class LayoutConfig:
    """Measurement timing and size clamps, in milliseconds and pixels."""
    debounce_ms: int = LayoutPolicy.debounce_ms
    resize_debounce_ms: int = LayoutPolicy.resize_debounce_ms
    fallback_delay_ms: int = LayoutPolicy.fallback_delay_ms
    min_height: int = LayoutPolicy.min_height
    max_height: int = LayoutPolicy.max_height
    content_padding: int = LayoutPolicy.content_padding
    chrome_padding: int = LayoutPolicy.chrome_padding
    min_width: int = LayoutPolicy.min_width
    width_margin: int = LayoutPolicy.width_margin

    def to_policy(self) -> LayoutPolicy:
        return LayoutPolicy(**{f.name: getattr(self, f.name) for f in fields(self)})


@dataclass
class WatchConfig:
    """Chapter directory watching."""
    enabled: bool = True
    debounce_ms: int = 150
    poll_ms: int = 100


@dataclass
class NotepileConfig:
    """Complete notepile configuration."""
    storage: StorageConfig = field(default_factory=StorageConfig)
    viewer: ViewerConfig = field(default_factory=ViewerConfig)
    layout: LayoutConfig = field(default_factory=LayoutConfig)
    watch: WatchConfig = field(default_factory=WatchConfig)


def _int(section: str, data: dict[str, Any], key: str, default: int) -> int:
    value = data.get(key, default)
    if isinstance(value, bool) or not isinstance(value, int):
        raise ConfigError(f"[{section}] {key} must be an integer, got {value!r}")
    if value < 0:
        raise ConfigError(f"[{section}] {key} must not be negative")
    return value


def _parse_layout(data: dict[str, Any]) -> LayoutConfig:
    defaults = LayoutConfig()
    layout = LayoutConfig(
        **{f.name: _int("layout", data, f.name, getattr(defaults, f.name)) for f in fields(LayoutConfig)}
    )
    if layout.min_height > layout.max_height:
        raise ConfigError("[layout] min_height must not exceed max_height")
    return layout


def load_config(config_path: Path | None = None, storage_path: Path | None = None) -> NotepileConfig:
    """
    Load configuration from notepile.toml.

    Search order:
    1. config_path (if provided)
    2. cwd/notepile.toml
    3. storage_path/notepile.toml

    Args:
        config_path: Explicit path to config file
        storage_path: Storage root for fallback search

    Returns:
        NotepileConfig with resolved settings
    """
    toml_data: dict[str, Any] = {}

    search_paths = []
    if config_path:
        search_paths.append(config_path)
    search_paths.append(Path.cwd() / CONFIG_FILENAME)
    if storage_path:
        search_paths.append(storage_path / CONFIG_FILENAME)

    for path in search_paths:
        if path.exists():
            with open(path, "rb") as f:
                try:
                    toml_data = tomllib.load(f)
                except tomllib.TOMLDecodeError as e:
                    raise ConfigError(f"{path}: {e}") from e
            break

    # Storage
    storage_data = toml_data.get("storage", {})
    storage_config = StorageConfig(
        root=Path(storage_data.get("root", storage_path or StorageConfig.root)),
    )

    # Viewer
    viewer_data = toml_data.get("viewer", {})
    sort_order = str(viewer_data.get("sort_order", "descending")).lower()
    if sort_order not in SORT_ORDERS:
        raise ConfigError(f"[viewer] sort_order must be one of {', '.join(SORT_ORDERS)}")
    viewer_config = ViewerConfig(
        sort_order=sort_order,
        date_format=viewer_data.get("date_format", "%Y-%m-%d"),
    )

    # Layout
    layout_config = _parse_layout(toml_data.get("layout", {}))

    # Watch
    watch_data = toml_data.get("watch", {})
    watch_config = WatchConfig(
        enabled=bool(watch_data.get("enabled", True)),
        debounce_ms=_int("watch", watch_data, "debounce_ms", 150),
        poll_ms=_int("watch", watch_data, "poll_ms", 100),
    )

    return NotepileConfig(
        storage=storage_config,
        viewer=viewer_config,
        layout=layout_config,
        watch=watch_config,
    )
