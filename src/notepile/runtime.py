"""Runtime wiring helper for CLI applications."""

from dataclasses import dataclass
from pathlib import Path

from .adapters.json_store import JsonNoteStore
from .adapters.markdown_renderer import MarkdownRenderer
from .config import NotepileConfig, load_config
from .core.layout import LayoutPolicy


@dataclass
class Runtime:
    """Container for all wired, toolkit-independent components."""
    store: JsonNoteStore
    renderer: MarkdownRenderer
    policy: LayoutPolicy
    config: NotepileConfig


def build_runtime(
    storage_path: Path | None = None,
    config_path: Path | None = None,
) -> Runtime:
    """Build and wire all components for a storage root."""
    config = load_config(config_path=config_path, storage_path=storage_path)

    # CLI args win over config values
    if storage_path is None:
        storage_path = config.storage.root
    config.storage.root = storage_path

    return Runtime(
        store=JsonNoteStore(storage_path),
        renderer=MarkdownRenderer(),
        policy=config.layout.to_policy(),
        config=config,
    )
