"""Workspace discovery and configuration.

A workspace is a directory containing ``finboard.json``. Records live in
the SQLite database configured by ``storage_path`` (relative to the
workspace root).
"""

import logging
from functools import cached_property
from pathlib import Path

from pydantic import ValidationError as PydanticValidationError

from finboard.core.exceptions import FinboardError, WorkspaceExistsError, WorkspaceNotFoundError
from finboard.core.models import Theme, WorkspaceConfig
from finboard.db.storage import Storage

logger = logging.getLogger(__name__)

CONFIG_FILE = "finboard.json"


class Workspace:
    """An opened workspace: its root, configuration and storage."""

    def __init__(self, root: Path, config: WorkspaceConfig):
        self.root = root
        self.config = config

    @property
    def name(self) -> str:
        return self.config.name

    @property
    def config_path(self) -> Path:
        return self.root / CONFIG_FILE

    @property
    def reports_dir(self) -> Path:
        return self.root / self.config.reports_dir

    @cached_property
    def storage(self) -> Storage:
        return Storage(self.root / self.config.storage_path)

    def save_config(self) -> None:
        self.config_path.write_text(self.config.model_dump_json(indent=2) + "\n", encoding="utf-8")


def find_workspace_root(path: Path | None = None) -> Path:
    """Resolve the workspace directory.

    Args:
        path: Explicit workspace directory. Defaults to the current directory.

    Raises:
        WorkspaceNotFoundError: No finboard.json at the location.
    """
    root = Path(path) if path is not None else Path.cwd()
    if not (root / CONFIG_FILE).is_file():
        raise WorkspaceNotFoundError(f"No {CONFIG_FILE} found in {root}")
    return root


def load_workspace(path: Path | None = None) -> Workspace:
    """Open the workspace at ``path`` (or the current directory)."""
    root = find_workspace_root(path)
    raw = (root / CONFIG_FILE).read_text(encoding="utf-8")
    try:
        config = WorkspaceConfig.model_validate_json(raw)
    except PydanticValidationError as e:
        raise FinboardError(f"Invalid {CONFIG_FILE}: {e}") from e

    logger.debug("Loaded workspace %r from %s", config.name, root)
    return Workspace(root, config)


def create_workspace(
    root: Path,
    name: str,
    currency: str = "USD",
    theme: Theme = Theme.LIGHT,
) -> Workspace:
    """Create a new workspace directory with a default configuration.

    Raises:
        WorkspaceExistsError: The directory already holds a workspace.
        FinboardError: The configuration values are invalid.
    """
    root = Path(root)
    if (root / CONFIG_FILE).exists():
        raise WorkspaceExistsError(f"Workspace already exists at {root}")

    try:
        config = WorkspaceConfig(name=name, currency=currency.upper(), theme=theme)
    except PydanticValidationError as e:
        raise FinboardError(f"Invalid workspace settings: {e.errors()[0]['msg']}") from e

    root.mkdir(parents=True, exist_ok=True)
    workspace = Workspace(root, config)
    workspace.save_config()
    workspace.reports_dir.mkdir(parents=True, exist_ok=True)
    # Touch storage so the database file exists from the start
    _ = workspace.storage

    logger.info("Created workspace %r at %s", name, root)
    return workspace
