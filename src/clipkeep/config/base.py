# region Docstring
"""
clipkeep.config.base

Environment detection and path resolution for clipkeep.

Overview:
- AppEnv reads CLIPKEEP_ENV, CLIPKEEP_ROOT and CLIPKEEP_DATA_DIR to decide the
    environment name, the directory holding .env and config.yaml, and the
    directory holding the history database and logs.
- Exposes module-level constants for the application root and the per-user
    data directory where the history log and log files are stored.

Contents:
- Classes:
    - AppEnv:
        Class methods to determine the current environment, the application root
        directory (where config.yaml and .env are looked up) and the data directory.

- Module-level Constants:
    - APP_ROOT (Path): Directory searched for .env and config.yaml.
    - APP_ENV (Literal["prod", "dev", "test"]): The detected application environment.
    - DATA_DIR (Path): Per-user storage directory for the history database and logs.

Environment Detection Logic:
- Priority 1: CLIPKEEP_ENV if it names a known environment.
- Priority 2: "prod" when running from an installed location, otherwise "dev".

Data Directory Logic:
- Priority 1: CLIPKEEP_DATA_DIR.
- Priority 2: $XDG_DATA_HOME/clipkeep.
- Priority 3: ~/.local/share/clipkeep.
"""
# endregion
# region Imports
import os
from pathlib import Path
from typing import Literal

# endregion
# region AppEnv Class


class AppEnv:
    """
    Where clipkeep runs and where it keeps its files.

    Attributes:
        ROOT (Path): Working directory at import time; fallback application root.
        PROD, DEV, TEST: Names accepted in CLIPKEEP_ENV.
    """

    ROOT: Path = Path().cwd().resolve()
    PROD: Literal["prod"] = "prod"
    DEV: Literal["dev"] = "dev"
    TEST: Literal["test"] = "test"

    @classmethod
    def environment(cls) -> Literal["prod", "dev", "test"]:
        """CLIPKEEP_ENV if valid, else prod for installed copies and dev for checkouts."""
        if os.getenv("CLIPKEEP_ENV") in {cls.PROD, cls.DEV, cls.TEST}:
            return os.getenv("CLIPKEEP_ENV")

        # Installed copies live under site-packages
        if "site-packages" in Path(__file__).resolve().as_posix():
            return cls.PROD
        return cls.DEV

    @classmethod
    def app_root(cls) -> Path:
        """Directory searched for .env and config.yaml."""
        if os.getenv("CLIPKEEP_ROOT"):
            return Path(os.environ["CLIPKEEP_ROOT"]).resolve()
        return cls.ROOT

    @classmethod
    def data_dir(cls) -> Path:
        """Get the directory holding the history database and log files."""
        if os.getenv("CLIPKEEP_DATA_DIR"):
            return Path(os.environ["CLIPKEEP_DATA_DIR"]).expanduser().resolve()
        xdg = os.getenv("XDG_DATA_HOME")
        if xdg:
            return (Path(xdg) / "clipkeep").resolve()
        return (Path.home() / ".local" / "share" / "clipkeep").resolve()


# endregion
# region Module-level Constants

APP_ROOT: Path = AppEnv.app_root()
"""[Path] Directory searched for .env and config.yaml."""
APP_ENV: Literal["prod", "dev", "test"] = AppEnv.environment()
"""[Literal] Environment type."""
DATA_DIR: Path = AppEnv.data_dir()
"""[Path] Directory where the history database and logs are stored."""
# endregion


__all__ = [
    "APP_ENV",
    "APP_ROOT",
    "DATA_DIR",
    "AppEnv",
]
