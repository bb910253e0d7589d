# tspw/config.py
import os
import platform
from pathlib import Path
from typing import Optional

from pydantic import AliasChoices, Field
from pydantic_settings import BaseSettings, SettingsConfigDict

# -----------------------------------------------------------------------------
# Fixed names
# -----------------------------------------------------------------------------
CONFIG_FILENAME = "tsconfig.json"
COMPILER_NAME = "tsc"
DEPENDENCY_DIRNAME = "node_modules"

# tspw/config.py -> tspw/
INSTALL_DIR = Path(__file__).resolve().parent

IS_WINDOWS = platform.system() == "Windows"


class Settings(BaseSettings):
    """
    Runtime configuration, read from TSPW_* environment variables
    (and an optional .env file in the working directory).
    """

    # --- Logging ---
    LOG_LEVEL: str = "INFO"
    LOG_FORMAT: str = "console"  # console | json

    # --- Compiler launch ---
    # tsc is a node script; an empty value runs it directly (shebang).
    NODE_BIN: str = "node"
    TSC: Optional[str] = None

    # --- Per-user data root (unprefixed, platform variables) ---
    APPDATA: Optional[str] = Field(default=None, validation_alias=AliasChoices("APPDATA"))
    XDG_CONFIG_HOME: Optional[str] = Field(
        default=None, validation_alias=AliasChoices("XDG_CONFIG_HOME")
    )

    @property
    def user_data_dir(self) -> Path:
        """
        Platform application-data root used for the global npm install.
        APPDATA wins (Windows), then XDG_CONFIG_HOME, then the home default.
        """
        if self.APPDATA:
            return Path(self.APPDATA)
        if self.XDG_CONFIG_HOME:
            return Path(self.XDG_CONFIG_HOME)
        if IS_WINDOWS:
            return Path(os.path.expanduser("~")) / "AppData" / "Roaming"
        return Path(os.path.expanduser("~")) / ".config"

    model_config = SettingsConfigDict(env_prefix="TSPW_", env_file=".env", extra="ignore")


settings = Settings()
