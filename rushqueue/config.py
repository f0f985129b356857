"""
Core configuration management
"""
import os
from pathlib import Path
from typing import Optional
from pydantic_settings import BaseSettings


def _default_app_data_dir() -> Path:
    app_data = os.environ.get("APPDATA")
    if app_data:
        return Path(app_data)
    return Path.home() / "AppData" / "Roaming"


class Settings(BaseSettings):
    """rushqueue settings"""

    # Logging
    log_level: str = "INFO"
    log_to_file: bool = False

    # Paths
    project_root: Path = Path(__file__).parent.parent
    log_dir: Path = project_root / "logs"
    app_data_dir: Path = _default_app_data_dir()
    site_file: Optional[Path] = None  # overrides <app_data_dir>/FTPRush/RushSite.xml

    # Site directory
    site_history_group: str = "History"

    class Config:
        env_prefix = "RUSHQUEUE_"
        env_file = ".env"

    def default_site_file(self) -> Path:
        """Resolve the RushSite.xml location FTP Rush writes for the current user."""
        if self.site_file is not None:
            return self.site_file
        return self.app_data_dir / "FTPRush" / "RushSite.xml"


settings = Settings()
