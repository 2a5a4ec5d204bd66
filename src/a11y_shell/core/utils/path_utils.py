# src/a11y_shell/core/utils/path_utils.py
import logging
from pathlib import Path

logger = logging.getLogger(__name__)


class PathUtils:
    """
    A central utility for reliably retrieving important package and user paths.
    """

    @staticmethod
    def get_shell_package_root() -> Path:
        """Directory of the installed a11y_shell package (holds settings.json)."""
        return Path(__file__).resolve().parents[2]

    @staticmethod
    def get_settings_file() -> Path:
        return PathUtils.get_shell_package_root() / "settings.json"

    @staticmethod
    def get_user_documents_dir() -> Path:
        """
        Returns the absolute path to the current user's Documents directory.
        """
        return Path.home() / "Documents"

    @staticmethod
    def resolve_output_path(path: str) -> Path:
        """
        Relative export paths land in the user's Documents folder;
        absolute paths are used as given.
        """
        candidate = Path(path).expanduser()
        if candidate.is_absolute():
            return candidate
        return PathUtils.get_user_documents_dir() / candidate
