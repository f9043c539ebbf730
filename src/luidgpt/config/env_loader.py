"""
.env file discovery for LuidGPT.

Searches for a .env file from the working directory upward and loads the
first one found without overriding variables already in the environment.
"""

from pathlib import Path
from typing import Optional, Dict, List
import logging

from dotenv import dotenv_values, load_dotenv

logger = logging.getLogger(__name__)


class EnvFileLoader:
    """
    .env loader with upward search.

    Search order (stops at first file found):
    1. Working directory: .luidgpt/.env → .env
    2. Parent directories (up to git root or home): .luidgpt/.env → .env
    3. Home directory: ~/.luidgpt/.env → ~/.env
    """

    CONFIG_DIR_NAME = ".luidgpt"
    ENV_FILE_NAME = ".env"

    EXAMPLE_CONTENT = """# LuidGPT configuration
# Lines starting with # are comments and will be ignored.

# Backend endpoints
LUIDGPT_API_BASE_URL=http://localhost:3001/api
LUIDGPT_LUIDHUB_BASE_URL=http://localhost:4000

# Timeouts (seconds)
LUIDGPT_REQUEST_TIMEOUT=30
LUIDGPT_RESOURCE_TIMEOUT=60

# Set to false to keep credentials in ~/.config/luidgpt/credentials.json
LUIDGPT_USE_KEYRING=true

LUIDGPT_LOG_LEVEL=INFO
"""

    def __init__(self, working_directory: Optional[Path] = None, home_directory: Optional[Path] = None):
        """Initialize env file loader.

        Args:
            working_directory: Starting directory for search
            home_directory: Directory treated as home (defaults to Path.home())
        """
        self.working_directory = Path(working_directory or Path.cwd()).resolve()
        self.home_directory = Path(home_directory or Path.home()).resolve()
        self._loaded_file: Optional[Path] = None
        self._loaded_vars: Dict[str, str] = {}

    def load_env_file(self) -> Optional[Path]:
        """Load environment variables from the first .env file found.

        Returns:
            Path to loaded .env file or None if none found
        """
        env_file_path = self.find_env_file()
        if env_file_path is None:
            logger.debug("No .env file found in search path")
            return None

        load_dotenv(env_file_path, override=False)
        self._loaded_file = env_file_path
        self._loaded_vars = {
            key: value
            for key, value in dotenv_values(env_file_path).items()
            if value is not None
        }
        logger.info(f"Loaded environment variables from: {env_file_path}")
        return env_file_path

    def get_loaded_file(self) -> Optional[Path]:
        """Get path to the loaded .env file."""
        return self._loaded_file

    def get_loaded_vars(self) -> Dict[str, str]:
        """Get variables read from the loaded .env file."""
        return self._loaded_vars.copy()

    def find_env_file(self) -> Optional[Path]:
        """Find the first existing .env file in the search hierarchy."""
        for candidate in self.get_search_paths():
            if candidate.is_file():
                return candidate
        return None

    def get_search_paths(self) -> List[Path]:
        """Get all paths that would be searched for .env files, in order."""
        search_paths = []
        current_dir = self.working_directory

        while current_dir != current_dir.parent:
            search_paths.append(current_dir / self.CONFIG_DIR_NAME / self.ENV_FILE_NAME)
            search_paths.append(current_dir / self.ENV_FILE_NAME)

            if self._should_stop_search(current_dir):
                break
            current_dir = current_dir.parent

        search_paths.append(self.home_directory / self.CONFIG_DIR_NAME / self.ENV_FILE_NAME)
        search_paths.append(self.home_directory / self.ENV_FILE_NAME)
        return search_paths

    def _should_stop_search(self, directory: Path) -> bool:
        """Stop at a git repository root or at the home directory."""
        return (directory / ".git").exists() or directory == self.home_directory

    def create_example_env_file(self, target_dir: Optional[Path] = None, overwrite: bool = False) -> Path:
        """
        Write an example .env file and return its path.

        Raises:
            FileExistsError: If the file exists and `overwrite` is False
        """
        if target_dir is None:
            target_dir = self.working_directory / self.CONFIG_DIR_NAME

        env_file_path = target_dir / self.ENV_FILE_NAME
        if env_file_path.exists() and not overwrite:
            raise FileExistsError(f"Example .env file already exists: {env_file_path}")

        target_dir.mkdir(parents=True, exist_ok=True)
        env_file_path.write_text(self.EXAMPLE_CONTENT, encoding="utf-8")
        logger.info(f"Created example .env file: {env_file_path}")
        return env_file_path


def load_env_with_hierarchy(working_directory: Optional[Path] = None) -> Optional[Path]:
    """Convenience function to load a .env file with upward search."""
    loader = EnvFileLoader(working_directory)
    return loader.load_env_file()
