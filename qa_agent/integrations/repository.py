"""Structural metadata of the local test repository."""

from pathlib import Path
from typing import Optional

import structlog

from ..config import Settings, get_settings
from ..errors import DataSourceError
from ..models import RepositoryStructure
from .playwright import CONFIG_FILES

logger = structlog.get_logger()


def _has_python_files(directory: Path) -> bool:
    return directory.is_dir() and any(
        p.is_file() and p.name != "__init__.py" for p in directory.rglob("*.py")
    )


class RepositoryAnalyzer:
    """Scans the working tree for tests, page objects, helpers and config."""

    def __init__(self, settings: Optional[Settings] = None, root: Optional[Path] = None):
        self.settings = settings or get_settings()
        self.root = Path(root) if root is not None else Path(".")

    async def analyze_repository_structure(self) -> RepositoryStructure:
        """Raises DataSourceError if ``root`` is not a directory."""
        if not self.root.is_dir():
            raise DataSourceError(
                "Repository root not found",
                details={"path": str(self.root)},
            )

        test_dir = self.root / self.settings.test_directory
        has_tests = test_dir.is_dir() and any(
            p.is_file()
            for pattern in self.settings.test_file_patterns
            for p in test_dir.glob(pattern)
        )

        structure = RepositoryStructure(
            has_tests=has_tests,
            has_page_objects=_has_python_files(self.root / self.settings.page_objects_dir),
            has_helpers=_has_python_files(self.root / self.settings.helpers_dir),
            has_config=any((self.root / name).is_file() for name in CONFIG_FILES),
        )
        logger.info("Analyzed repository structure", **structure.to_dict())
        return structure
