"""sbt detector scanning for build definitions."""

import logging
import os
from pathlib import Path
from typing import List, Optional

from sbtanalyzer.config.schema import DetectorConfig
from sbtanalyzer.parsers.base import BaseDetector, DetectionError

logger = logging.getLogger("sbtanalyzer.parsers.sbt.detector")


class SbtDetector(BaseDetector):
    """Detector for ``*.sbt``, ``project/*.scala`` and ``build.properties``."""

    NAME = "sbt"
    ECOSYSTEM = "sbt"

    def __init__(self, workspace_root: Path, config: Optional[DetectorConfig] = None) -> None:
        super().__init__(workspace_root, config=config or DetectorConfig())

    def detect(self) -> List[str]:
        """Detect sbt build files under the workspace.

        Returns:
            POSIX paths relative to the workspace root, in scan order.

        Raises:
            DetectionError: If the workspace root is not a directory.
        """
        if not self.workspace_root.is_dir():
            raise DetectionError(f"Not a directory: {self.workspace_root}")

        root = self.workspace_root.resolve()
        detected = self.scan_workspace(
            patterns=list(self.config.include_patterns),
            ignore_patterns=list(self.config.ignore_patterns),
            recursive=True,
        )

        package_files = [
            str(path.relative_to(root)).replace(os.sep, "/") for path in detected
        ]
        for package_file in package_files:
            logger.debug("Detected sbt file: %s", package_file)

        logger.info("SbtDetector found %d build file(s)", len(package_files))
        return package_files


__all__ = ["SbtDetector"]
