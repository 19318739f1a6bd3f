"""Configuration schema definitions using Pydantic for validation.

Registry URLs, directory conventions and matcher limits used by the sbt
extractor are configuration values rather than constants, so a scan of a
mirrored or air-gapped project can point them elsewhere.
"""

from typing import Any, Dict, List
from urllib.parse import urlparse

from pydantic import BaseModel, Field, field_validator

MAVEN_CENTRAL_URL = "https://repo.maven.apache.org/maven2"
SBT_PLUGINS_REPO = "https://repo.scala-sbt.org/scalasbt/sbt-plugin-releases"


class DetectorConfig(BaseModel):
    """Configuration for target detectors.

    Attributes:
        include_patterns: Glob patterns (relative to the scan root) selecting
            sbt build files.
        ignore_patterns: Extra glob patterns to ignore during detection.
    """

    include_patterns: List[str] = Field(
        default_factory=lambda: [
            "*.sbt",
            "project/*.scala",
            "project/build.properties",
        ]
    )
    ignore_patterns: List[str] = Field(
        default_factory=lambda: ["target/", "**/target/**", "project/target/**"]
    )

    model_config = {"extra": "allow"}


class SbtExtractConfig(BaseModel):
    """Configuration for the sbt extractor and project driver.

    Attributes:
        default_registry_url: Registry every dependency is looked up in.
        plugin_registry_url: Extra registry attached to sbt plugins.
        project_dir: Name of the sbt meta-build directory.
        build_properties_name: File name carrying ``sbt.version``.
        max_tree_depth: Bracket nesting searched for declarations.
    """

    default_registry_url: str = MAVEN_CENTRAL_URL
    plugin_registry_url: str = SBT_PLUGINS_REPO
    project_dir: str = "project"
    build_properties_name: str = "build.properties"
    max_tree_depth: int = Field(default=32, ge=1, le=64)

    model_config = {"extra": "allow"}

    @field_validator("default_registry_url", "plugin_registry_url")
    @classmethod
    def validate_registry_url(cls, v: str) -> str:
        """Registry URLs must be absolute http(s) URLs."""
        parsed = urlparse(v)
        if parsed.scheme not in {"http", "https"} or not parsed.netloc:
            raise ValueError(f"Invalid registry URL '{v}'")
        return v.rstrip("/")

    @field_validator("project_dir", "build_properties_name")
    @classmethod
    def validate_name(cls, v: str) -> str:
        """Directory and file names must be single non-empty path segments."""
        if not v or "/" in v or "\\" in v:
            raise ValueError(f"Invalid path segment '{v}'")
        return v


class AnalyzerConfig(BaseModel):
    """Top-level configuration for a scan.

    Attributes:
        sbt: Extractor and driver settings.
        detector: File detection settings.
    """

    sbt: SbtExtractConfig = Field(default_factory=SbtExtractConfig)
    detector: DetectorConfig = Field(default_factory=DetectorConfig)

    @classmethod
    def default(cls) -> "AnalyzerConfig":
        return cls()

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "AnalyzerConfig":
        """Create configuration from dictionary.

        Raises:
            ValidationError: If configuration is invalid.
        """
        return cls.model_validate(data)

    def to_dict(self) -> Dict[str, Any]:
        return self.model_dump()


__all__ = [
    "MAVEN_CENTRAL_URL",
    "SBT_PLUGINS_REPO",
    "DetectorConfig",
    "SbtExtractConfig",
    "AnalyzerConfig",
]
