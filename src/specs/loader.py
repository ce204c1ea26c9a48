"""Loader of API description files.

The loader only decodes files and picks their `paths` object; it never
validates the schema formats themselves. Layout of the specs directory:

    <directory>/arm/*.json            resource-management (Swagger 2)
    <directory>/graph/*.yaml|*.yml    directory (OpenAPI 3)
    <directory>/identity/*.yaml|*.yml|*.json
"""

import json
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Optional

import yaml

from log import get_logger
from specs.models import ApiFamily, SpecDocument

logger = get_logger(__name__)

FAMILY_SUFFIXES: dict[ApiFamily, tuple[str, ...]] = {
    ApiFamily.RESOURCE_MANAGEMENT: (".json",),
    ApiFamily.DIRECTORY: (".yaml", ".yml"),
    ApiFamily.IDENTITY: (".yaml", ".yml", ".json"),
}

# identity documents that are served by dedicated endpoints
IGNORED_IDENTITY_FILES = frozenset({"oidc-configuration.json", "oidc-jwks.json"})


class PlaceholderError(Exception):
    """File does not hold an API description (e.g. a failed download)."""


@dataclass
class LoadSummary:
    """Number of loaded and skipped documents for one family."""

    loaded: int = 0
    skipped: int = 0


def describe_format(content: dict[str, Any]) -> str:
    """Return human readable format of decoded document."""
    if "openapi" in content:
        return f"OpenAPI {content['openapi']}"
    if "swagger" in content:
        return f"Swagger {content['swagger']}"
    return "unknown"


def decode_document(path: Path) -> dict[str, Any]:
    """Decode one description file.

    Parameters:
        path (Path): File to decode.

    Returns:
        dict[str, Any]: Decoded document content.

    Raises:
        PlaceholderError: If the file is empty, is a "404: Not Found"
        placeholder or does not contain a `paths` mapping.
        ValueError: If the file can not be decoded at all.
    """
    text = path.read_text(encoding="utf-8")
    stripped = text.strip()
    if not stripped or stripped.startswith("404") or "placeholder" in stripped[:200]:
        raise PlaceholderError(f"placeholder file: {path.name}")

    try:
        if path.suffix.lower() == ".json":
            content = json.loads(text)
        else:
            content = yaml.safe_load(text)
    except (json.JSONDecodeError, yaml.YAMLError) as e:
        raise ValueError(f"can not decode {path}: {e}") from e

    if not isinstance(content, dict) or not isinstance(content.get("paths"), dict):
        raise PlaceholderError(f"no paths found in {path.name}")
    return content


class SpecLoader:
    """Read all API description files from the specs directory."""

    def __init__(self, directory: str) -> None:
        """Initialize the loader.

        Parameters:
            directory (str): Root directory with one subdirectory per family.
        """
        self.directory = Path(directory)
        self.summaries: dict[ApiFamily, LoadSummary] = {}

    def load_all(self) -> list[SpecDocument]:
        """Load documents of all families.

        A missing directory (root or family) is logged and skipped. A file
        that can not be decoded is logged and skipped as well, so one broken
        download does not prevent the rest of the documents from loading.

        Returns:
            list[SpecDocument]: Documents in family order, files sorted by name.
        """
        documents: list[SpecDocument] = []
        if not self.directory.is_dir():
            logger.warning(
                "Specs directory '%s' not found, skipping spec-driven routes",
                self.directory,
            )
            return documents

        for family in ApiFamily:
            summary = LoadSummary()
            self.summaries[family] = summary
            documents.extend(self._load_family(family, summary))
            logger.info(
                "Loaded %d %s spec(s), skipped %d placeholder(s)",
                summary.loaded,
                family.value,
                summary.skipped,
            )

        logger.info(
            "Total: loaded %d spec(s), skipped %d placeholder(s)",
            sum(s.loaded for s in self.summaries.values()),
            sum(s.skipped for s in self.summaries.values()),
        )
        return documents

    def _load_family(
        self, family: ApiFamily, summary: LoadSummary
    ) -> list[SpecDocument]:
        family_dir = self.directory / family.value
        if not family_dir.is_dir():
            logger.warning("Directory %s not found, skipping", family_dir)
            return []

        documents = []
        for path in sorted(family_dir.iterdir()):
            if not path.is_file() or path.suffix.lower() not in FAMILY_SUFFIXES[family]:
                continue
            if family is ApiFamily.IDENTITY and path.name in IGNORED_IDENTITY_FILES:
                summary.skipped += 1
                continue
            document = self._load_file(family, path, summary)
            if document is not None:
                documents.append(document)
        return documents

    @staticmethod
    def _load_file(
        family: ApiFamily, path: Path, summary: LoadSummary
    ) -> Optional[SpecDocument]:
        try:
            content = decode_document(path)
        except PlaceholderError as e:
            logger.info("Skipping %s", e)
            summary.skipped += 1
            return None
        except (OSError, ValueError) as e:
            logger.error("Failed to load %s: %s", path, e)
            summary.skipped += 1
            return None

        document = SpecDocument(
            family=family,
            name=path.stem,
            source=str(path),
            paths=content["paths"],
            document_format=describe_format(content),
        )
        summary.loaded += 1
        logger.info(
            "Loaded %s spec: %s (%s)",
            family.value,
            document.name,
            document.document_format,
        )
        return document
