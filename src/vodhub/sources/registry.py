"""Read-only view of the site registry document.

The registry is a JSON document ``{"sites": [...]}`` maintained outside this
service. It is re-read on every lookup so edits apply without a restart; an
unreadable document behaves as an empty registry.
"""

from __future__ import annotations

import logging
import shutil
from pathlib import Path

import aiofiles  # type: ignore[import-untyped]
import aiofiles.os  # type: ignore[import-untyped]
import orjson

from vodhub.errors import SourceNotFound
from vodhub.sources.models import SourceConfig

logger = logging.getLogger(__name__)


class SiteRegistry:
    """Loads ``SourceConfig`` records from the registry file."""

    def __init__(self, path: str | Path, template_path: str | Path | None = None):
        self.path = Path(path)
        self.template_path = Path(template_path) if template_path else None

    def ensure_exists(self) -> None:
        """Create the registry document if it is missing.

        Copies the template when one is available, otherwise writes an
        empty registry.
        """
        if self.path.exists():
            return
        self.path.parent.mkdir(parents=True, exist_ok=True)
        if self.template_path is not None and self.template_path.exists():
            shutil.copyfile(self.template_path, self.path)
            logger.info(f"Created {self.path} from template {self.template_path}")
        else:
            self.path.write_bytes(orjson.dumps({"sites": []}, option=orjson.OPT_INDENT_2))
            logger.info(f"Created empty site registry at {self.path}")

    async def load(self) -> list[SourceConfig]:
        """Return every registered site, active or not."""
        if not await aiofiles.os.path.exists(self.path):
            return []
        try:
            async with aiofiles.open(self.path, "rb") as f:
                document = orjson.loads(await f.read())
        except (OSError, orjson.JSONDecodeError) as e:
            logger.warning(f"Failed to read site registry {self.path}: {e}")
            return []

        sites = []
        for record in document.get("sites", []) if isinstance(document, dict) else []:
            try:
                sites.append(SourceConfig.from_dict(record))
            except (KeyError, TypeError) as e:
                logger.warning(f"Skipping invalid site record {record!r}: {e}")
        return sites

    async def active(self) -> list[SourceConfig]:
        """Sites enabled for search fan-out."""
        return [site for site in await self.load() if site.active]

    async def get(self, key: str) -> SourceConfig:
        """Look up a site by key.

        Raises:
            SourceNotFound: If no site has this key
        """
        for site in await self.load():
            if site.key == key:
                return site
        raise SourceNotFound(key)
