"""Revision stamping of deployed HTML"""

import logging
from pathlib import Path
from typing import Union

from ..api.exceptions import RevisionTagError, MissingRevisionError
from ..constants import INDEX_FILE, REVISION_META_NAME, REVISION_META_PLACEHOLDER


def head_footer_snippet() -> str:
    """Placeholder meta tag to render into the page head"""
    return REVISION_META_PLACEHOLDER


def revision_meta_tag(revision: str) -> str:
    """Meta tag carrying the revision"""
    return f'<meta name="{REVISION_META_NAME}" content="{revision}">'


class RevisionTagger:
    """Stamps the release identifier into the built index page"""

    def __init__(self, dist_dir: Union[str, Path], index_file: str = INDEX_FILE):
        self.index_path = Path(dist_dir) / index_file
        self.logger = logging.getLogger(self.__class__.__name__)

    def tag(self, revision: str) -> bool:
        """
        Replace the revision placeholder with the given revision

        Args:
            revision: Release identifier

        Returns:
            True if the placeholder was found and replaced

        Raises:
            MissingRevisionError: If revision is empty
            RevisionTagError: If the index file cannot be read or written
        """
        if not revision:
            raise MissingRevisionError(
                "Could not find revision key to fingerprint Sentry revision with."
            )

        try:
            content = self.index_path.read_text(encoding="utf-8")
        except OSError as e:
            raise RevisionTagError(f"Cannot read {self.index_path}: {e}") from e

        if REVISION_META_PLACEHOLDER not in content:
            self.logger.warning(
                f"No {REVISION_META_PLACEHOLDER} placeholder in {self.index_path}"
            )
            return False

        content = content.replace(REVISION_META_PLACEHOLDER, revision_meta_tag(revision))

        try:
            self.index_path.write_text(content, encoding="utf-8")
        except OSError as e:
            raise RevisionTagError(f"Cannot write {self.index_path}: {e}") from e

        self.logger.info(f"Tagged {self.index_path} with revision {revision}")
        return True
