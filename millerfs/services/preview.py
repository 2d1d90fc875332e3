from __future__ import annotations

import logging
from dataclasses import dataclass

from result import Err

from millerfs.models.entry import Entry
from millerfs.models.navigation import EMPTY_PREVIEW, ChildListing, Preview, PreviewError, TextSnippet
from millerfs.services.lister import EntryLister

logger = logging.getLogger(__name__)

DEFAULT_PREVIEW_LINES = 128


@dataclass(slots=True, frozen=True)
class PreviewOutcome:
    preview: Preview
    error: str | None = None


def build_preview(
    entry: Entry | None,
    lister: EntryLister,
    max_lines: int = DEFAULT_PREVIEW_LINES,
) -> PreviewOutcome:
    """Derive the preview for *entry*.

    Never raises. A metadata failure on the entry itself is returned as ``error``
    with an empty preview; everything else degrades inside the preview.
    """
    if entry is None:
        return PreviewOutcome(EMPTY_PREVIEW)

    meta_result = entry.metadata()
    if isinstance(meta_result, Err):
        return PreviewOutcome(EMPTY_PREVIEW, error=meta_result.unwrap_err())
    meta = meta_result.unwrap()

    if meta.is_dir_like:
        listed = lister.list(entry.path)
        if isinstance(listed, Err):
            return PreviewOutcome(PreviewError(str(listed.unwrap_err())))
        return PreviewOutcome(ChildListing(tuple(listed.unwrap())))

    if meta.is_file_like:
        try:
            lines = lister.fs.read_lines(entry.path, max_lines)
        except OSError as exc:
            logger.debug("No preview for %s: %s", entry.path, exc)
            return PreviewOutcome(EMPTY_PREVIEW)
        return PreviewOutcome(TextSnippet("\n".join(lines)))

    return PreviewOutcome(EMPTY_PREVIEW)
