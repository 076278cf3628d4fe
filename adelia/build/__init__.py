"""
Build pipeline: two-phase packaging, tracking injection, loader snippets
and the upload and persistence collaborators.
"""

from adelia.build.embed import EmbedDescriptor, EmbedSnippet, EmbedSynthesizer, minify_script
from adelia.build.packager import CreativeArchive, CreativePackager, read_archive
from adelia.build.storage import (
    HttpUploader,
    InMemoryRecordStore,
    LocalDirectoryUploader,
    RecordStore,
    Uploader,
    storage_key,
)
from adelia.build.tracking import TrackingInjector

__all__ = [
    "CreativeArchive",
    "CreativePackager",
    "EmbedDescriptor",
    "EmbedSnippet",
    "EmbedSynthesizer",
    "HttpUploader",
    "InMemoryRecordStore",
    "LocalDirectoryUploader",
    "RecordStore",
    "TrackingInjector",
    "Uploader",
    "minify_script",
    "read_archive",
    "storage_key",
]
