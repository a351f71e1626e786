import logging
from dataclasses import dataclass, field
from typing import Iterable, Optional

from audioquiz.errors import MissingFileError, UnsupportedMediaError
from audioquiz.utils.file_processing import (
    normalize_content_type,
    remove_file,
    suffix_for,
    too_large,
    write_stream_to_temp,
)

logger = logging.getLogger(__name__)


@dataclass
class UploadedAudio:
    """An upload stored on disk for the lifetime of one request"""
    path: str
    content_type: str
    size_bytes: int
    filename: str = "audio"
    _discarded: bool = field(default=False, repr=False)

    @property
    def discarded(self) -> bool:
        return self._discarded

    def discard(self) -> bool:
        """Remove the stored file. Only the first call touches the filesystem."""
        if self._discarded:
            return False
        self._discarded = True
        removed = remove_file(self.path)
        if removed:
            logger.info(f"Removed temp upload {self.path}")
        else:
            logger.warning(f"Cleanup: could not remove temp file {self.path}")
        return removed


class AudioIntake:
    def __init__(self, allowed_types: Iterable[str], max_bytes: int, upload_dir: Optional[str] = None):
        self.allowed_types = {normalize_content_type(t) for t in allowed_types}
        self.max_bytes = max_bytes
        self.upload_dir = upload_dir

    @classmethod
    def from_settings(cls, settings) -> "AudioIntake":
        return cls(settings.allowed_content_types, settings.max_upload_bytes, settings.upload_dir)

    def validate(self, upload) -> str:
        """Check presence, type and declared size; return the normalized content type"""
        if upload is None or isinstance(upload, str) or not getattr(upload, "filename", None):
            raise MissingFileError()

        content_type = normalize_content_type(upload.content_type)
        logger.info(f"Upload -> {upload.filename} | type: {content_type or 'unknown'}")
        if content_type not in self.allowed_types:
            raise UnsupportedMediaError(
                f"Unsupported file type: {content_type or 'unknown'}. "
                "Try mp3, wav, m4a, webm, ogg or flac."
            )

        # Multipart parsers record the size while spooling, so this runs before we read anything
        declared_size = getattr(upload, "size", None)
        if declared_size is not None and declared_size > self.max_bytes:
            raise too_large(self.max_bytes)
        return content_type

    def store(self, upload, content_type: str) -> UploadedAudio:
        path, size = write_stream_to_temp(
            upload.file,
            suffix_for(upload.filename, content_type),
            self.max_bytes,
            directory=self.upload_dir,
        )
        logger.info(f"Stored upload at {path} ({size} bytes)")
        return UploadedAudio(path=path, content_type=content_type, size_bytes=size, filename=upload.filename)

    def accept(self, upload) -> UploadedAudio:
        content_type = self.validate(upload)
        return self.store(upload, content_type)
