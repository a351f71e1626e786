import os
import tempfile
import logging
from typing import BinaryIO, Optional, Tuple

from audioquiz.errors import FileTooLargeError

logger = logging.getLogger(__name__)

MB = 1024 * 1024
CHUNK_SIZE = MB

SUFFIX_BY_TYPE = {
    "audio/mpeg": ".mp3",
    "audio/mp3": ".mp3",
    "audio/mpga": ".mpga",
    "audio/ogg": ".ogg",
    "audio/oga": ".oga",
    "audio/opus": ".opus",
    "audio/wav": ".wav",
    "audio/x-wav": ".wav",
    "audio/wave": ".wav",
    "audio/vnd.wave": ".wav",
    "audio/webm": ".webm",
    "video/webm": ".webm",
    "audio/mp4": ".m4a",
    "audio/m4a": ".m4a",
    "audio/x-m4a": ".m4a",
    "video/mp4": ".mp4",
    "audio/flac": ".flac",
    "audio/x-flac": ".flac",
}


def normalize_content_type(value: Optional[str]) -> str:
    """Drop media type parameters, e.g. ``audio/webm;codecs=opus`` -> ``audio/webm``"""
    if not value:
        return ""
    return value.split(";", 1)[0].strip().lower()


def too_large(max_bytes: int) -> FileTooLargeError:
    limit = f"{max_bytes // MB} MB" if max_bytes >= MB else f"{max_bytes} bytes"
    return FileTooLargeError(f"Audio file is too large. Maximum size is {limit}.")


def suffix_for(filename: Optional[str], content_type: str) -> str:
    """Pick a file suffix; the transcription provider sniffs format from it"""
    if content_type in SUFFIX_BY_TYPE:
        return SUFFIX_BY_TYPE[content_type]
    ext = os.path.splitext(filename or "")[1].lower()
    return ext if ext and len(ext) <= 6 else ".bin"


def write_stream_to_temp(
    stream: BinaryIO,
    suffix: str,
    max_bytes: int,
    directory: Optional[str] = None,
) -> Tuple[str, int]:
    """Copy an upload stream into a fresh temp file and return ``(path, size)``.

    The copy stops as soon as ``max_bytes`` is exceeded; the partial file is
    removed before the error propagates.
    """
    if directory:
        os.makedirs(directory, exist_ok=True)
    fd, tmp_path = tempfile.mkstemp(suffix=suffix, prefix="upload_", dir=directory)
    size = 0
    try:
        with os.fdopen(fd, "wb") as out:
            while True:
                chunk = stream.read(CHUNK_SIZE)
                if not chunk:
                    break
                size += len(chunk)
                if size > max_bytes:
                    raise too_large(max_bytes)
                out.write(chunk)
    except BaseException:
        remove_file(tmp_path)
        raise
    return tmp_path, size


def remove_file(path: str) -> bool:
    """Delete a file, logging instead of raising when it cannot be removed"""
    try:
        os.remove(path)
        return True
    except FileNotFoundError:
        return False
    except OSError as e:
        logger.error(f"Error deleting temp file {path}: {str(e)}")
        return False
