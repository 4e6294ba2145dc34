"""
Data models for Image Finder.

Contains dataclasses for indexed image records, search matches and
indexing progress.
"""

from dataclasses import dataclass, field
from typing import Optional
import os
import uuid

from .config import ABSENT_HASH


def format_size(size_bytes: int) -> str:
    """Format file size in human-readable form."""
    for unit in ['B', 'KB', 'MB', 'GB']:
        if size_bytes < 1024:
            return f"{size_bytes:.1f} {unit}"
        size_bytes /= 1024
    return f"{size_bytes:.1f} TB"


def hash_to_hex(value: int) -> Optional[str]:
    """Render a 64-bit hash as 16 hex digits, or None for the absent sentinel."""
    if value == ABSENT_HASH:
        return None
    return f"{value:016x}"


def hex_to_hash(text: Optional[str]) -> int:
    """Parse a stored hex hash; empty or missing values map to the sentinel."""
    if not text:
        return ABSENT_HASH
    return int(text, 16)


def _new_record_id() -> str:
    return uuid.uuid4().hex


@dataclass
class ImageRecord:
    """
    One indexed image file.

    Attributes:
        path: Absolute path to the image file (unique in the store)
        dhash: 64-bit difference hash, 0 when absent
        width: Image width in pixels
        height: Image height in pixels
        file_size: Size in bytes at index time
        id: Opaque identifier assigned at creation
    """
    path: str
    dhash: int = ABSENT_HASH
    width: int = 0
    height: int = 0
    file_size: int = 0
    id: str = field(default_factory=_new_record_id)

    def __hash__(self):
        return hash(str(self.path))

    def __eq__(self, other):
        if not isinstance(other, ImageRecord):
            return False
        return str(self.path) == str(other.path)

    @property
    def has_hash(self) -> bool:
        """True when the record can take part in search ranking."""
        return self.dhash != ABSENT_HASH

    @property
    def pixel_area(self) -> int:
        return self.width * self.height

    @property
    def filename(self) -> str:
        """Return just the filename portion of the path."""
        return os.path.basename(self.path)

    @property
    def directory(self) -> str:
        """Return the directory containing this image."""
        return os.path.dirname(self.path)

    @property
    def resolution(self) -> str:
        """Return resolution as 'WxH' string."""
        return f"{self.width}x{self.height}"

    @property
    def file_size_formatted(self) -> str:
        """Return human-readable file size."""
        return format_size(self.file_size)

    def to_dict(self) -> dict:
        """Convert to dictionary for JSON serialization."""
        return {
            'id': self.id,
            'path': self.path,
            'filename': self.filename,
            'directory': self.directory,
            'dhash': hash_to_hex(self.dhash),
            'width': self.width,
            'height': self.height,
            'resolution': self.resolution,
            'file_size': self.file_size,
            'file_size_formatted': self.file_size_formatted,
        }

    @classmethod
    def from_dict(cls, data: dict) -> 'ImageRecord':
        """Create ImageRecord from dictionary."""
        kwargs = {}
        if data.get('id'):
            kwargs['id'] = data['id']
        return cls(
            path=data['path'],
            dhash=hex_to_hash(data.get('dhash')),
            width=data.get('width', 0),
            height=data.get('height', 0),
            file_size=data.get('file_size', 0),
            **kwargs,
        )


@dataclass
class Match:
    """
    A ranked search result.

    Attributes:
        path: Path of the matched image
        width: Image width in pixels
        height: Image height in pixels
        file_size: Size in bytes
        distance: Hamming distance to the query hash (0-64)
    """
    path: str
    width: int = 0
    height: int = 0
    file_size: int = 0
    distance: float = 0.0

    @classmethod
    def from_record(cls, record: ImageRecord, distance: float) -> 'Match':
        return cls(
            path=record.path,
            width=record.width,
            height=record.height,
            file_size=record.file_size,
            distance=float(distance),
        )

    @property
    def pixel_area(self) -> int:
        return self.width * self.height

    @property
    def filename(self) -> str:
        return os.path.basename(self.path)

    @property
    def resolution(self) -> str:
        return f"{self.width}x{self.height}"

    def to_dict(self) -> dict:
        """Convert to dictionary for JSON serialization."""
        return {
            'path': self.path,
            'filename': self.filename,
            'width': self.width,
            'height': self.height,
            'resolution': self.resolution,
            'file_size': self.file_size,
            'file_size_formatted': format_size(self.file_size),
            'distance': self.distance,
        }


@dataclass(frozen=True)
class IndexProgress:
    """
    Snapshot of an indexing run pushed to a progress observer.

    Attributes:
        processed: Candidates processed so far (successful or not)
        total: Candidates in this run
        current_file: Filename of the most recently processed candidate
        eta_seconds: Estimated seconds remaining, None until one item is done
    """
    processed: int
    total: int
    current_file: str = ""
    eta_seconds: Optional[float] = None

    @property
    def fraction(self) -> float:
        if self.total == 0:
            return 1.0
        return self.processed / self.total

    @property
    def percent(self) -> int:
        return int(self.fraction * 100)

    def to_dict(self) -> dict:
        return {
            'processed': self.processed,
            'total': self.total,
            'current_file': self.current_file,
            'eta_seconds': self.eta_seconds,
            'percent': self.percent,
        }


@dataclass
class IndexResult:
    """
    Outcome of an indexing run.

    Attributes:
        indexed: Records newly committed to the store
        total: Candidates considered (allow-listed and not already indexed)
        failed: Candidates skipped because they could not be read or decoded
        cancelled: True if the run stopped early on request
        elapsed_seconds: Wall-clock duration of the run
        root: Normalized root folder that was indexed
    """
    indexed: int = 0
    total: int = 0
    failed: int = 0
    cancelled: bool = False
    elapsed_seconds: float = 0.0
    root: str = ""

    def as_tuple(self) -> tuple[int, int]:
        """Return (indexed, total)."""
        return self.indexed, self.total

    def to_dict(self) -> dict:
        return {
            'indexed': self.indexed,
            'total': self.total,
            'failed': self.failed,
            'cancelled': self.cancelled,
            'elapsed_seconds': round(self.elapsed_seconds, 2),
            'root': self.root,
        }
