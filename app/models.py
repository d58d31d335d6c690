"""
Data models for the application.
"""
import re
from dataclasses import dataclass, asdict
from typing import Optional, Dict, Any

IMAGE_EXTENSION_PATTERN = re.compile(r'\.(jpg|jpeg|png|gif|webp|bmp)$', re.IGNORECASE)

DEFAULT_CONTENT_TYPE = 'application/octet-stream'


def is_image_file(filename: str) -> bool:
    """Check whether a file name has an image extension."""
    return bool(IMAGE_EXTENSION_PATTERN.search(filename or ''))


@dataclass
class ObjectEntry:
    """A listed bucket object. Never cached; rebuilt on every listing."""
    key: str = ''
    size: Optional[int] = None
    last_modified: Optional[str] = None
    prefix: str = ''
    url: str = ''

    @property
    def name(self) -> str:
        """Key without the listing prefix."""
        if self.prefix and self.key.startswith(self.prefix):
            return self.key[len(self.prefix):]
        return self.key

    @property
    def is_image(self) -> bool:
        return is_image_file(self.name)

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary."""
        data = asdict(self)
        data['name'] = self.name
        data['is_image'] = self.is_image
        return data


@dataclass
class PendingUpload:
    """File picked in the browser, held only for the duration of one upload."""
    filename: str
    content: bytes
    content_type: str = DEFAULT_CONTENT_TYPE

    @classmethod
    def from_file_storage(cls, file_storage) -> 'PendingUpload':
        """Create from a werkzeug FileStorage."""
        return cls(
            filename=file_storage.filename or '',
            content=file_storage.read(),
            content_type=file_storage.mimetype or DEFAULT_CONTENT_TYPE,
        )
