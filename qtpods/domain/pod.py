"""
Pod domain object for qtpods.

A Pod is a third-party dependency tracked as a git submodule plus
descriptive metadata. It is immutable and serializable for JSONL output.
"""

from dataclasses import dataclass, replace
from typing import Any, Dict


METADATA_FIELDS = ('author', 'description', 'license', 'website')


@dataclass(frozen=True)
class Pod:
    """
    A pod dependency slot.

    Two pods with the same name refer to the same slot; every other
    field is descriptive.
    """
    name: str
    url: str = ""
    author: str = ""
    description: str = ""
    license: str = ""
    website: str = ""

    @property
    def has_valid_name(self) -> bool:
        """Pod names must already be all lowercase."""
        return self.name == self.name.lower()

    def metadata(self) -> Dict[str, str]:
        """Descriptive fields as stored in the .podinfo file."""
        return {key: getattr(self, key) for key in METADATA_FIELDS}

    def with_metadata(self, **fields: str) -> 'Pod':
        """Return a copy with the given metadata fields replaced."""
        unknown = set(fields) - set(METADATA_FIELDS)
        if unknown:
            raise ValueError(f"Unknown pod metadata fields: {sorted(unknown)}")
        return replace(self, **fields)

    def to_dict(self) -> Dict[str, Any]:
        return {
            'name': self.name,
            'url': self.url,
            'author': self.author,
            'description': self.description,
            'license': self.license,
            'website': self.website,
        }
