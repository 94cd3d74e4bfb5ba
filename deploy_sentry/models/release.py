"""Release data models"""

from dataclasses import dataclass, field
from typing import Dict, Any, Optional, Union

from ..api.exceptions import ProtocolError


@dataclass
class RemoteFile:
    """A file registered under a release on the server"""

    id: str
    name: str
    metadata: Dict[str, Any] = field(default_factory=dict)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'RemoteFile':
        """Create from an API payload entry"""
        if not isinstance(data, dict) or "id" not in data or "name" not in data:
            raise ProtocolError(f"Malformed release file entry: {data!r}")

        metadata = {k: v for k, v in data.items() if k not in ("id", "name")}
        return cls(id=str(data["id"]), name=data["name"], metadata=metadata)


@dataclass
class Release:
    """A release on the error tracking service"""

    version: str
    metadata: Dict[str, Any] = field(default_factory=dict)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'Release':
        """Create from an API payload"""
        if not isinstance(data, dict) or not data.get("version"):
            raise ProtocolError(f"Malformed release payload: {data!r}")

        metadata = {k: v for k, v in data.items() if k != "version"}
        return cls(version=str(data["version"]), metadata=metadata)


# Phase outcomes of the reconciler

@dataclass
class ReleaseFound:
    """Existence check answered with the release"""
    release: Release


@dataclass
class ReleaseMissing:
    """Existence check answered 404"""
    release_url: str


@dataclass
class ReleaseCreated:
    """Release creation succeeded"""
    release: Release


@dataclass
class ReleaseConflict:
    """Release creation answered 400, the release is handled elsewhere"""
    version: str
    status: int = 400
    detail: Optional[str] = None


ExistenceOutcome = Union[ReleaseFound, ReleaseMissing]
CreationOutcome = Union[ReleaseCreated, ReleaseConflict]
