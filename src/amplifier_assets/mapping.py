"""Asset mapping - binds a resource glob to a path on a named server."""

from uuid import UUID
from uuid import uuid4

from pydantic import BaseModel
from pydantic import ConfigDict
from pydantic import Field
from pydantic import field_validator


class AssetMapping(BaseModel):
    """
    Maps the resources matched by a glob to a public path on a server.

    Predicates over mappings use the field names: ``uuid``, ``glob``,
    ``server_name`` and ``server_path``.

    The server path is normalized on construction: surrounding slashes are
    trimmed and exactly one leading slash is added, so ``""`` becomes ``"/"``
    and ``"css/"`` becomes ``"/css"``.

    Example:
        >>> mapping = AssetMapping(glob="/app/public", server_name="localhost", server_path="css/")
        >>> mapping.server_path
        '/css'
    """

    model_config = ConfigDict(frozen=True)

    glob: str = Field(min_length=1)
    server_name: str = Field(min_length=1)
    server_path: str = "/"
    uuid: UUID = Field(default_factory=uuid4)

    @field_validator("server_path")
    @classmethod
    def _normalize_server_path(cls, value: str) -> str:
        return "/" + value.strip("/")
