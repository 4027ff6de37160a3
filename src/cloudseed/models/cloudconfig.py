"""Cloud-config document models."""

from typing import Any, Dict

from pydantic import BaseModel, Field


class WriteFile(BaseModel):
    """Entry of a cloud-config ``write_files`` list."""
    path: str
    content: str
    encoding: str = Field(default="base64")
    permissions: str = Field(default="0755")
    defer: bool = Field(default=True)

    def to_entry(self) -> Dict[str, Any]:
        """Plain mapping in cloud-config key order."""
        return {
            "path": self.path,
            "content": self.content,
            "encoding": self.encoding,
            "permissions": self.permissions,
            "defer": self.defer,
        }
