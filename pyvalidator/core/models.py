"""
Pydantic model for the host-owned result record.
"""

from __future__ import annotations

from typing import List, Optional
from pydantic import BaseModel, ConfigDict, Field, field_validator


class ResultRecord(BaseModel):
    """A completed computation as handed over by the host validator.

    Instances are frozen: the bridge reads them but never changes them.
    """

    model_config = ConfigDict(frozen=True)

    name: str
    appid: int = Field(ge=0)
    id: Optional[int] = None
    workunitid: Optional[int] = None
    # <file_ref> list describing output files (resolved against upload_dir)
    xml_doc_in: str = ""
    # Explicit output file paths, used when no upload_dir is configured
    output_files: List[str] = Field(default_factory=list)

    @field_validator("name")
    @classmethod
    def name_not_empty(cls, v: str) -> str:
        if not v or not v.strip():
            raise ValueError("result name must not be empty")
        return v

    @property
    def workload_id(self) -> str:
        """Registry key for this result's application."""
        return str(self.appid)
