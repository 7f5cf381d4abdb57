"""
Result Schemas using Pydantic.

Structure of the values returned by cleanup sweeps.
"""
from pathlib import Path
from typing import List

from pydantic import BaseModel, Field


class PathFailure(BaseModel):
    path: Path = Field(..., description="Entry that could not be removed")
    reason: str = Field(..., description="Error reported by the filesystem")


class UnsafeLink(BaseModel):
    path: Path = Field(..., description="Symbolic link found inside the output tree")
    target: str = Field(..., description="Where the link points; outside the output root")


class CleanResult(BaseModel):
    root: Path = Field(..., description="Output root that was swept")
    removed: int = Field(default=0, description="Number of files, links and directories removed")
    failures: List[PathFailure] = Field(default_factory=list, description="Entries that could not be removed")
    warnings: List[UnsafeLink] = Field(default_factory=list, description="Links skipped because they leave the tree")
    dry_run: bool = Field(default=False, description="Whether entries were only counted, not removed")

    @property
    def ok(self) -> bool:
        return not self.failures

    @property
    def failed_paths(self) -> List[Path]:
        return [failure.path for failure in self.failures]
