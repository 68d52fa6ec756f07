"""
Pydantic schemas for the JSON documents returned by srrdb.com.
"""

from typing import List

from pydantic import BaseModel, ConfigDict, Field


class SearchResult(BaseModel):
    """A single release returned by the search API."""
    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    dirname: str = Field(alias="release")
    date: str = ""  # e.g. 2014-06-16 17:35:26
    has_nfo: str = Field(default="no", alias="hasNFO")
    has_srs: str = Field(default="no", alias="hasSRS")

    @property
    def nfo(self) -> bool:
        return self.has_nfo == "yes"

    @property
    def srs(self) -> bool:
        return self.has_srs == "yes"


class SearchResponse(BaseModel):
    """Search API response envelope."""
    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    results: List[SearchResult] = []
    result_count: str = Field(default="0", alias="resultsCount")
    warnings: List[str] = []
    query: List[str] = []

    @property
    def empty(self) -> bool:
        return self.result_count == "0" or not self.results


class UploadedFile(BaseModel):
    """Per-file result of an SRR upload."""
    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    dirname: str = Field(default="", alias="name")
    color: int = 0
    message: str = ""

    def display(self) -> str:
        """Render the result the way the upload form shows it."""
        if self.message.startswith(self.dirname):
            return self.message
        if self.message.startswith(" - "):
            return self.dirname + self.message
        return f"{self.dirname} - {self.message}"


class UploadResponse(BaseModel):
    """Response envelope of the SRR upload endpoint."""
    files: List[UploadedFile] = []
