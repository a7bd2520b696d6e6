"""Search result and response models shared by connectors, engine and interfaces."""

from pydantic import BaseModel, ConfigDict, Field


class Result(BaseModel):
    """One search hit from a connector (JSON-serializable, immutable)."""

    model_config = ConfigDict(frozen=True)

    title: str = Field(default="", description="Display title")
    snippet: str = Field(default="", description="Optional excerpt, may be empty")
    url: str = Field(default="", description="Link to the source item")
    source: str = Field(default="", description="Connector name: google-drive, gmail, ...")


class SearchResponse(BaseModel):
    """Results of one fan-out plus the failures that were tolerated."""

    results: list[Result] = Field(default_factory=list, description="Concatenated results, unordered across sources")
    errors: list[str] = Field(default_factory=list, description="Partial failures as '<source>: <error>'")
    sources_queried: list[str] = Field(default_factory=list, description="Connectors selected for this query")

    @property
    def degraded(self) -> bool:
        return bool(self.errors)
