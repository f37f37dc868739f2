from __future__ import annotations

from enum import Enum

from pydantic import BaseModel, ConfigDict, Field


class InputMode(str, Enum):
    """How the user describes the data they want."""
    NATURAL_LANGUAGE = "natural-language"
    SCHEMA = "schema"


class OutputFormat(str, Enum):
    """Formats the generator can be asked for."""
    JSON = "json"
    SQL = "sql"
    CSV = "csv"


class ProviderId(str, Enum):
    """Supported LLM providers."""
    OPENAI = "openai"
    ANTHROPIC = "anthropic"
    GOOGLE = "google"
    GROQ = "groq"


class GenerationRequest(BaseModel):
    """Body of ``POST /api/generate``; provider and key travel in headers."""

    model_config = ConfigDict(populate_by_name=True)

    input_mode: InputMode = Field(default=InputMode.NATURAL_LANGUAGE, alias="inputMode")
    input: str | None = None
    format: OutputFormat = OutputFormat.JSON
    # Absent means 10; an explicit null is clamped like any value below 1
    row_count: int | None = Field(default=10, alias="rowCount")


class ErrorResponse(BaseModel):
    error: str


class ProviderInfo(BaseModel):
    id: ProviderId
    display_name: str = Field(serialization_alias="displayName")
    default_model_id: str = Field(serialization_alias="defaultModelId")
