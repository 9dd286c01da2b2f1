from __future__ import annotations

from typing import List, Literal, Optional, Tuple

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

LARGE_TEXT_MAX_LENGTH = 1_000_000

AnnotationKind = Literal["glossary", "model-link"]


def _coerce_identifier(value):
    """Numeric ids from the source table become strings (`2` and `2.0` both give `"2"`)."""
    if isinstance(value, (int, float)) and not isinstance(value, bool):
        return str(int(value)) if float(value).is_integer() else str(value)
    return value


class Entity(BaseModel):
    """A catalogue record (one robot foundation model) as supplied by the data source."""

    model_config = ConfigDict(extra="allow", frozen=True)

    id: str = Field(..., description="Stable identifier of the record")
    name: str = Field(..., description="Display name, also used for cross-linking")
    org: str = Field(default="", description="Organisation(s), comma separated")
    date: str = Field(default="", description='Raw release date in the form "Mon YYYY"')
    category: str = Field(default="", description="Model family (VLA, VAM, World Model, ...)")

    @field_validator("id", mode="before")
    @classmethod
    def _coerce_id(cls, value):
        return _coerce_identifier(value)

    @field_validator("name")
    @classmethod
    def _ensure_name(cls, value: str) -> str:
        cleaned = value.strip()
        if not cleaned:
            raise ValueError("name must not be blank")
        return cleaned


class ParsedTimestamp(BaseModel):
    model_config = ConfigDict(frozen=True)

    entity_id: str
    epoch: int = Field(..., description="Milliseconds since 1970-01-01 UTC")
    raw: str


class EraSegment(BaseModel):
    """A named date range drawn behind the timeline axis.

    ``None`` bounds extend the band to the data minimum or maximum.
    """

    model_config = ConfigDict(frozen=True)

    start: Optional[str] = Field(default=None, description='Start label ("Mon YYYY") or None')
    end: Optional[str] = Field(default=None, description='End label ("Mon YYYY") or None')
    color: str = Field(..., description="Opaque colour token handed to the renderer")
    label: Optional[str] = Field(default=None, description="Caption shown at the band start")


class EraBand(BaseModel):
    model_config = ConfigDict(frozen=True)

    percent_start: float
    percent_end: float
    color: str
    label: Optional[str] = None


class Marker(BaseModel):
    model_config = ConfigDict(frozen=True)

    entity_id: str
    percent: float
    date_text: str = ""


class LabelFootprint(BaseModel):
    model_config = ConfigDict(frozen=True)

    entity_id: str
    text: str
    center_percent: float
    half_width_units: float
    level: int = Field(..., ge=0)
    stem_height: float = Field(..., ge=0.0, description="Distance from the axis to the label baseline")


class YearTick(BaseModel):
    model_config = ConfigDict(frozen=True)

    percent: float
    year: int


class LayoutResult(BaseModel):
    """Everything a renderer needs to paint the timeline track."""

    model_config = ConfigDict(frozen=True)

    markers: Tuple[Marker, ...] = ()
    labels: Tuple[LabelFootprint, ...] = ()
    era_bands: Tuple[EraBand, ...] = ()
    year_ticks: Tuple[YearTick, ...] = ()
    track_height: float = Field(..., ge=0.0)


class LayoutConfig(BaseModel):
    """Read-only constants of the timeline layout."""

    model_config = ConfigDict(frozen=True)

    floor_year: int = Field(default=2022, description="First tracked year; the axis always starts in its January")
    ceiling_year: int = Field(default=2026, description="The axis always reaches at least January of this year")
    pad_percent: float = Field(default=3.0, ge=0.0, lt=50.0)
    char_width: float = Field(default=7.0, gt=0.0, description="Estimated label width per character")
    label_margin: float = Field(default=8.0, ge=0.0, description="Horizontal gap required between labels")
    base_height: float = Field(default=60.0, ge=0.0)
    level_height: float = Field(default=22.0, gt=0.0)
    bottom_margin: float = Field(default=40.0, ge=0.0)
    stem_base: float = Field(default=15.0, ge=0.0)
    empty_track_height: float = Field(default=60.0, ge=0.0)
    max_year_ticks: int = Field(
        default=50,
        ge=2,
        description="Upper bound on year ticks; wider axes tick every few years",
    )

    @model_validator(mode="after")
    def _check_year_span(self) -> "LayoutConfig":
        if self.ceiling_year < self.floor_year:
            raise ValueError("ceiling_year must not be earlier than floor_year")
        return self


class GlossaryEntry(BaseModel):
    model_config = ConfigDict(frozen=True)

    term_key: str = Field(..., description="Lowercased display term, unique within a glossary")
    display_term: str
    definition: str


class AnnotatedSpan(BaseModel):
    model_config = ConfigDict(frozen=True)

    text: str
    is_annotation: bool = False
    annotation_kind: Optional[AnnotationKind] = None
    ref_id: Optional[str] = None


class CatalogStats(BaseModel):
    total_models: int = Field(..., ge=0)
    total_orgs: int = Field(..., ge=0)
    date_range: str = Field(..., description='Year span such as "2022–2025", or "—" when unknown')


# --- API payloads -------------------------------------------------------------


class GlossaryPair(BaseModel):
    term: str
    definition: str


class LayoutRequest(BaseModel):
    entities: List[Entity] = Field(default_factory=list)
    eras: Optional[List[EraSegment]] = Field(
        default=None,
        description="Era bands to draw. The built-in eras are used when omitted.",
    )
    viewport_width_units: Optional[float] = Field(default=None, gt=0)


class AnnotateRequest(BaseModel):
    text: str = Field(..., max_length=LARGE_TEXT_MAX_LENGTH)
    glossary: List[GlossaryPair] = Field(default_factory=list)


class LinkRequest(BaseModel):
    text: str = Field(..., max_length=LARGE_TEXT_MAX_LENGTH)
    entities: List[Entity] = Field(default_factory=list)
    current_entity_id: Optional[str] = Field(
        default=None,
        description="Entity whose own name must not be linked (the one being displayed)",
    )

    @field_validator("current_entity_id", mode="before")
    @classmethod
    def _coerce_current_id(cls, value):
        return _coerce_identifier(value)


class AnnotationResponse(BaseModel):
    spans: List[AnnotatedSpan]
    total_annotations: int


class StatsRequest(BaseModel):
    entities: List[Entity] = Field(default_factory=list)


class DatasetsRequest(BaseModel):
    text: str = Field(..., max_length=LARGE_TEXT_MAX_LENGTH)


class DatasetsResponse(BaseModel):
    datasets: List[str]
