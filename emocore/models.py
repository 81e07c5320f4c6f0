"""
Shared data models for state of mind logging.

This module defines the canonical sample, the unchecked request that produces
it, and the record shape owned by the health store. Only the conversion
adapter is allowed to build or read ``HealthRecord`` instances.
"""

from datetime import datetime
from uuid import UUID, uuid4

from pydantic import BaseModel, ConfigDict, Field, computed_field

from .valence import ValenceClassification, classify
from .vocabulary import Association, Kind, Label

STATE_OF_MIND_TYPE = "state_of_mind"


class StateOfMind(BaseModel):
    """A validated, immutable state of mind sample."""

    model_config = ConfigDict(frozen=True)

    id: UUID = Field(default_factory=uuid4, description="Sample identifier")
    date: datetime = Field(..., description="When the feeling was experienced")
    kind: Kind = Field(..., description="Momentary emotion or daily mood")
    valence: float = Field(..., ge=-1.0, le=1.0, description="Signed valence from -1 to 1")
    labels: tuple[Label, ...] = Field(default=(), description="Words describing the feeling")
    associations: tuple[Association, ...] = Field(
        default=(), description="Facets of life the feeling is associated with"
    )

    @computed_field  # type: ignore[prop-decorator]
    @property
    def valence_classification(self) -> ValenceClassification:
        return classify(self.valence)

    @property
    def title(self) -> str:
        """Short summary such as "A Very Pleasant Moment"."""
        return f"A {self.valence_classification.display_name} {self.kind.display_name}"

    @property
    def subtitle(self) -> str:
        """Numeric date and short time, e.g. "2026-10-18 22:00"."""
        return self.date.strftime("%Y-%m-%d %H:%M")


class LogRequest(BaseModel):
    """
    An unchecked request to log a sample.

    Vocabulary fields accept either integer codes or symbolic names; nothing
    is validated here beyond basic JSON types.
    """

    kind: int | str = Field(..., description="Kind code or name")
    valence: float = Field(..., description="Valence, expected between -1 and 1")
    date: datetime | None = Field(None, description="Defaults to now when omitted")
    labels: list[int | str] | None = Field(None, description="Label codes or names")
    associations: list[int | str] | None = Field(
        None, description="Association codes or names"
    )
    override_past_daily_mood_time: bool = Field(
        True, description="Move the time of a past daily mood to the end of that day"
    )


class HealthRecord(BaseModel):
    """A state of mind record as stored by the health store."""

    model_config = ConfigDict(frozen=True)

    uuid: UUID
    record_type: str = STATE_OF_MIND_TYPE
    start_date: datetime
    kind: int
    valence: float
    valence_classification: int
    labels: list[int] = Field(default_factory=list)
    associations: list[int] = Field(default_factory=list)
