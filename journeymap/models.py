"""Pydantic models for the journey map engine."""

from enum import Enum

from pydantic import BaseModel, ConfigDict, Field

MIN_EXPERIENCE = 1
MAX_EXPERIENCE = 5
DEFAULT_EXPERIENCE = 3


class JobType(str, Enum):
    FUNCTIONAL = "functional"
    SOCIAL = "social"
    EMOTIONAL = "emotional"


# --- Step model ---


class JourneyStep(BaseModel):
    """One stage of a journey. Field aliases match the stored/AI wire format."""

    model_config = ConfigDict(populate_by_name=True)

    id: str | None = None
    order: int = Field(ge=1)
    title: str = ""
    description: str = ""
    outcome: str = ""
    timeline_day: int = Field(default=0, ge=0, alias="timelineDay")
    negative_experience: int = Field(
        default=DEFAULT_EXPERIENCE, ge=MIN_EXPERIENCE, le=MAX_EXPERIENCE,
        alias="negativeExperience",
    )
    positive_experience: int = Field(
        default=DEFAULT_EXPERIENCE, ge=MIN_EXPERIENCE, le=MAX_EXPERIENCE,
        alias="positiveExperience",
    )
    pain_point_note: str | None = Field(default=None, alias="painPointNote")


# --- Aggregate models ---


class JourneyMap(BaseModel):
    """A persisted journey map (what comes out of the DB)."""

    model_config = ConfigDict(populate_by_name=True)

    id: str
    idea_id: str = Field(alias="ideaId")
    title: str
    subtitle: str | None = None
    steps: list[JourneyStep] = Field(default_factory=list)
    archetype_id: str | None = Field(default=None, alias="archetypeId")
    created_by: str | None = Field(default=None, alias="createdBy")
    created_at: str = Field(alias="createdAt")
    updated_at: str = Field(alias="updatedAt")

    @property
    def ordered_steps(self) -> list[JourneyStep]:
        return sorted(self.steps, key=lambda s: s.order)


class JourneyMapCreate(BaseModel):
    """Journey map data ready to insert into the database."""
    idea_id: str
    title: str
    subtitle: str | None = None
    steps: list[JourneyStep] = Field(default_factory=list)
    archetype_id: str | None = None
    created_by: str | None = None


# --- Generation context (supplied by the idea collaborator) ---


class JobToBeDone(BaseModel):
    customer: str = ""
    progress: str = ""
    circumstance: str = ""
    type: JobType = JobType.FUNCTIONAL

    @property
    def is_complete(self) -> bool:
        return bool(self.customer.strip() and self.progress.strip() and self.circumstance.strip())


class GenerationContext(BaseModel):
    job: JobToBeDone
    idea_title: str | None = None
    idea_description: str | None = None
    vision: str | None = None
    business_model: str | None = None


class MergedDraft(BaseModel):
    """Sanitized result of merging a generated draft. Steps carry no ids."""
    title: str
    subtitle: str | None = None
    steps: list[JourneyStep] = Field(default_factory=list)
