"""Structured meeting summary (minutes) models.

Field names are snake_case in Python and camelCase on the wire
(keyPoints, actionItems, decisionTree), matching the schema the
summarizer asks the model to produce.
"""

from enum import Enum

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel

FALLBACK_TOPIC = "Error generating summary"
FALLBACK_CONCLUSION = "Could not generate summary."


class ActionItemStatus(str, Enum):
    """Status of an action item agreed in the meeting."""

    PENDING = "Pending"
    IN_PROGRESS = "InProgress"
    DONE = "Done"


class _SummaryModel(BaseModel):
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        str_strip_whitespace=True,
    )


class SummaryActionItem(_SummaryModel):
    """A task with an owner and status."""

    task: str = Field(min_length=1, description="What needs to be done")
    owner: str = Field(default="Unassigned", description="Who owns the task")
    status: ActionItemStatus = Field(
        default=ActionItemStatus.PENDING,
        description="Pending, InProgress, or Done",
    )

    @field_validator("status", mode="before")
    @classmethod
    def normalize_status(cls, v: object) -> object:
        """Accept 'in progress', 'in_progress', 'DONE' and similar spellings."""
        if isinstance(v, str):
            key = v.replace(" ", "").replace("_", "").replace("-", "").lower()
            for status in ActionItemStatus:
                if status.value.lower() == key:
                    return status
        return v


class DecisionStep(_SummaryModel):
    """One phase of the discussion and the options raised in it."""

    step: str = Field(description="Phase or key question in the thought process")
    options: list[str] = Field(
        default_factory=list,
        description="Considerations, arguments, or options discussed",
    )


class SummaryRecord(_SummaryModel):
    """Meeting minutes produced once per summary request."""

    topic: str = Field(description="Main topic of discussion")
    key_points: list[str] = Field(
        default_factory=list,
        description="Key arguments or points made (meeting minutes style)",
    )
    action_items: list[SummaryActionItem] = Field(
        default_factory=list,
        description="Action items with owners and status",
    )
    conclusion: str = Field(description="Final consensus or summary")
    decision_tree: list[DecisionStep] | None = Field(
        default=None,
        description=(
            "Chronological organization of the discussion's thought "
            "process and decision logic"
        ),
    )

    @classmethod
    def fallback(cls) -> "SummaryRecord":
        """Sentinel record returned when summary generation fails."""
        return cls(
            topic=FALLBACK_TOPIC,
            key_points=[],
            action_items=[],
            conclusion=FALLBACK_CONCLUSION,
        )

    @property
    def is_fallback(self) -> bool:
        return self.topic == FALLBACK_TOPIC and self.conclusion == FALLBACK_CONCLUSION
