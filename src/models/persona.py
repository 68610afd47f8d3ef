"""Persona model for simulated meeting attendees."""

from pydantic import BaseModel, ConfigDict, Field, field_validator

# Speaker references that are not personas
USER_SPEAKER_ID = "user"
SYSTEM_SPEAKER_ID = "system"
RESERVED_SPEAKER_IDS = frozenset({USER_SPEAKER_ID, SYSTEM_SPEAKER_ID})


class Persona(BaseModel):
    """A configured simulated attendee.

    Personas are loaded once into the registry and never mutated.
    The system_prompt is passed verbatim to the model as the
    system instruction for every reply the persona gives.
    """

    model_config = ConfigDict(frozen=True, str_strip_whitespace=True)

    id: str = Field(min_length=1, max_length=50, description="Stable identifier")
    name: str = Field(min_length=1, max_length=200, description="Display name")
    title: str = Field(description="Job title or role in the meeting")
    avatar: str = Field(description="Avatar image URL or initials")
    system_prompt: str = Field(description="Tone and style instruction")
    is_expert: bool = Field(default=False, description="Shown with an expert badge")
    color: str | None = Field(
        default=None,
        description="Background color for initials avatars",
    )

    @field_validator("id")
    @classmethod
    def id_not_reserved(cls, v: str) -> str:
        """Persona ids cannot collide with user/system speaker references."""
        if v.lower() in RESERVED_SPEAKER_IDS:
            msg = f"Persona id '{v}' is reserved"
            raise ValueError(msg)
        return v

    @property
    def has_image_avatar(self) -> bool:
        """Check if avatar is an image URL rather than initials."""
        return self.avatar.startswith("http")

    @property
    def initials(self) -> str:
        """Initials shown when no avatar image is available."""
        if not self.has_image_avatar:
            return self.avatar
        return "".join(part[0] for part in self.name.split()[:2]).upper()
