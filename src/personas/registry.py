"""Static catalog of available meeting personas.

The catalog order matters: mention resolution picks the first
persona in catalog order when a token matches several names.
"""

from collections.abc import Iterable, Iterator

from src.models.persona import Persona


class UnknownPersonaError(KeyError):
    """Raised when a persona id is not in the catalog."""

    def __init__(self, persona_ids: list[str]):
        self.persona_ids = persona_ids
        super().__init__(f"Unknown persona id(s): {', '.join(persona_ids)}")


DEFAULT_PERSONAS: tuple[Persona, ...] = (
    Persona(
        id="steve",
        name="Steve Arden",
        title="Chief Product Visionary",
        avatar="SA",
        color="bg-gray-800",
        system_prompt=(
            "You are Steve Arden, a demanding product visionary. You care about "
            "simplicity, taste, and the end-to-end user experience above all. "
            "Challenge mediocre ideas directly, push for focus, and say no to "
            "features that dilute the product. Speak in short, confident sentences."
        ),
    ),
    Persona(
        id="tom",
        name="Tom Becker",
        title="Senior Industry Expert",
        avatar="TB",
        color="bg-orange-500",
        is_expert=True,
        system_prompt=(
            "You are Tom Becker, a senior industry expert with twenty years of "
            "hands-on experience. Ground the discussion in practical realities: "
            "market data, regulation, operations, and lessons from past projects. "
            "Give concrete, actionable recommendations and name trade-offs plainly."
        ),
    ),
    Persona(
        id="maya",
        name="Maya Chen",
        title="Chief Financial Officer",
        avatar="MC",
        color="bg-emerald-600",
        system_prompt=(
            "You are Maya Chen, the CFO. Evaluate every proposal through cost, "
            "revenue, cash flow, and risk. Ask for numbers when they are missing "
            "and propose budgets or milestones. Be polite but skeptical."
        ),
    ),
    Persona(
        id="priya",
        name="Priya Nair",
        title="Head of Engineering",
        avatar="PN",
        color="bg-indigo-600",
        system_prompt=(
            "You are Priya Nair, head of engineering. Assess feasibility, "
            "architecture, staffing, and delivery timelines. Break big ideas into "
            "buildable increments and flag technical risks early."
        ),
    ),
    Persona(
        id="lucas",
        name="Lucas Ferreira",
        title="Growth Marketing Lead",
        avatar="LF",
        color="bg-pink-600",
        system_prompt=(
            "You are Lucas Ferreira, growth marketing lead. Think about positioning, "
            "target segments, channels, and how to measure traction. Be energetic "
            "and suggest quick experiments."
        ),
    ),
    Persona(
        id="hana",
        name="Hana Sato",
        title="UX Research Lead",
        avatar="HS",
        color="bg-teal-600",
        is_expert=True,
        system_prompt=(
            "You are Hana Sato, UX research lead. Represent the voice of real users: "
            "their goals, frustrations, and behaviors. Propose research methods and "
            "question assumptions that have not been validated with users."
        ),
    ),
)


class PersonaRegistry:
    """Ordered, read-only lookup table of personas."""

    def __init__(self, personas: Iterable[Persona] = DEFAULT_PERSONAS):
        """Initialize registry.

        Args:
            personas: Personas in catalog order

        Raises:
            ValueError: If two personas share an id
        """
        self._personas: tuple[Persona, ...] = tuple(personas)
        self._by_id: dict[str, Persona] = {}
        for persona in self._personas:
            if persona.id in self._by_id:
                msg = f"Duplicate persona id: {persona.id}"
                raise ValueError(msg)
            self._by_id[persona.id] = persona

    def __len__(self) -> int:
        return len(self._personas)

    def __iter__(self) -> Iterator[Persona]:
        return iter(self._personas)

    def __contains__(self, persona_id: object) -> bool:
        return persona_id in self._by_id

    def all(self) -> list[Persona]:
        """All personas in catalog order."""
        return list(self._personas)

    def ids(self) -> list[str]:
        return [p.id for p in self._personas]

    def get(self, persona_id: str) -> Persona:
        """Look up a persona by id.

        Raises:
            UnknownPersonaError: If the id is not in the catalog
        """
        try:
            return self._by_id[persona_id]
        except KeyError:
            raise UnknownPersonaError([persona_id]) from None

    def find_by_token(self, token: str) -> Persona | None:
        """Find the first persona whose name contains token or whose id equals it.

        Matching is case-insensitive.
        """
        needle = token.lower()
        if not needle:
            return None
        for persona in self._personas:
            if needle in persona.name.lower() or persona.id.lower() == needle:
                return persona
        return None

    def validate_ids(self, persona_ids: Iterable[str]) -> list[str]:
        """Check that every id is known.

        Returns:
            The ids as a list, in the given order

        Raises:
            UnknownPersonaError: Listing every unknown id
        """
        ids = list(persona_ids)
        unknown = [pid for pid in ids if pid not in self._by_id]
        if unknown:
            raise UnknownPersonaError(unknown)
        return ids
