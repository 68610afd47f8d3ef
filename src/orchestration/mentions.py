"""@mention resolution for prioritizing a persona within a turn."""

import re
from collections.abc import Collection

from src.personas.registry import PersonaRegistry

# Latin letters, digits, underscore and the CJK Unified Ideographs block.
# Not a general-purpose name matcher.
MENTION_PATTERN = re.compile(r"@([a-zA-Z0-9_\u4e00-\u9fa5]+)")


def extract_mention_token(utterance: str) -> str | None:
    """Return the first @token in the utterance, lower-cased."""
    match = MENTION_PATTERN.search(utterance)
    if match is None:
        return None
    return match.group(1).lower()


class MentionResolver:
    """Resolves the first @mention in an utterance to an active persona.

    The token is matched against the whole catalog, so a mention of a
    persona who is not attending resolves to nothing rather than to
    a different, attending persona with a similar name.
    """

    def __init__(self, registry: PersonaRegistry):
        self._registry = registry

    def resolve(self, utterance: str, active_set: Collection[str]) -> str | None:
        """Resolve the utterance's mention to a persona id in active_set.

        Args:
            utterance: Free-text user input
            active_set: Persona ids attending the meeting

        Returns:
            The mentioned persona's id, or None when there is no mention,
            no catalog match, or the match is not attending
        """
        token = extract_mention_token(utterance)
        if token is None:
            return None

        persona = self._registry.find_by_token(token)
        if persona is None or persona.id not in active_set:
            return None
        return persona.id
