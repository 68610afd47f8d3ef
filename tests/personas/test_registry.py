"""Tests for PersonaRegistry."""

import pytest

from src.models.persona import Persona
from src.personas.registry import DEFAULT_PERSONAS, PersonaRegistry, UnknownPersonaError


def persona(pid: str, name: str) -> Persona:
    return Persona(id=pid, name=name, title="T", avatar="XX", system_prompt="S")


class TestDefaultCatalog:
    """Tests for the built-in catalog."""

    def test_catalog_order(self, registry):
        assert registry.ids() == ["steve", "tom", "maya", "priya", "lucas", "hana"]
        assert len(registry) == len(DEFAULT_PERSONAS)

    def test_ids_are_unique(self, registry):
        assert len(set(registry.ids())) == len(registry)

    def test_tom_is_expert(self, registry):
        assert registry.get("tom").is_expert is True
        assert "tom" in registry.get("tom").name.lower()


class TestLookup:
    """Tests for get / contains / validate_ids."""

    def test_get_known(self, registry):
        assert registry.get("steve").name == "Steve Arden"

    def test_get_unknown_raises(self, registry):
        with pytest.raises(UnknownPersonaError) as exc_info:
            registry.get("nobody")
        assert exc_info.value.persona_ids == ["nobody"]

    def test_contains(self, registry):
        assert "maya" in registry
        assert "nobody" not in registry

    def test_validate_ids_lists_all_unknown(self, registry):
        with pytest.raises(UnknownPersonaError) as exc_info:
            registry.validate_ids(["steve", "x", "tom", "y"])
        assert exc_info.value.persona_ids == ["x", "y"]

    def test_validate_ids_keeps_order(self, registry):
        assert registry.validate_ids(["tom", "steve"]) == ["tom", "steve"]

    def test_rejects_duplicate_ids(self):
        with pytest.raises(ValueError, match="Duplicate"):
            PersonaRegistry([persona("a", "A"), persona("a", "B")])


class TestFindByToken:
    """Tests for find_by_token."""

    def test_matches_name_substring_case_insensitive(self, registry):
        assert registry.find_by_token("BECK").id == "tom"

    def test_matches_exact_id(self):
        registry = PersonaRegistry([persona("cfo", "Maya Chen")])
        assert registry.find_by_token("CFO").id == "cfo"

    def test_id_must_match_exactly(self):
        registry = PersonaRegistry([persona("cfo", "Maya Chen")])
        assert registry.find_by_token("cf") is None

    def test_first_catalog_match_wins(self):
        registry = PersonaRegistry(
            [persona("anna", "Anna Smith"), persona("hanna", "Hanna Jones")]
        )
        assert registry.find_by_token("ann").id == "anna"

    def test_no_match(self, registry):
        assert registry.find_by_token("zelda") is None

    def test_empty_token(self, registry):
        assert registry.find_by_token("") is None
