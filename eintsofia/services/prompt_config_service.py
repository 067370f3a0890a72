"""
Persona prompt configuration store.

Resolves the active ``PromptConfig`` for a persona from the shipped default and
the user's local override, and renders it into the prompt text sent with the
primary analysis.
"""

import logging
from typing import Dict, List, Optional, Union

from pydantic import ValidationError

from eintsofia.domain.models.interaction import Participant
from eintsofia.domain.models.prompt_config import Persona, PromptConfig, PromptSectionId
from eintsofia.infrastructure.persistence.key_value_store import KeyValueStore
from eintsofia.services.llm.prompts.personas import DEFAULT_PROMPTS
from eintsofia.utils.timezone_utils import utc_now

logger = logging.getLogger(__name__)

# Layer headings used when a config is assembled from sections
SECTION_LAYERS = [
    (PromptSectionId.IDENTITY, "Identity"),
    (PromptSectionId.FORENSIC, "Layer 1: Forensic Lens"),
    (PromptSectionId.PSYCHOLOGY, "Layer 2: Psychology"),
    (PromptSectionId.SAFETY, "Layer 3: Safety"),
    (PromptSectionId.OUTPUT, "Output"),
]


class PersonaConfigurationStore:
    """
    Per-persona prompt configuration with user overrides.

    An override is trusted when its version is greater than or equal to the
    shipped default's version. Stale or unreadable overrides are deleted on
    load.
    """

    KEY_PREFIX = "customPrompts_"

    def __init__(
        self,
        kv_store: KeyValueStore,
        defaults: Optional[Dict[Persona, PromptConfig]] = None,
    ):
        self.kv_store = kv_store
        self.defaults = dict(defaults if defaults is not None else DEFAULT_PROMPTS)
        missing = set(Persona) - self.defaults.keys()
        if missing:
            raise ValueError(f"No default prompt for personas: {sorted(p.value for p in missing)}")

    @classmethod
    def storage_key(cls, persona: Union[Persona, str]) -> str:
        return f"{cls.KEY_PREFIX}{Persona(persona).value}"

    def default_for(self, persona: Union[Persona, str]) -> PromptConfig:
        """Fresh copy of the shipped default."""
        return self.defaults[Persona(persona)].model_copy(deep=True)

    def load(self, persona: Union[Persona, str]) -> PromptConfig:
        persona = Persona(persona)
        key = self.storage_key(persona)
        shipped = self.defaults[persona]

        raw = self.kv_store.get(key)
        if raw is None:
            return self.default_for(persona)

        try:
            override = PromptConfig.model_validate_json(raw)
        except ValidationError as e:
            logger.warning(f"Discarding unreadable prompt override for {persona.value}: {e}")
            self.kv_store.delete(key)
            return self.default_for(persona)

        if override.version >= shipped.version:
            return override

        logger.warning(
            f"Discarding stale prompt override for {persona.value}: "
            f"v{override.version} < shipped v{shipped.version}"
        )
        self.kv_store.delete(key)
        return self.default_for(persona)

    def save(self, persona: Union[Persona, str], config: PromptConfig) -> PromptConfig:
        """
        Persist ``config`` as the persona's override.

        The version is kept as set by the caller; ``last_updated`` is stamped.
        Returns the stored config, which later loads will equal.
        """
        persona = Persona(persona)
        stored = config.model_copy(update={"last_updated": utc_now()}, deep=True)
        self.kv_store.set(self.storage_key(persona), stored.model_dump_json())
        logger.info(f"Saved prompt override for {persona.value} (v{stored.version})")
        return stored

    def reset_section(
        self, persona: Union[Persona, str], section_id: Union[PromptSectionId, str]
    ) -> PromptConfig:
        """
        Return the current config with one section restored to the shipped value.

        Nothing is persisted; callers treat the result as an unsaved edit.
        """
        persona = Persona(persona)
        try:
            section_id = PromptSectionId(section_id)
        except ValueError:
            raise ValueError(f"Unknown prompt section: {section_id!r}") from None

        current = self.load(persona)
        shipped_value = self.defaults[persona].get_section(section_id)
        return current.with_section(section_id, shipped_value)

    def reset_all(self, persona: Union[Persona, str]) -> PromptConfig:
        persona = Persona(persona)
        self.kv_store.delete(self.storage_key(persona))
        logger.info(f"Reset prompt configuration for {persona.value} to shipped default")
        return self.default_for(persona)

    @staticmethod
    def render_prompt(
        config: PromptConfig, participants: Optional[List[Participant]] = None
    ) -> str:
        """Assemble the prompt text for the primary analysis call."""
        if config.unified and config.unified.strip():
            parts = [config.unified.strip()]
        else:
            parts = []
            for section_id, heading in SECTION_LAYERS:
                text = (config.get_section(section_id) or "").strip()
                if text:
                    parts.append(f"## {heading}\n{text}")

        parts.append(
            f"Sensitivity level: {config.sensitivity}/10. "
            "Higher levels mean flagging subtler concerns."
        )
        if config.keywords:
            parts.append("Focus keywords: " + ", ".join(config.keywords))
        if participants:
            listing = "\n".join(f"- {p.describe()}" for p in participants)
            parts.append(f"Known participants in this video:\n{listing}")

        return "\n\n".join(parts)
