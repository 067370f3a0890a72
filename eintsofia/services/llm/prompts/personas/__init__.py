from typing import Dict

from eintsofia.domain.models.prompt_config import Persona, PromptConfig
from eintsofia.services.llm.prompts.personas.caregiver import CAREGIVER_PROMPT
from eintsofia.services.llm.prompts.personas.family import FAMILY_PROMPT
from eintsofia.services.llm.prompts.personas.hebrew import DEFAULT_PROMPTS_HE
from eintsofia.services.llm.prompts.personas.kindergarten import KINDERGARTEN_PROMPT

DEFAULT_PROMPTS: Dict[Persona, PromptConfig] = {
    Persona.FAMILY: FAMILY_PROMPT,
    Persona.CAREGIVER: CAREGIVER_PROMPT,
    Persona.KINDERGARTEN: KINDERGARTEN_PROMPT,
}

# Shipped prompt sets by language; English is the default
PROMPT_SETS: Dict[str, Dict[Persona, PromptConfig]] = {
    "en": DEFAULT_PROMPTS,
    "he": DEFAULT_PROMPTS_HE,
}

for _language, _prompts in PROMPT_SETS.items():
    _missing = set(Persona) - _prompts.keys()
    if _missing:
        raise RuntimeError(
            f"No shipped {_language} prompt for personas: {sorted(p.value for p in _missing)}"
        )
