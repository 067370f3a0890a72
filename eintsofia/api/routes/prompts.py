"""
Prompt configuration routes (the persona prompt editor).
"""

import logging

from fastapi import APIRouter, Depends, HTTPException

from eintsofia.api.schemas import PromptConfigResponse
from eintsofia.domain.models.prompt_config import Persona, PromptConfig
from eintsofia.infrastructure.container import Container, get_container
from eintsofia.services.prompt_config_service import PersonaConfigurationStore

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/prompts", tags=["Prompts"])


def _response(
    store: PersonaConfigurationStore,
    persona: Persona,
    config: PromptConfig,
    unsaved: bool = False,
) -> PromptConfigResponse:
    return PromptConfigResponse(
        persona=persona,
        config=config,
        shipped_version=store.defaults[persona].version,
        has_unsaved_changes=unsaved,
    )


@router.get("/{persona}", response_model=PromptConfigResponse)
async def get_prompt_config(persona: Persona, container: Container = Depends(get_container)):
    store = container.get_prompt_store()
    return _response(store, persona, store.load(persona))


@router.put("/{persona}", response_model=PromptConfigResponse)
async def save_prompt_config(
    persona: Persona,
    config: PromptConfig,
    container: Container = Depends(get_container),
):
    store = container.get_prompt_store()
    saved = store.save(persona, config)
    return _response(store, persona, saved)


@router.delete("/{persona}", response_model=PromptConfigResponse)
async def reset_prompt_config(persona: Persona, container: Container = Depends(get_container)):
    store = container.get_prompt_store()
    return _response(store, persona, store.reset_all(persona))


@router.post("/{persona}/reset/{section}", response_model=PromptConfigResponse)
async def reset_prompt_section(
    persona: Persona,
    section: str,
    container: Container = Depends(get_container),
):
    store = container.get_prompt_store()
    try:
        config = store.reset_section(persona, section)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e)) from e
    return _response(store, persona, config, unsaved=True)
