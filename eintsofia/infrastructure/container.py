"""
Dependency injection container.

Builds the service graph from settings on first use. Any service can be
replaced with ``register_service`` before it is first requested, which is how
tests inject in-memory stores and a dummy model service.
"""

import logging
from typing import Any, Optional

from eintsofia.infrastructure.config.settings import Settings, settings as default_settings

logger = logging.getLogger(__name__)

MODEL_SERVICE = "model_service"
PROMPT_STORE = "prompt_store"
KEY_VALUE_STORE = "key_value_store"
DOCUMENT_STORE = "document_store"
ORCHESTRATOR = "orchestrator"
FEEDBACK_CACHE = "feedback_cache"
ANALYSIS_LOG_SERVICE = "analysis_log_service"
PARTICIPANT_STORE = "participant_store"


class Container:
    """
    Dependency injection container.

    Acts as a factory for services, ensuring each is created once with its
    dependencies.
    """

    def __init__(self, settings: Optional[Settings] = None):
        self.settings = settings or default_settings
        self._services = {}

    def register_service(self, name: str, service_instance: Any):
        """
        Register a service instance with the container.

        Args:
            name: Name to register the service under
            service_instance: Service instance to register
        """
        self._services[name] = service_instance
        logger.debug(f"Registered service: {name}")

    def get_service(self, name: str) -> Any:
        """
        Get a service instance by name.

        Raises:
            KeyError: If the service is not registered
        """
        if name not in self._services:
            raise KeyError(f"Service not registered: {name}")
        return self._services[name]

    def has_service(self, name: str) -> bool:
        return name in self._services

    def _get_or_create(self, name: str, factory) -> Any:
        if name not in self._services:
            self.register_service(name, factory())
        return self._services[name]

    def get_model_service(self):
        def factory():
            from eintsofia.services.llm.genai_client import AsyncGenAIClient

            self.settings.validate_llm_config()
            models = self.settings.get_model_config()
            return AsyncGenAIClient(
                api_key=self.settings.gemini_api_key,
                analysis_model=models["analysis"],
                derived_model=models["derived"],
                chat_model=models["chat"],
                transcription_model=models["transcription"],
            )

        return self._get_or_create(MODEL_SERVICE, factory)

    def get_key_value_store(self):
        def factory():
            from eintsofia.infrastructure.persistence.key_value_store import (
                JsonFileKeyValueStore,
            )

            return JsonFileKeyValueStore(self.settings.prompt_override_dir)

        return self._get_or_create(KEY_VALUE_STORE, factory)

    def get_prompt_store(self):
        def factory():
            from eintsofia.services.llm.prompts.personas import PROMPT_SETS
            from eintsofia.services.prompt_config_service import PersonaConfigurationStore

            language = self.settings.prompt_language
            if language not in PROMPT_SETS:
                raise ValueError(f"Unsupported prompt language: {language}")
            return PersonaConfigurationStore(
                self.get_key_value_store(), defaults=PROMPT_SETS[language]
            )

        return self._get_or_create(PROMPT_STORE, factory)

    def get_document_store(self):
        def factory():
            from eintsofia.database import SessionLocal, create_tables
            from eintsofia.infrastructure.persistence.document_store import (
                SQLAlchemyDocumentStore,
            )

            create_tables()
            return SQLAlchemyDocumentStore(SessionLocal)

        return self._get_or_create(DOCUMENT_STORE, factory)

    def get_orchestrator(self):
        def factory():
            from eintsofia.services.analysis_orchestrator import AnalysisOrchestrator

            return AnalysisOrchestrator(self.get_model_service(), self.get_prompt_store())

        return self._get_or_create(ORCHESTRATOR, factory)

    def get_feedback_cache(self):
        def factory():
            from eintsofia.services.feedback_cache import FeedbackCache

            return FeedbackCache(
                self.get_document_store(),
                ttl_seconds=self.settings.feedback_cache_ttl_seconds,
            )

        return self._get_or_create(FEEDBACK_CACHE, factory)

    def get_analysis_log_service(self):
        def factory():
            from eintsofia.services.analysis_log_service import AnalysisLogService

            return AnalysisLogService(self.get_document_store())

        return self._get_or_create(ANALYSIS_LOG_SERVICE, factory)

    def get_participant_store(self):
        def factory():
            from eintsofia.services.participant_store import ParticipantStore

            return ParticipantStore(self.get_key_value_store())

        return self._get_or_create(PARTICIPANT_STORE, factory)

    def new_session(self, persona):
        """Fresh analysis session on the shared orchestrator; never cached."""
        from eintsofia.services.analysis_session import AnalysisSession

        return AnalysisSession(self.get_orchestrator(), persona)


_container: Optional[Container] = None


def get_container() -> Container:
    """Process-wide container; FastAPI dependency."""
    global _container
    if _container is None:
        _container = Container()
    return _container
