"""
Model registration of the hsnweb project.

``init_models`` must be called after ``manager.init_project("hsnweb")``.
"""

from __future__ import annotations

from typing import Dict, Type

from sqlmodel import SQLModel

from hsn_api.core.database import DatabaseManager, ProjectModel
from hsn_api.core.logging_config import get_logger

from .entities import ContactSubmission, NewsletterSubscription

logger = get_logger(__name__)

PROJECT_NAME = "hsnweb"

ENTITIES: Dict[str, Type[SQLModel]] = {
    "ContactSubmission": ContactSubmission,
    "NewsletterSubscription": NewsletterSubscription,
}


def init_models(manager: DatabaseManager) -> Dict[str, ProjectModel]:
    """
    Register every hsnweb model with the manager.

    Models that are already registered are kept, so a retried bootstrap can
    call this again.

    Returns:
        Mapping of model name to bound model.
    """
    registered = manager.get_models(PROJECT_NAME)
    for model_name, entity in ENTITIES.items():
        if model_name in registered:
            continue
        manager.register_model(PROJECT_NAME, model_name, lambda database, entity=entity: ProjectModel(database, entity))
    models = manager.get_models(PROJECT_NAME)
    logger.debug(f"[{PROJECT_NAME}] Models ready: {', '.join(models)}")
    return models
