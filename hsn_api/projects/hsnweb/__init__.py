"""HSN Web project: contact form and newsletter backend of the HSN website."""

from hsn_api.core.database import SyncOptions

from ..base import ProjectModule
from .models import PROJECT_NAME, init_models
from .routes import router

project = ProjectModule(
    name=PROJECT_NAME,
    router=router,
    init_models=init_models,
    auto_init=True,
    sync_options=SyncOptions(alter=True),
)

__all__ = ["PROJECT_NAME", "init_models", "project", "router"]
