"""
Project module descriptor.

Every tenant project exposes one ``ProjectModule`` describing what the HTTP
application and the sync CLI need to know about it.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Callable, Dict, Optional

from fastapi import APIRouter

from hsn_api.core.database import DatabaseManager, SyncOptions


@dataclass(frozen=True)
class ProjectModule:
    """A tenant project mounted under ``/api/<name>``.

    Attributes:
        name: Project identifier, also the URL segment and database key
        router: Endpoints of the project
        init_models: Registers the project's models with a manager whose
            connection for ``name`` is initialized
        auto_init: Bootstrap the project database before serving ``/api`` requests
        sync_options: Schema sync applied during bootstrap
    """

    name: str
    router: APIRouter
    init_models: Optional[Callable[[DatabaseManager], Dict[str, Any]]] = None
    auto_init: bool = True
    sync_options: SyncOptions = SyncOptions()

    @property
    def prefix(self) -> str:
        return f"/api/{self.name}"

    @property
    def has_models(self) -> bool:
        return self.init_models is not None
