"""HSN API.

A small multi-tenant backend that accepts contact-form and newsletter
submissions for marketing websites, persists them to a per-project
database and optionally emails a notification.

High-level architecture
-----------------------

- ``hsn_api.core``:

  - Logging and monitoring configuration.
  - ``hsn_api.core.database``: the multi-project ``DatabaseManager`` that owns
    one connection handle per project, the registry of models bound to it,
    schema synchronization and shutdown.

- ``hsn_api.projects``:

  - One subpackage per tenant project (entities, request/response schemas,
    routers and the function registering the project's models).

- ``hsn_api.server``:

  - The FastAPI application factory, middleware stack, exception handlers
    and the health endpoint.

- ``hsn_api.utils``:

  - The SMTP notification mailer.
"""

__version__ = "1.0.0"
