"""Server-level endpoints and shared API dependencies."""
