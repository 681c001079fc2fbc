"""HTTP server of the HSN API: application factory, middleware and handlers."""
