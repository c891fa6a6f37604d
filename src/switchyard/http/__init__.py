"""HTTP primitives — immutable Request, Response, and their helpers."""
