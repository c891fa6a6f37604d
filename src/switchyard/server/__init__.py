"""ASGI glue: the only code that touches raw ASGI messages."""
