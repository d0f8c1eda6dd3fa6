import uuid


def generate_id(prefix: str | None = None) -> str:
    """Generate a short random identifier, optionally prefixed (e.g. ``call_3f2a...``)."""
    value = uuid.uuid4().hex[:16]
    return f"{prefix}_{value}" if prefix else value
