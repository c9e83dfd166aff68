def is_unique_violation(exc: Exception) -> bool:
    """True when a PostgREST error came from a unique constraint."""
    if getattr(exc, "code", None) == "23505":
        return True
    message = str(exc).lower()
    return "unique" in message or "duplicate" in message
