"""Display helpers shared by the identity services."""


def initials_for(name: str) -> str:
    """Avatar initials: first letters of the first and last words."""
    if not name or not name.strip():
        return "?"

    parts = name.split()
    if len(parts) == 1:
        return parts[0][0].upper()

    return (parts[0][0] + parts[-1][0]).upper()


def _plural(count: int, unit: str) -> str:
    return f"{count} {unit}{'' if count == 1 else 's'}"


def format_lockout_time(seconds: int | None) -> str:
    """Render a lockout duration, e.g. ``"14 minutes and 5 seconds"``."""
    if not seconds:
        return "some time"

    minutes, remaining_seconds = divmod(seconds, 60)
    if minutes > 0:
        return f"{_plural(minutes, 'minute')} and {_plural(remaining_seconds, 'second')}"

    return _plural(seconds, "second")
