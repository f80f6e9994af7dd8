from datetime import date


def today() -> date:
    """Current calendar date on the server's local clock."""
    return date.today()
