class VidgraphError(Exception):
    """Base error for core operations. Carries the HTTP status it maps to."""

    status_code = 500

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class InvalidArgument(VidgraphError):
    status_code = 400


class Forbidden(VidgraphError):
    status_code = 403


class NotFound(VidgraphError):
    status_code = 404


class Internal(VidgraphError):
    status_code = 500


def parse_id(value, label: str) -> int:
    """Parse an entity identifier, raising InvalidArgument unless it is a positive int."""
    if isinstance(value, bool):
        raise InvalidArgument(f"Invalid {label} ID")
    if isinstance(value, int):
        parsed = value
    elif isinstance(value, str) and value.strip().isdecimal():
        try:
            parsed = int(value.strip())
        except ValueError:
            raise InvalidArgument(f"Invalid {label} ID") from None
    else:
        raise InvalidArgument(f"Invalid {label} ID")
    if parsed < 1:
        raise InvalidArgument(f"Invalid {label} ID")
    return parsed
