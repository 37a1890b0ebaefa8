from __future__ import annotations


class OsmParseError(ValueError):
    """Base class for everything that aborts an OSM XML parse."""

    def __init__(self, message: str, element: str | None = None, element_id: str | None = None) -> None:
        if element is not None:
            where = element if element_id is None else f"{element} {element_id}"
            message = f"{where}: {message}"
        super().__init__(message)
        self.element = element
        self.element_id = element_id


class MissingAttributeError(OsmParseError):
    def __init__(self, name: str, element: str | None = None, element_id: str | None = None) -> None:
        super().__init__(f"missing attribute '{name}'", element, element_id)
        self.name = name


class MalformedValueError(OsmParseError):
    def __init__(
        self, name: str, value: str, expected: str, element: str | None = None, element_id: str | None = None
    ) -> None:
        super().__init__(f"attribute '{name}' is not a valid {expected}: {value!r}", element, element_id)
        self.name = name
        self.value = value
        self.expected = expected


class StreamError(OsmParseError):
    """The input ended early, was closed, or is not well-formed XML."""
