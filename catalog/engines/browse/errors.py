"""
Browse engine errors.
"""


class BrowseValidationError(ValueError):
    """A malformed filter or sort spec. Names the offending facet."""

    def __init__(self, facet: str, message: str):
        self.facet = facet
        self.message = message
        super().__init__(f"{facet}: {message}")
