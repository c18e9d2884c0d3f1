class RosterDecodeError(ValueError):
    """The input document could not be read as a roster export."""
