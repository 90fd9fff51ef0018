"""
ScratchFS error types.

Invalid caller arguments raise the builtin ValueError and assertion mismatches raise AssertionError.
The classes below cover the two remaining failure kinds: a path that is missing or of the wrong kind,
and a filesystem call that failed although its preconditions held.
"""


# Classes --------------------------------------------------------------------------------------------------------------

class ScratchError(Exception):
    """Base class for scratch directory failures."""


class ScratchStateError(ScratchError):
    """
    A filesystem precondition is not met.

    Raised when an operation targets a path that does not exist, or exists with the wrong
    entry kind (a directory where a file is expected, or the other way round).
    """


class ScratchOperationError(ScratchError):
    """
    A filesystem operation failed although its preconditions held.

    The underlying OSError, when there is one, is chained as ``__cause__``.
    """
