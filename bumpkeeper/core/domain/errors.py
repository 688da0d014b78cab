"""Error taxonomy for bump passes.

A missing period for a rank is not an error; the evaluator treats it as
"not due".
"""

from __future__ import annotations

from .enums import PassName


class BumpError(Exception):
    pass


class DataUnavailable(BumpError):
    """A required chain read could not be obtained."""


class MalformedRecord(BumpError):
    """A chain record could not be decoded into its typed shape."""


class SubmissionFailure(BumpError):
    """A transaction was rejected or failed in transit."""


class PassFailed(BumpError):
    def __init__(self, pass_name: PassName, cause: BaseException) -> None:
        super().__init__(f"{pass_name.value} pass failed: {cause}")
        self.pass_name = pass_name
        self.cause = cause
