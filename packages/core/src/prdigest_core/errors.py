"""Exceptions raised by the review pipeline.

Every error here is fatal for a single webhook event only. run_pipeline()
catches them and logs; nothing is ever reported back to the PR author.
"""


class PrdigestError(Exception):
    """Base class for all prdigest errors."""


class PatchFetchError(PrdigestError):
    """The raw patch for a pull request could not be downloaded."""


class EmptyPatchError(PrdigestError):
    """The patch produced no reviewable commit chunks."""


class PublishError(PrdigestError):
    """Posting the report comment on the pull request failed."""
