"""
Exception hierarchy for the thumbnail pipeline.

Run-fatal problems (missing or malformed snapshot inputs, unwritable output
roots) raise a PipelineError subclass. Per-track problems never escape the
engine; they are captured into the report as ``failed`` actions.
"""


class PipelineError(Exception):
    """Base class for errors that abort a pipeline run."""


class SnapshotError(PipelineError):
    """The frozen snapshot cannot be used."""


class SnapshotMissingError(SnapshotError):
    """A required snapshot file is absent."""

    def __init__(self, name: str, path, remediation: str):
        self.name = name
        self.path = path
        self.remediation = remediation
        super().__init__(f"{name} not found at {path}\n{remediation}")


class SnapshotLinkError(SnapshotError):
    """The snapshots symlink could not be verified or created."""


class CueDatabaseError(SnapshotError):
    """The cue-point document could not be parsed."""


class CatalogError(SnapshotError):
    """The track catalog document could not be parsed."""


class OutputRootError(PipelineError):
    """An output directory cannot be created or written to."""


class PublishError(Exception):
    """Copying a single thumbnail into the public tree failed."""
