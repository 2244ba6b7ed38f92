"""cue-thumbs - cue-driven thumbnail pipeline for a frozen video library snapshot."""

__version__ = "1.0.0"
