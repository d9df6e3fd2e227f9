"""Building blocks for chat bot command frameworks: commands, contexts, slash arguments, errors and edit tracking."""

__version__ = "0.1.0"