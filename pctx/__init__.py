"""Find, filter and format the text files of a project as prompt context."""

__version__ = "0.1.3"