"""mirage: a small command-line image processing tool built on libvips."""

__version__ = "0.1.0"
