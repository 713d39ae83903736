"""avbuild - builds vendored FFmpeg static libraries and bindings for a consuming build."""

__version__ = "0.1.0"
