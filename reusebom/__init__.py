"""Build SPDX bills of materials from REUSE-style file metadata."""

__version__ = "0.1.0"
