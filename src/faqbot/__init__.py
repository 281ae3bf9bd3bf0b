"""faqbot - Telegram FAQ assistant with category browsing and search.

Package entry point. Exports the version string only; all functional
modules are imported lazily by main.py to keep startup fast.
"""

from importlib.metadata import PackageNotFoundError, version

try:
    __version__ = version("faqbot")
except PackageNotFoundError:
    __version__ = "0.0.0+unknown"
