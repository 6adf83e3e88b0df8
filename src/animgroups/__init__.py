"""animgroups - animation group tracking and portable sync for 3D scenes."""

from importlib.metadata import PackageNotFoundError, version

try:
    __version__ = version("animgroups")
except PackageNotFoundError:
    __version__ = "unknown"
