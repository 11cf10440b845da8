from importlib.metadata import PackageNotFoundError, version

try:
    __version__ = version("fishtank-view")
except PackageNotFoundError:
    # Running from a source checkout without an install.
    __version__ = "0.0.0"
