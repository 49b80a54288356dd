"""Package metadata for mimepost."""

__app_name__ = "mimepost"
__version__ = "0.3.0"
__author__ = "mimepost contributors"
__description__ = "Compose MIME email messages and hand them to a mail transport."

__all__ = ["__app_name__", "__author__", "__description__", "__version__"]
