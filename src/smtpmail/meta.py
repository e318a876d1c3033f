"""Package metadata for smtpmail."""

__app_name__ = "smtpmail"
__version__ = "0.3.0"
__author__ = "smtpmail maintainers"
__description__ = "MIME message builder and SMTP dispatcher"
__license_type__ = "MIT"

__all__ = [
    "__app_name__",
    "__author__",
    "__description__",
    "__license_type__",
    "__version__",
]
