from .downloader import ReportDownloader
from .io_utils import ensure_parent, safe_write, write_stream

__all__ = [
    "ReportDownloader",
    "ensure_parent",
    "safe_write",
    "write_stream",
]
