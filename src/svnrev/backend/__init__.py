"""Version-control backends producing status records."""

from .base import RepositoryInfo, StatusSource, relative_repository_path
from .svn import SvnClient, parse_info_xml, parse_status_xml

__all__ = [
    "RepositoryInfo",
    "StatusSource",
    "SvnClient",
    "parse_info_xml",
    "parse_status_xml",
    "relative_repository_path",
]
