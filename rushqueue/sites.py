"""
Site directory - names of the sites configured in FTP Rush.

FTP Rush keeps its site manager in RushSite.xml:

    <GROUP NAME="Work">
        <SITE NAME="build-box" ... />
    </GROUP>
    <GROUP NAME="History">
        <SITE NAME="..." />       recently visited, not real sites
    </GROUP>

Loading is best effort. A missing or unreadable file yields no names.
"""
import xml.etree.ElementTree as ET
from pathlib import Path
from typing import Optional, Set, Union

import structlog

from rushqueue.config import settings

logger = structlog.get_logger()


def load_site_names(path: Optional[Union[str, Path]] = None) -> Set[str]:
    """
    Return the distinct site names in a RushSite.xml file.

    Args:
        path: Site file location, defaults to settings.default_site_file()

    Returns:
        Site names from every group except the history group, or an empty set
        when the file cannot be located or parsed
    """
    site_file = Path(path) if path else settings.default_site_file()

    try:
        root = ET.parse(site_file).getroot()
    except (OSError, ET.ParseError) as e:
        logger.warning("site_file_unavailable", path=str(site_file), error=str(e))
        return set()

    names: Set[str] = set()
    for group in root.iter("GROUP"):
        if group.get("NAME") == settings.site_history_group:
            continue
        for site in group.iter("SITE"):
            name = site.get("NAME")
            if name:
                names.add(name)

    logger.debug("site_names_loaded", path=str(site_file), count=len(names))
    return names
