# trf1_rpv/utils/common.py
import os
import re
import logging
from typing import Optional, Sequence

logger = logging.getLogger(__name__)

def build_process_url(template: str, secao: str, proc: str, uf: str) -> str:
    """
    Fills the TRF1 lookup URL template. Values are interpolated as given,
    without escaping, since the portal expects the raw process number.
    """
    return template.format(secao=secao, proc=proc, uf=uf)

def find_rpv_keyword(html: Optional[str], keywords: Sequence[str]) -> Optional[str]:
    """
    Returns the first keyword (in the given priority order) found in the HTML,
    case-insensitively, or None when none of them occurs.
    """
    if not html:
        return None
    haystack = html.lower()
    for keyword in keywords:
        if keyword and keyword.lower() in haystack:
            logger.debug(f"Keyword '{keyword}' matched in page content.")
            return keyword
    return None

def sanitize_filename(name: str, default_name: str = "unnamed", max_length: int = 100) -> str:
    if not name:
        name = default_name

    name = str(name)
    # Remove or replace characters invalid in Windows/Linux/MacOS filenames
    name = re.sub(r'[<>:"/\\|?*]', '_', name)
    name = re.sub(r'[^\w\s.-]', '', name)
    name = re.sub(r'[-\s]+', '-', name).strip('-_')

    base, ext = os.path.splitext(name)
    if len(base) > max_length:
        base = base[:max_length]

    name = base + ext
    if not name or name == ext:
        name = default_name
    return name
