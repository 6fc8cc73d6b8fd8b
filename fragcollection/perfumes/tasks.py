from typing import Any, Dict

from django.utils import timezone
from django_rq import job
from loguru import logger

from .resolver import resolve_perfume
from .serializers import PerfumeInfoSerializer


@job("default", timeout=120)
def resolve_perfume_url(url: str) -> Dict[str, Any]:
    """
    Resolve a product URL to its perfume record in the background.

    Used by the inventory-entry workflow so that saving an entry never waits
    on the product page fetch. Fetch failures are already absorbed by the
    resolver (stale record or placeholder); only invalid URLs and database
    errors end up here.

    Args:
        url: The product page URL attached to an inventory entry

    Returns:
        Dict with the serialized perfume record and success status
    """
    logger.info(f"Resolving perfume metadata for URL: {url}")

    try:
        perfume = resolve_perfume(url)
    except ValueError as e:
        logger.error(f"Rejected perfume URL {url!r}: {e}")
        return {
            "success": False,
            "error": str(e),
            "url": url,
            "timestamp": timezone.now().isoformat(),
        }

    data = PerfumeInfoSerializer(perfume).data
    if perfume.is_placeholder:
        logger.warning(f"Resolved {url} to placeholder perfume {perfume.pk}; page could not be fetched")
    else:
        logger.info(f"Resolved {url} to perfume {perfume.pk} ({perfume})")
    return {
        "success": True,
        "perfume": data,
        "placeholder": perfume.is_placeholder,
        "url": url,
        "timestamp": timezone.now().isoformat(),
    }
