"""
Discovery content: the comment (and optional image reference) a discoverer attaches.

There is one content record per discovery, so its id depends only on the
discovery id. Image upload happens elsewhere; here an image is just a URL
reference whose id the upload layer fills in later.
"""

from __future__ import annotations

from datetime import datetime

from trailquest.core.ids import deterministic_id
from trailquest.core.time import utc_now
from trailquest.domain.models import ContentVisibility, DiscoveryContent, ImageReference


def content_id(discovery_id: str) -> str:
    return deterministic_id("discovery-content", discovery_id)


def _image(url: str | None) -> ImageReference | None:
    return ImageReference(id="", url=url) if url else None


def create_discovery_content(
    account_id: str,
    discovery_id: str,
    *,
    comment: str | None = None,
    image_url: str | None = None,
    visibility: ContentVisibility = "private",
    now: datetime | None = None,
) -> DiscoveryContent:
    now = now or utc_now()
    return DiscoveryContent(
        id=content_id(discovery_id),
        discovery_id=discovery_id,
        account_id=account_id,
        image=_image(image_url),
        comment=comment,
        visibility=visibility,
        created_at=now,
        updated_at=now,
    )


def update_discovery_content(
    existing: DiscoveryContent,
    *,
    comment: str | None = None,
    image_url: str | None = None,
    visibility: ContentVisibility | None = None,
    now: datetime | None = None,
) -> DiscoveryContent:
    """Copy of `existing` with the given fields replaced; omitted fields are kept."""
    return existing.model_copy(
        update={
            "image": _image(image_url) or existing.image,
            "comment": comment if comment is not None else existing.comment,
            "visibility": visibility or existing.visibility,
            "updated_at": now or utc_now(),
        }
    )
