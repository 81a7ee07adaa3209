"""
Career Clarified - Blog post helpers (titles, slugs, excerpts).
"""
from typing import Optional
import re
import time

from sqlalchemy.orm import Session

from ..models import BlogPost

EXCERPT_LENGTH = 150
DEFAULT_AUTHOR = "Career Clarified Team"

_TAG_RE = re.compile(r"<[^>]*>")
_H1_RE = re.compile(r"<h1[^>]*>(.*?)</h1>", re.IGNORECASE | re.DOTALL)


def strip_tags(html: str) -> str:
    return _TAG_RE.sub("", html)


def generate_slug(title: str) -> str:
    """
    URL slug from a title.

    >>> generate_slug("Senior  Engineer! (Remote)")
    'senior-engineer-remote'
    """
    slug = title.lower().strip()
    slug = re.sub(r"[^\w\s-]", "", slug, flags=re.ASCII)
    slug = re.sub(r"[\s_-]+", "-", slug, flags=re.ASCII)
    return slug.strip("-")


def extract_excerpt(content: str) -> str:
    """First 150 characters of the text content, with an ellipsis when cut."""
    text = strip_tags(content)
    return text[:EXCERPT_LENGTH] + "..." if len(text) > EXCERPT_LENGTH else text


def extract_title(content: str, topic: str) -> str:
    """Title from the first <h1>, falling back to the topic capitalized."""
    match = _H1_RE.search(content)
    if match:
        title = strip_tags(match.group(1)).strip()
        if title:
            return title
    return topic[:1].upper() + topic[1:]


def unique_slug(db: Session, slug: str, now_ms: Optional[int] = None) -> str:
    """Append a millisecond timestamp when the slug is already taken."""
    existing = db.query(BlogPost.id).filter(BlogPost.slug == slug).first()
    if not existing:
        return slug
    if now_ms is None:
        now_ms = int(time.time() * 1000)
    return f"{slug}-{now_ms}"
