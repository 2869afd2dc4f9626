"""Article persistence: upsert with hash-based change detection, slug/path lookup"""

from datetime import datetime
from typing import Any

from sqlmodel import Session, select

from blockpress.core.utils.logging import get_logger
from blockpress.crud.models import Article


logger = get_logger(__name__)

_FIELDS = ("slug", "title", "category", "accent_color", "excerpt", "content", "published", "published_at")


def get_by_path(session: Session, path: str) -> Article | None:
    """Return the Article with the given source path, or None if not found."""
    return session.exec(select(Article).where(Article.path == path)).one_or_none()


def get_by_slug(session: Session, slug: str) -> Article | None:
    """Return the Article with the given slug, or None if not found."""
    return session.exec(select(Article).where(Article.slug == slug)).one_or_none()


def list_articles(session: Session, published_only: bool = False) -> list[Article]:
    """All articles ordered by slug, optionally only published ones."""
    stmt = select(Article).order_by(Article.slug)
    if published_only:
        stmt = stmt.where(Article.published == True)  # noqa: E712
    return list(session.exec(stmt).all())


def upsert_article(session: Session, data: dict[str, Any]) -> tuple[Article, str]:
    """Insert or update by source path.

    Returns (article, status) where status is 'created', 'updated', or 'unchanged'.
    Flushes but does not commit; the caller controls the transaction.
    Raises ValueError when the slug already belongs to an article at another path.
    """
    article = get_by_path(session, data['path'])
    owner = get_by_slug(session, data['slug'])
    if owner is not None and owner is not article:
        raise ValueError(f"Slug '{data['slug']}' already used by {owner.path}")

    if article:
        if article.hash == data['hash']:
            return article, 'unchanged'
        for name in _FIELDS:
            if name in data:
                setattr(article, name, data[name])
        article.hash = data['hash']
        article.updated_at = datetime.now()
        session.add(article)
        session.flush()
        logger.info("article_updated", slug=article.slug)
        return article, 'updated'

    article = Article(path=data['path'], hash=data['hash'], **{k: data[k] for k in _FIELDS if k in data})
    session.add(article)
    session.flush()
    logger.info("article_created", slug=article.slug)
    return article, 'created'
