"""Fuzzy full-text search over posts.

Indexed fields: post title, post content, blog name, preferred blog
name and tag names. Text is split into lowercase word tokens; a query
term matches a token when their Levenshtein distance is within the
allowed number of edits. A post is a hit when any query term matches
any of its tokens.

The index reads posts straight from the database, so it is always in
sync with writes and needs no rebuild step. The price is a full scan:
every search streams all posts in batches and compares each term with
each token in Python, so cost grows with posts times tokens. Matching
posts are held in memory until sorted. Past a few tens of thousands of
posts this wants a real search backend behind the same interface.
"""

import logging
import re
from collections.abc import Iterable, Iterator
from dataclasses import dataclass
from typing import Final

from django.conf import settings
from django.db.models import QuerySet

from server.apps.posts.models import Post
from server.apps.posts.repositories import with_relations

logger = logging.getLogger(__name__)

SEARCH_FIELDS: Final = (
    'title',
    'content',
    'blog.blog_name',
    'blog.preferred_blog_name',
    'post_tags.name',
)

_DEFAULT_FUZZINESS: Final = 2
_TOKEN_PATTERN: Final = re.compile(r'\w+')
_BATCH_SIZE: Final = 500


@dataclass(frozen=True, slots=True)
class SearchResult:
    """Requested slice of hits plus the total hit count."""

    hits: list[Post]
    total: int


def get_search_fuzziness() -> int:
    """Get maximum edit distance for fuzzy matching.

    Returns:
        Fuzziness from settings or default of 2.
    """
    return getattr(settings, 'POSTS_SEARCH_FUZZINESS', _DEFAULT_FUZZINESS)


def tokenize(text: str) -> list[str]:
    """Split text into lowercase word tokens."""
    return _TOKEN_PATTERN.findall(text.lower())


def edit_distance(source: str, target: str, max_distance: int) -> int:
    """Levenshtein distance, cut off above ``max_distance``.

    Returns:
        The distance, or ``max_distance + 1`` once it is known to be larger.
    """
    if abs(len(source) - len(target)) > max_distance:
        return max_distance + 1

    previous = list(range(len(target) + 1))
    for row, source_char in enumerate(source, start=1):
        current = [row]
        for column, target_char in enumerate(target, start=1):
            substitution = previous[column - 1] + (source_char != target_char)
            current.append(min(
                previous[column] + 1,
                current[column - 1] + 1,
                substitution,
            ))
        if min(current) > max_distance:
            return max_distance + 1
        previous = current
    return min(previous[-1], max_distance + 1)


def _hit_order(hit: tuple[float, Post]) -> tuple[float, float, int]:
    score, post = hit
    return -score, -post.created_at.timestamp(), -post.id


class PostSearchIndex:
    """Fuzzy search over the indexed post fields."""

    def __init__(self, fuzziness: int | None = None) -> None:
        """Initialize PostSearchIndex.

        Args:
            fuzziness: Maximum edits per term; defaults to settings.
        """
        self.fuzziness = (
            get_search_fuzziness() if fuzziness is None else fuzziness
        )

    def search(self, query: str, offset: int, limit: int) -> SearchResult:
        """Find posts matching ``query``.

        Args:
            query: Free text typed by the user.
            offset: Number of hits to skip.
            limit: Maximum number of hits to return.

        Returns:
            Hits ordered by score, then newest first.
        """
        terms = sorted(set(tokenize(query)))
        if not terms:
            return SearchResult(hits=[], total=0)

        scored: list[tuple[float, Post]] = []
        for post in self._documents():
            score = self.score(terms, self.document_tokens(post))
            if score > 0:
                scored.append((score, post))

        scored.sort(key=_hit_order)
        logger.debug('Search %r matched %d posts', query, len(scored))
        return SearchResult(
            hits=[post for _, post in scored[offset:offset + limit]],
            total=len(scored),
        )

    def score(self, terms: Iterable[str], tokens: set[str]) -> float:
        """Sum of the best match weight of every term (0 when nothing matches)."""
        total = 0.0
        for term in terms:
            allowed = self.allowed_edits(term)
            best = min(
                (edit_distance(term, token, allowed) for token in tokens),
                default=allowed + 1,
            )
            if best <= allowed:
                total += 1 / (1 + best)
        return total

    def allowed_edits(self, term: str) -> int:
        """Edits allowed for a term; shorter terms tolerate fewer edits."""
        return max(0, min(self.fuzziness, len(term) - 1))

    def document_tokens(self, post: Post) -> set[str]:
        """Tokens of every indexed field of a post."""
        texts = [
            post.title,
            post.content,
            post.blog.blog_name,
            post.blog.preferred_blog_name,
            *(tag.name for tag in post.post_tags.all()),
        ]
        return {token for text in texts for token in tokenize(text)}

    def _documents(self) -> Iterator[Post]:
        queryset: QuerySet[Post] = with_relations(Post.objects.all())
        return queryset.iterator(chunk_size=_BATCH_SIZE)
