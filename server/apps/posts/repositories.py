"""Post repository: filtered, paginated queries over the ORM.

The service builds a ``PostFilter`` and hands it to ``find_all``;
query construction stays here so the service never touches
querysets directly.
"""

from dataclasses import dataclass

from django.core.paginator import EmptyPage, Paginator
from django.db.models import Prefetch, QuerySet

from server.apps.blogs.models import Blog
from server.apps.posts.models import Post, PostAttachment, PostCategory, PostTag


@dataclass(frozen=True, slots=True)
class PostFilter:
    """Criteria for listing posts.

    ``None`` means "do not filter on this"; an empty collection
    matches nothing.
    """

    blogs: frozenset[Blog] | None = None
    post_tags: frozenset[PostTag] | None = None
    category: PostCategory | None = None


def with_relations(queryset: QuerySet[Post]) -> QuerySet[Post]:
    """Load everything needed to map posts to DTOs in a fixed number of queries."""
    return queryset.select_related('blog').prefetch_related(
        'post_tags',
        Prefetch(
            'post_attachments',
            queryset=PostAttachment.objects.select_related('attachment'),
        ),
    )


def filter_posts(post_filter: PostFilter) -> QuerySet[Post]:
    """Translate a ``PostFilter`` into a queryset, newest first."""
    queryset = Post.objects.all()

    if post_filter.blogs is not None:
        queryset = queryset.filter(blog__in=post_filter.blogs)
    if post_filter.post_tags is not None:
        # Any of the tags matches; distinct ids avoid duplicate rows
        tagged_ids = Post.objects.filter(
            post_tags__in=post_filter.post_tags,
        ).values('id')
        queryset = queryset.filter(id__in=tagged_ids)
    if post_filter.category is not None:
        queryset = queryset.filter(category=post_filter.category)

    return queryset.order_by('-created_at', '-id')


def find_all(
    post_filter: PostFilter,
    page_number: int,
    page_size: int,
) -> tuple[list[Post], int]:
    """Run a filtered, paginated query.

    Args:
        post_filter: Filter criteria.
        page_number: 1-based page number.
        page_size: Posts per page.

    Returns:
        Posts on the requested page and the total number of matches.
        Pages past the end are empty.
    """
    paginator = Paginator(with_relations(filter_posts(post_filter)), page_size)
    try:
        page = paginator.page(page_number)
    except EmptyPage:
        return [], paginator.count
    return list(page.object_list), paginator.count
