"""Business logic for the post lifecycle.

Creation, update, deletion, retrieval, listing and search of posts.
Write operations run in a single database transaction, check
ownership against an explicitly passed principal and invalidate the
post caches before returning.
"""

import hashlib
import json
import logging
from collections.abc import Sequence
from functools import cache
from typing import Any, BinaryIO, Final

from django.conf import settings
from django.core.exceptions import ValidationError
from django.core.files.base import File as DjangoFile
from django.db import transaction

from server.apps.blogs.logic.blog_operations import (
    get_active_blog,
    get_blog_by_name,
)
from server.apps.blogs.models import Blog
from server.apps.files.logic.file_operations import create_file, delete_file
from server.apps.files.models import Attachment
from server.apps.posts.exceptions import (
    InvalidAttachmentOrderError,
    PostAccessDeniedError,
    PostNotFoundError,
)
from server.apps.posts.infrastructure.cache import (
    POSTS_CACHE,
    POSTS_PAGE_CACHE,
    PostCache,
)
from server.apps.posts.infrastructure.search import PostSearchIndex
from server.apps.posts.logic.tag_operations import find_or_create_all, get_tags
from server.apps.posts.models import Post, PostCategory
from server.apps.posts.repositories import PostFilter, find_all, with_relations
from server.apps.posts.schemas import (
    PostPage,
    PostRequest,
    PostResponse,
    to_post,
    to_post_page,
    to_post_response,
)

# Django user or AnonymousUser acting on the request
_Principal = Any
_Upload = BinaryIO | DjangoFile

MANAGE_POST_PERMISSION: Final = 'posts.manage_post'

_DEFAULT_PAGE_SIZE: Final = 20

logger = logging.getLogger(__name__)


@cache
def get_post_cache() -> PostCache:
    """Get the shared post cache."""
    return PostCache()


def get_page_size() -> int:
    """Get default page size.

    Returns:
        Page size from settings or default of 20.
    """
    return getattr(settings, 'POSTS_PAGE_SIZE', _DEFAULT_PAGE_SIZE)


def is_strict_attachment_order() -> bool:
    """Whether invalid attachment orderings are rejected instead of skipped."""
    return getattr(settings, 'POSTS_STRICT_ATTACHMENT_ORDER', False)


def create_new_post(
    request: PostRequest,
    files: Sequence[_Upload],
    blog: Blog,
) -> PostResponse:
    """Create a post, optionally as a reply.

    Uploaded files become the attachments in upload order. Tag names
    are resolved through the tag registry, each distinct name once.

    Args:
        request: Validated post payload.
        files: Uploaded files.
        blog: Blog publishing the post.

    Returns:
        Response DTO of the created post.

    Raises:
        PostNotFoundError: If ``parent_post_id`` does not exist.
    """
    with transaction.atomic():
        parent = None
        if request.parent_post_id is not None:
            parent = get_post(request.parent_post_id)

        post = to_post(request)
        post.blog = blog
        if parent is not None:
            parent.add_reply(post)
        post.save()

        post.set_attachments([create_file(upload, blog) for upload in files])
        for post_tag in find_or_create_all(request.post_tags or []):
            post.add_post_tag(post_tag)

        if parent is not None:
            parent.save(update_fields=['updated_at'])

    logger.info(
        'Post created: ID=%d, blog=%s, attachments=%d, parent=%s',
        post.id,
        blog.blog_name,
        len(files),
        post.parent_id,
    )
    post_cache = get_post_cache()
    post_cache.invalidate_all(POSTS_PAGE_CACHE)
    if parent is not None:
        post_cache.invalidate(POSTS_CACHE, parent.id)
    return to_post_response(_load_post(post.id))


def update_post(
    post_id: int,
    request: PostRequest,
    files: Sequence[_Upload],
    principal: _Principal,
) -> PostResponse:
    """Update a post owned by the principal's active blog.

    Attachments missing from ``request.attachments`` are deleted. When
    the requested ordering only references remaining attachments, it
    becomes the new order and uploaded files are inserted at
    ``request.attachment_insertions``. Otherwise the reordering step is
    skipped (or rejected when strict ordering is configured). New tags
    are added; existing tags are kept.

    Args:
        post_id: Id of the post to update.
        request: Validated post payload.
        files: Newly uploaded files.
        principal: User performing the update.

    Returns:
        Response DTO of the updated post.

    Raises:
        PostNotFoundError: If the post does not exist.
        PostAccessDeniedError: If the principal may not modify the post.
        InvalidAttachmentOrderError: On bad insert positions, or on a bad
            ordering when strict ordering is configured.
    """
    with transaction.atomic():
        post = get_post(post_id)
        check_ownership(post, principal)

        post.title = request.title
        post.content = request.content
        post.is_sensitive = bool(request.sensitive)
        post.published = bool(request.published)
        post.save()

        _reconcile_attachments(post, request, files)

        for post_tag in find_or_create_all(request.post_tags or []):
            post.add_post_tag(post_tag)

    logger.info('Post updated: ID=%d', post_id)
    _invalidate_post(post_id)
    return to_post_response(_load_post(post_id))


def delete_post(post_id: int, principal: _Principal) -> None:
    """Delete a post and all of its attachments.

    Attachment files are removed before the post record. Replies stay
    and lose their parent link.

    Args:
        post_id: Id of the post to delete.
        principal: User performing the deletion.

    Raises:
        PostNotFoundError: If the post does not exist.
        PostAccessDeniedError: If the principal may not modify the post.
    """
    with transaction.atomic():
        post = get_post(post_id)
        check_ownership(post, principal)

        for attachment in post.get_attachments():
            delete_file(attachment.id)
        # Replies lose their parent link on delete
        reply_ids = list(post.replies.values_list('id', flat=True))
        post.delete()

    logger.info('Post deleted: ID=%d', post_id)
    _invalidate_post(post_id, *reply_ids)


def get_post(post_id: int | None) -> Post:
    """Get post by id.

    Raises:
        PostNotFoundError: If the post does not exist.
    """
    if post_id is None:
        raise PostNotFoundError(post_id)
    try:
        return Post.objects.select_related('blog').get(id=post_id)
    except Post.DoesNotExist as error:
        raise PostNotFoundError(post_id) from error


def get_post_response(post_id: int) -> PostResponse:
    """Get post response DTO by id, cached per post.

    Raises:
        PostNotFoundError: If the post does not exist.
    """
    post_cache = get_post_cache()
    cached = post_cache.get(POSTS_CACHE, post_id)
    if cached is not None:
        return cached

    response = to_post_response(_load_post(post_id))
    post_cache.set(POSTS_CACHE, post_id, response)
    return response


def get_posts(
    blog_names: Sequence[str] | None = None,
    category: str | None = None,
    tag_names: Sequence[str] | None = None,
    page_number: int = 1,
    page_size: int | None = None,
) -> PostPage:
    """List posts, newest first.

    Without a category only root posts (no replies) are listed.

    Args:
        blog_names: Only posts of these blogs.
        category: Post category name ('ROOT' or 'REPLY').
        tag_names: Only posts carrying at least one of these tags.
        page_number: 1-based page number.
        page_size: Posts per page; defaults to settings.

    Returns:
        Requested page of posts.

    Raises:
        BlogNotFoundError: If a blog name does not exist.
        ValidationError: On an unknown category or bad paging values.
    """
    page_size = get_page_size() if page_size is None else page_size
    _validate_paging(page_number, page_size)
    post_filter = build_post_filter(blog_names, category, tag_names)

    cache_key = _page_cache_key(
        blog_names,
        post_filter.category,
        tag_names,
        page_number,
        page_size,
    )
    post_cache = get_post_cache()
    cached = post_cache.get(POSTS_PAGE_CACHE, cache_key)
    if cached is not None:
        return cached

    posts, total = find_all(post_filter, page_number, page_size)
    page = to_post_page(posts, page_number, page_size, total)
    post_cache.set(POSTS_PAGE_CACHE, cache_key, page)
    return page


def build_post_filter(
    blog_names: Sequence[str] | None,
    category: str | None,
    tag_names: Sequence[str] | None,
) -> PostFilter:
    """Resolve listing parameters into a ``PostFilter``.

    Raises:
        BlogNotFoundError: If a blog name does not exist.
        ValidationError: On an unknown category.
    """
    blogs = None
    if blog_names:
        blogs = frozenset(get_blog_by_name(name) for name in blog_names)

    post_tags = None
    if tag_names:
        post_tags = frozenset(get_tags(tag_names))

    if category:
        try:
            post_category = PostCategory(category)
        except ValueError as error:
            raise ValidationError(
                f'Unknown post category: {category}',
            ) from error
    else:
        post_category = PostCategory.ROOT

    return PostFilter(
        blogs=blogs,
        post_tags=post_tags,
        category=post_category,
    )


def search_posts(
    query: str,
    page_number: int = 1,
    page_size: int | None = None,
) -> PostPage:
    """Fuzzy full-text search over posts.

    Matches title, content, blog names and tag names with up to two
    edits per query term.

    Raises:
        ValidationError: On bad paging values.
    """
    page_size = get_page_size() if page_size is None else page_size
    _validate_paging(page_number, page_size)

    result = PostSearchIndex().search(
        query,
        offset=(page_number - 1) * page_size,
        limit=page_size,
    )
    return to_post_page(result.hits, page_number, page_size, result.total)


def check_ownership(post: Post, principal: _Principal) -> None:
    """Allow the owning blog or a holder of the manage permission.

    Args:
        post: Post about to be modified.
        principal: Django user or AnonymousUser.

    Raises:
        PostAccessDeniedError: For anonymous principals and non-owners
            without the ``posts.manage_post`` permission.
    """
    if principal is None or principal.is_anonymous:
        logger.warning('Anonymous access to post %d denied', post.id)
        raise PostAccessDeniedError('User is anonymous.')

    active_blog = get_active_blog(principal)
    is_owner = active_blog is not None and active_blog.pk == post.blog_id
    if not is_owner and not principal.has_perm(MANAGE_POST_PERMISSION):
        logger.warning(
            'User %s denied access to post %d',
            principal.username,
            post.id,
        )
        raise PostAccessDeniedError('User does not own post.')


def _reconcile_attachments(
    post: Post,
    request: PostRequest,
    files: Sequence[_Upload],
) -> None:
    current = post.get_attachments()
    by_id = {attachment.id: attachment for attachment in current}

    # Checked before anything is deleted so a rejected request loses nothing
    is_valid = _is_valid_ordering(request.attachments, by_id)
    if not is_valid and is_strict_attachment_order():
        raise InvalidAttachmentOrderError(
            'Attachment ordering references attachments '
            'that are not part of the post.',
        )
    positions: list[int] = []
    if is_valid:
        positions = _insert_positions(
            len(request.attachments),
            len(files),
            request.attachment_insertions,
        )

    retained_ids = set(request.attachments)
    for attachment in current:
        if attachment.id not in retained_ids:
            delete_file(attachment.id)

    if not is_valid:
        logger.warning(
            'Ignoring invalid attachment ordering for post %d: %s',
            post.id,
            request.attachments,
        )
        post.set_attachments([
            attachment for attachment in current
            if attachment.id in retained_ids
        ])
        return

    ordered = [by_id[attachment_id] for attachment_id in request.attachments]
    for upload, position in zip(files, positions, strict=True):
        ordered.insert(position, create_file(upload, post.blog))
    post.set_attachments(ordered)


def _is_valid_ordering(
    ordering: Sequence[int],
    attached: dict[int, Attachment],
) -> bool:
    if len(set(ordering)) != len(ordering):
        return False
    return all(attachment_id in attached for attachment_id in ordering)


def _insert_positions(
    kept_count: int,
    upload_count: int,
    insertions: Sequence[int] | None,
) -> list[int]:
    if insertions is None:
        return [kept_count + index for index in range(upload_count)]

    if len(insertions) != upload_count:
        raise InvalidAttachmentOrderError(
            f'Got {upload_count} files but {len(insertions)} insert positions.',
        )
    # Each insert grows the list, so the i-th position may be up to len + i
    for index, position in enumerate(insertions):
        if not 0 <= position <= kept_count + index:
            raise InvalidAttachmentOrderError(
                f'Insert position {position} is out of range.',
            )
    return list(insertions)


def _load_post(post_id: int) -> Post:
    post = with_relations(Post.objects.filter(id=post_id)).first()
    if post is None:
        raise PostNotFoundError(post_id)
    return post


def _invalidate_post(*post_ids: int) -> None:
    post_cache = get_post_cache()
    for post_id in post_ids:
        post_cache.invalidate(POSTS_CACHE, post_id)
    post_cache.invalidate_all(POSTS_PAGE_CACHE)


def _validate_paging(page_number: int, page_size: int) -> None:
    if page_number < 1:
        raise ValidationError('Page number must be at least 1.')
    if page_size < 1:
        raise ValidationError('Page size must be at least 1.')


def _page_cache_key(
    blog_names: Sequence[str] | None,
    category: PostCategory | None,
    tag_names: Sequence[str] | None,
    page_number: int,
    page_size: int,
) -> str:
    payload = json.dumps(
        [
            sorted(blog_names or []),
            str(category),
            sorted(tag_names or []),
            page_number,
            page_size,
        ],
    )
    return hashlib.sha256(payload.encode()).hexdigest()
