"""Request and response DTOs for posts."""

from datetime import datetime
from typing import Final

from pydantic import BaseModel, ConfigDict, Field, field_validator

from server.apps.blogs.schemas import BlogResponse, to_blog_response
from server.apps.files.schemas import AttachmentResponse, to_attachment_response
from server.apps.posts.models import Post

_TITLE_MAX_LENGTH: Final = 255
_TAG_NAME_MAX_LENGTH: Final = 100


class PostRequest(BaseModel):
    """Payload for creating or updating a post.

    ``attachments`` lists the ids of already stored attachments to keep,
    in display order. ``attachment_insertions[i]`` is the position at
    which the i-th newly uploaded file is inserted.
    """

    title: str = Field(default='', max_length=_TITLE_MAX_LENGTH)
    content: str = ''
    sensitive: bool | None = None
    published: bool | None = None
    post_tags: list[str] | None = None
    parent_post_id: int | None = None
    attachments: list[int] = Field(default_factory=list)
    attachment_insertions: list[int] | None = None

    @field_validator('post_tags')
    @classmethod
    def _clean_tag_names(cls, tag_names: list[str] | None) -> list[str] | None:
        if tag_names is None:
            return None
        cleaned = [name.strip() for name in tag_names]
        for name in cleaned:
            if len(name) > _TAG_NAME_MAX_LENGTH:
                raise ValueError(
                    f'Tag names are limited to {_TAG_NAME_MAX_LENGTH} characters',
                )
        return [name for name in cleaned if name]


class PostResponse(BaseModel):
    """Post as returned to API clients."""

    model_config = ConfigDict(frozen=True)

    id: int
    created_at: datetime
    updated_at: datetime
    title: str
    content: str
    sensitive: bool
    published: bool
    category: str
    blog: BlogResponse
    parent_post_id: int | None
    post_tags: list[str]
    attachments: list[AttachmentResponse]


class PostPage(BaseModel):
    """One page of posts."""

    model_config = ConfigDict(frozen=True)

    content: list[PostResponse]
    page_number: int
    page_size: int
    total_elements: int

    @property
    def total_pages(self) -> int:
        """Number of pages needed for ``total_elements``."""
        if self.page_size <= 0:
            return 0
        return -(-self.total_elements // self.page_size)


def to_post(request: PostRequest) -> Post:
    """Build an unsaved Post from the request fields."""
    return Post(
        title=request.title,
        content=request.content,
        is_sensitive=bool(request.sensitive),
        published=bool(request.published),
    )


def to_post_response(post: Post) -> PostResponse:
    """Map Post entity to its response DTO."""
    return PostResponse(
        id=post.id,
        created_at=post.created_at,
        updated_at=post.updated_at,
        title=post.title,
        content=post.content,
        sensitive=post.is_sensitive,
        published=post.published,
        category=str(post.category),
        blog=to_blog_response(post.blog),
        parent_post_id=post.parent_id,
        post_tags=sorted(tag.name for tag in post.post_tags.all()),
        attachments=[
            to_attachment_response(attachment)
            for attachment in post.get_attachments()
        ],
    )


def to_post_page(
    posts: list[Post],
    page_number: int,
    page_size: int,
    total: int,
) -> PostPage:
    """Map a slice of posts to a page DTO."""
    return PostPage(
        content=[to_post_response(post) for post in posts],
        page_number=page_number,
        page_size=page_size,
        total_elements=total,
    )
