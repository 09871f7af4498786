"""Response DTOs for blogs and follows."""

from datetime import datetime

from pydantic import BaseModel, ConfigDict

from server.apps.blogs.models import Blog, Follow


class BlogResponse(BaseModel):
    """Blog as returned to API clients."""

    model_config = ConfigDict(frozen=True)

    id: int
    blog_name: str
    preferred_blog_name: str
    is_private: bool
    created_at: datetime


class FollowResponse(BaseModel):
    """Follow relationship as returned to API clients."""

    model_config = ConfigDict(frozen=True)

    id: int
    created_at: datetime
    follower: BlogResponse
    followee: BlogResponse
    notifications_enabled: bool
    muted: bool


def to_blog_response(blog: Blog) -> BlogResponse:
    """Map Blog entity to its response DTO."""
    return BlogResponse(
        id=blog.id,
        blog_name=blog.blog_name,
        preferred_blog_name=blog.preferred_blog_name,
        is_private=blog.is_private,
        created_at=blog.created_at,
    )


def to_follow_response(follow: Follow) -> FollowResponse:
    """Map Follow entity to its response DTO."""
    return FollowResponse(
        id=follow.id,
        created_at=follow.created_at,
        follower=to_blog_response(follow.follower),
        followee=to_blog_response(follow.followee),
        notifications_enabled=follow.notifications_enabled,
        muted=follow.muted,
    )
