"""Django admin configuration for blogs app."""

from django.contrib import admin
from django.db.models import QuerySet
from django.http import HttpRequest

from server.apps.blogs.models import ActiveBlog, Blog, Follow


@admin.register(Blog)
class BlogAdmin(admin.ModelAdmin):
    """Admin interface for Blog model."""

    list_display = [
        'blog_name',
        'preferred_blog_name',
        'user',
        'is_private',
        'created_at',
    ]

    list_filter = [
        'is_private',
        'created_at',
    ]

    search_fields = [
        'blog_name',
        'preferred_blog_name',
        'user__username',
    ]

    readonly_fields = ['created_at', 'updated_at']

    def get_queryset(self, request: HttpRequest) -> QuerySet[Blog]:
        """Optimize queryset with select_related."""
        return super().get_queryset(request).select_related('user')


@admin.register(ActiveBlog)
class ActiveBlogAdmin(admin.ModelAdmin):
    """Admin interface for ActiveBlog model."""

    list_display = ['user', 'blog']
    search_fields = ['user__username', 'blog__blog_name']


@admin.register(Follow)
class FollowAdmin(admin.ModelAdmin):
    """Admin interface for Follow model."""

    list_display = [
        'follower',
        'followee',
        'notifications_enabled',
        'muted',
        'created_at',
    ]

    list_filter = ['notifications_enabled', 'muted']

    search_fields = ['follower__blog_name', 'followee__blog_name']
