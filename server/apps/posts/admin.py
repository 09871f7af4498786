"""Django admin configuration for posts app."""

from django.contrib import admin
from django.db.models import QuerySet
from django.http import HttpRequest

from server.apps.posts.models import Post, PostAttachment, PostTag


class PostAttachmentInline(admin.TabularInline):
    """Ordered attachments shown inside the post form."""

    model = PostAttachment
    extra = 0
    ordering = ['position']
    raw_id_fields = ['attachment']


@admin.register(Post)
class PostAdmin(admin.ModelAdmin):
    """Admin interface for Post model."""

    list_display = [
        'id',
        'title',
        'blog',
        'category',
        'published',
        'is_sensitive',
        'created_at',
    ]

    list_filter = [
        'category',
        'published',
        'is_sensitive',
        'created_at',
    ]

    search_fields = [
        'title',
        'content',
        'blog__blog_name',
        'post_tags__name',
    ]

    raw_id_fields = ['blog', 'parent']
    filter_horizontal = ['post_tags']
    readonly_fields = ['created_at', 'updated_at']
    inlines = [PostAttachmentInline]

    fieldsets = (
        ('Post', {
            'fields': ('blog', 'title', 'content'),
        }),
        ('Flags', {
            'fields': ('published', 'is_sensitive'),
        }),
        ('Thread', {
            'fields': ('category', 'parent'),
        }),
        ('Tags', {
            'fields': ('post_tags',),
        }),
        ('Timestamps', {
            'fields': ('created_at', 'updated_at'),
        }),
    )

    def get_queryset(self, request: HttpRequest) -> QuerySet[Post]:
        """Optimize queryset with select_related."""
        return super().get_queryset(request).select_related('blog')


@admin.register(PostTag)
class PostTagAdmin(admin.ModelAdmin):
    """Admin interface for PostTag model."""

    list_display = ['name', 'post_count', 'created_at']
    search_fields = ['name']
    readonly_fields = ['created_at']

    @admin.display(description='Posts')
    def post_count(self, obj: PostTag) -> int:
        """Count of posts with this tag."""
        return obj.posts.count()
