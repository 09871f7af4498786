"""Tests for the post lifecycle: create, update, delete."""

from unittest.mock import patch

import pytest
from django.contrib.auth.models import AnonymousUser
from django.core.files.storage import default_storage
from django.db.models.signals import pre_delete

from server.apps.files.infrastructure.storage import FileStorage
from server.apps.files.logic import file_operations
from server.apps.files.models import Attachment
from server.apps.posts.exceptions import (
    InvalidAttachmentOrderError,
    PostAccessDeniedError,
    PostNotFoundError,
)
from server.apps.posts.logic.post_operations import (
    create_new_post,
    delete_post,
    get_post,
    get_post_response,
    update_post,
)
from server.apps.posts.models import Post, PostCategory, PostTag
from server.apps.posts.schemas import PostRequest


def _filenames(response):
    return [attachment.filename for attachment in response.attachments]


def _attachment_ids(response):
    return [attachment.id for attachment in response.attachments]


# Creation


@pytest.mark.django_db
def test_create_post_with_files_keeps_upload_order(blog, mock_s3, make_upload):
    """Test N uploads become N attachments in upload order."""
    files = [make_upload(f'{name}.png') for name in ('first', 'second', 'third')]

    response = create_new_post(
        PostRequest(title='Trip', content='Photos', published=True),
        files,
        blog,
    )

    assert _filenames(response) == ['first.png', 'second.png', 'third.png']
    assert response.blog.blog_name == 'testuser'
    assert response.published is True
    assert response.sensitive is False
    assert response.category == PostCategory.ROOT
    links = Post.objects.get(id=response.id).post_attachments.all()
    assert [link.position for link in links] == [0, 1, 2]


@pytest.mark.django_db
def test_create_post_deduplicates_tags(blog, make_post):
    """Test repeated tag names resolve to one tag each."""
    PostTag.objects.create(name='travel')

    response = make_post(blog, post_tags=['travel', ' food ', 'travel', ''])

    assert response.post_tags == ['food', 'travel']
    assert PostTag.objects.count() == 2


@pytest.mark.django_db
def test_create_reply_links_parent(blog, other_blog, make_post):
    """Test a reply is listed in the parent's replies."""
    parent = make_post(blog, title='Question')

    reply = make_post(other_blog, title='Answer', parent_post_id=parent.id)

    parent_post = Post.objects.get(id=parent.id)
    assert list(parent_post.replies.values_list('id', flat=True)) == [reply.id]
    assert reply.category == PostCategory.REPLY
    assert reply.parent_post_id == parent.id


@pytest.mark.django_db
def test_create_reply_to_missing_parent(blog, make_post):
    """Test replying to a missing post fails and creates nothing."""
    with pytest.raises(PostNotFoundError):
        make_post(blog, parent_post_id=424242)

    assert not Post.objects.exists()


# Update


@pytest.mark.django_db
def test_update_post_fields(user, blog, make_post):
    """Test title, content and flags are replaced."""
    post = make_post(blog, title='Draft', sensitive=True, published=True)

    response = update_post(
        post.id,
        PostRequest(title='Final', content='Body'),
        [],
        user,
    )

    assert response.title == 'Final'
    assert response.content == 'Body'
    # Missing flags reset to False
    assert response.sensitive is False
    assert response.published is False


@pytest.mark.django_db
def test_update_post_adds_tags_and_keeps_existing(user, blog, make_post):
    """Test new tags are added without dropping old ones."""
    post = make_post(blog, post_tags=['old'])

    response = update_post(
        post.id,
        PostRequest(title='Hello', post_tags=['new']),
        [],
        user,
    )

    assert response.post_tags == ['new', 'old']


@pytest.mark.django_db
def test_update_post_not_found(user):
    """Test updating a missing post."""
    with pytest.raises(PostNotFoundError):
        update_post(424242, PostRequest(), [], user)


@pytest.mark.django_db
def test_update_removes_attachments_not_retained(
    user,
    blog,
    mock_s3,
    make_post,
    make_upload,
    django_capture_on_commit_callbacks,
):
    """Test exactly the complement of the retained ids is deleted."""
    post = make_post(blog, files=[make_upload(f'{index}.png') for index in range(3)])
    first, second, third = _attachment_ids(post)
    removed_name = Attachment.objects.get(id=second).file.name

    with django_capture_on_commit_callbacks(execute=True):
        response = update_post(
            post.id,
            PostRequest(title='Hello', attachments=[first, third]),
            [],
            user,
        )

    assert _attachment_ids(response) == [first, third]
    assert set(Attachment.objects.values_list('id', flat=True)) == {first, third}
    assert not default_storage.exists(removed_name)
    links = Post.objects.get(id=post.id).post_attachments.all()
    assert [link.position for link in links] == [0, 1]


@pytest.mark.django_db
def test_update_reorders_attachments(user, blog, mock_s3, make_post, make_upload):
    """Test a valid ordering becomes the new attachment order."""
    post = make_post(blog, files=[make_upload(f'{index}.png') for index in range(3)])
    first, second, third = _attachment_ids(post)

    response = update_post(
        post.id,
        PostRequest(title='Hello', attachments=[third, first, second]),
        [],
        user,
    )

    assert _attachment_ids(response) == [third, first, second]


@pytest.mark.django_db
def test_update_inserts_uploads_at_positions(
    user,
    blog,
    mock_s3,
    make_post,
    make_upload,
):
    """Test new uploads land at the requested positions."""
    post = make_post(blog, files=[make_upload('a.png'), make_upload('b.png')])
    first, second = _attachment_ids(post)

    response = update_post(
        post.id,
        PostRequest(
            title='Hello',
            attachments=[first, second],
            attachment_insertions=[0, 2],
        ),
        [make_upload('new0.png'), make_upload('new2.png')],
        user,
    )

    assert _filenames(response) == ['new0.png', 'a.png', 'new2.png', 'b.png']


@pytest.mark.django_db
def test_update_appends_uploads_without_positions(
    user,
    blog,
    mock_s3,
    make_post,
    make_upload,
):
    """Test uploads are appended when no positions are given."""
    post = make_post(blog, files=[make_upload('a.png')])

    response = update_post(
        post.id,
        PostRequest(title='Hello', attachments=_attachment_ids(post)),
        [make_upload('b.png')],
        user,
    )

    assert _filenames(response) == ['a.png', 'b.png']


@pytest.mark.django_db
def test_update_with_unknown_id_in_ordering_keeps_attachments(
    user,
    blog,
    mock_s3,
    make_post,
    make_upload,
):
    """Test an ordering naming a foreign id leaves the list unchanged.

    The reorder step is skipped silently in this mode, uploads included;
    strict mode below rejects the request instead.
    """
    post = make_post(blog, files=[make_upload('a.png'), make_upload('b.png')])
    first, second = _attachment_ids(post)

    response = update_post(
        post.id,
        PostRequest(title='Changed', attachments=[second, first, 999999]),
        [make_upload('ignored.png')],
        user,
    )

    assert _attachment_ids(response) == [first, second]
    assert response.title == 'Changed'
    assert Attachment.objects.count() == 2


@pytest.mark.django_db
def test_update_with_unknown_id_rejected_in_strict_mode(
    user,
    blog,
    mock_s3,
    make_post,
    make_upload,
    settings,
):
    """Test strict ordering rejects the request and loses nothing."""
    settings.POSTS_STRICT_ATTACHMENT_ORDER = True
    post = make_post(blog, files=[make_upload('a.png'), make_upload('b.png')])
    first, second = _attachment_ids(post)

    with pytest.raises(InvalidAttachmentOrderError):
        update_post(
            post.id,
            PostRequest(title='Changed', attachments=[999999]),
            [],
            user,
        )

    assert get_post(post.id).title == 'Hello'
    assert _attachment_ids(get_post_response(post.id)) == [first, second]
    assert all(
        default_storage.exists(attachment.file.name)
        for attachment in Attachment.objects.all()
    )


@pytest.mark.django_db
def test_update_with_out_of_range_insert_position(
    user,
    blog,
    mock_s3,
    make_post,
    make_upload,
):
    """Test insert positions past the end are rejected."""
    post = make_post(blog, files=[make_upload('a.png')])

    with pytest.raises(InvalidAttachmentOrderError):
        update_post(
            post.id,
            PostRequest(
                title='Hello',
                attachments=_attachment_ids(post),
                attachment_insertions=[5],
            ),
            [make_upload('b.png')],
            user,
        )

    assert Attachment.objects.count() == 1


@pytest.mark.django_db
def test_update_invalidates_post_cache(user, blog, make_post):
    """Test a cached post is refreshed after an update."""
    post = make_post(blog, title='Before')
    assert get_post_response(post.id).title == 'Before'

    update_post(post.id, PostRequest(title='After'), [], user)

    assert get_post_response(post.id).title == 'After'


# Authorization


@pytest.mark.django_db
def test_update_by_non_owner_denied(other_user, blog, make_post):
    """Test another user's active blog cannot edit the post."""
    post = make_post(blog, title='Mine')

    with pytest.raises(PostAccessDeniedError, match='does not own'):
        update_post(post.id, PostRequest(title='Hijacked'), [], other_user)

    assert get_post(post.id).title == 'Mine'


@pytest.mark.django_db
def test_update_by_anonymous_denied(blog, make_post):
    """Test anonymous principals are rejected."""
    post = make_post(blog, title='Mine')

    with pytest.raises(PostAccessDeniedError, match='anonymous'):
        update_post(post.id, PostRequest(title='Hijacked'), [], AnonymousUser())

    assert get_post(post.id).title == 'Mine'


@pytest.mark.django_db
def test_update_by_manager_allowed(manager_user, blog, make_post):
    """Test the manage permission overrides ownership."""
    post = make_post(blog, title='Spam')

    response = update_post(post.id, PostRequest(title='Moderated'), [], manager_user)

    assert response.title == 'Moderated'


@pytest.mark.django_db
def test_delete_by_non_owner_denied(other_user, blog, make_post):
    """Test another user cannot delete the post."""
    post = make_post(blog)

    with pytest.raises(PostAccessDeniedError):
        delete_post(post.id, other_user)

    assert Post.objects.filter(id=post.id).exists()


# Deletion


@pytest.mark.django_db
def test_delete_post_removes_attachments_first(
    user,
    blog,
    mock_s3,
    make_post,
    make_upload,
    django_capture_on_commit_callbacks,
):
    """Test attachments are deleted before the post record."""
    post = make_post(blog, files=[make_upload('a.png'), make_upload('b.png')])
    storage_names = list(Attachment.objects.values_list('file', flat=True))
    events = []

    def record_post_delete(sender, instance, **kwargs):
        events.append('post')

    def record_file_delete(file_id):
        events.append('file')
        real_delete_file(file_id)

    real_delete_file = file_operations.delete_file
    pre_delete.connect(record_post_delete, sender=Post)
    try:
        with patch(
            'server.apps.posts.logic.post_operations.delete_file',
            side_effect=record_file_delete,
        ):
            with django_capture_on_commit_callbacks(execute=True):
                delete_post(post.id, user)
    finally:
        pre_delete.disconnect(record_post_delete, sender=Post)

    assert events == ['file', 'file', 'post']
    assert not Attachment.objects.exists()
    assert not any(default_storage.exists(name) for name in storage_names)
    with pytest.raises(PostNotFoundError):
        get_post(post.id)


@pytest.mark.django_db
def test_delete_post_drops_cached_response(user, blog, make_post):
    """Test a cached post is not served after deletion."""
    post = make_post(blog)
    get_post_response(post.id)

    delete_post(post.id, user)

    with pytest.raises(PostNotFoundError):
        get_post_response(post.id)


@pytest.mark.django_db
def test_delete_parent_keeps_replies(user, blog, other_blog, make_post):
    """Test replies survive their parent's deletion."""
    parent = make_post(blog)
    reply = make_post(other_blog, parent_post_id=parent.id)

    delete_post(parent.id, user)

    orphan = get_post(reply.id)
    assert orphan.parent_id is None
    assert orphan.category == PostCategory.REPLY


@pytest.mark.django_db
def test_get_post_none_id(db):
    """Test a missing id is reported as not found."""
    with pytest.raises(PostNotFoundError):
        get_post(None)


@pytest.mark.django_db
def test_delete_parent_refreshes_cached_replies(user, blog, other_blog, make_post):
    """Test a cached reply drops its parent link once the parent is gone."""
    parent = make_post(blog)
    reply = make_post(other_blog, parent_post_id=parent.id)
    assert get_post_response(reply.id).parent_post_id == parent.id

    delete_post(parent.id, user)

    assert get_post_response(reply.id).parent_post_id is None


@pytest.mark.django_db
def test_create_reply_refreshes_cached_parent(blog, other_blog, make_post):
    """Test replying drops the parent's cached response."""
    parent = make_post(blog)
    get_post_response(parent.id)

    make_post(other_blog, parent_post_id=parent.id)

    stored = Post.objects.get(id=parent.id)
    assert get_post_response(parent.id).updated_at == stored.updated_at


# Rollback between database and storage


@pytest.mark.django_db(transaction=True)
def test_failed_update_keeps_removed_attachment_bytes(
    user,
    blog,
    mock_s3,
    make_post,
    make_upload,
):
    """Test an upload failure after a removal restores row and bytes."""
    post = make_post(blog, files=[make_upload('a.png'), make_upload('b.png')])
    first, second = _attachment_ids(post)
    storage_names = list(Attachment.objects.values_list('file', flat=True))

    with patch.object(FileStorage, 'save', side_effect=OSError('S3 down')):
        with pytest.raises(OSError, match='S3 down'):
            update_post(
                post.id,
                PostRequest(title='Hello', attachments=[first]),
                [make_upload('c.png')],
                user,
            )

    assert _attachment_ids(get_post_response(post.id)) == [first, second]
    assert all(default_storage.exists(name) for name in storage_names)


@pytest.mark.django_db(transaction=True)
def test_failed_delete_keeps_attachment_bytes(
    user,
    blog,
    mock_s3,
    make_post,
    make_upload,
):
    """Test a failure after attachment removal keeps the post intact."""
    post = make_post(blog, files=[make_upload('a.png'), make_upload('b.png')])
    storage_names = list(Attachment.objects.values_list('file', flat=True))

    with patch.object(Post, 'delete', side_effect=RuntimeError('DB down')):
        with pytest.raises(RuntimeError, match='DB down'):
            delete_post(post.id, user)

    assert Attachment.objects.count() == 2
    assert _attachment_ids(get_post_response(post.id)) == _attachment_ids(post)
    assert all(default_storage.exists(name) for name in storage_names)


@pytest.mark.django_db(transaction=True)
def test_committed_delete_removes_attachment_bytes(
    user,
    blog,
    mock_s3,
    make_post,
    make_upload,
):
    """Test stored objects go away once the deletion commits."""
    post = make_post(blog, files=[make_upload('a.png')])
    storage_names = list(Attachment.objects.values_list('file', flat=True))

    delete_post(post.id, user)

    assert not any(default_storage.exists(name) for name in storage_names)
