"""Tests for post service business logic."""

import uuid

import pytest

from blog_api.core.exceptions import InvalidIdentifierError, InvalidImageURLError, NotFoundError
from blog_api.modules.posts.service import PostService, image_url_prefix
from blog_api.schemas.post import PostCreate, PostUpdate

PUBLIC_URL = "http://localhost:9000"


@pytest.fixture
def service(memory_store):
    return PostService(memory_store, image_url_prefix(PUBLIC_URL, "blog"))


@pytest.fixture
def payload(trusted_image_url):
    return PostCreate(
        title="Hello",
        description="Greeting",
        image=trusted_image_url(),
        author="alice",
    )


class TestPostCreation:
    def test_create_assigns_id_and_date(self, service, payload, memory_store):
        post = service.create_post(payload)

        assert isinstance(post.id, uuid.UUID)
        assert post.date is not None
        assert memory_store.exists(post.id)

    def test_foreign_image_is_rejected_before_storage(self, service, memory_store):
        payload = PostCreate(
            title="Hello",
            description="Greeting",
            image="https://evil.example.com/cat.jpg",
            author="alice",
        )

        with pytest.raises(InvalidImageURLError) as exc:
            service.create_post(payload)

        assert exc.value.code == "INVALID_IMAGE_URL"
        assert memory_store.posts == {}

    @pytest.mark.parametrize(
        "image",
        [
            "http://localhost:9000.evil.com/blog/uploads/cat.jpg",
            "http://localhost:90001/blog/uploads/cat.jpg",
            "http://localhost:9000/other-bucket/uploads/cat.jpg",
            "http://localhost:9000/blogger/cat.jpg",
        ],
    )
    def test_lookalike_image_urls_are_rejected(self, service, image):
        payload = PostCreate(title="Hello", description="Greeting", image=image, author="alice")

        with pytest.raises(InvalidImageURLError):
            service.create_post(payload)

    def test_prefix_ignores_trailing_slash_on_public_url(self):
        assert image_url_prefix("http://cdn.test/", "blog") == "http://cdn.test/blog/"

    def test_editor_content_is_stored_as_document(self, service, trusted_image_url):
        payload = PostCreate(
            title="Rich",
            description="Blocks",
            image=trusted_image_url(),
            author="alice",
            content={"blocks": [{"type": "header", "data": {"text": "Hi", "level": 2}}], "time": 1},
        )

        post = service.create_post(payload)

        assert post.content["blocks"][0]["type"] == "header"
        assert post.content["time"] == 1


class TestPostLookup:
    def test_malformed_id(self, service):
        with pytest.raises(InvalidIdentifierError) as exc:
            service.get_post("not-a-uuid")
        assert exc.value.code == "INVALID_POST_ID"

    def test_unknown_id(self, service):
        with pytest.raises(NotFoundError) as exc:
            service.get_post(str(uuid.uuid4()))
        assert exc.value.code == "POST_NOT_FOUND"

    def test_existing_post(self, service, payload):
        created = service.create_post(payload)
        assert service.get_post(str(created.id)) is created


class TestPostUpdate:
    def test_only_present_fields_change(self, service, payload):
        post = service.create_post(payload)

        updated = service.update_post(str(post.id), PostUpdate(title="Renamed"))

        assert updated.title == "Renamed"
        assert updated.description == "Greeting"
        assert updated.author == "alice"

    def test_null_subtitle_clears_it(self, service, trusted_image_url):
        post = service.create_post(
            PostCreate(
                title="t", subtitle="sub", description="d", image=trusted_image_url(), author="a"
            )
        )

        updated = service.update_post(post.id, PostUpdate.model_validate({"subtitle": None}))

        assert updated.subtitle is None

    def test_foreign_image_rejected_on_update(self, service, payload):
        post = service.create_post(payload)

        with pytest.raises(InvalidImageURLError):
            service.update_post(post.id, PostUpdate(image="https://elsewhere.test/x.png"))

        assert service.get_post(post.id).image == payload.image

    def test_malformed_id_checked_first(self, service):
        with pytest.raises(InvalidIdentifierError):
            service.update_post("123", PostUpdate(title="x"))

    def test_unknown_post(self, service):
        with pytest.raises(NotFoundError):
            service.update_post(uuid.uuid4(), PostUpdate(title="x"))


class TestPostDeletion:
    def test_delete(self, service, payload, memory_store):
        post = service.create_post(payload)
        service.delete_post(str(post.id))
        assert not memory_store.exists(post.id)

    def test_delete_unknown(self, service):
        with pytest.raises(NotFoundError) as exc:
            service.delete_post(str(uuid.uuid4()))
        assert exc.value.code == "POST_NOT_FOUND"

    def test_delete_malformed(self, service):
        with pytest.raises(InvalidIdentifierError):
            service.delete_post("zzz")
