"""
Tests for the in-memory and MongoDB content stores.
"""

from unittest.mock import MagicMock, patch

import pytest
from pymongo.errors import PyMongoError

from property_feed_sync.exceptions import ImageError, StoreError
from property_feed_sync.mapping.keys import AttachmentMetaKey, MetaKey
from property_feed_sync.store.base import FEATURED_IMAGE_KEY
from property_feed_sync.store.mongo import MongoContentStore


def create_property(store, title="Flat A", **fields):
    return store.create_entity({"post_type": "property", "post_status": "publish", "post_title": title, **fields})


class TestInMemoryEntities:

    def test_ids_are_sequential(self, store):
        assert create_property(store) == 1
        assert create_property(store) == 2

    def test_create_requires_post_type(self, store):
        with pytest.raises(StoreError):
            store.create_entity({"post_title": "x"})

    def test_update_missing_entity(self, store):
        with pytest.raises(StoreError, match="does not exist"):
            store.update_entity(99, {"post_title": "x"})

    def test_find_by_title_and_meta(self, store):
        first = create_property(store, "Flat A")
        second = create_property(store, "Flat B")
        store.add_metadata(second, MetaKey.JSON_ID.value, "7")

        assert store.find_entities("property", title="Flat A") == [first]
        assert store.find_entities("property", title="flat a") == []
        assert store.find_entities("property", meta={MetaKey.JSON_ID.value: "7"}) == [second]
        assert store.find_entities("attachment") == []
        assert store.find_entities("property", limit=1) == [first]

    def test_trashed_entities_excluded(self, store):
        entity_id = create_property(store)
        store.trash_entity(entity_id)
        assert store.find_entities("property", title="Flat A") == []
        assert store.find_entities("property", title="Flat A", include_trashed=True) == [entity_id]

    def test_returned_fields_are_copies(self, store):
        entity_id = create_property(store)
        store.get_entity(entity_id)["post_title"] = "changed"
        assert store.get_entity(entity_id)["post_title"] == "Flat A"


class TestInMemoryMetadata:

    def test_repeated_keys_and_unique(self, store):
        entity_id = create_property(store)
        store.add_metadata(entity_id, "k", "a")
        store.add_metadata(entity_id, "k", "b")
        assert store.add_metadata(entity_id, "k", "c", unique=True) is False

        assert store.get_metadata(entity_id, "k") == "a"
        assert store.get_metadata(entity_id, "k", single=False) == ["a", "b"]

    def test_delete_by_value(self, store):
        entity_id = create_property(store)
        for value in ("a", "b", "a"):
            store.add_metadata(entity_id, "k", value)
        assert store.delete_metadata(entity_id, "k", "a") == 2
        assert store.get_metadata(entity_id, "k", single=False) == ["b"]

    def test_set_metadata_overwrites(self, store):
        entity_id = create_property(store)
        store.set_metadata(entity_id, "k", 1)
        store.set_metadata(entity_id, "k", 2)
        assert store.get_metadata(entity_id, "k", single=False) == [2]

    def test_taxonomy_replace_and_append(self, store):
        entity_id = create_property(store)
        store.set_taxonomy_terms(entity_id, "property_label", ["New", "New", "Featured"])
        store.set_taxonomy_terms(entity_id, "property_label", ["Sold"], append=True)
        assert store.get_taxonomy_terms(entity_id, "property_label") == ["New", "Featured", "Sold"]

        store.set_taxonomy_terms(entity_id, "property_label", ["Reserved"])
        assert store.get_taxonomy_terms(entity_id, "property_label") == ["Reserved"]

    def test_featured_image(self, store):
        entity_id = create_property(store)
        assert store.get_featured_image(entity_id) is None
        store.set_featured_image(entity_id, 5)
        assert store.get_featured_image(entity_id) == 5
        assert store.get_metadata(entity_id, FEATURED_IMAGE_KEY, single=False) == [5]


class TestGalleryAttachments:

    def test_replace_writes_one_entry_per_id(self, store):
        entity_id = create_property(store)
        store.replace_gallery_attachments(entity_id, [11, 12, 13])

        assert store.get_metadata(entity_id, MetaKey.GALLERY_IMAGES.value, single=False) == ["11", "12", "13"]
        assert store.get_gallery_attachments(entity_id) == [11, 12, 13]
        assert store.get_metadata(entity_id, MetaKey.GALLERY_IMAGES_COUNT.value) == 3
        assert store.get_metadata(entity_id, MetaKey.GALLERY_MEDIA_TYPE.value) == "image"

    def test_replace_with_empty_clears_everything(self, store):
        entity_id = create_property(store)
        store.replace_gallery_attachments(entity_id, [11, 12])
        store.replace_gallery_attachments(entity_id, [])

        assert store.get_gallery_attachments(entity_id) == []
        assert store.get_metadata(entity_id, MetaKey.GALLERY_IMAGES_COUNT.value) is None
        assert store.get_metadata(entity_id, MetaKey.GALLERY_MEDIA_TYPE.value) is None


class TestMediaOperations:

    def test_import_remote_image(self, store, fetcher, media_root):
        owner = create_property(store)
        attachment_id = store.import_remote_image("http://x/photos/1.jpg", owner, "Flat A")

        attachment = store.get_entity(attachment_id)
        assert attachment["post_type"] == "attachment"
        assert attachment["post_parent"] == owner
        assert attachment["post_mime_type"] == "image/png"
        assert store.get_metadata(attachment_id, AttachmentMetaKey.ALT_TEXT.value) == "Flat A"
        assert store.get_attachment_file_path(attachment_id).is_file()
        assert store.get_attachment_file_path(attachment_id).parent.parent.parent == media_root
        assert fetcher.calls == ["http://x/photos/1.jpg"]

    def test_import_failure_creates_nothing(self, store, fetcher):
        owner = create_property(store)
        fetcher.failing_urls.add("http://x/missing.jpg")
        with pytest.raises(ImageError):
            store.import_remote_image("http://x/missing.jpg", owner)
        assert store.find_entities("attachment") == []

    def test_import_local_image(self, store, placeholder_path):
        owner = create_property(store)
        attachment_id = store.import_local_image(placeholder_path, owner, "Placeholder")
        assert store.get_entity(attachment_id)["post_title"] == "Placeholder"
        assert store.get_attachment_file_path(attachment_id).name == "default-thumbnail.png"

    def test_thumbnails_persisted(self, store):
        owner = create_property(store)
        attachment_id = store.import_remote_image("http://x/1.jpg", owner)
        path = store.get_attachment_file_path(attachment_id)

        metadata = store.generate_thumbnails(attachment_id, path)
        assert metadata["mime_type"] == "image/png"
        assert set(metadata["sizes"]) == {"thumbnail", "medium"}
        assert store.persist_thumbnail_metadata(attachment_id, metadata) is True
        assert store.get_metadata(attachment_id, AttachmentMetaKey.ATTACHMENT_METADATA.value) == metadata
        assert store.persist_thumbnail_metadata(attachment_id, {}) is False


class TestMongoContentStore:

    @pytest.fixture
    def collections(self):
        posts, counters = MagicMock(), MagicMock()
        counters.find_one_and_update.return_value = {"_id": "posts", "seq": 41}
        return posts, counters

    @pytest.fixture
    def mongo_store(self, collections, media_root):
        posts, counters = collections
        return MongoContentStore(posts, counters, media_root=media_root)

    def test_create_entity_uses_counter(self, mongo_store, collections):
        posts, counters = collections
        entity_id = mongo_store.create_entity({"post_type": "property", "post_title": "Flat A"})

        assert entity_id == 41
        document = posts.insert_one.call_args.args[0]
        assert document["_id"] == 41
        assert document["meta"] == [] and document["terms"] == {}

    def test_find_entities_query(self, mongo_store, collections):
        posts, _ = collections
        cursor = posts.find.return_value.sort.return_value
        cursor.limit.return_value = [{"_id": 3}]

        result = mongo_store.find_entities("property", title="Flat A", meta={"_feed_json_id": "7"}, limit=1)

        assert result == [3]
        query = posts.find.call_args.args[0]
        assert query == {"$and": [
            {"post_type": "property"},
            {"post_title": "Flat A"},
            {"post_status": {"$ne": "trash"}},
            {"meta": {"$elemMatch": {"key": "_feed_json_id", "value": "7"}}},
        ]}

    def test_find_including_trashed(self, mongo_store, collections):
        posts, _ = collections
        posts.find.return_value.sort.return_value = iter([{"_id": 1}, {"_id": 2}])

        assert mongo_store.find_entities("attachment", include_trashed=True) == [1, 2]
        assert posts.find.call_args.args[0] == {"$and": [{"post_type": "attachment"}]}

    def test_driver_errors_become_store_errors(self, mongo_store, collections):
        posts, _ = collections
        posts.find.side_effect = PyMongoError("server selection timeout")
        with pytest.raises(StoreError, match="server selection timeout"):
            mongo_store.find_entities("property")

    def test_update_missing_entity(self, mongo_store, collections):
        posts, _ = collections
        posts.update_one.return_value = MagicMock(matched_count=0)
        with pytest.raises(StoreError, match="does not exist"):
            mongo_store.update_entity(5, {"post_title": "x"})

    def test_metadata_reads_embedded_entries(self, mongo_store, collections):
        posts, _ = collections
        posts.find_one.return_value = {"_id": 5, "meta": [
            {"key": "fave_property_images", "value": "11"},
            {"key": "fave_featured", "value": "1"},
            {"key": "fave_property_images", "value": "12"},
        ]}
        assert mongo_store.get_metadata(5, "fave_property_images", single=False) == ["11", "12"]
        assert mongo_store.get_metadata(5, "fave_featured") == "1"
        assert mongo_store.get_metadata(5, "missing") is None

    def test_unique_add_metadata_filter(self, mongo_store, collections):
        posts, _ = collections
        posts.update_one.return_value = MagicMock(modified_count=0)

        assert mongo_store.add_metadata(5, "k", "v", unique=True) is False
        query, update = posts.update_one.call_args.args
        assert query == {"_id": 5, "meta.key": {"$ne": "k"}}
        assert update == {"$push": {"meta": {"key": "k", "value": "v"}}}

    def test_taxonomy_updates(self, mongo_store, collections):
        posts, _ = collections
        posts.update_one.return_value = MagicMock(matched_count=1)

        mongo_store.set_taxonomy_terms(5, "property_label", ["New", "New", "Featured"])
        assert posts.update_one.call_args.args[1] == {"$set": {"terms.property_label": ["New", "Featured"]}}

        mongo_store.set_taxonomy_terms(5, "property_label", ["Sold"], append=True)
        assert posts.update_one.call_args.args[1] == {"$addToSet": {"terms.property_label": {"$each": ["Sold"]}}}


def test_from_client_uses_content_collections(media_root):
    client = MagicMock()
    store = MongoContentStore.from_client(client, database="cms", media_root=media_root)

    client.__getitem__.assert_called_with("cms")
    database = client.__getitem__.return_value
    assert store.posts is database.__getitem__.return_value
    assert [call.args[0] for call in database.__getitem__.call_args_list] == ["posts", "counters"]


def test_mongodb_client_credentials():
    from property_feed_sync.core import connections

    with patch.object(connections, "MongoClient") as client_class:
        connections.get_mongodb_client("db", 27017, "user", "secret", None, timeout_ms=500)
        client_class.assert_called_once_with(
            "db", 27017,
            username="user", password="secret", authSource="admin",
            serverSelectionTimeoutMS=500,
        )

        client_class.reset_mock()
        with connections.mongodb_connection(username=None, password=None, timeout_ms=None) as client:
            assert client is client_class.return_value
        assert client_class.call_args.kwargs == {}
        client_class.return_value.close.assert_called_once()
