"""
Tests for the post reconciler and the duplicate filter.
"""

from unittest.mock import patch

from property_feed_sync.exceptions import StoreError
from property_feed_sync.mapping.keys import MetaKey, Taxonomy
from property_feed_sync.sync import DuplicateFilter, PostReconciler, SyncStatus


class TestPostReconciler:

    def test_creates_entity(self, mapper, store, flat_a_record):
        record = mapper.map(flat_a_record)
        outcome = PostReconciler(store).reconcile(record, 7)

        assert outcome.status is SyncStatus.SUCCESS
        entity = store.get_entity(outcome.entity_id)
        assert entity["post_title"] == "Flat A"
        assert entity["post_type"] == "property"
        assert entity["post_status"] == "publish"
        assert store.get_metadata(outcome.entity_id, MetaKey.JSON_ID.value) == "7"
        assert store.get_metadata(outcome.entity_id, MetaKey.PRICE.value) == "250000"

    def test_second_run_updates(self, mapper, store, flat_a_record):
        reconciler = PostReconciler(store)
        first = reconciler.reconcile(mapper.map(flat_a_record), 7)

        changed = dict(flat_a_record, portalTitle="Flat A (renovated)", price="260000")
        second = reconciler.reconcile(mapper.map(changed), "7")

        assert second.entity_id == first.entity_id
        assert store.find_entities("property") == [first.entity_id]
        assert store.get_entity(first.entity_id)["post_title"] == "Flat A (renovated)"
        assert store.get_metadata(first.entity_id, MetaKey.PRICE.value, single=False) == ["260000"]

    def test_taxonomies_replaced(self, mapper, store):
        reconciler = PostReconciler(store)
        first = reconciler.reconcile(mapper.map({"id": 3, "portalTitle": "House", "labelNew": 1}), 3)
        reconciler.reconcile(mapper.map({"id": 3, "portalTitle": "House", "labelSold": 55}), 3)

        assert store.get_taxonomy_terms(first.entity_id, Taxonomy.LABEL.value) == ["Sold"]

    def test_gallery_key_not_written(self, mapper, store, flat_a_record):
        record = mapper.map(flat_a_record)
        record.metadata[MetaKey.GALLERY_IMAGES.value] = ["99"]
        outcome = PostReconciler(store).reconcile(record, 7)

        assert store.get_metadata(outcome.entity_id, MetaKey.GALLERY_IMAGES.value) is None

    def test_empty_title_skipped_without_writes(self, mapper, store):
        outcome = PostReconciler(store).reconcile(mapper.map({"id": 8, "portalTitle": ""}), 8)

        assert outcome.status is SyncStatus.SKIPPED
        assert store.entities == {}

    def test_unknown_title_skipped(self, mapper, store):
        outcome = PostReconciler(store).reconcile(mapper.map({}), None)

        assert outcome.status is SyncStatus.SKIPPED
        assert store.entities == {}

    def test_missing_id_is_error(self, mapper, store):
        outcome = PostReconciler(store).reconcile(mapper.map({"portalTitle": "Orphan"}), "")

        assert outcome.status is SyncStatus.ERROR
        assert outcome.message == "Missing item ID"

    def test_lookup_failure_is_error(self, mapper, store, flat_a_record):
        with patch.object(store, "find_entities", side_effect=StoreError("connection reset")):
            outcome = PostReconciler(store).reconcile(mapper.map(flat_a_record), 7)

        assert outcome.status is SyncStatus.ERROR
        assert "connection reset" in outcome.message

    def test_insert_failure_is_error(self, mapper, store, flat_a_record):
        with patch.object(store, "create_entity", side_effect=StoreError("disk full")):
            outcome = PostReconciler(store).reconcile(mapper.map(flat_a_record), 7)

        assert outcome.status is SyncStatus.ERROR
        assert outcome.message == "disk full"

    def test_update_failure_is_error(self, mapper, store, flat_a_record):
        reconciler = PostReconciler(store)
        reconciler.reconcile(mapper.map(flat_a_record), 7)

        with patch.object(store, "update_entity", side_effect=StoreError("write conflict")):
            outcome = reconciler.reconcile(mapper.map(flat_a_record), 7)

        assert outcome.status is SyncStatus.ERROR
        assert outcome.message == "write conflict"


class TestDuplicateFilter:

    def test_drops_existing_titles(self, store):
        store.create_entity({"post_type": "property", "post_status": "publish", "post_title": "Flat A"})
        records = [
            {"id": 1, "portalTitle": "Flat A"},
            {"id": 2, "portalTitle": "Flat B"},
            {"id": 3},
            "not a record",
        ]

        duplicate_filter = DuplicateFilter(store)
        kept = duplicate_filter.filter_duplicates(records)

        assert kept == [{"id": 2, "portalTitle": "Flat B"}, {"id": 3}, "not a record"]
        assert duplicate_filter.stats.original_count == 4
        assert duplicate_filter.stats.after_filter_count == 3
        assert duplicate_filter.stats.filtered_out_count == 1
        assert duplicate_filter.stats.no_title_count == 2

    def test_title_match_is_case_sensitive(self, store):
        store.create_entity({"post_type": "property", "post_status": "publish", "post_title": "Flat A"})
        assert DuplicateFilter(store).filter_duplicates([{"portalTitle": "flat a"}]) == [{"portalTitle": "flat a"}]

    def test_trashed_and_other_types_ignored(self, store):
        trashed = store.create_entity({"post_type": "property", "post_status": "publish", "post_title": "Flat A"})
        store.trash_entity(trashed)
        store.create_entity({"post_type": "attachment", "post_status": "inherit", "post_title": "Flat B"})

        records = [{"portalTitle": "Flat A"}, {"portalTitle": "Flat B"}]
        assert DuplicateFilter(store).filter_duplicates(records) == records

    def test_stats_dict(self, store):
        duplicate_filter = DuplicateFilter(store)
        duplicate_filter.filter_duplicates([{"portalTitle": "Flat A"}])
        assert duplicate_filter.stats_dict() == {
            "original_count": 1,
            "after_filter_count": 1,
            "filtered_out_count": 0,
        }
