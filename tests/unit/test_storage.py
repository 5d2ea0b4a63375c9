"""
Unit tests for storage module.
"""

import json

from pathfinder.utils.storage import (
    STORAGE_KEY,
    LocalStorage,
    MemoryStorage,
    PathwayStore,
)


class TestLocalStorage:
    """Test cases for the JSON-file backed key/value store."""

    def test_get_missing_key_returns_none(self, tmp_path):
        """Test that an empty store has no items and no file."""
        storage = LocalStorage(tmp_path / "store")

        assert storage.get_item("anything") is None
        assert not storage.storage_file.exists()

    def test_set_then_get(self, tmp_path):
        """Test that values persist across instances."""
        # Arrange
        LocalStorage(tmp_path).set_item("k", "v")

        # Act
        value = LocalStorage(tmp_path).get_item("k")

        # Assert
        assert value == "v"

    def test_remove_item(self, tmp_path):
        """Test that removal deletes only the given key."""
        storage = LocalStorage(tmp_path)
        storage.set_item("a", "1")
        storage.set_item("b", "2")

        storage.remove_item("a")

        assert storage.get_item("a") is None
        assert storage.get_item("b") == "2"

    def test_remove_missing_key_is_noop(self, tmp_path):
        """Test that removing an absent key does not fail."""
        storage = LocalStorage(tmp_path)

        storage.remove_item("absent")

        assert storage.get_item("absent") is None

    def test_unreadable_file_treated_as_empty(self, tmp_path):
        """Test that a corrupted storage file does not crash reads."""
        storage = LocalStorage(tmp_path)
        storage.storage_file.write_text("{not json", encoding="utf-8")

        assert storage.get_item(STORAGE_KEY) is None

    def test_non_utf8_file_treated_as_empty(self, tmp_path):
        """Test that undecodable bytes in the storage file read as an empty store."""
        storage = LocalStorage(tmp_path)
        storage.storage_file.write_bytes(b'{"ncvet-pathway-data": "\xff\xfe"}')

        assert storage.get_item(STORAGE_KEY) is None

    def test_unopenable_file_treated_as_empty(self, tmp_path, mocker):
        """Test that an OS error opening the file reads as an empty store."""
        storage = LocalStorage(tmp_path)
        storage.storage_file.write_text("{}", encoding="utf-8")
        mocker.patch(
            "pathfinder.utils.storage.open", create=True, side_effect=PermissionError("denied")
        )

        assert storage.get_item(STORAGE_KEY) is None


class TestPathwayStore:
    """Test cases for PathwayStore."""

    def test_round_trip_reproduces_pair(self, tmp_path, profile, pathway):
        """Test that save then load returns an identical profile and pathway."""
        # Arrange
        store = PathwayStore(LocalStorage(tmp_path))

        # Act
        store.save(profile, pathway)
        snapshot = PathwayStore(LocalStorage(tmp_path)).load()

        # Assert
        assert snapshot is not None
        assert snapshot.profile == profile
        assert snapshot.pathway == pathway

    def test_stored_layout_uses_fixed_key(self, profile, pathway):
        """Test that one JSON blob holds {pathway, profile} under the fixed key."""
        storage = MemoryStorage()

        PathwayStore(storage).save(profile, pathway)

        blob = json.loads(storage.get_item("ncvet-pathway-data"))
        assert set(blob) == {"pathway", "profile"}
        assert blob["profile"]["name"] == "Asha"
        assert blob["pathway"]["recommendedRole"] == "Electronics Technician"

    def test_malformed_json_clears_key(self):
        """Test that malformed stored JSON yields empty state and is removed."""
        # Arrange
        storage = MemoryStorage()
        storage.set_item(STORAGE_KEY, "{this is not json")
        store = PathwayStore(storage)

        # Act
        snapshot = store.load()

        # Assert
        assert snapshot is None
        assert storage.get_item(STORAGE_KEY) is None

    def test_incomplete_pair_clears_key(self, profile):
        """Test that a blob lacking the pathway is treated as corrupted."""
        storage = MemoryStorage()
        storage.set_item(STORAGE_KEY, json.dumps({"profile": profile.to_wire()}))

        assert PathwayStore(storage).load() is None
        assert storage.get_item(STORAGE_KEY) is None

    def test_invalid_shape_clears_key(self, profile):
        """Test that a pathway failing validation is treated as corrupted."""
        storage = MemoryStorage()
        storage.set_item(
            STORAGE_KEY,
            json.dumps({"profile": profile.to_wire(), "pathway": {"summary": 3}}),
        )

        assert PathwayStore(storage).load() is None
        assert storage.get_item(STORAGE_KEY) is None

    def test_empty_store_loads_none(self):
        """Test that nothing stored means nothing restored."""
        assert PathwayStore(MemoryStorage()).load() is None

    def test_save_overwrites(self, profile, pathway):
        """Test that each save replaces the previous pair wholesale."""
        storage = MemoryStorage()
        store = PathwayStore(storage)
        store.save(profile, pathway)
        renamed = profile.model_copy(update={"name": "Asha K"})

        store.save(renamed, pathway)

        assert store.load().profile.name == "Asha K"

    def test_clear_twice_is_safe(self, profile, pathway):
        """Test that clearing is idempotent."""
        storage = MemoryStorage()
        store = PathwayStore(storage)
        store.save(profile, pathway)

        store.clear()
        store.clear()

        assert storage.get_item(STORAGE_KEY) is None

    def test_non_utf8_storage_file_loads_none(self, tmp_path, profile, pathway):
        """Test that an undecodable storage file yields empty state and can be overwritten."""
        # Arrange
        storage = LocalStorage(tmp_path)
        storage.storage_file.write_bytes(b'{"ncvet-pathway-data": "\xff\xfe"}')
        store = PathwayStore(storage)

        # Act
        snapshot = store.load()
        store.save(profile, pathway)

        # Assert
        assert snapshot is None
        assert store.load().profile == profile

    def test_storage_read_error_loads_none(self, mocker):
        """Test that a failing backend read is treated as nothing stored."""
        storage = MemoryStorage()
        mocker.patch.object(storage, "get_item", side_effect=OSError("disk gone"))
        remove = mocker.patch.object(storage, "remove_item", side_effect=OSError("disk gone"))

        assert PathwayStore(storage).load() is None
        remove.assert_called_once_with(STORAGE_KEY)
