"""
Tests for storage backends and transaction support
"""

import pytest
import tempfile
from pathlib import Path

from expense_tracker.storage import InMemoryStorage, SQLiteStorage


test_data = {
    "id": "record_1",
    "owner_id": "user-1",
    "amount": "100.50",
    "category": "Food",
    "archived": False,
}


@pytest.fixture(params=["memory", "sqlite_memory", "sqlite_file"])
def storage(request):
    """Every backend must behave the same"""
    if request.param == "memory":
        backend = InMemoryStorage()
        yield backend
        backend.close()
    elif request.param == "sqlite_memory":
        backend = SQLiteStorage(":memory:")
        yield backend
        backend.close()
    else:
        with tempfile.TemporaryDirectory() as temp_dir:
            backend = SQLiteStorage(Path(temp_dir) / "test.db")
            yield backend
            backend.close()


class TestBasicOperations:
    
    def test_save_and_load(self, storage):
        storage.save("expenses", "record_1", test_data)
        assert storage.load("expenses", "record_1") == test_data
        assert storage.load("expenses", "missing") is None
    
    def test_exists_count_delete(self, storage):
        storage.save("expenses", "record_1", test_data)
        storage.save("expenses", "record_2", dict(test_data, id="record_2"))
        
        assert storage.exists("expenses", "record_1")
        assert not storage.exists("expenses", "missing")
        assert storage.count("expenses") == 2
        
        assert storage.delete("expenses", "record_1")
        assert not storage.delete("expenses", "record_1")
        assert storage.count("expenses") == 1
    
    def test_clear_table(self, storage):
        storage.save("expenses", "record_1", test_data)
        storage.clear_table("expenses")
        assert storage.count("expenses") == 0
    
    def test_loaded_record_is_a_copy(self, storage):
        storage.save("expenses", "record_1", test_data)
        loaded = storage.load("expenses", "record_1")
        loaded["amount"] = "0.00"
        assert storage.load("expenses", "record_1")["amount"] == "100.50"


class TestFind:
    
    def test_filters(self, storage):
        storage.save("expenses", "a", dict(test_data, id="a"))
        storage.save("expenses", "b", dict(test_data, id="b", owner_id="user-2"))
        storage.save("expenses", "c", dict(test_data, id="c", category="Rent"))
        
        assert [r["id"] for r in storage.find("expenses", {"owner_id": "user-1"})] == ["a", "c"]
        assert [r["id"] for r in storage.find("expenses", {"owner_id": "user-1", "category": "Rent"})] == ["c"]
        assert storage.find("expenses", {"owner_id": "nobody"}) == []
        assert len(storage.find("expenses", {})) == 3
    
    def test_boolean_filter(self, storage):
        storage.save("expenses", "a", dict(test_data, id="a"))
        storage.save("expenses", "b", dict(test_data, id="b", archived=True))
        assert [r["id"] for r in storage.find("expenses", {"archived": True})] == ["b"]
    
    def test_insertion_order_survives_update(self, storage):
        for record_id in ("first", "second", "third"):
            storage.save("expenses", record_id, dict(test_data, id=record_id))
        storage.save("expenses", "first", dict(test_data, id="first", amount="1.00"))
        
        assert [r["id"] for r in storage.load_all("expenses")] == ["first", "second", "third"]
        assert [r["id"] for r in storage.find("expenses", {"owner_id": "user-1"})] == [
            "first", "second", "third"
        ]


class TestTransactions:
    
    def test_commit(self, storage):
        with storage.atomic():
            storage.save("expenses", "record_1", test_data)
        assert storage.exists("expenses", "record_1")
    
    def test_rollback_on_error(self, storage):
        storage.save("expenses", "keep", dict(test_data, id="keep"))
        
        with pytest.raises(RuntimeError):
            with storage.atomic():
                storage.save("expenses", "record_1", test_data)
                storage.delete("expenses", "keep")
                raise RuntimeError("boom")
        
        assert not storage.exists("expenses", "record_1")
        assert storage.exists("expenses", "keep")
    
    def test_nested_transactions_join_outer(self, storage):
        with pytest.raises(RuntimeError):
            with storage.atomic():
                with storage.atomic():
                    storage.save("expenses", "inner", test_data)
                raise RuntimeError("outer fails")
        assert not storage.exists("expenses", "inner")
    
    def test_usable_after_rollback(self, storage):
        with pytest.raises(ValueError):
            with storage.atomic():
                raise ValueError()
        with storage.atomic():
            storage.save("expenses", "record_1", test_data)
        assert storage.exists("expenses", "record_1")


class TestSQLitePersistence:
    
    def test_data_survives_reopen(self):
        with tempfile.TemporaryDirectory() as temp_dir:
            db_path = Path(temp_dir) / "test.db"
            storage = SQLiteStorage(db_path)
            storage.save("expenses", "record_1", test_data)
            storage.close()
            
            reopened = SQLiteStorage(db_path)
            assert reopened.load("expenses", "record_1") == test_data
            reopened.close()
