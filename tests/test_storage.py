import json
from datetime import datetime, timedelta, timezone

import pytest

from universal_api.exceptions import DocumentNotFound, StorageError
from universal_api.parser.base import CanonicalDocument, Endpoint, Parameter, Response
from universal_api.storage import FileStorage, MemoryStorage

T0 = datetime(2024, 1, 1, tzinfo=timezone.utc)


def _doc(doc_id: str, offset: int = 0) -> CanonicalDocument:
    stamp = T0 + timedelta(minutes=offset)
    return CanonicalDocument(
        id=doc_id,
        url="https://example.com/docs",
        title=f"API {doc_id}",
        version="1.0",
        endpoints=[
            Endpoint(
                method="GET",
                path="/users/{id}",
                parameters=[Parameter(name="id", location="path", required=True, param_type="string")],
                responses=[Response(status_code=200, description="OK", schema_ref="#/User")],
            )
        ],
        created_at=stamp,
        updated_at=stamp,
    )


@pytest.fixture(params=["memory", "file"])
def storage(request, tmp_path):
    if request.param == "memory":
        return MemoryStorage()
    return FileStorage(tmp_path / "docs")


class TestStorage:
    def test_save_and_get(self, storage):
        doc = _doc("openapi-1")
        storage.save(doc)
        assert storage.get("openapi-1") == doc

    def test_get_missing(self, storage):
        with pytest.raises(DocumentNotFound):
            storage.get("nope")

    def test_empty_id_rejected(self, storage):
        with pytest.raises(StorageError):
            storage.save(_doc(""))

    def test_list_all(self, storage):
        assert storage.list_all() == []
        storage.save(_doc("html-a", offset=0))
        storage.save(_doc("html-b", offset=1))
        assert [d.id for d in storage.list_all()] == ["html-a", "html-b"]

    def test_save_replaces_same_id(self, storage):
        storage.save(_doc("openapi-1"))
        storage.save(_doc("openapi-1").model_copy(update={"title": "Renamed"}))
        assert storage.get("openapi-1").title == "Renamed"
        assert len(storage.list_all()) == 1


class TestFileStorage:
    def test_writes_one_json_file_per_document(self, tmp_path):
        store = FileStorage(tmp_path)
        store.save(_doc("openapi-1"))
        path = tmp_path / "openapi-1.json"
        assert path.is_file()
        assert '"in": "path"' in path.read_text(encoding="utf-8")
        assert list(tmp_path.glob("*.tmp")) == []

    def test_rejects_path_like_ids(self, tmp_path):
        with pytest.raises(StorageError):
            FileStorage(tmp_path).get("../etc/passwd")

    def test_corrupt_file_raises_storage_error(self, tmp_path):
        (tmp_path / "bad.json").write_text("{not json", encoding="utf-8")
        with pytest.raises(StorageError):
            FileStorage(tmp_path).get("bad")

    def test_duplicate_endpoints_on_disk_raise_storage_error(self, tmp_path):
        store = FileStorage(tmp_path)
        store.save(_doc("openapi-1"))
        path = tmp_path / "openapi-1.json"
        data = json.loads(path.read_text(encoding="utf-8"))
        data["endpoints"].append(data["endpoints"][0])
        path.write_text(json.dumps(data), encoding="utf-8")
        with pytest.raises(StorageError, match="duplicate endpoint"):
            store.get("openapi-1")
