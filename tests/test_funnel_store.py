import json
from datetime import datetime, timezone
from pathlib import Path

from funnel_wizard.firestore_funnel_store import FirestoreFunnelStore
from funnel_wizard.funnel_store import FunnelStore, load_seed_drafts
from funnel_wizard.models.funnel import FunnelDraft, PageContent
from funnel_wizard.persistence import FunnelPersistence

SEED_DIR = Path(__file__).resolve().parents[1] / "data" / "funnels"


class _FakeSnapshot:
    def __init__(self, doc_id, data):
        self.id = doc_id
        self._data = data

    @property
    def exists(self):
        return self._data is not None

    def to_dict(self):
        return dict(self._data) if self._data is not None else None


class _FakeDocument:
    def __init__(self, docs, doc_id):
        self._docs = docs
        self._id = doc_id

    def set(self, data):
        self._docs[self._id] = dict(data)

    def get(self):
        return _FakeSnapshot(self._id, self._docs.get(self._id))


class _FakeQuery:
    def __init__(self, docs):
        self._docs = docs
        self._limit = None

    def limit(self, count):
        self._limit = count
        return self

    def stream(self):
        ordered = sorted(self._docs.items(), key=lambda item: item[1]["updated_at"], reverse=True)
        return [_FakeSnapshot(doc_id, data) for doc_id, data in ordered[: self._limit]]


class _FakeCollection:
    def __init__(self):
        self.docs = {}

    def document(self, doc_id):
        return _FakeDocument(self.docs, doc_id)

    def order_by(self, field, direction=None):
        return _FakeQuery(self.docs)


class _FakeFirestoreClient:
    def __init__(self):
        self.collections = {}

    def collection(self, name):
        return self.collections.setdefault(name, _FakeCollection())


class _BrokenRepository:
    def save(self, draft):
        raise RuntimeError("disk full")


def test_store_round_trips_drafts_by_id(complete_draft):
    store = FunnelStore()
    store.save(complete_draft)

    loaded = store.get(complete_draft.id)

    assert loaded == complete_draft
    assert store.get("unknown") is None
    assert [draft.id for draft in store.list_funnels()] == [complete_draft.id]


def test_store_hands_out_copies(complete_draft):
    store = FunnelStore()
    store.save(complete_draft)

    loaded = store.get(complete_draft.id)
    loaded.pages[0].content = PageContent(title="changed")

    assert store.get(complete_draft.id).pages[0].content.title is None


def test_load_seed_drafts_reads_sample_funnel():
    drafts = load_seed_drafts(SEED_DIR)

    assert [draft.id for draft in drafts] == ["1"]
    assert drafts[0].name == "Sample Funnel"
    assert drafts[0].marketing_details.goals == ["Awareness"]


def test_load_seed_drafts_missing_directory(tmp_path):
    assert load_seed_drafts(tmp_path / "absent") == []


def test_load_seed_drafts_sorted_by_file_name(tmp_path):
    for name in ("b", "a"):
        (tmp_path / f"{name}.json").write_text(json.dumps({"id": name, "name": name}), encoding="utf-8")

    assert [draft.id for draft in load_seed_drafts(tmp_path)] == ["a", "b"]


def test_firestore_store_saves_whole_draft_as_one_document(complete_draft):
    client = _FakeFirestoreClient()
    store = FirestoreFunnelStore(client=client)

    store.save(complete_draft)

    document = client.collections["funnels"].docs[complete_draft.id]
    assert "id" not in document
    assert document["marketingDetails"]["targetAudience"] == "t"
    assert document["flow"] == [complete_draft.pages[0].id]
    assert store.get(complete_draft.id) == complete_draft
    assert store.get("unknown") is None


def test_firestore_store_lists_most_recent_first(complete_draft):
    client = _FakeFirestoreClient()
    store = FirestoreFunnelStore(client=client)
    store.save(complete_draft)
    store.save(FunnelDraft(id="newer", name="Newer"))
    docs = client.collections["funnels"].docs
    docs[complete_draft.id]["updated_at"] = datetime(2024, 1, 1, tzinfo=timezone.utc)
    docs["newer"]["updated_at"] = datetime(2024, 6, 1, tzinfo=timezone.utc)

    assert [draft.id for draft in store.list_funnels()] == ["newer", complete_draft.id]


def test_persistence_reports_success_and_stores(complete_draft):
    store = FunnelStore()

    result = FunnelPersistence(store).save(complete_draft)

    assert result.success is True
    assert result.message == "Funnel saved successfully"
    assert store.get(complete_draft.id) == complete_draft


def test_persistence_reports_failure_without_raising(complete_draft):
    result = FunnelPersistence(_BrokenRepository()).save(complete_draft)

    assert result.success is False
    assert result.message == "Error saving funnel"
