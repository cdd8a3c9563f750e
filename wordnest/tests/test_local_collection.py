from __future__ import annotations

from wordnest.models.saved_word_models import Backend, SavedWordEntry
from wordnest.models.word_models import WordRecord
from wordnest.services.saved_words.local_collection import SAVED_WORDS_KEY


def test_saving_twice_keeps_one_entry_and_its_id(local, memory_store):
    first = local.save(WordRecord(word="apple", definition="a fruit"))
    second = local.save(WordRecord(word="apple", definition="a fruit"))

    stored = memory_store.get_json(SAVED_WORDS_KEY)
    assert len(stored) == 1
    assert second.id == first.id
    assert second.saved_at > first.saved_at


def test_matching_ignores_case(local):
    local.save(WordRecord(word="Apple"))
    assert local.contains("APPLE")
    assert local.find("apple").word == "Apple"
    assert local.remove("aPPle") is True
    assert not local.contains("apple")


def test_remove_missing_word_is_a_no_op(local):
    assert local.remove("ghost") is False
    assert local.all() == []


def test_resave_keeps_notes_unless_replaced(local):
    local.save(WordRecord(word="tree"), notes="green")
    assert local.save(WordRecord(word="tree")).notes == "green"
    assert local.save(WordRecord(word="tree"), notes="tall").notes == "tall"


def test_all_is_newest_first(local):
    for word in ("one", "two", "three"):
        local.save(WordRecord(word=word))
    assert [entry.word for entry in local.all()] == ["three", "two", "one"]


def test_persisted_shape_uses_client_field_names(local, memory_store):
    local.save(WordRecord(word="cat", definition="animal", partOfSpeech="noun", translations={"vietnamese": "mèo"}))
    [item] = memory_store.get_json(SAVED_WORDS_KEY)
    assert item["_id"] == "local-1"
    assert item["partOfSpeech"] == "noun"
    assert item["translations"] == {"vietnamese": "mèo"}
    assert item["savedAt"].startswith("2024-01-01T00:00:01")


def test_corrupt_json_reads_as_empty(local, memory_store):
    memory_store.set_raw(SAVED_WORDS_KEY, "{not json")
    assert local.all() == []
    local.save(WordRecord(word="fresh"))
    assert [entry.word for entry in local.all()] == ["fresh"]


def test_non_list_value_reads_as_empty(local, memory_store):
    memory_store.set_json(SAVED_WORDS_KEY, {"word": "odd"})
    assert local.all() == []


def test_malformed_entries_are_dropped_and_missing_ids_filled(local, memory_store):
    memory_store.set_json(
        SAVED_WORDS_KEY,
        [
            {"word": "kept", "definition": "d", "savedAt": "2024-02-01T00:00:00Z"},
            {"_id": "x", "definition": "no word"},
            "garbage",
        ],
    )
    entries = local.all()
    assert [entry.word for entry in entries] == ["kept"]
    assert entries[0].id
    assert entries[0].backend is Backend.LOCAL
    assert local.all()[0].id == entries[0].id


def test_filled_in_ids_and_timestamps_are_stable(local, memory_store):
    memory_store.set_json(SAVED_WORDS_KEY, [{"word": "legacy"}, {"word": "older", "savedAt": "2023-01-01T00:00:00Z"}])
    listed = local.all()
    assert local.all() == listed

    legacy = local.find("legacy")
    assert local.assign_folder(legacy.id, "f1")
    assert local.find("legacy").folder_id == "f1"
    assert all(item.get("_id") and item.get("savedAt") for item in memory_store.get_json(SAVED_WORDS_KEY))


def test_mirror_reuses_remote_id_and_keeps_folder(local):
    saved = local.save(WordRecord(word="zen"))
    local.assign_folder(saved.id, "f1")

    mirrored = local.mirror(
        SavedWordEntry(id="r9", word="Zen", saved_at=saved.saved_at, backend=Backend.REMOTE)
    )
    assert mirrored.folder_id == "f1"
    [entry] = local.all()
    assert entry.id == "r9"
    assert entry.folder_id == "f1"


def test_replace_all_keeps_exactly_the_given_words(local, clock):
    local.save(WordRecord(word="stale"))
    local.save(WordRecord(word="kept"))
    local.assign_folder(local.find("kept").id, "f2")

    local.replace_all(
        [
            SavedWordEntry(id="r1", word="kept", saved_at=clock()),
            SavedWordEntry(id="r2", word="new", saved_at=clock()),
            SavedWordEntry(id="r3", word="NEW", saved_at=clock()),
        ]
    )
    entries = {entry.word: entry for entry in local.all()}
    assert set(entries) == {"kept", "new"}
    assert entries["kept"].folder_id == "f2"
    assert entries["new"].id == "r2"


def test_folders(local):
    a = local.save(WordRecord(word="a"))
    b = local.save(WordRecord(word="b"))
    assert local.assign_folder(a.id, "verbs")
    assert local.assign_folder(b.id, "verbs")
    assert local.assign_folder("missing", "verbs") is False
    assert {entry.word for entry in local.in_folder("verbs")} == {"a", "b"}

    assert local.clear_folder(a.id)
    assert [entry.word for entry in local.in_folder("verbs")] == ["b"]


def test_update_notes(local):
    local.save(WordRecord(word="moon"))
    assert local.update_notes("MOON", "night").notes == "night"
    assert local.find("moon").notes == "night"
    assert local.update_notes("sun", "day") is None


def test_api_shaped_records_are_read_as_remote_entries(local, memory_store):
    memory_store.set_json(
        SAVED_WORDS_KEY,
        [
            {
                "_id": "r7",
                "word": {"_id": "w7", "word": "tide", "definition": "sea level change", "phonetic": "/taɪd/"},
                "wordText": "tide",
                "savedAt": "2024-03-01T08:00:00Z",
            },
            {"kind": "local", "_id": "l1", "word": "moss", "savedAt": "2024-02-01T08:00:00Z"},
        ],
    )
    tide, moss = local.all()
    assert (tide.id, tide.word, tide.definition) == ("r7", "tide", "sea level change")
    assert tide.backend is Backend.REMOTE
    assert moss.backend is Backend.LOCAL

    local.save(WordRecord(word="fern"))
    kinds = {item["word"]: item["kind"] for item in memory_store.get_json(SAVED_WORDS_KEY)}
    assert kinds == {"tide": "local", "moss": "local", "fern": "local"}
