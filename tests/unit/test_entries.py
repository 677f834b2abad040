from __future__ import annotations

from fuzzyfind.entries import FileEntry, build_entries, make_entry


def test_make_entry_splits_name_and_lowercases():
    entry = make_entry("/a/b/ReadMe.TXT")

    assert entry == FileEntry(
        full_path="/a/b/ReadMe.TXT",
        file_name="ReadMe.TXT",
        lower_name="readme.txt",
    )


def test_make_entry_without_directory():
    assert make_entry("notes.md").file_name == "notes.md"


def test_build_entries_empty():
    assert build_entries([]) == ()


def test_build_entries_parallel_keeps_input_order():
    paths = [f"/root/dir{i}/File{i}.txt" for i in range(50)]

    entries = build_entries(paths, max_workers=4, chunk_size=7)

    assert [entry.full_path for entry in entries] == paths
    assert entries[3].lower_name == "file3.txt"


def test_build_entries_sequential_matches_parallel():
    paths = [f"/x/{i:03d}.py" for i in range(20)]

    assert build_entries(paths) == build_entries(paths, max_workers=3, chunk_size=4)
