"""Tests for the pypack bundle packer and writer."""

import logging

import pytest
from pypack import Bundle, BundlePacker, BundleWriter, RunStatistics, format_entry


class RecordingWriter(BundleWriter):
    """Keep bundles in memory instead of writing them."""

    def __init__(self, fail_on=()):
        super().__init__(output_dir="unused")
        self.written: dict[int, str] = {}
        self.fail_on = set(fail_on)

    def write(self, index, text):
        if index in self.fail_on:
            raise OSError(28, "No space left on device")
        self.written[index] = text
        return self.path_for(index)


def entry_of_length(path, length):
    """Build a formatted entry of exactly `length` characters."""
    overhead = len(format_entry(path, ""))
    return format_entry(path, "x" * (length - overhead))


@pytest.fixture
def writer():
    return RecordingWriter()


class TestBundle:
    """Test the in-flight bundle."""

    def test_append_counts_characters(self):
        bundle = Bundle()
        bundle.append("abc")
        bundle.append("de")
        assert bundle.chars == 5
        assert bundle.text() == "abcde"


class TestPacking:
    """Test the greedy packing policy."""

    def test_small_entries_share_a_bundle(self, writer):
        packer = BundlePacker(writer, char_limit=30000)
        entries = [format_entry(f"f{i}.txt", "hello") for i in range(3)]
        for entry in entries:
            packer.add(entry)
        packer.finish()
        assert writer.written == {1: "".join(entries)}
        assert packer.stats.bundles_written == 1

    def test_two_large_entries_split(self, writer):
        packer = BundlePacker(writer, char_limit=30000)
        first = entry_of_length("one.txt", 20000)
        second = entry_of_length("two.txt", 20000)
        packer.add(first)
        packer.add(second)
        packer.finish()
        assert writer.written == {1: first, 2: second}

    def test_exact_fit_stays_in_bundle(self, writer):
        packer = BundlePacker(writer, char_limit=100)
        packer.add("a" * 60)
        packer.add("b" * 40)
        packer.add("c")
        packer.finish()
        assert writer.written == {1: "a" * 60 + "b" * 40, 2: "c"}

    def test_greedy_not_reordered(self, writer):
        packer = BundlePacker(writer, char_limit=100)
        for chunk in ["a" * 30, "b" * 80, "c" * 10, "d" * 5]:
            packer.add(chunk)
        packer.finish()
        assert writer.written == {1: "a" * 30, 2: "b" * 80 + "c" * 10 + "d" * 5}

    def test_oversized_entry_alone(self, writer, caplog):
        packer = BundlePacker(writer, char_limit=100)
        big = format_entry("huge.txt", "x" * 200)
        packer.add("a" * 50)
        packer.add(big)
        packer.add("c" * 30)
        packer.finish()
        assert writer.written == {1: "a" * 50, 2: big, 3: "c" * 30}
        assert any("huge.txt" in r.getMessage() for r in caplog.records)

    def test_oversized_first_entry(self, writer):
        packer = BundlePacker(writer, char_limit=10)
        packer.add("x" * 25)
        packer.finish()
        assert writer.written == {1: "x" * 25}

    def test_limit_respected(self, writer):
        limit = 1000
        packer = BundlePacker(writer, char_limit=limit)
        for i in range(50):
            packer.add(format_entry(f"file_{i}.py", "y" * (i * 7 % 300)))
        packer.finish()
        assert len(writer.written) > 1
        for text in writer.written.values():
            assert len(text) <= limit

    def test_statistics(self, writer):
        stats = RunStatistics()
        packer = BundlePacker(writer, char_limit=100, stats=stats)
        packer.add("a" * 70)
        packer.add("b" * 70)
        packer.finish()
        assert stats.bundles_written == 2
        assert stats.total_characters == 140


class TestFlush:
    """Test flushing and the final drain."""

    def test_finish_without_entries(self, writer):
        packer = BundlePacker(writer)
        assert packer.finish() is None
        assert writer.written == {}
        assert packer.stats.bundles_written == 0

    def test_finish_drains_once(self, writer):
        packer = BundlePacker(writer)
        packer.add("tail")
        assert packer.finish() is not None
        assert packer.finish() is None
        assert writer.written == {1: "tail"}
        assert packer.bundle.entries == []
        assert packer.bundle.chars == 0

    def test_failed_write_not_counted(self, caplog):
        writer = RecordingWriter(fail_on={1})
        packer = BundlePacker(writer, char_limit=10)
        packer.add("a" * 8)
        packer.add("b" * 8)
        packer.finish()

        assert writer.written == {2: "b" * 8}
        assert packer.stats.bundles_written == 1
        assert packer.stats.total_characters == 8
        assert packer.stats.errors == 1
        errors = [r for r in caplog.records if r.levelno == logging.ERROR]
        assert len(errors) == 1
        assert "bundle 1" in errors[0].getMessage()

    def test_index_not_reused_after_failure(self):
        writer = RecordingWriter(fail_on={1, 2})
        packer = BundlePacker(writer, char_limit=5)
        for chunk in ["aaaa", "bbbb", "cccc"]:
            packer.add(chunk)
        packer.finish()
        assert writer.written == {3: "cccc"}
        assert packer.next_index == 4


class TestBundleWriter:
    """Test persisting bundles to disk."""

    def test_default_name(self, tmp_path):
        writer = BundleWriter(tmp_path)
        path = writer.write(3, "content")
        assert path == tmp_path / "bundled_codebase_3.txt"
        assert path.read_text(encoding="utf-8") == "content"

    def test_custom_name_and_missing_directory(self, tmp_path):
        writer = BundleWriter(tmp_path / "out" / "nested", "part-{index:02d}.md")
        path = writer.write(7, "x")
        assert path.name == "part-07.md"
        assert path.exists()

    def test_newlines_untranslated(self, tmp_path):
        path = BundleWriter(tmp_path).write(1, "a\r\nb\n")
        assert path.read_bytes() == b"a\r\nb\n"

    def test_defaults_to_cwd(self, tmp_path, monkeypatch):
        monkeypatch.chdir(tmp_path)
        assert BundleWriter().path_for(1) == tmp_path / "bundled_codebase_1.txt"

    def test_unwritable_target_raises(self, tmp_path):
        blocker = tmp_path / "file"
        blocker.write_text("", encoding="utf-8")
        with pytest.raises(OSError):
            BundleWriter(blocker / "sub").write(1, "x")
