"""Unit tests for attachment staging, classification and size formatting."""

import pytest
import pytest_check as check

from windchat.compose import AttachmentStager, PreviewRegistry, classify, human_size
from windchat.models.schemas import AttachmentKind, SourceFile


def make_file(name: str, size: int = 10, mime: str = "text/plain") -> SourceFile:
    return SourceFile(name=name, byte_size=size, mime_type=mime, content=b"x" * size)


class TestClassify:
    """Tests for MIME type classification."""

    def test_image_prefix(self) -> None:
        assert classify("image/png") is AttachmentKind.IMAGE

    def test_video_prefix(self) -> None:
        assert classify("video/mp4") is AttachmentKind.VIDEO

    def test_everything_else_is_file(self) -> None:
        check.is_(classify("application/pdf"), AttachmentKind.FILE)
        check.is_(classify("text/plain"), AttachmentKind.FILE)
        check.is_(classify(""), AttachmentKind.FILE)

    def test_prefix_must_include_slash(self) -> None:
        """"imagery" is not an image type."""
        assert classify("imagery/custom") is AttachmentKind.FILE

    def test_never_produces_folder(self) -> None:
        kinds = {classify(m) for m in ("image/gif", "video/webm", "inode/directory", "x/y")}
        assert AttachmentKind.FOLDER not in kinds


class TestHumanSize:
    """Tests for 1024-based size formatting."""

    def test_zero_bytes(self) -> None:
        assert human_size(0) == "0 Bytes"

    def test_exact_kilobyte(self) -> None:
        assert human_size(1024) == "1 KB"

    def test_fractional_kilobytes(self) -> None:
        assert human_size(1536) == "1.5 KB"

    def test_small_byte_counts(self) -> None:
        check.equal(human_size(1), "1 Bytes")
        check.equal(human_size(1023), "1023 Bytes")

    def test_two_decimal_places(self) -> None:
        check.equal(human_size(2_516_582), "2.4 MB")
        check.equal(human_size(1_234_567), "1.18 MB")

    def test_exact_unit_boundaries(self) -> None:
        check.equal(human_size(1024**2), "1 MB")
        check.equal(human_size(1024**3), "1 GB")

    def test_clamps_to_gigabytes(self) -> None:
        assert human_size(5 * 1024**4) == "5120 GB"

    def test_rejects_negative(self) -> None:
        with pytest.raises(ValueError, match="non-negative"):
            human_size(-1)


class TestAddAndRemove:
    """Tests for staging order and count bookkeeping."""

    def test_add_preserves_arrival_order(self, stager: AttachmentStager) -> None:
        stager.add_files([make_file("a.txt"), make_file("b.txt")])
        stager.add_files([make_file("c.txt")])

        assert [e.name for e in stager.staged] == ["a.txt", "b.txt", "c.txt"]

    def test_duplicates_are_kept(self, stager: AttachmentStager) -> None:
        stager.add_files([make_file("same.txt"), make_file("same.txt")])

        assert len(stager) == 2
        first, second = stager.staged
        assert first is not second

    def test_entries_are_classified_and_sized(self, stager: AttachmentStager) -> None:
        stager.add_files([make_file("clip.mp4", 2048, "video/mp4")])

        entry = stager.staged[0]
        check.is_(entry.kind, AttachmentKind.VIDEO)
        check.equal(entry.human_size, "2 KB")

    def test_remove_drops_exactly_one(self, stager: AttachmentStager) -> None:
        stager.add_files([make_file("a"), make_file("b"), make_file("c")])

        assert stager.remove_file(1) is True
        assert [e.name for e in stager.staged] == ["a", "c"]

    @pytest.mark.parametrize("index", [3, 99, -1])
    def test_remove_out_of_range_is_noop(self, stager: AttachmentStager, index: int) -> None:
        stager.add_files([make_file("a"), make_file("b"), make_file("c")])

        assert stager.remove_file(index) is False
        assert len(stager) == 3

    def test_count_equals_adds_minus_valid_removes(self, stager: AttachmentStager) -> None:
        adds = 0
        valid_removes = 0
        script = [("add", 3), ("remove", 0), ("remove", 10), ("add", 2), ("remove", 3), ("remove", -2)]
        for op, arg in script:
            if op == "add":
                stager.add_files([make_file(f"f{adds + i}") for i in range(arg)])
                adds += arg
            elif stager.remove_file(arg):
                valid_removes += 1

        assert len(stager) == adds - valid_removes == 3

    def test_clear_empties_stage(self, stager: AttachmentStager) -> None:
        stager.add_files([make_file("a"), make_file("b")])
        stager.clear()

        assert stager.is_empty
        assert len(stager) == 0

    def test_oversized_files_are_refused(self, previews: PreviewRegistry) -> None:
        stager = AttachmentStager(previews, max_file_size=100)
        big = make_file("big.bin", 101)

        rejected = stager.add_files([make_file("ok.bin", 100), big])

        assert rejected == [big]
        assert [e.name for e in stager.staged] == ["ok.bin"]


class TestPreviews:
    """Tests for preview handle ownership."""

    def test_image_gets_preview(self, stager: AttachmentStager, image_file: SourceFile) -> None:
        stager.add_files([image_file])

        handle = stager.preview_for(stager.staged[0])

        assert handle is not None
        assert handle.url.startswith("/previews/")
        assert not handle.released

    def test_preview_is_cached(self, stager: AttachmentStager, image_file: SourceFile) -> None:
        stager.add_files([image_file])
        entry = stager.staged[0]

        assert stager.preview_for(entry) is stager.preview_for(entry)

    def test_non_image_has_no_preview(self, stager: AttachmentStager, pdf_file: SourceFile) -> None:
        stager.add_files([pdf_file, make_file("clip.mp4", 10, "video/mp4")])

        for entry in stager.staged:
            assert stager.preview_for(entry) is None

    def test_image_without_content_has_no_preview(self, stager: AttachmentStager) -> None:
        stager.add_files([SourceFile(name="remote.png", byte_size=10, mime_type="image/png")])

        assert stager.preview_for(stager.staged[0]) is None

    def test_remove_releases_preview(
        self,
        stager: AttachmentStager,
        previews: PreviewRegistry,
        image_file: SourceFile,
    ) -> None:
        stager.add_files([image_file])
        handle = stager.preview_for(stager.staged[0])

        stager.remove_file(0)

        assert handle.released
        assert handle.url not in previews
        assert len(previews) == 0

    def test_clear_releases_every_preview(
        self,
        stager: AttachmentStager,
        previews: PreviewRegistry,
        image_file: SourceFile,
    ) -> None:
        stager.add_files([image_file, image_file, make_file("notes.txt")])
        handles = [stager.preview_for(e) for e in stager.staged[:2]]

        stager.clear()

        assert all(h.released for h in handles)
        assert len(previews) == 0

    def test_removed_entry_gets_no_new_preview(
        self,
        stager: AttachmentStager,
        previews: PreviewRegistry,
        image_file: SourceFile,
    ) -> None:
        stager.add_files([image_file])
        entry = stager.staged[0]
        stager.remove_file(0)

        assert stager.preview_for(entry) is None
        assert len(previews) == 0
