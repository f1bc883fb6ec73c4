from datetime import datetime
from unittest.mock import MagicMock

import pytest

from nogologo.application.usecase.save_images import SaveImagesUseCase
from nogologo.domain.entity.image import GenerationResult, ProviderId
from nogologo.domain.entity.log_entry import LogCategory
from nogologo.domain.exceptions import HttpError, PermissionDenied, PersistenceError
from nogologo.domain.repository.photo_sink import PhotoSink
from nogologo.infrastructure.storage.directory_photo_sink import DirectoryPhotoSink


def fixed_clock():
    return datetime(2025, 8, 27, 12, 0, 0)


class TestDirectoryPhotoSink:
    def test_batch_is_one_album_directory(self, tmp_path, make_image):
        sink = DirectoryPhotoSink(tmp_path / "library", clock=fixed_clock)
        assert sink.request_write_permission()

        album = sink.save_batch([make_image(), make_image(fmt="JPEG"), b"raw"], "NoGoLogo")

        assert album.parent == tmp_path / "library" / "NoGoLogo"
        assert album.name.startswith("20250827-120000-")
        assert sorted(p.name for p in album.iterdir()) == ["image-01.png", "image-02.jpg", "image-03.bin"]
        # no staging leftovers
        assert [p for p in album.parent.iterdir() if p.name.startswith(".")] == []

    def test_two_batches_create_two_albums(self, tmp_path, make_image):
        sink = DirectoryPhotoSink(tmp_path, clock=fixed_clock)

        first = sink.save_batch([make_image()], "NoGoLogo")
        second = sink.save_batch([make_image()], "NoGoLogo")

        assert first != second

    def test_album_name_is_sanitized(self, tmp_path, make_image):
        sink = DirectoryPhotoSink(tmp_path)

        album = sink.save_batch([make_image()], "../../etc")

        assert album.parent.parent == tmp_path

    def test_empty_batch(self, tmp_path):
        with pytest.raises(PersistenceError):
            DirectoryPhotoSink(tmp_path).save_batch([], "NoGoLogo")

    def test_unwritable_root_raises_persistence_error(self, tmp_path, make_image):
        blocker = tmp_path / "not-a-dir"
        blocker.write_text("file")
        sink = DirectoryPhotoSink(blocker / "library")

        assert not sink.request_write_permission()
        with pytest.raises(PersistenceError):
            sink.save_batch([make_image()], "NoGoLogo")


class TestSaveImagesUseCase:
    @pytest.mark.asyncio
    async def test_saves_result(self, tmp_path, request_log, make_image):
        use_case = SaveImagesUseCase(DirectoryPhotoSink(tmp_path), request_log)
        result = GenerationResult.success(ProviderId.XAI, [make_image(), make_image()])

        location = await use_case.execute(result)

        assert len(list(location.iterdir())) == 2
        assert request_log.all()[-1].category is LogCategory.INFO
        assert "saved 2 image(s)" in request_log.all()[-1].message

    @pytest.mark.asyncio
    async def test_permission_denied(self, request_log):
        sink = MagicMock(spec=PhotoSink)
        sink.request_write_permission.return_value = False
        use_case = SaveImagesUseCase(sink, request_log)

        with pytest.raises(PermissionDenied):
            await use_case.execute(GenerationResult.success(ProviderId.OPENAI, [b"img"]))

        sink.save_batch.assert_not_called()
        assert request_log.all()[-1].category is LogCategory.ERROR

    @pytest.mark.asyncio
    async def test_persistence_failure_is_recoverable(self, request_log):
        sink = MagicMock(spec=PhotoSink)
        sink.request_write_permission.return_value = True
        sink.save_batch.side_effect = PersistenceError("disk full")
        use_case = SaveImagesUseCase(sink, request_log, album_name="Custom")

        with pytest.raises(PersistenceError):
            await use_case.execute(GenerationResult.success(ProviderId.OPENAI, [b"img"]))

        sink.save_batch.assert_called_once_with((b"img",), "Custom")

    @pytest.mark.asyncio
    async def test_failed_result_cannot_be_saved(self, request_log):
        use_case = SaveImagesUseCase(MagicMock(spec=PhotoSink), request_log)

        with pytest.raises(ValueError):
            await use_case.execute(GenerationResult.failure(ProviderId.OPENAI, HttpError(500)))
