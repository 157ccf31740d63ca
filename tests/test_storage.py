"""Local file storage."""
import pytest

from weinds.core.errors import StorageError
from weinds.services.storage_service import StorageService, public_url, safe_relative_path


@pytest.mark.parametrize("path", ["/etc/passwd", "../secret", "a/../../b", "a//b", "", "a/./b"])
def test_rejects_unsafe_paths(path):
    with pytest.raises(StorageError):
        safe_relative_path(path)


def test_windows_separators_are_normalized():
    assert safe_relative_path("a\\b.pdf") == "a/b.pdf"


def test_save_file(tmp_path):
    storage = StorageService(root=str(tmp_path))
    url = storage.save_file("tests/emp/post/paper.pdf", b"content", "application/pdf")
    assert url == "/files/tests/emp/post/paper.pdf"
    assert (tmp_path / "tests" / "emp" / "post" / "paper.pdf").read_bytes() == b"content"
    assert storage.exists("tests/emp/post/paper.pdf")
    assert public_url("x/y.txt") == "/files/x/y.txt"


def test_write_failure_is_storage_error(tmp_path):
    blocker = tmp_path / "blocked"
    blocker.write_text("a file, not a directory")
    storage = StorageService(root=str(tmp_path))
    with pytest.raises(StorageError) as exc:
        storage.save_file("blocked/paper.pdf", b"content")
    assert exc.value.status_code == 500


def test_upload_size_limit(client, create_post, employer, monkeypatch):
    from weinds.core.config import get_settings

    post = create_post()
    monkeypatch.setenv("MAX_UPLOAD_MB", "1")
    get_settings.cache_clear()
    response = client.post(
        f"/api/employers/skill-tests/{post['id']}/traditional",
        files={"file": ("big.pdf", b"x" * (1024 * 1024 + 1), "application/pdf")},
        headers=employer[0]
    )
    assert response.status_code == 413
