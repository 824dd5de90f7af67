from __future__ import annotations

from billing.constant import PLACEHOLDER_IMAGE_REF, QR_IMAGE_CANDIDATES
from billing.images import ImageResolver


def test_first_existing_candidate_wins(tmp_path):
    (tmp_path / "QR").mkdir()
    (tmp_path / "QR" / "qr.png").write_bytes(b"png")
    (tmp_path / "qr code.webp").write_bytes(b"webp")

    resolved = ImageResolver(QR_IMAGE_CANDIDATES, base_dir=tmp_path).resolve()

    assert resolved.path == tmp_path / "qr code.webp"
    assert not resolved.is_placeholder


def test_placeholder_when_nothing_exists(tmp_path):
    resolved = ImageResolver(QR_IMAGE_CANDIDATES, base_dir=tmp_path).resolve()

    assert resolved.is_placeholder
    assert resolved.ref == PLACEHOLDER_IMAGE_REF
    assert resolved.path is None


def test_explicit_reference_is_tried_first(tmp_path):
    (tmp_path / "idly.jpg").write_bytes(b"jpg")
    (tmp_path / "QR.png").write_bytes(b"png")

    resolved = ImageResolver(["QR.png"], base_dir=tmp_path).resolve("idly.jpg")

    assert resolved.path == tmp_path / "idly.jpg"


def test_remote_references_pass_through(tmp_path):
    url = "https://example.com/dosa.jpg"
    resolved = ImageResolver(base_dir=tmp_path).resolve(url)

    assert resolved.ref == url
    assert resolved.path is None
    assert not resolved.is_placeholder


def test_missing_local_reference_falls_back(tmp_path):
    resolved = ImageResolver(base_dir=tmp_path).resolve("missing.jpg")
    assert resolved.is_placeholder
