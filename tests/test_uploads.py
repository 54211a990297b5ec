"""Unit tests for jewelry_api.core.uploads: type/size policy, naming, storage and deletion."""

import io
import shutil
import tempfile
import unittest
from pathlib import Path

from jewelry_api.core.errors import PayloadTooLarge, UnsupportedMediaType, ValidationError
from jewelry_api.core.uploads import (
    UploadCategory,
    UploadDescriptor,
    UploadStore,
    require_single_file,
)

MIB = 1024 * 1024


def _descriptor(
    filename: str = "ring.jpg",
    content_type: str = "image/jpeg",
    size: int | None = 1024,
    field_name: str = "image",
) -> UploadDescriptor:
    return UploadDescriptor(
        field_name=field_name,
        original_filename=filename,
        content_type=content_type,
        size=size,
    )


class UploadStoreTestCase(unittest.TestCase):
    def setUp(self) -> None:
        self.root = tempfile.mkdtemp(prefix="uploads-")
        self.store = UploadStore(self.root, 5 * MIB)
        self.store.ensure_dirs()

    def tearDown(self) -> None:
        shutil.rmtree(self.root, ignore_errors=True)


class TestEnsureDirs(UploadStoreTestCase):
    def test_creates_every_category(self) -> None:
        for category in UploadCategory:
            self.assertTrue((Path(self.root) / category.value).is_dir())


class TestValidate(UploadStoreTestCase):
    """Extension and declared content type must both be on the allow-list."""

    def test_png_extension_with_text_plain_rejected(self) -> None:
        with self.assertRaises(UnsupportedMediaType):
            self.store.validate(_descriptor("ring.png", "text/plain"))

    def test_image_type_with_bad_extension_rejected(self) -> None:
        with self.assertRaises(UnsupportedMediaType):
            self.store.validate(_descriptor("ring.exe", "image/png"))

    def test_missing_extension_rejected(self) -> None:
        with self.assertRaises(UnsupportedMediaType):
            self.store.validate(_descriptor("ring", "image/png"))

    def test_declared_size_over_ceiling_rejected(self) -> None:
        with self.assertRaises(PayloadTooLarge):
            self.store.validate(_descriptor(size=5 * MIB + 1))

    def test_size_at_ceiling_accepted(self) -> None:
        self.assertEqual(self.store.validate(_descriptor(size=5 * MIB)), ".jpg")

    def test_extension_and_type_are_case_insensitive(self) -> None:
        self.assertEqual(
            self.store.validate(_descriptor("RING.WEBP", "Image/WebP; charset=binary")),
            ".webp",
        )

    def test_all_allowed_types(self) -> None:
        for name, ctype in [
            ("a.jpeg", "image/jpeg"),
            ("a.jpg", "image/jpeg"),
            ("a.png", "image/png"),
            ("a.gif", "image/gif"),
            ("a.webp", "image/webp"),
        ]:
            with self.subTest(name=name):
                self.store.validate(_descriptor(name, ctype))

    def test_errors_are_validation_errors(self) -> None:
        self.assertTrue(issubclass(PayloadTooLarge, ValidationError))
        self.assertTrue(issubclass(UnsupportedMediaType, ValidationError))
        self.assertEqual(PayloadTooLarge.status_code, 413)
        self.assertEqual(UnsupportedMediaType.status_code, 415)


class TestStore(UploadStoreTestCase):
    def test_two_mib_jpg_stored_under_products_with_generated_name(self) -> None:
        data = b"\xff\xd8" + b"x" * (2 * MIB - 2)
        stored = self.store.store(
            _descriptor("ring.jpg", "image/jpeg", size=len(data)),
            io.BytesIO(data),
            UploadCategory.PRODUCTS,
        )
        self.assertNotEqual(stored.filename, "ring.jpg")
        self.assertTrue(stored.filename.startswith("image-"))
        self.assertTrue(stored.filename.endswith(".jpg"))
        self.assertEqual(stored.path.parent, Path(self.root).resolve() / "products")
        self.assertEqual(stored.relative_path, f"products/{stored.filename}")
        self.assertEqual(stored.path.read_bytes(), data)

    def test_same_original_name_gets_distinct_files(self) -> None:
        names = {
            self.store.store(_descriptor(), io.BytesIO(b"abc"), UploadCategory.DESIGNS).filename
            for _ in range(20)
        }
        self.assertEqual(len(names), 20)

    def test_caller_filename_cannot_escape_category(self) -> None:
        stored = self.store.store(
            _descriptor("../../etc/evil.png", "image/png"),
            io.BytesIO(b"abc"),
            UploadCategory.DESIGNS,
        )
        self.assertEqual(stored.path.parent, Path(self.root).resolve() / "designs")
        self.assertNotIn("evil", stored.filename)

    def test_undeclared_oversize_stream_rejected_and_cleaned_up(self) -> None:
        store = UploadStore(self.root, 10)
        with self.assertRaises(PayloadTooLarge):
            store.store(_descriptor(size=None), io.BytesIO(b"x" * 11), UploadCategory.PRODUCTS)
        self.assertEqual(list((Path(self.root) / "products").iterdir()), [])

    def test_rejected_type_writes_nothing(self) -> None:
        with self.assertRaises(UnsupportedMediaType):
            self.store.store(
                _descriptor("notes.txt", "text/plain"), io.BytesIO(b"abc"), UploadCategory.PRODUCTS
            )
        self.assertEqual(list((Path(self.root) / "products").iterdir()), [])


class TestDelete(UploadStoreTestCase):
    def test_delete_removes_file(self) -> None:
        stored = self.store.store(_descriptor(), io.BytesIO(b"abc"), UploadCategory.PRODUCTS)
        self.assertTrue(self.store.delete(UploadCategory.PRODUCTS, stored.filename))
        self.assertFalse(stored.path.exists())

    def test_delete_missing_file_is_not_an_error(self) -> None:
        self.assertFalse(self.store.delete(UploadCategory.PRODUCTS, "image-missing.jpg"))
        self.assertFalse(self.store.delete(UploadCategory.PRODUCTS, None))

    def test_delete_is_idempotent(self) -> None:
        stored = self.store.store(_descriptor(), io.BytesIO(b"abc"), UploadCategory.PRODUCTS)
        self.assertTrue(self.store.delete(UploadCategory.PRODUCTS, stored.filename))
        self.assertFalse(self.store.delete(UploadCategory.PRODUCTS, stored.filename))

    def test_delete_refuses_traversal(self) -> None:
        outside = Path(self.root) / "keep.txt"
        outside.write_text("keep")
        self.assertFalse(self.store.delete(UploadCategory.PRODUCTS, "../keep.txt"))
        self.assertTrue(outside.exists())


class TestRequireSingleFile(unittest.TestCase):
    def test_no_files(self) -> None:
        self.assertIsNone(require_single_file([], "image"))

    def test_expected_field(self) -> None:
        upload = object()
        self.assertIs(require_single_file([("image", upload)], "image"), upload)

    def test_unexpected_field(self) -> None:
        with self.assertRaises(ValidationError) as ctx:
            require_single_file([("avatar", object())], "image")
        self.assertEqual(ctx.exception.code, "unexpected_file")

    def test_more_than_one_file(self) -> None:
        with self.assertRaises(ValidationError) as ctx:
            require_single_file([("image", object()), ("image", object())], "image")
        self.assertEqual(ctx.exception.code, "too_many_files")


if __name__ == "__main__":
    unittest.main()
