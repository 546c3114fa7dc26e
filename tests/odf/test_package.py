"""
Archive-level fill of .odt templates.
"""

import zipfile

import pytest

from odtfill import FillOptions, OdfImage, fill_odt_template, get_content_document, get_odt_text_content
from odtfill.errors import MissingEntryError, PackageError, TemplateStructureError
from odtfill.odf.manifest import parse_manifest
from tests.infrastructure.odt_builders import PNG_BYTES, make_odt, zip_info, zip_names, zip_read

ODT_MIMETYPE = "application/vnd.oasis.opendocument.text"


class TestFillOdtTemplate:

    def setup_method(self):
        self.template = make_odt("<text:p>Bonjour {nom}</text:p>")

    def test_content_filled(self):
        result = fill_odt_template(self.template, {"nom": "Alice"})
        assert get_odt_text_content(result) == "Bonjour Alice\n"

    def test_entry_order_and_dropped_entries(self):
        result = fill_odt_template(self.template, {"nom": "x"})
        assert zip_names(result) == ["mimetype", "content.xml", "styles.xml", "META-INF/manifest.xml"]

    def test_mimetype_first_and_stored(self):
        result = fill_odt_template(self.template, {})

        info = zip_info(result, "mimetype")
        assert info.compress_type == zipfile.ZIP_STORED
        assert zip_read(result, "mimetype") == ODT_MIMETYPE.encode()

    def test_content_keeps_timestamp_and_is_deflated(self):
        result = fill_odt_template(self.template, {})

        info = zip_info(result, "content.xml")
        assert info.date_time == (2021, 6, 15, 12, 30, 0)
        assert info.compress_type == zipfile.ZIP_DEFLATED

    def test_manifest_synchronized(self):
        result = fill_odt_template(self.template, {})

        manifest = parse_manifest(zip_read(result, "META-INF/manifest.xml"))
        assert list(manifest.file_entries) == ["/", "content.xml", "styles.xml"]
        assert manifest.media_type == ODT_MIMETYPE

    def test_extra_kept_entries(self):
        options = FillOptions().with_extra_entries(("/settings.xml", "/Thumbnails/**"))

        result = fill_odt_template(self.template, {}, options=options)

        assert "settings.xml" in zip_names(result)
        assert "Thumbnails/thumbnail.png" in zip_names(result)
        manifest = parse_manifest(zip_read(result, "META-INF/manifest.xml"))
        assert "settings.xml" in manifest.file_entries

    def test_template_pictures_kept(self):
        template = make_odt("<text:p>x</text:p>", extra_files={"Pictures/logo.png": PNG_BYTES})

        result = fill_odt_template(template, {})

        assert zip_read(result, "Pictures/logo.png") == PNG_BYTES
        assert "Pictures/logo.png" in parse_manifest(zip_read(result, "META-INF/manifest.xml")).file_entries

    def test_images_added(self):
        template = make_odt(
            "<text:p>{#image photo}</text:p>",
            extra_files={"Pictures/photo.png": PNG_BYTES},
        )
        photo = OdfImage(content=b"new image", file_name="photo.png", media_type="image/png")

        result = fill_odt_template(template, {"photo": photo})

        names = zip_names(result)
        assert names[-1] == "META-INF/manifest.xml"
        assert "Pictures/photo-1.png" in names
        assert zip_read(result, "Pictures/photo-1.png") == b"new image"
        assert zip_info(result, "Pictures/photo-1.png").compress_type == zipfile.ZIP_STORED

        manifest = parse_manifest(zip_read(result, "META-INF/manifest.xml"))
        assert manifest.file_entries["Pictures/photo-1.png"].media_type == "image/png"

        document = get_content_document(result)
        hrefs = [i.getAttribute("xlink:href") for i in document.getElementsByTagName("draw:image")]
        assert hrefs == ["Pictures/photo-1.png"]

    def test_custom_pictures_dir(self):
        template = make_odt("<text:p>{#image photo}</text:p>")
        photo = OdfImage(content=PNG_BYTES, file_name="photo.png", media_type="image/png")
        options = FillOptions(
            kept_entries=FillOptions().kept_entries + ("/media/**",),
            pictures_dir="media",
        )

        result = fill_odt_template(template, {"photo": photo}, options=options)

        assert "media/photo.png" in zip_names(result)

    def test_missing_content(self):
        with pytest.raises(MissingEntryError) as exc:
            fill_odt_template(make_odt("", with_content=False), {})
        assert str(exc.value) == "'content.xml' zip entry missing"

    def test_missing_manifest(self):
        with pytest.raises(MissingEntryError) as exc:
            fill_odt_template(make_odt("<text:p/>", with_manifest=False), {})
        assert exc.value.entry == "META-INF/manifest.xml"

    def test_not_a_zip(self):
        with pytest.raises(PackageError, match="Not an OpenDocument container") as exc:
            fill_odt_template(b"<office:document/>", {})
        assert isinstance(exc.value.__cause__, zipfile.BadZipFile)

    def test_structure_error_propagates(self):
        with pytest.raises(TemplateStructureError):
            fill_odt_template(make_odt("<text:p>{/if}</text:p>"), {})


class TestTextContent:

    def test_paragraphs_headings_and_lists(self):
        odt = make_odt(
            "<text:h>Titre</text:h>"
            "<text:p>Un <text:span>paragraphe</text:span></text:p>"
            "<text:list>"
            "<text:list-item><text:p>premier</text:p></text:list-item>"
            "<text:list-item><text:p>second</text:p></text:list-item>"
            "</text:list>"
        )
        assert get_odt_text_content(odt) == "Titre\nUn paragraphe\n- premier\n- second\n"

    def test_table_paragraphs(self):
        odt = make_odt(
            "<table:table><table:table-row>"
            "<table:table-cell><text:p>a</text:p></table:table-cell>"
            "<table:table-cell><text:p>b</text:p></table:table-cell>"
            "</table:table-row></table:table>"
        )
        assert get_odt_text_content(odt) == "a\nb\n"

    def test_missing_content(self):
        with pytest.raises(MissingEntryError):
            get_odt_text_content(make_odt("", with_content=False))

    def test_not_a_zip(self):
        with pytest.raises(PackageError):
            get_odt_text_content(b"texte brut")
