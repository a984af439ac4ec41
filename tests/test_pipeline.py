"""Integration tests for icon set assembly."""

import json

import pytest

from iconset_tools.iconset import create_empty_icon_set
from iconset_tools.persistence import save_icon_set
from iconset_tools.pipeline import (
    IconSetPipeline,
    Progress,
    assemble_icon_set,
    extract_subset,
    filter_collections,
    generate_icon_set,
    generate_icon_sets,
)
from iconset_tools.sanitize import sanitize_markup
from iconset_tools.sources import GlyphCollection, GlyphDefinition, glyph_collection_from_dict
from iconset_tools.types import GenerateSetOptions, GenerateSetsOptions, SourceReadError

from conftest import square_svg, write_svgs


class TestGenerateIconSet:
    """End-to-end tests for a single icon set."""

    def test_star_and_broken(self, source_dir, output_dir):
        """Test that the valid icon is saved and the empty one is skipped."""
        assembly = generate_icon_set("demo", source_dir, GenerateSetOptions(output_dir=str(output_dir)))

        with open(output_dir / "demo.json", encoding="utf-8") as f:
            data = json.load(f)

        assert list(data["icons"]) == ["star"]
        assert "currentColor" in data["icons"]["star"]["body"]
        assert "#ff0000" not in data["icons"]["star"]["body"]
        assert data["info"]["author"] == {"name": "Font Awesome"}
        assert assembly.result.count == 1
        assert [f.name for f in assembly.failures] == ["broken"]

    def test_bad_icon_isolated(self, tmp_path, output_dir):
        """Test that one malformed file does not affect the others."""
        folder = write_svgs(tmp_path / "svgs", {
            "a": square_svg(1), "b": square_svg(2), "c": "<svg><path", "d": square_svg(4),
        })

        assembly = generate_icon_set("demo", folder, GenerateSetOptions(output_dir=str(output_dir)))

        assert list(assembly.icon_set) == ["a", "b", "d"]
        assert assembly.result.count == 3

    def test_empty_directory(self, tmp_path, output_dir):
        """Test that an empty source folder yields an empty set."""
        folder = tmp_path / "empty"
        folder.mkdir()

        assembly = generate_icon_set("demo", folder, GenerateSetOptions(output_dir=str(output_dir)))

        assert assembly.result.count == 0
        assert json.loads((output_dir / "demo.json").read_text())["icons"] == {}

    def test_missing_directory(self, tmp_path, output_dir):
        """Test that a missing source folder is a fatal error."""
        with pytest.raises(SourceReadError):
            generate_icon_set("demo", tmp_path / "missing", GenerateSetOptions(output_dir=str(output_dir)))
        assert not (output_dir / "demo.json").exists()

    def test_allow_list(self, tmp_path, output_dir):
        """Test that only listed icons are kept."""
        folder = write_svgs(tmp_path / "svgs", {"a": square_svg(), "b": square_svg(), "c": square_svg()})

        assembly = generate_icon_set(
            "demo", folder, GenerateSetOptions(icons=["c", "a"], output_dir=str(output_dir))
        )

        assert list(assembly.icon_set) == ["a", "c"]

    def test_output_filename(self, source_dir, output_dir):
        """Test a custom output file name."""
        generate_icon_set(
            "demo", source_dir, GenerateSetOptions(output_filename="custom", output_dir=str(output_dir))
        )

        assert (output_dir / "custom.json").is_file()
        assert not (output_dir / "demo.json").exists()

    def test_glyph_collection_source(self, solid_pack, output_dir):
        """Test building a set from a glyph collection."""
        collection = glyph_collection_from_dict(solid_pack)

        assembly = generate_icon_set("fas", collection, GenerateSetOptions(output_dir=str(output_dir)))

        icons = assembly.icon_set.export()["icons"]
        assert list(icons) == ["star", "heart"]
        assert icons["star"]["width"] == 576
        assert icons["star"]["height"] == 512


class TestIconSetPipeline:
    """Test cases for IconSetPipeline.assemble."""

    def test_missing_glyphs_skipped(self):
        """Test that absent glyphs are skipped but still reported to progress."""
        seen = []
        pipeline = IconSetPipeline()

        icon_set, failures = pipeline.assemble(
            "demo", [("a", square_svg()), ("ghost", None)], on_progress=seen.append
        )

        assert list(icon_set) == ["a"]
        assert failures == []
        assert seen == ["a", "ghost"]

    def test_failed_duplicate_keeps_earlier_icon(self):
        """Test that a later invalid duplicate leaves the valid icon in place."""
        icon_set, failures = IconSetPipeline().assemble("demo", [("a", square_svg()), ("a", "")])

        assert list(icon_set) == ["a"]
        assert len(failures) == 1

    def test_duplicate_last_valid_wins(self):
        """Test that the last valid icon with a name is kept."""
        icon_set, _ = IconSetPipeline().assemble("demo", [("a", square_svg(10)), ("a", square_svg(30))])

        assert icon_set.get("a")["width"] == 30

    def test_assemble_icon_set_unpacks(self, output_dir):
        """Test assembling raw entries straight to a saved file."""
        icon_set, result, failures = assemble_icon_set(
            "demo", [("a", square_svg()), ("b", "<svg")], GenerateSetOptions(output_dir=str(output_dir))
        )

        assert icon_set.count() == 1
        assert result.size == len((output_dir / "demo.json").read_bytes())
        assert [f.name for f in failures] == ["b"]


class TestGenerateIconSets:
    """Test cases for batch generation."""

    @pytest.fixture
    def collections(self, solid_pack, brands_pack):
        return [
            glyph_collection_from_dict(brands_pack),
            GlyphCollection("far", {}),
            glyph_collection_from_dict(solid_pack),
        ]

    def test_all_families(self, collections, output_dir):
        """Test that every collection becomes a file."""
        summary = generate_icon_sets(collections, GenerateSetsOptions(output_dir=str(output_dir)))

        assert list(summary) == ["fab", "far", "fas"]
        assert summary["fas"].count == 2
        assert summary["far"].count == 0
        for prefix in summary:
            assert (output_dir / f"{prefix}.json").is_file()

    def test_set_filter(self, collections, output_dir):
        """Test that only the selected families are generated."""
        summary = generate_icon_sets(
            collections, GenerateSetsOptions(sets=["fas"], output_dir=str(output_dir))
        )

        assert list(summary) == ["fas"]
        assert not (output_dir / "fab.json").exists()

    def test_progress(self, collections, output_dir):
        """Test that progress counts every glyph against the total."""
        calls = []

        generate_icon_sets(
            collections,
            GenerateSetsOptions(output_dir=str(output_dir)),
            progress=lambda current, total, name: calls.append((current, total, name)),
        )

        assert [c[0] for c in calls] == [1, 2, 3]
        assert {c[1] for c in calls} == {3}
        assert calls[0][2] == "github"

    def test_pack_paths_loaded_per_family(self, tmp_path, solid_pack, output_dir):
        """Test that an unreadable pack file fails only its own family."""
        fas_path = tmp_path / "fas.json"
        fas_path.write_text(json.dumps(solid_pack))
        broken_path = tmp_path / "fab.json"
        broken_path.write_text("{not json")

        summary = generate_icon_sets(
            [broken_path, tmp_path / "far.json", fas_path],
            GenerateSetsOptions(output_dir=str(output_dir)),
        )

        assert list(summary) == ["fab", "far", "fas"]
        assert summary["fab"].failed
        assert summary["far"].failed
        assert summary["fas"].count == 2
        assert (output_dir / "fas.json").is_file()

    def test_empty_icon_name_isolated(self, solid_pack, output_dir):
        """Test that a nameless glyph is a per-icon failure."""
        collections = [
            GlyphCollection("fab", {"": GlyphDefinition(10, 10, "M0 0h10v10H0z")}),
            glyph_collection_from_dict(solid_pack),
        ]

        summary = generate_icon_sets(collections, GenerateSetsOptions(output_dir=str(output_dir)))

        assert summary["fab"].count == 0
        assert not summary["fab"].failed
        assert summary["fas"].count == 2

    def test_family_failure_isolated(self, collections, output_dir):
        """Test that a family that cannot be saved does not stop the others."""
        (output_dir / "fab.json").mkdir(parents=True)

        summary = generate_icon_sets(collections, GenerateSetsOptions(output_dir=str(output_dir)))

        assert summary["fab"].failed
        assert summary["fab"].error
        assert not summary["fas"].failed
        assert (output_dir / "fas.json").is_file()


class TestProgress:
    """Test cases for the progress counter."""

    def test_increment(self):
        """Test counter and callback."""
        calls = []
        progress = Progress(2, lambda *args: calls.append(args))

        progress.increment("a")
        progress.increment("b")

        assert progress.current == 2
        assert calls == [(1, 2, "a"), (2, 2, "b")]

    def test_filter_collections(self):
        """Test family selection."""
        collections = [GlyphCollection("fab"), GlyphCollection("fas")]

        assert [c.prefix for c in filter_collections(collections)] == ["fab", "fas"]
        assert [c.prefix for c in filter_collections(collections, ["fas"])] == ["fas"]


class TestExtractSubset:
    """Test cases for extract_subset."""

    @pytest.fixture
    def saved_set(self, output_dir):
        icon_set = create_empty_icon_set("demo")
        for name in ["a", "b", "c"]:
            icon_set.put(name, sanitize_markup(name, square_svg()))
        save_icon_set(icon_set, output_dir)
        return output_dir

    def test_subset(self, saved_set):
        """Test that only requested icons remain."""
        subset = extract_subset("demo", ["a", "c", "missing"], source_dir=saved_set)

        assert list(subset) == ["a", "c"]
        assert subset.prefix == "demo"

    def test_empty_list_keeps_nothing(self, saved_set):
        """Test that an empty request gives an empty set."""
        assert extract_subset("demo", [], source_dir=saved_set).count() == 0

    def test_missing_file(self, tmp_path):
        """Test that a missing icon set file raises SourceReadError."""
        with pytest.raises(SourceReadError):
            extract_subset("demo", ["a"], source_dir=tmp_path)
