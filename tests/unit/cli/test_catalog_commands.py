"""Tests for the catalog CLI commands."""

import json
from unittest.mock import patch

import pytest
from typer.testing import CliRunner

from src.catalog.runtime.config.config_data import ConfigData, StorageConfig
from src.catalog.runtime.context import with_context
from src.cli import app

runner = CliRunner()


@pytest.fixture
def data_dir(tmp_path):
    """Point the CLI at a file store in a temporary directory."""
    config = ConfigData(storage=StorageConfig(backend="file", directory=str(tmp_path)))
    with with_context(config):
        yield tmp_path


def _stored(data_dir) -> list[dict]:
    path = data_dir / "storeProducts_v1.json"
    if not path.exists():
        return []
    return json.loads(path.read_text())


def _invoke(*args: str, input: str | None = None):
    return runner.invoke(app, ["products", *args], input=input)


def _save_shirt(product_id: str = "p1"):
    return _invoke(
        "save", product_id,
        "--name", "Shirt",
        "--description", "Blue",
        "--price", "19.99",
        "--type", "apparel",
        "--size", "M=2",
    )


class TestProductCommands:
    def test_new_creates_empty_product(self, data_dir):
        result = _invoke("new")

        assert result.exit_code == 0
        [product] = _stored(data_dir)
        assert product["id"] in result.output
        assert product["images"] == [None] * 6

    def test_list_empty(self, data_dir):
        result = _invoke("list")

        assert result.exit_code == 0
        assert "No products yet" in result.output

    def test_save_and_list(self, data_dir):
        assert _save_shirt().exit_code == 0

        [product] = _stored(data_dir)
        assert product["name"] == "Shirt"
        assert product["price"] == 19.99
        assert product["sizes"]["M"] == 2

        result = _invoke("list")
        assert "Shirt" in result.output

    def test_save_blank_name_fails(self, data_dir):
        result = _invoke("save", "p1", "--name", " ", "--description", "Blue")

        assert result.exit_code == 1
        assert "Name is required" in result.output
        assert _stored(data_dir) == []

    def test_save_unknown_size_label(self, data_dir):
        result = _invoke(
            "save", "p1", "--name", "Shirt", "--description", "Blue", "--size", "XS=1"
        )

        assert result.exit_code == 1
        assert _stored(data_dir) == []

    def test_show(self, data_dir):
        _save_shirt()

        result = _invoke("show", "p1")

        assert result.exit_code == 0
        assert "$19.99" in result.output
        assert "S:0 M:2 L:0 XL:0 XXL:0" in result.output

    def test_show_missing(self, data_dir):
        result = _invoke("show", "ghost")

        assert result.exit_code == 1
        assert "not found" in result.output

    def test_delete_forced(self, data_dir):
        _save_shirt("p1")
        _save_shirt("p2")

        result = _invoke("delete", "p1", "--force")

        assert result.exit_code == 0
        assert [p["id"] for p in _stored(data_dir)] == ["p2"]

    def test_delete_cancelled(self, data_dir):
        _save_shirt()

        result = _invoke("delete", "p1", input="n\n")

        assert "Cancelled" in result.output
        assert len(_stored(data_dir)) == 1

    def test_store(self, data_dir):
        _save_shirt()

        result = _invoke("store")

        assert result.exit_code == 0
        assert "Shirt" in result.output


class TestImageCommands:
    @pytest.fixture
    def image_file(self, tmp_path, png_bytes):
        path = tmp_path / "shirt.png"
        path.write_bytes(png_bytes)
        return path

    def test_set_image_uses_one_based_slots(self, data_dir, image_file):
        _save_shirt()

        result = _invoke("set-image", "p1", "2", str(image_file))

        assert result.exit_code == 0
        images = _stored(data_dir)[0]["images"]
        assert images[1].startswith("data:image/png;base64,")
        assert images.count(None) == 5

    def test_clear_image(self, data_dir, image_file):
        _save_shirt()
        _invoke("set-image", "p1", "1", str(image_file))

        result = _invoke("clear-image", "p1", "1")

        assert result.exit_code == 0
        assert _stored(data_dir)[0]["images"] == [None] * 6

    def test_slot_out_of_range(self, data_dir, image_file):
        _save_shirt()

        result = _invoke("set-image", "p1", "7", str(image_file))

        assert result.exit_code == 1
        assert _stored(data_dir)[0]["images"] == [None] * 6

    def test_unreadable_file(self, data_dir, image_file):
        _save_shirt()

        with patch("pathlib.Path.read_bytes", side_effect=OSError("permission denied")):
            result = _invoke("set-image", "p1", "1", str(image_file))

        assert result.exit_code == 1
        assert "Could not read" in result.output
        assert _stored(data_dir)[0]["images"] == [None] * 6

    def test_non_image_file(self, data_dir, tmp_path):
        _save_shirt()
        notes = tmp_path / "notes.txt"
        notes.write_text("hello")

        result = _invoke("set-image", "p1", "1", str(notes))

        assert result.exit_code == 1
        assert "not an image" in result.output


def test_serve_runs_uvicorn():
    with patch("uvicorn.run") as mock_run:
        result = runner.invoke(app, ["serve", "--port", "9001"])

    assert result.exit_code == 0
    args, kwargs = mock_run.call_args
    assert args == ("src.catalog.api.http.app:app",)
    assert kwargs["port"] == 9001
