"""Tests for Generator class."""

import json
import os
from unittest.mock import MagicMock

import pytest
from PIL import Image

from sheetthumbs.generator import Generator
from sheetthumbs.image_fetcher import ImageFetcher, ImageFetchError
from sheetthumbs.image_task import url_id
from sheetthumbs.row_result import RowStatus
from sheetthumbs.thumbnail_generator import ThumbnailGenerator


URL_A = 'https://example.com/a.png'
URL_B = 'https://example.com/b.png'


def _row(url):
    return {'Name': 'x', 'Main Image URL': url}


class TestGenerator:
    """Tests for Generator class."""

    @pytest.fixture
    def mock_fetcher(self, sample_image_bytes):
        """Create a mock fetcher returning a valid image."""
        fetcher = MagicMock(spec=ImageFetcher)
        fetcher.fetch.return_value = sample_image_bytes
        return fetcher

    def _generator(self, config, fetcher, logger):
        thumb_gen = ThumbnailGenerator(config.width, config.height, crop_position=config.crop_position)
        return Generator(config, fetcher, thumb_gen, logger=logger)

    def test_written(self, build_config, mock_fetcher, logger):
        """Test a new row is fetched, resized and written."""
        generator = self._generator(build_config, mock_fetcher, logger)

        manifest = generator.generate([_row(URL_A)])

        path = os.path.join(build_config.out_dir, f"{url_id(URL_A)}.jpg")
        assert Image.open(path).size == (60, 40)
        assert manifest.to_list() == [{
            'id': url_id(URL_A),
            'src': URL_A,
            'file': f"{url_id(URL_A)}.jpg",
            'status': 'written',
        }]
        mock_fetcher.fetch.assert_called_once_with(URL_A)

    def test_skip_no_src(self, build_config, mock_fetcher, logger):
        """Test blank, whitespace-only and missing cells are skipped."""
        generator = self._generator(build_config, mock_fetcher, logger)

        manifest = generator.generate([_row(''), _row('   '), {'Name': 'no column'}])

        assert [e['status'] for e in manifest] == ['skip-no-src'] * 3
        assert os.listdir(build_config.out_dir) == []
        mock_fetcher.fetch.assert_not_called()

    def test_source_url_is_stripped(self, build_config, mock_fetcher, logger):
        """Test surrounding whitespace does not change the id."""
        generator = self._generator(build_config, mock_fetcher, logger)

        manifest = generator.generate([_row(f"  {URL_A}\n")])

        assert manifest.entries[0]['id'] == url_id(URL_A)

    def test_second_run_is_cache_hit(self, build_config, mock_fetcher, logger):
        """Test an unchanged second run writes nothing."""
        self._generator(build_config, mock_fetcher, logger).generate([_row(URL_A)])
        mock_fetcher.fetch.reset_mock()

        generator = self._generator(build_config, mock_fetcher, logger)
        manifest = generator.generate([_row(URL_A)])

        assert manifest.entries[0]['status'] == 'exists-correct'
        assert generator.stats.written == 0
        mock_fetcher.fetch.assert_not_called()

    def test_existence_only_cache(self, build_config, mock_fetcher, logger):
        """Test existence-only mode reports 'exists' whatever the size."""
        self._generator(build_config, mock_fetcher, logger).generate([_row(URL_A)])
        config = build_config.with_overrides(width=80, verify_dimensions=False)

        manifest = self._generator(config, mock_fetcher, logger).generate([_row(URL_A)])

        assert manifest.entries[0]['status'] == 'exists'
        assert mock_fetcher.fetch.call_count == 1

    def test_dimension_change_rebuilds_in_place(self, build_config, mock_fetcher, logger):
        """Test new target size rewrites the same file name."""
        self._generator(build_config, mock_fetcher, logger).generate([_row(URL_A)])
        config = build_config.with_overrides(width=30, height=50)

        manifest = self._generator(config, mock_fetcher, logger).generate([_row(URL_A)])

        path = os.path.join(build_config.out_dir, f"{url_id(URL_A)}.jpg")
        assert manifest.entries[0]['status'] == 'written'
        assert os.listdir(build_config.out_dir) == [f"{url_id(URL_A)}.jpg"]
        assert Image.open(path).size == (30, 50)

    def test_force_rebuild(self, build_config, mock_fetcher, logger):
        """Test force rebuilds correct files."""
        self._generator(build_config, mock_fetcher, logger).generate([_row(URL_A)])
        config = build_config.with_overrides(force_rebuild=True)

        manifest = self._generator(config, mock_fetcher, logger).generate([_row(URL_A)])

        assert manifest.entries[0]['status'] == 'written'
        assert mock_fetcher.fetch.call_count == 2

    def test_fetch_error_recorded_and_run_continues(self, build_config, mock_fetcher, sample_image_bytes, logger):
        """Test a failing row does not stop later rows."""
        mock_fetcher.fetch.side_effect = [
            ImageFetchError('Image fetch failed: HTTP 500', status_code=500),
            sample_image_bytes,
        ]
        generator = self._generator(build_config, mock_fetcher, logger)

        manifest = generator.generate([_row(URL_A), _row(URL_B)])

        assert manifest.entries[0]['status'] == 'error: Image fetch failed: HTTP 500'
        assert manifest.entries[1]['status'] == 'written'
        assert not os.path.exists(os.path.join(build_config.out_dir, f"{url_id(URL_A)}.jpg"))
        assert generator.stats.errors == 1
        assert generator.stats.written == 1

    def test_decode_error_recorded(self, build_config, mock_fetcher, logger):
        """Test undecodable bytes become an error entry."""
        mock_fetcher.fetch.return_value = b'<html>not an image</html>'
        generator = self._generator(build_config, mock_fetcher, logger)

        result = generator.process_row(_row(URL_A))

        assert result.status is RowStatus.FAILED
        assert result.status_text.startswith('error: ')

    def test_manifest_mirrors_row_order(self, build_config, mock_fetcher, logger):
        """Test one entry per row, in row order."""
        generator = self._generator(build_config, mock_fetcher, logger)

        manifest = generator.generate([_row(URL_B), _row(''), _row(URL_A)])

        assert [e.get('src') for e in manifest] == [URL_B, None, URL_A]

    def test_limit(self, build_config, mock_fetcher, logger):
        """Test limit processes only the first rows."""
        generator = self._generator(build_config, mock_fetcher, logger)

        manifest = generator.generate([_row(URL_A), _row(URL_B)], limit=1)

        assert len(manifest) == 1

    def test_every_row_gets_an_entry(self, build_config, mock_fetcher, logger):
        """Test a full run records one entry per row."""
        generator = self._generator(build_config, mock_fetcher, logger)

        manifest = generator.generate([_row(URL_A), _row(''), _row(URL_B)])

        assert len(manifest) == 3
        assert generator.stats.completed_count == 3

    def test_limit_zero_processes_nothing(self, build_config, mock_fetcher, logger):
        """Test limit 0 is not treated as unlimited."""
        generator = self._generator(build_config, mock_fetcher, logger)

        manifest = generator.generate([_row(URL_A), _row(URL_B)], limit=0)

        assert len(manifest) == 0
        mock_fetcher.fetch.assert_not_called()

    def test_creates_output_directory(self, build_config, mock_fetcher, logger):
        """Test the output directory is created up front."""
        generator = self._generator(build_config, mock_fetcher, logger)

        generator.generate([])

        assert os.path.isdir(build_config.out_dir)

    def test_progress_notified(self, build_config, mock_fetcher, logger):
        """Test progress receives each row."""
        progress = MagicMock()
        generator = self._generator(build_config, mock_fetcher, logger)

        generator.generate([_row(URL_A), _row('')], progress=progress)

        assert progress.on_row_processed.call_count == 2
        assert progress.on_progress_update.call_count == 2

    def test_manifest_saved_json(self, build_config, mock_fetcher, logger):
        """Test the generated manifest serializes to the expected file."""
        generator = self._generator(build_config, mock_fetcher, logger)

        generator.generate([_row(URL_A)]).save(build_config.out_dir)

        with open(build_config.manifest_path, encoding='utf-8') as f:
            data = json.load(f)
        assert data[0]['status'] == 'written'
