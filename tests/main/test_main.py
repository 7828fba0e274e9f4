import logging
from unittest.mock import AsyncMock, patch

import pytest

from domain.models import ServiceSettings
from main import build_parser, forward_terms, main, setup_logging
from settings import save_settings


@pytest.fixture
def config(tmp_path):
    settings = ServiceSettings(
        cache_dir=str(tmp_path / 'cache' / 'tiles'),
        tile_base_url='http://tiles.test/maptile/newest',
    )
    return save_settings(settings, tmp_path / 'settings.toml')


class TestMain:
    def test_setup_logging(self, tmp_path):
        settings = ServiceSettings(cache_dir=str(tmp_path / 'cache' / 'tiles'))
        with patch('main.logging.basicConfig') as basic_config:
            log_file = setup_logging(settings)
        assert log_file == tmp_path / 'cache' / 'navprovider.log'
        assert log_file.exists()
        kwargs = basic_config.call_args.kwargs
        assert kwargs['level'] == logging.INFO
        assert len(kwargs['handlers']) == 2
        for handler in kwargs['handlers']:
            handler.close()

    def test_forward_terms_positions(self):
        args = build_parser().parse_args(
            ['forward', '--num', '5', '--street', 'Main St', '--country', 'Finland']
        )
        terms = forward_terms(args)
        assert len(terms) == 9
        assert (terms[0], terms[2], terms[4], terms[7], terms[8]) == (
            '5', 'Main St', None, None, 'Finland',
        )

    def test_tile_style_accepts_hex(self):
        args = build_parser().parse_args(['tile', '60', '25', '10', '300', '200', '--style', '0x0a'])
        assert args.style == 0x0A

    def test_categories(self, config, capsys):
        with patch('main.logging.basicConfig'):
            assert main(['--config', str(config), 'categories']) == 0
        out = capsys.readouterr().out
        assert 'category1' in out

    def test_tile_written(self, config, tmp_path, red_png, capsys):
        out_file = tmp_path / 'out.png'
        with patch('main.logging.basicConfig'), patch(
            'tiles.fetcher.fetch_bytes', new=AsyncMock(return_value=red_png)
        ):
            rc = main(
                ['--config', str(config), 'tile', '60.17', '24.94', '12', '200', '100',
                 '--out', str(out_file)]
            )
        assert rc == 0
        assert out_file.read_bytes().startswith(b'\x89PNG')
        assert 'NW' in capsys.readouterr().out

    def test_invalid_size_refused(self, config):
        with patch('main.logging.basicConfig'):
            rc = main(['--config', str(config), 'tile', '60', '25', '10', '0', '200'])
        assert rc == 2

    def test_offline_flag_refuses_tile(self, config):
        fetch = AsyncMock()
        with patch('main.logging.basicConfig'), patch('tiles.fetcher.fetch_bytes', new=fetch):
            rc = main(['--config', str(config), '--offline', 'tile', '60', '25', '10', '100', '100'])
        assert rc == 2
        assert fetch.await_count == 0
