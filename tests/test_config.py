from pathlib import Path

from domain_parser.config import Settings


def test_cache_path_from_environment_expands_user(monkeypatch):
    monkeypatch.setenv("DOMAIN_PARSER_CACHE_PATH", "~/suffixes/tlds.json")

    assert Settings().cache_path == Path.home() / "suffixes" / "tlds.json"


def test_supplemental_path_from_environment_expands_user(monkeypatch):
    monkeypatch.setenv("DOMAIN_PARSER_SUPPLEMENTAL_PATH", "~/additional.yml")

    assert Settings().supplemental_path == Path.home() / "additional.yml"


def test_defaults(monkeypatch):
    monkeypatch.delenv("DOMAIN_PARSER_CACHE_PATH", raising=False)

    config = Settings()

    assert config.cache_ttl == 432000
    assert config.default_suffix == "com"
    assert config.supplemental_path.name == "additional.yml"
    assert "~" not in str(config.cache_path)
