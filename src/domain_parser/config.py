from pathlib import Path

from pydantic import field_validator
from pydantic_settings import BaseSettings

from .yaml_config import get_defaults

_defaults = get_defaults()

_BUNDLED_SUPPLEMENTAL = Path(__file__).parent / "additional.yml"
_DEFAULT_CACHE = Path.home() / ".cache" / "domain-parser" / "tlds.json"


class Settings(BaseSettings):
    model_config = {"env_prefix": "DOMAIN_PARSER_", "validate_default": True}

    # Suffix list cache
    cache_path: Path = Path(_defaults.get("cache_path", _DEFAULT_CACHE))
    cache_ttl: int = _defaults.get("cache_ttl", 432000)
    reload_always: bool = _defaults.get("reload_always", False)

    # Remote source
    source_url: str = _defaults.get("source_url", "https://publicsuffix.org/list/public_suffix_list.dat")
    fetch_timeout: float = _defaults.get("fetch_timeout", 30.0)

    # Hand-curated suffixes merged into every ingestion
    supplemental_path: Path = Path(_defaults.get("supplemental_path", _BUNDLED_SUPPLEMENTAL))

    # Parsing behavior
    throw_exceptions: bool = _defaults.get("throw_exceptions", False)
    encoding: str = _defaults.get("encoding", "utf-8")
    default_suffix: str = _defaults.get("default_suffix", "com")
    output_format: str = _defaults.get("output_format", "object")

    @field_validator("cache_path", "supplemental_path")
    @classmethod
    def expand_user(cls, value: Path) -> Path:
        return value.expanduser()


settings = Settings()
