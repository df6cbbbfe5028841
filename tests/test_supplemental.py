import pytest

from domain_parser.errors import MalformedSource
from domain_parser.parser import DomainParser
from domain_parser.supplemental import load_supplemental, supplemental_mtime

from conftest import SUFFIX_LIST


def test_load_supplemental(supplemental_path):
    assert load_supplemental(supplemental_path) == {"com": ["uk.com", "com"], "de": ["com.de"]}


def test_load_supplemental_normalizes_entries(tmp_path):
    path = tmp_path / "additional.yml"
    path.write_text("com:\n  - ' UK.com '\nnet:\n", encoding="utf-8")

    assert load_supplemental(path) == {"com": ["uk.com"], "net": []}


def test_missing_supplemental_list(tmp_path):
    path = tmp_path / "missing.yml"

    assert load_supplemental(path) == {}
    assert supplemental_mtime(path) is None


@pytest.mark.parametrize(
    "text",
    [
        "com: uk.com\n",
        "com:\n  uk.com: true\n",
        "com:\n  - uk.com\n  - 42\n",
        "- uk.com\n- us.com\n",
        "com: [uk.com\n",
    ],
)
def test_malformed_supplemental_list(tmp_path, text):
    path = tmp_path / "additional.yml"
    path.write_text(text, encoding="utf-8")

    with pytest.raises(MalformedSource):
        load_supplemental(path)


def test_scalar_group_is_not_split_into_characters(catalog, supplemental_path):
    supplemental_path.write_text("com: uk.com\n", encoding="utf-8")

    with pytest.raises(MalformedSource):
        catalog.ingest(SUFFIX_LIST)


def test_malformed_supplemental_list_becomes_parse_error(catalog, supplemental_path):
    supplemental_path.write_text("- uk.com\n", encoding="utf-8")
    parser = DomainParser(catalog)

    result = parser.parse("example.com")

    assert result.error is not None
    assert result.error.startswith("Supplemental list")
    assert not catalog.loaded

    parser.set_throw_exceptions(True)
    with pytest.raises(MalformedSource):
        parser.parse("example.com")
