from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field


class SuffixGroup(BaseModel):
    """Suffixes sharing the same top-level label, longest first."""

    model_config = ConfigDict(frozen=True)

    name: str
    suffixes: tuple[str, ...] = ()


class CatalogSnapshot(BaseModel):
    """Ingested suffix list as stored in the cache file."""

    timestamp: int = 0
    content: dict[str, list[str]] = Field(default_factory=dict)

    def groups(self) -> tuple[SuffixGroup, ...]:
        return tuple(
            SuffixGroup(name=name, suffixes=tuple(suffixes))
            for name, suffixes in self.content.items()
        )

    def suffix_count(self) -> int:
        return sum(len(suffixes) for suffixes in self.content.values())


class ParseResult(BaseModel):
    """Outcome of a single parse call.

    ``label`` and ``suffix`` hold the human-readable (Unicode) form, the
    ``*_encoded`` fields the ASCII-compatible form. When parsing failed and
    errors are captured, only ``error`` is set.
    """

    model_config = ConfigDict(frozen=True)

    label: str = ""
    label_encoded: str = ""
    suffix: str = ""
    suffix_encoded: str = ""
    group: str = ""
    valid_hostname: bool = False
    error: str | None = None

    @property
    def domain(self) -> str:
        if not self.label or not self.suffix:
            return self.label or self.suffix
        return f"{self.label}.{self.suffix}"

    @property
    def domain_encoded(self) -> str:
        if not self.label_encoded or not self.suffix_encoded:
            return self.label_encoded or self.suffix_encoded
        return f"{self.label_encoded}.{self.suffix_encoded}"
