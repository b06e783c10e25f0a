# core/entities.py
from dataclasses import dataclass, field
from typing import Any, Dict, List, Literal, Optional, Union


@dataclass(frozen=True)
class ParsedQuery:
    """
    A raw query split into free text, "quoted phrases" and directive tokens.
    Directives keep their prefix (url:, @, ~).
    """

    free_text: str = ""
    quoted_phrases: List[str] = field(default_factory=list)
    url_directive: Optional[str] = None
    author_directive: Optional[str] = None
    territory_directive: Optional[str] = None

    @property
    def has_directive(self) -> bool:
        return bool(
            self.url_directive or self.author_directive or self.territory_directive
        )

    @property
    def is_empty(self) -> bool:
        return not self.free_text and not self.quoted_phrases and not self.has_directive


@dataclass
class RankedHit:
    id: int
    rank: int  # 0-based engine order
    title_highlight: List[str] = field(default_factory=list)
    text_highlight: List[str] = field(default_factory=list)


# ---------------- Scoring strategies ----------------
# Picked once per request; each one knows how to render its bool clauses.


@dataclass(frozen=True)
class LexicalScoring:
    clauses: List[Dict[str, Any]]
    occur: Literal["must", "should"] = "must"
    kind: Literal["lexical"] = "lexical"

    def bool_clauses(self) -> Dict[str, Any]:
        return {self.occur: list(self.clauses)} if self.clauses else {}


@dataclass(frozen=True)
class EmbeddingScoring:
    neural: List[Dict[str, Any]]
    kind: Literal["embedding"] = "embedding"

    def bool_clauses(self) -> Dict[str, Any]:
        return {"should": list(self.neural)}


@dataclass(frozen=True)
class HybridScoring:
    neural: List[Dict[str, Any]]
    lexical: List[Dict[str, Any]]
    kind: Literal["hybrid"] = "hybrid"

    def bool_clauses(self) -> Dict[str, Any]:
        return {
            "must": [
                {
                    "hybrid": {
                        "queries": [
                            {"bool": {"should": list(self.neural)}},
                            {"bool": {"should": list(self.lexical)}},
                        ]
                    }
                }
            ]
        }


ScoringStrategy = Union[LexicalScoring, EmbeddingScoring, HybridScoring]


@dataclass
class SearchQueryDocument:
    """
    A compiled request for the engine's _search endpoint.
    `search_pipeline` is only set for hybrid queries, which need score normalisation.
    """

    index: str
    body: Dict[str, Any]
    search_pipeline: Optional[str] = None

    @property
    def offset(self) -> int:
        return int(self.body.get("from", 0))

    @property
    def size(self) -> int:
        return int(self.body.get("size", 0))
