# core/search_config.py
from dataclasses import dataclass
from typing import Any, Optional


@dataclass(frozen=True)
class SearchConfig:
    index: str = "item"
    model_id: Optional[str] = None  # enables neural scoring when set
    page_size: int = 21
    search_pipeline: Optional[str] = "nlp-search-pipeline"

    @property
    def neural_enabled(self) -> bool:
        return bool(self.model_id)

    @classmethod
    def from_settings(cls, settings: Any) -> "SearchConfig":
        return cls(
            index=settings.OPENSEARCH_INDEX,
            model_id=settings.OPENSEARCH_MODEL_ID or None,
            page_size=settings.PAGE_SIZE,
            search_pipeline=settings.OPENSEARCH_SEARCH_PIPELINE or None,
        )


def neural_clauses(config: SearchConfig, *, title_query: str, text_query: str, k: int):
    """
    Nearest-neighbour clauses over both embedding fields.
    """
    return [
        {
            "neural": {
                "title_embedding": {
                    "query_text": title_query,
                    "model_id": config.model_id,
                    "k": k,
                }
            }
        },
        {
            "neural": {
                "text_embedding": {
                    "query_text": text_query,
                    "model_id": config.model_id,
                    "k": k,
                }
            }
        },
    ]
