class InternalURIs:
    API = "/api"
    V1 = API + "/v1"
    SEARCH = V1 + "/search"
    RELATED = V1 + "/related"


class ItemStatus:
    ACTIVE = "ACTIVE"
    NOSATS = "NOSATS"


# Fields too heavy to ship back from the engine; the store of record has them.
EXCLUDED_SOURCE_FIELDS = ["text", "text_embedding", "title_embedding"]

HIGHLIGHT_TAG = "**"
HIGHLIGHT_SEPARATOR = " ... "
