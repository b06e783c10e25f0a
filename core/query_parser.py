# core/query_parser.py
import re
from typing import Final, List, Optional
from core.entities import ParsedQuery
from util.functions import strip_prefix

QUOTED: Final[re.Pattern] = re.compile(r'"([^"]*)"')

URL_PREFIX: Final[str] = "url:"
AUTHOR_PREFIX: Final[str] = "@"
TERRITORY_PREFIX: Final[str] = "~"

# Checked in this order when a token is classified.
DIRECTIVE_PREFIXES: Final[tuple] = (URL_PREFIX, AUTHOR_PREFIX, TERRITORY_PREFIX)


def _directive_prefix(token: str) -> Optional[str]:
    for prefix in DIRECTIVE_PREFIXES:
        if token.startswith(prefix):
            return prefix
    return None


def _payload(token: str, prefix: str) -> str:
    payload = strip_prefix(token, prefix)
    if prefix == URL_PREFIX:
        payload = strip_prefix(payload, "www.")
    return payload


def parse_query(raw: str) -> ParsedQuery:
    """
    Split a raw query into quoted phrases, directives and free text.

      "bitcoin" @satoshi ~bitcoin  ->  phrases=["bitcoin"], author="@satoshi",
                                       territory="~bitcoin", free_text=""

    Only the first directive of each kind is kept. Later ones of the same kind
    are dropped rather than folded back into the free text, as are blank
    phrases and bare prefixes ("url:", "@", "~").
    """
    raw = raw or ""
    phrases = [m.group(1) for m in QUOTED.finditer(raw) if m.group(1).strip()]
    tokens = QUOTED.sub("", raw).split()

    directives: dict = {}
    words: List[str] = []
    for token in tokens:
        prefix = _directive_prefix(token)
        if prefix is None:
            words.append(token)
            continue
        if not _payload(token, prefix):
            # a bare prefix carries nothing to match on
            continue
        # TODO: decide whether repeated directives should OR together instead of
        # silently dropping everything after the first one.
        directives.setdefault(prefix, token)

    return ParsedQuery(
        free_text=" ".join(words),
        quoted_phrases=phrases,
        url_directive=directives.get(URL_PREFIX),
        author_directive=directives.get(AUTHOR_PREFIX),
        territory_directive=directives.get(TERRITORY_PREFIX),
    )
