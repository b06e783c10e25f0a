from datetime import datetime, timezone

import pytest

from model.search import Cursor
from util.cursor import decode_cursor, encode_cursor, next_cursor_encoded
from util.errors import AppError

from fakes import T0


class TestCursor:

    def test_missing_token_starts_at_zero_now(self):
        before = datetime.now(timezone.utc)
        cursor = decode_cursor(None)

        assert cursor.offset == 0
        assert cursor.time >= before
        assert cursor.time.tzinfo is not None

    def test_next_cursor_advances_offset_and_keeps_time(self):
        token = next_cursor_encoded(Cursor(offset=21, time=T0), 21)
        cursor = decode_cursor(token)

        assert cursor.offset == 42
        assert cursor.time == T0

    def test_encoded_token_is_opaque_text(self):
        token = encode_cursor(Cursor(offset=0, time=T0))

        assert isinstance(token, str)
        assert "offset" not in token

    @pytest.mark.parametrize("token", ["not-base64!!", "e30=", "eyJvZmZzZXQiOiAtMX0="])
    def test_malformed_token_is_a_client_error(self, token):
        with pytest.raises(AppError) as exc:
            decode_cursor(token)
        assert exc.value.status_code == 400
