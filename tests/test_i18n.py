"""Tests for gridfarm.i18n.messages."""

from gridfarm.i18n.messages import TRANSLATIONS, MessageKey, translate


class TestTranslate:
    """Tests for message lookup and placeholder substitution."""

    def test_every_key_has_english(self) -> None:
        assert set(TRANSLATIONS["en"]) == set(MessageKey)

    def test_plain_message(self) -> None:
        assert translate(MessageKey.HEADER_CONTROLS) == "GAME CONTROLS"

    def test_positional_args(self) -> None:
        assert translate(MessageKey.REQ_SUN, "en", "≥", 95) == "Sun ≥ 95"

    def test_missing_arg_left_in_place(self) -> None:
        assert translate(MessageKey.REQ_SUN, "en", "≤") == "Sun ≤ {1}"

    def test_unknown_locale_falls_back(self) -> None:
        assert translate(MessageKey.TURN, "xx", 3) == "Turn: 3"
