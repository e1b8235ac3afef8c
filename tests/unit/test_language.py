from __future__ import annotations

from core.domain.language import Language, language_label


def test_default_language_is_english():
    assert Language.default() is Language.ENGLISH
    assert Language.default().label() == "English"


def test_wire_codes_get_labels():
    assert language_label("pt-BR") == "Brazilian Portuguese"
    assert language_label("xx") == "xx"
