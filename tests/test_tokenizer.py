import pytest

from cbt.errors import UnknownCharacter, UnknownKeyword, UnterminatedConstruct
from cbt.tokenizer import Tokenizer, tokenize
from cbt.tokens import TokenKind, reconstruct
from cbt.vocabulary import Keyword, Word, render, resolve


def kinds(tokens):
    return [t.kind for t in tokens]


def test_resolve_ignores_case():
    assert resolve("define") == Word(Keyword.DEFINE)
    assert resolve("DeFiNe").which == Keyword.DEFINE
    assert resolve("MODULE").plural is False


def test_resolve_is_exact():
    for text in ["def", "modules", "definee", "banana"]:
        with pytest.raises(UnknownKeyword) as err:
            resolve(text)
        assert err.value.text == text


def test_render_is_inverse_of_resolve():
    for keyword in Keyword:
        assert render(keyword) == keyword.value.upper()
        assert resolve(render(keyword)).which == keyword
        assert render(Word(keyword)) == render(keyword)


def test_punctuation_is_zero_width():
    tokens = tokenize(": . ; $")
    assert kinds(tokens) == [
        TokenKind.COLON,
        TokenKind.PERIOD,
        TokenKind.SEMICOLON,
        TokenKind.DOLLAR,
    ]
    assert [t.location.offset for t in tokens] == [0, 2, 4, 6]
    assert all(t.location.span is None for t in tokens)
    # diagnostics still get a single character to underline
    assert len(tokens[1].span) == 1


def test_string_span_excludes_quotes():
    src = 'SET "v" EQUAL TO "hello".'
    tokens = tokenize(src)
    assert kinds(tokens) == [
        TokenKind.WORD,
        TokenKind.STRING,
        TokenKind.WORD,
        TokenKind.WORD,
        TokenKind.STRING,
        TokenKind.PERIOD,
    ]
    hello = tokens[4]
    assert hello.location.offset == 17
    assert hello.location.span.start == 18
    assert hello.location.span.end == 23
    assert hello.text(src) == "hello"
    assert tokens[5].location.offset == 24


def test_word_span_covers_letters():
    src = "  define\tMODULE"
    tokens = tokenize(src)
    assert tokens[0].word == Word(Keyword.DEFINE)
    assert tokens[1].word == Word(Keyword.MODULE)
    assert tokens[0].location.span.slice(src) == "define"
    assert (tokens[1].location.span.start, tokens[1].location.span.end) == (9, 15)


def test_empty_string_literal():
    src = 'SET "" EQUAL TO "".'
    tokens = tokenize(src)
    assert tokens[1].kind == TokenKind.STRING
    assert tokens[1].text(src) == ""
    assert len(tokens[1].location.span) == 0


def test_lines_are_counted():
    src = 'SET "a" EQUAL TO "b".\nCALL FUNCTION "f".\n\nIF'
    tokens = tokenize(src)
    assert [t.location.line for t in tokens] == [1] * 6 + [2] * 4 + [4]


def test_offsets_strictly_increase():
    src = (
        'DEFINE MODULE "m" WITH CONTENTS:\n'
        '  IF "a" IS EQUAL TO TRUE THEN DO CALL FUNCTION "f". IF\n'
        'END MODULE "m".'
    )
    offsets = [t.location.offset for t in tokenize(src)]
    assert all(a < b for a, b in zip(offsets, offsets[1:]))


def test_tokenize_is_deterministic():
    src = 'CALL FUNCTION "f" WITH THE ARGUMENT "x".'
    assert tokenize(src) == tokenize(src)


def test_filename_is_recorded():
    tokens = tokenize('SET "v" EQUAL TO "x".', filename="main.cbt")
    assert tokens[0].location.filename == "main.cbt"
    assert tokens[1].span.filename == "main.cbt"
    assert tokens[-1].span.filename == "main.cbt"


def test_unknown_keyword_span():
    src = 'SET "v" EQUAL TO banana.'
    with pytest.raises(UnknownKeyword) as err:
        tokenize(src)
    assert err.value.text == "banana"
    assert err.value.span.slice(src) == "banana"
    assert (err.value.span.start, err.value.span.end) == (17, 23)
    assert err.value.code == "E0002"


def test_unknown_keyword_inside_word_run():
    # "settle" is a single run of letters, not SET followed by something
    with pytest.raises(UnknownKeyword) as err:
        tokenize('settle "v".')
    assert err.value.text == "settle"


def test_unknown_character():
    src = 'SET "v" EQUAL TO 5.'
    with pytest.raises(UnknownCharacter) as err:
        tokenize(src)
    assert err.value.char == "5"
    assert err.value.span.start == 17
    assert len(err.value.span) == 1


def test_unterminated_string_at_end_of_input():
    src = 'SET "v" EQUAL TO "hello'
    with pytest.raises(UnterminatedConstruct) as err:
        tokenize(src)
    assert err.value.construct == "string literal"
    assert err.value.span.start == 17
    assert err.value.span.end == len(src)


def test_newline_in_string_is_rejected_by_default():
    src = 'SET "v" EQUAL TO "hel\nlo".'
    with pytest.raises(UnterminatedConstruct) as err:
        tokenize(src)
    assert err.value.span.slice(src) == '"hel'


def test_newline_in_string_is_kept_when_allowed():
    src = 'SET "v" EQUAL TO "hel\nlo".'
    tokens = tokenize(src, allow_multiline_strings=True)
    assert tokens[4].text(src) == "hel\nlo"
    assert tokens[4].location.line == 1
    assert tokens[5].location.line == 2


def test_unterminated_multiline_string_still_fails():
    with pytest.raises(UnterminatedConstruct):
        tokenize('SET "v" EQUAL TO "hel\nlo.', allow_multiline_strings=True)


def test_tokenizer_is_single_use():
    tokenizer = Tokenizer('SET "v" EQUAL TO "x".')
    tokenizer.run()
    with pytest.raises(RuntimeError):
        tokenizer.run()


def test_reconstruct_round_trip():
    src = (
        'define module "m" with contents:\n'
        '  set "v" equal to "x y".\n'
        '  call function "f"; $\n'
        'END MODULE "m".'
    )
    tokens = tokenize(src)
    text = reconstruct(tokens, src)
    assert text == (
        'DEFINE MODULE "m" WITH CONTENTS : SET "v" EQUAL TO "x y" . '
        'CALL FUNCTION "f" ; $ END MODULE "m" .'
    )
    again = tokenize(text)
    assert kinds(again) == kinds(tokens)
    assert [t.word for t in again] == [t.word for t in tokens]
    strings = [t.text(src) for t in tokens if t.kind == TokenKind.STRING]
    assert [t.text(text) for t in again if t.kind == TokenKind.STRING] == strings


def test_reconstruct_keeps_newline_policy():
    src = 'SET "v" EQUAL TO "a\nb".'
    tokens = tokenize(src, allow_multiline_strings=True)
    text = reconstruct(tokens, src)
    assert text == 'SET "v" EQUAL TO "a\nb" .'
    with pytest.raises(UnterminatedConstruct):
        tokenize(text)
    again = tokenize(text, allow_multiline_strings=True)
    assert kinds(again) == kinds(tokens)
    assert again[4].text(text) == "a\nb"


def test_unterminated_string_span_stops_before_carriage_return():
    src = 'SET "v" EQUAL TO "abc\r\nEND'
    with pytest.raises(UnterminatedConstruct) as err:
        tokenize(src)
    assert err.value.span.slice(src) == '"abc'
    with pytest.raises(UnterminatedConstruct) as err:
        tokenize('"abc\r')
    assert (err.value.span.start, err.value.span.end) == (0, 4)
