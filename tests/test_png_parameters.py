import pytest

from png_parameters import (
    ParseError,
    extract_parameters,
    iter_chunks,
    parse_parameters,
    read_parameters,
)


def test_iter_chunks_reports_types_and_lengths(make_png):
    data = make_png((b"tEXt", b"Title\0hello"))

    chunks = list(iter_chunks(data))

    assert [c.type for c in chunks] == [b"IHDR", b"tEXt", b"IEND"]
    assert [c.length for c in chunks] == [13, 11, 0]
    assert bytes(chunks[1].payload) == b"Title\0hello"


def test_iter_chunks_yields_nothing_for_bare_signature():
    assert list(iter_chunks(b"\x89PNG\r\n\x1a\n")) == []


def test_iter_chunks_raises_on_truncated_header(make_png):
    data = make_png(end=False) + b"\x00\x00"

    with pytest.raises(ParseError):
        list(iter_chunks(data))


def test_parameters_prefix_is_stripped(make_png):
    data = make_png((b"tEXt", b"parameters Steps: 20, Sampler: Euler"))

    assert parse_parameters(data) == "Steps: 20, Sampler: Euler"


def test_null_separator_becomes_space_before_strip(make_png):
    data = make_png((b"tEXt", b"parameters\0a cat, Steps: 30"))

    assert parse_parameters(data) == "a cat, Steps: 30"


def test_null_inside_keyword_does_not_match(make_png):
    data = make_png((b"tEXt", b"para\0meters foo"))

    assert parse_parameters(data) is None


def test_no_text_chunk_returns_none(make_png):
    assert parse_parameters(make_png()) is None


def test_other_text_keywords_are_skipped(make_png):
    data = make_png(
        (b"tEXt", b"Software\0some tool"),
        (b"tEXt", b"parameters\0Steps: 5"),
    )

    assert parse_parameters(data) == "Steps: 5"


def test_first_matching_chunk_wins(make_png):
    data = make_png(
        (b"tEXt", b"parameters\0first"),
        (b"tEXt", b"parameters\0second"),
    )

    assert parse_parameters(data) == "first"


@pytest.mark.parametrize("chunk_type", [b"zTXt", b"iTXt", b"TEXT", b"text"])
def test_only_exact_text_tag_is_decoded(make_png, chunk_type):
    data = make_png((chunk_type, b"parameters\0Steps: 20"))

    assert parse_parameters(data) is None


def test_prefix_is_only_stripped_at_start(make_png):
    data = make_png((b"tEXt", b"parameters\0prompt: parameters here"))

    assert parse_parameters(data) == "prompt: parameters here"


def test_other_separator_is_returned_unstripped(make_png):
    data = make_png((b"tEXt", b"parameters:Steps: 20"))

    assert parse_parameters(data) == "parameters:Steps: 20"


def test_invalid_utf8_raises_parse_error(make_png):
    data = make_png((b"tEXt", b"parameters\0\xff\xfe"))

    with pytest.raises(ParseError):
        parse_parameters(data)


def test_extract_parameters_maps_errors_to_none(make_png, capsys):
    data = make_png((b"tEXt", b"parameters\0\xff\xfe"))

    assert extract_parameters(data, source="broken.png") is None
    assert "broken.png" in capsys.readouterr().out


def test_extract_parameters_handles_truncated_buffer(make_png):
    data = make_png((b"tEXt", b"parameters\0Steps: 20"))
    truncated = data[:20]

    assert extract_parameters(truncated, verbose=False) is None


def test_extract_parameters_returns_match_before_truncation(make_png):
    data = make_png((b"tEXt", b"parameters\0Steps: 20"), end=False) + b"\x00"

    assert extract_parameters(data, verbose=False) == "Steps: 20"


def test_payload_running_past_end_is_truncated(make_png):
    data = make_png(end=False) + b"\x00\x00\x01\x00tEXtparameters\0Steps"

    assert parse_parameters(data) == "Steps"


def test_read_parameters_from_pillow_image(tmp_path, write_image):
    path = write_image(tmp_path / "cat.png", parameters="a cat\nSteps: 20, Sampler: Euler a")

    assert read_parameters(path) == "a cat\nSteps: 20, Sampler: Euler a"


def test_read_parameters_ignores_compressed_text(tmp_path, write_image):
    path = write_image(tmp_path / "cat.png", parameters="Steps: 20", compressed=True)

    assert read_parameters(path) is None


def test_read_parameters_missing_file(tmp_path):
    with pytest.raises(ParseError):
        read_parameters(tmp_path / "missing.png")


def test_latin1_text_chunk_before_parameters_is_skipped(make_png):
    data = make_png(
        (b"tEXt", b"Comment\0caf\xe9"),
        (b"tEXt", b"parameters\0Steps: 20"),
    )

    assert extract_parameters(data, verbose=False) == "Steps: 20"
