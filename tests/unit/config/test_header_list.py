"""Unit tests for header list loading."""

import pytest

from avbuild.config.header_list import HeaderList, HeaderListError


def test_load_preserves_order(tmp_path):
    headers_file = tmp_path / "headers"
    headers_file.write_text("libavutil/avutil.h\nlibavcodec/avcodec.h\nlibavformat/avformat.h\n")

    headers = HeaderList.load(headers_file)

    assert list(headers) == [
        "libavutil/avutil.h",
        "libavcodec/avcodec.h",
        "libavformat/avformat.h",
    ]
    assert len(headers) == 3
    assert headers.source == headers_file


def test_entries_are_trimmed(tmp_path):
    headers_file = tmp_path / "headers"
    headers_file.write_text("  libavutil/avutil.h \r\nlibavcodec/avcodec.h\t\n")

    headers = HeaderList.load(headers_file)

    assert headers.entries == ("libavutil/avutil.h", "libavcodec/avcodec.h")


def test_blank_line_is_fatal(tmp_path):
    headers_file = tmp_path / "headers"
    headers_file.write_text("libavutil/avutil.h\n\nlibavcodec/avcodec.h\n")

    with pytest.raises(HeaderListError, match="line\\(s\\): 2"):
        HeaderList.load(headers_file)


def test_whitespace_only_line_is_fatal(tmp_path):
    headers_file = tmp_path / "headers"
    headers_file.write_text("libavutil/avutil.h\n   \n")

    with pytest.raises(HeaderListError, match="2"):
        HeaderList.load(headers_file)


def test_missing_file(tmp_path):
    with pytest.raises(HeaderListError, match="Unable to read header list"):
        HeaderList.load(tmp_path / "headers")


def test_resolve_joins_root(tmp_path):
    headers = HeaderList.parse("codec/decode.h\nutil/common.h", tmp_path / "headers")

    assert headers.resolve(tmp_path / "root") == [
        tmp_path / "root" / "codec" / "decode.h",
        tmp_path / "root" / "util" / "common.h",
    ]
