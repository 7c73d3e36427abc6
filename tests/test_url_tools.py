import pytest

from part_b_url_tools import format_url, is_valid_url, main, manage_urls, shorten_url


@pytest.mark.parametrize("url,expected", [
    ("https://example.com", True),
    ("http://example.com/path", True),
    ("https://", False),
    ("http://localhost", False),
    ("example.com", False),
    ("ftp://example.com", False),
    ("HTTP://example.com", False),
    (None, False),
])
def test_is_valid_url(url, expected):
    assert is_valid_url(url) is expected


def test_format_url():
    assert format_url("example.com") == "https://example.com"
    assert format_url("http://example.com") == "http://example.com"
    assert format_url("https://example.com") == "https://example.com"
    assert format_url(None) is None


def test_shorten_url():
    url = "https://example.com/a/very/long/path/to/something"
    assert shorten_url(url, 10) == "https://ex..."
    assert shorten_url(url) == url[:30] + "..."
    assert shorten_url("https://a.io", 30) == "https://a.io"
    assert shorten_url("https://a.io", len("https://a.io")) == "https://a.io"
    assert shorten_url("https://a.io", 0) == "..."
    assert shorten_url(None) is None


def test_manage_urls_actions():
    urls = ["https://example.com", None, "example.com"]
    assert manage_urls(urls, "checkValid") == ["1", None, "0"]
    assert manage_urls(urls, "format") == ["https://example.com", None, "https://example.com"]
    assert manage_urls(["https://example.com/" + "x" * 40], "shorten") == ["https://example.com/xxxxxxxxxx..."]


@pytest.mark.parametrize("urls,action", [([], "format"), (["a.com"], "CheckValid"), (["a.com"], "delete")])
def test_manage_urls_errors(urls, action):
    with pytest.raises(ValueError):
        manage_urls(urls, action)


def test_main_prints_results(capsys):
    assert main(["--action", "format", "example.com"]) == 0
    assert "example.com -> https://example.com" in capsys.readouterr().out
    assert main(["--action", "nope", "example.com"]) == 2
