import pytest

from app.platform.exceptions import InvalidURL
from app.platform.utils.url_validator import normalize_url


class TestNormalizeUrl:
    def test_adds_https_when_scheme_missing(self):
        assert normalize_url("example.com/path") == "https://example.com/path"

    def test_trims_and_preserves_http_scheme(self):
        assert normalize_url("  http://Example.com  ") == "http://example.com/"

    def test_does_not_double_prefix(self):
        result = normalize_url("https://example.com/a?b=1")
        assert result == "https://example.com/a?b=1"
        assert result.count("://") == 1

    def test_uppercase_scheme_is_not_prefixed_again(self):
        assert normalize_url("HTTPS://example.com") == "https://example.com/"

    def test_default_port_is_dropped(self):
        assert normalize_url("https://example.com:443/x") == "https://example.com/x"

    def test_custom_port_is_kept(self):
        assert normalize_url("localhost:8080/health") == "https://localhost:8080/health"

    @pytest.mark.parametrize("raw", ["", "   ", "https://", "exa mple.com", "example.com:99999", "http://bad_host!/"])
    def test_invalid_input_raises(self, raw):
        with pytest.raises(InvalidURL) as exc_info:
            normalize_url(raw)
        assert exc_info.value.status_code == 400
        assert exc_info.value.message.startswith("Invalid URL")
