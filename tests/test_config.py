"""Tests for stack config loading and validation"""

import pulumi
import pytest

from config import InvalidConfigError, StackConfig


class FakeConfig:
    """Minimal stand-in for pulumi.Config backed by a dict of raw strings."""

    def __init__(self, values):
        self.values = values

    def get(self, key):
        return self.values.get(key)

    def require(self, key):
        if key not in self.values:
            raise pulumi.ConfigMissingError(key, False)
        return self.values[key]


REQUIRED = {
    "project_name": "site",
    "environment": "dev",
    "domain_name": "example.com",
}


def _load(**overrides):
    return StackConfig.from_pulumi_config(FakeConfig({**REQUIRED, **overrides}))


class TestDefaults:
    def test_optional_keys_fall_back(self):
        config = _load()
        assert config.subdomains == ["www"]
        assert config.bucket_name is None
        assert config.index_document == "index.html"
        assert config.error_document == "error.html"
        assert config.enable_versioning is True
        assert config.bucket_acl == "private"
        assert config.price_class == "PriceClass_100"
        assert config.enable_ipv6 is True
        assert config.certificate_arn is None

    def test_zone_defaults_to_domain(self):
        assert _load(domain_name="Example.com.").hosted_zone_name == "example.com"

    def test_site_domains(self):
        assert _load().site_domains == ["example.com", "www.example.com"]


class TestRequired:
    def test_missing_domain_name(self):
        values = {k: v for k, v in REQUIRED.items() if k != "domain_name"}
        with pytest.raises(pulumi.ConfigMissingError) as exc_info:
            StackConfig.from_pulumi_config(FakeConfig(values))
        assert exc_info.value.key == "domain_name"


class TestParsing:
    def test_bools_and_ints(self):
        config = _load(enable_versioning="false", enable_ipv6="no", default_ttl="60")
        assert config.enable_versioning is False
        assert config.enable_ipv6 is False
        assert config.default_ttl == 60

    def test_subdomains_json_list(self):
        assert _load(subdomains='["www", "blog"]').subdomains == ["www", "blog"]

    def test_subdomains_comma_separated(self):
        assert _load(subdomains="www, blog").subdomains == ["www", "blog"]

    def test_empty_subdomain_list_means_apex_only(self):
        assert _load(subdomains="[]").site_domains == ["example.com"]

    def test_bad_int_raises(self):
        with pytest.raises(InvalidConfigError):
            _load(max_ttl="forever")

    def test_subdomains_not_a_list_raises(self):
        with pytest.raises(InvalidConfigError):
            _load(subdomains='{"www": true}')


class TestValidation:
    def test_subdomain_zone(self):
        config = _load(domain_name="app.example.com", zone_name="example.com")
        assert config.site_domains == ["app.example.com", "www.app.example.com"]

    @pytest.mark.parametrize(
        "overrides",
        [
            {"domain_name": "localhost"},
            {"domain_name": "*.example.com"},
            {"zone_name": "other.org"},
            {"subdomains": '["bad_label"]'},
            {"bucket_name": "Not_A_Bucket"},
            {"bucket_acl": "public-read"},
            {"price_class": "PriceClass_Cheap"},
            {"minimum_protocol_version": "SSLv3"},
            {"default_ttl": "100", "max_ttl": "10"},
            {"validation_ttl": "0"},
            {"error_document": "/error.html"},
            {"index_document": "/index.html"},
            {"certificate_arn": "arn:aws:acm:eu-west-1:123456789012:certificate/abc"},
            {"certificate_arn": "not-an-arn"},
        ],
    )
    def test_rejects(self, overrides):
        with pytest.raises(InvalidConfigError):
            _load(**overrides)

    def test_accepts_us_east_1_certificate(self):
        arn = "arn:aws:acm:us-east-1:123456789012:certificate/abc"
        assert _load(certificate_arn=arn).certificate_arn == arn

    def test_subdomain_repeating_apex_label_kept(self):
        config = _load(domain_name="app.example.com", zone_name="example.com", subdomains="app")
        assert config.site_domains == ["app.example.com", "app.app.example.com"]

    def test_collects_every_problem(self):
        with pytest.raises(InvalidConfigError) as exc_info:
            _load(bucket_acl="public-read", price_class="nope")
        message = str(exc_info.value)
        assert "bucket_acl" in message
        assert "price_class" in message
