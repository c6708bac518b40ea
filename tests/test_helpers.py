"""Tests for pure helpers"""

import json
from types import SimpleNamespace

import pytest

from components import _helpers


def _option(domain, record_name):
    return SimpleNamespace(
        domain_name=domain,
        resource_record_name=record_name,
        resource_record_type="CNAME",
        resource_record_value=f"{record_name}acm-validations.aws.",
    )


class TestStripTrailingDot:
    def test_strips_dot(self):
        assert _helpers.strip_trailing_dot("example.com.") == "example.com"

    def test_leaves_plain_name(self):
        assert _helpers.strip_trailing_dot("example.com") == "example.com"


class TestFqdn:
    def test_builds_www_subdomain(self):
        assert _helpers.fqdn("example.com", "www") == "www.example.com"

    def test_domain_with_trailing_dot(self):
        assert _helpers.fqdn("example.com.", "www") == "www.example.com"

    def test_apex_markers(self):
        assert _helpers.fqdn("example.com", "") == "example.com"
        assert _helpers.fqdn("example.com", "@") == "example.com"

    def test_lowercases(self):
        assert _helpers.fqdn("Example.COM", "WWW") == "www.example.com"

    def test_label_matching_first_apex_label(self):
        assert _helpers.fqdn("www.example.com", "www") == "www.www.example.com"


class TestSiteDomains:
    def test_apex_first_then_subdomains(self):
        assert _helpers.site_domains("example.com", ["www", "blog"]) == [
            "example.com",
            "www.example.com",
            "blog.example.com",
        ]

    def test_drops_duplicates(self):
        assert _helpers.site_domains("example.com", ["www", "@", "www"]) == [
            "example.com",
            "www.example.com",
        ]

    def test_apex_only(self):
        assert _helpers.site_domains("example.com") == ["example.com"]

    def test_keeps_subdomain_repeating_apex_label(self):
        assert _helpers.site_domains("www.example.com", ["www", "blog"]) == [
            "www.example.com",
            "www.www.example.com",
            "blog.www.example.com",
        ]


class TestValidationDomains:
    def test_wildcard_collapses_onto_base(self):
        domains = ["example.com", "*.example.com", "www.example.com"]
        assert _helpers.validation_domains(domains) == [
            "example.com",
            "www.example.com",
        ]

    def test_lone_wildcard_kept(self):
        assert _helpers.validation_domains(["*.example.com"]) == ["*.example.com"]


class TestValidationOptionFor:
    def test_exact_match(self):
        options = [
            _option("example.com", "_a.example.com."),
            _option("www.example.com", "_b.www.example.com."),
        ]
        option = _helpers.validation_option_for(options, "www.example.com")
        assert option.resource_record_name == "_b.www.example.com."

    def test_wildcard_uses_base_option(self):
        options = [_option("example.com", "_a.example.com.")]
        option = _helpers.validation_option_for(options, "*.example.com")
        assert option.domain_name == "example.com"

    def test_missing_domain_raises(self):
        with pytest.raises(KeyError):
            _helpers.validation_option_for([], "example.com")


class TestOacBucketPolicy:
    def test_grants_read_to_single_distribution(self):
        policy = json.loads(
            _helpers.oac_bucket_policy(
                "arn:aws:s3:::site-bucket",
                "arn:aws:cloudfront::123456789012:distribution/E123",
            )
        )
        (statement,) = policy["Statement"]
        assert statement["Effect"] == "Allow"
        assert statement["Principal"] == {"Service": "cloudfront.amazonaws.com"}
        assert statement["Action"] == "s3:GetObject"
        assert statement["Resource"] == "arn:aws:s3:::site-bucket/*"
        assert statement["Condition"]["StringEquals"] == {
            "AWS:SourceArn": "arn:aws:cloudfront::123456789012:distribution/E123"
        }


class TestResourceTags:
    def test_standard_tags(self):
        assert _helpers.resource_tags("site", "dev", "cdn-site-dev") == {
            "ManagedBy": "pulumi",
            "Project": "site",
            "Environment": "dev",
            "Name": "cdn-site-dev",
        }

    def test_extra_tags_override(self):
        tags = _helpers.resource_tags("site", "dev", "x", ManagedBy="ops", Team="web")
        assert tags["ManagedBy"] == "ops"
        assert tags["Team"] == "web"


class TestErrorPagePath:
    def test_adds_leading_slash(self):
        assert _helpers.error_page_path("error.html") == "/error.html"

    def test_keeps_leading_slash(self):
        assert _helpers.error_page_path("/404.html") == "/404.html"


class TestIsValidDomainName:
    @pytest.mark.parametrize(
        "domain",
        ["example.com", "www.example.com.", "*.example.com", "a-b.example.co.uk"],
    )
    def test_accepts(self, domain):
        assert _helpers.is_valid_domain_name(domain)

    @pytest.mark.parametrize(
        "domain",
        ["", "localhost", "-bad.example.com", "bad-.example.com", "a..com", "ex_ample.com"],
    )
    def test_rejects(self, domain):
        assert not _helpers.is_valid_domain_name(domain)


class TestIsValidBucketName:
    @pytest.mark.parametrize("name", ["site-bucket", "www.example.com", "abc"])
    def test_accepts(self, name):
        assert _helpers.is_valid_bucket_name(name)

    @pytest.mark.parametrize(
        "name",
        ["ab", "Site", "-site", "site-", "a..b", "192.168.1.1", "xn--site", "site-s3alias"],
    )
    def test_rejects(self, name):
        assert not _helpers.is_valid_bucket_name(name)
