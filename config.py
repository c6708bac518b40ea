"""
Stack configuration loaded from pulumi.Config().

Provides a typed, immutable view of stack settings. All settings are read from
Pulumi config (e.g. Pulumi.<stack>.yaml or pulumi config set). Keys in
_REQUIRED_SPEC must be set; keys in _OPTIONAL_SPEC fall back to their default.
Values are validated on construction so a bad stack file fails at preview
instead of half way through an apply.
"""

import json
from dataclasses import dataclass, field
from typing import Any, Callable

import pulumi

from components._helpers import (
    CANNED_ACLS,
    PRICE_CLASSES,
    fqdn,
    is_valid_bucket_name,
    is_valid_domain_name,
    site_domains,
    strip_trailing_dot,
)
from components.certificate import CERTIFICATE_REGION

CERTIFICATE_ARN_PREFIX = f"arn:aws:acm:{CERTIFICATE_REGION}:"

TLS_PROTOCOL_VERSIONS: frozenset[str] = frozenset(
    {"TLSv1", "TLSv1_2016", "TLSv1.1_2016", "TLSv1.2_2018", "TLSv1.2_2019", "TLSv1.2_2021"}
)


class InvalidConfigError(pulumi.RunError):
    """Stack configuration is present but unusable."""


def _parse_bool(raw: Any) -> bool:
    if isinstance(raw, bool):
        return raw
    return str(raw).strip().lower() in ("1", "true", "yes")


def _require_str(config: pulumi.Config, key: str) -> str:
    return config.require(key)


def _optional(
    parse: Callable[[Any], Any],
    default: Any,
) -> Callable[[pulumi.Config, str], Any]:
    """Parser for an optional key: parse the raw value or return default."""

    def parser(config: pulumi.Config, key: str) -> Any:
        raw = config.get(key)
        if raw is None or raw == "":
            return default
        try:
            return parse(raw)
        except ValueError as exc:
            raise InvalidConfigError(f"config key '{key}': {exc}") from exc

    return parser


def _get_list(config: pulumi.Config, key: str) -> list[str]:
    """JSON list (pulumi config set --path or YAML list) or comma separated."""
    raw = config.get(key)
    if raw is None:
        return ["www"]
    try:
        raw = json.loads(raw)
    except ValueError:
        return [item.strip() for item in raw.split(",") if item.strip()]
    if not isinstance(raw, list):
        raise InvalidConfigError(f"config key '{key}' must be a list of strings")
    return [str(item) for item in raw]


# (key, parser); parser receives (config, key) and returns value.
_REQUIRED_SPEC: list[tuple[str, Callable[[pulumi.Config, str], Any]]] = [
    ("project_name", _require_str),
    ("environment", _require_str),
    ("domain_name", _require_str),
]

_OPTIONAL_SPEC: list[tuple[str, Callable[[pulumi.Config, str], Any]]] = [
    ("zone_name", _optional(str, None)),
    ("subdomains", _get_list),
    ("bucket_name", _optional(str, None)),
    ("index_document", _optional(str, "index.html")),
    ("error_document", _optional(str, "error.html")),
    ("enable_versioning", _optional(_parse_bool, True)),
    ("bucket_acl", _optional(str, "private")),
    ("force_destroy", _optional(_parse_bool, False)),
    ("price_class", _optional(str, "PriceClass_100")),
    ("default_ttl", _optional(int, 3600)),
    ("max_ttl", _optional(int, 86400)),
    ("minimum_protocol_version", _optional(str, "TLSv1.2_2021")),
    ("enable_ipv6", _optional(_parse_bool, True)),
    ("validation_ttl", _optional(int, 60)),
    ("certificate_arn", _optional(str, None)),
]


@dataclass(frozen=True)
class StackConfig:
    """
    Stack configuration from Pulumi config.

    Attributes:
        project_name: Project name used in resource naming and tags (required).
        environment: Environment label used in resource naming (required).
        domain_name: Apex domain of the site (required).
        zone_name: Route53 hosted zone to look up; defaults to domain_name.
        subdomains: Labels served besides the apex (default ["www"]).
        bucket_name: Physical S3 bucket name; auto-named when unset.
        index_document: Website index document and CloudFront root object.
        error_document: Website error document.
        enable_versioning: Bucket versioning Enabled (True) or Suspended.
        bucket_acl: Canned bucket ACL (must not be public).
        force_destroy: Allow deleting a non-empty bucket on destroy.
        price_class: CloudFront price class.
        default_ttl: CloudFront default TTL in seconds.
        max_ttl: CloudFront maximum TTL in seconds.
        minimum_protocol_version: Minimum viewer TLS version.
        enable_ipv6: Serve over IPv6 and publish AAAA records.
        validation_ttl: TTL in seconds for certificate validation records.
        certificate_arn: Existing us-east-1 ACM certificate; when set, no
            certificate is issued.
    """

    project_name: str
    environment: str
    domain_name: str
    zone_name: str | None = None
    subdomains: list[str] = field(default_factory=lambda: ["www"])
    bucket_name: str | None = None
    index_document: str = "index.html"
    error_document: str = "error.html"
    enable_versioning: bool = True
    bucket_acl: str = "private"
    force_destroy: bool = False
    price_class: str = "PriceClass_100"
    default_ttl: int = 3600
    max_ttl: int = 86400
    minimum_protocol_version: str = "TLSv1.2_2021"
    enable_ipv6: bool = True
    validation_ttl: int = 60
    certificate_arn: str | None = None

    def __post_init__(self):
        errors = self.validate()
        if errors:
            raise InvalidConfigError("invalid stack config: " + "; ".join(errors))

    @classmethod
    def from_pulumi_config(cls, config: pulumi.Config) -> "StackConfig":
        """
        Build StackConfig from pulumi.Config().

        Raises:
            pulumi.ConfigMissingError: If a key in _REQUIRED_SPEC is unset.
            InvalidConfigError: If a value fails validation.
        """
        kwargs = {key: parser(config, key) for key, parser in _REQUIRED_SPEC}
        kwargs.update({key: parser(config, key) for key, parser in _OPTIONAL_SPEC})
        return cls(**kwargs)

    @property
    def hosted_zone_name(self) -> str:
        """Hosted zone to look up, without trailing dot."""
        return strip_trailing_dot(self.zone_name or self.domain_name).lower()

    @property
    def site_domains(self) -> list[str]:
        """Apex followed by each subdomain host name."""
        return site_domains(self.domain_name, self.subdomains)

    def validate(self) -> list[str]:
        """Return a list of human readable problems; empty when valid."""
        errors = []
        if not is_valid_domain_name(self.domain_name) or self.domain_name.startswith("*"):
            errors.append(f"domain_name '{self.domain_name}' is not a valid domain")
        else:
            for sub in self.subdomains:
                if not is_valid_domain_name(fqdn(self.domain_name, sub)):
                    errors.append(f"subdomain '{sub}' is not a valid DNS label")
            apex = strip_trailing_dot(self.domain_name).lower()
            zone = self.hosted_zone_name
            if apex != zone and not apex.endswith(f".{zone}"):
                errors.append(f"domain_name '{apex}' is not inside zone '{zone}'")
        if self.bucket_name is not None and not is_valid_bucket_name(self.bucket_name):
            errors.append(f"bucket_name '{self.bucket_name}' breaks S3 naming rules")
        if self.bucket_acl not in CANNED_ACLS:
            errors.append(
                f"bucket_acl '{self.bucket_acl}' must be one of {sorted(CANNED_ACLS)}"
            )
        if self.price_class not in PRICE_CLASSES:
            errors.append(
                f"price_class '{self.price_class}' must be one of {sorted(PRICE_CLASSES)}"
            )
        if self.minimum_protocol_version not in TLS_PROTOCOL_VERSIONS:
            errors.append(
                f"minimum_protocol_version '{self.minimum_protocol_version}' is not supported"
            )
        if not 0 <= self.default_ttl <= self.max_ttl:
            errors.append("ttls must satisfy 0 <= default_ttl <= max_ttl")
        if self.validation_ttl <= 0:
            errors.append("validation_ttl must be positive")
        if not self.index_document or not self.error_document:
            errors.append("index_document and error_document must be set")
        elif self.index_document.startswith("/") or self.error_document.startswith("/"):
            errors.append("index_document and error_document are object keys, drop the leading /")
        if self.certificate_arn is not None and not self.certificate_arn.startswith(
            CERTIFICATE_ARN_PREFIX
        ):
            errors.append(
                f"certificate_arn must be an ACM certificate in {CERTIFICATE_REGION}"
            )
        return errors
