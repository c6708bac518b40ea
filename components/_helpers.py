"""
Pure helpers for DNS names, certificate validation, and S3 policy documents.
Testable without Pulumi runtime.

Used by the certificate component (validation_domains, validation_option_for),
the DNS component (strip_trailing_dot), the CDN component (error_page_path),
the storage component (oac_bucket_policy) and by config.py for validation
(fqdn, site_domains and the is_valid_* checks). No Pulumi types; all
functions accept and return plain Python types so they can be unit-tested
without a Pulumi stack.
"""

import json
import re
from typing import Any, Iterable, Sequence

# Tags applied to every taggable resource, merged under the per-resource ones.
DEFAULT_TAGS: dict[str, str] = {
    "ManagedBy": "pulumi",
}

# Canned ACLs compatible with Block Public Access; public-read and
# public-read-write are rejected by the block.
CANNED_ACLS: frozenset[str] = frozenset(
    {
        "private",
        "authenticated-read",
        "aws-exec-read",
        "bucket-owner-read",
        "bucket-owner-full-control",
        "log-delivery-write",
    }
)

PRICE_CLASSES: frozenset[str] = frozenset(
    {"PriceClass_100", "PriceClass_200", "PriceClass_All"}
)

_LABEL_RE = re.compile(r"^(?!-)[a-z0-9-]{1,63}(?<!-)$")
_BUCKET_RE = re.compile(r"^[a-z0-9][a-z0-9.-]{1,61}[a-z0-9]$")
_IPV4_RE = re.compile(r"^\d{1,3}(\.\d{1,3}){3}$")


def strip_trailing_dot(
    domain: str,
) -> str:
    """
    Return domain without a trailing dot.

    Route53 and ACM report names with the dot; CloudFront aliases must not
    carry one.
    """
    return domain[:-1] if domain.endswith(".") else domain


def fqdn(
    domain: str,
    subdomain: str,
) -> str:
    """
    Build a site host name like 'www.example.com' from domain and subdomain.

    Args:
        domain: Base domain (e.g. "example.com"); a trailing dot is dropped.
        subdomain: Leading label (e.g. "www"). Empty or "@" means the apex.

    Returns:
        Host name without trailing dot (e.g. "www.example.com").
    """
    base = strip_trailing_dot(domain).lower()
    label = subdomain.strip().lower()
    if label in ("", "@"):
        return base
    return f"{label}.{base}"


def site_domains(
    apex: str,
    subdomains: Iterable[str] = (),
) -> list[str]:
    """
    Return every host name the site answers on, apex first.

    Duplicates are dropped while keeping the first occurrence, so the apex is
    always the certificate's primary domain.
    """
    domains = [fqdn(apex, "")]
    for sub in subdomains:
        name = fqdn(apex, sub)
        if name not in domains:
            domains.append(name)
    return domains


def validation_domains(
    domains: Sequence[str],
) -> list[str]:
    """
    Return the domains that each need their own DNS validation record.

    ACM issues the same CNAME for "*.example.com" and "example.com", so a
    wildcard is dropped when its base name is also requested.
    """
    present = set(domains)
    result = []
    for domain in domains:
        if domain.startswith("*.") and domain[2:] in present:
            continue
        if domain not in result:
            result.append(domain)
    return result


def validation_option_for(
    options: Sequence[Any],
    domain: str,
) -> Any:
    """
    Find the ACM domain validation option for a domain.

    Args:
        options: ``domain_validation_options`` of an ACM certificate; each
            item exposes ``domain_name``, ``resource_record_name``,
            ``resource_record_type`` and ``resource_record_value``.
        domain: Requested domain. A wildcard matches its base name's option.

    Returns:
        The matching option.

    Raises:
        KeyError: If the certificate has no option for the domain.
    """
    wanted = {domain, domain[2:] if domain.startswith("*.") else f"*.{domain}"}
    for option in options:
        if option.domain_name == domain:
            return option
    for option in options:
        if option.domain_name in wanted:
            return option
    raise KeyError(domain)


def oac_bucket_policy(
    bucket_arn: str,
    distribution_arn: str,
) -> str:
    """
    Build the bucket policy that lets only one CloudFront distribution read.

    Grants s3:GetObject on every object to the CloudFront service principal,
    conditioned on the distribution's ARN (OAC signed requests).

    Returns:
        Policy document as a JSON string.
    """
    return json.dumps(
        {
            "Version": "2012-10-17",
            "Statement": [
                {
                    "Sid": "AllowCloudFrontServicePrincipalReadOnly",
                    "Effect": "Allow",
                    "Principal": {"Service": "cloudfront.amazonaws.com"},
                    "Action": "s3:GetObject",
                    "Resource": f"{bucket_arn}/*",
                    "Condition": {
                        "StringEquals": {"AWS:SourceArn": distribution_arn},
                    },
                }
            ],
        }
    )


def resource_tags(
    project: str,
    environment: str,
    name: str,
    **extra_tags: str,
) -> dict[str, str]:
    """
    Create the standard tag set for a resource.

    Args:
        project: Project name.
        environment: Deployment environment (e.g. "dev", "prod").
        name: Resource name for the Name tag.
        **extra_tags: Additional tags; override the defaults.
    """
    tags = {
        **DEFAULT_TAGS,
        "Project": project,
        "Environment": environment,
        "Name": name,
    }
    tags.update(extra_tags)
    return tags


def error_page_path(
    document: str,
) -> str:
    """Return the CloudFront response page path for an error document."""
    return document if document.startswith("/") else f"/{document}"


def is_valid_domain_name(
    domain: str,
) -> bool:
    """
    Check host name syntax (RFC 1123 labels, at least two labels).

    A single leading "*" label is allowed for wildcard names.
    """
    name = strip_trailing_dot(domain).lower()
    if not name or len(name) > 253:
        return False
    labels = name.split(".")
    if labels[0] == "*":
        labels = labels[1:]
    if len(labels) < 2:
        return False
    return all(_LABEL_RE.match(label) for label in labels)


def is_valid_bucket_name(
    name: str,
) -> bool:
    """
    Check S3 general purpose bucket naming rules.

    3-63 chars, lowercase letters, digits, dots and hyphens, starting and
    ending with a letter or digit, no adjacent dots, not an IP address, and
    none of the reserved prefixes/suffixes.
    """
    if not _BUCKET_RE.match(name):
        return False
    if ".." in name or _IPV4_RE.match(name):
        return False
    if name.startswith(("xn--", "sthree-")):
        return False
    return not name.endswith(("-s3alias", "--ol-s3"))
