"""
Static site infrastructure - Pulumi entrypoint.

Wires four ComponentResources using Pulumi config and output chaining:

- **SiteBucket**: private S3 bucket with website documents, versioning and ACL.
  Its regional domain name is the CloudFront origin.
- **SiteCertificate**: ACM certificate (us-east-1) for the apex and
  subdomains, validated with DNS records in the looked-up hosted zone. Skipped
  when ``certificate_arn`` is configured.
- **SiteCdn**: CloudFront distribution + OAC serving the bucket over HTTPS
  with the certificate. Its ARN is fed back into the bucket policy.
- **SiteDns**: alias A/AAAA records for every site domain pointing at the
  distribution.

Stack exports: bucket_name, bucket_website_endpoint, cloudfront_distribution_id,
cloudfront_domain, cloudfront_url, certificate_arn, zone_id, site_urls.
"""

import pulumi
import pulumi_aws as aws

from components import SiteBucket, SiteCdn, SiteDns, site_certificate_arn
from components._helpers import resource_tags
from config import StackConfig


def _component_name(project_name: str, environment: str, prefix: str) -> str:
    return f"{prefix}-{project_name}-{environment}"


def main():
    """
    Build the site components and export stack outputs.

    Reads config, looks up the hosted zone, creates bucket, certificate,
    distribution and DNS records, attaches the OAC bucket policy once the
    distribution ARN is known, and exports the main endpoints.
    """
    config = StackConfig.from_pulumi_config(pulumi.Config())

    def name(prefix: str) -> str:
        return _component_name(config.project_name, config.environment, prefix)

    def tags(prefix: str) -> dict[str, str]:
        return resource_tags(config.project_name, config.environment, name(prefix))

    domains = config.site_domains
    pulumi.log.info(f"serving {', '.join(domains)} from zone {config.hosted_zone_name}")
    if config.force_destroy:
        pulumi.log.warn("force_destroy is on: destroy deletes every object in the bucket")

    zone = aws.route53.get_zone(name=config.hosted_zone_name, private_zone=False)

    bucket = SiteBucket(
        name=name("site"),
        bucket_name=config.bucket_name,
        index_document=config.index_document,
        error_document=config.error_document,
        enable_versioning=config.enable_versioning,
        acl=config.bucket_acl,
        force_destroy=config.force_destroy,
        tags=tags("site"),
    )

    if config.certificate_arn:
        pulumi.log.info("using existing certificate from config")
    certificate_arn = site_certificate_arn(
        name=name("cert"),
        domains=domains,
        zone_id=zone.zone_id,
        existing_arn=config.certificate_arn,
        validation_ttl=config.validation_ttl,
        tags=tags("cert"),
    )

    cdn = SiteCdn(
        name=name("cdn"),
        origin_domain_name=bucket.bucket_regional_domain_name,
        aliases=domains,
        certificate_arn=certificate_arn,
        index_document=config.index_document,
        error_document=config.error_document,
        price_class=config.price_class,
        default_ttl=config.default_ttl,
        max_ttl=config.max_ttl,
        minimum_protocol_version=config.minimum_protocol_version,
        enable_ipv6=config.enable_ipv6,
        tags=tags("cdn"),
    )
    bucket.attach_cdn_policy(cdn.distribution_arn)

    SiteDns(
        name=name("dns"),
        zone_id=zone.zone_id,
        domains=domains,
        target_domain_name=cdn.domain_name,
        target_zone_id=cdn.hosted_zone_id,
        enable_ipv6=config.enable_ipv6,
    )

    for output_name, value in [
        ("bucket_name", bucket.bucket_id),
        ("bucket_website_endpoint", bucket.website_endpoint),
        ("cloudfront_distribution_id", cdn.distribution_id),
        ("cloudfront_domain", cdn.domain_name),
        ("cloudfront_url", cdn.url),
        ("certificate_arn", certificate_arn),
        ("zone_id", zone.zone_id),
        ("site_urls", [f"https://{domain}" for domain in domains]),
    ]:
        pulumi.export(output_name, value)


if __name__ == "__main__":
    main()
