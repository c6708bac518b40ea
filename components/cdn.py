"""
CloudFront distribution in front of the site bucket.

The distribution reads from the bucket's REST endpoint through Origin Access
Control (OAC) with signed requests, so the bucket stays private. Viewers are
redirected to HTTPS and served with the ACM certificate for the site's
aliases. Outputs (``domain_name``, ``hosted_zone_id``) are ``Output[str]`` so
the DNS component can point alias records at the distribution, and
``distribution_arn`` feeds the bucket policy.
"""

from typing import Sequence

import pulumi
import pulumi_aws as aws

from components._helpers import error_page_path

ID: str = "staticsite:aws:SiteCdn"

ORIGIN_ID: str = "s3-origin"

# Error codes S3 returns through OAC for missing objects (403 when the caller
# lacks s3:ListBucket, 404 otherwise).
ERROR_CODES: tuple[int, ...] = (403, 404)


class SiteCdn(pulumi.ComponentResource):
    """
    OriginAccessControl + Distribution (HTTPS redirect, ACM certificate, aliases).
    """

    def __init__(
        self,
        name: str,
        origin_domain_name: pulumi.Input[str],
        aliases: Sequence[str],
        certificate_arn: pulumi.Input[str],
        index_document: str = "index.html",
        error_document: str = "error.html",
        price_class: str = "PriceClass_100",
        default_ttl: int = 3600,
        max_ttl: int = 86400,
        minimum_protocol_version: str = "TLSv1.2_2021",
        enable_ipv6: bool = True,
        tags: dict[str, str] | None = None,
        opts: pulumi.ResourceOptions | None = None,
    ):
        """
        Create the OAC and the CloudFront distribution.

        Args:
            name: Pulumi resource name prefix.
            origin_domain_name: Bucket regional domain name (REST endpoint).
            aliases: Host names served by the distribution; each must be
                covered by the certificate.
            certificate_arn: ACM certificate ARN (us-east-1).
            index_document: Default root object.
            error_document: Object served with status 404 for origin 403/404.
            price_class: CloudFront price class.
            default_ttl: Default cache TTL in seconds.
            max_ttl: Maximum cache TTL in seconds.
            minimum_protocol_version: Minimum TLS version for viewers.
            enable_ipv6: Whether the distribution answers over IPv6.
            tags: Tags for the distribution.

        Outputs (set on self, registered for the component):
            distribution_id, distribution_arn, domain_name, hosted_zone_id, url.
        """
        super().__init__(ID, name, None, opts)

        # retain_on_delete=True avoids AWS 409 OriginAccessControlInUse on
        # destroy: AWS may still reference the OAC briefly after the
        # distribution is gone. Retaining only removes it from state.
        oac = aws.cloudfront.OriginAccessControl(
            resource_name=f"{name}-oac",
            description=f"OAC for {name}",
            origin_access_control_origin_type="s3",
            signing_behavior="always",
            signing_protocol="sigv4",
            opts=pulumi.ResourceOptions(parent=self, retain_on_delete=True),
        )

        origins = [
            aws.cloudfront.DistributionOriginArgs(
                domain_name=origin_domain_name,
                origin_id=ORIGIN_ID,
                origin_access_control_id=oac.id,
            )
        ]

        # ForwardedValues is required by the API when not using a cache policy.
        forwarded_values = aws.cloudfront.DistributionDefaultCacheBehaviorForwardedValuesArgs(
            query_string=False,
            cookies=aws.cloudfront.DistributionDefaultCacheBehaviorForwardedValuesCookiesArgs(
                forward="none",
            ),
        )
        default_cache_behavior = aws.cloudfront.DistributionDefaultCacheBehaviorArgs(
            target_origin_id=ORIGIN_ID,
            viewer_protocol_policy="redirect-to-https",
            allowed_methods=["GET", "HEAD", "OPTIONS"],
            cached_methods=["GET", "HEAD"],
            compress=True,
            min_ttl=0,
            default_ttl=default_ttl,
            max_ttl=max_ttl,
            forwarded_values=forwarded_values,
        )

        custom_error_responses = [
            aws.cloudfront.DistributionCustomErrorResponseArgs(
                error_code=code,
                response_code=404,
                response_page_path=error_page_path(error_document),
                error_caching_min_ttl=10,
            )
            for code in ERROR_CODES
        ]

        restrictions = aws.cloudfront.DistributionRestrictionsArgs(
            geo_restriction=aws.cloudfront.DistributionRestrictionsGeoRestrictionArgs(
                restriction_type="none",
            ),
        )

        viewer_certificate = aws.cloudfront.DistributionViewerCertificateArgs(
            acm_certificate_arn=certificate_arn,
            ssl_support_method="sni-only",
            minimum_protocol_version=minimum_protocol_version,
        )

        # Explicit depends_on so destroy order is correct: distribution is deleted
        # before the OAC (AWS returns 409 OriginAccessControlInUse otherwise).
        self.distribution = aws.cloudfront.Distribution(
            resource_name=f"{name}-cdn",
            enabled=True,
            is_ipv6_enabled=enable_ipv6,
            aliases=list(aliases),
            default_root_object=index_document,
            price_class=price_class,
            http_version="http2and3",
            origins=origins,
            default_cache_behavior=default_cache_behavior,
            custom_error_responses=custom_error_responses,
            restrictions=restrictions,
            viewer_certificate=viewer_certificate,
            tags=tags,
            opts=pulumi.ResourceOptions(parent=self, depends_on=[oac]),
        )

        self.distribution_id: pulumi.Output[str] = self.distribution.id
        self.distribution_arn: pulumi.Output[str] = self.distribution.arn
        self.domain_name: pulumi.Output[str] = self.distribution.domain_name
        self.hosted_zone_id: pulumi.Output[str] = self.distribution.hosted_zone_id
        self.url: pulumi.Output[str] = pulumi.Output.concat(
            "https://", self.distribution.domain_name
        )
        self.register_outputs(
            {
                "distribution_id": self.distribution_id,
                "distribution_arn": self.distribution_arn,
                "domain_name": self.domain_name,
                "hosted_zone_id": self.hosted_zone_id,
                "url": self.url,
            }
        )
