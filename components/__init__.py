"""
Static site infrastructure components.

Each resource group is encapsulated in its own ComponentResource for clear
ownership, testability, and reuse. Use from the Pulumi entrypoint
(e.g. __main__.py) with config and output chaining:

- **SiteBucket**: private S3 bucket with website settings; exposes
  bucket_regional_domain_name as the CDN origin and attach_cdn_policy for OAC.
- **SiteCertificate**: DNS-validated ACM certificate; exposes certificate_arn.
- **SiteCdn**: CloudFront + OAC; exposes domain_name/hosted_zone_id for DNS
  and distribution_arn for the bucket policy.
- **SiteDns**: Route53 alias records for apex and subdomains.
"""

from components.cdn import SiteCdn
from components.certificate import SiteCertificate, site_certificate_arn
from components.dns import SiteDns
from components.storage import SiteBucket

__all__ = ["SiteBucket", "SiteCdn", "SiteCertificate", "SiteDns", "site_certificate_arn"]
