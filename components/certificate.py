"""
ACM certificate for the site, validated through Route53 DNS records.

CloudFront only accepts certificates issued in us-east-1, so the caller passes
a provider pinned to that region. One CNAME validation record is published per
distinct validation name (a wildcard shares its base name's record), and
``certificate_arn`` is taken from the ``CertificateValidation`` resource so any
consumer (e.g. the distribution) waits until ACM reports the certificate as
issued.
"""

from typing import Sequence

import pulumi
import pulumi_aws as aws

from components._helpers import validation_domains, validation_option_for

ID: str = "staticsite:aws:SiteCertificate"

# CloudFront reads viewer certificates only from this region.
CERTIFICATE_REGION: str = "us-east-1"


class SiteCertificate(pulumi.ComponentResource):
    """
    DNS-validated ACM certificate: Certificate, validation Records, CertificateValidation.
    """

    def __init__(
        self,
        name: str,
        domains: Sequence[str],
        zone_id: pulumi.Input[str],
        provider: pulumi.ProviderResource,
        validation_ttl: int = 60,
        tags: dict[str, str] | None = None,
        opts: pulumi.ResourceOptions | None = None,
    ):
        """
        Request the certificate and publish its validation records.

        Args:
            name: Pulumi resource name prefix.
            domains: Names to cover; the first is the primary domain, the rest
                become subject alternative names.
            zone_id: Route53 hosted zone that holds the validation records.
            provider: AWS provider for us-east-1 (certificate and validation).
            validation_ttl: TTL in seconds for the validation CNAMEs.
            tags: Tags for the certificate.

        Outputs (set on self, registered for the component):
            certificate_arn: ARN of the validated certificate.
            validation_record_fqdns: FQDNs of the published validation records.
        """
        super().__init__(ID, name, None, opts)

        if not domains:
            raise ValueError("SiteCertificate needs at least one domain")

        acm_opts = pulumi.ResourceOptions(parent=self, provider=provider)

        self.certificate = aws.acm.Certificate(
            resource_name=f"{name}-cert",
            domain_name=domains[0],
            subject_alternative_names=list(domains[1:]) or None,
            validation_method="DNS",
            tags=tags,
            opts=acm_opts,
        )

        # Records are declared per known domain rather than inside an apply, so
        # preview shows them and the engine can order them.
        options = self.certificate.domain_validation_options
        self.validation_records: list[aws.route53.Record] = []
        for index, domain in enumerate(validation_domains(domains)):
            option = options.apply(
                lambda opts, domain=domain: validation_option_for(opts, domain)
            )
            record = aws.route53.Record(
                resource_name=f"{name}-validation-{index}",
                zone_id=zone_id,
                name=option.apply(lambda o: o.resource_record_name),
                type=option.apply(lambda o: o.resource_record_type),
                records=[option.apply(lambda o: o.resource_record_value)],
                ttl=validation_ttl,
                allow_overwrite=True,
                opts=pulumi.ResourceOptions(parent=self),
            )
            self.validation_records.append(record)

        self.validation = aws.acm.CertificateValidation(
            resource_name=f"{name}-validation",
            certificate_arn=self.certificate.arn,
            validation_record_fqdns=[r.fqdn for r in self.validation_records],
            opts=acm_opts,
        )

        self.certificate_arn: pulumi.Output[str] = self.validation.certificate_arn
        self.validation_record_fqdns: pulumi.Output[list[str]] = pulumi.Output.all(
            *[r.fqdn for r in self.validation_records]
        )
        self.register_outputs(
            {
                "certificate_arn": self.certificate_arn,
                "validation_record_fqdns": self.validation_record_fqdns,
            }
        )


def site_certificate_arn(
    name: str,
    domains: Sequence[str],
    zone_id: pulumi.Input[str],
    existing_arn: str | None = None,
    validation_ttl: int = 60,
    tags: dict[str, str] | None = None,
) -> pulumi.Input[str]:
    """
    Return the certificate ARN the distribution should use.

    An existing ARN is returned as-is and nothing is created. Otherwise a
    us-east-1 provider and a SiteCertificate are declared and the validated
    ARN is returned.
    """
    if existing_arn:
        return existing_arn
    provider = aws.Provider(f"{name}-{CERTIFICATE_REGION}", region=CERTIFICATE_REGION)
    certificate = SiteCertificate(
        name=name,
        domains=domains,
        zone_id=zone_id,
        provider=provider,
        validation_ttl=validation_ttl,
        tags=tags,
    )
    return certificate.certificate_arn
