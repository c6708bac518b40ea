"""
Route53 alias records for the apex and subdomains of the site.

Every site host name (apex and e.g. ``www``) gets an alias ``A`` record, plus
``AAAA`` when IPv6 is on, pointing at the CloudFront distribution. Alias
records are free to query and work at the zone apex, where a CNAME is not
allowed. The hosted zone itself is looked up by the entrypoint and passed in
by id.
"""

from typing import Sequence

import pulumi
import pulumi_aws as aws

from components._helpers import strip_trailing_dot

ID = "staticsite:aws:SiteDns"

# Alias record target (domain name or hosted zone id): known now (str) or
# only after the distribution exists (pulumi.Output[str]).
AliasTarget = str | pulumi.Output[str]


def record_types(
    enable_ipv6: bool,
) -> list[str]:
    """Alias record types published for each host name."""
    return ["A", "AAAA"] if enable_ipv6 else ["A"]


class SiteDns(pulumi.ComponentResource):
    """
    Alias A (and AAAA) records for each site domain, targeting the distribution.
    """

    def __init__(
        self,
        name: str,
        zone_id: pulumi.Input[str],
        domains: Sequence[str],
        target_domain_name: AliasTarget,
        target_zone_id: AliasTarget,
        enable_ipv6: bool = True,
        opts: pulumi.ResourceOptions | None = None,
    ):
        """
        Create the alias records.

        Args:
            name: Pulumi resource name prefix.
            zone_id: Route53 hosted zone id.
            domains: Host names to publish (apex first, then subdomains).
            target_domain_name: Alias target, e.g. CloudFront's domain_name.
            target_zone_id: Hosted zone id of the alias target, e.g.
                CloudFront's hosted_zone_id.
            enable_ipv6: Also publish AAAA records.

        Outputs (set on self, registered for the component):
            record_fqdns: FQDNs of the A records, one per domain.
        """
        super().__init__(ID, name, None, opts)

        child_opts = pulumi.ResourceOptions(parent=self)

        alias = aws.route53.RecordAliasArgs(
            name=target_domain_name,
            zone_id=target_zone_id,
            evaluate_target_health=False,
        )

        self.records: dict[tuple[str, str], aws.route53.Record] = {}
        for domain in domains:
            host = strip_trailing_dot(domain)
            for record_type in record_types(enable_ipv6):
                self.records[(host, record_type)] = aws.route53.Record(
                    resource_name=f"{name}-{host}-{record_type.lower()}",
                    zone_id=zone_id,
                    name=host,
                    type=record_type,
                    aliases=[alias],
                    opts=child_opts,
                )

        self.record_fqdns: pulumi.Output[list[str]] = pulumi.Output.all(
            *[
                record.fqdn
                for (_, record_type), record in self.records.items()
                if record_type == "A"
            ]
        )
        self.register_outputs({"record_fqdns": self.record_fqdns})
