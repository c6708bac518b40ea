"""
AWS S3 site bucket: website settings, versioning, ACL and access policy.

The bucket is the origin for the CloudFront distribution built by
``components.cdn``. It is never publicly readable: Block Public Access is
always on and reads are granted only to the distribution through a bucket
policy (OAC). The policy needs the distribution ARN, which only exists after
the distribution is created from this bucket's outputs, so it is attached in a
second step with ``attach_cdn_policy``.
"""

import pulumi
import pulumi_aws as aws

from components._helpers import oac_bucket_policy

ID: str = "staticsite:aws:SiteBucket"

S3_BLOCK_PUBLIC_ACCESS: dict[str, bool] = {
    "block_public_acls": True,
    "block_public_policy": True,
    "ignore_public_acls": True,
    "restrict_public_buckets": True,
}


class SiteBucket(pulumi.ComponentResource):
    """
    S3 bucket with website configuration, versioning, ACL and public access block.

    Resources: BucketV2, BucketWebsiteConfigurationV2, BucketVersioningV2,
    BucketOwnershipControls, BucketAclV2, BucketPublicAccessBlock and, after
    attach_cdn_policy, BucketPolicy.
    """

    def __init__(
        self,
        name: str,
        bucket_name: str | None = None,
        index_document: str = "index.html",
        error_document: str = "error.html",
        enable_versioning: bool = True,
        acl: str = "private",
        force_destroy: bool = False,
        tags: dict[str, str] | None = None,
        opts: pulumi.ResourceOptions | None = None,
    ):
        """
        Create the bucket and its configuration resources.

        Args:
            name: Pulumi resource name prefix.
            bucket_name: Physical bucket name. Auto-named from ``name`` when None.
            index_document: Suffix served for directory requests.
            error_document: Object returned for 4xx errors.
            enable_versioning: Versioning status Enabled (True) or Suspended.
            acl: Canned ACL for the bucket.
            force_destroy: Allow destroy to delete a non-empty bucket.
            tags: Tags for the bucket.

        Outputs (set on self, registered for the component):
            bucket_id, bucket_arn, bucket_regional_domain_name, website_endpoint.
        """
        super().__init__(ID, name, None, opts)
        self._resource_name = name

        child_opts = pulumi.ResourceOptions(parent=self)

        self.bucket = aws.s3.BucketV2(
            resource_name=name,
            bucket=bucket_name,
            force_destroy=force_destroy,
            tags=tags,
            opts=child_opts,
        )

        self.website = aws.s3.BucketWebsiteConfigurationV2(
            resource_name=f"{name}-website",
            bucket=self.bucket.id,
            index_document=aws.s3.BucketWebsiteConfigurationV2IndexDocumentArgs(
                suffix=index_document,
            ),
            error_document=aws.s3.BucketWebsiteConfigurationV2ErrorDocumentArgs(
                key=error_document,
            ),
            opts=child_opts,
        )

        self.versioning = aws.s3.BucketVersioningV2(
            resource_name=f"{name}-versioning",
            bucket=self.bucket.id,
            versioning_configuration=aws.s3.BucketVersioningV2VersioningConfigurationArgs(
                status="Enabled" if enable_versioning else "Suspended",
            ),
            opts=child_opts,
        )

        # ACLs are rejected while ownership is BucketOwnerEnforced (the AWS
        # default), so ownership controls must exist before the ACL.
        ownership = aws.s3.BucketOwnershipControls(
            resource_name=f"{name}-ownership",
            bucket=self.bucket.id,
            rule=aws.s3.BucketOwnershipControlsRuleArgs(
                object_ownership="BucketOwnerPreferred",
            ),
            opts=child_opts,
        )

        self.public_access_block = aws.s3.BucketPublicAccessBlock(
            resource_name=f"{name}-block-public",
            bucket=self.bucket.id,
            opts=child_opts,
            **S3_BLOCK_PUBLIC_ACCESS,
        )

        self.acl = aws.s3.BucketAclV2(
            resource_name=f"{name}-acl",
            bucket=self.bucket.id,
            acl=acl,
            opts=pulumi.ResourceOptions(
                parent=self,
                depends_on=[ownership, self.public_access_block],
            ),
        )

        self.bucket_id: pulumi.Output[str] = self.bucket.id
        self.bucket_arn: pulumi.Output[str] = self.bucket.arn
        self.bucket_regional_domain_name: pulumi.Output[str] = (
            self.bucket.bucket_regional_domain_name
        )
        self.website_endpoint: pulumi.Output[str] = self.website.website_endpoint
        self.register_outputs(
            {
                "bucket_id": self.bucket_id,
                "bucket_arn": self.bucket_arn,
                "bucket_regional_domain_name": self.bucket_regional_domain_name,
                "website_endpoint": self.website_endpoint,
            }
        )

    def attach_cdn_policy(
        self,
        distribution_arn: pulumi.Input[str],
    ) -> aws.s3.BucketPolicy:
        """
        Allow a CloudFront distribution (via OAC) to read every object.

        Args:
            distribution_arn: ARN of the distribution serving this bucket.

        Returns:
            The BucketPolicy resource.
        """
        policy = pulumi.Output.all(
            self.bucket.arn,
            pulumi.Output.from_input(distribution_arn),
        ).apply(lambda args: oac_bucket_policy(args[0], args[1]))

        self.policy = aws.s3.BucketPolicy(
            resource_name=f"{self._resource_name}-policy",
            bucket=self.bucket.id,
            policy=policy,
            opts=self.policy_options(),
        )
        return self.policy

    def policy_options(self) -> pulumi.ResourceOptions:
        """Options for the bucket policy: parented here, after the public access block."""
        # A policy update racing the public access block can be rejected.
        return pulumi.ResourceOptions(
            parent=self,
            depends_on=[self.public_access_block],
        )
