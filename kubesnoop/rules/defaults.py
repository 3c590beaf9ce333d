"""
Default rule corpus, inserted into an empty rule store.

Queries are written against the snapshot document shape, which keeps the
Kubernetes API field names (``hostNetwork``, ``securityContext``, ...).
"""

from kubesnoop.core.models import Severity
from kubesnoop.rules.models import RuleType, SecurityRule

DEFAULT_RULES: list[SecurityRule] = [
    SecurityRule(
        name="privileged-container",
        category="Container Security",
        severity=Severity.HIGH,
        description="Container is running in privileged mode",
        remediation="Remove privileged: true from container security context",
        rule_type=RuleType.POD,
        query="$.containers[*].securityContext.privileged",
        condition="== true",
        tags="cis,nist,privileged",
    ),
    SecurityRule(
        name="root-user-container",
        category="Container Security",
        severity=Severity.MEDIUM,
        description="Container may be running as root user",
        remediation="Set runAsNonRoot: true and runAsUser to non-zero value",
        rule_type=RuleType.POD,
        query="$.containers[*].securityContext.runAsUser",
        condition="== 0 OR null",
        tags="cis,root,user",
    ),
    SecurityRule(
        name="no-resource-limits",
        category="Resource Management",
        severity=Severity.MEDIUM,
        description="Container has no resource limits defined",
        remediation="Set CPU and memory limits to prevent resource exhaustion",
        rule_type=RuleType.POD,
        query="$.containers[*].resources.limits",
        condition="null OR empty",
        tags="resources,limits",
    ),
    SecurityRule(
        name="latest-image-tag",
        category="Image Security",
        severity=Severity.LOW,
        description="Container uses 'latest' tag or no tag specified",
        remediation="Use specific image tags for reproducible deployments",
        rule_type=RuleType.POD,
        query="$.containers[*].image",
        condition="endsWith ':latest' OR NOT contains ':'",
        tags="image,tags,reproducibility",
    ),
    SecurityRule(
        name="host-network-usage",
        category="Host Security",
        severity=Severity.HIGH,
        description="Pod uses host network namespace",
        remediation="Avoid hostNetwork unless absolutely necessary",
        rule_type=RuleType.POD,
        query="$.hostNetwork",
        condition="== true",
        tags="host,network,isolation",
    ),
    SecurityRule(
        name="nodeport-service",
        category="Network Security",
        severity=Severity.MEDIUM,
        description="Service uses NodePort type which exposes ports on all nodes",
        remediation="Consider using ClusterIP or LoadBalancer instead",
        rule_type=RuleType.SERVICE,
        query="$.type",
        condition="== 'NodePort'",
        tags="network,exposure",
    ),
    SecurityRule(
        name="wildcard-rbac-permissions",
        category="RBAC",
        severity=Severity.HIGH,
        description="Role has wildcard permissions (*/*)",
        remediation="Use least-privilege principle and specify exact resources and verbs",
        rule_type=RuleType.RBAC,
        query="$.rules[*].resources[*]",
        condition="== '*'",
        tags="rbac,wildcard,permissions",
    ),
    SecurityRule(
        name="default-service-account",
        category="RBAC",
        severity=Severity.LOW,
        description="Pod uses default service account",
        remediation="Create and use dedicated service accounts for applications",
        rule_type=RuleType.POD,
        query="$.serviceAccount",
        condition="== 'default' OR == '' OR null",
        tags="rbac,service-account",
    ),
    SecurityRule(
        name="no-network-policies",
        category="Network Security",
        severity=Severity.MEDIUM,
        description="Namespace has no network policies - all traffic allowed by default",
        remediation="Implement network policies to restrict pod-to-pod communication",
        rule_type=RuleType.NAMESPACE,
        query="$.networkPolicies",
        condition="count == 0",
        tags="network,policies,segmentation",
    ),
]
