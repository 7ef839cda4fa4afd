"""app.integrations — External service gateway modules.

All outbound HTTP calls to third-party APIs go through a gateway in this
package, never via bare `requests` calls in services or blueprints.

Every gateway call is:
  - Authenticated (token injected by the gateway)
  - Timed and logged
  - Returned as a GatewayResult; callers decide how to surface failures

Calls are not retried; a failed fetch is reported to the caller as-is.

Current gateways:
  github_gateway.GitHubGateway     — GitHub REST API v3 (commits, PRs, stats)
  identity_gateway.IdentityGateway — identity provider admin API (user creation)
"""
