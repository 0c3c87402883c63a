"""Remote variable service access."""

from site_env.core.client import ApiTokenAuth, EnvelopeClient, VariableServiceClient

__all__ = ["ApiTokenAuth", "EnvelopeClient", "VariableServiceClient"]
