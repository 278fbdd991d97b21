"""Domain-specific exceptions."""


class ServiceError(Exception):
    pass


class ProviderUnavailable(ServiceError):
    """The configured provider cannot be built (unknown name, missing key)."""


class ProviderError(ServiceError):
    """A search call failed upstream."""


class ProviderAuthError(ProviderError):
    pass


class ProviderRateLimited(ProviderError):
    pass


class ProviderTimeout(ProviderError):
    pass


class ProviderSafetyBlocked(ProviderError):
    pass
