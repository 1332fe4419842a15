class GenerationConfigError(ValueError):
    """Base error for generator configuration (profiles, prop registries)."""


class ProfileError(GenerationConfigError):
    """Raised when a generation profile cannot be built from the given data."""


class RegistryError(GenerationConfigError):
    """Raised when a prop registry source is malformed."""


__all__ = ["GenerationConfigError", "ProfileError", "RegistryError"]
