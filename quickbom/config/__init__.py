from quickbom.config.settings import settings, Settings  # noqa: F401
