"""Exceptions raised by blogstage."""


class ConfigError(ValueError):
    """Invalid site configuration detected before the build starts."""


class ReservedSlugError(ConfigError):
    """A series slug collides with a route reserved by the site."""

    def __init__(self, slug: str, reserved: tuple[str, ...]) -> None:
        self.slug = slug
        self.reserved = reserved
        super().__init__(
            f"Series slug '{slug}' collides with a reserved route. "
            f"Reserved names: {', '.join(reserved)}"
        )
