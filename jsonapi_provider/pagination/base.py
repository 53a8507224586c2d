"""Page composer base class for JSON:API ``page[...]`` parameters."""

from typing import Any


class PageComposer:
    """Define how a page descriptor becomes ``page[...]`` query pairs."""

    def compose_page(self, page: Any) -> list[tuple[str, str]]:
        """Return ordered (key, value) pairs; keys are wrapped in ``page[...]`` later."""
        raise NotImplementedError
