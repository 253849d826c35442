from dataclasses import dataclass

from portal_linker.types import PortalName


@dataclass(frozen=True)
class DesiredLink:
    """Directed requirement that ``source`` resolves to ``destination``.

    Attributes:
        source: Portal an entity enters.
        destination: Portal the entity must come out of. Always in the other
            dimension.
    """

    source: PortalName
    destination: PortalName

    def __str__(self) -> str:
        return f"{self.source} -> {self.destination}"
