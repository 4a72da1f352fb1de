class SportmonksError(Exception):
    """Base per gli errori di trasporto/parsing verso SportMonks."""


class UpstreamHTTPError(SportmonksError):
    """Sollevata quando SportMonks risponde con uno status non 2xx."""

    def __init__(self, status_code: int) -> None:
        super().__init__(f"HTTP {status_code}")
        self.status_code = status_code


class InvalidPayloadError(SportmonksError):
    """Sollevata quando il body della risposta non è JSON valido."""


class TransientAPIError(SportmonksError):
    """Sollevata su errori di rete (connessione, DNS, reset)."""
