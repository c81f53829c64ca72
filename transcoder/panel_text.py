from dataclasses import dataclass
from logging import getLogger
from typing import ClassVar, Final, Self

from .code_units import Encoding, allocate
from .converter import utf8_to_viscii
from .viscii import viscii_uppercase

TERMINATOR: Final[int] = 0x00


@dataclass(frozen=True, slots=True)
class PanelText:
    """VISCII text ready for the LED panel driver.

    The panel driver takes the pair ``(data, length)``. ``data`` holds
    ``length`` VISCII bytes followed by one zero byte for the width routines
    that still scan for a terminator; the zero is not part of ``length``.

    Attributes:
        data: ``length`` VISCII bytes plus the trailing zero
        length: Measured number of VISCII bytes
    """

    data: bytes
    length: int

    _logger: ClassVar = getLogger(__name__)

    def __post_init__(self) -> None:
        """Validate the buffer/length pair."""
        if len(self.data) != self.length + 1 or self.data[-1] != TERMINATOR:
            raise ValueError("Panel text must be length bytes plus a zero terminator")

    @classmethod
    def from_utf8(cls, utf8: bytes | bytearray, *, uppercase: bool = False) -> Self:
        """Measure, allocate, write and terminate in one go.

        Args:
            utf8: UTF-8 source text
            uppercase: Fold the result to uppercase in place before returning

        Returns:
            New PanelText instance
        """
        length = utf8_to_viscii(utf8)
        buffer = allocate(Encoding.VISCII, length + 1)
        written = utf8_to_viscii(utf8, buffer)
        if written != length:
            # The buffer was sized from the measure pass, so this means the
            # source changed in between.
            raise ValueError(f"Measured {length} bytes but wrote {written}")

        if uppercase:
            viscii_uppercase(buffer, length)
        buffer[length] = TERMINATOR

        cls._logger.debug("Prepared %d VISCII bytes for the panel", length)
        return cls(bytes(buffer), length)

    @classmethod
    def from_str(cls, text: str, *, uppercase: bool = False) -> Self:
        return cls.from_utf8(text.encode("utf-8", errors="surrogatepass"), uppercase=uppercase)

    @property
    def text(self) -> bytes:
        """The VISCII bytes without the terminator."""
        return self.data[: self.length]

    def __len__(self) -> int:
        return self.length
