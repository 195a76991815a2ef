"""
log.py – Logowanie ruchu do silnika komend (TX / RX)
=====================================================
CommunicationLog gromadzi wszystkie wymiany z transportem z danej sesji
(jednej operacji device_read / device_write albo inicjalizacji kanału)
i umożliwia ich czytelne wyświetlenie.

Przekazywany opcjonalnie do każdej funkcji niskiego poziomu
(transport.write, transport.read, send_start, write_byte_get_ack, ...).
"""


class CommunicationLog:
    """
    Kontener wymian z transportem z możliwością wydruku przepływu.

    Przykład użycia:
        log = CommunicationLog()
        device_write(transport, 0x50, b"\\x00\\x10", options, log=log)
        log.print_flow()
    """

    def __init__(self):
        self._entries: list[dict] = []

    def add(self, step: str, tx: bytes | list[int], rx: bytes | list[int]) -> None:
        """
        Dodaje wpis do logu.

        Parametry
        ----------
        step : str
            Opis kroku (np. "START", "WRITE 0xA0").
        tx : bytes | list[int]
            Bajty komend wysłane do silnika.
        rx : bytes | list[int]
            Bajty odpowiedzi odczytane z silnika.
        """
        self._entries.append({
            "step": step,
            "tx":   list(tx),
            "rx":   list(rx),
        })

    def clear(self) -> None:
        """Czyści wszystkie zapisane wpisy."""
        self._entries.clear()

    def print_flow(self, printer=print, limit: int = 16) -> None:
        """
        Drukuje czytelny dump całej wymiany bajtów.

        Parametry
        ----------
        printer : callable
            Funkcja drukująca (domyślnie print).
        limit : int
            Maksymalna liczba bajtów pokazana w każdym kierunku; dłuższe
            bufory (sekwencje START/STOP, transfery wsadowe) są skracane.
        """
        printer("\n" + "╔" + "═" * 68 + "╗")
        printer("║" + " " * 22 + "RUCH DO SILNIKA MPSSE" + " " * 25 + "║")
        printer("╚" + "═" * 68 + "╝")

        for i, entry in enumerate(self._entries, 1):
            printer(f"\n{'─' * 70}")
            printer(f"  Krok {i}: {entry['step']}")
            printer(f"{'─' * 70}")
            printer(f"  TX (Host→Silnik): {_hexdump(entry['tx'], limit)}")
            printer(f"  RX (Silnik→Host): {_hexdump(entry['rx'], limit)}")

        printer("\n" + "=" * 70 + "\n")

    def to_list(self) -> list[dict]:
        """Zwraca kopię listy wpisów (do własnego przetwarzania)."""
        return [dict(e) for e in self._entries]

    def __len__(self) -> int:
        return len(self._entries)

    def __repr__(self) -> str:
        return f"CommunicationLog({len(self._entries)} entries)"


def _hexdump(data: list[int], limit: int) -> str:
    shown = [f"0x{b:02X}" for b in data[:limit]]
    if len(data) > limit:
        shown.append(f"... (+{len(data) - limit}B)")
    return "[" + ", ".join(shown) + "]"
